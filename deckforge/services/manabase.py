"""
Manabase builder.

Sizes a land base for a format and color count, then fills it in a fixed
order: commander utility lands, dual/tri lands by cycle priority, and
finally basics split proportionally to the deck's color pips.

INVARIANT: A non-basic land is never selected twice (by name). Basic
lands repeat as needed.
"""

import logging
import re
from dataclasses import dataclass
from itertools import combinations

from deckforge.models.build import BuildContext
from deckforge.models.card import Card
from deckforge.models.format_rules import FormatRules
from deckforge.services.color_identity import sort_colors

logger = logging.getLogger(__name__)

BASIC_LAND_TYPES: dict[str, str] = {
    "W": "Plains",
    "U": "Island",
    "B": "Swamp",
    "R": "Mountain",
    "G": "Forest",
}

_BASIC_TYPE_PATTERNS: dict[str, re.Pattern[str]] = {
    color: re.compile(rf"\b{name}\b", re.IGNORECASE) for color, name in BASIC_LAND_TYPES.items()
}

COMMANDER_LAND_COUNT = 37
CONSTRUCTED_LAND_BASE = 24
CONSTRUCTED_LAND_MIN = 22
CONSTRUCTED_LAND_MAX = 26
COMMANDER_UTILITY_SLOTS = 2

# Percent of lands that are basics, by color count
BASIC_PERCENT_MONO = 80
BASIC_PERCENT_TWO_COLOR = 40
BASIC_PERCENT_MULTICOLOR = 20

# Checked in order; the first ones found in the pool are used
UTILITY_LANDS = (
    "Command Tower",
    "Bojuka Bog",
    "Reliquary Tower",
    "Strip Mine",
    "Wasteland",
    "Nykthos, Shrine to Nyx",
    "Cavern of Souls",
)


@dataclass(frozen=True, slots=True)
class LandCycle:
    """A family of lands that share a template and format legality."""

    name: str
    formats: frozenset[str]
    colors: int
    etb_tapped: bool
    priority: int


_ETERNAL = frozenset({"modern", "legacy", "vintage", "commander"})
_ROTATING = frozenset({"standard", "pioneer", "modern", "legacy", "vintage", "commander", "brawl"})
_EVERYWHERE = _ROTATING | {"pauper"}

# Highest priority first
LAND_CYCLES: tuple[LandCycle, ...] = (
    LandCycle("fetch", _ETERNAL, colors=2, etb_tapped=False, priority=10),
    LandCycle("shock", _ROTATING, colors=2, etb_tapped=False, priority=9),
    LandCycle("triome", _ROTATING, colors=3, etb_tapped=True, priority=8),
    LandCycle("check", _ROTATING, colors=2, etb_tapped=False, priority=7),
    LandCycle("fast", _ROTATING - {"standard", "brawl"}, colors=2, etb_tapped=False, priority=7),
    LandCycle("pain", _ROTATING, colors=2, etb_tapped=False, priority=6),
    LandCycle("pathway", _ROTATING, colors=2, etb_tapped=False, priority=6),
    LandCycle("tapland", _EVERYWHERE, colors=2, etb_tapped=True, priority=3),
    LandCycle("dual", _EVERYWHERE, colors=2, etb_tapped=False, priority=2),
    LandCycle("basic", _EVERYWHERE, colors=1, etb_tapped=False, priority=1),
)


@dataclass(frozen=True, slots=True)
class ManabaseRequirements:
    """How many lands of each kind a deck wants."""

    colors: tuple[str, ...]
    total_lands: int
    basics: int
    non_basics: int
    utility: int


def land_colors(card: Card) -> tuple[str, ...]:
    """
    Colors a land can supply, in WUBRG order.

    Uses color identity when present. Fetch lands (and basics from sources
    that leave identity empty) get their colors from the basic land types
    they name.
    """
    if card.color_identity:
        return tuple(sort_colors(card.color_identity))
    text = f"{card.type_line} {card.oracle_text}"
    return tuple(color for color, pattern in _BASIC_TYPE_PATTERNS.items() if pattern.search(text))


def classify_land_cycle(card: Card) -> str | None:
    """
    Name the cycle a land belongs to, or None for lands outside the catalog.

    Classification reads the rules text, so reprints and new members of a
    cycle are recognised without a name list.
    """
    if not card.is_land:
        return None
    if card.is_basic_land:
        return "basic"

    text = card.oracle_text.lower()
    colors = land_colors(card)

    if "search your library for" in text and "pay 1 life" in text:
        return "fetch" if len(colors) == 2 else None
    if len(colors) == 3:
        return "triome"
    if len(colors) != 2:
        return None
    if "pay 2 life" in text:
        return "shock"
    if "unless you control two or fewer other lands" in text:
        return "fast"
    if "unless you control a" in text:
        return "check"
    if "deals 1 damage to you" in text:
        return "pain"
    if " // " in card.name:
        return "pathway"
    if "enters tapped" in text or "enters the battlefield tapped" in text:
        return "tapland"
    return "dual"


def resolve_colors(
    context: BuildContext,
    color_requirements: dict[str, int],
    identity: list[str] | tuple[str, ...] | None = None,
    enforce_identity: bool = False,
) -> tuple[str, ...]:
    """
    Decide which colors the manabase supports.

    Explicit context colors win (in caller order), then the active color
    identity, then every color with a positive pip weight.

    With ``enforce_identity`` and a known identity, explicit colors outside
    the identity are dropped; if none remain the identity itself is used.
    """
    active_identity = identity if identity is not None else context.identity
    enforced = active_identity if enforce_identity else None

    if context.colors:
        colors = tuple(context.colors)
        if enforced is not None:
            dropped = [c for c in colors if c not in enforced]
            if dropped:
                logger.debug("Dropping colors outside identity: %s", "".join(dropped))
            colors = tuple(c for c in colors if c in enforced)
        if colors:
            return colors

    if enforced is not None:
        return tuple(sort_colors(enforced))
    if active_identity:
        return tuple(sort_colors(active_identity))
    return tuple(sort_colors([c for c, weight in color_requirements.items() if weight > 0]))


def calculate_requirements(colors: tuple[str, ...], rules: FormatRules) -> ManabaseRequirements:
    """
    Size the manabase.

    Commander-style formats always play 37 lands and reserve two utility
    slots. Other formats play 24 plus one per color, clamped to 22..26.
    The basic share is 80% for mono-color, 40% for two colors and 20%
    for three or more, rounded down.
    """
    color_count = len(colors)

    if rules.has_commander:
        total = COMMANDER_LAND_COUNT
    else:
        total = CONSTRUCTED_LAND_BASE + color_count
        total = max(CONSTRUCTED_LAND_MIN, min(CONSTRUCTED_LAND_MAX, total))

    if color_count <= 1:
        percent = BASIC_PERCENT_MONO
    elif color_count == 2:
        percent = BASIC_PERCENT_TWO_COLOR
    else:
        percent = BASIC_PERCENT_MULTICOLOR

    basics = total * percent // 100
    return ManabaseRequirements(
        colors=colors,
        total_lands=total,
        basics=basics,
        non_basics=total - basics,
        utility=COMMANDER_UTILITY_SLOTS if rules.has_commander else 0,
    )


def get_available_cycles(format_id: str) -> list[LandCycle]:
    """Cycles legal in a format, highest priority first."""
    cycles = [cycle for cycle in LAND_CYCLES if format_id in cycle.formats]
    return sorted(cycles, key=lambda cycle: -cycle.priority)


def build_manabase(
    land_pool: list[Card],
    context: BuildContext,
    rules: FormatRules,
    color_requirements: dict[str, int],
    identity: list[str] | tuple[str, ...] | None = None,
) -> list[Card]:
    """
    Select lands for a deck.

    Args:
        land_pool: Legal land cards to choose from
        context: Build context (format and explicit colors)
        rules: Rules for the context's format
        color_requirements: Color -> pip weight from the non-land picks
        identity: Active color identity, e.g. the chosen commander's

    Returns:
        Selected lands; may be shorter than the target when the pool is thin
    """
    colors = resolve_colors(
        context, color_requirements, identity, enforce_identity=rules.color_identity_enforced
    )
    requirements = calculate_requirements(colors, rules)

    manabase: list[Card] = []
    selected_names: set[str] = set()
    remaining = requirements.total_lands

    if requirements.utility:
        utility = _select_utility_lands(land_pool, requirements.utility)
        manabase.extend(utility)
        selected_names.update(card.name for card in utility)
        remaining -= len(utility)

    non_basic_slots = max(0, min(remaining - requirements.basics, requirements.non_basics))
    non_basics = _select_non_basic_lands(
        land_pool, colors, context.format, non_basic_slots, selected_names
    )
    manabase.extend(non_basics)
    remaining -= len(non_basics)

    basics = _select_basic_lands(land_pool, colors, color_requirements, remaining)
    manabase.extend(basics)

    logger.debug(
        "Manabase for %s: %d utility, %d non-basic, %d basic (target %d)",
        "".join(colors) or "colorless",
        len(manabase) - len(non_basics) - len(basics),
        len(non_basics),
        len(basics),
        requirements.total_lands,
    )
    return manabase


def _select_utility_lands(land_pool: list[Card], count: int) -> list[Card]:
    by_name = {}
    for card in land_pool:
        by_name.setdefault(card.name, card)

    selected: list[Card] = []
    for name in UTILITY_LANDS:
        if len(selected) >= count:
            break
        card = by_name.get(name)
        if card is not None:
            selected.append(card)
    return selected


def _select_non_basic_lands(
    land_pool: list[Card],
    colors: tuple[str, ...],
    format_id: str,
    slots: int,
    selected_names: set[str],
) -> list[Card]:
    """Walk cycles by priority, taking one land per color pair (or triple)."""
    if slots <= 0 or len(colors) < 2:
        return []

    # (card, cycle, colors) for every classifiable non-basic land
    candidates: list[tuple[Card, str, frozenset[str]]] = []
    for card in land_pool:
        if not card.is_land or card.is_basic_land:
            continue
        cycle_name = classify_land_cycle(card)
        if cycle_name is not None:
            candidates.append((card, cycle_name, frozenset(land_colors(card))))

    pairs = [frozenset(pair) for pair in combinations(colors, 2)]
    triples = [frozenset(triple) for triple in combinations(colors, 3)]

    selected: list[Card] = []
    for cycle in get_available_cycles(format_id):
        if len(selected) >= slots:
            break
        if cycle.colors == 2:
            combos = pairs
        elif cycle.colors == 3 and len(colors) >= 3:
            combos = triples
        else:
            continue

        for combo in combos:
            if len(selected) >= slots:
                break
            for card, cycle_name, supplied in candidates:
                if cycle_name != cycle.name or supplied != combo:
                    continue
                if card.name not in selected_names:
                    selected.append(card)
                    selected_names.add(card.name)
                    break

    return selected


def _find_basic(land_pool: list[Card], color: str) -> Card | None:
    pattern = _BASIC_TYPE_PATTERNS[color]
    for card in land_pool:
        if card.is_basic_land and pattern.search(card.type_line):
            return card
    return None


def _select_basic_lands(
    land_pool: list[Card],
    colors: tuple[str, ...],
    color_requirements: dict[str, int],
    slots: int,
) -> list[Card]:
    """
    Fill the remaining slots with basics.

    Slots are split by pip weight, rounded down, with leftovers going one
    each to the earliest colors. Without any weight the split is even.
    """
    if slots <= 0:
        return []

    if not colors:
        wastes = next((c for c in land_pool if c.is_basic_land and c.name == "Wastes"), None)
        return [wastes] * slots if wastes is not None else []

    weights = {color: max(0, color_requirements.get(color, 0)) for color in colors}
    total_weight = sum(weights.values())

    if total_weight > 0:
        counts = {color: slots * weights[color] // total_weight for color in colors}
    else:
        counts = dict.fromkeys(colors, slots // len(colors))

    leftover = slots - sum(counts.values())
    for i in range(leftover):
        counts[colors[i % len(colors)]] += 1

    basics: list[Card] = []
    for color in colors:
        basic = _find_basic(land_pool, color)
        if basic is None:
            logger.debug("No basic land for %s in pool; %d slots unfilled", color, counts[color])
            continue
        basics.extend([basic] * counts[color])
    return basics


def calculate_color_hit_probability(
    manabase: list[Card],
    required_colors: list[str],
    turn: int,
) -> float:
    """
    Rough chance of having a source of every required color by ``turn``.

    This is a deliberately simplified approximation, not an exact
    hypergeometric probability. Each color's miss chance is estimated as
    cards_seen / non_sources (capped to [0, 1]), or certain when the cards
    seen reach the manabase size, and the per-color hit chances are
    multiplied together.

    Args:
        manabase: Lands in the deck
        required_colors: Colors that must be available
        turn: Turn number (1 = first turn, on the play)

    Returns:
        Approximate probability in [0, 1]
    """
    total_lands = len(manabase)
    cards_seen = 7 + turn - 1

    probability = 1.0
    for color in required_colors:
        sources = sum(1 for land in manabase if color in land_colors(land))
        miss = _approximate_miss_chance(total_lands - sources, cards_seen, total_lands)
        probability *= 1 - miss
    return probability


def _approximate_miss_chance(population: int, sample: int, successes: int) -> float:
    if sample >= successes:
        return 1.0
    if population <= 0:
        return 0.0
    return max(0.0, min(1.0, sample / population))
