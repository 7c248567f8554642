"""
Commander advisor.

Reads a commander's text and suggests what deck it wants: a single
archetype from a fixed decision list, tag multipliers, and quota ranges.
Also scores how well a candidate card supports a chosen commander.
"""

from dataclasses import dataclass, field

from deckforge.models.archetype import Quota
from deckforge.models.card import Card

# Staples stay valuable whatever the commander does
STAPLE_MULTIPLIER_FLOORS: dict[str, float] = {
    "draw": 1.3,
    "ramp": 1.3,
    "removal-spot": 1.2,
}

KEY_TAG_MULTIPLIER = 1.5
AVOID_TAG_MULTIPLIER = 0.5


@dataclass(frozen=True)
class ArchetypeSuggestion:
    """Single-winner archetype classification for a commander."""

    primary: str
    secondary: list[str] = field(default_factory=list)
    key_tags: list[str] = field(default_factory=list)
    avoid_tags: list[str] = field(default_factory=list)


def detect_archetype(commander: Card) -> ArchetypeSuggestion:
    """
    Classify a commander into one archetype.

    Checks run in a fixed order and the first match wins:
    counters, tokens, aristocrats, spellslinger, control, voltron,
    reanimator, then midrange-value as the fallback.
    """
    text = commander.oracle_text.lower()
    type_line = commander.type_line.lower()

    if "proliferate" in text or "+1/+1 counter" in text:
        return ArchetypeSuggestion(
            primary="commander-counters",
            secondary=["commander-tokens"],
            key_tags=["counters", "proliferate", "planeswalker", "draw", "ramp"],
            avoid_tags=["storm", "fast-mana"],
        )

    if "create" in text and "token" in text:
        return ArchetypeSuggestion(
            primary="commander-tokens",
            secondary=["commander-aristocrats"],
            key_tags=["tokens", "aristocrats", "sac-outlet", "draw", "ramp"],
            avoid_tags=["storm", "combo-piece"],
        )

    if "sacrifice" in text or "dies" in text:
        return ArchetypeSuggestion(
            primary="commander-aristocrats",
            secondary=["commander-tokens", "commander-reanimator"],
            key_tags=["aristocrats", "sac-outlet", "tokens", "recursion", "draw"],
            avoid_tags=["voltron", "equipment"],
        )

    if any(word in text for word in ("instant", "sorcery", "spell", "cast")):
        return ArchetypeSuggestion(
            primary="commander-spellslinger",
            secondary=["commander-control"],
            key_tags=["instant", "sorcery", "draw", "counterspell", "spellslinger"],
            avoid_tags=["creature", "tribal"],
        )

    if (
        "counter target" in text
        or "return" in text
        or ("U" in commander.color_identity and "draw" in text)
    ):
        return ArchetypeSuggestion(
            primary="commander-control",
            secondary=["commander-spellslinger"],
            key_tags=["counterspell", "draw", "removal-spot", "removal-sweeper", "protection"],
            avoid_tags=["aggro", "tokens"],
        )

    if any(word in text for word in ("equip", "aura", "attached")) or "knight" in type_line:
        return ArchetypeSuggestion(
            primary="commander-voltron",
            key_tags=["equipment", "auras", "protection", "tutor-narrow", "ramp"],
            avoid_tags=["tokens", "aristocrats"],
        )

    if "graveyard" in text:
        return ArchetypeSuggestion(
            primary="commander-reanimator",
            secondary=["commander-aristocrats"],
            key_tags=["reanimator", "recursion", "self-mill", "ramp", "tutor-narrow"],
            avoid_tags=["tokens", "voltron"],
        )

    return ArchetypeSuggestion(
        primary="midrange-value",
        key_tags=["draw", "ramp", "removal-spot", "creature"],
    )


def get_priority_multipliers(commander: Card) -> dict[str, float]:
    """
    Tag -> multiplier for a commander.

    Key tags get 1.5, avoid tags 0.5; draw, ramp and spot removal are
    floored so staples never drop out.
    """
    suggestion = detect_archetype(commander)
    multipliers: dict[str, float] = {}

    for tag in suggestion.key_tags:
        multipliers[tag] = KEY_TAG_MULTIPLIER
    for tag in suggestion.avoid_tags:
        multipliers[tag] = AVOID_TAG_MULTIPLIER

    for tag, floor in STAPLE_MULTIPLIER_FLOORS.items():
        multipliers[tag] = max(multipliers.get(tag, 1.0), floor)

    return multipliers


def get_recommended_quotas(commander: Card, power_level: float) -> dict[str, Quota]:
    """
    Commander-format quota ranges adjusted for power level.

    High power (>= 8) adds tutors and fast mana and asks for more draw.
    Low power (<= 4) relaxes draw and ramp minimums.
    """
    quotas: dict[str, tuple[int, int]] = {
        "ramp": (10, 14),
        "draw": (10, 15),
        "removal-spot": (8, 12),
        "removal-sweeper": (2, 4),
        "protection": (3, 6),
        "wincon": (3, 5),
    }

    if power_level >= 8:
        quotas["tutor-broad"] = (4, 8)
        quotas["fast-mana"] = (3, 6)
        quotas["draw"] = (12, quotas["draw"][1])
    elif power_level <= 4:
        quotas["draw"] = (8, quotas["draw"][1])
        quotas["ramp"] = (8, quotas["ramp"][1])

    return {tag: Quota(min=low, max=high) for tag, (low, high) in quotas.items()}


# (commander text triggers, supporting card tags, bonus)
_MECHANIC_SYNERGIES: tuple[tuple[tuple[str, ...], frozenset[str], float], ...] = (
    (("counter",), frozenset({"counters", "proliferate"}), 3.0),
    (("proliferate",), frozenset({"counters", "planeswalker"}), 3.0),
    (("sacrifice",), frozenset({"sac-outlet", "aristocrats", "tokens"}), 3.0),
    (("token",), frozenset({"tokens", "aristocrats"}), 3.0),
    (("spell", "instant", "sorcery"), frozenset({"spellslinger", "instant", "sorcery"}), 2.0),
    (("enters the battlefield", "enters,"), frozenset({"etb", "blink"}), 2.0),
    (("artifact",), frozenset({"artifact", "artifacts-matter"}), 2.0),
    (("enchantment",), frozenset({"enchantment", "enchantments-matter"}), 2.0),
)


def score_commander_synergy(card: Card, commander: Card) -> float:
    """
    How well a card supports a commander.

    Half a point per shared tag, plus a bonus for each commander mechanic
    the card feeds.
    """
    text = commander.oracle_text.lower()
    synergy = len(card.tags & commander.tags) * 0.5

    for triggers, supporting_tags, bonus in _MECHANIC_SYNERGIES:
        if any(trigger in text for trigger in triggers) and card.tags & supporting_tags:
            synergy += bonus

    return synergy
