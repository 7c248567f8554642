"""
Deck power scorer.

Estimates a deck's power on a 1-10 scale from six subscores, and reports
curve, color and tag distributions alongside.

INVARIANT: Every subscore and the overall power lie in [1, 10].

Role tags (ramp, draw, removal, tutors, ...) are only counted on
non-land cards. Lands are judged separately by the mana subscore.
"""

from collections import Counter

from deckforge.models.analysis import DeckAnalysis, Subscores
from deckforge.models.build import BuildContext
from deckforge.models.card import Card
from deckforge.models.format_rules import get_format_rules
from deckforge.services.color_identity import COLOR_ORDER
from deckforge.services.manabase import classify_land_cycle, land_colors
from deckforge.services.tagger import tag_card

POWER_WEIGHTS: dict[str, float] = {
    "speed": 0.20,
    "interaction": 0.15,
    "tutors": 0.20,
    "wincon": 0.20,
    "mana": 0.15,
    "consistency": 0.10,
}

MIN_SCORE = 1.0
MAX_SCORE = 10.0

# Deck size assumed when the format is unknown
DEFAULT_DECK_SIZE = 60

CURVE_BANDS = ("0", "1", "2", "3", "4", "5", "6", "7+")

TOP_TAG_COUNT = 10


def _clamp(value: float) -> float:
    return max(MIN_SCORE, min(MAX_SCORE, value))


def _tags(card: Card) -> frozenset[str]:
    return card.tags or tag_card(card)


class _RoleCounts:
    """Tag counts over the non-land part of a deck."""

    def __init__(self, spells: list[Card]):
        self.spells = spells
        self._counts: Counter[str] = Counter()
        for card in spells:
            self._counts.update(_tags(card))

    def __getitem__(self, tag: str) -> int:
        return self._counts[tag]


def score_speed(roles: _RoleCounts) -> float:
    score = 3.0
    score += roles["fast-mana"] * 1.5

    spells = roles.spells
    low_curve_ratio = sum(1 for c in spells if c.mana_value <= 2) / max(1, len(spells))
    if low_curve_ratio > 0.4:
        score += 2
    elif low_curve_ratio > 0.3:
        score += 1

    score += min(roles["ramp"] * 0.3, 1.5)

    hasty = sum(
        1 for c in spells if c.is_creature and ("haste" in _tags(c) or c.mana_value <= 1)
    )
    score += hasty * 0.2
    return _clamp(score)


def score_interaction(roles: _RoleCounts) -> float:
    spot = roles["removal-spot"]
    sweepers = roles["removal-sweeper"]
    counters = roles["counterspell"]
    protection = roles["protection"]
    cheap = sum(
        1
        for c in roles.spells
        if c.mana_value <= 2 and ("removal-spot" in _tags(c) or "counterspell" in _tags(c))
    )

    score = 1.0
    score += spot * 0.3 + sweepers * 0.5 + counters * 0.4 + protection * 0.2
    score += cheap * 0.3
    interaction_types = sum(1 for count in (spot, sweepers, counters, protection) if count > 0)
    score += interaction_types * 0.5
    return _clamp(score)


def score_tutors(roles: _RoleCounts) -> float:
    score = 1.0
    score += roles["tutor-broad"] * 1.5
    score += roles["tutor-narrow"] * 0.5
    score += roles["draw"] * 0.1
    return _clamp(score)


def score_wincons(roles: _RoleCounts) -> float:
    wincons = roles["wincon"]
    score = 2.0 + wincons * 1.0 + roles["combo-piece"] * 0.8
    if wincons >= 3:
        score += 1
    if wincons >= 5:
        score += 1
    return _clamp(score)


def score_mana(deck: list[Card], spells: list[Card], format_size: int) -> float:
    """
    Land count and fixing quality.

    The optimal land ratio is 0.37 for 100-card decks and 0.4 otherwise.
    Fixing requirements scale with the number of colors the spells use.
    """
    lands = [c for c in deck if c.is_land]
    optimal_ratio = 0.37 if format_size >= 100 else 0.4
    land_ratio = len(lands) / len(deck) if deck else 0.0

    score = 5.0 - abs(land_ratio - optimal_ratio) * 20

    spell_colors = {color for c in spells for color in c.color_identity}
    color_count = len(spell_colors)
    non_basics = [c for c in lands if not c.is_basic_land]

    if color_count <= 1 or len(non_basics) >= (color_count - 1) * 4:
        score += 1.5

    if color_count >= 2:
        untapped_duals = sum(
            1
            for c in non_basics
            if len(land_colors(c)) >= 2 and classify_land_cycle(c) not in ("tapland", "triome")
        )
        if untapped_duals >= (color_count - 1) * 2:
            score += 1

    utility_lands = sum(1 for c in non_basics if not land_colors(c))
    if format_size >= 100 and utility_lands >= 2:
        score += 0.5

    return _clamp(score)


def score_consistency(deck: list[Card], roles: _RoleCounts, format_size: int) -> float:
    score = 5.0

    excess = len(deck) - format_size
    if excess > 0:
        score -= min(3.0, excess * 0.1)

    tutors = roles["tutor-broad"] + roles["tutor-narrow"]
    score += min(2.0, tutors * 0.3 + roles["draw"] * 0.1)

    for tag in ("ramp", "draw", "removal-spot"):
        count = roles[tag]
        if count >= 4:
            score += 0.5
        elif count <= 1:
            score -= 0.5

    return _clamp(score)


def analyze_curve(deck: list[Card]) -> dict[str, int]:
    """Mana value histogram of non-land cards, bands "0".."6" and "7+"."""
    curve = dict.fromkeys(CURVE_BANDS, 0)
    for card in deck:
        if card.is_land:
            continue
        mana_value = int(card.mana_value)
        curve[str(mana_value) if mana_value <= 6 else "7+"] += 1
    return curve


def analyze_color_distribution(deck: list[Card]) -> dict[str, int]:
    """Cards per color-identity color; colorless cards count under "C"."""
    distribution = dict.fromkeys((*COLOR_ORDER, "C"), 0)
    for card in deck:
        if not card.color_identity:
            distribution["C"] += 1
            continue
        for color in card.color_identity:
            if color in distribution:
                distribution[color] += 1
    return distribution


def analyze_top_tags(deck: list[Card], limit: int = TOP_TAG_COUNT) -> dict[str, int]:
    """Most frequent tags, ties broken alphabetically."""
    counts: Counter[str] = Counter()
    for card in deck:
        counts.update(_tags(card))
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return dict(ranked[:limit])


def score_deck(deck: list[Card], context: BuildContext) -> DeckAnalysis:
    """
    Score a deck.

    Args:
        deck: Cards in the deck, lands included
        context: Build context; its format sets deck-size norms

    Returns:
        DeckAnalysis with power, subscores and distributions
    """
    rules = get_format_rules(context.format)
    format_size = rules.deck_size_max if rules is not None else DEFAULT_DECK_SIZE

    spells = [c for c in deck if not c.is_land]
    roles = _RoleCounts(spells)

    subscores = Subscores(
        speed=round(score_speed(roles), 2),
        interaction=round(score_interaction(roles), 2),
        tutors=round(score_tutors(roles), 2),
        wincon=round(score_wincons(roles), 2),
        mana=round(score_mana(deck, spells, format_size), 2),
        consistency=round(score_consistency(deck, roles, format_size), 2),
    )

    weighted = sum(
        value * POWER_WEIGHTS[name] for name, value in subscores.as_dict().items()
    )

    return DeckAnalysis(
        power=round(_clamp(weighted), 2),
        subscores=subscores,
        curve=analyze_curve(deck),
        color_distribution=analyze_color_distribution(deck),
        top_tags=analyze_top_tags(deck),
    )
