"""
Deck quality heuristics.

A standalone post-hoc check for any deck list, built or hand-assembled.
Starts from 50 and adds or subtracts points for ramp, draw, interaction,
creature count, curve, card price and commander synergy.

Role counts and the average mana value are taken over non-land cards;
basic lands carry "Add {X}" text and would otherwise count as ramp.
"""

import re
from dataclasses import dataclass, field

from deckforge.models.card import Card
from deckforge.services.tagger import ensure_tagged

BASE_SCORE = 50
MIN_QUALITY = 0
MAX_QUALITY = 100

# Cards cheaper than this are treated as bulk
BULK_PRICE_USD = 0.25
MAX_BULK_CARDS = 20

# Commons cheaper than this are checked for filler text
JUNK_PRICE_USD = 0.10
LOW_QUALITY_PENALTY = 5

_WEAK_EQUIPMENT = re.compile(r"^equipped creature gets \+[01]/\+[01]\.?$", re.IGNORECASE)
_BARE_CANTRIP = re.compile(r"^(tap: draw a card|sacrifice.*: draw a card)\.?$", re.IGNORECASE)
_LEADING_NUMBER = re.compile(r"-?\d+")

# Commander text trigger -> deck tags that support it; first match wins
COMMANDER_SYNERGY_TAGS: tuple[tuple[str, frozenset[str]], ...] = (
    ("counter", frozenset({"counters", "proliferate"})),
    ("token", frozenset({"tokens"})),
    ("sacrifice", frozenset({"sac-outlet", "aristocrats"})),
)


@dataclass(frozen=True, slots=True)
class QualityReport:
    """Outcome of a quality check."""

    score: int
    issues: list[str] = field(default_factory=list)
    strengths: list[str] = field(default_factory=list)


def _count(cards: list[Card], tags: frozenset[str]) -> int:
    return sum(1 for card in cards if card.tags & tags)


def validate_deck_quality(deck: list[Card], commander: Card | None = None) -> QualityReport:
    """
    Score a deck's construction quality on a 0-100 scale.

    Args:
        deck: Deck cards, lands included, commander excluded
        commander: Deck commander; enables the synergy check

    Returns:
        QualityReport with the score and human-readable findings
    """
    if not deck:
        return QualityReport(score=MIN_QUALITY, issues=["Deck is empty"])

    for card in deck:
        ensure_tagged(card)

    spells = [card for card in deck if not card.is_land]
    issues: list[str] = []
    strengths: list[str] = []
    score = BASE_SCORE

    ramp = _count(spells, frozenset({"ramp"}))
    if ramp < 8:
        issues.append(f"Too little ramp ({ramp} cards) - aim for 10-14")
        score -= 10
    elif 10 <= ramp <= 14:
        strengths.append(f"Good ramp package ({ramp} cards)")
        score += 10

    draw = _count(spells, frozenset({"draw"}))
    if draw < 8:
        issues.append(f"Insufficient card draw ({draw} cards) - aim for 10-15")
        score -= 10
    elif draw >= 10:
        strengths.append(f"Solid card draw ({draw} cards)")
        score += 10

    removal = _count(spells, frozenset({"removal-spot", "removal-sweeper"}))
    if removal < 8:
        issues.append(f"Not enough interaction ({removal} cards) - aim for 10-15")
        score -= 10
    elif removal >= 10:
        strengths.append(f"Good interaction suite ({removal} cards)")
        score += 10

    creatures = sum(1 for card in deck if card.is_creature and not card.is_legendary)
    if creatures < 15:
        issues.append(f"Low creature count ({creatures}) - most decks need 20-35")
        score -= 5
    elif 20 <= creatures <= 35:
        strengths.append(f"Balanced creature count ({creatures})")
        score += 5

    if spells:
        average_mv = sum(card.mana_value for card in spells) / len(spells)
        if average_mv < 2.5:
            issues.append(f"Mana curve too low ({average_mv:.2f}) - lacks impactful spells")
            score -= 10
        elif 2.8 <= average_mv <= 3.5:
            strengths.append(f"Good mana curve ({average_mv:.2f} avg mana value)")
            score += 10
        elif average_mv > 4.5:
            issues.append(f"Mana curve too high ({average_mv:.2f}) - may be too slow")
            score -= 5

    bulk = sum(1 for card in deck if (card.price_usd or 0.0) < BULK_PRICE_USD)
    if bulk > MAX_BULK_CARDS:
        issues.append(f"Too many bulk cards ({bulk}) - lacks impactful pieces")
        score -= 15

    low_quality = sum(1 for card in deck if not meets_quality_threshold(card))
    if low_quality:
        issues.append(f"Low-quality cards ({low_quality}) - replace with stronger options")
        score -= LOW_QUALITY_PENALTY

    if commander is not None:
        synergy = commander_synergy_count(deck, commander)
        if synergy < 10:
            issues.append(f"Weak commander synergy - only {synergy} synergistic cards")
            score -= 10
        elif synergy >= 15:
            strengths.append(f"Strong commander synergy ({synergy} cards)")
            score += 15

    return QualityReport(
        score=max(MIN_QUALITY, min(MAX_QUALITY, score)),
        issues=issues,
        strengths=strengths,
    )


def commander_synergy_count(deck: list[Card], commander: Card) -> int:
    """Cards supporting the first mechanic the commander's text names, or 0."""
    text = commander.oracle_text.lower()
    for trigger, tags in COMMANDER_SYNERGY_TAGS:
        if trigger in text:
            return sum(1 for card in deck if ensure_tagged(card) & tags)
    return 0


def _stat(value: str | None) -> int | None:
    """Leading integer of a printed power/toughness; None for "*" and the like."""
    if not value:
        return 0
    match = _LEADING_NUMBER.match(value)
    return int(match.group()) if match else None


def meets_quality_threshold(card: Card) -> bool:
    """
    False for obvious filler.

    Rejects vanilla creatures above three mana whose power plus toughness
    is below twice their mana value, and cheap commons that are only a
    +0/+0 or +1/+1 equipment or a bare "draw a card" cantrip. Lands and
    creatures with variable stats always pass.
    """
    if card.is_land:
        return True

    text = card.oracle_text.strip()
    price = card.price_usd or 0.0
    if price < JUNK_PRICE_USD and card.rarity == "common":
        if "equipment" in card.type_line.lower() and _WEAK_EQUIPMENT.match(text):
            return False
        if _BARE_CANTRIP.match(text):
            return False

    if card.is_creature and not text and card.mana_value > 3:
        power, toughness = _stat(card.power), _stat(card.toughness)
        if power is not None and toughness is not None:
            return power + toughness >= card.mana_value * 2
    return True
