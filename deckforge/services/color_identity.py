"""
Color identity checks against a commander.

Only formats that enforce color identity are checked; every other format
is treated as compatible.
"""

from dataclasses import dataclass, field

from deckforge.models.card import Card
from deckforge.models.format_rules import get_format_rules

COLOR_ORDER = ("W", "U", "B", "R", "G")

COLOR_NAMES = {
    "W": "White",
    "U": "Blue",
    "B": "Black",
    "R": "Red",
    "G": "Green",
    "C": "Colorless",
}


@dataclass(frozen=True)
class ColorViolation:
    """A card whose identity falls outside the commander's."""

    card_name: str
    card_id: str
    card_colors: list[str]
    invalid_colors: list[str]
    reason: str


@dataclass(frozen=True)
class ColorCompatibilityResult:
    """Outcome of checking a whole deck against a commander."""

    is_compatible: bool
    violations: list[ColorViolation] = field(default_factory=list)
    commander_identity: list[str] = field(default_factory=list)
    deck_colors: list[str] = field(default_factory=list)


def sort_colors(colors: list[str] | set[str] | tuple[str, ...]) -> list[str]:
    """Put colors in WUBRG order; anything else goes last."""
    return sorted(
        set(colors),
        key=lambda c: COLOR_ORDER.index(c) if c in COLOR_ORDER else len(COLOR_ORDER),
    )


def invalid_identity_colors(
    card_identity: list[str] | tuple[str, ...],
    commander_identity: list[str] | tuple[str, ...],
) -> list[str]:
    """Colors in the card's identity that the commander does not allow."""
    return [color for color in card_identity if color not in commander_identity]


def _enforces_identity(format_id: str) -> bool:
    rules = get_format_rules(format_id)
    return rules is not None and rules.color_identity_enforced


def check_deck_color_compatibility(
    deck: list[Card],
    commander: Card | None,
    format_id: str = "commander",
) -> ColorCompatibilityResult:
    """
    Check every card in a deck against the commander's identity.

    Args:
        deck: Cards to check
        commander: Deck commander; without one nothing is checked
        format_id: Format the deck is built for

    Returns:
        ColorCompatibilityResult listing each violating card
    """
    if commander is None or not _enforces_identity(format_id):
        return ColorCompatibilityResult(is_compatible=True)

    commander_identity = list(commander.color_identity)
    violations: list[ColorViolation] = []
    deck_colors: set[str] = set()

    for card in deck:
        deck_colors.update(card.color_identity)
        invalid = invalid_identity_colors(card.color_identity, commander_identity)
        if invalid:
            violations.append(
                ColorViolation(
                    card_name=card.name,
                    card_id=card.id,
                    card_colors=list(card.color_identity),
                    invalid_colors=invalid,
                    reason=(
                        f"Card has {', '.join(invalid)} in its identity, which is not in "
                        f"commander's identity ({format_color_identity(commander_identity)})"
                    ),
                )
            )

    return ColorCompatibilityResult(
        is_compatible=not violations,
        violations=violations,
        commander_identity=commander_identity,
        deck_colors=sort_colors(deck_colors),
    )


def can_add_card_to_deck(
    card: Card,
    commander: Card | None,
    format_id: str = "commander",
) -> tuple[bool, str | None]:
    """
    Check whether a single card fits the commander's identity.

    Returns:
        (allowed, reason) where reason explains a refusal
    """
    if commander is None or not _enforces_identity(format_id):
        return True, None

    invalid = invalid_identity_colors(card.color_identity, commander.color_identity)
    if invalid:
        return False, (
            f"{card.name} has {', '.join(invalid)} in its color identity, "
            "which is not in your commander's identity"
        )
    return True, None


def format_color_identity(colors: list[str] | tuple[str, ...]) -> str:
    """Display text for a color identity, e.g. "Blue, Black"."""
    if not colors:
        return "Colorless"
    return ", ".join(COLOR_NAMES.get(color, color) for color in colors)


def calculate_deck_color_distribution(deck: list[Card]) -> dict[str, int]:
    """Count cards per casting color; colorless cards count under "C"."""
    distribution = dict.fromkeys((*COLOR_ORDER, "C"), 0)
    for card in deck:
        if not card.colors:
            distribution["C"] += 1
            continue
        for color in card.colors:
            if color in distribution:
                distribution[color] += 1
    return distribution
