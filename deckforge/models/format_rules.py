"""
Format Rules — static per-format legality constraints.

INVARIANT: The registry is built once at import and never mutated.
Callers read it through get_format_rules(); an unknown format id yields
None and the deck builder must refuse to guess defaults.

Legality predicates here are pure and never raise.
"""

from dataclasses import dataclass
from types import MappingProxyType

from deckforge.models.card import Card


@dataclass(frozen=True, slots=True)
class FormatRules:
    """
    Legality constraints for one format.

    Attributes:
        id: Format identifier used in card legality maps
        name: Display name
        deck_size_min: Minimum main deck size
        deck_size_max: Maximum main deck size
        sideboard_size: Maximum sideboard size
        singleton: At most one copy of each non-basic-land card
        color_identity_enforced: Cards must fit the commander's color identity
        has_commander: Deck is led by a commander
        ban_list: Card names banned in the format
        restricted_list: Card names limited to a single copy
    """

    id: str
    name: str
    deck_size_min: int
    deck_size_max: int
    sideboard_size: int = 15
    singleton: bool = False
    color_identity_enforced: bool = False
    has_commander: bool = False
    ban_list: frozenset[str] = frozenset()
    restricted_list: frozenset[str] = frozenset()


def _constructed(
    format_id: str,
    name: str,
    restricted_list: frozenset[str] = frozenset(),
) -> FormatRules:
    """60-card format with a 15-card sideboard."""
    return FormatRules(
        id=format_id,
        name=name,
        deck_size_min=60,
        deck_size_max=60,
        restricted_list=restricted_list,
    )


FORMAT_RULES: MappingProxyType[str, FormatRules] = MappingProxyType(
    {
        "standard": _constructed("standard", "Standard"),
        "pioneer": _constructed("pioneer", "Pioneer"),
        "modern": _constructed("modern", "Modern"),
        "legacy": _constructed("legacy", "Legacy"),
        "vintage": _constructed(
            "vintage",
            "Vintage",
            restricted_list=frozenset(
                {
                    "Black Lotus",
                    "Mox Pearl",
                    "Mox Sapphire",
                    "Mox Jet",
                    "Mox Ruby",
                    "Mox Emerald",
                    "Ancestral Recall",
                    "Time Walk",
                }
            ),
        ),
        "commander": FormatRules(
            id="commander",
            name="Commander",
            deck_size_min=100,
            deck_size_max=100,
            sideboard_size=0,
            singleton=True,
            color_identity_enforced=True,
            has_commander=True,
            ban_list=frozenset(
                {
                    "Ancestral Recall",
                    "Balance",
                    "Biorhythm",
                    "Black Lotus",
                    "Braids, Cabal Minion",
                    "Chaos Orb",
                    "Coalition Victory",
                    "Channel",
                    "Emrakul, the Aeons Torn",
                    "Fastbond",
                }
            ),
        ),
        "brawl": FormatRules(
            id="brawl",
            name="Brawl",
            deck_size_min=100,
            deck_size_max=100,
            sideboard_size=0,
            singleton=True,
            color_identity_enforced=True,
            has_commander=True,
        ),
        "pauper": _constructed("pauper", "Pauper"),
    }
)


def get_format_rules(format_id: str) -> FormatRules | None:
    """Look up the rules for a format, or None if the format is unknown."""
    return FORMAT_RULES.get(format_id)


def list_formats() -> list[str]:
    """All registered format ids, in registry order."""
    return list(FORMAT_RULES)


def is_legal_in_format(card: Card, format_id: str) -> bool:
    """
    Check a card's per-format legality.

    Restricted cards count as legal; the restriction is a copy limit,
    not a ban.
    """
    return card.legalities.get(format_id) in ("legal", "restricted")


def is_legal_commander(card: Card) -> bool:
    """A legendary creature, or a card whose text says it can be your commander."""
    if card.is_legendary and card.is_creature:
        return True
    return "can be your commander" in card.oracle_text.lower()


def validate_color_identity(card: Card, identity: list[str] | tuple[str, ...]) -> bool:
    """
    Check that every color in the card's identity is in ``identity``.

    Colorless cards fit any identity. An empty ``identity`` admits only
    colorless cards.
    """
    allowed = set(identity)
    return all(color in allowed for color in card.color_identity)
