from deckforge.parsers.scryfall import card_from_scryfall, load_card_pool, parse_card_pool

__all__ = [
    "card_from_scryfall",
    "load_card_pool",
    "parse_card_pool",
]
