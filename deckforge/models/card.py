from dataclasses import dataclass, field


@dataclass(slots=True)
class Card:
    """
    A single card from the pool.

    Identity fields are read-only by convention. ``tags`` is the only derived
    field: it starts empty and is filled once by the tagger during pool
    ingestion (or by the deck builder for cards that arrive untagged).
    Re-tagging an unchanged card always yields the same set.

    Attributes:
        id: Stable unique identifier (Scryfall id or caller-supplied)
        name: Card name
        mana_value: Converted mana cost
        type_line: Full type line, e.g. "Legendary Creature — Elf Druid"
        oracle_text: Rules text (faces joined with " // " for multi-face cards)
        colors: Colors of the card itself
        color_identity: Colors for deck-building legality
        keywords: Declared keyword abilities
        legalities: Format id -> "legal", "not_legal", "restricted" or "banned"
        rarity: common, uncommon, rare or mythic
        price_usd: Market price, if known
        power: Printed power for creatures
        toughness: Printed toughness for creatures
        tags: Derived semantic tags
    """

    id: str
    name: str
    mana_value: float = 0.0
    type_line: str = ""
    oracle_text: str = ""
    colors: tuple[str, ...] = ()
    color_identity: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()
    legalities: dict[str, str] = field(default_factory=dict)
    rarity: str = "common"
    price_usd: float | None = None
    power: str | None = None
    toughness: str | None = None
    tags: frozenset[str] = field(default_factory=frozenset, compare=False, repr=False)

    @property
    def is_land(self) -> bool:
        return "land" in self.type_line.lower()

    @property
    def is_basic_land(self) -> bool:
        type_line = self.type_line.lower()
        return "basic" in type_line and "land" in type_line

    @property
    def is_creature(self) -> bool:
        return "creature" in self.type_line.lower()

    @property
    def is_legendary(self) -> bool:
        return "legendary" in self.type_line.lower()

    @property
    def primary_type(self) -> str:
        """First word of the type line ("Legendary", "Creature", "Instant", ...)."""
        words = self.type_line.split()
        return words[0] if words else ""
