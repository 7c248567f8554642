from collections.abc import Callable

import pytest

from deckforge.models.card import Card
from deckforge.services.tagger import tag_pool

LEGAL_EVERYWHERE = {
    "standard": "not_legal",
    "pioneer": "not_legal",
    "modern": "legal",
    "legacy": "legal",
    "vintage": "legal",
    "commander": "legal",
    "pauper": "not_legal",
}


def make_card(
    name: str,
    type_line: str = "Instant",
    oracle_text: str = "",
    mana_value: float = 2.0,
    color_identity: tuple[str, ...] = (),
    *,
    card_id: str | None = None,
    colors: tuple[str, ...] | None = None,
    keywords: tuple[str, ...] = (),
    legalities: dict[str, str] | None = None,
    rarity: str = "common",
    price_usd: float | None = None,
    power: str | None = None,
    toughness: str | None = None,
) -> Card:
    """Build an untagged card legal in the eternal formats unless told otherwise."""
    return Card(
        id=card_id or name.lower().replace(" ", "-").replace(",", ""),
        name=name,
        mana_value=mana_value,
        type_line=type_line,
        oracle_text=oracle_text,
        colors=color_identity if colors is None else colors,
        color_identity=color_identity,
        keywords=keywords,
        legalities=dict(LEGAL_EVERYWHERE) if legalities is None else legalities,
        rarity=rarity,
        price_usd=price_usd,
        power=power,
        toughness=toughness,
    )


@pytest.fixture
def card_factory() -> Callable[..., Card]:
    """The make_card factory, for tests that build their own cards."""
    return make_card


def _basic(name: str, color: str) -> Card:
    return make_card(
        name,
        type_line=f"Basic Land — {name}",
        oracle_text=f"({{T}}: Add {{{color}}}.)",
        mana_value=0,
        color_identity=(color,),
        colors=(),
    )


@pytest.fixture
def basic_lands() -> list[Card]:
    """One of each basic land, plus Wastes."""
    return [
        _basic("Plains", "W"),
        _basic("Island", "U"),
        _basic("Swamp", "B"),
        _basic("Mountain", "R"),
        _basic("Forest", "G"),
        make_card("Wastes", type_line="Basic Land", oracle_text="{T}: Add {C}.", mana_value=0),
    ]


@pytest.fixture
def dimir_lands() -> list[Card]:
    """Blue-black non-basics covering each land cycle, plus utility lands."""
    return [
        make_card(
            "Command Tower",
            type_line="Land",
            oracle_text="{T}: Add one mana of any color in your commander's color identity.",
            mana_value=0,
        ),
        make_card(
            "Reliquary Tower",
            type_line="Land",
            oracle_text="You have no maximum hand size.\n{T}: Add {C}.",
            mana_value=0,
        ),
        make_card(
            "Polluted Delta",
            type_line="Land",
            oracle_text=(
                "{T}, Pay 1 life, Sacrifice this land: Search your library for an Island "
                "or Swamp card, put it onto the battlefield, then shuffle."
            ),
            mana_value=0,
        ),
        make_card(
            "Watery Grave",
            type_line="Land — Island Swamp",
            oracle_text=(
                "({T}: Add {U} or {B}.)\nAs this land enters, you may pay 2 life. "
                "If you don't, it enters tapped."
            ),
            mana_value=0,
            color_identity=("U", "B"),
            colors=(),
        ),
        make_card(
            "Drowned Catacomb",
            type_line="Land",
            oracle_text=(
                "This land enters tapped unless you control an Island or a Swamp.\n"
                "{T}: Add {U} or {B}."
            ),
            mana_value=0,
            color_identity=("U", "B"),
            colors=(),
        ),
        make_card(
            "Darkslick Shores",
            type_line="Land",
            oracle_text=(
                "This land enters tapped unless you control two or fewer other lands.\n"
                "{T}: Add {U} or {B}."
            ),
            mana_value=0,
            color_identity=("U", "B"),
            colors=(),
        ),
        make_card(
            "Underground River",
            type_line="Land",
            oracle_text=(
                "{T}: Add {C}.\n{T}: Add {U} or {B}. This land deals 1 damage to you."
            ),
            mana_value=0,
            color_identity=("U", "B"),
            colors=(),
        ),
        make_card(
            "Dimir Guildgate",
            type_line="Land — Gate",
            oracle_text="This land enters tapped.\n{T}: Add {U} or {B}.",
            mana_value=0,
            color_identity=("U", "B"),
            colors=(),
        ),
    ]


def _spells() -> list[Card]:
    cards: list[Card] = [
        make_card(
            "Sol Ring",
            type_line="Artifact",
            oracle_text="{T}: Add {C}{C}.",
            mana_value=1,
            price_usd=2.0,
        ),
        make_card(
            "Lotus Petal",
            type_line="Artifact",
            oracle_text="{T}, Sacrifice Lotus Petal: Add one mana of any color.",
            mana_value=0,
        ),
        make_card(
            "Demonic Tutor",
            type_line="Sorcery",
            oracle_text=(
                "Search your library for a card, put that card into your hand, then shuffle."
            ),
            mana_value=2,
            color_identity=("B",),
            price_usd=40.0,
        ),
        make_card(
            "Vampiric Tutor",
            type_line="Instant",
            oracle_text=(
                "Search your library for a card, then shuffle and put that card on top. "
                "You lose 2 life."
            ),
            mana_value=1,
            color_identity=("B",),
        ),
        make_card(
            "Thassa's Oracle",
            type_line="Creature — Merfolk Wizard",
            oracle_text=(
                "When this creature enters, look at the top X cards of your library. "
                "If X is greater than or equal to the number of cards in your library, "
                "you win the game."
            ),
            mana_value=2,
            color_identity=("U",),
        ),
        make_card(
            "Black Lotus",
            type_line="Artifact",
            oracle_text="{T}, Sacrifice Black Lotus: Add three mana of any one color.",
            mana_value=0,
        ),
    ]

    for i in range(12):
        cards.append(
            make_card(
                f"Doom Blade {i}",
                oracle_text="Destroy target nonblack creature.",
                mana_value=2,
                color_identity=("B",),
            )
        )
    for i in range(10):
        cards.append(
            make_card(
                f"Counterspell {i}",
                oracle_text="Counter target spell.",
                mana_value=2,
                color_identity=("U",),
            )
        )
    for i in range(3):
        cards.append(
            make_card(
                f"Damnation {i}",
                type_line="Sorcery",
                oracle_text="Destroy all creatures. They can't be regenerated.",
                mana_value=4,
                color_identity=("B",),
            )
        )
    for i in range(14):
        cards.append(
            make_card(
                f"Divination {i}",
                type_line="Sorcery",
                oracle_text="Draw two cards.",
                mana_value=3,
                color_identity=("U",),
            )
        )
    for i in range(12):
        cards.append(
            make_card(
                f"Mind Stone {i}",
                type_line="Artifact",
                oracle_text="{T}: Add {C}.",
                mana_value=2,
            )
        )
    for i in range(4):
        cards.append(
            make_card(
                f"Lightning Greaves {i}",
                type_line="Artifact — Equipment",
                oracle_text="Equipped creature has shroud and haste. Equip {0}",
                mana_value=2,
            )
        )
    for i in range(4):
        cards.append(
            make_card(
                f"Laboratory Maniac {i}",
                type_line="Creature — Human Wizard",
                oracle_text=(
                    "If you would draw a card while your library has no cards in it, "
                    "you win the game instead."
                ),
                mana_value=3,
                color_identity=("U",),
            )
        )
    for mana_value in (1, 2, 3, 4, 5, 6, 8, 10):
        for i in range(6):
            color = ("U",) if i % 2 else ("B",)
            cards.append(
                make_card(
                    f"Dimir Creature {mana_value}-{i}",
                    type_line="Creature — Zombie",
                    mana_value=mana_value,
                    color_identity=color,
                )
            )

    # Off-identity and banned cards that must never make a Dimir deck
    cards.append(
        make_card(
            "Lightning Bolt",
            oracle_text="Lightning Bolt deals 3 damage to any target.",
            mana_value=1,
            color_identity=("R",),
        )
    )
    cards.append(
        make_card(
            "Goblin Guide",
            type_line="Creature — Goblin Scout",
            oracle_text="Haste",
            mana_value=1,
            color_identity=("R",),
            keywords=("Haste",),
        )
    )
    cards.append(
        make_card(
            "Fastbond",
            type_line="Enchantment",
            oracle_text="You may play any number of lands on each of your turns.",
            mana_value=1,
            color_identity=("G",),
        )
    )
    return cards


@pytest.fixture
def dimir_commanders() -> list[Card]:
    """Legendary blue-black creatures that can lead the deck."""
    return [
        make_card(
            "Lazav, the Multifarious",
            type_line="Legendary Creature — Shapeshifter",
            oracle_text="When Lazav enters, surveil 1.",
            mana_value=2,
            color_identity=("U", "B"),
        ),
        make_card(
            "Yuriko, the Tiger's Shadow",
            type_line="Legendary Creature — Human Ninja",
            oracle_text=(
                "Whenever a Ninja you control deals combat damage to a player, reveal the "
                "top card of your library and put that card into your hand."
            ),
            mana_value=2,
            color_identity=("U", "B"),
        ),
    ]


@pytest.fixture
def commander_pool(
    dimir_commanders: list[Card],
    dimir_lands: list[Card],
    basic_lands: list[Card],
) -> list[Card]:
    """A realistic blue-black commander pool, tagged."""
    pool = [*dimir_commanders, *_spells(), *dimir_lands, *basic_lands]
    tag_pool(pool)
    return pool


@pytest.fixture
def untagged_pool(
    dimir_commanders: list[Card],
    dimir_lands: list[Card],
    basic_lands: list[Card],
) -> list[Card]:
    """The same pool before tagging."""
    return [*dimir_commanders, *_spells(), *dimir_lands, *basic_lands]
