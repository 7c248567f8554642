"""Tests for the Scryfall bulk data loader."""

import json
from pathlib import Path
from typing import Any

import pytest

from deckforge.config import settings
from deckforge.parsers import card_from_scryfall, load_card_pool, parse_card_pool


def _entry(name: str, **overrides: Any) -> dict[str, Any]:
    entry: dict[str, Any] = {
        "id": f"id-{name.lower().replace(' ', '-')}",
        "name": name,
        "layout": "normal",
        "cmc": 1.0,
        "type_line": "Instant",
        "oracle_text": "Lightning Bolt deals 3 damage to any target.",
        "colors": ["R"],
        "color_identity": ["R"],
        "keywords": [],
        "legalities": {"modern": "legal", "standard": "not_legal"},
        "rarity": "common",
        "prices": {"usd": "1.50"},
    }
    entry.update(overrides)
    return entry


DOUBLE_FACED = _entry(
    "Delver of Secrets // Insectile Aberration",
    layout="transform",
    type_line="Creature — Human Wizard // Creature — Human Insect",
    color_identity=["U"],
    card_faces=[
        {
            "name": "Delver of Secrets",
            "oracle_text": "At the beginning of your upkeep, look at the top card of your library.",
            "colors": ["U"],
            "power": "1",
            "toughness": "1",
        },
        {
            "name": "Insectile Aberration",
            "oracle_text": "Flying",
            "colors": ["U"],
            "power": "3",
            "toughness": "2",
        },
    ],
)
del DOUBLE_FACED["oracle_text"]
del DOUBLE_FACED["colors"]


class TestCardFromScryfall:
    """Tests for card_from_scryfall."""

    def test_basic_fields(self) -> None:
        card = card_from_scryfall(_entry("Lightning Bolt"))

        assert card.id == "id-lightning-bolt"
        assert card.name == "Lightning Bolt"
        assert card.mana_value == 1.0
        assert card.color_identity == ("R",)
        assert card.legalities["modern"] == "legal"
        assert card.price_usd == 1.5
        assert card.tags == frozenset()

    def test_double_faced_card(self) -> None:
        card = card_from_scryfall(DOUBLE_FACED)

        assert card.oracle_text == (
            "At the beginning of your upkeep, look at the top card of your library. // Flying"
        )
        assert card.colors == ("U",)
        assert card.power == "1"
        assert card.toughness == "1"

    @pytest.mark.parametrize("price", [None, "", "n/a"])
    def test_missing_or_bad_price(self, price: str | None) -> None:
        card = card_from_scryfall(_entry("Lightning Bolt", prices={"usd": price}))

        assert card.price_usd is None

    def test_unknown_rarity_defaults_to_common(self) -> None:
        card = card_from_scryfall(_entry("Lightning Bolt", rarity="special"))

        assert card.rarity == "common"

    def test_missing_name_raises(self) -> None:
        entry = _entry("Lightning Bolt")
        del entry["name"]

        with pytest.raises(KeyError):
            card_from_scryfall(entry)


class TestParseCardPool:
    """Tests for parse_card_pool."""

    def test_later_printing_wins(self) -> None:
        entries = [
            _entry("Lightning Bolt", id="old-print", prices={"usd": "3.00"}),
            _entry("Lightning Bolt", id="new-print", prices={"usd": "1.00"}),
        ]

        pool = parse_card_pool(entries)

        assert len(pool) == 1
        assert pool[0].id == "new-print"
        assert pool[0].price_usd == 1.0

    def test_tokens_skipped(self) -> None:
        entries = [
            _entry("Lightning Bolt"),
            _entry("Goblin", layout="token", type_line="Token Creature — Goblin"),
            _entry("Emblem", layout="emblem"),
        ]

        assert [card.name for card in parse_card_pool(entries)] == ["Lightning Bolt"]

    def test_pool_is_tagged(self) -> None:
        pool = parse_card_pool([_entry("Lightning Bolt")])

        assert "instant" in pool[0].tags


class TestLoadCardPool:
    """Tests for load_card_pool."""

    def test_loads_file(self, tmp_path: Path) -> None:
        path = tmp_path / "cards.json"
        path.write_text(json.dumps([_entry("Lightning Bolt"), DOUBLE_FACED]), encoding="utf-8")

        pool = load_card_pool(path)

        assert {card.name for card in pool} == {
            "Lightning Bolt",
            "Delver of Secrets // Insectile Aberration",
        }
        assert all(card.tags for card in pool)

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Card database not found"):
            load_card_pool(tmp_path / "missing.json")

    def test_defaults_to_settings_path(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = tmp_path / "default-cards.json"
        path.write_text(json.dumps([_entry("Lightning Bolt")]), encoding="utf-8")
        monkeypatch.setattr(settings, "card_database_path", path)

        assert [card.name for card in load_card_pool()] == ["Lightning Bolt"]
