"""
Scryfall bulk data loader.

Turns Scryfall card objects into Card records and loads a card pool from a
locally downloaded bulk JSON file. Nothing here touches the network; the
file is fetched by whatever job maintains the local data directory.

Bulk data: https://scryfall.com/docs/api/bulk-data
"""

import json
import logging
from pathlib import Path
from typing import Any

from deckforge.config import settings
from deckforge.models.card import Card
from deckforge.services.tagger import tag_pool

logger = logging.getLogger(__name__)

VALID_RARITIES = frozenset({"common", "uncommon", "rare", "mythic"})

# Bulk entries that are not playable cards
SKIPPED_LAYOUTS = frozenset({"token", "double_faced_token", "art_series", "emblem"})

FACE_SEPARATOR = " // "


def _normalize_rarity(rarity: str | None) -> str:
    """Normalize rarity to one of: common, uncommon, rare, mythic."""
    return rarity if rarity in VALID_RARITIES else "common"


def _parse_price(value: Any) -> float | None:
    if value in (None, ""):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.debug("Ignoring unparseable price %r", value)
        return None


def _oracle_text(data: dict[str, Any]) -> str:
    if "oracle_text" in data:
        return str(data["oracle_text"])
    faces = data.get("card_faces") or []
    return FACE_SEPARATOR.join(str(face.get("oracle_text", "")) for face in faces)


def _colors(data: dict[str, Any]) -> tuple[str, ...]:
    if "colors" in data:
        return tuple(data["colors"])
    # Double-faced cards only carry colors per face
    colors: dict[str, None] = {}
    for face in data.get("card_faces") or []:
        for color in face.get("colors", []):
            colors[color] = None
    return tuple(colors)


def card_from_scryfall(data: dict[str, Any]) -> Card:
    """
    Build a Card from a Scryfall card object.

    Args:
        data: One entry of a Scryfall bulk file or API response

    Returns:
        Untagged Card

    Raises:
        KeyError: If the object has no id or name
    """
    first_face = (data.get("card_faces") or [{}])[0]
    return Card(
        id=str(data["id"]),
        name=str(data["name"]),
        mana_value=float(data.get("cmc") or 0.0),
        type_line=str(data.get("type_line") or first_face.get("type_line", "")),
        oracle_text=_oracle_text(data),
        colors=_colors(data),
        color_identity=tuple(data.get("color_identity", [])),
        keywords=tuple(data.get("keywords", [])),
        legalities=dict(data.get("legalities", {})),
        rarity=_normalize_rarity(data.get("rarity")),
        price_usd=_parse_price((data.get("prices") or {}).get("usd")),
        power=data.get("power", first_face.get("power")),
        toughness=data.get("toughness", first_face.get("toughness")),
    )


def parse_card_pool(entries: list[dict[str, Any]]) -> list[Card]:
    """
    Convert Scryfall entries to a tagged pool with unique names.

    Later printings override earlier ones. Tokens, emblems and art cards
    are skipped.
    """
    by_name: dict[str, Card] = {}
    for entry in entries:
        if entry.get("layout") in SKIPPED_LAYOUTS:
            continue
        card = card_from_scryfall(entry)
        by_name[card.name] = card

    pool = list(by_name.values())
    tag_pool(pool)
    return pool


def load_card_pool(path: Path | None = None) -> list[Card]:
    """
    Load a card pool from a Scryfall bulk JSON file.

    Args:
        path: Path to the JSON file. Defaults to settings.card_database_path

    Returns:
        Tagged cards, one per name

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    if path is None:
        path = settings.card_database_path

    if not path.exists():
        raise FileNotFoundError(
            f"Card database not found at {path}. "
            "Download Scryfall default-cards bulk data to that path first."
        )

    with open(path, encoding="utf-8") as f:
        entries = json.load(f)

    pool = parse_card_pool(entries)
    logger.info("Loaded %d cards from %s", len(pool), path)
    return pool
