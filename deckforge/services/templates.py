"""
Archetype template registry.

Hand-authored templates, validated once at import and exposed read-only.
apply_plan() layers upstream plan hints on top of a template by returning
a modified copy; registry entries are never mutated.
"""

import re
from types import MappingProxyType
from typing import Any

from deckforge.models.archetype import ArchetypeTemplate, Quota
from deckforge.models.build import BuildPlan

# Plan quota keys -> tags they stand for
PLAN_QUOTA_TAGS: dict[str, str] = {
    "ramp": "ramp",
    "card_draw": "draw",
    "removal": "removal-spot",
    "board_wipes": "removal-sweeper",
    "counterspells": "counterspell",
    "synergy_pieces": "counters",
}

PLAN_SYNERGY_BOOST = 2.0


def _q(low: int, high: int) -> dict[str, int]:
    return {"min": low, "max": high}


_TEMPLATE_DATA: list[dict[str, Any]] = [
    {
        "id": "aggro-burn",
        "name": "Aggressive Burn",
        "formats": ["standard", "pioneer", "modern", "legacy"],
        "colors": ["R"],
        "synergy": {"spellslinger": 3, "prowess": 2},
        "roles": {"removal-spot": 4, "draw": 1, "wincon": 3},
        "quotas": {
            "removal-spot": _q(8, 12),
            "draw": _q(2, 4),
            "wincon": _q(3, 5),
        },
        "creature_curve": {
            "1": "8-12",
            "2": "6-10",
            "3": "2-4",
            "4": "0-2",
            "5": "0-1",
            "6-7": "0-1",
            "8-9": "0",
            "10+": "0",
        },
        "packages": [
            {
                "name": "burn-core",
                "require": [
                    {"tag": "removal-spot", "count": 8},
                    {"tag": "creature-1mv", "count": 6},
                ],
            }
        ],
        "power_gates": {
            "low_cap": {"fast-mana": 0, "tutor-broad": 0},
            "high_floor": {"removal-spot": 10},
        },
    },
    {
        "id": "control-draw-go",
        "name": "Draw-Go Control",
        "formats": ["standard", "pioneer", "modern", "legacy"],
        "colors": ["U", "W"],
        "synergy": {"spellslinger": 2},
        "roles": {"counterspell": 4, "removal-spot": 3, "draw": 4, "wincon": 2},
        "quotas": {
            "counterspell": _q(8, 12),
            "removal-spot": _q(4, 8),
            "removal-sweeper": _q(2, 4),
            "draw": _q(8, 12),
            "wincon": _q(2, 4),
        },
        "creature_curve": {
            "1": "0-2",
            "2": "0-2",
            "3": "0-2",
            "4": "1-3",
            "5": "1-3",
            "6-7": "1-2",
            "8-9": "0-1",
            "10+": "0-1",
        },
        "packages": [
            {
                "name": "control-core",
                "require": [
                    {"tag": "counterspell", "count": 8},
                    {"tag": "draw", "count": 8},
                    {"tag": "removal-sweeper", "count": 2},
                ],
            }
        ],
        "power_gates": {
            "low_cap": {"fast-mana": 1, "tutor-broad": 1},
            "high_floor": {"counterspell": 10, "draw": 10},
        },
    },
    {
        "id": "commander-aristocrats",
        "name": "Aristocrats",
        "formats": ["commander"],
        "colors": ["B", "R"],
        "synergy": {"aristocrats": 4, "tokens": 3, "sac-outlet": 4},
        "roles": {"draw": 3, "removal-spot": 2, "recursion": 3},
        "quotas": {
            "ramp": _q(10, 14),
            "draw": _q(8, 12),
            "removal-spot": _q(6, 10),
            "removal-sweeper": _q(1, 3),
            "sac-outlet": _q(6, 10),
            "aristocrats": _q(8, 12),
        },
        "creature_curve": {
            "1": "5-8",
            "2": "8-12",
            "3": "6-10",
            "4": "4-8",
            "5": "3-6",
            "6-7": "2-4",
            "8-9": "1-2",
            "10+": "0-1",
        },
        "packages": [
            {
                "name": "aristocrats-core",
                "require": [
                    {"tag": "sac-outlet", "count": 6},
                    {"tag": "aristocrats", "count": 8},
                    {"tag": "tokens", "count": 4},
                ],
            }
        ],
        "power_gates": {
            "low_cap": {"tutor-broad": 2, "fast-mana": 1},
            "high_floor": {"tutor-broad": 4, "fast-mana": 3},
        },
    },
    {
        "id": "midrange-value",
        "name": "Midrange Value",
        "formats": ["standard", "pioneer", "modern"],
        "colors": ["B", "G"],
        "synergy": {"etb": 3, "recursion": 2},
        "roles": {"removal-spot": 3, "draw": 3, "ramp": 2},
        "quotas": {
            "removal-spot": _q(6, 10),
            "draw": _q(4, 8),
            "ramp": _q(2, 6),
        },
        "creature_curve": {
            "1": "2-4",
            "2": "4-8",
            "3": "6-10",
            "4": "6-10",
            "5": "4-6",
            "6-7": "2-4",
            "8-9": "0-2",
            "10+": "0-1",
        },
        "packages": [
            {
                "name": "value-core",
                "require": [
                    {"tag": "etb", "count": 6},
                    {"tag": "creature-3mv", "count": 4},
                    {"tag": "creature-4mv", "count": 4},
                ],
            }
        ],
        "power_gates": {
            "low_cap": {"tutor-broad": 1},
            "high_floor": {"removal-spot": 8},
        },
    },
    {
        "id": "combo-storm",
        "name": "Storm Combo",
        "formats": ["legacy", "vintage"],
        "colors": ["U", "R"],
        "synergy": {"storm": 5, "spellslinger": 4},
        "roles": {"tutor-narrow": 4, "fast-mana": 5, "protection": 3},
        "quotas": {
            "tutor-narrow": _q(8, 12),
            "fast-mana": _q(8, 16),
            "protection": _q(4, 8),
            "storm": _q(4, 8),
        },
        "creature_curve": {
            "1": "0-2",
            "2": "0-2",
            "3": "0-1",
            "4": "0-1",
            "5": "0",
            "6-7": "0",
            "8-9": "0",
            "10+": "0",
        },
        "packages": [
            {
                "name": "storm-engine",
                "require": [
                    {"tag": "storm", "count": 4},
                    {"tag": "fast-mana", "count": 8},
                    {"tag": "tutor-narrow", "count": 6},
                ],
            }
        ],
        "power_gates": {
            "low_cap": {"fast-mana": 4},
            "high_floor": {"fast-mana": 12, "tutor-narrow": 8},
        },
    },
    {
        "id": "commander-control",
        "name": "Commander Control (Draw-Go)",
        "formats": ["commander"],
        "colors": ["W", "U", "B", "G"],
        "synergy": {"spellslinger": 2, "etb": 1},
        "roles": {
            "counterspell": 5,
            "removal-spot": 4,
            "removal-sweeper": 3,
            "draw": 5,
            "protection": 3,
            "wincon": 2,
        },
        "quotas": {
            "ramp": _q(10, 14),
            "draw": _q(10, 16),
            "counterspell": _q(8, 12),
            "removal-spot": _q(6, 10),
            "removal-sweeper": _q(2, 4),
            "protection": _q(3, 6),
            "wincon": _q(3, 5),
        },
        "creature_curve": {
            "1": "0-3",
            "2": "2-6",
            "3": "2-6",
            "4": "3-5",
            "5": "2-4",
            "6-7": "1-3",
            "8-9": "0-2",
            "10+": "0-1",
        },
        "packages": [
            {
                "name": "control-core",
                "require": [
                    {"tag": "counterspell", "count": 8},
                    {"tag": "draw", "count": 10},
                    {"tag": "removal-sweeper", "count": 2},
                ],
            }
        ],
        "power_gates": {
            "low_cap": {"tutor-broad": 2, "fast-mana": 2},
            "high_floor": {"counterspell": 10, "draw": 12},
        },
    },
    {
        "id": "commander-counters",
        "name": "Counters & Proliferate",
        "formats": ["commander"],
        "colors": ["W", "U", "B", "G"],
        "synergy": {"counters": 5, "proliferate": 5, "planeswalker": 3, "tokens": 2, "etb": 2},
        "roles": {
            "draw": 4,
            "ramp": 4,
            "removal-spot": 3,
            "removal-sweeper": 2,
            "tutor-broad": 3,
            "protection": 2,
        },
        "quotas": {
            "ramp": _q(10, 14),
            "draw": _q(10, 14),
            "removal-spot": _q(8, 12),
            "removal-sweeper": _q(2, 4),
            "counterspell": _q(4, 8),
            "tutor-broad": _q(3, 6),
            "tutor-narrow": _q(2, 4),
            "counters": _q(12, 18),
            "proliferate": _q(4, 8),
            "planeswalker": _q(3, 6),
            "wincon": _q(3, 5),
        },
        "creature_curve": {
            "1": "4-6",
            "2": "8-12",
            "3": "8-12",
            "4": "6-10",
            "5": "4-6",
            "6-7": "2-4",
            "8-9": "1-2",
            "10+": "0-1",
        },
        "packages": [
            {
                "name": "counters-core",
                "require": [
                    {"tag": "counters", "count": 12},
                    {"tag": "proliferate", "count": 4},
                    {"tag": "ramp", "count": 10},
                    {"tag": "draw", "count": 10},
                ],
            }
        ],
        "power_gates": {
            "low_cap": {"tutor-broad": 2, "fast-mana": 1},
            "high_floor": {"tutor-broad": 5, "fast-mana": 3, "counters": 15},
        },
    },
    {
        "id": "commander-tokens",
        "name": "Token Swarm",
        "formats": ["commander"],
        "colors": ["W", "G", "R", "B"],
        "synergy": {"tokens": 5, "aristocrats": 3, "sac-outlet": 2, "anthem": 3},
        "roles": {"draw": 3, "ramp": 4, "removal-spot": 3, "removal-sweeper": 2},
        "quotas": {
            "ramp": _q(10, 14),
            "draw": _q(8, 12),
            "removal-spot": _q(6, 10),
            "removal-sweeper": _q(2, 4),
            "tokens": _q(15, 25),
            "sac-outlet": _q(3, 6),
            "wincon": _q(3, 5),
        },
        "creature_curve": {
            "1": "4-6",
            "2": "6-10",
            "3": "8-12",
            "4": "6-10",
            "5": "4-6",
            "6-7": "2-4",
            "8-9": "1-2",
            "10+": "0-1",
        },
        "packages": [
            {
                "name": "token-engine",
                "require": [
                    {"tag": "tokens", "count": 15},
                    {"tag": "ramp", "count": 10},
                    {"tag": "draw", "count": 8},
                ],
            }
        ],
        "power_gates": {
            "low_cap": {"tutor-broad": 2, "fast-mana": 1},
            "high_floor": {"tutor-broad": 4, "tokens": 20},
        },
    },
    {
        "id": "commander-spellslinger",
        "name": "Spellslinger",
        "formats": ["commander"],
        "colors": ["U", "R", "W"],
        "synergy": {"spellslinger": 5, "prowess": 3, "storm": 2},
        "roles": {
            "draw": 5,
            "ramp": 3,
            "removal-spot": 3,
            "counterspell": 4,
            "instant": 4,
            "sorcery": 4,
        },
        "quotas": {
            "ramp": _q(10, 14),
            "draw": _q(12, 18),
            "counterspell": _q(6, 10),
            "removal-spot": _q(6, 10),
            "instant": _q(15, 25),
            "sorcery": _q(8, 15),
            "wincon": _q(3, 5),
        },
        "creature_curve": {
            "1": "2-4",
            "2": "4-8",
            "3": "4-8",
            "4": "3-6",
            "5": "2-4",
            "6-7": "1-3",
            "8-9": "0-2",
            "10+": "0-1",
        },
        "packages": [
            {
                "name": "spellslinger-core",
                "require": [
                    {"tag": "instant", "count": 15},
                    {"tag": "draw", "count": 12},
                    {"tag": "ramp", "count": 10},
                ],
            }
        ],
        "power_gates": {
            "low_cap": {"tutor-broad": 2, "fast-mana": 2},
            "high_floor": {"tutor-broad": 4, "instant": 20},
        },
    },
    {
        "id": "commander-voltron",
        "name": "Voltron (Commander Damage)",
        "formats": ["commander"],
        "colors": ["W", "U", "R", "G"],
        "synergy": {"equipment": 5, "auras": 4, "protection": 5},
        "roles": {
            "draw": 4,
            "ramp": 4,
            "removal-spot": 3,
            "protection": 5,
            "tutor-narrow": 3,
        },
        "quotas": {
            "ramp": _q(10, 14),
            "draw": _q(10, 14),
            "removal-spot": _q(6, 10),
            "protection": _q(8, 12),
            "tutor-narrow": _q(4, 8),
            # The commander itself is the main threat
            "wincon": _q(1, 2),
        },
        "creature_curve": {
            "1": "2-4",
            "2": "4-8",
            "3": "4-8",
            "4": "3-6",
            "5": "2-4",
            "6-7": "1-3",
            "8-9": "0-1",
            "10+": "0",
        },
        "packages": [
            {
                "name": "voltron-core",
                "require": [
                    {"tag": "protection", "count": 8},
                    {"tag": "ramp", "count": 10},
                    {"tag": "draw", "count": 10},
                ],
            }
        ],
        "power_gates": {
            "low_cap": {"tutor-broad": 2, "fast-mana": 1},
            "high_floor": {"tutor-narrow": 6, "protection": 10},
        },
    },
    {
        "id": "commander-reanimator",
        "name": "Reanimator",
        "formats": ["commander"],
        "colors": ["B", "U", "G", "W"],
        "synergy": {"reanimator": 5, "recursion": 4, "graveyard": 3, "self-mill": 3},
        "roles": {"draw": 3, "ramp": 4, "removal-spot": 3, "tutor-narrow": 4},
        "quotas": {
            "ramp": _q(10, 14),
            "draw": _q(8, 12),
            "removal-spot": _q(6, 10),
            "reanimator": _q(8, 12),
            "recursion": _q(6, 10),
            "tutor-narrow": _q(4, 8),
            # Big creatures worth reanimating
            "wincon": _q(6, 10),
        },
        "creature_curve": {
            "1": "2-4",
            "2": "4-6",
            "3": "4-6",
            "4": "3-5",
            "5": "2-4",
            "6-7": "3-6",
            "8-9": "3-6",
            "10+": "2-4",
        },
        "packages": [
            {
                "name": "reanimator-core",
                "require": [
                    {"tag": "reanimator", "count": 8},
                    {"tag": "recursion", "count": 6},
                    {"tag": "ramp", "count": 10},
                ],
            }
        ],
        "power_gates": {
            "low_cap": {"tutor-broad": 2, "fast-mana": 1},
            "high_floor": {"tutor-narrow": 6, "reanimator": 10},
        },
    },
]

TEMPLATES: MappingProxyType[str, ArchetypeTemplate] = MappingProxyType(
    {data["id"]: ArchetypeTemplate.model_validate(data) for data in _TEMPLATE_DATA}
)


def get_template(template_id: str) -> ArchetypeTemplate | None:
    """Look up a template by id, or None if it does not exist."""
    return TEMPLATES.get(template_id)


def list_templates() -> list[str]:
    """All registered template ids, in registry order."""
    return list(TEMPLATES)


def get_templates_for_format(format_id: str) -> list[ArchetypeTemplate]:
    """Templates that declare the given format."""
    return [t for t in TEMPLATES.values() if format_id in t.formats]


def _normalize_tag(name: str) -> str:
    return re.sub(r"[\s_]+", "-", name.strip().lower())


def apply_plan(template: ArchetypeTemplate, plan: BuildPlan) -> ArchetypeTemplate:
    """
    Bias a template with upstream plan hints.

    Plan quotas replace the template's quota for the mapped tag; plan keys
    that are already tag names are used as-is. Named synergies that the
    template already weights get a +2 boost. Unknown synergies are ignored.

    Args:
        template: Registry template (not modified)
        plan: Upstream hints

    Returns:
        A new template with the hints applied
    """
    quotas: dict[str, Quota] = dict(template.quotas)
    for plan_key, quota in plan.card_quotas.items():
        tag = PLAN_QUOTA_TAGS.get(plan_key, _normalize_tag(plan_key))
        quotas[tag] = quota

    synergy = dict(template.synergy)
    for name in plan.synergies:
        tag = _normalize_tag(name)
        if tag in synergy:
            synergy[tag] += PLAN_SYNERGY_BOOST

    return template.model_copy(update={"quotas": quotas, "synergy": synergy})
