"""
DeckForge services.

Card tagging, templates, commander advice, color identity checks, land
bases and deck quality. The deck builder itself depends on the scorer in
deckforge.analysis and is imported from deckforge.services.deck_builder.
"""

from deckforge.services.color_identity import (
    ColorCompatibilityResult,
    ColorViolation,
    calculate_deck_color_distribution,
    can_add_card_to_deck,
    check_deck_color_compatibility,
    format_color_identity,
)
from deckforge.services.commander_advisor import (
    ArchetypeSuggestion,
    detect_archetype,
    get_priority_multipliers,
    get_recommended_quotas,
    score_commander_synergy,
)
from deckforge.services.deck_quality import (
    QualityReport,
    meets_quality_threshold,
    validate_deck_quality,
)
from deckforge.services.manabase import (
    ManabaseRequirements,
    build_manabase,
    calculate_color_hit_probability,
    calculate_requirements,
)
from deckforge.services.tagger import ensure_tagged, tag_card, tag_pool
from deckforge.services.templates import (
    apply_plan,
    get_template,
    get_templates_for_format,
    list_templates,
)

__all__ = [
    "ArchetypeSuggestion",
    "ColorCompatibilityResult",
    "ColorViolation",
    "ManabaseRequirements",
    "QualityReport",
    "apply_plan",
    "build_manabase",
    "calculate_color_hit_probability",
    "calculate_deck_color_distribution",
    "calculate_requirements",
    "can_add_card_to_deck",
    "check_deck_color_compatibility",
    "detect_archetype",
    "ensure_tagged",
    "format_color_identity",
    "get_priority_multipliers",
    "get_recommended_quotas",
    "get_template",
    "get_templates_for_format",
    "list_templates",
    "meets_quality_threshold",
    "score_commander_synergy",
    "tag_card",
    "tag_pool",
    "validate_deck_quality",
]
