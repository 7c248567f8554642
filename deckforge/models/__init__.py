from deckforge.models.analysis import DeckAnalysis, Subscores
from deckforge.models.archetype import (
    ArchetypeTemplate,
    PackageRequirement,
    PowerGates,
    Quota,
    TagPackage,
    parse_count_range,
)
from deckforge.models.build import (
    BuildContext,
    BuildPlan,
    BuildResult,
    BuildStage,
    Pick,
    ValidationResult,
)
from deckforge.models.card import Card
from deckforge.models.failure import (
    ConfigurationError,
    FailureDetail,
    FailureKind,
    KnownError,
    UnknownArchetypeError,
    UnknownFormatError,
)
from deckforge.models.format_rules import (
    FORMAT_RULES,
    FormatRules,
    get_format_rules,
    is_legal_commander,
    is_legal_in_format,
    list_formats,
    validate_color_identity,
)

__all__ = [
    "ArchetypeTemplate",
    "BuildContext",
    "BuildPlan",
    "BuildResult",
    "BuildStage",
    "Card",
    "ConfigurationError",
    "DeckAnalysis",
    "FORMAT_RULES",
    "FailureDetail",
    "FailureKind",
    "FormatRules",
    "KnownError",
    "PackageRequirement",
    "Pick",
    "PowerGates",
    "Quota",
    "Subscores",
    "TagPackage",
    "UnknownArchetypeError",
    "UnknownFormatError",
    "ValidationResult",
    "get_format_rules",
    "is_legal_commander",
    "is_legal_in_format",
    "list_formats",
    "parse_count_range",
    "validate_color_identity",
]
