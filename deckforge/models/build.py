"""
Build inputs, provenance records and results.

BuildContext and BuildPlan arrive from callers and are validated by
pydantic. Pick, ValidationResult and BuildResult are produced by the
deck builder and are plain frozen dataclasses.

INVARIANT: The seed in BuildContext is the only source of randomness.
Same pool + same context + same plan => identical BuildResult.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from deckforge.models.analysis import DeckAnalysis
from deckforge.models.archetype import Quota
from deckforge.models.card import Card

VALID_COLORS = ("W", "U", "B", "R", "G")

BudgetTier = Literal["budget", "moderate", "high", "unlimited"]


def _normalize_colors(value: list[str] | None) -> list[str] | None:
    if value is None:
        return None
    colors = [c.upper() for c in value]
    invalid = [c for c in colors if c not in VALID_COLORS]
    if invalid:
        raise ValueError(f"Invalid colors: {invalid}. Valid: {list(VALID_COLORS)}")
    return list(dict.fromkeys(colors))


class BuildStage(str, Enum):
    """Pipeline states, in execution order."""

    INIT = "init"
    FILTER_POOL = "filter"
    SELECT_COMMANDER = "commander"
    REFILTER_POOL = "refilter"
    SEED = "seed"
    INTERACTION = "interaction"
    ADVANTAGE = "advantage"
    CURVE = "curve"
    WINCONS = "wincons"
    MANABASE = "manabase"
    TUNING = "tuning"
    VALIDATE = "validate"
    DONE = "done"


class BuildContext(BaseModel):
    """What to build."""

    model_config = ConfigDict(frozen=True)

    format: str = Field(description="Format id, e.g. 'commander' or 'modern'")
    archetype: str = Field(description="Archetype template id")
    colors: list[str] | None = Field(
        default=None,
        description="Explicit deck colors used for the manabase",
    )
    identity: list[str] | None = Field(
        default=None,
        description="Color identity override for identity-enforced formats",
    )
    power_target: float = Field(default=6.0, ge=1, le=10)
    budget: BudgetTier = "moderate"
    seed: int = 0

    @field_validator("colors", "identity")
    @classmethod
    def _check_colors(cls, value: list[str] | None) -> list[str] | None:
        return _normalize_colors(value)


class BuildPlan(BaseModel):
    """
    Optional upstream hints that bias a template before building.

    Produced by a planning collaborator and accepted as plain data.
    """

    model_config = ConfigDict(frozen=True)

    strategy: str | None = None
    key_cards: list[str] = Field(default_factory=list)
    card_quotas: dict[str, Quota] = Field(default_factory=dict)
    synergies: list[str] = Field(default_factory=list)


@dataclass(frozen=True, slots=True)
class Pick:
    """
    Why a card is in the deck.

    Priority decides what power tuning may replace: lower goes first.
    """

    card: Card
    reason: str
    stage: BuildStage
    priority: int


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Final legality check against the format rules."""

    is_legal: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class BuildResult:
    """Everything a single build produced."""

    deck: list[Card]
    commander: Card | None
    analysis: DeckAnalysis
    change_log: list[str]
    validation: ValidationResult
    picks: list[Pick] = field(default_factory=list)
    sideboard: list[Card] = field(default_factory=list)
    tuning_iterations: int = 0

    @property
    def manabase(self) -> list[Card]:
        return [p.card for p in self.picks if p.stage == BuildStage.MANABASE]

    @property
    def non_land_picks(self) -> list[Pick]:
        return [p for p in self.picks if not p.card.is_land]
