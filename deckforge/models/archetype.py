"""
Archetype templates — the shape a deck is built toward.

A template carries tag weights for scoring, advisory quotas, a creature
curve and required packages. Quotas are targets the deck builder reaches
for opportunistically; nothing downstream re-checks them.

Templates are hand-authored data validated by pydantic when the registry
is built, so a malformed template fails at import rather than mid-build.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def parse_count_range(count_range: str) -> tuple[int, int]:
    """
    Parse a curve count range into (min, max).

    Accepts "min-max" ("8-12") or a single count ("0").

    Raises:
        ValueError: If the range is not one or two non-negative integers
    """
    parts = count_range.split("-")
    if len(parts) == 1:
        value = int(parts[0])
        low, high = value, value
    elif len(parts) == 2:
        low, high = int(parts[0]), int(parts[1])
    else:
        raise ValueError(f"Invalid count range: {count_range!r}")

    if low < 0 or high < low:
        raise ValueError(f"Invalid count range: {count_range!r}")
    return low, high


class Quota(BaseModel):
    """Advisory count bounds for one tag."""

    model_config = ConfigDict(frozen=True)

    min: int = Field(ge=0, description="Count the builder tries to reach")
    max: int = Field(ge=0, description="Soft upper bound")

    @model_validator(mode="after")
    def _check_bounds(self) -> "Quota":
        if self.max < self.min:
            raise ValueError(f"Quota max {self.max} is below min {self.min}")
        return self


class PackageRequirement(BaseModel):
    """A tag that must be seeded ``count`` times before other stages run."""

    model_config = ConfigDict(frozen=True)

    tag: str
    count: int = Field(ge=0)


class TagPackage(BaseModel):
    """A named bundle of requirements seeded first."""

    model_config = ConfigDict(frozen=True)

    name: str
    require: list[PackageRequirement] = Field(default_factory=list)


class PowerGates(BaseModel):
    """
    Per-tag limits tied to power level.

    low_cap bounds tags at low power targets, high_floor asks for a minimum
    at high power targets.
    """

    model_config = ConfigDict(frozen=True)

    low_cap: dict[str, int] = Field(default_factory=dict)
    high_floor: dict[str, int] = Field(default_factory=dict)


class ArchetypeTemplate(BaseModel):
    """A named, parameterized deck shape."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    formats: list[str]
    colors: list[str] | None = Field(
        default=None,
        description="Typical colors for the archetype",
    )
    synergy: dict[str, float] = Field(
        default_factory=dict,
        description="Tag -> score for archetype synergies",
    )
    roles: dict[str, float] = Field(
        default_factory=dict,
        description="Tag -> score for functional roles",
    )
    quotas: dict[str, Quota] = Field(default_factory=dict)
    creature_curve: dict[str, str] = Field(
        default_factory=dict,
        description="Mana value band -> 'min-max' creature count",
    )
    packages: list[TagPackage] = Field(default_factory=list)
    power_gates: PowerGates = Field(default_factory=PowerGates)

    @field_validator("creature_curve")
    @classmethod
    def _check_curve(cls, value: dict[str, str]) -> dict[str, str]:
        for count_range in value.values():
            parse_count_range(count_range)
        return value

    def curve_targets(self) -> dict[str, int]:
        """Band -> midpoint of its count range, rounded down."""
        targets: dict[str, int] = {}
        for band, count_range in self.creature_curve.items():
            low, high = parse_count_range(count_range)
            targets[band] = (low + high) // 2
        return targets

    def quota_min(self, tag: str) -> int | None:
        quota = self.quotas.get(tag)
        return quota.min if quota is not None else None
