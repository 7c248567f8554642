"""
Failure classification for the deck engine.

Only configuration problems are raised. Everything else a build can run
into (thin pools, missed quotas, power that will not converge, illegal
final decks) is collected on the BuildResult instead of thrown.

INVARIANT: A configuration error is raised before any card is picked.
A build either aborts cleanly or returns a fully-formed result.
"""

from enum import Enum

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_INPUT = "invalid_input"

    # Configuration failures
    UNKNOWN_FORMAT = "unknown_format"
    UNKNOWN_ARCHETYPE = "unknown_archetype"

    # Resource failures
    NOT_FOUND = "not_found"


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the caller",
    )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the engine knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        super().__init__(message)

    def to_detail(self) -> FailureDetail:
        """Convert to a serializable FailureDetail."""
        return FailureDetail(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


class ConfigurationError(KnownError):
    """A build was requested with settings the engine does not know."""


class UnknownFormatError(ConfigurationError):
    """Raised when a build names a format missing from the registry."""

    def __init__(self, format_id: str, known_formats: list[str]):
        self.format_id = format_id
        super().__init__(
            kind=FailureKind.UNKNOWN_FORMAT,
            message=f"Unknown format: {format_id}",
            suggestion=f"Use one of: {', '.join(known_formats)}",
        )


class UnknownArchetypeError(ConfigurationError):
    """Raised when a build names an archetype template that does not exist."""

    def __init__(self, archetype_id: str, known_archetypes: list[str]):
        self.archetype_id = archetype_id
        super().__init__(
            kind=FailureKind.UNKNOWN_ARCHETYPE,
            message=f"Unknown archetype: {archetype_id}",
            suggestion=f"Use one of: {', '.join(known_archetypes)}",
        )
