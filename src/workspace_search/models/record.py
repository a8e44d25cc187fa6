"""Domain models for workspace search."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any


class DomainType(StrEnum):
    """The kind of workspace item a record came from."""

    DOCUMENT = "document"
    MEMORY = "memory"
    TASK = "task"
    ACTIVITY = "activity"


ALL = "all"

# A facet is either ALL or one of the DomainType values.
FacetType = str


class ErrorCode(StrEnum):
    """Failures reported back to callers of the session."""

    INVALID_FACET = "invalid_facet"
    DUPLICATE_ID = "duplicate_id"
    SESSION_CLOSED = "session_closed"
    INVALID_RECORD = "invalid_record"


def parse_facet(value: str) -> DomainType | str | None:
    """Return ALL or the matching DomainType, or None if unknown."""
    if value == ALL:
        return ALL
    try:
        return DomainType(value)
    except ValueError:
        return None


@dataclass(frozen=True)
class Record:
    """A single searchable workspace item."""

    id: str
    domain_type: DomainType
    title: str
    description: str
    content: str
    timestamp: datetime
    category: str
    relevance: float
    source: str
    metadata: dict[str, Any] | None = field(default=None, compare=False, hash=False)

    @property
    def search_fields(self) -> tuple[str, str, str]:
        """Indexed text, in match priority order."""
        return (self.title, self.description, self.content)


@dataclass(frozen=True)
class Suggestion:
    """A type-ahead suggestion drawn from record titles."""

    id: str
    text: str
    domain_type: DomainType


@dataclass(frozen=True)
class SearchResponse:
    """Published outcome of one pipeline run."""

    query: str
    normalized: str
    selected_type: FacetType
    results: tuple[Record, ...] = ()
    total_matches: int = 0


@dataclass(frozen=True)
class Outcome:
    """Explicit success/failure result of a session operation.

    `response` is set by operations that run a search synchronously.
    """

    error: ErrorCode | None = None
    detail: str = ""
    response: SearchResponse | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, response: SearchResponse | None = None) -> "Outcome":
        return cls(response=response)

    @classmethod
    def failure(cls, error: ErrorCode, detail: str) -> "Outcome":
        return cls(error=error, detail=detail)
