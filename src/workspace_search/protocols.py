"""Protocols for dependency injection in the search session."""

from typing import Protocol, runtime_checkable

from workspace_search.models.record import SearchResponse


@runtime_checkable
class ResultListener(Protocol):
    """Receives the result list each time a search cycle completes."""

    def __call__(self, response: SearchResponse) -> None:
        """Handle a published search response."""
        ...
