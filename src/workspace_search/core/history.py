"""Bounded recent-search history."""

from loguru import logger

from workspace_search.config import HISTORY_CAPACITY, HISTORY_MIN_LENGTH
from workspace_search.core.search.pipeline import normalize


class SearchHistory:
    """Distinct recent queries, most recent first.

    A query already present stays where it is when searched again; it is not
    moved to the front. No two entries are ever equal.
    """

    def __init__(
        self, *, capacity: int = HISTORY_CAPACITY, min_length: int = HISTORY_MIN_LENGTH
    ) -> None:
        self.capacity = capacity
        self.min_length = min_length
        self._entries: list[str] = []

    def record(self, query: str) -> bool:
        """Remember a query. Returns True if a new entry was added."""
        normalized = normalize(query)
        if len(normalized) < self.min_length or normalized in self._entries:
            return False

        self._entries.insert(0, normalized)
        evicted = self._entries[self.capacity :]
        del self._entries[self.capacity :]
        if evicted:
            logger.debug("History full, evicted {!r}", evicted)
        return True

    def entries(self) -> tuple[str, ...]:
        return tuple(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, query: object) -> bool:
        return isinstance(query, str) and normalize(query) in self._entries
