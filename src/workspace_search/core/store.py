"""Immutable corpus snapshots for the search pipeline."""

import math
from collections import Counter
from collections.abc import Iterable

from loguru import logger

from workspace_search.models.record import DomainType, ErrorCode, Outcome, Record


def _record_problem(record: Record) -> str | None:
    """Describe why `record` cannot be searched, or return None."""
    if record.domain_type not in set(DomainType):
        return f"unknown type {record.domain_type!r}"
    relevance = record.relevance
    if isinstance(relevance, bool) or not isinstance(relevance, int | float):
        return f"relevance {relevance!r} is not a number"
    if not math.isfinite(relevance) or not 0.0 <= relevance <= 1.0:
        return f"relevance {relevance!r} outside [0, 1]"
    for name, value in zip(("title", "description", "content"), record.search_fields):
        if not isinstance(value, str):
            return f"{name} {value!r} is not a string"
    return None


class RecordStore:
    """Holds the current corpus snapshot.

    The snapshot is a tuple replaced wholesale by set_corpus(), so a scan that
    already grabbed it is never affected by a later replacement. A replacement
    with duplicate ids or a malformed record is rejected as a whole: the
    previous snapshot is kept.
    """

    def __init__(self, records: Iterable[Record] = ()) -> None:
        self._snapshot: tuple[Record, ...] = ()
        outcome = self.set_corpus(records)
        if not outcome.ok:
            raise ValueError(outcome.detail)

    def set_corpus(self, records: Iterable[Record]) -> Outcome:
        """Replace the whole corpus. All-or-nothing on invalid input."""
        new_snapshot = tuple(records)
        problems = [
            f"{r.id!r}: {problem}"
            for r in new_snapshot
            if (problem := _record_problem(r)) is not None
        ]
        if problems:
            logger.warning("Rejected corpus with invalid records: {}", problems)
            return Outcome.failure(
                ErrorCode.INVALID_RECORD, f"Invalid records: {'; '.join(problems)}"
            )

        counts = Counter(r.id for r in new_snapshot)
        duplicates = sorted(record_id for record_id, n in counts.items() if n > 1)
        if duplicates:
            logger.warning("Rejected corpus with duplicate ids: {}", duplicates)
            return Outcome.failure(
                ErrorCode.DUPLICATE_ID, f"Duplicate record ids: {duplicates!r}"
            )

        self._snapshot = new_snapshot
        logger.debug("Corpus replaced: {} records", len(new_snapshot))
        return Outcome.success()

    def snapshot(self) -> tuple[Record, ...]:
        return self._snapshot

    def get(self, record_id: str) -> Record | None:
        return next((r for r in self._snapshot if r.id == record_id), None)

    def __len__(self) -> int:
        return len(self._snapshot)
