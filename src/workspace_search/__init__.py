"""Cross-domain search over an AI assistant's workspace records."""

from workspace_search.core.history import SearchHistory
from workspace_search.core.scheduler import QueryScheduler, SchedulerState
from workspace_search.core.session import SearchSession
from workspace_search.core.store import RecordStore
from workspace_search.models.record import (
    ALL,
    DomainType,
    ErrorCode,
    Outcome,
    Record,
    SearchResponse,
)
from workspace_search.protocols import ResultListener

__all__ = [
    "ALL",
    "DomainType",
    "ErrorCode",
    "Outcome",
    "QueryScheduler",
    "Record",
    "RecordStore",
    "ResultListener",
    "SchedulerState",
    "SearchHistory",
    "SearchResponse",
    "SearchSession",
]
