"""Interactive search session: the entry point used by the dashboard."""

from collections.abc import Iterable

from loguru import logger

from workspace_search.config import DEBOUNCE_SECONDS
from workspace_search.core.history import SearchHistory
from workspace_search.core.scheduler import QueryScheduler, SchedulerState
from workspace_search.core.search.pipeline import (
    Scorer,
    facet_counts,
    group,
    normalize,
    run_search,
    static_relevance,
    suggest,
)
from workspace_search.core.store import RecordStore
from workspace_search.models.record import (
    ALL,
    DomainType,
    ErrorCode,
    FacetType,
    Outcome,
    Record,
    SearchResponse,
    Suggestion,
    parse_facet,
)
from workspace_search.protocols import ResultListener


class SearchSession:
    """State for one open search panel.

    Results change only when a search cycle completes; history changes only
    when a non-empty query is actually run. Debounced submissions need a
    running event loop; search_now() works without one.
    """

    def __init__(
        self,
        records: Iterable[Record] = (),
        *,
        delay: float = DEBOUNCE_SECONDS,
        scorer: Scorer = static_relevance,
        history: SearchHistory | None = None,
    ) -> None:
        self.store = RecordStore(records)
        self.history = history if history is not None else SearchHistory()
        self.scorer = scorer
        self.selected_type: FacetType = ALL
        self.current_query = ""
        self.results: list[Record] = []
        self.last_response: SearchResponse | None = None
        self._listeners: list[ResultListener] = []
        self._scheduler = QueryScheduler(self._complete, delay=delay)

    @property
    def state(self) -> SchedulerState:
        return self._scheduler.state

    @property
    def closed(self) -> bool:
        return self._scheduler.state is SchedulerState.CLOSED

    def add_listener(self, listener: ResultListener) -> None:
        self._listeners.append(listener)

    def submit_query(self, text: str, selected_type: FacetType = ALL) -> Outcome:
        """Queue a debounced search for `text` within `selected_type`.

        An unknown facet is reported and leaves the session untouched. Empty
        text clears the results right away without waiting for the timer.
        """
        facet = parse_facet(selected_type)
        if facet is None:
            return _invalid_facet(selected_type)
        if self.closed:
            return _session_closed()

        if not normalize(text):
            self._scheduler.cancel()
            self.selected_type = facet
            self.current_query = text
            self._publish(SearchResponse(query=text, normalized="", selected_type=facet))
            return Outcome.success()

        # Raises RuntimeError outside an event loop, before anything changes.
        self._scheduler.submit(text)
        self.selected_type = facet
        self.current_query = text
        return Outcome.success()

    def select_type(self, selected_type: FacetType) -> Outcome:
        """Switch facet and re-run the current query through the debounce timer."""
        return self.submit_query(self.current_query, selected_type)

    def search_now(self, text: str, selected_type: FacetType = ALL) -> Outcome:
        """Run the pipeline immediately, superseding any pending submission.

        On success the Outcome carries the published SearchResponse.
        """
        facet = parse_facet(selected_type)
        if facet is None:
            return _invalid_facet(selected_type)
        if self.closed:
            return _session_closed()

        self._scheduler.cancel()
        self.selected_type = facet
        self.current_query = text
        return Outcome.success(self._complete(text))

    def clear(self) -> None:
        """Drop the query and the results; history is kept. No-op once closed."""
        if self.closed:
            logger.debug("Search session closed, ignoring clear")
            return
        self._scheduler.cancel()
        self.current_query = ""
        self._publish(SearchResponse(query="", normalized="", selected_type=self.selected_type))

    def set_corpus(self, records: Iterable[Record]) -> Outcome:
        return self.store.set_corpus(records)

    def get_history(self) -> tuple[str, ...]:
        return self.history.entries()

    def get_grouped_results(self) -> dict[DomainType, list[Record]]:
        return group(self.results)

    def suggestions(self, text: str) -> list[Suggestion]:
        return suggest(self.store.snapshot(), text)

    def facet_counts(self) -> dict[FacetType, int]:
        return facet_counts(self.store.snapshot())

    async def wait_idle(self) -> None:
        """Wait for the pending debounced search, if any, to finish."""
        await self._scheduler.wait_idle()

    def close(self) -> None:
        self._scheduler.close()
        logger.debug("Search session closed")

    def _complete(self, text: str) -> SearchResponse:
        response = run_search(
            self.store.snapshot(), text, selected_type=self.selected_type, scorer=self.scorer
        )
        if response.normalized:
            self.history.record(response.normalized)
        self._publish(response)
        return response

    def _publish(self, response: SearchResponse) -> None:
        self.results = list(response.results)
        self.last_response = response
        for listener in list(self._listeners):
            try:
                listener(response)
            except Exception:
                logger.exception("Result listener {!r} failed", listener)


def _invalid_facet(selected_type: str) -> Outcome:
    known = ", ".join([ALL, *DomainType])
    return Outcome.failure(
        ErrorCode.INVALID_FACET, f"Unknown type {selected_type!r}; expected one of: {known}"
    )


def _session_closed() -> Outcome:
    return Outcome.failure(ErrorCode.SESSION_CLOSED, "Search session is closed")
