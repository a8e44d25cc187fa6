"""In-memory search pipeline: normalize, filter, match, rank, group."""

from collections.abc import Callable, Iterable, Sequence

from loguru import logger

from workspace_search.config import RESULT_LIMIT, SUGGESTION_LIMIT, SUGGESTION_MIN_LENGTH
from workspace_search.models.record import (
    ALL,
    DomainType,
    FacetType,
    Record,
    SearchResponse,
    Suggestion,
)

Scorer = Callable[[Record, str], float]

# Field weights for live scoring: title, description, content.
_FIELD_WEIGHTS = (0.5, 0.3, 0.2)


def normalize(raw: str) -> str:
    """Trim and lower-case a query. An empty result means "no query"."""
    return raw.strip().lower()


def matches(record: Record, normalized: str) -> bool:
    """True if the query is contained in the title, description or content."""
    return any(normalized in text.lower() for text in record.search_fields)


def admits(record: Record, selected_type: FacetType) -> bool:
    return selected_type == ALL or record.domain_type == selected_type


def static_relevance(record: Record, _normalized: str) -> float:
    """Score by the relevance seeded at ingestion time."""
    return record.relevance


def field_weighted_relevance(record: Record, normalized: str) -> float:
    """Score by which fields contain the query, blended with seeded relevance.

    Stays within [0, 1]: the field part is a weighted sum of hits and the
    seeded relevance contributes half of the final score.
    """
    hits = sum(
        weight
        for weight, text in zip(_FIELD_WEIGHTS, record.search_fields, strict=True)
        if normalized in text.lower()
    )
    return (hits + record.relevance) / 2


def rank(
    candidates: Iterable[Record],
    *,
    normalized: str = "",
    scorer: Scorer = static_relevance,
    limit: int = RESULT_LIMIT,
) -> list[Record]:
    """Order candidates by score, highest first, and keep the first `limit`.

    sorted() is stable, so records with equal scores keep corpus order.
    """
    ordered = sorted(candidates, key=lambda r: scorer(r, normalized), reverse=True)
    return ordered[:limit]


def group(results: Sequence[Record]) -> dict[DomainType, list[Record]]:
    """Partition ranked results by domain type.

    Groups appear in order of first appearance; rank order is kept inside each.
    """
    grouped: dict[DomainType, list[Record]] = {}
    for record in results:
        grouped.setdefault(record.domain_type, []).append(record)
    return grouped


def run_search(
    records: Sequence[Record],
    query: str,
    *,
    selected_type: FacetType = ALL,
    scorer: Scorer = static_relevance,
) -> SearchResponse:
    """Run one full pipeline cycle over a corpus snapshot.

    Args:
        records: Corpus snapshot, in corpus order.
        query: Raw query text as typed.
        selected_type: ALL or a DomainType value.
        scorer: Scoring function used by the ranker.

    Returns:
        SearchResponse with capped results and the pre-cap match count.
    """
    normalized = normalize(query)
    if not normalized:
        return SearchResponse(query=query, normalized="", selected_type=selected_type)

    candidates = [r for r in records if admits(r, selected_type)]
    matched = [r for r in candidates if matches(r, normalized)]
    results = rank(matched, normalized=normalized, scorer=scorer)

    logger.debug(
        "Query {!r} [{}]: {} candidates, {} matches, {} kept",
        normalized,
        selected_type,
        len(candidates),
        len(matched),
        len(results),
    )
    return SearchResponse(
        query=query,
        normalized=normalized,
        selected_type=selected_type,
        results=tuple(results),
        total_matches=len(matched),
    )


def suggest(
    records: Sequence[Record], query: str, *, limit: int = SUGGESTION_LIMIT
) -> list[Suggestion]:
    """Type-ahead suggestions: titles of the first records matching title or description."""
    normalized = normalize(query)
    if len(normalized) < SUGGESTION_MIN_LENGTH:
        return []

    found: list[Suggestion] = []
    for record in records:
        if normalized in record.title.lower() or normalized in record.description.lower():
            found.append(Suggestion(id=record.id, text=record.title, domain_type=record.domain_type))
            if len(found) >= limit:
                break
    return found


def facet_counts(records: Sequence[Record]) -> dict[FacetType, int]:
    """Corpus size per facet, ALL first, then every domain type (zero included)."""
    counts: dict[FacetType, int] = {ALL: len(records)}
    for domain_type in DomainType:
        counts[domain_type] = 0
    for record in records:
        counts[record.domain_type] += 1
    return counts
