"""Display helpers for search results."""

from datetime import UTC, datetime

from workspace_search.models.record import SearchResponse


def format_age(timestamp: datetime, *, now: datetime | None = None) -> str:
    """Render how long ago something happened.

    Under an hour is "Just now", then hours, then days for the first week,
    and a calendar date after that. Future timestamps count as "Just now".
    """
    now = now or datetime.now(tz=UTC)
    hours = int((now - timestamp).total_seconds() // 3600)
    if hours < 1:
        return "Just now"
    if hours < 24:
        return f"{hours}h ago"
    if hours < 168:
        return f"{hours // 24}d ago"
    return f"{timestamp:%b} {timestamp.day}, {timestamp.year}"


def format_match(relevance: float) -> str:
    return f"{round(relevance * 100)}% match"


def summarize(response: SearchResponse) -> str:
    """One-line summary shown above the result groups."""
    count = len(response.results)
    if not response.normalized:
        return ""
    if count == 0:
        return f'No results found for "{response.query}"'
    plural = "" if count == 1 else "s"
    return f'Found {count} result{plural} for "{response.query}"'
