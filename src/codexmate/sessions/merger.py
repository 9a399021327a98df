"""Merging session summaries from several sources into one ranked list."""

from ..types import SessionSummary
from ..utils import timestamp_to_epoch


def sort_sessions_by_updated_at(items: list[SessionSummary]) -> list[SessionSummary]:
    """Newest first; missing or unparsable timestamps sort as the oldest."""
    return sorted(items, key=lambda item: timestamp_to_epoch(item.get('updatedAt')), reverse=True)


def merge_and_limit_sessions(items: list[SessionSummary], limit: int) -> list[SessionSummary]:
    """Deduplicate by (source, filePath), sort by recency and cap at ``limit``.

    The first occurrence of a duplicate wins.
    """
    deduped = []
    seen = set()
    for item in items:
        if not item or not item.get('filePath'):
            continue
        key = (item.get('source'), item['filePath'])
        if key in seen:
            continue
        seen.add(key)
        deduped.append(item)

    return sort_sessions_by_updated_at(deduped)[:max(0, limit)]
