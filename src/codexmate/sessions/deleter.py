"""Session file deletion, single and batched."""

import logging
from pathlib import Path

from ..config import MAX_BATCH_DELETE_SESSIONS, SESSION_FILE_EXTENSION
from ..errors import InvalidSessionError, SessionError, SessionIOError, SessionNotFoundError
from ..types import BatchDeleteItemResult, BatchDeleteResult, DeleteResult
from .cache import SessionCache
from .formats import LogFormat, parse_log_format
from .scanner import resolve_session_file
from .summary import session_id_from_path

logger = logging.getLogger('codexmate.sessions')


def delete_session_file(
    fmt: LogFormat,
    root: Path,
    file_path: str | None = None,
    session_id: str | None = None,
    cache: SessionCache | None = None,
    defer_invalidation: bool = False,
) -> DeleteResult:
    """Delete one session file that lives inside ``root``.

    Raises:
        SessionNotFoundError: the session does not resolve inside ``root``
        InvalidSessionError: wrong extension or not a regular file
        SessionIOError: the unlink itself failed
    """
    target = resolve_session_file(root, file_path, session_id)
    if target is None:
        raise SessionNotFoundError()

    if not target.name.lower().endswith(SESSION_FILE_EXTENSION):
        raise InvalidSessionError()

    try:
        is_file = target.is_file()
    except OSError as e:
        raise SessionNotFoundError() from e
    if not is_file:
        raise InvalidSessionError("Session path is not a file")

    try:
        target.unlink()
    except FileNotFoundError as e:
        raise SessionNotFoundError() from e
    except OSError as e:
        raise SessionIOError(f"Failed to delete session: {e}") from e

    logger.info("Deleted %s session %s", fmt.value, target)

    if cache is not None and not defer_invalidation:
        cache.invalidate_all()

    return {
        'success': True,
        'source': fmt.value,
        'sessionId': session_id or session_id_from_path(target),
        'filePath': str(target),
    }


def _item_field(item: dict, key: str) -> str:
    value = item.get(key)
    return value if isinstance(value, str) else ''


def delete_session_files_batch(
    items: list,
    roots: dict[LogFormat, Path],
    cache: SessionCache | None = None,
) -> BatchDeleteResult:
    """Delete several sessions, isolating per-item failures.

    The cache is invalidated once at the end if anything was deleted.

    Raises:
        InvalidSessionError: ``items`` is empty or larger than the batch cap
    """
    if not isinstance(items, list) or not items:
        raise InvalidSessionError("No sessions provided")
    if len(items) > MAX_BATCH_DELETE_SESSIONS:
        raise InvalidSessionError(f"Too many sessions, max {MAX_BATCH_DELETE_SESSIONS}")

    results: list[BatchDeleteItemResult] = []
    deleted = 0

    for item in items:
        payload = item if isinstance(item, dict) else {}
        source = _item_field(payload, 'source')
        session_id = _item_field(payload, 'sessionId')
        file_path = _item_field(payload, 'filePath')

        try:
            fmt = parse_log_format(source)
            if fmt is None:
                raise InvalidSessionError("Invalid source")
            single = delete_session_file(
                fmt, roots[fmt], file_path, session_id, cache=cache, defer_invalidation=True
            )
        except SessionError as e:
            results.append({
                'success': False,
                'source': source or 'unknown',
                'sessionId': session_id,
                'filePath': file_path,
                'error': e.message,
            })
            continue

        deleted += 1
        results.append({
            'success': True,
            'source': single['source'],
            'sessionId': single['sessionId'],
            'filePath': single['filePath'],
        })

    if deleted > 0 and cache is not None:
        cache.invalidate_all()

    failed = len(results) - deleted
    return {
        'success': failed == 0,
        'total': len(results),
        'deleted': deleted,
        'failed': failed,
        'results': results,
    }
