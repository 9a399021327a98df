"""Session service: the operations exposed to the HTTP API and the CLI."""

import logging
from pathlib import Path

from ..config import DEFAULT_SESSION_LIST_SIZE, MAX_SESSION_LIST_SIZE
from ..errors import InvalidSessionError, SessionNotFoundError
from ..types import BatchDeleteResult, DeleteResult, SessionDetail, SessionExport, SessionSummary
from .cache import SessionCache
from .deleter import delete_session_file, delete_session_files_batch
from .formats import LogFormat, default_roots, normalize_source_filter, parse_log_format
from .listing import LISTERS
from .merger import merge_and_limit_sessions
from .reader import export_session_markdown, read_session_detail
from .scanner import resolve_session_file

logger = logging.getLogger('codexmate.sessions')


def clamp_list_limit(value) -> int:
    """List size bounded to [1, MAX_SESSION_LIST_SIZE]."""
    if value is None or isinstance(value, bool):
        return DEFAULT_SESSION_LIST_SIZE
    try:
        limit = int(value)
    except (TypeError, ValueError):
        return DEFAULT_SESSION_LIST_SIZE
    return max(1, min(limit, MAX_SESSION_LIST_SIZE))


class SessionService:
    """Owns the log roots and the list cache for one application."""

    def __init__(
        self,
        roots: dict[LogFormat, Path] | None = None,
        cache: SessionCache | None = None,
    ):
        self.roots = {fmt: Path(path) for fmt, path in (roots or default_roots()).items()}
        self.cache = cache if cache is not None else SessionCache()

    def _format(self, source) -> LogFormat:
        fmt = parse_log_format(source)
        if fmt is None:
            raise InvalidSessionError("Invalid source")
        return fmt

    def resolve(self, source, file_path: str | None = None, session_id: str | None = None) -> tuple[LogFormat, Path]:
        """Format and file path of a session, or SessionNotFoundError."""
        fmt = self._format(source)
        target = resolve_session_file(self.roots[fmt], file_path, session_id)
        if target is None:
            raise SessionNotFoundError()
        return fmt, target

    def list_sessions(self, source='all', limit=None, force_refresh: bool = False) -> list[SessionSummary]:
        """Recent sessions for one family or both, newest first."""
        source_filter = normalize_source_filter(source)
        limit = clamp_list_limit(limit)
        cache_key = f"{source_filter}:{limit}"

        cached = self.cache.get(cache_key, force_refresh)
        if cached is not None:
            return cached

        sessions: list[SessionSummary] = []
        for fmt, lister in LISTERS.items():
            if source_filter in ('all', fmt.value):
                sessions.extend(lister(self.roots[fmt], limit))

        result = merge_and_limit_sessions(sessions, limit)
        self.cache.set(cache_key, result)
        logger.debug("Listed %d sessions for %s", len(result), cache_key)
        return result

    async def get_session_detail(
        self,
        source,
        file_path: str | None = None,
        session_id: str | None = None,
        message_limit=None,
    ) -> SessionDetail:
        fmt, target = self.resolve(source, file_path, session_id)
        return await read_session_detail(target, fmt, message_limit, session_id or '')

    async def export_session(
        self,
        source,
        file_path: str | None = None,
        session_id: str | None = None,
    ) -> SessionExport:
        fmt, target = self.resolve(source, file_path, session_id)
        return await export_session_markdown(target, fmt, session_id or '')

    def delete_session(
        self,
        source,
        file_path: str | None = None,
        session_id: str | None = None,
    ) -> DeleteResult:
        fmt = self._format(source)
        return delete_session_file(fmt, self.roots[fmt], file_path, session_id, cache=self.cache)

    def delete_sessions_batch(self, items: list) -> BatchDeleteResult:
        return delete_session_files_batch(items, self.roots, cache=self.cache)
