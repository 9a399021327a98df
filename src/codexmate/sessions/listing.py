"""Per-family session listing.

Each lister scans a bounded number of recent files, parses at most
``limit * SESSION_SCAN_FACTOR`` summaries and returns the merged top
``limit``.
"""

import logging
from pathlib import Path

from ..config import (
    CLAUDE_IGNORED_SUBPATH,
    MAX_SESSION_LIST_SIZE,
    SESSION_SCAN_FACTOR,
    SESSION_SCAN_MIN_FILES,
)
from ..types import SessionSummary
from .claude_index import summaries_from_claude_index
from .formats import LogFormat
from .merger import merge_and_limit_sessions
from .scanner import collect_recent_session_files
from .summary import parse_session_summary

logger = logging.getLogger('codexmate.scan')


def scan_budget(limit: int) -> tuple[int, int]:
    """(files to return, files to examine) for a list request of ``limit``."""
    scan_count = max(
        limit * SESSION_SCAN_FACTOR,
        min(SESSION_SCAN_MIN_FILES, MAX_SESSION_LIST_SIZE * SESSION_SCAN_FACTOR),
    )
    return scan_count, max(scan_count * 2, SESSION_SCAN_MIN_FILES)


def _summaries_from_scan(
    root: Path,
    fmt: LogFormat,
    limit: int,
    ignore_subpath: str = '',
) -> list[SessionSummary]:
    return_count, max_files_scanned = scan_budget(limit)
    files = collect_recent_session_files(
        root,
        return_count=return_count,
        max_files_scanned=max_files_scanned,
        ignore_subpath=ignore_subpath,
    )

    sessions = []
    for file_path in files:
        summary = parse_session_summary(file_path, fmt)
        if summary is not None:
            sessions.append(summary)
        if len(sessions) >= limit * SESSION_SCAN_FACTOR:
            break
    return sessions


def list_codex_sessions(root: Path, limit: int) -> list[SessionSummary]:
    """Most recent Codex sessions under ``root``."""
    sessions = _summaries_from_scan(root, LogFormat.CODEX, limit)
    logger.debug("Found %d Codex sessions", len(sessions))
    return merge_and_limit_sessions(sessions, limit)


def list_claude_sessions(root: Path, limit: int) -> list[SessionSummary]:
    """Most recent Claude Code sessions under ``root``.

    Index files are used when any of them yields a session; otherwise the
    project tree is scanned, skipping sub-agent transcripts.
    """
    sessions = summaries_from_claude_index(root, limit * SESSION_SCAN_FACTOR)
    if not sessions:
        sessions = _summaries_from_scan(
            root, LogFormat.CLAUDE, limit, ignore_subpath=CLAUDE_IGNORED_SUBPATH
        )
    logger.debug("Found %d Claude sessions", len(sessions))
    return merge_and_limit_sessions(sessions, limit)


LISTERS = {
    LogFormat.CODEX: list_codex_sessions,
    LogFormat.CLAUDE: list_claude_sessions,
}
