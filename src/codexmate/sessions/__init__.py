"""Session discovery, reading and export for Codex and Claude Code logs.

This package contains modules for:
- JSONL record parsing (records.py)
- Leading-message filtering (filters.py)
- Head-read summaries and the Claude index fast path (summary.py, claude_index.py)
- Bounded directory scanning (scanner.py)
- The session list cache and merger (cache.py, merger.py)
- Full-file detail/export reading (reader.py)
- Session deletion (deleter.py)

Import from here for a clean API:
    from src.codexmate.sessions import SessionService, LogFormat
"""

from .cache import SessionCache
from .filters import is_bootstrap_like_text, remove_leading_system_messages
from .formats import LogFormat, parse_log_format
from .merger import merge_and_limit_sessions, sort_sessions_by_updated_at
from .reader import build_session_markdown, extract_messages_from_file
from .records import extract_message_text, parse_jsonl_content
from .scanner import collect_recent_session_files, resolve_session_file
from .service import SessionService
from .summary import parse_session_summary

__all__ = [
    'SessionCache',
    'is_bootstrap_like_text',
    'remove_leading_system_messages',
    'LogFormat',
    'parse_log_format',
    'merge_and_limit_sessions',
    'sort_sessions_by_updated_at',
    'build_session_markdown',
    'extract_messages_from_file',
    'extract_message_text',
    'parse_jsonl_content',
    'collect_recent_session_files',
    'resolve_session_file',
    'SessionService',
    'parse_session_summary',
]
