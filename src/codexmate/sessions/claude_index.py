"""Fast path for Claude Code sessions via per-project index files.

Claude Code keeps a ``sessions-index.json`` in each project folder with
precomputed metadata. When present it saves a full directory scan; a
small head read of each indexed file then refines the count and title.
"""

import json
import logging
from pathlib import Path
from typing import Any

from ..config import (
    CLAUDE_SESSIONS_INDEX_NAME,
    INDEX_TITLE_MAX_LENGTH,
    SESSION_FILE_EXTENSION,
    SESSION_INDEX_QUICK_READ_BYTES,
)
from ..types import SessionSummary
from ..utils import mtime_to_iso, to_iso_time, truncate_text
from .filters import remove_leading_system_messages
from .formats import LogFormat
from .records import messages_from_records, parse_head_records
from .summary import first_user_title

logger = logging.getLogger('codexmate.scan')


def read_json_file(file_path: Path, fallback: Any = None) -> Any:
    """Parse a JSON file, returning ``fallback`` if missing or invalid."""
    if not file_path.exists():
        return fallback
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable index %s: %s", file_path, e)
        return fallback


def _project_dirs(projects_dir: Path) -> list[Path]:
    try:
        return sorted(p for p in projects_dir.iterdir() if p.is_dir())
    except OSError:
        return []


def _index_message_count(entry: dict) -> int:
    count = entry.get('messageCount')
    if isinstance(count, bool) or not isinstance(count, (int, float)):
        return 0
    return max(0, int(count))


def _summary_from_entry(entry: dict, index: dict, project_dir: Path) -> SessionSummary | None:
    session_id = entry.get('sessionId')
    if not isinstance(session_id, str) or not session_id:
        return None

    full_path = entry.get('fullPath')
    if isinstance(full_path, str) and full_path:
        file_path = Path(full_path)
    else:
        file_path = project_dir / f"{session_id}{SESSION_FILE_EXTENSION}"

    if not file_path.exists():
        return None

    updated_at = to_iso_time(entry.get('modified') or entry.get('fileMtime'), '')
    if not updated_at:
        try:
            updated_at = mtime_to_iso(file_path)
        except OSError:
            return None

    title = truncate_text(entry.get('summary') or entry.get('firstPrompt') or session_id,
                          INDEX_TITLE_MAX_LENGTH)
    message_count = _index_message_count(entry)

    quick_records = parse_head_records(file_path, SESSION_INDEX_QUICK_READ_BYTES)
    if quick_records:
        messages = remove_leading_system_messages(
            messages_from_records(quick_records, LogFormat.CLAUDE)
        )
        # Prefer the head count unless it found nothing and the index has a number
        if messages or message_count == 0:
            message_count = len(messages)
        title = first_user_title(messages, INDEX_TITLE_MAX_LENGTH) or title

    cwd = entry.get('projectPath') or index.get('originalPath') or ''

    return {
        'source': LogFormat.CLAUDE.value,
        'sourceLabel': LogFormat.CLAUDE.label,
        'sessionId': session_id,
        'title': title,
        'cwd': cwd if isinstance(cwd, str) else '',
        'createdAt': to_iso_time(entry.get('created'), ''),
        'updatedAt': updated_at,
        'messageCount': message_count,
        'filePath': str(file_path),
    }


def summaries_from_claude_index(projects_dir: Path, max_sessions: int) -> list[SessionSummary]:
    """Summaries for every indexed session that still exists on disk.

    Stops once ``max_sessions`` summaries were collected.
    """
    projects_dir = Path(projects_dir)
    if not projects_dir.is_dir():
        return []

    sessions: list[SessionSummary] = []
    for project_dir in _project_dirs(projects_dir):
        index = read_json_file(project_dir / CLAUDE_SESSIONS_INDEX_NAME)
        if not isinstance(index, dict) or not isinstance(index.get('entries'), list):
            continue

        for entry in index['entries']:
            if not isinstance(entry, dict):
                continue
            summary = _summary_from_entry(entry, index, project_dir)
            if summary is not None:
                sessions.append(summary)
            if len(sessions) >= max_sessions:
                return sessions

    return sessions
