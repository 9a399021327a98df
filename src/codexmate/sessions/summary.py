"""Session summary extraction from the head of a log file.

Summaries only read a bounded prefix of each file so that listing
hundreds of large sessions stays fast. ``messageCount`` and ``updatedAt``
therefore describe the head region only; the detail reader corrects
them by streaming the whole file.
"""

import logging
from pathlib import Path

from ..config import (
    SESSION_FILE_EXTENSION,
    SESSION_SUMMARY_READ_BYTES,
    SESSION_TITLE_READ_BYTES,
    TITLE_MAX_LENGTH,
)
from ..types import SessionMessage, SessionSummary
from ..utils import mtime_to_iso, to_iso_time, truncate_text
from .filters import remove_leading_system_messages
from .formats import LogFormat
from .records import message_from_record, messages_from_records, parse_head_records

logger = logging.getLogger('codexmate.sessions')


def session_id_from_path(file_path: Path) -> str:
    """Session id implied by a log file name."""
    name = Path(file_path).name
    if name.endswith(SESSION_FILE_EXTENSION):
        return name[:-len(SESSION_FILE_EXTENSION)]
    return Path(file_path).stem


def first_user_title(messages: list[SessionMessage], max_length: int = TITLE_MAX_LENGTH) -> str:
    """Truncated text of the first user message with any text, or ''."""
    for message in messages:
        if message.get('role') == 'user' and message.get('text'):
            return truncate_text(message['text'], max_length)
    return ''


def find_title_in_head(
    file_path: Path,
    fmt: LogFormat,
    max_bytes: int = SESSION_TITLE_READ_BYTES,
    max_length: int = TITLE_MAX_LENGTH,
) -> str:
    """Search a (larger) head read for a title line only."""
    records = parse_head_records(file_path, max_bytes)
    messages = remove_leading_system_messages(messages_from_records(records, fmt))
    return first_user_title(messages, max_length)


def count_conversation_messages(records: list[dict], fmt: LogFormat) -> int:
    """Number of messages left after leading-message filtering."""
    return len(remove_leading_system_messages(messages_from_records(records, fmt)))


def parse_session_summary(
    file_path: Path,
    fmt: LogFormat,
    head_bytes: int = SESSION_SUMMARY_READ_BYTES,
    title_bytes: int = SESSION_TITLE_READ_BYTES,
) -> SessionSummary | None:
    """Build a summary from the head of a session file.

    Returns None when no record in the head parses, or when the file
    vanished before its mtime could be read.
    """
    file_path = Path(file_path)
    records = parse_head_records(file_path, head_bytes)
    if not records:
        return None

    try:
        updated_at = mtime_to_iso(file_path)
    except OSError as e:
        logger.debug("Session file %s disappeared during scan: %s", file_path, e)
        return None

    session_id = session_id_from_path(file_path)
    cwd = ''
    created_at = ''
    preview: list[SessionMessage] = []

    for record in records:
        timestamp = record.get('timestamp')
        if timestamp:
            updated_at = to_iso_time(timestamp, updated_at)

        if fmt is LogFormat.CODEX:
            if record.get('type') == 'session_meta' and isinstance(record.get('payload'), dict):
                payload = record['payload']
                session_id = str(payload.get('id') or session_id)
                cwd = str(payload.get('cwd') or cwd)
                created_at = to_iso_time(payload.get('timestamp') or timestamp, created_at)
                continue
        else:
            if not created_at and timestamp:
                created_at = to_iso_time(timestamp, created_at)
            if not cwd and isinstance(record.get('cwd'), str):
                cwd = record['cwd']

        message = message_from_record(record, fmt)
        if message is not None:
            preview.append(message)

    filtered = remove_leading_system_messages(preview)
    title = first_user_title(filtered)
    if not title and title_bytes > head_bytes:
        title = find_title_in_head(file_path, fmt, title_bytes)

    return {
        'source': fmt.value,
        'sourceLabel': fmt.label,
        'sessionId': session_id,
        'title': title or session_id,
        'cwd': cwd,
        'createdAt': created_at,
        'updatedAt': updated_at,
        'messageCount': len(filtered),
        'filePath': str(file_path),
    }
