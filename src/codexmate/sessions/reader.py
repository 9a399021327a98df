"""Full-file session reading for the detail view and Markdown export.

Unlike summaries, the reader streams the entire file so deep pages and
exports see every message, up to MAX_EXPORT_MESSAGES.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..config import (
    DEFAULT_SESSION_DETAIL_MESSAGES,
    MAX_EXPORT_MESSAGES,
    MAX_SESSION_DETAIL_MESSAGES,
    STREAM_YIELD_EVERY_LINES,
)
from ..errors import EmptySessionError, SessionIOError
from ..types import SessionDetail, SessionExport, SessionMessage
from ..utils import parse_jsonl_line, safe_file_component, safe_get_nested, to_iso_time
from .filters import remove_leading_system_messages
from .formats import LogFormat
from .records import message_from_record, parse_jsonl_content
from .summary import session_id_from_path

logger = logging.getLogger('codexmate.sessions')


@dataclass
class ExtractedSession:
    """State accumulated while reading a session file."""
    session_id: str = ''
    cwd: str = ''
    updated_at: str = ''
    messages: list[SessionMessage] = field(default_factory=list)
    record_count: int = 0


def apply_record(record: dict, fmt: LogFormat, state: ExtractedSession, max_messages: int) -> None:
    """Fold one parsed record into ``state``."""
    state.record_count += 1

    if record.get('timestamp'):
        state.updated_at = to_iso_time(record['timestamp'], state.updated_at)

    if fmt is LogFormat.CODEX:
        if record.get('type') == 'session_meta' and isinstance(record.get('payload'), dict):
            payload = record['payload']
            state.session_id = str(payload.get('id') or state.session_id)
            state.cwd = str(payload.get('cwd') or state.cwd)
            return
    else:
        if not state.session_id:
            session_id = safe_get_nested(record, 'sessionId', default='')
            if isinstance(session_id, str):
                state.session_id = session_id
        if not state.cwd and isinstance(record.get('cwd'), str):
            state.cwd = record['cwd']

    message = message_from_record(record, fmt)
    if message is not None and message['text'] and len(state.messages) < max_messages:
        state.messages.append(message)


def extract_messages_from_records(
    records: list[dict],
    fmt: LogFormat,
    max_messages: int = MAX_EXPORT_MESSAGES,
) -> ExtractedSession:
    """Extract session state from already-parsed records."""
    state = ExtractedSession()
    for record in records:
        apply_record(record, fmt, state, max_messages)
        if len(state.messages) >= max_messages:
            break
    return state


def _read_full_buffer(file_path: Path, fmt: LogFormat, max_messages: int) -> ExtractedSession:
    try:
        content = file_path.read_bytes().decode('utf-8', errors='replace')
    except OSError as e:
        raise SessionIOError(f"Failed to read session: {e}") from e
    return extract_messages_from_records(parse_jsonl_content(content), fmt, max_messages)


async def extract_messages_from_file(
    file_path: Path,
    fmt: LogFormat,
    max_messages: int = MAX_EXPORT_MESSAGES,
) -> ExtractedSession:
    """Stream a session file line by line and extract its messages.

    Control returns to the event loop every STREAM_YIELD_EVERY_LINES lines.
    If streaming fails part way (I/O or decoding error) the file is read
    again in one piece, with undecodable bytes replaced.
    """
    file_path = Path(file_path)
    state = ExtractedSession()
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            for line_number, line in enumerate(f, 1):
                if line_number % STREAM_YIELD_EVERY_LINES == 0:
                    await asyncio.sleep(0)
                if not line.strip():
                    continue
                record = parse_jsonl_line(line)
                if record is None:
                    continue
                apply_record(record, fmt, state, max_messages)
                if len(state.messages) >= max_messages:
                    break
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Streaming %s failed (%s), falling back to a full read", file_path, e)
        return _read_full_buffer(file_path, fmt, max_messages)

    return state


async def _extract_non_empty(file_path: Path, fmt: LogFormat) -> ExtractedSession:
    extracted = await extract_messages_from_file(file_path, fmt)
    if extracted.record_count == 0:
        raise EmptySessionError()
    extracted.messages = remove_leading_system_messages(extracted.messages)
    return extracted


def clamp_message_limit(value) -> int:
    """Detail page size bounded to [1, MAX_SESSION_DETAIL_MESSAGES]."""
    if isinstance(value, bool):
        return DEFAULT_SESSION_DETAIL_MESSAGES
    try:
        limit = int(value)
    except (TypeError, ValueError):
        return DEFAULT_SESSION_DETAIL_MESSAGES
    return max(1, min(limit, MAX_SESSION_DETAIL_MESSAGES))


async def read_session_detail(
    file_path: Path,
    fmt: LogFormat,
    message_limit=None,
    session_id_hint: str = '',
) -> SessionDetail:
    """The most recent ``message_limit`` messages of a session."""
    limit = clamp_message_limit(message_limit)
    extracted = await _extract_non_empty(file_path, fmt)

    all_messages = extracted.messages
    clipped_messages = all_messages[max(0, len(all_messages) - limit):]

    return {
        'source': fmt.value,
        'sourceLabel': fmt.label,
        'sessionId': extracted.session_id or session_id_hint or session_id_from_path(file_path),
        'cwd': extracted.cwd,
        'updatedAt': extracted.updated_at,
        'totalMessages': len(all_messages),
        'clipped': len(clipped_messages) < len(all_messages),
        'messageLimit': limit,
        'messages': clipped_messages,
        'filePath': str(file_path),
    }


def role_label(role: str) -> str:
    return {'assistant': 'Assistant', 'system': 'System'}.get(role, 'User')


def build_session_markdown(
    source_label: str,
    session_id: str,
    updated_at: str,
    cwd: str,
    file_path: str,
    messages: list[SessionMessage],
) -> str:
    """Render a session as a Markdown document."""
    lines = [
        '# AI Session Export',
        '',
        f'- Source: {source_label}',
        f'- Session ID: {session_id}',
        f'- Updated At: {updated_at or "unknown"}',
        f'- Working Directory: {cwd or "unknown"}',
        f'- Original File: {file_path}',
        '',
        '## Messages',
        '',
    ]

    if not messages:
        lines.append('(no user/assistant messages found)')
        lines.append('')
        return '\n'.join(lines)

    for index, message in enumerate(messages, 1):
        time_info = f" · {message['timestamp']}" if message.get('timestamp') else ''
        lines.append(f"### {index}. {role_label(message.get('role', ''))}{time_info}")
        lines.append('')
        lines.append(message.get('text') or '(empty message)')
        lines.append('')

    return '\n'.join(lines)


async def export_session_markdown(
    file_path: Path,
    fmt: LogFormat,
    session_id_hint: str = '',
) -> SessionExport:
    """Markdown export of a whole session plus a suggested file name."""
    extracted = await _extract_non_empty(file_path, fmt)
    session_id = extracted.session_id or session_id_hint or session_id_from_path(file_path)

    content = build_session_markdown(
        source_label=fmt.label,
        session_id=session_id,
        updated_at=extracted.updated_at,
        cwd=extracted.cwd,
        file_path=str(file_path),
        messages=extracted.messages,
    )

    return {
        'source': fmt.value,
        'sourceLabel': fmt.label,
        'sessionId': session_id,
        'fileName': f"{fmt.value}-session-{safe_file_component(session_id)}.md",
        'content': content,
    }
