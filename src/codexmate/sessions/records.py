"""JSONL record parsing for Codex and Claude Code session logs.

Parsing is best-effort per line: a corrupt or truncated line is dropped
and the rest of the file is still used. This is what lets a head read
cut a file at an arbitrary byte offset.
"""

import logging
from pathlib import Path
from typing import Any

from ..config import SESSION_SUMMARY_READ_BYTES
from ..types import SessionMessage
from ..utils import normalize_whitespace, parse_jsonl_line, safe_get_nested, to_iso_time
from .formats import LogFormat

logger = logging.getLogger('codexmate.sessions')

MESSAGE_ROLES = ('user', 'assistant', 'system')

# Guard against pathological nesting in content values
MAX_CONTENT_DEPTH = 64


def parse_jsonl_content(content: str) -> list[dict]:
    """Parse newline-delimited JSON into records, skipping bad lines."""
    if not content:
        return []

    records = []
    for line in content.split('\n'):
        if not line.strip():
            continue
        record = parse_jsonl_line(line)
        if record is not None:
            records.append(record)
    return records


def read_head_text(file_path: Path, max_bytes: int = SESSION_SUMMARY_READ_BYTES) -> str:
    """Read at most ``max_bytes`` from the start of a file as text.

    A multi-byte character cut at the boundary is dropped; the partial
    last line then fails to parse and is skipped.
    """
    try:
        with open(file_path, 'rb') as f:
            data = f.read(max_bytes)
    except OSError as e:
        logger.debug("Cannot read head of %s: %s", file_path, e)
        return ''
    return data.decode('utf-8', errors='ignore')


def parse_head_records(file_path: Path, max_bytes: int = SESSION_SUMMARY_READ_BYTES) -> list[dict]:
    """Records found in the first ``max_bytes`` of a file."""
    return parse_jsonl_content(read_head_text(file_path, max_bytes))


def normalize_role(value: Any) -> str:
    """Lower-cased role name, or '' for anything but user/assistant/system."""
    if not isinstance(value, str):
        return ''
    role = value.strip().lower()
    return role if role in MESSAGE_ROLES else ''


def extract_message_text(content: Any, _depth: int = 0) -> str:
    """Extract plain text from a message content value.

    Strings are trimmed, lists are flattened and joined with newlines,
    objects are searched for ``text``, ``value``, a nested ``content``
    and ``output`` in that order. Anything else yields ''.
    """
    if _depth > MAX_CONTENT_DEPTH:
        return ''

    if isinstance(content, str):
        return content.strip()

    if isinstance(content, list):
        parts = [extract_message_text(item, _depth + 1) for item in content]
        return '\n'.join(part for part in parts if part).strip()

    if not isinstance(content, dict):
        return ''

    if isinstance(content.get('text'), str):
        return content['text'].strip()
    if isinstance(content.get('value'), str):
        return content['value'].strip()
    if content.get('content') is not None:
        return extract_message_text(content['content'], _depth + 1)
    if isinstance(content.get('output'), str):
        return content['output'].strip()
    return ''


def message_from_record(record: dict, fmt: LogFormat) -> SessionMessage | None:
    """Build a normalized message from one record, or None if it is not one.

    The returned text may be empty; callers decide whether to keep it.
    """
    if fmt is LogFormat.CODEX:
        if record.get('type') != 'response_item':
            return None
        payload = record.get('payload')
        if not isinstance(payload, dict) or payload.get('type') != 'message':
            return None
        role = normalize_role(payload.get('role'))
        content = payload.get('content')
    else:
        role = normalize_role(record.get('type'))
        content = safe_get_nested(record, 'message', 'content', default='')

    if not role:
        return None

    return {
        'role': role,
        'text': normalize_whitespace(extract_message_text(content)),
        'timestamp': to_iso_time(record.get('timestamp'), ''),
    }


def messages_from_records(records: list[dict], fmt: LogFormat) -> list[SessionMessage]:
    """All messages found in ``records``, in file order."""
    messages = []
    for record in records:
        message = message_from_record(record, fmt)
        if message is not None:
            messages.append(message)
    return messages
