"""Shared utilities for codexmate.

Small helpers used across the session parser, reader and scanner:
JSON line parsing, timestamp normalization, text shaping and path checks.
"""

import json
import logging
import os
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r'\s+')
_UNSAFE_FILENAME_RE = re.compile(r'[^a-zA-Z0-9_-]')


def parse_jsonl_line(line: str | bytes) -> dict[str, Any] | None:
    """Safely parse a single JSONL line.

    Args:
        line: A line from a JSONL file (string or bytes)

    Returns:
        Parsed JSON object, or None if the line is not a JSON object
    """
    try:
        if isinstance(line, bytes):
            line = line.decode('utf-8')
        data = json.loads(line.strip())
    except (ValueError, RecursionError):
        # JSONDecodeError and UnicodeDecodeError are ValueErrors; deep nesting recurses
        return None
    return data if isinstance(data, dict) else None


def safe_get_nested(data: dict, *keys: str, default: Any = None) -> Any:
    """Safely get a nested value from a dictionary.

    Args:
        data: The dictionary to search
        *keys: The nested keys to follow
        default: Default value if key path not found

    Returns:
        The nested value or default

    Example:
        safe_get_nested({'a': {'b': 1}}, 'a', 'b') -> 1
        safe_get_nested({'a': {}}, 'a', 'b', default=0) -> 0
    """
    result = data
    for key in keys:
        if isinstance(result, dict):
            result = result.get(key, default)
        else:
            return default
    return result


def _coerce_datetime(value: Any) -> datetime | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)):
        # Numeric timestamps are epoch milliseconds
        try:
            dt = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str) and value.strip():
        try:
            dt = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def to_iso_time(value: Any, fallback: str = '') -> str:
    """Normalize a timestamp to ISO-8601 UTC with millisecond precision.

    Returns ``fallback`` when the value is missing or unparsable.
    """
    dt = _coerce_datetime(value)
    if dt is None:
        return fallback
    try:
        iso = dt.astimezone(timezone.utc).isoformat(timespec='milliseconds')
    except (OverflowError, ValueError):
        return fallback
    return iso.replace('+00:00', 'Z')


def timestamp_to_epoch(value: Any) -> float:
    """Seconds since the epoch, or 0.0 for missing/unparsable timestamps."""
    dt = _coerce_datetime(value)
    if dt is None:
        return 0.0
    try:
        return dt.timestamp()
    except (OverflowError, ValueError, OSError):
        return 0.0


def mtime_to_iso(path: Path) -> str:
    """ISO timestamp of a file's modification time."""
    mtime = path.stat().st_mtime
    return to_iso_time(datetime.fromtimestamp(mtime, tz=timezone.utc))


def normalize_whitespace(text: str) -> str:
    """Collapse runs of whitespace into single spaces and trim."""
    if not text:
        return ''
    return _WHITESPACE_RE.sub(' ', str(text)).strip()


def truncate_text(text: str, max_length: int = 90) -> str:
    """Whitespace-normalized text cut to ``max_length`` with an ellipsis."""
    normalized = normalize_whitespace(text)
    if len(normalized) <= max_length:
        return normalized
    return normalized[:max_length - 1] + '…'


def safe_file_component(value: str) -> str:
    """Replace characters that are unsafe in file names with underscores."""
    return _UNSAFE_FILENAME_RE.sub('_', str(value))


def is_path_inside(target: Path | str, root: Path | str) -> bool:
    """Check that ``target`` resolves to ``root`` or a path beneath it."""
    resolved_target = os.path.normcase(str(Path(target).resolve()))
    resolved_root = os.path.normcase(str(Path(root).resolve()))
    if resolved_target == resolved_root:
        return True
    root_with_sep = resolved_root if resolved_root.endswith(os.sep) else resolved_root + os.sep
    return resolved_target.startswith(root_with_sep)
