"""Session log families known to codexmate."""

from enum import Enum
from pathlib import Path

from .. import config


class LogFormat(str, Enum):
    """Which tool produced a session log.

    CODEX logs wrap messages in ``response_item`` records and carry identity
    in a ``session_meta`` record. CLAUDE logs name the role in the record's
    own ``type`` field.
    """

    CODEX = 'codex'
    CLAUDE = 'claude'

    @property
    def label(self) -> str:
        return SOURCE_LABELS[self]


SOURCE_LABELS = {
    LogFormat.CODEX: 'Codex',
    LogFormat.CLAUDE: 'Claude Code',
}

# Accepted values for a list request's source filter
SOURCE_FILTER_ALL = 'all'


def parse_log_format(value) -> LogFormat | None:
    """Map a caller-supplied source name to a LogFormat, or None."""
    if isinstance(value, LogFormat):
        return value
    if not isinstance(value, str):
        return None
    try:
        return LogFormat(value.strip().lower())
    except ValueError:
        return None


def normalize_source_filter(value) -> str:
    """Return 'codex', 'claude' or 'all' for a list request."""
    fmt = parse_log_format(value)
    return fmt.value if fmt else SOURCE_FILTER_ALL


def default_roots() -> dict[LogFormat, Path]:
    """Log root directory per family, from configuration."""
    return {
        LogFormat.CODEX: config.CODEX_SESSIONS_DIR,
        LogFormat.CLAUDE: config.CLAUDE_PROJECTS_DIR,
    }
