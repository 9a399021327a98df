"""Leading-message filtering.

Every session log opens with text the tool injected (system prompts,
AGENTS.md instructions, environment context). Titles and message counts
must start at the first message the user actually wrote.
"""

from ..config import BOOTSTRAP_TEXT_MARKERS
from ..types import SessionMessage
from ..utils import normalize_whitespace


def is_bootstrap_like_text(text) -> bool:
    """Check whether text matches a known tool-injected instruction marker."""
    if not text or not isinstance(text, str):
        return False

    normalized = normalize_whitespace(text).lower()
    if not normalized:
        return False

    return any(marker in normalized for marker in BOOTSTRAP_TEXT_MARKERS)


def _is_preamble(message) -> bool:
    if not isinstance(message, dict):
        return True
    return message.get('role') == 'system' or is_bootstrap_like_text(message.get('text'))


def remove_leading_system_messages(messages: list[SessionMessage]) -> list[SessionMessage]:
    """Drop the leading run of system or bootstrap-like messages.

    The scan stops at the first message that is neither; everything from
    there on is returned in its original order.
    """
    if not messages:
        return []

    start_index = 0
    while start_index < len(messages) and _is_preamble(messages[start_index]):
        start_index += 1

    return list(messages[start_index:])
