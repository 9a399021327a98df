"""Type definitions for codexmate.

TypedDict definitions documenting the JSON shapes returned by the
session service, the HTTP API and the CLI's ``--json`` output.
"""

from typing import TypedDict
from typing_extensions import NotRequired


class SessionMessage(TypedDict):
    """A normalized message from a session log."""
    role: str  # 'user', 'assistant', 'system'
    text: str
    timestamp: NotRequired[str]


class SessionSummary(TypedDict):
    """Lightweight session entry used by the list view."""
    source: str  # 'codex', 'claude'
    sourceLabel: str
    sessionId: str
    title: str
    cwd: str
    createdAt: str
    updatedAt: str
    messageCount: int
    filePath: str


class SessionDetail(TypedDict):
    """Paginated view of a single session."""
    source: str
    sourceLabel: str
    sessionId: str
    cwd: str
    updatedAt: str
    totalMessages: int
    clipped: bool
    messageLimit: int
    messages: list[SessionMessage]
    filePath: str


class SessionExport(TypedDict):
    """Markdown export of a single session."""
    source: str
    sourceLabel: str
    sessionId: str
    fileName: str
    content: str


class DeleteResult(TypedDict):
    """Result of deleting one session file."""
    success: bool
    source: str
    sessionId: str
    filePath: str


class BatchDeleteItemResult(TypedDict):
    """Per-item outcome of a batch delete."""
    success: bool
    source: str
    sessionId: str
    filePath: str
    error: NotRequired[str]


class BatchDeleteResult(TypedDict):
    """Aggregate outcome of a batch delete."""
    success: bool
    total: int
    deleted: int
    failed: int
    results: list[BatchDeleteItemResult]
