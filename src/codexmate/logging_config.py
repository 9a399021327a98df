"""Structured logging configuration for codexmate.

This module provides:
- LogBufferHandler keeping recent records for the /api/logs endpoint
- Namespace-based logging for filtering
- Runtime log level adjustment
"""

import logging
import os
import sys
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


# Log namespaces for filtering
NAMESPACES = {
    'sessions': 'Session Reader',
    'scan': 'Session Scanner',
    'cache': 'Session List Cache',
    'api': 'API Routes',
    'cli': 'Command Line',
}


@dataclass
class LogEntry:
    """Structured log entry kept in the history buffer."""
    timestamp: str
    level: str
    namespace: str
    message: str

    def to_dict(self) -> dict:
        return {
            'timestamp': self.timestamp,
            'level': self.level,
            'namespace': self.namespace,
            'message': self.message,
        }


class LogBufferHandler(logging.Handler):
    """Handler that keeps the most recent log entries in memory."""

    def __init__(self, buffer_size: int = 500):
        super().__init__()
        self.buffer_size = buffer_size
        self.buffer: deque[LogEntry] = deque(maxlen=buffer_size)
        self.enabled = True

    def emit(self, record: logging.LogRecord):
        if not self.enabled:
            return

        try:
            # Extract namespace from logger name (e.g., 'codexmate.scan' -> 'scan')
            namespace = 'general'
            if record.name.startswith('codexmate.'):
                namespace = record.name.split('.')[1]

            self.buffer.append(LogEntry(
                timestamp=datetime.now(timezone.utc).isoformat(),
                level=record.levelname,
                namespace=namespace,
                message=self.format(record),
            ))
        except Exception:
            self.handleError(record)

    def get_history(self, count: int = 100) -> list[dict]:
        """Get recent log entries from buffer."""
        if count <= 0:
            return []
        entries = list(self.buffer)[-count:]
        return [e.to_dict() for e in entries]

    def clear_buffer(self):
        """Clear the log buffer."""
        self.buffer.clear()


# Global buffer handler instance
_log_buffer_handler: Optional[LogBufferHandler] = None


def get_log_buffer_handler() -> LogBufferHandler:
    """Get or create the global log buffer handler."""
    global _log_buffer_handler
    if _log_buffer_handler is None:
        buffer_size = int(os.environ.get('CODEXMATE_LOG_BUFFER_SIZE', '500'))
        _log_buffer_handler = LogBufferHandler(buffer_size=buffer_size)
        _log_buffer_handler.setFormatter(logging.Formatter('%(message)s'))
    return _log_buffer_handler


def _get_log_level_from_env() -> int:
    """Get log level from environment variable."""
    env_level = os.environ.get('CODEXMATE_LOG_LEVEL', 'INFO').upper()
    return getattr(logging, env_level, logging.INFO)


def setup_logging(
    level: Optional[int] = None,
    log_format: Optional[str] = None,
) -> None:
    """
    Configure structured logging for the application.

    Args:
        level: Logging level (default: from CODEXMATE_LOG_LEVEL env var or INFO)
        log_format: Custom format string (default: timestamp - name - level - message)
    """
    log_level = level if level is not None else _get_log_level_from_env()

    if log_format is None:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(log_format))
    root_logger.addHandler(console_handler)

    if os.environ.get('CODEXMATE_LOG_BUFFER', 'true').lower() == 'true':
        buffer_handler = get_log_buffer_handler()
        buffer_handler.setLevel(log_level)
        root_logger.addHandler(buffer_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    for namespace in NAMESPACES:
        logging.getLogger(f'codexmate.{namespace}').setLevel(log_level)


def set_log_level(level: str | int) -> int:
    """
    Set log level at runtime.

    Args:
        level: Level name ('DEBUG', 'INFO', etc.) or logging constant

    Returns:
        The numeric level that was applied
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logging.getLogger().setLevel(level)

    for namespace in NAMESPACES:
        logging.getLogger(f'codexmate.{namespace}').setLevel(level)

    for handler in logging.getLogger().handlers:
        handler.setLevel(level)

    return level


def get_logger(name: str, namespace: Optional[str] = None) -> logging.Logger:
    """
    Get a logger with the given name.

    Args:
        name: Logger name (typically __name__)
        namespace: Optional namespace (sessions, scan, cache, api, cli)

    Returns:
        Configured logger instance
    """
    if namespace and namespace in NAMESPACES:
        return logging.getLogger(f'codexmate.{namespace}')
    return logging.getLogger(name)
