"""Configuration module for codexmate.

Centralizes all configuration constants and environment variables
used by the session scanner, the list cache, the reader and the server.
"""

import os
from pathlib import Path

# ============================================================================
# Path Configuration
# ============================================================================

# Codex CLI home; rollout logs live under sessions/YYYY/MM/DD/*.jsonl
CODEX_HOME = Path(os.getenv("CODEX_HOME", str(Path.home() / ".codex")))
CODEX_SESSIONS_DIR = CODEX_HOME / "sessions"

# Claude Code config dir; one folder per project under projects/
CLAUDE_CONFIG_DIR = Path(os.getenv("CLAUDE_CONFIG_DIR", str(Path.home() / ".claude")))
CLAUDE_PROJECTS_DIR = CLAUDE_CONFIG_DIR / "projects"

# Per-project index written by Claude Code next to the session files
CLAUDE_SESSIONS_INDEX_NAME = "sessions-index.json"

# Both tools write newline-delimited JSON
SESSION_FILE_EXTENSION = ".jsonl"

# Sub-agent transcripts are noise in the session list
CLAUDE_IGNORED_SUBPATH = f"{os.sep}subagents{os.sep}"


# ============================================================================
# Session List Limits
# ============================================================================

MAX_SESSION_LIST_SIZE = 300
DEFAULT_SESSION_LIST_SIZE = 120

# Collect this many summaries per requested entry before merging
SESSION_SCAN_FACTOR = 4

# Lower bound on the number of files examined per scan
SESSION_SCAN_MIN_FILES = 800

# Upper bound on files walked when looking a session up by id
SESSION_LOOKUP_MAX_FILES = 5000


# ============================================================================
# Read Sizes (bytes)
# ============================================================================

# Head read used for list summaries
SESSION_SUMMARY_READ_BYTES = 256 * 1024

# Larger head read used only to search further for a title line
SESSION_TITLE_READ_BYTES = 1024 * 1024

# Quick head read used to refine index-provided Claude entries
SESSION_INDEX_QUICK_READ_BYTES = 64 * 1024


# ============================================================================
# Detail / Export Limits
# ============================================================================

MAX_EXPORT_MESSAGES = 1000
DEFAULT_SESSION_DETAIL_MESSAGES = 300
MAX_SESSION_DETAIL_MESSAGES = 1000
MAX_BATCH_DELETE_SESSIONS = 500

# Yield to the event loop every N lines while streaming a session file
STREAM_YIELD_EVERY_LINES = 200


# ============================================================================
# Cache Settings
# ============================================================================

# How long a session list stays valid (seconds)
SESSION_LIST_CACHE_TTL = 4.0

# Oldest entry is evicted beyond this many keys
SESSION_LIST_CACHE_MAX_ENTRIES = 20


# ============================================================================
# Title / Preview Configuration
# ============================================================================

TITLE_MAX_LENGTH = 90
INDEX_TITLE_MAX_LENGTH = 120

# Lower-cased markers of tool-injected instructions and environment context
BOOTSTRAP_TEXT_MARKERS = (
    'agents.md instructions',
    '<instructions>',
    '<environment_context>',
    'you are a coding agent',
    'codex cli',
)


# ============================================================================
# Server Configuration
# ============================================================================

DEFAULT_HOST = os.getenv("CODEXMATE_HOST", "127.0.0.1")
DEFAULT_PORT = int(os.getenv("CODEXMATE_PORT", "3737"))
