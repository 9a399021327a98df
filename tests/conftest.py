"""Shared fixtures: fake Codex and Claude Code log trees under tmp_path."""

import json
from pathlib import Path

import pytest

from src.codexmate.sessions import LogFormat, SessionService


def codex_meta(session_id='abc', cwd='/tmp', timestamp='2024-05-01T10:00:00Z'):
    return {'type': 'session_meta', 'timestamp': timestamp,
            'payload': {'id': session_id, 'cwd': cwd, 'timestamp': timestamp}}


def codex_message(role, content, timestamp=None):
    record = {'type': 'response_item', 'payload': {'type': 'message', 'role': role, 'content': content}}
    if timestamp:
        record['timestamp'] = timestamp
    return record


def claude_message(role, content, timestamp=None, cwd='/work/project', session_id='claude-1'):
    record = {'type': role, 'sessionId': session_id, 'cwd': cwd, 'message': {'role': role, 'content': content}}
    if timestamp:
        record['timestamp'] = timestamp
    return record


def write_jsonl(path: Path, records, extra_lines=()) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = [json.dumps(r) for r in records] + list(extra_lines)
    path.write_text('\n'.join(lines) + '\n', encoding='utf-8')
    return path


@pytest.fixture
def codex_root(tmp_path):
    root = tmp_path / '.codex' / 'sessions'
    root.mkdir(parents=True)
    return root


@pytest.fixture
def claude_root(tmp_path):
    root = tmp_path / '.claude' / 'projects'
    root.mkdir(parents=True)
    return root


@pytest.fixture
def service(codex_root, claude_root):
    return SessionService(roots={LogFormat.CODEX: codex_root, LogFormat.CLAUDE: claude_root})


@pytest.fixture
def codex_session(codex_root):
    """A Codex rollout with a preamble, two exchanges and a corrupt line."""
    return write_jsonl(
        codex_root / '2024' / '05' / '01' / 'rollout-2024-05-01-abc.jsonl',
        [
            codex_meta(),
            codex_message('user', [{'type': 'input_text', 'text': '<environment_context>cwd</environment_context>'}],
                          '2024-05-01T10:00:01Z'),
            codex_message('user', 'Fix bug', '2024-05-01T10:00:02Z'),
            codex_message('assistant', [{'type': 'output_text', 'text': 'Done'}], '2024-05-01T10:00:03Z'),
        ],
        extra_lines=['{not json'],
    )


@pytest.fixture
def claude_session(claude_root):
    """A Claude Code session with one exchange."""
    return write_jsonl(
        claude_root / '-work-project' / 'claude-1.jsonl',
        [
            claude_message('user', 'Add a test', '2024-06-01T09:00:00Z'),
            claude_message('assistant', [{'type': 'text', 'text': 'Added   the\ntest'}], '2024-06-01T09:00:05Z'),
        ],
    )
