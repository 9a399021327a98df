"""Tests for the Claude Code sessions-index fast path."""

import json

from conftest import claude_message, write_jsonl
from src.codexmate.sessions.claude_index import read_json_file, summaries_from_claude_index


def write_index(project_dir, entries, **extra):
    project_dir.mkdir(parents=True, exist_ok=True)
    data = {'version': 1, 'entries': entries, **extra}
    (project_dir / 'sessions-index.json').write_text(json.dumps(data), encoding='utf-8')


class TestReadJsonFile:
    """Tests for read_json_file function."""

    def test_missing_returns_fallback(self, tmp_path):
        assert read_json_file(tmp_path / 'nope.json', {}) == {}

    def test_invalid_returns_fallback(self, tmp_path):
        path = tmp_path / 'bad.json'
        path.write_text('{oops', encoding='utf-8')
        assert read_json_file(path, 'fallback') == 'fallback'

    def test_valid(self, tmp_path):
        path = tmp_path / 'ok.json'
        path.write_text('{"a": 1}', encoding='utf-8')
        assert read_json_file(path) == {'a': 1}


class TestSummariesFromClaudeIndex:
    """Tests for summaries_from_claude_index function."""

    def test_entry_refined_by_head_read(self, claude_root, claude_session):
        """Test head-read title and count replace the index values."""
        write_index(claude_session.parent, [{
            'sessionId': 'claude-1',
            'summary': 'Index summary',
            'messageCount': 7,
            'modified': '2024-06-02T00:00:00Z',
            'projectPath': '/work/project',
        }])

        sessions = summaries_from_claude_index(claude_root, 10)

        assert len(sessions) == 1
        summary = sessions[0]
        assert summary['source'] == 'claude'
        assert summary['sessionId'] == 'claude-1'
        assert summary['title'] == 'Add a test'
        assert summary['messageCount'] == 2
        assert summary['updatedAt'] == '2024-06-02T00:00:00.000Z'
        assert summary['cwd'] == '/work/project'
        assert summary['filePath'] == str(claude_session)

    def test_index_values_kept_without_messages(self, claude_root):
        """Test index title and count survive when the head has no messages."""
        project = claude_root / '-repo'
        write_jsonl(project / 's-2.jsonl', [{'type': 'summary', 'summary': 'x'}])
        write_index(project, [{'sessionId': 's-2', 'firstPrompt': 'From index', 'messageCount': 5}],
                    originalPath='/repo')

        summary = summaries_from_claude_index(claude_root, 10)[0]

        assert summary['title'] == 'From index'
        assert summary['messageCount'] == 5
        assert summary['cwd'] == '/repo'
        assert summary['updatedAt'].endswith('Z')

    def test_full_path_entry(self, claude_root, tmp_path):
        session = write_jsonl(tmp_path / 'elsewhere' / 'x.jsonl', [claude_message('user', 'hi')])
        write_index(claude_root / '-p', [{'sessionId': 'x', 'fullPath': str(session)}])

        assert summaries_from_claude_index(claude_root, 10)[0]['filePath'] == str(session)

    def test_missing_files_and_bad_entries_skipped(self, claude_root):
        write_index(claude_root / '-p', [
            {'sessionId': 'gone'},
            {'summary': 'no id'},
            'not-a-dict',
        ])
        assert summaries_from_claude_index(claude_root, 10) == []

    def test_stops_at_max_sessions(self, claude_root):
        project = claude_root / '-p'
        for i in range(5):
            write_jsonl(project / f's{i}.jsonl', [claude_message('user', f'q{i}')])
        write_index(project, [{'sessionId': f's{i}'} for i in range(5)])

        assert len(summaries_from_claude_index(claude_root, 3)) == 3

    def test_corrupt_index_ignored(self, claude_root):
        project = claude_root / '-p'
        project.mkdir()
        (project / 'sessions-index.json').write_text('[', encoding='utf-8')
        assert summaries_from_claude_index(claude_root, 10) == []

    def test_missing_root(self, tmp_path):
        assert summaries_from_claude_index(tmp_path / 'none', 10) == []
