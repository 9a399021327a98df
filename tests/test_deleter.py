"""Tests for session file deletion."""

from unittest.mock import patch

import pytest

from conftest import claude_message, write_jsonl
from src.codexmate.errors import InvalidSessionError, SessionIOError, SessionNotFoundError
from src.codexmate.sessions.cache import SessionCache
from src.codexmate.sessions.deleter import delete_session_file, delete_session_files_batch
from src.codexmate.sessions.formats import LogFormat


@pytest.fixture
def cache():
    cache = SessionCache()
    cache.set('all:120', ['stale'])
    return cache


@pytest.fixture
def roots(codex_root, claude_root):
    return {LogFormat.CODEX: codex_root, LogFormat.CLAUDE: claude_root}


class TestDeleteSessionFile:
    """Tests for delete_session_file function."""

    def test_deletes_by_path_and_invalidates(self, codex_root, codex_session, cache):
        result = delete_session_file(LogFormat.CODEX, codex_root, file_path=str(codex_session), cache=cache)

        assert result['success'] is True
        assert result['source'] == 'codex'
        assert result['sessionId'] == 'rollout-2024-05-01-abc'
        assert not codex_session.exists()
        assert len(cache) == 0

    def test_deletes_by_session_id(self, claude_root, claude_session):
        result = delete_session_file(LogFormat.CLAUDE, claude_root, session_id='claude-1')

        assert result['sessionId'] == 'claude-1'
        assert not claude_session.exists()

    def test_outside_root_not_found(self, codex_root, tmp_path, cache):
        """Test files outside the log root are never deleted."""
        outside = write_jsonl(tmp_path / 'outside.jsonl', [{'type': 'x'}])

        with pytest.raises(SessionNotFoundError):
            delete_session_file(LogFormat.CODEX, codex_root, file_path=str(outside), cache=cache)

        assert outside.exists()
        assert len(cache) == 1

    def test_wrong_extension_invalid(self, codex_root):
        notes = codex_root / 'notes.txt'
        notes.write_text('keep me')

        with pytest.raises(InvalidSessionError) as exc_info:
            delete_session_file(LogFormat.CODEX, codex_root, file_path=str(notes))

        assert exc_info.value.message == 'Invalid session file'
        assert notes.exists()

    def test_directory_invalid(self, codex_root):
        folder = codex_root / 'dir.jsonl'
        folder.mkdir()

        with pytest.raises(InvalidSessionError) as exc_info:
            delete_session_file(LogFormat.CODEX, codex_root, file_path=str(folder))

        assert exc_info.value.message == 'Session path is not a file'

    def test_unresolvable_not_found(self, codex_root):
        with pytest.raises(SessionNotFoundError):
            delete_session_file(LogFormat.CODEX, codex_root, session_id='missing')

    def test_unlink_failure_wrapped(self, codex_root, codex_session):
        with patch('pathlib.Path.unlink', side_effect=PermissionError('denied')):
            with pytest.raises(SessionIOError) as exc_info:
                delete_session_file(LogFormat.CODEX, codex_root, file_path=str(codex_session))

        assert 'Failed to delete session' in exc_info.value.message
        assert codex_session.exists()

    def test_defer_invalidation(self, codex_root, codex_session, cache):
        delete_session_file(LogFormat.CODEX, codex_root, file_path=str(codex_session),
                            cache=cache, defer_invalidation=True)
        assert len(cache) == 1


class TestDeleteSessionFilesBatch:
    """Tests for delete_session_files_batch function."""

    def test_partial_failure(self, roots, codex_root, claude_root, codex_session, claude_session, cache):
        """Test one bad item does not stop the others."""
        notes = codex_root / 'notes.txt'
        notes.write_text('keep me')
        items = [
            {'source': 'codex', 'filePath': str(codex_session)},
            {'source': 'codex', 'filePath': str(notes)},
            {'source': 'claude', 'sessionId': 'claude-1'},
        ]

        result = delete_session_files_batch(items, roots, cache=cache)

        assert result['success'] is False
        assert result['total'] == 3
        assert result['deleted'] == 2
        assert result['failed'] == 1
        assert [r['success'] for r in result['results']] == [True, False, True]
        assert result['results'][1]['error'] == 'Invalid session file'
        assert notes.exists()
        assert not codex_session.exists()
        assert not claude_session.exists()
        assert len(cache) == 0

    def test_all_succeed(self, roots, claude_root, cache):
        for i in range(3):
            write_jsonl(claude_root / '-p' / f's{i}.jsonl', [claude_message('user', 'x')])
        items = [{'source': 'claude', 'sessionId': f's{i}'} for i in range(3)]

        result = delete_session_files_batch(items, roots, cache=cache)

        assert result['success'] is True
        assert result['deleted'] == 3

    def test_invalid_source_reported_per_item(self, roots):
        result = delete_session_files_batch([{'source': 'gemini', 'sessionId': 'x'}], roots)

        assert result['failed'] == 1
        assert result['results'][0]['error'] == 'Invalid source'

    def test_nothing_deleted_keeps_cache(self, roots, cache):
        delete_session_files_batch([{'source': 'codex', 'sessionId': 'missing'}], roots, cache=cache)
        assert len(cache) == 1

    def test_empty_batch_rejected(self, roots):
        with pytest.raises(InvalidSessionError) as exc_info:
            delete_session_files_batch([], roots)
        assert exc_info.value.message == 'No sessions provided'

    def test_non_list_rejected(self, roots):
        with pytest.raises(InvalidSessionError):
            delete_session_files_batch(None, roots)

    def test_oversized_batch_rejected(self, roots):
        items = [{'source': 'codex', 'sessionId': str(i)} for i in range(501)]
        with pytest.raises(InvalidSessionError) as exc_info:
            delete_session_files_batch(items, roots)
        assert exc_info.value.message == 'Too many sessions, max 500'
