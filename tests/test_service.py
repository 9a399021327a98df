"""Tests for the session service."""

import pytest

from conftest import codex_message, codex_meta, write_jsonl
from src.codexmate.errors import InvalidSessionError, SessionNotFoundError
from src.codexmate.sessions import LogFormat, SessionService
from src.codexmate.sessions.cache import SessionCache
from src.codexmate.sessions.service import clamp_list_limit


class TestClampListLimit:
    """Tests for clamp_list_limit function."""

    def test_default(self):
        assert clamp_list_limit(None) == 120
        assert clamp_list_limit('x') == 120

    def test_bounds(self):
        assert clamp_list_limit(0) == 1
        assert clamp_list_limit(1000) == 300
        assert clamp_list_limit('50') == 50


class TestListSessions:
    """Tests for SessionService.list_sessions."""

    def test_merges_both_sources_newest_first(self, service, codex_session, claude_session):
        sessions = service.list_sessions('all')

        assert [(s['source'], s['sessionId']) for s in sessions] == [
            ('claude', 'claude-1'),
            ('codex', 'abc'),
        ]

    def test_source_filter(self, service, codex_session, claude_session):
        assert [s['source'] for s in service.list_sessions('codex')] == ['codex']
        assert [s['source'] for s in service.list_sessions('claude')] == ['claude']

    def test_unknown_source_means_all(self, service, codex_session, claude_session):
        assert len(service.list_sessions('everything')) == 2

    def test_limit(self, service, codex_root):
        for i in range(5):
            write_jsonl(codex_root / f'r{i}.jsonl', [
                codex_meta(f'id-{i}', timestamp=f'2024-05-0{i + 1}T00:00:00Z'),
                codex_message('user', 'x'),
            ])

        sessions = service.list_sessions('codex', limit=3)

        assert [s['sessionId'] for s in sessions] == ['id-4', 'id-3', 'id-2']

    def test_cached_within_ttl(self, service, codex_root, codex_session):
        """Test a repeated call returns the cached list, even after new files appear."""
        first = service.list_sessions('codex')
        write_jsonl(codex_root / 'new.jsonl', [codex_meta('new'), codex_message('user', 'x')])

        assert service.list_sessions('codex') == first

    def test_force_refresh(self, service, codex_root, codex_session):
        service.list_sessions('codex')
        write_jsonl(codex_root / 'new.jsonl', [codex_meta('new'), codex_message('user', 'x')])

        sessions = service.list_sessions('codex', force_refresh=True)

        assert {s['sessionId'] for s in sessions} == {'abc', 'new'}

    def test_corrupt_lines_do_not_break_listing(self, service, codex_root, codex_session):
        """Test deep nesting and out-of-range timestamps in one file leave the list intact."""
        write_jsonl(
            codex_root / 'odd.jsonl',
            [codex_meta('odd', timestamp='0001-01-01T00:00:00+05:00'),
             codex_message('user', 'x', '9999-12-31T23:59:59-05:00')],
            extra_lines=['[' * 200000],
        )

        sessions = service.list_sessions('codex', force_refresh=True)

        assert {s['sessionId'] for s in sessions} == {'abc', 'odd'}

    def test_empty_roots(self, service):
        assert service.list_sessions() == []

    def test_delete_invalidates_list(self, service, codex_session, claude_session):
        assert len(service.list_sessions()) == 2

        service.delete_session('codex', file_path=str(codex_session))

        assert [s['source'] for s in service.list_sessions()] == ['claude']


class TestResolve:
    """Tests for SessionService.resolve."""

    def test_invalid_source(self, service):
        with pytest.raises(InvalidSessionError) as exc_info:
            service.resolve('gemini', session_id='x')
        assert exc_info.value.message == 'Invalid source'

    def test_not_found(self, service):
        with pytest.raises(SessionNotFoundError):
            service.resolve('codex', session_id='nope')

    def test_wrong_root_not_found(self, service, claude_session):
        """Test a Claude file is not reachable through the Codex root."""
        with pytest.raises(SessionNotFoundError):
            service.resolve('codex', file_path=str(claude_session))


class TestDetailAndExport:
    """Tests for detail and export through the service."""

    @pytest.mark.asyncio
    async def test_detail_by_session_id(self, service, claude_session):
        detail = await service.get_session_detail('claude', session_id='claude-1', message_limit=1)

        assert detail['sessionId'] == 'claude-1'
        assert detail['clipped'] is True
        assert [m['text'] for m in detail['messages']] == ['Added the test']

    @pytest.mark.asyncio
    async def test_export_by_path(self, service, codex_session):
        exported = await service.export_session('codex', file_path=str(codex_session))
        assert exported['fileName'] == 'codex-session-abc.md'

    @pytest.mark.asyncio
    async def test_export_matches_summary_count(self, service, codex_session):
        """Test the export has one heading per counted message."""
        summary = service.list_sessions('codex')[0]
        exported = await service.export_session('codex', file_path=summary['filePath'])
        headings = [line for line in exported['content'].splitlines() if line.startswith('### ')]
        assert len(headings) == summary['messageCount']


class TestBatchDelete:
    """Tests for SessionService.delete_sessions_batch."""

    def test_mixed_sources(self, service, codex_session, claude_session):
        result = service.delete_sessions_batch([
            {'source': 'codex', 'sessionId': 'abc'},
            {'source': 'claude', 'filePath': str(claude_session)},
        ])

        assert result['deleted'] == 2
        assert service.list_sessions() == []


class TestDefaults:
    """Tests for service construction."""

    def test_roots_from_config(self, monkeypatch, tmp_path):
        monkeypatch.setattr('src.codexmate.config.CODEX_SESSIONS_DIR', tmp_path / 'c')
        monkeypatch.setattr('src.codexmate.config.CLAUDE_PROJECTS_DIR', tmp_path / 'p')

        service = SessionService()

        assert service.roots == {LogFormat.CODEX: tmp_path / 'c', LogFormat.CLAUDE: tmp_path / 'p'}
        assert isinstance(service.cache, SessionCache)
