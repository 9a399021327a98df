"""Command line interface for codexmate.

    codexmate sessions list [--source codex|claude|all] [--limit N] [--refresh] [--json]
    codexmate sessions show <session> [--source ...] [--limit N] [--json]
    codexmate sessions export <session> [--source ...] [-o PATH]
    codexmate sessions delete <session>... [--source ...]
    codexmate start [--host HOST] [--port PORT]

``<session>`` is either a session file path or a session id.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from .config import DEFAULT_HOST, DEFAULT_PORT, DEFAULT_SESSION_LIST_SIZE
from .errors import SessionError
from .logging_config import setup_logging
from .sessions import SessionService

logger = logging.getLogger('codexmate.cli')

SOURCES = ('codex', 'claude')


def _session_ref(value: str) -> dict:
    """Split a CLI session argument into filePath/sessionId lookups."""
    if value.endswith('.jsonl') or Path(value).exists():
        return {'file_path': value, 'session_id': None}
    return {'file_path': None, 'session_id': value}


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def cmd_list(service: SessionService, args) -> int:
    sessions = service.list_sessions(args.source, args.limit, force_refresh=args.refresh)
    if args.json:
        _print_json(sessions)
        return 0

    if not sessions:
        print("No sessions found")
        return 0

    for session in sessions:
        updated = session['updatedAt'][:19].replace('T', ' ')
        print(f"{updated}  {session['source']:<6}  {session['messageCount']:>4}  "
              f"{session['sessionId']}  {session['title']}")
    return 0


def cmd_show(service: SessionService, args) -> int:
    detail = asyncio.run(service.get_session_detail(
        args.source, message_limit=args.limit, **_session_ref(args.session)
    ))
    if args.json:
        _print_json(detail)
        return 0

    print(f"{detail['sourceLabel']} session {detail['sessionId']}")
    print(f"cwd: {detail['cwd'] or 'unknown'}")
    shown = len(detail['messages'])
    print(f"messages: {shown} of {detail['totalMessages']}" + (" (clipped)" if detail['clipped'] else ""))
    for message in detail['messages']:
        print()
        print(f"[{message['role']}] {message.get('timestamp', '')}".rstrip())
        print(message['text'])
    return 0


def cmd_export(service: SessionService, args) -> int:
    exported = asyncio.run(service.export_session(args.source, **_session_ref(args.session)))
    if args.output == '-':
        sys.stdout.write(exported['content'])
        return 0

    output = Path(args.output) if args.output else Path.cwd() / exported['fileName']
    if output.is_dir():
        output = output / exported['fileName']
    output.write_text(exported['content'], encoding='utf-8')
    print(f"Exported to {output}")
    return 0


def cmd_delete(service: SessionService, args) -> int:
    if len(args.sessions) == 1:
        result = service.delete_session(args.source, **_session_ref(args.sessions[0]))
        print(f"Deleted {result['filePath']}")
        return 0

    items = []
    for value in args.sessions:
        ref = _session_ref(value)
        items.append({
            'source': args.source,
            'sessionId': ref['session_id'] or '',
            'filePath': ref['file_path'] or '',
        })

    result = service.delete_sessions_batch(items)
    for item in result['results']:
        label = item['filePath'] or item['sessionId']
        if item['success']:
            print(f"Deleted {label}")
        else:
            print(f"Failed {label}: {item['error']}", file=sys.stderr)
    print(f"{result['deleted']} deleted, {result['failed']} failed")
    return 0 if result['success'] else 1


def cmd_start(args) -> int:
    from .server import serve

    serve(args.host, args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='codexmate', description="Browse Codex and Claude Code sessions")
    parser.add_argument('--log-level', default=None, help='DEBUG, INFO, WARNING, ...')
    commands = parser.add_subparsers(dest='command', required=True)

    sessions = commands.add_parser('sessions', help='List, show, export and delete sessions')
    session_commands = sessions.add_subparsers(dest='session_command', required=True)

    list_parser = session_commands.add_parser('list', help='List recent sessions')
    list_parser.add_argument('--source', choices=SOURCES + ('all',), default='all')
    list_parser.add_argument('--limit', type=int, default=DEFAULT_SESSION_LIST_SIZE)
    list_parser.add_argument('--refresh', action='store_true', help='Bypass the list cache')
    list_parser.add_argument('--json', action='store_true', help='Print JSON')

    show_parser = session_commands.add_parser('show', help='Show the messages of a session')
    show_parser.add_argument('session', help='Session file path or session id')
    show_parser.add_argument('--source', choices=SOURCES, default='codex')
    show_parser.add_argument('--limit', type=int, default=None, help='Most recent N messages')
    show_parser.add_argument('--json', action='store_true', help='Print JSON')

    export_parser = session_commands.add_parser('export', help='Export a session as Markdown')
    export_parser.add_argument('session', help='Session file path or session id')
    export_parser.add_argument('--source', choices=SOURCES, default='codex')
    export_parser.add_argument('-o', '--output', default=None,
                               help="Output file or directory ('-' for stdout)")

    delete_parser = session_commands.add_parser('delete', help='Delete session files')
    delete_parser.add_argument('sessions', nargs='+', help='Session file paths or session ids')
    delete_parser.add_argument('--source', choices=SOURCES, default='codex')

    start_parser = commands.add_parser('start', help='Start the web API')
    start_parser.add_argument('--host', default=DEFAULT_HOST, help='Host to bind to')
    start_parser.add_argument('--port', type=int, default=DEFAULT_PORT, help='Port to bind to')

    return parser


SESSION_COMMANDS = {
    'list': cmd_list,
    'show': cmd_show,
    'export': cmd_export,
    'delete': cmd_delete,
}


def main(argv: list[str] | None = None, service: SessionService | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == 'start':
        return cmd_start(args)

    if args.log_level:
        setup_logging(getattr(logging, args.log_level.upper(), logging.INFO))

    service = service or SessionService()
    try:
        return SESSION_COMMANDS[args.session_command](service, args)
    except SessionError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except OSError as e:
        logger.debug("CLI command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
