"""Directory scanning for session log files.

Codex can accumulate tens of thousands of rollout files, so every scan is
bounded by a file budget. Very old files may be missed once the budget is
spent; the list view only needs the recent ones.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from ..config import SESSION_FILE_EXTENSION, SESSION_LOOKUP_MAX_FILES
from ..utils import is_path_inside

logger = logging.getLogger('codexmate.scan')


@dataclass
class ScannedFile:
    """A session file found by the scanner."""
    path: Path
    mtime: float


def _list_dir(directory: Path) -> list[os.DirEntry]:
    try:
        with os.scandir(directory) as it:
            return sorted(it, key=lambda entry: entry.name)
    except OSError as e:
        # Locked or vanished folders are skipped, not fatal
        logger.debug("Skipping unreadable directory %s: %s", directory, e)
        return []


def collect_recent_session_files(
    root: Path,
    return_count: int,
    max_files_scanned: int = 2000,
    ignore_subpath: str = '',
    extension: str = SESSION_FILE_EXTENSION,
) -> list[Path]:
    """Most recently modified session files under ``root``.

    Walks the tree depth-first, examining at most ``max_files_scanned``
    matching files, then returns up to ``return_count`` of them sorted by
    modification time, newest first. Paths containing ``ignore_subpath``
    are skipped before they count against the budget.
    """
    root = Path(root)
    if not root.is_dir():
        return []

    return_count = max(1, int(return_count or 1))
    max_files_scanned = max(return_count, int(max_files_scanned or 0))

    stack = [root]
    found: list[ScannedFile] = []
    scanned = 0

    while stack and scanned < max_files_scanned:
        directory = stack.pop()
        for entry in _list_dir(directory):
            try:
                if entry.is_dir(follow_symlinks=False):
                    stack.append(Path(entry.path))
                    continue
                if not entry.is_file(follow_symlinks=False):
                    continue
            except OSError:
                continue

            if not entry.name.endswith(extension):
                continue
            if ignore_subpath and ignore_subpath in entry.path:
                continue

            scanned += 1
            try:
                found.append(ScannedFile(Path(entry.path), entry.stat().st_mtime))
            except OSError:
                pass

            if scanned >= max_files_scanned:
                break

    logger.debug("Scanned %d files under %s", scanned, root)
    found.sort(key=lambda item: item.mtime, reverse=True)
    return [item.path for item in found[:return_count]]


def collect_session_files(
    root: Path,
    max_files: int = SESSION_LOOKUP_MAX_FILES,
    extension: str = SESSION_FILE_EXTENSION,
) -> list[Path]:
    """Session files under ``root`` in traversal order, up to ``max_files``."""
    root = Path(root)
    if not root.is_dir():
        return []

    stack = [root]
    files: list[Path] = []
    while stack and len(files) < max_files:
        directory = stack.pop()
        for entry in _list_dir(directory):
            try:
                if entry.is_dir(follow_symlinks=False):
                    stack.append(Path(entry.path))
                elif entry.is_file(follow_symlinks=False) and entry.name.endswith(extension):
                    files.append(Path(entry.path))
            except OSError:
                continue

            if len(files) >= max_files:
                break

    return files


def resolve_session_file(
    root: Path,
    file_path: str | None = None,
    session_id: str | None = None,
) -> Path | None:
    """Locate a session file inside ``root``.

    An explicit ``file_path`` wins when it exists and lies inside the root.
    Otherwise the first file whose name contains ``session_id``
    (case-insensitive) is returned. Paths outside the root never resolve.
    """
    root = Path(root)
    if not root.is_dir():
        return None

    if isinstance(file_path, str) and file_path.strip():
        target = Path(file_path.strip()).resolve()
        if target.exists() and is_path_inside(target, root):
            return target

    if isinstance(session_id, str) and session_id.strip():
        target_id = session_id.strip().lower()
        for candidate in collect_session_files(root):
            if target_id in candidate.name.lower():
                return candidate

    return None
