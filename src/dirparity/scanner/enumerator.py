"""Recursive listing of the regular files under one root."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Sequence

from ..errors import RootNotFoundError
from ..models import FileSet
from ..paths import relpath
from .ignore import matches_ignore_pattern, prunes_directory

logger = logging.getLogger(__name__)


def check_root(root: str | os.PathLike[str]) -> Path:
    """Return ``root`` as a Path, or raise RootNotFoundError."""
    p = Path(root)
    if not p.exists():
        raise RootNotFoundError(p)
    if not p.is_dir():
        raise RootNotFoundError(p, "Not a directory")
    return p


def _is_regular_file(entry: os.DirEntry[str], follow_symlinks: bool) -> bool:
    if not follow_symlinks and entry.is_symlink():
        return False
    return entry.is_file(follow_symlinks=follow_symlinks)


def enumerate_files(
    root: str | os.PathLike[str],
    *,
    ignore: Sequence[str] = (),
    follow_symlinks: bool = False,
    on_entry: Callable[[str], None] | None = None,
) -> FileSet:
    """Walk ``root`` and collect the relative paths of its regular files.

    Directories are descended into but never reported. Symlinked directories
    are not descended. Symlinks to files only count when ``follow_symlinks``
    is set. Anything that raises OSError while being listed or classified is
    skipped and counted in ``FileSet.skipped``.

    Raises:
        RootNotFoundError: root is missing, not a directory, or unlistable.
        PathNormalizationError: a walked path escaped its root.
    """
    base = check_root(root)
    top = os.fspath(base)
    paths: set[str] = set()
    skipped = 0

    pending = [top]
    while pending:
        dir_path = pending.pop()
        try:
            with os.scandir(dir_path) as it:
                entries = list(it)
        except OSError as e:
            if dir_path == top:
                raise RootNotFoundError(base, f"Directory not readable ({e.strerror})") from e
            logger.debug(f"Skipping unreadable directory {dir_path}: {e}")
            skipped += 1
            continue

        for entry in entries:
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = not is_dir and _is_regular_file(entry, follow_symlinks)
            except OSError as e:
                logger.debug(f"Skipping unreadable entry {entry.path}: {e}")
                skipped += 1
                continue

            if is_dir:
                if ignore and prunes_directory(relpath(base, entry.path), ignore):
                    continue
                pending.append(entry.path)
                continue
            if not is_file:
                continue

            rel = relpath(base, entry.path)
            if ignore and matches_ignore_pattern(rel, ignore):
                continue
            paths.add(rel)
            if on_entry is not None:
                on_entry(rel)

    logger.info(f"Scanned {base}: {len(paths)} files, {skipped} entries skipped")
    return FileSet(root=base, paths=frozenset(paths), skipped=skipped)
