from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from .ignore import PathFilter


def _scan(directory: Path) -> tuple[list[Path], list[Path]]:
    files: list[Path] = []
    dirs: list[Path] = []
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError:
        return files, dirs
    for entry in entries:
        try:
            if entry.is_dir(follow_symlinks=False):
                dirs.append(Path(entry.path))
            elif entry.is_file():
                files.append(Path(entry.path))
        except OSError:
            continue
    return files, dirs


def _walk(directory: Path, depth: int, should_include: PathFilter) -> list[Path]:
    files, dirs = _scan(directory)
    out = [f for f in files if should_include(f)]
    if depth <= 0:
        return out
    for d in dirs:
        if should_include(d):
            out.extend(_walk(d, depth - 1, should_include))
    return out


def walk_files(
    root: Path,
    depth: int,
    should_include: PathFilter,
    max_workers: int = 1,
) -> list[Path]:
    """List files under ``root`` down to ``depth`` levels of subdirectories.

    ``depth=0`` lists only the root's own files. Directories are never part of
    the result, and a directory's files precede those of its subdirectories.
    With ``max_workers > 1`` the root's subdirectories are walked in parallel;
    results keep sibling order either way.
    """
    root = Path(os.path.normpath(root))
    if not should_include(root):
        return []
    if max_workers <= 1 or depth <= 0:
        return _walk(root, depth, should_include)

    files, dirs = _scan(root)
    out = [f for f in files if should_include(f)]
    subdirs = [d for d in dirs if should_include(d)]
    if not subdirs:
        return out
    with ThreadPoolExecutor(max_workers=min(max_workers, len(subdirs))) as pool:
        for branch in pool.map(lambda d: _walk(d, depth - 1, should_include), subdirs):
            out.extend(branch)
    return out
