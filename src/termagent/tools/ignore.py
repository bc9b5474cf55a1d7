from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Optional

import pathspec

# Version-control and package-manager entries hidden at any depth.
DEFAULT_IGNORE_NAMES = frozenset({
    "node_modules",
    ".git",
    ".svn",
    ".hg",
    ".bzr",
    ".yarn",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "bun.lockb",
})

IGNORE_FILE = ".gitignore"

PathFilter = Callable[[Path], bool]


def load_ignore_spec(root: Path) -> Optional[pathspec.GitIgnoreSpec]:
    """Parse ``<root>/.gitignore``; None when it is missing or unreadable."""
    path = root / IGNORE_FILE
    try:
        with path.open("r", encoding="utf-8", errors="replace") as f:
            return pathspec.GitIgnoreSpec.from_lines(f)
    except OSError:
        return None


def build_ignore_filter(root: Path, include_all: bool = False) -> PathFilter:
    """Return ``should_include(path)`` for paths under ``root``."""
    if include_all:
        return lambda _path: True

    root = Path(os.path.normpath(root))
    spec = load_ignore_spec(root)

    def should_include(path: Path) -> bool:
        path = Path(os.path.normpath(path))
        if path == root:
            return True
        try:
            rel = path.relative_to(root)
        except ValueError:
            return True
        if any(part in DEFAULT_IGNORE_NAMES for part in rel.parts):
            return False
        if spec is None:
            return True
        rel_str = rel.as_posix()
        if path.is_dir():
            rel_str += "/"
        return not spec.match_file(rel_str)

    return should_include
