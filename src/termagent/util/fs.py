from __future__ import annotations
import codecs
import os
from pathlib import Path

DEFAULT_ENCODING = "utf-8"


def resolve_path(cwd: Path, path_str: str) -> Path:
    """Resolve ``path_str`` against ``cwd``, following symlinks where they exist."""
    p = Path(path_str).expanduser()
    if not p.is_absolute():
        p = cwd / p
    return p.resolve()

def is_within(root: Path, path: Path) -> bool:
    """True if ``path`` is ``root`` or lies underneath it.

    Compares whole path components, so ``/foo2`` is not inside ``/foo``.
    """
    root_real = Path(os.path.realpath(root))
    path_real = Path(os.path.realpath(path))
    return path_real == root_real or root_real in path_real.parents

def pick_encoding(encoding: str | None) -> str:
    if not encoding:
        return DEFAULT_ENCODING
    try:
        codecs.lookup(encoding)
    except LookupError:
        return DEFAULT_ENCODING
    return encoding

def read_text(path: Path, encoding: str = DEFAULT_ENCODING) -> str:
    return path.read_text(encoding=encoding, errors="replace")

def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")
