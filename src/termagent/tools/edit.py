"""Declarative text edits: regex find/replace, marker-delimited blocks, line ranges.

``apply_edit`` is pure and works on a string; ``edit_file`` reads a file,
applies one edit and writes the result back only when something matched, so
an edit that did not land leaves the file byte-for-byte unchanged.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from ..util.fs import DEFAULT_ENCODING, normalize_newlines

NO_MATCHES = "No matches found"


@dataclass(frozen=True)
class FindReplace:
    pattern: str
    replacement: str
    match_all: bool = True

    mode = "find_replace"


@dataclass(frozen=True)
class BlockReplace:
    start_pattern: str
    end_pattern: str
    replacement: str
    include_markers: bool = False

    mode = "block"


@dataclass(frozen=True)
class LineRange:
    start_line: int
    end_line: int
    replacement: str
    inclusive: bool = True

    mode = "line_range"


EditSpec = Union[FindReplace, BlockReplace, LineRange]


class EditError(ValueError):
    """The edit itself is malformed (e.g. a pattern that does not compile)."""


@dataclass
class EditOutcome:
    content: str
    matches: int
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.matches > 0 and self.error is None


def _compile(pattern: str, flags: int = 0) -> re.Pattern:
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise EditError(f"Invalid regex {pattern!r}: {e}") from e


def _find_replace(content: str, spec: FindReplace) -> tuple[str, int]:
    rx = _compile(spec.pattern)
    # replacement is literal text: no group-reference expansion
    return rx.subn(lambda _m: spec.replacement, content, count=0 if spec.match_all else 1)


def _block(content: str, spec: BlockReplace) -> tuple[str, int]:
    start_rx = _compile(spec.start_pattern, re.MULTILINE)
    end_rx = _compile(spec.end_pattern, re.MULTILINE)
    start_m = start_rx.search(content)
    if start_m is None:
        return content, 0
    end_m = end_rx.search(content, start_m.end())
    if end_m is None:
        return content, 0
    if spec.include_markers:
        lo, hi = start_m.start(), end_m.end()
    else:
        lo, hi = start_m.end(), end_m.start()
    return content[:lo] + spec.replacement + content[hi:], 1


def _line_range(content: str, spec: LineRange) -> tuple[str, int]:
    lines = content.split("\n")
    start_idx = spec.start_line - 1
    end_idx = spec.end_line - 1 if spec.inclusive else spec.end_line - 2
    if start_idx < 0 or end_idx >= len(lines) or start_idx > end_idx:
        return content, 0
    removed = end_idx - start_idx + 1
    lines[start_idx:end_idx + 1] = spec.replacement.split("\n")
    return "\n".join(lines), removed


def apply_edit(content: str, spec: EditSpec) -> EditOutcome:
    text = normalize_newlines(content)
    if isinstance(spec, FindReplace):
        new, matches = _find_replace(text, spec)
    elif isinstance(spec, BlockReplace):
        new, matches = _block(text, spec)
    elif isinstance(spec, LineRange):
        new, matches = _line_range(text, spec)
    else:
        raise EditError(f"Unsupported edit: {spec!r}")
    if matches == 0:
        return EditOutcome(content=content, matches=0, error=NO_MATCHES)
    return EditOutcome(content=new, matches=matches)


def edit_file(path: Path, spec: EditSpec, encoding: str = DEFAULT_ENCODING) -> EditOutcome:
    """Apply ``spec`` to the file at ``path``.

    Raises ``FileNotFoundError``/``OSError`` for unreadable files,
    ``UnicodeError`` when the file or the result does not fit ``encoding``,
    and ``EditError`` for malformed edits; a non-matching edit is a normal
    outcome with ``matches == 0``. The new content is encoded before the file
    is opened for writing, so an encoding failure leaves it untouched.
    """
    with path.open("r", encoding=encoding, newline="") as f:
        original = f.read()
    outcome = apply_edit(original, spec)
    if outcome.matches > 0:
        data = outcome.content.encode(encoding)
        path.write_bytes(data)
    return outcome
