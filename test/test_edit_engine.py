from __future__ import annotations

import re

import pytest

from termagent.tools.edit import (
    BlockReplace,
    EditError,
    FindReplace,
    LineRange,
    apply_edit,
    edit_file,
)

BLOCK_SOURCE = "head\n// BEGIN\nold body\n// END\ntail\n"


def test_find_replace_all_counts_every_occurrence():
    content = "let x = 1;\nlet y = x + x;\n"
    out = apply_edit(content, FindReplace("x", "VALUE", match_all=True))
    assert out.success
    assert out.matches == len(re.findall("x", content)) == 3
    assert out.content == "let VALUE = 1;\nlet y = VALUE + VALUE;\n"


def test_find_replace_first_only():
    out = apply_edit("a1 b22 c333", FindReplace(r"\d+", "N", match_all=False))
    assert out.matches == 1
    assert out.content == "aN b22 c333"


def test_find_replace_regex_all():
    out = apply_edit("a1 b22 c333", FindReplace(r"\d+", "N"))
    assert out.matches == 3
    assert out.content == "aN bN cN"


def test_find_replace_replacement_is_literal():
    out = apply_edit("cat", FindReplace("(a)", r"\1$1"))
    assert out.content == r"c\1$1t"


def test_find_replace_no_match_reports_failure():
    out = apply_edit("hello", FindReplace("zzz", "y"))
    assert not out.success
    assert out.matches == 0
    assert out.error == "No matches found"
    assert out.content == "hello"


def test_find_replace_invalid_pattern_raises():
    with pytest.raises(EditError):
        apply_edit("hello", FindReplace("(", "y"))


def test_block_keeps_markers_by_default():
    spec = BlockReplace(r"// BEGIN\n", r"// END", "new body\n")
    out = apply_edit(BLOCK_SOURCE, spec)
    assert out.matches == 1
    prefix = BLOCK_SOURCE[: BLOCK_SOURCE.index("old body")]
    suffix = BLOCK_SOURCE[BLOCK_SOURCE.index("// END"):]
    assert out.content == prefix + "new body\n" + suffix
    assert "// BEGIN" in out.content and "// END" in out.content


def test_block_include_markers_consumes_them():
    out = apply_edit(BLOCK_SOURCE, BlockReplace("// BEGIN", "// END", "NEW", include_markers=True))
    assert out.matches == 1
    assert out.content == "head\nNEW\ntail\n"


def test_block_end_must_follow_start():
    out = apply_edit("END\nSTART\n", BlockReplace("START", "END", "x"))
    assert out.matches == 0
    assert out.content == "END\nSTART\n"


def test_block_missing_start():
    assert apply_edit("nothing here", BlockReplace("START", "END", "x")).matches == 0


def test_block_replaces_only_first_span():
    content = "[a]1[/a]\n[a]2[/a]\n"
    out = apply_edit(content, BlockReplace(r"\[a\]", r"\[/a\]", "X"))
    assert out.matches == 1
    assert out.content == "[a]X[/a]\n[a]2[/a]\n"


def test_block_start_anchor_is_multiline():
    content = "x = 1\ndef f():\n    pass\n# end\n"
    out = apply_edit(content, BlockReplace(r"^def f\(\):$", r"^# end$", "\n    return 1\n"))
    assert out.matches == 1
    assert out.content == "x = 1\ndef f():\n    return 1\n# end\n"


def test_line_range_inclusive_middle_lines():
    content = "1\n2\n3\n4\n5"
    out = apply_edit(content, LineRange(2, 4, "X\nY", inclusive=True))
    assert out.matches == 3
    assert out.content == "1\nX\nY\n5"


def test_line_range_keeps_trailing_newline():
    out = apply_edit("l1\nl2\nl3\nl4\nl5\n", LineRange(2, 4, "X"))
    assert out.matches == 3
    assert out.content == "l1\nX\nl5\n"


def test_line_range_exclusive_end():
    out = apply_edit("1\n2\n3\n4\n5", LineRange(2, 4, "X", inclusive=False))
    assert out.matches == 2
    assert out.content == "1\nX\n4\n5"


@pytest.mark.parametrize("start,end", [(10, 12), (4, 2), (0, 1), (2, 9)])
def test_line_range_out_of_bounds_is_zero_matches(start, end):
    content = "1\n2\n3\n4\n5"
    out = apply_edit(content, LineRange(start, end, "X"))
    assert out.matches == 0
    assert not out.success
    assert out.content == content


def test_line_endings_are_normalized_before_matching():
    out = apply_edit("a\r\nb\r\nc", LineRange(2, 2, "B"))
    assert out.content == "a\nB\nc"


def test_edit_file_persists_on_match(tmp_path):
    p = tmp_path / "f.txt"
    p.write_bytes(b"one\r\ntwo\r\nthree\r\n")
    out = edit_file(p, FindReplace("two", "TWO"))
    assert out.matches == 1
    assert p.read_bytes() == b"one\nTWO\nthree\n"


def test_edit_file_zero_matches_leaves_file_untouched(tmp_path):
    p = tmp_path / "f.txt"
    original = b"one\r\ntwo\r\n"
    p.write_bytes(original)
    before = p.stat().st_mtime_ns
    out = edit_file(p, FindReplace("zzz", "y"))
    assert out.matches == 0
    assert p.read_bytes() == original
    assert p.stat().st_mtime_ns == before


def test_edit_file_out_of_range_leaves_file_untouched(tmp_path):
    p = tmp_path / "f.txt"
    p.write_text("1\n2\n3\n")
    out = edit_file(p, LineRange(7, 8, "X"))
    assert not out.success
    assert p.read_text() == "1\n2\n3\n"


def test_edit_file_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        edit_file(tmp_path / "missing.txt", FindReplace("a", "b"))


def test_edit_file_unencodable_result_keeps_original(tmp_path):
    p = tmp_path / "f.txt"
    p.write_bytes(b"hello world\n")
    with pytest.raises(UnicodeEncodeError):
        edit_file(p, FindReplace("world", "wörld"), encoding="ascii")
    assert p.read_bytes() == b"hello world\n"


def test_edit_file_undecodable_file_raises(tmp_path):
    p = tmp_path / "bin.dat"
    p.write_bytes(b"\xff\xfe abc")
    with pytest.raises(UnicodeDecodeError):
        edit_file(p, FindReplace("abc", "x"))
    assert p.read_bytes() == b"\xff\xfe abc"
