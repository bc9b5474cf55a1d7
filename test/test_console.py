from __future__ import annotations

from termagent.util.console import _to_json, debug_panel


def test_to_json_renders_non_serialisable_values_as_strings(tmp_path):
    out = _to_json({"path": tmp_path})
    assert str(tmp_path) in out


def test_to_json_falls_back_on_circular_payload():
    loop: dict = {}
    loop["self"] = loop
    assert _to_json(loop) == str(loop)


def test_debug_panel_silent_when_disabled(capsys):
    debug_panel(False, "call", {"x": 1})
    assert capsys.readouterr().out == ""


def test_debug_panel_prints_when_enabled(capsys):
    debug_panel(True, "call read_file", {"file": "a.txt"})
    out = capsys.readouterr().out
    assert "debug: call read_file" in out
    assert "a.txt" in out
