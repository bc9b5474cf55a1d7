from __future__ import annotations

import pytest

from termagent.tools.confirmation import ConfirmationGate
from termagent.util.fs import is_within, pick_encoding


def _never_asked(description: str) -> str:
    raise AssertionError(f"prompted for {description!r}")


def test_auto_approve_skips_prompt():
    assert ConfirmationGate(auto_approve=True, ask=_never_asked).confirm("rm -rf /tmp/x")


@pytest.mark.parametrize("answer", ["y", "Y", " yes ", "YES"])
def test_affirmative_answers(answer):
    assert ConfirmationGate(ask=lambda _d: answer).confirm("do it?")


@pytest.mark.parametrize("answer", ["n", "", "no", "maybe", "yy"])
def test_everything_else_is_a_no(answer):
    assert not ConfirmationGate(ask=lambda _d: answer).confirm("do it?")


@pytest.mark.parametrize("exc", [EOFError, KeyboardInterrupt])
def test_cancelled_prompt_is_a_no(exc):
    def ask(_d):
        raise exc()
    assert not ConfirmationGate(ask=ask).confirm("do it?")


def test_prompt_sees_description():
    seen = []
    gate = ConfirmationGate(ask=lambda d: seen.append(d) or "y")
    gate.confirm('Allow agent to list files in "/etc"?')
    assert seen == ['Allow agent to list files in "/etc"?']


def test_is_within_is_component_aware(tmp_path):
    foo = tmp_path / "foo"
    foo2 = tmp_path / "foo2"
    foo.mkdir()
    foo2.mkdir()
    assert is_within(foo, foo)
    assert is_within(foo, foo / "bar" / "baz.txt")
    assert not is_within(foo, foo2)
    assert not is_within(foo, foo2 / "x")
    assert not is_within(foo, foo / ".." / "foo2")
    assert not is_within(foo, tmp_path)


def test_is_within_follows_symlinks(tmp_path):
    inside = tmp_path / "root"
    outside = tmp_path / "elsewhere"
    inside.mkdir()
    outside.mkdir()
    link = inside / "escape"
    link.symlink_to(outside, target_is_directory=True)
    assert not is_within(inside, link)


def test_unknown_encoding_falls_back_to_utf8():
    assert pick_encoding("latin-1") == "latin-1"
    assert pick_encoding("no-such-codec") == "utf-8"
    assert pick_encoding(None) == "utf-8"
