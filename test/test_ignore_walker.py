from __future__ import annotations

from pathlib import Path

import pytest

from termagent.tools.ignore import DEFAULT_IGNORE_NAMES, build_ignore_filter
from termagent.tools.walker import walk_files

GITIGNORE = """
*.log
temp/
.DS_Store
"""


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    root = tmp_path / "proj"
    files = {
        "file1.txt": "root file",
        "a/b/c/file2.txt": "nested file",
        "a/top.txt": "a",
        "node_modules/package.json": "{}",
        ".git/config": "git config",
        "sub/node_modules/deep.js": "x",
        "sub/keep.txt": "keep",
        "package-lock.json": "{}",
        "test.log": "log file",
        "temp/x.txt": "tmp",
        ".gitignore": GITIGNORE,
    }
    for rel, content in files.items():
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(content)
    return root


def _rel(root: Path, files: list[Path]) -> list[str]:
    return [f.relative_to(root).as_posix() for f in files]


def test_root_is_always_included(tree):
    assert build_ignore_filter(tree)(tree)


def test_depth_zero_lists_root_files_only(tree):
    files = _rel(tree, walk_files(tree, 0, build_ignore_filter(tree)))
    assert sorted(files) == [".gitignore", "file1.txt"]


def test_recursive_walk_respects_ignore_rules(tree):
    files = _rel(tree, walk_files(tree, 3, build_ignore_filter(tree)))
    assert "a/b/c/file2.txt" in files
    assert "sub/keep.txt" in files
    assert "test.log" not in files
    assert "temp/x.txt" not in files
    for f in files:
        assert not set(f.split("/")) & DEFAULT_IGNORE_NAMES, f


def test_depth_limits_descent(tree):
    files = _rel(tree, walk_files(tree, 1, build_ignore_filter(tree)))
    assert "a/top.txt" in files
    assert "a/b/c/file2.txt" not in files


def test_files_precede_subdirectory_files(tree):
    files = _rel(tree, walk_files(tree, 3, build_ignore_filter(tree)))
    assert files.index("file1.txt") < files.index("a/top.txt") < files.index("a/b/c/file2.txt")


def test_disabled_filter_returns_everything(tree):
    files = _rel(tree, walk_files(tree, 3, build_ignore_filter(tree, include_all=True)))
    assert "node_modules/package.json" in files
    assert ".git/config" in files
    assert "sub/node_modules/deep.js" in files
    assert "test.log" in files
    assert "temp/x.txt" in files


def test_parallel_walk_matches_sequential(tree):
    pred = build_ignore_filter(tree)
    assert walk_files(tree, 3, pred, max_workers=4) == walk_files(tree, 3, pred, max_workers=1)


def test_fixed_names_apply_without_ignore_file(tree):
    (tree / ".gitignore").unlink()
    files = _rel(tree, walk_files(tree, 3, build_ignore_filter(tree)))
    assert "test.log" in files
    assert "node_modules/package.json" not in files
    assert "package-lock.json" not in files


def test_unreadable_ignore_file_falls_back_to_fixed_names(tree):
    # a directory where the ignore file should be cannot be read as a file
    (tree / ".gitignore").unlink()
    (tree / ".gitignore").mkdir()
    pred = build_ignore_filter(tree)
    assert pred(tree / "test.log")
    assert not pred(tree / ".git" / "config")


def test_negation_patterns(tmp_path):
    root = tmp_path / "neg"
    root.mkdir()
    (root / ".gitignore").write_text("*.txt\n!keep.txt\n")
    (root / "keep.txt").write_text("k")
    (root / "drop.txt").write_text("d")
    files = _rel(root, walk_files(root, 0, build_ignore_filter(root)))
    assert "keep.txt" in files
    assert "drop.txt" not in files


def test_missing_directory_yields_empty_branch(tmp_path):
    assert walk_files(tmp_path / "missing", 2, lambda p: True) == []


def test_directories_are_never_returned(tree):
    files = walk_files(tree, 3, build_ignore_filter(tree, include_all=True))
    assert all(f.is_file() for f in files)
