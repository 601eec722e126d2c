"""Tests for the tree enumerator."""
from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

from dirparity.errors import PathNormalizationError, RootNotFoundError
from dirparity.scanner import enumerator
from dirparity.scanner.enumerator import enumerate_files

skip_without_symlinks = pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
running_as_root = hasattr(os, "geteuid") and os.geteuid() == 0


class _LockedEntry:
    """DirEntry stand-in whose every stat call is denied."""

    def __init__(self, entry):
        self.name = entry.name
        self.path = entry.path

    def _deny(self, *args, **kwargs):
        raise PermissionError(13, "Permission denied", self.path)

    is_dir = is_file = is_symlink = stat = _deny


class _FakeScandir:
    def __init__(self, entries):
        self._entries = entries

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def __iter__(self):
        return iter(self._entries)


def _scandir_denying(names: set[str]):
    real_scandir = os.scandir

    def fake(path):
        with real_scandir(path) as it:
            entries = [_LockedEntry(e) if e.name in names else e for e in it]
        return _FakeScandir(entries)

    return fake


class TestEnumerateFiles:
    """Tests for collecting relative file paths."""

    def test_lists_nested_files_as_relative_posix_paths(self, make_tree):
        root = make_tree("a", ["x.txt", "sub/y.txt", "sub/deeper/z.md"])
        fs = enumerate_files(root)
        assert fs.paths == frozenset({"x.txt", "sub/y.txt", "sub/deeper/z.md"})
        assert fs.root == root
        assert fs.skipped == 0

    def test_directories_are_not_members(self, make_tree):
        root = make_tree("a", ["x.txt"], dirs=("empty", "nested/also_empty"))
        fs = enumerate_files(root)
        assert fs.paths == frozenset({"x.txt"})
        assert "empty" not in fs
        assert "nested" not in fs

    def test_empty_root(self, make_tree):
        fs = enumerate_files(make_tree("a"))
        assert len(fs) == 0

    def test_accepts_string_root(self, make_tree):
        root = make_tree("a", ["x.txt"])
        assert "x.txt" in enumerate_files(str(root))

    def test_relative_root(self, make_tree, monkeypatch):
        root = make_tree("a", ["sub/y.txt"])
        monkeypatch.chdir(root.parent)
        assert enumerate_files("a").paths == frozenset({"sub/y.txt"})

    def test_on_entry_called_once_per_file(self, make_tree):
        root = make_tree("a", ["x.txt", "sub/y.txt"])
        seen: list[str] = []
        enumerate_files(root, on_entry=seen.append)
        assert sorted(seen) == ["sub/y.txt", "x.txt"]

    def test_ignore_patterns(self, make_tree):
        root = make_tree("a", ["keep.txt", ".DS_Store", "sub/.DS_Store", ".git/HEAD", ".git/objects/ab"])
        fs = enumerate_files(root, ignore=["**/.DS_Store", ".git/**"])
        assert fs.paths == frozenset({"keep.txt"})

    def test_glob_directory_pattern_prunes_consistently(self, make_tree):
        root = make_tree("a", ["abc/x.txt", "abc/deep/y.txt", "xyz/abc.txt"])
        fs = enumerate_files(root, ignore=["a*/**"])
        assert fs.paths == frozenset({"xyz/abc.txt"})

    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="mkfifo not available")
    def test_special_files_are_skipped(self, make_tree):
        root = make_tree("a", ["regular.txt", "sub/other.txt"])
        os.mkfifo(root / "pipe")
        os.mkfifo(root / "sub" / "pipe2")
        fs = enumerate_files(root)
        assert fs.paths == frozenset({"regular.txt", "sub/other.txt"})
        assert fs.skipped == 0


class TestRootValidation:
    """A bad root is a failure, never an empty FileSet."""

    def test_missing_root(self, tmp_path: Path):
        with pytest.raises(RootNotFoundError) as exc:
            enumerate_files(tmp_path / "nope")
        assert exc.value.root == tmp_path / "nope"
        assert "Directory not found" in str(exc.value)

    def test_file_root(self, make_tree):
        root = make_tree("a", ["x.txt"])
        with pytest.raises(RootNotFoundError, match="Not a directory"):
            enumerate_files(root / "x.txt")

    @pytest.mark.skipif(running_as_root or sys.platform == "win32", reason="permission bits not enforced")
    def test_unreadable_root(self, make_tree):
        root = make_tree("a", ["x.txt"])
        root.chmod(0)
        try:
            with pytest.raises(RootNotFoundError, match="not readable"):
                enumerate_files(root)
        finally:
            root.chmod(0o755)


class TestTraversalErrors:
    """Unreadable entries are skipped and counted, never fatal."""

    def test_denied_entry_is_skipped(self, make_tree, monkeypatch):
        root = make_tree("a", ["ok.txt", "locked.bin", "sub/fine.txt"])
        monkeypatch.setattr(enumerator.os, "scandir", _scandir_denying({"locked.bin"}))
        fs = enumerate_files(root)
        assert fs.paths == frozenset({"ok.txt", "sub/fine.txt"})
        assert fs.skipped == 1

    def test_denied_directory_entry_hides_its_subtree(self, make_tree, monkeypatch):
        root = make_tree("a", ["ok.txt", "secret/inner.txt"])
        monkeypatch.setattr(enumerator.os, "scandir", _scandir_denying({"secret"}))
        fs = enumerate_files(root)
        assert fs.paths == frozenset({"ok.txt"})
        assert fs.skipped == 1

    @pytest.mark.skipif(running_as_root or sys.platform == "win32", reason="permission bits not enforced")
    def test_unlistable_subdirectory(self, make_tree):
        root = make_tree("a", ["ok.txt", "private/inner.txt"])
        (root / "private").chmod(0)
        try:
            fs = enumerate_files(root)
        finally:
            (root / "private").chmod(0o755)
        assert fs.paths == frozenset({"ok.txt"})
        assert fs.skipped == 1

    def test_entry_outside_root_is_fatal(self, make_tree, monkeypatch):
        root = make_tree("a", ["x.txt"])
        outsider = make_tree("elsewhere", ["stray.txt"])
        real_scandir = os.scandir

        def fake(path):
            # Report a file that does not live under the directory being listed
            with real_scandir(outsider) as it:
                return _FakeScandir(list(it))

        monkeypatch.setattr(enumerator.os, "scandir", fake)
        with pytest.raises(PathNormalizationError) as exc:
            enumerate_files(root)
        assert exc.value.root == root


@skip_without_symlinks
class TestSymlinks:
    """Symlinks are not regular files unless asked for."""

    def test_symlinks_skipped_by_default(self, make_tree):
        root = make_tree("a", ["real.txt", "dir/inner.txt"])
        (root / "link.txt").symlink_to(root / "real.txt")
        (root / "dirlink").symlink_to(root / "dir", target_is_directory=True)
        (root / "broken").symlink_to(root / "missing.txt")
        fs = enumerate_files(root)
        assert fs.paths == frozenset({"real.txt", "dir/inner.txt"})

    def test_follow_symlinks_counts_file_links_only(self, make_tree):
        root = make_tree("a", ["real.txt", "dir/inner.txt"])
        (root / "link.txt").symlink_to(root / "real.txt")
        (root / "dirlink").symlink_to(root / "dir", target_is_directory=True)
        (root / "broken").symlink_to(root / "missing.txt")
        fs = enumerate_files(root, follow_symlinks=True)
        assert fs.paths == frozenset({"real.txt", "dir/inner.txt", "link.txt"})

    def test_self_referencing_link_does_not_loop(self, make_tree):
        root = make_tree("a", ["x.txt"])
        (root / "loop").symlink_to(root, target_is_directory=True)
        assert enumerate_files(root, follow_symlinks=True).paths == frozenset({"x.txt"})
