from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from fstext.base.errors import FileIOError, NotFoundError
from fstext.base.fs import register_invalidation_hook, unregister_invalidation_hook
from fstext.utils import fs_utils


def _tree(tmp_path: Path) -> Path:
    root = tmp_path / "tree"
    (root / "b" / "deep").mkdir(parents=True)
    (root / "a.txt").write_text("a", encoding="utf-8")
    (root / "b" / "c.txt").write_text("c", encoding="utf-8")
    (root / "b" / "d.md").write_text("d", encoding="utf-8")
    (root / "b" / "deep" / "e.TXT").write_text("e", encoding="utf-8")
    return root


@pytest.fixture
def invalidated():
    seen: list[str] = []
    hook = register_invalidation_hook(seen.append)
    yield seen
    unregister_invalidation_hook(hook)


# ----------------------------------------------------------------------
# PREDICATES
# ----------------------------------------------------------------------

def test_exists_follows_links(tmp_path: Path) -> None:
    target = tmp_path / "file.txt"
    target.write_text("x", encoding="utf-8")
    link = tmp_path / "dangling"
    link.symlink_to(tmp_path / "missing")

    assert fs_utils.exists(target)
    assert fs_utils.exists(tmp_path)
    assert not fs_utils.exists(link)
    assert not fs_utils.exists(tmp_path / "missing")


def test_type_predicates(tmp_path: Path) -> None:
    target = tmp_path / "file.txt"
    target.write_text("x", encoding="utf-8")

    assert fs_utils.is_file(target) and not fs_utils.is_dir(target)
    assert fs_utils.is_dir(tmp_path) and not fs_utils.is_file(tmp_path)
    assert not fs_utils.is_file(tmp_path / "missing")
    assert not fs_utils.is_dir(tmp_path / "missing")


# ----------------------------------------------------------------------
# READ / WRITE
# ----------------------------------------------------------------------

def test_read_file_requires_regular_file(tmp_path: Path) -> None:
    with pytest.raises(NotFoundError):
        fs_utils.read_file(tmp_path / "missing")
    with pytest.raises(FileNotFoundError):
        fs_utils.read_file(tmp_path, locked=True)


def test_read_file_locked_and_unlocked(tmp_path: Path, invalidated: list[str]) -> None:
    target = tmp_path / "data.bin"
    target.write_bytes(b"\x00\x01payload")

    assert fs_utils.read_file(target) == b"\x00\x01payload"
    assert invalidated == []
    assert fs_utils.read_file(target, locked=True) == b"\x00\x01payload"
    assert invalidated == [str(target)]


def test_locked_read_returns_empty_when_open_fails(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    target = tmp_path / "data.bin"
    target.write_bytes(b"payload")

    def _refuse(*args, **kwargs):
        raise PermissionError("denied")

    monkeypatch.setattr(fs_utils, "open", _refuse, raising=False)

    assert fs_utils.read_file(target, locked=True) == b""
    with pytest.raises(FileIOError):
        fs_utils.read_file(target, locked=True, strict=True)
    with pytest.raises(FileIOError):
        fs_utils.read_file(target)


def test_write_file_replaces_content(tmp_path: Path) -> None:
    target = tmp_path / "out.txt"
    assert fs_utils.write_file(target, b"a much longer first payload") == 27
    assert fs_utils.write_file(target, "short", locked=True) == 5
    assert target.read_bytes() == b"short"


def test_write_file_raises_on_failure(tmp_path: Path) -> None:
    with pytest.raises(FileIOError):
        fs_utils.write_file(tmp_path / "missing" / "out.txt", b"x")


def test_append_file_creates_and_appends(tmp_path: Path) -> None:
    target = tmp_path / "log.txt"
    assert fs_utils.append_file(target, b"one\n") == 4
    assert fs_utils.append_file(target, "two\n", locked=True) == 4
    assert target.read_bytes() == b"one\ntwo\n"


def test_append_file_reports_zero_on_failure(tmp_path: Path) -> None:
    target = tmp_path / "missing" / "log.txt"
    assert fs_utils.append_file(target, b"x") == 0
    with pytest.raises(FileIOError):
        fs_utils.append_file(target, b"x", strict=True)


# ----------------------------------------------------------------------
# DIRECTORIES AND MOVES
# ----------------------------------------------------------------------

def test_make_dir_applies_mode_despite_umask(tmp_path: Path) -> None:
    target = tmp_path / "made"
    previous = os.umask(0o077)
    try:
        assert fs_utils.make_dir(target, 0o755)
    finally:
        os.umask(previous)
    assert stat.S_IMODE(target.stat().st_mode) == 0o755
    assert fs_utils.make_dir(target)


def test_make_dir_recursive_flag(tmp_path: Path) -> None:
    nested = tmp_path / "x" / "y" / "z"
    assert not fs_utils.make_dir(nested)
    assert fs_utils.make_dir(nested, recursive=True)
    assert nested.is_dir()


def test_move_missing_source_is_noop(tmp_path: Path) -> None:
    before = sorted(tmp_path.iterdir())
    assert not fs_utils.move(tmp_path / "missing", tmp_path / "dest" / "file")
    assert sorted(tmp_path.iterdir()) == before


def test_move_creates_destination_parent(tmp_path: Path) -> None:
    source = tmp_path / "src.txt"
    source.write_text("hello", encoding="utf-8")
    destination = tmp_path / "new" / "nested" / "dst.txt"

    assert fs_utils.move(source, destination)
    assert not source.exists()
    assert destination.read_text(encoding="utf-8") == "hello"


def test_move_falls_back_to_copy(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    source = tmp_path / "src.txt"
    source.write_text("hello", encoding="utf-8")
    destination = tmp_path / "dst.txt"

    def _cross_device(*args, **kwargs):
        raise OSError(18, "Invalid cross-device link")

    monkeypatch.setattr(fs_utils.os, "rename", _cross_device)

    assert fs_utils.move(source, destination)
    assert not source.exists()
    assert destination.read_text(encoding="utf-8") == "hello"


def test_move_dangling_link_is_noop(tmp_path: Path) -> None:
    link = tmp_path / "dangling"
    link.symlink_to(tmp_path / "missing")

    assert not fs_utils.move(link, tmp_path / "dst")
    assert link.is_symlink()
    assert not (tmp_path / "dst").exists()


def test_move_into_existing_directory_fails(tmp_path: Path) -> None:
    source = tmp_path / "src.txt"
    source.write_text("hello", encoding="utf-8")
    destination = tmp_path / "dest"
    destination.mkdir()

    assert not fs_utils.move(source, destination)
    assert source.read_text(encoding="utf-8") == "hello"
    assert list(destination.iterdir()) == []


def test_move_copy_succeeds_even_if_source_removal_fails(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    source = tmp_path / "src.txt"
    source.write_text("hello", encoding="utf-8")
    destination = tmp_path / "dst.txt"

    def _refuse(*args, **kwargs):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(fs_utils.os, "rename", _refuse)
    monkeypatch.setattr(fs_utils.os, "unlink", _refuse)

    assert fs_utils.move(source, destination)
    assert source.exists()
    assert destination.read_text(encoding="utf-8") == "hello"


def test_move_dry_run_leaves_source(tmp_path: Path) -> None:
    source = tmp_path / "src.txt"
    source.write_text("hello", encoding="utf-8")
    assert fs_utils.move(source, tmp_path / "dst.txt", dry_run=True)
    assert source.exists()
    assert not (tmp_path / "dst.txt").exists()


def test_move_dir_overwrite(tmp_path: Path) -> None:
    source = _tree(tmp_path)
    destination = tmp_path / "dest"
    (destination / "old").mkdir(parents=True)
    (destination / "old" / "stale.txt").write_text("stale", encoding="utf-8")

    assert not fs_utils.move_dir(source, destination)
    assert fs_utils.move_dir(source, destination, overwrite=True)
    assert not source.exists()
    assert (destination / "a.txt").exists()
    assert not (destination / "old").exists()


def test_move_dir_has_no_copy_fallback(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    source = _tree(tmp_path)

    def _cross_device(*args, **kwargs):
        raise OSError(18, "Invalid cross-device link")

    monkeypatch.setattr(fs_utils.os, "rename", _cross_device)

    assert not fs_utils.move_dir(source, tmp_path / "dest")
    assert source.is_dir()
    assert not (tmp_path / "dest").exists()


# ----------------------------------------------------------------------
# ENUMERATION
# ----------------------------------------------------------------------

def test_list_files_recursive_preorder(tmp_path: Path) -> None:
    root = _tree(tmp_path)
    results = list(fs_utils.list_files(str(root), ["txt"], recursive=True))
    assert results == [
        str(root / "a.txt"),
        str(root / "b" / "c.txt"),
        str(root / "b" / "deep" / "e.TXT"),
    ]


def test_list_files_extension_normalization(tmp_path: Path) -> None:
    root = _tree(tmp_path)
    results = set(fs_utils.list_files(root, ".TXT,md"))
    assert results == {
        str(root / "a.txt"),
        str(root / "b" / "c.txt"),
        str(root / "b" / "d.md"),
        str(root / "b" / "deep" / "e.TXT"),
    }


def test_list_files_non_recursive_and_depth(tmp_path: Path) -> None:
    root = _tree(tmp_path)
    assert list(fs_utils.list_files(root, "txt", recursive=False)) == [str(root / "a.txt")]
    assert list(fs_utils.list_files(root, "txt", max_depth=1)) == [
        str(root / "a.txt"),
        str(root / "b" / "c.txt"),
    ]


def test_list_files_keeps_relative_form(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    results = list(fs_utils.list_files("tree/", "md"))
    assert results == [os.path.join("tree", "b", "d.md")]


def test_list_files_skips_directory_links(tmp_path: Path) -> None:
    root = _tree(tmp_path)
    (root / "linked").symlink_to(root / "b", target_is_directory=True)
    results = list(fs_utils.list_files(root, "txt"))
    assert all("linked" not in path for path in results)


def test_list_files_fails_eagerly(tmp_path: Path) -> None:
    with pytest.raises(NotFoundError):
        fs_utils.list_files(tmp_path / "missing", "txt")
    target = tmp_path / "file.txt"
    target.write_text("x", encoding="utf-8")
    with pytest.raises(NotFoundError):
        fs_utils.list_files(target, "txt")


def test_list_files_is_restartable_per_call(tmp_path: Path) -> None:
    root = _tree(tmp_path)
    first = list(fs_utils.list_files(root, "md"))
    second = list(fs_utils.list_files(root, "md"))
    assert first == second == [str(root / "b" / "d.md")]


# ----------------------------------------------------------------------
# DELETION
# ----------------------------------------------------------------------

def test_delete_dir_preserve(tmp_path: Path) -> None:
    root = _tree(tmp_path)
    assert fs_utils.delete_dir(root, preserve=True)
    assert root.is_dir()
    assert list(root.iterdir()) == []


def test_delete_dir_removes_directory(tmp_path: Path) -> None:
    root = _tree(tmp_path)
    assert fs_utils.delete_dir(root)
    assert not root.exists()
    assert not fs_utils.delete_dir(root)


def test_delete_dir_does_not_follow_links(tmp_path: Path) -> None:
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "keep.txt").write_text("keep", encoding="utf-8")
    root = tmp_path / "root"
    root.mkdir()
    (root / "link").symlink_to(outside, target_is_directory=True)

    assert fs_utils.delete_dir(root)
    assert not root.exists()
    assert (outside / "keep.txt").exists()


def test_delete_attempts_every_path(tmp_path: Path, invalidated: list[str]) -> None:
    first = tmp_path / "one.txt"
    second = tmp_path / "two.txt"
    first.write_text("1", encoding="utf-8")
    second.write_text("2", encoding="utf-8")

    assert not fs_utils.delete([first, tmp_path / "missing.txt", second])
    assert not first.exists() and not second.exists()
    assert invalidated == [str(first), str(second)]


def test_delete_single_path_and_strict(tmp_path: Path) -> None:
    target = tmp_path / "one.txt"
    target.write_text("1", encoding="utf-8")
    assert fs_utils.delete(target)
    assert not fs_utils.delete(str(target))
    with pytest.raises(FileIOError, match="one.txt"):
        fs_utils.delete(target, strict=True)


def test_delete_dry_run(tmp_path: Path) -> None:
    target = tmp_path / "one.txt"
    target.write_text("1", encoding="utf-8")
    assert fs_utils.delete(target, dry_run=True)
    assert target.exists()
