"""
fstext.utils.fs_utils

Stateless filesystem helpers: existence checks, locked/unlocked reads and
writes, directory creation, moves, recursive enumeration and deletion.

Mutating helpers follow a best-effort contract: failures are logged and
reported through the return value. Pass ``strict=True`` where offered to get
the underlying error raised instead.
"""

from __future__ import annotations

import os
import shutil
from typing import BinaryIO, Iterable, Iterator, List, Set, Union

from fstext.base.errors import FileIOError, NotFoundError
from fstext.base.fs import invalidate
from fstext.base.locking import flocked
from fstext.base.logging import get_logger

log = get_logger(__name__)

PathLike = Union[str, "os.PathLike[str]"]
DEFAULT_DIR_MODE = 0o755


def _to_bytes(data: bytes | str) -> bytes:
    return data.encode("utf-8") if isinstance(data, str) else bytes(data)


# ----------------------------------------------------------------------
# PREDICATES
# ----------------------------------------------------------------------

def exists(path: PathLike) -> bool:
    """True when ``path`` resolves to a file or directory. Links are followed, so a dangling one is False."""
    return os.path.exists(path)


def is_file(path: PathLike) -> bool:
    return os.path.isfile(path)


def is_dir(path: PathLike) -> bool:
    return os.path.isdir(path)


# ----------------------------------------------------------------------
# READ / WRITE
# ----------------------------------------------------------------------

def read_file(path: PathLike, locked: bool = False, *, strict: bool = False) -> bytes:
    """
    Return the full contents of a regular file.

    Args:
        path: File to read.
        locked: Hold a shared advisory lock while reading.
        strict: With ``locked``, raise instead of returning ``b""`` when the
            file cannot be opened.

    Raises:
        NotFoundError: ``path`` is not a regular file.
        FileIOError: The read itself failed.
    """
    if not is_file(path):
        raise NotFoundError(f"File does not exist at path {os.fspath(path)}.")

    if not locked:
        try:
            with open(path, "rb") as handle:
                return handle.read()
        except OSError as exc:
            raise FileIOError(f"File read failed at path {os.fspath(path)}: {exc}") from exc

    try:
        handle = open(path, "rb")
    except OSError as exc:
        if strict:
            raise FileIOError(f"Cannot open {os.fspath(path)} for shared read: {exc}") from exc
        log.warning("⚠️ Cannot open %s for shared read, returning empty contents: %s", path, exc)
        return b""

    with handle, flocked(handle):
        invalidate(path)
        try:
            return handle.read()
        except OSError as exc:
            raise FileIOError(f"File read failed at path {os.fspath(path)}: {exc}") from exc


def _write(path: PathLike, payload: bytes, locked: bool, append: bool) -> int:
    if append:
        handle = open(path, "ab")
    else:
        # O_CREAT without O_TRUNC: truncation must wait until the lock is held.
        fd = os.open(path, os.O_WRONLY | os.O_CREAT, 0o666)
        handle = os.fdopen(fd, "wb")

    with handle:
        if locked:
            with flocked(handle, exclusive=True):
                return _write_body(handle, payload, append)
        return _write_body(handle, payload, append)


def _write_body(handle: BinaryIO, payload: bytes, append: bool) -> int:
    if not append:
        handle.seek(0)
        handle.truncate()
    written = handle.write(payload)
    handle.flush()
    return written


def write_file(path: PathLike, data: bytes | str, locked: bool = False) -> int:
    """
    Replace the contents of ``path`` with ``data`` and return the byte count.

    With ``locked`` an exclusive lock covers truncation and write, so locked
    readers see either the old or the new contents, never a mix.

    Raises:
        FileIOError: The file could not be opened or written.
    """
    payload = _to_bytes(data)
    try:
        written = _write(path, payload, locked, append=False)
    except OSError as exc:
        raise FileIOError(f"File write failed at path {os.fspath(path)}: {exc}") from exc
    log.debug("Wrote %d bytes to %s (locked=%s)", written, path, locked)
    return written


def append_file(path: PathLike, data: bytes | str, locked: bool = False, *, strict: bool = False) -> int:
    """
    Append ``data`` to ``path`` (created if missing).

    Returns the number of bytes written, or 0 on failure unless ``strict``.
    """
    payload = _to_bytes(data)
    try:
        written = _write(path, payload, locked, append=True)
    except OSError as exc:
        if strict:
            raise FileIOError(f"File append failed at path {os.fspath(path)}: {exc}") from exc
        log.warning("⚠️ Append to %s failed: %s", path, exc)
        return 0
    log.debug("Appended %d bytes to %s (locked=%s)", written, path, locked)
    return written


# ----------------------------------------------------------------------
# DIRECTORIES AND MOVES
# ----------------------------------------------------------------------

def make_dir(path: PathLike, mode: int = DEFAULT_DIR_MODE, recursive: bool = False) -> bool:
    """
    Create a directory with exactly ``mode`` (re-applied after creation to undo umask).

    Returns True when the directory already exists or was created.
    """
    if is_dir(path):
        return True

    try:
        if recursive:
            os.makedirs(path, mode)
        else:
            os.mkdir(path, mode)
        os.chmod(path, mode)
    except OSError as exc:
        log.warning("⚠️ Failed to create directory %s: %s", path, exc)
        return False

    log.debug("📁 Created directory %s (mode=%o)", path, mode)
    return True


def move(source: PathLike, destination: PathLike, *, dry_run: bool = False) -> bool:
    """
    Move a file or directory, creating the destination's parent if needed.

    Tries an atomic rename first and falls back to copy-then-delete when the
    rename fails (for example across filesystems).
    """
    if not exists(source):
        log.debug("Source not found (skip move): %s", source)
        return False

    if dry_run:
        log.info("[DRY-RUN] Would move %s → %s", source, destination)
        return True

    dest_dir = os.path.dirname(os.fspath(destination))
    if dest_dir and not exists(dest_dir) and not make_dir(dest_dir, recursive=True):
        return False

    try:
        os.rename(source, destination)
        log.debug("Moved %s → %s", source, destination)
        return True
    except OSError as exc:
        log.debug("Rename %s → %s failed (%s), trying copy", source, destination, exc)

    try:
        # copyfile refuses a directory on either side instead of nesting into it.
        shutil.copyfile(source, destination)
        shutil.copystat(source, destination)
    except OSError as exc:
        log.warning("⚠️ Move failed %s → %s: %s", source, destination, exc)
        return False

    try:
        os.unlink(source)
    except OSError as exc:
        log.warning("⚠️ Copied %s but could not remove it: %s", source, exc)
    else:
        invalidate(source)
        log.debug("Copied %s → %s and removed source", source, destination)
    return True


def move_dir(
    source: PathLike,
    destination: PathLike,
    overwrite: bool = False,
    *,
    dry_run: bool = False,
) -> bool:
    """
    Rename a directory. With ``overwrite`` an existing destination directory
    is deleted first. There is no copy fallback.
    """
    if dry_run:
        log.info("[DRY-RUN] Would move directory %s → %s (overwrite=%s)", source, destination, overwrite)
        return True

    if overwrite and is_dir(destination) and not delete_dir(destination):
        return False

    try:
        os.rename(source, destination)
    except OSError as exc:
        log.warning("⚠️ Directory move failed %s → %s: %s", source, destination, exc)
        return False

    log.debug("Moved directory %s → %s", source, destination)
    return True


# ----------------------------------------------------------------------
# ENUMERATION
# ----------------------------------------------------------------------

def normalize_extensions(extensions: str | Iterable[str]) -> Set[str]:
    """Turn ``"php,.HTML"`` or ``["php", ".html"]`` into ``{"php", "html"}``."""
    items = extensions.split(",") if isinstance(extensions, str) else extensions
    normalized = set()
    for ext in items:
        ext = ext.strip().lower()
        normalized.add(ext[1:] if ext.startswith(".") else ext)
    return normalized


def _extension(name: str) -> str:
    return name.rsplit(".", 1)[1].lower() if "." in name else ""


def _walk(directory: str, wanted: Set[str], recursive: bool, max_depth: int, depth: int) -> Iterator[str]:
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except OSError as exc:
        log.warning("⚠️ Skipping unreadable directory %s: %s", directory, exc)
        return

    for entry in entries:
        path = os.path.join(directory, entry.name)
        try:
            entry_is_dir = entry.is_dir()
            real_dir = entry.is_dir(follow_symlinks=False)
        except OSError:
            entry_is_dir = real_dir = False

        if entry_is_dir:
            if recursive and real_dir and (max_depth <= 0 or depth < max_depth):
                yield from _walk(path, wanted, recursive, max_depth, depth + 1)
            continue

        if _extension(entry.name) in wanted:
            yield path


def list_files(
    directory: PathLike,
    extensions: str | Iterable[str],
    recursive: bool = True,
    max_depth: int = 0,
) -> Iterator[str]:
    """
    Lazily yield files under ``directory`` whose extension is in ``extensions``.

    Args:
        directory: Directory to enumerate. Yielded paths keep its form
            (relative stays relative).
        extensions: Comma-separated string or iterable; case and a leading dot
            are ignored.
        recursive: Descend into subdirectories (pre-order, name order).
        max_depth: When > 0, descend at most this many levels below
            ``directory``. 0 means unlimited.

    Raises:
        NotFoundError: ``directory`` is not a readable directory. Raised by
            this call, before iteration starts.
    """
    root = os.fspath(directory)
    if not is_dir(root) or not os.access(root, os.R_OK):
        raise NotFoundError(f"Directory is unreadable: {root}")

    stripped = root.rstrip(os.sep) or os.sep
    return _walk(stripped, normalize_extensions(extensions), recursive, max_depth, 0)


# ----------------------------------------------------------------------
# DELETION
# ----------------------------------------------------------------------

def delete_dir(directory: PathLike, preserve: bool = False, *, strict: bool = False, dry_run: bool = False) -> bool:
    """
    Recursively delete the contents of ``directory`` and, unless ``preserve``,
    the directory itself. Links are removed, never followed.

    Returns False only when ``directory`` is not a directory; individual
    removal failures are logged and skipped unless ``strict``.
    """
    if not is_dir(directory):
        log.debug("Directory not found (skip delete): %s", directory)
        return False

    if dry_run:
        log.info("[DRY-RUN] Would delete directory %s (preserve=%s)", directory, preserve)
        return True

    try:
        with os.scandir(directory) as it:
            entries = list(it)
    except OSError as exc:
        if strict:
            raise FileIOError(f"Cannot list directory {os.fspath(directory)}: {exc}") from exc
        log.warning("⚠️ Cannot list directory %s: %s", directory, exc)
        entries = []

    for entry in entries:
        if entry.is_dir(follow_symlinks=False):
            delete_dir(entry.path, strict=strict)
        else:
            delete(entry.path, strict=strict)

    if not preserve:
        try:
            os.rmdir(directory)
        except OSError as exc:
            if strict:
                raise FileIOError(f"Failed to remove directory {os.fspath(directory)}: {exc}") from exc
            log.warning("⚠️ Failed to remove directory %s: %s", directory, exc)
        else:
            invalidate(directory)
            log.debug("🗑️ Deleted directory %s", directory)

    return True


def delete(paths: PathLike | Iterable[PathLike], *, strict: bool = False, dry_run: bool = False) -> bool:
    """
    Delete one path or every path in a sequence.

    Every path is attempted even after a failure. Returns True only if all
    deletions succeeded; ``strict`` raises FileIOError listing the failures.
    """
    if isinstance(paths, (str, os.PathLike)):
        targets: List[PathLike] = [paths]
    else:
        targets = list(paths)

    failed: List[str] = []
    for path in targets:
        if dry_run:
            log.info("[DRY-RUN] Would delete %s", path)
            continue
        try:
            os.unlink(path)
        except OSError as exc:
            log.warning("⚠️ Failed to delete %s: %s", path, exc)
            failed.append(os.fspath(path))
            continue
        invalidate(path)
        log.debug("🗑️ Deleted %s", path)

    if failed and strict:
        raise FileIOError(f"Failed to delete: {', '.join(failed)}")
    return not failed
