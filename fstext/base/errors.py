"""Exception types raised by fstext operations."""

from __future__ import annotations


class FsTextError(Exception):
    """Base class for every error fstext raises on purpose."""


class NotFoundError(FsTextError, FileNotFoundError):
    """Target path is missing or is not the expected kind of entry."""


class FileIOError(FsTextError, OSError):
    """A read or write failed for a reason other than a missing path."""
