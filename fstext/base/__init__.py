"""Low-level shared utilities for fstext."""

from .errors import FileIOError, FsTextError, NotFoundError
from .fs import invalidate, register_invalidation_hook, unregister_invalidation_hook
from .locking import flocked
from .logging import FsTextLogger, get_logger, setup_logging

__all__ = [
    "get_logger",
    "setup_logging",
    "FsTextLogger",
    "FsTextError",
    "NotFoundError",
    "FileIOError",
    "flocked",
    "invalidate",
    "register_invalidation_hook",
    "unregister_invalidation_hook",
]
