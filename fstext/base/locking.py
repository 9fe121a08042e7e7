"""
fstext.base.locking

Advisory file locks via ``fcntl.flock`` (POSIX).

Locks belong to the open file description, so two handles opened separately
contend with each other even inside a single process.
"""

from __future__ import annotations

import fcntl
from contextlib import contextmanager
from typing import IO, Any, Iterator

from .logging import get_logger

log = get_logger(__name__)


@contextmanager
def flocked(handle: IO[Any], exclusive: bool = False) -> Iterator[IO[Any]]:
    """
    Hold a shared (or exclusive) advisory lock on ``handle`` for the block.

    Blocks until the lock is granted. The lock is released on every exit
    path; closing the handle stays the caller's job.
    """
    operation = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
    fcntl.flock(handle.fileno(), operation)
    log.debug("Acquired %s lock on %s", "exclusive" if exclusive else "shared", handle.name)
    try:
        yield handle
    finally:
        fcntl.flock(handle.fileno(), fcntl.LOCK_UN)
