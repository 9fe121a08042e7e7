"""
fstext.base.fs

Explicit file-status invalidation.

Python does not keep a process-wide stat cache, but cached file views do
exist (``linecache``, plus whatever a caller layers on top). Operations that
read under a lock or delete entries call ``invalidate(path)`` so those views
can be dropped. Callers with their own caches register a hook.
"""

from __future__ import annotations

import linecache
import os
from typing import Callable, List

from .logging import get_logger

log = get_logger(__name__)

InvalidationHook = Callable[[str], None]

_HOOKS: List[InvalidationHook] = []


def register_invalidation_hook(hook: InvalidationHook) -> InvalidationHook:
    """Call ``hook(path)`` on every invalidation. Returns the hook (usable as a decorator)."""
    if hook not in _HOOKS:
        _HOOKS.append(hook)
    return hook


def unregister_invalidation_hook(hook: InvalidationHook) -> None:
    if hook in _HOOKS:
        _HOOKS.remove(hook)


def invalidate(path: str | os.PathLike[str]) -> None:
    """Drop any cached status/contents held for ``path``."""
    key = os.fspath(path)
    linecache.checkcache(key)
    for hook in list(_HOOKS):
        hook(key)
    log.debug("Invalidated cached status for %s", key)
