"""
fstext
------

Small, stateless helpers for the local filesystem and for code-point aware
string handling.

Modules:
  utils.fs_utils  : existence checks, locked reads/writes, moves, listing, deletion
  utils.str_utils : substring, length, title case, transcoding, random tokens
  base            : logging, errors, advisory locks, status invalidation
  shared          : YAML configuration and progress bars for the CLI
"""

from fstext.base.errors import FileIOError, FsTextError, NotFoundError
from fstext.base.fs import invalidate, register_invalidation_hook, unregister_invalidation_hook
from fstext.utils.fs_utils import (
    append_file,
    delete,
    delete_dir,
    exists,
    is_dir,
    is_file,
    list_files,
    make_dir,
    move,
    move_dir,
    read_file,
    write_file,
)
from fstext.utils.str_utils import (
    char_at,
    contains,
    convert_encoding,
    ensure_suffix,
    length,
    random_token,
    substring,
    title,
)

__version__ = "1.0.0"

__all__ = [
    # Errors
    "FsTextError",
    "NotFoundError",
    "FileIOError",

    # Status invalidation
    "invalidate",
    "register_invalidation_hook",
    "unregister_invalidation_hook",

    # Filesystem
    "exists",
    "is_file",
    "is_dir",
    "read_file",
    "write_file",
    "append_file",
    "make_dir",
    "move",
    "move_dir",
    "list_files",
    "delete_dir",
    "delete",

    # Strings
    "substring",
    "contains",
    "length",
    "title",
    "convert_encoding",
    "random_token",
    "ensure_suffix",
    "char_at",
]
