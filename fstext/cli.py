"""
fstext.cli

Command-line front end for the fstext helpers.

Provides:
 - Shared global options (config file, log level)
 - Logging configured from the YAML config
 - Safe execution wrapper (KeyboardInterrupt, fstext errors)
 - Consistent exit codes: 0 ok, 1 failure, 130 interrupted
"""

from __future__ import annotations

import argparse
import sys
from typing import Callable, Dict, Iterable, Optional

from fstext.base.errors import FsTextError
from fstext.base.logging import get_logger, setup_logging
from fstext.shared.loader import Defaults, load_defaults, load_logging_config
from fstext.shared.utils import Progress
from fstext.utils import fs_utils, str_utils

log = get_logger(__name__)

Handler = Callable[[argparse.Namespace, Defaults], int]


# ----------------------------------------------------------------------
# ARGUMENT TYPES
# ----------------------------------------------------------------------

def _octal_mode(value: str) -> int:
    try:
        return int(value, 8)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid octal mode: {value!r}") from None


# ----------------------------------------------------------------------
# SUBCOMMANDS
# ----------------------------------------------------------------------

def _cmd_ls(args: argparse.Namespace, defaults: Defaults) -> int:
    count = 0
    for path in fs_utils.list_files(args.directory, args.ext, not args.no_recursive, args.max_depth):
        print(path)
        count += 1
    log.debug("Listed %d file(s) under %s", count, args.directory)
    return 0


def _cmd_cat(args: argparse.Namespace, defaults: Defaults) -> int:
    data = fs_utils.read_file(args.path, locked=args.lock, strict=defaults.strict)
    sys.stdout.buffer.write(data)
    sys.stdout.buffer.flush()
    return 0


def _cmd_mkdir(args: argparse.Namespace, defaults: Defaults) -> int:
    mode = args.mode if args.mode is not None else defaults.dir_mode
    return 0 if fs_utils.make_dir(args.path, mode, args.parents) else 1


def _cmd_mv(args: argparse.Namespace, defaults: Defaults) -> int:
    if args.dir:
        ok = fs_utils.move_dir(args.source, args.destination, args.overwrite, dry_run=args.dry_run)
    else:
        ok = fs_utils.move(args.source, args.destination, dry_run=args.dry_run)
    if not ok:
        log.error("❌ Move failed: %s → %s", args.source, args.destination)
    return 0 if ok else 1


def _cmd_rm(args: argparse.Namespace, defaults: Defaults) -> int:
    strict = args.strict or defaults.strict
    results = []
    for path in Progress(args.paths, desc="Deleting", disable=len(args.paths) < 2):
        if args.dir:
            ok = fs_utils.delete_dir(path, args.preserve, strict=strict, dry_run=args.dry_run)
        else:
            ok = fs_utils.delete(path, strict=strict, dry_run=args.dry_run)
        results.append(ok)
    failures = results.count(False)
    if failures:
        log.error("❌ %d of %d path(s) could not be deleted", failures, len(results))
    return 0 if not failures else 1


def _cmd_encode(args: argparse.Namespace, defaults: Defaults) -> int:
    source = args.from_ or defaults.source_encoding
    target = args.to or defaults.target_encoding
    data = fs_utils.read_file(args.path, locked=args.lock, strict=defaults.strict)
    try:
        converted = str_utils.convert_encoding(data, to=target, from_=source)
    except LookupError as exc:
        log.error("❌ %s", exc)
        return 1
    sys.stdout.buffer.write(converted)
    sys.stdout.buffer.flush()
    log.debug("Transcoded %s from %s to %s", args.path, source, target)
    return 0


def _cmd_token(args: argparse.Namespace, defaults: Defaults) -> int:
    size = args.length if args.length is not None else defaults.token_length
    print(str_utils.random_token(size))
    return 0


def _cmd_title(args: argparse.Namespace, defaults: Defaults) -> int:
    print(str_utils.title(args.text))
    return 0


COMMANDS: Dict[str, Handler] = {
    "ls": _cmd_ls,
    "cat": _cmd_cat,
    "mkdir": _cmd_mkdir,
    "mv": _cmd_mv,
    "rm": _cmd_rm,
    "encode": _cmd_encode,
    "token": _cmd_token,
    "title": _cmd_title,
}


# ----------------------------------------------------------------------
# PARSER
# ----------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fstext", description="Filesystem and string helpers.")
    parser.add_argument("--config", "-c", help="Path to configuration YAML (defaults to the packaged config).")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the configured logging verbosity.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    ls = sub.add_parser("ls", help="List files by extension.")
    ls.add_argument("directory")
    ls.add_argument("-e", "--ext", required=True, help="Comma-separated extensions, e.g. 'txt,md'.")
    ls.add_argument("--no-recursive", action="store_true", help="Only list the top-level directory.")
    ls.add_argument("--max-depth", type=int, default=0, help="Levels to descend (0 = unlimited).")

    cat = sub.add_parser("cat", help="Print a file's contents.")
    cat.add_argument("path")
    cat.add_argument("--lock", action="store_true", help="Read under a shared advisory lock.")

    mkdir = sub.add_parser("mkdir", help="Create a directory.")
    mkdir.add_argument("path")
    mkdir.add_argument("--mode", type=_octal_mode, help="Octal permission mode (defaults to config dir_mode).")
    mkdir.add_argument("-p", "--parents", action="store_true", help="Create missing ancestors.")

    mv = sub.add_parser("mv", help="Move a file or directory.")
    mv.add_argument("source")
    mv.add_argument("destination")
    mv.add_argument("--dir", action="store_true", help="Directory rename (no copy fallback).")
    mv.add_argument("--overwrite", action="store_true", help="With --dir, replace an existing destination.")
    mv.add_argument("--dry-run", action="store_true", help="Simulate without modifying files.")

    rm = sub.add_parser("rm", help="Delete files or directories.")
    rm.add_argument("paths", nargs="+")
    rm.add_argument("--dir", action="store_true", help="Recursively delete directories.")
    rm.add_argument("--preserve", action="store_true", help="With --dir, keep the emptied directory.")
    rm.add_argument("--strict", action="store_true", help="Fail on the first removal error.")
    rm.add_argument("--dry-run", action="store_true", help="Simulate without modifying files.")

    encode = sub.add_parser("encode", help="Print a file transcoded between charsets.")
    encode.add_argument("path")
    encode.add_argument("--from", dest="from_", help="Source charset (defaults to config source_encoding).")
    encode.add_argument("--to", help="Target charset (defaults to config target_encoding).")
    encode.add_argument("--lock", action="store_true", help="Read under a shared advisory lock.")

    token = sub.add_parser("token", help="Print a random [A-Za-z0-9] token.")
    token.add_argument("length", nargs="?", type=int, help="Token length (defaults to config token_length).")

    title = sub.add_parser("title", help="Title-case a string.")
    title.add_argument("text")

    return parser


# ----------------------------------------------------------------------
# ENTRY POINT
# ----------------------------------------------------------------------

def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    logging_cfg = load_logging_config(args.config)
    setup_logging(
        level=args.log_level or logging_cfg.get("level"),
        use_rich=logging_cfg.get("use_rich"),
        log_dir=logging_cfg.get("log_dir"),
        file_prefix=logging_cfg.get("file_prefix"),
    )
    defaults = load_defaults(args.config)
    log.debug("Arguments: %s", args)

    try:
        return COMMANDS[args.command](args, defaults)
    except KeyboardInterrupt:
        log.warning("⚠️ Operation cancelled by user.")
        return 130
    except FsTextError as exc:
        log.error("❌ %s", exc)
        return 1
