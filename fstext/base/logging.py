"""
fstext.base.logging

Typed logging for fstext.

Features:
 - FsTextLogger subclass with Rich detection flag
 - Unified setup for Rich + standard logging
 - Optional per-run log file
 - Colorized, emoji-enhanced level output
 - Config-driven defaults (logging level, Rich toggle, log directory)

The library itself only ever calls ``get_logger``; handlers are attached by
``setup_logging`` (the CLI does this), so importing fstext never prints.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, cast

from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

ROOT_LOGGER_NAME = "fstext"

# ----------------------------------------------------------------------
# LEVEL STYLE METADATA
# ----------------------------------------------------------------------

ANSI_RESET = "\033[0m"

LEVEL_STYLES: Dict[int, Dict[str, str]] = {
    logging.DEBUG: {"emoji": "🐛", "ansi": "\033[36m", "rich": "bright_cyan"},
    logging.INFO: {"emoji": "ℹ️", "ansi": "\033[32m", "rich": "green"},
    logging.WARNING: {"emoji": "⚠️", "ansi": "\033[33m", "rich": "yellow"},
    logging.ERROR: {"emoji": "❌", "ansi": "\033[31m", "rich": "red"},
    logging.CRITICAL: {"emoji": "💥", "ansi": "\033[95m", "rich": "bold magenta"},
}
DEFAULT_STYLE = LEVEL_STYLES[logging.INFO]


def _style_for(record: logging.LogRecord) -> Dict[str, str]:
    return LEVEL_STYLES.get(record.levelno, DEFAULT_STYLE)


# ----------------------------------------------------------------------
# FORMATTERS
# ----------------------------------------------------------------------

class ColorEmojiFormatter(logging.Formatter):
    """Console formatter that injects colored level names and emojis."""

    def format(self, record: logging.LogRecord) -> str:
        style = _style_for(record)
        display = f"{style['emoji']} {record.levelname}"
        record.level_display = f"{style['ansi']}{display}{ANSI_RESET}"  # type: ignore[attr-defined]
        try:
            return super().format(record)
        finally:
            delattr(record, "level_display")


class EmojiFormatter(logging.Formatter):
    """File formatter that prefixes log lines with the level emoji."""

    def format(self, record: logging.LogRecord) -> str:
        record.level_emoji = _style_for(record)["emoji"]  # type: ignore[attr-defined]
        return super().format(record)


class FsTextRichHandler(RichHandler):
    """Rich console handler with emoji-enhanced level column."""

    def get_level_text(self, record: logging.LogRecord) -> Text:  # type: ignore[override]
        style = _style_for(record)
        text = Text()
        text.append(f"{style['emoji']} ", style=style["rich"])
        text.append(record.levelname, style=style["rich"])
        return text


# ----------------------------------------------------------------------
# LOGGER CLASS
# ----------------------------------------------------------------------

class FsTextLogger(logging.Logger):
    """Custom logger with Rich support flag and optional log file."""

    rich_enabled: bool = False
    log_file: Optional[Path] = None


# ----------------------------------------------------------------------
# NORMALIZATION HELPERS
# ----------------------------------------------------------------------

def normalize_level(value: Any) -> str:
    if isinstance(value, str):
        candidate = value.strip().upper()
        if candidate in logging._nameToLevel:  # type: ignore[attr-defined]
            return candidate
    elif isinstance(value, int):
        label = logging.getLevelName(value)
        if isinstance(label, str) and not label.startswith("Level "):
            return label
    return "INFO"


def normalize_use_rich(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"auto", "default", ""}:
            return None
        if lowered in {"true", "yes", "1", "on"}:
            return True
        if lowered in {"false", "no", "0", "off"}:
            return False
    return None


def _load_default_logging_settings() -> Dict[str, Any]:
    # Local import: the loader logs through this module.
    from fstext.shared.loader import load_logging_config

    return load_logging_config(None)


# ----------------------------------------------------------------------
# BASE LOGGER SETUP
# ----------------------------------------------------------------------

def setup_logging(
    level: str | int | None = None,
    use_rich: Optional[bool] = None,
    log_dir: Optional[Path | str] = None,
    file_prefix: Optional[str] = None,
) -> FsTextLogger:
    """
    Configure and return the package-wide fstext logger.

    Args:
        level: Desired logging level. Defaults to the packaged config.yaml (INFO if unset).
        use_rich: Force-enable or disable the Rich handler. None honors config (Rich by default).
        log_dir: Directory for a per-run log file. No file is written when unset.
        file_prefix: Prefix for generated log filenames.
    """
    defaults = _load_default_logging_settings()
    resolved_level = normalize_level(level if level is not None else defaults.get("level"))
    rich_choice = use_rich if use_rich is not None else defaults.get("use_rich")
    resolved_use_rich = True if rich_choice is None else bool(rich_choice)
    resolved_log_dir = log_dir or defaults.get("log_dir")
    resolved_file_prefix = file_prefix or defaults.get("file_prefix") or ROOT_LOGGER_NAME

    logging.setLoggerClass(FsTextLogger)
    logger = cast(FsTextLogger, logging.getLogger(ROOT_LOGGER_NAME))
    logger.setLevel(resolved_level)

    # Tear down previous handlers so we can rebuild with new settings.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # ------------------------------------------------------------------
    # Console Handler (Rich or ANSI)
    # ------------------------------------------------------------------
    console_handler: logging.Handler
    if resolved_use_rich:
        console_handler = FsTextRichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            markup=False,
            show_time=True,
            show_level=True,
            show_path=False,
            log_time_format="[%X]",
        )
        logger.rich_enabled = True
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(
            ColorEmojiFormatter(
                fmt="%(asctime)s %(level_display)s %(name)s: %(message)s",
                datefmt="%H:%M:%S",
            )
        )
        logger.rich_enabled = False
    console_handler.setLevel(logging.NOTSET)
    logger.addHandler(console_handler)

    # ------------------------------------------------------------------
    # File Handler
    # ------------------------------------------------------------------
    logger.log_file = None
    if resolved_log_dir:
        directory = Path(resolved_log_dir).expanduser()
        directory.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        log_file_path = directory / f"{resolved_file_prefix}_{timestamp}.log"

        file_handler = logging.FileHandler(log_file_path, mode="a", encoding="utf-8")
        file_handler.setFormatter(
            EmojiFormatter(
                fmt="%(asctime)s %(level_emoji)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        file_handler.setLevel(logging.NOTSET)
        logger.addHandler(file_handler)
        logger.log_file = log_file_path

    # ------------------------------------------------------------------
    # Finalize
    # ------------------------------------------------------------------
    logger.propagate = False
    logger._initialized = True  # type: ignore[attr-defined]
    logger.debug(
        "Logger initialized at level %s (Rich=%s)",
        resolved_level,
        "ON" if logger.rich_enabled else "OFF",
    )
    if logger.log_file is not None:
        logger.info("📄 Log file created at: %s", logger.log_file.resolve())

    return logger


# ----------------------------------------------------------------------
# UTILITY ACCESSOR
# ----------------------------------------------------------------------

def get_logger(name: str = ROOT_LOGGER_NAME) -> FsTextLogger:
    """Retrieve a namespaced fstext logger (configured later via setup_logging)."""

    logging.setLoggerClass(FsTextLogger)
    base = cast(FsTextLogger, logging.getLogger(ROOT_LOGGER_NAME))

    if not getattr(base, "_initialized", False) and not base.handlers:
        base.addHandler(logging.NullHandler())

    if not name or name == ROOT_LOGGER_NAME:
        return base

    if name.startswith(ROOT_LOGGER_NAME + "."):
        name = name[len(ROOT_LOGGER_NAME) + 1:]
    return cast(FsTextLogger, base.getChild(name))
