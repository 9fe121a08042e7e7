"""
Configuration loading and validation helpers.

Provides:
 - `load_config`: basic YAML loader (explicit path or packaged config.yaml)
 - `load_logging_config`: validated `logging` section
 - `load_defaults`: validated `defaults` section as a frozen `Defaults`
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping

from fstext.base.file_io import read_yaml
from fstext.base.logging import get_logger, normalize_level, normalize_use_rich

log = get_logger(__name__)

DEFAULT_CONFIG_FILENAME = "config.yaml"
CONFIGS_DIR = Path(__file__).resolve().parents[1] / "configs"
LOGGING_SECTION_KEY = "logging"
DEFAULTS_SECTION_KEY = "defaults"

LOGGING_ALLOWED_KEYS = {"level", "use_rich", "log_dir", "file_prefix"}
DEFAULTS_ALLOWED_KEYS = {"dir_mode", "token_length", "source_encoding", "target_encoding", "strict"}

YES_VALUES = {"1", "true", "yes", "y", "on"}
NO_VALUES = {"0", "false", "no", "n", "off"}


@dataclass(frozen=True)
class Defaults:
    dir_mode: int = 0o755
    token_length: int = 16
    source_encoding: str = "gb2312"
    target_encoding: str = "utf-8"
    strict: bool = False


def _resolve_config_path(config_path: str | Path | None) -> Path | None:
    if config_path:
        return Path(config_path).expanduser()
    candidate = CONFIGS_DIR / DEFAULT_CONFIG_FILENAME
    return candidate if candidate.exists() else None


def load_config(path: str | Path | None) -> Mapping[str, Any]:
    """Load the YAML root mapping from ``path`` (or the packaged default)."""
    cfg_path = _resolve_config_path(path)
    if cfg_path is None:
        return {}
    if not cfg_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {cfg_path}")

    data = read_yaml(cfg_path)
    if not isinstance(data, Mapping):
        raise ValueError(f"Configuration root must be a mapping in {cfg_path}")
    log.debug("Loaded configuration from %s", cfg_path)
    return data


def _extract_section(
    root: Mapping[str, Any],
    key: str,
    allowed: set[str],
    config_path: str | Path | None,
) -> Dict[str, Any]:
    section = root.get(key) or {}
    if not isinstance(section, Mapping):
        raise ValueError(f"'{key}' section must be a mapping in {config_path}")

    invalid = [name for name in section if name not in allowed]
    if invalid:
        invalid_keys = ", ".join(sorted(invalid))
        raise ValueError(f"'{key}' contains unsupported keys in {config_path}: {invalid_keys}")
    return dict(section)


def _coerce_yes_no(value: object, key: str) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    text = str(value).strip().lower()
    if text in YES_VALUES:
        return True
    if text in NO_VALUES:
        return False
    raise ValueError(f"Configuration field '{key}' must be a yes/no value, got {value!r}.")


def _coerce_int(value: Any, key: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Configuration field '{key}' must be an integer.")
    try:
        return int(str(value).strip())
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Configuration field '{key}' must be an integer.") from exc


def _coerce_mode(value: Any) -> int:
    """Permission modes are octal when written as strings ("0755", "0o700")."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text.startswith("0o"):
        text = text[2:]
    try:
        return int(text, 8)
    except ValueError as exc:
        raise ValueError(f"Configuration field 'dir_mode' must be an octal mode, got {value!r}.") from exc


def load_logging_config(config_path: str | Path | None = None) -> Dict[str, Any]:
    root = load_config(config_path)
    section = _extract_section(root, LOGGING_SECTION_KEY, LOGGING_ALLOWED_KEYS, config_path)
    settings: Dict[str, Any] = {}
    if "level" in section:
        settings["level"] = normalize_level(section["level"])
    if "use_rich" in section:
        settings["use_rich"] = normalize_use_rich(section["use_rich"])
    if section.get("log_dir"):
        settings["log_dir"] = str(Path(str(section["log_dir"])).expanduser())
    if section.get("file_prefix"):
        settings["file_prefix"] = str(section["file_prefix"])
    return settings


def load_defaults(config_path: str | Path | None = None) -> Defaults:
    root = load_config(config_path)
    section = _extract_section(root, DEFAULTS_SECTION_KEY, DEFAULTS_ALLOWED_KEYS, config_path)
    values: Dict[str, Any] = {}
    if section.get("dir_mode") is not None:
        values["dir_mode"] = _coerce_mode(section["dir_mode"])
    if section.get("token_length") is not None:
        token_length = _coerce_int(section["token_length"], "token_length")
        if token_length < 0:
            raise ValueError("Configuration field 'token_length' must not be negative.")
        values["token_length"] = token_length
    for key in ("source_encoding", "target_encoding"):
        if section.get(key):
            values[key] = str(section[key]).strip()
    if "strict" in section:
        values["strict"] = _coerce_yes_no(section["strict"], "strict")
    return Defaults(**values)
