"""Helpers for reading structured text files with consistent defaults."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import yaml


DEFAULT_ENCODING = "utf-8"


def _to_path(path: Path | str) -> Path:
    return Path(path).expanduser()


def read_yaml(path: Path | str, encoding: str = DEFAULT_ENCODING) -> Mapping[str, Any] | list[Any]:
    with open(_to_path(path), "r", encoding=encoding) as handle:
        data = yaml.safe_load(handle)
    return data if data is not None else {}
