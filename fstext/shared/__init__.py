"""Configuration and progress helpers shared by the fstext front ends."""

from .loader import Defaults, load_config, load_defaults, load_logging_config
from .utils import Progress

__all__ = [
    "Defaults",
    "load_config",
    "load_defaults",
    "load_logging_config",
    "Progress",
]
