"""Utility helpers for static-review."""

from .fileio import read_yaml_file
from .paths import expand_paths

__all__ = [
    "read_yaml_file",
    "expand_paths",
]
