"""Expand command-line paths into the files to review."""

from __future__ import annotations

import fnmatch
from pathlib import Path
from typing import Iterable, List, Sequence

DEFAULT_EXCLUDES = (".git/*", "*/.git/*", "__pycache__/*", "*/__pycache__/*")


def _excluded(path: Path, patterns: Sequence[str]) -> bool:
    candidate = path.as_posix()
    return any(fnmatch.fnmatch(candidate, pattern) for pattern in patterns)


def expand_paths(paths: Iterable[str], exclude: Sequence[str] = ()) -> List[str]:
    """Return files named directly or found beneath directories, in input order.

    Directory contents are sorted so repeated runs see the same order.
    Explicit file paths are kept even when they do not exist; the missing
    file surfaces when a review reads it.
    """

    patterns = tuple(DEFAULT_EXCLUDES) + tuple(exclude)
    seen = set()
    expanded: List[str] = []
    for raw in paths:
        root = Path(raw)
        if root.is_dir():
            candidates = sorted(path for path in root.rglob("*") if path.is_file())
        else:
            candidates = [root]
        for path in candidates:
            key = path.as_posix()
            if key in seen or _excluded(path, patterns):
                continue
            seen.add(key)
            expanded.append(str(path))
    return expanded
