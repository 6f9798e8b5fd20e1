"""Read-only handle to a single file under review."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import List, Optional

from .errors import FileNotFound


class File:
    """Wrap a filesystem path and load its content on first access.

    Construction never touches the disk, so a missing path only surfaces as
    :class:`FileNotFound` when :meth:`content` is called. The first successful
    read is cached; concurrent first reads share a lock so the file is read
    once.
    """

    __slots__ = ("_path", "_content", "_lock")

    def __init__(self, path: str | Path) -> None:
        self._path = str(path)
        self._content: Optional[bytes] = None
        self._lock = threading.Lock()

    @property
    def path(self) -> str:
        return self._path

    @property
    def name(self) -> str:
        return Path(self._path).name

    @property
    def extension(self) -> str:
        """Return the lower-cased suffix without the dot, or ``""``."""

        return Path(self._path).suffix.lstrip(".").lower()

    def content(self) -> bytes:
        if self._content is not None:
            return self._content
        with self._lock:
            if self._content is None:
                self._content = self._read()
        return self._content

    def text(self, encoding: str = "utf-8") -> str:
        return self.content().decode(encoding, errors="replace")

    def lines(self) -> List[str]:
        return self.text().splitlines()

    def _read(self) -> bytes:
        target = Path(self._path)
        if not target.is_file():
            raise FileNotFound(self._path)
        try:
            return target.read_bytes()
        except OSError as exc:
            raise FileNotFound(self._path, exc.strerror) from exc

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, File):
            return NotImplemented
        return self._path == other._path

    def __hash__(self) -> int:
        return hash(self._path)

    def __repr__(self) -> str:
        return f"File({self._path!r})"
