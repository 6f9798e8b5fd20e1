"""Per-invocation inputs shared by the engine, registry and collector."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence

from .errors import ConfigurationError
from .file import File
from .registry import Registry
from .result import ResultCollector


@dataclass
class RunContext:
    """Bundle everything one run needs; build a new one per invocation."""

    files: Sequence[File]
    review_identifiers: Sequence[str]
    registry: Registry
    collector: ResultCollector = field(default_factory=ResultCollector)
    workers: int = 1
    timeout: Optional[float] = None
    cancel_event: threading.Event = field(default_factory=threading.Event)

    def __post_init__(self) -> None:
        self.files = tuple(self.files)
        self.review_identifiers = tuple(self.review_identifiers)
        if self.workers < 1:
            raise ConfigurationError(f"workers must be at least 1, got {self.workers}")
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")

    @classmethod
    def from_paths(
        cls,
        paths: Iterable[str | Path],
        review_identifiers: Iterable[str],
        registry: Registry,
        **kwargs: Any,
    ) -> "RunContext":
        return cls(
            files=[File(path) for path in paths],
            review_identifiers=list(review_identifiers),
            registry=registry,
            **kwargs,
        )

    def cancel(self) -> None:
        """Ask a running engine to stop before its next pair."""

        self.cancel_event.set()
