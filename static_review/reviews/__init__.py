"""Review contract shared by every check."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Protocol, Tuple

from static_review.file import File
from static_review.result import Result
from static_review.status import ResultStatus


class Review(Protocol):
    """Protocol implemented by all reviews."""

    identifier: str

    def applies(self, file: File) -> bool:
        """Return whether this review should run against ``file``."""

    def evaluate(self, file: File) -> Result:
        """Check ``file`` and return a result for this review."""


class BaseReview(ABC):
    """Convenience base for reviews keyed on file extensions.

    ``extensions`` lists lower-cased suffixes without the dot; an empty tuple
    means the review applies to every file.
    """

    extensions: Tuple[str, ...] = ()

    def __init__(self, identifier: str, options: Optional[Mapping[str, Any]] = None) -> None:
        self.identifier = identifier
        self.options: Mapping[str, Any] = dict(options or {})

    def applies(self, file: File) -> bool:
        return not self.extensions or file.extension in self.extensions

    @abstractmethod
    def evaluate(self, file: File) -> Result:
        """Check ``file`` and return a result for this review."""

    def passed(self, file: File, message: Optional[str] = None) -> Result:
        return Result(self.identifier, file.path, ResultStatus.PASSED, message)

    def failed(self, file: File, message: str) -> Result:
        return Result(self.identifier, file.path, ResultStatus.FAILED, message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.identifier!r})"
