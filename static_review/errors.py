"""Exception taxonomy for static-review."""

from __future__ import annotations

from typing import Optional, Sequence


class StaticReviewError(Exception):
    """Base class for every fatal condition raised by the review core."""


class ConfigurationError(StaticReviewError):
    """Raised for unknown, duplicate or cyclic identifiers and bad config files."""

    def __init__(self, message: str, identifier: Optional[str] = None) -> None:
        super().__init__(message)
        self.identifier = identifier

    @classmethod
    def unknown(cls, identifier: str) -> "ConfigurationError":
        return cls(f"unknown identifier: {identifier}", identifier)

    @classmethod
    def duplicate(cls, identifier: str) -> "ConfigurationError":
        return cls(f"duplicate identifier: {identifier}", identifier)

    @classmethod
    def cycle(cls, chain: Sequence[str]) -> "ConfigurationError":
        return cls(f"cyclic binding: {' -> '.join(chain)}", chain[-1])


class FileNotFound(StaticReviewError):
    """Raised when content is requested for a path that is not a readable file."""

    def __init__(self, path: str, reason: Optional[str] = None) -> None:
        message = f"file not found: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.path = path


class ReviewExecutionError(StaticReviewError):
    """Raised when a review cannot complete ``applies`` or ``evaluate``."""

    def __init__(
        self,
        message: str,
        review_identifier: Optional[str] = None,
        file_path: Optional[str] = None,
    ) -> None:
        labels = []
        if review_identifier:
            labels.append(f"review={review_identifier}")
        if file_path:
            labels.append(f"file={file_path}")
        if labels:
            message = f"{message} [{', '.join(labels)}]"
        super().__init__(message)
        self.review_identifier = review_identifier
        self.file_path = file_path


class LogicError(StaticReviewError):
    """Raised when the API is used out of order, e.g. reading an unfinished run."""


class CancellationError(StaticReviewError):
    """Raised when a run stops because of a timeout or an external cancel."""
