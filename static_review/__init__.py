"""Pluggable static review engine."""

from importlib.metadata import version, PackageNotFoundError

from .context import RunContext
from .engine import Engine, RunReport, run_review
from .errors import (
    CancellationError,
    ConfigurationError,
    FileNotFound,
    LogicError,
    ReviewExecutionError,
    StaticReviewError,
)
from .file import File
from .registry import ComponentKind, Registry
from .result import Result, ResultCollector
from .reviews import BaseReview, Review
from .status import ResultStatus, RunStatus

try:
    __version__ = version("static-review")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.1.0-dev"

__all__ = [
    "__version__",
    "BaseReview",
    "CancellationError",
    "ComponentKind",
    "ConfigurationError",
    "Engine",
    "File",
    "FileNotFound",
    "LogicError",
    "Registry",
    "Result",
    "ResultCollector",
    "ResultStatus",
    "Review",
    "ReviewExecutionError",
    "RunContext",
    "RunReport",
    "RunStatus",
    "StaticReviewError",
    "run_review",
]
