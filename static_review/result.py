"""Core result data structures for the review engine."""

from __future__ import annotations

import threading
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from .errors import LogicError
from .status import ResultStatus

if TYPE_CHECKING:
    from .engine import RunReport


@dataclass(frozen=True)
class Result:
    """Capture the outcome of one review against one file."""

    review_identifier: str
    file_path: str
    status: ResultStatus
    message: Optional[str] = None

    @property
    def key(self) -> Tuple[str, str]:
        return (self.review_identifier, self.file_path)

    @property
    def passed(self) -> bool:
        return self.status is ResultStatus.PASSED

    def to_dict(self) -> Dict[str, Optional[str]]:
        data = asdict(self)
        data["status"] = self.status.value
        return data


@dataclass(frozen=True)
class Summary:
    """Aggregate result counts by status."""

    passed: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.passed + self.failed

    def to_dict(self) -> Dict[str, int]:
        data = asdict(self)
        data["total"] = self.total
        return data


class ResultCollector:
    """Append-only, thread-safe sequence of results for a single run."""

    def __init__(self) -> None:
        self._results: List[Result] = []
        self._index: Dict[Tuple[str, str], Result] = {}
        self._lock = threading.Lock()

    def add(self, result: Result) -> None:
        with self._lock:
            if result.key in self._index:
                raise LogicError(
                    f"duplicate result for review {result.review_identifier} on {result.file_path}"
                )
            self._index[result.key] = result
            self._results.append(result)

    def results(self) -> Tuple[Result, ...]:
        """Return a snapshot of the results in the order they were added."""

        with self._lock:
            return tuple(self._results)

    def get(self, review_identifier: str, file_path: str) -> Optional[Result]:
        with self._lock:
            return self._index.get((review_identifier, file_path))

    def has_failures(self) -> bool:
        with self._lock:
            return any(result.status is ResultStatus.FAILED for result in self._results)

    @property
    def summary(self) -> Summary:
        return summarize(self.results())

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)


def summarize(results: Tuple[Result, ...]) -> Summary:
    failed = sum(1 for result in results if not result.passed)
    return Summary(passed=len(results) - failed, failed=failed)


def format_summary_table(report: "RunReport", max_failures: int = 10) -> str:
    """Create a human-readable summary table for console output."""

    summary = summarize(report.results)
    lines: List[str] = []
    lines.append("Review Summary")
    lines.append("=" * 40)
    header = f"{'Status':<10} | {'Count':>5}"
    lines.append(header)
    lines.append("-" * len(header))
    for status, count in ((ResultStatus.PASSED, summary.passed), (ResultStatus.FAILED, summary.failed)):
        lines.append(f"{status.value:<10} | {count:>5}")
    lines.append("-" * len(header))
    lines.append(f"Run       : {report.status.value}")
    lines.append(f"Results   : {summary.total}")

    failures = [result for result in report.results if result.status is ResultStatus.FAILED]
    if failures:
        lines.append("")
        lines.append("Failed Reviews")
        lines.append("-" * 40)
        for result in failures[:max_failures]:
            lines.append(f"[{result.review_identifier}] {result.file_path}")
            if result.message:
                lines.append(f"  {result.message}")
        if len(failures) > max_failures:
            lines.append(f"... and {len(failures) - max_failures} more")

    if report.error is not None:
        lines.append("")
        lines.append(f"Error     : {report.error}")
    return "\n".join(lines)
