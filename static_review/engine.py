"""Drive one review run from resolved identifiers to a final status."""

from __future__ import annotations

import logging
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .context import RunContext
from .errors import (
    CancellationError,
    ConfigurationError,
    FileNotFound,
    LogicError,
    ReviewExecutionError,
    StaticReviewError,
)
from .file import File
from .result import Result, summarize
from .reviews import Review
from .status import ResultStatus, RunStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunReport:
    """Final status, ordered results and fatal error (if any) of a run."""

    status: RunStatus
    results: Tuple[Result, ...]
    error: Optional[StaticReviewError] = None

    @property
    def exit_code(self) -> int:
        return self.status.exit_code

    @property
    def has_failures(self) -> bool:
        return any(result.status is ResultStatus.FAILED for result in self.results)

    def get(self, review_identifier: str, file_path: str) -> Optional[Result]:
        for result in self.results:
            if result.key == (review_identifier, file_path):
                return result
        return None

    def to_dict(self) -> Dict[str, object]:
        return {
            "status": self.status.value,
            "exit_code": self.exit_code,
            "summary": summarize(self.results).to_dict(),
            "results": [result.to_dict() for result in self.results],
            "error": str(self.error) if self.error is not None else None,
        }


class Engine:
    """Pair files with reviews, evaluate them and record the outcome.

    An engine drives exactly one run: ``NOT_STARTED -> RUNNING`` and then one
    of ``SUCCESS``, ``FAILURE`` or ``ERRORED``. Fatal errors do not propagate
    out of :meth:`run`; they are returned on the report.
    """

    def __init__(self, context: RunContext) -> None:
        self._context = context
        self._status = RunStatus.NOT_STARTED
        self._report: Optional[RunReport] = None
        self._deadline: Optional[float] = None
        self._order: Dict[Tuple[str, str], Tuple[int, int]] = {}

    @property
    def status(self) -> RunStatus:
        return self._status

    def outcome(self) -> RunReport:
        if not self._status.is_terminal or self._report is None:
            raise LogicError("run has not completed")
        return self._report

    def run(self) -> RunReport:
        if self._status is not RunStatus.NOT_STARTED:
            raise LogicError("run has already started")
        self._status = RunStatus.RUNNING
        context = self._context
        if context.timeout is not None:
            self._deadline = time.monotonic() + context.timeout
        logger.info(
            "Starting review run: %d file(s), %d review(s), %d worker(s)",
            len(context.files),
            len(context.review_identifiers),
            context.workers,
        )

        try:
            reviews = self._resolve_reviews()
            if context.workers > 1:
                self._run_parallel(reviews)
            else:
                self._run_sequential(reviews)
        except StaticReviewError as exc:
            logger.warning("Review run aborted: %s", exc)
            return self._finish(RunStatus.ERRORED, exc)

        status = RunStatus.FAILURE if context.collector.has_failures() else RunStatus.SUCCESS
        return self._finish(status)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------
    def _resolve_reviews(self) -> List[Review]:
        seen = set()
        reviews: List[Review] = []
        for identifier in self._context.review_identifiers:
            if identifier in seen:
                raise ConfigurationError.duplicate(identifier)
            seen.add(identifier)
            reviews.append(self._context.registry.resolve_review(identifier))

        paths = set()
        for file in self._context.files:
            if file.path in paths:
                raise ConfigurationError(f"duplicate file: {file.path}")
            paths.add(file.path)

        self._order = {
            (review.identifier, file.path): (file_index, review_index)
            for file_index, file in enumerate(self._context.files)
            for review_index, review in enumerate(reviews)
        }
        return reviews

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------
    def _run_sequential(self, reviews: Sequence[Review]) -> None:
        for file in self._context.files:
            for review in reviews:
                self._checkpoint()
                result = self._evaluate_pair(review, file)
                if result is not None:
                    self._context.collector.add(result)

    def _run_parallel(self, reviews: Sequence[Review]) -> None:
        """Evaluate pairs on a worker pool, keeping at most two per worker queued.

        Once any pair fails no further pairs are submitted and queued pairs
        are cancelled; pairs already running complete.
        """

        pairs = (
            ((file_index, review_index), review, file)
            for file_index, file in enumerate(self._context.files)
            for review_index, review in enumerate(reviews)
        )
        window = self._context.workers * 2
        in_flight: Dict[Future, Tuple[int, int]] = {}
        errors: List[Tuple[Tuple[int, int], StaticReviewError]] = []
        with ThreadPoolExecutor(max_workers=self._context.workers, thread_name_prefix="static-review") as pool:
            while True:
                while not errors and len(in_flight) < window:
                    pair = next(pairs, None)
                    if pair is None:
                        break
                    order, review, file = pair
                    in_flight[pool.submit(self._work, review, file)] = order
                if not in_flight:
                    break
                done, _ = wait(in_flight, return_when=FIRST_COMPLETED)
                for future in done:
                    order = in_flight.pop(future)
                    if future.cancelled():
                        continue
                    error = future.exception()
                    if error is not None:
                        errors.append((order, error))
                if errors:
                    for pending in in_flight:
                        pending.cancel()

        if errors:
            errors.sort(key=lambda item: item[0])
            raise errors[0][1]

    def _work(self, review: Review, file: File) -> None:
        self._checkpoint()
        result = self._evaluate_pair(review, file)
        if result is not None:
            self._context.collector.add(result)

    def _evaluate_pair(self, review: Review, file: File) -> Optional[Result]:
        try:
            if not review.applies(file):
                return None
            result = review.evaluate(file)
        except ReviewExecutionError as exc:
            if exc.review_identifier is None:
                raise ReviewExecutionError(str(exc), review.identifier, file.path) from exc
            raise
        except FileNotFound as exc:
            raise ReviewExecutionError(str(exc), review.identifier, file.path) from exc
        except Exception as exc:
            raise ReviewExecutionError(
                f"review raised {type(exc).__name__}: {exc}", review.identifier, file.path
            ) from exc

        if not isinstance(result, Result):
            raise ReviewExecutionError(
                f"evaluate returned {type(result).__name__}, expected Result", review.identifier, file.path
            )
        if result.key != (review.identifier, file.path):
            raise ReviewExecutionError(
                f"result is keyed {result.key}, expected {(review.identifier, file.path)}",
                review.identifier,
                file.path,
            )
        return result

    def _checkpoint(self) -> None:
        if self._context.cancel_event.is_set():
            raise CancellationError("run cancelled")
        if self._deadline is not None and time.monotonic() >= self._deadline:
            raise CancellationError(f"run timed out after {self._context.timeout}s")

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------
    def _finish(self, status: RunStatus, error: Optional[StaticReviewError] = None) -> RunReport:
        results = sorted(
            self._context.collector.results(),
            key=lambda result: self._order.get(result.key, (len(self._order), 0)),
        )
        self._status = status
        self._report = RunReport(status=status, results=tuple(results), error=error)
        logger.info("Review run finished with %s (%d result(s))", status.value, len(results))
        return self._report


def run_review(context: RunContext) -> RunReport:
    """Run a fresh engine over ``context`` and return its report."""

    return Engine(context).run()
