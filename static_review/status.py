"""Status definitions for review results and runs."""

from __future__ import annotations

from enum import Enum

from .errors import LogicError


class ResultStatus(str, Enum):
    """Enumerate the outcomes of a single review against a single file."""

    PASSED = "PASSED"
    FAILED = "FAILED"


class RunStatus(str, Enum):
    """Enumerate the states of an engine run."""

    NOT_STARTED = "NOT_STARTED"
    RUNNING = "RUNNING"
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"
    ERRORED = "ERRORED"

    @property
    def is_terminal(self) -> bool:
        return self in (RunStatus.SUCCESS, RunStatus.FAILURE, RunStatus.ERRORED)

    @property
    def exit_code(self) -> int:
        """Return the process exit code for a finished run."""

        ordering = {
            RunStatus.SUCCESS: 0,
            RunStatus.FAILURE: 1,
            RunStatus.ERRORED: 2,
        }
        if self not in ordering:
            raise LogicError("run has not completed")
        return ordering[self]
