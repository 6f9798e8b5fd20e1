"""Block files that carry a do-not-commit marker."""

from __future__ import annotations

from static_review.file import File
from static_review.result import Result

from . import BaseReview

DEFAULT_TAG = "NOCOMMIT"


class NoCommitTagReview(BaseReview):
    """Fail files whose content contains the configured marker."""

    def evaluate(self, file: File) -> Result:
        tag = str(self.options.get("tag", DEFAULT_TAG))
        for number, line in enumerate(file.lines(), start=1):
            if tag in line:
                return self.failed(file, f"found '{tag}' on line {number}")
        return self.passed(file)
