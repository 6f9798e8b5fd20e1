"""Flag lines longer than a configured maximum."""

from __future__ import annotations

from typing import List

from static_review.file import File
from static_review.result import Result

from . import BaseReview

DEFAULT_MAX_LENGTH = 120


class LineLengthReview(BaseReview):
    """Fail files with any line longer than ``max_length`` characters."""

    @property
    def max_length(self) -> int:
        return int(self.options.get("max_length", DEFAULT_MAX_LENGTH))

    def evaluate(self, file: File) -> Result:
        limit = self.max_length
        offending: List[int] = [
            number for number, line in enumerate(file.lines(), start=1) if len(line) > limit
        ]
        if not offending:
            return self.passed(file)
        shown = ", ".join(str(number) for number in offending[:5])
        if len(offending) > 5:
            shown += ", ..."
        return self.failed(file, f"{len(offending)} line(s) longer than {limit} characters (lines {shown})")
