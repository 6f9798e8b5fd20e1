"""Flag Windows-style line endings."""

from __future__ import annotations

from static_review.file import File
from static_review.result import Result

from . import BaseReview


class LineEndingsReview(BaseReview):
    def evaluate(self, file: File) -> Result:
        if b"\r\n" in file.content():
            return self.failed(file, "file contains CRLF line endings")
        return self.passed(file)
