"""Flag lines that end with spaces or tabs."""

from __future__ import annotations

from static_review.file import File
from static_review.result import Result

from . import BaseReview

SOURCE_EXTENSIONS = (
    "py",
    "php",
    "js",
    "ts",
    "rb",
    "go",
    "java",
    "c",
    "h",
    "css",
    "html",
    "yml",
    "yaml",
)


class TrailingWhitespaceReview(BaseReview):
    """Fail source files containing trailing whitespace."""

    extensions = SOURCE_EXTENSIONS

    def evaluate(self, file: File) -> Result:
        for number, line in enumerate(file.lines(), start=1):
            if line != line.rstrip(" \t"):
                return self.failed(file, f"trailing whitespace on line {number}")
        return self.passed(file)
