"""Exceptions raised while turning a source text into a Document."""

from pathlib import Path


class SegmentationError(Exception):
    """Base exception for all literature parsing errors.

    Carries the file path and, where one applies, the 1-based line number
    so a maintainer can adjust the heading rules and re-run.
    """

    def __init__(
        self,
        message: str,
        file_path: str | Path | None = None,
        line_number: int | None = None,
    ) -> None:
        super().__init__(message)
        self.file_path = str(file_path) if file_path is not None else None
        self.line_number = line_number

    def __str__(self) -> str:
        message = super().__str__()
        if self.file_path and self.line_number is not None:
            return f"{message} ({self.file_path}:{self.line_number})"
        if self.file_path:
            return f"{message} ({self.file_path})"
        return message


class SourceNotFoundError(SegmentationError, FileNotFoundError):
    """Raised when a source text file is missing or unreadable."""


class BoundaryNotFoundError(SegmentationError):
    """Raised when the front-matter start marker cannot be located."""

    def __init__(
        self,
        marker: str,
        file_path: str | Path | None = None,
    ) -> None:
        super().__init__(f"Start marker not found: {marker}", file_path=file_path)
        self.marker = marker


class WriteFailureError(SegmentationError):
    """Raised when the output document cannot be written."""


class UnknownWorkError(SegmentationError):
    """Raised when a work key has no profile in the configuration."""

    def __init__(self, work_key: str, known: list[str] | None = None) -> None:
        message = f"Unknown work: '{work_key}'"
        if known:
            message += f". Configured: {', '.join(known)}"
        super().__init__(message)
        self.work_key = work_key
