"""Package-specific exception types."""

from __future__ import annotations

from pathlib import Path


class LintError(ValueError):
    """Base class for errors raised around an analysis run.

    The analysis functions themselves accept any text; these errors come from
    reading sources and writing results.
    """


class SourceReadError(LintError):
    """Raised when a source file cannot be read as UTF-8 text.

    Args:
        path: File that failed to load.
        reason: Short description of the failure.
    """

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read {path}: {reason}")


class FileTooLargeError(LintError):
    """Raised when a source file exceeds the configured maximum size.

    Args:
        path: Offending file.
        max_file_size: Maximum allowed size in bytes.
    """

    def __init__(self, path: Path, max_file_size: int):
        self.path = path
        self.max_file_size = max_file_size
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        return f"{self.path} exceeds the maximum allowed size of {self.max_file_size} bytes"


class MissingDirectoryError(LintError):
    """Raised when the directory to report on does not exist.

    Args:
        directory: Directory that was requested.
    """

    def __init__(self, directory: Path):
        self.directory = directory
        super().__init__(f"Examples directory not found: {directory}")
