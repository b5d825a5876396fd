"""Package-specific exception types.

Parsing review text never fails; these cover the file boundary around it.
"""

from __future__ import annotations


class ParseFileError(Exception):
    """Raised when a review file cannot be read for parsing."""


class FileTooLargeError(OSError):
    """Raised when a review file exceeds the configured maximum size.

    Args:
        filepath: Path to the offending file.
        max_size: Maximum allowed size in bytes.
    """

    def __init__(self, filepath: object, max_size: int):
        self.filepath = filepath
        self.max_size = max_size
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        return f"{self.filepath} exceeds the maximum allowed size of {self.max_size} bytes."
