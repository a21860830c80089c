"""Custom exceptions for the storage context."""

from pathlib import Path
from typing import Optional


class StorageError(Exception):
    """
    Exception raised when the persisted key-value file cannot be read or written.

    Attributes:
        message: Error description
        path: Store file involved, if any
        original_error: Underlying OS or decoding error
    """

    def __init__(self, message: str, path: Optional[Path] = None, original_error: Optional[Exception] = None):
        self.message = message
        self.path = path
        self.original_error = original_error
        super().__init__(f"{message} ({path})" if path else message)
