"""Result type shared by every export operation."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class ExportResult:
    """
    Outcome of an export. Expected failures are reported here, never raised.

    Attributes:
        success: Whether the artifact was produced
        message: User-facing message (Chinese, as shown in the UI)
        path: Path of the produced artifact (None if failed)
        page_count: Number of pages of a PDF artifact (None otherwise)
    """

    success: bool
    message: str
    path: Optional[Path] = None
    page_count: Optional[int] = None
