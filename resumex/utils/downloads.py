"""
Download artifact handling.

Export and backup produce bytes that end up as files in the downloads
directory. The bytes are first written to a temporary handle that is always
released, whether the move into place succeeds or not.
"""

import os
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from dotenv import load_dotenv

load_dotenv()
DOWNLOADS_PATH = Path(os.getenv("DOWNLOADS_PATH", "outs/downloads"))


@contextmanager
def temporary_artifact(data: bytes, suffix: str = "") -> Iterator[Path]:
    """
    Write bytes to a temporary file and remove it on exit.

    Args:
        data: Artifact contents
        suffix: File suffix for the temporary file (e.g., ".png")

    Yields:
        Path to the temporary file
    """
    temp_fd, temp_path = tempfile.mkstemp(suffix=suffix)
    try:
        with os.fdopen(temp_fd, "wb") as f:
            f.write(data)
        yield Path(temp_path)
    finally:
        if os.path.exists(temp_path):
            os.unlink(temp_path)


def save_download(data: bytes, filename: str, downloads_dir: Path = None) -> Path:
    """
    Publish bytes as a named download.

    Args:
        data: Artifact contents
        filename: Final file name (already sanitized)
        downloads_dir: Target directory (default: DOWNLOADS_PATH)

    Returns:
        Path of the published file

    Raises:
        ValueError: If data is empty
        OSError: If the file cannot be written
    """
    if not data:
        raise ValueError("Refusing to publish an empty artifact")

    downloads_dir = Path(downloads_dir) if downloads_dir is not None else DOWNLOADS_PATH
    downloads_dir.mkdir(parents=True, exist_ok=True)
    target = downloads_dir / filename

    with temporary_artifact(data, suffix=Path(filename).suffix) as temp_path:
        shutil.move(str(temp_path), str(target))

    return target
