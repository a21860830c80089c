"""
Editing context logger.

Provides logging interface for the editor session with automatic [editor] prefix.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from resumex.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[editor]"


def setup_editing_logger(log_dir: Path, resume_id: Optional[str] = None) -> Path:
    """
    Setup logger for an editor session.

    Args:
        log_dir: Directory for this session
        resume_id: Résumé opened by the session, recorded in the provenance header

    Returns:
        Path to log file
    """
    extra = {"Résumé": resume_id} if resume_id else None
    return _setup_logger(context_name="editor", log_dir=log_dir, extra_provenance=extra)


def _log_info(message: str) -> None:
    """Log info message with [editor] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [editor] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [editor] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [editor] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")
