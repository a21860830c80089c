"""
Storage context logger.

Provides logging interface for storage context with automatic [storage] prefix.
All storage modules should import from this module, not from utils.logger directly.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from resumex.utils.logger import setup_logger as _setup_logger

load_dotenv()

CONTEXT_PREFIX = "[storage]"


def setup_storage_logger(log_dir: Path) -> Path:
    """
    Setup logger for storage context.

    Args:
        log_dir: Directory for this session

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="storage",
        log_dir=log_dir,
        extra_provenance={
            "Data file": os.getenv("RESUMEX_DATA_PATH", "outs/data/storage.json"),
        },
    )


def _log_info(message: str) -> None:
    """Log info message with [storage] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [storage] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [storage] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [storage] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [storage] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_backup_result(operation: str, result) -> None:
    """
    Log the outcome of a backup, restore or clear operation.

    Args:
        operation: "export", "import" or "clear"
        result: BackupResult
    """
    if result.success:
        _log_success(f"Backup {operation}: {result.message}")
        if result.path:
            _log_debug(f"  File: {result.path}")
    else:
        _log_error(f"Backup {operation} failed: {result.message}")
