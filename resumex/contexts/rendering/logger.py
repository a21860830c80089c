"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from utils.logger directly.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from loguru import logger

from resumex.utils.logger import setup_logger as _setup_logger

load_dotenv()

CONTEXT_PREFIX = "[render]"


def setup_rendering_logger(log_dir: Path, resume_id: Optional[str] = None) -> Path:
    """
    Setup logger for rendering context.

    Configures loguru with provenance tracking and rendering-specific context.

    Args:
        log_dir: Directory for this rendering session
        resume_id: Résumé being exported, recorded in the provenance header

    Returns:
        Path to log file

    Example:
        from resumex.contexts.rendering.logger import setup_rendering_logger, _log_info

        log_file = setup_rendering_logger(log_dir)
        _log_info("Starting export...")
    """
    provenance = {
        "Font": os.getenv("RESUMEX_FONT_PATH") or "Pillow default",
        "Downloads": os.getenv("DOWNLOADS_PATH", "outs/downloads"),
    }
    if resume_id:
        provenance["Résumé"] = resume_id
    return _setup_logger(context_name="render", log_dir=log_dir, extra_provenance=provenance)


# Wrapper functions with automatic [render] prefix


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [render] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_export_result(kind: str, result, elapsed_time: float) -> None:
    """
    Log the outcome of an export operation.

    Args:
        kind: Export kind ("png", "pdf", "docx")
        result: ExportResult
        elapsed_time: Time taken by the export
    """
    if result.success:
        _log_success(f"{kind.upper()} export succeeded ({elapsed_time:.2f}s)")
        if result.path:
            _log_debug(f"  Output: {result.path}")
        if result.page_count is not None:
            _log_debug(f"  Pages: {result.page_count}")
    else:
        _log_error(f"{kind.upper()} export failed: {result.message} ({elapsed_time:.2f}s)")
