"""Timestamp formatting utilities."""

import time
from datetime import date, datetime, timezone
from typing import Optional


def now() -> str:
    """Compact local timestamp for directory names (e.g., "20251114_123456")."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def now_ms() -> int:
    """Milliseconds since the epoch, the unit of ``lastModified``."""
    return int(time.time() * 1000)


def utc_today() -> str:
    """UTC date as YYYY-MM-DD (backup file names use the UTC calendar day)."""
    return datetime.now(timezone.utc).date().isoformat()


def locale_date(day: Optional[date] = None) -> str:
    """
    Date in zh-CN locale order with separators normalized to hyphens.

    zh-CN renders dates as "2025/3/7" (no zero padding); file names replace the
    slashes with hyphens, giving "2025-3-7".

    Args:
        day: Date to format (default: today)

    Returns:
        Date string such as "2025-3-7"
    """
    day = day or date.today()
    return f"{day.year}/{day.month}/{day.day}".replace("/", "-")


def format_timestamp(epoch_ms: int, relative: bool = False) -> str:
    """
    Format an epoch-milliseconds timestamp to readable format.

    Args:
        epoch_ms: Milliseconds since the epoch
        relative: If True, show relative time (e.g., "2h ago")
                 If False, show absolute time (e.g., "2025-11-13 18:45:40")

    Returns:
        Human-readable timestamp
    """
    try:
        dt = datetime.fromtimestamp(epoch_ms / 1000)
    except (TypeError, ValueError, OverflowError, OSError):
        return str(epoch_ms)

    if relative:
        return _format_relative_time(dt)
    return dt.strftime("%Y-%m-%d %H:%M:%S")


def _format_relative_time(dt: datetime) -> str:
    """
    Format datetime as relative time in compact format (e.g., "2h ago").

    Args:
        dt: datetime object to format

    Returns:
        Compact relative time string
    """
    diff = datetime.now() - dt

    if diff.total_seconds() < 0:
        diff = -diff
        suffix = "from now"
    else:
        suffix = "ago"

    seconds = int(diff.total_seconds())
    minutes = seconds // 60
    hours = minutes // 60
    days = diff.days

    if seconds < 60:
        return f"{seconds}s {suffix}"
    elif minutes < 60:
        return f"{minutes}m {suffix}"
    elif hours < 24:
        return f"{hours}h {suffix}"
    else:
        return f"{days}d {suffix}"
