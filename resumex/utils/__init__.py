"""
Shared utilities for ResumeX.

Common functionality used across contexts:
- Logging setup
- Timestamps and dates
- Debounced callbacks and bounded async retry
- Download artifact handling
"""

from resumex.utils.timestamp import now, now_ms, utc_today

__all__ = ["now", "now_ms", "utc_today"]
