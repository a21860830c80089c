"""
Trailing-edge debounce for the asyncio event loop.

Every call within the idle window cancels and replaces the previously scheduled
invocation; only the last call's arguments reach the wrapped callback.
"""

import asyncio
from typing import Any, Callable, Optional


class Debouncer:
    """
    Coalesce rapid calls into one delayed invocation.

    Must be called from code running inside an event loop. The owner is expected
    to call ``cancel()`` when it is torn down so a pending invocation never fires
    against a dead scope.

    Example:
        save = Debouncer(store.update_profile, delay_s=0.3)
        save("name", "李")
        save("name", "李明")   # replaces the first call
    """

    def __init__(self, callback: Callable[..., Any], delay_s: float):
        if delay_s < 0:
            raise ValueError(f"delay_s must be non-negative, got {delay_s}")
        self._callback = callback
        self.delay_s = delay_s
        self._handle: Optional[asyncio.TimerHandle] = None
        self._pending_args: tuple = ()
        self._pending_kwargs: dict = {}

    def __call__(self, *args, **kwargs) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._pending_args = args
        self._pending_kwargs = kwargs
        self._handle = loop.call_later(self.delay_s, self._fire)

    @property
    def pending(self) -> bool:
        """True while an invocation is scheduled and has not fired."""
        return self._handle is not None

    def cancel(self) -> bool:
        """Drop the scheduled invocation. Returns True if one was pending."""
        if self._handle is None:
            return False
        self._handle.cancel()
        self._reset()
        return True

    def flush(self) -> bool:
        """Run the scheduled invocation immediately. Returns True if one ran."""
        if self._handle is None:
            return False
        self._handle.cancel()
        self._fire()
        return True

    def _fire(self) -> None:
        args, kwargs = self._pending_args, self._pending_kwargs
        self._reset()
        self._callback(*args, **kwargs)

    def _reset(self) -> None:
        self._handle = None
        self._pending_args = ()
        self._pending_kwargs = {}
