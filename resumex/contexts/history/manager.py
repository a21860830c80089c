"""
Non-reactive undo/redo manager.

Same history semantics as HistoryEngine, but the current state is owned by the
caller and passed in at undo/redo time.
"""

from typing import Generic, List, Optional, Tuple, TypeVar

from resumex.contexts.history.engine import MAX_HISTORY_LENGTH

T = TypeVar("T")


class UndoRedoManager(Generic[T]):
    """
    Explicit push/undo/redo stack pair.

    Example:
        manager = UndoRedoManager(max_length=30)
        manager.push(before_edit)
        previous = manager.undo(current)  # before_edit
    """

    def __init__(self, max_length: int = MAX_HISTORY_LENGTH):
        if max_length < 1:
            raise ValueError("max_length must be at least 1")
        self.max_length = max_length
        self._past: List[T] = []
        self._future: List[T] = []

    def push(self, state: T) -> None:
        """Record a checkpoint and discard the redo branch."""
        self._past.append(state)
        if len(self._past) > self.max_length:
            self._past.pop(0)
        self._future = []

    def undo(self, current_state: T) -> Optional[T]:
        """Return the previous checkpoint, or None when there is nothing to undo."""
        if not self._past:
            return None
        previous = self._past.pop()
        self._future.insert(0, current_state)
        return previous

    def redo(self, current_state: T) -> Optional[T]:
        """Return the next redo entry, or None when the redo branch is empty."""
        if not self._future:
            return None
        following = self._future.pop(0)
        self._past.append(current_state)
        if len(self._past) > self.max_length:
            self._past.pop(0)
        return following

    def peek_undo(self) -> Optional[T]:
        """The entry undo would return, without moving it."""
        return self._past[-1] if self._past else None

    def peek_redo(self) -> Optional[T]:
        return self._future[0] if self._future else None

    def can_undo(self) -> bool:
        return len(self._past) > 0

    def can_redo(self) -> bool:
        return len(self._future) > 0

    def clear(self) -> None:
        self._past = []
        self._future = []

    def history_length(self) -> Tuple[int, int]:
        """(past, future) entry counts."""
        return len(self._past), len(self._future)
