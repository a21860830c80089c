"""
Undo/Redo History Engine

Generic, data-agnostic history over immutable snapshots. The engine owns the
``(past, present, future)`` triple and notifies subscribers whenever it
changes. Snapshots are compared by identity only: writing the object that is
already ``present`` is a no-op.

Example:
    history = HistoryEngine(document)
    history.set_state(edited)
    history.undo()
    assert history.present is document
"""

from dataclasses import dataclass
from typing import Callable, Generic, List, Tuple, TypeVar

T = TypeVar("T")

MAX_HISTORY_LENGTH = 50


@dataclass(frozen=True)
class HistoryState(Generic[T]):
    """Immutable view of the history triple."""

    past: Tuple[T, ...]
    present: T
    future: Tuple[T, ...]


Listener = Callable[[HistoryState], None]


class HistoryEngine(Generic[T]):
    """
    Observable undo/redo history with a bounded ``past``.

    ``set_state(next, skip_history=True)`` replaces ``present`` without creating
    an undo checkpoint. The skip flag belongs to that single call: a later
    write is recorded normally no matter how writes were queued.

    Attributes:
        max_length: Maximum number of snapshots retained in ``past``
    """

    def __init__(self, initial_state: T, max_length: int = MAX_HISTORY_LENGTH):
        if max_length < 1:
            raise ValueError("max_length must be at least 1")
        self.max_length = max_length
        self._state: HistoryState[T] = HistoryState(past=(), present=initial_state, future=())
        self._listeners: List[Listener] = []

    @property
    def state(self) -> HistoryState[T]:
        return self._state

    @property
    def present(self) -> T:
        return self._state.present

    @property
    def can_undo(self) -> bool:
        return len(self._state.past) > 0

    @property
    def can_redo(self) -> bool:
        return len(self._state.future) > 0

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with the new HistoryState after every change.

        Args:
            listener: Callable receiving the new state

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, new_state: HistoryState[T]) -> None:
        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)

    def set_state(self, next_state: T, skip_history: bool = False) -> None:
        """
        Record a new present snapshot.

        Args:
            next_state: Snapshot to make current
            skip_history: Replace present without touching past/future
        """
        current = self._state

        if skip_history:
            if next_state is current.present:
                return
            self._commit(HistoryState(past=current.past, present=next_state, future=current.future))
            return

        if next_state is current.present:
            return

        past = current.past + (current.present,)
        if len(past) > self.max_length:
            past = past[len(past) - self.max_length:]

        self._commit(HistoryState(past=past, present=next_state, future=()))

    def undo(self) -> None:
        current = self._state
        if not current.past:
            return
        self._commit(
            HistoryState(
                past=current.past[:-1],
                present=current.past[-1],
                future=(current.present,) + current.future,
            )
        )

    def redo(self) -> None:
        current = self._state
        if not current.future:
            return
        self._commit(
            HistoryState(
                past=current.past + (current.present,),
                present=current.future[0],
                future=current.future[1:],
            )
        )

    def clear_history(self) -> None:
        """Drop every checkpoint, keeping the present snapshot."""
        current = self._state
        if not current.past and not current.future:
            return
        self._commit(HistoryState(past=(), present=current.present, future=()))
