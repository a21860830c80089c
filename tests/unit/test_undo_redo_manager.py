"""Unit tests for the non-reactive UndoRedoManager."""

import pytest

from resumex.contexts.history.manager import UndoRedoManager


@pytest.mark.unit
def test_undo_returns_pushed_state():
    """Test undo hands back the last checkpoint and stores the current state for redo."""
    manager = UndoRedoManager()
    manager.push("v1")

    previous = manager.undo("v2")

    assert previous == "v1"
    assert manager.can_redo()
    assert manager.redo("v1") == "v2"


@pytest.mark.unit
def test_empty_ends_return_none():
    """Test undo/redo on empty stacks return None."""
    manager = UndoRedoManager()

    assert manager.undo("current") is None
    assert manager.redo("current") is None
    assert manager.history_length() == (0, 0)


@pytest.mark.unit
def test_push_bounds_past_and_clears_future():
    """Test push evicts the oldest entry and drops the redo branch."""
    manager = UndoRedoManager(max_length=3)
    for state in ("a", "b", "c", "d"):
        manager.push(state)

    assert manager.history_length() == (3, 0)

    manager.undo("e")
    assert manager.history_length() == (2, 1)

    manager.push("f")
    assert manager.history_length() == (3, 0)
    assert not manager.can_redo()


@pytest.mark.unit
def test_undo_order_is_lifo():
    """Test checkpoints come back newest first and oldest evicted first."""
    manager = UndoRedoManager(max_length=2)
    manager.push("a")
    manager.push("b")
    manager.push("c")

    assert manager.undo("d") == "c"
    assert manager.undo("c") == "b"
    assert manager.undo("b") is None


@pytest.mark.unit
def test_redo_keeps_past_bounded():
    """Test redo also respects the past bound."""
    manager = UndoRedoManager(max_length=2)
    manager.push("a")
    manager.push("b")
    manager.undo("c")

    manager.redo("b")

    assert manager.history_length() == (2, 0)


@pytest.mark.unit
def test_clear():
    """Test clear empties both stacks."""
    manager = UndoRedoManager()
    manager.push("a")
    manager.undo("b")

    manager.clear()

    assert manager.history_length() == (0, 0)


@pytest.mark.unit
def test_peek_does_not_move_entries():
    """Test peeking returns the next undo/redo entry and leaves both stacks alone."""
    manager = UndoRedoManager()
    assert manager.peek_undo() is None
    assert manager.peek_redo() is None

    manager.push("a")
    manager.push("b")
    manager.undo("c")

    assert manager.peek_undo() == "a"
    assert manager.peek_redo() == "c"
    assert manager.history_length() == (1, 1)
