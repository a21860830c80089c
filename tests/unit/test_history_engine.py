"""Unit tests for the undo/redo history engine."""

import pytest

from resumex.contexts.history.engine import MAX_HISTORY_LENGTH, HistoryEngine


class Snapshot:
    """Opaque snapshot compared by identity, like a document version."""

    def __init__(self, label):
        self.label = label

    def __repr__(self):
        return f"Snapshot({self.label!r})"


@pytest.mark.unit
def test_initial_state():
    """Test a fresh engine has only a present snapshot."""
    initial = Snapshot("initial")
    history = HistoryEngine(initial)

    assert history.present is initial
    assert history.state.past == ()
    assert history.state.future == ()
    assert not history.can_undo
    assert not history.can_redo


@pytest.mark.unit
@pytest.mark.parametrize("count", [1, 5, 50])
def test_undo_all_returns_to_initial(count):
    """Test N distinct writes undone N times return to the initial snapshot."""
    initial = Snapshot("initial")
    history = HistoryEngine(initial)

    for i in range(count):
        history.set_state(Snapshot(i))

    for _ in range(count):
        history.undo()

    assert history.present is initial
    assert not history.can_undo


@pytest.mark.unit
def test_redo_restores_undone_snapshot():
    """Test redo after undo restores the exact snapshot object."""
    history = HistoryEngine(Snapshot("initial"))
    edited = Snapshot("edited")
    history.set_state(edited)

    history.undo()
    history.redo()

    assert history.present is edited
    assert not history.can_redo


@pytest.mark.unit
def test_past_is_bounded_fifo():
    """Test more than 50 writes keep only the most recent 50 in past."""
    initial = Snapshot("initial")
    history = HistoryEngine(initial)
    snapshots = [Snapshot(i) for i in range(MAX_HISTORY_LENGTH + 10)]

    for snapshot in snapshots:
        history.set_state(snapshot)

    past = history.state.past
    assert len(past) == MAX_HISTORY_LENGTH
    assert history.present is snapshots[-1]
    # Oldest evicted first: initial and the first 9 writes are gone
    assert initial not in past
    assert past[0] is snapshots[9]
    assert past[-1] is snapshots[-2]


@pytest.mark.unit
def test_custom_max_length():
    """Test the bound follows max_length."""
    history = HistoryEngine(Snapshot("initial"), max_length=3)
    for i in range(10):
        history.set_state(Snapshot(i))

    assert len(history.state.past) == 3


@pytest.mark.unit
def test_skip_history_keeps_past_and_future():
    """Test a skip-history write never changes past length or clears future."""
    history = HistoryEngine(Snapshot("initial"))
    history.set_state(Snapshot("a"))
    history.set_state(Snapshot("b"))
    history.undo()
    past_before = history.state.past
    future_before = history.state.future

    loaded = Snapshot("loaded")
    history.set_state(loaded, skip_history=True)

    assert history.present is loaded
    assert history.state.past == past_before
    assert history.state.future == future_before


@pytest.mark.unit
def test_skip_flag_applies_to_one_call_only():
    """Test a write after a skip-history write is recorded normally."""
    history = HistoryEngine(Snapshot("initial"))
    history.set_state(Snapshot("loaded"), skip_history=True)
    history.set_state(Snapshot("edited"))

    assert len(history.state.past) == 1
    assert history.state.past[0].label == "loaded"


@pytest.mark.unit
def test_consecutive_skip_writes_are_both_skipped():
    """Test two queued skip-history writes both bypass history."""
    history = HistoryEngine(Snapshot("initial"))
    first = Snapshot("first")
    second = Snapshot("second")

    history.set_state(first, skip_history=True)
    history.set_state(second, skip_history=True)

    assert history.present is second
    assert history.state.past == ()


@pytest.mark.unit
def test_new_write_after_undo_clears_future():
    """Test a new write after undo discards the redo branch."""
    history = HistoryEngine(Snapshot("initial"))
    history.set_state(Snapshot("a"))
    history.set_state(Snapshot("b"))
    history.undo()
    assert history.can_redo

    replacement = Snapshot("c")
    history.set_state(replacement)

    assert history.state.future == ()
    history.redo()
    assert history.present is replacement


@pytest.mark.unit
def test_identical_write_is_noop():
    """Test writing the present snapshot again records nothing."""
    initial = Snapshot("initial")
    history = HistoryEngine(initial)

    history.set_state(initial)

    assert history.state.past == ()


@pytest.mark.unit
def test_undo_redo_noop_at_empty_ends():
    """Test undo and redo are safe when there is nothing to move."""
    initial = Snapshot("initial")
    history = HistoryEngine(initial)

    history.undo()
    history.redo()

    assert history.present is initial


@pytest.mark.unit
def test_clear_history_keeps_present():
    """Test clear_history empties past and future only."""
    history = HistoryEngine(Snapshot("initial"))
    history.set_state(Snapshot("a"))
    current = Snapshot("b")
    history.set_state(current)
    history.set_state(Snapshot("c"))
    history.undo()

    history.clear_history()

    assert history.present is current
    assert not history.can_undo
    assert not history.can_redo


@pytest.mark.unit
def test_subscribers_notified_on_change_only():
    """Test listeners receive each effective change and nothing for no-ops."""
    history = HistoryEngine(Snapshot("initial"))
    received = []
    unsubscribe = history.subscribe(received.append)

    history.set_state(Snapshot("a"))
    history.undo()
    history.undo()  # no-op
    history.set_state(history.present)  # no-op

    assert len(received) == 2
    assert received[-1].present.label == "initial"

    unsubscribe()
    history.redo()
    assert len(received) == 2


@pytest.mark.unit
def test_rejects_non_positive_max_length():
    """Test max_length must allow at least one entry."""
    with pytest.raises(ValueError):
        HistoryEngine(Snapshot("initial"), max_length=0)
