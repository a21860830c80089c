"""
History Context

Responsibilities:
- Records undo checkpoints for immutable snapshots
- Serves undo/redo with a bounded past and a truncated-on-write future

Owns: HistoryEngine (observable, owns present), UndoRedoManager (caller owns present)
Never: Inspects snapshot contents
"""

from resumex.contexts.history.engine import MAX_HISTORY_LENGTH, HistoryEngine, HistoryState
from resumex.contexts.history.manager import UndoRedoManager

__all__ = [
    "HistoryEngine",
    "HistoryState",
    "UndoRedoManager",
    "MAX_HISTORY_LENGTH",
]
