from __future__ import annotations
from typing import List, Optional
import logging

from .constants import DEFAULT_HISTORY_MAXLEN
from .molecule_graph import MoleculeGraph

logger = logging.getLogger(__name__)


class UndoStack:
    """
    Bounded history of MoleculeGraph snapshots with a movable pointer.

    Every stored and every returned snapshot is an independent clone, so neither
    callers nor the history can observe each other's later mutations.

    Usage:
        history = UndoStack()
        history.push(graph)
        ...
        previous = history.undo()   # None at the oldest snapshot
    """

    def __init__(self, max_size: int = DEFAULT_HISTORY_MAXLEN):
        if max_size < 1:
            raise ValueError("UndoStack max_size must be at least 1")
        self.max_size = int(max_size)
        self._stack: List[MoleculeGraph] = []
        self._pointer: int = -1

    @property
    def pointer(self) -> int:
        """Index of the current snapshot, -1 when empty."""
        return self._pointer

    def __len__(self) -> int:
        return len(self._stack)

    def push(self, graph: MoleculeGraph) -> None:
        """
        Record a snapshot of graph as the new current state, discarding any
        redo tail and evicting the oldest snapshot past max_size.
        """
        del self._stack[self._pointer + 1:]
        self._stack.append(graph.clone())
        self._pointer = len(self._stack) - 1

        if len(self._stack) > self.max_size:
            self._stack.pop(0)
            self._pointer -= 1
            logger.debug("UndoStack full, evicted oldest snapshot")

    def undo(self) -> Optional[MoleculeGraph]:
        """Step back one snapshot and return a copy of it, or None at the oldest."""
        if self._pointer <= 0:
            return None
        self._pointer -= 1
        return self._stack[self._pointer].clone()

    def redo(self) -> Optional[MoleculeGraph]:
        """Step forward one snapshot and return a copy of it, or None at the newest."""
        if self._pointer >= len(self._stack) - 1:
            return None
        self._pointer += 1
        return self._stack[self._pointer].clone()

    def can_undo(self) -> bool:
        return self._pointer > 0

    def can_redo(self) -> bool:
        return self._pointer < len(self._stack) - 1

    def clear(self) -> None:
        self._stack = []
        self._pointer = -1

    def get_current_state(self) -> Optional[MoleculeGraph]:
        """Copy of the snapshot at the pointer, or None when empty."""
        if self._pointer < 0 or self._pointer >= len(self._stack):
            return None
        return self._stack[self._pointer].clone()

    def __repr__(self) -> str:
        return f"<UndoStack size={len(self._stack)} pointer={self._pointer} max={self.max_size}>"
