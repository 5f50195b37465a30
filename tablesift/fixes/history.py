"""
Undo/redo history of dataset states.
"""

from typing import List

from tablesift.core import constants
from tablesift.core.dataset import Dataset


class DatasetHistory:
    """
    Bounded undo/redo stack.

    push() records the current dataset on the undo stack and makes the new
    one current; it clears the redo stack. Only the most recent
    max_snapshots undo states are kept.

    Example:
        >>> history = DatasetHistory(original)
        >>> history.push(cleaned)
        >>> history.undo() is original
        True
        >>> history.redo() is cleaned
        True
    """

    def __init__(self, initial: Dataset, max_snapshots: int = constants.MAX_HISTORY_SNAPSHOTS):
        if max_snapshots < 1:
            raise ValueError(f"max_snapshots must be at least 1, got {max_snapshots}")
        self.max_snapshots = max_snapshots
        self._current = initial
        self._undo: List[Dataset] = []
        self._redo: List[Dataset] = []

    @property
    def current(self) -> Dataset:
        return self._current

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def push(self, dataset: Dataset) -> Dataset:
        """Make dataset current, remembering the previous state."""
        self._undo.append(self._current)
        if len(self._undo) > self.max_snapshots:
            del self._undo[:-self.max_snapshots]
        self._redo.clear()
        self._current = dataset
        return dataset

    def undo(self) -> Dataset:
        """
        Step back one state.

        Raises:
            IndexError: Nothing to undo
        """
        if not self._undo:
            raise IndexError("Nothing to undo")
        self._redo.append(self._current)
        self._current = self._undo.pop()
        return self._current

    def redo(self) -> Dataset:
        """
        Step forward one state.

        Raises:
            IndexError: Nothing to redo
        """
        if not self._redo:
            raise IndexError("Nothing to redo")
        self._undo.append(self._current)
        self._current = self._redo.pop()
        return self._current

    def __len__(self) -> int:
        return len(self._undo)
