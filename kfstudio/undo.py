"""Bounded undo history with merging of repeated edits."""

from __future__ import annotations

from collections import deque
from typing import Optional

from kfstudio.actions import Action

__all__ = ["UndoManager", "MAX_UNDO_STEPS"]

MAX_UNDO_STEPS = 200


class UndoManager:
    """Keeps the most recent ``capacity`` actions and walks back and forth through them.

    The oldest entry still held is the base state of the history: it is never
    undone by ``undo``, only the steps recorded after it are. When the manager
    is not active, recorded actions are applied but not remembered.
    """

    def __init__(self, capacity: int = MAX_UNDO_STEPS, active: bool = True) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self.active = active
        self._entries: deque[Action] = deque(maxlen=capacity)
        self._undone = 0

    def __repr__(self) -> str:
        return (
            f"UndoManager(capacity={self.capacity}, active={self.active}, "
            f"entries={len(self._entries)}, undone={self._undone})"
        )

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def undone(self) -> int:
        """How many of the newest entries are currently undone."""
        return self._undone

    def record(self, action: Action) -> Action:
        """Apply ``action`` and add it to the history.

        If the current entry can absorb it, that entry is updated instead and
        returned; otherwise any undone entries are dropped, the action is
        applied and appended, and it is returned.
        """
        current = self.tail()
        if current is not None and current.merge(action):
            return current

        if not self.active:
            action.do()
            return action

        for _ in range(self._undone):
            self._entries.pop()
        self._undone = 0

        action.do()
        self._entries.append(action)
        return action

    def tail(self) -> Optional[Action]:
        """The entry the document currently reflects, or None with no history."""
        position = len(self._entries) - 1 - self._undone
        if position < 0:
            return None
        return self._entries[position]

    def can_undo(self) -> bool:
        if self._undone >= self.capacity - 1:
            return False
        return len(self._entries) - self._undone >= 2

    def can_redo(self) -> bool:
        return self._undone > 0

    def undo(self) -> bool:
        """Revert the current entry; False if there is nothing to undo."""
        if not self.can_undo():
            return False
        self._entries[len(self._entries) - 1 - self._undone].undo()
        self._undone += 1
        return True

    def redo(self) -> bool:
        """Reapply the next undone entry; False if there is nothing to redo."""
        if not self.can_redo():
            return False
        self._undone -= 1
        self._entries[len(self._entries) - 1 - self._undone].do()
        return True

    def history(self) -> list[Action]:
        """All held entries, oldest first, undone ones included."""
        return list(self._entries)

    def select(self, action: Action) -> None:
        """Undo or redo until ``action`` is the current entry."""
        entries = list(self._entries)
        target = next(
            (i for i, entry in enumerate(entries) if entry is action), None
        )
        if target is None:
            raise ValueError(f"{action!r} is not in the undo history")

        current = len(entries) - 1 - self._undone
        if target < current:
            for entry in reversed(entries[target + 1 : current + 1]):
                entry.undo()
        elif target > current:
            for entry in entries[current + 1 : target + 1]:
                entry.do()
        self._undone = len(entries) - 1 - target