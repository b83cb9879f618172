"""Undoable editor actions: attribute changes and keyframe edits."""

from __future__ import annotations

import abc
from typing import Any, Optional

from kfstudio.track import Frame, FrameData, Track

__all__ = ["Action", "FieldChange", "AddKeyframe"]


class Action(abc.ABC):
    """One step in the undo history.

    ``do`` applies the step and ``undo`` reverts it. ``merge`` lets the most
    recent step absorb a newer one of the same kind, so a run of small edits
    to one value is kept as a single history entry.
    """

    def __init__(self, label: str) -> None:
        self.label = label

    def __str__(self) -> str:
        return self.label

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.label!r})"

    @abc.abstractmethod
    def do(self) -> None:
        """Apply the action."""

    @abc.abstractmethod
    def undo(self) -> None:
        """Revert what ``do`` applied."""

    def merge(self, other: Action) -> bool:
        """Absorb ``other`` into this action and apply it; False if they cannot merge."""
        return False


class FieldChange(Action):
    """Set one attribute of an object, remembering its value beforehand."""

    def __init__(self, target: Any, attribute: str, value: Any, label: str) -> None:
        super().__init__(label)
        self.target = target
        self.attribute = attribute
        self.old_value = getattr(target, attribute)
        self.value = value

    def do(self) -> None:
        setattr(self.target, self.attribute, self.value)

    def undo(self) -> None:
        setattr(self.target, self.attribute, self.old_value)

    def merge(self, other: Action) -> bool:
        if (
            isinstance(other, FieldChange)
            and other.target is self.target
            and other.attribute == self.attribute
        ):
            self.value = other.value
            self.do()
            return True
        return False


class AddKeyframe(Action):
    """Set a keyframe on a track, inserting it if the frame had none."""

    def __init__(self, track: Track, data: FrameData, frame: int) -> None:
        super().__init__(f"Keyframe {track.name}")
        self.track = track
        self.data = data
        self.frame = frame
        existing: Optional[Frame] = track.get_frame(frame)
        self.existed = existing is not None
        self.old_data: Optional[FrameData] = existing.data if existing else None

    def do(self) -> None:
        self.track.add_frame(self.frame, self.data)

    def undo(self) -> None:
        if self.existed:
            self.track.add_frame(self.frame, self.old_data)  # type: ignore[arg-type]
        else:
            self.track.remove_frame(self.frame)

    def merge(self, other: Action) -> bool:
        if (
            isinstance(other, AddKeyframe)
            and other.track is self.track
            and other.frame == self.frame
            and self.existed
        ):
            self.data = other.data
            self.do()
            return True
        return False