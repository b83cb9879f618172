"""Keyframe tracks: ordered frames of one value type, with interpolation."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Optional, Union

__all__ = [
    "TrackType",
    "Frame",
    "TrackDeletedError",
    "Track",
    "color_u32_to_float4",
    "color_float4_to_u32",
]

FrameData = Union[float, int, bool]
RGBA = tuple[float, float, float, float]

_R_SHIFT = 0
_G_SHIFT = 8
_B_SHIFT = 16
_A_SHIFT = 24


def color_u32_to_float4(color: int) -> RGBA:
    """Unpack a 32-bit colour (red in the low byte) into four floats in 0..1."""
    scale = 1.0 / 255.0
    return (
        ((color >> _R_SHIFT) & 0xFF) * scale,
        ((color >> _G_SHIFT) & 0xFF) * scale,
        ((color >> _B_SHIFT) & 0xFF) * scale,
        ((color >> _A_SHIFT) & 0xFF) * scale,
    )


def _to_byte(value: float) -> int:
    saturated = min(max(value, 0.0), 1.0)
    return int(saturated * 255.0 + 0.5)


def color_float4_to_u32(rgba: RGBA) -> int:
    """Pack four floats in 0..1 (clamped) into a 32-bit colour."""
    r, g, b, a = rgba
    return (
        (_to_byte(r) << _R_SHIFT)
        | (_to_byte(g) << _G_SHIFT)
        | (_to_byte(b) << _B_SHIFT)
        | (_to_byte(a) << _A_SHIFT)
    )


class TrackType(enum.IntEnum):
    INVALID = 0
    FLOAT = 1
    INT = 2
    BOOL = 3
    COLOR = 4


@dataclass
class Frame:
    """A keyframe: the frame number and the value stored there."""

    frame: int
    data: FrameData = 0


class TrackDeletedError(RuntimeError):
    """Raised when a deleted track is edited or sampled."""


class Track:
    """A named sequence of keyframes kept sorted by frame number."""

    def __init__(self, name: str, track_type: TrackType, frame_count: int) -> None:
        self.name = name
        self.track_type = TrackType(track_type)
        self.frame_count = frame_count
        self.frames: list[Frame] = []
        self.deleted = False

    def __repr__(self) -> str:
        return (
            f"Track(name={self.name!r}, track_type={self.track_type.name}, "
            f"frames={len(self.frames)})"
        )

    def _check_alive(self) -> None:
        if self.deleted:
            raise TrackDeletedError(f"track {self.name!r} is deleted")

    def find_frame(self, index: int) -> int:
        """Position in the frame list of the keyframe at ``index``, or -1."""
        for position, frame in enumerate(self.frames):
            if frame.frame == index:
                return position
        return -1

    def find_left_frame(self, index: int) -> int:
        """Position of the last keyframe at or before ``index``, or -1."""
        result = -1
        if self.frames and self.frames[0].frame <= index:
            for position, frame in enumerate(self.frames):
                if frame.frame > index:
                    break
                result = position
        return result

    def _coerce(self, data: FrameData) -> FrameData:
        if self.track_type is TrackType.FLOAT:
            return float(data)
        if self.track_type is TrackType.INT:
            return int(data)
        if self.track_type is TrackType.BOOL:
            return bool(data)
        if self.track_type is TrackType.COLOR:
            return int(data) & 0xFFFFFFFF
        return data

    def add_frame(self, index: int, data: FrameData) -> Optional[Frame]:
        """Set the value at frame ``index``, inserting a keyframe if needed.

        Returns the keyframe, or None when ``index`` is negative.
        """
        self._check_alive()
        if index < 0:
            return None
        existing = self.get_frame(index)
        if existing is None:
            existing = Frame(index)
            self.frames.insert(self.find_left_frame(index) + 1, existing)
        existing.data = self._coerce(data)
        return existing

    def reset(self) -> None:
        self.frames.clear()
        self.deleted = False

    def has_frames(self) -> bool:
        return bool(self.frames)

    def __len__(self) -> int:
        return len(self.frames)

    def sort(self) -> None:
        self.frames.sort(key=lambda f: f.frame)

    def remove_frame(self, frame_index: int) -> None:
        """Remove the keyframe at frame number ``frame_index`` if there is one."""
        self.delete_by_array_index(self.find_frame(frame_index))

    def delete_by_array_index(self, array_index: int) -> None:
        """Remove the keyframe at a list position; out-of-range positions are ignored."""
        if 0 <= array_index < len(self.frames):
            del self.frames[array_index]

    def get_frame(self, frame: int) -> Optional[Frame]:
        position = self.find_frame(frame)
        return self.frames[position] if position >= 0 else None

    def get_frame_by_index(self, index: int) -> Optional[Frame]:
        if 0 <= index < len(self.frames):
            return self.frames[index]
        return None

    def _sample(
        self,
        frame: int,
        loop: bool,
        empty: FrameData,
        lerp: Callable[[FrameData, FrameData, float], FrameData],
    ) -> FrameData:
        self._check_alive()
        count = len(self.frames)
        if count == 0:
            return empty
        if count == 1:
            return self.frames[0].data

        left_index = max(self.find_left_frame(frame), 0)
        right_index = (left_index + 1) % count
        if right_index < left_index:
            left_index, right_index = right_index, left_index
        left = self.frames[left_index]
        if frame < left.frame:
            right_index = count - 1
        right = self.frames[right_index]

        start, end = left.data, right.data
        delta = right.frame - left.frame
        current = frame - left.frame

        if frame < left.frame or frame > right.frame:
            if not loop:
                return left.data if frame < left.frame else right.data
            delta = self.frame_count - (right.frame - left.frame)
            if frame < left.frame:
                current = frame + (self.frame_count - right.frame)
            else:
                current = frame - right.frame
            start, end = right.data, left.data

        if delta == 0:
            return lerp(start, end, 0.0)
        return lerp(start, end, current / delta)

    def interpolate_float(self, frame: int, loop: bool) -> float:
        return self._sample(
            frame, loop, 0.0, lambda a, b, t: a + (b - a) * t
        )

    def interpolate_int(self, frame: int, loop: bool) -> int:
        return self._sample(
            frame, loop, 0, lambda a, b, t: int(float(a) + (float(b) - float(a)) * t)
        )

    def interpolate_color(self, frame: int, loop: bool) -> int:
        def lerp(a: FrameData, b: FrameData, t: float) -> int:
            start = color_u32_to_float4(int(a))
            end = color_u32_to_float4(int(b))
            mixed = tuple(s + (e - s) * t for s, e in zip(start, end))
            return color_float4_to_u32(mixed)  # type: ignore[arg-type]

        return self._sample(frame, loop, 0, lerp)

    def interpolate_bool(self, frame: int, loop: bool) -> bool:
        self._check_alive()
        if not self.frames:
            return False
        first, last = self.frames[0], self.frames[-1]
        if len(self.frames) == 1:
            return bool(first.data)
        if frame < first.frame:
            return bool(last.data if loop else first.data)
        if frame > last.frame:
            return bool(last.data)
        left_index = self.find_left_frame(frame)
        if left_index == -1:
            return False
        return bool(self.frames[left_index].data)

    def _format_data(self, data: FrameData) -> str:
        if self.track_type is TrackType.FLOAT:
            return f"{float(data):g}"
        if self.track_type is TrackType.INT:
            return str(int(data))
        if self.track_type is TrackType.BOOL:
            return "true" if data else "false"
        r, g, b, a = color_u32_to_float4(int(data))
        return f'{{"r": {r:g}, "g": {g:g}, "b": {b:g}, "a": {a:g}}}'

    def serialize(self, target: str, indent: int) -> str:
        """Render the track as a JSON object indented by ``indent`` tabs.

        Deleted or empty tracks render as an empty string.
        """
        if self.deleted or not self.frames:
            return ""
        if self.track_type is TrackType.INVALID:
            raise ValueError(f"track {self.name!r} has no valid type")

        tabs = "\t" * indent
        entries = [
            f'{tabs}\t\t{{ "index": {f.frame}, "data": {self._format_data(f.data)} }} '
            for f in self.frames
        ]
        return (
            f"{tabs}{{\n"
            f'{tabs}\t"name": "{self.name}",\n'
            f'{tabs}\t"target": "{target}",\n'
            f'{tabs}\t"rtti": "TRACK_{self.track_type.name}",\n'
            f'{tabs}\t"frames": [\n'
            + ",\n".join(entries)
            + "\n"
            f"{tabs}\t]\n"
            f"{tabs}}}\n"
        )