"""Scene transform nodes: position, rotation and scale, and their matrices."""

from __future__ import annotations

import math
from dataclasses import dataclass

__all__ = [
    "Mat3",
    "TransformMatrices",
    "TransformNode",
    "normalized_rotation",
]

Vec2 = tuple[float, float]

_FULL_TURN = math.pi * 2.0


def normalized_rotation(rotation: float) -> float:
    """Wrap an angle in radians into the range [0, 2*pi)."""
    if not math.isfinite(rotation):
        raise ValueError(f"rotation must be finite, got {rotation!r}")
    wrapped = math.fmod(rotation, _FULL_TURN)
    if wrapped < 0:
        wrapped += _FULL_TURN
    if wrapped >= _FULL_TURN:
        wrapped -= _FULL_TURN
    return wrapped


_IDENTITY_VALUES = (1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0)


@dataclass(frozen=True)
class Mat3:
    """A 3x3 matrix stored column by column: ``values[col * 3 + row]``."""

    values: tuple[float, ...] = _IDENTITY_VALUES

    def __post_init__(self) -> None:
        if len(self.values) != 9:
            raise ValueError(f"a 3x3 matrix needs 9 values, got {len(self.values)}")
        object.__setattr__(self, "values", tuple(float(v) for v in self.values))

    @classmethod
    def identity(cls) -> Mat3:
        return cls(_IDENTITY_VALUES)

    def _at(self, row: int, col: int) -> float:
        return self.values[col * 3 + row]

    def __mul__(self, other: object) -> Mat3:
        if not isinstance(other, Mat3):
            return NotImplemented
        return Mat3(
            tuple(
                sum(self._at(row, k) * other._at(k, col) for k in range(3))
                for col in range(3)
                for row in range(3)
            )
        )


@dataclass(frozen=True)
class TransformMatrices:
    """The parts of a node's transform and their product."""

    translation: Mat3
    rotation: Mat3
    scale: Mat3
    world: Mat3


class TransformNode:
    """A scene node carrying a 2D position, a rotation in radians and a scale."""

    def __init__(self, name: str = "Transform Node") -> None:
        self.name = name
        self.position: Vec2 = (0.0, 0.0)
        self._rotation = 0.0
        self.scale: Vec2 = (1.0, 1.0)

    def __repr__(self) -> str:
        return (
            f"TransformNode(name={self.name!r}, position={self.position}, "
            f"rotation={self._rotation}, scale={self.scale})"
        )

    @property
    def rotation(self) -> float:
        """The rotation in radians, always within [0, 2*pi)."""
        return self.normalize_rotation()

    @rotation.setter
    def rotation(self, value: float) -> None:
        self._rotation = float(value)
        self.normalize_rotation()

    def reset(self) -> None:
        """Return position, rotation and scale to their defaults."""
        self.position = (0.0, 0.0)
        self._rotation = 0.0
        self.scale = (1.0, 1.0)

    def normalize_rotation(self) -> float:
        """Wrap the stored rotation into [0, 2*pi) and return it."""
        self._rotation = normalized_rotation(self._rotation)
        return self._rotation

    def matrices(self) -> TransformMatrices:
        """Build the translation, rotation and scale matrices and their product."""
        cos_r = math.cos(self._rotation)
        sin_r = math.sin(self._rotation)
        sx, sy = self.scale
        px, py = self.position

        scale = Mat3((sx, 0, 0, 0, sy, 0, 0, 0, 1))
        rotation = Mat3((cos_r, -sin_r, 0, sin_r, cos_r, 0, 0, 0, 1))
        translation = Mat3((1, 0, 0, 0, 1, 0, px, py, 1))
        return TransformMatrices(
            translation=translation,
            rotation=rotation,
            scale=scale,
            world=translation * rotation * scale,
        )

    def serialize_fields(self, indent: int) -> str:
        """Render the transform fields as JSON members indented by ``indent`` tabs."""
        tabs = "\t" * indent
        px, py = self.position
        sx, sy = self.scale
        return (
            f'{tabs}\t"position": {{ "x": {px:g}, "y": {py:g} }}, \n'
            f'{tabs}\t"rotation": {self._rotation:g},\n'
            f'{tabs}\t"scale": {{ "x": {sx:g}, "y": {sy:g} }}, \n'
        )