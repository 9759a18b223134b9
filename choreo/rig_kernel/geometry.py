"""2D transform math for the rig kernel.

Rotations are stored in degrees. Screen space is y-down, so a positive
rotation turns clockwise on screen.
"""
from __future__ import annotations

import math
from typing import Optional, Tuple

from pydantic import BaseModel

from choreo.rig_kernel.schemas import TransformData


def shortest_angle_delta(a: float, b: float) -> float:
    """Signed delta from angle a to angle b, normalized into (-180, 180]."""
    delta = (b - a) % 360.0
    if delta > 180.0:
        delta -= 360.0
    return delta


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def lerp_angle(a: float, b: float, t: float) -> float:
    return a + shortest_angle_delta(a, b) * t


def rotate_point(x: float, y: float, degrees: float) -> Tuple[float, float]:
    rad = math.radians(degrees)
    cos = math.cos(rad)
    sin = math.sin(rad)
    return x * cos - y * sin, x * sin + y * cos


class Transform(BaseModel):
    x: float = 0.0
    y: float = 0.0
    rotation: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0

    @property
    def rotation_radians(self) -> float:
        return math.radians(self.rotation)

    def clone(self) -> Transform:
        return self.model_copy()

    def copy_from(self, other: Transform) -> None:
        self.x = other.x
        self.y = other.y
        self.rotation = other.rotation
        self.scale_x = other.scale_x
        self.scale_y = other.scale_y

    def reset(self) -> None:
        self.copy_from(Transform())

    def lerp(self, other: Transform, t: float) -> Transform:
        return Transform(
            x=lerp(self.x, other.x, t),
            y=lerp(self.y, other.y, t),
            rotation=lerp_angle(self.rotation, other.rotation, t),
            scale_x=lerp(self.scale_x, other.scale_x, t),
            scale_y=lerp(self.scale_y, other.scale_y, t),
        )

    def to_data(self) -> TransformData:
        """Sparse export: only channels that differ from identity."""
        identity = Transform()
        values = {
            name: getattr(self, name)
            for name in ("x", "y", "rotation", "scale_x", "scale_y")
            if getattr(self, name) != getattr(identity, name)
        }
        return TransformData(**values)

    @classmethod
    def from_data(cls, data: Optional[TransformData]) -> Transform:
        if data is None:
            return cls()
        values = data.model_dump(exclude_none=True)
        return cls(**values)
