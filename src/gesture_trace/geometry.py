"""Point primitives and angle helpers."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

TWO_PI = 2.0 * math.pi


def wrap_angle(a: float) -> float:
    """Map an angle in radians into ``(-pi, pi]``."""
    wrapped = (a + math.pi) % TWO_PI - math.pi
    if wrapped <= -math.pi:
        return math.pi
    return wrapped


def angle_diff(a: float, b: float) -> float:
    """Signed circular difference ``a - b``, in ``(-pi, pi]``."""
    return wrap_angle(a - b)


@dataclass(frozen=True)
class Point3:
    """A raw sensor sample in 3D space."""
    x: float
    y: float
    z: float

    @classmethod
    def zero(cls) -> Point3:
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> Point3:
        return cls(float(arr[0]), float(arr[1]), float(arr[2]))

    @classmethod
    def from_sequence(cls, values) -> Point3:
        x, y, z = values
        return cls(float(x), float(y), float(z))

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    def distance_to(self, other: Point3) -> float:
        return float(np.linalg.norm(other.as_array() - self.as_array()))

    def to_list(self) -> list[float]:
        return [self.x, self.y, self.z]

    def __str__(self) -> str:
        return f"({self.x}, {self.y}, {self.z})"


@dataclass(frozen=True)
class RotPoint:
    """One rotational feature: the turn angle at a point and the length of
    the segment leading into it.
    """
    angle: float  # radians, (-pi, pi]
    distance: float = 0.0

    @classmethod
    def zero(cls) -> RotPoint:
        return cls(0.0, 0.0)

    @classmethod
    def from_degrees(cls, degrees: float, distance: float = 0.0) -> RotPoint:
        return cls(wrap_angle(math.radians(degrees)), distance)

    def to_dict(self) -> dict:
        return {"angle": self.angle, "distance": self.distance}

    @classmethod
    def from_dict(cls, data: dict) -> RotPoint:
        return cls(angle=float(data["angle"]), distance=float(data["distance"]))

    def __str__(self) -> str:
        return f"{self.angle:.4f}rad/{self.distance:.2f}"
