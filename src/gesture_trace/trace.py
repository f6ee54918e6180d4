"""Raw point traces and their rotational representation.

A ``PointTrace`` holds the raw fingertip positions of one finger. Its shape
is described by a ``RotTrace``: for every pair of consecutive displacement
vectors (projected onto the x/y plane) the signed turn angle between them
and the length of the first. The representation is independent of where
the gesture is drawn.
"""

from __future__ import annotations

import math
from collections import deque
from typing import Iterable, Iterator, Optional, Sequence

from gesture_trace.config import MAX_POINTS, SAMPLE_DISTANCE
from gesture_trace.geometry import Point3, RotPoint, angle_diff
from gesture_trace.sampler import resample


def _rot_point(a: Point3, b: Point3, c: Point3) -> RotPoint:
    """Rotational feature at ``b`` for the projected path ``a -> b -> c``."""
    ax, ay = b.x - a.x, b.y - a.y
    bx, by = c.x - b.x, c.y - b.y
    angle = angle_diff(math.atan2(by, bx), math.atan2(ay, ax))
    return RotPoint(angle=angle, distance=math.hypot(ax, ay))


def to_rot_trace(points: Iterable[Point3], max_points: int = MAX_POINTS) -> RotTrace:
    """Transform an ordered point sequence into a ``RotTrace``.

    ``n`` points give ``max(0, n - 2)`` features; fewer than three points
    give an empty trace.
    """
    trace = RotTrace(max_points=max_points)
    window: deque[Point3] = deque(maxlen=3)
    for p in points:
        window.append(p)
        if len(window) == 3:
            trace.push(_rot_point(*window))
    return trace


def last_rot_point(points: Sequence[Point3]) -> Optional[RotPoint]:
    """Newest feature of ``points``, from its last three entries only.

    Equal to ``to_rot_trace(points)[-1]``, without transforming the rest.
    """
    if len(points) < 3:
        return None
    return _rot_point(points[-3], points[-2], points[-1])


class PointTrace:
    """Bounded FIFO of raw points; the oldest points fall off when full."""

    def __init__(self, points: Iterable[Point3] = (), max_points: int = MAX_POINTS):
        self._points: deque[Point3] = deque(points, maxlen=max_points)

    @property
    def max_points(self) -> int:
        return self._points.maxlen

    def push(self, point: Point3):
        self._points.append(point)

    def extend(self, points: Iterable[Point3]):
        self._points.extend(points)

    def keep_last(self, n: int):
        """Drop everything but the newest ``n`` points."""
        while len(self._points) > max(n, 0):
            self._points.popleft()

    def clear(self):
        self._points.clear()

    def points(self) -> list[Point3]:
        return list(self._points)

    def resampled(self, distance: float = SAMPLE_DISTANCE) -> Iterator[Point3]:
        return resample(self._points, distance)

    def to_rot_trace(self, distance: float = SAMPLE_DISTANCE) -> RotTrace:
        """Resample the raw points and transform them in one pass."""
        return to_rot_trace(self.resampled(distance), max_points=self.max_points)

    def to_last_rot_point(self) -> Optional[RotPoint]:
        return last_rot_point(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[Point3]:
        return iter(self._points)


class RotTrace:
    """Bounded sequence of ``RotPoint``s, newest last."""

    def __init__(self, points: Iterable[RotPoint] = (), max_points: int = MAX_POINTS):
        self._points: deque[RotPoint] = deque(points, maxlen=max_points)

    @classmethod
    def empty(cls) -> RotTrace:
        return cls()

    @classmethod
    def from_angles(cls, angles: Iterable[float], distance: float = SAMPLE_DISTANCE) -> RotTrace:
        """Build a trace from raw turn angles with a constant segment length."""
        return cls(RotPoint(angle=a, distance=distance) for a in angles)

    def push(self, point: RotPoint):
        self._points.append(point)

    def clear(self):
        self._points.clear()

    def points(self) -> list[RotPoint]:
        return list(self._points)

    def angles(self) -> list[float]:
        return [p.angle for p in self._points]

    def total_distance(self) -> float:
        return sum(p.distance for p in self._points)

    def to_dict(self) -> dict:
        return {"points": [p.to_dict() for p in self._points]}

    @classmethod
    def from_dict(cls, data: dict) -> RotTrace:
        return cls(RotPoint.from_dict(p) for p in data.get("points", []))

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[RotPoint]:
        return iter(self._points)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return RotTrace(list(self._points)[index], max_points=self._points.maxlen)
        return self._points[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, RotTrace):
            return NotImplemented
        return list(self._points) == list(other._points)

    def __repr__(self) -> str:
        return f"RotTrace({len(self)} points)"
