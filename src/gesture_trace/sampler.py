"""Streaming arc-length resampler.

Turns an irregularly spaced point stream into one with a fixed distance
between consecutive points, independent of the sensor's frame rate or the
speed of the hand:

    for point in resample(raw_points, distance=10.0):
        ...
"""

from __future__ import annotations

from typing import Iterable, Iterator

import numpy as np

from gesture_trace.config import SAMPLE_DISTANCE
from gesture_trace.geometry import Point3


def resample(points: Iterable[Point3], distance: float = SAMPLE_DISTANCE) -> Iterator[Point3]:
    """Lazily resample ``points`` along their polyline at ``distance`` spacing.

    The first input point is emitted as-is. For every following raw point,
    new points are placed ``distance`` apart on the segment from the last
    emitted point towards it, for as long as it is at least ``distance``
    away. Remainders shorter than ``distance`` carry over to the next raw
    point.
    """
    if distance <= 0:
        raise ValueError(f"sample distance must be positive, got {distance}")

    it = iter(points)
    first = next(it, None)
    if first is None:
        return

    yield first
    last = first.as_array()

    for p in it:
        target = p.as_array()
        delta = target - last
        length = float(np.linalg.norm(delta))

        while length >= distance:
            last = last + delta / length * distance
            yield Point3.from_array(last)
            delta = target - last
            length = float(np.linalg.norm(delta))
