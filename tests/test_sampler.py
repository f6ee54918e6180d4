"""Tests for arc-length resampling."""

import itertools
import math

import numpy as np
import pytest

from gesture_trace.geometry import Point3
from gesture_trace.sampler import resample


def line(n: int, spacing: float, direction=(1.0, 0.0, 0.0)) -> list[Point3]:
    d = np.array(direction, dtype=np.float64)
    d /= np.linalg.norm(d)
    return [Point3.from_array(d * spacing * i) for i in range(n)]


def gaps(points: list[Point3]) -> list[float]:
    return [a.distance_to(b) for a, b in zip(points, points[1:])]


class TestResample:
    def test_dense_input_even_spacing(self):
        raw = line(30, 0.37)  # path length 10.73
        out = list(resample(raw, 1.0))
        assert out[0] == raw[0]
        assert len(out) - 1 == math.floor(29 * 0.37 / 1.0)
        for g in gaps(out):
            assert g == pytest.approx(1.0, abs=1e-9)

    def test_sparse_input_fills_in(self):
        raw = [Point3(0, 0, 0), Point3(7.5, 0, 0)]
        out = list(resample(raw, 1.0))
        assert len(out) == 8
        assert out[-1].x == pytest.approx(7.0)

    def test_diagonal_3d(self):
        raw = line(12, 2.3, direction=(1.0, 2.0, 2.0))  # length 25.3
        out = list(resample(raw, 5.0))
        assert len(out) - 1 == 5
        for g in gaps(out):
            assert g == pytest.approx(5.0, abs=1e-9)

    def test_independent_of_raw_spacing(self):
        coarse = list(resample(line(6, 4.0), 2.0))
        fine = list(resample(line(81, 0.25), 2.0))
        assert len(coarse) == len(fine) == 11
        for a, b in zip(coarse, fine):
            assert a.distance_to(b) == pytest.approx(0.0, abs=1e-9)

    def test_follows_corners(self):
        raw = [Point3(0, 0, 0), Point3(0, 5, 0), Point3(5, 5, 0)]
        out = list(resample(raw, 1.0))
        assert len(out) == 11
        assert out[5] == Point3(0, 5, 0)
        assert out[10] == Point3(5, 5, 0)

    def test_empty(self):
        assert list(resample([], 1.0)) == []

    def test_single_point(self):
        assert list(resample([Point3(1, 2, 3)], 1.0)) == [Point3(1, 2, 3)]

    def test_stationary_points_ignored(self):
        raw = [Point3(0, 0, 0)] * 10
        assert len(list(resample(raw, 1.0))) == 1

    def test_invalid_distance(self):
        with pytest.raises(ValueError):
            list(resample(line(3, 1.0), 0.0))

    def test_lazy_on_infinite_stream(self):
        stream = (Point3(float(i), 0.0, 0.0) for i in itertools.count())
        out = list(itertools.islice(resample(stream, 2.0), 5))
        assert [p.x for p in out] == pytest.approx([0.0, 2.0, 4.0, 6.0, 8.0])
