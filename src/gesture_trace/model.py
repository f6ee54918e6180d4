"""Gesture models and elastic matching.

A ``Model`` wraps the rotational trace of one finger. Live models (from a
fragment) and persisted models (from a template) are compared with
``Model.matches``, a greedy, tempo-tolerant sequence match in the spirit of
windowed dynamic time warping:

    template.model.matches(live_model)  # True if the live trace ends in the shape
"""

from __future__ import annotations

from itertools import accumulate
from typing import Optional

from gesture_trace.config import (
    INTERRUPT_MARGIN,
    MARGIN,
    MAX_DEVIATION_FACTOR,
    MAX_ERROR,
    SEARCH_SPACE,
)
from gesture_trace.trace import RotTrace


def cumulative_angles(trace: RotTrace) -> list[float]:
    """Running sum of turn angles, walking the trace from its end backward.

    Entry ``i`` is the bearing ``i + 1`` steps before the end of the trace
    relative to its final direction, so two traces ending in the same shape
    share a common prefix regardless of where they started.
    """
    return list(accumulate(reversed(trace.angles())))


def _find(other: list[float], pos: int, p: float) -> Optional[int]:
    """Offset from ``pos`` of the first entry within MARGIN of ``p``."""
    for k, value in enumerate(other[pos:pos + SEARCH_SPACE]):
        diff = abs(value - p)
        if diff > INTERRUPT_MARGIN:
            return None
        if diff <= MARGIN:
            return k
    return None


class Model:
    """A comparable gesture shape."""

    def __init__(self, trace: Optional[RotTrace] = None):
        self._trace = trace if trace is not None else RotTrace.empty()

    @classmethod
    def empty(cls) -> Model:
        return cls()

    @property
    def trace(self) -> RotTrace:
        return self._trace

    def trim(self, start: Optional[int] = None, end: Optional[int] = None) -> Model:
        """New model holding the trace points in ``[start, end)``."""
        return Model(self._trace[start:end])

    def matches(self, other: Model) -> bool:
        """Whether the end of ``other`` has the shape of this model.

        ``self`` is the template. Each template point, in order of its
        cumulative angle from the end, is searched for in ``other`` within a
        window of SEARCH_SPACE points. The search cursor only moves forward
        and is kept within ``[i / F, i * F]`` for template index ``i``, which
        bounds the tempo of ``other`` to between ``1/F`` and ``F`` times that
        of the template. Unmatched template points count as errors, including
        those left over once the cursor runs past the end of ``other``; the
        match fails once MAX_ERROR of them add up. An empty template never
        matches.
        """
        if len(self._trace) == 0:
            return False

        template_cum = cumulative_angles(self._trace)
        other_cum = cumulative_angles(other.trace)

        pos = 0
        err = 0
        for i, p in enumerate(template_cum):
            pos = max(pos, int(i / MAX_DEVIATION_FACTOR))
            pos = min(pos, int(i * MAX_DEVIATION_FACTOR))

            k = _find(other_cum, pos, p)
            if k is not None:
                pos += k
                continue

            err += 1
            if err >= MAX_ERROR:
                return False

        return True

    def to_dict(self) -> dict:
        return {"trace": self._trace.to_dict()}

    @classmethod
    def from_dict(cls, data: dict) -> Model:
        return cls(RotTrace.from_dict(data["trace"]))

    def __len__(self) -> int:
        return len(self._trace)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Model):
            return NotImplemented
        return self._trace == other._trace

    def __repr__(self) -> str:
        return f"Model({len(self)} points)"
