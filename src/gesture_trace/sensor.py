"""Sensor frame data consumed by the tracker.

Only what recognition needs is modelled: the hand id assigned by the
sensor, and per finger its type, whether it is extended, and its tip
position. Drivers convert their own frame objects into these.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from gesture_trace.geometry import Point3


class FingerType(Enum):
    THUMB = "thumb"
    INDEX = "index"
    MIDDLE = "middle"
    RING = "ring"
    PINKY = "pinky"


@dataclass
class SensorFinger:
    """One finger in a sensor frame."""
    type: FingerType
    tip: Point3
    extended: bool = True

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "tip": self.tip.to_list(),
            "extended": self.extended,
        }

    @classmethod
    def from_dict(cls, data: dict) -> SensorFinger:
        return cls(
            type=FingerType(data["type"]),
            tip=Point3.from_sequence(data["tip"]),
            extended=data.get("extended", True),
        )


@dataclass
class SensorHand:
    """One hand in a sensor frame."""
    id: int
    fingers: list[SensorFinger] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"id": self.id, "fingers": [f.to_dict() for f in self.fingers]}

    @classmethod
    def from_dict(cls, data: dict) -> SensorHand:
        return cls(
            id=int(data["id"]),
            fingers=[SensorFinger.from_dict(f) for f in data.get("fingers", [])],
        )


def index_hand(hand_id: int, tip: Point3, extended: bool = True) -> SensorHand:
    """A hand with only its index finger visible."""
    return SensorHand(id=hand_id, fingers=[SensorFinger(FingerType.INDEX, tip, extended)])
