"""Live per-finger and per-hand tracking state.

    HandManager  hand id     -> Hand
    Hand         finger type -> Fragment
    Fragment     raw point trace + derived model

Every level guards its own state with a lock held only for the duration of
one operation. Locks are taken top-down (manager, hand, fragment) and never
held while calling into another component, so the gesture controller can be
invoked from a fragment without risking lock cycles.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Iterable, Optional

from gesture_trace.config import KEEP_POINTS, MAX_POINTS, SAMPLE_DISTANCE
from gesture_trace.geometry import Point3
from gesture_trace.model import Model
from gesture_trace.sensor import FingerType, SensorFinger, SensorHand
from gesture_trace.trace import PointTrace

if TYPE_CHECKING:
    from gesture_trace.controller import GestureController

logger = logging.getLogger("gesture_trace.fragment")


class Fragment:
    """Trace and model of a single finger."""

    def __init__(self, max_points: int = MAX_POINTS, sample_distance: float = SAMPLE_DISTANCE):
        self._raw = PointTrace(max_points=max_points)
        self._model = Model.empty()
        self._sample_distance = sample_distance
        self._lock = threading.Lock()

    def process_sample(self, point: Point3, allow_detect: bool, controller: GestureController):
        """Push a new tip position and, when allowed, try to detect a gesture."""
        if not controller.should_track():
            return

        with self._lock:
            self._raw.push(point)
            self._model = Model(self._raw.to_rot_trace(self._sample_distance))
            model = self._model

        if allow_detect and controller.should_detect():
            controller.detect(self, model)

    def model(self) -> Model:
        """Copy of the current model."""
        with self._lock:
            return self._model.trim()

    def raw_points(self) -> list[Point3]:
        with self._lock:
            return self._raw.points()

    def clear_most(self):
        """Keep only the last few raw points and drop the model."""
        with self._lock:
            self._raw.keep_last(KEEP_POINTS)
            self._model = Model.empty()

    def clear(self):
        with self._lock:
            self._raw.clear()
            self._model = Model.empty()

    def __len__(self) -> int:
        with self._lock:
            return len(self._raw)


class Hand:
    """Fragments of one tracked hand, keyed by finger type."""

    # Only an extended index finger can trigger a detection.
    DETECT_FINGERS = frozenset({FingerType.INDEX})

    def __init__(self, hand_id: int):
        self.id = hand_id
        self._fingers: dict[FingerType, Fragment] = {}
        self._lock = threading.Lock()

    def fragment(self, finger: FingerType) -> Fragment:
        """Get the fragment for ``finger``, creating it if needed."""
        with self._lock:
            fragment = self._fingers.get(finger)
            if fragment is None:
                fragment = Fragment()
                self._fingers[finger] = fragment
            return fragment

    def get(self, finger: FingerType) -> Optional[Fragment]:
        with self._lock:
            return self._fingers.get(finger)

    def process_frame(self, fingers: Iterable[SensorFinger], controller: GestureController):
        """Feed the fingers of one sensor frame to their fragments."""
        fingers = list(fingers)
        for finger in fingers:
            allow_detect = finger.extended and finger.type in self.DETECT_FINGERS
            self.fragment(finger.type).process_sample(finger.tip, allow_detect, controller)

        visible = {f.type for f in fingers}
        with self._lock:
            for finger_type in [t for t in self._fingers if t not in visible]:
                del self._fingers[finger_type]

    def fragments(self) -> list[Fragment]:
        with self._lock:
            return list(self._fingers.values())

    def live_models(self) -> list[Model]:
        return [m for m in (f.model() for f in self.fragments()) if len(m) > 0]

    def clear(self):
        for fragment in self.fragments():
            fragment.clear()


class HandManager:
    """Registry of the hands currently visible to the sensor.

    A hand lives exactly as long as it appears in consecutive frames: it is
    created the first time its id shows up and dropped on the first frame
    without it.
    """

    def __init__(self):
        self._hands: dict[int, Hand] = {}
        self._lock = threading.Lock()

    def get(self, hand_id: int) -> Optional[Hand]:
        with self._lock:
            return self._hands.get(hand_id)

    def get_or_create(self, hand_id: int) -> Hand:
        hand = self.get(hand_id)
        if hand is not None:
            return hand

        with self._lock:
            hand = self._hands.get(hand_id)
            if hand is None:
                hand = Hand(hand_id)
                self._hands[hand_id] = hand
                logger.debug("Tracking new hand %d", hand_id)
            return hand

    def retain(self, hand_ids: Iterable[int]):
        """Drop every hand whose id is not in ``hand_ids``."""
        keep = set(hand_ids)
        with self._lock:
            for hand_id in [h for h in self._hands if h not in keep]:
                del self._hands[hand_id]
                logger.debug("Hand %d left the frame", hand_id)

    def process_frame(self, hands: Iterable[SensorHand], controller: GestureController):
        """Process one sensor frame of hands."""
        hands = list(hands)
        for sensor_hand in hands:
            hand = self.get_or_create(sensor_hand.id)
            hand.process_frame(sensor_hand.fingers, controller)

        self.retain(h.id for h in hands)

    def hands(self) -> list[Hand]:
        with self._lock:
            return list(self._hands.values())

    def hand_ids(self) -> list[int]:
        with self._lock:
            return list(self._hands)

    def live_models(self) -> list[Model]:
        """Non-empty models of every tracked finger."""
        return [m for hand in self.hands() for m in hand.live_models()]

    def longest_model(self) -> Optional[Model]:
        models = self.live_models()
        if not models:
            return None
        return max(models, key=len)

    def clear(self):
        """Reset the traces of every tracked finger."""
        for hand in self.hands():
            hand.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._hands)
