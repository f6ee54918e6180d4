"""Sensor frame recording and replay.

Record real sensor sessions for:
- Reproducible testing without a sensor attached
- Authoring templates offline
- Demo recordings that play back deterministically
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from gesture_trace.sensor import SensorHand


@dataclass
class RecordedFrame:
    """A single sensor frame in a recording."""
    timestamp: float  # seconds from recording start
    hands: list[SensorHand]

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "hands": [h.to_dict() for h in self.hands],
        }

    @classmethod
    def from_dict(cls, data: dict) -> RecordedFrame:
        return cls(
            timestamp=float(data["timestamp"]),
            hands=[SensorHand.from_dict(h) for h in data.get("hands", [])],
        )


class FrameRecorder:
    """Records sensor frames to a file.

    Usage:
        recorder = FrameRecorder()
        recorder.start()
        # In the sensor callback:
        recorder.add_frame(hands)
        # When done:
        recorder.save("session.json")
    """

    def __init__(self):
        self._frames: list[RecordedFrame] = []
        self._start_time: Optional[float] = None
        self._recording = False

    def start(self):
        """Begin a new recording session."""
        self._frames = []
        self._start_time = time.monotonic()
        self._recording = True

    def stop(self) -> int:
        """Stop recording. Returns number of frames captured."""
        self._recording = False
        return len(self._frames)

    @property
    def is_recording(self) -> bool:
        return self._recording

    @property
    def frame_count(self) -> int:
        return len(self._frames)

    @property
    def duration(self) -> float:
        if not self._frames:
            return 0.0
        return self._frames[-1].timestamp

    def add_frame(self, hands: list[SensorHand], timestamp: Optional[float] = None):
        """Add a frame; ignored unless recording."""
        if not self._recording:
            return

        if timestamp is None:
            timestamp = time.monotonic() - self._start_time
        self._frames.append(RecordedFrame(timestamp=timestamp, hands=list(hands)))

    def save(self, path: str | Path):
        """Save recording to JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "version": 1,
            "frame_count": len(self._frames),
            "duration": self.duration,
            "frames": [f.to_dict() for f in self._frames],
        }

        with open(path, "w") as f:
            json.dump(data, f)


class FramePlayer:
    """Replays a recorded sensor session.

    Usage:
        player = FramePlayer.load("session.json")
        for frame in player.play():
            core.process_frame(frame.hands)
    """

    def __init__(self, frames: list[RecordedFrame]):
        self._frames = frames

    @classmethod
    def load(cls, path: str | Path) -> FramePlayer:
        with open(path) as f:
            data = json.load(f)
        return cls([RecordedFrame.from_dict(f) for f in data["frames"]])

    @property
    def frame_count(self) -> int:
        return len(self._frames)

    @property
    def duration(self) -> float:
        if not self._frames:
            return 0.0
        return self._frames[-1].timestamp

    def play(self) -> Iterator[RecordedFrame]:
        """Iterate through all frames instantly (no timing)."""
        yield from self._frames

    def play_realtime(self, speed: float = 1.0) -> Iterator[RecordedFrame]:
        """Replay at original timing (or scaled by speed factor).

        Args:
            speed: Playback speed multiplier (2.0 = double speed).
        """
        if not self._frames:
            return

        start = time.monotonic()
        for frame in self._frames:
            target_time = frame.timestamp / speed
            elapsed = time.monotonic() - start
            if target_time > elapsed:
                time.sleep(target_time - elapsed)
            yield frame

    def get_frame(self, index: int) -> Optional[RecordedFrame]:
        if 0 <= index < len(self._frames):
            return self._frames[index]
        return None
