"""Prometheus-compatible metrics for gesture-trace.

Renders the Prometheus text exposition format directly.

Tracked metrics:
- gesture_trace_detections_total (counter, by template name)
- gesture_trace_frames_total (counter)
- gesture_trace_frame_latency_seconds (histogram)
- gesture_trace_active_hands (gauge)
- gesture_trace_templates (gauge)
"""

from __future__ import annotations

import threading
import time
from collections import Counter
from typing import Callable, Optional


class _Histogram:
    """Simple histogram with configurable buckets."""

    def __init__(self, buckets: list[float]):
        self.buckets = sorted(buckets)
        self.bucket_counts = [0] * len(self.buckets)
        self.count = 0
        self.sum = 0.0
        self._lock = threading.Lock()

    def observe(self, value: float):
        with self._lock:
            self.count += 1
            self.sum += value
            for i, b in enumerate(self.buckets):
                if value <= b:
                    self.bucket_counts[i] += 1
                    break

    def render(self, name: str, help_text: str) -> str:
        lines = [
            f"# HELP {name} {help_text}",
            f"# TYPE {name} histogram",
        ]
        with self._lock:
            cumulative = 0
            for i, b in enumerate(self.buckets):
                cumulative += self.bucket_counts[i]
                lines.append(f'{name}_bucket{{le="{b}"}} {cumulative}')
            lines.append(f'{name}_bucket{{le="+Inf"}} {self.count}')
            lines.append(f"{name}_sum {self.sum:.6f}")
            lines.append(f"{name}_count {self.count}")
        return "\n".join(lines)


class MetricsCollector:
    """Collects and renders recognition metrics.

    ``template_count``, when given, is called on every render to report the
    templates gauge; otherwise the last value passed to ``set_templates`` is
    reported.
    """

    def __init__(self, template_count: Optional[Callable[[], int]] = None):
        self._template_count = template_count
        self._detections: Counter = Counter()
        self._frames_total = 0
        self._active_hands = 0
        self._templates = 0
        self._lock = threading.Lock()

        # Frame latency: 0.5ms to 100ms
        self._latency = _Histogram(
            [0.0005, 0.001, 0.002, 0.005, 0.010, 0.020, 0.050, 0.100]
        )
        self._start_time = time.time()

    def record_detection(self, name: str):
        with self._lock:
            self._detections[name] += 1

    def record_frame(self, latency_seconds: float, active_hands: int):
        with self._lock:
            self._frames_total += 1
            self._active_hands = active_hands
        self._latency.observe(latency_seconds)

    def set_templates(self, count: int):
        with self._lock:
            self._templates = count

    @property
    def frames_total(self) -> int:
        with self._lock:
            return self._frames_total

    @property
    def detection_counts(self) -> dict[str, int]:
        with self._lock:
            return dict(self._detections)

    def render(self) -> str:
        """Render all metrics in Prometheus text exposition format."""
        lines: list[str] = []

        uptime = time.time() - self._start_time
        lines.append("# HELP gesture_trace_uptime_seconds Time since start")
        lines.append("# TYPE gesture_trace_uptime_seconds gauge")
        lines.append(f"gesture_trace_uptime_seconds {uptime:.1f}")
        lines.append("")

        lines.append("# HELP gesture_trace_detections_total Gesture detections by template name")
        lines.append("# TYPE gesture_trace_detections_total counter")
        with self._lock:
            for name, count in sorted(self._detections.items()):
                lines.append(f'gesture_trace_detections_total{{template="{name}"}} {count}')
            frames_total = self._frames_total
            active_hands = self._active_hands
            templates = self._templates
        if self._template_count is not None:
            templates = self._template_count()
        lines.append("")

        lines.append(self._latency.render(
            "gesture_trace_frame_latency_seconds",
            "Sensor frame processing latency in seconds",
        ))
        lines.append("")

        lines.append("# HELP gesture_trace_frames_total Sensor frames processed")
        lines.append("# TYPE gesture_trace_frames_total counter")
        lines.append(f"gesture_trace_frames_total {frames_total}")
        lines.append("")

        lines.append("# HELP gesture_trace_active_hands Hands in the last frame")
        lines.append("# TYPE gesture_trace_active_hands gauge")
        lines.append(f"gesture_trace_active_hands {active_hands}")
        lines.append("")

        lines.append("# HELP gesture_trace_templates Stored gesture templates")
        lines.append("# TYPE gesture_trace_templates gauge")
        lines.append(f"gesture_trace_templates {templates}")
        lines.append("")

        return "\n".join(lines) + "\n"
