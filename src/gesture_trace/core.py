"""Composition root. Wires the store, controller and hand tracking together.

``Core`` owns one of each component and hands the controller to the
fragment tree on every frame, so no component needs a back-reference to
another. It is also the command/query surface used by the HTTP API and
the CLI.

Usage:
    core = Core(template_file="templates.json")
    core.load()
    # Sensor callback:
    core.process_frame(hands)
    # API:
    core.set_state("recording")
    ...
    core.set_state("saving")
    core.create("circle")
    core.set_state("normal")
    for template in core.flush_detected():
        print(f"Gesture: {template.name}")
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Iterable, Optional

from gesture_trace.controller import GestureController, State
from gesture_trace.fragment import HandManager
from gesture_trace.metrics import MetricsCollector
from gesture_trace.model import Model
from gesture_trace.sensor import SensorHand
from gesture_trace.store import TemplateStore
from gesture_trace.template import Template

logger = logging.getLogger("gesture_trace.core")


class Core:
    """Gesture recognition core."""

    def __init__(self, template_file: Optional[str | Path] = None, store: Optional[TemplateStore] = None):
        self.store = store if store is not None else TemplateStore(template_file)
        self.metrics = MetricsCollector(template_count=lambda: len(self.store))
        self.controller = GestureController(self.store, metrics=self.metrics)
        self.hands = HandManager()

    # --- Sensor input ---

    def process_frame(self, hands: Iterable[SensorHand]):
        """Process one sensor frame."""
        t_start = time.monotonic()
        self.hands.process_frame(hands, self.controller)
        self.metrics.record_frame(time.monotonic() - t_start, len(self.hands))

    # --- State ---

    def state(self) -> State:
        return self.controller.state

    def set_state(self, state: State | str) -> State:
        """Switch the controller state.

        Entering RECORDING starts from empty traces; going from SAVING back
        to NORMAL discards what was recorded.
        """
        new_state = State(state)
        previous = self.controller.set_state(new_state)
        if new_state is State.RECORDING and previous is not State.RECORDING:
            self.clear()
        elif new_state is State.NORMAL and previous is State.SAVING:
            self.clear()
        return previous

    def clear(self):
        """Reset the traces of every tracked finger."""
        self.controller.clear(self.hands)

    # --- Templates ---

    def create(self, name: str, start: Optional[int] = None, end: Optional[int] = None) -> Template:
        return self.controller.create(name, start, end, self.hands)

    def to_templates(self) -> list[Template]:
        return self.store.to_templates()

    def delete(self, template_id: int) -> Template:
        return self.store.delete(template_id)

    def delete_all(self) -> int:
        return self.store.delete_all()

    def load(self) -> int:
        return self.store.load()

    def save(self):
        self.store.save()

    # --- Live data ---

    def live_trace(self) -> list[Model]:
        return self.hands.live_models()

    def flush_detected(self) -> list[Template]:
        return self.controller.flush_detected()
