"""Gesture controller: recognition and recording state machine.

States:
    NORMAL     track fingers and detect gestures (initial state)
    RECORDING  track fingers only, while the user performs a new gesture
    SAVING     freeze all traces while the recorded gesture is turned into
               a template

Transitions only happen through ``set_state``; the controller never changes
state on its own.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import TYPE_CHECKING, Optional

from gesture_trace.errors import NoLiveModelError
from gesture_trace.model import Model
from gesture_trace.store import TemplateStore
from gesture_trace.template import Template

if TYPE_CHECKING:
    from gesture_trace.fragment import Fragment, HandManager
    from gesture_trace.metrics import MetricsCollector

logger = logging.getLogger("gesture_trace.controller")


class State(Enum):
    NORMAL = "normal"
    RECORDING = "recording"
    SAVING = "saving"


class GestureController:
    """Gates tracking and detection, and turns live traces into templates."""

    def __init__(self, store: TemplateStore, metrics: Optional[MetricsCollector] = None):
        self.store = store
        self.metrics = metrics
        self._state = State.NORMAL
        self._detected: list[Template] = []
        self._lock = threading.Lock()

    @property
    def state(self) -> State:
        with self._lock:
            return self._state

    def set_state(self, state: State | str) -> State:
        """Switch state. Returns the previous state."""
        new_state = State(state)
        with self._lock:
            previous = self._state
            self._state = new_state
        if previous is not new_state:
            logger.info("State %s -> %s", previous.value, new_state.value)
        return previous

    def should_track(self) -> bool:
        return self.state in (State.NORMAL, State.RECORDING)

    def should_detect(self) -> bool:
        return self.state is State.NORMAL

    def detect(self, fragment: Fragment, model: Model) -> Optional[Template]:
        """Match a fragment's model against the store.

        On a match the template is queued for ``flush_detected`` and most of
        the fragment's trace is cleared, so the same motion is not detected
        twice.
        """
        if not self.should_detect():
            return None

        template = self.store.find_matching(model)
        if template is None:
            return None

        with self._lock:
            self._detected.append(template)
        fragment.clear_most()

        logger.info("Detected gesture %r (id=%d)", template.name, template.id)
        if self.metrics is not None:
            self.metrics.record_detection(template.name)
        return template

    def flush_detected(self) -> list[Template]:
        """Return and forget all templates detected since the last flush."""
        with self._lock:
            detected = self._detected
            self._detected = []
        return detected

    def create(
        self,
        name: str,
        start: Optional[int],
        end: Optional[int],
        hands: HandManager,
    ) -> Template:
        """Create and store a template from the longest live model.

        The model trace is trimmed to ``[start, end)``.

        Raises:
            NoLiveModelError: No finger is currently tracked with a model.
            ValueError: The range selects no points.
        """
        model = hands.longest_model()
        if model is None:
            raise NoLiveModelError()

        trimmed = model.trim(start, end)
        if len(trimmed) == 0:
            raise ValueError(
                f"range [{start}, {end}) selects no points of a {len(model)} point model"
            )

        template = self.store.add(Template.new(name, trimmed))
        logger.info("Created template %r (id=%d, %d points)", template.name, template.id, len(trimmed))
        return template

    def clear(self, hands: HandManager):
        """Clear the traces of every tracked finger."""
        hands.clear()
