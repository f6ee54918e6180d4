"""gesture-trace - Air gesture recognition from fingertip traces."""

__version__ = "0.1.0"

from gesture_trace.geometry import Point3, RotPoint
from gesture_trace.sampler import resample
from gesture_trace.trace import PointTrace, RotTrace, to_rot_trace
from gesture_trace.model import Model
from gesture_trace.template import Template
from gesture_trace.store import TemplateStore
from gesture_trace.sensor import FingerType, SensorFinger, SensorHand
from gesture_trace.fragment import Fragment, Hand, HandManager
from gesture_trace.controller import GestureController, State
from gesture_trace.core import Core
from gesture_trace.recorder import FrameRecorder, FramePlayer
from gesture_trace.metrics import MetricsCollector
from gesture_trace.errors import (
    GestureTraceError,
    NoLiveModelError,
    TemplateFileError,
    TemplateNotFoundError,
)
