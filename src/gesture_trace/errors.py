"""Exceptions raised by gesture-trace.

Geometry and matching never raise on well-formed input; only template
persistence and missing live data do.
"""


class GestureTraceError(Exception):
    """Base class for recoverable gesture-trace errors."""


class NoLiveModelError(GestureTraceError):
    """No tracked fragment holds a model to create a template from."""

    def __init__(self, message: str = "no live gesture model available"):
        super().__init__(message)


class TemplateNotFoundError(GestureTraceError, KeyError):
    """A template id that is not in the store."""

    def __init__(self, template_id: int):
        self.template_id = template_id
        super().__init__(f"no template with id {template_id}")

    def __str__(self) -> str:
        return self.args[0]


class TemplateFileError(GestureTraceError):
    """The persisted template file exists but could not be read."""

    def __init__(self, path, reason: str):
        self.path = path
        super().__init__(f"failed to load templates from {path}: {reason}")
