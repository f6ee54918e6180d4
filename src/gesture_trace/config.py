"""Centralised tunables and server configuration.

The trace and recognition constants are fixed at import time; the server
settings can be overridden from a YAML file:

    config = ServerConfig.from_yaml("gesture-trace.yml")
"""

from __future__ import annotations

import os
import sys
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path

import yaml

# --- Sampling ---

# Distance between resampled trace points, in sensor units (millimeters).
SAMPLE_DISTANCE = 10.0

# --- Traces ---

# Maximum number of points kept in a trace; the oldest are evicted first.
MAX_POINTS = 2048

# Raw points kept on a fragment after a detection, so the same motion
# does not trigger again right away.
KEEP_POINTS = 5

# --- Recognition ---

# Max cumulative angle difference (radians) for a point to count as matched.
MARGIN = 0.3

# Difference (radians) at which a scan gives up on the current point.
INTERRUPT_MARGIN = 2.0

# Number of unmatched template points after which a match is rejected.
MAX_ERROR = 4

# Number of trace points scanned per template point.
SEARCH_SPACE = 12

# Allowed tempo ratio between a trace and a template, in both directions.
MAX_DEVIATION_FACTOR = 1.5

# --- Templates ---

APP_DIR_NAME = "gesture-trace"
TEMPLATE_FILE_NAME = "templates.json"


def cache_dir() -> Path:
    """Per-platform user cache directory."""
    if sys.platform == "win32":
        base = os.environ.get("LOCALAPPDATA")
        return Path(base) if base else Path.home() / "AppData" / "Local"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Caches"
    base = os.environ.get("XDG_CACHE_HOME")
    return Path(base) if base else Path.home() / ".cache"


def default_template_path() -> Path:
    return cache_dir() / APP_DIR_NAME / TEMPLATE_FILE_NAME


@dataclass
class ServerConfig:
    """Settings for the HTTP API and CLI."""
    host: str = "127.0.0.1"
    port: int = 8765
    template_file: str = field(default_factory=lambda: str(default_template_path()))
    log_level: str = "info"

    @classmethod
    def from_yaml(cls, path: str | Path) -> ServerConfig:
        """Load settings from a YAML file. Unknown keys are ignored."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_yaml(self, path: str | Path):
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.safe_dump(asdict(self), f, sort_keys=False)
