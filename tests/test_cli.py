"""Tests for the gesture-trace command line."""

import math

import pytest
from typer.testing import CliRunner

from gesture_trace.cli import app
from gesture_trace.core import Core
from gesture_trace.geometry import Point3
from gesture_trace.recorder import FrameRecorder
from gesture_trace.sensor import index_hand

runner = CliRunner()


def circle_frames(radius=100.0, steps=360):
    for i in range(steps + 1):
        t = 2 * math.pi * i / steps
        yield [index_hand(1, Point3(radius * math.cos(t), radius * math.sin(t), 0.0))]


@pytest.fixture
def template_file(tmp_path):
    """Template file holding a single circle."""
    path = tmp_path / "templates.json"
    core = Core(template_file=path)
    core.set_state("recording")
    for frame in circle_frames():
        core.process_frame(frame)
    core.set_state("saving")
    core.create("circle")
    return path


@pytest.fixture
def recording(tmp_path):
    rec = FrameRecorder()
    rec.start()
    for i, frame in enumerate(circle_frames()):
        rec.add_frame(frame, timestamp=i / 100.0)
    rec.stop()
    path = tmp_path / "session.json"
    rec.save(path)
    return path


class TestTemplatesCommand:
    def test_list(self, template_file):
        result = runner.invoke(app, ["templates", "--templates", str(template_file)])
        assert result.exit_code == 0
        assert "circle" in result.stdout

    def test_list_empty(self, tmp_path):
        result = runner.invoke(app, ["templates", "--templates", str(tmp_path / "none.json")])
        assert result.exit_code == 0
        assert "No templates." in result.stdout

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("[{]")
        result = runner.invoke(app, ["templates", "--templates", str(path)])
        assert result.exit_code == 1

    def test_wrong_shape_file(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text('[{"id": 1, "name": "x", "model": {"trace": []}}]')
        result = runner.invoke(app, ["templates", "--templates", str(path)])
        assert result.exit_code == 1


class TestDeleteCommand:
    def test_delete_one(self, template_file):
        core = Core(template_file=template_file)
        core.load()
        template_id = core.to_templates()[0].id

        result = runner.invoke(app, ["delete", str(template_id), "--templates", str(template_file)])
        assert result.exit_code == 0
        assert not template_file.exists()

    def test_delete_unknown(self, template_file):
        result = runner.invoke(app, ["delete", "1", "--templates", str(template_file)])
        assert result.exit_code == 1
        assert template_file.exists()

    def test_delete_needs_target(self, template_file):
        result = runner.invoke(app, ["delete", "--templates", str(template_file)])
        assert result.exit_code == 1

    def test_delete_all(self, template_file):
        result = runner.invoke(app, ["delete", "--all", "--templates", str(template_file)])
        assert result.exit_code == 0
        assert "Deleted 1 templates." in result.stdout


class TestReplayCommand:
    def test_replay_detects(self, template_file, recording):
        result = runner.invoke(app, ["replay", str(recording), "--templates", str(template_file)])
        assert result.exit_code == 0
        assert "circle" in result.stdout
        assert "Replay complete. 0 gestures" not in result.stdout

    def test_replay_missing_recording(self, template_file, tmp_path):
        result = runner.invoke(app, ["replay", str(tmp_path / "nope.json"), "--templates", str(template_file)])
        assert result.exit_code == 1
