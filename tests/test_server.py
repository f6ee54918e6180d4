"""Tests for the HTTP API."""

import pytest

try:
    from fastapi.testclient import TestClient
    _HAS_TESTCLIENT = True
except ImportError:
    _HAS_TESTCLIENT = False

try:
    from gesture_trace.server import app, state
    _HAS_SERVER = True
except ImportError:
    _HAS_SERVER = False

from gesture_trace.core import Core
from gesture_trace.geometry import Point3
from gesture_trace.sensor import index_hand


pytestmark = pytest.mark.skipif(
    not (_HAS_TESTCLIENT and _HAS_SERVER),
    reason="fastapi not installed"
)


@pytest.fixture
def core(tmp_path):
    state.core = Core(template_file=tmp_path / "templates.json")
    yield state.core
    state.core = None


@pytest.fixture
def client(core):
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


def track_line(core, n=12):
    for i in range(n):
        core.process_frame([index_hand(1, Point3(10.0 * i, 0.0, 0.0))])


class TestState:
    def test_get_state(self, client):
        resp = client.get("/api/v1/state")
        assert resp.status_code == 200
        assert resp.json() == {"state": "normal"}

    def test_put_state(self, client):
        resp = client.put("/api/v1/state", json={"state": "recording"})
        assert resp.status_code == 200
        assert resp.json() == {"state": "recording", "previous": "normal"}

    def test_put_invalid_state(self, client):
        resp = client.put("/api/v1/state", json={"state": "dancing"})
        assert resp.status_code == 422
        assert client.get("/api/v1/state").json() == {"state": "normal"}

    def test_record_toggle(self, client):
        assert client.get("/api/v1/record").json() == {"recording": False}
        assert client.get("/api/v1/record/true").json() == {"recording": True}
        assert client.get("/api/v1/state").json() == {"state": "recording"}
        assert client.get("/api/v1/record/false").json() == {"recording": False}


class TestTemplates:
    def test_empty_list(self, client):
        resp = client.get("/api/v1/templates")
        assert resp.status_code == 200
        assert resp.json() == {"templates": []}

    def test_create_without_live_model(self, client):
        resp = client.post("/api/v1/templates", json={"name": "nothing"})
        assert resp.status_code == 409
        assert "error" in resp.json()

    def test_create_and_fetch(self, client, core):
        core.set_state("recording")
        track_line(core)
        core.set_state("saving")

        resp = client.post("/api/v1/templates", json={"name": "line", "from": 1, "to": 4})
        assert resp.status_code == 201
        created = resp.json()
        assert created["name"] == "line"
        assert created["points"] == 3

        listed = client.get("/api/v1/templates").json()["templates"]
        assert [t["id"] for t in listed] == [created["id"]]

        full = client.get(f"/api/v1/templates/{created['id']}").json()
        assert full["name"] == "line"
        assert len(full["model"]["trace"]["points"]) == 3

    def test_create_empty_range(self, client, core):
        track_line(core)
        resp = client.post("/api/v1/templates", json={"name": "x", "from": 5, "to": 5})
        assert resp.status_code == 422

    def test_get_unknown(self, client):
        assert client.get("/api/v1/templates/42").status_code == 404

    def test_delete(self, client, core):
        track_line(core)
        template = core.create("line")

        resp = client.delete(f"/api/v1/templates/{template.id}")
        assert resp.status_code == 200
        assert resp.json()["deleted"]["id"] == template.id
        assert client.delete(f"/api/v1/templates/{template.id}").status_code == 404

    def test_delete_all(self, client, core):
        track_line(core)
        core.create("a")
        core.create("b")
        resp = client.delete("/api/v1/templates")
        assert resp.json() == {"deleted": 2}
        assert client.get("/api/v1/templates").json() == {"templates": []}


class TestLiveData:
    def test_live_trace(self, client, core):
        assert client.get("/api/v1/live").json() == {"models": []}
        core.set_state("recording")
        track_line(core)
        models = client.get("/api/v1/live").json()["models"]
        assert len(models) == 1
        assert len(models[0]["trace"]["points"]) == 10

    def test_detected_flush(self, client, core):
        track_line(core)
        template = core.create("line", end=5)
        track_line(core, 20)

        detected = client.get("/api/v1/detected").json()["detected"]
        assert len(detected) >= 1
        assert detected[0]["id"] == template.id
        assert client.get("/api/v1/detected").json() == {"detected": []}

    def test_metrics_endpoint(self, client, core):
        track_line(core, 3)
        resp = client.get("/metrics")
        assert resp.status_code == 200
        assert "gesture_trace_frames_total 3" in resp.text
