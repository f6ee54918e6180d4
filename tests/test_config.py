"""Tests for configuration and default paths."""

from pathlib import Path

import yaml

from gesture_trace import config
from gesture_trace.config import ServerConfig, cache_dir, default_template_path


class TestPaths:
    def test_xdg_cache_home(self, monkeypatch, tmp_path):
        monkeypatch.setattr(config.sys, "platform", "linux")
        monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path))
        assert cache_dir() == tmp_path
        assert default_template_path() == tmp_path / "gesture-trace" / "templates.json"

    def test_home_cache_fallback(self, monkeypatch, tmp_path):
        monkeypatch.setattr(config.sys, "platform", "linux")
        monkeypatch.delenv("XDG_CACHE_HOME", raising=False)
        monkeypatch.setattr(config.Path, "home", classmethod(lambda cls: tmp_path))
        assert cache_dir() == tmp_path / ".cache"

    def test_macos(self, monkeypatch, tmp_path):
        monkeypatch.setattr(config.sys, "platform", "darwin")
        monkeypatch.setattr(config.Path, "home", classmethod(lambda cls: tmp_path))
        assert cache_dir() == tmp_path / "Library" / "Caches"

    def test_windows(self, monkeypatch, tmp_path):
        monkeypatch.setattr(config.sys, "platform", "win32")
        monkeypatch.setenv("LOCALAPPDATA", str(tmp_path))
        assert cache_dir() == tmp_path


class TestServerConfig:
    def test_defaults(self):
        cfg = ServerConfig()
        assert cfg.host == "127.0.0.1"
        assert cfg.port == 8765
        assert cfg.template_file.endswith("templates.json")

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "gesture-trace.yml"
        path.write_text(yaml.safe_dump({"port": 9000, "template_file": "/tmp/t.json", "unknown": 1}))
        cfg = ServerConfig.from_yaml(path)
        assert cfg.port == 9000
        assert cfg.template_file == "/tmp/t.json"
        assert cfg.host == "127.0.0.1"

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("")
        assert ServerConfig.from_yaml(path) == ServerConfig()

    def test_yaml_roundtrip(self, tmp_path):
        cfg = ServerConfig(host="0.0.0.0", port=1234, template_file="x.json", log_level="debug")
        path = tmp_path / "nested" / "cfg.yml"
        cfg.to_yaml(path)
        assert ServerConfig.from_yaml(path) == cfg

    def test_yaml_path_types(self, tmp_path):
        path = tmp_path / "cfg.yml"
        ServerConfig().to_yaml(str(path))
        assert isinstance(ServerConfig.from_yaml(Path(path)), ServerConfig)
