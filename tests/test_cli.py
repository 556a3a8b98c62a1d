import importlib.util
import json
from pathlib import Path

import pytest

CLI_PATH = Path(__file__).resolve().parents[1] / "cli" / "main.py"


@pytest.fixture
def cli():
    spec = importlib.util.spec_from_file_location("tape_vision_cli", CLI_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _config(tmp_path, cameras):
    path = tmp_path / "frc.json"
    path.write_text(json.dumps({"team": 1234, "cameras": cameras}), encoding="utf-8")
    return path


def test_bad_geometry_exits_before_connecting(cli, tmp_path, monkeypatch):
    connects = []
    monkeypatch.setattr(cli, "connect_network_tables", lambda *a: connects.append(a))
    path = _config(tmp_path, [{"name": "front", "path": "/dev/video0", "width": 0}])

    assert cli.main([str(path)]) == 1
    assert connects == []


def test_unreadable_config_exits_with_error(cli, tmp_path):
    assert cli.main([str(tmp_path / "missing.json")]) == 1


def test_runs_processor_with_network_sink(cli, tmp_path, monkeypatch):
    calls = []
    sink = object()
    monkeypatch.setattr(cli, "connect_network_tables", lambda cfg, team: calls.append(team) or sink)
    monkeypatch.setattr(cli.VisionProcessor, "run", lambda self, s: calls.append(s))
    path = _config(tmp_path, [{"name": "front", "path": "/dev/video0"}])

    assert cli.main([str(path)]) == 0
    assert calls == [1234, sink]
