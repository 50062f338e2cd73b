"""Tests for settings loading and the workflow CLI."""

import json
from pathlib import Path

import pytest
from mediaflow.cli import main
from mediaflow.config import Settings, load_settings


def test_defaults_when_env_is_empty():
    settings = load_settings(env={})
    assert settings.paste_offset == (50.0, 50.0)
    assert settings.duplicate_offset == (100.0, 100.0)
    assert settings.log_level == "INFO"
    assert settings.storage_dir == Settings().storage_dir


def test_env_overrides():
    settings = load_settings(env={
        "MEDIAFLOW_STORAGE_DIR": "/tmp/flows",
        "MEDIAFLOW_PASTE_OFFSET": "30",
        "MEDIAFLOW_DUPLICATE_OFFSET": "60, 80",
        "MEDIAFLOW_LOG_LEVEL": "debug",
    })
    assert settings.storage_dir == Path("/tmp/flows")
    assert settings.paste_offset == (30.0, 30.0)
    assert settings.duplicate_offset == (60.0, 80.0)
    assert settings.log_level == "DEBUG"


def test_bad_offset_raises():
    with pytest.raises(ValueError, match="Invalid offset"):
        load_settings(env={"MEDIAFLOW_PASTE_OFFSET": "a,b,c"})


def test_cli_list_shows_presets(tmp_path, capsys):
    assert main(["--storage-dir", str(tmp_path), "list"]) == 0
    out = capsys.readouterr().out
    assert "quick-convert" in out
    assert "Frame Extraction" in out


def test_cli_export_import_delete(tmp_path, capsys):
    storage_dir = tmp_path / "store"
    exported = tmp_path / "qc.yaml"

    assert main(["--storage-dir", str(storage_dir), "export", "quick-convert", str(exported)]) == 0
    assert exported.read_text().startswith("id: quick-convert")

    assert main(["--storage-dir", str(storage_dir), "import", str(exported), "--name", "My QC"]) == 0
    stored = json.loads((storage_dir / "customWorkflows.json").read_text())
    assert stored[0]["name"] == "My QC"
    assert stored[0]["category"] == "custom"

    capsys.readouterr()
    assert main(["--storage-dir", str(storage_dir), "show", stored[0]["id"]]) == 0
    assert "My QC" in capsys.readouterr().out

    assert main(["--storage-dir", str(storage_dir), "delete", stored[0]["id"]]) == 0
    assert json.loads((storage_dir / "customWorkflows.json").read_text()) == []


def test_cli_reports_unknown_workflow(tmp_path, capsys):
    assert main(["--storage-dir", str(tmp_path), "show", "missing"]) == 1
    assert "Workflow not found" in capsys.readouterr().err


def test_cli_refuses_to_delete_preset(tmp_path, capsys):
    assert main(["--storage-dir", str(tmp_path), "delete", "quick-convert"]) == 1
    assert "cannot be modified" in capsys.readouterr().err


def test_cli_reports_bad_settings(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("MEDIAFLOW_PASTE_OFFSET", "a,b,c")
    assert main(["--storage-dir", str(tmp_path), "list"]) == 1
    assert "Invalid offset" in capsys.readouterr().err


def test_cli_import_rejects_dangling_edge(tmp_path, capsys):
    source = tmp_path / "broken.yaml"
    source.write_text(
        "id: broken\nname: Broken\nnodes:\n  - {id: a, type: inputVideo}\n"
        "edges:\n  - {id: e, source: a, target: ghost}\n"
    )
    assert main(["--storage-dir", str(tmp_path / "store"), "import", str(source)]) == 1
    assert "unknown node: ghost" in capsys.readouterr().err
    assert not (tmp_path / "store" / "customWorkflows.json").exists()
