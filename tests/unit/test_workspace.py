from __future__ import annotations

from pathlib import Path

import pytest

from producer_export.services.workspace import WORKSPACE_PREFIX, acquire_workspace


def test_workspace_is_unique_and_removed(tmp_path: Path):
    with acquire_workspace(tmp_path) as first, acquire_workspace(tmp_path) as second:
        assert first != second
        assert first.is_dir() and second.is_dir()
        assert first.name.startswith(WORKSPACE_PREFIX)
        (first / "a.json").write_text("{}", encoding="utf-8")
    assert not first.exists()
    assert not second.exists()


def test_workspace_kept_when_requested(tmp_path: Path):
    with acquire_workspace(tmp_path, keep=True) as ws:
        (ws / "a.json").write_text("{}", encoding="utf-8")
    assert (ws / "a.json").exists()


def test_workspace_released_on_error(tmp_path: Path):
    with pytest.raises(RuntimeError):
        with acquire_workspace(tmp_path) as ws:
            raise RuntimeError("boom")
    assert not ws.exists()


def test_workspace_root_created(tmp_path: Path):
    root = tmp_path / "not" / "yet"
    with acquire_workspace(root) as ws:
        assert ws.parent == root


def test_workspace_defaults_to_system_temp():
    with acquire_workspace() as ws:
        assert ws.is_dir()
    assert not ws.exists()
