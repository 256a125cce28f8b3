from __future__ import annotations

import pytest

from tripstore import config
from tripstore.errors import DataDirNotFoundError


def test_resolve_data_dir_prefers_override(monkeypatch, tmp_path):
    monkeypatch.setenv("TRIPSTORE_DATA_DIR", str(tmp_path / "custom"))
    assert config.resolve_data_dir() == tmp_path / "custom"


def test_resolve_data_dir_uses_platform_root(monkeypatch, tmp_path):
    monkeypatch.delenv("TRIPSTORE_DATA_DIR", raising=False)
    monkeypatch.setenv("TRIPSTORE_APP_ID", "my-trips")
    monkeypatch.setattr(config, "_platform_data_root", lambda: tmp_path)
    assert config.resolve_data_dir() == tmp_path / "my-trips"


def test_resolve_data_dir_xdg_on_linux(monkeypatch, tmp_path):
    monkeypatch.delenv("TRIPSTORE_DATA_DIR", raising=False)
    monkeypatch.delenv("TRIPSTORE_APP_ID", raising=False)
    monkeypatch.setattr(config.sys, "platform", "linux")
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))
    assert config.resolve_data_dir() == tmp_path / "xdg" / "trip-planner"


def test_resolve_data_dir_without_root(monkeypatch):
    monkeypatch.delenv("TRIPSTORE_DATA_DIR", raising=False)
    monkeypatch.setattr(config, "_platform_data_root", lambda: None)
    with pytest.raises(DataDirNotFoundError):
        config.resolve_data_dir()


def test_load_cors_origins(monkeypatch):
    monkeypatch.setenv("TRIPSTORE_CORS_ORIGINS", "http://localhost:5173/, tauri://localhost")
    assert config.load_cors_origins() == ["http://localhost:5173", "tauri://localhost"]

    monkeypatch.delenv("TRIPSTORE_CORS_ORIGINS")
    assert config.load_cors_origins() == config.DEFAULT_CORS_ORIGINS
