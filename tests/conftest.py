"""Shared test fixtures."""

from __future__ import annotations

import pytest

from workspace_analyser.settings import Settings


@pytest.fixture
def isolate_settings(tmp_path, monkeypatch):
    """Redirect the settings file to a temp directory."""
    config_home = tmp_path / "config"
    config_home.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.setattr(Settings, "_instance", None)
    return config_home / "workspace-analyser" / "settings.json"


@pytest.fixture
def workspace(tmp_path):
    """Create a workspace with two projects and three controllers.

    Layout (sizes in bytes, markers are empty)::

        ws/
          alpha/            prj.xml, notes.txt (50)
            ctrl_a/         ust.xml, code.utf (100)
            ctrl_b/         ust.xml, code.utf (300)
          beta/             prj.xml
            sub/ctrl_c/     ust.xml, data.bin (1000)
          loose/            readme.txt (10)
    """
    ws = tmp_path / "ws"
    alpha = ws / "alpha"
    (alpha / "ctrl_a").mkdir(parents=True)
    (alpha / "ctrl_b").mkdir()
    (alpha / "prj.xml").touch()
    (alpha / "notes.txt").write_bytes(b"n" * 50)
    (alpha / "ctrl_a" / "ust.xml").touch()
    (alpha / "ctrl_a" / "code.utf").write_bytes(b"a" * 100)
    (alpha / "ctrl_b" / "ust.xml").touch()
    (alpha / "ctrl_b" / "code.utf").write_bytes(b"b" * 300)

    beta = ws / "beta"
    (beta / "sub" / "ctrl_c").mkdir(parents=True)
    (beta / "prj.xml").touch()
    (beta / "sub" / "ctrl_c" / "ust.xml").touch()
    (beta / "sub" / "ctrl_c" / "data.bin").write_bytes(b"c" * 1000)

    (ws / "loose").mkdir()
    (ws / "loose" / "readme.txt").write_bytes(b"r" * 10)
    return ws


@pytest.fixture
def deny_scandir(monkeypatch):
    """Make ``os.scandir`` raise PermissionError for chosen directories.

    Returns a set; add paths to it to block them.
    """
    import os

    blocked: set[str] = set()
    original = os.scandir

    def fake_scandir(path="."):
        if os.fspath(path) in blocked:
            raise PermissionError(13, "Permission denied", os.fspath(path))
        return original(path)

    monkeypatch.setattr(os, "scandir", fake_scandir)
    return blocked
