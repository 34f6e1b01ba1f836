"""Project and controller detection by marker file."""

from __future__ import annotations

from pathlib import Path

PROJECT_MARKER = "prj.xml"
CONTROLLER_MARKER = "ust.xml"


def _has_marker(path: Path | str, marker: str) -> bool:
    if not str(path).strip():
        return False
    try:
        return (Path(path) / marker).is_file()
    except (OSError, ValueError):
        return False


def is_project(path: Path | str) -> bool:
    """Check whether *path* directly contains a ``prj.xml`` file."""
    return _has_marker(path, PROJECT_MARKER)


def is_controller(path: Path | str) -> bool:
    """Check whether *path* directly contains a ``ust.xml`` file."""
    return _has_marker(path, CONTROLLER_MARKER)


def find_nearest_project(path: Path | str) -> Path | None:
    """Return the closest directory at or above *path* that is a project."""
    current = Path(path).absolute()
    for candidate in (current, *current.parents):
        if is_project(candidate):
            return candidate
    return None
