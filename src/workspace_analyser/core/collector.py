"""Recursive discovery of project and controller directories."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable

from workspace_analyser.core.markers import is_controller, is_project

log = logging.getLogger(__name__)

MarkerPredicate = Callable[[Path], bool]


def collect_paths(root: Path | str, predicate: MarkerPredicate) -> list[Path]:
    """Collect every directory under *root* (inclusive) matching *predicate*.

    Depth-first pre-order in directory-enumeration order.  Matching
    directories are still descended into.  Directory symlinks are not
    followed, and each real directory is visited at most once.  A directory
    that cannot be listed is logged and skipped without affecting its
    siblings.
    """
    found: list[Path] = []
    visited: set[str] = set()
    _walk(Path(root), predicate, found, visited)
    return found


def _walk(directory: Path, predicate: MarkerPredicate, found: list[Path], visited: set[str]) -> None:
    key = os.path.realpath(directory)
    if key in visited:
        log.debug("Already visited, skipping: %s", directory)
        return
    visited.add(key)

    if predicate(directory):
        found.append(directory)

    try:
        with os.scandir(directory) as it:
            subdirs = [Path(e.path) for e in it if _is_real_dir(e)]
    except PermissionError as e:
        log.warning("Access denied to directory '%s': %s", directory, e)
        return
    except OSError as e:
        log.warning("Error accessing directory '%s': %s", directory, e)
        return

    for subdir in subdirs:
        _walk(subdir, predicate, found, visited)


def _is_real_dir(entry: os.DirEntry) -> bool:
    try:
        return entry.is_dir(follow_symlinks=False)
    except OSError:
        return False


def collect_project_paths(root: Path | str) -> list[Path]:
    """Find all project directories under *root*, including *root* itself."""
    return collect_paths(root, is_project)


def collect_controller_paths(root: Path | str) -> list[Path]:
    """Find all controller directories under *root*, including *root* itself."""
    return collect_paths(root, is_controller)
