"""Shared utility functions."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

from workspace_analyser.models.delete_result import DeleteResult
from workspace_analyser.models.scan_result import FileEntry

log = logging.getLogger(__name__)

KB = 1024
MB = KB * 1024
GB = MB * 1024


def xdg_config_home() -> Path:
    """Return XDG_CONFIG_HOME, defaulting to ~/.config."""
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


def remove_files(entries: list[FileEntry]) -> DeleteResult:
    """Delete the given files one by one and report what happened.

    The entry list is copied before anything is touched, so callers may
    mutate their own collection from a progress callback.  A file that is
    already gone counts as deleted.  Failures are collected as
    ``"<path>: <error>"`` strings and never stop the batch.
    """
    result = DeleteResult()

    for entry in list(entries):
        try:
            if entry.path.is_dir():
                raise IsADirectoryError(f"Refusing to delete directory: {entry.path}")
            entry.path.unlink(missing_ok=True)
        except OSError as e:
            log.debug("Could not delete %s: %s", entry.path, e)
            result.errors.append(f"{entry.path}: {e}")
            continue
        result.deleted.append(entry.path)
        result.freed_bytes += entry.size_bytes

    return result


def dir_info(path: Path | str) -> tuple[int, int]:
    """Calculate total size and file count of a directory tree.

    Uses GNU ``find`` (C-speed walk) when available, falling back to
    ``os.scandir`` on systems without it.  Unreadable subtrees contribute
    nothing; a missing path yields ``(0, 0)``.

    Returns:
        (total_bytes, file_count) tuple.
    """
    if not os.path.isdir(path):
        return 0, 0
    try:
        return _dir_info_find(str(path))
    except Exception:
        return _dir_info_scandir(path)


def _dir_info_find(path_str: str) -> tuple[int, int]:
    """Walk a directory tree using GNU find (pure C, no Python per-file overhead).

    ``-H`` resolves a symlinked starting point; links below it are not followed.
    """
    proc = subprocess.run(
        ["find", "-H", path_str, "-type", "f", "-printf", "%s\n"],
        capture_output=True, timeout=60,
    )
    if proc.returncode != 0:
        if not proc.stdout:
            raise RuntimeError(f"find failed with exit code {proc.returncode}")
        log.debug("find reported errors under %s: %s", path_str, proc.stderr.decode(errors="replace").strip())
    total = count = 0
    for line in proc.stdout.split(b"\n"):
        if line:
            total += int(line)
            count += 1
    return total, count


def _dir_info_scandir(path: Path | str) -> tuple[int, int]:
    """Walk a directory tree using os.scandir (pure Python fallback)."""
    total = 0
    count = 0
    stack: list[Path | str] = [path]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                for entry in it:
                    try:
                        if entry.is_file(follow_symlinks=False):
                            total += entry.stat(follow_symlinks=False).st_size
                            count += 1
                        elif entry.is_dir(follow_symlinks=False):
                            stack.append(entry.path)
                    except OSError:
                        log.debug("Cannot stat: %s", entry.path)
        except OSError:
            log.debug("Cannot read directory: %s", current)
    return total, count


def disk_size(path: Path | str) -> int:
    """Calculate total size of all files under *path*."""
    return dir_info(path)[0]


def format_size(size_bytes: int | float) -> str:
    """Convert a byte count to a binary-unit string such as ``"1.5 KB"``.

    KB, MB and GB values keep at most two fractional digits with trailing
    zeros trimmed; anything below 1 KB is truncated to whole bytes, so
    ``1023.5`` prints as ``"1023 B"``.
    """
    if size_bytes < 0:
        return f"-{format_size(-size_bytes)}"

    for unit, factor in (("GB", GB), ("MB", MB), ("KB", KB)):
        if size_bytes >= factor:
            value = f"{size_bytes / factor:.2f}".rstrip("0").rstrip(".")
            return f"{value} {unit}"
    return f"{int(size_bytes)} B"


def percentage(part: int | float, whole: int | float) -> float:
    """Return *part* as a percentage of *whole*, or 0 when *whole* is 0.

    Not clamped: a part larger than the whole yields more than 100.
    """
    if whole == 0:
        return 0.0
    return part / whole * 100.0


def format_percentage(value: float) -> str:
    """Render a percentage with at most two trimmed fractional digits."""
    return f"{value:.2f}".rstrip("0").rstrip(".") + "%"
