"""Junk file matching, scanning and deletion."""

from __future__ import annotations

import logging
import os
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Iterable

from workspace_analyser.core.errors import WorkspaceNotFoundError
from workspace_analyser.models.delete_result import DeleteResult
from workspace_analyser.models.junk_pattern import JunkPattern
from workspace_analyser.models.scan_result import FileEntry, JunkScanResult
from workspace_analyser.utils import format_size, remove_files

if TYPE_CHECKING:
    from workspace_analyser.settings import Settings

log = logging.getLogger(__name__)

PATTERNS_KEY = "junk.patterns"

# (pattern, description) pairs shipped as the default junk set
_DEFAULTS = (
    ("mainbdf.mot", "Motion definition file"),
    ("mainbdf.ppe", "Project parameter file"),
    ("grafikbilderinfo.txt", "Graphics info text"),
    ("*.bak", "Backup files"),
    ("*.tmp", "Temporary files"),
    ("*.sav", "Save files"),
    ("mainbdf_fbg5.inc", "Include file"),
    ("mainbdf_tup.inc", "Include file"),
    ("fupliste.xml", "FUP list XML"),
    ("fupliste.xmlpl", "FUP list file"),
    ("fupblattliste.mnu", "FUP menu file"),
)


def default_patterns() -> list[JunkPattern]:
    """Return a fresh copy of the built-in pattern set, all enabled."""
    return [JunkPattern(pattern, description) for pattern, description in _DEFAULTS]


DEFAULT_PATTERNS: tuple[JunkPattern, ...] = tuple(default_patterns())


def match_pattern(filename: str, patterns: Iterable[JunkPattern] | None) -> JunkPattern | None:
    """Return the first enabled pattern matching *filename*, if any.

    *filename* may be a full path; only its final component is compared.
    """
    if not patterns:
        return None
    name = os.path.basename(filename)
    for pattern in patterns:
        if pattern.enabled and pattern.matches(name):
            return pattern
    return None


def is_junk(filename: str, patterns: Iterable[JunkPattern] | None) -> bool:
    """Check whether *filename* matches any enabled junk pattern."""
    return match_pattern(filename, patterns) is not None


def scan_for_junk(root: Path | str, patterns: Iterable[JunkPattern] | None) -> JunkScanResult:
    """Walk the tree under *root* and collect every file matching *patterns*.

    Unreadable directories and files are skipped.  The order of the
    returned entries follows the walk and is not meaningful.

    Raises:
        WorkspaceNotFoundError: If *root* is not an existing directory.
    """
    root = Path(root)
    if not str(root).strip() or not root.is_dir():
        raise WorkspaceNotFoundError(root)

    enabled = [p for p in patterns or () if p.enabled]
    entries: list[FileEntry] = []
    total = 0

    if enabled:
        stack: list[str] = [str(root)]
        while stack:
            current = stack.pop()
            try:
                with os.scandir(current) as it:
                    for entry in it:
                        try:
                            if entry.is_dir(follow_symlinks=False):
                                stack.append(entry.path)
                                continue
                            if not entry.is_file(follow_symlinks=False):
                                continue
                            pattern = match_pattern(entry.name, enabled)
                            if pattern is None:
                                continue
                            size = entry.stat(follow_symlinks=False).st_size
                        except OSError:
                            log.debug("Cannot access: %s", entry.path)
                            continue
                        entries.append(
                            FileEntry(
                                path=Path(entry.path),
                                size_bytes=size,
                                description=pattern.description,
                                pattern=pattern.pattern,
                            )
                        )
                        total += size
            except OSError:
                log.debug("Cannot read directory: %s", current)

    log.info("Junk scan of %s found %d files (%d bytes)", root, len(entries), total)
    return JunkScanResult(
        root=root,
        entries=entries,
        total_bytes=total,
        summary=f"Found {len(entries)} junk files totaling {format_size(total)}",
    )


def delete_junk(entries: Iterable[FileEntry]) -> DeleteResult:
    """Delete previously scanned junk files, collecting failures per file."""
    snapshot = list(entries)
    result = remove_files(snapshot)
    if result.errors:
        log.warning("%d of %d junk files could not be deleted", len(result.errors), len(snapshot))
    return result


class JunkScanner:
    """Runs junk scans on a single background worker.

    Lets an interactive front end start a scan and keep responding;
    scans submitted while one is running are queued behind it.
    """

    def __init__(self) -> None:
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="junk-scan")

    def submit(
        self,
        root: Path | str,
        patterns: Iterable[JunkPattern] | None,
        on_done: Callable[[JunkScanResult], None] | None = None,
    ) -> Future[JunkScanResult]:
        """Schedule a scan and return its future.

        The pattern set is copied at submission time.  *on_done* fires on
        the worker thread only when the scan succeeds; errors surface
        through the future.
        """
        snapshot = [JunkPattern(p.pattern, p.description, p.enabled) for p in patterns or ()]

        def _run() -> JunkScanResult:
            result = scan_for_junk(root, snapshot)
            if on_done:
                on_done(result)
            return result

        return self._executor.submit(_run)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> JunkScanner:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()


def load_patterns(settings: Settings) -> list[JunkPattern]:
    """Load the user's pattern set, falling back to the built-in defaults."""
    raw = settings.get(PATTERNS_KEY)
    if not isinstance(raw, list):
        return default_patterns()
    patterns: list[JunkPattern] = []
    for item in raw:
        try:
            patterns.append(JunkPattern.from_dict(item))
        except (KeyError, TypeError):
            log.warning("Ignoring malformed junk pattern in settings: %r", item)
    return patterns


def save_patterns(settings: Settings, patterns: Iterable[JunkPattern]) -> None:
    """Persist the user's pattern set."""
    settings.set(PATTERNS_KEY, [p.to_dict() for p in patterns])
