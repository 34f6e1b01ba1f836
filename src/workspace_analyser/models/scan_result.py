"""Junk scan result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(slots=True)
class FileEntry:
    """Single junk file found by a scan.

    ``description`` carries the description of the pattern that matched.
    """

    path: Path
    size_bytes: int
    description: str
    pattern: str = ""


@dataclass(slots=True)
class JunkScanResult:
    """Result of scanning a directory tree for junk files."""

    root: Path
    entries: list[FileEntry] = field(default_factory=list)
    total_bytes: int = 0
    summary: str = ""
