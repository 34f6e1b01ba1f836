"""Deletion result dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(slots=True)
class DeleteResult:
    """Result of deleting a batch of junk files."""

    deleted: list[Path] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    freed_bytes: int = 0

    @property
    def files_removed(self) -> int:
        return len(self.deleted)
