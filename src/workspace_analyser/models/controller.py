"""Controller detail dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True)
class ControllerDetails:
    """Information read from the files inside one controller directory."""

    path: Path
    macro_count: int = 0
    fup_sheet_count: int = 0
    hardware_type: str = ""
    cp_version: str = ""
    ip_address: str = ""
    compiled: bool = False
    compile_text: str = ""


@dataclass(slots=True)
class ContentItem:
    """A file or directory inside a controller, relative to its root."""

    relative_path: str
    full_path: Path
    is_dir: bool = False

    @property
    def display_name(self) -> str:
        icon = "📁" if self.is_dir else "📄"
        return f"{icon} {self.relative_path}"
