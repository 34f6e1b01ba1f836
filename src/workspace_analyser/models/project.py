"""Workspace analysis result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class Severity(str, Enum):
    """Size severity bucket derived from a percentage."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(slots=True)
class ControllerRecord:
    """A controller directory and its share of the enclosing project."""

    path: Path
    size_bytes: int
    formatted_size: str
    percentage: float
    severity: Severity


@dataclass(slots=True)
class ProjectRecord:
    """A project directory with the controllers found beneath it.

    ``severity`` is None for the wrapper record built when the analysed
    path is a single controller rather than a project.
    """

    path: Path
    size_bytes: int
    formatted_size: str
    severity: Severity | None
    controllers: list[ControllerRecord] = field(default_factory=list)


@dataclass(slots=True)
class AnalysisResult:
    """Outcome of one analysis run over a workspace, project or controller."""

    workspace_path: Path
    workspace_size: int
    projects: list[ProjectRecord] = field(default_factory=list)

    @property
    def project_count(self) -> int:
        return len(self.projects)

    @property
    def controller_count(self) -> int:
        return sum(len(p.controllers) for p in self.projects)
