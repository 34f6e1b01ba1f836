"""Workspace analysis orchestration."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from workspace_analyser.core.classifier import controller_severity, project_severity
from workspace_analyser.core.collector import collect_controller_paths, collect_project_paths
from workspace_analyser.core.errors import WorkspaceNotFoundError
from workspace_analyser.core.markers import is_controller, is_project
from workspace_analyser.models.project import AnalysisResult, ControllerRecord, ProjectRecord
from workspace_analyser.utils import disk_size, format_size, percentage

log = logging.getLogger(__name__)

ProgressCallback = Callable[[str, str], None]  # (path, status_message)


class WorkspaceAnalyzer:
    """Builds project and controller size breakdowns for a directory.

    Directory sizes are memoised for the lifetime of one ``analyze`` call
    so that sorting and percentage computation walk each tree once.
    """

    def __init__(self) -> None:
        self._sizes: dict[Path, int] = {}

    def analyze(
        self,
        path: Path | str,
        sort_ascending: bool = True,
        on_progress: ProgressCallback | None = None,
    ) -> AnalysisResult:
        """Analyse a workspace, a single project or a single controller.

        Args:
            path: Directory to analyse.
            sort_ascending: Smallest projects and controllers first if True.
            on_progress: Optional callback for progress updates.

        Returns:
            The analysis result; its project list is empty when nothing
            under *path* is a project.

        Raises:
            WorkspaceNotFoundError: If *path* is empty or not a directory.
        """
        if not str(path).strip() or not Path(path).is_dir():
            raise WorkspaceNotFoundError(path)

        root = Path(path)
        self._sizes.clear()
        workspace_size = self._size(root)
        result = AnalysisResult(workspace_path=root, workspace_size=workspace_size)

        if is_controller(root):
            log.info("Analysing single controller: %s", root)
            result.projects.append(self._controller_wrapper(root))
        elif is_project(root):
            log.info("Analysing single project: %s", root)
            result.projects.append(self._process(root, workspace_size, sort_ascending, on_progress))
        else:
            project_paths = collect_project_paths(root)
            log.info("Found %d projects under %s", len(project_paths), root)
            project_paths.sort(key=self._size, reverse=not sort_ascending)
            for project_path in project_paths:
                result.projects.append(self._process(project_path, workspace_size, sort_ascending, on_progress))

        self._sizes.clear()
        return result

    def process_project(
        self,
        project_path: Path | str,
        workspace_size: int,
        sort_ascending: bool = True,
    ) -> ProjectRecord:
        """Build the record for one project measured against *workspace_size*."""
        self._sizes.clear()
        try:
            return self._process(Path(project_path), workspace_size, sort_ascending, None)
        finally:
            self._sizes.clear()

    def _process(
        self,
        project_path: Path,
        workspace_size: int,
        sort_ascending: bool,
        on_progress: ProgressCallback | None,
    ) -> ProjectRecord:
        if on_progress:
            on_progress(str(project_path), "scanning")

        project_size = self._size(project_path)
        controller_paths = collect_controller_paths(project_path)
        controller_paths.sort(key=self._size, reverse=not sort_ascending)

        controllers = []
        for controller_path in controller_paths:
            size = self._size(controller_path)
            pct = percentage(size, project_size)
            controllers.append(
                ControllerRecord(
                    path=controller_path,
                    size_bytes=size,
                    formatted_size=format_size(size),
                    percentage=pct,
                    severity=controller_severity(pct),
                )
            )

        record = ProjectRecord(
            path=project_path,
            size_bytes=project_size,
            formatted_size=format_size(project_size),
            severity=project_severity(percentage(project_size, workspace_size)),
            controllers=controllers,
        )
        if on_progress:
            on_progress(str(project_path), "done")
        return record

    def _controller_wrapper(self, controller_path: Path) -> ProjectRecord:
        size = self._size(controller_path)
        formatted = format_size(size)
        controller = ControllerRecord(
            path=controller_path,
            size_bytes=size,
            formatted_size=formatted,
            percentage=100.0,
            severity=controller_severity(100.0),
        )
        return ProjectRecord(
            path=controller_path,
            size_bytes=size,
            formatted_size=formatted,
            severity=None,
            controllers=[controller],
        )

    def _size(self, path: Path) -> int:
        if path not in self._sizes:
            self._sizes[path] = disk_size(path)
        return self._sizes[path]
