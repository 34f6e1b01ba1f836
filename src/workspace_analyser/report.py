"""JSON analysis report."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from workspace_analyser.models.project import AnalysisResult, ControllerRecord, ProjectRecord

log = logging.getLogger(__name__)

REPORT_SUFFIX = "_analysis.json"


def _controller_to_dict(controller: ControllerRecord) -> dict[str, Any]:
    return {
        "path": str(controller.path),
        "size_bytes": controller.size_bytes,
        "formatted_size": controller.formatted_size,
        "percentage": controller.percentage,
        "severity": controller.severity.value,
    }


def _project_to_dict(project: ProjectRecord) -> dict[str, Any]:
    return {
        "path": str(project.path),
        "size_bytes": project.size_bytes,
        "formatted_size": project.formatted_size,
        "severity": project.severity.value if project.severity else None,
        "controllers": [_controller_to_dict(c) for c in project.controllers],
    }


def result_to_dict(result: AnalysisResult) -> dict[str, Any]:
    """Convert an analysis result to a JSON-ready structure."""
    return {
        "workspace_path": str(result.workspace_path),
        "workspace_size": result.workspace_size,
        "project_count": result.project_count,
        "controller_count": result.controller_count,
        "projects": [_project_to_dict(p) for p in result.projects],
    }


def report_path(result: AnalysisResult, output_dir: Path | None = None) -> Path:
    """Where the report for *result* is written: ``<name>_analysis.json``."""
    name = result.workspace_path.absolute().name or "workspace"
    return (output_dir or Path.cwd()) / f"{Path(name).stem}{REPORT_SUFFIX}"


def save_analysis_report(result: AnalysisResult, output_dir: Path | None = None) -> Path:
    """Write the analysis report and return its path.

    Raises:
        OSError: If the report cannot be written.
    """
    path = report_path(result, output_dir)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(result_to_dict(result), f, indent=2, ensure_ascii=False)
    except OSError:
        log.exception("Failed to save analysis report: %s", path)
        raise
    log.info("Saved analysis report to %s", path)
    return path
