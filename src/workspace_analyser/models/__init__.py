"""Workspace Analyser data models."""

from workspace_analyser.models.controller import ContentItem, ControllerDetails
from workspace_analyser.models.delete_result import DeleteResult
from workspace_analyser.models.junk_pattern import JunkPattern
from workspace_analyser.models.project import AnalysisResult, ControllerRecord, ProjectRecord, Severity
from workspace_analyser.models.scan_result import FileEntry, JunkScanResult

__all__ = [
    "AnalysisResult",
    "ContentItem",
    "ControllerDetails",
    "ControllerRecord",
    "DeleteResult",
    "FileEntry",
    "JunkPattern",
    "JunkScanResult",
    "ProjectRecord",
    "Severity",
]
