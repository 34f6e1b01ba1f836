"""Severity bucketing of size percentages."""

from __future__ import annotations

from workspace_analyser.models.project import Severity

# (low upper bound, medium upper bound), both exclusive
CONTROLLER_THRESHOLDS = (33.0, 66.0)
PROJECT_THRESHOLDS = (10.0, 25.0)

_COLORS = {
    Severity.LOW: "green",
    Severity.MEDIUM: "yellow",
    Severity.HIGH: "red",
}


def _bucket(pct: float, thresholds: tuple[float, float]) -> Severity:
    low, medium = thresholds
    if pct < low:
        return Severity.LOW
    if pct < medium:
        return Severity.MEDIUM
    return Severity.HIGH


def controller_severity(pct: float) -> Severity:
    """Classify a controller's share of its project."""
    return _bucket(pct, CONTROLLER_THRESHOLDS)


def project_severity(pct: float) -> Severity:
    """Classify a project's share of the whole workspace.

    Thresholds are lower than for controllers since a project competes
    with every other project in the workspace.
    """
    return _bucket(pct, PROJECT_THRESHOLDS)


def severity_color(severity: Severity | None) -> str | None:
    """Terminal colour for a severity bucket (None leaves text unstyled)."""
    if severity is None:
        return None
    return _COLORS[severity]
