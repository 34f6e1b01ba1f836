"""Exceptions raised by the analysis core."""

from __future__ import annotations


class WorkspaceNotFoundError(Exception):
    """Raised when the path to analyse or scan is empty or not a directory."""

    def __init__(self, path: object) -> None:
        self.path = path
        super().__init__(f"Workspace path does not exist or is not a directory: {path!s}")
