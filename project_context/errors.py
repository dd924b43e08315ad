"""Exception types raised inside the pipeline.

None of these escape ``build_context``; they are converted to in-band
error results at the request boundary.
"""

from __future__ import annotations


class ProjectContextError(Exception):
    """Base class for project-context failures."""


class ProjectRootError(ProjectContextError):
    """The project root is missing, not a directory, or unreadable."""

    def __init__(self, message: str, normalized_path: str = ""):
        super().__init__(message)
        self.normalized_path = normalized_path
