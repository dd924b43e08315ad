"""In-memory state for the HTTP API: one ProjectIndex per project root."""

from __future__ import annotations

import threading
from pathlib import Path

from project_context.indexer import ProjectIndex
from project_context.paths import normalize_project_path
from project_context.pipeline import open_index


def root_key(project_root: str) -> Path:
    """Cache key for *project_root*, the same path ``open_index`` ends up using."""
    return Path(normalize_project_path(project_root).normalized_path).resolve()


class AppState:
    """Singleton in-memory state shared by all API routes."""

    def __init__(self):
        self.indexes: dict[Path, ProjectIndex] = {}
        self._lock = threading.Lock()

    def index_for(self, project_root: str, refresh: bool = False) -> ProjectIndex:
        """Return the cached index for *project_root*, building it on first use.

        Raises ProjectRootError for roots that do not look like a project.
        """
        key = root_key(project_root)
        with self._lock:
            cached = self.indexes.get(key)
        if cached is not None and not refresh:
            return cached

        index = open_index(str(key))
        with self._lock:
            self.indexes[key] = index
        return index

    def get(self, project_root: str) -> ProjectIndex | None:
        with self._lock:
            return self.indexes.get(root_key(project_root))

    def clear(self) -> None:
        with self._lock:
            self.indexes.clear()


state = AppState()
