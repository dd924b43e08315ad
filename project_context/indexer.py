"""In-memory index of scanned source files, keyed by absolute path."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from pathlib import Path
from typing import Iterable

from project_context.models import ContextConfig, IndexStats, SourceFile
from project_context.scanner import list_source_files, read_source_file

logger = logging.getLogger(__name__)

_MAX_WORKERS = 8


class ProjectIndex:
    """Owns the ``SourceFile`` records of one project.

    Extraction runs in parallel outside the lock; results are written in a
    single locked step, so the mapping only ever holds a complete
    generation. Consumers work on :meth:`snapshot`, never on the live
    mapping.
    """

    def __init__(self, project_root: Path | str, config: ContextConfig | None = None):
        self.project_root = Path(project_root).resolve()
        self.config = config or ContextConfig()
        self._files: dict[Path, SourceFile] = {}
        self._lock = threading.Lock()
        self._last_indexed: datetime | None = None

    def __len__(self) -> int:
        return len(self._files)

    def index_project(self) -> int:
        """Scan every listed file. Raises ProjectRootError if the root is unreadable.

        The new generation is built off to the side and swapped in whole, so
        concurrent readers see either the previous set or the complete new one.
        """
        logger.info("Indexing project at: %s", self.project_root)
        paths = list_source_files(self.project_root, self.config)
        logger.info("Found %d files to analyze", len(paths))
        files = {f.path: f for f in self._read_many(paths)}
        with self._lock:
            self._files = files
            self._last_indexed = datetime.now()
        logger.info("Indexed %d files successfully", len(files))
        return len(files)

    def analyze_file(self, path: Path | str) -> SourceFile:
        source_file = read_source_file(Path(path).resolve(), self.project_root)
        with self._lock:
            self._files[source_file.path] = source_file
        return source_file

    def reindex_files(self, changed: Iterable[Path | str]) -> None:
        """Re-extract *changed* paths, replacing entries by key.

        Deleted paths are not dropped: they are re-read like any other and
        end up as empty records.
        """
        paths = [Path(p).resolve() for p in changed]
        logger.info("Re-indexing %d changed files", len(paths))
        updated = self._read_many(paths)
        with self._lock:
            self._files.update((f.path, f) for f in updated)
            self._last_indexed = datetime.now()

    def _read_many(self, paths: list[Path]) -> list[SourceFile]:
        if not paths:
            return []
        with ThreadPoolExecutor(max_workers=min(_MAX_WORKERS, len(paths))) as pool:
            return list(pool.map(lambda p: read_source_file(p, self.project_root), paths))

    def snapshot(self) -> list[SourceFile]:
        with self._lock:
            return list(self._files.values())

    def get_file(self, path: Path | str) -> SourceFile | None:
        return self._files.get(Path(path).resolve())

    def stats(self) -> IndexStats:
        files = self.snapshot()
        return IndexStats(
            files_indexed=len(files),
            functions_found=sum(len(f.functions) for f in files),
            classes_found=sum(len(f.classes) for f in files),
            modules_found=sum(1 for f in files if f.imports or f.exports),
            dependencies_mapped=sum(len(f.imports) for f in files),
            last_indexed=self._last_indexed.isoformat() if self._last_indexed else None,
        )

    def search_files(self, query: str) -> list[SourceFile]:
        """Files whose path, function names or class names contain *query*."""
        q = query.lower()
        return [
            f for f in self.snapshot()
            if q in f.relative_path.lower()
            or any(q in fn.name.lower() for fn in f.functions)
            or any(q in cls.name.lower() for cls in f.classes)
        ]

    def find_references(self, symbol: str) -> list[dict]:
        """Definitions and imports of *symbol*, grouped by file."""
        references: list[dict] = []
        for f in self.snapshot():
            found: list[dict] = []
            for fn in f.functions:
                if fn.name == symbol:
                    found.append({"line": fn.start_line, "type": "function_definition"})
            for cls in f.classes:
                if cls.name == symbol:
                    found.append({"line": cls.start_line, "type": "class_definition"})
            for imp in f.imports:
                if symbol in imp.names:
                    found.append({"line": 0, "type": "import"})
            if found:
                references.append({"file": f.relative_path, "references": found})
        return references
