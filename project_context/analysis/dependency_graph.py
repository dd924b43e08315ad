"""Dependency graphs over ranked files and transitive walks from a single target."""

from __future__ import annotations

import abc
import logging

from project_context.analysis.graph_models import (
    DependencyEdge,
    DependencyGraph,
    DependencyNode,
    TargetDependencies,
)
from project_context.models import SourceFile

logger = logging.getLogger(__name__)

_MAX_DEPTH = 5


class ImportResolver(abc.ABC):
    """Maps an import path, as written, to one of a set of files.

    Resolution is string matching only. It is lossy by contract: edges can
    be spurious (containment hits the wrong file) or missing (relative
    specifiers like ``./x`` rarely match a project-relative path).
    """

    @abc.abstractmethod
    def resolve(self, import_path: str, files: list[SourceFile]) -> SourceFile | None:
        """Return the first matching file, or None."""


class FuzzyImportResolver(ImportResolver):
    """Containment, or exact match after adding ``.ts`` / ``.js``."""

    extensions = (".ts", ".js")

    def resolve(self, import_path: str, files: list[SourceFile]) -> SourceFile | None:
        candidates = {import_path + ext for ext in self.extensions}
        for f in files:
            if import_path in f.relative_path or f.relative_path in candidates:
                return f
        return None


class PathImportResolver(ImportResolver):
    """Exact path, then path + extension or ``/index`` + extension, then containment."""

    extensions = (".ts", ".js", ".tsx", ".jsx")

    def resolve(self, import_path: str, files: list[SourceFile]) -> SourceFile | None:
        for f in files:
            if f.relative_path == import_path or str(f.path) == import_path:
                return f
        for ext in self.extensions:
            for f in files:
                if f.relative_path in (import_path + ext, f"{import_path}/index{ext}"):
                    return f
        for f in files:
            if import_path in f.relative_path:
                return f
        return None


def _is_test_path(f: SourceFile) -> bool:
    return "test" in f.relative_path or "spec" in f.relative_path


class DependencyGraphBuilder:
    """Build file-level dependency graphs from indexed files."""

    def __init__(
        self,
        resolver: ImportResolver | None = None,
        target_resolver: ImportResolver | None = None,
    ):
        self.resolver = resolver or FuzzyImportResolver()
        self.target_resolver = target_resolver or PathImportResolver()

    def build(self, files: list[SourceFile]) -> DependencyGraph:
        """One node per file, one edge per import that resolves within *files*."""
        graph = DependencyGraph()

        for f in files:
            graph.nodes.append(DependencyNode(
                id=f.relative_path,
                language=f.language.value,
                size=f.size,
                functions=len(f.functions),
                classes=len(f.classes),
            ))

        for f in files:
            for imp in f.imports:
                target = self.resolver.resolve(imp.path, files)
                if target is None:
                    continue
                graph.edges.append(DependencyEdge(source=f.relative_path, target=target.relative_path))

        logger.debug("Built graph: %d nodes, %d edges", len(graph.nodes), len(graph.edges))
        return graph

    def resolve_target(
        self,
        files: list[SourceFile],
        target: str,
        include_tests: bool = True,
    ) -> TargetDependencies:
        """Transitive dependencies (depth-limited) and direct dependents of *target*."""
        candidates = files if include_tests else [f for f in files if not _is_test_path(f)]

        target_file = self.target_resolver.resolve(target, files)
        if target_file is None:
            target_file = next((f for f in candidates if target in f.relative_path), None)
        if target_file is None:
            return TargetDependencies(target=target)

        dependencies: list[str] = []
        visited: set[str] = set()

        def collect(current: SourceFile, depth: int) -> None:
            if current.relative_path in visited or depth > _MAX_DEPTH:
                return
            visited.add(current.relative_path)
            for dep in current.dependencies:
                dep_file = self.target_resolver.resolve(dep, files)
                if dep_file is None or dep_file is target_file:
                    continue
                if dep_file.relative_path not in dependencies:
                    dependencies.append(dep_file.relative_path)
                    collect(dep_file, depth + 1)

        collect(target_file, 0)

        dependents = [
            f.relative_path for f in candidates
            if target in f.dependencies
        ]

        result = TargetDependencies(
            target=target_file.relative_path,
            dependencies=dependencies,
            dependents=dependents,
        )
        by_path = {f.relative_path: f for f in files}
        for rel in dict.fromkeys([target_file.relative_path, *dependencies, *dependents]):
            f = by_path[rel]
            result.graph.nodes.append(DependencyNode(
                id=rel,
                language=f.language.value,
                size=f.size,
                functions=len(f.functions),
                classes=len(f.classes),
            ))
        for dep in dependencies:
            result.graph.edges.append(DependencyEdge(source=target_file.relative_path, target=dep))
        for dep in dependents:
            result.graph.edges.append(DependencyEdge(source=dep, target=target_file.relative_path))
        return result
