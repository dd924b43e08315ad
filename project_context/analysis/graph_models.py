"""Data models for the file-level dependency graph."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class DependencyNode:
    id: str  # relative path
    language: str
    size: int = 0
    functions: int = 0
    classes: int = 0


@dataclass
class DependencyEdge:
    source: str
    target: str
    edge_type: str = "import"


@dataclass
class DependencyGraph:
    nodes: list[DependencyNode] = field(default_factory=list)
    edges: list[DependencyEdge] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "nodes": [
                {
                    "id": n.id,
                    "type": n.language,
                    "size": n.size,
                    "functions": n.functions,
                    "classes": n.classes,
                }
                for n in self.nodes
            ],
            "edges": [
                {"source": e.source, "target": e.target, "type": e.edge_type}
                for e in self.edges
            ],
        }


@dataclass
class TargetDependencies:
    """Dependencies and dependents of a single target file."""
    target: str
    dependencies: list[str] = field(default_factory=list)
    dependents: list[str] = field(default_factory=list)
    graph: DependencyGraph = field(default_factory=DependencyGraph)

    def to_dict(self) -> dict:
        return {
            "target": self.target,
            "dependencies": list(self.dependencies),
            "dependents": list(self.dependents),
            "graph": {
                "nodes": [n.id for n in self.graph.nodes],
                "edges": [{"source": e.source, "target": e.target} for e in self.graph.edges],
            },
        }
