"""Usage-pattern aggregation over a ranked file set."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from project_context.analysis.dependency_graph import DependencyGraphBuilder
from project_context.analysis.graph_models import DependencyGraph
from project_context.models import SourceFile

_TOP_N = 10

# (path substrings, label); each label is emitted at most once
_PATTERN_RULES: list[tuple[tuple[str, ...], str]] = [
    (("service",), "Service Layer"),
    (("component",), "Component Architecture"),
    (("util", "helper"), "Utility Functions"),
    (("model", "entity"), "Data Models"),
]


@dataclass
class AggregatedFacts:
    graph: DependencyGraph = field(default_factory=DependencyGraph)
    common_imports: list[dict] = field(default_factory=list)
    architectural_patterns: list[str] = field(default_factory=list)
    function_usage: list[dict] = field(default_factory=list)
    class_usage: list[dict] = field(default_factory=list)  # never populated

    def usage_patterns(self) -> dict:
        return {
            "common_imports": list(self.common_imports),
            "architectural_patterns": list(self.architectural_patterns),
            "function_usage_patterns": list(self.function_usage),
            "class_usage_patterns": list(self.class_usage),
        }


def count_common_imports(files: list[SourceFile]) -> list[dict]:
    counts = Counter(imp.path for f in files for imp in f.imports)
    return [
        {"import": path, "count": count}
        for path, count in sorted(counts.items(), key=lambda kv: -kv[1])[:_TOP_N]
    ]


def detect_patterns(files: list[SourceFile]) -> list[str]:
    patterns: list[str] = []
    for needles, label in _PATTERN_RULES:
        if any(needle in f.relative_path for f in files for needle in needles):
            patterns.append(label)
    return patterns


def count_function_usage(files: list[SourceFile]) -> list[dict]:
    """Same-file literal occurrence counts; anything above 1 counts as used.

    A name defined in two ranked files keeps the count of the later file.
    """
    usage: dict[str, int] = {}
    for f in files:
        for fn in f.functions:
            count = f.content.count(fn.name)
            if count > 1:
                usage[fn.name] = count
    return [
        {"function": name, "usage_count": count, "contexts": []}
        for name, count in sorted(usage.items(), key=lambda kv: -kv[1])[:_TOP_N]
    ]


def aggregate(
    all_files: list[SourceFile],
    ranked_files: list[SourceFile],
    builder: DependencyGraphBuilder | None = None,
) -> AggregatedFacts:
    """Derive graph and usage facts from *ranked_files*.

    *all_files* is accepted for callers that aggregate against the full
    index; every fact here is computed from the ranked set only.
    """
    builder = builder or DependencyGraphBuilder()
    return AggregatedFacts(
        graph=builder.build(ranked_files),
        common_imports=count_common_imports(ranked_files),
        architectural_patterns=detect_patterns(ranked_files),
        function_usage=count_function_usage(ranked_files),
    )
