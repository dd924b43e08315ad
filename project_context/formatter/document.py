"""Markdown rendering of ranked files and their aggregated facts."""

from __future__ import annotations

from collections import Counter

from project_context.analysis.usage import AggregatedFacts
from project_context.models import SourceFile
from project_context.scanner.language_map import FENCE_LANGUAGE

MAX_LISTED_NODES = 20
MAX_LISTED_EDGES = 15

CONTENTS_HEADING = "Complete File Contents"


def primary_language(files: list[SourceFile]) -> str:
    """Most common language by file count; ties go to the first seen."""
    if not files:
        return "unknown"
    counts = Counter(f.language.value for f in files)
    return counts.most_common(1)[0][0]


def empty_document(query: str | None) -> str:
    return f'# Empty Project Context\n\nNo relevant files found for query: "{query or "unknown"}"'


class DocumentFormatter:
    """Renders the context document in a fixed section order."""

    def format(
        self,
        files: list[SourceFile],
        facts: AggregatedFacts | None = None,
        query: str | None = None,
    ) -> str:
        if not files:
            return empty_document(query)

        sections: list[str] = ["# Complete Project Context Analysis"]
        if query:
            sections.append(f"\n**Query:** {query}")
        sections.append("")
        sections.append(self.summary(files, facts))
        sections.append("")

        if facts is not None:
            sections.append("## Architecture Overview")
            sections.append(self._architecture_overview(facts))
            sections.append("")

        sections.append("## Relevant Files Structure")
        for f in files:
            sections.extend(self._file_structure(f))
            sections.append("")

        sections.append(f"## {CONTENTS_HEADING}")
        for f in files:
            sections.append(f"### {f.relative_path}")
            sections.append("")
            sections.append("```" + FENCE_LANGUAGE.get(f.language, ""))
            sections.append(f.content)
            sections.append("```")
            sections.append("")

        if facts is not None:
            sections.append("## Dependency Relationships")
            sections.append(self._dependency_relationships(facts))
            sections.append("")

            sections.append("## Usage Patterns & Insights")
            sections.append(self._usage_patterns(facts))
            sections.append("")

        return "\n".join(sections)

    def summary(self, files: list[SourceFile], facts: AggregatedFacts | None = None) -> str:
        total_lines = sum(f.line_count for f in files)
        total_functions = sum(len(f.functions) for f in files)
        total_classes = sum(len(f.classes) for f in files)

        text = (
            f"This context contains {len(files)} files with {total_lines} total lines of code. "
            f"The primary language is {primary_language(files)} "
            f"with {total_functions} functions and {total_classes} classes."
        )
        if facts is not None:
            text += (
                f" The dependency graph shows {len(facts.graph.nodes)} nodes "
                f"and {len(facts.graph.edges)} relationships."
            )
            if facts.architectural_patterns:
                text += f" Key architectural patterns identified: {', '.join(facts.architectural_patterns)}."
        return text

    @staticmethod
    def _file_structure(f: SourceFile) -> list[str]:
        lines = [
            f"### {f.relative_path}",
            f"**Language:** {f.language.value}",
            f"**Size:** {f.size} bytes",
        ]
        if f.classes:
            lines.append(f"**Classes:** {', '.join(c.name for c in f.classes)}")
        if f.functions:
            lines.append(f"**Functions:** {', '.join(fn.name for fn in f.functions)}")
        if f.imports:
            lines.append(f"**Dependencies:** {', '.join(imp.path for imp in f.imports)}")
        return lines

    @staticmethod
    def _architecture_overview(facts: AggregatedFacts) -> str:
        lines = [
            "**Dependency Structure:**",
            f"- Total modules: {len(facts.graph.nodes)}",
            f"- Total dependencies: {len(facts.graph.edges)}",
        ]
        if facts.common_imports:
            lines.append("")
            lines.append("**Most Common Dependencies:**")
            for imp in facts.common_imports[:5]:
                lines.append(f"- {imp['import']} (used in {imp['count']} files)")
        if facts.architectural_patterns:
            lines.append("")
            lines.append("**Architectural Patterns:**")
            for pattern in facts.architectural_patterns:
                lines.append(f"- {pattern}")
        return "\n".join(lines)

    @staticmethod
    def _dependency_relationships(facts: AggregatedFacts) -> str:
        nodes, edges = facts.graph.nodes, facts.graph.edges
        lines = ["**Modules:**"]
        for node in nodes[:MAX_LISTED_NODES]:
            lines.append(
                f"- **{node.id}** ({node.language}, {node.functions} functions, {node.classes} classes)"
            )
        if len(nodes) > MAX_LISTED_NODES:
            lines.append(f"... and {len(nodes) - MAX_LISTED_NODES} more modules")

        lines.append("")
        lines.append("**Key Dependencies:**")
        for edge in edges[:MAX_LISTED_EDGES]:
            lines.append(f"- {edge.source} → {edge.target} ({edge.edge_type})")
        if len(edges) > MAX_LISTED_EDGES:
            lines.append(f"... and {len(edges) - MAX_LISTED_EDGES} more dependencies")
        return "\n".join(lines)

    @staticmethod
    def _usage_patterns(facts: AggregatedFacts) -> str:
        lines: list[str] = []
        if facts.function_usage:
            lines.append("**Most Used Functions:**")
            for fn in facts.function_usage[:10]:
                lines.append(f"- {fn['function']} ({fn['usage_count']} calls)")
            lines.append("")
        if facts.class_usage:
            lines.append("**Most Instantiated Classes:**")
            for cls in facts.class_usage[:5]:
                lines.append(
                    f"- {cls['class']} ({cls['instantiations']} instantiations in {len(cls['files'])} files)"
                )
            lines.append("")
        return "\n".join(lines)
