"""Tests for document and folder-tree formatting."""

import pytest

from project_context.analysis import aggregate
from project_context.analysis.graph_models import DependencyEdge, DependencyGraph, DependencyNode
from project_context.analysis.usage import AggregatedFacts
from project_context.formatter import (
    empty_document,
    format_document,
    generate_folder_tree,
    generate_summary,
    primary_language,
)
from project_context.formatter.folder_tree import format_file_size
from project_context.indexer import ProjectIndex
from project_context.ranking import rank_files


@pytest.fixture
def ranked_and_facts(sample_root):
    idx = ProjectIndex(sample_root)
    idx.index_project()
    files = idx.snapshot()
    ranked = rank_files(files, "user service")
    return ranked, aggregate(files, ranked)


class TestDocument:
    def test_empty_list_gives_literal_document(self):
        doc = format_document([], None, "find the widgets")
        assert doc == '# Empty Project Context\n\nNo relevant files found for query: "find the widgets"'
        assert format_document([]) == empty_document(None)
        assert empty_document(None).endswith('"unknown"')

    def test_section_order(self, ranked_and_facts):
        ranked, facts = ranked_and_facts
        doc = format_document(ranked, facts, "user service")
        headings = [
            "# Complete Project Context Analysis",
            "**Query:** user service",
            "This context contains 5 files",
            "## Architecture Overview",
            "## Relevant Files Structure",
            "## Complete File Contents",
            "## Dependency Relationships",
            "## Usage Patterns & Insights",
        ]
        positions = [doc.index(h) for h in headings]
        assert positions == sorted(positions)

    def test_file_structure_entries(self, ranked_and_facts):
        ranked, facts = ranked_and_facts
        doc = format_document(ranked, facts)
        assert "### src/services/userService.ts\n**Language:** typescript" in doc
        assert "**Classes:** UserService" in doc
        assert "**Functions:** createUserService" in doc
        assert "**Dependencies:** models/user, utils/format" in doc
        assert "**Query:**" not in doc

    def test_contents_fenced_with_language(self, ranked_and_facts):
        ranked, facts = ranked_and_facts
        doc = format_document(ranked, facts)
        assert "```typescript\nimport { User } from 'models/user';" in doc
        assert doc.count("```typescript") == 5

    def test_dependency_and_usage_sections(self, ranked_and_facts):
        ranked, facts = ranked_and_facts
        doc = format_document(ranked, facts)
        assert "- src/index.ts → src/services/userService.ts (import)" in doc
        assert "- **src/models/user.ts** (typescript, 0 functions, 0 classes)" in doc
        assert "**Most Used Functions:**\n- main (2 calls)" in doc
        assert "- Service Layer" in doc

    def test_without_facts(self, ranked_and_facts):
        ranked, _ = ranked_and_facts
        doc = format_document(ranked)
        assert "## Architecture Overview" not in doc
        assert "## Dependency Relationships" not in doc
        assert "## Complete File Contents" in doc

    def test_node_and_edge_caps(self, make_file):
        files = [make_file("src/a.ts", "export const a = 1;")]
        graph = DependencyGraph(
            nodes=[DependencyNode(id=f"n{i}.ts", language="typescript") for i in range(25)],
            edges=[DependencyEdge(source=f"n{i}.ts", target="n0.ts") for i in range(18)],
        )
        doc = format_document(files, AggregatedFacts(graph=graph))
        assert "... and 5 more modules" in doc
        assert "... and 3 more dependencies" in doc
        assert "**n19.ts**" in doc
        assert "**n20.ts**" not in doc

    def test_summary(self, ranked_and_facts):
        ranked, facts = ranked_and_facts
        summary = generate_summary(ranked, facts)
        assert summary.startswith("This context contains 5 files with ")
        assert "The primary language is typescript" in summary
        assert "The dependency graph shows 5 nodes and 6 relationships." in summary
        assert summary.endswith("Key architectural patterns identified: Service Layer, Utility Functions, Data Models.")

    def test_primary_language(self, make_file):
        assert primary_language([]) == "unknown"
        files = [make_file("a.js", ""), make_file("b.ts", ""), make_file("c.ts", "")]
        assert primary_language(files) == "typescript"


class TestFolderTree:
    def test_renders_sample_project(self, sample_root):
        tree = generate_folder_tree(sample_root)
        lines = tree.split("\n")
        assert lines[0] == "└── 📁 sample_project"
        assert "📄 userService.ts" in tree
        # directories before files at the top level
        top = [line for line in lines if line.startswith("    ├── ") or line.startswith("    └── ")]
        names = [line[4:] for line in top]
        assert names[0].endswith("📁 scripts")
        assert names[-1].startswith("└── 📄 package.json")

    def test_excludes_patterns(self, tmp_path):
        (tmp_path / "node_modules").mkdir()
        (tmp_path / "node_modules" / "x.js").write_text("x")
        (tmp_path / "debug.log").write_text("x")
        (tmp_path / "app.ts").write_text("abc")
        tree = generate_folder_tree(tmp_path)
        assert "node_modules" not in tree
        assert "debug.log" not in tree
        assert "📄 app.ts (3 B)" in tree

    def test_missing_directory(self, tmp_path):
        tree = generate_folder_tree(tmp_path / "nope")
        assert "(Directory not found:" in tree

    @pytest.mark.parametrize("size,expected", [
        (0, "0 B"),
        (512, "512 B"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (5 * 1024 * 1024, "5 MB"),
    ])
    def test_file_size(self, size, expected):
        assert format_file_size(size) == expected
