"""Tests for the request pipeline and project-root handling."""

import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from unittest.mock import patch

import pytest

from project_context.errors import ProjectRootError
from project_context.formatter import generate_folder_tree
from project_context.indexer import ProjectIndex
from project_context.models import ContextRequest
from project_context.paths import normalize_project_path, validate_project_root
from project_context.pipeline import (
    ERROR_SUMMARY,
    build_context,
    get_dependency_graph,
    get_project_analysis,
    open_index,
    validate_context,
)
from project_context.token_utils import estimate_tokens


def _request(root, query="user service", **kwargs):
    return ContextRequest(query=query, project_root=str(root), **kwargs)


class TestBuildContext:
    def test_sample_project(self, sample_root):
        result = build_context(_request(sample_root))
        assert result.compression_level == "full"
        assert result.files_included[:2] == ["src/services/userService.ts", "tests/userService.test.ts"]
        assert len(result.files_included) == 5
        assert result.document.startswith("# Complete Project Context Analysis")
        assert result.metadata.file_count == 5
        assert result.metadata.class_count == 1
        assert result.metadata.function_count == 4
        assert result.metadata.primary_language == "typescript"
        assert result.metadata.token_estimate == estimate_tokens(result.document)
        assert result.summary.startswith("This context contains 5 files")
        assert len(result.dependency_graph["edges"]) == 6
        assert "architectural_patterns" in result.usage_patterns
        assert "📁 sample_project" in result.folder_tree

    def test_budget_triggers_compression(self, sample_root):
        full = build_context(_request(sample_root))
        small = build_context(_request(sample_root, max_tokens=50))
        assert small.compression_level == "compressed"
        assert small.metadata.token_estimate < full.metadata.token_estimate
        assert small.files_included == full.files_included

    def test_generous_budget_leaves_document(self, sample_root):
        result = build_context(_request(sample_root, max_tokens=1_000_000))
        assert result.compression_level == "full"
        assert result == build_context(_request(sample_root))

    def test_invalid_root_is_error_result(self, tmp_path):
        missing = tmp_path / "missing"
        result = build_context(_request(missing, query="anything"))
        assert result.compression_level == "error"
        assert result.summary == ERROR_SUMMARY
        assert result.document.startswith("# Error Building Context")
        assert 'for query: "anything"' in result.document
        assert "Project directory not found" in result.document
        assert result.files_included == []
        assert result.metadata.token_estimate == 0
        assert "Directory not found" in result.folder_tree

    def test_unexpected_failure_is_error_result(self, sample_root):
        with patch("project_context.pipeline.rank_files", side_effect=RuntimeError("boom")):
            result = build_context(_request(sample_root))
        assert result.compression_level == "error"
        assert "Error: boom" in result.document
        assert result.document.endswith("Please check the project structure below and adjust accordingly.")
        assert result.folder_tree

    def test_passed_index_is_refreshed(self, sample_copy):
        idx = ProjectIndex(sample_copy)
        idx.index_project()
        new_file = sample_copy / "src" / "services" / "orderService.ts"
        new_file.write_text("export class OrderService {}\n")

        result = build_context(_request(sample_copy), index=idx)
        assert "src/services/orderService.ts" in result.files_included
        assert idx.get_file(new_file) is not None

    def test_index_for_other_root_is_ignored(self, sample_root, tmp_path):
        (tmp_path / "package.json").write_text("{}")
        other = ProjectIndex(tmp_path)
        result = build_context(_request(sample_root), index=other)
        assert len(result.files_included) == 5
        assert len(other) == 0

    def test_scope_narrows_selection(self, sample_root):
        result = build_context(_request(sample_root, scope="class"))
        assert result.files_included == ["src/services/userService.ts"]

    def test_shared_index_concurrent_requests(self, sample_root):
        idx = open_index(str(sample_root))
        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(lambda _: build_context(_request(sample_root), index=idx), range(8)))
        assert all(r.compression_level == "full" for r in results)
        assert {tuple(r.files_included) for r in results} == {tuple(results[0].files_included)}
        assert len(results[0].files_included) == 5

    def test_completeness_is_informational(self, sample_root):
        base = build_context(_request(sample_root))
        for level in ("partial", "full", "exhaustive"):
            assert build_context(_request(sample_root, completeness=level)) == base


@pytest.fixture
def locked_entry(tmp_path, monkeypatch):
    """A project where stat on one entry fails with EACCES."""
    (tmp_path / "package.json").write_text("{}")
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "a.ts").write_text("export const a = 1;\n")
    (tmp_path / "locked").mkdir()
    (tmp_path / "locked" / "secret.ts").write_text("x")

    original = Path.lstat

    def lstat(self, *args, **kwargs):
        if self.name == "secret.ts":
            raise PermissionError(13, "Permission denied", str(self))
        return original(self, *args, **kwargs)

    monkeypatch.setattr(Path, "lstat", lstat)
    return tmp_path


class TestUnreadableEntries:
    def test_folder_tree_marks_entry(self, locked_entry):
        tree = generate_folder_tree(locked_entry)
        assert "📄 secret.ts (access denied)" in tree
        assert "📄 a.ts" in tree

    def test_build_context_does_not_raise(self, locked_entry):
        result = build_context(_request(locked_entry, query="a"))
        assert result.compression_level in ("full", "compressed")
        assert "secret.ts (access denied)" in result.folder_tree

    def test_folder_tree_failure_becomes_error_result(self, sample_root):
        with patch(
            "project_context.pipeline.generate_folder_tree",
            side_effect=PermissionError(13, "Permission denied"),
        ):
            result = build_context(_request(sample_root))
        assert result.compression_level == "error"
        assert "Permission denied" in result.document
        assert result.folder_tree == ""

    def test_root_validation_failure_becomes_error_result(self, sample_root):
        with patch(
            "project_context.pipeline.validate_project_root",
            side_effect=PermissionError(13, "Permission denied"),
        ):
            result = build_context(_request(sample_root))
        assert result.compression_level == "error"
        assert result.summary == ERROR_SUMMARY


class TestOtherOperations:
    def test_validate_context(self, sample_root):
        doc = build_context(_request(sample_root)).document
        result = validate_context(doc, "user service")
        assert 0.0 <= result.completeness_score <= 1.0
        assert "Good coherence between query and context" in result.strengths

    def test_dependency_graph(self, sample_root):
        result = get_dependency_graph("services/userService", str(sample_root))
        assert result.dependencies == ["src/models/user.ts", "src/utils/format.ts"]
        assert result.dependents == ["src/index.ts", "tests/userService.test.ts"]

    def test_dependency_graph_reuses_index(self, sample_root):
        idx = open_index(str(sample_root))
        result = get_dependency_graph("src/index.ts", str(sample_root), include_tests=False, index=idx)
        assert result.target == "src/index.ts"

    def test_project_analysis(self, sample_root):
        report = get_project_analysis(str(sample_root))
        assert report["metrics"]["test_coverage"] == 20

    def test_open_index_rejects_bad_root(self, tmp_path):
        with pytest.raises(ProjectRootError) as excinfo:
            open_index(str(tmp_path / "nope"))
        assert excinfo.value.normalized_path == str(tmp_path / "nope")


class TestNormalizePath:
    def test_plain_absolute_path_untouched(self, tmp_path):
        info = normalize_project_path(str(tmp_path))
        assert info.normalized_path == str(tmp_path)
        assert not info.was_normalized
        assert info.issues == []

    def test_percent_encoding_decoded(self):
        info = normalize_project_path("/srv/my%20project")
        assert info.normalized_path == "/srv/my project"
        assert info.was_normalized
        assert info.issues[0].startswith("URL encoded path detected and decoded")

    def test_file_scheme_stripped(self):
        info = normalize_project_path("file:///srv/app")
        assert info.normalized_path == "/srv/app"
        assert "Removed file:// protocol from path" in info.issues

    def test_relative_made_absolute(self):
        info = normalize_project_path("some/dir")
        assert info.normalized_path == os.path.abspath("some/dir")
        assert info.issues[0].startswith("Converted relative path to absolute")

    def test_dot_segments_collapsed(self):
        info = normalize_project_path("/srv/a/../b")
        assert info.normalized_path == "/srv/b"
        assert "Normalized path structure" in info.issues

    def test_problem_characters_reported(self):
        info = normalize_project_path("/srv/a*b")
        assert info.normalized_path == "/srv/a*b"
        assert not info.was_normalized
        assert info.issues == ["Path contains special characters that may cause issues: *"]


class TestValidateRoot:
    def test_missing(self, tmp_path):
        result = validate_project_root(str(tmp_path / "missing"))
        assert not result.valid
        assert result.message.startswith("Project directory not found")
        assert result.message.endswith(f"Normalized path: {tmp_path / 'missing'}")

    def test_file_is_not_a_directory(self, tmp_path):
        f = tmp_path / "a.ts"
        f.write_text("x")
        result = validate_project_root(str(f))
        assert not result.valid
        assert result.message.startswith("Path is not a directory")

    def test_empty_directory(self, tmp_path):
        result = validate_project_root(str(tmp_path))
        assert not result.valid
        assert result.message.startswith("No source files found in directory")

    def test_non_source_files_only(self, tmp_path):
        (tmp_path / "notes.txt").write_text("x")
        assert not validate_project_root(str(tmp_path)).valid

    def test_indicator_file_is_enough(self, tmp_path):
        (tmp_path / "go.mod").write_text("module x")
        assert validate_project_root(str(tmp_path)).valid

    def test_source_in_common_dir(self, tmp_path):
        (tmp_path / "lib").mkdir()
        (tmp_path / "lib" / "util.rb").write_text("x")
        assert validate_project_root(str(tmp_path)).valid

    def test_source_at_top_level(self, tmp_path):
        (tmp_path / "main.go").write_text("package main")
        assert validate_project_root(str(tmp_path)).valid

    def test_source_only_in_deep_dir_is_not_enough(self, tmp_path):
        (tmp_path / "deep" / "er").mkdir(parents=True)
        (tmp_path / "deep" / "er" / "x.ts").write_text("x")
        assert not validate_project_root(str(tmp_path)).valid

    def test_file_url(self, sample_root):
        result = validate_project_root(f"file://{sample_root}")
        assert result.valid
        assert result.normalized_path == str(sample_root)
