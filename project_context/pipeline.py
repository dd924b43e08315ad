"""Request orchestrator: validate -> index -> rank -> aggregate -> format -> compress."""

from __future__ import annotations

import logging
from pathlib import Path

from project_context.analysis import DependencyGraphBuilder, aggregate
from project_context.analysis.graph_models import TargetDependencies
from project_context.analysis.insights import analyze_project
from project_context.compression import compress
from project_context.config import load_config
from project_context.errors import ProjectRootError
from project_context.formatter import format_document, generate_folder_tree, generate_summary, primary_language
from project_context.indexer import ProjectIndex
from project_context.models import (
    ContextConfig,
    ContextMetadata,
    ContextRequest,
    ContextResult,
    ValidationResult,
)
from project_context.paths import validate_project_root
from project_context.ranking import rank_files
from project_context.token_utils import estimate_tokens, fits_budget
from project_context.validator import validate_completeness

logger = logging.getLogger(__name__)

ERROR_SUMMARY = "Error occurred during context building - check folder structure"


def _error_result(query: str, message: str, folder_tree: str = "") -> ContextResult:
    document = (
        f"# Error Building Context\n\n"
        f'An error occurred while building context for query: "{query}"\n\n'
        f"Error: {message}\n\n"
        f"Please check the project structure below and adjust accordingly."
    )
    return ContextResult(
        document=document,
        metadata=ContextMetadata(),
        summary=ERROR_SUMMARY,
        compression_level="error",
        folder_tree=folder_tree,
    )


def open_index(project_root: str, config: ContextConfig | None = None) -> ProjectIndex:
    """Validate *project_root* and return a freshly indexed ProjectIndex.

    Raises ProjectRootError if the root does not look like a project.
    """
    validation = validate_project_root(project_root)
    if not validation.valid:
        raise ProjectRootError(validation.message, validation.normalized_path)
    root = Path(validation.normalized_path)
    index = ProjectIndex(root, config or load_config(root))
    index.index_project()
    return index


def build_context(
    request: ContextRequest,
    index: ProjectIndex | None = None,
    config: ContextConfig | None = None,
) -> ContextResult:
    """Build the context document for *request*.

    Never raises: invalid roots and unexpected failures come back as an
    error result with ``compression_level == "error"``. A passed *index*
    is re-indexed before use.
    """
    logger.info("Building context for query: %r", request.query)
    folder_tree = ""
    try:
        validation = validate_project_root(request.project_root)
        folder_tree = generate_folder_tree(validation.normalized_path or request.project_root)

        if not validation.valid:
            logger.warning("Invalid project root %s", validation.normalized_path)
            return _error_result(request.query, validation.message, folder_tree)

        root = Path(validation.normalized_path)
        config = config or load_config(root)
        if index is None or index.project_root != root.resolve():
            index = ProjectIndex(root, config)
        index.index_project()

        all_files = index.snapshot()
        ranked = rank_files(
            all_files,
            request.query,
            request.scope,
            max_files=config.max_ranked_files,
            fallback_limit=config.fallback_files,
        )
        facts = aggregate(all_files, ranked)
        document = format_document(ranked, facts, request.query)

        compression_level = "full"
        if request.max_tokens and not fits_budget(document, request.max_tokens):
            outcome = compress(document, request.max_tokens)
            document = outcome.text
            compression_level = outcome.level

        metadata = ContextMetadata(
            file_count=len(ranked),
            line_count=sum(f.line_count for f in ranked),
            function_count=sum(len(f.functions) for f in ranked),
            class_count=sum(len(f.classes) for f in ranked),
            primary_language=primary_language(ranked),
            token_estimate=estimate_tokens(document),
        )
        logger.info(
            "Final context: %d tokens, %d files", metadata.token_estimate, metadata.file_count
        )
        return ContextResult(
            document=document,
            metadata=metadata,
            summary=generate_summary(ranked, facts),
            dependency_graph=facts.graph.to_dict(),
            usage_patterns=facts.usage_patterns(),
            files_included=[f.relative_path for f in ranked],
            compression_level=compression_level,
            folder_tree=folder_tree,
        )
    except Exception as e:
        logger.exception("Error building context")
        return _error_result(request.query, str(e), folder_tree)


def validate_context(document: str, query: str) -> ValidationResult:
    return validate_completeness(document, query)


def get_dependency_graph(
    target: str,
    project_root: str,
    include_tests: bool = True,
    index: ProjectIndex | None = None,
) -> TargetDependencies:
    """Dependencies and dependents of *target*. Raises ProjectRootError."""
    index = index or open_index(project_root)
    return DependencyGraphBuilder().resolve_target(index.snapshot(), target, include_tests)


def get_project_analysis(project_root: str, index: ProjectIndex | None = None) -> dict:
    """Insight report over every indexed file. Raises ProjectRootError."""
    index = index or open_index(project_root)
    return analyze_project(index.snapshot())
