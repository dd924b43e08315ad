"""Document and folder-tree formatters."""

from __future__ import annotations

from project_context.analysis.usage import AggregatedFacts
from project_context.formatter.document import DocumentFormatter, empty_document, primary_language
from project_context.formatter.folder_tree import generate_folder_tree
from project_context.models import SourceFile

_formatter = DocumentFormatter()


def format_document(
    files: list[SourceFile],
    facts: AggregatedFacts | None = None,
    query: str | None = None,
) -> str:
    """Render the context document for *files*."""
    return _formatter.format(files, facts, query)


def generate_summary(files: list[SourceFile], facts: AggregatedFacts | None = None) -> str:
    return _formatter.summary(files, facts)


__all__ = [
    "DocumentFormatter",
    "empty_document",
    "format_document",
    "generate_summary",
    "generate_folder_tree",
    "primary_language",
]
