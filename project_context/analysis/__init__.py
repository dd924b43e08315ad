"""Aggregate facts derived from indexed files."""

from __future__ import annotations

from project_context.analysis.dependency_graph import (
    DependencyGraphBuilder,
    FuzzyImportResolver,
    ImportResolver,
    PathImportResolver,
)
from project_context.analysis.graph_models import DependencyGraph
from project_context.analysis.usage import AggregatedFacts, aggregate

__all__ = [
    "AggregatedFacts",
    "DependencyGraph",
    "DependencyGraphBuilder",
    "FuzzyImportResolver",
    "ImportResolver",
    "PathImportResolver",
    "aggregate",
]
