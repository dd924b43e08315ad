"""project-context: query-focused context documents for a codebase."""

from project_context.models import ContextRequest, ContextResult, ValidationResult
from project_context.pipeline import build_context, get_dependency_graph, validate_context

__version__ = "0.1.0"

__all__ = [
    "ContextRequest",
    "ContextResult",
    "ValidationResult",
    "build_context",
    "get_dependency_graph",
    "validate_context",
]
