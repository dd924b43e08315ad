"""Data models for the project-context pipeline."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any


class Language(enum.Enum):
    TYPESCRIPT = "typescript"
    JAVASCRIPT = "javascript"
    PYTHON = "python"
    OTHER = "other"

    @property
    def is_primary(self) -> bool:
        """TypeScript and JavaScript are the only languages ranked for context."""
        return self in (Language.TYPESCRIPT, Language.JAVASCRIPT)


class ExportKind(enum.Enum):
    FUNCTION = "function"
    CLASS = "class"
    INTERFACE = "interface"
    TYPE = "type"
    VALUE = "value"
    DEFAULT = "default"


class Scope(enum.Enum):
    FUNCTION = "function"
    CLASS = "class"
    MODULE = "module"
    FEATURE = "feature"
    ENTIRE_PROJECT = "entire_project"


class Completeness(enum.Enum):
    PARTIAL = "partial"
    FULL = "full"
    EXHAUSTIVE = "exhaustive"


@dataclass
class ImportRecord:
    path: str  # as written, never resolved
    names: list[str] = field(default_factory=list)
    is_default: bool = False


@dataclass
class ExportRecord:
    name: str
    kind: ExportKind
    line: int


@dataclass
class FunctionRecord:
    name: str
    start_line: int
    end_line: int  # always equal to start_line
    params: list[str] = field(default_factory=list)
    is_async: bool = False
    is_exported: bool = False


@dataclass
class ClassRecord:
    name: str
    start_line: int
    end_line: int
    methods: list[str] = field(default_factory=list)  # never populated
    extends: str | None = None
    implements: list[str] | None = None
    is_exported: bool = False


@dataclass
class InterfaceRecord:
    name: str
    line: int
    is_exported: bool = False


@dataclass
class TypeAliasRecord:
    name: str
    line: int
    definition: str
    is_exported: bool = False


@dataclass
class FileFacts:
    """Result from the extraction stage, before it is attached to a file."""
    imports: list[ImportRecord] = field(default_factory=list)
    exports: list[ExportRecord] = field(default_factory=list)
    functions: list[FunctionRecord] = field(default_factory=list)
    classes: list[ClassRecord] = field(default_factory=list)
    interfaces: list[InterfaceRecord] = field(default_factory=list)
    type_aliases: list[TypeAliasRecord] = field(default_factory=list)


@dataclass(frozen=True)
class SourceFile:
    """One indexed file. Replaced wholesale on re-index, never mutated."""
    path: Path
    relative_path: str
    content: str
    size: int
    last_modified: datetime
    language: Language
    imports: tuple[ImportRecord, ...] = ()
    exports: tuple[ExportRecord, ...] = ()
    functions: tuple[FunctionRecord, ...] = ()
    classes: tuple[ClassRecord, ...] = ()
    interfaces: tuple[InterfaceRecord, ...] = ()
    type_aliases: tuple[TypeAliasRecord, ...] = ()

    @property
    def dependencies(self) -> list[str]:
        return [imp.path for imp in self.imports]

    @property
    def line_count(self) -> int:
        return len(self.content.split("\n"))

    @classmethod
    def from_facts(
        cls,
        path: Path,
        relative_path: str,
        content: str,
        size: int,
        last_modified: datetime,
        language: Language,
        facts: FileFacts,
    ) -> SourceFile:
        return cls(
            path=path,
            relative_path=relative_path,
            content=content,
            size=size,
            last_modified=last_modified,
            language=language,
            imports=tuple(facts.imports),
            exports=tuple(facts.exports),
            functions=tuple(facts.functions),
            classes=tuple(facts.classes),
            interfaces=tuple(facts.interfaces),
            type_aliases=tuple(facts.type_aliases),
        )

    @classmethod
    def empty(cls, path: Path, relative_path: str) -> SourceFile:
        """Record used when a file cannot be read or stat'ed."""
        return cls(
            path=path,
            relative_path=relative_path,
            content="",
            size=0,
            last_modified=datetime.now(),
            language=Language.OTHER,
        )


@dataclass
class ContextConfig:
    """Configuration for indexing and context building."""
    skip_dirs: list[str] = field(default_factory=lambda: [
        "node_modules", ".git", "__pycache__", "dist", "build",
        "coverage", ".next", ".venv", "venv", ".pytest_cache",
        "*.egg-info",
    ])
    extensions: list[str] = field(default_factory=lambda: [
        ".ts", ".tsx", ".js", ".jsx", ".py", ".json", ".md",
    ])
    max_tokens: int = 180000
    scope: str = "feature"
    completeness: str = "full"
    max_ranked_files: int = 20
    fallback_files: int = 10
    watch_debounce_ms: int = 500


@dataclass
class ContextRequest:
    query: str
    project_root: str
    scope: str | None = None
    completeness: str | None = None  # accepted for callers, not used in selection
    max_tokens: int | None = None


@dataclass
class ContextMetadata:
    file_count: int = 0
    line_count: int = 0
    function_count: int = 0
    class_count: int = 0
    primary_language: str = "unknown"
    token_estimate: int = 0


@dataclass
class ContextResult:
    document: str
    metadata: ContextMetadata
    summary: str
    dependency_graph: dict[str, Any] = field(default_factory=lambda: {"nodes": [], "edges": []})
    usage_patterns: dict[str, Any] = field(default_factory=dict)
    files_included: list[str] = field(default_factory=list)
    compression_level: str = "full"
    folder_tree: str = ""


@dataclass
class ValidationResult:
    is_complete: bool = False
    completeness_score: float = 0.0
    confidence_score: float = 0.0
    missing_elements: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    strengths: list[str] = field(default_factory=list)


@dataclass
class IndexStats:
    files_indexed: int = 0
    functions_found: int = 0
    classes_found: int = 0
    modules_found: int = 0
    dependencies_mapped: int = 0
    last_indexed: str | None = None
