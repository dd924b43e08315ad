"""JavaScript/TypeScript scanner using regex patterns."""

from __future__ import annotations

import re

from project_context.models import (
    ClassRecord,
    ExportKind,
    ExportRecord,
    FunctionRecord,
    ImportRecord,
    InterfaceRecord,
    Language,
    TypeAliasRecord,
)
from project_context.scanner.base import BaseScanner

# Whole-text patterns for JS/TS imports
_ES_IMPORT_RE = re.compile(
    r"""import\s+(?:(\w+)|\{([^}]+)\}|(\*\s+as\s+\w+))\s+from\s+['"]([^'"]+)['"];?""",
)
_REQUIRE_RE = re.compile(
    r"""(?:const|let|var)\s+(?:(\w+)|\{([^}]+)\})\s*=\s*require\(['"]([^'"]+)['"]\);?""",
)

# Line-local patterns
_FUNCTION_RE = re.compile(r"(?:export\s+)?(?:async\s+)?function\s+(\w+)\s*\(([^)]*)\)")
_ARROW_RE = re.compile(
    r"(?:export\s+)?(?:const|let|var)\s+(\w+)\s*=\s*(?:async\s+)?(?:\([^)]*\)|[^=]+)\s*=>"
)
_CLASS_RE = re.compile(
    r"(?:export\s+)?class\s+(\w+)(?:\s+extends\s+(\w+))?(?:\s+implements\s+([^{]+))?"
)
_INTERFACE_RE = re.compile(r"(?:export\s+)?interface\s+(\w+)")
_TYPE_ALIAS_RE = re.compile(r"(?:export\s+)?type\s+(\w+)\s*=\s*(.+)")

# First matching prefix wins; value prefixes are checked with a regex
_EXPORT_PREFIXES: list[tuple[tuple[str, ...], ExportKind, re.Pattern[str] | None]] = [
    (("export function ", "export async function "), ExportKind.FUNCTION,
     re.compile(r"export\s+(?:async\s+)?function\s+(\w+)")),
    (("export class ",), ExportKind.CLASS, re.compile(r"export\s+class\s+(\w+)")),
    (("export interface ",), ExportKind.INTERFACE, re.compile(r"export\s+interface\s+(\w+)")),
    (("export type ",), ExportKind.TYPE, re.compile(r"export\s+type\s+(\w+)")),
]
_EXPORT_VALUE_RE = re.compile(r"^export\s+(?:const|let|var)\s+(\w+)")


def _split_names(raw: str) -> list[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


class JsScanner(BaseScanner):
    languages = (Language.TYPESCRIPT, Language.JAVASCRIPT)

    def extract_imports(self, content: str) -> list[ImportRecord]:
        imports: list[ImportRecord] = []

        for m in _ES_IMPORT_RE.finditer(content):
            default, named, namespace, path = m.groups()
            if default:
                imports.append(ImportRecord(path=path.strip(), names=[default.strip()], is_default=True))
            elif named:
                imports.append(ImportRecord(path=path.strip(), names=_split_names(named)))
            elif namespace:
                imports.append(ImportRecord(path=path.strip(), names=[namespace.strip()]))

        for m in _REQUIRE_RE.finditer(content):
            single, destructured, path = m.groups()
            if single:
                imports.append(ImportRecord(path=path.strip(), names=[single.strip()], is_default=True))
            elif destructured:
                imports.append(ImportRecord(path=path.strip(), names=_split_names(destructured)))

        return imports

    def extract_exports(self, content: str) -> list[ExportRecord]:
        exports: list[ExportRecord] = []
        for line_no, line in enumerate(content.split("\n"), start=1):
            record = self._match_export(line.strip(), line_no)
            if record is not None:
                exports.append(record)
        return exports

    @staticmethod
    def _match_export(trimmed: str, line_no: int) -> ExportRecord | None:
        for prefixes, kind, name_re in _EXPORT_PREFIXES:
            if trimmed.startswith(prefixes):
                m = name_re.match(trimmed)
                return ExportRecord(name=m.group(1), kind=kind, line=line_no) if m else None

        m = _EXPORT_VALUE_RE.match(trimmed)
        if m:
            return ExportRecord(name=m.group(1), kind=ExportKind.VALUE, line=line_no)

        if trimmed.startswith("export default "):
            return ExportRecord(name="default", kind=ExportKind.DEFAULT, line=line_no)
        return None

    def extract_functions(self, content: str) -> list[FunctionRecord]:
        functions: list[FunctionRecord] = []
        for line_no, line in enumerate(content.split("\n"), start=1):
            trimmed = line.strip()
            is_async = "async" in trimmed
            is_exported = "export" in trimmed

            m = _FUNCTION_RE.search(trimmed)
            if m:
                name, params = m.groups()
                functions.append(FunctionRecord(
                    name=name,
                    start_line=line_no,
                    end_line=line_no,
                    params=[p.strip() for p in params.split(",")] if params else [],
                    is_async=is_async,
                    is_exported=is_exported,
                ))

            # Arrow functions are matched independently of declarations
            m = _ARROW_RE.search(trimmed)
            if m:
                functions.append(FunctionRecord(
                    name=m.group(1),
                    start_line=line_no,
                    end_line=line_no,
                    is_async=is_async,
                    is_exported=is_exported,
                ))
        return functions

    def extract_classes(self, content: str) -> list[ClassRecord]:
        classes: list[ClassRecord] = []
        for line_no, line in enumerate(content.split("\n"), start=1):
            trimmed = line.strip()
            m = _CLASS_RE.search(trimmed)
            if not m:
                continue
            name, extends, implements = m.groups()
            classes.append(ClassRecord(
                name=name,
                start_line=line_no,
                end_line=line_no,
                extends=extends,
                implements=_split_names(implements) if implements else None,
                is_exported="export" in trimmed,
            ))
        return classes

    def extract_interfaces(self, content: str, language: Language) -> list[InterfaceRecord]:
        if language != Language.TYPESCRIPT:
            return []
        interfaces: list[InterfaceRecord] = []
        for line_no, line in enumerate(content.split("\n"), start=1):
            trimmed = line.strip()
            m = _INTERFACE_RE.search(trimmed)
            if m:
                interfaces.append(InterfaceRecord(
                    name=m.group(1), line=line_no, is_exported="export" in trimmed,
                ))
        return interfaces

    def extract_type_aliases(self, content: str, language: Language) -> list[TypeAliasRecord]:
        if language != Language.TYPESCRIPT:
            return []
        aliases: list[TypeAliasRecord] = []
        for line_no, line in enumerate(content.split("\n"), start=1):
            trimmed = line.strip()
            m = _TYPE_ALIAS_RE.search(trimmed)
            if m:
                aliases.append(TypeAliasRecord(
                    name=m.group(1),
                    line=line_no,
                    definition=m.group(2).strip(),
                    is_exported="export" in trimmed,
                ))
        return aliases
