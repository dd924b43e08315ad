"""Python scanner: import statements only, matched at line starts."""

from __future__ import annotations

import re

from project_context.models import ImportRecord, Language
from project_context.scanner.base import BaseScanner

# Not continuation-aware: a parenthesised multi-line import yields "(" as a name
_IMPORT_RE = re.compile(r"^(?:from\s+(\S+)\s+)?import\s+(.+)$", re.MULTILINE)


class PythonScanner(BaseScanner):
    languages = (Language.PYTHON,)

    def extract_imports(self, content: str) -> list[ImportRecord]:
        imports: list[ImportRecord] = []
        for m in _IMPORT_RE.finditer(content):
            from_path, imported = m.group(1), m.group(2)
            names = [name.strip() for name in imported.split(",")]
            path = from_path or imported.split(",")[0]
            imports.append(ImportRecord(path=path.strip(), names=names, is_default=False))
        return imports
