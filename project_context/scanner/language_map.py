"""Shared extension-to-language mapping for the scanner and the file lister."""

from __future__ import annotations

from pathlib import Path

from project_context.models import Language

EXT_TO_LANGUAGE: dict[str, Language] = {
    ".ts": Language.TYPESCRIPT,
    ".tsx": Language.TYPESCRIPT,
    ".js": Language.JAVASCRIPT,
    ".jsx": Language.JAVASCRIPT,
    ".mjs": Language.JAVASCRIPT,
    ".cjs": Language.JAVASCRIPT,
    ".py": Language.PYTHON,
}

# Fence tags for rendered file contents; unmapped languages get no tag
FENCE_LANGUAGE: dict[Language, str] = {
    Language.TYPESCRIPT: "typescript",
    Language.JAVASCRIPT: "javascript",
    Language.PYTHON: "python",
}


def detect_language(path: Path | str) -> Language:
    return EXT_TO_LANGUAGE.get(Path(path).suffix.lower(), Language.OTHER)
