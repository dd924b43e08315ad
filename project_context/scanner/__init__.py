"""Scanner registry, file lister and per-file fact extraction."""

from __future__ import annotations

import fnmatch
import logging
import os
from datetime import datetime
from pathlib import Path

from project_context.errors import ProjectRootError
from project_context.models import ContextConfig, FileFacts, Language, SourceFile
from project_context.scanner.base import BaseScanner
from project_context.scanner.js_scanner import JsScanner
from project_context.scanner.language_map import EXT_TO_LANGUAGE, FENCE_LANGUAGE, detect_language
from project_context.scanner.python_scanner import PythonScanner

logger = logging.getLogger(__name__)

_js = JsScanner()

_SCANNERS: dict[Language, BaseScanner] = {
    Language.TYPESCRIPT: _js,
    Language.JAVASCRIPT: _js,
    Language.PYTHON: PythonScanner(),
}


def extract_facts(content: str, language: Language) -> FileFacts:
    """Extract facts from file text. Languages without a scanner get no facts."""
    scanner = _SCANNERS.get(language)
    if scanner is None:
        return FileFacts()
    return scanner.extract(content, language)


def should_skip(path: Path, skip_dirs: list[str]) -> bool:
    for part in path.parts:
        for pattern in skip_dirs:
            if fnmatch.fnmatch(part, pattern):
                return True
    return False


def list_source_files(root: Path, config: ContextConfig | None = None) -> list[Path]:
    """Recursively list indexable files under *root* in sorted order.

    Raises ProjectRootError if *root* cannot be listed.
    """
    config = config or ContextConfig()
    if not root.is_dir():
        raise ProjectRootError(f"Not a readable directory: {root}", str(root))
    try:
        os.listdir(root)
    except OSError as e:
        raise ProjectRootError(f"Cannot read directory {root}: {e}", str(root)) from e

    extensions = {ext.lower() for ext in config.extensions}
    files: list[Path] = []
    for path in sorted(root.rglob("*")):
        rel = path.relative_to(root)
        if should_skip(rel, config.skip_dirs):
            continue
        if path.suffix.lower() in extensions and path.is_file():
            files.append(path)
    return files


def read_source_file(path: Path, root: Path) -> SourceFile:
    """Stat, read and scan one file.

    Never raises: any read or stat failure (including a file that vanished
    since it was listed) yields an empty-fact record tagged ``other``.
    """
    try:
        relative_path = path.relative_to(root).as_posix()
    except ValueError:
        relative_path = path.as_posix()

    try:
        stat = path.stat()
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Error analyzing file %s: %s", path, e)
        return SourceFile.empty(path, relative_path)

    language = detect_language(path)
    facts = extract_facts(content, language)
    logger.debug(
        "Scanned %s: %d imports, %d functions, %d classes",
        relative_path, len(facts.imports), len(facts.functions), len(facts.classes),
    )
    return SourceFile.from_facts(
        path=path,
        relative_path=relative_path,
        content=content,
        size=stat.st_size,
        last_modified=datetime.fromtimestamp(stat.st_mtime),
        language=language,
        facts=facts,
    )


__all__ = [
    "BaseScanner",
    "JsScanner",
    "PythonScanner",
    "EXT_TO_LANGUAGE",
    "FENCE_LANGUAGE",
    "detect_language",
    "extract_facts",
    "list_source_files",
    "read_source_file",
    "should_skip",
]
