"""Normalization and validation of user-supplied project roots."""

from __future__ import annotations

import logging
import os
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import unquote

logger = logging.getLogger(__name__)

COMMON_SOURCE_DIRS = ["src", "lib", "app", "components", "pages", "api"]

SOURCE_EXTENSIONS = (
    ".ts", ".js", ".jsx", ".tsx", ".py", ".java", ".go", ".php", ".rb", ".rs", ".cpp", ".cs",
)

PROJECT_INDICATORS = [
    "package.json", "go.mod", "pom.xml", "build.gradle", "composer.json",
    "requirements.txt", "Pipfile", "Cargo.toml", "tsconfig.json", "pyproject.toml",
]

_WINDOWS_DRIVE_RE = re.compile(r"^/([a-zA-Z]):/")
_PROBLEM_CHARS_RE = re.compile(r'[<>"|?*]')


@dataclass
class NormalizedPath:
    normalized_path: str
    original_path: str
    was_normalized: bool = False
    issues: list[str] = field(default_factory=list)


@dataclass
class RootValidation:
    valid: bool
    normalized_path: str
    message: str = ""
    issues: list[str] = field(default_factory=list)


def normalize_project_path(raw_path: str) -> NormalizedPath:
    """Decode, strip ``file://`` and make *raw_path* absolute.

    Every rewrite is recorded in ``issues``; nothing here touches the disk.
    """
    result = NormalizedPath(normalized_path=raw_path, original_path=raw_path)
    path = raw_path

    if "%" in path:
        decoded = unquote(path)
        if decoded != path:
            result.issues.append(f"URL encoded path detected and decoded: {path} -> {decoded}")
            path = decoded
            result.was_normalized = True

    if path.startswith("file://"):
        path = path[len("file://"):]
        result.was_normalized = True
        result.issues.append("Removed file:// protocol from path")

    if sys.platform == "win32" and _WINDOWS_DRIVE_RE.match(path):
        path = _WINDOWS_DRIVE_RE.sub(r"\1:\\", path)
        result.was_normalized = True
        result.issues.append(f"Fixed URL-decoded Windows drive path: {raw_path} -> {path}")

    if not os.path.isabs(path):
        path = os.path.abspath(path)
        result.was_normalized = True
        result.issues.append(f"Converted relative path to absolute: {raw_path} -> {path}")

    resolved = os.path.normpath(path)
    if resolved != path:
        path = resolved
        result.was_normalized = True
        result.issues.append("Normalized path structure")

    problem = _PROBLEM_CHARS_RE.findall(path)
    if problem:
        result.issues.append(
            f"Path contains special characters that may cause issues: {', '.join(problem)}"
        )

    result.normalized_path = path
    return result


def _source_files_in(directory: Path) -> list[str]:
    return sorted(
        entry.name for entry in directory.iterdir()
        if entry.is_file() and not entry.is_symlink() and entry.name.endswith(SOURCE_EXTENSIONS)
    )


def validate_project_root(raw_path: str) -> RootValidation:
    """Check that *raw_path* names a readable directory that looks like a project.

    Never raises. A root passes if it has a project indicator file, or
    source files at its top level or in one of the common source dirs.
    """
    info = normalize_project_path(raw_path)
    if info.issues:
        logger.info("Path normalization for %s: %s", raw_path, "; ".join(info.issues))

    root = Path(info.normalized_path)

    def fail(message: str) -> RootValidation:
        return RootValidation(
            valid=False,
            normalized_path=info.normalized_path,
            message=f"{message}\nNormalized path: {info.normalized_path}",
            issues=info.issues,
        )

    try:
        if not root.exists():
            return fail(f"Project directory not found: {raw_path}")
        if not root.is_dir():
            return fail(f"Path is not a directory: {raw_path}")

        root_files = _source_files_in(root)
        nested: list[str] = []
        for name in COMMON_SOURCE_DIRS:
            sub = root / name
            if not sub.is_dir():
                continue
            try:
                nested.extend(f"{name}/{f}" for f in _source_files_in(sub))
            except OSError as e:
                logger.warning("Could not read %s directory: %s", sub, e)
        indicators = [i for i in PROJECT_INDICATORS if (root / i).exists()]
    except OSError as e:
        return fail(f"Cannot read directory: {raw_path}\nError: {e}")

    if indicators:
        logger.debug("Found project indicators: %s", ", ".join(indicators))
        return RootValidation(valid=True, normalized_path=info.normalized_path, issues=info.issues)

    if not root_files and not nested:
        return fail(
            f"No source files found in directory: {raw_path}\n"
            f"Checked:\n"
            f"- Root directory: 0 files\n"
            f"- Common source dirs ({', '.join(COMMON_SOURCE_DIRS)}): 0 files\n"
            f"- Project indicators: none"
        )

    logger.debug("Found %d source files under %s", len(root_files) + len(nested), root)
    return RootValidation(valid=True, normalized_path=info.normalized_path, issues=info.issues)
