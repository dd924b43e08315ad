"""Folder tree rendering for a project root."""

from __future__ import annotations

import fnmatch
import logging
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

EXCLUDE_PATTERNS: list[str] = [
    "node_modules", ".next", ".nuxt", "dist", "build", "target", "out",
    ".venv", "venv", "__pycache__", ".pytest_cache", "vendor", "composer.lock",
    ".gradle", "gradle",
    ".vscode", ".idea", ".vs", ".vscode-test",
    ".git", ".svn", ".hg",
    ".cache", ".tmp", "tmp", "temp", ".temp", "coverage", ".nyc_output",
    ".DS_Store", "Thumbs.db", "desktop.ini",
    "logs", "*.log", "npm-debug.log*", "yarn-debug.log*", "yarn-error.log*",
]

MAX_DEPTH = 10


@dataclass
class TreeNode:
    name: str
    is_dir: bool
    size: int | None = None
    children: list[TreeNode] = field(default_factory=list)


def format_file_size(size: int) -> str:
    if size == 0:
        return "0 B"
    units = ["B", "KB", "MB", "GB"]
    i = 0
    while i < len(units) - 1 and size >= 1024 ** (i + 1):
        i += 1
    value = round(size / 1024 ** i, 1)
    return f"{value:g} {units[i]}"


def _excluded(name: str, patterns: list[str]) -> bool:
    return any(fnmatch.fnmatch(name, pattern) for pattern in patterns)


def build_tree(path: Path, patterns: list[str] | None = None, depth: int = 0) -> TreeNode | None:
    """Directories first, then files, each group sorted by name."""
    patterns = EXCLUDE_PATTERNS if patterns is None else patterns
    if depth > MAX_DEPTH or _excluded(path.name, patterns):
        return None

    try:
        if path.is_symlink() or path.is_file():
            return TreeNode(name=path.name, is_dir=False, size=path.lstat().st_size)
    except OSError as e:
        logger.warning("Cannot access %s: %s", path, e)
        return TreeNode(name=f"{path.name} (access denied)", is_dir=False)

    node = TreeNode(name=path.name, is_dir=True)
    try:
        entries = list(path.iterdir())
    except OSError as e:
        logger.warning("Cannot read directory %s: %s", path, e)
        node.children.append(TreeNode(name="(Access denied or path not found)", is_dir=False))
        return node

    for entry in entries:
        child = build_tree(entry, patterns, depth + 1)
        if child is not None:
            node.children.append(child)
    node.children.sort(key=lambda c: (not c.is_dir, c.name))
    return node


def _render(node: TreeNode, prefix: str, is_last: bool, lines: list[str]) -> None:
    connector = "└── " if is_last else "├── "
    icon = "📁" if node.is_dir else "📄"
    size = f" ({format_file_size(node.size)})" if not node.is_dir and node.size else ""
    lines.append(f"{prefix}{connector}{icon} {node.name}{size}")

    child_prefix = prefix + ("    " if is_last else "│   ")
    for i, child in enumerate(node.children):
        _render(child, child_prefix, i == len(node.children) - 1, lines)


def generate_folder_tree(project_root: Path | str, patterns: list[str] | None = None) -> str:
    """Render *project_root* as a box-drawing tree; never raises."""
    root = Path(project_root)
    try:
        if not root.exists():
            return f"📁 {root.name}\n└── 📄 (Directory not found: {root})"
        tree = build_tree(root, patterns)
    except OSError as e:
        logger.warning("Cannot render tree for %s: %s", root, e)
        return f"📁 {root.name}\n└── 📄 (Access denied or path not found)"
    if tree is None:
        return f"📁 {root.name}\n└── 📄 (No accessible files found)"

    lines: list[str] = []
    _render(tree, "", True, lines)
    return "\n".join(lines)
