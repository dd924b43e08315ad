"""Query-driven relevance ranking of indexed files."""

from __future__ import annotations

import logging

from project_context.models import SourceFile

logger = logging.getLogger(__name__)

MAX_RANKED_FILES = 20
FALLBACK_FILES = 10

# Score weights per keyword
_PATH_WEIGHT = 10
_FUNCTION_WEIGHT = 8
_CLASS_WEIGHT = 8
_CONTENT_CAP = 5
_IMPORT_WEIGHT = 5


def extract_keywords(query: str) -> list[str]:
    """Lowercase whitespace tokens longer than two characters."""
    return [word for word in query.lower().split() if len(word) > 2]


def _names_match(file: SourceFile, keyword: str) -> bool:
    return (
        keyword in file.relative_path.lower()
        or any(keyword in fn.name.lower() for fn in file.functions)
        or any(keyword in cls.name.lower() for cls in file.classes)
    )


def _content_matches(file: SourceFile, keyword: str) -> bool:
    return (
        keyword in file.content.lower()
        or any(keyword in imp.path.lower() for imp in file.imports)
    )


def is_relevant(file: SourceFile, keywords: list[str]) -> bool:
    """True if any keyword hits a name branch or a content branch.

    With no keywords both branches are vacuously true, so every candidate
    is relevant.
    """
    if not keywords:
        return True
    name_branch = any(_names_match(file, kw) for kw in keywords)
    content_branch = any(_content_matches(file, kw) for kw in keywords)
    return name_branch or content_branch


def relevance_score(file: SourceFile, keywords: list[str]) -> int:
    score = 0
    path = file.relative_path.lower()
    content = file.content.lower()

    for keyword in keywords:
        if keyword in path:
            score += _PATH_WEIGHT
        if any(keyword in fn.name.lower() for fn in file.functions):
            score += _FUNCTION_WEIGHT
        if any(keyword in cls.name.lower() for cls in file.classes):
            score += _CLASS_WEIGHT
        score += min(content.count(keyword), _CONTENT_CAP)
        if any(keyword in imp.path.lower() for imp in file.imports):
            score += _IMPORT_WEIGHT

    return score


def _fallback_files(files: list[SourceFile], limit: int) -> list[SourceFile]:
    selected = [
        f for f in files
        if f.language.is_primary
        and (
            "index" in f.relative_path.lower()
            or "main" in f.relative_path.lower()
            or f.functions
            or f.classes
        )
    ]
    return selected[:limit]


def rank_files(
    files: list[SourceFile],
    query: str,
    scope: str | None = None,
    max_files: int = MAX_RANKED_FILES,
    fallback_limit: int = FALLBACK_FILES,
) -> list[SourceFile]:
    """Select and order the files most relevant to *query*.

    Only TypeScript/JavaScript files are candidates. When nothing matches,
    falls back to entry-point-looking files. The scope filter runs after
    selection; ``function`` and ``class`` are the only scopes that filter.
    """
    keywords = extract_keywords(query)
    logger.info("Searching for keywords: %s", ", ".join(keywords))

    selected = [f for f in files if f.language.is_primary and is_relevant(f, keywords)]

    if not selected:
        logger.info("No specific matches found, including main files")
        selected = _fallback_files(files, fallback_limit)

    if scope == "function":
        selected = [f for f in selected if f.functions]
    elif scope == "class":
        selected = [f for f in selected if f.classes]

    # sorted() is stable, so ties keep index order
    ranked = sorted(selected, key=lambda f: relevance_score(f, keywords), reverse=True)
    logger.info("Selected %d relevant files", min(len(ranked), max_files))
    return ranked[:max_files]
