"""Whole-project insight report over every indexed file."""

from __future__ import annotations

from collections import Counter
from pathlib import PurePosixPath

from project_context.models import SourceFile

_PROJECT_PATTERNS: list[tuple[tuple[str, ...], str]] = [
    (("test", "spec"), "Testing Framework"),
    (("component",), "Component-Based Architecture"),
    (("service",), "Service Layer Pattern"),
    (("model",), "Model-Based Architecture"),
    (("controller",), "MVC Pattern"),
    (("util",), "Utility Functions"),
]

_LAYERS: list[tuple[str, tuple[str, ...]]] = [
    ("presentation", ("component", "view", "ui")),
    ("business", ("service", "business", "logic")),
    ("data", ("model", "data", "repository")),
    ("infrastructure", ("config", "util", "helper")),
]


def _is_test(f: SourceFile) -> bool:
    return "test" in f.relative_path or "spec" in f.relative_path


def analyze_languages(files: list[SourceFile]) -> dict[str, dict]:
    languages: dict[str, dict] = {}
    for f in files:
        entry = languages.setdefault(f.language.value, {
            "count": 0, "total_size": 0, "total_functions": 0, "total_classes": 0,
        })
        entry["count"] += 1
        entry["total_size"] += f.size
        entry["total_functions"] += len(f.functions)
        entry["total_classes"] += len(f.classes)
    return languages


def compute_complexity(files: list[SourceFile]) -> dict:
    total = len(files)
    functions = sum(len(f.functions) for f in files)
    classes = sum(len(f.classes) for f in files)
    lines = sum(f.line_count for f in files)
    per_file = max(total, 1)
    return {
        "files": total,
        "functions": functions,
        "classes": classes,
        "lines": lines,
        "average_functions_per_file": round(functions / per_file, 2),
        "average_classes_per_file": round(classes / per_file, 2),
        "average_lines_per_file": round(lines / per_file, 2),
    }


def compute_import_stats(files: list[SourceFile]) -> dict:
    counts = [len(f.imports) for f in files] or [0]
    return {
        "average_imports": round(sum(counts) / len(counts), 2),
        "max_imports": max(counts),
        "min_imports": min(counts),
        "total_imports": sum(counts),
    }


def detect_project_patterns(files: list[SourceFile]) -> list[str]:
    return [
        label for needles, label in _PROJECT_PATTERNS
        if any(needle in f.relative_path for f in files for needle in needles)
    ]


def classify_layers(files: list[SourceFile]) -> dict[str, list[str]]:
    """Assign each file to the first layer whose keyword appears in its path."""
    layers: dict[str, list[str]] = {name: [] for name, _ in _LAYERS}
    for f in files:
        path = f.relative_path.lower()
        for name, needles in _LAYERS:
            if any(needle in path for needle in needles):
                layers[name].append(f.relative_path)
                break
    return layers


def module_clusters(files: list[SourceFile]) -> list[dict]:
    """Directories holding more than one file."""
    groups: dict[str, list[str]] = {}
    for f in files:
        directory = str(PurePosixPath(f.relative_path).parent)
        groups.setdefault(directory, []).append(f.relative_path)
    return [
        {"name": "root" if directory == "." else directory, "files": members}
        for directory, members in groups.items()
        if len(members) > 1
    ]


def maintainability_score(files: list[SourceFile]) -> int:
    if not files:
        return 100
    avg_functions = sum(len(f.functions) for f in files) / len(files)
    avg_imports = sum(len(f.imports) for f in files) / len(files)

    score = 100
    if avg_functions > 20:
        score -= 20
    elif avg_functions > 10:
        score -= 10
    if avg_imports > 15:
        score -= 15
    elif avg_imports > 10:
        score -= 5
    if any(_is_test(f) for f in files):
        score += 10
    return max(0, min(100, score))


def estimate_test_coverage(files: list[SourceFile]) -> int:
    """Ratio of test files to non-test JS/TS files, as a percentage."""
    tests = [f for f in files if _is_test(f)]
    sources = [f for f in files if not _is_test(f) and f.language.is_primary]
    if not sources:
        return 0
    return min(100, round(len(tests) / len(sources) * 100))


def recommendations(files: list[SourceFile]) -> list[str]:
    recs: list[str] = []
    if maintainability_score(files) < 70:
        recs.append("Consider refactoring large files and reducing complexity")
    if estimate_test_coverage(files) < 50:
        recs.append("Increase test coverage for better code reliability")
    if compute_import_stats(files)["average_imports"] > 15:
        recs.append("Review dependencies to reduce coupling between modules")
    if not any("README" in f.relative_path or "doc" in f.relative_path for f in files):
        recs.append("Add documentation (README, API docs) for better maintainability")
    return recs


def project_summary(files: list[SourceFile]) -> str:
    if not files:
        return "This project contains no indexed files."
    counts = Counter(f.language.value for f in files)
    primary = counts.most_common(1)[0][0]
    patterns = detect_project_patterns(files)
    complexity = compute_complexity(files)
    return (
        f"This project contains {len(files)} files primarily written in {primary}. "
        f"It follows {', '.join(patterns) or 'no recognised'} architectural patterns. "
        f"The codebase has {complexity['functions']} functions and {complexity['classes']} classes "
        f"across {complexity['lines']} lines of code."
    )


def analyze_project(files: list[SourceFile]) -> dict:
    """Full insight report over every indexed file."""
    return {
        "summary": project_summary(files),
        "languages": analyze_languages(files),
        "architecture": {
            "layers": classify_layers(files),
            "clusters": module_clusters(files),
            "dependencies": compute_import_stats(files),
        },
        "patterns": detect_project_patterns(files),
        "metrics": {
            "complexity": compute_complexity(files),
            "maintainability": maintainability_score(files),
            "test_coverage": estimate_test_coverage(files),
        },
        "recommendations": recommendations(files),
    }
