"""Completeness scoring of a finished context document against a query.

The score is a weighted average of five text heuristics. None of them
parse the document; they look for fences, headings and keywords.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field

from project_context.models import ValidationResult

logger = logging.getLogger(__name__)

_CODE_BLOCK_RE = re.compile(r"```.*?```", re.DOTALL)
_HEADER_RE = re.compile(r"^##? ", re.MULTILINE)

_FULL_CODE_BLOCKS = 5
_COMPLETE_THRESHOLD = 0.8
_MAX_MISSING = 3


def _round2(value: float) -> float:
    """Round half up to two decimals."""
    return math.floor(value * 100 + 0.5) / 100


def count_code_blocks(text: str) -> int:
    return len(_CODE_BLOCK_RE.findall(text))


@dataclass
class QueryAnalysis:
    type: str = "general"
    entities: list[str] = field(default_factory=list)
    scope: str = "feature"
    requires_implementation: bool = False
    requires_tests: bool = False
    requires_documentation: bool = False
    requires_dependencies: bool = True
    keywords: list[str] = field(default_factory=list)


def analyze_query(query: str) -> QueryAnalysis:
    """Classify the query by keyword sniffing and pull out likely entities."""
    lower = query.lower()
    words = query.split()
    analysis = QueryAnalysis(keywords=[w for w in words if len(w) > 2])

    if "function" in lower or "method" in lower:
        analysis.type = "function"
    elif "class" in lower or "object" in lower:
        analysis.type = "class"
    elif "module" in lower or "file" in lower:
        analysis.type = "module"
    elif "feature" in lower or "component" in lower:
        analysis.type = "feature"

    analysis.requires_implementation = any(w in lower for w in ("implement", "code", "how"))
    analysis.requires_tests = "test" in lower or "spec" in lower
    analysis.requires_documentation = "document" in lower or "readme" in lower

    # Capitalised words of length > 2, or anything dotted
    analysis.entities = [
        w for w in words
        if (len(w) > 2 and w[:1].isupper() and w[:1].isascii()) or "." in w
    ]
    return analysis


@dataclass
class CheckResult:
    """Outcome of a single heuristic."""
    weight: float
    score: float = 0.0
    missing_elements: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    strengths: list[str] = field(default_factory=list)


class ContextValidator:
    """Scores a document with five weighted heuristics (weights sum to 1.0)."""

    def validate(self, document: str, query: str) -> ValidationResult:
        analysis = analyze_query(query)
        checks = [
            self.check_code(document, analysis),
            self.check_dependencies(document, analysis),
            self.check_structure(document, analysis),
            self.check_coherence(document, analysis),
            self.check_usage_examples(document, analysis),
        ]

        result = ValidationResult()
        total_score = 0.0
        total_weight = 0.0
        for check in checks:
            total_score += check.score * check.weight
            total_weight += check.weight
            result.missing_elements.extend(check.missing_elements)
            result.suggestions.extend(check.suggestions)
            result.warnings.extend(check.warnings)
            result.strengths.extend(check.strengths)

        result.completeness_score = _round2(total_score / total_weight) if total_weight > 0 else 0.0
        result.confidence_score = self.confidence(result.completeness_score, document)
        # Counted before de-duplication
        result.is_complete = (
            result.completeness_score >= _COMPLETE_THRESHOLD
            and len(result.missing_elements) < _MAX_MISSING
        )

        result.missing_elements = list(dict.fromkeys(result.missing_elements))
        result.suggestions = list(dict.fromkeys(result.suggestions))
        result.warnings = list(dict.fromkeys(result.warnings))
        result.strengths = list(dict.fromkeys(result.strengths))

        logger.debug(
            "Validated document (%d chars): score=%.2f confidence=%.2f complete=%s",
            len(document), result.completeness_score, result.confidence_score, result.is_complete,
        )
        return result

    @staticmethod
    def check_code(document: str, query: QueryAnalysis) -> CheckResult:
        check = CheckResult(weight=0.3)

        blocks = count_code_blocks(document)
        if blocks == 0:
            check.missing_elements.append("No code implementations found")
            check.suggestions.append("Include actual code implementations")
            check.score = 0.1
        else:
            check.strengths.append(f"Contains {blocks} code blocks")
            check.score = min(1.0, blocks / _FULL_CODE_BLOCKS)

        if "import" in document or "from" in document:
            check.strengths.append("Dependencies and imports are included")
            check.score += 0.2
        else:
            check.missing_elements.append("Missing import statements")

        if "export" in document:
            check.strengths.append("Export statements included")
            check.score += 0.1

        if "interface" in document or "type" in document:
            check.strengths.append("Type definitions included")
            check.score += 0.1

        if query.type == "function" and "function" not in document:
            check.warnings.append("Query asks about functions but few function definitions found")
        if query.type == "class" and "class" not in document:
            check.warnings.append("Query asks about classes but few class definitions found")

        check.score = min(1.0, check.score)
        return check

    @staticmethod
    def check_dependencies(document: str, query: QueryAnalysis) -> CheckResult:
        check = CheckResult(weight=0.25)

        if "Dependencies" in document or "imports" in document:
            check.strengths.append("Dependency information included")
            check.score += 0.4
        else:
            check.missing_elements.append("Missing dependency information")
            check.suggestions.append("Include dependency relationships and import statements")

        if "Dependency" in document and "Graph" in document:
            check.strengths.append("Dependency graph visualization included")
            check.score += 0.3

        if "Usage" in document or "Pattern" in document:
            check.strengths.append("Usage patterns documented")
            check.score += 0.3

        check.score = min(1.0, check.score)
        return check

    @staticmethod
    def check_structure(document: str, query: QueryAnalysis) -> CheckResult:
        check = CheckResult(weight=0.2)

        if len(_HEADER_RE.findall(document)) >= 3:
            check.strengths.append("Well-structured with multiple sections")
            check.score += 0.3
        else:
            check.suggestions.append("Add more structural sections for clarity")

        if "File Contents" in document or "Components" in document:
            check.strengths.append("File organization included")
            check.score += 0.3

        if "Summary" in document or "Overview" in document:
            check.strengths.append("Contains summary/overview section")
            check.score += 0.2
        else:
            check.missing_elements.append("Missing project summary")

        if "Insights" in document or "Analysis" in document:
            check.strengths.append("Includes analysis and insights")
            check.score += 0.2

        check.score = min(1.0, check.score)
        return check

    @staticmethod
    def check_coherence(document: str, query: QueryAnalysis) -> CheckResult:
        check = CheckResult(weight=0.15)
        lower = document.lower()

        matched = [k for k in query.keywords if k.lower() in lower]
        ratio = len(matched) / max(len(query.keywords), 1)
        check.score = ratio

        if ratio >= 0.7:
            check.strengths.append("High coherence between query and context")
        elif ratio >= 0.4:
            check.strengths.append("Good coherence between query and context")
        else:
            check.warnings.append("Low coherence between query and provided context")
            check.suggestions.append("Ensure context directly addresses the query")

        entities = [e for e in query.entities if e.lower() in lower]
        if entities:
            check.strengths.append(f"Found {len(entities)} requested entities")
            check.score += 0.2

        check.score = min(1.0, check.score)
        return check

    @staticmethod
    def check_usage_examples(document: str, query: QueryAnalysis) -> CheckResult:
        check = CheckResult(weight=0.1)

        if "example" in document or "Example" in document:
            check.strengths.append("Contains usage examples")
            check.score += 0.5

        if query.requires_tests:
            if "test" in document or "spec" in document:
                check.strengths.append("Test cases included")
                check.score += 0.3
            else:
                check.missing_elements.append("Missing test cases")
                check.suggestions.append("Include relevant test files")

        if query.requires_documentation:
            if "README" in document or "doc" in document:
                check.strengths.append("Documentation included")
                check.score += 0.2
            else:
                check.missing_elements.append("Missing documentation")

        check.score = min(1.0, check.score)
        return check

    @staticmethod
    def confidence(completeness_score: float, document: str) -> float:
        confidence = completeness_score
        if len(document) < 1000:
            confidence *= 0.7
        elif len(document) > 10000:
            confidence = min(1.0, confidence * 1.1)

        if count_code_blocks(document) >= 3:
            confidence = min(1.0, confidence * 1.05)
        return _round2(confidence)


_validator = ContextValidator()


def validate_completeness(document: str, query: str) -> ValidationResult:
    """Score *document* against *query*; never raises on ordinary text."""
    return _validator.validate(document, query)
