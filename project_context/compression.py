"""Budget-driven, lossy compression of a rendered context document.

Compression is an ordered list of line-filtering stages. Stages run in
order while the document is over budget; the last stage is a best-effort
pass and its result is returned even if it still does not fit.
"""

from __future__ import annotations

import abc
import logging
from dataclasses import dataclass, field

from project_context.formatter.document import CONTENTS_HEADING
from project_context.token_utils import estimate_tokens, fits_budget

logger = logging.getLogger(__name__)

_SECTION_SEP = "\n## "
_FILE_SEP = "### "
_FENCE = "```"

_MODERATE_PREFIXES = ("export", "import", "function", "class", "interface", "type", "const", "//")
_MODERATE_MARKERS = ("TODO", "FIXME")

_AGGRESSIVE_CODE_PREFIXES = (
    "export", "import", "function", "class", "interface", "type", "const", "let", "var",
)
_AGGRESSIVE_TEXT_PREFIXES = ("#", "**", "- ", "*")
_AGGRESSIVE_TEXT_MARKERS = ("Summary", "Insights")


class CompressionStage(abc.ABC):
    """A pure text transform that never makes the document larger."""

    name: str

    @abc.abstractmethod
    def transform(self, text: str) -> str:
        """Return the filtered text."""

    def apply(self, text: str) -> str:
        result = self.transform(text)
        # Separators added while reassembling may outweigh what was dropped
        return result if len(result) <= len(text) else text


class ModerateStage(CompressionStage):
    """Keep only signature-like lines inside the file-contents section."""

    name = "moderate"

    def transform(self, text: str) -> str:
        sections = text.split(_SECTION_SEP)
        parts: list[str] = []
        for i, section in enumerate(sections):
            if i == 0:
                parts.append(section)
            elif section.startswith(CONTENTS_HEADING):
                parts.append("## " + self._compress_contents(section))
            else:
                parts.append("## " + section)
        return "\n".join(parts)

    def _compress_contents(self, section: str) -> str:
        heading = section.split("\n", 1)[0]
        blocks = section.split(_FILE_SEP)[1:]
        compressed = [_FILE_SEP + self._compress_block(block) for block in blocks]
        return heading + "\n\n" + "\n\n---\n\n".join(compressed)

    @staticmethod
    def _compress_block(block: str) -> str:
        lines = block.split("\n")
        filename, body = lines[0], lines[1:]
        kept = [line for line in body if _keep_moderate(line)]
        return "\n".join([filename, *kept])


def _keep_moderate(line: str) -> bool:
    trimmed = line.strip()
    return (
        trimmed.startswith(_MODERATE_PREFIXES)
        or any(marker in trimmed for marker in _MODERATE_MARKERS)
        or line.startswith(_FENCE)
    )


class AggressiveStage(CompressionStage):
    """Fence-aware filter over the whole document."""

    name = "aggressive"

    def transform(self, text: str) -> str:
        kept: list[str] = []
        in_fence = False
        for line in text.split("\n"):
            if line.startswith(_FENCE):
                kept.append(line)
                in_fence = not in_fence
            elif in_fence:
                if _keep_code_line(line):
                    kept.append(line)
            elif _keep_text_line(line):
                kept.append(line)
        return "\n".join(kept)


def _keep_code_line(line: str) -> bool:
    trimmed = line.strip()
    return (
        trimmed.startswith(_AGGRESSIVE_CODE_PREFIXES)
        or "//" in trimmed
        or "/*" in trimmed
        or trimmed == ""
        or line.startswith("#")
    )


def _keep_text_line(line: str) -> bool:
    return (
        line.startswith(_AGGRESSIVE_TEXT_PREFIXES)
        or line.strip() == ""
        or any(marker in line for marker in _AGGRESSIVE_TEXT_MARKERS)
    )


DEFAULT_STAGES: tuple[CompressionStage, ...] = (ModerateStage(), AggressiveStage())


@dataclass
class CompressionOutcome:
    text: str
    stages_applied: list[str] = field(default_factory=list)

    @property
    def compressed(self) -> bool:
        return bool(self.stages_applied)

    @property
    def level(self) -> str:
        return "compressed" if self.stages_applied else "full"

    @property
    def token_estimate(self) -> int:
        return estimate_tokens(self.text)


def compress(
    document: str,
    max_tokens: int,
    stages: tuple[CompressionStage, ...] = DEFAULT_STAGES,
) -> CompressionOutcome:
    """Apply *stages* in order until the document fits *max_tokens*."""
    outcome = CompressionOutcome(text=document)
    for stage in stages:
        if fits_budget(outcome.text, max_tokens):
            break
        logger.info(
            "Context too large (%d tokens > %d), applying %s compression",
            estimate_tokens(outcome.text), max_tokens, stage.name,
        )
        outcome.text = stage.apply(outcome.text)
        outcome.stages_applied.append(stage.name)

    if not fits_budget(outcome.text, max_tokens):
        logger.info(
            "Context still over budget after compression: %d tokens", estimate_tokens(outcome.text)
        )
    return outcome
