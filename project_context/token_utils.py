"""Token estimation used for every size decision in the pipeline."""

from __future__ import annotations

import math

CHARS_PER_TOKEN = 4


def estimate_tokens(text: str) -> int:
    """Estimate tokens as ``ceil(len(text) / 4)``.

    This is deliberately not a real tokenizer: every component that reports
    or compares sizes must agree on the same number.
    """
    if not text:
        return 0
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def fits_budget(text: str, max_tokens: int) -> bool:
    return estimate_tokens(text) <= max_tokens
