"""Tests for token estimation."""

import math

import pytest

from project_context.token_utils import estimate_tokens, fits_budget


def test_empty_string_is_zero():
    assert estimate_tokens("") == 0


@pytest.mark.parametrize("text", ["a", "abcd", "abcde", "x" * 401, "héllo wörld", "line\n" * 17])
def test_ceil_of_quarter_length(text):
    assert estimate_tokens(text) == math.ceil(len(text) / 4)


def test_fits_budget():
    assert fits_budget("abcd", 1)
    assert not fits_budget("abcde", 1)
    assert fits_budget("", 0)
