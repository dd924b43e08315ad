"""Shared fixtures: the sample project and an in-memory file factory."""

import shutil
from datetime import datetime
from pathlib import Path

import pytest

from project_context.models import Language, SourceFile
from project_context.scanner import detect_language, extract_facts

FIXTURES = Path(__file__).parent / "fixtures"
SAMPLE_PROJECT = FIXTURES / "sample_project"


@pytest.fixture
def sample_root() -> Path:
    return SAMPLE_PROJECT


@pytest.fixture
def sample_copy(tmp_path) -> Path:
    """Writable copy of the sample project."""
    dest = tmp_path / "sample_project"
    shutil.copytree(SAMPLE_PROJECT, dest)
    return dest


def build_file(relative_path: str, content: str, language: Language | None = None) -> SourceFile:
    language = language or detect_language(relative_path)
    return SourceFile.from_facts(
        path=Path("/project") / relative_path,
        relative_path=relative_path,
        content=content,
        size=len(content.encode("utf-8")),
        last_modified=datetime(2024, 1, 1),
        language=language,
        facts=extract_facts(content, language),
    )


@pytest.fixture
def make_file():
    return build_file
