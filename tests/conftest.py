"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _read_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


@pytest.fixture
def related_html() -> str:
    return _read_fixture("related.html")


@pytest.fixture
def related_path() -> Path:
    return FIXTURES_DIR / "related.html"
