"""Shared test fixtures and helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from unlongify.scanner import tokenize
from unlongify.tokens import Token, TokenType


@pytest.fixture
def scan():
    """Return a helper that scans source and returns tokens (excluding EOF)."""

    def _scan(source: str) -> list[Token]:
        tokens = tokenize(source)
        # Strip trailing EOF for convenience
        return [t for t in tokens if t.type != TokenType.EOF]

    return _scan


@pytest.fixture
def make_tree(tmp_path: Path):
    """Return a helper that writes {relative path: text} under tmp_path."""

    def _make(files: dict[str, str]) -> Path:
        for rel, text in files.items():
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text)
        return tmp_path

    return _make


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_texts(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token texts match the expected list."""
    actual = [t.text for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"
