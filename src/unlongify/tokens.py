"""Token types and data structures produced by the scanner."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    CODE = auto()  # anything outside comments and string literals
    COMMENT = auto()  # // line comment (with its newline) or /* block */
    STRING = auto()  # "..." including both quotes

    EOF = auto()


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based character offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Token:
    """A classified run of source text, delimiters included."""

    type: TokenType
    text: str
    span: Span
