"""--debug token stream dump to stderr."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import TextIO

from unlongify.errors import ScanError
from unlongify.scanner import Scanner
from unlongify.tokens import Token, TokenType

_LABELS = {
    TokenType.CODE: "Code",
    TokenType.COMMENT: "Comment",
    TokenType.STRING: "String",
}

_PREVIEW_LEN = 10


def describe(tok: Token) -> str:
    """One-line summary of a token, text truncated after a few characters."""
    if tok.type == TokenType.EOF:
        return "EOF"
    label = _LABELS[tok.type]
    pos = f"{tok.span.start.line}:{tok.span.start.column}"
    if len(tok.text) > _PREVIEW_LEN:
        return f"{pos} {label}: {tok.text[:_PREVIEW_LEN]!r}..."
    return f"{pos} {label}: {tok.text!r}"


def dump_tokens(tokens: Iterable[Token], *, file: TextIO = sys.stderr) -> None:
    """Print one line per token to *file*."""
    for tok in tokens:
        file.write(describe(tok) + "\n")


def dump_scan(source: str, filename: str = "<input>", *, file: TextIO = sys.stderr) -> None:
    """Scan source and dump its tokens, ending with the scan error if there is one.

    Tokens emitted before the error are still printed, which is what shows
    where an unterminated comment or string begins.
    """
    file.write(f"tokens: {filename}\n")
    try:
        dump_tokens(Scanner(source, filename).scan(), file=file)
    except ScanError as exc:
        file.write(f"{exc.position.line}:{exc.position.column} error: {exc.message}\n")
