"""Rewriter — routes scanned tokens through the rule tables."""

from __future__ import annotations

from unlongify.errors import ScanError
from unlongify.rules import CODE_RULES, STRING_RULES, apply_rules
from unlongify.scanner import Scanner
from unlongify.tokens import Position, Token, TokenType

# Byte-exact round trip for sources that are not valid UTF-8
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


def rewrite(source: str, filename: str = "<input>") -> str:
    """Return source with ``long`` declarations and ``%l`` specifiers narrowed.

    Comments pass through untouched. Raises ScanError if the source has an
    unterminated block comment or string literal; nothing is returned in
    that case.
    """
    parts: list[str] = []
    for tok in Scanner(source, filename).scan():
        if tok.type == TokenType.CODE:
            _check_no_nul(tok, source, filename)
            parts.append(apply_rules(tok.text, CODE_RULES))
        elif tok.type == TokenType.STRING:
            parts.append(apply_rules(tok.text, STRING_RULES))
        elif tok.type == TokenType.COMMENT:
            parts.append(tok.text)
    return "".join(parts)


def decode_source(data: bytes) -> str:
    """Decode file contents so that encoding back gives the same bytes."""
    return data.decode(_ENCODING, _ERRORS)


def encode_source(text: str) -> bytes:
    return text.encode(_ENCODING, _ERRORS)


def rewrite_bytes(data: bytes, filename: str = "<input>") -> bytes:
    """Byte-level rewrite of a whole file's contents."""
    return encode_source(rewrite(decode_source(data), filename))


def _check_no_nul(tok: Token, source: str, filename: str) -> None:
    # The code rules use NUL-delimited sentinels
    idx = tok.text.find("\0")
    if idx < 0:
        return
    offset = tok.span.start.offset + idx
    line = source.count("\n", 0, offset) + 1
    column = offset - source.rfind("\n", 0, offset)
    raise ScanError("NUL character in source", Position(line, column, offset), source, filename)
