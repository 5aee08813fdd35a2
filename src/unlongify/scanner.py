"""C source scanner — splits text into code, comment, and string runs."""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum, auto

from unlongify.errors import ScanError
from unlongify.tokens import Position, Span, Token, TokenType

_BLOCK_COMMENT_START = "/*"
_BLOCK_COMMENT_END = "*/"
_LINE_COMMENT_START = "//"
_QUOTE = '"'
_ESCAPE = "\\"


class _State(Enum):
    CODE = auto()
    LINE_COMMENT = auto()
    BLOCK_COMMENT = auto()
    STRING = auto()


class Scanner:
    """Partition C/C++ source into a lossless stream of Token objects.

    Only comments and string literals are recognized; everything else is
    code. Concatenating the text of every emitted token gives back the
    source unchanged.

    A Scanner is single use: ``scan()`` may be called once.
    """

    def __init__(self, source: str, filename: str = "<input>") -> None:
        self._source = source
        self._filename = filename
        self._pos = 0
        self._line = 1
        self._col = 1
        self._start = Position(1, 1, 0)  # start of the pending span
        self._state: _State | None = _State.CODE
        self._consumed = False

    def scan(self) -> Iterator[Token]:
        """Return a lazy iterator over the tokens, ending with EOF.

        Raises ScanError during iteration on an unterminated block comment
        or string literal.
        """
        if self._consumed:
            raise RuntimeError("scanner already consumed; create a new Scanner")
        self._consumed = True
        return self._run()

    def _run(self) -> Iterator[Token]:
        while self._state is not None:
            if self._state == _State.CODE:
                yield from self._lex_code()
            elif self._state == _State.LINE_COMMENT:
                yield self._lex_line_comment()
            elif self._state == _State.BLOCK_COMMENT:
                yield self._lex_block_comment()
            elif self._state == _State.STRING:
                yield self._lex_string()

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _current_pos(self) -> Position:
        return Position(self._line, self._col, self._pos)

    def _at(self, prefix: str) -> bool:
        return self._source.startswith(prefix, self._pos)

    def _at_end(self) -> bool:
        return self._pos >= len(self._source)

    def _advance(self) -> str:
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        return ch

    def _emit(self, tt: TokenType) -> Token:
        end = self._current_pos()
        tok = Token(tt, self._source[self._start.offset : self._pos], Span(self._start, end))
        self._start = end
        return tok

    def _error(self, message: str, pos: Position) -> ScanError:
        return ScanError(message, pos, self._source, self._filename)

    # ------------------------------------------------------------------
    # Code
    # ------------------------------------------------------------------

    def _lex_code(self) -> Iterator[Token]:
        while not self._at_end():
            if self._at(_BLOCK_COMMENT_START):
                next_state = _State.BLOCK_COMMENT
            elif self._at(_LINE_COMMENT_START):
                next_state = _State.LINE_COMMENT
            elif self._at(_QUOTE):
                next_state = _State.STRING
            else:
                self._advance()
                continue

            if self._pos > self._start.offset:
                yield self._emit(TokenType.CODE)
            self._state = next_state
            return

        # Correctly reached end of input
        if self._pos > self._start.offset:
            yield self._emit(TokenType.CODE)
        yield self._emit(TokenType.EOF)
        self._state = None

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def _lex_line_comment(self) -> Token:
        for _ in _LINE_COMMENT_START:
            self._advance()
        while not self._at_end():
            if self._advance() == "\n":
                break
        self._state = _State.CODE
        return self._emit(TokenType.COMMENT)

    def _lex_block_comment(self) -> Token:
        start = self._start
        for _ in _BLOCK_COMMENT_START:
            self._advance()
        while not self._at(_BLOCK_COMMENT_END):
            if self._at_end():
                raise self._error("unterminated block comment", start)
            self._advance()
        for _ in _BLOCK_COMMENT_END:
            self._advance()
        self._state = _State.CODE
        return self._emit(TokenType.COMMENT)

    # ------------------------------------------------------------------
    # String literals
    # ------------------------------------------------------------------

    def _lex_string(self) -> Token:
        start = self._start
        self._advance()  # opening quote
        while True:
            if self._at_end():
                raise self._error("unterminated string literal", start)
            if self._at(_QUOTE):
                break
            # Not a real escape decoder: one character after a backslash is
            # skipped so that \" does not end the literal.
            if self._advance() == _ESCAPE and not self._at_end():
                self._advance()
        self._advance()  # closing quote
        self._state = _State.CODE
        return self._emit(TokenType.STRING)


def tokenize(source: str, filename: str = "<input>") -> list[Token]:
    """Convenience function: scan source text and return the token list."""
    return list(Scanner(source, filename).scan())
