"""Lexical analyzer (tokenizer) for miniyaml.

Converts source text into a stream of tokens for parsing. The lexer is pull
based: the parser calls :meth:`Lexer.next` and may look one token ahead with
:meth:`Lexer.peek`.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, List, Optional

from ...diagnostics import DiagnosticLog, default_log
from ...errors import YamlLexicalError


class TokenType(Enum):
    """Token types for miniyaml."""

    STRING = auto()
    SYMBOL = auto()
    COLON = auto()
    DASH = auto()
    INDENT = auto()
    UNDENT = auto()
    END = auto()
    ERROR = auto()


STRUCTURAL_TOKENS = frozenset({TokenType.INDENT, TokenType.UNDENT})
SCALAR_TOKENS = frozenset({TokenType.STRING, TokenType.SYMBOL})

# Characters that end a bare symbol
SYMBOL_TERMINATORS = frozenset(' \t\r\n:"-')
INDENT_CHARS = (' ', '\t')
INLINE_WHITESPACE = (' ', '\t', '\r')


@dataclass(frozen=True)
class Token:
    """A single token with position information.

    ``line`` and ``column`` are 1-based and point at the first character of
    the token. ``depth`` is the new indentation level for INDENT/UNDENT.
    """

    type: TokenType
    value: str
    line: int
    column: int
    depth: int = 0

    @property
    def offset(self) -> int:
        """Zero-based column, comparable with indentation depths."""
        return self.column - 1

    def describe(self) -> str:
        if self.type in SCALAR_TOKENS:
            return f"{self.type.name.lower()} '{self.value}'"
        if self.type is TokenType.COLON:
            return "':'"
        if self.type is TokenType.DASH:
            return "'-'"
        if self.type is TokenType.END:
            return "end of input"
        return self.type.name.lower()

    def __repr__(self) -> str:
        if self.type in STRUCTURAL_TOKENS:
            return f"Token({self.type.name}({self.depth}), {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"


class Lexer:
    """Tokenizer for miniyaml source text."""

    def __init__(self, source: str, *, path: str = "", log: Optional[DiagnosticLog] = None):
        """Initialize lexer with source code."""
        self.source = source
        self.path = path
        self.log = log if log is not None else default_log()
        self.pos = 0
        self.line = 1
        self.column = 1

        # Indentation of the most recent non-blank line
        self.indent_level = 0
        self.at_line_start = True

        self.failure: Optional[YamlLexicalError] = None
        self._peeked: Optional[Token] = None
        self._final: Optional[Token] = None

    # ------------------------------------------------------------------
    # Token stream
    # ------------------------------------------------------------------

    def next(self) -> Token:
        """Consume and return the next token."""
        if self._peeked is not None:
            token, self._peeked = self._peeked, None
            return token
        return self._lex()

    def peek(self) -> Token:
        """Return the next token without consuming it."""
        if self._peeked is None:
            self._peeked = self._lex()
        return self._peeked

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next()
            yield token
            if token.type in (TokenType.END, TokenType.ERROR):
                return

    # ------------------------------------------------------------------
    # Character helpers
    # ------------------------------------------------------------------

    def _char(self, offset: int = 0) -> Optional[str]:
        """Peek at character without consuming."""
        pos = self.pos + offset
        if pos < len(self.source):
            return self.source[pos]
        return None

    def _advance(self) -> Optional[str]:
        """Consume and return current character."""
        if self.pos >= len(self.source):
            return None

        char = self.source[self.pos]
        self.pos += 1

        if char == '\n':
            self.line += 1
            self.column = 1
            self.at_line_start = True
        else:
            self.column += 1

        return char

    def _token(self, token_type: TokenType, value: str, line: int, column: int, depth: int = 0) -> Token:
        return Token(type=token_type, value=value, line=line, column=column, depth=depth)

    def _error(self, message: str, code: str, line: int, column: int) -> Token:
        """Record a lexical error and return the ERROR token that reports it."""
        self.failure = YamlLexicalError(
            message=message,
            path=self.path or None,
            line=line,
            column=column,
            code=code,
        )
        self.log.push(self.failure)
        self._final = self._token(TokenType.ERROR, message, line, column)
        return self._final

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def _lex(self) -> Token:
        if self._final is not None:
            return self._final

        while True:
            if self.at_line_start:
                self.at_line_start = False
                token = self._measure_indentation()
                if token is not None:
                    return token

            char = self._char()
            if char is None:
                self._final = self._token(TokenType.END, "", self.line, self.column)
                return self._final

            if char == '\n':
                self._advance()
                continue

            if char in INLINE_WHITESPACE:
                self._advance()
                continue

            line, column = self.line, self.column

            if char == '"':
                return self._read_string()

            if char == '-':
                self._advance()
                return self._token(TokenType.DASH, '-', line, column)

            if char == ':':
                self._advance()
                return self._token(TokenType.COLON, ':', line, column)

            if char.isalnum() or char == '_':
                return self._read_symbol()

            return self._error("Unrecognized token", "UNRECOGNIZED_TOKEN", line, column)

    def _measure_indentation(self) -> Optional[Token]:
        """Measure leading whitespace and emit INDENT/UNDENT when the level changes."""
        run = 0
        while self._char(run) in INDENT_CHARS:
            run += 1

        following = self._char(run)
        if following in ('\n', '\r', None):
            # Blank or whitespace-only line: skip it without touching the level.
            # A bare '\r' is only skipped here if the rest of the line is empty.
            rest = run
            while self._char(rest) in INLINE_WHITESPACE:
                rest += 1
            if self._char(rest) in ('\n', None):
                for _ in range(rest):
                    self._advance()
                return None

        for _ in range(run):
            self._advance()

        previous, self.indent_level = self.indent_level, run
        if run > previous:
            return self._token(TokenType.INDENT, "", self.line, self.column, depth=run)
        if run < previous:
            return self._token(TokenType.UNDENT, "", self.line, self.column, depth=run)
        return None

    def _read_symbol(self) -> Token:
        """Read a bare symbol up to whitespace, colon, quote or dash."""
        line, column = self.line, self.column
        start = self.pos
        while self._char() is not None and self._char() not in SYMBOL_TERMINATORS:
            self._advance()

        if self._char() == '"':
            return self._error("Invalid symbol", "INVALID_SYMBOL", self.line, self.column)

        return self._token(TokenType.SYMBOL, self.source[start:self.pos], line, column)

    def _read_string(self) -> Token:
        """Read a double-quoted string; ``\\"`` does not close it."""
        line, column = self.line, self.column
        self._advance()  # opening quote
        start = self.pos

        while True:
            char = self._char()
            if char is None or char == '\n':
                return self._error("Unterminated string", "UNTERMINATED_STRING", line, column)
            if char == '"' and self.source[self.pos - 1] != '\\':
                break
            self._advance()

        raw = self.source[start:self.pos]
        self._advance()  # closing quote
        return self._token(TokenType.STRING, raw.replace('\\"', '"'), line, column)


def tokenize(source: str, path: str = "", log: Optional[DiagnosticLog] = None) -> List[Token]:
    """Tokenize miniyaml source, up to and including END or the first ERROR."""
    return list(Lexer(source, path=path, log=log))


__all__ = ["Token", "TokenType", "Lexer", "tokenize", "SCALAR_TOKENS", "STRUCTURAL_TOKENS"]
