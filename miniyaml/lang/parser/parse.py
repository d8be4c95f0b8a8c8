"""Indentation-driven recursive descent parser for miniyaml.

Grammar (informal)::

    Document  = [ Block ] END ;
    Block     = Mapping | Sequence ;
    Mapping   = Entry , { NEWLINE@same-indent , Entry } ;
    Entry     = SYMBOL , ":" , Value ;
    Sequence  = Item , { NEWLINE@same-indent , Item } ;
    Item      = "-" , Value ;
    Value     = Scalar                      (same line)
              | Entry , { Entry }           (after "-" only: inline mapping)
              | Item , { Item }             (after "-" only: inline sequence)
              | INDENT , Block              (deeper line)
              | Sequence                    (after a key: dashes at the key's column)
              | <empty> ;

A block's indentation is the column of its first token. Every following line
of the block must start at exactly that column; a shallower line closes the
block and hands control back to the enclosing one.
"""

from __future__ import annotations

import sys
from typing import Dict, Optional

from ...ast import Document, Mapping, Node, Scalar, Sequence
from ...config import ParserSettings
from ...diagnostics import DiagnosticLog, default_log
from ...errors import (
    YamlDuplicateKeyError,
    YamlError,
    YamlIndentationError,
    YamlNestingError,
    YamlSyntaxError,
    create_syntax_error,
)
from ...observability.logging import get_logger
from .lexer import SCALAR_TOKENS, STRUCTURAL_TOKENS, Lexer, Token, TokenType

logger = get_logger("miniyaml.parser")

QUOTE_HINT = "Quote values that contain spaces, colons or dashes"


class Parser:
    """
    Recursive descent parser producing a :class:`~miniyaml.ast.Document`.

    The parser pulls tokens from a :class:`Lexer` one at a time and never
    looks further than the lexer's single buffered token. Every failure is
    raised as a :class:`~miniyaml.errors.YamlParseError` and recorded in the
    diagnostic log.
    """

    def __init__(
        self,
        source: str,
        *,
        path: str = "",
        log: Optional[DiagnosticLog] = None,
        settings: Optional[ParserSettings] = None,
    ):
        """Initialize parser with source text."""
        self.source = source
        self.path = path
        self.settings = settings or ParserSettings()
        self.log = log if log is not None else default_log()
        self.lexer = Lexer(source, path=path, log=self.log)

        # Last consumed content token; lines are compared against it
        self._last: Optional[Token] = None
        # Last structural token skipped, used to word indentation errors
        self._structural: Optional[Token] = None

    # ====================================================================
    # Token Management
    # ====================================================================

    def peek(self) -> Token:
        """Peek at the next token, raising on lexical errors."""
        token = self.lexer.peek()
        if token.type is TokenType.ERROR:
            raise self.lexer.failure
        return token

    def advance(self) -> Token:
        """Consume and return the next token."""
        token = self.lexer.next()
        if token.type is TokenType.ERROR:
            raise self.lexer.failure
        if token.type not in STRUCTURAL_TOKENS:
            self._last = token
            self._structural = None
        return token

    def peek_content(self) -> Token:
        """Skip INDENT/UNDENT tokens and peek at the next content token.

        Structural tokens carry the same depth as the column of the content
        token that follows them, so once skipped the depth is read back from
        that token.
        """
        token = self.peek()
        while token.type in STRUCTURAL_TOKENS:
            self._structural = self.lexer.next()
            token = self.peek()
        return token

    def starts_line(self, token: Token) -> bool:
        """True when ``token`` is the first token on its line."""
        return self._last is None or token.line > self._last.line

    def error(
        self,
        message: str,
        token: Optional[Token] = None,
        *,
        expected: Optional[list] = None,
        suggestion: Optional[str] = None,
        code: str = "SYNTAX_ERROR",
    ) -> YamlSyntaxError:
        """Create a syntax error at ``token`` (or the current token)."""
        token = token or self.lexer.peek()
        return create_syntax_error(
            message,
            path=self.path or None,
            line=token.line,
            column=token.column,
            expected=expected,
            found=token.describe(),
            suggestion=suggestion,
            code=code,
        )

    # ====================================================================
    # High-Level Parsing
    # ====================================================================

    def parse(self) -> Document:
        """Parse the whole source into a document."""
        logger.debug("parsing %s (%d characters)", self.path or "<memory>", len(self.source))
        try:
            root = self._parse_document()
        except RecursionError as exc:
            # max_depth set above what the interpreter stack can hold
            error = self._nesting_error(
                f"Nesting too deep (exceeds the interpreter recursion limit of {sys.getrecursionlimit()})",
                line=self.lexer.line,
                column=self.lexer.column,
            )
            self._record_failure(error)
            raise error from exc
        except YamlError as exc:
            self._record_failure(exc)
            raise
        logger.debug("parsed %s", self.path or "<memory>")
        return Document(root=root, path=self.path)

    def _record_failure(self, error: YamlError) -> None:
        if error is not self.lexer.failure:
            self.log.push(error)
        logger.info("parse of %s failed: %s", self.path or "<memory>", error.message)

    def _parse_document(self) -> Node:
        token = self.peek_content()
        if token.type is TokenType.END:
            return Mapping(line=token.line)

        root = self.parse_block(token.offset, depth=1)

        token = self.peek_content()
        if token.type is not TokenType.END:
            raise self._indentation_error(token, expected=None)
        return root

    def parse_block(self, indent: int, depth: int) -> Node:
        """
        Parse a mapping or sequence whose lines start at column ``indent``.

        Grammar:
            Block = Mapping | Sequence ;
        """
        token = self.peek_content()
        if token.type is TokenType.DASH:
            return self.parse_sequence(indent, depth)
        return self.parse_mapping(indent, depth)

    def parse_mapping(self, indent: int, depth: int, first_key: Optional[Token] = None) -> Mapping:
        """
        Parse ``key: value`` entries sharing one indentation.

        ``first_key`` is passed when the caller already consumed the first
        key while deciding what an inline value was.
        """
        self._check_depth(depth)
        mapping = Mapping()
        key_lines: Dict[str, int] = {}

        while True:
            key = first_key if first_key is not None else self.advance()
            first_key = None
            if mapping.line is None:
                mapping.line = key.line

            if key.type is TokenType.DASH:
                raise self.error(
                    "Sequence item found inside a mapping",
                    key,
                    expected=["key"],
                    suggestion="Indent the list under a key, or turn the whole block into a list",
                )
            if key.type is not TokenType.SYMBOL:
                raise self.error("Expected a mapping key", key, expected=["key"])

            self._expect_colon(key)

            if key.value in key_lines:
                raise YamlDuplicateKeyError(
                    message=f"Duplicate key '{key.value}'",
                    path=self.path or None,
                    line=key.line,
                    column=key.column,
                    key=key.value,
                    first_line=key_lines[key.value],
                )
            key_lines[key.value] = key.line
            mapping.add(key.value, self.parse_value(key, depth))

            if not self._continues_block(indent):
                return mapping

    def parse_sequence(self, indent: int, depth: int, *, compact: bool = False) -> Sequence:
        """
        Parse dash items sharing one indentation.

        A ``compact`` sequence sits at the same column as the key that owns
        it and ends at the first line of that column that is not an item.
        """
        self._check_depth(depth)
        sequence = Sequence()

        while True:
            dash = self.advance()
            if sequence.line is None:
                sequence.line = dash.line
            if dash.type is not TokenType.DASH:
                raise self.error(
                    "Mapping key found inside a sequence",
                    dash,
                    expected=["'-'"],
                    suggestion="Every line of a list must start with '-'",
                )
            sequence.append(self.parse_value(dash, depth))

            if not self._continues_block(indent):
                return sequence
            if compact and self.peek_content().type is not TokenType.DASH:
                return sequence

    def parse_value(self, owner: Token, depth: int) -> Node:
        """
        Parse the value following a key's colon or a sequence dash.

        Grammar:
            Value = Scalar | InlineBlock | INDENT , Block | CompactSequence | <empty> ;
        """
        token = self.peek_content()
        owned_by_dash = owner.type is TokenType.DASH

        if token.type is not TokenType.END and token.line == owner.line:
            if token.type is TokenType.DASH:
                if not owned_by_dash:
                    raise self.error(
                        "A list cannot start on the same line as its key",
                        token,
                        suggestion=f"Move the list to the next line, or {QUOTE_HINT.lower()}",
                    )
                return self.parse_sequence(token.offset, depth + 1)

            if token.type not in SCALAR_TOKENS:
                raise self.error("Expected a value", token, expected=["value", "end of line"])

            value = self.advance()
            following = self.peek()
            if following.type is TokenType.COLON and following.line == value.line:
                if value.type is TokenType.SYMBOL and owned_by_dash:
                    return self.parse_mapping(value.offset, depth + 1, first_key=value)
                raise self.error(
                    "Nested mapping must start on a new line",
                    following,
                    suggestion=f"Indent the nested keys on the next line, or {QUOTE_HINT.lower()}",
                )
            return Scalar(value.value, line=value.line)

        # Nothing else on the owner's line
        if token.type is TokenType.END:
            return Scalar("", line=owner.line)

        if token.offset > owner.offset:
            return self.parse_block(token.offset, depth + 1)

        if token.offset == owner.offset and token.type is TokenType.DASH and not owned_by_dash:
            return self.parse_sequence(token.offset, depth + 1, compact=True)

        return Scalar("", line=owner.line)

    # ====================================================================
    # Helpers
    # ====================================================================

    def _expect_colon(self, key: Token) -> None:
        token = self.peek()
        if token.type is not TokenType.COLON or token.line != key.line:
            raise self.error(
                f"Expected ':' after key '{key.value}'",
                token,
                expected=["':'"],
                suggestion=QUOTE_HINT if token.line == key.line else None,
                code="MISSING_COLON",
            )
        self.advance()

    def _continues_block(self, indent: int) -> bool:
        """Decide whether the next line belongs to the block at ``indent``."""
        token = self.peek_content()
        if token.type is TokenType.END:
            return False
        if not self.starts_line(token):
            raise self.error(
                "Unexpected token after value",
                token,
                expected=["end of line"],
                suggestion=QUOTE_HINT,
            )
        if token.offset == indent:
            return True
        if token.offset < indent:
            return False
        raise self._indentation_error(token, expected=indent)

    def _indentation_error(self, token: Token, expected: Optional[int]) -> YamlIndentationError:
        undent = self._structural is not None and self._structural.type is TokenType.UNDENT
        if undent or expected is None:
            message = "Indentation does not match any enclosing level"
            suggestion = "Align the line with one of the enclosing blocks"
        else:
            message = "Unexpected indentation"
            suggestion = "Nested blocks may only follow a key or '-' with nothing after it"
        return YamlIndentationError(
            message=message,
            path=self.path or None,
            line=token.line,
            column=token.column,
            found=token.describe(),
            suggestion=suggestion,
            expected_indent=expected,
            found_indent=token.offset,
        )

    def _check_depth(self, depth: int) -> None:
        if depth > self.settings.max_depth:
            token = self.lexer.peek()
            raise self._nesting_error(
                f"Nesting too deep (maximum depth is {self.settings.max_depth})",
                line=token.line,
                column=token.column,
            )

    def _nesting_error(self, message: str, *, line: int, column: int) -> YamlNestingError:
        return YamlNestingError(
            message=message,
            path=self.path or None,
            line=line,
            column=column,
            max_depth=self.settings.max_depth,
        )


__all__ = ["Parser"]
