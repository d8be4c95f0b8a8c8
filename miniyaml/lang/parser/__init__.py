"""miniyaml parser package.

Public API:
    parse(source, length, location) -> Document
    parse_file(path) -> Document
    Parser - The recursive descent parser class
    Lexer, Token, TokenType - The tokenizer

Error types:
    YamlParseError and its subclasses from :mod:`miniyaml.errors`
"""

from os import PathLike
from typing import Optional, Union

from ...ast import Document
from ...config import ParserSettings
from ...diagnostics import DiagnosticLog
from ...loader import SourceInput, SourceLocation, read_source
from .lexer import Lexer, Token, TokenType, tokenize
from .parse import Parser


def parse(
    source: SourceInput,
    length: Optional[int] = None,
    location: SourceLocation = SourceLocation.MEMORY,
    *,
    path: Optional[str] = None,
    log: Optional[DiagnosticLog] = None,
    settings: Optional[ParserSettings] = None,
) -> Document:
    """
    Parse miniyaml source into a Document.

    Args:
        source: Source text (``str``/``bytes``) or, for ``SourceLocation.DISK``,
            a file path
        length: Only use the first ``length`` characters of ``source``
        location: Whether ``source`` is the text itself or a path to read
        path: Name reported in errors for in-memory sources
        log: Diagnostic log receiving failure messages (process default if omitted)
        settings: Parser limits; defaults apply when omitted

    Returns:
        The parsed Document

    Raises:
        YamlSourceError: If the source cannot be read or is empty
        YamlLexicalError: On unterminated strings, invalid symbols or
            unrecognized characters
        YamlSyntaxError: On grammar, indentation, duplicate key or nesting errors

    Example:
        ```python
        doc = parse("server:\\n  port: 8080\\n")
        doc.lookup("server.port").text  # "8080"
        ```
    """
    settings = settings or ParserSettings()
    loaded = read_source(source, length, location, encoding=settings.encoding, log=log)
    parser = Parser(loaded.text, path=loaded.path or path or "", log=log, settings=settings)
    return parser.parse()


def parse_file(
    path: Union[str, PathLike],
    *,
    log: Optional[DiagnosticLog] = None,
    settings: Optional[ParserSettings] = None,
) -> Document:
    """Read and parse the file at ``path``."""
    return parse(path, location=SourceLocation.DISK, log=log, settings=settings)


__all__ = [
    "parse",
    "parse_file",
    "Parser",
    "Lexer",
    "Token",
    "TokenType",
    "tokenize",
]
