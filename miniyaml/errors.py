"""Unified error model for miniyaml.

Every error renders as one headline, ``File: .. | Line l:c | [CODE] message``,
optionally followed by indented detail lines. Subclasses only add details:

- expected vs. found tokens and a suggestion for syntax errors
- expected vs. found indentation for indentation errors
- the first occurrence of a duplicated key
- the failing path and resolved prefix for lookups
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass
class YamlError(Exception):
    """Base class for all miniyaml errors."""

    message: str
    path: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None
    code: str = "YAML_ERROR"

    def headline(self) -> str:
        """Location and coded message on a single line."""
        parts = []
        if self.path:
            parts.append(f"File: {self.path}")
        if self.line is not None:
            parts.append(f"Line {self.line}" if self.column is None else f"Line {self.line}:{self.column}")
        parts.append(f"[{self.code}] {self.message}")
        return " | ".join(parts)

    def details(self) -> List[str]:
        return []

    def __str__(self) -> str:
        details = self.details()
        if not details:
            return self.headline()
        return self.headline() + "\n  " + "\n  ".join(details)


@dataclass
class YamlParseError(YamlError):
    """Raised when a source cannot be turned into a document."""

    code: str = "PARSE_ERROR"


@dataclass
class YamlSourceError(YamlParseError):
    """The source buffer could not be obtained.

    Codes: ``FILE_NOT_FOUND``, ``OPEN_ERROR``, ``EMPTY_SOURCE``, ``READ_ERROR``.
    """

    code: str = "READ_ERROR"


@dataclass
class YamlLexicalError(YamlParseError):
    """Invalid character sequence found while tokenizing."""

    code: str = "LEXICAL_ERROR"


@dataclass
class YamlSyntaxError(YamlParseError):
    """Grammar error with the expected and found tokens."""

    expected: List[str] = field(default_factory=list)
    found: Optional[str] = None
    suggestion: Optional[str] = None
    code: str = "SYNTAX_ERROR"

    def _suggestion(self) -> List[str]:
        return [f"Suggestion: {self.suggestion}"] if self.suggestion else []

    def details(self) -> List[str]:
        lines = []
        if len(self.expected) == 1:
            lines.append(f"Expected: {self.expected[0]}")
        elif self.expected:
            lines.append(f"Expected one of: {', '.join(self.expected)}")
        if self.found:
            lines.append(f"Found: {self.found}")
        return lines + self._suggestion()


def _indentation(width: int) -> str:
    return f"{width} whitespace character{'' if width == 1 else 's'}"


@dataclass
class YamlIndentationError(YamlSyntaxError):
    """A line starts at a column no open block accepts.

    Widths count leading characters; a tab is one, like a space.
    """

    expected_indent: Optional[int] = None
    found_indent: Optional[int] = None
    code: str = "INDENTATION_ERROR"

    def details(self) -> List[str]:
        lines = []
        if self.expected_indent is not None:
            lines.append(f"Expected indentation: {_indentation(self.expected_indent)}")
        if self.found_indent is not None:
            lines.append(f"Found indentation: {_indentation(self.found_indent)}")
        return lines + self._suggestion()


@dataclass
class YamlDuplicateKeyError(YamlSyntaxError):
    """The same key appears twice in one mapping."""

    key: Optional[str] = None
    first_line: Optional[int] = None
    code: str = "DUPLICATE_KEY"

    def details(self) -> List[str]:
        if self.first_line is None:
            return []
        return [f"'{self.key}' first defined at line {self.first_line}"]


@dataclass
class YamlNestingError(YamlSyntaxError):
    """Nesting exceeds the configured maximum depth or the interpreter stack."""

    max_depth: Optional[int] = None
    code: str = "NESTING_TOO_DEEP"


@dataclass
class YamlLookupError(YamlError, LookupError):
    """A path could not be resolved against a document."""

    lookup_path: Optional[str] = None
    segment: Optional[Union[str, int]] = None
    position: Optional[int] = None
    resolved: Optional[str] = None
    code: str = "LOOKUP_ERROR"

    def headline(self) -> str:
        base = super().headline()
        if self.lookup_path is None:
            return base
        return f"{base} (path '{self.lookup_path}', at '{self.resolved or '<root>'}')"


@dataclass
class YamlKeyNotFoundError(YamlLookupError):
    code: str = "KEY_NOT_FOUND"


@dataclass
class YamlNotAMappingError(YamlLookupError):
    code: str = "NOT_A_MAPPING"


@dataclass
class YamlIndexOutOfRangeError(YamlLookupError):
    code: str = "INDEX_OUT_OF_RANGE"


@dataclass
class YamlNotASequenceError(YamlLookupError):
    code: str = "NOT_A_SEQUENCE"


@dataclass
class YamlInvalidPathError(YamlLookupError):
    code: str = "INVALID_PATH"


@dataclass
class YamlReleasedDocumentError(YamlLookupError):
    code: str = "DOCUMENT_RELEASED"


def create_syntax_error(
    message: str,
    *,
    path: Optional[str] = None,
    line: Optional[int] = None,
    column: Optional[int] = None,
    expected: Optional[List[str]] = None,
    found: Optional[str] = None,
    suggestion: Optional[str] = None,
    code: str = "SYNTAX_ERROR",
) -> YamlSyntaxError:
    """Create a syntax error with context."""
    return YamlSyntaxError(
        message=message,
        path=path,
        line=line,
        column=column,
        expected=expected or [],
        found=found,
        suggestion=suggestion,
        code=code,
    )


def create_source_error(message: str, *, path: Optional[str] = None, code: str) -> YamlSourceError:
    """Create a source error for a failed read."""
    return YamlSourceError(message=message, path=path, code=code)


__all__ = [
    "YamlError",
    "YamlParseError",
    "YamlSourceError",
    "YamlLexicalError",
    "YamlSyntaxError",
    "YamlIndentationError",
    "YamlDuplicateKeyError",
    "YamlNestingError",
    "YamlLookupError",
    "YamlKeyNotFoundError",
    "YamlNotAMappingError",
    "YamlIndexOutOfRangeError",
    "YamlNotASequenceError",
    "YamlInvalidPathError",
    "YamlReleasedDocumentError",
    "create_syntax_error",
    "create_source_error",
]
