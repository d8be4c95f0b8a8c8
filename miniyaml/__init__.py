"""
miniyaml: a parser for a small, block-style subset of YAML.

The package reads configuration text made of scalars, double-quoted strings,
indented mappings and dash-introduced sequences into a tree of plain
dataclasses, and resolves dotted paths against that tree.

The code is organised into several modules:

* ``lang`` – the lexer and the indentation-driven recursive descent parser.
* ``ast`` – ``Scalar``, ``Mapping``, ``Sequence`` and ``Document``.
* ``lookup`` – dotted path resolution.
* ``diagnostics`` – the bounded log holding the latest error messages.
* ``loader`` – reading sources from memory or disk.
* ``cli`` – the ``miniyaml`` command.

Anchors, aliases, flow collections, tags, block scalars, comments and
multi-document streams are not supported.
"""

from .ast import Document, Mapping, Node, Scalar, Sequence, free
from .config import ParserSettings, load_settings
from .diagnostics import NO_ERROR, DiagnosticLog, default_log, pop_error
from .errors import (
    YamlDuplicateKeyError,
    YamlError,
    YamlIndentationError,
    YamlLexicalError,
    YamlLookupError,
    YamlNestingError,
    YamlParseError,
    YamlSourceError,
    YamlSyntaxError,
)
from .lang import parse, parse_file
from .loader import SourceLocation
from .lookup import lookup

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "parse",
    "parse_file",
    "lookup",
    "free",
    "pop_error",
    "default_log",
    "Document",
    "Node",
    "Scalar",
    "Mapping",
    "Sequence",
    "SourceLocation",
    "DiagnosticLog",
    "NO_ERROR",
    "ParserSettings",
    "load_settings",
    "YamlError",
    "YamlParseError",
    "YamlSourceError",
    "YamlLexicalError",
    "YamlSyntaxError",
    "YamlIndentationError",
    "YamlDuplicateKeyError",
    "YamlNestingError",
    "YamlLookupError",
]
