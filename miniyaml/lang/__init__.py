"""miniyaml language helpers."""

from .parser import Lexer, Parser, Token, TokenType, parse, parse_file, tokenize

__all__ = [
    "Lexer",
    "Parser",
    "Token",
    "TokenType",
    "parse",
    "parse_file",
    "tokenize",
]
