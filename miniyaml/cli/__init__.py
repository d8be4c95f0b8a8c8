"""
miniyaml CLI entry point.

Subcommands:
    check FILE...      Parse each file and report success or the first error
    get FILE PATH      Print the node at a dotted path
    dump FILE          Show the whole document as a tree (or JSON)
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from .. import __version__
from ..config import ParserSettings, load_settings
from ..errors import YamlError, YamlLookupError, YamlParseError
from ..lang import parse_file
from ..lookup import lookup
from ..observability.logging import configure_logging, get_logger
from .output import build_tree, format_node, node_to_json

console = Console()
error_console = Console(stderr=True)

logger = get_logger("miniyaml.cli")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def _resolve_settings(args: argparse.Namespace) -> ParserSettings:
    config_path = Path(args.config).resolve() if args.config else None
    settings = load_settings(Path.cwd(), config_path)
    return settings.with_overrides(max_depth=args.max_depth)


def _report_error(prefix: str, error: YamlError) -> None:
    error_console.print(f"[red]{escape(prefix)}[/red]: {escape(str(error))}", highlight=False, soft_wrap=True)


def cmd_check(args: argparse.Namespace, settings: ParserSettings) -> int:
    """Parse every file; exit non-zero if any of them fails."""
    failures = 0
    log = settings.create_log()
    for name in args.files:
        try:
            parse_file(name, log=log, settings=settings)
        except YamlParseError as exc:
            failures += 1
            console.print(f"[red]✗[/red] {escape(name)}: {escape(str(exc))}", highlight=False, soft_wrap=True)
            continue
        console.print(f"[green]✓[/green] {escape(name)}: ok", highlight=False, soft_wrap=True)

    logger.debug("checked %d file(s), %d failed", len(args.files), failures)
    return EXIT_FAILURE if failures else EXIT_OK


def cmd_get(args: argparse.Namespace, settings: ParserSettings) -> int:
    """Print the node found at ``args.path``."""
    try:
        document = parse_file(args.file, log=settings.create_log(), settings=settings)
    except YamlParseError as exc:
        _report_error("parse error", exc)
        return EXIT_FAILURE

    try:
        node = lookup(document, args.path)
    except YamlLookupError as exc:
        _report_error("lookup error", exc)
        return EXIT_FAILURE

    print(node_to_json(node) if args.json else format_node(node))
    return EXIT_OK


def cmd_dump(args: argparse.Namespace, settings: ParserSettings) -> int:
    """Render the whole document."""
    try:
        document = parse_file(args.file, log=settings.create_log(), settings=settings)
    except YamlParseError as exc:
        _report_error("parse error", exc)
        return EXIT_FAILURE

    if args.json:
        print(node_to_json(document.root))
    else:
        console.print(build_tree(document.root, args.file))
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="miniyaml",
        description="Parse and query block-style YAML configuration files",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warn", "warning", "error"],
        help="Logging verbosity (defaults to $MINIYAML_LOG_LEVEL or 'warning')",
    )
    parser.add_argument("--config", help="Settings file (defaults to miniyaml.toml or pyproject.toml)")
    parser.add_argument("--max-depth", type=int, help="Maximum nesting depth accepted by the parser")

    subparsers = parser.add_subparsers(dest="command", metavar="command")

    check_parser = subparsers.add_parser("check", help="Validate one or more files")
    check_parser.add_argument("files", nargs="+", help="Files to parse")
    check_parser.set_defaults(func=cmd_check)

    get_parser = subparsers.add_parser("get", help="Print the value at a dotted path")
    get_parser.add_argument("file", help="File to parse")
    get_parser.add_argument("path", help="Dotted path, e.g. server.hosts.0")
    get_parser.add_argument("--json", action="store_true", help="Always print JSON, even for scalars")
    get_parser.set_defaults(func=cmd_get)

    dump_parser = subparsers.add_parser("dump", help="Show a parsed document")
    dump_parser.add_argument("file", help="File to parse")
    dump_parser.add_argument("--json", action="store_true", help="Print JSON instead of a tree")
    dump_parser.set_defaults(func=cmd_dump)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entrypoint with subcommand support.

    Args:
        argv: Command-line arguments (None uses sys.argv[1:])

    Returns:
        Process exit code

    Examples:
        >>> main(['check', 'settings.yaml'])  # doctest: +SKIP
        >>> main(['get', 'settings.yaml', 'server.port'])  # doctest: +SKIP
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    args = parser.parse_args(argv)

    if not getattr(args, "func", None):
        parser.print_help()
        return EXIT_USAGE

    configure_logging(args.log_level)

    try:
        settings = _resolve_settings(args)
    except (OSError, ValueError) as exc:
        error_console.print(f"[red]configuration error[/red]: {escape(str(exc))}", highlight=False, soft_wrap=True)
        return EXIT_USAGE

    return args.func(args, settings)


__all__ = ["build_parser", "main"]
