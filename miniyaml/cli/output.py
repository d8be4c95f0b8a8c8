"""
Output formatting for CLI operations.

Documents are rendered either as a rich tree for people or as JSON for
other programs.
"""

import json
from typing import Any

from rich.markup import escape
from rich.tree import Tree

from ..ast import Mapping, Node, Scalar, Sequence


def node_to_json(node: Node) -> str:
    """Serialize ``node`` as indented JSON (scalars become JSON strings)."""
    return json.dumps(node.to_python(), indent=2, ensure_ascii=False)


def format_node(node: Node) -> str:
    """Plain-text form used by ``miniyaml get``: raw text for scalars, JSON otherwise."""
    if isinstance(node, Scalar):
        return node.text
    return node_to_json(node)


def build_tree(node: Node, label: str) -> Tree:
    """
    Build a rich Tree mirroring the document structure.

    Scalar entries are shown inline as ``key: value``; mappings and
    sequences become branches. Sequence items are labelled by index.
    """
    tree = Tree(f"[bold blue]{escape(label)}[/bold blue]")
    _add_children(tree, node)
    return tree


def _describe_scalar(scalar: Scalar) -> str:
    if scalar.text == "":
        return "[dim](empty)[/dim]"
    return f"[green]{escape(scalar.text)}[/green]"


def _add_entry(branch: Tree, label: str, value: Node) -> None:
    if isinstance(value, Scalar):
        branch.add(f"{label}: {_describe_scalar(value)}")
        return
    kind = f"[dim]({value.kind}, {len(value)})[/dim]"
    _add_children(branch.add(f"{label} {kind}"), value)


def _add_children(branch: Tree, node: Any) -> None:
    if isinstance(node, Mapping):
        for key, value in node.items():
            _add_entry(branch, f"[bold]{escape(key)}[/bold]", value)
    elif isinstance(node, Sequence):
        for index, item in enumerate(node):
            _add_entry(branch, f"[cyan]{escape(f'[{index}]')}[/cyan]", item)
    elif isinstance(node, Scalar):
        branch.add(_describe_scalar(node))


__all__ = ["build_tree", "format_node", "node_to_json"]
