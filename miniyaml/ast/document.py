"""Parsed document container."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence, Union

from .nodes import Node

PathLike = Union[str, Sequence[Union[str, int]]]


@dataclass
class Document:
    """Root of a parsed source, owning exactly one top-level node."""

    root: Optional[Node]
    path: str = field(default="", compare=False)
    released: bool = field(default=False, compare=False)

    def lookup(self, path: PathLike) -> Node:
        """Resolve ``path`` against this document (see :func:`miniyaml.lookup.lookup`)."""
        from ..lookup import lookup

        return lookup(self, path)

    def get(self, path: PathLike, default: Any = None) -> Any:
        """Like :meth:`lookup` but returns ``default`` when the path does not resolve."""
        from ..errors import YamlLookupError

        try:
            return self.lookup(path)
        except YamlLookupError:
            return default

    def to_python(self) -> Any:
        if self.root is None:
            return None
        return self.root.to_python()

    def release(self) -> None:
        """Drop the tree. Later lookups fail; releasing twice is harmless."""
        self.root = None
        self.released = True


def free(document: Document) -> None:
    """Release every node owned by ``document``."""
    document.release()


__all__ = ["Document", "PathLike", "free"]
