"""Dataclasses representing a parsed miniyaml document.

``Scalar``, ``Mapping`` and ``Sequence`` form a strict tree: every node is
owned by exactly one parent and nothing points back up.
"""

from .nodes import Mapping, Node, Scalar, Sequence
from .document import Document, PathLike, free

__all__ = [
    "Document",
    "Mapping",
    "Node",
    "PathLike",
    "Scalar",
    "Sequence",
    "free",
]
