"""Path lookup into parsed documents.

Paths are dot separated (``server.hosts.0.name``). A segment made only of
ASCII digits addresses a sequence element; applied to a mapping it is read
as a plain key with its exact text, so keys such as ``007`` stay reachable.
Callers that need keys containing dots can pass the segments as a list
instead.
"""

from __future__ import annotations

from typing import List, Optional, Sequence as SequenceType, Union

from .ast import Document, Mapping, Node, PathLike, Sequence
from .errors import (
    YamlIndexOutOfRangeError,
    YamlInvalidPathError,
    YamlKeyNotFoundError,
    YamlNotAMappingError,
    YamlNotASequenceError,
    YamlReleasedDocumentError,
)
from .observability.logging import get_logger

Segment = Union[str, int]

logger = get_logger("miniyaml.lookup")


def split_path(path: PathLike) -> List[Segment]:
    """Normalise ``path`` into a list of key (``str``) and index (``int``) segments.

    String segments are kept verbatim; :func:`as_index` decides later whether
    one of them can address a sequence element.
    """
    if isinstance(path, str):
        if path == "":
            return []
        raw: SequenceType[Segment] = path.split(".")
    else:
        raw = list(path)

    segments: List[Segment] = []
    for position, segment in enumerate(raw):
        if isinstance(segment, bool) or not isinstance(segment, (str, int)):
            raise YamlInvalidPathError(
                message=f"Unsupported path segment {segment!r}",
                lookup_path=_render(raw),
                segment=str(segment),
                position=position,
            )
        if isinstance(segment, int) and segment < 0:
            raise YamlInvalidPathError(
                message=f"Negative index {segment} in path",
                lookup_path=_render(raw),
                segment=segment,
                position=position,
            )
        if segment == "":
            raise YamlInvalidPathError(
                message="Empty segment in path",
                lookup_path=_render(raw),
                segment=segment,
                position=position,
            )
        segments.append(segment)
    return segments


def as_index(segment: Segment) -> Optional[int]:
    """Return ``segment`` as a sequence index, or ``None`` if it is a key."""
    if isinstance(segment, int):
        return segment
    # str.isdigit() also accepts characters such as '²' that int() rejects
    if segment.isascii() and segment.isdigit():
        return int(segment)
    return None


def _render(segments: SequenceType[object]) -> str:
    return ".".join(str(segment) for segment in segments)


def lookup(document: Document, path: PathLike) -> Node:
    """Walk ``path`` from the document root and return the node it names."""
    rendered = path if isinstance(path, str) else _render(path)
    if document.released or document.root is None:
        raise YamlReleasedDocumentError(
            message="Document has been released",
            path=document.path or None,
            lookup_path=rendered,
        )

    node: Node = document.root
    segments = split_path(path)
    for position, segment in enumerate(segments):
        context = dict(
            path=document.path or None,
            lookup_path=rendered,
            segment=segment,
            position=position,
            resolved=_render(segments[:position]),
        )
        if isinstance(node, Mapping):
            key = str(segment)
            if key not in node:
                logger.debug("lookup of %r failed at segment %r", rendered, key)
                raise YamlKeyNotFoundError(message=f"Key '{key}' not found", **context)
            node = node[key]
            continue

        index = as_index(segment)
        if index is None:
            raise YamlNotAMappingError(
                message=f"Cannot look up key '{segment}' in a {node.kind}",
                **context,
            )
        if not isinstance(node, Sequence):
            raise YamlNotASequenceError(
                message=f"Cannot index a {node.kind} with {index}",
                **context,
            )
        if index >= len(node):
            raise YamlIndexOutOfRangeError(
                message=f"Index {index} out of range for sequence of length {len(node)}",
                **context,
            )
        node = node[index]
    return node


__all__ = ["Segment", "as_index", "lookup", "split_path"]
