"""Utilities for obtaining source text from memory or from disk."""

from __future__ import annotations

from enum import Enum
from os import PathLike
from pathlib import Path
from typing import NamedTuple, Optional, Union

from .diagnostics import DiagnosticLog, default_log
from .errors import YamlSourceError, create_source_error
from .observability.logging import get_logger

SourceInput = Union[str, bytes, PathLike]

logger = get_logger("miniyaml.loader")


class SourceLocation(Enum):
    """Where ``parse`` should take its input from."""

    MEMORY = "memory"
    DISK = "disk"


class LoadedSource(NamedTuple):
    text: str
    path: str


def _fail(log: DiagnosticLog, message: str, *, code: str, path: Optional[str] = None) -> YamlSourceError:
    error = create_source_error(message, path=path, code=code)
    log.push(error)
    logger.info("%s (%s)", message, path or "<memory>")
    return error


def _truncate(value, length: Optional[int]):
    if length is None:
        return value
    if length < 0:
        raise ValueError(f"length must not be negative, got {length}")
    return value[:length]


def read_file(path: Union[str, PathLike], *, encoding: str = "utf-8", log: Optional[DiagnosticLog] = None) -> str:
    """Read the whole file at ``path``, reporting failures to ``log``."""
    log = log if log is not None else default_log()
    display = str(path)
    source_path = Path(path)
    try:
        with source_path.open("rb") as handle:
            data = handle.read()
    except FileNotFoundError as exc:
        raise _fail(log, f"Failed to open file '{display}'", code="FILE_NOT_FOUND", path=display) from exc
    except IsADirectoryError as exc:
        raise _fail(log, f"Failed to open file '{display}': is a directory", code="OPEN_ERROR", path=display) from exc
    except PermissionError as exc:
        raise _fail(log, f"Failed to open file '{display}': permission denied", code="OPEN_ERROR", path=display) from exc
    except OSError as exc:
        raise _fail(log, f"Failed to read file '{display}': {exc.strerror or exc}", code="READ_ERROR", path=display) from exc

    if not data:
        raise _fail(log, f"File was empty: '{display}'", code="EMPTY_SOURCE", path=display)

    try:
        text = data.decode(encoding)
    except UnicodeDecodeError as exc:
        raise _fail(log, f"Failed to read file '{display}': not valid {encoding}", code="READ_ERROR", path=display) from exc

    logger.debug("read %d bytes from %s", len(data), display)
    return text


def read_source(
    source: SourceInput,
    length: Optional[int] = None,
    location: SourceLocation = SourceLocation.MEMORY,
    *,
    encoding: str = "utf-8",
    log: Optional[DiagnosticLog] = None,
) -> LoadedSource:
    """
    Turn a memory buffer or a file path into source text.

    With ``SourceLocation.DISK`` the (optionally truncated) ``source`` is a
    path and the whole file is read. With ``SourceLocation.MEMORY`` the first
    ``length`` characters of ``source`` are used as-is; ``bytes`` are decoded
    with ``encoding``.
    """
    log = log if log is not None else default_log()

    if location is SourceLocation.DISK:
        raw_path = source.decode(encoding) if isinstance(source, bytes) else str(source)
        file_path = _truncate(raw_path, length)
        if not file_path:
            raise _fail(log, "Failed to open file: empty path", code="FILE_NOT_FOUND")
        return LoadedSource(read_file(file_path, encoding=encoding, log=log), file_path)

    buffer = _truncate(source, length)
    if isinstance(buffer, bytes):
        try:
            buffer = buffer.decode(encoding)
        except UnicodeDecodeError as exc:
            raise _fail(log, f"Failed to decode source buffer as {encoding}", code="READ_ERROR") from exc
    elif not isinstance(buffer, str):
        raise TypeError(f"Memory sources must be str or bytes, not {type(buffer).__name__}")

    if not buffer:
        raise _fail(log, "Source buffer was empty", code="EMPTY_SOURCE")
    return LoadedSource(buffer, "")


__all__ = ["LoadedSource", "SourceInput", "SourceLocation", "read_file", "read_source"]
