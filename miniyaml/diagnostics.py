"""Bounded log of the most recent parse diagnostics.

The log keeps the last ``capacity`` messages in a ring: pushing onto a full
log silently drops the oldest entry, and :meth:`DiagnosticLog.pop` hands the
newest one back first. It is not thread-safe.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, Iterator, List, Optional

from .observability.logging import get_logger

NO_ERROR = "No error."
DEFAULT_LOG_CAPACITY = 20
DEFAULT_MESSAGE_CAPACITY = 256

logger = get_logger("miniyaml.diagnostics")


class DiagnosticLog:
    """Fixed-size LIFO store of human-readable diagnostic messages."""

    def __init__(
        self,
        capacity: int = DEFAULT_LOG_CAPACITY,
        message_capacity: int = DEFAULT_MESSAGE_CAPACITY,
    ) -> None:
        if capacity < 1:
            raise ValueError("Diagnostic log capacity must be at least 1")
        if message_capacity < 2:
            raise ValueError("Diagnostic message capacity must be at least 2")
        self.capacity = capacity
        self.message_capacity = message_capacity
        self._messages: Deque[str] = deque(maxlen=capacity)

    def push(self, message: object) -> None:
        """Record ``message``, evicting the oldest entry when full."""
        text = str(message)[: self.message_capacity - 1]
        self._messages.append(text)
        logger.debug("diagnostic recorded: %s", text)

    def pop(self) -> str:
        """Remove and return the most recent message, or :data:`NO_ERROR`."""
        if not self._messages:
            return NO_ERROR
        return self._messages.pop()

    def peek(self) -> str:
        if not self._messages:
            return NO_ERROR
        return self._messages[-1]

    def clear(self) -> None:
        self._messages.clear()

    def messages(self) -> List[str]:
        """Snapshot of retained messages, newest first."""
        return list(self)

    def is_full(self) -> bool:
        return len(self._messages) == self.capacity

    def __len__(self) -> int:
        return len(self._messages)

    def __bool__(self) -> bool:
        return bool(self._messages)

    def __iter__(self) -> Iterator[str]:
        return reversed(self._messages)

    def __repr__(self) -> str:
        return f"DiagnosticLog(size={len(self)}, capacity={self.capacity})"


_DEFAULT_LOG = DiagnosticLog()


def default_log() -> DiagnosticLog:
    """Return the process-wide log used when no log is supplied."""
    return _DEFAULT_LOG


def pop_error(log: Optional[DiagnosticLog] = None) -> str:
    """Pop the most recent diagnostic from ``log`` (the default log if omitted)."""
    target = log if log is not None else _DEFAULT_LOG
    return target.pop()


__all__ = [
    "NO_ERROR",
    "DEFAULT_LOG_CAPACITY",
    "DEFAULT_MESSAGE_CAPACITY",
    "DiagnosticLog",
    "default_log",
    "pop_error",
]
