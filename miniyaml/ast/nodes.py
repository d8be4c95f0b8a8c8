"""Document tree node definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, ItemsView, Iterator, KeysView, List, Optional, Union, ValuesView


@dataclass
class Scalar:
    """A single string-valued leaf."""

    text: str
    line: Optional[int] = field(default=None, compare=False, repr=False)

    kind = "scalar"

    def to_python(self) -> str:
        return self.text

    def __str__(self) -> str:
        return self.text


@dataclass
class Mapping:
    """Ordered key to node pairs; keys are unique."""

    entries: Dict[str, "Node"] = field(default_factory=dict)
    line: Optional[int] = field(default=None, compare=False, repr=False)

    kind = "mapping"

    def add(self, key: str, value: "Node") -> None:
        """Insert a new entry; an existing key is rejected."""
        if key in self.entries:
            raise ValueError(f"Key '{key}' already present in mapping")
        self.entries[key] = value

    def get(self, key: str, default: Optional["Node"] = None) -> Optional["Node"]:
        return self.entries.get(key, default)

    def keys(self) -> KeysView[str]:
        return self.entries.keys()

    def values(self) -> ValuesView["Node"]:
        return self.entries.values()

    def items(self) -> ItemsView[str, "Node"]:
        return self.entries.items()

    def to_python(self) -> Dict[str, Any]:
        return {key: value.to_python() for key, value in self.entries.items()}

    def __getitem__(self, key: str) -> "Node":
        return self.entries[key]

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


@dataclass
class Sequence:
    """Ordered list of nodes introduced by dash markers."""

    items: List["Node"] = field(default_factory=list)
    line: Optional[int] = field(default=None, compare=False, repr=False)

    kind = "sequence"

    def append(self, item: "Node") -> None:
        self.items.append(item)

    def to_python(self) -> List[Any]:
        return [item.to_python() for item in self.items]

    def __getitem__(self, index: int) -> "Node":
        return self.items[index]

    def __iter__(self) -> Iterator["Node"]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


Node = Union[Scalar, Mapping, Sequence]


__all__ = ["Node", "Scalar", "Mapping", "Sequence"]
