"""Compilation targets: the things an action plan can be computed for."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Targets compare and hash by identity (eq=False): plans are memoized per
# target object, not per equal-looking value.


@dataclass(frozen=True, eq=False)
class Item:
    """A content item as seen by the rule layer."""

    identifier: str
    #: True when the item's content is binary rather than text.
    binary: bool = False
    attributes: dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        return f"<Item identifier={self.identifier!r}>"


@dataclass(frozen=True, eq=False)
class ItemRep:
    """One named output rendering of an item."""

    item: Item
    name: str = "default"

    @property
    def binary(self) -> bool:
        return self.item.binary

    def __repr__(self) -> str:
        return f"<ItemRep name={self.name!r} item.identifier={self.item.identifier!r}>"


@dataclass(frozen=True, eq=False)
class Layout:
    """A template applied to wrap an item representation's content."""

    identifier: str
    attributes: dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        return f"<Layout identifier={self.identifier!r}>"


CompilationTarget = ItemRep | Layout


@dataclass(frozen=True, slots=True)
class SnapshotDef:
    """A snapshot name paired with the storage representation of its content."""

    name: str
    binary: bool
