"""Processing actions: the individual steps of an action plan.

Actions are immutable. A snapshot's path list is only ever replaced
wholesale, by building a new action with `Snapshot.with_paths`. Filter and
layout params may only hold JSON-compatible values, so every action has a
serialized form that depends on content alone.
"""

from __future__ import annotations

import dataclasses
import json
from typing import TYPE_CHECKING, Any

from quill.errors import UnserializableParamError

from ._validation import (
    _freeze_mapping,
    _is_serializable,
    _is_tuple_of,
    _require,
    _thaw,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

ActionDescriptor = list[Any]


def _checked_params(owner: str, params: Mapping[str, Any]) -> Mapping[str, Any]:
    for key, value in params.items():
        if not isinstance(key, str) or not _is_serializable(value):
            raise UnserializableParamError(owner, str(key), value)
    return _freeze_mapping(params)


def _descriptor_hash(descriptor: ActionDescriptor) -> int:
    return hash(json.dumps(descriptor, sort_keys=True, separators=(",", ":")))


@dataclasses.dataclass(frozen=True, slots=True)
class Filter:
    """Run the named filter with the given params."""

    name: str
    params: dict[str, Any] = dataclasses.field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate the name and freeze params."""
        _require(
            condition=isinstance(self.name, str) and self.name != "",
            message="filter name must be a non-empty str",
            exc=TypeError,
        )
        params = _checked_params(f"filter {self.name!r}", self.params or {})
        object.__setattr__(self, "params", params)

    def __hash__(self) -> int:
        return _descriptor_hash(self.serialize())

    def serialize(self) -> ActionDescriptor:
        return ["filter", self.name, _thaw(self.params)]


@dataclasses.dataclass(frozen=True, slots=True)
class LayoutAction:
    """Wrap the content in the layout with the given identifier."""

    identifier: str
    params: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        """Validate the identifier and freeze params."""
        _require(
            condition=isinstance(self.identifier, str) and self.identifier != "",
            message="layout identifier must be a non-empty str",
            exc=TypeError,
        )
        if self.params is not None:
            params = _checked_params(f"layout {self.identifier!r}", self.params)
            object.__setattr__(self, "params", params)

    def __hash__(self) -> int:
        return _descriptor_hash(self.serialize())

    def serialize(self) -> ActionDescriptor:
        params = None if self.params is None else _thaw(self.params)
        return ["layout", self.identifier, params]


@dataclasses.dataclass(frozen=True, slots=True)
class Snapshot:
    """Mark a named point in the pipeline, optionally persisted to paths."""

    names: tuple[str, ...]
    paths: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Validate names and paths."""
        _require(
            condition=_is_tuple_of(self.names, str) and len(self.names) > 0,
            message="names must be a non-empty tuple[str, ...]",
            exc=TypeError,
        )
        _require(
            condition=len(set(self.names)) == len(self.names),
            message=f"names must not repeat: {self.names!r}",
        )
        _require(
            condition=_is_tuple_of(self.paths, str),
            message="paths must be a tuple[str, ...]",
            exc=TypeError,
        )

    def with_paths(self, paths: tuple[str, ...] | list[str]) -> Snapshot:
        """Return a copy of this snapshot with its path list replaced."""
        return dataclasses.replace(self, paths=tuple(paths))

    @property
    def has_paths(self) -> bool:
        return len(self.paths) > 0

    def serialize(self) -> ActionDescriptor:
        return ["snapshot", list(self.names), list(self.paths)]


ProcessingAction = Filter | LayoutAction | Snapshot
