"""Internal validation helpers used across Quill modules.

These helpers centralize validation logic for type safety and consistent
error messages.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
import typing

T = typing.TypeVar("T")


def _freeze_mapping(
    m: dict[str, T] | typing.Mapping[str, T] | None,
) -> typing.Mapping[str, T] | None:
    """Return an immutable mapping view or None.

    Accepts dict or Mapping; wraps dicts in MappingProxyType while preserving type.
    """
    if m is None or isinstance(m, MappingProxyType):
        return m
    return MappingProxyType(dict(m))


_PRIMITIVES = (str, int, float, bool, type(None))


def _is_serializable(value: typing.Any) -> bool:
    """Return True when *value* is built only from JSON-compatible primitives."""
    if isinstance(value, _PRIMITIVES):
        return True
    if isinstance(value, Mapping):
        return all(
            isinstance(k, str) and _is_serializable(v) for k, v in value.items()
        )
    if isinstance(value, (list, tuple)):
        return all(_is_serializable(v) for v in value)
    return False


def _thaw(value: typing.Any) -> typing.Any:
    """Return a plain, key-sorted copy of nested mappings and sequences.

    Used to build descriptors whose shape depends only on content, never on
    insertion order or object identity.
    """
    if isinstance(value, Mapping):
        return {k: _thaw(value[k]) for k in sorted(value)}
    if isinstance(value, (list, tuple)):
        return [_thaw(v) for v in value]
    return value


def _is_tuple_of(value: object, typ: type | tuple[type, ...]) -> bool:
    return isinstance(value, tuple) and all(isinstance(v, typ) for v in value)


def _require(
    *,
    condition: bool,
    message: str,
    exc: type[Exception] = ValueError,
    field_name: str | None = None,
) -> None:
    """Centralized validation with optional field context for clearer errors."""
    if not condition:
        if field_name:
            enhanced_message = f"{field_name}: {message}"
            raise exc(enhanced_message)
        raise exc(message)
