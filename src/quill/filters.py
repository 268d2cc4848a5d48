"""Registry of filter type declarations.

Only the content types a filter consumes and produces are tracked here; the
filters themselves run elsewhere.
"""

from __future__ import annotations

from dataclasses import dataclass

from quill._validation import _require
from quill.errors import UnknownFilterError


@dataclass(frozen=True, slots=True)
class FilterSpec:
    """Declared content types of a filter."""

    name: str
    from_binary: bool = False
    to_binary: bool = False


class FilterRegistry:
    """Maps filter names to their declared content types.

    Minimal API; single-process memory only.
    """

    def __init__(self, specs: tuple[FilterSpec, ...] = ()) -> None:
        self._specs: dict[str, FilterSpec] = {}
        for spec in specs:
            self._specs[spec.name] = spec

    def register(
        self, name: str, *, from_binary: bool = False, to_binary: bool = False
    ) -> FilterSpec:
        """Declare the content types of filter *name*, replacing any earlier entry."""
        _require(
            condition=isinstance(name, str) and name != "",
            message="must be a non-empty str",
            field_name="name",
            exc=TypeError,
        )
        spec = FilterSpec(name, from_binary=from_binary, to_binary=to_binary)
        self._specs[name] = spec
        return spec

    def get(self, name: str) -> FilterSpec | None:
        return self._specs.get(name)

    def named(self, name: str) -> FilterSpec:
        """Return the spec for *name*.

        Raises:
            UnknownFilterError: If no filter with that name is registered.
        """
        spec = self._specs.get(name)
        if spec is None:
            raise UnknownFilterError(name)
        return spec

    def __contains__(self, name: object) -> bool:
        return name in self._specs
