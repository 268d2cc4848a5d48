"""Exception hierarchy for Quill.

Every error raised while computing an action plan is scoped to one target and
carries enough context (target, offending name or path) for a rule author to
locate the faulty rule. Whether a failure aborts the whole build is the
caller's decision.
"""

from __future__ import annotations

from typing import Any


class QuillError(Exception):
    """Base exception for all Quill errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(QuillError):
    """Configuration validation or resolution failed."""


class InternalError(QuillError):
    """A Quill internal error (bug) or invariant violation."""


class RuleError(QuillError):
    """A rule table could not produce a plan for a target."""

    def __init__(
        self, message: str, *, target: Any = None, hint: str | None = None
    ) -> None:
        super().__init__(message, hint=hint)
        self.target = target


class UnsupportedTargetError(RuleError):
    """The object is neither an item representation nor a layout."""

    def __init__(self, target: Any) -> None:
        super().__init__(
            f"Do not know how to calculate the action plan for {target!r}",
            target=target,
            hint="Pass an ItemRep or a Layout.",
        )


class NoRuleForTargetError(RuleError):
    """No authoring rule matches the target."""


class NoRuleForItemRepError(NoRuleForTargetError):
    """No compilation rule matches the item representation."""

    def __init__(self, target: Any) -> None:
        super().__init__(
            f"There is no compilation rule specified for {target!r}",
            target=target,
            hint="Add a compile rule whose pattern matches this item and rep name.",
        )


class NoRuleForLayoutError(NoRuleForTargetError):
    """No layout-filter mapping matches the layout."""

    def __init__(self, target: Any) -> None:
        super().__init__(
            f"There is no layout rule specified for {target!r}",
            target=target,
            hint="Add a layout rule assigning a filter to this layout.",
        )


class DuplicateSnapshotNameError(QuillError):
    """A snapshot name was added twice to one action plan."""

    def __init__(self, target: Any, name: str) -> None:
        super().__init__(
            f"Attempted to create a snapshot with a duplicate name {name!r} "
            f"for {target!r}",
            hint="Each snapshot name may be used only once per rule.",
        )
        self.target = target
        self.name = name


class PathWithoutLeadingSlashError(QuillError):
    """A routing rule returned a path that does not start with a slash."""

    def __init__(self, target: Any, path: str) -> None:
        super().__init__(
            f"The path returned for {target!r}, {path!r}, does not start with a slash",
            hint="Ensure that all routing rules return a path that starts with a slash.",
        )
        self.target = target
        self.path = path


class UnknownFilterError(QuillError):
    """A plan references a filter that is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Unknown filter: {name!r}",
            hint="Register the filter with FilterRegistry.register() first.",
        )
        self.name = name


class UnserializableParamError(QuillError):
    """An action param holds a value with no stable serialized form."""

    def __init__(self, owner: str, key: str, value: Any) -> None:
        super().__init__(
            f"Param {key!r} of {owner} has unserializable value of type "
            f"{type(value).__name__}",
            hint="Params may only hold str, int, float, bool, None, lists and dicts.",
        )
        self.owner = owner
        self.key = key
