"""Recording evaluator: turns authoring verbs into plan actions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from quill.errors import InternalError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from quill.action_plan import ActionPlan


class RecordingEvaluator:
    """Records filter, layout and snapshot calls into one bound plan.

    Owned by a single rule evaluation. Once sealed, further recording is a bug
    in the caller and raises `InternalError`.
    """

    __slots__ = ("_plan", "_sealed")

    def __init__(self, plan: ActionPlan) -> None:
        self._plan = plan
        self._sealed = False

    @property
    def plan(self) -> ActionPlan:
        return self._plan

    def record_filter(self, name: str, params: dict[str, Any] | None = None) -> None:
        self._check_open()
        self._plan.add_filter(name, params)

    def record_layout(
        self, identifier: str, params: dict[str, Any] | None = None
    ) -> None:
        self._check_open()
        self._plan.add_layout(identifier, params)

    def record_snapshot(
        self, names: str | Iterable[str], path: str | None = None
    ) -> None:
        """Record a snapshot; duplicate names raise immediately."""
        self._check_open()
        self._plan.add_snapshot(names, path)

    def seal(self) -> ActionPlan:
        """End the evaluation and hand back the plan."""
        self._sealed = True
        return self._plan

    def _check_open(self) -> None:
        if self._sealed:
            raise InternalError(
                f"Recording evaluator for {self._plan.target!r} is sealed",
                hint="Authoring verbs are only valid while the rule is being evaluated.",
            )
