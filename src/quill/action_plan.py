"""Action plan: the ordered processing recipe for one compilation target."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
import hashlib
import json
import re
from typing import TYPE_CHECKING, Any

from quill.actions import Filter, LayoutAction, Snapshot
from quill.errors import DuplicateSnapshotNameError

if TYPE_CHECKING:
    from collections.abc import Callable

    from quill.actions import ActionDescriptor, ProcessingAction
    from quill.targets import CompilationTarget

LAST = "last"

# Names of snapshots generated by `write` during rule evaluation.
_TEMP_SNAPSHOT_NAME = re.compile(r"\A_\d+\Z")


def is_temporary_snapshot_name(name: str) -> bool:
    return _TEMP_SNAPSHOT_NAME.match(name) is not None


class ActionPlan:
    """Ordered processing actions for exactly one compilation target.

    Snapshot names are unique across the whole plan: adding a name that is
    already taken raises `DuplicateSnapshotNameError` instead of merging.
    """

    def __init__(
        self,
        target: CompilationTarget,
        actions: Iterable[ProcessingAction] = (),
    ) -> None:
        self._target = target
        self._actions: list[ProcessingAction] = []
        self._snapshot_names: set[str] = set()
        for action in actions:
            if isinstance(action, Snapshot):
                self._take_names(action.names)
            self._actions.append(action)

    @property
    def target(self) -> CompilationTarget:
        return self._target

    def __len__(self) -> int:
        return len(self._actions)

    def __iter__(self) -> Iterator[ProcessingAction]:
        return iter(self._actions)

    def __repr__(self) -> str:
        return f"<ActionPlan target={self._target!r} actions={self._actions!r}>"

    def action_at(self, index: int) -> ProcessingAction | None:
        """Return the action at *index*, or None when out of range.

        Negative indices are out of range; they do not count from the end.
        """
        if index < 0:
            return None
        try:
            return self._actions[index]
        except IndexError:
            return None

    # --- Building ---

    def add_filter(self, name: str, params: dict[str, Any] | None = None) -> ActionPlan:
        self._actions.append(Filter(name, params or {}))
        return self

    def add_layout(
        self, identifier: str, params: dict[str, Any] | None = None
    ) -> ActionPlan:
        self._actions.append(LayoutAction(identifier, params))
        return self

    def add_snapshot(
        self, names: str | Iterable[str], path: str | None = None
    ) -> ActionPlan:
        """Append a snapshot for *names*, optionally persisted to *path*.

        Raises:
            DuplicateSnapshotNameError: If any name is already taken in this plan.
        """
        names = (names,) if isinstance(names, str) else tuple(names)
        self._take_names(names)
        self._actions.append(Snapshot(names, () if path is None else (path,)))
        return self

    def _take_names(self, names: tuple[str, ...]) -> None:
        # Check every name before recording any, so a failed add leaves the
        # plan untouched.
        seen: set[str] = set()
        for name in names:
            if name in self._snapshot_names or name in seen:
                raise DuplicateSnapshotNameError(self._target, name)
            seen.add(name)
        self._snapshot_names.update(seen)

    # --- Queries ---

    def snapshot_actions(self) -> list[Snapshot]:
        return [a for a in self._actions if isinstance(a, Snapshot)]

    def snapshot_names(self) -> list[str]:
        return [name for a in self.snapshot_actions() for name in a.names]

    def has_snapshot(self, name: str) -> bool:
        return name in self._snapshot_names

    def any_layouts(self) -> bool:
        return any(isinstance(a, LayoutAction) for a in self._actions)

    def resolved_paths(self) -> dict[str, str]:
        """Map each snapshot name to its path, for snapshots that have one."""
        paths: dict[str, str] = {}
        for action in self.snapshot_actions():
            for name in action.names:
                for path in action.paths:
                    paths[name] = path
        return paths

    def serialize(self) -> list[ActionDescriptor]:
        """Return one primitive descriptor per action.

        The result depends only on action content, so equal plans serialize
        identically across runs.
        """
        return [action.serialize() for action in self._actions]

    def fingerprint(self) -> str:
        """Return a stable digest of the serialized plan."""
        payload = json.dumps(self.serialize(), sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()

    # --- Rewriting ---

    def transform(
        self, fn: Callable[[ProcessingAction], ProcessingAction]
    ) -> ActionPlan:
        """Return a new plan for the same target with *fn* applied to each action."""
        return ActionPlan(self._target, [fn(a) for a in self._actions])

    def canonicalize(self) -> None:
        """Move the most recent usable snapshot path onto a trailing `last` snapshot.

        Only generated temporary snapshots (`_0`, `_1`, ...) give their path to
        `last`. Authored snapshots such as `pre` keep their paths, so a plan
        whose only written snapshot is authored is left unchanged. Generated
        snapshots left without a path afterwards are removed from the plan.
        """
        # Trailing run of snapshot actions, as (index, action) pairs.
        run: list[tuple[int, Snapshot]] = []
        for idx in range(len(self._actions) - 1, -1, -1):
            action = self._actions[idx]
            if not isinstance(action, Snapshot):
                break
            run.insert(0, (idx, action))

        if len(run) < 2:
            return
        last_idx, last_action = run[-1]
        if LAST not in last_action.names or last_action.has_paths:
            return

        # Only generated snapshots give up their path; authored snapshots keep
        # the path their rule asked for.
        source = next(
            (
                (idx, action)
                for idx, action in reversed(run[:-1])
                if action.has_paths
                and all(is_temporary_snapshot_name(n) for n in action.names)
            ),
            None,
        )
        if source is None:
            return

        source_idx, source_action = source
        self._actions[last_idx] = last_action.with_paths(source_action.paths)
        self._actions[source_idx] = source_action.with_paths(())

        kept: list[ProcessingAction] = []
        for action in self._actions:
            if (
                isinstance(action, Snapshot)
                and not action.has_paths
                and all(is_temporary_snapshot_name(n) for n in action.names)
            ):
                self._snapshot_names.difference_update(action.names)
                continue
            kept.append(action)
        self._actions = kept
