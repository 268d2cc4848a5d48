"""Plan calculator: derives the finalized action plan for each target.

For an item representation the compilation rule is evaluated in recording
mode, implicit snapshots are added, the plan is canonicalized, and snapshot
paths are resolved through routing rules. Layouts map to a single filter.
Results are memoized per target for the lifetime of one build.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
import logging
import threading
from typing import TYPE_CHECKING, Any

from quill._singleflight import singleflight_cached
from quill.action_plan import LAST, ActionPlan
from quill.actions import Filter, Snapshot
from quill.config import Config
from quill.errors import (
    NoRuleForItemRepError,
    NoRuleForLayoutError,
    PathWithoutLeadingSlashError,
    UnsupportedTargetError,
)
from quill.filters import FilterRegistry
from quill.recording import RecordingEvaluator
from quill.targets import ItemRep, Layout, SnapshotDef

if TYPE_CHECKING:
    from collections.abc import Iterable

    from quill.actions import ProcessingAction
    from quill.rules import RoutingRuleLike, RuleTable
    from quill.targets import CompilationTarget

log = logging.getLogger(__name__)

RAW = "raw"
PRE = "pre"
POST = "post"


class PlanCalculator:
    """Computes and memoizes action plans for item reps and layouts.

    The cache is owned by this instance and lives for one build; call
    `new_build()` before starting the next one. Concurrent first access to the
    same target computes its plan exactly once; failures are never cached.
    """

    def __init__(
        self,
        rules: RuleTable,
        *,
        site: Any = None,
        filters: FilterRegistry | None = None,
        config: Config | None = None,
    ) -> None:
        self.rules = rules
        self.site = site
        self.filters = filters if filters is not None else FilterRegistry()
        self.config = config if config is not None else Config()
        self._plans: dict[CompilationTarget, ActionPlan] = {}
        self._inflight: dict[CompilationTarget, Future[ActionPlan]] = {}
        self._lock = threading.Lock()
        # Bumped by new_build(); plans started in an older build are not cached.
        self._generation = 0

    def new_build(self) -> None:
        """Drop every memoized plan and forget computations still in flight."""
        with self._lock:
            self._plans.clear()
            self._inflight.clear()
            self._generation += 1
        log.debug("Plan cache cleared for new build")

    def __contains__(self, target: object) -> bool:
        with self._lock:
            return target in self._plans

    def plan_for(self, target: CompilationTarget) -> ActionPlan:
        """Return the finalized action plan for *target*.

        Raises:
            UnsupportedTargetError: If *target* is neither an ItemRep nor a Layout.
            NoRuleForTargetError: If no rule matches *target*.
            DuplicateSnapshotNameError: If the rule records a snapshot name twice.
            PathWithoutLeadingSlashError: If a routing rule returns a relative path.
            UnserializableParamError: If the rule records a param with no JSON form.
        """
        if not isinstance(target, (ItemRep, Layout)):
            raise UnsupportedTargetError(target)

        generation = self._generation

        def publish(key: CompilationTarget, plan: ActionPlan) -> None:
            # Called under self._lock.
            if self._generation == generation:
                self._plans[key] = plan

        return singleflight_cached(
            target,
            lock=self._lock,
            inflight=self._inflight,
            cache_get=self._plans.get,
            cache_set=publish,
            work=lambda: self._compute(target),
        )

    def plans_for(
        self, targets: Iterable[CompilationTarget]
    ) -> dict[CompilationTarget, ActionPlan]:
        """Compute plans for many targets concurrently.

        The returned mapping follows the input order. The first failure, in
        input order, propagates.
        """
        targets = list(targets)
        if not targets:
            return {}
        workers = min(self.config.max_workers, len(targets))
        with ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="quill-plan"
        ) as pool:
            futures = [pool.submit(self.plan_for, t) for t in targets]
            return {t: f.result() for t, f in zip(targets, futures, strict=True)}

    def snapshot_defs_for(self, rep: ItemRep) -> list[SnapshotDef]:
        """Return one SnapshotDef per snapshot name, typed by the filter chain.

        Raises:
            UnknownFilterError: If the plan uses a filter missing from the registry.
        """
        is_binary = rep.binary
        defs: list[SnapshotDef] = []
        for action in self.plan_for(rep):
            if isinstance(action, Filter):
                is_binary = self.filters.named(action.name).to_binary
            elif isinstance(action, Snapshot):
                defs.extend(SnapshotDef(name, is_binary) for name in action.names)
        return defs

    # --- Computation ---

    def _compute(self, target: CompilationTarget) -> ActionPlan:
        match target:
            case ItemRep():
                plan = self._plan_for_rep(target)
            case Layout():
                plan = self._plan_for_layout(target)
            case _:
                raise UnsupportedTargetError(target)

        log.debug("Computed action plan for %r (%d actions)", target, len(plan))
        if self.config.log_plans:
            log.debug("Action plan for %r: %s", target, plan.serialize())
        return plan

    def _plan_for_rep(self, rep: ItemRep) -> ActionPlan:
        plan = ActionPlan(rep)
        evaluator = RecordingEvaluator(plan)

        rule = self.rules.compilation_rule_for(rep)
        if rule is None:
            raise NoRuleForItemRepError(rep)

        evaluator.record_snapshot(RAW)
        rule.apply_to(rep, evaluator, self.site)
        if plan.any_layouts():
            evaluator.record_snapshot(POST)
        if not plan.has_snapshot(LAST):
            evaluator.record_snapshot(LAST)
        if not plan.has_snapshot(PRE):
            evaluator.record_snapshot(PRE)
        plan = evaluator.seal()

        plan.canonicalize()
        return self._resolve_paths(plan, rep)

    def _plan_for_layout(self, layout: Layout) -> ActionPlan:
        res = self.rules.filter_for_layout(layout)
        if res is None:
            raise NoRuleForLayoutError(layout)

        filter_name, params = res
        return ActionPlan(layout).add_filter(filter_name, params)

    # --- Path resolution ---

    def _resolve_paths(self, plan: ActionPlan, rep: ItemRep) -> ActionPlan:
        routing_rules = self.rules.routing_rules_for(rep)

        def resolve(action: ProcessingAction) -> ProcessingAction:
            if not isinstance(action, Snapshot) or action.has_paths:
                return action
            paths = [
                path
                for name in action.names
                if (path := self._path_from_rules(rep, routing_rules.get(name)))
            ]
            if not paths:
                return action
            log.debug("Resolved %s of %r to %s", action.names, rep, paths)
            return action.with_paths(paths)

        return plan.transform(resolve)

    def _path_from_rules(
        self, rep: ItemRep, routing_rule: RoutingRuleLike | None
    ) -> str | None:
        if routing_rule is None:
            return None
        # Routing rules see no filtering context and record no dependencies.
        path = routing_rule.apply_to(rep, self.site)
        if path is None:
            return None
        path = str(path)
        if path and not path.startswith("/"):
            raise PathWithoutLeadingSlashError(rep, path)
        return path or None
