"""Rule tables, rules and the contexts rule bodies are evaluated in.

Rule bodies are plain callables. A compilation rule body receives a
`RuleContext` and records its effects through the context's verbs; a routing
rule body receives a read-only `RoutingContext` and returns a path (or None).

Example:
    rules = RulesCollection()

    @rules.compile("/posts/*")
    def _(ctx):
        ctx.filter("erb")
        ctx.layout("/default.*")

    @rules.route("/posts/*")
    def _(ctx):
        return "/blog/" + ctx.item.identifier.rsplit("/", 1)[-1] + "/"

    rules.layout("/default.*", "erb")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from quill.recording import RecordingEvaluator
    from quill.targets import Item, ItemRep, Layout

DEFAULT_REP = "default"
DEFAULT_ROUTE_SNAPSHOT = "last"


# --- Interfaces consumed by the plan calculator ---


class CompilationRuleLike(Protocol):
    def apply_to(
        self, target: ItemRep, evaluator: RecordingEvaluator, site: Any
    ) -> None: ...


class RoutingRuleLike(Protocol):
    def apply_to(self, target: ItemRep, site: Any) -> str | None: ...


class RuleTable(Protocol):
    """Duck-typed protocol for rule lookups."""

    def compilation_rule_for(self, rep: ItemRep) -> CompilationRuleLike | None: ...
    def filter_for_layout(
        self, layout: Layout
    ) -> tuple[str, dict[str, Any]] | None: ...
    def routing_rules_for(self, rep: ItemRep) -> Mapping[str, RoutingRuleLike]: ...


# --- Contexts ---


class RoutingContext:
    """Read-only view handed to routing rule bodies."""

    def __init__(self, rep: ItemRep, site: Any) -> None:
        self._rep = rep
        self._site = site

    @property
    def rep(self) -> ItemRep:
        return self._rep

    @property
    def item(self) -> Item:
        return self._rep.item

    @property
    def site(self) -> Any:
        return self._site


class RuleContext(RoutingContext):
    """Authoring verbs handed to compilation rule bodies."""

    def __init__(self, rep: ItemRep, evaluator: RecordingEvaluator, site: Any) -> None:
        super().__init__(rep, site)
        self._evaluator = evaluator
        self._write_counter = 0

    def filter(self, name: str, **params: Any) -> None:
        self._evaluator.record_filter(name, params)

    def layout(self, identifier: str, **params: Any) -> None:
        self._evaluator.record_layout(identifier, params or None)

    def snapshot(self, name: str, path: str | None = None) -> None:
        self._evaluator.record_snapshot(name, path)

    def write(self, path: str) -> None:
        """Persist the current content to *path* via a generated snapshot."""
        name = f"_{self._write_counter}"
        self._write_counter += 1
        self._evaluator.record_snapshot(name, path)


# --- Concrete rules ---


def _matches(pattern: str, identifier: str) -> bool:
    return fnmatchcase(identifier, pattern)


@dataclass(frozen=True)
class CompilationRule:
    """Processing instructions for item reps matching a pattern."""

    pattern: str
    block: Callable[[RuleContext], None]
    rep_name: str = DEFAULT_REP

    def applicable_to(self, rep: ItemRep) -> bool:
        return rep.name == self.rep_name and _matches(self.pattern, rep.item.identifier)

    def apply_to(self, target: ItemRep, evaluator: RecordingEvaluator, site: Any) -> None:
        self.block(RuleContext(target, evaluator, site))


@dataclass(frozen=True)
class RoutingRule:
    """Output path for one snapshot of item reps matching a pattern."""

    pattern: str
    block: Callable[[RoutingContext], str | None]
    rep_name: str = DEFAULT_REP
    snapshot_name: str = DEFAULT_ROUTE_SNAPSHOT

    def applicable_to(self, rep: ItemRep) -> bool:
        return rep.name == self.rep_name and _matches(self.pattern, rep.item.identifier)

    def apply_to(self, target: ItemRep, site: Any) -> str | None:
        return self.block(RoutingContext(target, site))


@dataclass
class RulesCollection:
    """Ordered rule lists; for every lookup the first matching rule wins."""

    compilation_rules: list[CompilationRule] = field(default_factory=list)
    routing_rules: list[RoutingRule] = field(default_factory=list)
    layout_filter_mapping: list[tuple[str, str, dict[str, Any]]] = field(
        default_factory=list
    )

    # --- Registration ---

    def compile(
        self, pattern: str, *, rep: str = DEFAULT_REP
    ) -> Callable[[Callable[[RuleContext], None]], Callable[[RuleContext], None]]:
        """Register the decorated function as a compilation rule."""

        def decorator(
            block: Callable[[RuleContext], None],
        ) -> Callable[[RuleContext], None]:
            self.compilation_rules.append(CompilationRule(pattern, block, rep))
            return block

        return decorator

    def route(
        self,
        pattern: str,
        *,
        rep: str = DEFAULT_REP,
        snapshot: str = DEFAULT_ROUTE_SNAPSHOT,
    ) -> Callable[
        [Callable[[RoutingContext], str | None]], Callable[[RoutingContext], str | None]
    ]:
        """Register the decorated function as a routing rule."""

        def decorator(
            block: Callable[[RoutingContext], str | None],
        ) -> Callable[[RoutingContext], str | None]:
            self.routing_rules.append(RoutingRule(pattern, block, rep, snapshot))
            return block

        return decorator

    def layout(self, pattern: str, filter_name: str, **params: Any) -> None:
        """Assign *filter_name* (with *params*) to layouts matching *pattern*."""
        self.layout_filter_mapping.append((pattern, filter_name, params))

    # --- RuleTable ---

    def compilation_rule_for(self, rep: ItemRep) -> CompilationRule | None:
        return next((r for r in self.compilation_rules if r.applicable_to(rep)), None)

    def filter_for_layout(self, layout: Layout) -> tuple[str, dict[str, Any]] | None:
        for pattern, filter_name, params in self.layout_filter_mapping:
            if _matches(pattern, layout.identifier):
                return filter_name, dict(params)
        return None

    def routing_rules_for(self, rep: ItemRep) -> dict[str, RoutingRule]:
        rules: dict[str, RoutingRule] = {}
        for rule in self.routing_rules:
            if rule.applicable_to(rep) and rule.snapshot_name not in rules:
                rules[rule.snapshot_name] = rule
        return rules
