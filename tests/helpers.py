"""Test helpers (small, reusable doubles).

Keep this file tiny and purpose-built: it exists to prevent test suites from
growing lots of one-off rule tables as coverage expands.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import threading
from typing import Any


@dataclass
class CountingRule:
    """Compilation rule double that counts evaluations.

    Replays `script` against the recording evaluator: each entry is a tuple
    naming the verb (``"filter"``, ``"layout"``, ``"snapshot"``) and its args.
    """

    script: list[tuple[Any, ...]] = field(default_factory=list)
    gate: threading.Event | None = None
    started: threading.Event | None = None
    calls: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def apply_to(self, target: Any, evaluator: Any, site: Any) -> None:
        del target, site
        with self._lock:
            self.calls += 1
        if self.started is not None:
            self.started.set()
        if self.gate is not None:
            self.gate.wait(timeout=2.0)
        for verb, *args in self.script:
            getattr(evaluator, f"record_{verb}")(*args)


@dataclass
class StaticRoute:
    """Routing rule double returning a fixed path."""

    path: str | None
    calls: int = 0

    def apply_to(self, target: Any, site: Any) -> str | None:
        del target, site
        self.calls += 1
        return self.path


@dataclass
class FakeRuleTable:
    """Rule table double with one rule per lookup."""

    rule: Any = None
    layout_filter: tuple[str, dict[str, Any]] | None = None
    routes: dict[str, Any] = field(default_factory=dict)

    def compilation_rule_for(self, rep: Any) -> Any:
        del rep
        return self.rule

    def filter_for_layout(self, layout: Any) -> tuple[str, dict[str, Any]] | None:
        del layout
        return self.layout_filter

    def routing_rules_for(self, rep: Any) -> dict[str, Any]:
        del rep
        return dict(self.routes)

