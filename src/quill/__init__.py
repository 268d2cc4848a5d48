"""Quill: action plans for static-content build rules.

Public API:
    - PlanCalculator: derives and memoizes the action plan for a target
    - ActionPlan: ordered processing actions for one target
    - RulesCollection: pattern-based compilation, routing and layout rules
    - ItemRep / Item / Layout: compilation targets
"""

from __future__ import annotations

import logging

from quill.action_plan import ActionPlan
from quill.actions import Filter, LayoutAction, ProcessingAction, Snapshot
from quill.calculator import PlanCalculator
from quill.config import Config, resolve_config
from quill.errors import (
    ConfigurationError,
    DuplicateSnapshotNameError,
    InternalError,
    NoRuleForItemRepError,
    NoRuleForLayoutError,
    NoRuleForTargetError,
    PathWithoutLeadingSlashError,
    QuillError,
    RuleError,
    UnknownFilterError,
    UnserializableParamError,
    UnsupportedTargetError,
)
from quill.filters import FilterRegistry, FilterSpec
from quill.recording import RecordingEvaluator
from quill.rules import RoutingContext, RuleContext, RulesCollection
from quill.targets import CompilationTarget, Item, ItemRep, Layout, SnapshotDef

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("quill-rules")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("quill").addHandler(logging.NullHandler())

__all__ = [  # noqa: RUF022
    # Core
    "ActionPlan",
    "PlanCalculator",
    "RecordingEvaluator",
    # Actions
    "Filter",
    "LayoutAction",
    "ProcessingAction",
    "Snapshot",
    # Targets
    "CompilationTarget",
    "Item",
    "ItemRep",
    "Layout",
    "SnapshotDef",
    # Rules
    "RoutingContext",
    "RuleContext",
    "RulesCollection",
    "FilterRegistry",
    "FilterSpec",
    # Configuration
    "Config",
    "resolve_config",
    # Errors
    "ConfigurationError",
    "DuplicateSnapshotNameError",
    "InternalError",
    "NoRuleForItemRepError",
    "NoRuleForLayoutError",
    "NoRuleForTargetError",
    "PathWithoutLeadingSlashError",
    "QuillError",
    "RuleError",
    "UnknownFilterError",
    "UnserializableParamError",
    "UnsupportedTargetError",
]
