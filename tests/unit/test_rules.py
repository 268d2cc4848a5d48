"""RulesCollection lookups and the contexts rule bodies run in."""

from __future__ import annotations

import pytest

from quill.action_plan import ActionPlan
from quill.recording import RecordingEvaluator
from quill.rules import RoutingContext, RuleContext, RulesCollection
from quill.targets import Item, ItemRep, Layout

pytestmark = pytest.mark.unit


def test_first_matching_compilation_rule_wins(rules: RulesCollection) -> None:
    @rules.compile("/posts/*")
    def posts(ctx):
        ctx.filter("kramdown")

    @rules.compile("*")
    def catch_all(ctx):
        ctx.filter("erb")

    assert rules.compilation_rule_for(ItemRep(Item("/posts/a.md"))).block is posts
    assert rules.compilation_rule_for(ItemRep(Item("/about.md"))).block is catch_all


def test_compilation_rules_are_scoped_to_rep_name(rules: RulesCollection) -> None:
    @rules.compile("*", rep="text")
    def _(ctx):
        ctx.filter("strip_html")

    item = Item("/a.md")
    assert rules.compilation_rule_for(ItemRep(item, "text")) is not None
    assert rules.compilation_rule_for(ItemRep(item)) is None


def test_routing_rules_keep_first_match_per_snapshot(rules: RulesCollection) -> None:
    rules.route("/posts/*")(lambda ctx: "/blog/")
    rules.route("*")(lambda ctx: "/other/")
    rules.route("*", snapshot="raw")(lambda ctx: "/raw/")
    rules.route("*", rep="amp")(lambda ctx: "/amp/")

    found = rules.routing_rules_for(ItemRep(Item("/posts/a.md")))

    assert set(found) == {"last", "raw"}
    assert found["last"].apply_to(ItemRep(Item("/posts/a.md")), None) == "/blog/"
    assert found["raw"].apply_to(ItemRep(Item("/posts/a.md")), None) == "/raw/"


def test_filter_for_layout_returns_copy_of_params(rules: RulesCollection) -> None:
    rules.layout("/default.*", "erb", trim_mode="-")
    rules.layout("*", "haml")

    name, params = rules.filter_for_layout(Layout("/default.html"))
    params["trim_mode"] = "changed"

    assert name == "erb"
    assert rules.filter_for_layout(Layout("/default.html")) == ("erb", {"trim_mode": "-"})
    assert rules.filter_for_layout(Layout("/feed.xml")) == ("haml", {})


def test_filter_for_layout_without_match(rules: RulesCollection) -> None:
    assert rules.filter_for_layout(Layout("/default.html")) is None


def test_rule_context_verbs_record_into_plan() -> None:
    rep = ItemRep(Item("/a.md", attributes={"title": "A"}))
    plan = ActionPlan(rep)
    ctx = RuleContext(rep, RecordingEvaluator(plan), site={"name": "s"})

    ctx.filter("erb", trim_mode="-")
    ctx.layout("/default.*")
    ctx.layout("/wrapped.*", locals={"x": 1})
    ctx.snapshot("pre", "/pre/")
    ctx.write("/a/")
    ctx.write("/b/")

    assert ctx.item.attributes["title"] == "A"
    assert ctx.rep is rep
    assert ctx.site == {"name": "s"}
    assert plan.serialize() == [
        ["filter", "erb", {"trim_mode": "-"}],
        ["layout", "/default.*", None],
        ["layout", "/wrapped.*", {"locals": {"x": 1}}],
        ["snapshot", ["pre"], ["/pre/"]],
        ["snapshot", ["_0"], ["/a/"]],
        ["snapshot", ["_1"], ["/b/"]],
    ]


def test_routing_context_has_no_authoring_verbs() -> None:
    ctx = RoutingContext(ItemRep(Item("/a.md")), site=None)

    assert ctx.item.identifier == "/a.md"
    for verb in ("filter", "layout", "snapshot", "write"):
        assert not hasattr(ctx, verb)
