"""Tests for the traversal engine: visit order, dispatch and rule isolation."""

from collections import Counter
from pathlib import Path

from lintkit.context import create_context
from lintkit.findings.models import Finding, Severity
from lintkit.rules.base import Rule
from lintkit.rules.registry import RuleRegistry
from lintkit.walker import TraversalEngine

SOURCE = b"""
var a = 1
function f(x) {
  if (x == a) { return x }
  return new Thing
}
"""


class FlagDeclarationsRule(Rule):
    id = "flag-declarations"
    name = "Flag declarations"

    def visitors(self):
        return {"variable_declaration": self.check}

    def check(self, node, ctx):
        yield ctx.finding(node, "declaration")


class SameSpanRule(Rule):
    id = "same-span"
    name = "Same span"

    def visitors(self):
        return {"variable_declaration": lambda node, ctx: [ctx.finding(node, "again")]}


class ExplodingRule(Rule):
    id = "exploding"
    name = "Exploding"

    def visitors(self):
        return {"identifier": self.check}

    def check(self, node, ctx):
        raise KeyError("boom")


class WrongReturnRule(Rule):
    id = "wrong-return"
    name = "Wrong return"

    def visitors(self):
        return {"number": lambda node, ctx: ["not a finding"]}


class OrderRecordingRule(Rule):
    id = "order"
    name = "Order"

    def __init__(self):
        self.events = []

    def visitors(self):
        return {
            "function_declaration": lambda node, ctx: self.events.append(("enter", node.kind)),
            "function_declaration:exit": lambda node, ctx: self.events.append(("exit", node.kind)),
            "return_statement": lambda node, ctx: self.events.append(("enter", node.kind)),
            "*": lambda node, ctx: None,
        }


def _registry(*rules, severity="warn"):
    registry = RuleRegistry(catalog={r.id: r for r in rules})
    for r in rules:
        registry.register(r.id, severity)
    return registry.freeze()


def _model():
    return create_context(Path("walk.js"), source=SOURCE)


def test_every_node_visited_once_per_phase():
    visits = Counter()
    engine = TraversalEngine(on_visit=lambda node, exiting: visits.update([(id(node), exiting)]))
    model = _model()
    engine.run(model, _registry(FlagDeclarationsRule()).active_rules())
    assert set(visits.values()) == {1}
    assert len(visits) == 2 * model.node_count


def test_visit_order_independent_of_rules():
    def order_with(registry):
        seen = []
        engine = TraversalEngine(on_visit=lambda node, exiting: seen.append((node.span.start, node.kind, exiting)))
        engine.run(_model(), registry.active_rules())
        return seen

    empty = order_with(RuleRegistry(catalog={}))
    busy = order_with(_registry(FlagDeclarationsRule(), ExplodingRule(), OrderRecordingRule()))
    assert empty == busy


def test_pre_and_post_order_handlers():
    rule = OrderRecordingRule()
    TraversalEngine().run(_model(), _registry(rule).active_rules())
    assert rule.events == [
        ("enter", "function_declaration"),
        ("enter", "return_statement"),
        ("enter", "return_statement"),
        ("exit", "function_declaration"),
    ]


def test_findings_carry_rule_severity():
    findings = TraversalEngine().run(_model(), _registry(FlagDeclarationsRule(), severity="error").active_rules())
    assert len(findings) == 1
    assert findings[0].severity is Severity.ERROR
    assert findings[0].rule_id == "flag-declarations"


def test_failing_rule_is_isolated():
    registry = _registry(ExplodingRule(), FlagDeclarationsRule())
    findings = TraversalEngine().run(_model(), registry.active_rules())

    errors = [f for f in findings if f.rule_id == "exploding"]
    assert len(errors) == 1  # rule disabled after its first failure
    assert errors[0].severity is Severity.ERROR
    assert "KeyError" in errors[0].message
    assert errors[0].node_kind == "identifier"
    assert [f.rule_id for f in findings if f.rule_id != "exploding"] == ["flag-declarations"]


def test_non_finding_output_is_rule_error():
    findings = TraversalEngine().run(_model(), _registry(WrongReturnRule()).active_rules())
    assert len(findings) == 1
    assert findings[0].rule_id == "wrong-return"
    assert findings[0].severity is Severity.ERROR
    assert "not a Finding" in findings[0].message


def test_same_span_findings_are_both_kept():
    findings = TraversalEngine().run(_model(), _registry(FlagDeclarationsRule(), SameSpanRule()).active_rules())
    assert [f.rule_id for f in findings] == ["flag-declarations", "same-span"]
    assert findings[0].span == findings[1].span


def test_fix_outside_node_is_rule_error():
    class BadFixRule(Rule):
        id = "bad-fix"
        name = "Bad fix"

        def visitors(self):
            return {"number": self.check}

        def check(self, node, ctx):
            yield ctx.finding(node, "bad", fixes=[ctx.replace_range(0, 1, "x")])

    findings = TraversalEngine().run(_model(), _registry(BadFixRule()).active_rules())
    assert len(findings) == 1
    assert "outside" in findings[0].message


def test_configured_severity_overrides_handler_severity():
    class DirectFindingRule(Rule):
        id = "direct"
        name = "Direct"

        def visitors(self):
            return {"number": self.check}

        def check(self, node, ctx):
            yield Finding(
                rule_id=ctx.rule_id,
                severity=Severity.WARN,
                message="built by hand",
                path=ctx.path,
                span=node.span,
            )

    findings = TraversalEngine().run(_model(), _registry(DirectFindingRule(), severity="error").active_rules())
    assert len(findings) == 1
    assert findings[0].severity is Severity.ERROR
