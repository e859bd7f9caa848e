"""Unit tests for the no-cond-assign rule."""

from pathlib import Path

from lintkit.linter import Linter
from lintkit.rules.registry import RuleRegistry


def _run_rule(source: str, options=None) -> list:
    registry = RuleRegistry()
    registry.register("no-cond-assign", "error", options)
    return Linter(registry).lint_source(source, Path("test.js"))


def test_comparison_is_fine():
    assert _run_rule("if (x === 0) {}\nwhile (y < 3) { y++ }\n") == []


def test_assignment_in_if_detected():
    findings = _run_rule("let ex2 = Math.random()\nif (ex2 = 0) {\n  console.log('zero')\n}\n")
    assert len(findings) == 1
    assert findings[0].rule_id == "no-cond-assign"
    assert findings[0].line == 2
    assert "'if' statement" in findings[0].message


def test_assignment_in_while_and_do_detected():
    assert len(_run_rule("while (node = node.next) {}")) == 1
    assert len(_run_rule("do {} while (x = next())")) == 1


def test_parenthesized_assignment_in_ternary_allowed():
    assert len(_run_rule("const v = (a = b) ? 1 : 2")) == 0
    assert len(_run_rule("const v = a = b ? 1 : 2")) == 0


def test_extra_parens_allowed_by_default():
    assert _run_rule("if ((x = next())) {}") == []


def test_always_mode_flags_wrapped_and_nested():
    findings = _run_rule("if ((x = next()) && (y = 2)) {}", "always")
    assert len(findings) == 2


def test_always_mode_ignores_nested_functions():
    assert _run_rule("if (items.some((i) => { let f; f = i; return f })) {}", "always") == []


def test_always_mode_flags_ternary_test():
    findings = _run_rule("const v = (a = b) ? 1 : 2", {"mode": "always"})
    assert len(findings) == 1
    assert "conditional expression" in findings[0].message


def test_assignment_in_for_test_detected():
    findings = _run_rule("for (;x = next();) {}")
    assert len(findings) == 1
    assert "'for' statement" in findings[0].message


def test_parenthesized_for_test_allowed():
    assert _run_rule("for (;(x = next());) {}") == []
    assert _run_rule("for (let i = 0; i < n; i += 1) {}") == []
