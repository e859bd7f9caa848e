"""Unit tests for the no-unreachable rule."""

from lintkit.linter import Linter
from lintkit.rules.registry import RuleRegistry


def _run_rule(source: str) -> list:
    registry = RuleRegistry()
    registry.register("no-unreachable", "warn")
    return Linter(registry).lint_source(source)


def test_code_after_return_detected():
    findings = _run_rule("function ex6(x) {\n  return x * x\n  console.log('cannot reach here!')\n}\n")
    assert len(findings) == 1
    assert findings[0].line == 3
    assert "'return'" in findings[0].message


def test_only_first_unreachable_statement_reported():
    assert len(_run_rule("function f() {\n  throw new Error()\n  a()\n  b()\n}\n")) == 1


def test_code_after_break_in_case_detected():
    findings = _run_rule("switch (x) {\n  case 1:\n    break\n    go()\n  case 2:\n    go()\n}\n")
    assert len(findings) == 1
    assert findings[0].line == 4


def test_hoisted_declarations_are_fine():
    source = "function f() {\n  return g()\n  function g() { return 1 }\n  var later\n}\n"
    assert _run_rule(source) == []


def test_conditional_return_is_fine():
    assert _run_rule("function f(x) {\n  if (x) { return 1 }\n  return 2\n}\n") == []
