"""Unit tests for the eqeqeq rule."""

from pathlib import Path

import pytest

from lintkit.linter import Linter
from lintkit.rules.registry import RuleRegistry


def _linter(options=None) -> Linter:
    registry = RuleRegistry()
    registry.register("eqeqeq", "warn", options)
    return Linter(registry)


def _run_rule(source: str, options=None) -> list:
    return _linter(options).lint_source(source, Path("test.js"))


def test_strict_operators_are_fine():
    assert _run_rule("if (a === b || a !== c) {}") == []


@pytest.mark.parametrize("op", ["==", "!="])
def test_loose_operators_detected(op):
    findings = _run_rule(f"if (a {op} b) {{}}")
    assert len(findings) == 1
    assert findings[0].rule_id == "eqeqeq"
    assert f"'{op}='" in findings[0].message
    assert not findings[0].fixable


def test_typeof_comparison_is_fixable():
    result = _linter().fix_source("if (typeof x == 'string') {}")
    assert result.output == "if (typeof x === 'string') {}"


def test_same_type_literals_are_fixable():
    findings = _run_rule("if ('a' != 'b') {}")
    assert findings[0].fixable


def test_always_mode_flags_null():
    assert len(_run_rule("if (x == null) {}")) == 1


def test_allow_null_mode():
    assert _run_rule("if (x != null) {}", "allow-null") == []
    assert len(_run_rule("if (x == 1) {}", "allow-null")) == 1


def test_smart_mode():
    assert _run_rule("if (typeof x == 'number' || 1 == 2 || y == null) {}", {"mode": "smart"}) == []
    assert len(_run_rule("if (x == y) {}", {"mode": "smart"})) == 1
