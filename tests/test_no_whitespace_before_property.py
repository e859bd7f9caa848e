"""Unit tests for the no-whitespace-before-property rule."""

from lintkit.linter import Linter
from lintkit.rules.registry import RuleRegistry


def _linter() -> Linter:
    registry = RuleRegistry()
    registry.register("no-whitespace-before-property", "warn")
    return Linter(registry)


def test_plain_access_is_fine():
    assert _linter().lint_source("console.log(a.b.c)") == []


def test_method_chain_on_new_lines_is_fine():
    assert _linter().lint_source("promise\n  .then(done)\n  .catch(fail)\n") == []


def test_whitespace_detected_on_each_access():
    findings = _linter().lint_source("console.log(ex10. a. b. c)")
    assert len(findings) == 3
    assert all(f.fixable for f in findings)


def test_fix_removes_whitespace_around_dot():
    linter = _linter()
    assert linter.fix_source("foo .bar()").output == "foo.bar()"
    assert linter.fix_source("foo. bar").output == "foo.bar"


def test_number_literal_not_fixed():
    findings = _linter().lint_source("5 .toString()")
    assert len(findings) == 1
    assert not findings[0].fixable
