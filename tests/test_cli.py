"""Tests for the Typer command line interface."""

import json

from typer.testing import CliRunner

from lintkit.main import app

runner = CliRunner()


def test_lint_clean_file_exits_zero(tmp_path):
    js = tmp_path / "ok.js"
    js.write_text("const x = 1\nconsole.log(x)\n", encoding="utf-8")
    result = runner.invoke(app, ["lint", str(js)])
    assert result.exit_code == 0
    assert "No problems found" in result.stdout


def test_lint_error_finding_exits_one(tmp_path):
    js = tmp_path / "bad.js"
    js.write_text("const t = new Thing\n", encoding="utf-8")
    result = runner.invoke(app, ["lint", str(js)])
    assert result.exit_code == 1
    assert "new-parens" in result.stdout


def test_warnings_only_exit_zero(tmp_path):
    js = tmp_path / "warn.js"
    js.write_text("var x = 1\n", encoding="utf-8")
    result = runner.invoke(app, ["lint", str(js)])
    assert result.exit_code == 0
    assert "no-var" in result.stdout


def test_rule_override_changes_exit_code(tmp_path):
    js = tmp_path / "warn.js"
    js.write_text("var x = 1\n", encoding="utf-8")
    result = runner.invoke(app, ["lint", str(js), "--rule", "no-var=error"])
    assert result.exit_code == 1


def test_invalid_override_exits_two(tmp_path):
    js = tmp_path / "warn.js"
    js.write_text("var x = 1\n", encoding="utf-8")
    result = runner.invoke(app, ["lint", str(js), "--rule", "no-var=loud"])
    assert result.exit_code == 2


def test_fix_rewrites_file(tmp_path):
    js = tmp_path / "fixme.js"
    js.write_text("var t = new Thing\n", encoding="utf-8")
    result = runner.invoke(app, ["lint", str(js), "--fix"])
    assert result.exit_code == 0
    assert js.read_text(encoding="utf-8") == "let t = new Thing()\n"


def test_json_format(tmp_path):
    (tmp_path / "a.js").write_text("var a = 1\n", encoding="utf-8")
    (tmp_path / "b.js").write_text("if (a == b) {}\n", encoding="utf-8")
    result = runner.invoke(app, ["lint", str(tmp_path), "--format", "json", "--jobs", "2"])
    assert result.exit_code == 0
    data = json.loads(result.stdout[result.stdout.index("{"):])
    assert [r["ruleId"] for r in data["results"]] == ["no-var", "no-unused-vars", "eqeqeq"]
    assert data["summary"]["warnCount"] == 3


def test_rules_command_lists_builtin_rules():
    result = runner.invoke(app, ["rules"])
    assert result.exit_code == 0
    assert "no-var" in result.stdout
    assert "no-whitespace-before-property" in result.stdout
