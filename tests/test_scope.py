"""Tests for lintkit.scope: declarations, resolution and globals."""

from pathlib import Path

from lintkit.context import build_source_model
from lintkit.parser import create_parser, parse_bytes


def _scopes(source: str):
    data = source.encode("utf-8")
    model = build_source_model(parse_bytes(data, parser=create_parser()), data, Path("x.jsx"))
    return model, model.scopes


def _variable(scopes, name):
    return next(v for v in scopes.variables if v.name == name)


def test_var_is_function_scoped_and_let_is_block_scoped():
    model, scopes = _scopes("function f() {\n  if (a) {\n    var v = 1\n    let l = 2\n  }\n}\n")
    assert _variable(scopes, "v").scope.kind == "function_declaration"
    assert _variable(scopes, "l").scope.kind == "statement_block"
    assert _variable(scopes, "f").scope is model.root


def test_inner_declaration_shadows_outer():
    _, scopes = _scopes("const x = 1\nfunction f(x) { return x }\nf(x)\n")
    outer = next(v for v in scopes.variables if v.name == "x" and v.kind == "const")
    param = next(v for v in scopes.variables if v.name == "x" and v.kind == "param")
    assert len(outer.references) == 1
    assert len(param.references) == 1


def test_unresolved_names_are_globals():
    _, scopes = _scopes("const el = document.body\nwindow.x = el\n")
    assert [name for name, _ in scopes.globals()] == ["document", "window"]


def test_read_and_write_flags():
    _, scopes = _scopes("let n = 0\nn = 1\nn += 1\nuse(n)\n")
    refs = _variable(scopes, "n").references
    assert [(r.read, r.write) for r in refs] == [(False, True), (True, True), (True, False)]


def test_redeclared_var_shares_one_variable():
    _, scopes = _scopes("var a = 1\nvar a = 2\n")
    variable = _variable(scopes, "a")
    assert variable.redeclared
    assert len([v for v in scopes.variables if v.name == "a"]) == 1


def test_labels_and_intrinsic_jsx_are_not_references():
    _, scopes = _scopes("outer: for (;;) { break outer }\nconst e = <div />\n")
    assert list(scopes.globals()) == []


def test_imports_are_program_variables():
    model, scopes = _scopes("import a, { b as c } from 'm'\nimport * as ns from 'n'\n")
    names = {v.name for v in scopes.variables_in(model.root)}
    assert names == {"a", "c", "ns"}
