# no-unused-vars: flag variables, functions and parameters that are never read.

from __future__ import annotations

from typing import Iterator, Literal, Optional

from pydantic import BaseModel

from lintkit.context import Node
from lintkit.findings.models import Finding
from lintkit.rules.base import Rule, RuleContext
from lintkit.scope import FUNCTION_KINDS, PATTERN_KINDS, Variable

_CAMEL_OPTIONS = {"ignoreRestSiblings": "ignore_rest_siblings"}
_DECLARATION_KINDS = frozenset(
    {
        "variable_declaration",
        "lexical_declaration",
        "function_declaration",
        "generator_function_declaration",
        "class_declaration",
    }
)


class NoUnusedVarsOptions(BaseModel):
    vars: Literal["all", "local"] = "all"
    args: Literal["after-used", "all", "none"] = "after-used"
    ignore_rest_siblings: bool = False

    model_config = {"frozen": True}


def _is_exported(identifier: Node) -> bool:
    """True when the declaring statement itself is exported."""
    for ancestor in identifier.ancestors():
        if ancestor.kind in _DECLARATION_KINDS:
            return ancestor.parent is not None and ancestor.parent.kind == "export_statement"
        if ancestor.kind in FUNCTION_KINDS:
            return False
    return False


def _has_rest_sibling(identifier: Node) -> bool:
    """True for `x` in `const { x, ...rest } = obj`."""
    prop = identifier
    if identifier.parent is not None and identifier.parent.kind == "pair_pattern":
        prop = identifier.parent
    pattern = prop.parent
    return (
        pattern is not None
        and pattern.kind == "object_pattern"
        and any(c.kind == "rest_pattern" for c in pattern.named_children)
    )


def _binding_holder(identifier: Node) -> Optional[Node]:
    """The declarator or loop head a (possibly destructured) name belongs to."""
    for ancestor in identifier.ancestors():
        if ancestor.kind not in PATTERN_KINDS:
            return ancestor
    return None


def _is_used(variable: Variable) -> bool:
    for ref in variable.reads:
        if variable.kind == "function":
            # a function calling itself does not use itself
            declaration = variable.identifiers[0].parent
            if declaration is not None and declaration.span.contains(ref.identifier.span):
                continue
        return True
    return False


def _params_after_used(variables: list[Variable]) -> list[Variable]:
    """Unused parameters that come after the last used one."""
    params = sorted((v for v in variables if v.kind == "param"), key=lambda v: v.identifiers[0].span.start)
    unused = []
    for variable in reversed(params):
        if _is_used(variable):
            break
        unused.append(variable)
    return list(reversed(unused))


class NoUnusedVarsRule(Rule):
    """Disallow unused variables."""

    id = "no-unused-vars"
    name = "No unused variables"
    description = "A variable that is declared but never read is dead code or a typo for another name."
    options_model = NoUnusedVarsOptions

    def coerce_options(self, raw):
        if isinstance(raw, str):
            return {"vars": raw}
        if isinstance(raw, dict):
            raw = {_CAMEL_OPTIONS.get(k, k): v for k, v in raw.items()}
        return super().coerce_options(raw)

    def visitors(self):
        return {"program:exit": self.check}

    def check(self, node: Node, ctx: RuleContext) -> Iterator[Finding]:
        options = ctx.options if ctx.options is not None else NoUnusedVarsOptions()
        scopes = ctx.scopes
        # JSX compiles to React.createElement, so a JSX file uses React
        uses_jsx = any(n.kind.startswith("jsx_") for n in node.walk())

        params_to_report: set[Variable] = set()
        if options.args != "none":
            by_function: dict[Node, list[Variable]] = {}
            for variable in scopes.variables:
                if variable.kind == "param":
                    by_function.setdefault(variable.scope, []).append(variable)
            for params in by_function.values():
                chosen = params if options.args == "all" else _params_after_used(params)
                params_to_report.update(chosen)

        for variable in scopes.variables:
            if variable.kind == "catch":
                continue
            if variable.kind in ("function", "class") and variable.scope is variable.identifiers[0].parent:
                # the name of a function or class expression is only visible inside it
                continue
            if variable.kind == "param":
                if variable not in params_to_report or _is_used(variable):
                    continue
            elif _is_used(variable):
                continue
            if variable.name == "React" and uses_jsx:
                continue
            if options.vars == "local" and variable.scope is node:
                continue
            identifier = variable.identifiers[0]
            if _is_exported(identifier):
                continue
            if options.ignore_rest_siblings and _has_rest_sibling(identifier):
                continue
            yield ctx.finding(identifier, self._message(variable))

    @staticmethod
    def _message(variable: Variable) -> str:
        holder = _binding_holder(variable.identifiers[0])
        assigned = any(r.write for r in variable.references) or (
            holder is not None
            and (
                (holder.kind == "variable_declarator" and holder.child_by_field("value") is not None)
                or holder.kind == "for_in_statement"
            )
        )
        if assigned:
            return f"'{variable.name}' is assigned a value but never used."
        return f"'{variable.name}' is defined but never used."
