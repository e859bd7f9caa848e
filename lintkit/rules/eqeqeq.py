# eqeqeq: require === and !== instead of == and !=.

from __future__ import annotations

from typing import Any, Iterator, Literal

from pydantic import BaseModel

from lintkit.context import Node
from lintkit.findings.models import Finding
from lintkit.rules.base import Rule, RuleContext

_LITERAL_KINDS = frozenset({"string", "number", "true", "false", "null", "template_string", "regex"})
_BOOLEAN_KINDS = frozenset({"true", "false"})


class EqeqeqOptions(BaseModel):
    # always: flag every ==/!=; smart: allow literal-vs-literal, typeof and null;
    # allow-null: allow comparisons against null only
    mode: Literal["always", "smart", "allow-null"] = "always"

    model_config = {"frozen": True}


def _literal_type(node: Node) -> str | None:
    if node.kind in _BOOLEAN_KINDS:
        return "boolean"
    if node.kind in _LITERAL_KINDS:
        return node.kind
    return None


def _is_typeof(node: Node) -> bool:
    if node.kind != "unary_expression":
        return False
    op = node.child_by_field("operator")
    return op is not None and op.kind == "typeof"


def _is_null(node: Node) -> bool:
    return node.kind == "null"


def _same_type_literals(left: Node, right: Node) -> bool:
    lt = _literal_type(left)
    return lt is not None and lt == _literal_type(right)


class EqeqeqRule(Rule):
    """Require type-safe equality operators."""

    id = "eqeqeq"
    name = "Require === and !=="
    description = "Use === and !== to avoid type coercion surprises."
    fixable = True
    options_model = EqeqeqOptions

    def coerce_options(self, raw: Any) -> Any:
        if isinstance(raw, str):
            return {"mode": raw}
        return super().coerce_options(raw)

    def visitors(self):
        return {"binary_expression": self.check}

    def check(self, node: Node, ctx: RuleContext) -> Iterator[Finding]:
        op = node.child_by_field("operator")
        if op is None or op.kind not in ("==", "!="):
            return
        left = node.child_by_field("left")
        right = node.child_by_field("right")
        if left is None or right is None:
            return

        mode = ctx.options.mode if ctx.options is not None else "always"
        if mode in ("allow-null", "smart") and (_is_null(left) or _is_null(right)):
            return
        safe = _is_typeof(left) or _is_typeof(right) or _same_type_literals(left, right)
        if mode == "smart" and safe:
            return

        expected = op.kind + "="
        fixes = [ctx.replace(op, expected)] if safe else []
        yield ctx.finding(node, f"Expected '{expected}' and instead saw '{op.kind}'.", fixes=fixes)
