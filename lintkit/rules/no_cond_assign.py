# no-cond-assign: flag assignment operators in conditional tests.

from __future__ import annotations

from typing import Iterator, Literal

from pydantic import BaseModel

from lintkit.context import Node
from lintkit.findings.models import Finding
from lintkit.rules.base import Rule, RuleContext

_ASSIGNMENT_KINDS = frozenset({"assignment_expression", "augmented_assignment_expression"})
_FUNCTION_KINDS = frozenset(
    {"function_expression", "function", "arrow_function", "function_declaration", "class", "class_declaration"}
)
_STATEMENT_NAMES = {
    "if_statement": "an 'if' statement",
    "while_statement": "a 'while' statement",
    "do_statement": "a 'do...while' statement",
    "for_statement": "a 'for' statement",
    "ternary_expression": "a conditional expression",
}


class NoCondAssignOptions(BaseModel):
    mode: Literal["except-parens", "always"] = "except-parens"

    model_config = {"frozen": True}


def _unwrap(node: Node) -> Node:
    """Strip one pair of parentheses."""
    if node.kind == "parenthesized_expression":
        inner = node.named_children
        if len(inner) == 1:
            return inner[0]
    return node


def _assignments_in(node: Node) -> Iterator[Node]:
    """Assignments anywhere in node, not descending into nested functions."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.kind in _ASSIGNMENT_KINDS:
            yield current
        if current is not node and current.kind in _FUNCTION_KINDS:
            continue
        stack.extend(reversed(current.children))


class NoCondAssignRule(Rule):
    """Disallow assignment operators in conditional expressions."""

    id = "no-cond-assign"
    name = "No assignment in conditions"
    description = "An assignment in a test (if (x = 1)) is almost always a typo for a comparison."
    options_model = NoCondAssignOptions

    def coerce_options(self, raw):
        if isinstance(raw, str):
            return {"mode": raw}
        return super().coerce_options(raw)

    def visitors(self):
        return {kind: self.check for kind in _STATEMENT_NAMES}

    def check(self, node: Node, ctx: RuleContext) -> Iterator[Finding]:
        test = node.child_by_field("condition")
        if test is not None and test.kind == "expression_statement":
            # older grammars wrap the for test with its semicolon
            test = test.named_children[0] if test.named_children else None
        if test is None or test.kind == "empty_statement" or not test.named:
            return
        mode = ctx.options.mode if ctx.options is not None else "except-parens"
        where = _STATEMENT_NAMES[node.kind]

        if mode == "always":
            for assignment in _assignments_in(test):
                yield ctx.finding(assignment, f"Unexpected assignment within {where}.")
            return

        # if/while/do own one pair of parens; for and ternary tests own none
        expr = test if node.kind in ("for_statement", "ternary_expression") else _unwrap(test)
        if expr.kind in _ASSIGNMENT_KINDS:
            yield ctx.finding(expr, f"Expected a conditional expression and instead saw an assignment in {where}.")
