# no-self-compare: disallow comparing an expression with itself.

from __future__ import annotations

from typing import Iterator

from lintkit.context import Node
from lintkit.findings.models import Finding
from lintkit.rules.base import Rule, RuleContext

_COMPARISONS = frozenset({"==", "===", "!=", "!==", "<", ">", "<=", ">="})


def _token_texts(ctx: RuleContext, node: Node) -> list[str]:
    return [ctx.text(t) for t in node.walk() if not t.children and t.kind != "comment"]


class NoSelfCompareRule(Rule):
    id = "no-self-compare"
    name = "No self comparison"
    description = "x === x is either a mistake or an obscure NaN test; use Number.isNaN() instead."

    def visitors(self):
        return {"binary_expression": self.check}

    def check(self, node: Node, ctx: RuleContext) -> Iterator[Finding]:
        op = node.child_by_field("operator")
        if op is None or op.kind not in _COMPARISONS:
            return
        left = node.child_by_field("left")
        right = node.child_by_field("right")
        if left is None or right is None:
            return
        if _token_texts(ctx, left) == _token_texts(ctx, right):
            yield ctx.finding(node, "Comparing to itself is potentially pointless.")
