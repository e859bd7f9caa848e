# new-parens: require parentheses when invoking a constructor with no arguments.

from __future__ import annotations

from typing import Iterator

from lintkit.context import Node
from lintkit.findings.models import Finding
from lintkit.rules.base import Rule, RuleContext


class NewParensRule(Rule):
    """`new Thing` -> `new Thing()`."""

    id = "new-parens"
    name = "Require parentheses for new"
    description = "Without parentheses, `new Thing` followed by a line without a semicolon can parse unexpectedly."
    fixable = True

    def visitors(self):
        return {"new_expression": self.check}

    def check(self, node: Node, ctx: RuleContext) -> Iterator[Finding]:
        if node.child_by_field("arguments") is not None:
            return
        yield ctx.finding(
            node,
            "Missing '()' invoking a constructor.",
            fixes=[ctx.insert_after(node, "()")],
        )
