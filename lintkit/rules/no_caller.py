# no-caller: disallow arguments.caller and arguments.callee.

from __future__ import annotations

from typing import Iterator

from lintkit.context import Node
from lintkit.findings.models import Finding
from lintkit.rules.base import Rule, RuleContext

_DEPRECATED = frozenset({"callee", "caller"})


class NoCallerRule(Rule):
    id = "no-caller"
    name = "No arguments.caller/callee"
    description = "arguments.caller and arguments.callee are deprecated and forbidden in strict mode."

    def visitors(self):
        return {"member_expression": self.check}

    def check(self, node: Node, ctx: RuleContext) -> Iterator[Finding]:
        obj = node.child_by_field("object")
        prop = node.child_by_field("property")
        if obj is None or prop is None or obj.kind != "identifier":
            return
        name = ctx.text(prop)
        if ctx.text(obj) == "arguments" and name in _DEPRECATED:
            yield ctx.finding(node, f"Avoid arguments.{name}.")
