# no-eval: disallow eval() calls.

from __future__ import annotations

from typing import Iterator

from lintkit.context import Node
from lintkit.findings.models import Finding
from lintkit.rules.base import Rule, RuleContext

_GLOBAL_OBJECTS = frozenset({"window", "globalThis", "global", "self"})


class NoEvalRule(Rule):
    id = "no-eval"
    name = "No eval"
    description = "eval() runs arbitrary strings as code; it is slow and a common injection vector."

    def visitors(self):
        return {"call_expression": self.check}

    def check(self, node: Node, ctx: RuleContext) -> Iterator[Finding]:
        callee = node.child_by_field("function")
        if callee is None:
            return
        if callee.kind == "identifier" and ctx.text(callee) == "eval":
            yield ctx.finding(callee, "eval can be harmful.")
        elif callee.kind == "member_expression":
            obj = callee.child_by_field("object")
            prop = callee.child_by_field("property")
            if (
                obj is not None
                and prop is not None
                and obj.kind == "identifier"
                and ctx.text(obj) in _GLOBAL_OBJECTS
                and ctx.text(prop) == "eval"
            ):
                yield ctx.finding(callee, "eval can be harmful.")
