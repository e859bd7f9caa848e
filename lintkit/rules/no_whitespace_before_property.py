# no-whitespace-before-property: `a. b` / `a .b` -> `a.b`.

from __future__ import annotations

from typing import Iterator

from lintkit.context import Node
from lintkit.findings.models import Finding
from lintkit.rules.base import Rule, RuleContext

_DOT_KINDS = frozenset({".", "?.", "optional_chain"})


class NoWhitespaceBeforePropertyRule(Rule):
    id = "no-whitespace-before-property"
    name = "No whitespace before property"
    description = "Whitespace around the dot of a property access hurts readability."
    fixable = True

    def visitors(self):
        return {"member_expression": self.check}

    def check(self, node: Node, ctx: RuleContext) -> Iterator[Finding]:
        obj = node.child_by_field("object")
        prop = node.child_by_field("property")
        dot = next((c for c in node.children if c.kind in _DOT_KINDS), None)
        if obj is None or prop is None or dot is None:
            return
        before = ctx.model.source[obj.span.end : dot.span.start]
        after = ctx.model.source[dot.span.end : prop.span.start]
        # a line break before the dot is normal method-chain style
        if b"\n" in before or b"\n" in after:
            return
        if before.strip() or after.strip():
            return  # comments in between
        if not before and not after:
            return

        fixes = []
        if obj.kind != "number":
            fixes.append(ctx.replace_range(obj.span.end, prop.span.start, ctx.text(dot)))
        yield ctx.finding(node, f"Unexpected whitespace before property {ctx.text(prop)}.", fixes=fixes)
