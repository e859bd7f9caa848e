# no-empty-pattern: disallow empty destructuring patterns.

from __future__ import annotations

from typing import Iterator

from lintkit.context import Node
from lintkit.findings.models import Finding
from lintkit.rules.base import Rule, RuleContext

_KINDS = {"object_pattern": "object", "array_pattern": "array"}


class NoEmptyPatternRule(Rule):
    id = "no-empty-pattern"
    name = "No empty destructuring"
    description = "`const {} = x` binds nothing; it is usually a mistaken default value."

    def visitors(self):
        return {kind: self.check for kind in _KINDS}

    def check(self, node: Node, ctx: RuleContext) -> Iterator[Finding]:
        if not node.named_children:
            yield ctx.finding(node, f"Unexpected empty {_KINDS[node.kind]} pattern.")
