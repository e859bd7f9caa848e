# no-useless-computed-key: `{['a']: 1}` -> `{'a': 1}`.

from __future__ import annotations

from typing import Iterator

from lintkit.context import Node
from lintkit.findings.models import Finding
from lintkit.rules.base import Rule, RuleContext

_LITERAL_KEYS = frozenset({"string", "number"})


class NoUselessComputedKeyRule(Rule):
    id = "no-useless-computed-key"
    name = "No useless computed keys"
    description = "A computed key holding a plain literal is just that literal."
    fixable = True

    def visitors(self):
        return {"pair": self.check}

    def check(self, node: Node, ctx: RuleContext) -> Iterator[Finding]:
        key = node.child_by_field("key")
        if key is None or key.kind != "computed_property_name":
            return
        inner = key.named_children
        if len(inner) != 1 or inner[0].kind not in _LITERAL_KEYS:
            return
        literal = ctx.text(inner[0])
        # ['__proto__']: 1 defines an own property; '__proto__': 1 sets the prototype
        if literal.strip("'\"") == "__proto__":
            return
        fixes = []
        if not any(t.kind == "comment" for t in key.walk()):
            fixes.append(ctx.replace(key, literal))
        yield ctx.finding(node, f"Unnecessarily computed property [{literal}] found.", fixes=fixes)
