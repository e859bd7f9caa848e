# no-unreachable: disallow statements after return, throw, break or continue.

from __future__ import annotations

from typing import Iterator

from lintkit.context import Node
from lintkit.findings.models import Finding
from lintkit.rules.base import Rule, RuleContext

_TERMINATORS = {
    "return_statement": "return",
    "throw_statement": "throw",
    "break_statement": "break",
    "continue_statement": "continue",
}
_BLOCK_KINDS = ("program", "statement_block", "switch_case", "switch_default")
# hoisted, so never "unreachable"
_HOISTED = frozenset({"function_declaration", "generator_function_declaration"})


def _is_uninitialized_var(node: Node) -> bool:
    if node.kind != "variable_declaration":
        return False
    return all(
        d.child_by_field("value") is None for d in node.named_children if d.kind == "variable_declarator"
    )


class NoUnreachableRule(Rule):
    id = "no-unreachable"
    name = "No unreachable code"
    description = "Code after return, throw, break or continue never runs and usually hides a logic bug."

    def visitors(self):
        return {kind: self.check for kind in _BLOCK_KINDS}

    def check(self, node: Node, ctx: RuleContext) -> Iterator[Finding]:
        terminated_by = None
        for statement in node.named_children:
            if statement.field == "value":
                continue  # the `case x:` label itself
            if terminated_by is not None:
                if statement.kind in _HOISTED or _is_uninitialized_var(statement):
                    continue
                yield ctx.finding(statement, f"Unreachable code after '{terminated_by}'.")
                return
            terminated_by = _TERMINATORS.get(statement.kind)
