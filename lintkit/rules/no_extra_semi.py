# no-extra-semi: disallow unnecessary semicolons; fix removes them.

from __future__ import annotations

from typing import Iterator

from lintkit.context import Node
from lintkit.findings.models import Finding
from lintkit.rules.base import Rule, RuleContext

# an empty statement is a legitimate body for these
_ALLOWED_PARENTS = frozenset(
    {
        "for_statement",
        "for_in_statement",
        "while_statement",
        "do_statement",
        "if_statement",
        "else_clause",
        "labeled_statement",
        "with_statement",
    }
)

MESSAGE = "Unnecessary semicolon."


class NoExtraSemiRule(Rule):
    id = "no-extra-semi"
    name = "No extra semicolons"
    description = "Stray semicolons are harmless but noisy; they are removed by --fix."
    fixable = True

    def visitors(self):
        return {"empty_statement": self.check_statement, "class_body": self.check_class_body}

    def check_statement(self, node: Node, ctx: RuleContext) -> Iterator[Finding]:
        parent = node.parent
        if parent is not None and parent.kind in _ALLOWED_PARENTS:
            return
        yield ctx.finding(node, MESSAGE, fixes=[ctx.remove(node)])

    def check_class_body(self, node: Node, ctx: RuleContext) -> Iterator[Finding]:
        previous = None
        for child in node.children:
            if child.kind == "comment":
                continue
            # a field definition's own terminator is not extra
            if child.kind == ";" and (previous is None or previous.kind != "field_definition"):
                yield ctx.finding(child, MESSAGE, fixes=[ctx.remove(child)])
            previous = child
