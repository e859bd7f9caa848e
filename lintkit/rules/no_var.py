# no-var: flag `var` declarations; fix rewrites the keyword to `let`.
#
# The fix is only offered when `let` keeps the program's meaning: every name is
# used inside the declaring block, never before its declaration, not from a
# closure created inside a loop, and not redeclared.

from __future__ import annotations

from typing import Iterator, Optional

from lintkit.context import Node
from lintkit.findings.models import Finding
from lintkit.rules.base import Rule, RuleContext
from lintkit.scope import LOOP_KINDS, declaration_keyword, enclosing, function_scope_of

_STATEMENT_LIST_KINDS = frozenset({"program", "statement_block", "export_statement"})
_BLOCK_KINDS = frozenset({"statement_block", "switch_body", "class_static_block"})


def _declared_identifiers(node: Node) -> Optional[list[Node]]:
    """Plain identifiers the declaration binds; None for destructuring."""
    if node.kind == "for_in_statement":
        left = node.child_by_field("left")
        return [left] if left is not None and left.kind == "identifier" else None
    names = []
    for declarator in node.named_children:
        if declarator.kind != "variable_declarator":
            continue
        name = declarator.child_by_field("name")
        if name is None or name.kind != "identifier":
            return None
        names.append(name)
    return names or None


def _is_for_initializer(node: Node) -> bool:
    return node.parent is not None and node.parent.kind == "for_statement" and node.field == "initializer"


def _block_of(node: Node) -> Node:
    """The region a `let` in this position would be visible in."""
    if node.kind == "for_in_statement":
        return node
    if _is_for_initializer(node):
        return node.parent
    return enclosing(node, _BLOCK_KINDS)


def _loop_of(node: Node) -> Optional[Node]:
    if node.kind == "for_in_statement":
        return node
    boundary = function_scope_of(node)
    for ancestor in node.ancestors():
        if ancestor is boundary:
            return None
        if ancestor.kind in LOOP_KINDS:
            return ancestor
    return None


def _tdz_end(node: Node, identifier: Node) -> int:
    """References starting before this offset would run before the binding exists."""
    if node.kind == "for_in_statement":
        right = node.child_by_field("right")
        return right.span.end if right is not None else identifier.span.end
    return identifier.parent.span.end


def _can_fix(ctx: RuleContext, node: Node) -> bool:
    parent = node.parent
    if parent is None or parent.kind in ("switch_case", "switch_default"):
        return False
    if node.kind == "variable_declaration" and parent.kind not in _STATEMENT_LIST_KINDS and not _is_for_initializer(node):
        # `if (a) var x = 1` cannot become a lexical declaration
        return False
    identifiers = _declared_identifiers(node)
    if identifiers is None:
        return False

    block = _block_of(node)
    loop = _loop_of(node)
    home = function_scope_of(node)
    for identifier in identifiers:
        if ctx.text(identifier) == "let":
            return False
        variable = ctx.scopes.variable_of(identifier)
        if variable is None or variable.redeclared:
            return False
        tdz_end = _tdz_end(node, identifier)
        for ref in variable.references:
            span = ref.identifier.span
            if not block.span.contains(span) or span.start < tdz_end:
                return False
            if loop is not None and function_scope_of(ref.identifier) is not home:
                # each iteration would get its own binding
                return False
        if loop is not None and node.kind == "variable_declaration":
            if identifier.parent.child_by_field("value") is None:
                return False
    return True


class NoVarRule(Rule):
    """Require let or const instead of var."""

    id = "no-var"
    name = "Unexpected var"
    description = "Use let or const instead of var; var is function-scoped and hoisted."
    fixable = True

    def visitors(self):
        return {"variable_declaration": self.check, "for_in_statement": self.check_loop_head}

    def check(self, node: Node, ctx: RuleContext) -> Iterator[Finding]:
        yield self._report(node, node.child_of_kind("var"), ctx)

    def check_loop_head(self, node: Node, ctx: RuleContext) -> Iterator[Finding]:
        keyword = declaration_keyword(node)
        if keyword is not None and keyword.kind == "var":
            yield self._report(node, keyword, ctx)

    def _report(self, node: Node, keyword: Optional[Node], ctx: RuleContext) -> Finding:
        fixes = []
        if keyword is not None and _can_fix(ctx, node):
            fixes.append(ctx.replace(keyword, "let"))
        return ctx.finding(node, "Unexpected var, use let or const instead.", fixes=fixes)
