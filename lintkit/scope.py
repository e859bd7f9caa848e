"""
Scope analysis: which names a file declares, where, and every place they are used.

This is an approximation of JavaScript scoping built on the Node tree:

- `var`, parameters and named function expressions belong to the enclosing
  function (or the program).
- `let`, `const`, class and function declarations belong to the nearest block,
  `for` head or `switch` body.
- Imports belong to the program.

A reference resolves to the innermost enclosing scope that declares its name;
references that resolve nowhere are globals. `with` and direct `eval` are not
modelled.

Built once per file on first use (SourceModel.scopes) and shared by every rule.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, Optional

if TYPE_CHECKING:
    from lintkit.context import Node, SourceModel

logger = logging.getLogger(__name__)

FUNCTION_KINDS = frozenset(
    {
        "function_declaration",
        "function_expression",
        "function",
        "arrow_function",
        "method_definition",
        "generator_function_declaration",
        "generator_function",
    }
)
BLOCK_KINDS = frozenset(
    {"statement_block", "for_statement", "for_in_statement", "switch_body", "catch_clause", "class_static_block"}
)
LOOP_KINDS = frozenset({"for_statement", "for_in_statement", "while_statement", "do_statement"})

PATTERN_KINDS = frozenset(
    {"object_pattern", "array_pattern", "pair_pattern", "rest_pattern", "assignment_pattern", "object_assignment_pattern"}
)
_REFERENCE_KINDS = frozenset({"identifier", "shorthand_property_identifier", "shorthand_property_identifier_pattern"})
_JSX_NAME_PARENTS = frozenset({"jsx_opening_element", "jsx_closing_element", "jsx_self_closing_element"})


@dataclass(frozen=True)
class Reference:
    """One use of a name. A plain assignment target is a write and not a read."""

    identifier: Node
    read: bool = True
    write: bool = False


@dataclass(eq=False)
class Variable:
    name: str
    kind: str  # var, let, const, function, class, param, catch, import
    scope: Node
    identifiers: list[Node] = field(default_factory=list)
    references: list[Reference] = field(default_factory=list)

    @property
    def redeclared(self) -> bool:
        return len(self.identifiers) > 1

    @property
    def reads(self) -> list[Reference]:
        return [r for r in self.references if r.read]


def pattern_identifiers(node: Optional[Node]) -> list[Node]:
    """Binding names inside a declaration target, in source order."""
    if node is None:
        return []
    if node.kind in ("identifier", "shorthand_property_identifier_pattern"):
        return [node]
    if node.kind == "pair_pattern":
        return pattern_identifiers(node.child_by_field("value"))
    if node.kind in ("assignment_pattern", "object_assignment_pattern"):
        return pattern_identifiers(node.child_by_field("left"))
    if node.kind in ("object_pattern", "array_pattern", "rest_pattern"):
        found = []
        for child in node.named_children:
            found.extend(pattern_identifiers(child))
        return found
    return []


def declaration_keyword(node: Node) -> Optional[Node]:
    """The var/let/const token of a declaration or for-in/of head."""
    keyword = node.child_by_field("kind")
    if keyword is None:
        keyword = next((c for c in node.children if c.kind in ("var", "let", "const")), None)
    return keyword


def enclosing(node: Node, kinds: frozenset[str]) -> Node:
    """Nearest strict ancestor of one of kinds, or the program."""
    last = node
    for ancestor in node.ancestors():
        if ancestor.kind in kinds:
            return ancestor
        last = ancestor
    return last


def function_scope_of(node: Node) -> Node:
    return enclosing(node, FUNCTION_KINDS)


def block_scope_of(node: Node) -> Node:
    return enclosing(node, BLOCK_KINDS | FUNCTION_KINDS)


def _parameter_nodes(function: Node) -> list[Node]:
    single = function.child_by_field("parameter")
    if single is not None:
        return [single]
    params = function.child_by_field("parameters")
    return params.named_children if params is not None else []


def _access(identifier: Node) -> tuple[bool, bool]:
    """(read, write) for a reference, looking through destructuring targets."""
    child, parent = identifier, identifier.parent
    while parent is not None and parent.kind in PATTERN_KINDS:
        if parent.kind in ("assignment_pattern", "object_assignment_pattern") and child.field != "left":
            return True, False
        child, parent = parent, parent.parent
    if parent is None:
        return True, False
    if parent.kind == "assignment_expression" and child.field == "left":
        return False, True
    if parent.kind == "for_in_statement" and child.field == "left":
        return False, True
    if parent.kind == "augmented_assignment_expression" and child.field == "left":
        return True, True
    if parent.kind == "update_expression":
        return True, True
    return True, False


class ScopeAnalysis:
    """Declarations and resolved references of one SourceModel."""

    def __init__(self, model: SourceModel) -> None:
        self._model = model
        self.variables: list[Variable] = []
        self.unresolved: list[Reference] = []
        self._scopes: dict[Node, dict[str, Variable]] = {}
        self._declared_by: dict[Node, Variable] = {}
        self._resolved: dict[Node, Variable] = {}
        for node in model.root.walk():
            self._collect(node)
        for node in model.root.walk():
            if node.kind in _REFERENCE_KINDS and node not in self._declared_by and self._is_reference(node):
                self._resolve(node)
        logger.debug(
            "Scopes of %s: %d variable(s), %d global reference(s)",
            model.path,
            len(self.variables),
            len(self.unresolved),
        )

    def variable_of(self, identifier: Node) -> Optional[Variable]:
        """The variable an identifier declares or refers to, if any."""
        return self._declared_by.get(identifier) or self._resolved.get(identifier)

    def variables_in(self, scope: Node) -> list[Variable]:
        return list(self._scopes.get(scope, {}).values())

    def globals(self) -> Iterator[tuple[str, Reference]]:
        for ref in self.unresolved:
            yield self._model.text_of(ref.identifier), ref

    def _declare(self, identifier: Node, kind: str, scope: Node) -> None:
        name = self._model.text_of(identifier)
        names = self._scopes.setdefault(scope, {})
        variable = names.get(name)
        if variable is None:
            variable = Variable(name=name, kind=kind, scope=scope)
            names[name] = variable
            self.variables.append(variable)
        variable.identifiers.append(identifier)
        self._declared_by[identifier] = variable

    def _declare_pattern(self, target: Optional[Node], kind: str, scope: Node) -> None:
        for identifier in pattern_identifiers(target):
            self._declare(identifier, kind, scope)

    def _collect(self, node: Node) -> None:
        kind = node.kind
        if kind == "variable_declaration":
            scope = function_scope_of(node)
            for declarator in node.named_children:
                if declarator.kind == "variable_declarator":
                    self._declare_pattern(declarator.child_by_field("name"), "var", scope)
        elif kind == "lexical_declaration":
            keyword = declaration_keyword(node)
            scope = block_scope_of(node)
            for declarator in node.named_children:
                if declarator.kind == "variable_declarator":
                    self._declare_pattern(
                        declarator.child_by_field("name"),
                        keyword.kind if keyword is not None else "let",
                        scope,
                    )
        elif kind == "for_in_statement":
            keyword = declaration_keyword(node)
            if keyword is not None:
                scope = function_scope_of(node) if keyword.kind == "var" else node
                self._declare_pattern(node.child_by_field("left"), keyword.kind, scope)
        elif kind in FUNCTION_KINDS:
            name = node.child_by_field("name")
            if name is not None and kind != "method_definition":
                if kind.endswith("_declaration"):
                    self._declare(name, "function", block_scope_of(node))
                else:
                    self._declare(name, "function", node)
            for param in _parameter_nodes(node):
                self._declare_pattern(param, "param", node)
        elif kind in ("class_declaration", "class"):
            name = node.child_by_field("name")
            if name is not None:
                self._declare(name, "class", block_scope_of(node) if kind == "class_declaration" else node)
        elif kind == "catch_clause":
            self._declare_pattern(node.child_by_field("parameter"), "catch", node)
        elif kind == "import_specifier":
            self._declare(node.child_by_field("alias") or node.child_by_field("name"), "import", self._model.root)
        elif kind in ("import_clause", "namespace_import"):
            for child in node.named_children:
                if child.kind == "identifier":
                    self._declare(child, "import", self._model.root)

    def _is_reference(self, node: Node) -> bool:
        parent = node.parent
        if parent is None:
            return False
        if parent.kind == "import_specifier" or parent.kind == "namespace_export":
            return False
        if parent.kind == "export_specifier":
            statement = parent.parent.parent if parent.parent is not None else None
            if node.field == "alias" or (statement is not None and statement.child_by_field("source") is not None):
                return False
        if parent.kind in _JSX_NAME_PARENTS:
            # <div> is an intrinsic element; <Widget> reads a variable
            return parent.kind != "jsx_closing_element" and self._model.text_of(node)[:1].isupper()
        if parent.kind in ("labeled_statement", "break_statement", "continue_statement"):
            return False
        return True

    def _resolve(self, identifier: Node) -> None:
        read, write = _access(identifier)
        ref = Reference(identifier=identifier, read=read, write=write)
        name = self._model.text_of(identifier)
        for ancestor in identifier.ancestors():
            variable = self._scopes.get(ancestor, {}).get(name)
            if variable is not None:
                variable.references.append(ref)
                self._resolved[identifier] = variable
                return
        self.unresolved.append(ref)
