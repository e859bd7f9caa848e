# Rule interface (abstract base class): defines the contract all rules must implement.
# Concrete rules (no_var, eqeqeq, etc.) subclass Rule and declare the node kinds
# they visit; the traversal engine only calls the handlers a rule declares.

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, ValidationError

from lintkit.context import Node, SourceModel
from lintkit.errors import ConfigError
from lintkit.findings.models import Finding, Fix, Severity, Span
from lintkit.scope import ScopeAnalysis

Visitor = Callable[[Node, "RuleContext"], Optional[Iterable[Finding]]]

EXIT_SUFFIX = ":exit"
ANY_KIND = "*"


class Rule(ABC):
    """
    Abstract base class for all lint rules.

    Subclasses must define:
    - id: str, unique rule identifier (e.g. "no-var")
    - name: str, human-readable rule name
    - visitors() -> mapping of node kind to handler

    A handler receives (node, context) and yields Findings built with
    context.finding(). Keys ending in ":exit" run after the node's children;
    "*" matches every node. Rules hold no per-file state.
    """

    id: str
    name: str
    description: str = ""
    fixable: bool = False
    options_model: Optional[type[BaseModel]] = None

    def validate_options(self, raw: Any) -> Optional[BaseModel]:
        """
        Validate raw configuration against options_model.

        Raises ConfigError if the rule takes no options but some were given,
        or if they fail validation.
        """
        if self.options_model is None:
            if raw not in (None, {}, [], ()):
                raise ConfigError(f"Rule '{self.id}' does not accept options, got {raw!r}")
            return None
        try:
            return self.options_model.model_validate(self.coerce_options(raw))
        except ValidationError as e:
            raise ConfigError(f"Invalid options for rule '{self.id}': {e}") from e

    def coerce_options(self, raw: Any) -> Any:
        """Turn ESLint-style shorthand (e.g. a bare string) into a mapping."""
        return {} if raw is None else raw

    @abstractmethod
    def visitors(self) -> Mapping[str, Visitor]:
        """Return node kind -> handler for every node kind this rule inspects."""
        ...


@dataclass(frozen=True)
class ActiveRule:
    """A registered rule with its configured (non-off) severity and options."""

    rule: Rule
    severity: Severity
    options: Optional[BaseModel] = None

    @property
    def id(self) -> str:
        return self.rule.id


class RuleContext:
    """
    What a handler may read while visiting: the file's SourceModel, the rule's
    configured severity and options, plus builders for findings and fixes.
    """

    def __init__(self, model: SourceModel, active: ActiveRule) -> None:
        self.model = model
        self.rule_id = active.id
        self.severity = active.severity
        self.options = active.options

    @property
    def path(self):
        return self.model.path

    @property
    def scopes(self) -> ScopeAnalysis:
        return self.model.scopes

    def text(self, target: Union[Node, Span]) -> str:
        return self.model.text_of(target)

    def finding(self, node: Node, message: str, fixes: Sequence[Fix] = ()) -> Finding:
        """
        Build a Finding for node.

        Every fix must lie within the node's span; a handler that breaks that
        raises ValueError, which the engine reports as a rule error.
        """
        for fix in fixes:
            if not node.span.contains(fix.span):
                raise ValueError(
                    f"fix range {fix.span.start}..{fix.span.end} is outside "
                    f"{node.kind} {node.span.start}..{node.span.end}"
                )
        return Finding(
            rule_id=self.rule_id,
            severity=self.severity,
            message=message,
            path=self.model.path,
            span=node.span,
            fixes=tuple(fixes),
            node_kind=node.kind,
        )

    def replace(self, target: Union[Node, Span], text: str) -> Fix:
        span = target.span if isinstance(target, Node) else target
        return Fix(span=span, text=text)

    def replace_range(self, start: int, end: int, text: str) -> Fix:
        return Fix(span=self.model.span_between(start, end), text=text)

    def insert_after(self, node: Node, text: str) -> Fix:
        end = node.span.end
        return self.replace_range(end, end, text)

    def remove(self, target: Union[Node, Span]) -> Fix:
        return self.replace(target, "")
