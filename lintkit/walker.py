"""
Traversal engine: one depth-first walk of a SourceModel, dispatching each node
to the handlers of every active rule.

Every node gets an enter phase (pre-order) and an exit phase (post-order).
Within a phase, handlers run in rule registration order. A handler that raises
is reported as a rule-error finding and its rule is switched off for the rest
of the file; all other rules carry on.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Callable, Optional, Sequence

from lintkit.context import Node, SourceModel
from lintkit.errors import RuleError
from lintkit.findings.models import Finding, Severity
from lintkit.rules.base import ANY_KIND, EXIT_SUFFIX, ActiveRule, RuleContext, Visitor

logger = logging.getLogger(__name__)

_Handler = tuple[int, RuleContext, Visitor]
VisitHook = Callable[[Node, bool], None]


class TraversalEngine:
    """
    Runs a set of active rules over one SourceModel.

    An instance holds no state between runs; use one per file or share it,
    either way run() only touches locals.
    """

    def __init__(self, on_visit: Optional[VisitHook] = None) -> None:
        # on_visit(node, exiting) is called once per node per phase; tests use it
        self._on_visit = on_visit

    def run(self, model: SourceModel, active_rules: Sequence[ActiveRule]) -> list[Finding]:
        enter, leave, any_enter, any_leave = self._build_dispatch(model, active_rules)
        failed: set[int] = set()
        findings: list[Finding] = []

        stack: list[tuple[Node, bool]] = [(model.root, False)]
        while stack:
            node, exiting = stack.pop()
            if self._on_visit is not None:
                self._on_visit(node, exiting)
            if exiting:
                table, wildcard = leave, any_leave
            else:
                table, wildcard = enter, any_enter
                stack.append((node, True))
                stack.extend((child, False) for child in reversed(node.children))

            handlers = table.get(node.kind)
            if wildcard:
                handlers = sorted((handlers or []) + wildcard, key=lambda h: h[0])
            if not handlers:
                continue
            for order, ctx, handler in handlers:
                if order in failed:
                    continue
                try:
                    findings.extend(self._call(handler, node, ctx))
                except Exception as exc:
                    failed.add(order)
                    findings.append(self._rule_error(ctx, node, exc))

        logger.debug(
            "Traversal of %s done: %d finding(s), %d failed rule(s)",
            model.path,
            len(findings),
            len(failed),
        )
        return findings

    def _build_dispatch(self, model: SourceModel, active_rules: Sequence[ActiveRule]):
        enter: dict[str, list[_Handler]] = defaultdict(list)
        leave: dict[str, list[_Handler]] = defaultdict(list)
        any_enter: list[_Handler] = []
        any_leave: list[_Handler] = []
        for order, active in enumerate(active_rules):
            ctx = RuleContext(model, active)
            for key, handler in active.rule.visitors().items():
                exiting = key.endswith(EXIT_SUFFIX)
                kind = key[: -len(EXIT_SUFFIX)] if exiting else key
                entry = (order, ctx, handler)
                if kind == ANY_KIND:
                    (any_leave if exiting else any_enter).append(entry)
                else:
                    (leave if exiting else enter)[kind].append(entry)
        for table in (enter, leave):
            for handlers in table.values():
                handlers.sort(key=lambda h: h[0])
        return enter, leave, any_enter, any_leave

    @staticmethod
    def _call(handler: Visitor, node: Node, ctx: RuleContext) -> list[Finding]:
        produced = handler(node, ctx)
        if produced is None:
            return []
        results = []
        for item in produced:
            if not isinstance(item, Finding):
                raise RuleError(ctx.rule_id, node.kind, f"handler produced {type(item).__name__}, not a Finding")
            if item.severity is not ctx.severity:
                item = item.model_copy(update={"severity": ctx.severity})
            results.append(item)
        return results

    @staticmethod
    def _rule_error(ctx: RuleContext, node: Node, exc: Exception) -> Finding:
        error = exc if isinstance(exc, RuleError) else RuleError(ctx.rule_id, node.kind, exc)
        logger.warning("%s (%s:%d:%d)", error, ctx.path, node.span.line, node.span.column)
        return Finding(
            rule_id=ctx.rule_id,
            severity=Severity.ERROR,
            message=str(error),
            path=ctx.path,
            span=node.span,
            node_kind=node.kind,
        )
