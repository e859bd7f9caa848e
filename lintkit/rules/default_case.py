# default-case: require a default case in switch statements.

from __future__ import annotations

import re
from typing import Iterator

from pydantic import BaseModel, field_validator

from lintkit.context import Node
from lintkit.findings.models import Finding
from lintkit.rules.base import Rule, RuleContext


class DefaultCaseOptions(BaseModel):
    # a trailing comment matching this marks the missing default as intentional
    comment_pattern: str = "^no default$"

    model_config = {"frozen": True}

    @field_validator("comment_pattern")
    @classmethod
    def _compiles(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"invalid regular expression: {e}") from e
        return value


def _comment_body(text: str) -> str:
    if text.startswith("//"):
        return text[2:].strip()
    if text.startswith("/*") and text.endswith("*/"):
        return text[2:-2].strip()
    return text.strip()


class DefaultCaseRule(Rule):
    id = "default-case"
    name = "Require default case"
    description = "A switch without default silently ignores unexpected values."
    options_model = DefaultCaseOptions

    def coerce_options(self, raw):
        if isinstance(raw, dict) and "commentPattern" in raw:
            raw = {"comment_pattern": raw["commentPattern"]}
        return super().coerce_options(raw)

    def visitors(self):
        return {"switch_statement": self.check}

    def check(self, node: Node, ctx: RuleContext) -> Iterator[Finding]:
        body = node.child_by_field("body")
        if body is None:
            return
        cases = [c for c in body.named_children if c.kind in ("switch_case", "switch_default")]
        if not cases or any(c.kind == "switch_default" for c in cases):
            return

        pattern = ctx.options.comment_pattern if ctx.options is not None else "^no default$"
        comments = [t for t in body.walk() if t.kind == "comment" and t.span.start >= cases[-1].span.start]
        if comments and re.search(pattern, _comment_body(ctx.text(comments[-1])), re.IGNORECASE):
            return
        yield ctx.finding(node, "Expected a default case.")
