# no-restricted-globals: flag reads of configured global variables.

from __future__ import annotations

from typing import Iterator, Optional

from pydantic import BaseModel

from lintkit.context import Node
from lintkit.findings.models import Finding
from lintkit.rules.base import Rule, RuleContext

# Browser globals that are easy to use by accident in place of a local
# (the confusing-browser-globals list).
CONFUSING_BROWSER_GLOBALS: tuple[str, ...] = (
    "addEventListener",
    "blur",
    "close",
    "closed",
    "confirm",
    "defaultStatus",
    "defaultstatus",
    "event",
    "external",
    "find",
    "focus",
    "frameElement",
    "frames",
    "history",
    "innerHeight",
    "innerWidth",
    "length",
    "location",
    "locationbar",
    "menubar",
    "moveBy",
    "moveTo",
    "name",
    "onblur",
    "onerror",
    "onfocus",
    "onload",
    "onresize",
    "onunload",
    "open",
    "opener",
    "opera",
    "outerHeight",
    "outerWidth",
    "pageXOffset",
    "pageYOffset",
    "parent",
    "print",
    "removeEventListener",
    "resizeBy",
    "resizeTo",
    "screen",
    "screenLeft",
    "screenTop",
    "screenX",
    "screenY",
    "scroll",
    "scrollbars",
    "scrollBy",
    "scrollTo",
    "scrollX",
    "scrollY",
    "self",
    "status",
    "statusbar",
    "stop",
    "toolbar",
    "top",
)


class RestrictedGlobal(BaseModel):
    name: str
    message: Optional[str] = None

    model_config = {"frozen": True}


class NoRestrictedGlobalsOptions(BaseModel):
    globals: tuple[RestrictedGlobal, ...] = ()

    model_config = {"frozen": True}


class NoRestrictedGlobalsRule(Rule):
    """Disallow specified global variables."""

    id = "no-restricted-globals"
    name = "Restricted globals"
    description = "Some browser globals shadow a local the code almost certainly meant, such as a handler's event."
    options_model = NoRestrictedGlobalsOptions

    def coerce_options(self, raw):
        # ESLint shapes: "event", ["event", {"name": "fdescribe", "message": "..."}]
        if isinstance(raw, (str, dict)) and not (isinstance(raw, dict) and "globals" in raw):
            raw = [raw]
        if isinstance(raw, (list, tuple)):
            raw = {"globals": [{"name": item} if isinstance(item, str) else item for item in raw]}
        return super().coerce_options(raw)

    def visitors(self):
        return {"program:exit": self.check}

    def check(self, node: Node, ctx: RuleContext) -> Iterator[Finding]:
        restricted = {g.name: g for g in ctx.options.globals} if ctx.options is not None else {}
        if not restricted:
            return
        for name, ref in ctx.scopes.globals():
            entry = restricted.get(name)
            if entry is None:
                continue
            message = f"Unexpected use of '{name}'."
            if entry.message:
                message = f"{message} {entry.message}"
            yield ctx.finding(ref.identifier, message)
