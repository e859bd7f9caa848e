# Error taxonomy: parse, config, rule and fix-conflict failures.
# Only ConfigError and ParseError are raised across module boundaries; rule
# failures and fix conflicts are turned into report data by the engine.

from __future__ import annotations

from typing import Any, Sequence


class LintError(Exception):
    """Base class for every error raised by lintkit."""


class ConfigError(LintError):
    """Invalid configuration: unknown rule, bad severity, or bad options."""


class ParseError(LintError):
    """
    Source could not be parsed (or read) well enough to lint.

    Carries the 1-based position of the first problem so the linter can turn
    it into a single fatal finding.
    """

    def __init__(self, message: str, line: int = 1, column: int = 1, offset: int = 0) -> None:
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column
        self.offset = offset


class RuleError(LintError):
    """A rule handler raised or returned something that is not a finding."""

    def __init__(self, rule_id: str, node_kind: str, cause: BaseException | str) -> None:
        self.rule_id = rule_id
        self.node_kind = node_kind
        self.cause = cause
        if isinstance(cause, BaseException):
            detail = f"{type(cause).__name__}: {cause}"
        else:
            detail = cause
        super().__init__(f"Rule '{rule_id}' failed on {node_kind} node: {detail}")


class FixConflictError(LintError):
    """Raised by strict fix application when some fixes could not be applied."""

    def __init__(self, conflicts: Sequence[Any]) -> None:
        self.conflicts = list(conflicts)
        super().__init__(f"{len(self.conflicts)} fix(es) skipped due to overlapping edits")
