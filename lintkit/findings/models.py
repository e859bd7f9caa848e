# Pydantic data models for lint results: Severity, Span, Fix, Finding, Report.

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

PARSE_ERROR_RULE_ID = "parse-error"


class Severity(str, Enum):
    """Configured importance of a rule; `off` rules never run."""

    OFF = "off"
    WARN = "warn"
    ERROR = "error"


class Span(BaseModel):
    """
    A contiguous source range.

    start/end are UTF-8 byte offsets (end exclusive). line/column are 1-based
    and count characters, for display.
    """

    start: int = Field(..., ge=0)
    end: int = Field(..., ge=0)
    line: int = Field(1, ge=1, description="1-based line number")
    column: int = Field(1, ge=1, description="1-based column number")
    end_line: Optional[int] = Field(None, ge=1)
    end_column: Optional[int] = Field(None, ge=1)

    model_config = {"frozen": True}

    def contains(self, other: Span) -> bool:
        return self.start <= other.start and other.end <= self.end

    def overlaps(self, other: Span) -> bool:
        """True if the spans share a byte, or both start at the same offset."""
        if self.start == other.start:
            return True
        return self.start < other.end and other.start < self.end


class Fix(BaseModel):
    """Replace the bytes covered by span with text."""

    span: Span
    text: str

    model_config = {"frozen": True}


class Finding(BaseModel):
    """A single issue reported by a rule (or by the engine itself)."""

    rule_id: str
    severity: Severity
    message: str
    path: Path
    span: Span
    fixes: tuple[Fix, ...] = ()
    node_kind: Optional[str] = None
    fatal: bool = False

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @property
    def line(self) -> int:
        return self.span.line

    @property
    def column(self) -> int:
        return self.span.column

    @property
    def fixable(self) -> bool:
        return bool(self.fixes)


class FixConflict(BaseModel):
    """A fix that was skipped because an earlier fix already claimed its range."""

    rule_id: str
    path: Path
    span: Span
    blocked_by: str
    blocked_span: Span
    message: str

    model_config = {"frozen": True, "arbitrary_types_allowed": True}


class Summary(BaseModel):
    error_count: int = 0
    warn_count: int = 0
    fixable_count: int = 0


class Report(BaseModel):
    """Canonically ordered findings of a run plus summary counts."""

    findings: list[Finding] = Field(default_factory=list)
    summary: Summary = Field(default_factory=Summary)
    files: list[Path] = Field(default_factory=list)
    conflicts: list[FixConflict] = Field(default_factory=list)
    fixed_count: int = 0
    cancelled: bool = False

    model_config = {"arbitrary_types_allowed": True}

    @property
    def has_errors(self) -> bool:
        return self.summary.error_count > 0

    @property
    def exit_code(self) -> int:
        """0 when no error-severity finding exists, 1 otherwise."""
        return 1 if self.has_errors else 0
