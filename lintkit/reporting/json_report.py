# JSON output for other tools: flat finding records plus summary counts, camelCase keys.

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from lintkit.findings.models import Report


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class FindingRecord(_CamelModel):
    file: str
    line: int
    column: int
    rule_id: str
    severity: str
    message: str
    fixable: bool = False
    fatal: bool = False


class SummaryRecord(_CamelModel):
    error_count: int
    warn_count: int
    fixable_count: int


class ConflictRecord(_CamelModel):
    file: str
    line: int
    column: int
    rule_id: str
    blocked_by: str
    message: str


class ReportRecord(_CamelModel):
    results: list[FindingRecord]
    summary: SummaryRecord
    conflicts: list[ConflictRecord] = []
    fixed_count: int = 0
    cancelled: bool = False


def to_record(report: Report) -> ReportRecord:
    return ReportRecord(
        results=[
            FindingRecord(
                file=f.path.as_posix(),
                line=f.line,
                column=f.column,
                rule_id=f.rule_id,
                severity=f.severity.value,
                message=f.message,
                fixable=f.fixable,
                fatal=f.fatal,
            )
            for f in report.findings
        ],
        summary=SummaryRecord(**report.summary.model_dump()),
        conflicts=[
            ConflictRecord(
                file=c.path.as_posix(),
                line=c.span.line,
                column=c.span.column,
                rule_id=c.rule_id,
                blocked_by=c.blocked_by,
                message=c.message,
            )
            for c in report.conflicts
        ],
        fixed_count=report.fixed_count,
        cancelled=report.cancelled,
    )


def render_json(report: Report, indent: Optional[int] = 2) -> str:
    """Serialize report; identical reports give byte-identical output."""
    return to_record(report).model_dump_json(by_alias=True, indent=indent)
