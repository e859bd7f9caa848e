# Finding aggregation: canonical ordering and summary counts for a Report.

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Sequence

from lintkit.findings.models import Finding, FixConflict, Report, Severity, Summary

logger = logging.getLogger(__name__)


def canonical_key(finding: Finding) -> tuple[str, int, str]:
    """File, then source offset, then rule id."""
    return (finding.path.as_posix(), finding.span.start, finding.rule_id)


def canonical_order(findings: Iterable[Finding]) -> list[Finding]:
    """Sort findings into report order; ties keep their emission order."""
    return sorted(findings, key=canonical_key)


def summarize(findings: Sequence[Finding]) -> Summary:
    summary = Summary()
    for f in findings:
        if f.severity is Severity.ERROR:
            summary.error_count += 1
        elif f.severity is Severity.WARN:
            summary.warn_count += 1
        if f.fixable:
            summary.fixable_count += 1
    return summary


def aggregate(
    finding_streams: Iterable[Iterable[Finding]],
    *,
    files: Sequence[Path] = (),
    conflicts: Sequence[FixConflict] = (),
    fixed_count: int = 0,
    cancelled: bool = False,
) -> Report:
    """
    Merge findings from one or more traversal runs into a Report.

    Findings are never merged or deduplicated: two rules flagging the same
    span are two findings and both count.
    """
    collected: list[Finding] = []
    for stream in finding_streams:
        collected.extend(stream)
    ordered = canonical_order(collected)
    summary = summarize(ordered)
    logger.info(
        "Aggregated %d finding(s) across %d file(s): %d error(s), %d warning(s), %d fixable",
        len(ordered),
        len(files),
        summary.error_count,
        summary.warn_count,
        summary.fixable_count,
    )
    return Report(
        findings=ordered,
        summary=summary,
        files=sorted(files, key=lambda p: p.as_posix()),
        conflicts=sorted(conflicts, key=lambda c: (c.path.as_posix(), c.span.start, c.rule_id)),
        fixed_count=fixed_count,
        cancelled=cancelled,
    )
