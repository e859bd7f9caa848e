"""
Fix application: choose a non-overlapping subset of fixes and apply them.

Findings are walked in canonical report order. For each finding the first
candidate fix that does not overlap an already chosen fix wins; a finding
whose candidates all overlap is recorded as a FixConflict. The chosen edits
are applied right to left so earlier byte offsets stay valid.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from lintkit.errors import FixConflictError
from lintkit.findings.aggregate import canonical_order
from lintkit.findings.models import Finding, Fix, FixConflict

logger = logging.getLogger(__name__)


@dataclass
class FixResult:
    output: str
    applied: list[Fix] = field(default_factory=list)
    skipped: list[FixConflict] = field(default_factory=list)

    @property
    def applied_count(self) -> int:
        return len(self.applied)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)


def select_fixes(findings: Iterable[Finding]) -> tuple[list[Fix], list[FixConflict]]:
    """Pick the first applicable fix of each finding, in canonical order."""
    chosen: list[tuple[Fix, Finding]] = []
    conflicts: list[FixConflict] = []
    for finding in canonical_order(findings):
        if not finding.fixes:
            continue
        blocker = None
        for candidate in finding.fixes:
            blocker = next((owner for fix, owner in chosen if fix.span.overlaps(candidate.span)), None)
            if blocker is None:
                chosen.append((candidate, finding))
                break
        if blocker is not None:
            conflicts.append(
                FixConflict(
                    rule_id=finding.rule_id,
                    path=finding.path,
                    span=finding.span,
                    blocked_by=blocker.rule_id,
                    blocked_span=blocker.span,
                    message=(
                        f"Fix for '{finding.rule_id}' skipped: overlaps fix for "
                        f"'{blocker.rule_id}' at {blocker.span.line}:{blocker.span.column}"
                    ),
                )
            )
    return [fix for fix, _ in chosen], conflicts


def apply_fixes(source_text: str, findings: Iterable[Finding], *, strict: bool = False) -> FixResult:
    """
    Apply every non-conflicting fix to source_text in one pass.

    Offsets in fixes are UTF-8 byte offsets into source_text. With strict=True
    a conflict raises FixConflictError instead of being reported.
    """
    selected, skipped = select_fixes(findings)
    if strict and skipped:
        raise FixConflictError(skipped)

    buffer = bytearray(source_text.encode("utf-8"))
    for fix in sorted(selected, key=lambda f: (f.span.start, f.span.end), reverse=True):
        buffer[fix.span.start : fix.span.end] = fix.text.encode("utf-8")

    for conflict in skipped:
        logger.debug("%s", conflict.message)
    logger.debug("Applied %d fix(es), skipped %d", len(selected), len(skipped))
    return FixResult(output=buffer.decode("utf-8"), applied=selected, skipped=skipped)
