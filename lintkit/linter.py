"""
Run orchestration: parse, traverse, aggregate and optionally fix files.

A file goes through Parsing -> Traversing -> Aggregating -> (Fixing ->)
Reporting. A ParseError ends that file's run with one fatal finding; every
other problem (rule errors, fix conflicts) is carried as report data. Files
are independent, so Linter.run() fans them out over a thread pool; the
registry is frozen and only read.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional

from lintkit.config import Config, get_default_config
from lintkit.context import create_context
from lintkit.errors import ParseError
from lintkit.findings.aggregate import aggregate, canonical_order
from lintkit.findings.models import PARSE_ERROR_RULE_ID, Finding, FixConflict, Report, Severity, Span
from lintkit.fixer import apply_fixes
from lintkit.parser import create_parser
from lintkit.rules.registry import RuleRegistry
from lintkit.walker import TraversalEngine

logger = logging.getLogger(__name__)


class RunState(str, Enum):
    IDLE = "idle"
    PARSING = "parsing"
    TRAVERSING = "traversing"
    AGGREGATING = "aggregating"
    FIXING = "fixing"
    REPORTING = "reporting"
    FAILED = "failed"


@dataclass
class FileResult:
    """Outcome of linting (and maybe fixing) one file."""

    path: Path
    findings: list[Finding] = field(default_factory=list)
    source: Optional[str] = None
    output: Optional[str] = None
    applied_count: int = 0
    conflicts: list[FixConflict] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.output is not None and self.output != self.source


def parse_error_finding(path: Path, error: ParseError) -> Finding:
    return Finding(
        rule_id=PARSE_ERROR_RULE_ID,
        severity=Severity.ERROR,
        message=error.message,
        path=path,
        span=Span(start=error.offset, end=error.offset, line=error.line, column=error.column),
        fatal=True,
    )


class Linter:
    """
    Lints source text or files against one frozen RuleRegistry.

    The registry is frozen on construction; build a new Linter (and registry)
    for a different configuration.
    """

    def __init__(self, registry: RuleRegistry, config: Optional[Config] = None) -> None:
        self.registry = registry.freeze()
        self.config = config if config is not None else get_default_config()
        self._active = registry.active_rules()
        self._engine = TraversalEngine()

    def _transition(self, path: Path, state: RunState) -> None:
        logger.debug("%s: %s", path, state.value)

    def lint_source(self, text: str, path: Path = Path("<text>"), parser=None) -> list[Finding]:
        """Lint in-memory source; returns findings in canonical order."""
        self._transition(path, RunState.PARSING)
        try:
            model = create_context(path, source=text.encode("utf-8"), parser=parser)
        except ParseError as e:
            self._transition(path, RunState.FAILED)
            logger.warning("%s: %s (line %d, column %d)", path, e.message, e.line, e.column)
            return [parse_error_finding(path, e)]

        self._transition(path, RunState.TRAVERSING)
        findings = self._engine.run(model, self._active)
        self._transition(path, RunState.AGGREGATING)
        return canonical_order(findings)

    def fix_source(self, text: str, path: Path = Path("<text>"), parser=None) -> FileResult:
        """
        Lint, apply fixes, re-lint; repeated up to config.fix_passes times.

        Stops early once a pass applies nothing. A pass whose output no longer
        parses is discarded.
        """
        findings = self.lint_source(text, path, parser)
        result = FileResult(path=path, findings=findings, source=text, output=text)
        for number in range(1, self.config.fix_passes + 1):
            self._transition(path, RunState.FIXING)
            fixed = apply_fixes(result.output, result.findings)
            if fixed.applied_count == 0:
                result.conflicts = fixed.skipped
                break
            refreshed = self.lint_source(fixed.output, path, parser)
            if any(f.fatal for f in refreshed):
                logger.warning("%s: fix pass %d produced unparsable output; discarded", path, number)
                break
            result.output = fixed.output
            result.findings = refreshed
            result.conflicts = fixed.skipped
            result.applied_count += fixed.applied_count
            logger.info("%s: pass %d applied %d fix(es)", path, number, fixed.applied_count)
        self._transition(path, RunState.REPORTING)
        return result

    def lint_file(self, path: Path, *, fix: bool = False) -> FileResult:
        """Read, lint and (with fix=True) rewrite one file."""
        parser = create_parser()
        try:
            text = path.read_bytes().decode("utf-8")
        except OSError as e:
            logger.error("Failed to read file %s: %s", path, e)
            error = ParseError(f"Cannot read file: {e.strerror or e}")
            return FileResult(path=path, findings=[parse_error_finding(path, error)])
        except UnicodeDecodeError as e:
            error = ParseError("Parsing error: file is not valid UTF-8", offset=e.start)
            return FileResult(path=path, findings=[parse_error_finding(path, error)])

        if not fix:
            findings = self.lint_source(text, path, parser)
            self._transition(path, RunState.REPORTING)
            return FileResult(path=path, findings=findings, source=text)

        result = self.fix_source(text, path, parser)
        if result.changed:
            path.write_text(result.output, encoding="utf-8")
            logger.info("Wrote %d fix(es) to %s", result.applied_count, path)
        return result

    def run(
        self,
        paths: Iterable[Path],
        *,
        fix: bool = False,
        cancel: Optional[threading.Event] = None,
    ) -> Report:
        """
        Lint many files, in parallel when config.jobs > 1.

        cancel is checked before each file starts; files not started when it
        is set are skipped and the report is marked cancelled.
        """
        unique = list(dict.fromkeys(paths))

        def _task(path: Path) -> Optional[FileResult]:
            if cancel is not None and cancel.is_set():
                return None
            return self.lint_file(path, fix=fix)

        if self.config.jobs == 1:
            results = [_task(p) for p in unique]
        else:
            with ThreadPoolExecutor(max_workers=self.config.jobs) as pool:
                results = list(pool.map(_task, unique))

        done = [r for r in results if r is not None]
        cancelled = len(done) < len(unique)
        if cancelled:
            logger.warning("Run cancelled: %d of %d file(s) skipped", len(unique) - len(done), len(unique))
        return aggregate(
            (r.findings for r in done),
            files=[r.path for r in done],
            conflicts=[c for r in done for c in r.conflicts],
            fixed_count=sum(r.applied_count for r in done),
            cancelled=cancelled,
        )
