# Rich console output: format a lint Report for terminal display.

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from lintkit.findings.models import Finding, Report
from lintkit.rules.base import Rule

# Severity → Rich style
SEVERITY_STYLE = {
    "error": "bold red",
    "warn": "bold yellow",
}

DEFAULT_SEVERITY_STYLE = "bold white"


def _severity_style(severity: str) -> str:
    return SEVERITY_STYLE.get(severity.lower(), DEFAULT_SEVERITY_STYLE)


def _display_path(path: str | Path) -> str:
    """Path relative to the working directory when possible."""
    path = Path(path)
    try:
        return path.relative_to(Path.cwd()).as_posix()
    except ValueError:
        return path.as_posix()


def print_report(
    report: Report,
    console: Optional[Console] = None,
    verbose: bool = False,
    catalog: Optional[Mapping[str, Rule]] = None,
) -> None:
    """
    Print a Report grouped by file, coloured by severity, with a summary.

    With verbose, also show each reported rule's description (from catalog)
    and every fix that was skipped because of an overlapping fix.
    """
    console = console or Console()

    if not report.findings:
        console.print(
            Panel(
                f"[green]No problems found in {len(report.files)} file(s).[/green]",
                title="lintkit",
                border_style="green",
                box=box.ROUNDED,
            )
        )
        _print_fix_summary(report, console)
        return

    by_file: dict[str, list[Finding]] = {}
    for f in report.findings:
        by_file.setdefault(f.path.as_posix(), []).append(f)

    # findings are already in canonical order; keep it
    for path, file_findings in by_file.items():
        console.print()
        console.print(Panel(
            f"[bold cyan]{_display_path(path)}[/bold cyan]",
            box=box.SIMPLE_HEAD,
            border_style="blue",
            padding=(0, 1),
        ))

        table = Table(
            show_header=True,
            header_style="bold magenta",
            box=box.SIMPLE,
            padding=(0, 1),
            expand=False,
        )
        table.add_column("Line", justify="right", style="dim", width=5)
        table.add_column("Col", justify="right", style="dim", width=4)
        table.add_column("Severity", width=8)
        table.add_column("Rule", width=30)
        table.add_column("Message", style="white")

        for f in file_findings:
            rule = Text(f"[{f.rule_id}]", style="dim")
            if f.fixable:
                rule.append(" *", style="green")
            table.add_row(
                str(f.line),
                str(f.column),
                Text(f.severity.value.upper(), style=_severity_style(f.severity.value)),
                rule,
                f.message,
            )
        console.print(table)

        if verbose and catalog:
            seen_rules: set[str] = set()
            for f in file_findings:
                rule_def = catalog.get(f.rule_id)
                if f.rule_id in seen_rules or rule_def is None or not rule_def.description:
                    continue
                seen_rules.add(f.rule_id)
                console.print(f"  [dim]\\[{f.rule_id}][/dim] {rule_def.description}")
            if seen_rules:
                console.print()

    if verbose and report.conflicts:
        console.print()
        for conflict in report.conflicts:
            console.print(
                f"  [yellow]skipped fix[/yellow] {_display_path(conflict.path)}:"
                f"{conflict.span.line}:{conflict.span.column} {conflict.message}"
            )

    _print_fix_summary(report, console)
    _print_summary(report, console)


def _print_fix_summary(report: Report, console: Console) -> None:
    if report.fixed_count or report.conflicts:
        console.print(
            f"[green]{report.fixed_count} fix(es) applied[/green]"
            + (f", [yellow]{len(report.conflicts)} skipped[/yellow]" if report.conflicts else "")
        )


def _print_summary(report: Report, console: Console) -> None:
    """Print a compact summary of findings."""
    summary = report.summary
    total = len(report.findings)
    summary_parts = [f"[bold]{total} problem{'s' if total != 1 else ''}[/bold]"]
    summary_parts.append(f"[{_severity_style('error')}]{summary.error_count} error[/]")
    summary_parts.append(f"[{_severity_style('warn')}]{summary.warn_count} warning[/]")
    if summary.fixable_count:
        summary_parts.append(f"[green]{summary.fixable_count} fixable with --fix[/green]")
    if report.cancelled:
        summary_parts.append("[red]cancelled[/red]")

    console.print()
    console.print(
        Panel(
            " | ".join(summary_parts),
            title="Summary",
            border_style="red" if summary.error_count else "yellow",
            box=box.ROUNDED,
        )
    )
