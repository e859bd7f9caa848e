from __future__ import annotations

"""
Typer CLI entry point.

    lintkit lint src/ index.js            # report problems
    lintkit lint src/ --fix               # apply fixes, report what remains
    lintkit lint src/ --rule no-var=error --format json
    lintkit rules                         # list built-in rules

Exit codes: 0 when no error-severity finding exists, 1 otherwise, 2 for an
invalid configuration.
"""

import logging
from dataclasses import replace
from enum import Enum
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from lintkit.config import apply_overrides, build_registry, get_default_config
from lintkit.errors import ConfigError
from lintkit.linter import Linter
from lintkit.reporting.console import print_report
from lintkit.reporting.json_report import render_json
from lintkit.traversal import collect_targets

logger = logging.getLogger(__name__)

app = typer.Typer(help="lintkit - rule-based linter for JavaScript source files.")


class OutputFormat(str, Enum):
    console = "console"
    json = "json"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_time=False)],
        force=True,
    )


@app.command()
def lint(
    targets: List[Path] = typer.Argument(
        ...,
        exists=True,
        readable=True,
        resolve_path=True,
        help="JavaScript files or directories to lint.",
    ),
    fix: bool = typer.Option(False, "--fix", help="Apply available fixes in place."),
    output_format: OutputFormat = typer.Option(OutputFormat.console, "--format", "-f", help="Report format."),
    rule: Optional[List[str]] = typer.Option(
        None, "--rule", "-r", help="Override a rule severity, e.g. no-var=error. Repeatable."
    ),
    jobs: int = typer.Option(1, "--jobs", "-j", min=1, help="Files to lint in parallel."),
    fix_passes: int = typer.Option(1, "--fix-passes", min=1, help="Maximum fix/re-lint passes per file."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging and rule descriptions."),
) -> None:
    """Lint files and directories with the built-in rules."""
    _configure_logging(verbose)

    try:
        config = replace(get_default_config(), jobs=jobs, fix_passes=fix_passes)
        config = apply_overrides(config, rule or [])
        registry = build_registry(config)
    except ConfigError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=2)

    files = collect_targets(targets, extensions=config.extensions, ignore_dirs=config.ignore_dirs)
    if not files:
        typer.echo("No JavaScript files to lint.")
        raise typer.Exit(code=0)

    if not registry.active_rules():
        logger.warning("No rules are enabled in the current configuration")

    report = Linter(registry, config).run(files, fix=fix)

    if output_format is OutputFormat.json:
        typer.echo(render_json(report))
    else:
        print_report(report, verbose=verbose, catalog=registry.catalog)

    raise typer.Exit(code=report.exit_code)


@app.command("rules")
def list_rules() -> None:
    """List built-in rules with their default severity."""
    config = get_default_config()
    registry = build_registry(config)

    table = Table(title="Built-in rules", header_style="bold magenta")
    table.add_column("Rule", style="cyan", no_wrap=True)
    table.add_column("Default", width=8)
    table.add_column("Fix", width=4)
    table.add_column("Description")
    for rule_id in sorted(registry.catalog):
        rule_def = registry.catalog[rule_id]
        table.add_row(
            rule_id,
            registry.severity_of(rule_id).value,
            "yes" if rule_def.fixable else "",
            rule_def.description,
        )
    Console().print(table)


def main() -> None:
    """Entry point for `python -m lintkit.main` and the console script."""
    app()


if __name__ == "__main__":
    main()
