"""CLI command: laracheck check <project_root> — convention checks."""

from __future__ import annotations

import sys

import click
from rich.markup import escape

from laracheck.checker import CheckResult, exit_code, run_check
from laracheck.cli._common import console, fail, load_config
from laracheck.errors import LaraCheckError
from laracheck.report import FORMATS, filter_severity, render
from laracheck.rules.models import Severity


@click.command()
@click.argument("project_root", type=click.Path())
@click.option(
    "--format",
    "fmt",
    type=click.Choice(FORMATS),
    default="text",
    show_default=True,
    help="Report format.",
)
@click.option(
    "--severity",
    type=click.Choice([s.value for s in Severity]),
    default=Severity.ADVISORY.value,
    show_default=True,
    help="Minimum severity to report.",
)
@click.option(
    "--exclude",
    "-e",
    multiple=True,
    help="Directory/file names or path globs to skip.",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=None,
    help="Evaluate files on N threads.",
)
@click.pass_context
def check(
    ctx: click.Context,
    project_root: str,
    fmt: str,
    severity: str,
    exclude: tuple[str, ...],
    workers: int | None,
) -> None:
    """Check PROJECT_ROOT against the Laravel / Vue conventions.

    Exits 0 when nothing blocks, 1 on blocking violations and 2 on fatal
    errors (bad rules, missing root, scan limits).
    """
    config = load_config(ctx)
    if workers:
        config.workers = workers

    try:
        result = run_check(project_root, config=config, exclude=exclude)
    except LaraCheckError as e:
        fail(e)

    shown = filter_severity(result.violations, Severity(severity))
    text_mode = fmt == "text"

    if text_mode:
        console.print(
            f"[bold]laracheck[/bold] checked [cyan]{escape(result.root)}[/cyan] "
            f"with rules [cyan]{escape(result.ruleset_name)}[/cyan]\n",
            soft_wrap=True,
        )

    click.echo(render(shown, fmt, result.warnings), nl=False)

    if text_mode:
        _print_summary(result)

    sys.exit(exit_code(result))


def _print_summary(result: CheckResult) -> None:
    console.print(
        f"\nChecked {result.files_scanned} files against "
        f"{result.rules_evaluated} rules in {result.duration:.2f}s"
    )
    if result.has_blocking:
        console.print("[red]Blocking violations found.[/red]")
