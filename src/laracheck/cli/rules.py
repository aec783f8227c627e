"""CLI command: laracheck rules — show the effective rule set."""

from __future__ import annotations

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from laracheck.cli._common import fail, load_config
from laracheck.errors import LaraCheckError
from laracheck.rules.loader import export_yaml, load_rules
from laracheck.rules.models import Severity

_SEVERITY_COLORS = {
    Severity.BLOCKING: "red",
    Severity.ADVISORY: "yellow",
}


@click.command()
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["table", "yaml"]),
    default="table",
    show_default=True,
    help="table for reading, yaml for a standalone rules file.",
)
@click.pass_context
def rules(ctx: click.Context, fmt: str) -> None:
    """List the rules a check would run."""
    config = load_config(ctx)
    try:
        ruleset = load_rules(config.rules_path)
    except LaraCheckError as e:
        fail(e)

    if fmt == "yaml":
        click.echo(export_yaml(ruleset), nl=False)
        return

    table = Table(title=f"Rules ({ruleset.name})", show_lines=False)
    table.add_column("Rule", style="cyan", no_wrap=True)
    table.add_column("Severity", style="bold")
    table.add_column("Applies to")
    table.add_column("Description")

    for rule in ruleset:
        color = _SEVERITY_COLORS[rule.severity]
        applies = ", ".join(r.value for r in rule.roles) or rule.target.value
        table.add_row(
            escape(rule.id),
            f"[{color}]{rule.severity.value}[/{color}]",
            applies,
            escape(rule.description),
        )

    Console().print(table)
    click.echo(f"{len(ruleset)} rule(s)")
