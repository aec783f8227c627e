"""CLI entry point — Click group with global options."""

from __future__ import annotations

import logging

import click

from laracheck import __version__


@click.group()
@click.version_option(version=__version__, prog_name="laracheck")
@click.option(
    "--rules",
    "-r",
    "rules_path",
    type=click.Path(dir_okay=False),
    help="Path to a YAML rule file (overrides RULES_PATH).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.pass_context
def main(ctx: click.Context, rules_path: str | None, verbose: bool) -> None:
    """laracheck — convention checks for Laravel + Inertia + Vue projects."""
    ctx.ensure_object(dict)
    ctx.obj["rules_path"] = rules_path

    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _register_commands() -> None:
    from laracheck.cli.check import check  # noqa: F811
    from laracheck.cli.rules import rules  # noqa: F811

    main.add_command(check)
    main.add_command(rules)


_register_commands()
