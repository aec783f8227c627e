"""Helpers shared by CLI commands."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.markup import escape

from laracheck.config import LaraCheckConfig
from laracheck.errors import LaraCheckError

console = Console(stderr=True)

EXIT_FATAL = 2


def load_config(ctx: click.Context) -> LaraCheckConfig:
    """Build the run config: environment first, then the --rules option."""
    try:
        config = LaraCheckConfig.load()
    except LaraCheckError as e:
        fail(e)
    rules_path = ctx.obj.get("rules_path")
    if rules_path:
        config.rules_path = Path(rules_path)
    return config


def fail(error: Exception) -> NoReturn:
    """Print a single error line and exit with the fatal status."""
    console.print(f"[red]Error:[/red] {escape(str(error))}", soft_wrap=True)
    sys.exit(EXIT_FATAL)
