"""CLI error handling helpers."""

from datetime import date
from typing import Any

import click

from tillbook.domain.actions import ActionResult
from tillbook.domain.errors import DomainError
from tillbook.utils.date_parser import parse_date


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def unwrap_or_exit(ctx: click.Context, result: ActionResult) -> Any:
    """Return the value of a successful action, or render its failure and exit."""
    if not result.ok:
        label = f" ({result.field})" if result.field else ""
        click.echo(f"Error [{result.error}]{label}: {result.message}", err=True)
        ctx.exit(1)
    return result.value


def resolve_date_or_exit(ctx: click.Context, date_str: str | None) -> date | None:
    """Parse a --date option against the business clock, or exit with a CLI error.

    Returns None when no date was given so the action uses today.
    """
    if not date_str:
        return None
    try:
        return parse_date(date_str, today=ctx.obj["clock"].today())
    except ValueError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)
