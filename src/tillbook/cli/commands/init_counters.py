"""Initialize the default counters."""

import click
from tillbook.cli.error_handling import handle_domain_error
from tillbook.domain import access
from tillbook.domain.counter import CounterService
from tillbook.domain.entities import CounterKind
from tillbook.domain.errors import ConflictError, DomainError


# Counters of the two stores
INITIAL_COUNTERS = [
    ("Smart Mart Counter 1", CounterKind.SIMPLE),
    ("Smart Mart Counter 2", CounterKind.SIMPLE),
    ("Smart Mart Fancy", CounterKind.SIMPLE),
    ("Smart Fashion (Both)", CounterKind.COMBINED),
]


@click.command("init-counters")
@click.pass_context
def init_counters(ctx):
    """Initialize database with the default counters (administrators only).

    Counters that already exist are left unchanged.
    """
    service = CounterService(ctx.obj["db"])
    try:
        access.require_admin(ctx.obj["identity"])
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    created = 0
    skipped = 0
    for name, kind in INITIAL_COUNTERS:
        try:
            service.create_counter(name=name, kind=kind)
            created += 1
        except ConflictError:
            skipped += 1

    if skipped == 0:
        click.echo(f"Successfully created {created} counters.")
    else:
        click.echo(f"Created {created} counters ({skipped} already existed).")


def register_commands(cli):
    """Register init-counters command with main CLI."""
    cli.add_command(init_counters)
