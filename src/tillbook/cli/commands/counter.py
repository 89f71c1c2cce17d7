"""Counter management commands."""

import click
from tillbook.cli.error_handling import handle_domain_error
from tillbook.domain import access
from tillbook.domain.counter import CounterService
from tillbook.domain.entities import CounterKind
from tillbook.domain.errors import DomainError


@click.group()
def counter_group():
    """Manage counters."""
    pass


@counter_group.command("create")
@click.argument("name", metavar="COUNTER_NAME")
@click.option(
    "--combined",
    is_flag=True,
    help="Counter reports separate mart and fashion sales",
)
@click.pass_context
def create_counter(ctx, name: str, combined: bool):
    """Register a new counter (administrators only).

    Examples:
        tillbook --role admin counter create "Smart Mart Counter 3"
        tillbook --role admin counter create "Smart Fashion (Both)" --combined
    """
    service = CounterService(ctx.obj["db"])
    kind = CounterKind.COMBINED if combined else CounterKind.SIMPLE

    try:
        access.require_admin(ctx.obj["identity"])
        counter_id = service.create_counter(name=name, kind=kind)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created counter '{name.strip()}' ({kind.value}, ID: {counter_id})")


@counter_group.command("list")
@click.pass_context
def list_counters(ctx):
    """List all counters."""
    service = CounterService(ctx.obj["db"])

    counters = service.list_counters()
    if not counters:
        click.echo("No counters found.")
        return

    click.echo("\nCounters:")
    click.echo("-" * 50)
    for c in counters:
        click.echo(f"ID: {c.id:3d} | {c.name:30s} | {c.kind.value}")


def register_commands(cli):
    """Register counter commands with main CLI."""
    cli.add_command(counter_group, name="counter")
