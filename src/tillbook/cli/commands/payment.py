"""Payment commands: intraday cash movements of an open entry."""

import click
from tillbook.cli.display import echo_payments, money
from tillbook.cli.error_handling import handle_domain_error, resolve_date_or_exit, unwrap_or_exit
from tillbook.domain import reconciliation
from tillbook.domain.entities import PaymentDirection
from tillbook.utils.amount_parser import parse_amount

DATE_HELP = "Business date (default: today in the business timezone)"


@click.group()
def payment_group():
    """Record cash paid into or out of the till."""
    pass


@payment_group.command("add")
@click.argument("amount", metavar="AMOUNT")
@click.option("--description", "-d", default="", help="What the payment was for")
@click.option(
    "--direction",
    type=click.Choice([d.value for d in PaymentDirection], case_sensitive=False),
    default=PaymentDirection.OUT.value,
    show_default=True,
    help="IN for cash received into the till, OUT for cash paid out",
)
@click.option("--date", "date_str", help=DATE_HELP)
@click.pass_context
def add_payment(ctx, amount: str, description: str, direction: str, date_str: str | None):
    """Add a payment to your counter's open entry.

    Examples:
        tillbook payment add 50 -d "Tea"
        tillbook payment add 2000 -d "Change from office" --direction IN
    """
    entry_date = resolve_date_or_exit(ctx, date_str)
    try:
        value = parse_amount(amount)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    entry = unwrap_or_exit(
        ctx,
        ctx.obj["actions"].record_payment(
            description, value, PaymentDirection(direction.upper()), entry_date=entry_date
        ),
    )
    payment = entry.payments[-1]
    click.echo(f"Added payment {payment.id}: {payment.direction.value} {money(payment.amount)}")


@payment_group.command("edit")
@click.argument("payment_id", type=int)
@click.option("--amount", help="New amount")
@click.option("--description", "-d", help="New description")
@click.option(
    "--direction",
    type=click.Choice([d.value for d in PaymentDirection], case_sensitive=False),
    help="New direction",
)
@click.option("--date", "date_str", help=DATE_HELP)
@click.pass_context
def edit_payment(
    ctx,
    payment_id: int,
    amount: str | None,
    description: str | None,
    direction: str | None,
    date_str: str | None,
):
    """Change a payment, addressed by its ID.

    Examples:
        tillbook payment edit 2 --amount 75
        tillbook payment edit 3 --direction IN -d "Refund from supplier"
    """
    if amount is None and description is None and direction is None:
        click.echo("Error: Nothing to change (use --amount, --description or --direction)", err=True)
        ctx.exit(1)

    entry_date = resolve_date_or_exit(ctx, date_str)
    try:
        value = parse_amount(amount) if amount is not None else None
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    unwrap_or_exit(
        ctx,
        ctx.obj["actions"].edit_payment(
            payment_id,
            description=description,
            amount=value,
            direction=PaymentDirection(direction.upper()) if direction else None,
            entry_date=entry_date,
        ),
    )
    click.echo(f"Updated payment {payment_id}")


@payment_group.command("remove")
@click.argument("payment_id", type=int)
@click.option("--date", "date_str", help=DATE_HELP)
@click.pass_context
def remove_payment(ctx, payment_id: int, date_str: str | None):
    """Remove a payment, addressed by its ID."""
    entry_date = resolve_date_or_exit(ctx, date_str)
    unwrap_or_exit(ctx, ctx.obj["actions"].remove_payment(payment_id, entry_date))
    click.echo(f"Removed payment {payment_id}")


@payment_group.command("list")
@click.option("--date", "date_str", help=DATE_HELP)
@click.pass_context
def list_payments(ctx, date_str: str | None):
    """List the payments of your counter's entry."""
    entry_date = resolve_date_or_exit(ctx, date_str)
    entry = unwrap_or_exit(ctx, ctx.obj["actions"].get_entry(entry_date))
    echo_payments(entry.payments)
    if entry.payments:
        summary = reconciliation.payment_summary(entry.payments)
        click.echo(f"Total in: {money(summary.total_in)}, total out: {money(summary.total_out)}")


def register_commands(cli):
    """Register payment commands with main CLI."""
    cli.add_command(payment_group, name="payment")
