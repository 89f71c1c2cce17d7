"""Day entry commands for counter operators."""

import click
from tillbook.cli.display import echo_entry, echo_opening, money
from tillbook.cli.error_handling import handle_domain_error, resolve_date_or_exit, unwrap_or_exit
from tillbook.domain import denominations
from tillbook.utils.amount_parser import parse_amount
from tillbook.utils.denomination_parser import format_denominations, parse_denominations

DATE_HELP = "Business date (default: today in the business timezone)"


@click.group()
def entry_group():
    """Record a counter's day: opening, closing count, forwarding and submit."""
    pass


@entry_group.command("open")
@click.option("--date", "date_str", help=DATE_HELP)
@click.pass_context
def open_entry(ctx, date_str: str | None):
    """Open the day's entry for your counter, creating it if needed.

    A new entry starts with the cash forwarded by the counter's last
    closed day.

    Examples:
        tillbook --role counter --counter "Smart Mart Counter 1" entry open
        tillbook --role counter --counter "Smart Mart Counter 1" entry open --date yesterday
    """
    entry_date = resolve_date_or_exit(ctx, date_str)
    entry = unwrap_or_exit(ctx, ctx.obj["actions"].get_or_create(entry_date))
    echo_entry(entry)


@entry_group.command("show")
@click.option("--date", "date_str", help=DATE_HELP)
@click.pass_context
def show_entry(ctx, date_str: str | None):
    """Show your counter's entry with live reconciliation figures."""
    entry_date = resolve_date_or_exit(ctx, date_str)
    entry = unwrap_or_exit(ctx, ctx.obj["actions"].get_entry(entry_date))
    echo_entry(entry)


@entry_group.command("opening")
@click.option("--date", "date_str", help=DATE_HELP)
@click.option("--for-counter", help="Counter to look up (administrators)")
@click.pass_context
def show_opening(ctx, date_str: str | None, for_counter: str | None):
    """Show the opening cash a day starts with and where it comes from."""
    entry_date = resolve_date_or_exit(ctx, date_str)
    opening = unwrap_or_exit(ctx, ctx.obj["actions"].opening_for(for_counter, entry_date))
    echo_opening(opening)


@entry_group.command("verify-opening")
@click.option("--date", "date_str", help=DATE_HELP)
@click.pass_context
def verify_opening(ctx, date_str: str | None):
    """Confirm you have physically counted the opening cash."""
    entry_date = resolve_date_or_exit(ctx, date_str)
    entry = unwrap_or_exit(ctx, ctx.obj["actions"].verify_opening(entry_date))
    click.echo(f"Opening of {money(entry.opening_cash)} verified for {entry.counter_name}")


@entry_group.command("closing")
@click.argument("denoms", metavar="DENOMINATIONS")
@click.option(
    "--forward-all",
    is_flag=True,
    help="Also forward the whole count as next day's opening",
)
@click.option("--date", "date_str", help=DATE_HELP)
@click.pass_context
def record_closing(ctx, denoms: str, forward_all: bool, date_str: str | None):
    """Record the closing cash count.

    DENOMINATIONS lists quantities per note or coin; slots not mentioned
    are zero.

    Examples:
        tillbook entry closing "500x2, 100x2"
        tillbook entry closing "200x4, coin10x5, 5x6" --forward-all
    """
    entry_date = resolve_date_or_exit(ctx, date_str)
    try:
        count = parse_denominations(denoms)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    entry = unwrap_or_exit(
        ctx, ctx.obj["actions"].record_closing_count(count, forward_all=forward_all, entry_date=entry_date)
    )
    click.echo(f"Closing count recorded: {money(denominations.total(entry.closing_denominations))}")
    if forward_all:
        click.echo(f"Forwarded to next day: {money(entry.next_day_opening_cash)}")


@entry_group.command("forward")
@click.argument("denoms", metavar="DENOMINATIONS")
@click.option("--amount", help="Next-day opening amount (default: value of DENOMINATIONS)")
@click.option("--date", "date_str", help=DATE_HELP)
@click.pass_context
def record_forward(ctx, denoms: str, amount: str | None, date_str: str | None):
    """Set the cash left in the till as next day's opening float.

    Quantities above the closing count are reduced to it.

    Examples:
        tillbook entry forward "100x5"
        tillbook entry forward "100x5, 50x2" --amount 600
    """
    actions = ctx.obj["actions"]
    entry_date = resolve_date_or_exit(ctx, date_str)
    try:
        forwarded = parse_denominations(denoms)
        forward_amount = parse_amount(amount) if amount is not None else None
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    entry = unwrap_or_exit(ctx, actions.get_entry(entry_date))
    closing = entry.closing_denominations
    over = denominations.exceeds(forwarded, closing)
    if over:
        forwarded = denominations.cap_to(forwarded, closing)
        click.echo(
            f"Warning: reduced {', '.join(over)} to the closing count "
            f"({format_denominations(forwarded)})",
            err=True,
        )

    entry = unwrap_or_exit(
        ctx, actions.record_forwarding(forwarded, amount=forward_amount, entry_date=entry_date)
    )
    click.echo(f"Next-day opening set to {money(entry.next_day_opening_cash)}")
    removed = denominations.retained(entry.closing_denominations, entry.next_day_opening_denominations)
    click.echo(f"Removed from till: {money(denominations.total(removed))}")


@entry_group.command("submit")
@click.option("--closed-by", required=True, help="Name of the person closing the counter")
@click.option("--date", "date_str", help=DATE_HELP)
@click.pass_context
def submit_entry(ctx, closed_by: str, date_str: str | None):
    """Close the day and lock the entry.

    The expected cash, actual cash and shortage are recorded as they stand
    now; only an administrator can reopen the entry.
    """
    entry_date = resolve_date_or_exit(ctx, date_str)
    entry = unwrap_or_exit(ctx, ctx.obj["actions"].submit(closed_by, entry_date))
    click.echo(f"Submitted {entry.counter_name} for {entry.date.isoformat()}")
    click.echo(f"  Expected cash: {money(entry.submitted_expected_cash)}")
    click.echo(f"  Actual cash:   {money(entry.submitted_actual_cash)}")
    click.echo(f"  Shortage:      {money(entry.submitted_shortage)}")


def register_commands(cli):
    """Register entry commands with main CLI."""
    cli.add_command(entry_group, name="entry")
