"""Administrator and supervisor commands."""

import click
from tillbook.cli.display import echo_comparison, echo_entry, echo_entry_list, echo_summary, money
from tillbook.cli.error_handling import handle_domain_error, resolve_date_or_exit, unwrap_or_exit
from tillbook.domain.summary import SummaryService
from tillbook.utils.amount_parser import parse_amount
from tillbook.utils.denomination_parser import parse_denominations

DATE_HELP = "Business date (default: today in the business timezone)"


@click.group()
def admin_group():
    """Review, confirm and correct counter entries."""
    pass


@admin_group.command("list")
@click.option("--date", "date_str", help=DATE_HELP)
@click.pass_context
def list_entries(ctx, date_str: str | None):
    """List every counter's entry for a day."""
    entry_date = resolve_date_or_exit(ctx, date_str)
    entries = unwrap_or_exit(ctx, ctx.obj["actions"].list_entries(entry_date))
    if not entries:
        click.echo("No entries found.")
        return
    echo_entry_list(entries)


@admin_group.command("show")
@click.argument("entry_id", type=int)
@click.pass_context
def show_entry(ctx, entry_id: int):
    """Show one entry in full."""
    entry = unwrap_or_exit(ctx, ctx.obj["actions"].get_entry_by_id(entry_id))
    echo_entry(entry)


@admin_group.command("confirm")
@click.argument("entry_id", type=int)
@click.pass_context
def confirm_entry(ctx, entry_id: int):
    """Confirm a submitted entry."""
    entry = unwrap_or_exit(ctx, ctx.obj["actions"].confirm(entry_id))
    click.echo(f"Confirmed entry {entry.id} ({entry.counter_name}, {entry.date.isoformat()})")


@admin_group.command("unlock")
@click.argument("entry_id", type=int)
@click.pass_context
def unlock_entry(ctx, entry_id: int):
    """Reopen a submitted or confirmed entry for editing."""
    entry = unwrap_or_exit(ctx, ctx.obj["actions"].unlock(entry_id))
    click.echo(f"Unlocked entry {entry.id} ({entry.counter_name}, {entry.date.isoformat()})")


@admin_group.command("override-opening")
@click.argument("entry_id", type=int)
@click.argument("denoms", metavar="DENOMINATIONS")
@click.option("--amount", help="Opening amount (default: value of DENOMINATIONS)")
@click.pass_context
def override_opening(ctx, entry_id: int, denoms: str, amount: str | None):
    """Correct an entry's opening cash and mark it verified.

    Example:
        tillbook --role admin admin override-opening 12 "500x2, 100x5"
    """
    try:
        count = parse_denominations(denoms)
        value = parse_amount(amount) if amount is not None else None
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    entry = unwrap_or_exit(ctx, ctx.obj["actions"].override_opening(entry_id, count, amount=value))
    click.echo(f"Opening of entry {entry.id} set to {money(entry.opening_cash)}")


@admin_group.command("override-closing")
@click.argument("entry_id", type=int)
@click.argument("denoms", metavar="DENOMINATIONS")
@click.pass_context
def override_closing(ctx, entry_id: int, denoms: str):
    """Correct an entry's closing count.

    A submitted entry keeps its recorded shortage; unlock and resubmit it
    to recompute.
    """
    try:
        count = parse_denominations(denoms)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    entry = unwrap_or_exit(ctx, ctx.obj["actions"].override_closing_count(entry_id, count))
    click.echo(f"Closing count of entry {entry.id} updated")


@admin_group.command("summary")
@click.option("--date", "date_str", help=DATE_HELP)
@click.pass_context
def daily_summary(ctx, date_str: str | None):
    """Show totals across all counters for a day."""
    entry_date = resolve_date_or_exit(ctx, date_str)
    summary = unwrap_or_exit(ctx, ctx.obj["actions"].daily_summary(entry_date))
    echo_summary(summary)


@admin_group.command("compare")
@click.option("--date", "date_str", help=DATE_HELP)
@click.pass_context
def compare_counters(ctx, date_str: str | None):
    """Compare live reconciliation figures of every counter for a day."""
    entry_date = resolve_date_or_exit(ctx, date_str)
    rows = unwrap_or_exit(ctx, ctx.obj["actions"].counter_comparison(entry_date))
    if not rows:
        click.echo("No entries found.")
        return
    echo_comparison(rows, SummaryService.comparison_totals(rows))


def register_commands(cli):
    """Register admin commands with main CLI."""
    cli.add_command(admin_group, name="admin")
