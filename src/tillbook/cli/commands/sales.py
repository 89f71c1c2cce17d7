"""Sales commands."""

from decimal import Decimal

import click
from tillbook.cli.display import money
from tillbook.cli.error_handling import handle_domain_error, resolve_date_or_exit, unwrap_or_exit
from tillbook.domain import reconciliation
from tillbook.domain.entities import CombinedSales, SalesFigures, SimpleSales
from tillbook.utils.amount_parser import parse_amount

DATE_HELP = "Business date (default: today in the business timezone)"

_SIMPLE_OPTIONS = ("total", "card", "credit")
_COMBINED_OPTIONS = (
    "mart_total",
    "mart_card",
    "mart_credit",
    "fashion_total",
    "fashion_card",
    "fashion_credit",
)


def _amount(value: str | None) -> Decimal:
    return parse_amount(value) if value is not None else Decimal("0")


def _figures(total: str | None, card: str | None, credit: str | None) -> SalesFigures:
    return SalesFigures(total=_amount(total), card_upi=_amount(card), credit=_amount(credit))


@click.group()
def sales_group():
    """Record end-of-day sales figures."""
    pass


@sales_group.command("set")
@click.option("--total", help="Total sales")
@click.option("--card", help="Card and UPI sales")
@click.option("--credit", help="Credit sales")
@click.option("--mart-total", help="Mart total sales (combined counters)")
@click.option("--mart-card", help="Mart card and UPI sales (combined counters)")
@click.option("--mart-credit", help="Mart credit sales (combined counters)")
@click.option("--fashion-total", help="Fashion total sales (combined counters)")
@click.option("--fashion-card", help="Fashion card and UPI sales (combined counters)")
@click.option("--fashion-credit", help="Fashion credit sales (combined counters)")
@click.option("--date", "date_str", help=DATE_HELP)
@click.pass_context
def set_sales(ctx, date_str: str | None, **figures: str | None):
    """Replace the sales figures of your counter's open entry.

    Cash sales are the total less card/UPI and credit. Counters running
    both businesses use the --mart-* and --fashion-* options instead.

    Examples:
        tillbook sales set --total 5000 --card 1200 --credit 300
        tillbook sales set --mart-total 4000 --mart-card 500 --fashion-total 2500
    """
    simple_given = any(figures[name] is not None for name in _SIMPLE_OPTIONS)
    combined_given = any(figures[name] is not None for name in _COMBINED_OPTIONS)
    if simple_given and combined_given:
        click.echo(
            "Error: Use either --total/--card/--credit or the --mart-*/--fashion-* options, not both",
            err=True,
        )
        ctx.exit(1)

    entry_date = resolve_date_or_exit(ctx, date_str)
    try:
        if combined_given:
            sales = CombinedSales(
                mart=_figures(figures["mart_total"], figures["mart_card"], figures["mart_credit"]),
                fashion=_figures(
                    figures["fashion_total"], figures["fashion_card"], figures["fashion_credit"]
                ),
            )
        else:
            sales = SimpleSales(_figures(figures["total"], figures["card"], figures["credit"]))
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    entry = unwrap_or_exit(ctx, ctx.obj["actions"].update_sales(sales, entry_date))
    click.echo(f"Sales updated for {entry.counter_name}")
    click.echo(f"  Cash sales: {money(reconciliation.cash_sales(entry.sales))}")


def register_commands(cli):
    """Register sales commands with main CLI."""
    cli.add_command(sales_group, name="sales")
