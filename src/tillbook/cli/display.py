"""Console rendering of entries, reconciliations and summaries."""

from decimal import Decimal
from typing import Sequence

import click

from tillbook.domain import reconciliation
from tillbook.domain.entities import (
    CombinedSales,
    ComparisonRow,
    DailySummary,
    DayEntry,
    OpeningBalance,
    Payment,
    Reconciliation,
    SalesFigures,
)
from tillbook.utils.denomination_parser import format_breakdown, format_denominations


def money(amount: Decimal | None) -> str:
    if amount is None:
        return "-"
    return f"₹{amount:,.2f}"


def echo_payments(payments: Sequence[Payment]) -> None:
    if not payments:
        click.echo("No payments recorded.")
        return
    click.echo(f"{'ID':<4} {'Time (UTC)':<8} {'Dir':<4} {'Amount':>12}  Description")
    click.echo("-" * 60)
    for payment in payments:
        click.echo(
            f"{payment.id:<4} {payment.time.strftime('%H:%M'):<8} "
            f"{payment.effective_direction.value:<4} {money(payment.amount):>12}  "
            f"{payment.description}"
        )


def _echo_figures(label: str, figures: SalesFigures) -> None:
    click.echo(
        f"  {label:<8} total {money(figures.total)}, card/UPI {money(figures.card_upi)}, "
        f"credit {money(figures.credit)}, cash {money(reconciliation.unit_cash_sales(figures))}"
    )


def echo_reconciliation(recon: Reconciliation) -> None:
    click.echo(f"  Opening cash:       {money(recon.opening_cash)}")
    click.echo(f"  Cash sales:         {money(recon.cash_sales)}")
    click.echo(f"  Payments in:        {money(recon.total_in)}")
    click.echo(f"  Payments out:       {money(recon.total_out)}")
    click.echo(f"  Expected cash:      {money(recon.expected_cash)}")
    click.echo(f"  Actual cash:        {money(recon.actual_cash)}")
    click.echo(f"  {_shortage_label(recon.shortage):<20}{money(abs(recon.shortage))}")
    click.echo(f"  Next-day opening:   {money(recon.next_day_opening)}")
    click.echo(f"  Removed from till:  {money(recon.retained_cash)}")


def _shortage_label(amount: Decimal) -> str:
    if amount > 0:
        return "Shortage:"
    if amount < 0:
        return "Excess:"
    return "Balanced:"


def echo_entry(entry: DayEntry) -> None:
    """Print an entry with its live reconciliation and, once closed, its snapshot."""
    verified = "verified" if entry.opening_verified else "not verified"
    click.echo(f"Entry {entry.id}: {entry.counter_name} on {entry.date.isoformat()} [{entry.status.value}]")
    click.echo(f"Opening: {money(entry.opening_cash)} ({verified})")
    click.echo(f"  Denominations: {format_denominations(entry.opening_denominations)}")

    click.echo("Sales:")
    if isinstance(entry.sales, CombinedSales):
        _echo_figures("Mart", entry.sales.mart)
        _echo_figures("Fashion", entry.sales.fashion)
    else:
        _echo_figures("Sales", entry.sales.figures)

    click.echo("Payments:")
    echo_payments(entry.payments)

    click.echo(f"Closing count: {format_denominations(entry.closing_denominations)}")
    if entry.next_day_opening_denominations is not None:
        click.echo(f"Forwarded: {format_denominations(entry.next_day_opening_denominations)}")

    click.echo("Reconciliation:")
    echo_reconciliation(reconciliation.reconcile(entry))

    if entry.submitted_at is not None or entry.submitted_shortage is not None:
        click.echo("Submitted snapshot:")
        click.echo(f"  Expected {money(entry.submitted_expected_cash)}, "
                   f"actual {money(entry.submitted_actual_cash)}, "
                   f"shortage {money(entry.submitted_shortage)}")
        if entry.closed_by:
            click.echo(f"  Closed by {entry.closed_by}")
    if entry.confirmed_by:
        click.echo(f"Confirmed by {entry.confirmed_by}")


def echo_opening(opening: OpeningBalance) -> None:
    source = opening.source
    if opening.source_date is not None:
        source = f"{source} from {opening.source_date.isoformat()}"
    click.echo(f"Opening cash: {money(opening.amount)} ({source})")
    for line in format_breakdown(opening.denominations):
        click.echo(f"  {line}")


def echo_entry_list(entries: Sequence[DayEntry]) -> None:
    click.echo(f"{'ID':<5} {'Counter':<25} {'Status':<10} {'Opening':>12} {'Shortage':>12}")
    click.echo("-" * 68)
    for entry in entries:
        click.echo(
            f"{entry.id:<5} {entry.counter_name:<25} {entry.status.value:<10} "
            f"{money(entry.opening_cash):>12} {money(entry.submitted_shortage):>12}"
        )


def echo_summary(summary: DailySummary) -> None:
    click.echo(f"Summary for {summary.date.isoformat()} ({summary.entry_count} entries)")
    statuses = ", ".join(f"{name}: {count}" for name, count in summary.status_counts.items())
    click.echo(f"  Status: {statuses}")
    click.echo(f"  Total sales:    {money(summary.total_sales)}")
    click.echo(f"  Cash sales:     {money(summary.cash_sales)}")
    click.echo(f"  Card/UPI sales: {money(summary.card_upi_sales)}")
    click.echo(f"  Credit sales:   {money(summary.credit_sales)}")
    click.echo(f"  Payments in:    {money(summary.total_in)}")
    click.echo(f"  Payments out:   {money(summary.total_out)}")
    click.echo(f"  Total shortage: {money(summary.total_shortage)}")


def echo_comparison(rows: Sequence[ComparisonRow], totals: Reconciliation) -> None:
    header = (
        f"{'Counter':<25} {'Status':<10} {'Sales':>12} {'Cash sales':>12} "
        f"{'Expected':>12} {'Actual':>12} {'Shortage':>12}"
    )
    click.echo(header)
    click.echo("-" * len(header))
    for row in rows:
        _echo_comparison_line(row.counter_name, row.status.value if row.status else "-", row.reconciliation)
    click.echo("-" * len(header))
    _echo_comparison_line("Total", "", totals)


def _echo_comparison_line(name: str, status: str, recon: Reconciliation) -> None:
    click.echo(
        f"{name:<25} {status:<10} {money(recon.total_sales):>12} {money(recon.cash_sales):>12} "
        f"{money(recon.expected_cash):>12} {money(recon.actual_cash):>12} {money(recon.shortage):>12}"
    )
