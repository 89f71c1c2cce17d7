"""Cash reconciliation engine.

Expected cash is ``opening + cash sales + payments in - payments out``; the
shortage is ``expected - actual`` where actual is the value of the closing
count. A positive shortage means the till holds less than expected, a
negative one is an excess. Nothing here clamps: a negative cash-sales
figure from a data-entry mistake flows through to the shortage unchanged.
"""

from decimal import Decimal
from typing import Iterable

from tillbook.domain import denominations
from tillbook.domain.entities import (
    DayEntry,
    Payment,
    PaymentDirection,
    PaymentSummary,
    Reconciliation,
    SalesData,
    SalesFigures,
)


def unit_cash_sales(figures: SalesFigures) -> Decimal:
    """Return cash sales for one business unit."""
    return figures.total - figures.card_upi - figures.credit


def cash_sales(sales: SalesData) -> Decimal:
    """Return cash sales, summed over every business unit of the counter."""
    return sum((unit_cash_sales(unit) for unit in sales.units), Decimal("0"))


def card_upi_sales(sales: SalesData) -> Decimal:
    return sum((unit.card_upi for unit in sales.units), Decimal("0"))


def credit_sales(sales: SalesData) -> Decimal:
    return sum((unit.credit for unit in sales.units), Decimal("0"))


def payment_summary(payments: Iterable[Payment]) -> PaymentSummary:
    """Sum payment amounts by direction; untagged payments count as OUT."""
    total_in = Decimal("0")
    total_out = Decimal("0")
    for payment in payments:
        if payment.effective_direction == PaymentDirection.IN:
            total_in += payment.amount
        else:
            total_out += payment.amount
    return PaymentSummary(total_in=total_in, total_out=total_out)


def expected_cash(
    opening: Decimal, cash_sales: Decimal, total_in: Decimal, total_out: Decimal
) -> Decimal:
    """Return the cash that should be in the till at close."""
    return opening + cash_sales + total_in - total_out


def legacy_expected_cash(
    opening: Decimal, cash_sales: Decimal, payments: Iterable[Payment]
) -> Decimal:
    """Expected cash under the old rule where every payment was a deduction.

    Only for reading records submitted before payments carried a direction.
    """
    return opening + cash_sales - sum((p.amount for p in payments), Decimal("0"))


def shortage(expected: Decimal, actual: Decimal) -> Decimal:
    """Return the signed shortage (positive) or excess (negative)."""
    return expected - actual


def reconcile(entry: DayEntry) -> Reconciliation:
    """Compute reconciliation figures from an entry's current data.

    Unlike the submitted snapshot on the entry, this is always recomputed.
    """
    summary = payment_summary(entry.payments)
    cash = cash_sales(entry.sales)
    card = card_upi_sales(entry.sales)
    credit = credit_sales(entry.sales)
    expected = expected_cash(entry.opening_cash, cash, summary.total_in, summary.total_out)
    actual = denominations.total(entry.closing_denominations)
    kept = denominations.retained(
        entry.closing_denominations, entry.next_day_opening_denominations
    )
    return Reconciliation(
        opening_cash=entry.opening_cash,
        total_sales=cash + card + credit,
        cash_sales=cash,
        card_upi_sales=card,
        credit_sales=credit,
        total_in=summary.total_in,
        total_out=summary.total_out,
        expected_cash=expected,
        actual_cash=actual,
        shortage=shortage(expected, actual),
        next_day_opening=denominations.total(entry.next_day_opening_denominations),
        retained=kept,
        retained_cash=denominations.total(kept),
    )
