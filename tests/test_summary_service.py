"""Tests for the daily summary and counter comparison."""

from datetime import date
from decimal import Decimal

from tillbook.domain.entities import (
    CombinedSales,
    DenominationCount,
    PaymentDirection,
    SalesFigures,
    SimpleSales,
)

DAY = date(2024, 3, 10)
MART_1 = "Smart Mart Counter 1"
MART_2 = "Smart Mart Counter 2"
FASHION = "Smart Fashion (Both)"


def _figures(total, card="0", credit="0"):
    return SalesFigures(Decimal(total), Decimal(card), Decimal(credit))


def _prepare_day(entry_service):
    entry_service.get_or_create(MART_1, DAY)
    entry_service.update_sales(MART_1, DAY, SimpleSales(_figures("1000", "200", "100")))
    entry_service.record_payment(MART_1, DAY, "Tea", Decimal("50"))
    entry_service.record_closing_count(MART_1, DAY, DenominationCount(notes_500=1, notes_100=1))
    entry_service.submit(MART_1, DAY, "Raj")

    entry_service.get_or_create(FASHION, DAY)
    entry_service.update_sales(
        FASHION, DAY, CombinedSales(mart=_figures("500", "100"), fashion=_figures("300", "50", "20"))
    )
    entry_service.record_payment(FASHION, DAY, "Change", Decimal("100"), PaymentDirection.IN)

    entry_service.get_or_create(MART_2, DAY)


def test_daily_summary_totals(entry_service, summary_service, sample_counters):
    _prepare_day(entry_service)

    summary = summary_service.daily_summary(DAY)

    assert summary.entry_count == 3
    assert summary.status_counts == {"open": 2, "submitted": 1, "confirmed": 0}
    assert summary.cash_sales == Decimal("1330")
    assert summary.card_upi_sales == Decimal("350")
    assert summary.credit_sales == Decimal("120")
    assert summary.total_sales == Decimal("1800")
    assert summary.total_in == Decimal("100")
    assert summary.total_out == Decimal("50")


def test_daily_summary_shortage_only_counts_closed_entries(entry_service, summary_service, sample_counters):
    _prepare_day(entry_service)

    summary = summary_service.daily_summary(DAY)

    # Counter 1: expected 0 + 700 - 50 = 650, counted 600
    assert summary.total_shortage == Decimal("50")


def test_daily_summary_of_empty_day(summary_service):
    summary = summary_service.daily_summary(DAY)

    assert summary.entry_count == 0
    assert summary.total_sales == Decimal("0")
    assert summary.status_counts == {"open": 0, "submitted": 0, "confirmed": 0}


def test_counter_comparison_is_live(entry_service, summary_service, sample_counters):
    _prepare_day(entry_service)

    rows = summary_service.counter_comparison(DAY)

    assert [r.counter_name for r in rows] == [FASHION, MART_1, MART_2]
    fashion = rows[0].reconciliation
    assert fashion.cash_sales == Decimal("630")
    assert fashion.expected_cash == Decimal("730")
    assert fashion.shortage == Decimal("730")


def test_comparison_totals(entry_service, summary_service, sample_counters):
    _prepare_day(entry_service)
    entry_service.record_forwarding(MART_1, DAY, DenominationCount(notes_100=1))

    rows = summary_service.counter_comparison(DAY)
    totals = summary_service.comparison_totals(rows)

    assert totals.cash_sales == Decimal("1330")
    assert totals.expected_cash == Decimal("1380")
    assert totals.actual_cash == Decimal("600")
    assert totals.next_day_opening == Decimal("100")
    assert totals.retained == DenominationCount(notes_500=1)
    assert totals.retained_cash == Decimal("500")
