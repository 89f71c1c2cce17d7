"""Daily summary and counter comparison domain service."""

from collections import Counter as Tally
from datetime import date
from decimal import Decimal
from typing import Sequence

from tillbook.database.base import Database
from tillbook.domain import denominations, reconciliation
from tillbook.domain.entities import (
    ComparisonRow,
    DailySummary,
    DayEntry,
    DenominationCount,
    EntryStatus,
    Reconciliation,
)

ZERO = Decimal("0")


class SummaryService:
    """Service for building cross-counter views of a business day."""

    def __init__(self, db: Database):
        """Initialize summary service.

        Args:
            db: Database instance
        """
        self.db = db

    def daily_summary(self, entry_date: date) -> DailySummary:
        """Total sales, payments and shortages across every counter for a day.

        The shortage total only includes entries that have been submitted;
        open entries have no snapshot yet.

        Args:
            entry_date: Business date

        Returns:
            DailySummary for the date
        """
        entries = self.db.list_entries(entry_date=entry_date)
        return self.build_daily_summary(entry_date, entries)

    def build_daily_summary(self, entry_date: date, entries: Sequence[DayEntry]) -> DailySummary:
        """Aggregate a list of entries into a DailySummary."""
        status_counts = Tally(entry.status.value for entry in entries)
        cash = card = credit = total_in = total_out = shortage = ZERO

        for entry in entries:
            summary = reconciliation.payment_summary(entry.payments)
            cash += reconciliation.cash_sales(entry.sales)
            card += reconciliation.card_upi_sales(entry.sales)
            credit += reconciliation.credit_sales(entry.sales)
            total_in += summary.total_in
            total_out += summary.total_out
            if entry.status != EntryStatus.OPEN:
                shortage += entry.submitted_shortage or ZERO

        return DailySummary(
            date=entry_date,
            entry_count=len(entries),
            status_counts={status.value: status_counts.get(status.value, 0) for status in EntryStatus},
            cash_sales=cash,
            card_upi_sales=card,
            credit_sales=credit,
            total_sales=cash + card + credit,
            total_in=total_in,
            total_out=total_out,
            total_shortage=shortage,
        )

    def counter_comparison(self, entry_date: date) -> list[ComparisonRow]:
        """Live reconciliation of every counter's entry for a day.

        Figures are recomputed from current data rather than read from the
        submitted snapshot, so open counters can be compared too.
        """
        return [
            ComparisonRow(
                counter_name=entry.counter_name,
                status=entry.status,
                reconciliation=reconciliation.reconcile(entry),
            )
            for entry in self.db.list_entries(entry_date=entry_date)
        ]

    @staticmethod
    def comparison_totals(rows: Sequence[ComparisonRow]) -> Reconciliation:
        """Sum comparison rows into a grand-total row."""
        numeric_fields = (
            "opening_cash",
            "total_sales",
            "cash_sales",
            "card_upi_sales",
            "credit_sales",
            "total_in",
            "total_out",
            "expected_cash",
            "actual_cash",
            "shortage",
            "next_day_opening",
            "retained_cash",
        )
        totals = {name: sum((getattr(r.reconciliation, name) for r in rows), ZERO) for name in numeric_fields}
        retained = DenominationCount(
            **{
                slot: sum(getattr(r.reconciliation.retained, slot) for r in rows)
                for slot in denominations.SLOT_NAMES
            }
        )
        return Reconciliation(retained=retained, **totals)
