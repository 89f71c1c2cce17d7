"""Carry-forward resolver: where a day's opening cash comes from."""

from datetime import date
from decimal import Decimal

from tillbook.database.base import Database
from tillbook.domain import denominations
from tillbook.domain.entities import DayEntry, EntryStatus, OpeningBalance
from tillbook.utils.clock import BusinessClock

# Statuses whose forwarding figures are trusted for the next day
CLOSED_STATUSES = (EntryStatus.SUBMITTED, EntryStatus.CONFIRMED)


class CarryForwardResolver:
    """Resolve a day's opening balance from the counter's history."""

    def __init__(self, db: Database, clock: BusinessClock):
        """Initialize resolver.

        Args:
            db: Database instance
            clock: Business clock used for previous-day calculations
        """
        self.db = db
        self.clock = clock

    def opening_for(self, counter_name: str, entry_date: date) -> OpeningBalance:
        """Return the opening balance for a counter on a date.

        An opening that was verified or overridden on the day itself wins.
        Otherwise the most recent submitted or confirmed day before
        ``entry_date`` provides its next-day opening, falling back to the
        value of its next-day denominations. With no such day the opening
        is zero.

        Args:
            counter_name: Counter name
            entry_date: Business date being opened

        Returns:
            OpeningBalance describing the amount, breakdown and its source
        """
        current = self.db.get_entry(counter_name, entry_date)
        if current is not None and current.opening_verified and current.opening_cash > 0:
            return OpeningBalance(
                amount=current.opening_cash,
                denominations=current.opening_denominations,
                source="verified",
                source_date=entry_date,
            )

        previous = self.db.find_latest_entry_before(counter_name, entry_date, CLOSED_STATUSES)
        if previous is None:
            return OpeningBalance(
                amount=Decimal("0"), denominations=denominations.empty(), source="none"
            )
        return self.forwarded_from(previous)

    def forwarded_from(self, previous: DayEntry) -> OpeningBalance:
        """Return the opening balance that ``previous`` forwards to the next day."""
        forwarded_denoms = previous.next_day_opening_denominations
        if previous.next_day_opening_cash is not None:
            amount = previous.next_day_opening_cash
        elif forwarded_denoms is not None:
            amount = denominations.total(forwarded_denoms)
        else:
            amount = Decimal("0")
        return OpeningBalance(
            amount=amount,
            denominations=forwarded_denoms or denominations.empty(),
            source="carried",
            source_date=previous.date,
        )

    def yesterday_source(self, counter_name: str, entry_date: date) -> OpeningBalance:
        """Return what the previous calendar day forwards, ignoring older days.

        Used to show the operator the figure their opening count should match.
        """
        yesterday = self.clock.previous_day(entry_date)
        previous = self.db.get_entry(counter_name, yesterday)
        if previous is None or previous.status not in CLOSED_STATUSES:
            return OpeningBalance(
                amount=Decimal("0"),
                denominations=denominations.empty(),
                source="none",
                source_date=yesterday,
            )
        return self.forwarded_from(previous)
