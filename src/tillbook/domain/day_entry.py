"""Day entry domain service: the open -> submitted -> confirmed lifecycle."""

import threading
import weakref
from contextlib import contextmanager
from datetime import date
from decimal import Decimal
from typing import Iterator, Optional

from tillbook.database.base import Database
from tillbook.domain import denominations, payments, reconciliation
from tillbook.domain.carry_forward import CarryForwardResolver
from tillbook.domain.counter import CounterService
from tillbook.domain.entities import (
    CombinedSales,
    CounterKind,
    DayEntry,
    DenominationCount,
    EntryStatus,
    PaymentDirection,
    SalesData,
    SimpleSales,
)
from tillbook.domain.errors import (
    ConflictError,
    NotFoundError,
    StatePreconditionError,
    ValidationError,
    entry_id_not_found,
    entry_not_found,
    invalid_state,
)
from tillbook.logging_config import get_logger
from tillbook.utils.clock import BusinessClock

logger = get_logger("services.day_entry")


def empty_sales(kind: CounterKind) -> SalesData:
    """Return zeroed sales of the shape used by ``kind`` counters."""
    if CounterKind(kind) == CounterKind.COMBINED:
        return CombinedSales()
    return SimpleSales()


class DayEntryService:
    """Service for creating and advancing day entries.

    Read-modify-write sequences are serialized per (counter, date) within
    this process. Writers in other processes are last-write-wins; entry
    creation is still protected by the database's unique constraint.
    """

    def __init__(
        self,
        db: Database,
        clock: BusinessClock,
        resolver: Optional[CarryForwardResolver] = None,
    ):
        """Initialize day entry service.

        Args:
            db: Database instance
            clock: Business clock for timestamps and day arithmetic
            resolver: Carry-forward resolver (built from db and clock if None)
        """
        self.db = db
        self.clock = clock
        self.resolver = resolver or CarryForwardResolver(db, clock)
        self.counters = CounterService(db)
        self._locks: "weakref.WeakValueDictionary[tuple[str, date], threading.Lock]" = (
            weakref.WeakValueDictionary()
        )
        self._locks_guard = threading.Lock()

    @contextmanager
    def _key_lock(self, counter_name: str, entry_date: date) -> Iterator[None]:
        # A key's lock lives only while some caller holds a reference to it
        with self._locks_guard:
            lock = self._locks.get((counter_name, entry_date))
            if lock is None:
                lock = threading.Lock()
                self._locks[(counter_name, entry_date)] = lock
        with lock:
            yield

    # Reads
    def get_or_create(self, counter_name: str, entry_date: date) -> DayEntry:
        """Return the entry for a counter-day, creating it if needed.

        A new entry opens with the balance resolved by the carry-forward
        resolver, no payments, zero sales and an empty closing count.

        Raises:
            NotFoundError: If the counter is not registered
        """
        with self._key_lock(counter_name, entry_date):
            entry = self.db.get_entry(counter_name, entry_date)
            if entry is not None:
                return entry

            counter = self.counters.require_counter(counter_name)
            opening = self.resolver.opening_for(counter_name, entry_date)
            try:
                entry = self.db.insert_entry(
                    counter_name=counter_name,
                    entry_date=entry_date,
                    opening_cash=opening.amount,
                    opening_denominations=opening.denominations,
                    sales=empty_sales(counter.kind),
                )
            except ConflictError:
                # Another writer created it first
                entry = self.db.get_entry(counter_name, entry_date)
                if entry is None:
                    raise
                return entry

        logger.info("entry_created", extra={
            "entry_id": entry.id,
            "counter_name": counter_name,
            "date": entry_date,
            "opening_cash": opening.amount,
            "opening_source": opening.source,
        })
        return entry

    def get_today(self, counter_name: str) -> DayEntry:
        """Return (creating if needed) the entry for the current business day."""
        return self.get_or_create(counter_name, self.clock.today())

    def get_entry(self, counter_name: str, entry_date: date) -> DayEntry:
        """Return an existing entry without creating one.

        Raises:
            NotFoundError: If there is no entry for the counter-day
        """
        entry = self.db.get_entry(counter_name, entry_date)
        if entry is None:
            raise NotFoundError(entry_not_found(counter_name, entry_date))
        return entry

    def get_entry_by_id(self, entry_id: int) -> DayEntry:
        """Return an entry by ID.

        Raises:
            NotFoundError: If the entry does not exist
        """
        entry = self.db.get_entry_by_id(entry_id)
        if entry is None:
            raise NotFoundError(entry_id_not_found(entry_id))
        return entry

    def list_entries(self, entry_date: date) -> list[DayEntry]:
        """List all counters' entries for a date, ordered by counter name."""
        return self.db.list_entries(entry_date=entry_date)

    @staticmethod
    def _require_status(entry: DayEntry, action: str, *allowed: EntryStatus) -> None:
        if entry.status not in allowed:
            logger.warning("action_rejected_state", extra={
                "entry_id": entry.id,
                "action": action,
                "status": entry.status,
            })
            raise StatePreconditionError(
                invalid_state(action, entry.status.value, tuple(s.value for s in allowed))
            )

    # Payments
    def record_payment(
        self,
        counter_name: str,
        entry_date: date,
        description: str,
        amount: Decimal,
        direction: PaymentDirection = PaymentDirection.OUT,
    ) -> DayEntry:
        """Append a cash movement to an open entry.

        Raises:
            NotFoundError: If the entry does not exist
            StatePreconditionError: If the entry is not open
            ValidationError: If the amount is not positive or the direction is unknown
        """
        with self._key_lock(counter_name, entry_date):
            entry = self.get_entry(counter_name, entry_date)
            self._require_status(entry, "record payment", EntryStatus.OPEN)
            now = self.clock.now()
            updated = payments.append(
                entry.payments, description, amount, direction, now,
                last_issued=entry.last_payment_id,
            )
            return self.db.replace_payments(
                entry.id, updated, last_payment_id=updated[-1].id, updated_at=now
            )

    def edit_payment(
        self,
        counter_name: str,
        entry_date: date,
        payment_id: int,
        description: Optional[str] = None,
        amount: Optional[Decimal] = None,
        direction: Optional[PaymentDirection] = None,
    ) -> DayEntry:
        """Change a payment on an open entry.

        Raises:
            NotFoundError: If the entry or payment does not exist
            StatePreconditionError: If the entry is not open
            ValidationError: If the amount is not positive or the direction is unknown
        """
        with self._key_lock(counter_name, entry_date):
            entry = self.get_entry(counter_name, entry_date)
            self._require_status(entry, "edit payment", EntryStatus.OPEN)
            updated = payments.replace_payment(
                entry.payments,
                payment_id,
                description=description,
                amount=amount,
                direction=direction,
            )
            return self.db.replace_payments(entry.id, updated, updated_at=self.clock.now())

    def remove_payment(self, counter_name: str, entry_date: date, payment_id: int) -> DayEntry:
        """Delete a payment from an open entry.

        Raises:
            NotFoundError: If the entry or payment does not exist
            StatePreconditionError: If the entry is not open
        """
        with self._key_lock(counter_name, entry_date):
            entry = self.get_entry(counter_name, entry_date)
            self._require_status(entry, "remove payment", EntryStatus.OPEN)
            updated = payments.remove(entry.payments, payment_id)
            return self.db.replace_payments(entry.id, updated, updated_at=self.clock.now())

    # Sales and cash counts
    def update_sales(self, counter_name: str, entry_date: date, sales: SalesData) -> DayEntry:
        """Replace the sales figures of an open entry.

        Raises:
            NotFoundError: If the entry does not exist
            StatePreconditionError: If the entry is not open
            ValidationError: If the sales shape does not match the counter kind
        """
        with self._key_lock(counter_name, entry_date):
            entry = self.get_entry(counter_name, entry_date)
            self._require_status(entry, "update sales", EntryStatus.OPEN)
            counter = self.counters.get_counter(counter_name)
            expected_kind = counter.kind if counter is not None else entry.sales.kind
            if sales.kind != expected_kind:
                raise ValidationError(
                    f"Counter '{counter_name}' records {expected_kind.value} sales, "
                    f"got {sales.kind.value}",
                    field="sales",
                )
            return self.db.update_entry(entry.id, sales=sales, updated_at=self.clock.now())

    def record_closing_count(
        self,
        counter_name: str,
        entry_date: date,
        denoms: DenominationCount,
        forward_all: bool = False,
    ) -> DayEntry:
        """Record the physical cash count at close on an open entry.

        Args:
            forward_all: Also forward the whole count as next day's opening

        Raises:
            NotFoundError: If the entry does not exist
            StatePreconditionError: If the entry is not open
            ValidationError: If a quantity is negative
        """
        denominations.validate(denoms, "closing_denominations")
        with self._key_lock(counter_name, entry_date):
            entry = self.get_entry(counter_name, entry_date)
            self._require_status(entry, "record closing count", EntryStatus.OPEN)
            fields = {"closing_denominations": denoms, "updated_at": self.clock.now()}
            if forward_all:
                fields["next_day_opening_cash"] = denominations.total(denoms)
                fields["next_day_opening_denominations"] = denoms
            return self.db.update_entry(entry.id, **fields)

    def record_forwarding(
        self,
        counter_name: str,
        entry_date: date,
        denoms: DenominationCount,
        amount: Optional[Decimal] = None,
    ) -> DayEntry:
        """Set the cash kept in the till as next day's opening float.

        Allowed in any status so a forgotten float can still be recorded
        before the next day is opened. ``amount`` defaults to the value of
        ``denoms``.

        Raises:
            NotFoundError: If the entry does not exist
            ValidationError: If a quantity or the amount is negative
        """
        denominations.validate(denoms, "next_day_opening_denominations")
        if amount is None:
            amount = denominations.total(denoms)
        if amount < 0:
            raise ValidationError(
                f"Next-day opening cannot be negative ({amount})", field="next_day_opening_cash"
            )
        with self._key_lock(counter_name, entry_date):
            entry = self.get_entry(counter_name, entry_date)
            return self.db.update_entry(
                entry.id,
                next_day_opening_cash=amount,
                next_day_opening_denominations=denoms,
                updated_at=self.clock.now(),
            )

    def verify_opening(self, counter_name: str, entry_date: date) -> DayEntry:
        """Mark the opening cash as physically counted by the operator.

        Informational only; totals are unchanged. Repeating it just
        refreshes the timestamp.

        Raises:
            NotFoundError: If the entry does not exist
        """
        with self._key_lock(counter_name, entry_date):
            entry = self.get_entry(counter_name, entry_date)
            now = self.clock.now()
            return self.db.update_entry(
                entry.id, opening_verified=True, opening_verified_at=now, updated_at=now
            )

    # Lifecycle transitions
    def submit(self, counter_name: str, entry_date: date, closed_by: str) -> DayEntry:
        """Close the day: snapshot the reconciliation and mark the entry submitted.

        Args:
            closed_by: Name of the person closing the counter

        Raises:
            ValidationError: If ``closed_by`` is blank
            NotFoundError: If the entry does not exist
            StatePreconditionError: If the entry is not open
        """
        closed_by = (closed_by or "").strip()
        if not closed_by:
            raise ValidationError("Closed-by name is required", field="closed_by")

        with self._key_lock(counter_name, entry_date):
            entry = self.get_entry(counter_name, entry_date)
            self._require_status(entry, "submit", EntryStatus.OPEN)

            cash = reconciliation.cash_sales(entry.sales)
            summary = reconciliation.payment_summary(entry.payments)
            expected = reconciliation.expected_cash(
                entry.opening_cash, cash, summary.total_in, summary.total_out
            )
            actual = denominations.total(entry.closing_denominations)
            shortage = reconciliation.shortage(expected, actual)
            now = self.clock.now()

            submitted = self.db.update_entry(
                entry.id,
                status=EntryStatus.SUBMITTED,
                submitted_expected_cash=expected,
                submitted_actual_cash=actual,
                submitted_shortage=shortage,
                closed_by=closed_by,
                submitted_at=now,
                updated_at=now,
            )

        logger.info("day_submitted", extra={
            "entry_id": entry.id,
            "counter_name": counter_name,
            "date": entry_date,
            "expected_cash": expected,
            "actual_cash": actual,
            "shortage": shortage,
            "closed_by": closed_by,
        })
        return submitted

    def confirm(self, entry_id: int, confirmed_by: str) -> DayEntry:
        """Confirm a submitted entry. Snapshot figures are not recomputed.

        Raises:
            NotFoundError: If the entry does not exist
            StatePreconditionError: If the entry is not submitted
        """
        entry = self.get_entry_by_id(entry_id)
        with self._key_lock(entry.counter_name, entry.date):
            entry = self.get_entry_by_id(entry_id)
            self._require_status(entry, "confirm", EntryStatus.SUBMITTED)
            now = self.clock.now()
            confirmed = self.db.update_entry(
                entry_id,
                status=EntryStatus.CONFIRMED,
                confirmed_by=confirmed_by,
                confirmed_at=now,
                updated_at=now,
            )
        logger.info("entry_confirmed", extra={
            "entry_id": entry_id,
            "counter_name": entry.counter_name,
            "date": entry.date,
            "confirmed_by": confirmed_by,
        })
        return confirmed

    def unlock(self, entry_id: int) -> DayEntry:
        """Reopen a submitted or confirmed entry for editing.

        Submission and confirmation metadata is cleared; snapshot figures
        and all cash and sales data are kept until the next submit.

        Raises:
            NotFoundError: If the entry does not exist
            StatePreconditionError: If the entry is already open
        """
        entry = self.get_entry_by_id(entry_id)
        with self._key_lock(entry.counter_name, entry.date):
            entry = self.get_entry_by_id(entry_id)
            self._require_status(entry, "unlock", EntryStatus.SUBMITTED, EntryStatus.CONFIRMED)
            unlocked = self.db.update_entry(
                entry_id,
                status=EntryStatus.OPEN,
                submitted_at=None,
                confirmed_by=None,
                confirmed_at=None,
                updated_at=self.clock.now(),
            )
        logger.info("entry_unlocked", extra={
            "entry_id": entry_id,
            "counter_name": entry.counter_name,
            "date": entry.date,
            "previous_status": entry.status,
        })
        return unlocked

    def override_opening(
        self,
        entry_id: int,
        denoms: DenominationCount,
        amount: Optional[Decimal] = None,
    ) -> DayEntry:
        """Rewrite an entry's opening cash in any status and mark it verified.

        ``amount`` defaults to the value of ``denoms``.

        Raises:
            NotFoundError: If the entry does not exist
            ValidationError: If a quantity or the amount is negative
        """
        denominations.validate(denoms, "opening_denominations")
        if amount is None:
            amount = denominations.total(denoms)
        if amount < 0:
            raise ValidationError(f"Opening cash cannot be negative ({amount})", field="opening_cash")

        entry = self.get_entry_by_id(entry_id)
        with self._key_lock(entry.counter_name, entry.date):
            now = self.clock.now()
            updated = self.db.update_entry(
                entry_id,
                opening_cash=amount,
                opening_denominations=denoms,
                opening_verified=True,
                opening_verified_at=now,
                updated_at=now,
            )
        logger.info("opening_overridden", extra={
            "entry_id": entry_id,
            "counter_name": entry.counter_name,
            "date": entry.date,
            "previous_opening": entry.opening_cash,
            "opening_cash": amount,
        })
        return updated

    def override_closing_count(self, entry_id: int, denoms: DenominationCount) -> DayEntry:
        """Correct an entry's closing count in any status.

        The submitted snapshot is left as it was; unlock and resubmit to
        recompute it.

        Raises:
            NotFoundError: If the entry does not exist
            ValidationError: If a quantity is negative
        """
        denominations.validate(denoms, "closing_denominations")
        entry = self.get_entry_by_id(entry_id)
        with self._key_lock(entry.counter_name, entry.date):
            updated = self.db.update_entry(
                entry_id, closing_denominations=denoms, updated_at=self.clock.now()
            )
        logger.info("closing_overridden", extra={
            "entry_id": entry_id,
            "counter_name": entry.counter_name,
            "date": entry.date,
            "closing_cash": denominations.total(denoms),
        })
        return updated
