"""Tests for the day entry lifecycle service."""

import gc
import threading
from datetime import date
from decimal import Decimal

import pytest

from tillbook.domain.entities import (
    CombinedSales,
    DenominationCount,
    EntryStatus,
    PaymentDirection,
    SalesFigures,
    SimpleSales,
)
from tillbook.domain.errors import NotFoundError, StatePreconditionError, ValidationError

COUNTER = "Smart Mart Counter 1"
FASHION = "Smart Fashion (Both)"
DAY = date(2024, 3, 10)


def _sales(total, card="0", credit="0"):
    return SimpleSales(SalesFigures(Decimal(total), Decimal(card), Decimal(credit)))


class TestGetOrCreate:
    """Tests for opening a day entry."""

    def test_creates_open_entry(self, entry_service, sample_counters):
        entry = entry_service.get_or_create(COUNTER, DAY)

        assert entry.counter_name == COUNTER
        assert entry.date == DAY
        assert entry.status == EntryStatus.OPEN
        assert entry.payments == ()
        assert entry.sales == SimpleSales()
        assert entry.closing_denominations == DenominationCount()
        assert entry.opening_cash == Decimal("0")

    def test_combined_counter_gets_combined_sales(self, entry_service, sample_counters):
        entry = entry_service.get_or_create(FASHION, DAY)
        assert isinstance(entry.sales, CombinedSales)

    def test_repeated_calls_return_same_entry(self, entry_service, temp_db, sample_counters):
        first = entry_service.get_or_create(COUNTER, DAY)
        second = entry_service.get_or_create(COUNTER, DAY)

        assert first.id == second.id
        assert len(temp_db.list_entries(entry_date=DAY, counter_name=COUNTER)) == 1

    def test_get_today_uses_business_date(self, entry_service, sample_counters):
        assert entry_service.get_today(COUNTER).date == DAY

    def test_business_date_follows_timezone(self, entry_service, clock, sample_counters):
        # 19:00 UTC is already the next day in India
        clock.advance(hours=12, minutes=30)
        assert entry_service.get_today(COUNTER).date == date(2024, 3, 11)

    def test_unknown_counter(self, entry_service, sample_counters):
        with pytest.raises(NotFoundError, match="Counter 'Nowhere' not found"):
            entry_service.get_or_create("Nowhere", DAY)

    def test_get_entry_does_not_create(self, entry_service, temp_db, sample_counters):
        with pytest.raises(NotFoundError):
            entry_service.get_entry(COUNTER, DAY)
        assert temp_db.list_entries(entry_date=DAY) == []

    def test_get_entry_by_id_missing(self, entry_service):
        with pytest.raises(NotFoundError, match="Entry 99 not found"):
            entry_service.get_entry_by_id(99)


class TestPayments:
    """Tests for payments on an open entry."""

    def test_record_payment(self, entry_service, sample_counters):
        entry_service.get_or_create(COUNTER, DAY)

        entry = entry_service.record_payment(COUNTER, DAY, "Tea", Decimal("50"))
        entry = entry_service.record_payment(
            COUNTER, DAY, "Change", Decimal("500"), PaymentDirection.IN
        )

        assert [(p.id, p.direction, p.amount) for p in entry.payments] == [
            (1, PaymentDirection.OUT, Decimal("50.00")),
            (2, PaymentDirection.IN, Decimal("500.00")),
        ]

    def test_edit_payment_by_id(self, entry_service, sample_counters):
        entry_service.get_or_create(COUNTER, DAY)
        entry_service.record_payment(COUNTER, DAY, "Tea", Decimal("50"))
        entry_service.record_payment(COUNTER, DAY, "Courier", Decimal("80"))

        entry = entry_service.edit_payment(COUNTER, DAY, 2, amount=Decimal("90"))

        assert entry.payments[0].amount == Decimal("50")
        assert entry.payments[1].amount == Decimal("90")
        assert entry.payments[1].description == "Courier"

    def test_remove_then_edit_targets_stable_id(self, entry_service, sample_counters):
        entry_service.get_or_create(COUNTER, DAY)
        entry_service.record_payment(COUNTER, DAY, "Tea", Decimal("50"))
        entry_service.record_payment(COUNTER, DAY, "Courier", Decimal("80"))
        entry_service.record_payment(COUNTER, DAY, "Water", Decimal("20"))

        entry_service.remove_payment(COUNTER, DAY, 1)
        entry = entry_service.edit_payment(COUNTER, DAY, 3, description="Water cans")

        assert [(p.id, p.description) for p in entry.payments] == [(2, "Courier"), (3, "Water cans")]

    def test_removed_id_is_not_reissued(self, entry_service, sample_counters):
        entry_service.get_or_create(COUNTER, DAY)
        entry_service.record_payment(COUNTER, DAY, "Tea", Decimal("50"))
        entry_service.record_payment(COUNTER, DAY, "Courier", Decimal("80"))

        entry_service.remove_payment(COUNTER, DAY, 2)
        entry = entry_service.record_payment(
            COUNTER, DAY, "Float top-up", Decimal("500"), PaymentDirection.IN
        )

        assert [p.id for p in entry.payments] == [1, 3]
        assert entry.last_payment_id == 3

    def test_stale_id_does_not_touch_newer_payment(self, entry_service, sample_counters):
        entry_service.get_or_create(COUNTER, DAY)
        entry_service.record_payment(COUNTER, DAY, "Tea", Decimal("50"))
        entry_service.record_payment(COUNTER, DAY, "Courier", Decimal("80"))
        entry_service.remove_payment(COUNTER, DAY, 2)
        entry_service.record_payment(
            COUNTER, DAY, "Float top-up", Decimal("500"), PaymentDirection.IN
        )

        with pytest.raises(NotFoundError):
            entry_service.remove_payment(COUNTER, DAY, 2)
        with pytest.raises(NotFoundError):
            entry_service.edit_payment(COUNTER, DAY, 2, amount=Decimal("1"))

        payments = entry_service.get_entry(COUNTER, DAY).payments
        assert [(p.description, p.amount) for p in payments] == [
            ("Tea", Decimal("50")),
            ("Float top-up", Decimal("500")),
        ]

    @pytest.mark.parametrize("direction", ["in", "SIDE", None])
    def test_record_payment_rejects_unknown_direction(self, entry_service, sample_counters, direction):
        entry_service.get_or_create(COUNTER, DAY)
        with pytest.raises(ValidationError) as excinfo:
            entry_service.record_payment(COUNTER, DAY, "Tea", Decimal("5"), direction)
        assert excinfo.value.field == "direction"
        assert entry_service.get_entry(COUNTER, DAY).payments == ()

    def test_record_payment_rejects_zero_amount(self, entry_service, sample_counters):
        entry_service.get_or_create(COUNTER, DAY)
        with pytest.raises(ValidationError):
            entry_service.record_payment(COUNTER, DAY, "Nothing", Decimal("0"))
        assert entry_service.get_entry(COUNTER, DAY).payments == ()

    def test_payment_on_missing_entry(self, entry_service, sample_counters):
        with pytest.raises(NotFoundError):
            entry_service.record_payment(COUNTER, DAY, "Tea", Decimal("10"))

    def test_remove_unknown_payment(self, entry_service, sample_counters):
        entry_service.get_or_create(COUNTER, DAY)
        with pytest.raises(NotFoundError):
            entry_service.remove_payment(COUNTER, DAY, 4)


class TestSalesAndCounts:
    """Tests for sales figures, closing counts and forwarding."""

    def test_update_sales_replaces_figures(self, entry_service, sample_counters):
        entry_service.get_or_create(COUNTER, DAY)
        entry_service.update_sales(COUNTER, DAY, _sales("1000", "200", "100"))

        entry = entry_service.update_sales(COUNTER, DAY, _sales("1500"))

        assert entry.sales == _sales("1500")

    def test_update_sales_rejects_wrong_shape(self, entry_service, sample_counters):
        entry_service.get_or_create(FASHION, DAY)
        with pytest.raises(ValidationError) as excinfo:
            entry_service.update_sales(FASHION, DAY, _sales("1000"))
        assert excinfo.value.field == "sales"

    def test_update_combined_sales(self, entry_service, sample_counters):
        entry_service.get_or_create(FASHION, DAY)
        sales = CombinedSales(
            mart=SalesFigures(Decimal("500"), Decimal("100"), Decimal("0")),
            fashion=SalesFigures(Decimal("300"), Decimal("50"), Decimal("20")),
        )

        entry = entry_service.update_sales(FASHION, DAY, sales)

        assert entry.sales == sales

    def test_record_closing_count(self, entry_service, sample_counters):
        entry_service.get_or_create(COUNTER, DAY)

        entry = entry_service.record_closing_count(COUNTER, DAY, DenominationCount(notes_500=2))

        assert entry.closing_denominations == DenominationCount(notes_500=2)
        assert entry.next_day_opening_denominations is None

    def test_record_closing_count_forward_all(self, entry_service, sample_counters):
        entry_service.get_or_create(COUNTER, DAY)

        entry = entry_service.record_closing_count(
            COUNTER, DAY, DenominationCount(notes_100=4, coins_5=2), forward_all=True
        )

        assert entry.next_day_opening_cash == Decimal("410")
        assert entry.next_day_opening_denominations == DenominationCount(notes_100=4, coins_5=2)

    def test_record_closing_count_rejects_negative(self, entry_service, sample_counters):
        entry_service.get_or_create(COUNTER, DAY)
        with pytest.raises(ValidationError):
            entry_service.record_closing_count(COUNTER, DAY, DenominationCount(notes_10=-2))

    def test_record_forwarding_defaults_amount_to_value(self, entry_service, sample_counters):
        entry_service.get_or_create(COUNTER, DAY)

        entry = entry_service.record_forwarding(COUNTER, DAY, DenominationCount(notes_50=3))

        assert entry.next_day_opening_cash == Decimal("150")

    def test_record_forwarding_with_explicit_amount(self, entry_service, sample_counters):
        entry_service.get_or_create(COUNTER, DAY)

        entry = entry_service.record_forwarding(
            COUNTER, DAY, DenominationCount(notes_50=3), amount=Decimal("175")
        )

        assert entry.next_day_opening_cash == Decimal("175")

    def test_record_forwarding_allowed_after_submit(self, entry_service, sample_counters):
        entry_service.get_or_create(COUNTER, DAY)
        entry_service.submit(COUNTER, DAY, "Raj")

        entry = entry_service.record_forwarding(COUNTER, DAY, DenominationCount(notes_100=1))

        assert entry.status == EntryStatus.SUBMITTED
        assert entry.next_day_opening_cash == Decimal("100")

    def test_verify_opening_is_idempotent(self, entry_service, clock, sample_counters):
        entry_service.get_or_create(COUNTER, DAY)

        first = entry_service.verify_opening(COUNTER, DAY)
        clock.advance(minutes=5)
        second = entry_service.verify_opening(COUNTER, DAY)

        assert first.opening_verified and second.opening_verified
        assert second.opening_verified_at > first.opening_verified_at
        assert second.opening_cash == first.opening_cash


class TestLifecycle:
    """Tests for submit, confirm and unlock."""

    def test_submit_records_snapshot(self, entry_service, sample_counters):
        day = date(2024, 1, 1)
        entry_service.get_or_create(COUNTER, day)
        entry_service.record_payment(COUNTER, day, "Supplies", Decimal("100"))
        entry_service.update_sales(COUNTER, day, _sales("1000", "200", "0"))
        entry_service.record_closing_count(COUNTER, day, DenominationCount(notes_500=2, notes_100=2))

        entry = entry_service.submit(COUNTER, day, "Raj")

        assert entry.status == EntryStatus.SUBMITTED
        assert entry.submitted_expected_cash == Decimal("700")
        assert entry.submitted_actual_cash == Decimal("1200")
        assert entry.submitted_shortage == Decimal("-500")
        assert entry.closed_by == "Raj"
        assert entry.submitted_at is not None

    @pytest.mark.parametrize("closed_by", ["", "   "])
    def test_submit_requires_closed_by(self, entry_service, sample_counters, closed_by):
        entry_service.get_or_create(COUNTER, DAY)

        with pytest.raises(ValidationError) as excinfo:
            entry_service.submit(COUNTER, DAY, closed_by)

        assert excinfo.value.field == "closed_by"
        assert entry_service.get_entry(COUNTER, DAY).status == EntryStatus.OPEN

    def test_submit_twice_is_rejected(self, entry_service, sample_counters):
        entry_service.get_or_create(COUNTER, DAY)
        entry_service.submit(COUNTER, DAY, "Raj")

        with pytest.raises(StatePreconditionError, match="must be open"):
            entry_service.submit(COUNTER, DAY, "Raj")

    @pytest.mark.parametrize(
        "mutate",
        [
            lambda s: s.record_payment(COUNTER, DAY, "Tea", Decimal("10")),
            lambda s: s.edit_payment(COUNTER, DAY, 1, amount=Decimal("10")),
            lambda s: s.remove_payment(COUNTER, DAY, 1),
            lambda s: s.update_sales(COUNTER, DAY, _sales("100")),
            lambda s: s.record_closing_count(COUNTER, DAY, DenominationCount(notes_10=1)),
        ],
    )
    def test_submitted_entry_rejects_edits(self, entry_service, sample_counters, mutate):
        entry_service.get_or_create(COUNTER, DAY)
        entry_service.record_payment(COUNTER, DAY, "Tea", Decimal("20"))
        before = entry_service.submit(COUNTER, DAY, "Raj")

        with pytest.raises(StatePreconditionError):
            mutate(entry_service)

        after = entry_service.get_entry(COUNTER, DAY)
        assert after.payments == before.payments
        assert after.sales == before.sales
        assert after.closing_denominations == before.closing_denominations

    def test_confirm_requires_submitted(self, entry_service, sample_counters):
        entry = entry_service.get_or_create(COUNTER, DAY)
        with pytest.raises(StatePreconditionError):
            entry_service.confirm(entry.id, "owner")

    def test_confirm_keeps_snapshot(self, entry_service, sample_counters):
        entry = entry_service.get_or_create(COUNTER, DAY)
        entry_service.update_sales(COUNTER, DAY, _sales("300"))
        submitted = entry_service.submit(COUNTER, DAY, "Raj")

        confirmed = entry_service.confirm(entry.id, "owner")

        assert confirmed.status == EntryStatus.CONFIRMED
        assert confirmed.confirmed_by == "owner"
        assert confirmed.confirmed_at is not None
        assert confirmed.submitted_shortage == submitted.submitted_shortage

    def test_unlock_clears_submission_metadata(self, entry_service, sample_counters):
        entry = entry_service.get_or_create(COUNTER, DAY)
        entry_service.submit(COUNTER, DAY, "Raj")
        entry_service.confirm(entry.id, "owner")

        unlocked = entry_service.unlock(entry.id)

        assert unlocked.status == EntryStatus.OPEN
        assert unlocked.submitted_at is None
        assert unlocked.confirmed_by is None
        assert unlocked.confirmed_at is None
        assert unlocked.closed_by == "Raj"

    def test_unlock_open_entry_is_rejected(self, entry_service, sample_counters):
        entry = entry_service.get_or_create(COUNTER, DAY)
        with pytest.raises(StatePreconditionError):
            entry_service.unlock(entry.id)

    def test_unlock_then_resubmit_recomputes(self, entry_service, sample_counters):
        entry = entry_service.get_or_create(COUNTER, DAY)
        entry_service.update_sales(COUNTER, DAY, _sales("1000"))
        first = entry_service.submit(COUNTER, DAY, "Raj")
        assert first.submitted_shortage == Decimal("1000")

        entry_service.unlock(entry.id)
        entry_service.record_closing_count(COUNTER, DAY, DenominationCount(notes_500=2))
        second = entry_service.submit(COUNTER, DAY, "Raj")

        assert second.submitted_actual_cash == Decimal("1000")
        assert second.submitted_shortage == Decimal("0")


class TestOverrides:
    """Tests for administrative corrections."""

    def test_override_opening_marks_verified(self, entry_service, sample_counters):
        entry = entry_service.get_or_create(COUNTER, DAY)

        updated = entry_service.override_opening(entry.id, DenominationCount(notes_200=5))

        assert updated.opening_cash == Decimal("1000")
        assert updated.opening_denominations == DenominationCount(notes_200=5)
        assert updated.opening_verified is True

    def test_override_opening_on_confirmed_entry(self, entry_service, sample_counters):
        entry = entry_service.get_or_create(COUNTER, DAY)
        entry_service.submit(COUNTER, DAY, "Raj")
        entry_service.confirm(entry.id, "owner")

        updated = entry_service.override_opening(
            entry.id, DenominationCount(notes_100=1), amount=Decimal("120")
        )

        assert updated.status == EntryStatus.CONFIRMED
        assert updated.opening_cash == Decimal("120")

    def test_override_opening_rejects_negative_amount(self, entry_service, sample_counters):
        entry = entry_service.get_or_create(COUNTER, DAY)
        with pytest.raises(ValidationError) as excinfo:
            entry_service.override_opening(entry.id, DenominationCount(), amount=Decimal("-5"))
        assert excinfo.value.field == "opening_cash"

    def test_override_closing_count_keeps_snapshot(self, entry_service, sample_counters):
        entry = entry_service.get_or_create(COUNTER, DAY)
        submitted = entry_service.submit(COUNTER, DAY, "Raj")

        updated = entry_service.override_closing_count(entry.id, DenominationCount(notes_500=1))

        assert updated.closing_denominations == DenominationCount(notes_500=1)
        assert updated.submitted_actual_cash == submitted.submitted_actual_cash
        assert updated.status == EntryStatus.SUBMITTED

    def test_list_entries_ordered_by_counter(self, entry_service, sample_counters):
        for name in sample_counters:
            entry_service.get_or_create(name, DAY)

        names = [e.counter_name for e in entry_service.list_entries(DAY)]

        assert names == sorted(sample_counters)


class TestConcurrency:
    """Tests for one service shared by several threads."""

    @staticmethod
    def _run_threads(target, args_list):
        errors = []

        def run(*args):
            try:
                target(*args)
            except Exception as e:  # collected for the assertion below
                errors.append(e)

        threads = [threading.Thread(target=run, args=args) for args in args_list]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        return errors

    def test_threads_on_different_counters(self, entry_service, sample_counters):
        def work(counter_name):
            entry_service.get_or_create(counter_name, DAY)
            entry_service.record_payment(counter_name, DAY, "Tea", Decimal("10"))

        errors = self._run_threads(work, [(name,) for name in sample_counters])

        assert errors == []
        entries = entry_service.list_entries(DAY)
        assert sorted(e.counter_name for e in entries) == sorted(sample_counters)
        assert all(len(e.payments) == 1 for e in entries)

    def test_threads_on_same_entry_keep_every_payment(self, entry_service, sample_counters):
        entry_service.get_or_create(COUNTER, DAY)

        def work(n):
            entry_service.record_payment(COUNTER, DAY, f"Item {n}", Decimal(n))

        errors = self._run_threads(work, [(n,) for n in range(1, 9)])

        assert errors == []
        payments = entry_service.get_entry(COUNTER, DAY).payments
        assert sorted(p.id for p in payments) == list(range(1, 9))
        assert sum(p.amount for p in payments) == Decimal("36")

    def test_idle_key_locks_are_released(self, entry_service, sample_counters):
        entry_service.get_or_create(COUNTER, DAY)
        entry_service.record_payment(COUNTER, DAY, "Tea", Decimal("10"))

        gc.collect()

        assert len(entry_service._locks) == 0
