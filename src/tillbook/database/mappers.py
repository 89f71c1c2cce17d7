"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, including the JSON document shapes
used for denomination counts and sales figures.
"""

from datetime import datetime, UTC
from decimal import Decimal
from typing import Any, Optional

from tillbook.domain import denominations
from tillbook.domain import entities as domain
from tillbook.database.models import (
    Counter as ORMCounter,
    DayEntry as ORMDayEntry,
    Payment as ORMPayment,
)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive timestamps (SQLite drops the offset)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _decimal(value: Any) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    return Decimal(str(value))


def _optional_decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    return Decimal(str(value))


def figures_from_mapping(data: Optional[dict[str, Any]]) -> domain.SalesFigures:
    data = data or {}
    return domain.SalesFigures(
        total=_decimal(data.get("total")),
        card_upi=_decimal(data.get("card_upi")),
        credit=_decimal(data.get("credit")),
    )


def figures_to_mapping(figures: domain.SalesFigures) -> dict[str, str]:
    return {
        "total": str(figures.total),
        "card_upi": str(figures.card_upi),
        "credit": str(figures.credit),
    }


def sales_from_mapping(data: Optional[dict[str, Any]]) -> domain.SalesData:
    """Convert a stored sales document to a domain sales variant.

    Documents without a ``kind`` tag are combined when they carry unit
    sub-documents and simple otherwise.
    """
    data = data or {}
    kind = data.get("kind")
    if kind is None:
        kind = domain.CounterKind.COMBINED.value if "mart" in data else domain.CounterKind.SIMPLE.value
    if kind == domain.CounterKind.COMBINED.value:
        return domain.CombinedSales(
            mart=figures_from_mapping(data.get("mart")),
            fashion=figures_from_mapping(data.get("fashion")),
        )
    return domain.SimpleSales(figures=figures_from_mapping(data))


def sales_to_mapping(sales: domain.SalesData) -> dict[str, Any]:
    """Convert a domain sales variant to a JSON document."""
    if isinstance(sales, domain.CombinedSales):
        return {
            "kind": domain.CounterKind.COMBINED.value,
            "mart": figures_to_mapping(sales.mart),
            "fashion": figures_to_mapping(sales.fashion),
        }
    return {"kind": domain.CounterKind.SIMPLE.value, **figures_to_mapping(sales.figures)}


def counter_to_domain(orm_counter: ORMCounter) -> domain.Counter:
    """Convert SQLAlchemy Counter model to domain Counter entity."""
    return domain.Counter(
        id=orm_counter.id,
        name=orm_counter.name,
        kind=domain.CounterKind(orm_counter.kind),
        created_at=_as_utc(orm_counter.created_at),
    )


def payment_to_domain(orm_payment: ORMPayment) -> domain.Payment:
    """Convert SQLAlchemy Payment model to domain Payment entity."""
    direction = orm_payment.direction
    return domain.Payment(
        id=orm_payment.payment_no,
        time=_as_utc(orm_payment.time),
        description=orm_payment.description or "",
        amount=_decimal(orm_payment.amount),
        direction=domain.PaymentDirection(direction) if direction else None,
    )


def payment_to_orm(payment: domain.Payment, position: int) -> ORMPayment:
    """Convert domain Payment entity to a new SQLAlchemy Payment row."""
    return ORMPayment(
        payment_no=payment.id,
        position=position,
        time=payment.time,
        description=payment.description,
        amount=payment.amount,
        direction=payment.direction.value if payment.direction else None,
    )


def day_entry_to_domain(orm_entry: ORMDayEntry) -> domain.DayEntry:
    """Convert SQLAlchemy DayEntry model to domain DayEntry entity."""
    next_day_denoms = orm_entry.next_day_opening_denominations
    return domain.DayEntry(
        id=orm_entry.id,
        counter_name=orm_entry.counter_name,
        date=orm_entry.date,
        opening_cash=_decimal(orm_entry.opening_cash),
        opening_denominations=denominations.from_mapping(orm_entry.opening_denominations),
        opening_verified=bool(orm_entry.opening_verified),
        opening_verified_at=_as_utc(orm_entry.opening_verified_at),
        payments=tuple(payment_to_domain(p) for p in orm_entry.payments),
        sales=sales_from_mapping(orm_entry.sales),
        closing_denominations=denominations.from_mapping(orm_entry.closing_denominations),
        next_day_opening_cash=_optional_decimal(orm_entry.next_day_opening_cash),
        next_day_opening_denominations=(
            denominations.from_mapping(next_day_denoms) if next_day_denoms is not None else None
        ),
        submitted_expected_cash=_optional_decimal(orm_entry.submitted_expected_cash),
        submitted_actual_cash=_optional_decimal(orm_entry.submitted_actual_cash),
        submitted_shortage=_optional_decimal(orm_entry.submitted_shortage),
        closed_by=orm_entry.closed_by,
        submitted_at=_as_utc(orm_entry.submitted_at),
        status=domain.EntryStatus(orm_entry.status),
        confirmed_by=orm_entry.confirmed_by,
        confirmed_at=_as_utc(orm_entry.confirmed_at),
        created_at=_as_utc(orm_entry.created_at),
        updated_at=_as_utc(orm_entry.updated_at),
        last_payment_id=orm_entry.last_payment_id or 0,
    )


_DENOMINATION_FIELDS = {
    "opening_denominations",
    "closing_denominations",
    "next_day_opening_denominations",
}


def entry_field_to_column(name: str, value: Any) -> Any:
    """Convert one domain field value to the value stored in its column."""
    if value is None:
        return None
    if name in _DENOMINATION_FIELDS:
        return denominations.to_mapping(value)
    if name == "sales":
        return sales_to_mapping(value)
    if name == "status":
        return domain.EntryStatus(value).value
    return value
