"""Domain model entities for tillbook.

These are pure data classes representing business concepts, independent of
database schema. Currency values are Decimals; denomination quantities are
plain integers.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


# (field name, face value) for every slot, notes first then coins.
DENOMINATION_SLOTS: tuple[tuple[str, int], ...] = (
    ("notes_500", 500),
    ("notes_200", 200),
    ("notes_100", 100),
    ("notes_50", 50),
    ("notes_20", 20),
    ("notes_10", 10),
    ("coins_10", 10),
    ("coins_5", 5),
    ("coins_2", 2),
    ("coins_1", 1),
)


class EntryStatus(str, Enum):
    """Day entry lifecycle status."""

    OPEN = "open"
    SUBMITTED = "submitted"
    CONFIRMED = "confirmed"


class PaymentDirection(str, Enum):
    """Direction of an intraday cash movement."""

    IN = "IN"
    OUT = "OUT"


class CounterKind(str, Enum):
    """Whether a counter reports sales for one business unit or two."""

    SIMPLE = "simple"
    COMBINED = "combined"


class Role(str, Enum):
    """Caller role."""

    ADMIN = "admin"
    SUPERVISOR = "supervisor"
    COUNTER = "counter"


@dataclass(frozen=True)
class DenominationCount:
    """Quantity of each note and coin in a cash count."""

    notes_500: int = 0
    notes_200: int = 0
    notes_100: int = 0
    notes_50: int = 0
    notes_20: int = 0
    notes_10: int = 0
    coins_10: int = 0
    coins_5: int = 0
    coins_2: int = 0
    coins_1: int = 0


@dataclass(frozen=True)
class Payment:
    """Intraday cash movement attached to a day entry.

    ``direction`` is None for legacy records, which count as OUT.
    """

    id: int
    time: datetime
    description: str
    amount: Decimal
    direction: Optional[PaymentDirection] = PaymentDirection.OUT

    @property
    def effective_direction(self) -> PaymentDirection:
        return self.direction or PaymentDirection.OUT


@dataclass(frozen=True)
class SalesFigures:
    """End-of-day sales figures for one business unit."""

    total: Decimal = Decimal("0")
    card_upi: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")


@dataclass(frozen=True)
class SimpleSales:
    """Sales for a counter operating a single business."""

    figures: SalesFigures = field(default_factory=SalesFigures)

    kind = CounterKind.SIMPLE

    @property
    def units(self) -> tuple[SalesFigures, ...]:
        return (self.figures,)


@dataclass(frozen=True)
class CombinedSales:
    """Sales for a counter operating both the mart and fashion businesses."""

    mart: SalesFigures = field(default_factory=SalesFigures)
    fashion: SalesFigures = field(default_factory=SalesFigures)

    kind = CounterKind.COMBINED

    @property
    def units(self) -> tuple[SalesFigures, ...]:
        return (self.mart, self.fashion)


SalesData = Union[SimpleSales, CombinedSales]


@dataclass(frozen=True)
class Counter:
    """Point-of-sale counter."""

    id: int
    name: str
    kind: CounterKind
    created_at: datetime


@dataclass(frozen=True)
class DayEntry:
    """Cash ledger for one counter on one calendar day."""

    id: int
    counter_name: str
    date: date
    opening_cash: Decimal
    opening_denominations: DenominationCount
    payments: tuple[Payment, ...]
    sales: SalesData
    closing_denominations: DenominationCount
    status: EntryStatus
    created_at: datetime
    updated_at: datetime
    opening_verified: bool = False
    opening_verified_at: Optional[datetime] = None
    next_day_opening_cash: Optional[Decimal] = None
    next_day_opening_denominations: Optional[DenominationCount] = None
    submitted_expected_cash: Optional[Decimal] = None
    submitted_actual_cash: Optional[Decimal] = None
    submitted_shortage: Optional[Decimal] = None
    closed_by: Optional[str] = None
    submitted_at: Optional[datetime] = None
    confirmed_by: Optional[str] = None
    confirmed_at: Optional[datetime] = None
    last_payment_id: int = 0


@dataclass(frozen=True)
class Identity:
    """Authenticated caller."""

    username: str
    role: Role
    counter_name: Optional[str] = None


@dataclass(frozen=True)
class PaymentSummary:
    """Payment totals split by direction."""

    total_in: Decimal
    total_out: Decimal


@dataclass(frozen=True)
class OpeningBalance:
    """Opening cash for a day and where it came from.

    ``source`` is "verified" (today's confirmed opening), "carried" (a prior
    day's forwarding) or "none".
    """

    amount: Decimal
    denominations: DenominationCount
    source: str
    source_date: Optional[date] = None


@dataclass(frozen=True)
class Reconciliation:
    """Live reconciliation figures computed from an entry's current data."""

    opening_cash: Decimal
    total_sales: Decimal
    cash_sales: Decimal
    card_upi_sales: Decimal
    credit_sales: Decimal
    total_in: Decimal
    total_out: Decimal
    expected_cash: Decimal
    actual_cash: Decimal
    shortage: Decimal
    next_day_opening: Decimal
    retained: DenominationCount
    retained_cash: Decimal


@dataclass(frozen=True)
class ComparisonRow:
    """One counter's reconciliation in a counter comparison."""

    counter_name: str
    status: Optional[EntryStatus]
    reconciliation: Reconciliation


@dataclass(frozen=True)
class DailySummary:
    """Totals across all counters for one day."""

    date: date
    entry_count: int
    status_counts: dict[str, int]
    cash_sales: Decimal
    card_upi_sales: Decimal
    credit_sales: Decimal
    total_sales: Decimal
    total_in: Decimal
    total_out: Decimal
    total_shortage: Decimal
