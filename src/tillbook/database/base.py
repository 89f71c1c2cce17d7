"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Any, Iterable
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from tillbook.domain.entities import (
    Counter,
    CounterKind,
    DayEntry,
    DenominationCount,
    EntryStatus,
    Payment,
    SalesData,
)


class Database(ABC):
    """Abstract database interface for tillbook.

    Day entries are keyed by (counter_name, date); implementations must
    guarantee at most one entry per key.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Counter operations
    @abstractmethod
    def create_counter(self, name: str, kind: CounterKind) -> int:
        """Create a counter. Returns counter ID."""
        pass

    @abstractmethod
    def get_counter(self, name: str) -> Optional[Counter]:
        """Get counter by name."""
        pass

    @abstractmethod
    def list_counters(self) -> list[Counter]:
        """List all counters ordered by name."""
        pass

    # Day entry operations
    @abstractmethod
    def get_entry(self, counter_name: str, entry_date: date) -> Optional[DayEntry]:
        """Get the entry for a counter on a date."""
        pass

    @abstractmethod
    def get_entry_by_id(self, entry_id: int) -> Optional[DayEntry]:
        """Get entry by ID."""
        pass

    @abstractmethod
    def find_latest_entry_before(
        self, counter_name: str, before: date, statuses: Iterable[EntryStatus]
    ) -> Optional[DayEntry]:
        """Get the most recent entry for a counter strictly before a date.

        Only entries whose status is in ``statuses`` qualify.
        """
        pass

    @abstractmethod
    def insert_entry(
        self,
        counter_name: str,
        entry_date: date,
        opening_cash: Decimal,
        opening_denominations: DenominationCount,
        sales: SalesData,
    ) -> DayEntry:
        """Insert a new open entry.

        Raises:
            ConflictError: If an entry already exists for (counter_name, entry_date)
        """
        pass

    @abstractmethod
    def update_entry(self, entry_id: int, **fields: Any) -> DayEntry:
        """Partially update an entry's fields and return the updated entry.

        Field names are those of the domain DayEntry; ``updated_at`` is set
        by the caller.

        Raises:
            NotFoundError: If the entry does not exist
        """
        pass

    @abstractmethod
    def replace_payments(self, entry_id: int, payments: tuple[Payment, ...], **fields: Any) -> DayEntry:
        """Replace an entry's payment list, optionally updating other fields too.

        Raises:
            NotFoundError: If the entry does not exist
        """
        pass

    @abstractmethod
    def list_entries(
        self,
        entry_date: Optional[date] = None,
        counter_name: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[DayEntry]:
        """List entries with optional filters, ordered by date then counter name."""
        pass
