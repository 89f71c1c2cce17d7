"""Counter domain service."""

from typing import Optional
from tillbook.database.base import Database
from tillbook.domain.entities import Counter as CounterEntity, CounterKind
from tillbook.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    counter_not_found,
    duplicate_counter,
)


class CounterService:
    """Service for managing point-of-sale counters."""

    def __init__(self, db: Database):
        """Initialize counter service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_counter(self, name: str, kind: CounterKind = CounterKind.SIMPLE) -> int:
        """Register a counter.

        Args:
            name: Counter name, unique across stores
            kind: Whether the counter reports one business unit or two

        Returns:
            Counter ID

        Raises:
            ValidationError: If the name is empty
            ConflictError: If a counter with that name exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Counter name cannot be empty", field="name")
        if self.db.get_counter(name) is not None:
            raise ConflictError(duplicate_counter(name))
        return self.db.create_counter(name=name, kind=CounterKind(kind))

    def get_counter(self, name: str) -> Optional[CounterEntity]:
        """Get counter by name.

        Args:
            name: Counter name

        Returns:
            Counter entity or None if not found
        """
        return self.db.get_counter(name)

    def require_counter(self, name: str) -> CounterEntity:
        """Get counter by name, raising NotFoundError if it is not registered."""
        counter = self.db.get_counter(name)
        if counter is None:
            raise NotFoundError(counter_not_found(name))
        return counter

    def list_counters(self) -> list[CounterEntity]:
        """List all counters.

        Returns:
            List of counter entities
        """
        return self.db.list_counters()
