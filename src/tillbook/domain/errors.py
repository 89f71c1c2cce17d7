"""Shared domain error messages and error types."""

from datetime import date
from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling. ``code`` is the
    machine-readable category reported in action results.
    """

    code = "domain_error"


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""

    code = "validation_error"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""

    code = "not_found"


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""

    code = "conflict"


class AuthorizationError(DomainError):
    """Caller's role or counter does not permit the operation."""

    code = "unauthorized"


class StatePreconditionError(DomainError):
    """Entry is not in the state the operation requires."""

    code = "invalid_state"


def counter_not_found(name: str) -> str:
    """Return message for missing counter."""
    return f"Counter '{name}' not found"


def duplicate_counter(name: str) -> str:
    """Return message for duplicate counter name."""
    return f"Counter with name '{name}' already exists"


def entry_not_found(counter_name: str, entry_date: date) -> str:
    """Return message for missing day entry by key."""
    return f"No entry for counter '{counter_name}' on {entry_date.isoformat()}"


def entry_id_not_found(entry_id: int) -> str:
    """Return message for missing day entry by ID."""
    return f"Entry {entry_id} not found"


def invalid_state(action: str, status: str, allowed: tuple[str, ...]) -> str:
    """Return message when an entry is in the wrong status for an action."""
    expected = " or ".join(allowed)
    return f"Cannot {action}: entry is {status} (must be {expected})"
