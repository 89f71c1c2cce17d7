"""Role-gated day-entry actions returning structured results.

Every action resolves the caller's identity and checks its role before any
core logic runs. Domain errors (authorization, state, validation,
not-found) come back as a failed ActionResult; database faults propagate.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Optional

from tillbook.domain import access
from tillbook.domain.day_entry import DayEntryService
from tillbook.domain.entities import DenominationCount, Identity, PaymentDirection, Role, SalesData
from tillbook.domain.errors import DomainError, ValidationError
from tillbook.domain.summary import SummaryService
from tillbook.logging_config import get_logger

logger = get_logger("actions")

IdentityResolver = Callable[[], Optional[Identity]]


@dataclass(frozen=True)
class ActionResult:
    """Outcome of an action: a value on success, a reason on failure."""

    ok: bool
    value: Any = None
    error: Optional[str] = None
    message: Optional[str] = None
    field: Optional[str] = None

    @classmethod
    def success(cls, value: Any = None) -> "ActionResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: DomainError) -> "ActionResult":
        return cls(
            ok=False,
            error=error.code,
            message=str(error),
            field=getattr(error, "field", None),
        )


class EntryActions:
    """Action handlers for counter operators, administrators and supervisors."""

    def __init__(
        self,
        entries: DayEntryService,
        identity_resolver: IdentityResolver,
        summaries: Optional[SummaryService] = None,
    ):
        """Initialize actions.

        Args:
            entries: Day entry service
            identity_resolver: Callable returning the current caller, or None
            summaries: Summary service (built from the entry service's db if None)
        """
        self.entries = entries
        self.identity_resolver = identity_resolver
        self.summaries = summaries or SummaryService(entries.db)

    def _run(self, action: str, operation: Callable[[Optional[Identity]], Any]) -> ActionResult:
        identity = self.identity_resolver()
        try:
            return ActionResult.success(operation(identity))
        except DomainError as e:
            logger.warning("action_rejected", extra={
                "action": action,
                "username": identity.username if identity else None,
                "reason": e.code,
                "detail": str(e),
            })
            return ActionResult.failure(e)

    def _entry_date(self, entry_date: Optional[date]) -> date:
        return entry_date or self.entries.clock.today()

    # Counter operator actions
    def get_or_create(self, entry_date: Optional[date] = None) -> ActionResult:
        return self._run("get_or_create", lambda who: self.entries.get_or_create(
            access.require_operator(who), self._entry_date(entry_date)
        ))

    def get_entry(self, entry_date: Optional[date] = None) -> ActionResult:
        return self._run("get_entry", lambda who: self.entries.get_entry(
            access.require_operator(who), self._entry_date(entry_date)
        ))

    def opening_for(self, counter_name: Optional[str] = None, entry_date: Optional[date] = None) -> ActionResult:
        """Show the opening a day would start with; counter operators see their own counter."""

        def operation(who: Optional[Identity]):
            identity = access.require_role(who, Role.COUNTER, Role.ADMIN)
            name = counter_name
            if identity.role == Role.COUNTER:
                name = access.require_own_counter(identity, counter_name or identity.counter_name)
            if not name:
                raise ValidationError("Counter name is required", field="counter_name")
            return self.entries.resolver.opening_for(name, self._entry_date(entry_date))

        return self._run("opening_for", operation)

    def record_payment(
        self,
        description: str,
        amount: Decimal,
        direction: PaymentDirection = PaymentDirection.OUT,
        entry_date: Optional[date] = None,
    ) -> ActionResult:
        return self._run("record_payment", lambda who: self.entries.record_payment(
            access.require_operator(who), self._entry_date(entry_date), description, amount, direction
        ))

    def edit_payment(
        self,
        payment_id: int,
        description: Optional[str] = None,
        amount: Optional[Decimal] = None,
        direction: Optional[PaymentDirection] = None,
        entry_date: Optional[date] = None,
    ) -> ActionResult:
        return self._run("edit_payment", lambda who: self.entries.edit_payment(
            access.require_operator(who),
            self._entry_date(entry_date),
            payment_id,
            description=description,
            amount=amount,
            direction=direction,
        ))

    def remove_payment(self, payment_id: int, entry_date: Optional[date] = None) -> ActionResult:
        return self._run("remove_payment", lambda who: self.entries.remove_payment(
            access.require_operator(who), self._entry_date(entry_date), payment_id
        ))

    def update_sales(self, sales: SalesData, entry_date: Optional[date] = None) -> ActionResult:
        return self._run("update_sales", lambda who: self.entries.update_sales(
            access.require_operator(who), self._entry_date(entry_date), sales
        ))

    def record_closing_count(
        self,
        denoms: DenominationCount,
        forward_all: bool = False,
        entry_date: Optional[date] = None,
    ) -> ActionResult:
        return self._run("record_closing_count", lambda who: self.entries.record_closing_count(
            access.require_operator(who), self._entry_date(entry_date), denoms, forward_all=forward_all
        ))

    def record_forwarding(
        self,
        denoms: DenominationCount,
        amount: Optional[Decimal] = None,
        entry_date: Optional[date] = None,
    ) -> ActionResult:
        return self._run("record_forwarding", lambda who: self.entries.record_forwarding(
            access.require_operator(who), self._entry_date(entry_date), denoms, amount=amount
        ))

    def verify_opening(self, entry_date: Optional[date] = None) -> ActionResult:
        return self._run("verify_opening", lambda who: self.entries.verify_opening(
            access.require_operator(who), self._entry_date(entry_date)
        ))

    def submit(self, closed_by: str, entry_date: Optional[date] = None) -> ActionResult:
        return self._run("submit", lambda who: self.entries.submit(
            access.require_operator(who), self._entry_date(entry_date), closed_by
        ))

    # Administrator actions
    def confirm(self, entry_id: int) -> ActionResult:
        return self._run("confirm", lambda who: self.entries.confirm(
            entry_id, access.require_admin(who).username
        ))

    def unlock(self, entry_id: int) -> ActionResult:
        def operation(who: Optional[Identity]):
            access.require_admin(who)
            return self.entries.unlock(entry_id)

        return self._run("unlock", operation)

    def override_opening(
        self, entry_id: int, denoms: DenominationCount, amount: Optional[Decimal] = None
    ) -> ActionResult:
        def operation(who: Optional[Identity]):
            access.require_admin(who)
            return self.entries.override_opening(entry_id, denoms, amount=amount)

        return self._run("override_opening", operation)

    def override_closing_count(self, entry_id: int, denoms: DenominationCount) -> ActionResult:
        def operation(who: Optional[Identity]):
            access.require_admin(who)
            return self.entries.override_closing_count(entry_id, denoms)

        return self._run("override_closing_count", operation)

    # Administrator and supervisor reads
    def list_entries(self, entry_date: Optional[date] = None) -> ActionResult:
        def operation(who: Optional[Identity]):
            access.require_viewer(who)
            return self.entries.list_entries(self._entry_date(entry_date))

        return self._run("list_entries", operation)

    def get_entry_by_id(self, entry_id: int) -> ActionResult:
        def operation(who: Optional[Identity]):
            access.require_viewer(who)
            return self.entries.get_entry_by_id(entry_id)

        return self._run("get_entry_by_id", operation)

    def daily_summary(self, entry_date: Optional[date] = None) -> ActionResult:
        def operation(who: Optional[Identity]):
            access.require_viewer(who)
            return self.summaries.daily_summary(self._entry_date(entry_date))

        return self._run("daily_summary", operation)

    def counter_comparison(self, entry_date: Optional[date] = None) -> ActionResult:
        def operation(who: Optional[Identity]):
            access.require_viewer(who)
            return self.summaries.counter_comparison(self._entry_date(entry_date))

        return self._run("counter_comparison", operation)
