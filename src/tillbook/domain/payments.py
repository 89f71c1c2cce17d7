"""Payment ledger: pure operations over an entry's ordered payments.

Payments are addressed by their stable id rather than list position, so an
edit from one session cannot land on a different payment after another
session removed an earlier one.
"""

from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Optional

from tillbook.domain.entities import Payment, PaymentDirection
from tillbook.domain.errors import NotFoundError, ValidationError


def validate_amount(amount: Decimal) -> Decimal:
    if isinstance(amount, bool) or not isinstance(amount, (Decimal, int)):
        raise ValidationError(f"Payment amount must be a decimal number, got {amount!r}", field="amount")
    amount = Decimal(amount)
    if not amount.is_finite() or amount <= 0:
        raise ValidationError(f"Payment amount must be positive, got {amount}", field="amount")
    return amount


def parse_direction(direction) -> PaymentDirection:
    """Return ``direction`` as a PaymentDirection.

    Raises:
        ValidationError: If it is neither IN nor OUT
    """
    try:
        return PaymentDirection(direction)
    except ValueError:
        raise ValidationError(
            f"Payment direction must be IN or OUT, got {direction!r}", field="direction"
        ) from None


def next_payment_id(payments: tuple[Payment, ...], last_issued: int = 0) -> int:
    """Return the id for a payment appended to ``payments``.

    ``last_issued`` is the highest id the entry has ever handed out, so ids
    of removed payments are never given to new ones.
    """
    return max(max((p.id for p in payments), default=0), last_issued) + 1


def find(payments: tuple[Payment, ...], payment_id: int) -> Payment:
    """Return the payment with ``payment_id``.

    Raises:
        ValidationError: If the id is not a positive integer
        NotFoundError: If no payment has that id
    """
    if payment_id < 1:
        raise ValidationError(f"Invalid payment id {payment_id}", field="payment_id")
    for payment in payments:
        if payment.id == payment_id:
            return payment
    raise NotFoundError(f"Payment {payment_id} not found")


def append(
    payments: tuple[Payment, ...],
    description: str,
    amount: Decimal,
    direction: PaymentDirection,
    time: datetime,
    last_issued: int = 0,
) -> tuple[Payment, ...]:
    """Return ``payments`` with a new payment at the end."""
    payment = Payment(
        id=next_payment_id(payments, last_issued),
        time=time,
        description=description.strip(),
        amount=validate_amount(amount),
        direction=parse_direction(direction),
    )
    return payments + (payment,)


def replace_payment(
    payments: tuple[Payment, ...],
    payment_id: int,
    description: Optional[str] = None,
    amount: Optional[Decimal] = None,
    direction: Optional[PaymentDirection] = None,
) -> tuple[Payment, ...]:
    """Return ``payments`` with one payment's fields updated in place.

    The payment keeps its id, position and original timestamp.
    """
    current = find(payments, payment_id)
    changes: dict = {}
    if description is not None:
        changes["description"] = description.strip()
    if amount is not None:
        changes["amount"] = validate_amount(amount)
    if direction is not None:
        changes["direction"] = parse_direction(direction)
    updated = replace(current, **changes)
    return tuple(updated if p.id == payment_id else p for p in payments)


def remove(payments: tuple[Payment, ...], payment_id: int) -> tuple[Payment, ...]:
    """Return ``payments`` without the payment with ``payment_id``."""
    find(payments, payment_id)
    return tuple(p for p in payments if p.id != payment_id)
