"""Denomination calculator: note/coin counts to currency totals."""

from dataclasses import replace
from decimal import Decimal
from typing import Any, Mapping, Optional

from tillbook.domain.entities import DENOMINATION_SLOTS, DenominationCount
from tillbook.domain.errors import ValidationError

SLOT_NAMES = tuple(name for name, _ in DENOMINATION_SLOTS)
FACE_VALUES = dict(DENOMINATION_SLOTS)


def empty() -> DenominationCount:
    """Return a count with every slot at zero."""
    return DenominationCount()


def total(denoms: Optional[DenominationCount]) -> Decimal:
    """Return the currency value of a denomination count.

    A missing count is worth zero, as is any slot holding None.
    """
    if denoms is None:
        return Decimal("0")
    value = 0
    for name, face_value in DENOMINATION_SLOTS:
        value += (getattr(denoms, name) or 0) * face_value
    return Decimal(value)


def retained(
    closing: DenominationCount, forwarded: Optional[DenominationCount]
) -> DenominationCount:
    """Return the cash removed from the till after keeping the forwarded float.

    Slots where more is forwarded than was counted floor at zero.
    """
    forwarded = forwarded or empty()
    quantities = {}
    for name in SLOT_NAMES:
        kept = (getattr(closing, name) or 0) - (getattr(forwarded, name) or 0)
        quantities[name] = max(0, kept)
    return DenominationCount(**quantities)


def cap_to(forwarded: DenominationCount, closing: DenominationCount) -> DenominationCount:
    """Limit each forwarded slot to the quantity counted at closing."""
    return replace(
        forwarded,
        **{
            name: min(getattr(forwarded, name) or 0, getattr(closing, name) or 0)
            for name in SLOT_NAMES
        },
    )


def exceeds(forwarded: DenominationCount, closing: DenominationCount) -> list[str]:
    """Return slot names where the forwarded quantity is above the closing count."""
    return [
        name
        for name in SLOT_NAMES
        if (getattr(forwarded, name) or 0) > (getattr(closing, name) or 0)
    ]


def validate(denoms: DenominationCount, field: str) -> DenominationCount:
    """Check that every quantity is a non-negative integer.

    Raises:
        ValidationError: Naming ``field`` and the offending slot
    """
    for name in SLOT_NAMES:
        quantity = getattr(denoms, name)
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise ValidationError(
                f"{field}.{name} must be a whole number, got {quantity!r}", field=field
            )
        if quantity < 0:
            raise ValidationError(
                f"{field}.{name} cannot be negative ({quantity})", field=field
            )
    return denoms


def from_mapping(data: Optional[Mapping[str, Any]]) -> DenominationCount:
    """Build a count from a stored mapping, treating absent slots as zero."""
    if not data:
        return empty()
    return DenominationCount(**{name: int(data.get(name) or 0) for name in SLOT_NAMES})


def to_mapping(denoms: DenominationCount) -> dict[str, int]:
    """Return a plain dict suitable for JSON storage."""
    return {name: getattr(denoms, name) or 0 for name in SLOT_NAMES}
