"""Parse and format denomination counts for the command line."""

import re

from tillbook.domain import denominations
from tillbook.domain.entities import DENOMINATION_SLOTS, DenominationCount

_TOKEN = re.compile(r"^(?P<kind>coins?|notes?|c|n)?(?P<value>\d+)\s*[x*:=]\s*(?P<qty>-?\d+)$")

# Face values 1, 2 and 5 only exist as coins; 10 defaults to the note.
_NOTE_SLOTS = {value: name for name, value in DENOMINATION_SLOTS if name.startswith("notes")}
_COIN_SLOTS = {value: name for name, value in DENOMINATION_SLOTS if name.startswith("coins")}


def _slot_for(kind: str | None, value: int) -> str:
    if kind and kind.startswith("c"):
        slot = _COIN_SLOTS.get(value)
    elif kind:
        slot = _NOTE_SLOTS.get(value)
    else:
        slot = _NOTE_SLOTS.get(value) or _COIN_SLOTS.get(value)
    if slot is None:
        raise ValueError(f"No {kind or 'note or coin'} with face value {value}")
    return slot


def parse_denominations(text: str) -> DenominationCount:
    """Parse a count such as ``"500x3, 100x2, coin10x4, 5x6"``.

    Each token is ``[note|coin]<face value>x<quantity>``; ``:`` or ``=``
    also separate value and quantity. A bare face value of 10 is the note;
    use ``coin10`` for the coin. Slots not mentioned are zero.

    Raises:
        ValueError: If a token is malformed, names an unknown face value,
            repeats a slot, or has a negative quantity
    """
    quantities: dict[str, int] = {}
    for raw in re.split(r"[,;\s]+", text.strip().lower()):
        if not raw:
            continue
        match = _TOKEN.match(raw)
        if match is None:
            raise ValueError(f"Could not parse denomination '{raw}' (expected e.g. 500x3 or coin10x4)")
        slot = _slot_for(match.group("kind"), int(match.group("value")))
        quantity = int(match.group("qty"))
        if quantity < 0:
            raise ValueError(f"Quantity for {slot} cannot be negative ({quantity})")
        if slot in quantities:
            raise ValueError(f"{slot} given more than once")
        quantities[slot] = quantity
    return DenominationCount(**quantities)


def format_denominations(denoms: DenominationCount) -> str:
    """Return the non-zero slots in the same notation parse_denominations reads."""
    parts = []
    for name, value in DENOMINATION_SLOTS:
        quantity = getattr(denoms, name)
        if quantity:
            prefix = "coin" if name.startswith("coins") else ""
            parts.append(f"{prefix}{value}x{quantity}")
    return ", ".join(parts) if parts else "(none)"


def format_breakdown(denoms: DenominationCount) -> list[str]:
    """Return one display line per non-zero slot, plus the total."""
    lines = []
    for name, value in DENOMINATION_SLOTS:
        quantity = getattr(denoms, name)
        if quantity:
            label = "Coin" if name.startswith("coins") else "Note"
            lines.append(f"{label} ₹{value:>3} x {quantity:>4} = ₹{quantity * value:,}")
    lines.append(f"Total: ₹{denominations.total(denoms):,.2f}")
    return lines
