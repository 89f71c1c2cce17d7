"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal rounded to paise.

    Handles various formats:
    - "123.45"
    - "₹123.45" or "Rs 123.45"
    - "1,23,456.50" (Indian digit grouping)
    - "-123.45"

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount with two decimal places

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Remove currency symbols and prefixes
    amount_str = re.sub(r"^(rs\.?|inr)\s*", "", amount_str, flags=re.IGNORECASE)
    amount_str = re.sub(r"[₹$]", "", amount_str)

    # Remove digit grouping commas
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return amount.quantize(Decimal("0.01"))
