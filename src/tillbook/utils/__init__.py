"""Utility functions for tillbook."""

from tillbook.utils.date_parser import parse_date
from tillbook.utils.amount_parser import parse_amount
from tillbook.utils.denomination_parser import parse_denominations, format_denominations

__all__ = ["parse_date", "parse_amount", "parse_denominations", "format_denominations"]
