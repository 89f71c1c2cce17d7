"""Tests for date parser with relative dates."""

import pytest
from datetime import date, timedelta
from tillbook.utils.date_parser import parse_date

TODAY = date(2024, 3, 10)  # a Sunday


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)
    assert parse_date("January 15, 2024") == date(2024, 1, 15)


def test_parse_relative_to_business_today():
    assert parse_date("today", today=TODAY) == TODAY
    assert parse_date("Yesterday", today=TODAY) == date(2024, 3, 9)
    assert parse_date(" tomorrow ", today=TODAY) == date(2024, 3, 11)


def test_parse_today_defaults_to_system_date():
    assert parse_date("today") == date.today()
    assert parse_date("yesterday") == date.today() - timedelta(days=1)


def test_parse_last_weekday():
    assert parse_date("last friday", today=TODAY) == date(2024, 3, 8)
    # Never today itself
    assert parse_date("last sunday", today=TODAY) == date(2024, 3, 3)


def test_parse_invalid_date():
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("not a date")
