"""Tests for reading and writing denomination counts on the command line."""

import pytest

from tillbook.domain.entities import DenominationCount
from tillbook.utils.denomination_parser import (
    format_breakdown,
    format_denominations,
    parse_denominations,
)


def test_parse_notes_and_coins():
    denoms = parse_denominations("500x3, 100x2, coin10x4, 5x6")
    assert denoms == DenominationCount(notes_500=3, notes_100=2, coins_10=4, coins_5=6)


def test_bare_ten_is_the_note():
    assert parse_denominations("10x2") == DenominationCount(notes_10=2)
    assert parse_denominations("n10:2 c10=1") == DenominationCount(notes_10=2, coins_10=1)


def test_empty_text_is_empty_count():
    assert parse_denominations("") == DenominationCount()


@pytest.mark.parametrize(
    "text, message",
    [
        ("500", "Could not parse"),
        ("300x1", "face value 300"),
        ("coin500x1", "face value 500"),
        ("100x1, 100x2", "more than once"),
        ("100x-1", "negative"),
    ],
)
def test_parse_errors(text, message):
    with pytest.raises(ValueError, match=message):
        parse_denominations(text)


def test_format_uses_parse_notation():
    denoms = DenominationCount(notes_200=1, coins_10=2, coins_1=3)
    text = format_denominations(denoms)

    assert text == "200x1, coin10x2, coin1x3"
    assert parse_denominations(text) == denoms


def test_format_empty():
    assert format_denominations(DenominationCount()) == "(none)"


def test_format_breakdown_ends_with_total():
    lines = format_breakdown(DenominationCount(notes_500=2, coins_5=1))
    assert len(lines) == 3
    assert lines[-1] == "Total: ₹1,005.00"
