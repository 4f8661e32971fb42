"""
Unit tests for the money helpers.

Tests cover:
- round_decimal() half-up rounding
- round_to_total() keeping rounded rows consistent with their total
"""
import pytest
from decimal import Decimal
from ride_ledger.utils.money import format_amount, round_decimal, round_to_total


@pytest.mark.unit
class TestRoundDecimal:

    def test_half_up(self):
        assert round_decimal(Decimal("100.005")) == Decimal("100.01")
        assert round_decimal(Decimal("2.675")) == Decimal("2.68")

    def test_format_amount(self):
        assert format_amount(Decimal("5")) == "5.00"
        assert format_amount(0.1) == "0.10"


@pytest.mark.unit
class TestRoundToTotal:

    def test_seven_equal_parts(self):
        """Seven sevenths of 100 round to 14.29 each (100.03); three give back a cent."""
        rounded = round_to_total([Decimal("100") / 7] * 7, Decimal("100"))

        assert sum(rounded) == Decimal("100.00")
        assert rounded == [Decimal("14.28")] * 3 + [Decimal("14.29")] * 4

    def test_missing_cent_goes_to_largest_remainder(self):
        """Each value rounds to 0.33 (0.99 in all); the one that lost most gets the cent."""
        values = [Decimal("0.3335"), Decimal("0.3325"), Decimal("0.334")]
        rounded = round_to_total(values, Decimal("1"))

        assert sum(rounded) == Decimal("1.00")
        assert rounded == [Decimal("0.33"), Decimal("0.33"), Decimal("0.34")]

    def test_already_consistent(self):
        values = [Decimal("25"), Decimal("75")]
        assert round_to_total(values, Decimal("100")) == [Decimal("25.00"), Decimal("75.00")]

    def test_empty(self):
        assert round_to_total([], Decimal("0")) == []

    def test_thirds_of_twenty(self):
        rounded = round_to_total([Decimal("20") / 3] * 3, Decimal("20"))
        assert rounded == [Decimal("6.66"), Decimal("6.67"), Decimal("6.67")]
