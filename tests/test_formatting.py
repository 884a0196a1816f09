"""
MediaBudget - Formatting Tests.

Unit tests for the report number formatting helpers.
"""

from decimal import Decimal

import pytest

from mediabudget.formatting import (
    format_fixed,
    format_grouped,
    format_plain,
    round_half_up,
)


class TestFormatting:
    """Unit tests for fixed-decimal formatting."""

    @pytest.mark.parametrize("value,places,expected", [
        (Decimal("14.4"), 2, "14.40"),
        (Decimal("2.345"), 2, "2.35"),
        (Decimal("0"), 2, "0.00"),
        (Decimal("-0.5"), 2, "-0.50"),
        (Decimal("1099.5"), 0, "1100"),
        (Decimal("1285.046728971962616822429907"), 0, "1285"),
    ])
    def test_format_fixed(self, value: Decimal, places: int, expected: str) -> None:
        """Verify fixed decimals with half-up rounding."""
        assert format_fixed(value, places) == expected

    @pytest.mark.parametrize("value,expected", [
        (Decimal("111028.037383"), "111,028"),
        (Decimal("92523.5"), "92,524"),
        (Decimal("999"), "999"),
        (Decimal("0"), "0"),
    ])
    def test_format_grouped(self, value: Decimal, expected: str) -> None:
        """Verify thousands grouping with no decimals."""
        assert format_grouped(value) == expected

    def test_format_grouped_with_places(self) -> None:
        """Verify grouping with decimal places."""
        assert format_grouped(Decimal("1234567.891"), 2) == "1,234,567.89"

    @pytest.mark.parametrize("value,expected", [
        (Decimal("1"), "1"),
        (Decimal("1.20"), "1.2"),
        (Decimal("12500"), "12,500"),
        (Decimal("0.12345"), "0.123"),
        (Decimal("0"), "0"),
        (Decimal("-0.0001"), "0"),
    ])
    def test_format_plain(self, value: Decimal, expected: str) -> None:
        """Verify up to 3 decimals without trailing zeros."""
        assert format_plain(value) == expected

    def test_round_half_up_large_value(self) -> None:
        """Verify rounding does not overflow the default precision."""
        value = Decimal("123456789012345678901234567890.555")

        assert round_half_up(value, 2) == Decimal("123456789012345678901234567890.56")

    def test_int_input(self) -> None:
        """Verify plain ints are accepted."""
        assert format_fixed(2026, 0) == "2026"
