"""Tests for shelf_units module."""
import pytest

from shelf_units import (
    BinaryFraction,
    format_fraction,
    format_inches,
    format_with_fraction,
    nearest_binary_fraction,
    parse_length_expression,
    to_inches,
    to_mm,
)


class TestConversions:

    def test_inch_is_25_4_mm(self):
        assert to_mm(1.0) == pytest.approx(25.4)
        assert to_inches(25.4) == pytest.approx(1.0)

    def test_round_trip(self):
        assert to_inches(to_mm(0.3937)) == pytest.approx(0.3937)


class TestNearestBinaryFraction:

    def test_exact_fraction(self):
        assert nearest_binary_fraction(28.96875) == BinaryFraction(False, 28, 31, 32)

    def test_reduces(self):
        assert str(nearest_binary_fraction(0.375)) == '3/8'
        assert str(nearest_binary_fraction(2.5)) == '2-1/2'

    def test_whole_number(self):
        assert str(nearest_binary_fraction(3.0)) == '3'

    def test_rounds_up_into_whole(self):
        """0.99 is closest to 32/32, which folds into the whole part."""
        assert str(nearest_binary_fraction(1.99)) == '2'

    def test_nearest_32nd(self):
        fraction = nearest_binary_fraction(0.334)
        assert (fraction.numerator, fraction.denominator) == (11, 32)

    def test_ties_prefer_small_denominator(self):
        """1/64 is equally close to 0 and 1/32; denominator 1 wins."""
        assert str(nearest_binary_fraction(1 / 64)) == '0'

    def test_negative(self):
        fraction = nearest_binary_fraction(-1.25)
        assert fraction.negative
        assert str(fraction) == '-1-1/4'
        assert fraction.value == pytest.approx(-1.25)

    def test_negative_zero_has_no_sign(self):
        assert str(nearest_binary_fraction(-0.001)) == '0'

    def test_max_denominator(self):
        assert str(nearest_binary_fraction(0.3, max_denominator=4)) == '1/4'

    def test_idempotent(self):
        for x in (0.1, 0.334, 1.7, 28.96875, 5.51):
            once = nearest_binary_fraction(x)
            assert nearest_binary_fraction(once.value) == once

    def test_error_within_half_step(self):
        for x in (0.01, 0.2, 0.49, 0.77, 12.345):
            assert abs(nearest_binary_fraction(x).value - x) <= 1 / 64 + 1e-12


class TestParseLengthExpression:

    @pytest.mark.parametrize("text, expected", [
        ("28.96875", 28.96875),
        ("3/8", 0.375),
        ("28-31/32", 28.96875),
        ("28 31/32", 28.96875),
        ('1-1/2"', 1.5),
        (".5", 0.5),
        ("-3/4", -0.75),
        ("  12  ", 12.0),
    ])
    def test_valid(self, text, expected):
        assert parse_length_expression(text) == pytest.approx(expected)

    def test_empty_is_zero(self):
        assert parse_length_expression("") == 0.0
        assert parse_length_expression("   ") == 0.0

    @pytest.mark.parametrize("text", ["abc", "1/0", "3-", "1//2", "1.2.3", "2 - 1/0"])
    def test_invalid(self, text):
        assert parse_length_expression(text) is None

    def test_none(self):
        assert parse_length_expression(None) is None

    def test_round_trip_through_fraction(self):
        for x in (0.375, 2.5, 28.96875, 13.0625):
            assert parse_length_expression(str(nearest_binary_fraction(x))) == pytest.approx(x)


class TestFormatting:

    def test_format_fraction(self):
        assert format_fraction(0.375) == '3/8"'

    def test_format_inches(self):
        assert format_inches(1.0) == '1.00000"'
        assert format_inches(1.0, show_both=True, precision=2) == '1.00" (25.40 mm)'

    def test_format_with_fraction(self):
        assert format_with_fraction(0.5) == '0.5000" (1/2", 12.70mm)'
