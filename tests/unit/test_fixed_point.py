"""
Unit Tests for Fixed-Point Amounts

Tests the fixed-point arithmetic module:
- Truncating amount formatting with leading-zero preservation
- Percentage and ratio math without floating-point magnitudes
- Parsing, rescaling and scale mixing rules
"""

import os
import sys
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from harvest_notifier.arithmetic.fixed_point import (
    DISPLAY_DIGITS,
    NATIVE_SCALE,
    FixedPointAmount,
    InvalidPrecisionError,
    ScaleMismatchError,
    format_amount,
    multiply_by_ratio,
    parse_amount,
    percentage_of,
)

ONE_ETHER = 10 ** 18


# =============================================================================
# format_amount
# =============================================================================

class TestFormatAmount:
    """Truncating, sign-aware rendering."""

    def test_leading_fraction_zeros_survive(self):
        assert format_amount(50000000000000, 18, 6) == "0.000050"

    def test_whole_unit(self):
        assert format_amount(ONE_ETHER, 18, 6) == "1.000000"

    def test_truncates_instead_of_rounding(self):
        # 1.9999999 would round to 2.000000
        assert format_amount(1999999900000000000, 18, 6) == "1.999999"

    def test_zero_has_no_sign(self):
        assert format_amount(0, 18, 6) == "0.000000"

    def test_negative_amount(self):
        assert format_amount(-1234567890123456789, 18, 6) == "-1.234567"

    def test_tiny_negative_keeps_sign(self):
        assert format_amount(-1, 18, 6) == "-0.000000"

    def test_zero_display_digits_renders_integer_only(self):
        assert format_amount(12 * ONE_ETHER + 999, 18, 0) == "12"

    def test_full_precision(self):
        assert format_amount(1, 18, 18) == "0.000000000000000001"

    def test_large_value_beyond_float_precision(self):
        raw = 123456789012345678901234567890
        assert format_amount(raw, 18, 6) == "123456789012.345678"

    def test_small_scale(self):
        assert format_amount(12345, 2, 2) == "123.45"

    def test_defaults_are_native_scale_and_display_digits(self):
        assert format_amount(ONE_ETHER) == format_amount(ONE_ETHER, NATIVE_SCALE, DISPLAY_DIGITS)

    def test_display_digits_above_scale_rejected(self):
        with pytest.raises(InvalidPrecisionError) as exc_info:
            format_amount(1, 6, 7)
        assert "FXP-001" in str(exc_info.value)

    def test_negative_display_digits_rejected(self):
        with pytest.raises(InvalidPrecisionError):
            format_amount(1, 18, -1)

    def test_invalid_precision_is_value_error(self):
        with pytest.raises(ValueError):
            format_amount(1, 2, 3)

    def test_float_raw_rejected(self):
        with pytest.raises(TypeError):
            format_amount(1.5, 18, 6)

    def test_bool_raw_rejected(self):
        with pytest.raises(TypeError):
            format_amount(True, 18, 6)


# =============================================================================
# percentage_of / multiply_by_ratio
# =============================================================================

class TestPercentageOf:
    """Percent-unit multiplication with integer-only magnitudes."""

    def test_zero_percent_is_zero(self):
        assert percentage_of(123456789, 0, 4) == 0

    def test_hundred_percent_is_identity(self):
        assert percentage_of(123456789, 100, 4) == 123456789

    def test_fractional_percent(self):
        assert percentage_of(ONE_ETHER, 2.5) == 25 * 10 ** 15

    def test_float_percent_goes_through_str(self):
        # 0.1 as a binary float is 0.1000000000000000055...
        assert percentage_of(10 ** 30, 0.1, 4) == 10 ** 27

    def test_percent_rounded_to_precision(self):
        # 33.33335 -> 33.3334 at 4 digits
        assert percentage_of(10 ** 6, "33.33335", 4) == 333334

    def test_negative_half_rounds_toward_positive_infinity(self):
        assert percentage_of(100, 2.5, 0) == 3
        assert percentage_of(100, -2.5, 0) == -2
        assert percentage_of(10 ** 6, "-33.33335", 4) == -333333

    def test_huge_percent_keeps_every_digit(self):
        assert percentage_of(1, 10 ** 40 + 1, 4) == (10 ** 40 + 1) // 100

    def test_result_truncates_toward_zero(self):
        assert percentage_of(7, 50, 4) == 3
        assert percentage_of(-7, 50, 4) == -3

    def test_tiny_percent_below_precision_is_zero(self):
        assert percentage_of(ONE_ETHER, 0.00001, 4) == 0

    def test_decimal_percent(self):
        assert percentage_of(1000, Decimal("12.5")) == 125

    def test_negative_precision_rejected(self):
        with pytest.raises(InvalidPrecisionError):
            percentage_of(100, 50, -1)

    def test_non_finite_percent_rejected(self):
        with pytest.raises(ValueError):
            percentage_of(100, float("nan"))

    def test_garbage_percent_rejected(self):
        with pytest.raises(ValueError):
            percentage_of(100, "ten")


class TestMultiplyByRatio:
    """Fraction-unit multiplication (1.0 == whole amount)."""

    def test_identity(self):
        assert multiply_by_ratio(987654321, 1) == 987654321

    def test_half(self):
        assert multiply_by_ratio(ONE_ETHER, 0.5) == ONE_ETHER // 2

    def test_ratio_rounded_to_precision(self):
        # 0.123456 -> 0.1235 at 4 digits
        assert multiply_by_ratio(10000, 0.123456, 4) == 1235

    def test_zero_ratio(self):
        assert multiply_by_ratio(ONE_ETHER, 0) == 0


# =============================================================================
# parse_amount / FixedPointAmount
# =============================================================================

class TestParseAmount:

    def test_parses_fraction(self):
        assert parse_amount("0.000050", 18) == 50000000000000

    def test_parses_negative(self):
        assert parse_amount("-1.5", 18) == -15 * 10 ** 17

    def test_parses_integer(self):
        assert parse_amount("42", 2) == 4200

    def test_inverse_of_full_precision_format(self):
        raw = -987654321987654321987
        assert parse_amount(format_amount(raw, 18, 18), 18) == raw

    def test_too_many_fraction_digits(self):
        with pytest.raises(InvalidPrecisionError):
            parse_amount("1.123", 2)

    def test_not_a_number(self):
        with pytest.raises(ValueError):
            parse_amount("1e18", 18)


class TestFixedPointAmount:

    def test_format_uses_display_digits(self):
        amount = FixedPointAmount(1234567890123456789)
        assert amount.format() == "1.234567"
        assert amount.format(2) == "1.23"

    def test_str_is_full_precision(self):
        assert str(FixedPointAmount(1, 3)) == "0.001"

    def test_parse(self):
        assert FixedPointAmount.parse("2.5", 6) == FixedPointAmount(2500000, 6)

    def test_percentage_keeps_scale(self):
        amount = FixedPointAmount(1000, 3).percentage(10)
        assert amount == FixedPointAmount(100, 3)

    def test_addition_same_scale(self):
        total = FixedPointAmount(5, 18) + FixedPointAmount(7, 18)
        assert total == FixedPointAmount(12, 18)

    def test_subtraction_and_negation(self):
        diff = FixedPointAmount(5, 18) - FixedPointAmount(7, 18)
        assert diff == FixedPointAmount(-2, 18)
        assert -diff == FixedPointAmount(2, 18)

    def test_mixing_scales_rejected(self):
        with pytest.raises(ScaleMismatchError) as exc_info:
            FixedPointAmount(1, 18) + FixedPointAmount(1, 6)
        assert exc_info.value.left == 18
        assert exc_info.value.right == 6

    def test_rescale_up_is_exact(self):
        assert FixedPointAmount(15, 1).rescale(4) == FixedPointAmount(15000, 4)

    def test_rescale_down_truncates_toward_zero(self):
        assert FixedPointAmount(-1999, 3).rescale(0) == FixedPointAmount(-1, 0)

    def test_to_decimal_is_exact(self):
        amount = FixedPointAmount(123456789012345678901234567890, 18)
        assert amount.to_decimal() == Decimal("123456789012.345678901234567890")

    def test_negative_scale_rejected(self):
        with pytest.raises(InvalidPrecisionError):
            FixedPointAmount(1, -1)

    def test_float_raw_rejected(self):
        with pytest.raises(TypeError):
            FixedPointAmount(1.0)
