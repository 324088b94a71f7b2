"""
============================================================================
Property-Based Tests for Fixed-Point Amounts
============================================================================

Properties tested:
- Full-precision formatting parses back to the same raw value
- Lower display precision is a truncated prefix, never a rounding
- Sign appears only for strictly negative amounts
- 0% yields 0 and 100% yields the amount itself
- Percentages are monotone and bounded by the amount
============================================================================
"""

import os
import sys

from hypothesis import assume, given, settings
from hypothesis import strategies as st

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from harvest_notifier.arithmetic.fixed_point import format_amount, parse_amount, percentage_of


# =============================================================================
# HYPOTHESIS STRATEGIES
# =============================================================================

# Well past 2^53 and past uint256 territory
raw_strategy = st.integers(min_value=-(10 ** 80), max_value=10 ** 80)

scale_strategy = st.integers(min_value=0, max_value=36)

percent_strategy = st.integers(min_value=0, max_value=100)

precision_strategy = st.integers(min_value=0, max_value=8)


class TestFormatProperties:

    @settings(max_examples=200)
    @given(raw=raw_strategy, scale=scale_strategy)
    def test_full_precision_round_trip(self, raw, scale):
        assert parse_amount(format_amount(raw, scale, scale), scale) == raw

    @settings(max_examples=200)
    @given(raw=raw_strategy, scale=st.integers(min_value=1, max_value=36), data=st.data())
    def test_display_digits_truncate(self, raw, scale, data):
        digits = data.draw(st.integers(min_value=0, max_value=scale))
        full = format_amount(raw, scale, scale)
        shown = format_amount(raw, scale, digits)

        integer_part, fraction = full.split(".")
        if digits == 0:
            assert shown == integer_part
        else:
            assert shown == f"{integer_part}.{fraction[:digits]}"

    @settings(max_examples=200)
    @given(raw=raw_strategy, scale=scale_strategy)
    def test_sign_only_for_negative(self, raw, scale):
        assert format_amount(raw, scale, scale).startswith("-") == (raw < 0)

    @settings(max_examples=100)
    @given(raw=st.integers(min_value=0, max_value=10 ** 12 - 1))
    def test_small_amounts_keep_leading_zeros(self, raw):
        # anything below 10^-6 ether shows as 0.000000, never shorter
        assert format_amount(raw, 18, 6) == "0.000000"


class TestPercentageProperties:

    @settings(max_examples=200)
    @given(raw=raw_strategy, precision=precision_strategy)
    def test_zero_and_hundred_percent(self, raw, precision):
        assert percentage_of(raw, 0, precision) == 0
        assert percentage_of(raw, 100, precision) == raw

    @settings(max_examples=200)
    @given(raw=st.integers(min_value=0, max_value=10 ** 80), low=percent_strategy, high=percent_strategy)
    def test_monotone_in_percent(self, raw, low, high):
        assume(low <= high)
        assert percentage_of(raw, low) <= percentage_of(raw, high)

    @settings(max_examples=200)
    @given(raw=raw_strategy, percent=st.decimals(min_value=0, max_value=100, places=4))
    def test_bounded_by_amount(self, raw, percent):
        assert abs(percentage_of(raw, percent)) <= abs(raw)

    @settings(max_examples=200)
    @given(raw=raw_strategy, percent=percent_strategy)
    def test_integer_percent_is_exact(self, raw, percent):
        expected = abs(raw) * percent // 100
        assert percentage_of(raw, percent) == (-expected if raw < 0 else expected)
