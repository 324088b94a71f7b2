"""Lossless fixed-point arithmetic for token amounts."""

from harvest_notifier.arithmetic.fixed_point import (
    NATIVE_SCALE,
    DISPLAY_DIGITS,
    DEFAULT_PERCENT_PRECISION,
    InvalidPrecisionError,
    ScaleMismatchError,
    FixedPointAmount,
    multiply_by_ratio,
    percentage_of,
    format_amount,
    parse_amount,
)

__all__ = [
    "NATIVE_SCALE",
    "DISPLAY_DIGITS",
    "DEFAULT_PERCENT_PRECISION",
    "InvalidPrecisionError",
    "ScaleMismatchError",
    "FixedPointAmount",
    "multiply_by_ratio",
    "percentage_of",
    "format_amount",
    "parse_amount",
]
