# ============================================================================
# Harvest Notifier v1.0.0
# Fixed-Point Amounts - Lossless Token Arithmetic
# ============================================================================
#
# Reliability Level: L6 Critical
# Purpose: Exact integer arithmetic over on-chain token amounts
#
# ZERO-FLOAT MANDATE:
#   - Token magnitudes are plain Python ints (wei, 18 implied decimals)
#   - Floats are accepted ONLY as percentage inputs, converted via str()
#     to Decimal and rounded to a fixed number of digits before use
#   - Rendering truncates, it never rounds (DISPLAY_DIGITS everywhere)
#
# Error Codes:
#   - FXP-001: Invalid precision (display digits / scale mismatch)
#   - FXP-002: Scale mismatch between two amounts
#
# ============================================================================

from dataclasses import dataclass
from decimal import Decimal, ROUND_FLOOR, InvalidOperation, localcontext
from typing import Union
import logging

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

# Implied decimals of native chain amounts (wei)
NATIVE_SCALE = 18

# Fractional digits shown in every rendered report amount
DISPLAY_DIGITS = 6

# Digits kept when turning a percentage into an integer multiplier
DEFAULT_PERCENT_PRECISION = 4
_HALF = Decimal("0.5")

ERROR_INVALID_PRECISION = "FXP-001"
ERROR_SCALE_MISMATCH = "FXP-002"

Number = Union[int, float, Decimal, str]


# ============================================================================
# Exceptions
# ============================================================================

class InvalidPrecisionError(ValueError):
    """Requested precision is incompatible with the amount's scale."""

    def __init__(self, message: str) -> None:
        self.error_code = ERROR_INVALID_PRECISION
        super().__init__(f"[{ERROR_INVALID_PRECISION}] {message}")


class ScaleMismatchError(ValueError):
    """Two amounts with different implied scales were combined."""

    def __init__(self, left: int, right: int) -> None:
        self.error_code = ERROR_SCALE_MISMATCH
        self.left = left
        self.right = right
        super().__init__(
            f"[{ERROR_SCALE_MISMATCH}] Cannot combine scale {left} with scale {right}"
        )


# ============================================================================
# Integer helpers
# ============================================================================

def _require_int(value: object, name: str) -> int:
    # bool is an int subclass, but True wei is always a bug
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be int, got {type(value).__name__}")
    return value


def _div_toward_zero(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    if (numerator < 0) != (denominator < 0):
        return -quotient
    return quotient


def _integer_multiplier(value: Number, precision_digits: int) -> int:
    """
    Turn a (possibly float) factor into an integer scaled by 10^precision_digits.

    The value goes through str() so 0.1 becomes Decimal('0.1'), never
    Decimal(0.1000000000000000055511151231257827).
    """
    if precision_digits < 0:
        raise InvalidPrecisionError(
            f"precision_digits must be non-negative, got {precision_digits}"
        )
    try:
        factor = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Cannot use '{value}' as a multiplier") from e

    if not factor.is_finite():
        raise ValueError(f"Multiplier must be finite, got {value}")

    # half rounds toward +infinity: 2.5 -> 3, -2.5 -> -2
    sign, digits, exponent = factor.as_tuple()
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(digits) + abs(exponent) + precision_digits + 2)
        scaled = (factor.scaleb(precision_digits) + _HALF).to_integral_value(rounding=ROUND_FLOOR)
    return int(scaled)


# ============================================================================
# Public API
# ============================================================================

def multiply_by_ratio(
    raw: int,
    ratio: Number,
    precision_digits: int = DEFAULT_PERCENT_PRECISION
) -> int:
    """
    Multiply a raw amount by a fractional ratio (1.0 == whole amount).

    Args:
        raw: Integer magnitude
        ratio: Factor, rounded half toward +infinity to precision_digits decimals
        precision_digits: Decimals kept from the ratio

    Returns:
        raw * round(ratio * 10^p) / 10^p, truncated toward zero
    """
    raw = _require_int(raw, "raw")
    multiplier = _integer_multiplier(ratio, precision_digits)
    if multiplier == 0:
        return 0
    return _div_toward_zero(raw * multiplier, 10 ** precision_digits)


def percentage_of(
    raw: int,
    percent: Number,
    precision_digits: int = DEFAULT_PERCENT_PRECISION
) -> int:
    """
    Take `percent` percent of a raw amount (100 == whole amount).

    Only the percentage itself is rounded (half toward +infinity,
    precision_digits decimals); the magnitude is never touched by floating point.

    Example:
        percentage_of(10**18, 2.5)  -> 25000000000000000
        percentage_of(raw, 100, 4)  -> raw
    """
    raw = _require_int(raw, "raw")
    multiplier = _integer_multiplier(percent, precision_digits)
    if multiplier == 0:
        return 0
    return _div_toward_zero(raw * multiplier, 100 * 10 ** precision_digits)


def format_amount(
    raw: int,
    scale: int = NATIVE_SCALE,
    display_digits: int = DISPLAY_DIGITS
) -> str:
    """
    Render raw / 10^scale with exactly display_digits fractional digits.

    The fraction is zero-padded to `scale` first and then truncated, so
    leading zeros survive: 50000000000000 at scale 18 shows "0.000050".
    A leading "-" is emitted only for strictly negative input.

    Raises:
        InvalidPrecisionError: display_digits > scale or either is negative
    """
    raw = _require_int(raw, "raw")
    if scale < 0 or display_digits < 0:
        raise InvalidPrecisionError(
            f"scale and display_digits must be non-negative | "
            f"scale={scale} | display_digits={display_digits}"
        )
    if display_digits > scale:
        raise InvalidPrecisionError(
            f"display_digits={display_digits} exceeds scale={scale}"
        )

    sign = "-" if raw < 0 else ""
    magnitude = abs(raw)
    divisor = 10 ** scale

    integer_part = magnitude // divisor
    if display_digits == 0:
        return f"{sign}{integer_part}"

    fraction = str(magnitude % divisor).rjust(scale, "0")[:display_digits]
    return f"{sign}{integer_part}.{fraction}"


def parse_amount(text: str, scale: int = NATIVE_SCALE) -> int:
    """
    Parse a decimal string into a raw integer at the given scale.

    Inverse of format_amount(raw, scale, scale).

    Raises:
        InvalidPrecisionError: More fractional digits than `scale`
        ValueError: Not a plain decimal number
    """
    if scale < 0:
        raise InvalidPrecisionError(f"scale must be non-negative, got {scale}")

    s = text.strip()
    negative = s.startswith("-")
    if negative or s.startswith("+"):
        s = s[1:]

    integer_str, _, fraction_str = s.partition(".")
    if not integer_str.isdigit() or (fraction_str and not fraction_str.isdigit()):
        raise ValueError(f"Not a decimal amount: '{text}'")
    if len(fraction_str) > scale:
        raise InvalidPrecisionError(
            f"'{text}' has {len(fraction_str)} fractional digits, scale is {scale}"
        )

    raw = int(integer_str) * 10 ** scale
    if fraction_str:
        raw += int(fraction_str.ljust(scale, "0"))
    return -raw if negative else raw


# ============================================================================
# Value object
# ============================================================================

@dataclass(frozen=True)
class FixedPointAmount:
    """
    Integer magnitude with an implied decimal scale.

    Represents raw / 10^scale. Amounts of different scales never mix
    implicitly: use rescale() first.
    """
    raw: int
    scale: int = NATIVE_SCALE

    def __post_init__(self) -> None:
        _require_int(self.raw, "raw")
        if self.scale < 0:
            raise InvalidPrecisionError(f"scale must be non-negative, got {self.scale}")

    @classmethod
    def parse(cls, text: str, scale: int = NATIVE_SCALE) -> "FixedPointAmount":
        return cls(parse_amount(text, scale), scale)

    def format(self, display_digits: int = DISPLAY_DIGITS) -> str:
        return format_amount(self.raw, self.scale, display_digits)

    def percentage(
        self,
        percent: Number,
        precision_digits: int = DEFAULT_PERCENT_PRECISION
    ) -> "FixedPointAmount":
        return FixedPointAmount(percentage_of(self.raw, percent, precision_digits), self.scale)

    def rescale(self, scale: int) -> "FixedPointAmount":
        """Exact when growing the scale, truncates toward zero when shrinking."""
        if scale < 0:
            raise InvalidPrecisionError(f"scale must be non-negative, got {scale}")
        if scale >= self.scale:
            return FixedPointAmount(self.raw * 10 ** (scale - self.scale), scale)
        return FixedPointAmount(_div_toward_zero(self.raw, 10 ** (self.scale - scale)), scale)

    def to_decimal(self) -> Decimal:
        # string construction is exact, scaleb() would round to context precision
        return Decimal(f"{self.raw}E-{self.scale}")

    def _check_scale(self, other: "FixedPointAmount") -> None:
        if self.scale != other.scale:
            raise ScaleMismatchError(self.scale, other.scale)

    def __add__(self, other: "FixedPointAmount") -> "FixedPointAmount":
        if not isinstance(other, FixedPointAmount):
            return NotImplemented
        self._check_scale(other)
        return FixedPointAmount(self.raw + other.raw, self.scale)

    def __sub__(self, other: "FixedPointAmount") -> "FixedPointAmount":
        if not isinstance(other, FixedPointAmount):
            return NotImplemented
        self._check_scale(other)
        return FixedPointAmount(self.raw - other.raw, self.scale)

    def __neg__(self) -> "FixedPointAmount":
        return FixedPointAmount(-self.raw, self.scale)

    def __str__(self) -> str:
        return self.format(self.scale)


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
