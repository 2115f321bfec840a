"""I80F48 fixed-point numbers.

The lending program stores weights and interest-rate parameters as
signed 128-bit fixed-point values with 48 fractional bits, serialised
on-chain as 16 little-endian bytes.

Rounding
--------
Floats are converted from their exact binary value and rounded to the
nearest multiple of 2**-48, ties to even.  Integers, ``Decimal`` and
``Fraction`` inputs follow the same rule.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal, localcontext
from fractions import Fraction

from mfi_cli.exceptions import FixedPointError

FRAC_BITS: int = 48
TOTAL_BITS: int = 128

_SCALE: int = 1 << FRAC_BITS
_MIN_BITS: int = -(1 << (TOTAL_BITS - 1))
_MAX_BITS: int = (1 << (TOTAL_BITS - 1)) - 1

Number = int | float | Decimal | Fraction


@dataclass(frozen=True, slots=True, order=True)
class I80F48:
    """Immutable I80F48 value, stored as its raw two's-complement bits."""

    bits: int
    """Raw integer such that ``value == bits / 2**48``."""

    def __post_init__(self) -> None:
        if not _MIN_BITS <= self.bits <= _MAX_BITS:
            raise FixedPointError(f"I80F48 bits out of range: {self.bits}")

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_num(cls, value: Number) -> I80F48:
        """Convert *value* to the nearest representable I80F48.

        Raises
        ------
        FixedPointError
            If *value* is NaN, infinite, or outside the I80F48 range.
        """
        if isinstance(value, bool):
            raise FixedPointError("Booleans are not numeric values.")
        if isinstance(value, int):
            exact = Fraction(value)
        elif isinstance(value, float):
            if not math.isfinite(value):
                raise FixedPointError(f"Cannot convert {value} to I80F48.")
            exact = Fraction(value)
        elif isinstance(value, Decimal):
            if not value.is_finite():
                raise FixedPointError(f"Cannot convert {value} to I80F48.")
            exact = Fraction(value)
        elif isinstance(value, Fraction):
            exact = value
        else:
            raise FixedPointError(
                f"Unsupported numeric type: {type(value).__name__}",
            )

        bits = round(exact * _SCALE)
        if not _MIN_BITS <= bits <= _MAX_BITS:
            raise FixedPointError(
                f"{value} is outside the I80F48 range.",
                hint="Weights and rates must fit in 80 integer bits.",
            )
        return cls(bits)

    @classmethod
    def from_bytes(cls, raw: bytes) -> I80F48:
        """Decode the 16-byte little-endian on-chain layout."""
        if len(raw) != TOTAL_BITS // 8:
            raise FixedPointError(
                f"I80F48 requires {TOTAL_BITS // 8} bytes, got {len(raw)}.",
            )
        return cls(int.from_bytes(raw, "little", signed=True))

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def to_bytes(self) -> bytes:
        """Encode as 16 little-endian two's-complement bytes."""
        return self.bits.to_bytes(TOTAL_BITS // 8, "little", signed=True)

    def to_fraction(self) -> Fraction:
        return Fraction(self.bits, _SCALE)

    def to_decimal(self) -> Decimal:
        """Return the exact decimal value (2**-48 has 48 decimal places)."""
        with localcontext() as ctx:
            ctx.prec = 100
            return Decimal(self.bits * 5**FRAC_BITS).scaleb(-FRAC_BITS).normalize()

    def __float__(self) -> float:
        return self.bits / _SCALE

    def __str__(self) -> str:
        return format(self.to_decimal(), "f")

    def __repr__(self) -> str:
        return f"I80F48({self})"
