"""Tests for I80F48 fixed-point conversion (core/fixed.py)."""

from __future__ import annotations

from decimal import Decimal
from fractions import Fraction

import pytest

from mfi_cli.core.fixed import FRAC_BITS, I80F48
from mfi_cli.exceptions import FixedPointError


class TestFromNum:
    def test_one_and_a_half_is_exact(self) -> None:
        value = I80F48.from_num(1.5)
        assert value.bits == 3 << (FRAC_BITS - 1)
        assert value.to_fraction() == Fraction(3, 2)

    def test_integer(self) -> None:
        assert I80F48.from_num(2).bits == 2 << FRAC_BITS

    def test_negative(self) -> None:
        assert I80F48.from_num(-0.25).bits == -(1 << (FRAC_BITS - 2))

    def test_zero(self) -> None:
        assert I80F48.from_num(0.0).bits == 0

    def test_decimal_input(self) -> None:
        assert I80F48.from_num(Decimal("0.5")) == I80F48.from_num(0.5)

    def test_rounds_to_nearest(self) -> None:
        # 0.1 is not representable; the result is within half a step.
        value = I80F48.from_num(0.1)
        assert abs(value.to_fraction() - Fraction(0.1)) <= Fraction(1, 2 << FRAC_BITS)

    def test_ties_round_to_even(self) -> None:
        half_step = Fraction(1, 2 << FRAC_BITS)
        assert I80F48.from_num(half_step).bits == 0
        assert I80F48.from_num(3 * half_step).bits == 2

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_rejected(self, bad: float) -> None:
        with pytest.raises(FixedPointError):
            I80F48.from_num(bad)

    def test_out_of_range_rejected(self) -> None:
        with pytest.raises(FixedPointError):
            I80F48.from_num(2**80)

    def test_largest_integer_part_accepted(self) -> None:
        assert I80F48.from_num(2**79 - 1).bits == (2**79 - 1) << FRAC_BITS

    def test_bool_rejected(self) -> None:
        with pytest.raises(FixedPointError):
            I80F48.from_num(True)


class TestEncoding:
    def test_to_bytes_is_16_little_endian(self) -> None:
        raw = I80F48.from_num(1).to_bytes()
        assert len(raw) == 16
        assert raw == (1 << FRAC_BITS).to_bytes(16, "little", signed=True)

    def test_negative_bytes_are_twos_complement(self) -> None:
        raw = I80F48.from_num(-1).to_bytes()
        assert raw[-1] == 0xFF

    def test_from_bytes_inverts_to_bytes(self) -> None:
        value = I80F48.from_num(-12.375)
        assert I80F48.from_bytes(value.to_bytes()) == value

    def test_from_bytes_wrong_length(self) -> None:
        with pytest.raises(FixedPointError):
            I80F48.from_bytes(b"\x00" * 8)


class TestRendering:
    def test_str_is_exact_decimal(self) -> None:
        assert str(I80F48.from_num(1.5)) == "1.5"

    def test_str_integer_has_no_exponent(self) -> None:
        assert str(I80F48.from_num(100)) == "100"

    def test_float(self) -> None:
        assert float(I80F48.from_num(0.75)) == 0.75

    def test_ordering(self) -> None:
        assert I80F48.from_num(0.5) < I80F48.from_num(0.75)
