"""
Tests for money primitives

Test strategy:
1. Exact examples for apportionment and every formatter
2. Property tests (hypothesis) for the invariants that must hold for any
   amount: subdivision is exact, width rendering fits
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from pydantic import BaseModel, ValidationError

from splitflow.models import (
    AmountError,
    CentsAmount,
    FormatOverflowError,
    SignedCentsAmount,
)


class TestCentsAmountArithmetic:
    """Tests for CentsAmount construction and arithmetic."""

    def test_rejects_negative_cents(self):
        """Test that a negative cent count is refused."""
        with pytest.raises(AmountError):
            CentsAmount(-1)

    def test_rejects_non_integer_cents(self):
        """Test that floats and bools are not cent counts."""
        with pytest.raises(TypeError):
            CentsAmount(1.5)
        with pytest.raises(TypeError):
            CentsAmount(True)

    def test_add_and_subtract(self):
        """Test unsigned addition and subtraction."""
        assert CentsAmount(250) + CentsAmount(750) == CentsAmount(1000)
        assert CentsAmount(1000) - CentsAmount(1) == CentsAmount(999)

    def test_subtract_below_zero_raises(self):
        """Test that subtraction never clamps at zero."""
        with pytest.raises(AmountError):
            CentsAmount(5) - CentsAmount(6)

    def test_multiply_and_floor_divide(self):
        """Test integer scaling."""
        assert CentsAmount(333) * 3 == CentsAmount(999)
        assert 3 * CentsAmount(333) == CentsAmount(999)
        assert CentsAmount(1000) // 3 == CentsAmount(333)

    def test_floor_divide_by_zero_raises(self):
        """Test that division needs a positive divisor."""
        with pytest.raises(AmountError):
            CentsAmount(1000) // 0

    def test_negation_is_signed(self):
        """Test that negating an unsigned amount gives a signed one."""
        assert -CentsAmount(500) == SignedCentsAmount(-500)
        assert CentsAmount(500).signed() == SignedCentsAmount(500)

    def test_ordering_and_truthiness(self):
        """Test comparisons and bool."""
        assert CentsAmount(1) < CentsAmount(2)
        assert not CentsAmount.zero()
        assert CentsAmount(1)


class TestSignedCentsAmount:
    """Tests for SignedCentsAmount."""

    def test_mixed_addition(self):
        """Test adding unsigned amounts to signed ones, in both orders."""
        assert SignedCentsAmount(-500) + CentsAmount(1000) == SignedCentsAmount(500)
        assert CentsAmount(1000) + SignedCentsAmount(-500) == SignedCentsAmount(500)

    def test_abs_is_unsigned(self):
        """Test abs() of a signed amount."""
        assert abs(SignedCentsAmount(-42)) == CentsAmount(42)

    def test_subdiv_keeps_sign(self):
        """Test that the magnitude is apportioned and the sign kept."""
        parts = SignedCentsAmount(-10).subdiv([1, 1, 1])
        assert parts == [
            SignedCentsAmount(-4),
            SignedCentsAmount(-3),
            SignedCentsAmount(-3),
        ]

    def test_sign_prefix(self):
        """Test the rendered sign."""
        assert SignedCentsAmount(150).as_string_exact() == "+1.50"
        assert SignedCentsAmount(-150).as_string_exact() == "-1.50"
        assert SignedCentsAmount(0).as_string_exact() == "0.00"


class TestSubdivision:
    """Tests for apportionment."""

    def test_remainder_goes_to_lowest_indices(self):
        """Test the classic ten cents in three parts."""
        assert CentsAmount(10).subdiv([1, 1, 1]) == [
            CentsAmount(4),
            CentsAmount(3),
            CentsAmount(3),
        ]

    def test_weighted_split(self):
        """Test unequal weights."""
        assert CentsAmount(1000).subdiv([1, 3]) == [CentsAmount(250), CentsAmount(750)]

    def test_zero_weight_raises(self):
        """Test that a zero weight is rejected instead of receiving a leftover cent."""
        with pytest.raises(AmountError):
            CentsAmount(1).subdiv([0, 1, 1])
        with pytest.raises(AmountError):
            SignedCentsAmount(-1).subdiv([1, 0])

    def test_no_parts_raises(self):
        """Test that there must be something to divide by."""
        with pytest.raises(AmountError):
            CentsAmount(100).subdiv([])

    def test_negative_weight_raises(self):
        """Test that weights cannot be negative."""
        with pytest.raises(AmountError):
            CentsAmount(100).subdiv([2, -1])

    @given(
        cents=st.integers(min_value=0, max_value=10**12),
        weights=st.lists(st.integers(min_value=1, max_value=1000), min_size=1, max_size=20),
    )
    @settings(max_examples=500)
    def test_parts_sum_to_whole(self, cents, weights):
        """Property: parts always add up to the amount, one part per weight."""
        parts = CentsAmount(cents).subdiv(weights)
        assert len(parts) == len(weights)
        assert sum(part.cents for part in parts) == cents

    @given(
        cents=st.integers(min_value=0, max_value=10**9),
        weights=st.lists(st.integers(min_value=1, max_value=50), min_size=1, max_size=10),
    )
    @settings(max_examples=300)
    def test_parts_within_one_cent_of_ideal(self, cents, weights):
        """Property: no part is more than one cent above its floored share."""
        total = sum(weights)
        parts = CentsAmount(cents).subdiv(weights)
        for part, weight in zip(parts, weights):
            floor = cents * weight // total
            assert floor <= part.cents <= floor + 1


class TestFormatting:
    """Tests for exact, precision and width formatting."""

    def test_exact(self):
        """Test exact rendering with and without separators."""
        assert CentsAmount(0).as_string_exact() == "0.00"
        assert CentsAmount(5).as_string_exact() == "0.05"
        assert CentsAmount(123456789).as_string_exact() == "1234567.89"
        assert CentsAmount(123456789).as_string_exact(separators=True) == "1,234,567.89"
        assert str(CentsAmount(1050)) == "10.50"

    def test_precision_truncates(self):
        """Test that dropped digits are truncated, never rounded."""
        amount = CentsAmount(123456)  # 1234.56
        assert amount.as_string_precision(6) == "1234.56"
        assert amount.as_string_precision(5) == "1234.5"
        assert amount.as_string_precision(4) == "1234"
        assert amount.as_string_precision(3) == "1230"
        assert amount.as_string_precision(1) == "1k"

    def test_precision_no_rounding_up(self):
        """Test that 9.99 at one digit is 9, not 10."""
        assert CentsAmount(999).as_string_precision(1) == "9"

    def test_precision_suffixes(self):
        """Test k, M and G suffixes."""
        assert CentsAmount(1234567).as_string_precision(3) == "12300"
        assert CentsAmount(1234567).as_string_precision(2) == "12k"
        assert CentsAmount(1234567890).as_string_precision(4) == "12340k"
        assert CentsAmount(1234567890).as_string_precision(2) == "12M"
        assert CentsAmount(1234567890123).as_string_precision(2) == "12G"

    def test_precision_beyond_g_raises(self):
        """Test that values needing a suffix past G overflow."""
        with pytest.raises(FormatOverflowError):
            CentsAmount(10**15).as_string_precision(1)

    def test_precision_must_be_positive(self):
        """Test that zero significant digits is refused."""
        with pytest.raises(AmountError):
            CentsAmount(100).as_string_precision(0)

    def test_width_prefers_exact(self):
        """Test that the exact rendering is used when it fits."""
        assert CentsAmount(123456).as_string_width(7) == "1234.56"
        assert CentsAmount(123456).as_string_width(20) == "1234.56"

    def test_width_falls_back_to_precision(self):
        """Test narrowing a rendering to the column width."""
        amount = CentsAmount(123456)
        assert amount.as_string_width(6) == "1234.5"
        assert amount.as_string_width(4) == "1234"
        assert amount.as_string_width(2) == "1k"
        assert amount.as_string_width(1) == "1k"

    def test_signed_width_reserves_sign(self):
        """Test that the sign counts towards the width."""
        assert SignedCentsAmount(-123456).as_string_width(7) == "-1234.5"
        assert SignedCentsAmount(123456).as_string_width(8) == "+1234.56"

    @given(
        cents=st.integers(min_value=0, max_value=10**13),
        width=st.integers(min_value=1, max_value=20),
    )
    @settings(max_examples=500)
    def test_width_fits_when_possible(self, cents, width):
        """Property: the rendering fits whenever one digit would fit."""
        amount = CentsAmount(cents)
        text = amount.as_string_width(width)
        if width >= len(amount.as_string_precision(1)):
            assert len(text) <= width

    @given(cents=st.integers(min_value=0, max_value=10**15))
    @settings(max_examples=200)
    def test_exact_has_two_decimals(self, cents):
        """Property: exactly one '.' followed by two digits."""
        text = CentsAmount(cents).as_string_exact()
        integer, fraction = text.split(".")
        assert len(fraction) == 2
        assert integer.isdigit()


class TestPydanticIntegration:
    """Tests for amounts as pydantic field types."""

    class Priced(BaseModel):
        amount: CentsAmount
        delta: SignedCentsAmount

    def test_validates_from_int(self):
        """Test that plain integers validate into amounts."""
        priced = self.Priced(amount=1000, delta=-500)
        assert priced.amount == CentsAmount(1000)
        assert priced.delta == SignedCentsAmount(-500)

    def test_serializes_to_int(self):
        """Test that amounts dump back to integer cents."""
        priced = self.Priced(amount=CentsAmount(1000), delta=SignedCentsAmount(-500))
        assert priced.model_dump(mode="json") == {"amount": 1000, "delta": -500}

    def test_negative_unsigned_is_validation_error(self):
        """Test that negative cents fail validation."""
        with pytest.raises(ValidationError):
            self.Priced(amount=-1, delta=0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
