"""Tests for double-word arithmetic."""

import itertools
from fractions import Fraction

import numpy as np
import pytest

from error_control_lab.algorithms.double_word import DoubleWord


class TestConstruction:
    """Tests for DoubleWord constructors."""

    @pytest.mark.parametrize("x", [0.0, 1.0, -3.5, 0.1, 1e300, 5e-324])
    def test_from_float_round_trip(self, x: float) -> None:
        """Lifting a float gives (x, 0) and converts back to x."""
        dw = DoubleWord.from_float(x)
        assert dw.high == x
        assert dw.low == 0.0
        assert float(dw) == x

    def test_default_low_is_zero(self) -> None:
        """DoubleWord(x) equals DoubleWord.from_float(x)."""
        assert DoubleWord(2.5) == DoubleWord.from_float(2.5)

    def test_from_sum_is_exact(self) -> None:
        """from_sum keeps the rounding error of a + b in low."""
        dw = DoubleWord.from_sum(1.0, 2.0**-60)
        assert dw.high == 1.0
        assert dw.low == 2.0**-60
        assert dw.to_fraction() == 1 + Fraction(1, 2**60)

    def test_unnormalised_pair_is_renormalised(self) -> None:
        """(1, 1) becomes (2, 0): float and exact value agree."""
        dw = DoubleWord(1.0, 1.0)
        assert (dw.high, dw.low) == (2.0, 0.0)
        assert float(dw) == 2.0
        assert dw.to_fraction() == 2

    def test_renormalisation_keeps_exact_value(self) -> None:
        """Swapped components keep their exact sum with high = RN(sum)."""
        dw = DoubleWord(2.0**-60, 1.0)
        assert dw.high == 1.0
        assert dw.low == 2.0**-60
        assert dw.to_fraction() == 1 + Fraction(1, 2**60)

    def test_zero(self) -> None:
        """zero() is (0, 0)."""
        assert DoubleWord.zero() == DoubleWord(0.0, 0.0)

    def test_immutable(self) -> None:
        """DoubleWord should be immutable."""
        dw = DoubleWord(1.0)
        with pytest.raises(AttributeError):
            dw.high = 2.0  # type: ignore[misc]

    def test_slots(self) -> None:
        """DoubleWord should use slots (no __dict__)."""
        assert not hasattr(DoubleWord(1.0), "__dict__")


class TestAddition:
    """Tests for double-word addition."""

    def test_carries_small_term(self) -> None:
        """A term below the ulp of high is kept in low."""
        x = DoubleWord(1.0) + DoubleWord(1e-20)
        assert x.high == 1.0
        assert x.low == 1e-20

    def test_cancellation_recovers_low(self) -> None:
        """Cancelling the high parts leaves the carried low part."""
        total = DoubleWord(2.0**53) + 1.0 + DoubleWord(-(2.0**53))
        assert total.high == 1.0
        assert total.low == 0.0

    def test_float_operands(self) -> None:
        """Floats on either side are lifted to double words."""
        assert (DoubleWord(1.0) + 2.0).high == 3.0
        assert (2.0 + DoubleWord(1.0)).high == 3.0

    def test_builtin_sum(self) -> None:
        """Built-in sum() works starting from integer 0."""
        total = sum(DoubleWord(v) for v in [2.0**53, 1.0, -(2.0**53)])
        assert isinstance(total, DoubleWord)
        assert total.high == 1.0

    def test_high_is_rounded_value(self) -> None:
        """high equals high + low rounded to nearest."""
        x = DoubleWord(1.0) + DoubleWord(2.0**-53) + DoubleWord(2.0**-80)
        assert x.high == float(x.to_fraction())

    def test_unsupported_operand(self) -> None:
        """Non-numeric operands raise TypeError."""
        with pytest.raises(TypeError):
            DoubleWord(1.0) + "1.0"  # type: ignore[operator]

    def test_float32_components(self) -> None:
        """Components keep their NumPy type."""
        x = DoubleWord.from_float(np.float32(1.0)) + np.float32(2.0**-30)
        assert isinstance(x.high, np.float32)
        assert x.high == np.float32(1.0)
        assert x.low == np.float32(2.0**-30)


class TestSubtractionAndNegation:
    """Tests for negation and subtraction."""

    def test_neg(self) -> None:
        """Negation flips both words."""
        assert -DoubleWord(1.0, 2.0**-60) == DoubleWord(-1.0, -(2.0**-60))

    def test_sub_self_is_zero(self) -> None:
        """x - x == 0."""
        x = DoubleWord.from_sum(0.1, 0.2)
        assert (x - x).to_fraction() == 0

    def test_rsub(self) -> None:
        """float - DoubleWord."""
        assert (3.0 - DoubleWord(1.0)).high == 2.0


class TestAssociativity:
    """Double-word addition is associative up to double-word precision."""

    # Values across more than 15 orders of magnitude
    VALUES = [1e-8, 3.3e-3, -0.7, 1.0, 2.5e2, -4.1e4, 1e8]

    @pytest.mark.parametrize("a,b,c", list(itertools.combinations(VALUES, 3)))
    def test_associative(self, a: float, b: float, c: float) -> None:
        """(a + b) + c and a + (b + c) agree to ~2^-100 relative."""
        left = (DoubleWord(a) + DoubleWord(b)) + DoubleWord(c)
        right = DoubleWord(a) + (DoubleWord(b) + DoubleWord(c))

        exact = Fraction(a) + Fraction(b) + Fraction(c)
        scale = abs(Fraction(a)) + abs(Fraction(b)) + abs(Fraction(c))
        tol = scale * Fraction(1, 2**100)

        assert abs(left.to_fraction() - right.to_fraction()) <= tol
        assert abs(left.to_fraction() - exact) <= tol

    def test_float_addition_is_not_associative(self) -> None:
        """Ordinary floats fail where double words succeed."""
        a, b, c = 1e16, -1e16, 1.0
        assert (a + b) + c != a + (b + c)

        left = (DoubleWord(a) + DoubleWord(b)) + DoubleWord(c)
        right = DoubleWord(a) + (DoubleWord(b) + DoubleWord(c))
        assert left.high == right.high == 1.0
