"""Double-word arithmetic built from error-free transforms.

A double-word (DW) number represents the unevaluated sum x = x_h + x_l with
x_h = RN(x). With binary64 components this carries roughly 106 bits of
significand while only using ordinary floating-point units, which makes it
much cheaper than arbitrary-precision arithmetic.

Only what compensated summation needs is provided: construction, addition,
negation and subtraction.

References:
- Joldes, Muller & Popescu: "Tight and rigorous error bounds for basic
  building blocks of double-word arithmetic", ACM TOMS 44 (2017), Alg. 6
- Boldo et al.: "Floating-point arithmetic", Acta Numerica (2023), §4
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from fractions import Fraction

from error_control_lab.algorithms.error_free import fast_two_sum, two_sum


@dataclass(frozen=True, slots=True)
class DoubleWord:
    """Unevaluated sum ``high + low`` of two floats.

    ``low`` is the exact remainder of rounding ``high + low`` to ``high``.
    A pair that breaks this, such as ``DoubleWord(1.0, 1.0)``, is
    renormalised on construction to the same exact value ``(2.0, 0.0)``.
    Components keep the type they were created with, so a DoubleWord of
    np.float32 values is a ~48-bit number.

    Example:
        >>> x = DoubleWord(1.0) + DoubleWord(1e-20)
        >>> x.high, x.low
        (1.0, 1e-20)
        >>> sum(DoubleWord(v) for v in [2.0**53, 1.0, -(2.0**53)]).high
        1.0
    """

    high: float
    """Rounded value RN(high + low)."""

    low: float = 0.0
    """Rounding remainder."""

    def __post_init__(self) -> None:
        if self.high + self.low != self.high:
            s, t = two_sum(self.high, self.low)
            object.__setattr__(self, "high", s)
            object.__setattr__(self, "low", t)

    @classmethod
    def from_float(cls, x: float) -> DoubleWord:
        """Lift an ordinary float, ``(x, 0)``."""
        return cls(x, x * 0)

    @classmethod
    def from_sum(cls, a: float, b: float) -> DoubleWord:
        """Exact sum of two floats as a double-word number."""
        s, t = two_sum(a, b)
        return cls(s, t)

    @classmethod
    def zero(cls) -> DoubleWord:
        """Canonical zero."""
        return cls(0.0, 0.0)

    def __add__(self, other: DoubleWord | float) -> DoubleWord:
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented

        # The order below (two TwoSums, then two FastTwoSums) carries the
        # 3u² relative error bound; do not reorder.
        sh, sl = two_sum(self.high, other.high)
        th, tl = two_sum(self.low, other.low)
        c = sl + th
        vh, vl = fast_two_sum(sh, c)
        w = tl + vl
        zh, zl = fast_two_sum(vh, w)
        return DoubleWord(zh, zl)

    def __radd__(self, other: float) -> DoubleWord:
        # Supports the built-in sum(), which starts from the integer 0
        return self.__add__(other)

    def __neg__(self) -> DoubleWord:
        return DoubleWord(-self.high, -self.low)

    def __sub__(self, other: DoubleWord | float) -> DoubleWord:
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self + (-other)

    def __rsub__(self, other: float) -> DoubleWord:
        return (-self) + other

    def __float__(self) -> float:
        return float(self.high)

    def to_fraction(self) -> Fraction:
        """Exact rational value of ``high + low``."""
        return Fraction(float(self.high)) + Fraction(float(self.low))


def _coerce(value: object) -> DoubleWord:
    if isinstance(value, DoubleWord):
        return value
    if isinstance(value, numbers.Real):
        return DoubleWord.from_float(value)  # type: ignore[arg-type]
    return NotImplemented  # type: ignore[return-value]


__all__ = [
    "DoubleWord",
]
