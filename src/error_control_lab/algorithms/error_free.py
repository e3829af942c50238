"""Error-free transformations of floating-point addition and multiplication.

For round-to-nearest arithmetic and a, b without overflow, the rounding error
of s = fl(a + b) is itself a floating-point number (Boldo et al., Property
2.11). The transforms below compute it, so that a + b == s + t holds exactly.
The same holds for products (barring underflow), which gives an exact
product transform and from it a correctly rounded fused multiply-add.

The sum transforms work in the type of their arguments: Python floats
compute in binary64, NumPy scalars (np.float32, np.float16, ...) in their
own format. The product transforms are binary64 only.

References:
- Knuth: "The Art of Computer Programming", Vol. 2, §4.2.2 (TwoSum)
- Dekker: "A floating-point technique for extending the available
  precision" (1971) (FastTwoSum, TwoProduct)
- Jeannerod, Louvet & Muller: "Further analysis of Kahan's algorithm for
  the accurate computation of 2×2 determinants", Math. Comp. 82 (2013)
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import NamedTuple

# Veltkamp splitting constant 2^ceil(53/2) + 1 for binary64
_SPLITTER: float = 2.0**27 + 1.0


class TwoSumResult(NamedTuple):
    """Unevaluated sum s + t of a rounded result and its rounding error."""

    s: float
    """Rounded sum fl(a + b)."""

    t: float
    """Rounding error, a + b - s."""


def two_sum(a: float, b: float) -> TwoSumResult:
    """Exact sum of two floats as rounded value plus error (Knuth).

    Valid for any relative magnitude of ``a`` and ``b``. Costs six flops.

    Example:
        >>> two_sum(1.0, 2.0**55)
        TwoSumResult(s=3.602879701896397e+16, t=1.0)
    """
    s = a + b
    v = s - a
    t = (a - (s - v)) + (b - v)
    return TwoSumResult(s, t)


def fast_two_sum(a: float, b: float) -> TwoSumResult:
    """Exact sum of two floats, assuming ``|a| >= |b|`` (Dekker).

    Costs three flops. The ordering precondition is NOT checked: with the
    exponent of ``a`` smaller than that of ``b`` the returned error term is
    silently wrong.

    Example:
        >>> fast_two_sum(0.1, 0.2).t
        -2.7755575615628914e-17
        >>> fast_two_sum(1.0, 2.0**55).t  # true error is 1.0
        0.0
    """
    s = a + b
    t = b - (s - a)
    return TwoSumResult(s, t)


class TwoProductResult(NamedTuple):
    """Unevaluated product p + e of a rounded result and its rounding error."""

    p: float
    """Rounded product fl(a * b)."""

    e: float
    """Rounding error, a * b - p."""


def _split(a: float) -> tuple[float, float]:
    # Veltkamp: high carries the upper 26 significand bits, a == high + low
    c = _SPLITTER * a
    high = c - (c - a)
    return high, a - high


def two_product(a: float, b: float) -> TwoProductResult:
    """Exact product of two binary64 floats as rounded value plus error (Dekker).

    Exact as long as neither the product nor the splitting overflows
    (|a|, |b| below about 2^996) and the error does not underflow.

    Example:
        >>> two_product(0.1, 10.0)
        TwoProductResult(p=1.0, e=5.551115123125783e-17)
    """
    a, b = float(a), float(b)
    p = a * b
    a_high, a_low = _split(a)
    b_high, b_low = _split(b)
    e = ((a_high * b_high - p) + a_high * b_low + a_low * b_high) + a_low * b_low
    return TwoProductResult(p, e)


def fma(a: float, b: float, c: float) -> float:
    """Fused multiply-add: a * b + c with a single rounding, in binary64.

    The product is split exactly by :func:`two_product`, and ``math.fsum``
    rounds the three-term sum correctly.

    Example:
        >>> 0.1 * 10.0 - 1.0
        0.0
        >>> fma(0.1, 10.0, -1.0)
        5.551115123125783e-17
    """
    p, e = two_product(a, b)
    return math.fsum((p, e, float(c)))


def determinant_2x2(M: Sequence[Sequence[float]]) -> float:
    """Textbook 2×2 determinant ad - bc, two roundings before the subtraction.

    Works in the type of the entries. When ad ≈ bc the subtraction cancels
    the leading digits and exposes both rounding errors, so the relative
    error is unbounded.
    """
    return M[0][0] * M[1][1] - M[0][1] * M[1][0]


def determinant_kahan(M: Sequence[Sequence[float]]) -> float:
    """Kahan's 2×2 determinant with fused multiply-adds, in binary64.

    w = fl(bc) is computed once; e = w - bc is its exact rounding error and
    f = fl(ad - w). The result e + f has relative error at most 2u.

    Example:
        >>> a = 1.0 + 2.0**-30
        >>> determinant_2x2([[a, 1.0], [1.0, a]]) == 2.0**-29
        True
        >>> determinant_kahan([[a, 1.0], [1.0, a]]) == 2.0**-29 + 2.0**-60
        True
    """
    a, b = float(M[0][0]), float(M[0][1])
    c, d = float(M[1][0]), float(M[1][1])
    w = b * c
    e = fma(-b, c, w)
    f = fma(a, d, -w)
    return e + f


__all__ = [
    "TwoProductResult",
    "TwoSumResult",
    "determinant_2x2",
    "determinant_kahan",
    "fast_two_sum",
    "fma",
    "two_product",
    "two_sum",
]
