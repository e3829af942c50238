"""Naive and compensated summation algorithms.

All variants share one contract: an ordered sequence of floats goes in, a
single float approximating the exact sum comes out. They differ only in
accuracy and cost:

- sum_naive:        running accumulator, error up to (n-1)u Σ|x_i|
- sum_kahan:        Kahan's compensated summation, error ~2u Σ|x_i|
- sum_kbn:          Kahan-Babuška-Neumaier, also robust when a term is
                    larger than the running sum
- sum_double_word:  accumulate in double-word arithmetic (~106 bits)

Summation runs in the dtype of the input array (float64 for plain Python
sequences), so the same functions can be studied in FP32, FP16 or BF16.

References:
- Higham: "Accuracy and Stability of Numerical Algorithms" (2nd ed.), §4
- Neumaier: "Rundungsfehleranalyse einiger Verfahren zur Summation
  endlicher Summen", ZAMM 54 (1974)
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from error_control_lab.algorithms.double_word import DoubleWord

if TYPE_CHECKING:
    from numpy.typing import NDArray

logger = logging.getLogger(__name__)

SummationFunction = Callable[["Sequence[float] | NDArray"], float]


@dataclass(frozen=True, slots=True)
class SummationError:
    """Accuracy of one summation method on one input."""

    method: str
    """Registry name of the summation method."""

    result: float
    """Computed sum (converted to float)."""

    absolute_error: float
    """|result - exact|."""

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "method": self.method,
            "result": self.result,
            "absolute_error": self.absolute_error,
        }


def _working_values(values: Sequence[float] | NDArray) -> tuple[list, object]:
    """Return the items to sum and the zero of the working type."""
    arr = np.asarray(values)
    if arr.ndim != 1:
        msg = f"Expected a 1-D sequence of floats, got shape {arr.shape}"
        raise ValueError(msg)

    # Integer and boolean input is summed in binary64
    if arr.dtype.kind in "iub":
        arr = arr.astype(np.float64)

    zero = arr.dtype.type(0)
    # tolist() gives Python floats, which are binary64 like the array
    items = arr.tolist() if arr.dtype == np.float64 else list(arr)
    return items, zero


def sum_naive(values: Sequence[float] | NDArray) -> float:
    """Recursive summation with a single accumulator."""
    items, accu = _working_values(values)
    for x in items:
        accu += x
    return accu


def sum_kahan(values: Sequence[float] | NDArray) -> float:
    """Kahan's compensated summation.

    The compensation ``error`` recovers the low-order bits lost when ``y``
    is added to the accumulator. Like fast_two_sum this assumes the
    accumulator dominates the incoming term; a term much larger than the
    running sum can wipe out the compensation.
    """
    items, accu = _working_values(values)
    error = accu * 0
    for x in items:
        temp = accu
        y = x + error
        accu = temp + y
        error = (temp - accu) + y
    return accu


def sum_kbn(values: Sequence[float] | NDArray) -> float:
    """Kahan-Babuška-Neumaier summation.

    Branches on which operand is larger, so the rounding error of every
    addition is captured exactly (a fast_two_sum with correctly ordered
    arguments). Compensations are accumulated separately and added once at
    the end.
    """
    items, accu = _working_values(values)
    compensation = accu * 0
    for x in items:
        t = accu + x
        if abs(accu) >= abs(x):
            compensation += (accu - t) + x
        else:
            compensation += (x - t) + accu
        accu = t
    return accu + compensation


def sum_double_word(values: Sequence[float] | NDArray) -> float:
    """Summation in double-word arithmetic, returning the high word."""
    items, zero = _working_values(values)
    accu = DoubleWord(zero, zero)
    for x in items:
        accu = accu + DoubleWord.from_float(x)
    return accu.high


SUMMATION_METHODS: dict[str, SummationFunction] = {
    "naive": sum_naive,
    "kahan": sum_kahan,
    "kbn": sum_kbn,
    "double_word": sum_double_word,
}


def get_summation_method(name: str) -> SummationFunction:
    """Look up a summation method by registry name.

    Raises:
        ValueError: If the name is unknown.
    """
    key = name.lower().replace("-", "_")
    if key not in SUMMATION_METHODS:
        msg = f"Unknown summation method: {name}. Available: {list(SUMMATION_METHODS)}"
        raise ValueError(msg)
    return SUMMATION_METHODS[key]


def generate_unit_sum(
    n: int,
    *,
    seed: int | None = None,
    spread: float = 10.0,
) -> NDArray[np.float64]:
    """Generate 2n + 1 floats which sum to exactly 1.0.

    Values x_i = g_i * exp(spread * h_i) with g, h standard normal, followed
    by their negations and a final 1.0, in random order. Larger ``spread``
    means wilder magnitudes and heavier cancellation.

    Args:
        n: Number of random magnitudes.
        seed: Random seed for reproducibility.
        spread: Scale of the log-magnitudes.

    Returns:
        Array of length 2n + 1 (float64).

    Example:
        >>> values = generate_unit_sum(100, seed=42)
        >>> len(values)
        201
    """
    if n < 0:
        msg = f"n must be non-negative, got {n}"
        raise ValueError(msg)

    rng = np.random.default_rng(seed)
    x = rng.standard_normal(n) * np.exp(spread * rng.standard_normal(n))
    values = np.concatenate([x, -x, [1.0]])
    return values[rng.permutation(values.size)]


def adversarial_unit_sum(
    n_small: int = 1024,
    *,
    big: float = 2.0**53,
) -> NDArray[np.float64]:
    """Deterministic sequence summing to 1.0 that defeats naive summation.

    Layout: ``[big, 1/n_small, ..., 1/n_small, -big]``. Each small term is
    absorbed by ``big`` in naive summation (result 0.0), while the
    compensated methods carry the lost unit and return exactly 1.0.

    Kahan's method only recovers the unit for ``big == 2**53``: for larger
    powers of two ``-big + 1`` rounds back to ``-big`` and the compensation
    is lost again. KBN and double-word summation are exact for any ``big``.

    Args:
        n_small: Number of small terms, a power of two so 1/n_small is exact.
        big: A power of two >= 2**53.
    """
    if n_small < 1 or n_small & (n_small - 1):
        msg = f"n_small must be a positive power of two, got {n_small}"
        raise ValueError(msg)
    mantissa, _ = math.frexp(big)
    if mantissa != 0.5 or big < 2.0**53:
        msg = f"big must be a power of two >= 2**53, got {big!r}"
        raise ValueError(msg)

    small = np.full(n_small, 1.0 / n_small)
    return np.concatenate([[big], small, [-big]])


def compare_summation(
    values: Sequence[float] | NDArray,
    exact: float = 1.0,
    methods: Sequence[str] | None = None,
) -> list[SummationError]:
    """Run several summation methods on the same input.

    Args:
        values: Sequence to sum.
        exact: Exact mathematical sum of ``values``.
        methods: Registry names (default: all methods).

    Returns:
        One SummationError per method, in the requested order.
    """
    if methods is None:
        methods = list(SUMMATION_METHODS)

    results = []
    for name in methods:
        result = float(get_summation_method(name)(values))
        error = abs(result - exact)
        logger.debug("%s: result=%r error=%.3e", name, result, error)
        results.append(
            SummationError(method=name, result=result, absolute_error=error)
        )
    return results


__all__ = [
    "SUMMATION_METHODS",
    "SummationError",
    "adversarial_unit_sum",
    "compare_summation",
    "generate_unit_sum",
    "get_summation_method",
    "sum_double_word",
    "sum_kahan",
    "sum_kbn",
    "sum_naive",
]
