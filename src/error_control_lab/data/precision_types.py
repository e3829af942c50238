"""
Precision Format Definitions - Single Source of Truth

This module defines the floating-point formats the lab can compute in, with
their bit layout, machine epsilon, unit roundoff and the convergence
tolerances used by the iterative eigensolvers.

Machine epsilon is the spacing of floating-point numbers just above 1.0,
i.e. 2^(-mantissa_bits). The unit roundoff u = ε/2 bounds the relative error
of a single correctly rounded operation.

References:
    - IEEE 754-2019 Standard for Floating-Point Arithmetic
    - Higham: "Accuracy and Stability of Numerical Algorithms" (2nd ed.)
    - Boldo et al.: "Floating-point arithmetic", Acta Numerica (2023)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, cast

import numpy as np
from numpy.typing import DTypeLike

# bfloat16 lives in ml_dtypes, not in numpy itself
try:
    import ml_dtypes

    HAS_BF16 = True
except ImportError:
    ml_dtypes = None  # type: ignore[assignment,unused-ignore]
    HAS_BF16 = False


class PrecisionFormat(Enum):
    """Supported floating-point precision formats."""

    FP64 = "fp64"
    FP32 = "fp32"
    FP16 = "fp16"
    BF16 = "bf16"  # 8 exponent, 7 mantissa bits (FP32 range, FP16 storage)


@dataclass(frozen=True, slots=True)
class PrecisionSpec:
    """Specification for a floating-point precision format."""

    format: PrecisionFormat
    bits: int
    mantissa_bits: int
    exponent_bits: int
    machine_epsilon: float

    @property
    def bytes(self) -> int:
        """Number of bytes for this format."""
        return self.bits // 8

    @property
    def unit_roundoff(self) -> float:
        """Maximal relative rounding error u = ε/2 (round to nearest)."""
        return self.machine_epsilon / 2


# =============================================================================
# PRECISION SPECIFICATIONS
# =============================================================================
# Machine epsilon: 2^(-mantissa_bits), stored exactly.

_PRECISION_SPECS: dict[PrecisionFormat, PrecisionSpec] = {
    PrecisionFormat.FP64: PrecisionSpec(
        format=PrecisionFormat.FP64,
        bits=64,
        mantissa_bits=52,
        exponent_bits=11,
        machine_epsilon=2.0**-52,
    ),
    PrecisionFormat.FP32: PrecisionSpec(
        format=PrecisionFormat.FP32,
        bits=32,
        mantissa_bits=23,
        exponent_bits=8,
        machine_epsilon=2.0**-23,
    ),
    PrecisionFormat.FP16: PrecisionSpec(
        format=PrecisionFormat.FP16,
        bits=16,
        mantissa_bits=10,
        exponent_bits=5,
        machine_epsilon=2.0**-10,
    ),
    PrecisionFormat.BF16: PrecisionSpec(
        format=PrecisionFormat.BF16,
        bits=16,
        mantissa_bits=7,
        exponent_bits=8,
        machine_epsilon=2.0**-7,
    ),
}


# =============================================================================
# CONVERGENCE TOLERANCES
# =============================================================================
# step_tol: default threshold on min(||u - u_prev||, ||-u - u_prev||)
# residual_tol: threshold on ||A u - λ u|| for residual-controlled solvers
# step_tol sits above sqrt(ε) of the format, residual_tol above ε.

_CONVERGENCE_TOLERANCES: dict[PrecisionFormat, dict[str, float | int]] = {
    PrecisionFormat.FP64: {
        "step_tol": 1e-8,
        "residual_tol": 1e-10,
        "max_iterations": 100,
    },
    PrecisionFormat.FP32: {
        "step_tol": 1e-4,
        "residual_tol": 1e-5,
        "max_iterations": 100,
    },
    PrecisionFormat.FP16: {
        "step_tol": 5e-2,
        "residual_tol": 1e-2,
        "max_iterations": 50,
    },
    PrecisionFormat.BF16: {
        "step_tol": 1e-1,
        "residual_tol": 5e-2,
        "max_iterations": 50,
    },
}


# =============================================================================
# PUBLIC API
# =============================================================================


def get_spec(fmt: PrecisionFormat | str) -> PrecisionSpec:
    """
    Get the full specification for a precision format.

    Args:
        fmt: Precision format (enum or string like 'fp32', 'FP16', 'bf16')

    Returns:
        PrecisionSpec with all format properties

    Raises:
        ValueError: If format is unknown

    Example:
        >>> get_spec("fp32").mantissa_bits
        23
    """
    return _PRECISION_SPECS[parse_format(fmt)]


def get_dtype(fmt: PrecisionFormat | str) -> DTypeLike:
    """
    Get the numpy dtype for a precision format.

    Args:
        fmt: Precision format

    Returns:
        Numpy dtype object

    Raises:
        ValueError: If format is unknown
        ImportError: If BF16 requested but ml_dtypes not installed

    Example:
        >>> get_dtype("fp32")
        <class 'numpy.float32'>
    """
    fmt = parse_format(fmt)

    dtype_map: dict[PrecisionFormat, Any] = {
        PrecisionFormat.FP64: np.float64,
        PrecisionFormat.FP32: np.float32,
        PrecisionFormat.FP16: np.float16,
    }

    if fmt in dtype_map:
        return cast("DTypeLike", dtype_map[fmt])

    if not HAS_BF16:
        raise ImportError(
            f"Format '{fmt.value}' requires ml_dtypes package. "
            "Install with: pip install ml-dtypes"
        )

    return cast("DTypeLike", ml_dtypes.bfloat16)


def get_eps(fmt: PrecisionFormat | str) -> float:
    """
    Get machine epsilon for a precision format.

    Example:
        >>> get_eps("fp64") == 2.0**-52
        True
    """
    return get_spec(fmt).machine_epsilon


def get_unit_roundoff(fmt: PrecisionFormat | str) -> float:
    """
    Get the unit roundoff u = ε/2 for a precision format.

    Every basic operation satisfies fl(a ∘ b) = (a ∘ b)(1 + δ) with |δ| ≤ u.
    """
    return get_spec(fmt).unit_roundoff


def get_tolerance(
    fmt: PrecisionFormat | str,
    tolerance_type: str = "step_tol",
) -> float | int:
    """
    Get convergence tolerance for a precision format.

    Args:
        fmt: Precision format
        tolerance_type: One of 'step_tol', 'residual_tol', 'max_iterations'

    Returns:
        Tolerance value

    Example:
        >>> get_tolerance("fp64", "step_tol")
        1e-08
    """
    tols = _CONVERGENCE_TOLERANCES[parse_format(fmt)]
    if tolerance_type not in tols:
        valid = list(tols.keys())
        raise ValueError(f"Unknown tolerance type: {tolerance_type}. Valid: {valid}")

    return tols[tolerance_type]


def list_available_formats() -> list[PrecisionFormat]:
    """
    List all precision formats available in current environment.

    BF16 is only available if ml_dtypes is installed.
    """
    available = [PrecisionFormat.FP64, PrecisionFormat.FP32, PrecisionFormat.FP16]

    if HAS_BF16:
        available.append(PrecisionFormat.BF16)

    return available


def parse_format(name: PrecisionFormat | str) -> PrecisionFormat:
    """Parse a string (or pass through an enum) into a PrecisionFormat."""
    if isinstance(name, PrecisionFormat):
        return name

    normalized = name.lower().replace("-", "_").replace(" ", "_")

    aliases = {
        "float64": PrecisionFormat.FP64,
        "double": PrecisionFormat.FP64,
        "float32": PrecisionFormat.FP32,
        "single": PrecisionFormat.FP32,
        "float16": PrecisionFormat.FP16,
        "half": PrecisionFormat.FP16,
        "bfloat16": PrecisionFormat.BF16,
    }
    if normalized in aliases:
        return aliases[normalized]

    for fmt in PrecisionFormat:
        if fmt.value == normalized:
            return fmt

    valid = [f.value for f in PrecisionFormat]
    raise ValueError(f"Unknown precision format: '{name}'. Valid: {valid}")
