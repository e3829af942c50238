"""Test operators for eigenvalue experiments.

This module provides the matrices the error-control experiments run on:

- Symmetric matrices with controlled eigenvalue distributions
  (linear, geometric, small dominant gap), reproducible via seed
- The 3×3 matrix whose [1, 1, 1] eigenvector belongs to eigenvalue 0,
  used to show rounding errors helping the power method
- The 5×5 near-diagonal matrix used to compare a-posteriori bounds
- Plane-wave discretisations of the periodic Hamiltonian -½Δ + cos(x)

References:
- Golub & Van Loan: "Matrix Computations" (4th ed.), Section 7.3
- Cancès, Le Bris & Maday: "Méthodes mathématiques en chimie quantique"
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from numpy.typing import NDArray


DEFAULT_SEED: int = 42
"""Default random seed for reproducible experiments."""

ZERO_EIGENVALUE_MATRIX: NDArray[np.float64] = np.array(
    [
        [0.4, -0.6, 0.2],
        [-0.3, 0.7, -0.4],
        [-0.1, -0.4, 0.5],
    ]
)
"""Rows sum to zero, so [1, 1, 1] is an exact eigenvector for eigenvalue 0.

In exact arithmetic the power method started from [1, 1, 1] stops after one
step at eigenvalue 0. The decimal entries are not representable in binary,
so in floating point A·[1, 1, 1] is tiny noise with a component along the
dominant eigenvector (λ = (1.6 + √0.52)/2 ≈ 1.1606) and the iteration
converges there instead.
"""


def _random_orthogonal(n: int, rng: np.random.Generator) -> NDArray[np.float64]:
    Q, _ = np.linalg.qr(rng.standard_normal((n, n)))
    return Q


def _check_dimension(n: int, minimum: int = 1) -> None:
    if n < minimum:
        msg = f"Matrix dimension must be at least {minimum}, got {n}"
        raise ValueError(msg)


def create_linear_spectrum_matrix(
    n: int,
    condition_number: float,
    *,
    seed: int | None = None,
) -> NDArray[np.float64]:
    """Create SPD matrix with linearly spaced eigenvalues.

    Eigenvalue distribution: [1.0, ..., κ] (linearly spaced)

    Mathematical Construction:
        λ_i = 1 + (κ-1) * (i-1)/(n-1)  for i = 1, ..., n
        A = Q @ diag(λ) @ Q^T  where Q is random orthogonal

    Args:
        n: Matrix dimension.
        condition_number: Desired condition number κ = λ_max / λ_min.
        seed: Random seed for reproducibility.

    Returns:
        n×n symmetric positive definite matrix.
    """
    _check_dimension(n)
    rng = np.random.default_rng(seed)
    eigenvalues = np.linspace(1.0, condition_number, n)
    Q = _random_orthogonal(n, rng)
    return Q @ np.diag(eigenvalues) @ Q.T


def create_geometric_spectrum_matrix(
    n: int,
    condition_number: float,
    *,
    seed: int | None = None,
) -> NDArray[np.float64]:
    """Create SPD matrix with geometrically spaced eigenvalues.

    Eigenvalue distribution: λ_i = κ^((i-1)/(n-1)), i = 1, ..., n

    Args:
        n: Matrix dimension.
        condition_number: Desired condition number κ = λ_max / λ_min.
        seed: Random seed for reproducibility.

    Returns:
        n×n symmetric positive definite matrix.
    """
    _check_dimension(n)
    rng = np.random.default_rng(seed)
    eigenvalues = np.geomspace(1.0, condition_number, n)
    Q = _random_orthogonal(n, rng)
    return Q @ np.diag(eigenvalues) @ Q.T


def create_slow_convergence_matrix(
    n: int,
    condition_number: float,
    *,
    eigenvalue_gap: float = 1.1,
    seed: int | None = None,
) -> NDArray[np.float64]:
    """Create SPD matrix with small gap between dominant eigenvalues.

    Eigenvalue distribution:
        λ₁ = κ (largest)
        λ₂ = κ / eigenvalue_gap
        λ₃...λₙ = geometric decay from λ₂ to 1.0

    The power method contracts like (λ₂/λ₁)^k = (1/eigenvalue_gap)^k.

    Args:
        n: Matrix dimension.
        condition_number: Desired condition number κ = λ_max / λ_min.
        eigenvalue_gap: Ratio λ₁/λ₂ (default 1.1 for 10% gap).
        seed: Random seed for reproducibility.

    Returns:
        n×n symmetric positive definite matrix.

    Raises:
        ValueError: If n < 2, since the gap needs two eigenvalues.
    """
    _check_dimension(n, 2)
    rng = np.random.default_rng(seed)

    eigenvalues = np.zeros(n)
    eigenvalues[0] = condition_number
    eigenvalues[1] = condition_number / eigenvalue_gap
    if n > 2:
        eigenvalues[1:] = np.geomspace(eigenvalues[1], 1.0, n - 1)

    Q = _random_orthogonal(n, rng)
    return Q @ np.diag(eigenvalues) @ Q.T


@dataclass(frozen=True, slots=True)
class ExperimentSetup:
    """Container for an experiment matrix with reference data."""

    matrix: NDArray[np.float64]
    """The n×n symmetric matrix."""

    initial_vector: NDArray[np.float64]
    """Normalized random starting vector."""

    eigenvalues: NDArray[np.float64]
    """Exact eigenvalues (ascending, from a dense eigensolver)."""

    seed: int
    """Random seed used for generation."""

    @property
    def true_eigenvalue(self) -> float:
        """Largest eigenvalue (ground truth for the power method)."""
        return float(self.eigenvalues[-1])


def create_experiment(
    n: int,
    condition_number: float,
    *,
    seed: int = DEFAULT_SEED,
    convergence_type: str = "slow",
) -> ExperimentSetup:
    """Create matrix, starting vector and reference spectrum.

    Args:
        n: Matrix dimension.
        condition_number: Desired condition number.
        seed: Random seed (default: 42 for reproducibility).
        convergence_type: "slow" (10% gap), "linear", or "geometric".

    Returns:
        ExperimentSetup with matrix, initial vector and eigenvalues.
    """
    builders: dict[str, Callable[..., NDArray[np.float64]]] = {
        "slow": create_slow_convergence_matrix,
        "linear": create_linear_spectrum_matrix,
        "geometric": create_geometric_spectrum_matrix,
    }
    if convergence_type not in builders:
        msg = f"Unknown convergence_type: {convergence_type}. Valid: {list(builders)}"
        raise ValueError(msg)

    matrix = builders[convergence_type](n, condition_number, seed=seed)

    # Separate stream so the vector does not depend on how Q was drawn
    rng = np.random.default_rng([seed, 1])
    initial_vector = rng.standard_normal(n)
    initial_vector /= np.linalg.norm(initial_vector)

    return ExperimentSetup(
        matrix=matrix,
        initial_vector=initial_vector,
        eigenvalues=np.linalg.eigvalsh(matrix),
        seed=seed,
    )


def near_diagonal_matrix(
    m12: float = 0.001,
    m13: float = 0.1,
    m14: float = 0.1,
    m23: float = -0.05,
) -> NDArray[np.float64]:
    """Symmetric 5×5 matrix with diagonal 1..5 and small couplings.

    Taking the diagonal as eigenvalue guesses and unit vectors as
    eigenvector guesses gives residuals equal to the off-diagonal columns,
    a convenient setting to compare Bauer-Fike and Kato-Temple bounds.
    """
    return np.array(
        [
            [1.0, m12, m13, m14, 0.0],
            [m12, 2.0, m23, 0.0, -0.10],
            [m13, m23, 3.0, 0.1, 0.05],
            [m14, 0.0, 0.1, 4.0, 0.0],
            [0.0, -0.1, 0.05, 0.0, 5.0],
        ]
    )


# =============================================================================
# PLANE-WAVE DISCRETISATION OF -½Δ + cos(x) ON (0, 2π)
# =============================================================================
# Basis e_G(x) = exp(iGx)/√(2π) for integers |G| <= Gmax, ½G² <= Ecut.
# -½Δ is diagonal with entries ½G²; cos(x) = ½(e^{ix} + e^{-ix}) couples
# G and G±1 with weight ½. Increasing Ecut nests the bases.


def plane_wave_cutoff(ecut: float) -> int:
    """Largest wave number G with ½G² <= Ecut."""
    if ecut < 0:
        msg = f"Ecut must be non-negative, got {ecut}"
        raise ValueError(msg)
    # floor(sqrt(x)) == isqrt(floor(x)), without a rounded square root
    return math.isqrt(math.floor(2 * ecut))


def plane_wave_count(ecut: float) -> int:
    """Number of plane waves e_G with -Gmax <= G <= Gmax."""
    return 2 * plane_wave_cutoff(ecut) + 1


def cosine_hamiltonian_entry(ecut: float) -> Callable[[int, int], float]:
    """Matrix element ⟨e_{G_i}, (-½Δ + cos) e_{G_j}⟩ for the Ecut basis.

    Index i corresponds to G_i = i - Gmax, i = 0, ..., 2 Gmax.
    """
    gmax = plane_wave_cutoff(ecut)

    def entry(i: int, j: int) -> float:
        if i == j:
            g = i - gmax
            return 0.5 * g * g
        if abs(i - j) == 1:
            return 0.5
        return 0.0

    return entry


def build_cosine_hamiltonian(ecut: float) -> NDArray[np.float64]:
    """Dense tridiagonal plane-wave matrix of -½Δ + cos(x)."""
    gmax = plane_wave_cutoff(ecut)
    g = np.arange(-gmax, gmax + 1, dtype=np.float64)
    off = np.full(2 * gmax, 0.5)
    return np.diag(0.5 * g**2) + np.diag(off, 1) + np.diag(off, -1)


__all__ = [
    "DEFAULT_SEED",
    "ExperimentSetup",
    "ZERO_EIGENVALUE_MATRIX",
    "build_cosine_hamiltonian",
    "cosine_hamiltonian_entry",
    "create_experiment",
    "create_geometric_spectrum_matrix",
    "create_linear_spectrum_matrix",
    "create_slow_convergence_matrix",
    "near_diagonal_matrix",
    "plane_wave_count",
    "plane_wave_cutoff",
]
