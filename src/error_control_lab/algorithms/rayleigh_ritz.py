"""Rayleigh-Ritz eigenvalue estimates with a-posteriori certification.

Projects a Hermitian operator onto a trial subspace, diagonalises the small
projected matrix and certifies the resulting Ritz values with residual-based
error bounds:

- Bauer-Fike:   |λ̃ - λ| <= ||r||
- Kato-Temple:  |λ̃ - λ| <= ||r||² / δ

where δ is the distance from λ̃ to the rest of the spectrum. δ is never
known exactly; it is estimated from the computed Ritz values by a pluggable
gap estimator. An overestimated gap silently gives a bound that is too
small, so the estimator is an explicit choice of the caller.

Key Strategies:
- BauerFikeGapEstimator: neighbour distances shrunk by the neighbours'
  residuals (default, conservative)
- NeighborGapEstimator: plain distances to neighbouring Ritz values
- FixedGapEstimator: caller-supplied gap

The block eigensolvers that produce such subspaces live here too: plain and
projected subspace iteration for the dominant pairs, and LOPCG/LOBPCG for
the lowest ones.

References:
- Kato: "On the upper and lower bounds of eigenvalues", J. Phys. Soc.
  Japan 4 (1949)
- Parlett: "The Symmetric Eigenvalue Problem", Chapter 11
- Knyazev: "Toward the optimal preconditioned eigensolver: LOBPCG",
  SIAM J. Sci. Comput. 23 (2001)
"""

from __future__ import annotations

import logging
import math
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np

from error_control_lab.algorithms.matrices import (
    build_cosine_hamiltonian,
    cosine_hamiltonian_entry,
    plane_wave_count,
    plane_wave_cutoff,
)
from error_control_lab.algorithms.power_method import (
    PowerMethodResult,
    _step_norm,
    _validate_matrix,
    _validate_vector,
    apply_preconditioner,
)

if TYPE_CHECKING:
    from numpy.typing import NDArray

logger = logging.getLogger(__name__)

REFERENCE_ECUT: float = 200.0
"""Cutoff used as the converged reference for the plane-wave model."""


# =============================================================================
# RITZ VALUES AND VECTORS
# =============================================================================


@dataclass(frozen=True, slots=True)
class RitzEstimate:
    """Ritz pair of a Hermitian matrix with its residual norm."""

    value: float
    """Ritz value λ̃ (Rayleigh quotient of the Ritz vector)."""

    vector: NDArray
    """Normalized Ritz vector x̃ = V y."""

    residual_norm: float
    """||A x̃ - λ̃ x̃||."""


def assemble_matrix(
    matrix_entry: Callable[[int, int], float],
    basis_size: int,
) -> NDArray:
    """Assemble M[i, j] = matrix_entry(i, j) for a basis of given size.

    Raises:
        ValueError: If basis_size < 1 or the assembled matrix is not Hermitian.
    """
    if basis_size < 1:
        msg = f"basis_size must be positive, got {basis_size}"
        raise ValueError(msg)

    M = np.array(
        [[matrix_entry(i, j) for j in range(basis_size)] for i in range(basis_size)]
    )
    if not np.allclose(M, M.conj().T):
        msg = "Assembled matrix is not Hermitian"
        raise ValueError(msg)
    return M


def ritz_estimate(
    matrix_entry: Callable[[int, int], float],
    basis_size: int,
) -> NDArray[np.float64]:
    """Ritz values of an operator in a truncated basis, ascending.

    ``matrix_entry(i, j)`` returns ⟨χ_i, A χ_j⟩. For nested bases the k-th
    value decreases monotonically towards the k-th eigenvalue below the
    essential spectrum (Courant-Fisher).

    Example:
        >>> from error_control_lab.algorithms.matrices import (
        ...     cosine_hamiltonian_entry, plane_wave_count)
        >>> values = ritz_estimate(cosine_hamiltonian_entry(20), plane_wave_count(20))
        >>> values.size  # G = -6, ..., 6
        13
    """
    return np.linalg.eigvalsh(assemble_matrix(matrix_entry, basis_size))


def rayleigh_ritz(A: NDArray, V: NDArray) -> list[RitzEstimate]:
    """Rayleigh-Ritz procedure on the subspace spanned by the columns of V.

    Algorithm:
        1. Orthonormalize: V = QR
        2. Project: A_V = Qᴴ A Q
        3. Diagonalize A_V = Y diag(λ̃) Yᴴ
        4. Ritz vectors X = Q Y, residuals A X - X diag(λ̃)

    Args:
        A: Hermitian n×n matrix.
        V: n×m trial basis (m <= n, full column rank) or a single vector.

    Returns:
        m Ritz estimates in ascending order of value.

    Raises:
        ValueError: If A is not square or V does not have n rows.
    """
    A = np.asarray(A)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        msg = f"Expected a square matrix, got shape {A.shape}"
        raise ValueError(msg)
    V = np.asarray(V)
    if V.ndim == 1:
        V = V[:, np.newaxis]
    if V.ndim != 2 or V.shape[0] != A.shape[0]:
        msg = f"Trial basis of shape {V.shape} does not match matrix dimension {A.shape[0]}"
        raise ValueError(msg)

    Q, _ = np.linalg.qr(V)
    AQ = A @ Q
    values, Y = np.linalg.eigh(Q.conj().T @ AQ)

    X = Q @ Y
    residuals = AQ @ Y - X * values
    norms = np.linalg.norm(residuals, axis=0)

    return [
        RitzEstimate(value=float(values[k]), vector=X[:, k], residual_norm=float(norms[k]))
        for k in range(values.size)
    ]


# =============================================================================
# ERROR BOUNDS
# =============================================================================


def kato_temple_bound(value: float, residual_norm: float, gap: float) -> float:
    """Kato-Temple bound ||r||² / δ on |λ̃ - λ|.

    ``value`` is the Rayleigh quotient λ̃ the bound refers to; it does not
    enter the formula. ``gap`` must be a lower bound on the distance from
    λ̃ to the spectrum without λ. Nothing is checked: an overestimated gap
    returns a bound that is too small, a zero gap a division error or inf.
    """
    return residual_norm**2 / gap


def bauer_fike_bound(residual_norm: float) -> float:
    """Bauer-Fike bound ||r|| on the distance from λ̃ to the spectrum."""
    return residual_norm


# =============================================================================
# GAP ESTIMATION
# =============================================================================


def _neighbor_gaps(values: NDArray, margins: NDArray) -> NDArray:
    """min over neighbours j = i ± 1 of |λ̃ᵢ - λ̃ⱼ| - margins[j], inf if none."""
    n = values.size
    lower = np.full(n, np.inf)
    upper = np.full(n, np.inf)
    if n > 1:
        lower[1:] = np.abs(values[1:] - values[:-1]) - margins[:-1]
        upper[:-1] = np.abs(values[:-1] - values[1:]) - margins[1:]
    return np.minimum(lower, upper)


class GapEstimator(ABC):
    """Abstract base class for spectral gap estimation strategies.

    All estimator implementations must implement estimate(), which maps
    ascending Ritz values and their residual norms to one gap per value.
    """

    @abstractmethod
    def estimate(self, values: NDArray, residual_norms: NDArray) -> NDArray:
        """Estimate the gap δᵢ for every Ritz value.

        Args:
            values: Ritz values in ascending order.
            residual_norms: Residual norms, aligned with values.

        Returns:
            Array of gaps (inf where no information is available).
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


@dataclass
class NeighborGapEstimator(GapEstimator):
    """δᵢ = min(|λ̃ᵢ - λ̃ᵢ₋₁|, |λ̃ᵢ - λ̃ᵢ₊₁|).

    Only valid once the neighbouring Ritz values are accurate; early in a
    computation it can overestimate the gap.
    """

    def estimate(self, values: NDArray, residual_norms: NDArray) -> NDArray:
        values = np.asarray(values, dtype=np.float64)
        return _neighbor_gaps(values, np.zeros_like(values))


@dataclass
class BauerFikeGapEstimator(GapEstimator):
    """δᵢ = max(0, min(|λ̃ᵢ - λ̃ᵢ₋₁| - ||rᵢ₋₁||, |λ̃ᵢ - λ̃ᵢ₊₁| - ||rᵢ₊₁||)).

    Each neighbour is moved towards λ̃ᵢ by its Bauer-Fike radius, which gives
    a guaranteed lower bound on the gap as long as no eigenvalue lies
    outside the Ritz-value neighbourhoods.
    """

    def estimate(self, values: NDArray, residual_norms: NDArray) -> NDArray:
        values = np.asarray(values, dtype=np.float64)
        margins = np.asarray(residual_norms, dtype=np.float64)
        return np.maximum(0.0, _neighbor_gaps(values, margins))


@dataclass
class FixedGapEstimator(GapEstimator):
    """Same caller-supplied gap for every Ritz value."""

    gap: float

    def estimate(self, values: NDArray, residual_norms: NDArray) -> NDArray:
        return np.full(np.shape(values), float(self.gap))

    def __repr__(self) -> str:
        return f"FixedGapEstimator(gap={self.gap})"


def create_gap_estimator(name: str = "bauer_fike", **kwargs: Any) -> GapEstimator:
    """Factory function to create gap estimators.

    Args:
        name: Estimator type ('bauer_fike', 'neighbor', 'fixed').
        **kwargs: Estimator-specific parameters.

    Returns:
        GapEstimator instance.

    Example:
        >>> estimator = create_gap_estimator('neighbor')
        >>> estimator = create_gap_estimator('fixed', gap=0.5)
    """
    estimators: dict[str, type[GapEstimator]] = {
        "bauer_fike": BauerFikeGapEstimator,
        "neighbor": NeighborGapEstimator,
        "fixed": FixedGapEstimator,
    }

    key = name.lower().replace("-", "_")
    if key not in estimators:
        msg = f"Unknown gap estimator: {name}. Available: {list(estimators.keys())}"
        raise ValueError(msg)

    return estimators[key](**kwargs)


# =============================================================================
# CERTIFICATION
# =============================================================================


@dataclass(frozen=True, slots=True)
class CertifiedEigenvalue:
    """Ritz value with its a-posteriori error bounds."""

    value: float
    """Ritz value λ̃."""

    residual_norm: float
    """||A x̃ - λ̃ x̃||."""

    gap: float
    """Gap estimate δ used for the Kato-Temple bound."""

    kato_temple: float
    """||r||² / δ, or inf when the gap is not positive and finite."""

    bauer_fike: float
    """||r||."""

    @property
    def error_bound(self) -> float:
        """Sharpest available bound on |λ̃ - λ|."""
        return min(self.kato_temple, self.bauer_fike)

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary for JSON serialization."""
        return {
            "value": self.value,
            "residual_norm": self.residual_norm,
            "gap": self.gap,
            "kato_temple": self.kato_temple,
            "bauer_fike": self.bauer_fike,
            "error_bound": self.error_bound,
        }


def certify_ritz_pairs(
    estimates: Sequence[RitzEstimate],
    gap_estimator: GapEstimator | None = None,
) -> list[CertifiedEigenvalue]:
    """Attach Kato-Temple and Bauer-Fike bounds to Ritz estimates.

    Args:
        estimates: Ritz estimates (any order).
        gap_estimator: Gap policy (default: BauerFikeGapEstimator).

    Returns:
        Certified eigenvalues in ascending order of value. Where the gap is
        zero or unknown the Kato-Temple bound is inf and the error bound
        falls back to Bauer-Fike.
    """
    if gap_estimator is None:
        gap_estimator = BauerFikeGapEstimator()

    ordered = sorted(estimates, key=lambda e: e.value)
    values = np.array([e.value for e in ordered], dtype=np.float64)
    residual_norms = np.array([e.residual_norm for e in ordered], dtype=np.float64)
    gaps = gap_estimator.estimate(values, residual_norms)

    certified = []
    for estimate, gap in zip(ordered, gaps, strict=True):
        gap = float(gap)
        if gap > 0 and math.isfinite(gap):
            kato_temple = kato_temple_bound(estimate.value, estimate.residual_norm, gap)
        else:
            kato_temple = math.inf
        certified.append(
            CertifiedEigenvalue(
                value=estimate.value,
                residual_norm=estimate.residual_norm,
                gap=gap,
                kato_temple=kato_temple,
                bauer_fike=bauer_fike_bound(estimate.residual_norm),
            )
        )
    return certified


# =============================================================================
# PLANE-WAVE MODEL
# =============================================================================


def plane_wave_ritz_values(ecut: float) -> NDArray[np.float64]:
    """Ritz values of -½Δ + cos(x) for the plane-wave basis at cutoff Ecut."""
    return ritz_estimate(cosine_hamiltonian_entry(ecut), plane_wave_count(ecut))


def plane_wave_ritz_pairs(
    ecut: float,
    *,
    reference_ecut: float = REFERENCE_ECUT,
) -> list[RitzEstimate]:
    """Ritz pairs at cutoff Ecut with residuals measured at reference_ecut.

    The small basis is embedded as coordinate vectors in the reference
    basis, so the residuals include the coupling to the discarded waves.

    Raises:
        ValueError: If ecut exceeds reference_ecut.
    """
    gmax = plane_wave_cutoff(ecut)
    gmax_ref = plane_wave_cutoff(reference_ecut)
    if gmax > gmax_ref:
        msg = f"Ecut {ecut} exceeds reference cutoff {reference_ecut}"
        raise ValueError(msg)

    H_ref = build_cosine_hamiltonian(reference_ecut)
    n = 2 * gmax + 1
    offset = gmax_ref - gmax
    V = np.zeros((H_ref.shape[0], n))
    V[offset : offset + n, :] = np.eye(n)
    return rayleigh_ritz(H_ref, V)


def plane_wave_convergence(
    ecuts: Sequence[float],
    n_eigenvalues: int = 5,
    *,
    reference_ecut: float = REFERENCE_ECUT,
) -> dict[str, Any]:
    """Lowest Ritz values across cutoffs, with the reference spectrum.

    Returns:
        Dictionary with 'ecuts', 'basis_sizes', 'ritz_values' (one list per
        cutoff) and 'reference' (lowest values at reference_ecut).
    """
    ritz_values = []
    for ecut in ecuts:
        values = plane_wave_ritz_values(ecut)
        ritz_values.append(values[:n_eigenvalues].tolist())
        logger.debug("Ecut=%g: %s", ecut, values[:n_eigenvalues])

    reference = plane_wave_ritz_values(reference_ecut)[:n_eigenvalues]
    return {
        "ecuts": [float(e) for e in ecuts],
        "basis_sizes": [plane_wave_count(e) for e in ecuts],
        "ritz_values": ritz_values,
        "reference_ecut": reference_ecut,
        "reference": reference.tolist(),
    }


# =============================================================================
# SUBSPACE ITERATIONS
# =============================================================================


OrthoFunction = Callable[["NDArray"], "NDArray"]
"""Maps an n×k block to an orthonormal basis of its column span."""


def ortho_qr(X: NDArray) -> NDArray:
    """Orthonormalize the columns of X by reduced QR (keeps Q)."""
    Q, _ = np.linalg.qr(X)
    return Q


def _initial_block(
    A: NDArray,
    V0: NDArray | None,
    n_vectors: int,
    seed: int | None,
) -> tuple[NDArray, NDArray]:
    A = _validate_matrix(A)
    n = A.shape[0]

    if V0 is None:
        if n_vectors < 1:
            msg = f"n_vectors must be positive, got {n_vectors}"
            raise ValueError(msg)
        V0 = np.random.default_rng(seed).standard_normal((n, n_vectors))
    V = np.asarray(V0)
    if V.ndim != 2 or V.shape[0] != n:
        msg = f"Initial block of shape {V.shape} does not match matrix dimension {n}"
        raise ValueError(msg)
    if not 1 <= V.shape[1] <= n:
        msg = f"Block size must be between 1 and {n}, got {V.shape[1]}"
        raise ValueError(msg)
    return A, V


@dataclass(frozen=True)
class SubspaceIterationResult:
    """Outcome of a block eigensolver run."""

    eigenvalues: NDArray[np.float64]
    """Final eigenvalue estimates, one per block column."""

    eigenvectors: NDArray
    """Final eigenvector estimates as columns."""

    converged: bool
    """Whether all residual norms dropped below tol."""

    iterations: int
    """Number of iterations performed."""

    eigenvalue_history: tuple[NDArray[np.float64], ...]
    """Eigenvalue estimates per iteration."""

    residual_history: tuple[NDArray[np.float64], ...]
    """Residual norms per iteration."""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "eigenvalues": self.eigenvalues.tolist(),
            "converged": self.converged,
            "iterations": self.iterations,
            "eigenvalue_history": [v.tolist() for v in self.eigenvalue_history],
            "residual_history": [r.tolist() for r in self.residual_history],
        }


def _log_block_progress(iteration: int, values: NDArray, norms: NDArray) -> None:
    logger.debug("%3d %10.6g %10.4g", iteration + 1, values[-1], norms.max())


def _warn_not_converged(name: str, residual_history: list[NDArray[np.float64]]) -> None:
    logger.warning(
        "%s not converged after %d iterations (max residual %.3e)",
        name,
        len(residual_history),
        residual_history[-1].max() if residual_history else math.nan,
    )


def subspace_iteration(
    A: NDArray,
    V0: NDArray | None = None,
    *,
    n_vectors: int = 2,
    ortho: OrthoFunction = ortho_qr,
    tol: float = 1e-6,
    max_iterations: int = 100,
    seed: int | None = None,
) -> SubspaceIterationResult:
    """Block power method, orthonormalized in every step.

    Each column's Rayleigh quotient ⟨x_k, A x_k⟩ is its eigenvalue
    estimate. With QR the k-th column converges to the eigenvector of the
    k-th largest-magnitude eigenvalue, at rate |λ_{k+1} / λ_k|, so estimates
    are ordered as the columns, not sorted.

    Args:
        A: Hermitian n×n matrix.
        V0: Initial n×m block (random, seeded by ``seed``, if None).
        n_vectors: Block size when V0 is None.
        ortho: Orthonormalization applied before every product with A.
        tol: Threshold on the largest residual norm.
        max_iterations: Iteration budget.
        seed: Seed for the random initial block.

    Raises:
        ValueError: If A is not square or the block is empty or mismatched.
    """
    A, X = _initial_block(A, V0, n_vectors, seed)

    eigenvalue_history: list[NDArray[np.float64]] = []
    residual_history: list[NDArray[np.float64]] = []
    values = np.full(X.shape[1], np.nan)
    Q = X
    converged = False

    for iteration in range(max_iterations):
        Q = ortho(X)
        AX = A @ Q
        values = np.einsum("ij,ij->j", Q.conj(), AX).real

        norms = np.linalg.norm(AX - Q * values, axis=0)
        eigenvalue_history.append(values)
        residual_history.append(norms)
        _log_block_progress(iteration, values, norms)

        if norms.max() < tol:
            converged = True
            break

        X = AX

    if not converged:
        _warn_not_converged("Subspace iteration", residual_history)

    return SubspaceIterationResult(
        eigenvalues=values,
        eigenvectors=Q,
        converged=converged,
        iterations=len(eigenvalue_history),
        eigenvalue_history=tuple(eigenvalue_history),
        residual_history=tuple(residual_history),
    )


def projected_subspace_iteration(
    A: NDArray,
    V0: NDArray | None = None,
    *,
    n_vectors: int = 2,
    ortho: OrthoFunction = ortho_qr,
    tol: float = 1e-6,
    max_iterations: int = 100,
    seed: int | None = None,
) -> SubspaceIterationResult:
    """Subspace iteration with a Rayleigh-Ritz step in every iteration.

    Converges to the n_vectors eigenpairs of largest magnitude of a
    Hermitian A. Each Ritz pair converges at rate |λ_{k+1} / λ_k|, so a
    small gap below the block makes the iteration slow. Ritz values are
    returned ascending.

    Args:
        A: Hermitian n×n matrix.
        V0: Initial n×m block (random, seeded by ``seed``, if None).
        n_vectors: Block size when V0 is None.
        ortho: Orthonormalization applied before every Rayleigh-Ritz step.
        tol: Threshold on the largest residual norm.
        max_iterations: Iteration budget.
        seed: Seed for the random initial block.

    Raises:
        ValueError: If A is not square or the block is empty or mismatched.
    """
    A, V = _initial_block(A, V0, n_vectors, seed)

    eigenvalue_history: list[NDArray[np.float64]] = []
    residual_history: list[NDArray[np.float64]] = []
    values = np.full(V.shape[1], np.nan)
    X = V
    converged = False

    for iteration in range(max_iterations):
        V = ortho(V)
        AV = A @ V
        values, Y = np.linalg.eigh(V.conj().T @ AV)
        X = V @ Y

        norms = np.linalg.norm(AV @ Y - X * values, axis=0)
        eigenvalue_history.append(values)
        residual_history.append(norms)
        _log_block_progress(iteration, values, norms)

        if norms.max() < tol:
            converged = True
            break

        V = AV

    if not converged:
        _warn_not_converged("Subspace iteration", residual_history)

    return SubspaceIterationResult(
        eigenvalues=values,
        eigenvectors=X,
        converged=converged,
        iterations=len(eigenvalue_history),
        eigenvalue_history=tuple(eigenvalue_history),
        residual_history=tuple(residual_history),
    )


# =============================================================================
# LOCALLY OPTIMAL PRECONDITIONED SOLVERS
# =============================================================================


def lobpcg(
    A: NDArray,
    X0: NDArray | None = None,
    *,
    n_vectors: int = 2,
    Pinv: NDArray | None = None,
    ortho: OrthoFunction = ortho_qr,
    tol: float = 1e-6,
    max_iterations: int = 100,
    seed: int | None = None,
) -> SubspaceIterationResult:
    """Locally optimal block preconditioned conjugate gradient (LOBPCG).

    Each step runs Rayleigh-Ritz on span{X, P, P⁻¹R}, with X the current
    block, P = X_prev - X the last update and R the residuals, and keeps
    the m lowest Ritz pairs. Converges to the m lowest eigenpairs of a
    Hermitian A.

    This is the textbook form. Once the columns of P and X become nearly
    dependent it is not numerically robust; production codes add
    safeguards on the basis.

    Args:
        A: Hermitian n×n matrix.
        X0: Initial n×m block (random, seeded by ``seed``, if None).
        n_vectors: Block size when X0 is None.
        Pinv: Preconditioner P⁻¹ (None, diagonal as 1-D array, or matrix).
        ortho: Orthonormalization of the search basis.
        tol: Threshold on the largest residual norm.
        max_iterations: Iteration budget.
        seed: Seed for the random initial block.

    Raises:
        ValueError: If A is not square or the block is empty or mismatched.
    """
    A, X = _initial_block(A, X0, n_vectors, seed)
    m = X.shape[1]

    eigenvalue_history: list[NDArray[np.float64]] = []
    residual_history: list[NDArray[np.float64]] = []
    values = np.full(m, np.nan)
    P: NDArray | None = None
    R: NDArray | None = None
    converged = False

    for iteration in range(max_iterations):
        Z = X if P is None else np.hstack([X, P, R])
        Z = ortho(Z)

        AZ = A @ Z
        all_values, Y = np.linalg.eigh(Z.conj().T @ AZ)
        values, Y = all_values[:m], Y[:, :m]
        new_X = Z @ Y

        R = AZ @ Y - new_X * values
        norms = np.linalg.norm(R, axis=0)
        eigenvalue_history.append(values)
        residual_history.append(norms)
        _log_block_progress(iteration, values, norms)

        if norms.max() < tol:
            X = new_X
            converged = True
            break

        R = apply_preconditioner(Pinv, R)
        P = X - new_X
        X = new_X

    if not converged:
        _warn_not_converged("LOBPCG", residual_history)

    return SubspaceIterationResult(
        eigenvalues=values,
        eigenvectors=X,
        converged=converged,
        iterations=len(eigenvalue_history),
        eigenvalue_history=tuple(eigenvalue_history),
        residual_history=tuple(residual_history),
    )


def lopcg(
    A: NDArray,
    u0: NDArray | None = None,
    *,
    Pinv: NDArray | None = None,
    ortho: OrthoFunction = ortho_qr,
    tol: float = 1e-6,
    max_iterations: int = 100,
    seed: int | None = None,
) -> PowerMethodResult:
    """Locally optimal preconditioned conjugate gradient for the lowest eigenpair.

    Rayleigh-Ritz on span{x, p, P⁻¹r} minimizes the Rayleigh quotient over
    the preconditioned gradient direction and the previous update p at
    once, which is what accelerates it over preconditioned gradient
    descent. Single-vector form of :func:`lobpcg`.

    Args:
        A: Hermitian n×n matrix.
        u0: Starting vector (random, seeded by ``seed``, if None).
        Pinv: Preconditioner P⁻¹ (None, diagonal as 1-D array, or matrix).
        ortho: Orthonormalization of the search basis.
        tol: Threshold on the residual norm.
        max_iterations: Iteration budget.
        seed: Seed for the random starting vector.

    Raises:
        ValueError: If A is not square or u0 does not match or is zero.
    """
    A = _validate_matrix(A)
    n = A.shape[0]
    if u0 is None:
        u0 = np.random.default_rng(seed).standard_normal(n)
    x = _validate_vector(u0, n)
    x = x / np.linalg.norm(x)

    history: list[dict[str, Any]] = []
    converged = False
    eigenvalue = float("nan")
    residual_norm = float("nan")
    step_norm = float("nan")
    p: NDArray | None = None
    r: NDArray | None = None
    start_time = time.perf_counter()

    for iteration in range(max_iterations):
        Z = x[:, None] if p is None else np.column_stack([x, p, r])
        Z = ortho(Z)

        AZ = A @ Z
        values, Y = np.linalg.eigh(Z.conj().T @ AZ)
        eigenvalue = float(values[0])
        y = Y[:, 0]
        new_x = Z @ y

        r = AZ @ y - eigenvalue * new_x
        residual_norm = float(np.linalg.norm(r))
        if p is not None:
            step_norm = _step_norm(new_x, x)

        history.append(
            {
                "iteration": iteration,
                "eigenvalue": eigenvalue,
                "residual_norm": residual_norm,
                "step_norm": step_norm,
            }
        )
        logger.debug("%3d %14.10g %10.4g", iteration + 1, eigenvalue, residual_norm)

        if residual_norm < tol:
            x = new_x
            converged = True
            break

        r = apply_preconditioner(Pinv, r)
        p = x - new_x
        x = new_x

    if not converged:
        logger.warning(
            "LOPCG not converged after %d iterations (residual %.3e, tol %.1e)",
            len(history),
            residual_norm,
            tol,
        )

    return PowerMethodResult(
        eigenvalue=eigenvalue,
        eigenvector=x,
        converged=converged,
        iterations=len(history),
        step_norm=step_norm,
        residual_norm=residual_norm,
        total_time=time.perf_counter() - start_time,
        history=tuple(history),
    )


__all__ = [
    "REFERENCE_ECUT",
    "BauerFikeGapEstimator",
    "CertifiedEigenvalue",
    "FixedGapEstimator",
    "GapEstimator",
    "NeighborGapEstimator",
    "OrthoFunction",
    "RitzEstimate",
    "SubspaceIterationResult",
    "assemble_matrix",
    "bauer_fike_bound",
    "certify_ritz_pairs",
    "create_gap_estimator",
    "kato_temple_bound",
    "lobpcg",
    "lopcg",
    "ortho_qr",
    "plane_wave_convergence",
    "plane_wave_ritz_pairs",
    "plane_wave_ritz_values",
    "projected_subspace_iteration",
    "rayleigh_ritz",
    "ritz_estimate",
    "subspace_iteration",
]
