"""Power iteration with convergence monitoring.

Implements the power method for the dominant eigenpair of a square matrix,
plus the single-vector alternatives: inverse iteration with a fixed shift,
Rayleigh quotient iteration and preconditioned gradient descent on the
Rayleigh quotient.

Convergence of the power method is measured on the iterates themselves:

    Δ = min(||u - u_prev||, ||-u - u_prev||)

which is insensitive to the sign flip between iterations that a negative
dominant eigenvalue causes (eigenvectors are only defined up to sign).
Running out of iterations is not an error: the best estimate is returned
together with ``converged=False`` and a logged warning.

Key Optimizations:
- Ping-pong buffer pattern eliminates allocations in hot loop
- Pre-computed FP64 reference matrix for accurate residual computation

References:
- Golub & Van Loan: "Matrix Computations" (4th ed.), §7.3 and §8.2.3
- Parlett: "The Symmetric Eigenvalue Problem", Chapter 4
"""

from __future__ import annotations

import logging
import time
import warnings
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np
from scipy.linalg import LinAlgWarning, lu_factor, lu_solve

from error_control_lab.data.precision_types import (
    PrecisionFormat,
    get_dtype,
    get_tolerance,
    parse_format,
)

if TYPE_CHECKING:
    from numpy.typing import DTypeLike, NDArray

logger = logging.getLogger(__name__)

_COMPLEX_DTYPES: dict[PrecisionFormat, Any] = {
    PrecisionFormat.FP64: np.complex128,
    PrecisionFormat.FP32: np.complex64,
}


def _validate_matrix(A: NDArray) -> NDArray:
    A = np.asarray(A)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        msg = f"Expected a square matrix, got shape {A.shape}"
        raise ValueError(msg)
    return A


def _validate_vector(x: NDArray, n: int) -> NDArray:
    x = np.asarray(x)
    if x.shape != (n,):
        msg = f"Starting vector of shape {x.shape} does not match matrix dimension {n}"
        raise ValueError(msg)
    if not np.any(x):
        msg = "Starting vector must be non-zero"
        raise ValueError(msg)
    return x


def _step_norm(new: NDArray, old: NDArray) -> float:
    return float(min(np.linalg.norm(new - old), np.linalg.norm(-new - old)))


@dataclass(frozen=True, slots=True)
class IterationResult:
    """Result of a single power iteration."""

    eigenvalue: float
    """Rayleigh quotient of the new iterate."""

    step_norm: float
    """min(||u - u_prev||, ||-u - u_prev||), NaN on breakdown."""

    algorithm_time: float
    """Time for iteration (seconds)."""


class PowerIteration:
    """Power method engine with ping-pong buffer optimization.

    Alternates between two pre-allocated vectors in an Nx2 matrix
    (column-major for BLAS efficiency); the engine exclusively owns and
    mutates them for its lifetime.

    Example:
        >>> from error_control_lab.algorithms.matrices import ZERO_EIGENVALUE_MATRIX
        >>> engine = PowerIteration(ZERO_EIGENVALUE_MATRIX, initial_vector=np.ones(3))
        >>> for _ in range(100):
        ...     if engine.iterate().step_norm < 1e-8:
        ...         break
        >>> round(engine.rayleigh_quotient(), 6)
        1.160555
    """

    __slots__ = (
        "_A",
        "_A_fp64",
        "_dtype",
        "_precision_format",
        "_n",
        "_vectors",
        "_current_idx",
        "_iterations",
        "_step_norm",
    )

    def __init__(
        self,
        A: NDArray,
        precision: PrecisionFormat | str = PrecisionFormat.FP64,
        *,
        initial_vector: NDArray | None = None,
        seed: int | None = None,
    ) -> None:
        """Initialize power iteration engine.

        Args:
            A: Square input matrix (real or complex).
            precision: Working precision format.
            initial_vector: Starting vector (random if None).
            seed: Seed for the random starting vector.

        Raises:
            ValueError: If A is not square, the starting vector has the
                wrong dimension or is zero, or a complex matrix is paired
                with a format without a complex counterpart.
        """
        A = _validate_matrix(A)
        self._precision_format = parse_format(precision)

        if np.iscomplexobj(A):
            if self._precision_format not in _COMPLEX_DTYPES:
                msg = f"Complex matrices need fp32 or fp64, got {self._precision_format.value}"
                raise ValueError(msg)
            self._dtype: DTypeLike = _COMPLEX_DTYPES[self._precision_format]
            self._A_fp64 = A.astype(np.complex128)
        else:
            self._dtype = get_dtype(self._precision_format)
            self._A_fp64 = A.astype(np.float64)

        # Convert to working precision once
        self._A = A if A.dtype == self._dtype else self._A_fp64.astype(self._dtype)

        self._n = A.shape[0]
        self._vectors = np.zeros((self._n, 2), dtype=self._dtype, order="F")
        self._current_idx = 0
        self._iterations = 0
        self._step_norm = float("nan")

        if initial_vector is None:
            rng = np.random.default_rng(seed)
            initial_vector = rng.standard_normal(self._n)
        self.set_initial_vector(initial_vector)

    def iterate(self) -> IterationResult:
        """Execute a single power iteration.

        Algorithm:
            1. Matrix-vector multiply: y = A @ u
            2. Normalize: u_new = y / ||y||
            3. Step: Δ = min(||u_new - u||, ||-u_new - u||)
            4. Rayleigh quotient: λ = <u_new, A u_new>

        Returns:
            IterationResult with eigenvalue, step norm and timing. On
            breakdown (A u == 0) both values are NaN and the state is kept.
        """
        start = time.perf_counter()

        next_idx = 1 - self._current_idx
        current_vec = self._vectors[:, self._current_idx]
        next_vec = self._vectors[:, next_idx]

        next_vec[:] = self._A @ current_vec

        norm = np.linalg.norm(next_vec)
        if norm == 0 or not np.isfinite(norm):
            return IterationResult(
                eigenvalue=float("nan"),
                step_norm=float("nan"),
                algorithm_time=time.perf_counter() - start,
            )

        next_vec[:] /= norm
        step_norm = _step_norm(next_vec, current_vec)

        # Rayleigh quotient (reuse current_vec as temp buffer)
        current_vec[:] = self._A @ next_vec
        eigenvalue = np.vdot(next_vec, current_vec).item()

        self._current_idx = next_idx
        self._iterations += 1
        self._step_norm = step_norm

        return IterationResult(
            eigenvalue=eigenvalue,
            step_norm=step_norm,
            algorithm_time=time.perf_counter() - start,
        )

    def rayleigh_quotient(self) -> float:
        """Return <u, A u> for the current (normalized) iterate, in FP64."""
        x = self._current_fp64()
        return np.vdot(x, self._A_fp64 @ x).item()

    def residual_norm(self, eigenvalue: float | None = None) -> float:
        """Return ||A u - λ u|| in FP64 (λ defaults to the Rayleigh quotient)."""
        if eigenvalue is None:
            eigenvalue = self.rayleigh_quotient()
        x = self._current_fp64()
        return float(np.linalg.norm(self._A_fp64 @ x - eigenvalue * x))

    def _current_fp64(self) -> NDArray:
        return self._vectors[:, self._current_idx].astype(self._A_fp64.dtype)

    @property
    def current_vector(self) -> NDArray:
        """Return view of current eigenvector (no copy)."""
        return self._vectors[:, self._current_idx]

    @property
    def iterations(self) -> int:
        """Number of successful iterations performed."""
        return self._iterations

    @property
    def step_norm(self) -> float:
        """Step norm of the last successful iteration (NaN before the first)."""
        return self._step_norm

    @property
    def vector_norm(self) -> float:
        """Get norm of current eigenvector (should be ~1.0)."""
        return float(np.linalg.norm(self._vectors[:, self._current_idx]))

    def set_initial_vector(self, x: NDArray) -> None:
        """Set and normalize the starting vector, resetting the counters.

        Raises:
            ValueError: If x has the wrong dimension or is zero.
        """
        x = _validate_vector(x, self._n)
        self._current_idx = 0
        self._iterations = 0
        self._step_norm = float("nan")
        self._vectors[:, 0] = x.astype(self._dtype)
        self._vectors[:, 0] /= np.linalg.norm(self._vectors[:, 0])


@dataclass(frozen=True)
class PowerMethodResult:
    """Outcome of a single-vector eigensolver run."""

    eigenvalue: float
    """Rayleigh quotient <u, A u> of the final iterate."""

    eigenvector: NDArray
    """Final normalized iterate."""

    converged: bool
    """Whether the stopping criterion was met within the iteration budget."""

    iterations: int
    """Number of iterations performed."""

    step_norm: float
    """Last min(||u - u_prev||, ||-u - u_prev||)."""

    residual_norm: float
    """||A u - λ u|| of the returned pair."""

    total_time: float
    """Total execution time (seconds)."""

    history: tuple[dict[str, Any], ...]
    """Per-iteration metrics."""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization (real problems)."""
        return {
            "eigenvalue": float(np.real(self.eigenvalue)),
            "converged": self.converged,
            "iterations": self.iterations,
            "step_norm": self.step_norm,
            "residual_norm": self.residual_norm,
            "total_time_seconds": self.total_time,
            "trace": list(self.history),
        }


def run_power_method(
    A: NDArray,
    u0: NDArray | None = None,
    *,
    tol: float | None = None,
    max_iterations: int | None = None,
    precision: PrecisionFormat | str = PrecisionFormat.FP64,
    seed: int | None = None,
) -> PowerMethodResult:
    """Run the power method until the iterates stop moving.

    Args:
        A: Square input matrix.
        u0: Starting vector (random, seeded by ``seed``, if None).
        tol: Threshold on the step norm (default: format's ``step_tol``).
        max_iterations: Iteration budget (default: format's ``max_iterations``).
        precision: Working precision format.
        seed: Seed for the random starting vector.

    Returns:
        PowerMethodResult; ``converged`` is False when the budget ran out
        or A u vanished, in which case a warning is logged.

    Example:
        >>> from error_control_lab.algorithms.matrices import ZERO_EIGENVALUE_MATRIX
        >>> result = run_power_method(ZERO_EIGENVALUE_MATRIX, np.ones(3), tol=1e-8)
        >>> result.converged, round(result.eigenvalue, 6)
        (True, 1.160555)
    """
    if tol is None:
        tol = float(get_tolerance(precision, "step_tol"))
    if max_iterations is None:
        max_iterations = int(get_tolerance(precision, "max_iterations"))

    engine = PowerIteration(A, precision, initial_vector=u0, seed=seed)

    history: list[dict[str, Any]] = []
    converged = False
    start_time = time.perf_counter()
    cumulative_algo_time = 0.0

    for iteration in range(max_iterations):
        iter_result = engine.iterate()

        if np.isnan(iter_result.step_norm):
            logger.warning(
                "Power method breakdown at iteration %d: A u vanished", iteration + 1
            )
            break

        cumulative_algo_time += iter_result.algorithm_time
        history.append(
            {
                "iteration": iteration,
                "eigenvalue": iter_result.eigenvalue,
                "step_norm": iter_result.step_norm,
                "algorithm_time": iter_result.algorithm_time,
                "cumulative_algorithm_time": cumulative_algo_time,
            }
        )
        logger.debug(
            "%3d %14.10g %10.4g", iteration + 1, np.real(iter_result.eigenvalue),
            iter_result.step_norm,
        )

        if iter_result.step_norm < tol:
            converged = True
            break

    if not converged:
        logger.warning(
            "Power method not converged after %d iterations (step norm %.3e, tol %.1e)",
            engine.iterations,
            engine.step_norm,
            tol,
        )

    eigenvalue = engine.rayleigh_quotient()
    return PowerMethodResult(
        eigenvalue=eigenvalue,
        eigenvector=engine.current_vector.copy(),
        converged=converged,
        iterations=len(history),
        step_norm=engine.step_norm,
        residual_norm=engine.residual_norm(eigenvalue),
        total_time=time.perf_counter() - start_time,
        history=tuple(history),
    )


def rayleigh_quotient_iteration(
    A: NDArray,
    u0: NDArray | None = None,
    *,
    tol: float | None = None,
    max_iterations: int = 50,
    seed: int | None = None,
) -> PowerMethodResult:
    """Rayleigh quotient iteration (RQI), controlled by the residual norm.

    Each step solves (A - λI) x_new = x with the current Rayleigh quotient
    as shift, which gives cubic convergence for Hermitian A close to an
    eigenpair. Which eigenpair it converges to depends on the start vector.
    The shifted matrix changes every step and is refactorized each time.

    Runs in FP64 (complex128 for complex A). tol defaults to the FP64
    residual tolerance.
    """
    if tol is None:
        tol = float(get_tolerance(PrecisionFormat.FP64, "residual_tol"))
    A = _validate_matrix(A)
    n = A.shape[0]
    dtype = np.complex128 if np.iscomplexobj(A) else np.float64
    A = A.astype(dtype)

    if u0 is None:
        u0 = np.random.default_rng(seed).standard_normal(n)
    x = _validate_vector(u0, n).astype(dtype)
    x = x / np.linalg.norm(x)

    identity = np.eye(n, dtype=dtype)
    history: list[dict[str, Any]] = []
    converged = False
    eigenvalue = float("nan")
    residual_norm = float("nan")
    step_norm = float("nan")
    start_time = time.perf_counter()

    for iteration in range(max_iterations):
        Ax = A @ x
        eigenvalue = np.vdot(x, Ax).item()
        residual_norm = float(np.linalg.norm(Ax - eigenvalue * x))

        history.append(
            {
                "iteration": iteration,
                "eigenvalue": eigenvalue,
                "residual_norm": residual_norm,
                "step_norm": step_norm,
            }
        )
        logger.debug("%3d %14.10g %10.4g", iteration + 1, np.real(eigenvalue), residual_norm)

        if residual_norm < tol:
            converged = True
            break

        try:
            y = np.linalg.solve(A - eigenvalue * identity, x)
        except np.linalg.LinAlgError:
            logger.warning(
                "RQI shift %r is numerically an exact eigenvalue; stopping", eigenvalue
            )
            break

        y /= np.linalg.norm(y)
        step_norm = _step_norm(y, x)
        x = y

    if not converged:
        logger.warning(
            "RQI not converged after %d iterations (residual %.3e, tol %.1e)",
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


def inverse_power_method(
    A: NDArray,
    u0: NDArray | None = None,
    *,
    shift: float = 0.0,
    tol: float | None = None,
    max_iterations: int = 100,
    seed: int | None = None,
) -> PowerMethodResult:
    """Inverse iteration: the power method on (A - σI)⁻¹.

    Converges to the eigenpair with eigenvalue closest to the shift σ, at
    rate |λ₁ - σ| / |λ₂ - σ| for the two eigenvalues closest to σ. Unlike
    RQI the shift stays fixed, so A - σI is LU-factorized once and each step
    costs two triangular solves. Stops on the residual norm.

    Runs in FP64 (complex128 for complex A). tol defaults to the FP64
    residual tolerance.

    Raises:
        ValueError: If A is not square, u0 does not match, or A - σI is
            exactly singular.
    """
    if tol is None:
        tol = float(get_tolerance(PrecisionFormat.FP64, "residual_tol"))
    A = _validate_matrix(A)
    n = A.shape[0]
    dtype = np.complex128 if np.iscomplexobj(A) or np.iscomplexobj(shift) else np.float64
    A = A.astype(dtype)

    if u0 is None:
        u0 = np.random.default_rng(seed).standard_normal(n)
    x = _validate_vector(u0, n).astype(dtype)
    x = x / np.linalg.norm(x)

    with warnings.catch_warnings():
        # Singularity is reported below as ValueError
        warnings.simplefilter("ignore", LinAlgWarning)
        lu_piv = lu_factor(A - shift * np.eye(n, dtype=dtype))
    if not np.all(np.diag(lu_piv[0])):
        msg = f"Shift {shift!r} is an eigenvalue: A - shift*I is singular"
        raise ValueError(msg)

    history: list[dict[str, Any]] = []
    converged = False
    eigenvalue = float("nan")
    residual_norm = float("nan")
    step_norm = float("nan")
    start_time = time.perf_counter()

    for iteration in range(max_iterations):
        Ax = A @ x
        eigenvalue = np.vdot(x, Ax).item()
        residual_norm = float(np.linalg.norm(Ax - eigenvalue * x))

        history.append(
            {
                "iteration": iteration,
                "eigenvalue": eigenvalue,
                "residual_norm": residual_norm,
                "step_norm": step_norm,
            }
        )
        logger.debug("%3d %14.10g %10.4g", iteration + 1, np.real(eigenvalue), residual_norm)

        if residual_norm < tol:
            converged = True
            break

        y = lu_solve(lu_piv, x)
        y /= np.linalg.norm(y)
        step_norm = _step_norm(y, x)
        x = y

    if not converged:
        logger.warning(
            "Inverse power method not converged after %d iterations "
            "(residual %.3e, tol %.1e)",
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


def apply_preconditioner(Pinv: NDArray | None, R: NDArray) -> NDArray:
    """Apply P⁻¹ to a residual vector or block.

    ``Pinv`` is None (identity), a 1-D array holding the diagonal of P⁻¹,
    or a full matrix.
    """
    if Pinv is None:
        return R
    Pinv = np.asarray(Pinv)
    if Pinv.ndim == 1:
        return Pinv[:, None] * R if R.ndim == 2 else Pinv * R
    return Pinv @ R


def preconditioned_gradient_descent(
    A: NDArray,
    u0: NDArray | None = None,
    *,
    alpha: float = 1.0,
    Pinv: NDArray | None = None,
    tol: float = 1e-6,
    max_iterations: int = 100,
    seed: int | None = None,
) -> PowerMethodResult:
    """Minimize the Rayleigh quotient of a Hermitian A by preconditioned descent.

    Iterates x ← x - α P⁻¹ (A x - R_A(x) x) towards the lowest eigenpair.
    With P⁻¹ = A⁻¹ and α = 1 the update is R_A(x) A⁻¹ x, a scaled inverse
    power step. Without a good preconditioner convergence is typically
    poor or absent.

    Args:
        A: Hermitian n×n matrix.
        u0: Starting vector (random, seeded by ``seed``, if None).
        alpha: Fixed step size α.
        Pinv: Preconditioner P⁻¹ (see :func:`apply_preconditioner`).
        tol: Threshold on the residual norm.
        max_iterations: Iteration budget.
        seed: Seed for the random starting vector.
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
    start_time = time.perf_counter()

    for iteration in range(max_iterations):
        Ax = A @ x
        eigenvalue = np.vdot(x, Ax).real.item()
        r = Ax - eigenvalue * x
        residual_norm = float(np.linalg.norm(r))

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
            converged = True
            break

        y = x - alpha * apply_preconditioner(Pinv, r)
        y = y / np.linalg.norm(y)
        step_norm = _step_norm(y, x)
        x = y

    if not converged:
        logger.warning(
            "Preconditioned gradient descent not converged after %d iterations "
            "(residual %.3e, tol %.1e)",
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
    "IterationResult",
    "PowerIteration",
    "PowerMethodResult",
    "apply_preconditioner",
    "inverse_power_method",
    "preconditioned_gradient_descent",
    "rayleigh_quotient_iteration",
    "run_power_method",
]
