"""Tests for Rayleigh-Ritz estimates and error certification."""

import logging
import math

import numpy as np
import pytest

from error_control_lab import algorithms
from error_control_lab.algorithms.matrices import (
    build_cosine_hamiltonian,
    cosine_hamiltonian_entry,
    near_diagonal_matrix,
    plane_wave_count,
)
from error_control_lab.algorithms.power_method import (
    PowerMethodResult,
    preconditioned_gradient_descent,
)
from error_control_lab.algorithms.rayleigh_ritz import (
    BauerFikeGapEstimator,
    CertifiedEigenvalue,
    FixedGapEstimator,
    NeighborGapEstimator,
    RitzEstimate,
    SubspaceIterationResult,
    assemble_matrix,
    bauer_fike_bound,
    certify_ritz_pairs,
    create_gap_estimator,
    kato_temple_bound,
    lobpcg,
    lopcg,
    ortho_qr,
    plane_wave_convergence,
    plane_wave_ritz_pairs,
    plane_wave_ritz_values,
    projected_subspace_iteration,
    rayleigh_ritz,
    ritz_estimate,
    subspace_iteration,
)

ECUTS = [2.0 * k for k in range(1, 11)]


@pytest.fixture(scope="module")
def reference_values() -> np.ndarray:
    """Lowest eigenvalues of the plane-wave model at Ecut = 200."""
    return plane_wave_ritz_values(200.0)[:5]


def unit_vector_estimates(M: np.ndarray) -> list[RitzEstimate]:
    """Diagonal entries and unit vectors as eigenpair guesses."""
    estimates = []
    for i in range(M.shape[0]):
        e = np.zeros(M.shape[0])
        e[i] = 1.0
        r = M @ e - M[i, i] * e
        estimates.append(RitzEstimate(M[i, i], e, float(np.linalg.norm(r))))
    return estimates


class TestAssembleMatrix:
    """Tests for assemble_matrix and ritz_estimate."""

    def test_assembles_entries(self) -> None:
        """M[i, j] = entry(i, j)."""
        M = assemble_matrix(lambda i, j: float(min(i, j)), 3)
        np.testing.assert_array_equal(M, [[0, 0, 0], [0, 1, 1], [0, 1, 2]])

    def test_rejects_non_hermitian(self) -> None:
        """Non-Hermitian assembly raises ValueError."""
        with pytest.raises(ValueError, match="Hermitian"):
            assemble_matrix(lambda i, j: float(i - j), 3)

    def test_rejects_empty_basis(self) -> None:
        """basis_size must be positive."""
        with pytest.raises(ValueError, match="positive"):
            assemble_matrix(lambda i, j: 0.0, 0)

    def test_complex_hermitian(self) -> None:
        """Complex Hermitian matrices are accepted, values are real."""
        entries = np.array([[2.0, 1j], [-1j, 2.0]])
        values = ritz_estimate(lambda i, j: entries[i, j], 2)
        np.testing.assert_allclose(values, [1.0, 3.0])

    def test_ascending(self) -> None:
        """Eigenvalues are returned in ascending order."""
        values = ritz_estimate(cosine_hamiltonian_entry(20.0), plane_wave_count(20.0))
        assert np.all(np.diff(values) >= 0)


class TestPlaneWaveConvergence:
    """Courant-Fisher: Ritz values decrease towards the reference."""

    def test_monotonically_non_increasing(self) -> None:
        """Lowest five values never increase as Ecut grows."""
        values = np.array([plane_wave_ritz_values(ecut)[:5] for ecut in ECUTS])
        assert np.all(np.diff(values, axis=0) <= 1e-12)

    def test_upper_bounds_of_reference(self, reference_values: np.ndarray) -> None:
        """Every Ritz value lies above the reference eigenvalue."""
        for ecut in ECUTS:
            values = plane_wave_ritz_values(ecut)[:5]
            assert np.all(values >= reference_values - 1e-12)

    def test_converges_to_reference(self, reference_values: np.ndarray) -> None:
        """Ecut = 20 matches the reference closely."""
        values = plane_wave_ritz_values(20.0)[:5]
        np.testing.assert_allclose(values, reference_values, atol=1e-6)

    def test_free_particle_limit(self) -> None:
        """Without the potential the spectrum is ½G²; cos lowers the ground state."""
        values = plane_wave_ritz_values(200.0)
        assert values[0] < 0.0
        assert values[0] > -1.0

    def test_convergence_table(self, reference_values: np.ndarray) -> None:
        """plane_wave_convergence collects values per cutoff."""
        table = plane_wave_convergence([2.0, 8.0], n_eigenvalues=3)
        assert table["ecuts"] == [2.0, 8.0]
        assert table["basis_sizes"] == [5, 9]
        assert len(table["ritz_values"][0]) == 3
        np.testing.assert_allclose(table["reference"], reference_values[:3])


class TestRayleighRitz:
    """Tests for the Rayleigh-Ritz procedure on explicit subspaces."""

    def test_full_subspace_is_exact(self) -> None:
        """With V = I the Ritz pairs are eigenpairs."""
        M = near_diagonal_matrix()
        estimates = rayleigh_ritz(M, np.eye(5))

        np.testing.assert_allclose([e.value for e in estimates], np.linalg.eigvalsh(M))
        assert max(e.residual_norm for e in estimates) < 1e-12

    def test_interlacing(self) -> None:
        """k-th Ritz value bounds the k-th eigenvalue from above."""
        M = near_diagonal_matrix()
        eigenvalues = np.linalg.eigvalsh(M)
        rng = np.random.default_rng(0)
        estimates = rayleigh_ritz(M, rng.standard_normal((5, 3)))

        for k, estimate in enumerate(estimates):
            assert estimate.value >= eigenvalues[k] - 1e-12

    def test_ritz_vectors_orthonormal(self) -> None:
        """Ritz vectors form an orthonormal set."""
        M = near_diagonal_matrix()
        estimates = rayleigh_ritz(M, np.random.default_rng(1).standard_normal((5, 2)))
        X = np.column_stack([e.vector for e in estimates])
        np.testing.assert_allclose(X.T @ X, np.eye(2), atol=1e-12)

    def test_residual_norms(self) -> None:
        """Reported residual norms match ||A x - λ x||."""
        M = near_diagonal_matrix()
        for e in rayleigh_ritz(M, np.eye(5)[:, :2] + 0.1):
            assert math.isclose(
                e.residual_norm, np.linalg.norm(M @ e.vector - e.value * e.vector),
                rel_tol=1e-8, abs_tol=1e-14,
            )

    def test_single_vector(self) -> None:
        """A single vector gives its Rayleigh quotient."""
        M = near_diagonal_matrix()
        x = np.array([1.0, 1.0, 0.0, 0.0, 0.0])
        (estimate,) = rayleigh_ritz(M, x)
        assert math.isclose(estimate.value, x @ M @ x / (x @ x))

    def test_dimension_mismatch_raises(self) -> None:
        """Trial basis must have n rows."""
        with pytest.raises(ValueError, match="does not match"):
            rayleigh_ritz(np.eye(3), np.ones((4, 2)))

    def test_plane_wave_pairs_match_small_problem(self) -> None:
        """Embedding the small basis reproduces its Ritz values."""
        pairs = plane_wave_ritz_pairs(8.0)
        np.testing.assert_allclose(
            [p.value for p in pairs], plane_wave_ritz_values(8.0), atol=1e-12
        )

    def test_plane_wave_pairs_residual_is_boundary_coupling(self) -> None:
        """Residuals are measured against the reference Hamiltonian."""
        pairs = plane_wave_ritz_pairs(8.0, reference_ecut=20.0)
        H = build_cosine_hamiltonian(20.0)
        for p in pairs[:3]:
            expected = np.linalg.norm(H @ p.vector - p.value * p.vector)
            assert math.isclose(p.residual_norm, expected, rel_tol=1e-6, abs_tol=1e-15)

    def test_plane_wave_pairs_cutoff_order(self) -> None:
        """Ecut above the reference is rejected."""
        with pytest.raises(ValueError, match="exceeds"):
            plane_wave_ritz_pairs(50.0, reference_ecut=20.0)


class TestBounds:
    """Kato-Temple and Bauer-Fike bounds."""

    def test_kato_temple_formula(self) -> None:
        """Bound is r²/δ."""
        assert kato_temple_bound(1.0, 0.1, 0.5) == pytest.approx(0.02)

    def test_bauer_fike_is_residual(self) -> None:
        """Bound is r."""
        assert bauer_fike_bound(0.3) == 0.3

    @pytest.mark.parametrize("m12", [0.001, 0.05, 0.2])
    def test_kato_temple_valid_gap_never_violated(self, m12: float) -> None:
        """With the true gap the bound holds for every unit-vector guess."""
        M = near_diagonal_matrix(m12=m12)
        eigenvalues = np.linalg.eigvalsh(M)

        for estimate in unit_vector_estimates(M):
            distances = np.sort(np.abs(eigenvalues - estimate.value))
            error, true_gap = distances[0], distances[1]
            bound = kato_temple_bound(estimate.value, estimate.residual_norm, true_gap)
            assert error <= bound

    def test_kato_temple_random_subspaces(self) -> None:
        """Ritz pairs of random 2-D subspaces satisfy the bound with true gaps."""
        rng = np.random.default_rng(2024)
        Q, _ = np.linalg.qr(rng.standard_normal((6, 6)))
        eigenvalues = np.array([-2.0, 0.5, 1.0, 3.0, 4.5, 7.0])
        A = Q @ np.diag(eigenvalues) @ Q.T

        for _ in range(10):
            V = Q[:, :2] + 0.05 * rng.standard_normal((6, 2))
            for estimate in rayleigh_ritz(A, V):
                distances = np.sort(np.abs(eigenvalues - estimate.value))
                bound = kato_temple_bound(
                    estimate.value, estimate.residual_norm, distances[1]
                )
                assert distances[0] <= bound + 1e-14

    def test_kato_temple_overestimated_gap_violated(self) -> None:
        """An overestimated gap silently gives a bound below the error."""
        M = near_diagonal_matrix()
        eigenvalues = np.linalg.eigvalsh(M)
        estimate = unit_vector_estimates(M)[0]

        error = np.min(np.abs(eigenvalues - estimate.value))
        bound = kato_temple_bound(estimate.value, estimate.residual_norm, 1e6)
        assert bound < error


class TestGapEstimators:
    """Tests for gap estimation strategies."""

    VALUES = np.array([1.0, 2.0, 4.0])
    RESIDUALS = np.array([0.1, 0.3, 0.2])

    def test_neighbor(self) -> None:
        """Distance to the nearest neighbouring Ritz value."""
        gaps = NeighborGapEstimator().estimate(self.VALUES, self.RESIDUALS)
        np.testing.assert_allclose(gaps, [1.0, 1.0, 2.0])

    def test_bauer_fike(self) -> None:
        """Neighbours shifted towards λ̃ᵢ by their residuals."""
        gaps = BauerFikeGapEstimator().estimate(self.VALUES, self.RESIDUALS)
        np.testing.assert_allclose(gaps, [0.7, 0.9, 1.7])

    def test_bauer_fike_clamped_at_zero(self) -> None:
        """Overlapping neighbourhoods give a zero gap."""
        gaps = BauerFikeGapEstimator().estimate(np.array([1.0, 1.1]), np.array([0.5, 0.5]))
        np.testing.assert_array_equal(gaps, [0.0, 0.0])

    def test_single_value_has_no_neighbours(self) -> None:
        """Missing neighbours give an infinite gap."""
        for estimator in (NeighborGapEstimator(), BauerFikeGapEstimator()):
            gaps = estimator.estimate(np.array([1.0]), np.array([0.1]))
            assert gaps[0] == math.inf

    def test_fixed(self) -> None:
        """Fixed estimator returns the configured gap."""
        gaps = FixedGapEstimator(gap=0.25).estimate(self.VALUES, self.RESIDUALS)
        np.testing.assert_array_equal(gaps, [0.25, 0.25, 0.25])

    @pytest.mark.parametrize(
        "name,cls",
        [
            ("bauer_fike", BauerFikeGapEstimator),
            ("bauer-fike", BauerFikeGapEstimator),
            ("neighbor", NeighborGapEstimator),
        ],
    )
    def test_factory(self, name: str, cls: type) -> None:
        """Factory creates estimators by name."""
        assert isinstance(create_gap_estimator(name), cls)

    def test_factory_kwargs(self) -> None:
        """Factory forwards keyword arguments."""
        estimator = create_gap_estimator("fixed", gap=2.0)
        assert isinstance(estimator, FixedGapEstimator)
        assert estimator.gap == 2.0

    def test_factory_unknown_raises(self) -> None:
        """Unknown estimator raises ValueError."""
        with pytest.raises(ValueError, match="Unknown gap estimator"):
            create_gap_estimator("oracle")


class TestCertifyRitzPairs:
    """Tests for certify_ritz_pairs."""

    def test_default_policy_certifies_near_diagonal(self) -> None:
        """Bauer-Fike gaps give valid bounds for the 5×5 example."""
        M = near_diagonal_matrix()
        eigenvalues = np.linalg.eigvalsh(M)

        certified = certify_ritz_pairs(unit_vector_estimates(M))
        assert all(isinstance(c, CertifiedEigenvalue) for c in certified)
        for c in certified:
            error = np.min(np.abs(eigenvalues - c.value))
            assert error <= c.error_bound
            assert c.kato_temple < c.bauer_fike

    def test_sorted_by_value(self) -> None:
        """Output is ascending regardless of input order."""
        estimates = unit_vector_estimates(near_diagonal_matrix())[::-1]
        values = [c.value for c in certify_ritz_pairs(estimates)]
        assert values == sorted(values)

    def test_zero_gap_falls_back_to_bauer_fike(self) -> None:
        """Non-positive gap makes Kato-Temple unavailable."""
        estimates = [
            RitzEstimate(1.0, np.array([1.0, 0.0]), 0.5),
            RitzEstimate(1.1, np.array([0.0, 1.0]), 0.5),
        ]
        for c in certify_ritz_pairs(estimates):
            assert c.gap == 0.0
            assert c.kato_temple == math.inf
            assert c.error_bound == c.bauer_fike == 0.5

    def test_unknown_gap_falls_back_to_bauer_fike(self) -> None:
        """A single pair has no neighbours to estimate the gap."""
        (c,) = certify_ritz_pairs([RitzEstimate(2.0, np.array([1.0]), 1e-3)])
        assert c.gap == math.inf
        assert c.kato_temple == math.inf
        assert c.error_bound == 1e-3

    def test_overestimated_gap_policy(self) -> None:
        """A fixed huge gap produces bounds that can be violated."""
        M = near_diagonal_matrix()
        eigenvalues = np.linalg.eigvalsh(M)
        certified = certify_ritz_pairs(
            unit_vector_estimates(M), FixedGapEstimator(gap=1e6)
        )
        errors = [np.min(np.abs(eigenvalues - c.value)) for c in certified]
        assert any(e > c.error_bound for e, c in zip(errors, certified, strict=True))

    @pytest.mark.parametrize("policy", ["bauer_fike", "neighbor"])
    def test_plane_wave_certification(
        self, policy: str, reference_values: np.ndarray
    ) -> None:
        """Lowest plane-wave Ritz values at Ecut = 20 are certified."""
        certified = certify_ritz_pairs(
            plane_wave_ritz_pairs(20.0), create_gap_estimator(policy)
        )
        for c, exact in zip(certified[:3], reference_values[:3], strict=True):
            assert abs(c.value - exact) <= c.error_bound

    def test_to_dict(self) -> None:
        """to_dict() includes the combined bound."""
        (c,) = certify_ritz_pairs([RitzEstimate(2.0, np.array([1.0]), 1e-3)])
        assert c.to_dict()["error_bound"] == 1e-3


class TestProjectedSubspaceIteration:
    """Tests for projected_subspace_iteration."""

    def test_converges_to_dominant_pairs(self) -> None:
        """Well separated dominant eigenvalues converge quickly."""
        A = np.diag([1.0, 2.0, 3.0, 10.0, 20.0])
        result = projected_subspace_iteration(A, n_vectors=2, seed=0)

        assert result.converged
        np.testing.assert_allclose(result.eigenvalues, [10.0, 20.0], atol=1e-8)
        assert result.residual_history[-1].max() < 1e-6
        assert len(result.eigenvalue_history) == result.iterations

    def test_eigenvectors(self) -> None:
        """Ritz vectors span the dominant eigenvectors."""
        A = np.diag([1.0, 2.0, 3.0, 10.0, 20.0])
        result = projected_subspace_iteration(A, n_vectors=2, seed=0, tol=1e-10)
        X = result.eigenvectors
        np.testing.assert_allclose(np.abs(X[3:, :]), np.eye(2), atol=1e-8)

    def test_slow_case_not_converged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Small gap below the block: budget exhausted with a warning."""
        A = np.diag(np.arange(1.0, 100.0, 2.0))
        with caplog.at_level(
            logging.WARNING, logger="error_control_lab.algorithms.rayleigh_ritz"
        ):
            result = projected_subspace_iteration(A, seed=0, max_iterations=20)

        assert not result.converged
        assert result.iterations == 20
        assert any("not converged" in r.message for r in caplog.records)

    def test_explicit_start_block(self) -> None:
        """User-supplied block defines the block size."""
        A = np.diag([1.0, 2.0, 3.0, 10.0, 20.0])
        result = projected_subspace_iteration(A, np.ones((5, 3)) + np.eye(5)[:, :3])
        assert result.eigenvalues.shape == (3,)

    def test_block_dimension_mismatch_raises(self) -> None:
        """Start block must have n rows."""
        with pytest.raises(ValueError, match="does not match"):
            projected_subspace_iteration(np.eye(4), np.ones((3, 2)))

    def test_to_dict(self) -> None:
        """to_dict() is JSON-ready."""
        result = projected_subspace_iteration(np.diag([1.0, 5.0, 10.0]), seed=1)
        d = result.to_dict()
        assert d["iterations"] == result.iterations
        assert len(d["residual_history"]) == result.iterations

    def test_empty_block_raises(self) -> None:
        """Block size 0 is rejected."""
        with pytest.raises(ValueError, match="n_vectors must be positive"):
            projected_subspace_iteration(np.eye(3), n_vectors=0)
        with pytest.raises(ValueError, match="Block size"):
            projected_subspace_iteration(np.eye(3), np.zeros((3, 0)))

    def test_block_wider_than_matrix_raises(self) -> None:
        """More columns than rows is rejected."""
        with pytest.raises(ValueError, match="Block size"):
            projected_subspace_iteration(np.eye(3), np.ones((3, 4)))

    def test_custom_ortho(self) -> None:
        """The orthonormalization is pluggable."""
        calls = []

        def counting_qr(X: np.ndarray) -> np.ndarray:
            calls.append(X.shape)
            return ortho_qr(X)

        result = projected_subspace_iteration(
            np.diag([1.0, 2.0, 3.0, 10.0, 20.0]), n_vectors=2, seed=0, ortho=counting_qr
        )
        assert result.converged
        assert len(calls) == result.iterations


class TestOrthoQr:
    """Tests for ortho_qr."""

    def test_orthonormal_same_span(self) -> None:
        """Columns become orthonormal and span the same space."""
        X = np.random.default_rng(0).standard_normal((6, 3))
        Q = ortho_qr(X)
        np.testing.assert_allclose(Q.T @ Q, np.eye(3), atol=1e-14)
        np.testing.assert_allclose(Q @ (Q.T @ X), X, atol=1e-12)

    def test_exported(self) -> None:
        """Block solver helpers are exported from the algorithms package."""
        for name in ("ortho_qr", "ritz_estimate", "subspace_iteration", "lobpcg", "lopcg"):
            assert name in algorithms.__all__
        assert algorithms.ritz_estimate is ritz_estimate


class TestSubspaceIteration:
    """Tests for subspace_iteration without Rayleigh-Ritz."""

    def test_converges_to_dominant_pairs(self) -> None:
        """Columns converge to the two dominant eigenvalues in order."""
        A = np.diag([150.0, 110.0, 100.0, 50.0, 40.0, 30.0])
        result = subspace_iteration(A, n_vectors=2, seed=0, max_iterations=500)

        assert isinstance(result, SubspaceIterationResult)
        assert result.converged
        np.testing.assert_allclose(result.eigenvalues, [150.0, 110.0], rtol=1e-10)

    def test_ortho_called_every_iteration(self) -> None:
        """The orthonormalization runs once per iteration."""
        calls = []

        def counting_qr(X: np.ndarray) -> np.ndarray:
            calls.append(X.shape)
            return ortho_qr(X)

        result = subspace_iteration(np.diag([1.0, 5.0, 20.0]), n_vectors=1, seed=2, ortho=counting_qr)
        assert result.converged
        assert len(calls) == result.iterations
        assert calls[0] == (3, 1)

    def test_empty_block_raises(self) -> None:
        """Block size 0 is rejected."""
        with pytest.raises(ValueError, match="n_vectors must be positive"):
            subspace_iteration(np.eye(3), n_vectors=0)

    def test_non_convergence_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        """Budget exhausted logs a warning."""
        A = np.diag([150.0, 110.0, 100.0, 50.0, 40.0, 30.0])
        with caplog.at_level(
            logging.WARNING, logger="error_control_lab.algorithms.rayleigh_ritz"
        ):
            result = subspace_iteration(A, seed=0, max_iterations=5)
        assert not result.converged
        assert result.iterations == 5
        assert any("Subspace iteration" in r.message for r in caplog.records)


class TestLopcg:
    """Tests for the single-vector locally optimal solver."""

    SPECTRUM = np.linspace(1.0, 100.0, 200)

    def test_converges_to_lowest(self) -> None:
        """Preconditioned run finds the lowest eigenpair."""
        A = np.diag(self.SPECTRUM)
        result = lopcg(A, Pinv=1.0 / self.SPECTRUM, seed=0)

        assert isinstance(result, PowerMethodResult)
        assert result.converged
        assert abs(result.eigenvalue - 1.0) < 1e-8
        assert result.total_time >= 0.0

    def test_faster_than_gradient_descent(self) -> None:
        """The previous direction accelerates preconditioned descent."""
        A = np.diag(self.SPECTRUM)
        Pinv = 1.0 / self.SPECTRUM
        locally_optimal = lopcg(A, Pinv=Pinv, seed=0)
        descent = preconditioned_gradient_descent(A, Pinv=Pinv, seed=0)

        assert locally_optimal.converged
        assert descent.converged
        assert locally_optimal.iterations <= descent.iterations

    def test_without_preconditioner(self) -> None:
        """Converges on a small problem without P⁻¹."""
        result = lopcg(np.diag(np.arange(1.0, 11.0)), seed=1)
        assert result.converged
        assert abs(result.eigenvalue - 1.0) < 1e-8

    def test_step_norms_recorded(self) -> None:
        """Step norms are tracked after the first iteration."""
        result = lopcg(np.diag(np.arange(1.0, 11.0)), seed=1)
        assert np.isnan(result.history[0]["step_norm"])
        assert not np.isnan(result.step_norm)

    def test_non_convergence_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        """Budget exhausted logs a warning."""
        with caplog.at_level(
            logging.WARNING, logger="error_control_lab.algorithms.rayleigh_ritz"
        ):
            result = lopcg(np.diag(self.SPECTRUM), seed=0, max_iterations=2)
        assert not result.converged
        assert any("LOPCG" in r.message for r in caplog.records)


class TestLobpcg:
    """Tests for the block locally optimal solver."""

    SPECTRUM = np.linspace(1.0, 100.0, 200)

    def test_converges_to_lowest_pairs(self) -> None:
        """Block of two finds the two lowest eigenvalues, ascending."""
        result = lobpcg(np.diag(self.SPECTRUM), n_vectors=2, Pinv=1.0 / self.SPECTRUM, seed=0)

        assert result.converged
        np.testing.assert_allclose(result.eigenvalues, self.SPECTRUM[:2], atol=1e-8)
        assert result.eigenvectors.shape == (200, 2)

    def test_without_preconditioner(self) -> None:
        """Small problem converges without P⁻¹."""
        result = lobpcg(np.diag(np.arange(1.0, 13.0)), n_vectors=3, seed=4)
        assert result.converged
        np.testing.assert_allclose(result.eigenvalues, [1.0, 2.0, 3.0], atol=1e-8)

    def test_residuals_recorded(self) -> None:
        """One residual array per iteration, the last below tol."""
        result = lobpcg(np.diag(np.arange(1.0, 13.0)), n_vectors=2, seed=4)
        assert len(result.residual_history) == result.iterations
        assert result.residual_history[-1].max() < 1e-6

    def test_empty_block_raises(self) -> None:
        """Block size 0 is rejected."""
        with pytest.raises(ValueError, match="n_vectors must be positive"):
            lobpcg(np.eye(4), n_vectors=0)
