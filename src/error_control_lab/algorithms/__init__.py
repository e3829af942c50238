"""Numerical algorithms module.

This module contains implementations of:
- Error-free transforms, FMA and double-word arithmetic
- Naive and compensated summation
- Power method, inverse iteration, Rayleigh quotient iteration and
  preconditioned gradient descent
- Rayleigh-Ritz estimates with Kato-Temple certification
- Subspace iteration, LOPCG and LOBPCG
- Test matrices with controlled spectra and the plane-wave model
"""

from error_control_lab.algorithms.double_word import DoubleWord
from error_control_lab.algorithms.error_free import (
    TwoProductResult,
    TwoSumResult,
    determinant_2x2,
    determinant_kahan,
    fast_two_sum,
    fma,
    two_product,
    two_sum,
)
from error_control_lab.algorithms.matrices import (
    DEFAULT_SEED,
    ZERO_EIGENVALUE_MATRIX,
    ExperimentSetup,
    build_cosine_hamiltonian,
    cosine_hamiltonian_entry,
    create_experiment,
    create_geometric_spectrum_matrix,
    create_linear_spectrum_matrix,
    create_slow_convergence_matrix,
    near_diagonal_matrix,
    plane_wave_count,
    plane_wave_cutoff,
)
from error_control_lab.algorithms.power_method import (
    IterationResult,
    PowerIteration,
    PowerMethodResult,
    apply_preconditioner,
    inverse_power_method,
    preconditioned_gradient_descent,
    rayleigh_quotient_iteration,
    run_power_method,
)
from error_control_lab.algorithms.rayleigh_ritz import (
    BauerFikeGapEstimator,
    CertifiedEigenvalue,
    FixedGapEstimator,
    GapEstimator,
    NeighborGapEstimator,
    OrthoFunction,
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
from error_control_lab.algorithms.summation import (
    SUMMATION_METHODS,
    SummationError,
    adversarial_unit_sum,
    compare_summation,
    generate_unit_sum,
    get_summation_method,
    sum_double_word,
    sum_kahan,
    sum_kbn,
    sum_naive,
)

__all__ = [
    # Error-free transforms
    "DoubleWord",
    "TwoProductResult",
    "TwoSumResult",
    "determinant_2x2",
    "determinant_kahan",
    "fast_two_sum",
    "fma",
    "two_product",
    "two_sum",
    # Summation
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
    # Matrix generation
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
    # Power method and single-vector solvers
    "IterationResult",
    "PowerIteration",
    "PowerMethodResult",
    "apply_preconditioner",
    "inverse_power_method",
    "preconditioned_gradient_descent",
    "rayleigh_quotient_iteration",
    "run_power_method",
    # Rayleigh-Ritz and block solvers
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
