"""Generate experiment traces for error-control-lab plots.

This script generates JSON trace files for:
- Summation errors of all methods on random and adversarial unit sums
- Power method convergence (zero-eigenvalue demo and a generated matrix)
- Plane-wave Ritz convergence with Kato-Temple certification
- Projected subspace iteration residual histories

Output JSON files are plain numbers and lists, ready for plotting.
"""

from __future__ import annotations

import json
import math
from datetime import UTC, datetime
from pathlib import Path

import numpy as np

from error_control_lab.algorithms.matrices import (
    ZERO_EIGENVALUE_MATRIX,
    create_experiment,
)
from error_control_lab.algorithms.power_method import run_power_method
from error_control_lab.algorithms.rayleigh_ritz import (
    certify_ritz_pairs,
    create_gap_estimator,
    plane_wave_convergence,
    plane_wave_ritz_pairs,
    projected_subspace_iteration,
)
from error_control_lab.algorithms.summation import (
    adversarial_unit_sum,
    compare_summation,
    generate_unit_sum,
)


def _finite(value: float) -> float | None:
    # JSON has no inf/nan
    return value if math.isfinite(value) else None


def _write(output: dict, output_file: Path) -> None:
    with output_file.open("w") as f:
        json.dump(output, f, indent=2)


def generate_summation_traces(
    sizes: tuple[int, ...] = (10, 100, 1000, 10000),
    seed: int = 42,
    output_dir: Path | None = None,
) -> None:
    """Generate summation error traces over increasing input sizes.

    Args:
        sizes: Numbers of random magnitudes n (2n + 1 terms each).
        seed: Random seed for reproducibility.
        output_dir: Output directory (defaults to experiments/traces/).
    """
    if output_dir is None:
        output_dir = Path(__file__).parent / "traces"

    output_dir.mkdir(parents=True, exist_ok=True)

    print(f"Generating summation traces (sizes={list(sizes)})...")

    runs = []
    for n in sizes:
        values = generate_unit_sum(n, seed=seed)
        errors = compare_summation(values, exact=1.0)
        runs.append({"n": n, "terms": int(values.size), "errors": [e.to_dict() for e in errors]})
        print(f"  n={n}: " + ", ".join(f"{e.method}={e.absolute_error:.1e}" for e in errors))

    adversarial = compare_summation(adversarial_unit_sum(), exact=1.0)

    output = {
        "metadata": {
            "experiment": "summation",
            "seed": seed,
            "timestamp": datetime.now(UTC).isoformat(),
        },
        "random": runs,
        "adversarial": [e.to_dict() for e in adversarial],
    }
    _write(output, output_dir / "trace_summation.json")

    print(f"\nSummation traces saved to: {output_dir}")


def generate_power_method_traces(
    matrix_size: int = 256,
    condition_number: float = 100.0,
    seed: int = 42,
    output_dir: Path | None = None,
) -> None:
    """Generate power method convergence traces.

    Args:
        matrix_size: Matrix dimension (default 256 for demo).
        condition_number: Matrix condition number.
        seed: Random seed for reproducibility.
        output_dir: Output directory (defaults to experiments/traces/).
    """
    if output_dir is None:
        output_dir = Path(__file__).parent / "traces"

    output_dir.mkdir(parents=True, exist_ok=True)

    print(f"\nGenerating power method traces (n={matrix_size}, κ={condition_number})...")

    # Rounding errors pull [1, 1, 1] away from the eigenvalue-0 eigenvector
    demo = run_power_method(ZERO_EIGENVALUE_MATRIX, np.ones(3), tol=1e-8)
    _write(
        {
            "metadata": {
                "algorithm": "power_method",
                "matrix": "zero_eigenvalue_3x3",
                "timestamp": datetime.now(UTC).isoformat(),
            },
            **demo.to_dict(),
        },
        output_dir / "trace_power_zero_eigenvalue.json",
    )
    print(f"  3×3 demo: ✓ {demo.iterations} iterations, λ={demo.eigenvalue:.10f}")

    experiment = create_experiment(
        matrix_size, condition_number, seed=seed, convergence_type="slow"
    )
    for precision in ("fp32", "fp64"):
        result = run_power_method(
            experiment.matrix,
            experiment.initial_vector,
            max_iterations=500,
            precision=precision,
        )
        output = {
            "metadata": {
                "algorithm": "power_method",
                "precision": precision,
                "matrix_size": matrix_size,
                "condition_number": condition_number,
                "true_eigenvalue": experiment.true_eigenvalue,
                "seed": seed,
                "convergence_type": "slow",
                "timestamp": datetime.now(UTC).isoformat(),
            },
            **result.to_dict(),
        }
        _write(output, output_dir / f"trace_power_{precision}.json")
        print(
            f"  {precision}: ✓ {result.iterations} iterations, "
            f"converged={result.converged}"
        )

    print(f"\nPower method traces saved to: {output_dir}")


def generate_ritz_traces(
    ecut_max: float = 20.0,
    step: float = 2.0,
    n_eigenvalues: int = 5,
    output_dir: Path | None = None,
) -> None:
    """Generate plane-wave Ritz convergence and certification traces.

    Args:
        ecut_max: Largest cutoff.
        step: Cutoff increment.
        n_eigenvalues: Number of lowest eigenvalues to track.
        output_dir: Output directory (defaults to experiments/traces/).
    """
    if output_dir is None:
        output_dir = Path(__file__).parent / "traces"

    output_dir.mkdir(parents=True, exist_ok=True)

    print(f"\nGenerating Ritz traces (Ecut <= {ecut_max}, step {step})...")

    ecuts = [step * k for k in range(1, int(ecut_max / step) + 1)]
    convergence = plane_wave_convergence(ecuts, n_eigenvalues)

    certification = {}
    for policy in ("bauer_fike", "neighbor"):
        per_ecut = []
        for ecut in ecuts:
            certified = certify_ritz_pairs(
                plane_wave_ritz_pairs(ecut), create_gap_estimator(policy)
            )[:n_eigenvalues]
            per_ecut.append(
                [
                    {key: _finite(value) for key, value in c.to_dict().items()}
                    for c in certified
                ]
            )
        certification[policy] = per_ecut

    # Slow case: gap ratio 95/97 between the kept and the first dropped pair
    subspace = projected_subspace_iteration(
        np.diag(np.arange(1.0, 100.0, 2.0)), n_vectors=2, seed=0
    )

    output = {
        "metadata": {
            "experiment": "rayleigh_ritz",
            "operator": "-0.5 d2/dx2 + cos(x)",
            "timestamp": datetime.now(UTC).isoformat(),
        },
        "convergence": convergence,
        "certification": certification,
        "subspace_iteration": subspace.to_dict(),
    }
    _write(output, output_dir / "trace_ritz.json")

    print(f"  lowest reference eigenvalue: {convergence['reference'][0]:.12f}")
    print(f"\nRitz traces saved to: {output_dir}")


def main() -> None:
    """Generate all traces for error-control-lab plots."""
    print("=" * 70)
    print("Error Control Lab - Trace Data Generation")
    print("=" * 70)

    seed = 42
    output_dir = Path(__file__).parent / "traces"

    generate_summation_traces(seed=seed, output_dir=output_dir)
    generate_power_method_traces(seed=seed, output_dir=output_dir)
    generate_ritz_traces(output_dir=output_dir)

    print("\n" + "=" * 70)
    print("✓ All traces generated successfully!")
    print("=" * 70)
    print(f"\nOutput directory: {output_dir.absolute()}")
    print("\nGenerated files:")
    for trace_file in sorted(output_dir.glob("trace_*.json")):
        size_kb = trace_file.stat().st_size / 1024
        print(f"  - {trace_file.name} ({size_kb:.1f} KB)")


if __name__ == "__main__":
    main()
