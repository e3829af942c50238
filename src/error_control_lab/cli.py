"""
Command-line interface for Error Control Lab.

Usage:
    error-control-lab info           Show available precision formats
    error-control-lab eft A B        Compare two_sum and fast_two_sum
    error-control-lab sum            Compare summation algorithms
    error-control-lab power          Run the power method
    error-control-lab ritz           Plane-wave Ritz values with error bounds
"""

import logging
from fractions import Fraction
from typing import Annotated, NoReturn

import numpy as np
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from error_control_lab import __version__
from error_control_lab.algorithms import (
    ZERO_EIGENVALUE_MATRIX,
    adversarial_unit_sum,
    certify_ritz_pairs,
    compare_summation,
    create_experiment,
    create_gap_estimator,
    fast_two_sum,
    generate_unit_sum,
    plane_wave_convergence,
    plane_wave_count,
    plane_wave_ritz_pairs,
    run_power_method,
    two_sum,
)
from error_control_lab.algorithms.rayleigh_ritz import REFERENCE_ECUT
from error_control_lab.data import (
    PrecisionFormat,
    get_dtype,
    get_spec,
    list_available_formats,
)

app = typer.Typer(
    name="error-control-lab",
    help="Error control in floating-point and eigenvalue computations",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"error-control-lab version {__version__}")
        raise typer.Exit()


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    console.print(f"[red]Error:[/] {message}")
    raise typer.Exit(code=1)


@app.callback()  # type: ignore[misc]
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log per-iteration progress."),
    ] = False,
) -> None:
    """Error Control Lab - Numerical error control experiments."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


@app.command()  # type: ignore[misc]
def info() -> None:
    """Display information about available precision formats."""
    table = Table(title="Available Precision Formats")

    table.add_column("Format", style="cyan", no_wrap=True)
    table.add_column("Bits", justify="right")
    table.add_column("Mantissa", justify="right")
    table.add_column("Machine ε", justify="right")
    table.add_column("Unit roundoff u", justify="right")
    table.add_column("Available", justify="center")

    available = set(list_available_formats())

    for fmt in PrecisionFormat:
        spec = get_spec(fmt)
        is_available = "✓" if fmt in available else "✗"
        style = "" if fmt in available else "dim"

        table.add_row(
            fmt.value.upper(),
            str(spec.bits),
            str(spec.mantissa_bits),
            f"{spec.machine_epsilon:.2e}",
            f"{spec.unit_roundoff:.2e}",
            is_available,
            style=style,
        )

    console.print(table)

    if PrecisionFormat.BF16 not in available:
        console.print(
            "\n[yellow]Note:[/] BF16 requires ml-dtypes package. "
            "Install with: [bold]pip install ml-dtypes[/]"
        )


@app.command()  # type: ignore[misc]
def eft(
    a: Annotated[float, typer.Argument(help="First summand")],
    b: Annotated[float, typer.Argument(help="Second summand")],
) -> None:
    """Compare two_sum and fast_two_sum on a + b."""
    table = Table(title=f"Error-free transforms of {a!r} + {b!r}")

    table.add_column("Transform", style="cyan")
    table.add_column("s = fl(a + b)", justify="right")
    table.add_column("t", justify="right")
    table.add_column("s + t exact", justify="center")

    exact = Fraction(a) + Fraction(b)
    for name, transform in (("two_sum", two_sum), ("fast_two_sum", fast_two_sum)):
        s, t = transform(a, b)
        is_exact = Fraction(s) + Fraction(t) == exact
        table.add_row(name, repr(s), repr(t), "✓" if is_exact else "[red]✗[/]")

    console.print(table)

    if abs(a) < abs(b):
        console.print(
            "\n[yellow]Note:[/] |a| < |b|, fast_two_sum's precondition does not hold."
        )


@app.command("sum")  # type: ignore[misc]
def sum_command(
    n: Annotated[
        int,
        typer.Option("--n", "-n", help="Number of random magnitudes (or small terms)"),
    ] = 1024,
    seed: Annotated[
        int,
        typer.Option("--seed", "-s", help="Random seed"),
    ] = 42,
    spread: Annotated[
        float,
        typer.Option("--spread", help="Scale of the log-magnitudes"),
    ] = 10.0,
    adversarial: Annotated[
        bool,
        typer.Option("--adversarial", help="Use [2^53, 1/n, ..., 1/n, -2^53]"),
    ] = False,
    dtype: Annotated[
        str,
        typer.Option("--dtype", "-d", help="Working precision format"),
    ] = "fp64",
) -> None:
    """Compare summation algorithms on a sequence summing to exactly 1."""
    try:
        if adversarial:
            values = adversarial_unit_sum(n)
        else:
            values = generate_unit_sum(n, seed=seed, spread=spread)
        values = values.astype(get_dtype(dtype))
    except (ValueError, ImportError) as exc:
        fail(str(exc))

    title = "Adversarial" if adversarial else f"Random (seed={seed}, spread={spread})"
    table = Table(title=f"{title} unit sum, {values.size} terms, {dtype.upper()}")

    table.add_column("Method", style="cyan")
    table.add_column("Result", justify="right")
    table.add_column("Abs. error", justify="right")

    for entry in compare_summation(values, exact=1.0):
        table.add_row(entry.method, repr(entry.result), f"{entry.absolute_error:.3e}")

    console.print(table)


@app.command()  # type: ignore[misc]
def power(
    matrix_size: Annotated[
        int,
        typer.Option(
            "--size", "-n", help="Matrix dimension (0: 3×3 zero-eigenvalue demo)"
        ),
    ] = 0,
    tol: Annotated[
        float | None,
        typer.Option("--tol", "-t", help="Step-norm tolerance (default: per format)"),
    ] = None,
    max_iterations: Annotated[
        int | None,
        typer.Option("--max-iter", "-i", help="Maximum iterations"),
    ] = None,
    precision: Annotated[
        str,
        typer.Option("--precision", "-p", help="Precision format to use"),
    ] = "fp64",
    seed: Annotated[
        int,
        typer.Option("--seed", "-s", help="Random seed for generated matrices"),
    ] = 42,
) -> None:
    """Run the power method and report the dominant eigenpair."""
    try:
        if matrix_size == 0:
            matrix = ZERO_EIGENVALUE_MATRIX
            u0 = np.ones(3)
            true_eigenvalue = float(np.max(np.linalg.eigvals(matrix).real))
        else:
            setup = create_experiment(matrix_size, 100.0, seed=seed)
            matrix, u0 = setup.matrix, setup.initial_vector
            true_eigenvalue = setup.true_eigenvalue
        result = run_power_method(
            matrix, u0, tol=tol, max_iterations=max_iterations, precision=precision
        )
    except (ValueError, ImportError) as exc:
        fail(str(exc))

    console.print("[bold]Power Method[/]")
    console.print(f"  Matrix size: {matrix.shape[0]}×{matrix.shape[0]}")
    console.print(f"  Precision: {precision.upper()}")
    console.print(f"  Eigenvalue: {result.eigenvalue!r}")
    console.print(f"  Reference: {true_eigenvalue!r}")
    console.print(f"  Error: {abs(result.eigenvalue - true_eigenvalue):.3e}")
    console.print(f"  Iterations: {result.iterations}")
    console.print(f"  Step norm: {result.step_norm:.3e}")
    console.print(f"  Residual norm: {result.residual_norm:.3e}")

    if result.converged:
        console.print("  [green]Converged[/]")
    else:
        console.print("  [yellow]Not converged[/]")


@app.command()  # type: ignore[misc]
def ritz(
    ecut_max: Annotated[
        float,
        typer.Option("--ecut-max", help="Largest kinetic-energy cutoff"),
    ] = 20.0,
    step: Annotated[
        float,
        typer.Option("--step", help="Cutoff increment"),
    ] = 2.0,
    n_eigenvalues: Annotated[
        int,
        typer.Option("--n-eigenvalues", "-k", help="Number of lowest eigenvalues"),
    ] = 5,
    gap_policy: Annotated[
        str,
        typer.Option("--gap-policy", "-g", help="Gap estimator (bauer_fike, neighbor)"),
    ] = "bauer_fike",
) -> None:
    """Plane-wave Ritz values of -½Δ + cos(x) with Kato-Temple bounds."""
    if step <= 0 or ecut_max < step or ecut_max > REFERENCE_ECUT:
        fail(f"Need 0 < step <= ecut-max <= {REFERENCE_ECUT:g}")
    try:
        estimator = create_gap_estimator(gap_policy)
    except (ValueError, TypeError) as exc:
        fail(str(exc))

    ecuts = [step * k for k in range(1, int(ecut_max / step) + 1)]
    convergence = plane_wave_convergence(ecuts, n_eigenvalues)
    reference = convergence["reference"]

    table = Table(title="Ritz values of -½Δ + cos(x)")
    table.add_column("Ecut", justify="right", style="cyan")
    table.add_column("N", justify="right")
    for i in range(len(reference)):
        table.add_column(f"λ{i + 1}", justify="right")

    for ecut, values in zip(ecuts, convergence["ritz_values"], strict=True):
        cells = [f"{v:.10f}" for v in values]
        cells += [""] * (len(reference) - len(cells))
        table.add_row(f"{ecut:g}", str(plane_wave_count(ecut)), *cells)
    table.add_row(
        f"{REFERENCE_ECUT:g}",
        str(plane_wave_count(REFERENCE_ECUT)),
        *[f"{v:.10f}" for v in reference],
        style="bold",
    )
    console.print(table)

    certified = certify_ritz_pairs(plane_wave_ritz_pairs(ecuts[-1]), estimator)
    bounds = Table(title=f"Certification at Ecut={ecuts[-1]:g} ({estimator!r})")
    bounds.add_column("i", justify="right", style="cyan")
    bounds.add_column("Error", justify="right")
    bounds.add_column("Residual", justify="right")
    bounds.add_column("Gap", justify="right")
    bounds.add_column("Kato-Temple", justify="right")
    bounds.add_column("Bound", justify="right")

    for i, (entry, exact) in enumerate(zip(certified, reference, strict=False)):
        error = abs(entry.value - exact)
        style = "" if error <= entry.error_bound else "red"
        bounds.add_row(
            str(i + 1),
            f"{error:.2e}",
            f"{entry.residual_norm:.2e}",
            f"{entry.gap:.3g}",
            f"{entry.kato_temple:.2e}",
            f"{entry.error_bound:.2e}",
            style=style,
        )
    console.print(bounds)


if __name__ == "__main__":
    app()
