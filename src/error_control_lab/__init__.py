"""Error Control Lab: floating-point and eigenvalue error control experiments."""

__version__ = "0.1.0"

from error_control_lab.data.precision_types import (
    PrecisionFormat,
    get_dtype,
    get_eps,
    get_unit_roundoff,
)

__all__ = [
    "__version__",
    "PrecisionFormat",
    "get_dtype",
    "get_eps",
    "get_unit_roundoff",
]
