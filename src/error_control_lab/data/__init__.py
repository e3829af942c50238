"""Data module for floating-point format definitions."""

from error_control_lab.data.precision_types import (
    HAS_BF16,
    PrecisionFormat,
    PrecisionSpec,
    get_dtype,
    get_eps,
    get_spec,
    get_tolerance,
    get_unit_roundoff,
    list_available_formats,
    parse_format,
)

__all__ = [
    "HAS_BF16",
    "PrecisionFormat",
    "PrecisionSpec",
    "get_dtype",
    "get_eps",
    "get_spec",
    "get_tolerance",
    "get_unit_roundoff",
    "list_available_formats",
    "parse_format",
]
