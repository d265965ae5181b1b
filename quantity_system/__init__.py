"""
Measured quantities: value ± error with dimensional units, error-propagating
arithmetic, and significant-error formatting.
"""

from .config import FormatOptions
from .errors import (
    ConfigError,
    DimensionlessRequiredError,
    DomainError,
    ExpressionError,
    InvalidQuantityError,
    PrecisionError,
    QuantityError,
    UnitMismatchError,
)
from .formatting import format_with_significant_error
from .quantity import ErrorPropagation, Quantity
from .units import DIMENSIONLESS, Units, to_rational

__all__ = [
    "Quantity",
    "ErrorPropagation",
    "Units",
    "DIMENSIONLESS",
    "to_rational",
    "format_with_significant_error",
    "FormatOptions",
    "QuantityError",
    "InvalidQuantityError",
    "UnitMismatchError",
    "DimensionlessRequiredError",
    "DomainError",
    "ExpressionError",
    "PrecisionError",
    "ConfigError",
]
