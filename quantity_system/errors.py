"""Precondition violations raised by quantity arithmetic and formatting."""


class QuantityError(ValueError):
    """Base class for caller errors. The ``condition`` name ends the message."""

    condition = "quantity_error"

    def __init__(self, message: str) -> None:
        super().__init__(f"{message} ({self.condition})")
        self.detail = message


class InvalidQuantityError(QuantityError):
    """Value is not finite or error is negative/NaN."""

    condition = "invalid_quantity"


class UnitMismatchError(QuantityError):
    """Addition or subtraction of quantities with different units."""

    condition = "unit_mismatch"


class DimensionlessRequiredError(QuantityError):
    condition = "dimensionless_required"


class DomainError(QuantityError):
    condition = "domain_violation"


class PrecisionError(QuantityError):
    condition = "invalid_precision"


class ConfigError(QuantityError):
    condition = "invalid_config"


class ExpressionError(QuantityError):
    """Expression passed to ``Quantity.apply`` is not a function of one variable."""

    condition = "invalid_expression"
