"""Validated formatter defaults."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import ConfigError
from .formatting import format_with_significant_error


@dataclass(frozen=True)
class FormatOptions:
    """
    Parameters for ``format_with_significant_error``.

    Two significant digits by default, the usual convention for a reported
    uncertainty.
    """

    sig_digits: int = 2
    leading_one_exception: bool = False

    def __post_init__(self):
        if isinstance(self.sig_digits, bool) or not isinstance(self.sig_digits, int):
            raise ConfigError(f"sig_digits must be an int, got {self.sig_digits!r}")
        if self.sig_digits < 1:
            raise ConfigError(f"sig_digits must be >= 1, got {self.sig_digits}")
        if not isinstance(self.leading_one_exception, bool):
            raise ConfigError(
                f"leading_one_exception must be a bool, got {self.leading_one_exception!r}"
            )

    def format(self, quantity) -> str:
        return format_with_significant_error(
            quantity, self.sig_digits, self.leading_one_exception
        )
