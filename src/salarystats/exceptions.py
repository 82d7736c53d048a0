"""
Error taxonomy for the salary pipeline.

Only unreadable input, uncoercible values and inconsistent rule sets are
errors. Per-row data-quality issues (blanks, category variants, implausible
values) are handled by the cleaning policy and never raise.
"""

from dataclasses import dataclass
from typing import Any


class SalaryStatsError(Exception):
    """Base class for all pipeline errors."""


class LoadError(SalaryStatsError):
    """Source file is missing, unreadable or structurally malformed."""


class ConfigurationError(SalaryStatsError):
    """Configuration or cleaning rule set is internally inconsistent."""


@dataclass(frozen=True)
class CoercionFailure:
    """
    A single value that could not be converted to its declared type.

    Attributes:
        row: 1-based data row in source order (header excluded).
        column: Canonical column name.
        value: Offending raw value.
    """

    row: int
    column: str
    value: Any

    def __str__(self) -> str:
        return f"row {self.row}, column {self.column!r}: {self.value!r}"


class TypeCoercionError(SalaryStatsError):
    """One or more raw values could not be coerced to the declared column type."""

    MAX_LISTED = 5

    def __init__(self, offenders: list[CoercionFailure]) -> None:
        self.offenders = offenders
        listed = "; ".join(str(o) for o in offenders[: self.MAX_LISTED])
        more = len(offenders) - self.MAX_LISTED
        suffix = f" (and {more} more)" if more > 0 else ""
        super().__init__(
            f"Cannot coerce {len(offenders)} value(s): {listed}{suffix}"
        )
