"""
Schema definitions using Pandera for data validation.

All table contracts are defined here so every pipeline stage boundary
is explicit and validated.
"""

from salarystats.schemas.registry import DataRole, SchemaRegistry
from salarystats.schemas.report import (
    RANK_COLUMN,
    STAT_COLUMNS,
    RankedSalaryReportSchema,
    SalaryReportSchema,
)
from salarystats.schemas.salary import (
    EDUCATION_LEVELS,
    INTEGER_COLUMNS,
    LOGICAL_COLUMNS,
    RECORD_COLUMNS,
    STRING_COLUMNS,
    CleanedSalarySchema,
    NormalizedSalarySchema,
)

__all__ = [
    "EDUCATION_LEVELS",
    "INTEGER_COLUMNS",
    "LOGICAL_COLUMNS",
    "RANK_COLUMN",
    "RECORD_COLUMNS",
    "STAT_COLUMNS",
    "STRING_COLUMNS",
    "CleanedSalarySchema",
    "DataRole",
    "NormalizedSalarySchema",
    "RankedSalaryReportSchema",
    "SalaryReportSchema",
    "SchemaRegistry",
]
