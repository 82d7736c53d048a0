"""
Pandera schemas for aggregate report tables.

Grouping key columns vary per report and are not part of the contract.
"""

import pandas as pd
import pandera.pandas as pa
from pandera.typing import Series

STAT_COLUMNS: list[str] = [
    "employee_count",
    "avg_salary",
    "salary_std",
    "min_salary",
    "max_salary",
]

RANK_COLUMN = "avg_salary_rank"


class SalaryReportSchema(pa.DataFrameModel):
    """Schema for a grouped salary statistics table."""

    employee_count: Series[int] = pa.Field(ge=0, description="Rows in the group")
    avg_salary: Series[pd.Int64Dtype] = pa.Field(
        nullable=True,
        description="Mean salary, rounded to the nearest integer",
    )
    salary_std: Series[pd.Int64Dtype] = pa.Field(
        ge=0,
        nullable=True,
        description="Salary standard deviation, rounded",
    )
    min_salary: Series[pd.Int64Dtype] = pa.Field(nullable=True)
    max_salary: Series[pd.Int64Dtype] = pa.Field(nullable=True)

    @pa.dataframe_check
    def min_not_above_max(cls, df: pd.DataFrame) -> Series[bool]:
        """Minimum salary never exceeds maximum salary."""
        return (df["min_salary"] <= df["max_salary"]).fillna(True).astype(bool)

    class Config:
        """Schema configuration."""

        name = "SalaryReportSchema"
        strict = False
        coerce = False


class RankedSalaryReportSchema(SalaryReportSchema):
    """Schema for a salary report ranked by average salary."""

    avg_salary_rank: Series[int] = pa.Field(
        ge=1,
        description="Dense rank by average salary, highest first",
    )

    class Config:
        """Schema configuration."""

        name = "RankedSalaryReportSchema"
        strict = False
        coerce = False
