"""
Pandera schemas for salary records.

Canonical column names (after normalization):
    row_id               - Surrogate key, dense 1..n in source order
    age                  - Age in years
    gender               - Gender category
    education_level      - Highest education level
    job_title            - Job title (free text)
    years_of_experience  - Years of professional experience
    salary               - Annual salary (null = missing or suppressed)
"""

import pandas as pd
import pandera.pandas as pa
from pandera.typing import Series

# Canonical education levels, lowest to highest
EDUCATION_LEVELS: list[str] = ["High School", "Bachelor's", "Master's", "PhD"]

STRING_COLUMNS: list[str] = ["gender", "education_level", "job_title"]
INTEGER_COLUMNS: list[str] = ["age", "years_of_experience", "salary"]

# Logical fields every source must provide, in canonical order
LOGICAL_COLUMNS: list[str] = [
    "age",
    "gender",
    "education_level",
    "job_title",
    "years_of_experience",
    "salary",
]

RECORD_COLUMNS: list[str] = ["row_id", *LOGICAL_COLUMNS]

# Trimmed, non-empty text
_TRIMMED = r"^\S(.*\S)?$"


class NormalizedSalarySchema(pa.DataFrameModel):
    """
    Schema for the normalized (typed, keyed) salary table.
    """

    row_id: Series[int] = pa.Field(
        ge=1,
        unique=True,
        description="Surrogate row identifier",
    )
    age: Series[pd.Int64Dtype] = pa.Field(
        nullable=True,
        description="Age in years",
    )
    gender: Series[pd.StringDtype] = pa.Field(
        nullable=True,
        description="Gender category",
    )
    education_level: Series[pd.StringDtype] = pa.Field(
        nullable=True,
        description="Education level",
    )
    job_title: Series[pd.StringDtype] = pa.Field(
        nullable=True,
        description="Job title",
    )
    years_of_experience: Series[pd.Int64Dtype] = pa.Field(
        nullable=True,
        description="Years of professional experience",
    )
    salary: Series[pd.Int64Dtype] = pa.Field(
        nullable=True,
        description="Annual salary",
    )

    class Config:
        """Schema configuration."""

        name = "NormalizedSalarySchema"
        strict = False
        coerce = False


class CleanedSalarySchema(NormalizedSalarySchema):
    """
    Schema for the cleaned staging table and the working set.

    Thresholds that come from configuration (salary floor, minimum
    working age) are checked by the assessment module instead.
    """

    gender: Series[pd.StringDtype] = pa.Field(
        nullable=True,
        str_matches=_TRIMMED,
        description="Gender category (non-blank)",
    )
    education_level: Series[pd.StringDtype] = pa.Field(
        nullable=True,
        str_matches=_TRIMMED,
        description="Education level (non-blank)",
    )
    job_title: Series[pd.StringDtype] = pa.Field(
        nullable=True,
        str_matches=_TRIMMED,
        description="Job title without surrounding whitespace",
    )
    salary: Series[pd.Int64Dtype] = pa.Field(
        ge=0,
        nullable=True,
        description="Annual salary (null when suppressed)",
    )

    class Config:
        """Schema configuration."""

        name = "CleanedSalarySchema"
        strict = False
        coerce = False
