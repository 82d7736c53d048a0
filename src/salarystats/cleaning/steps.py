"""
Cleaning steps.

Each step is a pure function: it takes a frame and returns a new one,
never touching its input. Every step is idempotent.
"""

from dataclasses import dataclass

import pandas as pd

from salarystats.cleaning.rules import RewriteRules
from salarystats.schemas.salary import STRING_COLUMNS


@dataclass(frozen=True)
class CleaningStep:
    """
    Definition of a cleaning step.

    Attributes:
        name: Step identifier (used in logs and reports).
        description: Human-readable description.
    """

    name: str
    description: str


# Order matters: later steps assume earlier ones are complete
CLEANING_STEPS: list[CleaningStep] = [
    CleaningStep("blank_to_null", "Blank or whitespace-only text becomes null"),
    CleaningStep("unify_education", "Rewrite known education level variants"),
    CleaningStep("trim_job_titles", "Strip whitespace around job titles"),
    CleaningStep("unify_job_titles", "Rewrite known job title typos and abbreviations"),
    CleaningStep(
        "remove_implausible_experience",
        "Delete rows whose experience starts before the minimum working age",
    ),
    CleaningStep("suppress_salary_floor", "Null out salaries below the floor"),
]


def blank_to_null(
    df: pd.DataFrame, columns: list[str] | None = None
) -> pd.DataFrame:
    """Set text fields whose trimmed value is empty to null."""
    result = df.copy()
    for col in columns or STRING_COLUMNS:
        blank = result[col].str.strip().eq("").fillna(False).astype(bool)
        result[col] = result[col].mask(blank)
    return result


def unify_education(df: pd.DataFrame, rules: RewriteRules) -> pd.DataFrame:
    """Rewrite education levels through ``rules``; unmapped values pass through."""
    result = df.copy()
    result["education_level"] = rules.apply(result["education_level"])
    return result


def trim_job_titles(df: pd.DataFrame) -> pd.DataFrame:
    """Strip leading and trailing whitespace from non-null job titles."""
    result = df.copy()
    result["job_title"] = result["job_title"].str.strip()
    return result


def unify_job_titles(df: pd.DataFrame, rules: RewriteRules) -> pd.DataFrame:
    """Rewrite job titles through ``rules``; unmapped values pass through."""
    result = df.copy()
    result["job_title"] = rules.apply(result["job_title"])
    return result


def implausible_experience_mask(df: pd.DataFrame, min_working_age: int) -> pd.Series:
    """
    Rows whose experience exceeds ``age - min_working_age``.

    A null age or experience cannot be judged and is never flagged.
    """
    too_long = df["years_of_experience"] > (df["age"] - min_working_age)
    return too_long.fillna(False).astype(bool)


def remove_implausible_experience(
    df: pd.DataFrame, min_working_age: int = 16
) -> pd.DataFrame:
    """
    Hard-delete rows with implausible experience.

    ``row_id`` values of surviving rows are kept as they are, so ids of
    deleted rows are never reused.
    """
    keep = ~implausible_experience_mask(df, min_working_age)
    return df.loc[keep].reset_index(drop=True)


def suppress_salary_floor(df: pd.DataFrame, floor: int = 10_000) -> pd.DataFrame:
    """Set salaries below ``floor`` to null; the rows themselves are kept."""
    result = df.copy()
    below = (result["salary"] < floor).fillna(False).astype(bool)
    result["salary"] = result["salary"].mask(below)
    return result


def salary_inspection(df: pd.DataFrame, floor: int, ceiling: int) -> pd.DataFrame:
    """
    Rows with a salary below ``floor`` or above ``ceiling``, by salary.

    Only the floor is enforced; rows above the ceiling are listed for
    review and stay in the data.
    """
    salary = df["salary"]
    flagged = ((salary < floor) | (salary > ceiling)).fillna(False).astype(bool)
    return df.loc[flagged].sort_values("salary", kind="stable").reset_index(drop=True)


def implausible_experience_rows(df: pd.DataFrame, min_working_age: int) -> pd.DataFrame:
    """Rows that ``remove_implausible_experience`` would delete, with the limit."""
    flagged = df.loc[implausible_experience_mask(df, min_working_age)].copy()
    flagged["max_plausible_experience"] = flagged["age"] - min_working_age
    return flagged.reset_index(drop=True)
