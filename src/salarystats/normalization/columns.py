"""
Column name normalization.

Maps raw header variants to the canonical snake_case record fields.
"""

import re

import pandas as pd

from salarystats.exceptions import LoadError
from salarystats.schemas.salary import LOGICAL_COLUMNS
from salarystats.utils.logging import get_logger

log = get_logger(__name__)

# Canonical column names for the pipeline
# Maps known source spellings to standardized internal names
COLUMN_MAPPING: dict[str, str] = {
    # Age
    "Age": "age",
    # Gender
    "Gender": "gender",
    "Sex": "gender",
    # Education
    "Education Level": "education_level",
    "Education": "education_level",
    "EducationLevel": "education_level",
    # Job
    "Job Title": "job_title",
    "JobTitle": "job_title",
    "Job": "job_title",
    # Experience
    "Years of Experience": "years_of_experience",
    "YearsOfExperience": "years_of_experience",
    "Experience": "years_of_experience",
    "Years Experience": "years_of_experience",
    # Salary
    "Salary": "salary",
    "Annual Salary": "salary",
}

_NON_ALNUM = re.compile(r"[^0-9a-z]+")


def canonical_name(raw: str, mapping: dict[str, str] | None = None) -> str:
    """
    Resolve one raw header to its canonical name.

    Exact lookup first; otherwise lowercase the name, collapse
    non-alphanumeric runs to ``_`` and look again by that key.

    Examples:
        >>> canonical_name("Years of Experience")
        'years_of_experience'
        >>> canonical_name("YEARS-OF-EXPERIENCE")
        'years_of_experience'
    """
    mapping = mapping or COLUMN_MAPPING
    if raw in mapping:
        return mapping[raw]

    snake = _NON_ALNUM.sub("_", raw.strip().lower()).strip("_")
    by_snake = {_NON_ALNUM.sub("_", k.lower()).strip("_"): v for k, v in mapping.items()}
    return by_snake.get(snake, snake)


def normalize_columns(
    df: pd.DataFrame,
    mapping: dict[str, str] | None = None,
) -> pd.DataFrame:
    """
    Rename columns to canonical form and keep only the record fields.

    Args:
        df: Raw DataFrame (never modified).
        mapping: Optional custom mapping (defaults to COLUMN_MAPPING).

    Returns:
        New DataFrame with the logical columns in canonical order.

    Raises:
        LoadError: If a logical field is missing or two headers map to
            the same field.
    """
    rename_dict = {col: canonical_name(col, mapping) for col in df.columns}

    targets: dict[str, list[str]] = {}
    for raw, target in rename_dict.items():
        targets.setdefault(target, []).append(raw)
    clashes = {t: raws for t, raws in targets.items() if len(raws) > 1}
    if clashes:
        msg = f"Several source columns map to the same field: {clashes}"
        raise LoadError(msg)

    renamed = df.rename(columns=rename_dict)
    validate_required_columns(renamed, LOGICAL_COLUMNS)

    extra = [c for c in renamed.columns if c not in LOGICAL_COLUMNS]
    if extra:
        log.warning("Dropping unrecognized columns", columns=extra)

    changed = {k: v for k, v in rename_dict.items() if k != v}
    if changed:
        log.debug("Normalized columns", renamed=changed)

    return renamed.loc[:, LOGICAL_COLUMNS].copy()


def validate_required_columns(df: pd.DataFrame, required: list[str]) -> None:
    """
    Check that required columns are present.

    Args:
        df: DataFrame to check.
        required: List of required column names.

    Raises:
        LoadError: If any required column is missing.
    """
    missing = [col for col in required if col not in df.columns]

    if missing:
        msg = f"Missing required columns: {missing} (found {list(df.columns)})"
        raise LoadError(msg)
