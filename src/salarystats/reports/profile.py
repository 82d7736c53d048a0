"""
Data-quality profile of a salary table.

Answers the questions analysts ask before and after cleaning: how many
rows, how many nulls per column, and which values each categorical
column takes.
"""

from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from salarystats.schemas.salary import STRING_COLUMNS


@dataclass
class TableProfile:
    """
    Profile of one table.

    Attributes:
        name: Table label (e.g. ``salary_raw``).
        row_count: Number of rows.
        null_counts: Nulls per column.
        distinct_counts: Distinct non-null values per column.
        value_counts: Per categorical column, value -> count (nulls excluded).
    """

    name: str
    row_count: int
    null_counts: dict[str, int] = field(default_factory=dict)
    distinct_counts: dict[str, int] = field(default_factory=dict)
    value_counts: dict[str, dict[str, int]] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Plain dictionary, suitable for JSON."""
        return {
            "name": self.name,
            "row_count": self.row_count,
            "null_counts": dict(self.null_counts),
            "distinct_counts": dict(self.distinct_counts),
            "value_counts": {k: dict(v) for k, v in self.value_counts.items()},
        }


def profile_table(
    frame: pd.DataFrame,
    name: str = "table",
    categorical: list[str] | None = None,
) -> TableProfile:
    """
    Profile a table.

    Args:
        frame: Table to profile (never modified).
        name: Label stored on the profile.
        categorical: Columns to count values for (defaults to the text
            columns present in ``frame``).

    Returns:
        TableProfile.
    """
    if categorical is None:
        categorical = [c for c in STRING_COLUMNS if c in frame.columns]

    profile = TableProfile(name=name, row_count=len(frame))
    for col in frame.columns:
        profile.null_counts[str(col)] = int(frame[col].isna().sum())
        profile.distinct_counts[str(col)] = int(frame[col].nunique(dropna=True))

    for col in categorical:
        counts = frame[col].value_counts(dropna=True)
        profile.value_counts[col] = {str(k): int(v) for k, v in counts.items()}

    return profile
