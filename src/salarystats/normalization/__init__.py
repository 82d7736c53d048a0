"""
Data normalization layer for standardizing the raw table.

Handles column naming, type coercion and surrogate key assignment so the
cleaner always sees canonical, typed records.
"""

from salarystats.normalization.columns import (
    COLUMN_MAPPING,
    canonical_name,
    normalize_columns,
)
from salarystats.normalization.coercion import assign_row_ids, coerce_types
from salarystats.normalization.normalizer import normalize_schema

__all__ = [
    "COLUMN_MAPPING",
    "assign_row_ids",
    "canonical_name",
    "coerce_types",
    "normalize_columns",
    "normalize_schema",
]
