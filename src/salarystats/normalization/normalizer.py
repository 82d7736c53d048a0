"""
Schema normalizer: raw text table -> typed, keyed record table.
"""

import pandas as pd

from salarystats.normalization.columns import normalize_columns
from salarystats.normalization.coercion import assign_row_ids, coerce_types
from salarystats.schemas.registry import SchemaRegistry
from salarystats.utils.logging import get_logger

log = get_logger(__name__)


def normalize_schema(
    raw: pd.DataFrame,
    mapping: dict[str, str] | None = None,
    *,
    validate: bool = True,
) -> pd.DataFrame:
    """
    Rename, coerce and key the raw salary table.

    Args:
        raw: Frame as returned by the loader (never modified).
        mapping: Optional header mapping override.
        validate: Whether to validate against NormalizedSalarySchema.

    Returns:
        New frame: ``row_id`` followed by the six typed record fields.

    Raises:
        LoadError: If a logical field is missing.
        TypeCoercionError: If values cannot be converted.
    """
    renamed = normalize_columns(raw, mapping)
    typed = coerce_types(renamed)
    keyed = assign_row_ids(typed)

    if validate:
        keyed = SchemaRegistry.validate(keyed, "salary_normalized")

    log.info("Normalized schema", rows=len(keyed), columns=list(keyed.columns))
    return keyed
