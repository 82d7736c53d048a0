"""
Type coercion and surrogate key assignment.

Integer fields become nullable ``Int64``; text fields become a nullable
string dtype with values kept verbatim. Whitespace handling and blank
nulling are cleaning policy and happen later.
"""

import numpy as np
import pandas as pd

from salarystats.exceptions import CoercionFailure, TypeCoercionError
from salarystats.schemas.salary import INTEGER_COLUMNS, STRING_COLUMNS
from salarystats.utils.logging import get_logger
from salarystats.utils.numeric import round_half_away

log = get_logger(__name__)

# Explicit storage so the dtype is identical across pandas builds
STRING_DTYPE = pd.StringDtype("python")
INTEGER_DTYPE = pd.Int64Dtype()

# 2**63 as a float; anything at or above it overflows Int64
_INT64_LIMIT = float(np.iinfo("int64").max)


def _coerce_integer(series: pd.Series) -> tuple[pd.Series, list[CoercionFailure]]:
    """Parse text to Int64; blanks become null, garbage is reported."""
    text = series.astype("object").where(series.notna(), None)
    stripped = text.map(lambda v: v.strip() if isinstance(v, str) else v)
    blank = stripped.isna() | (stripped == "")

    parsed = pd.to_numeric(stripped.where(~blank, None), errors="coerce")
    parsed = parsed.astype("float64")
    bad = ~blank & (
        parsed.isna() | ~np.isfinite(parsed.fillna(0.0)) | (parsed.abs() >= _INT64_LIMIT)
    )

    failures = [
        CoercionFailure(row=int(pos) + 1, column=str(series.name), value=series.iloc[pos])
        for pos in np.flatnonzero(bad.to_numpy())
    ]

    fractional = parsed.notna() & (parsed != np.floor(parsed))
    if fractional.any():
        log.debug(
            "Rounded fractional values",
            column=series.name,
            count=int(fractional.sum()),
        )

    return round_half_away(parsed.where(~bad)), failures


def coerce_types(df: pd.DataFrame) -> pd.DataFrame:
    """
    Coerce each record field to its declared type.

    Args:
        df: Frame with canonical column names (never modified).

    Returns:
        New frame with typed columns.

    Raises:
        TypeCoercionError: If any non-blank value cannot be converted;
            lists every offending row and column.
    """
    result = df.copy()
    failures: list[CoercionFailure] = []

    for col in INTEGER_COLUMNS:
        coerced, col_failures = _coerce_integer(result[col].reset_index(drop=True))
        coerced.index = result.index
        result[col] = coerced.astype(INTEGER_DTYPE)
        failures.extend(col_failures)

    for col in STRING_COLUMNS:
        result[col] = result[col].astype(STRING_DTYPE)

    if failures:
        failures.sort(key=lambda f: (f.row, f.column))
        log.error("Type coercion failed", n_values=len(failures))
        raise TypeCoercionError(failures)

    return result


def assign_row_ids(df: pd.DataFrame) -> pd.DataFrame:
    """
    Prepend a dense ``row_id`` (1..n, source order) as the first column.

    Args:
        df: Frame without ``row_id`` (never modified).

    Returns:
        New frame with a fresh RangeIndex and ``row_id`` first.
    """
    result = df.drop(columns=["row_id"], errors="ignore").reset_index(drop=True)
    result.insert(0, "row_id", np.arange(1, len(result) + 1, dtype="int64"))
    return result
