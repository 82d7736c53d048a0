"""Numeric helpers shared by the normalizer and the aggregator."""

import numpy as np
import pandas as pd


def round_half_away(values: pd.Series) -> pd.Series:
    """
    Round to the nearest integer, halves away from zero.

    ``pandas.Series.round`` uses banker's rounding (2.5 -> 2); report
    values follow the conventional rule (2.5 -> 3, -2.5 -> -3).
    Nulls stay null.
    """
    numeric = pd.to_numeric(values, errors="coerce").astype("float64")
    rounded = np.sign(numeric) * np.floor(np.abs(numeric) + 0.5)
    return rounded.astype("Int64")
