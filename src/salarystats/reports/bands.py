"""
Age bucketing.

Band assignment is a pure function of the numeric age; display labels are
carried by the band and never parsed for ordering.
"""

from collections.abc import Sequence

import pandas as pd

from salarystats.config.settings import DEFAULT_AGE_BANDS, AgeBand


def assign_age_band(age: int | None, bands: Sequence[AgeBand] | None = None) -> AgeBand:
    """
    Map an age to its band.

    The last band is the catch-all: ages outside every band, and missing
    ages, fall into it.

    Args:
        age: Age in years, or None.
        bands: Band definitions (defaults to DEFAULT_AGE_BANDS).
    """
    bands = list(bands or DEFAULT_AGE_BANDS)
    if age is None or pd.isna(age):
        return bands[-1]
    for band in bands:
        if band.contains(int(age)):
            return band
    return bands[-1]


def age_band_labels(ages: pd.Series, bands: Sequence[AgeBand] | None = None) -> pd.Series:
    """Label each age with its band."""
    labels = [assign_age_band(a, bands).label for a in ages.astype("object")]
    return pd.Series(labels, index=ages.index, dtype=pd.StringDtype("python"), name="age_group")
