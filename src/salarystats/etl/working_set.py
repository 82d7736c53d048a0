"""
Working-set builder.

Snapshots the cleaned staging table into a read-only analysis table
(``salary_wrk``). The snapshot owns its own copy of the data; nothing done
to the staging table afterwards can reach it.
"""

from dataclasses import dataclass, field

import numpy as np
import pandas as pd

from salarystats.schemas.registry import SchemaRegistry
from salarystats.utils.logging import get_logger

log = get_logger(__name__)


def row_ids_intact(df: pd.DataFrame) -> bool:
    """Whether ``row_id`` exists, is fully populated, integral and unique."""
    if "row_id" not in df.columns:
        return False
    ids = df["row_id"]
    if ids.isna().any():
        return False
    if not pd.api.types.is_integer_dtype(ids):
        return False
    return bool(ids.is_unique)


@dataclass(frozen=True)
class WorkingSet:
    """
    Immutable analysis snapshot of the cleaned salary table.

    Attributes:
        snapshot: The frozen table. Never mutated by the pipeline;
            consumers call ``frame()`` to get a private copy.
        row_ids_rederived: Whether ``row_id`` had to be rebuilt.
    """

    snapshot: pd.DataFrame = field(repr=False)
    row_ids_rederived: bool = False

    def __len__(self) -> int:
        return len(self.snapshot)

    @property
    def columns(self) -> list[str]:
        """Column names of the snapshot."""
        return list(self.snapshot.columns)

    def frame(self) -> pd.DataFrame:
        """Return a mutable copy of the snapshot."""
        return self.snapshot.copy(deep=True)


def build_working_set(staging: pd.DataFrame, *, validate: bool = True) -> WorkingSet:
    """
    Snapshot the staging table into a WorkingSet.

    If the copy lost the identifier's key property (column missing, nulls,
    non-integer or duplicate values), ``row_id`` is re-derived as 1..n in
    the staging table's row order. Intact ids are kept as they are,
    including the gaps left by deleted rows.

    Args:
        staging: Cleaned staging table (never modified).
        validate: Whether to validate against the working schema.

    Returns:
        WorkingSet wrapping a private copy.
    """
    snapshot = staging.copy(deep=True).reset_index(drop=True)
    rederived = False

    if not row_ids_intact(snapshot):
        log.warning(
            "row_id lost its key property in the working copy; re-deriving",
            rows=len(snapshot),
        )
        snapshot = snapshot.drop(columns=["row_id"], errors="ignore")
        snapshot.insert(0, "row_id", np.arange(1, len(snapshot) + 1, dtype="int64"))
        rederived = True
    else:
        snapshot["row_id"] = snapshot["row_id"].astype("int64")

    if validate:
        snapshot = SchemaRegistry.validate(snapshot, "salary_working")

    log.info("Built working set", rows=len(snapshot), rederived_ids=rederived)
    return WorkingSet(snapshot=snapshot, row_ids_rederived=rederived)
