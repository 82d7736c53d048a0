"""
Grouped salary statistics.

Every report row carries the same statistics: ``employee_count`` (rows in
the group after filtering), ``avg_salary`` and ``salary_std`` (rounded to
the nearest integer, halves away from zero) and ``min_salary`` /
``max_salary``. Null salaries are ignored by the salary statistics, as SQL
aggregates ignore NULL.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

import pandas as pd

from salarystats.schemas.registry import SchemaRegistry
from salarystats.schemas.report import RANK_COLUMN, STAT_COLUMNS
from salarystats.utils.logging import get_logger
from salarystats.utils.numeric import round_half_away

if TYPE_CHECKING:
    from salarystats.etl.working_set import WorkingSet

log = get_logger(__name__)

RowFilter = Callable[[pd.DataFrame], pd.Series]


def not_null(*columns: str) -> RowFilter:
    """Row filter keeping rows where every given column is non-null."""

    def predicate(df: pd.DataFrame) -> pd.Series:
        mask = pd.Series(True, index=df.index)
        for col in columns:
            mask &= df[col].notna()
        return mask

    predicate.__name__ = f"not_null({', '.join(columns)})"
    return predicate


class OrderKind(Enum):
    """How a report's groups are ordered."""

    COUNT = "count"  # employee_count, largest first
    AVG_SALARY = "avg_salary"  # avg_salary, highest first
    KEY = "key"  # grouping key values
    CATEGORIES = "categories"  # explicit category order of one key
    MIN_OF = "min_of"  # smallest underlying value per group


@dataclass(frozen=True)
class GroupOrder:
    """
    One ordering criterion; reports apply a sequence of them in priority.

    Attributes:
        kind: Ordering strategy.
        column: Key column (KEY, CATEGORIES) or underlying column (MIN_OF).
        categories: Natural order for CATEGORIES, first = lowest.
        descending: Reverse the natural direction of KEY, CATEGORIES, MIN_OF.
    """

    kind: OrderKind
    column: str | None = None
    categories: tuple[str, ...] = ()
    descending: bool = False

    @classmethod
    def by_count(cls) -> "GroupOrder":
        """Largest groups first."""
        return cls(OrderKind.COUNT)

    @classmethod
    def by_avg_salary(cls) -> "GroupOrder":
        """Highest average salary first."""
        return cls(OrderKind.AVG_SALARY)

    @classmethod
    def by_key(cls, column: str | None = None, *, descending: bool = False) -> "GroupOrder":
        """Group key values (all keys when ``column`` is None)."""
        return cls(OrderKind.KEY, column=column, descending=descending)

    @classmethod
    def by_categories(
        cls, column: str, categories: Sequence[str], *, descending: bool = False
    ) -> "GroupOrder":
        """Explicit category order; unlisted values and nulls go last."""
        return cls(
            OrderKind.CATEGORIES,
            column=column,
            categories=tuple(categories),
            descending=descending,
        )

    @classmethod
    def by_min_of(cls, column: str, *, descending: bool = False) -> "GroupOrder":
        """Smallest underlying ``column`` value within each group."""
        return cls(OrderKind.MIN_OF, column=column, descending=descending)

    @property
    def helper_column(self) -> str:
        """Name of the temporary sort column this criterion needs."""
        return f"__order_{self.kind.value}_{self.column}"


def _as_frame(data: "WorkingSet | pd.DataFrame") -> pd.DataFrame:
    return data if isinstance(data, pd.DataFrame) else data.frame()


def _group_stats(
    df: pd.DataFrame, keys: list[str], min_columns: list[str], std_ddof: int
) -> pd.DataFrame:
    """Raw (unrounded) statistics per group, keys as columns."""
    df = df.assign(salary=df["salary"].astype("float64"))
    if not keys:
        salary = df["salary"]
        row: dict[str, object] = {
            "employee_count": len(df),
            "_mean": salary.mean(),
            "_std": salary.std(ddof=std_ddof),
            "min_salary": salary.min(),
            "max_salary": salary.max(),
        }
        for col in min_columns:
            row[f"_min_{col}"] = df[col].min()
        return pd.DataFrame([row])

    grouped = df.groupby(keys, dropna=False, sort=True)
    salary = grouped["salary"]
    columns: dict[str, pd.Series] = {
        "employee_count": grouped.size(),
        "_mean": salary.mean(),
        "_std": salary.std(ddof=std_ddof),
        "min_salary": salary.min(),
        "max_salary": salary.max(),
    }
    for col in min_columns:
        columns[f"_min_{col}"] = grouped[col].min()
    return pd.DataFrame(columns).reset_index()


def _sort_groups(stats: pd.DataFrame, keys: list[str], order: Sequence[GroupOrder]) -> pd.DataFrame:
    """Apply ordering criteria in priority, stably."""
    by: list[str] = []
    ascending: list[bool] = []
    for criterion in order:
        if criterion.kind is OrderKind.COUNT:
            by.append("employee_count")
            ascending.append(False)
        elif criterion.kind is OrderKind.AVG_SALARY:
            stats[criterion.helper_column] = stats["avg_salary"].astype("Float64")
            by.append(criterion.helper_column)
            ascending.append(False)
        elif criterion.kind is OrderKind.KEY:
            for col in [criterion.column] if criterion.column else keys:
                by.append(col)
                ascending.append(not criterion.descending)
        elif criterion.kind is OrderKind.CATEGORIES:
            positions = {value: i for i, value in enumerate(criterion.categories)}
            stats[criterion.helper_column] = (
                stats[criterion.column].astype("object").map(positions).astype("float64")
            )
            by.append(criterion.helper_column)
            ascending.append(not criterion.descending)
        elif criterion.kind is OrderKind.MIN_OF:
            stats[criterion.helper_column] = stats[f"_min_{criterion.column}"].astype("Float64")
            by.append(criterion.helper_column)
            ascending.append(not criterion.descending)

    if not by:
        return stats
    return stats.sort_values(by=by, ascending=ascending, kind="stable", na_position="last")


def aggregate_salaries(
    data: "WorkingSet | pd.DataFrame",
    group_by: str | Sequence[str] | None = None,
    *,
    where: RowFilter | None = None,
    count_threshold: int | None = None,
    order: Sequence[GroupOrder] = (),
    std_ddof: int = 0,
    validate: bool = True,
) -> pd.DataFrame:
    """
    Compute grouped salary statistics.

    Args:
        data: Working set (or any frame with ``salary`` and the key columns).
        group_by: Key column or composite key; None for one overall row.
        where: Row filter applied before grouping (e.g. ``not_null("salary")``).
        count_threshold: Keep only groups with ``employee_count`` strictly
            greater than this. Smaller groups are dropped, not merged.
        order: Ordering criteria, highest priority first. Without any,
            groups come out in ascending key order.
        std_ddof: 0 for population, 1 for sample standard deviation.
        validate: Whether to validate against SalaryReportSchema.

    Returns:
        New frame: key columns then the statistic columns.
    """
    df = _as_frame(data)
    if where is not None:
        df = df.loc[where(df).fillna(False).astype(bool)]

    if group_by is None:
        keys: list[str] = []
    elif isinstance(group_by, str):
        keys = [group_by]
    else:
        keys = list(group_by)

    min_columns = sorted({o.column for o in order if o.kind is OrderKind.MIN_OF and o.column})
    stats = _group_stats(df, keys, min_columns, std_ddof)

    stats["employee_count"] = stats["employee_count"].astype("int64")
    stats["avg_salary"] = round_half_away(stats.pop("_mean"))
    stats["salary_std"] = round_half_away(stats.pop("_std"))
    stats["min_salary"] = stats["min_salary"].astype("Int64")
    stats["max_salary"] = stats["max_salary"].astype("Int64")

    if count_threshold is not None:
        dropped = int((stats["employee_count"] <= count_threshold).sum())
        stats = stats.loc[stats["employee_count"] > count_threshold]
        if dropped:
            log.debug(
                "Dropped small groups",
                group_by=keys,
                dropped=dropped,
                threshold=count_threshold,
            )

    stats = _sort_groups(stats.copy(), keys, order)
    result = stats.loc[:, [*keys, *STAT_COLUMNS]].reset_index(drop=True)

    if validate:
        result = SchemaRegistry.validate(result, "salary_report")

    return result


def rank_by_avg_salary(
    report: pd.DataFrame,
    *,
    top_n: int | None = None,
    validate: bool = True,
) -> pd.DataFrame:
    """
    Add a dense ``avg_salary_rank`` (highest average = 1).

    Tied averages share a rank and the next distinct average takes the
    next integer: 90000, 90000, 80000 rank 1, 1, 2. Groups without an
    average cannot be ranked and are dropped.

    Args:
        report: Output of ``aggregate_salaries``.
        top_n: Keep only groups ranked ``<= top_n``.
        validate: Whether to validate against RankedSalaryReportSchema.

    Returns:
        New frame ordered by rank, ties by their key columns.
    """
    keys = [c for c in report.columns if c not in STAT_COLUMNS and c != RANK_COLUMN]
    ranked = report.loc[report["avg_salary"].notna()].copy()
    if len(ranked) < len(report):
        log.debug("Unranked groups without salary", count=len(report) - len(ranked))

    ranked[RANK_COLUMN] = (
        ranked["avg_salary"].astype("float64").rank(method="dense", ascending=False).astype("int64")
    )
    if top_n is not None:
        ranked = ranked.loc[ranked[RANK_COLUMN] <= top_n]

    ranked = ranked.sort_values(by=[RANK_COLUMN, *keys], kind="stable", na_position="last")
    result = ranked.reset_index(drop=True)

    if validate:
        result = SchemaRegistry.validate(result, "salary_report_ranked")

    return result
