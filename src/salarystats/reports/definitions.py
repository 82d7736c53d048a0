"""
Declarative report definitions.

Each standard report is a grouping, an optional row filter, whether the
minimum group size applies and an ordering. Definitions are data; the
statistics come from ``aggregate_salaries``.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

import pandas as pd

from salarystats.config.settings import ReportConfig
from salarystats.reports.aggregate import (
    GroupOrder,
    RowFilter,
    aggregate_salaries,
    not_null,
    rank_by_avg_salary,
)
from salarystats.reports.bands import age_band_labels
from salarystats.utils.logging import get_logger

if TYPE_CHECKING:
    from salarystats.etl.working_set import WorkingSet

log = get_logger(__name__)


def _with_age_group(df: pd.DataFrame, config: ReportConfig) -> pd.DataFrame:
    """Add the derived ``age_group`` key."""
    return df.assign(age_group=age_band_labels(df["age"], config.age_bands))


@dataclass(frozen=True)
class ReportDefinition:
    """
    Definition of one aggregate report.

    Attributes:
        name: Report name (also the export file stem).
        group_by: Grouping key columns; empty for a single overall row.
        description: Human-readable description.
        where: Row filter applied before grouping.
        thresholded: Whether groups must exceed ``count_threshold`` rows.
        order: Builds the ordering criteria from the report configuration.
        ranked: Whether to add a dense ``avg_salary_rank``.
        derive: Adds derived key columns before grouping.
    """

    name: str
    group_by: tuple[str, ...]
    description: str = ""
    where: RowFilter | None = None
    thresholded: bool = False
    order: Callable[[ReportConfig], tuple[GroupOrder, ...]] = lambda _config: ()
    ranked: bool = False
    derive: Callable[[pd.DataFrame, ReportConfig], pd.DataFrame] | None = None


STANDARD_REPORTS: list[ReportDefinition] = [
    ReportDefinition(
        name="salary_overall",
        group_by=(),
        description="Salary statistics over every row with a salary",
        where=not_null("salary"),
    ),
    ReportDefinition(
        name="salary_by_gender",
        group_by=("gender",),
        description="Salary statistics per gender, largest groups first",
        where=not_null("salary"),
        thresholded=True,
        order=lambda _config: (GroupOrder.by_count(),),
    ),
    ReportDefinition(
        name="education_by_gender",
        group_by=("gender", "education_level"),
        description="Education distribution within each gender",
        thresholded=True,
        order=lambda _config: (GroupOrder.by_key("gender"), GroupOrder.by_count()),
    ),
    ReportDefinition(
        name="salary_by_education",
        group_by=("education_level",),
        description="Salary statistics per education level, highest level first",
        where=not_null("salary", "education_level"),
        order=lambda config: (
            GroupOrder.by_categories(
                "education_level", config.education_order, descending=True
            ),
        ),
    ),
    ReportDefinition(
        name="salary_by_experience",
        group_by=("years_of_experience",),
        description="Salary statistics per year of experience",
        where=not_null("salary"),
        order=lambda _config: (GroupOrder.by_key(),),
    ),
    ReportDefinition(
        name="salary_by_job_title",
        group_by=("job_title",),
        description="Salary statistics per job title, best paid first",
        where=not_null("salary"),
        thresholded=True,
        order=lambda _config: (GroupOrder.by_avg_salary(), GroupOrder.by_key()),
    ),
    ReportDefinition(
        name="job_title_salary_rank",
        group_by=("job_title",),
        description="Job titles ranked by average salary",
        where=not_null("salary"),
        thresholded=True,
        ranked=True,
    ),
    ReportDefinition(
        name="salary_by_age",
        group_by=("age",),
        description="Salary statistics per age",
        where=not_null("salary"),
        thresholded=True,
        order=lambda _config: (GroupOrder.by_key(),),
    ),
    ReportDefinition(
        name="salary_by_age_group",
        group_by=("age_group",),
        description="Salary statistics per age band, youngest band first",
        where=not_null("salary"),
        order=lambda _config: (GroupOrder.by_min_of("age"),),
        derive=_with_age_group,
    ),
]


def get_report(name: str) -> ReportDefinition:
    """
    Get a standard report definition by name.

    Raises:
        KeyError: If no report has that name.
    """
    for definition in STANDARD_REPORTS:
        if definition.name == name:
            return definition
    available = ", ".join(d.name for d in STANDARD_REPORTS)
    msg = f"Unknown report '{name}'. Available: {available}"
    raise KeyError(msg)


def build_report(
    definition: ReportDefinition,
    data: "WorkingSet | pd.DataFrame",
    config: ReportConfig | None = None,
) -> pd.DataFrame:
    """
    Compute one report from the working set.

    Args:
        definition: What to compute.
        data: Working set (or a frame shaped like one).
        config: Report configuration (defaults if omitted).

    Returns:
        Report table.
    """
    config = config or ReportConfig()
    df = data if isinstance(data, pd.DataFrame) else data.frame()
    if definition.derive is not None:
        df = definition.derive(df, config)

    report = aggregate_salaries(
        df,
        list(definition.group_by) or None,
        where=definition.where,
        count_threshold=config.count_threshold if definition.thresholded else None,
        order=definition.order(config),
        std_ddof=config.std_convention.ddof,
    )
    if definition.ranked:
        report = rank_by_avg_salary(report, top_n=config.top_n)
    return report


def build_reports(
    working_set: "WorkingSet",
    config: ReportConfig | None = None,
    definitions: list[ReportDefinition] | None = None,
) -> dict[str, pd.DataFrame]:
    """
    Compute every standard report.

    Args:
        working_set: Analysis snapshot (never modified).
        config: Report configuration (defaults if omitted).
        definitions: Reports to compute (defaults to STANDARD_REPORTS).

    Returns:
        Mapping from report name to table, in definition order.
    """
    config = config or ReportConfig()
    reports: dict[str, pd.DataFrame] = {}
    for definition in definitions or STANDARD_REPORTS:
        reports[definition.name] = build_report(definition, working_set, config)
        log.debug(
            "Built report",
            report=definition.name,
            groups=len(reports[definition.name]),
        )
    log.info("Built reports", count=len(reports))
    return reports
