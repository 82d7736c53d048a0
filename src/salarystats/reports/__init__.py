"""
Aggregate salary reports.

Grouped statistics over the working set, the standard report set and
export to CSV/JSON.
"""

from salarystats.reports.aggregate import (
    GroupOrder,
    OrderKind,
    aggregate_salaries,
    not_null,
    rank_by_avg_salary,
)
from salarystats.reports.bands import age_band_labels, assign_age_band
from salarystats.reports.definitions import (
    STANDARD_REPORTS,
    ReportDefinition,
    build_report,
    build_reports,
    get_report,
)
from salarystats.reports.export import (
    export_reports,
    export_working_set,
    report_records,
    write_manifest,
)
from salarystats.reports.profile import TableProfile, profile_table

__all__ = [
    "STANDARD_REPORTS",
    "GroupOrder",
    "OrderKind",
    "ReportDefinition",
    "TableProfile",
    "age_band_labels",
    "aggregate_salaries",
    "assign_age_band",
    "build_report",
    "build_reports",
    "export_reports",
    "export_working_set",
    "get_report",
    "not_null",
    "profile_table",
    "rank_by_avg_salary",
    "report_records",
    "write_manifest",
]
