"""
Salary pipeline orchestration.

Builds the read-only working set from the cleaned staging table and runs
the stages end to end.
"""

from salarystats.etl.pipeline import PipelineResult, SalaryPipeline, run_pipeline
from salarystats.etl.working_set import WorkingSet, build_working_set, row_ids_intact

__all__ = [
    "PipelineResult",
    "SalaryPipeline",
    "WorkingSet",
    "build_working_set",
    "row_ids_intact",
    "run_pipeline",
]
