"""
Salary pipeline implementation.

Runs the stages in order: load, normalize, clean, snapshot, report and
export. Every stage returns a new table; nothing is shared between stages
except through their return values.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pandas as pd

from salarystats import __version__
from salarystats.cleaning.cleaner import CleaningReport, SalaryCleaner
from salarystats.config.settings import PipelineConfig
from salarystats.etl.working_set import WorkingSet, build_working_set
from salarystats.ingestion.salary import load_salary_dataset
from salarystats.normalization.normalizer import normalize_schema
from salarystats.reports.definitions import build_reports
from salarystats.reports.export import export_reports, export_working_set, write_manifest
from salarystats.reports.profile import TableProfile, profile_table
from salarystats.schemas.registry import DataRole, SchemaRegistry
from salarystats.utils.logging import get_logger, log_context, log_stage

log = get_logger(__name__)


@dataclass
class PipelineResult:
    """
    Result of a pipeline run.

    Attributes:
        working_set: Read-only analysis snapshot.
        reports: Report name to table, in definition order.
        cleaning: What the cleaner did.
        profiles: Profiles of the raw, staging and working tables.
        output_dir: Directory written to (None when nothing was exported).
        written: Paths of every file written.
    """

    working_set: WorkingSet
    reports: dict[str, pd.DataFrame]
    cleaning: CleaningReport
    profiles: dict[str, TableProfile] = field(default_factory=dict)
    output_dir: Path | None = None
    written: list[Path] = field(default_factory=list)

    @property
    def row_counts(self) -> dict[str, int]:
        """Rows per stage (raw, staging, working)."""
        return {name: p.row_count for name, p in self.profiles.items()}

    def manifest(self) -> dict[str, Any]:
        """Run summary for the JSON manifest."""
        return {
            "version": __version__,
            "schema_version": SchemaRegistry.registry_version(),
            "schemas": {role.value: SchemaRegistry.list_by_role(role) for role in DataRole},
            "created_at": datetime.now(UTC).isoformat(),
            "row_counts": self.row_counts,
            "row_ids_rederived": self.working_set.row_ids_rederived,
            "cleaning": self.cleaning.as_dict(),
            "reports": {name: len(report) for name, report in self.reports.items()},
            "profiles": {name: p.as_dict() for name, p in self.profiles.items()},
        }


class SalaryPipeline:
    """
    End-to-end salary cleaning and reporting pipeline.

    Loads the raw file, normalizes and cleans it into the staging table,
    snapshots the working set and computes the standard reports.
    """

    def __init__(self, config: PipelineConfig) -> None:
        """
        Initialize pipeline.

        Args:
            config: Pipeline configuration.

        Raises:
            ConfigurationError: If the cleaning rewrite maps are inconsistent.
        """
        self.config = config
        self.cleaner = SalaryCleaner(config.cleaning)

    def build(self) -> PipelineResult:
        """
        Run every stage up to and including the reports, without writing.

        Returns:
            PipelineResult with no written paths.
        """
        config = self.config
        with log_context(project=config.project, source=config.input_path.name):
            with log_stage("load", path=str(config.input_path)):
                raw = load_salary_dataset(config)

            with log_stage("normalize"):
                normalized = normalize_schema(raw)

            with log_stage("clean", rows=len(normalized)):
                cleaned = self.cleaner.clean(normalized)

            with log_stage("working_set"):
                working_set = build_working_set(cleaned.data)

            with log_stage("reports", rows=len(working_set)):
                reports = build_reports(working_set, config.reports)

            profiles = {
                "salary_raw": profile_table(normalized, "salary_raw"),
                "salary_stg": profile_table(cleaned.data, "salary_stg"),
                "salary_wrk": profile_table(working_set.snapshot, "salary_wrk"),
            }
            log.info(
                "Pipeline stages complete",
                **{name: p.row_count for name, p in profiles.items()},
            )

        return PipelineResult(
            working_set=working_set,
            reports=reports,
            cleaning=cleaned.report,
            profiles=profiles,
        )

    def run(self, output_dir: Path | None = None) -> PipelineResult:
        """
        Run the full pipeline and export its outputs.

        Args:
            output_dir: Where to write (defaults to ``config.output_dir``).
                Reports go to ``<output_dir>/reports``.

        Returns:
            PipelineResult including the written paths.
        """
        result = self.build()
        output_dir = output_dir or self.config.output_dir

        with (
            log_context(project=self.config.project),
            log_stage("export", output_dir=str(output_dir)),
        ):
            written = export_reports(
                result.reports, output_dir / "reports", self.config.output.formats
            )
            written.append(export_working_set(result.working_set, output_dir))
            written.append(write_manifest(result.manifest(), output_dir))

        result.output_dir = output_dir
        result.written = written
        log.info("Pipeline complete", output_dir=str(output_dir), files=len(written))
        return result


def run_pipeline(config: PipelineConfig, output_dir: Path | None = None) -> PipelineResult:
    """
    Convenience function to run the pipeline.

    Args:
        config: Pipeline configuration.
        output_dir: Optional output directory override.

    Returns:
        PipelineResult.
    """
    return SalaryPipeline(config).run(output_dir)
