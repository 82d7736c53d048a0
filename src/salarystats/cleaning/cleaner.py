"""
Salary table cleaner.

Runs the cleaning steps in their fixed order over a normalized table and
records what each step changed.
"""

from dataclasses import dataclass, field

import pandas as pd

from salarystats.cleaning.rules import RewriteRules
from salarystats.cleaning.steps import (
    CLEANING_STEPS,
    blank_to_null,
    implausible_experience_rows,
    remove_implausible_experience,
    salary_inspection,
    suppress_salary_floor,
    trim_job_titles,
    unify_education,
    unify_job_titles,
)
from salarystats.config.settings import CleaningConfig
from salarystats.schemas.registry import SchemaRegistry
from salarystats.schemas.salary import EDUCATION_LEVELS, STRING_COLUMNS
from salarystats.utils.logging import get_logger

log = get_logger(__name__)


def _count_changed(before: pd.Series, after: pd.Series) -> int:
    """Number of positions whose value (or nullness) differs."""
    null_changed = before.isna().to_numpy() != after.isna().to_numpy()
    value_changed = (before != after).fillna(False).astype(bool).to_numpy()
    return int((null_changed | value_changed).sum())


@dataclass
class CleaningReport:
    """
    What the cleaner did to one table.

    Attributes:
        rows_in: Rows before cleaning.
        rows_out: Rows after cleaning.
        blanks_nulled: Per text column, values turned from blank to null.
        education_rewritten: Education values rewritten to a canonical label.
        job_titles_trimmed: Job titles that had surrounding whitespace.
        job_titles_rewritten: Job titles rewritten to a canonical spelling.
        rows_removed: Rows deleted for implausible experience.
        salaries_suppressed: Salaries set to null for being below the floor.
        removed_rows: The deleted rows with their experience limit.
        salary_outliers: Rows below the floor or above the inspection
            ceiling, captured before suppression.
        unmapped_education: Surviving education values outside the
            canonical levels, with counts.
    """

    rows_in: int
    rows_out: int = 0
    blanks_nulled: dict[str, int] = field(default_factory=dict)
    education_rewritten: int = 0
    job_titles_trimmed: int = 0
    job_titles_rewritten: int = 0
    rows_removed: int = 0
    salaries_suppressed: int = 0
    removed_rows: pd.DataFrame | None = None
    salary_outliers: pd.DataFrame | None = None
    unmapped_education: dict[str, int] = field(default_factory=dict)

    @property
    def retained_ratio(self) -> float:
        """Share of input rows that survived cleaning."""
        if self.rows_in == 0:
            return 0.0
        return self.rows_out / self.rows_in

    def as_dict(self) -> dict[str, object]:
        """Scalar summary (no frames), suitable for JSON."""
        return {
            "rows_in": self.rows_in,
            "rows_out": self.rows_out,
            "blanks_nulled": dict(self.blanks_nulled),
            "education_rewritten": self.education_rewritten,
            "job_titles_trimmed": self.job_titles_trimmed,
            "job_titles_rewritten": self.job_titles_rewritten,
            "rows_removed": self.rows_removed,
            "salaries_suppressed": self.salaries_suppressed,
            "salary_outliers": 0 if self.salary_outliers is None else len(self.salary_outliers),
            "unmapped_education": dict(self.unmapped_education),
        }


@dataclass
class CleaningResult:
    """Cleaned staging table plus the report describing how it was made."""

    data: pd.DataFrame
    report: CleaningReport


class SalaryCleaner:
    """
    Applies the cleaning policy to a normalized salary table.

    Rule sets are validated on construction, so an inconsistent
    configuration fails before any data is touched.
    """

    def __init__(self, config: CleaningConfig | None = None) -> None:
        """
        Initialize cleaner.

        Args:
            config: Cleaning configuration (defaults if omitted).

        Raises:
            ConfigurationError: If a rewrite map is inconsistent.
        """
        self.config = config or CleaningConfig()
        self.education_rules = RewriteRules.build(
            "education_level",
            "education_level",
            self.config.education_rewrites,
            allowed_targets=EDUCATION_LEVELS,
            require_trimmed=True,
        )
        self.job_title_rules = RewriteRules.build(
            "job_title",
            "job_title",
            self.config.job_title_rewrites,
            require_trimmed=True,
        )

    def clean(self, df: pd.DataFrame, *, validate: bool = True) -> CleaningResult:
        """
        Run every cleaning step in order.

        Args:
            df: Normalized table (never modified).
            validate: Whether to validate the result against the staging schema.

        Returns:
            CleaningResult with the staging table and a CleaningReport.
        """
        cfg = self.config
        report = CleaningReport(rows_in=len(df))
        log.info(
            "Cleaning salary table",
            rows=len(df),
            steps=[step.name for step in CLEANING_STEPS],
        )

        # Step 1: blanks -> null
        stage = blank_to_null(df)
        for col in STRING_COLUMNS:
            report.blanks_nulled[col] = _count_changed(df[col], stage[col])
        log.debug("Blank values nulled", **report.blanks_nulled)

        # Step 2: education categories
        before = stage["education_level"]
        stage = unify_education(stage, self.education_rules)
        report.education_rewritten = _count_changed(before, stage["education_level"])

        # Step 3: job title whitespace
        before = stage["job_title"]
        stage = trim_job_titles(stage)
        report.job_titles_trimmed = _count_changed(before, stage["job_title"])

        # Step 4: job title variants
        before = stage["job_title"]
        stage = unify_job_titles(stage, self.job_title_rules)
        report.job_titles_rewritten = _count_changed(before, stage["job_title"])

        # Step 5: implausible experience (hard delete)
        report.removed_rows = implausible_experience_rows(stage, cfg.min_working_age)
        stage = remove_implausible_experience(stage, cfg.min_working_age)
        report.rows_removed = len(report.removed_rows)
        if report.rows_removed:
            log.info(
                "Removed rows with implausible experience",
                count=report.rows_removed,
                row_ids=report.removed_rows["row_id"].tolist()[:20],
            )

        # Step 6: salary floor (null out, keep row)
        report.salary_outliers = salary_inspection(
            stage, cfg.salary_floor, cfg.salary_inspect_ceiling
        )
        before = stage["salary"]
        stage = suppress_salary_floor(stage, cfg.salary_floor)
        report.salaries_suppressed = _count_changed(before, stage["salary"])

        above = int((report.salary_outliers["salary"] > cfg.salary_inspect_ceiling).sum())
        if above:
            log.warning(
                "Salaries above inspection ceiling kept",
                count=above,
                ceiling=cfg.salary_inspect_ceiling,
            )

        education = stage["education_level"].dropna()
        unmapped = education[~education.isin(EDUCATION_LEVELS)]
        report.unmapped_education = {
            str(k): int(v) for k, v in unmapped.value_counts().items()
        }
        if report.unmapped_education:
            log.warning(
                "Education values outside canonical levels left unchanged",
                values=report.unmapped_education,
            )

        if validate:
            stage = SchemaRegistry.validate(stage, "salary_staging")

        report.rows_out = len(stage)
        log.info(
            "Cleaning complete",
            rows_in=report.rows_in,
            rows_out=report.rows_out,
            removed=report.rows_removed,
            salaries_suppressed=report.salaries_suppressed,
            education_rewritten=report.education_rewritten,
            job_titles_rewritten=report.job_titles_rewritten,
        )

        return CleaningResult(data=stage, report=report)


def clean_salary_table(
    df: pd.DataFrame, config: CleaningConfig | None = None
) -> CleaningResult:
    """
    Convenience function to clean a normalized table.

    Args:
        df: Normalized salary table.
        config: Cleaning configuration (defaults if omitted).

    Returns:
        CleaningResult with staging table and report.
    """
    return SalaryCleaner(config).clean(df)
