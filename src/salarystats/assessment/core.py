"""
Core assessment logic for the working set.

Re-checks the cleaning guarantees on the analysis snapshot, so a changed
rule set or a hand-edited staging table cannot silently reach the reports.
"""

from dataclasses import dataclass, field
from enum import Enum

import pandas as pd

from salarystats.cleaning.cleaner import CleaningReport
from salarystats.cleaning.steps import implausible_experience_mask
from salarystats.config.settings import PipelineConfig
from salarystats.etl.working_set import WorkingSet
from salarystats.schemas.salary import EDUCATION_LEVELS, STRING_COLUMNS
from salarystats.utils.logging import get_logger

log = get_logger(__name__)


class CheckStatus(Enum):
    """Status of an individual check."""

    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"
    SKIP = "skip"


@dataclass
class CheckResult:
    """
    Result of a single assessment check.

    Attributes:
        name: Check name.
        status: Pass/warn/fail/skip.
        message: Human-readable description.
        details: Optional additional details.
        n_checked: Number of rows checked.
        n_passed: Number of rows passing.
        n_failed: Number of rows failing.
        sample_failures: Sample of failing rows for debugging.
    """

    name: str
    status: CheckStatus
    message: str
    details: str | None = None
    n_checked: int = 0
    n_passed: int = 0
    n_failed: int = 0
    sample_failures: pd.DataFrame | None = None


@dataclass
class AssessmentResult:
    """
    Result of a full working-set assessment.

    Attributes:
        source: Input file the working set was built from.
        checks: List of individual check results.
    """

    source: str
    checks: list[CheckResult] = field(default_factory=list)

    @property
    def overall_status(self) -> CheckStatus:
        """Determine overall status from individual checks."""
        if any(c.status == CheckStatus.FAIL for c in self.checks):
            return CheckStatus.FAIL
        if any(c.status == CheckStatus.WARN for c in self.checks):
            return CheckStatus.WARN
        if all(c.status == CheckStatus.SKIP for c in self.checks):
            return CheckStatus.SKIP
        return CheckStatus.PASS

    @property
    def n_passed(self) -> int:
        """Count checks that passed."""
        return sum(1 for c in self.checks if c.status == CheckStatus.PASS)

    @property
    def n_failed(self) -> int:
        """Count checks that failed."""
        return sum(1 for c in self.checks if c.status == CheckStatus.FAIL)

    @property
    def n_warned(self) -> int:
        """Count checks with warnings."""
        return sum(1 for c in self.checks if c.status == CheckStatus.WARN)

    def get(self, name: str) -> CheckResult:
        """
        Get a check result by name.

        Raises:
            KeyError: If no check has that name.
        """
        for check in self.checks:
            if check.name == name:
                return check
        msg = f"Unknown check '{name}'"
        raise KeyError(msg)


class AssessmentRunner:
    """
    Runs invariant checks against a working set.

    Hard guarantees (unique ids, trimmed text, plausible experience,
    salary floor, row accounting) fail on any violation. Policy gaps
    (education values outside the canonical levels, salaries above the
    inspection ceiling) only warn.
    """

    SAMPLE_SIZE = 10

    def __init__(self, config: PipelineConfig) -> None:
        """
        Initialize assessment runner.

        Args:
            config: Pipeline configuration (cleaning thresholds and rules).
        """
        self.config = config

    def run(
        self,
        working_set: WorkingSet,
        cleaning: CleaningReport | None = None,
    ) -> AssessmentResult:
        """
        Run the full assessment suite.

        Args:
            working_set: Snapshot to check (never modified).
            cleaning: Cleaning report for row accounting (skipped if None).

        Returns:
            AssessmentResult with all check results.
        """
        log.info("Starting working set assessment", rows=len(working_set))
        df = working_set.frame()
        result = AssessmentResult(source=str(self.config.input_path))

        result.checks.append(self._check_row_ids(df))
        result.checks.append(self._check_blank_text(df))
        result.checks.append(self._check_education_vocabulary(df))
        result.checks.append(self._check_job_titles(df))
        result.checks.append(self._check_experience(df))
        result.checks.append(self._check_salary_floor(df))
        result.checks.append(self._check_salary_ceiling(df))
        result.checks.append(self._check_row_accounting(df, cleaning))

        log.info(
            "Assessment complete",
            overall=result.overall_status.value,
            passed=result.n_passed,
            failed=result.n_failed,
            warned=result.n_warned,
        )

        return result

    def _from_mask(
        self,
        name: str,
        df: pd.DataFrame,
        failing: pd.Series,
        *,
        ok_message: str,
        fail_message: str,
        fail_status: CheckStatus = CheckStatus.FAIL,
        checked: pd.Series | None = None,
    ) -> CheckResult:
        """Build a CheckResult from a boolean mask of failing rows."""
        failing = failing.fillna(False).astype(bool)
        n_checked = int(checked.sum()) if checked is not None else len(df)
        n_failed = int(failing.sum())
        if n_failed == 0:
            return CheckResult(
                name=name,
                status=CheckStatus.PASS,
                message=ok_message,
                n_checked=n_checked,
                n_passed=n_checked,
            )
        return CheckResult(
            name=name,
            status=fail_status,
            message=fail_message.format(n=n_failed),
            n_checked=n_checked,
            n_passed=n_checked - n_failed,
            n_failed=n_failed,
            sample_failures=df.loc[failing].head(self.SAMPLE_SIZE),
        )

    def _check_row_ids(self, df: pd.DataFrame) -> CheckResult:
        """row_id is populated and unique."""
        ids = df["row_id"]
        failing = ids.isna() | ids.duplicated(keep=False)
        return self._from_mask(
            "row_id_unique",
            df,
            failing,
            ok_message="Every row has a unique row_id",
            fail_message="{n} rows with missing or duplicate row_id",
        )

    def _check_blank_text(self, df: pd.DataFrame) -> CheckResult:
        """No text column holds an empty or whitespace-only value."""
        failing = pd.Series(False, index=df.index)
        for col in STRING_COLUMNS:
            values = df[col].astype("object")
            blank = values.map(lambda v: isinstance(v, str) and v.strip() == "")
            failing |= blank.astype(bool)
        return self._from_mask(
            "no_blank_text",
            df,
            failing,
            ok_message="No blank text values",
            fail_message="{n} rows with blank text instead of null",
        )

    def _check_education_vocabulary(self, df: pd.DataFrame) -> CheckResult:
        """Education values are canonical; leftover rewrite variants fail."""
        education = df["education_level"]
        present = education.notna()
        variants = set(self.config.cleaning.education_rewrites)

        leftover = present & education.isin(variants)
        if leftover.any():
            return self._from_mask(
                "education_vocabulary",
                df,
                leftover,
                ok_message="",
                fail_message="{n} rows still carry a rewritable education variant",
                checked=present,
            )

        unmapped = present & ~education.isin(EDUCATION_LEVELS)
        check = self._from_mask(
            "education_vocabulary",
            df,
            unmapped,
            ok_message="All education values are canonical levels",
            fail_message="{n} rows with an education value outside the canonical levels",
            fail_status=CheckStatus.WARN,
            checked=present,
        )
        if check.status == CheckStatus.WARN:
            values = sorted(education.loc[unmapped].astype(str).unique())
            check.details = f"Unmapped values: {', '.join(values)}"
        return check

    def _check_job_titles(self, df: pd.DataFrame) -> CheckResult:
        """Job titles are trimmed and no rewrite variant survives."""
        titles = df["job_title"]
        present = titles.notna()
        text = titles.astype("object")
        untrimmed = text.map(lambda v: isinstance(v, str) and v != v.strip()).astype(bool)
        leftover = present & titles.isin(set(self.config.cleaning.job_title_rewrites))
        return self._from_mask(
            "job_titles_clean",
            df,
            untrimmed | leftover,
            ok_message="Job titles are trimmed and unified",
            fail_message="{n} job titles untrimmed or not unified",
            checked=present,
        )

    def _check_experience(self, df: pd.DataFrame) -> CheckResult:
        """No row claims experience starting before the minimum working age."""
        min_age = self.config.cleaning.min_working_age
        checked = df["age"].notna() & df["years_of_experience"].notna()
        failing = implausible_experience_mask(df, min_age)
        return self._from_mask(
            "experience_plausible",
            df,
            failing,
            ok_message=f"Experience never starts before age {min_age}",
            fail_message=f"{{n}} rows with experience starting before age {min_age}",
            checked=checked,
        )

    def _check_salary_floor(self, df: pd.DataFrame) -> CheckResult:
        """No retained salary is below the floor."""
        floor = self.config.cleaning.salary_floor
        salary = df["salary"]
        return self._from_mask(
            "salary_floor",
            df,
            salary < floor,
            ok_message=f"No salary below {floor}",
            fail_message=f"{{n}} salaries below {floor}",
            checked=salary.notna(),
        )

    def _check_salary_ceiling(self, df: pd.DataFrame) -> CheckResult:
        """Salaries above the inspection ceiling are flagged, not failed."""
        ceiling = self.config.cleaning.salary_inspect_ceiling
        salary = df["salary"]
        return self._from_mask(
            "salary_ceiling",
            df,
            salary > ceiling,
            ok_message=f"No salary above {ceiling}",
            fail_message=f"{{n}} salaries above {ceiling} kept for inspection",
            fail_status=CheckStatus.WARN,
            checked=salary.notna(),
        )

    def _check_row_accounting(
        self, df: pd.DataFrame, cleaning: CleaningReport | None
    ) -> CheckResult:
        """Working rows = input rows - deleted rows."""
        if cleaning is None:
            return CheckResult(
                name="row_accounting",
                status=CheckStatus.SKIP,
                message="No cleaning report available",
            )
        expected = cleaning.rows_in - cleaning.rows_removed
        if len(df) == expected:
            return CheckResult(
                name="row_accounting",
                status=CheckStatus.PASS,
                message=f"{cleaning.rows_in} in, {cleaning.rows_removed} removed, {len(df)} kept",
                n_checked=len(df),
                n_passed=len(df),
            )
        return CheckResult(
            name="row_accounting",
            status=CheckStatus.FAIL,
            message=f"Expected {expected} rows, working set has {len(df)}",
            details=f"rows_in={cleaning.rows_in}, rows_removed={cleaning.rows_removed}",
            n_checked=len(df),
            n_failed=abs(len(df) - expected),
        )
