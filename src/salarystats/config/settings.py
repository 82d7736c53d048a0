"""
Typed configuration models using Pydantic.

All configuration is defined here with explicit typing and validation.
Cleaning thresholds and rewrite maps live in config, never in processing code.
"""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from salarystats.schemas.salary import EDUCATION_LEVELS
from salarystats.utils.logging import LOG_LEVELS

DEFAULT_EDUCATION_REWRITES: dict[str, str] = {
    "Bachelor's Degree": "Bachelor's",
    "Master's Degree": "Master's",
}

# Only unambiguous typo/abbreviation fixes; the long tail is left alone
DEFAULT_JOB_TITLE_REWRITES: dict[str, str] = {
    "Juniour HR Coordinator": "Junior HR Coordinator",
    "Juniour HR Generalist": "Junior HR Generalist",
    "Social Media Man": "Social Media Manager",
    "Customer Service Rep": "Customer Service Representative",
    "Customer Success Rep": "Customer Success Representative",
    "Back end Developer": "Back-End Developer",
    "Front end Developer": "Front-End Developer",
}


class StdConvention(str, Enum):
    """Standard deviation convention for salary_std."""

    POPULATION = "population"  # ddof=0, what SQL STD()/STDDEV_POP() returns
    SAMPLE = "sample"  # ddof=1

    @property
    def ddof(self) -> int:
        """Delta degrees of freedom for pandas/numpy."""
        return 0 if self is StdConvention.POPULATION else 1


class ExportFormat(str, Enum):
    """File formats for report export."""

    CSV = "csv"
    JSON = "json"


class AgeBand(BaseModel):
    """
    Closed age interval with a display label.

    The label carries an ordering prefix so BI tools that sort by text
    still show bands in age order; the pipeline itself sorts by ``lower``.
    """

    model_config = ConfigDict(frozen=True)

    label: str = Field(description="Display label, e.g. '2) Young Adults (25–34)'")
    lower: int = Field(ge=0, description="Lowest age in the band (inclusive)")
    upper: int = Field(ge=0, description="Highest age in the band (inclusive)")

    @model_validator(mode="after")
    def validate_bounds(self) -> "AgeBand":
        """Ensure lower <= upper."""
        if self.lower > self.upper:
            msg = f"Age band {self.label!r}: lower {self.lower} > upper {self.upper}"
            raise ValueError(msg)
        return self

    def contains(self, age: int) -> bool:
        """Whether ``age`` falls within the band."""
        return self.lower <= age <= self.upper


DEFAULT_AGE_BANDS: list[AgeBand] = [
    AgeBand(label="1) Youth (21–24)", lower=21, upper=24),
    AgeBand(label="2) Young Adults (25–34)", lower=25, upper=34),
    AgeBand(label="3) Adults (35–44)", lower=35, upper=44),
    AgeBand(label="4) Middle-aged (45–62)", lower=45, upper=62),
]


class DataConfig(BaseModel):
    """Input file configuration."""

    model_config = ConfigDict(frozen=True)

    input_path: Path = Field(description="Path to the raw salary CSV")
    delimiter: str = Field(default=",", min_length=1, max_length=1)
    encoding: str = Field(default="utf-8-sig", description="Source text encoding")


class CleaningConfig(BaseModel):
    """Cleaning policy thresholds and rewrite maps."""

    model_config = ConfigDict(frozen=True)

    min_working_age: int = Field(
        default=16,
        ge=0,
        description="Experience may not start before this age",
    )
    salary_floor: int = Field(
        default=10_000,
        ge=0,
        description="Salaries below this are suppressed to null",
    )
    salary_inspect_ceiling: int = Field(
        default=500_000,
        ge=0,
        description="Salaries above this are reported for inspection, not removed",
    )
    education_rewrites: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_EDUCATION_REWRITES),
        description="Exact education_level variant -> canonical level",
    )
    job_title_rewrites: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_JOB_TITLE_REWRITES),
        description="Exact job_title variant -> canonical title",
    )


class ReportConfig(BaseModel):
    """Aggregate report configuration."""

    model_config = ConfigDict(frozen=True)

    count_threshold: int = Field(
        default=20,
        ge=0,
        description="Groups need strictly more rows than this to be reported",
    )
    std_convention: StdConvention = Field(default=StdConvention.POPULATION)
    top_n: int | None = Field(
        default=None,
        ge=1,
        description="Keep only ranks <= top_n in ranked reports (None = all)",
    )
    education_order: list[str] = Field(
        default_factory=lambda: list(EDUCATION_LEVELS),
        description="Natural order of education levels, lowest first",
    )
    age_bands: list[AgeBand] = Field(
        default_factory=lambda: list(DEFAULT_AGE_BANDS),
        min_length=1,
    )

    @field_validator("age_bands")
    @classmethod
    def validate_age_bands(cls, v: list[AgeBand]) -> list[AgeBand]:
        """Ensure age bands do not overlap."""
        ordered = sorted(v, key=lambda band: band.lower)
        for previous, current in zip(ordered, ordered[1:], strict=False):
            if current.lower <= previous.upper:
                msg = f"Age bands overlap: {previous.label!r} and {current.label!r}"
                raise ValueError(msg)
        return v

    @field_validator("education_order")
    @classmethod
    def validate_education_order(cls, v: list[str]) -> list[str]:
        """Ensure education order has no duplicates."""
        if len(set(v)) != len(v):
            msg = f"education_order contains duplicates: {v}"
            raise ValueError(msg)
        return v


class OutputConfig(BaseModel):
    """Output paths configuration.

    Structure: {output_root}/{project}/reports, {output_root}/{project}/salary_wrk.csv
    """

    model_config = ConfigDict(frozen=True)

    output_root: Path = Field(
        default=Path("./output"), description="Root directory for all outputs"
    )
    formats: list[ExportFormat] = Field(
        default_factory=lambda: [ExportFormat.CSV, ExportFormat.JSON],
        min_length=1,
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(frozen=True)

    level: str = Field(default="INFO")
    json_output: bool = Field(default=False)

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Normalize the level name and reject unknown ones."""
        level = v.upper()
        if level not in LOG_LEVELS:
            msg = f"Unknown log level '{v}', expected one of {list(LOG_LEVELS)}"
            raise ValueError(msg)
        return level


class PipelineConfig(BaseModel):
    """Complete pipeline configuration.

    The project name drives the output directory: ./output/{project}/
    """

    model_config = ConfigDict(frozen=True)

    project: str = Field(default="salary", min_length=1)
    data: DataConfig
    cleaning: CleaningConfig = Field(default_factory=CleaningConfig)
    reports: ReportConfig = Field(default_factory=ReportConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def input_path(self) -> Path:
        """Convenience accessor for the input file."""
        return self.data.input_path

    @property
    def output_dir(self) -> Path:
        """Path to this project's output directory."""
        return self.output.output_root / self.project

    @property
    def reports_dir(self) -> Path:
        """Path to report tables."""
        return self.output_dir / "reports"
