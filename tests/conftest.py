"""Pytest configuration and shared fixtures."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd
import pytest

from salarystats.config import PipelineConfig, default_config

RecordRow = tuple[Any, Any, Any, Any, Any, Any]

# Header with a cp1251-decoded byte-order mark in front of "Age"
SAMPLE_CSV = """\
п»їAge,Gender,Education Level,Job Title,Years of Experience,Salary
32,Male,Bachelor's,Software Engineer,5,90000
28,Female,Master's Degree,Data Analyst,3,65000
45,Male,PhD,Senior Manager,15,150000
36,Female,Bachelor's Degree, Sales Associate ,7,60000
52,Male,Master's,Director,20,200000
29,  ,Bachelor's,Juniour HR Coordinator,2,40000
25,Female,High School,Sales Associate,15,35000
42,Male,Master's,Marketing Manager,12,350
31,Female,phD,Data Analyst,4,
"""


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def make_records() -> Callable[..., pd.DataFrame]:
    """
    Build a typed, keyed record table.

    Rows are (age, gender, education_level, job_title,
    years_of_experience, salary); None marks a null.
    """

    def _make(rows: list[RecordRow], row_ids: list[int] | None = None) -> pd.DataFrame:
        columns = [list(col) for col in zip(*rows, strict=True)] if rows else [[]] * 6
        return pd.DataFrame(
            {
                "row_id": np.array(
                    row_ids if row_ids is not None else range(1, len(rows) + 1),
                    dtype="int64",
                ),
                "age": pd.array(columns[0], dtype="Int64"),
                "gender": pd.array(columns[1], dtype=pd.StringDtype("python")),
                "education_level": pd.array(columns[2], dtype=pd.StringDtype("python")),
                "job_title": pd.array(columns[3], dtype=pd.StringDtype("python")),
                "years_of_experience": pd.array(columns[4], dtype="Int64"),
                "salary": pd.array(columns[5], dtype="Int64"),
            }
        )

    return _make


@pytest.fixture
def sample_csv(tmp_path: Path) -> Path:
    """Write the sample salary CSV (nine rows, artifact on first header)."""
    path = tmp_path / "Salary_Data.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8")
    return path


@pytest.fixture
def pipeline_config(tmp_path: Path, sample_csv: Path) -> PipelineConfig:
    """Default configuration on the sample CSV, no minimum group size."""
    return default_config(
        sample_csv,
        reports={"count_threshold": 0},
        output={"root": str(tmp_path / "output")},
    )


@pytest.fixture
def base_config(sample_csv: Path) -> dict[str, Any]:
    """Create a minimal configuration dictionary for testing."""
    return {
        "project": "salary-test",
        "data": {"input": str(sample_csv)},
        "cleaning": {"min_working_age": 16, "salary_floor": 10000},
        "reports": {"count_threshold": 20, "std_convention": "population"},
        "output": {"root": "./output", "formats": ["csv", "json"]},
    }
