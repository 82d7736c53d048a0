"""Tests for grouped salary statistics and ranking."""

from collections.abc import Callable

import pandas as pd
import pytest

from salarystats.config.settings import DEFAULT_AGE_BANDS
from salarystats.etl import build_working_set
from salarystats.reports import (
    GroupOrder,
    age_band_labels,
    aggregate_salaries,
    assign_age_band,
    not_null,
    rank_by_avg_salary,
)
from salarystats.schemas import STAT_COLUMNS

MakeRecords = Callable[..., pd.DataFrame]


def _rows(gender: str, salaries: list[int | None], **fields: object) -> list[tuple]:
    age = fields.get("age", 30)
    education = fields.get("education", "Bachelor's")
    title = fields.get("title", "Engineer")
    return [(age, gender, education, title, 5, s) for s in salaries]


class TestAggregateSalaries:
    """Tests for aggregate_salaries."""

    def test_statistics(self, make_records: MakeRecords) -> None:
        """Test count, rounded mean, population std, min and max."""
        df = make_records(_rows("Female", [10000, 20000, 30001]))
        report = aggregate_salaries(df, "gender")

        row = report.iloc[0]
        assert list(report.columns) == ["gender", *STAT_COLUMNS]
        assert row["employee_count"] == 3
        assert row["avg_salary"] == 20000  # 20000.33
        assert row["salary_std"] == 8165  # population: 8165.37
        assert row["min_salary"] == 10000
        assert row["max_salary"] == 30001

    def test_sample_std(self, make_records: MakeRecords) -> None:
        """Test the sample convention."""
        df = make_records(_rows("Female", [10000, 20000]))
        report = aggregate_salaries(df, "gender", std_ddof=1)
        assert report["salary_std"].iloc[0] == 7071  # 7071.07

    def test_half_rounds_away_from_zero(self, make_records: MakeRecords) -> None:
        """Test that a mean ending in .5 rounds up."""
        df = make_records(_rows("Male", [10001, 10002]) + _rows("Female", [10003, 10004]))
        report = aggregate_salaries(df, "gender").set_index("gender")

        assert report.loc["Male", "avg_salary"] == 10002
        assert report.loc["Female", "avg_salary"] == 10004

    def test_null_salaries_ignored_but_counted(self, make_records: MakeRecords) -> None:
        """Test that null salaries count rows but not salary statistics."""
        df = make_records(_rows("Male", [40000, None, 60000]))
        row = aggregate_salaries(df, "gender").iloc[0]

        assert row["employee_count"] == 3
        assert row["avg_salary"] == 50000
        assert row["min_salary"] == 40000

    def test_where_filter(self, make_records: MakeRecords) -> None:
        """Test that the row filter applies before counting."""
        df = make_records(_rows("Male", [40000, None, 60000]))
        row = aggregate_salaries(df, "gender", where=not_null("salary")).iloc[0]
        assert row["employee_count"] == 2

    def test_overall(self, make_records: MakeRecords) -> None:
        """Test a single overall row without grouping keys."""
        df = make_records(_rows("Male", [40000, None]) + _rows("Female", [60000]))
        report = aggregate_salaries(df, where=not_null("salary"))

        assert list(report.columns) == STAT_COLUMNS
        assert report["employee_count"].tolist() == [2]
        assert report["avg_salary"].tolist() == [50000]

    def test_all_salaries_null(self, make_records: MakeRecords) -> None:
        """Test that a group without salaries has null statistics."""
        df = make_records(_rows("Male", [None, None]))
        row = aggregate_salaries(df, "gender").iloc[0]

        assert row["employee_count"] == 2
        assert pd.isna(row["avg_salary"])
        assert pd.isna(row["salary_std"])
        assert pd.isna(row["max_salary"])

    def test_accepts_working_set(self, make_records: MakeRecords) -> None:
        """Test that a WorkingSet can be aggregated directly."""
        ws = build_working_set(make_records(_rows("Male", [40000, 60000])))
        assert aggregate_salaries(ws, "gender")["employee_count"].tolist() == [2]


class TestCountThreshold:
    """Tests for the minimum group size."""

    def test_boundary(self, make_records: MakeRecords) -> None:
        """Test that 20 rows are excluded and 21 included at threshold 20."""
        df = make_records(_rows("Female", [50000] * 20) + _rows("Male", [60000] * 21))
        report = aggregate_salaries(df, "gender", count_threshold=20)

        assert report["gender"].tolist() == ["Male"]
        assert report["employee_count"].tolist() == [21]

    def test_small_groups_dropped_not_merged(self, make_records: MakeRecords) -> None:
        """Test that excluded groups leave no remainder row."""
        df = make_records(_rows("Female", [50000] * 2) + _rows("Other", [55000]))
        report = aggregate_salaries(df, "gender", count_threshold=1)

        assert report["gender"].tolist() == ["Female"]
        assert report["employee_count"].sum() == 2


class TestGroupOrder:
    """Tests for report ordering."""

    def test_by_count(self, make_records: MakeRecords) -> None:
        """Test largest groups first."""
        df = make_records(_rows("A", [1] * 1) + _rows("B", [1] * 3) + _rows("C", [1] * 2))
        report = aggregate_salaries(df, "gender", order=[GroupOrder.by_count()])
        assert report["gender"].tolist() == ["B", "C", "A"]

    def test_by_avg_salary(self, make_records: MakeRecords) -> None:
        """Test best paid groups first."""
        df = make_records(
            _rows("A", [20000]) + _rows("B", [90000]) + _rows("C", [50000])
        )
        report = aggregate_salaries(df, "gender", order=[GroupOrder.by_avg_salary()])
        assert report["gender"].tolist() == ["B", "C", "A"]

    def test_default_key_order(self, make_records: MakeRecords) -> None:
        """Test ascending key order without criteria."""
        df = make_records(_rows("C", [1]) + _rows("A", [1]) + _rows("B", [1]))
        assert aggregate_salaries(df, "gender")["gender"].tolist() == ["A", "B", "C"]

    def test_education_natural_order(self, make_records: MakeRecords) -> None:
        """Test explicit category order, unlisted values last."""
        levels = ["High School", "Bachelor's", "Master's", "PhD"]
        rows = []
        for education in ["Master's", "phD", "High School", "PhD", "Bachelor's"]:
            rows += _rows("M", [50000], education=education)
        df = make_records(rows)

        ascending = aggregate_salaries(
            df,
            "education_level",
            order=[GroupOrder.by_categories("education_level", levels)],
        )
        descending = aggregate_salaries(
            df,
            "education_level",
            order=[GroupOrder.by_categories("education_level", levels, descending=True)],
        )

        assert ascending["education_level"].tolist() == [*levels, "phD"]
        assert descending["education_level"].tolist() == [*reversed(levels), "phD"]

    def test_composite_key(self, make_records: MakeRecords) -> None:
        """Test gender ascending, then count descending."""
        rows = (
            _rows("Male", [1], education="PhD")
            + _rows("Male", [1, 1], education="Master's")
            + _rows("Female", [1], education="PhD")
        )
        report = aggregate_salaries(
            make_records(rows),
            ["gender", "education_level"],
            order=[GroupOrder.by_key("gender"), GroupOrder.by_count()],
        )

        assert list(zip(report["gender"], report["education_level"], strict=True)) == [
            ("Female", "PhD"),
            ("Male", "Master's"),
            ("Male", "PhD"),
        ]

    def test_bands_by_min_age(self, make_records: MakeRecords) -> None:
        """Test that bucket order follows the youngest member, not the label."""
        rows = [
            (50, "M", "PhD", "T", 5, 90000),
            (22, "M", "PhD", "T", 1, 30000),
            (30, "M", "PhD", "T", 5, 60000),
        ]
        df = make_records(rows)
        df = df.assign(age_group=pd.Series(["a-old", "z-young", "m-mid"], dtype="string"))
        report = aggregate_salaries(df, "age_group", order=[GroupOrder.by_min_of("age")])

        assert report["age_group"].tolist() == ["z-young", "m-mid", "a-old"]


class TestRanking:
    """Tests for rank_by_avg_salary."""

    def test_dense_ties(self, make_records: MakeRecords) -> None:
        """Test that 90000, 90000, 80000 rank 1, 1, 2."""
        rows = (
            _rows("M", [90000], title="Architect")
            + _rows("M", [90000], title="Director")
            + _rows("M", [80000], title="Analyst")
        )
        report = rank_by_avg_salary(aggregate_salaries(make_records(rows), "job_title"))

        assert report["job_title"].tolist() == ["Architect", "Director", "Analyst"]
        assert report["avg_salary_rank"].tolist() == [1, 1, 2]

    def test_top_n(self, make_records: MakeRecords) -> None:
        """Test that top_n keeps ranks up to n, ties included."""
        rows = (
            _rows("M", [90000], title="A")
            + _rows("M", [90000], title="B")
            + _rows("M", [80000], title="C")
            + _rows("M", [70000], title="D")
        )
        report = rank_by_avg_salary(
            aggregate_salaries(make_records(rows), "job_title"), top_n=2
        )
        assert report["job_title"].tolist() == ["A", "B", "C"]

    def test_unranked_without_salary(self, make_records: MakeRecords) -> None:
        """Test that groups without an average are left out."""
        rows = _rows("M", [50000], title="A") + _rows("M", [None], title="B")
        report = rank_by_avg_salary(aggregate_salaries(make_records(rows), "job_title"))
        assert report["job_title"].tolist() == ["A"]


class TestAgeBands:
    """Tests for assign_age_band."""

    @pytest.mark.parametrize(
        ("age", "lower"),
        [(21, 21), (24, 21), (25, 25), (34, 25), (35, 35), (44, 35), (45, 45), (62, 45)],
    )
    def test_band_bounds(self, age: int, lower: int) -> None:
        """Test inclusive band bounds."""
        assert assign_age_band(age).lower == lower

    @pytest.mark.parametrize("age", [18, 70])
    def test_outside_falls_to_last_band(self, age: int) -> None:
        """Test that ages outside every band fall into the last band."""
        assert assign_age_band(age) == DEFAULT_AGE_BANDS[-1]

    def test_missing_age(self) -> None:
        """Test that a missing age also falls into the last band."""
        assert assign_age_band(None) == DEFAULT_AGE_BANDS[-1]

    def test_labels(self) -> None:
        """Test labelling a column of ages."""
        ages = pd.Series([22, None, 40], dtype="Int64")
        labels = age_band_labels(ages)

        assert labels.iloc[0] == DEFAULT_AGE_BANDS[0].label
        assert labels.iloc[1] == DEFAULT_AGE_BANDS[-1].label
        assert labels.iloc[2] == DEFAULT_AGE_BANDS[2].label
