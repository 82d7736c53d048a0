"""Basic package tests to verify installation."""


def test_package_imports() -> None:
    """Verify the main package can be imported."""
    import salarystats

    assert salarystats.__version__


def test_config_module_imports() -> None:
    """Verify config module structure is correct."""
    from salarystats.config import (
        CleaningConfig,
        DataConfig,
        PipelineConfig,
        ReportConfig,
        default_config,
        load_config,
    )

    assert PipelineConfig is not None
    assert DataConfig is not None
    assert CleaningConfig is not None
    assert ReportConfig is not None
    assert load_config is not None
    assert default_config is not None


def test_pipeline_modules_import() -> None:
    """Verify every pipeline stage is importable from its package."""
    from salarystats.assessment import AssessmentRunner
    from salarystats.cleaning import SalaryCleaner
    from salarystats.etl import SalaryPipeline, build_working_set
    from salarystats.ingestion import load_salary_dataset
    from salarystats.normalization import normalize_schema
    from salarystats.reports import STANDARD_REPORTS, aggregate_salaries

    assert len(STANDARD_REPORTS) == 9
    assert all(
        obj is not None
        for obj in (
            AssessmentRunner,
            SalaryCleaner,
            SalaryPipeline,
            build_working_set,
            load_salary_dataset,
            normalize_schema,
            aggregate_salaries,
        )
    )


def test_exceptions_share_base() -> None:
    """Every pipeline error derives from SalaryStatsError."""
    from salarystats.exceptions import (
        ConfigurationError,
        LoadError,
        SalaryStatsError,
        TypeCoercionError,
    )

    for error in (ConfigurationError, LoadError, TypeCoercionError):
        assert issubclass(error, SalaryStatsError)
