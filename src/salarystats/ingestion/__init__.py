"""
Data ingestion layer for loading the raw salary table.

All raw data loading happens through this module so that unreadable or
malformed sources fail early with a LoadError.
"""

from salarystats.ingestion.salary import (
    SalaryDatasetLoader,
    clean_header,
    load_salary_dataset,
)

__all__ = ["SalaryDatasetLoader", "clean_header", "load_salary_dataset"]
