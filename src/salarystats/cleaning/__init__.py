"""
Cleaning layer: turns the normalized table into the staging table.

Steps run in a fixed order (blank nulling, education unification, job
title trim and unification, implausible-experience removal, salary floor
suppression). Per-row issues are handled by policy, never raised.
"""

from salarystats.cleaning.cleaner import (
    CleaningReport,
    CleaningResult,
    SalaryCleaner,
    clean_salary_table,
)
from salarystats.cleaning.rules import RewriteRules, validate_rewrite_map
from salarystats.cleaning.steps import (
    CLEANING_STEPS,
    blank_to_null,
    remove_implausible_experience,
    suppress_salary_floor,
    trim_job_titles,
    unify_education,
    unify_job_titles,
)

__all__ = [
    "CLEANING_STEPS",
    "CleaningReport",
    "CleaningResult",
    "RewriteRules",
    "SalaryCleaner",
    "blank_to_null",
    "clean_salary_table",
    "remove_implausible_experience",
    "suppress_salary_floor",
    "trim_job_titles",
    "unify_education",
    "unify_job_titles",
    "validate_rewrite_map",
]
