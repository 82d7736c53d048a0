"""
Working set assessment module.

Re-checks the cleaning guarantees on the analysis snapshot and reports
them per check.
"""

from salarystats.assessment.core import (
    AssessmentResult,
    AssessmentRunner,
    CheckResult,
    CheckStatus,
)
from salarystats.assessment.reporter import AssessmentReporter

__all__ = [
    "AssessmentReporter",
    "AssessmentResult",
    "AssessmentRunner",
    "CheckResult",
    "CheckStatus",
]
