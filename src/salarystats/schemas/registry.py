"""
Schema registry.

Maps the table names used at stage boundaries to their pandera contracts,
so stages validate by name and the run manifest can record which contract
version produced its outputs.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, ClassVar

import pandera.pandas as pa

from salarystats.schemas.report import RankedSalaryReportSchema, SalaryReportSchema
from salarystats.schemas.salary import CleanedSalarySchema, NormalizedSalarySchema
from salarystats.utils.logging import get_logger

if TYPE_CHECKING:
    import pandas as pd

log = get_logger(__name__)


class DataRole(Enum):
    """Pipeline stage a table belongs to."""

    STAGING = "staging"
    WORKING = "working"
    REPORT = "report"


@dataclass(frozen=True)
class SchemaInfo:
    """A registered contract and what it describes."""

    name: str
    schema: type[pa.DataFrameModel]
    role: DataRole
    description: str


_REGISTERED: tuple[SchemaInfo, ...] = (
    SchemaInfo(
        "salary_normalized",
        NormalizedSalarySchema,
        DataRole.STAGING,
        "Typed salary records with surrogate row_id",
    ),
    SchemaInfo(
        "salary_staging",
        CleanedSalarySchema,
        DataRole.STAGING,
        "Cleaned salary records (salary_stg)",
    ),
    SchemaInfo(
        "salary_working",
        CleanedSalarySchema,
        DataRole.WORKING,
        "Read-only analysis snapshot (salary_wrk)",
    ),
    SchemaInfo(
        "salary_report",
        SalaryReportSchema,
        DataRole.REPORT,
        "Grouped salary statistics",
    ),
    SchemaInfo(
        "salary_report_ranked",
        RankedSalaryReportSchema,
        DataRole.REPORT,
        "Grouped salary statistics with average salary rank",
    ),
)


class SchemaRegistry:
    """Name-based lookup of the table contracts, versioned as a whole."""

    # Bump when any registered contract changes shape
    _version = "1.0.0"

    _schemas: ClassVar[dict[str, SchemaInfo]] = {info.name: info for info in _REGISTERED}

    @classmethod
    def registry_version(cls) -> str:
        return cls._version

    @classmethod
    def get(cls, name: str) -> type[pa.DataFrameModel]:
        """
        Return the contract registered under ``name``.

        Raises:
            KeyError: If no contract has that name.
        """
        try:
            return cls._schemas[name].schema
        except KeyError:
            available = ", ".join(cls._schemas)
            msg = f"Unknown schema '{name}'. Available: {available}"
            raise KeyError(msg) from None

    @classmethod
    def list_schemas(cls) -> list[str]:
        return list(cls._schemas)

    @classmethod
    def list_by_role(cls, role: DataRole) -> list[str]:
        return [info.name for info in cls._schemas.values() if info.role == role]

    @classmethod
    def validate(cls, df: "pd.DataFrame", name: str) -> "pd.DataFrame":
        """
        Validate a table against the contract registered under ``name``.

        A failure means a stage broke its own guarantee, so pandera's
        SchemaError propagates unchanged.
        """
        validated = cls.get(name).validate(df)
        log.debug("Schema check passed", schema=name, rows=len(validated))
        return validated
