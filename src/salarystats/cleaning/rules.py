"""
Category rewrite rules.

A rule set is a fixed, enumerable map of exact raw spellings to one
canonical label. Values outside the map pass through unchanged; the map is
never widened implicitly (long-tail policy is an analyst decision).
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

import pandas as pd

from salarystats.exceptions import ConfigurationError


def validate_rewrite_map(
    name: str,
    mapping: Mapping[str, str],
    *,
    allowed_targets: Iterable[str] | None = None,
    require_trimmed: bool = False,
) -> None:
    """
    Check that a rewrite map is internally consistent.

    A map is rejected when a key is empty, when a target is itself the
    key of a different rewrite (chained rules are order-dependent and not
    idempotent), when a target lies outside ``allowed_targets``, or, with
    ``require_trimmed``, when a key or target carries surrounding
    whitespace and so could never match trimmed data.

    Raises:
        ConfigurationError: Describing every problem found.
    """
    problems: list[str] = []
    allowed = set(allowed_targets) if allowed_targets is not None else None

    for source, target in mapping.items():
        if not isinstance(source, str) or not isinstance(target, str):
            problems.append(f"non-text rule {source!r} -> {target!r}")
            continue
        if source.strip() == "":
            problems.append("blank source value")
        if target.strip() == "":
            problems.append(f"blank target for {source!r}")
        if target in mapping and mapping[target] != target:
            problems.append(
                f"chained rule {source!r} -> {target!r} -> {mapping[target]!r}"
            )
        if allowed is not None and target not in allowed:
            problems.append(f"target {target!r} for {source!r} is not one of {sorted(allowed)}")
        if require_trimmed and (source != source.strip() or target != target.strip()):
            problems.append(f"untrimmed rule {source!r} -> {target!r}")

    if problems:
        msg = f"Inconsistent {name} rewrite map: " + "; ".join(problems)
        raise ConfigurationError(msg)


@dataclass(frozen=True)
class RewriteRules:
    """
    Validated exact-match rewrite map for one categorical column.

    Attributes:
        name: Rule set name (used in messages and logs).
        column: Column the rules apply to.
        mapping: Raw spelling -> canonical label (read-only).
    """

    name: str
    column: str
    mapping: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "mapping", MappingProxyType(dict(self.mapping)))

    @classmethod
    def build(
        cls,
        name: str,
        column: str,
        mapping: Mapping[str, str],
        *,
        allowed_targets: Iterable[str] | None = None,
        require_trimmed: bool = False,
    ) -> "RewriteRules":
        """Validate ``mapping`` and wrap it."""
        validate_rewrite_map(
            name,
            mapping,
            allowed_targets=allowed_targets,
            require_trimmed=require_trimmed,
        )
        return cls(name=name, column=column, mapping=mapping)

    def apply(self, series: pd.Series) -> pd.Series:
        """
        Rewrite mapped values; everything else (nulls included) is untouched.

        Returns:
            New Series with the same dtype and index.
        """
        hits = series.isin(list(self.mapping)).fillna(False).astype(bool)
        if not hits.any():
            return series.copy()
        result = series.copy()
        result[hits] = series[hits].map(dict(self.mapping))
        return result
