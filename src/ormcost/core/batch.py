"""Batch analysis of many access patterns.

Analyses are pure and the schema is frozen before any of them starts, so
patterns can be advised on concurrently without locking. A failing pattern
is reported on its own result and never aborts the batch.
"""

from __future__ import annotations

import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable

from ormcost.core.advisor import PlanAdvisor, Recommendation
from ormcost.core.errors import AnalysisError
from ormcost.core.patterns import AccessPattern


@dataclass(frozen=True)
class PatternAnalysis:
    """Result for a single access pattern in a batch."""

    pattern: AccessPattern
    recommendation: Recommendation | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def filter_patterns(
    patterns: Iterable[AccessPattern], name_regex: str | None
) -> list[AccessPattern]:
    """Filter patterns by regex on their label (or keep all if regex is None)."""
    patterns = list(patterns)
    if not name_regex:
        return patterns
    try:
        rx = re.compile(name_regex)
    except re.error as exc:
        raise ValueError(f"Invalid regex expression: {exc}") from exc
    return [p for p in patterns if rx.search(p.label)]


def analyze_pattern(advisor: PlanAdvisor, pattern: AccessPattern) -> PatternAnalysis:
    """Advise on one pattern, capturing analysis errors on the result."""
    try:
        return PatternAnalysis(pattern=pattern, recommendation=advisor.advise(pattern))
    except AnalysisError as e:
        return PatternAnalysis(pattern=pattern, error=str(e))


def analyze_patterns_parallel(
    advisor: PlanAdvisor,
    patterns: list[AccessPattern],
    max_parallel: int,
) -> list[PatternAnalysis]:
    """
    Advise on multiple access patterns in parallel.

    Args:
        advisor: Advisor shared by all workers.
        patterns: Patterns to analyze.
        max_parallel: Maximum number of concurrent analyses.

    Returns:
        One PatternAnalysis per pattern, in input order.
    """
    if max_parallel < 1:
        raise ValueError("max_parallel must be >= 1")
    if not patterns:
        return []

    advisor.schema.freeze()
    with ThreadPoolExecutor(max_workers=max_parallel) as pool:
        futures = [pool.submit(analyze_pattern, advisor, p) for p in patterns]
        return [f.result() for f in futures]
