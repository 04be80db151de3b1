"""Plan advisor: compare loading strategies for one access pattern.

The advisor builds a plan per candidate strategy, estimates each, ranks them
by the configured objective and reports the full comparison table. The
"best" choice is context dependent, so the runner-up and the delta between
the two are part of the result rather than just the winner.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ormcost.core.config import AnalyzerConfig, TieBreak
from ormcost.core.estimator import CostResult, estimate
from ormcost.core.patterns import AccessPattern, LoadStrategy
from ormcost.core.plan import ExecutionPlan
from ormcost.core.planner import PlanBuilder
from ormcost.core.schema import SchemaModel

logger = logging.getLogger(__name__)

_STRATEGY_ORDER = {s.value: i for i, s in enumerate(LoadStrategy)}


@dataclass(frozen=True)
class CostDelta:
    """Cost of the runner-up minus the cost of the recommended strategy."""

    query_count: int
    total_bytes: int


@dataclass(frozen=True)
class Recommendation:
    """
    Outcome of advising on one access pattern.

    Attributes:
        pattern: The analyzed access pattern.
        tie_break: Objective used for ranking.
        results: Cost per evaluated strategy, best first.
        plans: Plans matching `results`, same order.
        declared: Cost of the pattern with each step's declared strategy.
    """

    pattern: AccessPattern
    tie_break: TieBreak
    results: tuple[CostResult, ...]
    plans: tuple[ExecutionPlan, ...]
    declared: CostResult

    @property
    def best(self) -> CostResult:
        return self.results[0]

    @property
    def strategy(self) -> LoadStrategy:
        return LoadStrategy(self.best.strategy)

    @property
    def runner_up(self) -> CostResult | None:
        return self.results[1] if len(self.results) > 1 else None

    @property
    def delta(self) -> CostDelta | None:
        if self.runner_up is None:
            return None
        return CostDelta(
            query_count=self.runner_up.query_count - self.best.query_count,
            total_bytes=self.runner_up.total_bytes - self.best.total_bytes,
        )

    def result_for(self, strategy: LoadStrategy) -> CostResult | None:
        for result in self.results:
            if result.strategy == strategy.value:
                return result
        return None


def rank_key(result: CostResult, tie_break: TieBreak) -> tuple[int, int, int]:
    """Sort key for a cost result under the given objective."""
    order = _STRATEGY_ORDER.get(result.strategy, len(_STRATEGY_ORDER))
    if tie_break is TieBreak.BYTES_THEN_QUERIES:
        return (result.total_bytes, result.query_count, order)
    return (result.query_count, result.total_bytes, order)


def candidate_strategies(pattern: AccessPattern) -> list[LoadStrategy]:
    """Strategies worth evaluating; projection only when a step supplies one."""
    candidates = [LoadStrategy.LAZY, LoadStrategy.EAGER_INCLUDE]
    if pattern.has_projection:
        candidates.append(LoadStrategy.EAGER_PROJECTED)
    return candidates


class PlanAdvisor:
    """
    Recommends the cheapest loading strategy for access patterns.

    Holds no per-call state; one advisor can serve concurrent callers once
    its schema is frozen.
    """

    def __init__(self, schema: SchemaModel, config: AnalyzerConfig | None = None):
        self.config = config or AnalyzerConfig()
        self.builder = PlanBuilder(schema, self.config)

    @property
    def schema(self) -> SchemaModel:
        return self.builder.schema

    def advise(self, pattern: AccessPattern) -> Recommendation:
        """
        Evaluate every candidate strategy and rank the results.

        Raises:
            AnalysisError: Any validation error for the pattern; it is
                fatal to this pattern only.
        """
        declared = estimate(self.builder.build(pattern))

        evaluated: list[tuple[CostResult, ExecutionPlan]] = []
        for strategy in candidate_strategies(pattern):
            plan = self.builder.build(pattern, strategy)
            evaluated.append((estimate(plan), plan))

        evaluated.sort(key=lambda pair: rank_key(pair[0], self.config.tie_break))
        recommendation = Recommendation(
            pattern=pattern,
            tie_break=self.config.tie_break,
            results=tuple(r for r, _ in evaluated),
            plans=tuple(p for _, p in evaluated),
            declared=declared,
        )
        logger.debug(
            "Advice for %s: %s (%d queries, %d bytes)",
            pattern.label,
            recommendation.best.strategy,
            recommendation.best.query_count,
            recommendation.best.total_bytes,
        )
        return recommendation
