"""Cost estimation over execution plans.

Two independent costs are modeled: round trips (query count, a proxy for
execute-and-fetch latency) and bytes transferred (rows x width, a proxy for
marshalling cost). Estimation is a pure function of the plan.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ormcost.core.plan import ExecutionPlan, QueryOp


@dataclass(frozen=True, order=True)
class CostResult:
    """
    Estimated cost of one plan.

    Results order by bytes transferred, then by query count, then by
    strategy name.

    Attributes:
        total_bytes: Sum of rows x row width over all round trips.
        query_count: Number of round trips.
        strategy: Strategy label (a LoadStrategy value or "declared").
        total_rows: Rows returned over all round trips.
    """

    total_bytes: int
    query_count: int
    strategy: str
    total_rows: int = field(default=0, compare=False)


@dataclass(frozen=True)
class QueryCost:
    """Cost of one query shape within a plan."""

    op: QueryOp
    round_trips: int
    rows: int
    bytes: int


def breakdown(plan: ExecutionPlan) -> list[QueryCost]:
    """Return the per-query cost of every op in the plan, in issue order."""
    return [
        QueryCost(
            op=op,
            round_trips=op.round_trips,
            rows=op.total_rows,
            bytes=op.total_bytes,
        )
        for op in plan.ops
    ]


def estimate(plan: ExecutionPlan) -> CostResult:
    """Estimate total round trips and bytes for a plan."""
    costs = breakdown(plan)
    return CostResult(
        total_bytes=sum(c.bytes for c in costs),
        query_count=sum(c.round_trips for c in costs),
        strategy=plan.label,
        total_rows=sum(c.rows for c in costs),
    )
