"""Execution plan value objects.

A plan is an ordered list of logical queries. Plans are built fresh per
(access pattern, strategy) pair and never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterator

from ormcost.core.patterns import AccessPattern, LoadStrategy

DECLARED = "declared"


class QueryKind(str, Enum):
    """
    Shape of a logical query.

    Values:
        ROOT_SCAN: Enumerates the root entity set.
        JOIN: Root scan joined with one or more eagerly loaded entities.
        LOOKUP: Per-row lookup issued by a lazy navigation.
    """

    ROOT_SCAN = "root_scan"
    JOIN = "join"
    LOOKUP = "lookup"


@dataclass(frozen=True)
class QueryOp:
    """
    One logical query shape in a plan.

    Attributes:
        kind: Root scan, join or per-row lookup.
        entities: Entities read by the query, in join order.
        rows: Rows returned over all round trips of the query.
        row_width: Bytes per returned row.
        round_trips: How many times the query is issued. Lazy lookups at one
            navigation depth share a single QueryOp with round_trips = N.
        depth: Navigation depth at which the query is issued (0 = root).
    """

    kind: QueryKind
    entities: tuple[str, ...]
    rows: int
    row_width: int
    round_trips: int = 1
    depth: int = 0

    @property
    def row_count(self) -> float:
        """Average rows per round trip."""
        if not self.round_trips:
            return 0.0
        return self.rows / self.round_trips

    @property
    def total_rows(self) -> int:
        return self.rows

    @property
    def total_bytes(self) -> int:
        return self.rows * self.row_width

    def split(self) -> Iterator["QueryOp"]:
        """Yield one op per round trip, spreading the rows as evenly as possible."""
        base, extra = divmod(self.rows, self.round_trips or 1)
        for i in range(self.round_trips):
            yield replace(self, rows=base + (1 if i < extra else 0), round_trips=1)


@dataclass(frozen=True)
class ExecutionPlan:
    """
    Ordered logical queries for one access pattern under one strategy.

    Attributes:
        pattern: The access pattern the plan was built from.
        strategy: Strategy forced on every step, or None when each step's
            declared strategy was used.
        ops: Query shapes in issue order.
    """

    pattern: AccessPattern
    strategy: LoadStrategy | None
    ops: tuple[QueryOp, ...]

    @property
    def label(self) -> str:
        return self.strategy.value if self.strategy else DECLARED

    @property
    def query_count(self) -> int:
        return sum(op.round_trips for op in self.ops)

    @property
    def total_rows(self) -> int:
        return sum(op.total_rows for op in self.ops)

    @property
    def total_bytes(self) -> int:
        return sum(op.total_bytes for op in self.ops)

    def expand(self) -> Iterator[QueryOp]:
        """Yield every individual round trip in issue order."""
        for op in self.ops:
            yield from op.split()
