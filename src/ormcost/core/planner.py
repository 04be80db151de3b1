"""Execution plan builder.

Compiles an AccessPattern into an ExecutionPlan. Lazy steps expand into
per-row lookups anchored on the rows reached by the previous step (the N+1
rule). Eager steps fold into the query that precedes them as a join, which
multiplies row count across one-to-many edges (the cartesian explosion
rule) and widens every row by the joined entity.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from ormcost.core.config import AnalyzerConfig
from ormcost.core.errors import (
    DepthLimitExceeded,
    EmptyProjection,
    InvalidNavigation,
    InvalidPattern,
    NotFound,
    UnknownColumn,
)
from ormcost.core.patterns import AccessPattern, LoadStrategy, NavigationStep
from ormcost.core.plan import ExecutionPlan, QueryKind, QueryOp
from ormcost.core.schema import Cardinality, Entity, Relationship, SchemaModel

logger = logging.getLogger(__name__)


@dataclass
class _OpDraft:
    """Mutable query shape used while folding eager steps into a query."""

    kind: QueryKind
    entities: list[str]
    rows: int
    row_width: int
    round_trips: int = 1
    depth: int = 0

    def join(self, entity: str, width: int, fan_out: float) -> None:
        if self.kind is QueryKind.ROOT_SCAN:
            self.kind = QueryKind.JOIN
        self.entities.append(entity)
        self.row_width += width
        self.rows = _rows(self.rows, fan_out)

    def freeze(self) -> QueryOp:
        return QueryOp(
            kind=self.kind,
            entities=tuple(self.entities),
            rows=self.rows,
            row_width=self.row_width,
            round_trips=self.round_trips,
            depth=self.depth,
        )


@dataclass(frozen=True)
class _ResolvedStep:
    index: int
    step: NavigationStep
    relationship: Relationship
    child: Entity
    fan_out: float


def _rows(count: int, fan_out: float) -> int:
    """Row count after a fan-out, rounded up to whole rows."""
    if fan_out == 1:
        return count
    # Trim float noise (100 * 1.1 == 110.00000000000001) before rounding up.
    return math.ceil(round(count * fan_out, 9))


class PlanBuilder:
    """
    Builds execution plans against a frozen schema.

    The builder is stateless between calls and can be shared by threads.
    """

    def __init__(self, schema: SchemaModel, config: AnalyzerConfig | None = None):
        self.schema = schema.freeze()
        self.config = config or AnalyzerConfig()

    def build(
        self,
        pattern: AccessPattern,
        strategy: LoadStrategy | None = None,
    ) -> ExecutionPlan:
        """
        Build the plan for one access pattern.

        Args:
            pattern: Access pattern to compile.
            strategy: Strategy forced on every step. None keeps each step's
                declared strategy, which allows mixed chains.

        Returns:
            An immutable ExecutionPlan.

        Raises:
            DepthLimitExceeded: Chain longer than max_navigation_depth.
            NotFound: Unknown root entity or relationship.
            InvalidNavigation: A step does not start where the previous ended.
            EmptyProjection: An eagerProjected step without columns.
            UnknownColumn: A projected column missing from the child entity.
            InvalidPattern: Negative row counts or non-positive fan-out.
        """
        root, steps = self._resolve(pattern)

        current = _OpDraft(
            kind=QueryKind.ROOT_SCAN,
            entities=[root.name],
            rows=pattern.root_row_count,
            row_width=root.row_width(),
        )
        ops: list[QueryOp] = []

        for resolved in steps:
            effective = strategy or resolved.step.strategy
            if effective.is_eager:
                width = self._eager_width(resolved, effective)
                current.join(resolved.child.name, width, resolved.fan_out)
                continue

            # Lazy: re-anchor on every row reached so far, eager joins included.
            ops.append(current.freeze())
            lookups = self._lookup_count(resolved.step, current.rows)
            current = _OpDraft(
                kind=QueryKind.LOOKUP,
                entities=[resolved.child.name],
                rows=_rows(lookups, resolved.fan_out),
                row_width=resolved.child.row_width(),
                round_trips=lookups,
                depth=resolved.index + 1,
            )

        ops.append(current.freeze())
        plan = ExecutionPlan(pattern=pattern, strategy=strategy, ops=tuple(ops))
        logger.debug(
            "Built %s plan for %s: %d queries, %d bytes",
            plan.label,
            pattern.label,
            plan.query_count,
            plan.total_bytes,
        )
        return plan

    def _resolve(
        self, pattern: AccessPattern
    ) -> tuple[Entity, list[_ResolvedStep]]:
        """Validate the pattern and resolve every name it references."""
        limit = self.config.max_navigation_depth
        if pattern.depth > limit:
            raise DepthLimitExceeded(pattern.depth, limit)
        if pattern.root_row_count < 0:
            raise InvalidPattern(
                f"Root row count must be >= 0 (got {pattern.root_row_count})."
            )

        root = self.schema.resolve(pattern.root_entity)
        at = root.name
        resolved: list[_ResolvedStep] = []

        for index, step in enumerate(pattern.steps):
            try:
                rel = self.schema.resolve_relationship(step.relationship)
            except NotFound as exc:
                raise NotFound(exc.kind, exc.name, step_index=index) from None
            if rel.parent != at:
                raise InvalidNavigation(index, rel.name, expected=at, actual=rel.parent)
            child = self.schema.resolve(rel.child)

            if step.strategy is LoadStrategy.EAGER_PROJECTED and not step.projection:
                raise EmptyProjection(index, rel.name)
            if step.projection is not None:
                if not step.projection:
                    raise EmptyProjection(index, rel.name)
                for column in step.projection:
                    if column not in child.column_names:
                        raise UnknownColumn(child.name, column, step_index=index)

            resolved.append(
                _ResolvedStep(
                    index=index,
                    step=step,
                    relationship=rel,
                    child=child,
                    fan_out=self._fan_out(index, step, rel),
                )
            )
            at = child.name

        return root, resolved

    @staticmethod
    def _fan_out(index: int, step: NavigationStep, rel: Relationship) -> float:
        if step.fan_out is not None and step.fan_out <= 0:
            raise InvalidPattern(
                f"Step {index} ('{rel.name}') has non-positive fan-out {step.fan_out}."
            )
        if step.distinct_keys is not None and step.distinct_keys < 0:
            raise InvalidPattern(
                f"Step {index} ('{rel.name}') has negative distinct_keys."
            )
        if rel.cardinality is Cardinality.ONE_TO_ONE:
            return 1.0
        return step.fan_out if step.fan_out is not None else rel.average_fan_out

    @staticmethod
    def _eager_width(resolved: _ResolvedStep, strategy: LoadStrategy) -> int:
        child = resolved.child
        if strategy is LoadStrategy.EAGER_PROJECTED and resolved.step.projection:
            return child.row_width(resolved.step.projection)
        return child.row_width()

    def _lookup_count(self, step: NavigationStep, rows: int) -> int:
        """Lookups issued for one lazy step given the rows reached so far."""
        if not self.config.dedupe_repeated_lazy_keys:
            return rows

        if step.key_values:
            sample = len(step.key_values)
            distinct = len(set(step.key_values))
            if sample == rows:
                unique = distinct
            else:
                # Scale the observed duplicate ratio to the estimated row count.
                unique = math.ceil(round(rows * distinct / sample, 9))
        elif step.distinct_keys is not None:
            unique = step.distinct_keys
        else:
            unique = rows
        return min(unique, rows)
