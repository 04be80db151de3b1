"""Access patterns: what a caller intends to read.

An AccessPattern enumerates a root entity set and then, for every row,
follows an ordered chain of navigation steps. Each step says how the
related data is loaded. Patterns are short-lived values that refer to the
schema only by name.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Hashable


class LoadStrategy(str, Enum):
    """
    How a navigation property is loaded.

    Values:
        LAZY: One extra round trip per dereferenced row.
        EAGER_INCLUDE: Joined into the preceding query, full child width.
        EAGER_PROJECTED: Joined, but only the projected child columns.
    """

    LAZY = "lazy"
    EAGER_INCLUDE = "eagerInclude"
    EAGER_PROJECTED = "eagerProjected"

    @property
    def is_eager(self) -> bool:
        return self is not LoadStrategy.LAZY


@dataclass(frozen=True)
class NavigationStep:
    """
    One edge traversal within an access pattern.

    Attributes:
        relationship: Name of the relationship to follow.
        strategy: Loading strategy for this step.
        projection: Child columns to fetch. Required for EAGER_PROJECTED.
        fan_out: Observed child rows per parent row; overrides the
            relationship's estimate.
        key_values: Observed sample of foreign-key values at this depth.
        distinct_keys: Estimated number of distinct foreign-key values.
    """

    relationship: str
    strategy: LoadStrategy = LoadStrategy.LAZY
    projection: tuple[str, ...] | None = None
    fan_out: float | None = None
    key_values: tuple[Hashable, ...] | None = None
    distinct_keys: int | None = None

    def __post_init__(self):
        object.__setattr__(self, "strategy", LoadStrategy(self.strategy))
        if self.projection is not None:
            object.__setattr__(self, "projection", tuple(self.projection))
        if self.key_values is not None:
            object.__setattr__(self, "key_values", tuple(self.key_values))


@dataclass(frozen=True)
class AccessPattern:
    """
    A declared access pattern.

    Attributes:
        root_entity: Entity whose rows are enumerated.
        root_row_count: Estimated or measured size of the root set.
        steps: Navigation chain; step i+1 starts where step i ended.
        name: Optional label used in reports.
    """

    root_entity: str
    root_row_count: int
    steps: tuple[NavigationStep, ...] = ()
    name: str = ""

    def __post_init__(self):
        object.__setattr__(self, "steps", tuple(self.steps))

    @property
    def depth(self) -> int:
        return len(self.steps)

    @property
    def has_projection(self) -> bool:
        """True if any step supplies a projection list."""
        return any(s.projection for s in self.steps)

    @property
    def label(self) -> str:
        return self.name or self.root_entity
