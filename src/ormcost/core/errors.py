"""Error taxonomy for schema building and access-pattern analysis.

Every error carries enough context (entity, relationship, step index) for the
caller to correct the input and re-run. Nothing here is retried.
"""

from __future__ import annotations


class AnalysisError(RuntimeError):
    """Base class for all analyzer errors."""


class DuplicateEntity(AnalysisError):
    """Raised when an entity with the same name is already declared."""

    def __init__(self, name: str):
        super().__init__(f"Entity '{name}' is already declared.")
        self.name = name


class DuplicateRelationship(AnalysisError):
    """Raised when a relationship with the same name is already declared."""

    def __init__(self, name: str):
        super().__init__(f"Relationship '{name}' is already declared.")
        self.name = name


class UnknownEntity(AnalysisError):
    """Raised when a relationship endpoint names an undeclared entity."""

    def __init__(self, name: str, *, relationship: str | None = None):
        where = f" (relationship '{relationship}')" if relationship else ""
        super().__init__(f"Unknown entity '{name}'{where}.")
        self.name = name
        self.relationship = relationship


class UnknownColumn(AnalysisError):
    """Raised when a column is not part of the entity it is used with."""

    def __init__(
        self, entity: str, column: str, *, step_index: int | None = None
    ):
        where = f" at step {step_index}" if step_index is not None else ""
        super().__init__(f"Entity '{entity}' has no column '{column}'{where}.")
        self.entity = entity
        self.column = column
        self.step_index = step_index


class SchemaFrozen(AnalysisError):
    """Raised when the schema is modified after analysis has started."""


class NotFound(AnalysisError):
    """Raised when an entity or relationship name cannot be resolved."""

    def __init__(self, kind: str, name: str, *, step_index: int | None = None):
        where = f" (step {step_index})" if step_index is not None else ""
        super().__init__(f"{kind.capitalize()} '{name}' not found{where}.")
        self.kind = kind
        self.name = name
        self.step_index = step_index


class DepthLimitExceeded(AnalysisError):
    """Raised when a navigation chain is longer than the configured maximum."""

    def __init__(self, depth: int, limit: int):
        super().__init__(
            f"Navigation depth {depth} exceeds maxNavigationDepth {limit}."
        )
        self.depth = depth
        self.limit = limit


class EmptyProjection(AnalysisError):
    """Raised when an eagerProjected step declares no columns."""

    def __init__(self, step_index: int, relationship: str):
        super().__init__(
            f"Step {step_index} ('{relationship}') is eagerProjected "
            "but projects no columns."
        )
        self.step_index = step_index
        self.relationship = relationship


class InvalidNavigation(AnalysisError):
    """Raised when a step does not start at the entity reached by the previous one."""

    def __init__(self, step_index: int, relationship: str, expected: str, actual: str):
        super().__init__(
            f"Step {step_index} ('{relationship}') navigates from '{actual}', "
            f"but the previous step reached '{expected}'."
        )
        self.step_index = step_index
        self.relationship = relationship
        self.expected = expected
        self.actual = actual


class InvalidPattern(AnalysisError):
    """Raised for numerically invalid access patterns (negative counts, bad fan-out)."""


class DocumentError(AnalysisError):
    """Raised when a schema/pattern document is malformed."""

    def __init__(self, path: str, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path
