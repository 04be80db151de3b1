"""Core schema model: entities, columns and relationships.

These models describe an entity-relationship schema in a simple, immutable
form. The SchemaModel follows a build-then-freeze lifecycle: it is populated
once, then frozen before any access pattern is analyzed against it, after
which it can be shared read-only between concurrent analyses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from ormcost.core.errors import (
    DuplicateEntity,
    DuplicateRelationship,
    NotFound,
    SchemaFrozen,
    UnknownColumn,
    UnknownEntity,
)


@dataclass(frozen=True)
class Column:
    """
    A single column of an entity.

    Attributes:
        name: Column name, unique within its entity.
        byte_width: Width of one value in bytes (int = 4, char(N) = N).
    """

    name: str
    byte_width: int

    def __post_init__(self):
        if self.byte_width <= 0:
            raise ValueError(
                f"Column '{self.name}' must have a positive byte width."
            )


@dataclass(frozen=True)
class Entity:
    """
    A table-like entity with an ordered set of columns.

    Attributes:
        name: Entity name, unique within the schema.
        columns: Ordered columns; names are unique.
        primary_key: Name of the primary key column.
    """

    name: str
    columns: tuple[Column, ...]
    primary_key: str

    def __post_init__(self):
        object.__setattr__(self, "columns", tuple(self.columns))
        seen: set[str] = set()
        for col in self.columns:
            if col.name in seen:
                raise ValueError(
                    f"Entity '{self.name}' declares column '{col.name}' twice."
                )
            seen.add(col.name)
        if self.primary_key not in seen:
            raise UnknownColumn(self.name, self.primary_key)

    @property
    def column_names(self) -> tuple[str, ...]:
        return tuple(c.name for c in self.columns)

    def column(self, name: str) -> Column:
        """Return the named column or raise UnknownColumn."""
        for col in self.columns:
            if col.name == name:
                return col
        raise UnknownColumn(self.name, name)

    def row_width(self, columns: Iterable[str] | None = None) -> int:
        """Sum of byte widths of the given columns, or of all columns."""
        if columns is None:
            return sum(c.byte_width for c in self.columns)
        return sum(self.column(name).byte_width for name in columns)


class Cardinality(str, Enum):
    """Cardinality of a relationship, seen from the parent."""

    ONE_TO_ONE = "one-to-one"
    ONE_TO_MANY = "one-to-many"


@dataclass(frozen=True)
class Relationship:
    """
    Directed navigation edge parent -> child.

    Attributes:
        name: Navigation property name, unique within the schema.
        parent: Entity the navigation starts from.
        child: Entity the navigation reaches.
        foreign_key_column: Parent column referencing child.primary_key.
        cardinality: One-to-one or one-to-many.
        average_fan_out: Estimated child rows per parent row. Only
            meaningful for one-to-many edges.
    """

    name: str
    parent: str
    child: str
    foreign_key_column: str
    cardinality: Cardinality = Cardinality.ONE_TO_ONE
    average_fan_out: float = 1.0

    def __post_init__(self):
        object.__setattr__(self, "cardinality", Cardinality(self.cardinality))
        if self.average_fan_out <= 0:
            raise ValueError(
                f"Relationship '{self.name}' must have a positive fan-out."
            )

    @property
    def fan_out(self) -> float:
        """Rows reached per parent row; always 1 for one-to-one edges."""
        if self.cardinality is Cardinality.ONE_TO_ONE:
            return 1.0
        return self.average_fan_out


@dataclass
class SchemaModel:
    """
    Registry of entities and relationships.

    Populate with add_entity/add_relationship, then freeze(). Plan building
    freezes the model on first use, so it is never mutated while an access
    pattern references it.
    """

    _entities: dict[str, Entity] = field(default_factory=dict)
    _relationships: dict[str, Relationship] = field(default_factory=dict)
    _frozen: bool = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def entities(self) -> tuple[Entity, ...]:
        return tuple(self._entities.values())

    @property
    def relationships(self) -> tuple[Relationship, ...]:
        return tuple(self._relationships.values())

    def freeze(self) -> "SchemaModel":
        """Make the model read-only. Idempotent."""
        self._frozen = True
        return self

    def _check_mutable(self) -> None:
        if self._frozen:
            raise SchemaFrozen("Schema is frozen; it can no longer be modified.")

    def add_entity(self, entity: Entity) -> None:
        """Declare an entity."""
        self._check_mutable()
        if entity.name in self._entities:
            raise DuplicateEntity(entity.name)
        self._entities[entity.name] = entity

    def add_relationship(self, relationship: Relationship) -> None:
        """
        Declare a relationship between two already declared entities.

        Raises:
            UnknownEntity: If the parent or child is undeclared.
            UnknownColumn: If the foreign key is not a parent column.
            DuplicateRelationship: If the name is already declared.
        """
        self._check_mutable()
        for endpoint in (relationship.parent, relationship.child):
            if endpoint not in self._entities:
                raise UnknownEntity(endpoint, relationship=relationship.name)
        parent = self._entities[relationship.parent]
        if relationship.foreign_key_column not in parent.column_names:
            raise UnknownColumn(parent.name, relationship.foreign_key_column)
        if relationship.name in self._relationships:
            raise DuplicateRelationship(relationship.name)
        self._relationships[relationship.name] = relationship

    def resolve(self, entity_name: str) -> Entity:
        try:
            return self._entities[entity_name]
        except KeyError:
            raise NotFound("entity", entity_name) from None

    def resolve_relationship(self, name: str) -> Relationship:
        try:
            return self._relationships[name]
        except KeyError:
            raise NotFound("relationship", name) from None

    def relationships_from(self, entity_name: str) -> list[Relationship]:
        """Return relationships whose parent is the given entity."""
        self.resolve(entity_name)
        return [r for r in self._relationships.values() if r.parent == entity_name]

    def row_width(
        self, entity_name: str, columns: Iterable[str] | None = None
    ) -> int:
        """Row width of an entity in bytes, optionally restricted to columns."""
        return self.resolve(entity_name).row_width(columns)
