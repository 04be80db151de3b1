import pytest

from ormcost.core.errors import (
    DuplicateEntity,
    DuplicateRelationship,
    NotFound,
    SchemaFrozen,
    UnknownColumn,
    UnknownEntity,
)
from ormcost.core.schema import Cardinality, Column, Entity, Relationship, SchemaModel


def test_row_width_sums_all_columns(navigation_schema):
    assert navigation_schema.row_width("Navigation") == 208
    assert navigation_schema.row_width("MenuIcon") == 204


def test_row_width_with_column_subset(navigation_schema):
    assert navigation_schema.row_width("MenuIcon", ["FontAwesomeGlyph"]) == 200
    assert navigation_schema.row_width("Navigation", []) == 0


def test_row_width_rejects_unknown_column(navigation_schema):
    with pytest.raises(UnknownColumn, match="Glyph"):
        navigation_schema.row_width("MenuIcon", ["Glyph"])


def test_row_width_grows_as_columns_are_added():
    widths = []
    columns: list[Column] = [Column("Id", 4)]
    for extra in (Column("A", 1), Column("B", 8), Column("C", 200)):
        columns.append(extra)
        schema = SchemaModel()
        schema.add_entity(Entity("T", tuple(columns), primary_key="Id"))
        widths.append(schema.row_width("T"))

    assert widths == sorted(widths)
    assert widths[-1] == sum(c.byte_width for c in columns)


def test_column_width_must_be_positive():
    with pytest.raises(ValueError, match="positive"):
        Column("Id", 0)


def test_entity_rejects_duplicate_columns():
    with pytest.raises(ValueError, match="twice"):
        Entity("T", (Column("Id", 4), Column("Id", 4)), primary_key="Id")


def test_entity_primary_key_must_be_a_column():
    with pytest.raises(UnknownColumn):
        Entity("T", (Column("Id", 4),), primary_key="Key")


def test_add_entity_rejects_duplicates(navigation_schema):
    schema = SchemaModel()
    entity = navigation_schema.resolve("MenuIcon")
    schema.add_entity(entity)

    with pytest.raises(DuplicateEntity, match="MenuIcon"):
        schema.add_entity(entity)


def test_add_relationship_rejects_unknown_endpoint():
    schema = SchemaModel()
    schema.add_entity(Entity("A", (Column("Id", 4),), primary_key="Id"))

    with pytest.raises(UnknownEntity, match="'B'"):
        schema.add_relationship(Relationship("A.B", "A", "B", "Id"))


def test_add_relationship_rejects_foreign_key_outside_parent():
    schema = SchemaModel()
    schema.add_entity(Entity("A", (Column("Id", 4),), primary_key="Id"))
    schema.add_entity(Entity("B", (Column("Id", 4), Column("AId", 4)), primary_key="Id"))

    with pytest.raises(UnknownColumn, match="AId"):
        schema.add_relationship(Relationship("A.B", "A", "B", "AId"))


def test_add_relationship_rejects_duplicate_name(navigation_schema):
    schema = SchemaModel()
    for entity in navigation_schema.entities:
        schema.add_entity(entity)
    rel = navigation_schema.resolve_relationship("Navigation.MenuIcon")
    schema.add_relationship(rel)

    with pytest.raises(DuplicateRelationship):
        schema.add_relationship(rel)


def test_self_referencing_relationship_is_allowed():
    schema = SchemaModel()
    schema.add_entity(
        Entity("Employee", (Column("Id", 4), Column("ManagerId", 4)), primary_key="Id")
    )
    schema.add_relationship(
        Relationship("Employee.Manager", "Employee", "Employee", "ManagerId")
    )

    assert [r.name for r in schema.relationships_from("Employee")] == [
        "Employee.Manager"
    ]


def test_resolve_unknown_names(navigation_schema):
    with pytest.raises(NotFound, match="Entity 'Ghost'"):
        navigation_schema.resolve("Ghost")
    with pytest.raises(NotFound, match="Relationship 'Ghost'"):
        navigation_schema.resolve_relationship("Ghost")


def test_frozen_schema_rejects_mutation(navigation_schema):
    navigation_schema.freeze()

    assert navigation_schema.frozen is True
    with pytest.raises(SchemaFrozen):
        navigation_schema.add_entity(Entity("X", (Column("Id", 4),), primary_key="Id"))
    with pytest.raises(SchemaFrozen):
        navigation_schema.add_relationship(
            Relationship("Navigation.Self", "Navigation", "Navigation", "Id")
        )


def test_one_to_one_fan_out_is_always_one():
    rel = Relationship("A.B", "A", "B", "Id", average_fan_out=7)
    many = Relationship(
        "A.Bs", "A", "B", "Id", cardinality="one-to-many", average_fan_out=7
    )

    assert rel.fan_out == 1.0
    assert many.cardinality is Cardinality.ONE_TO_MANY
    assert many.fan_out == 7
