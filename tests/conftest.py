from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure tests always import the local src tree, not an older installed wheel.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from ormcost.core.patterns import AccessPattern, LoadStrategy, NavigationStep  # noqa: E402
from ormcost.core.schema import (  # noqa: E402
    Cardinality,
    Column,
    Entity,
    Relationship,
    SchemaModel,
)

DATA = Path(__file__).resolve().parent / "data"


def _navigation_schema() -> SchemaModel:
    schema = SchemaModel()
    schema.add_entity(
        Entity(
            name="Navigation",
            columns=(
                Column("Id", 4),
                Column("MenuIconId", 4),
                Column("Title", 200),
            ),
            primary_key="Id",
        )
    )
    schema.add_entity(
        Entity(
            name="MenuIcon",
            columns=(Column("Id", 4), Column("FontAwesomeGlyph", 200)),
            primary_key="Id",
        )
    )
    schema.add_relationship(
        Relationship(
            name="Navigation.MenuIcon",
            parent="Navigation",
            child="MenuIcon",
            foreign_key_column="MenuIconId",
        )
    )
    return schema


@pytest.fixture
def navigation_schema() -> SchemaModel:
    """Navigation (width 208) -> MenuIcon (width 204), one-to-one."""
    return _navigation_schema()


@pytest.fixture
def menu_pattern() -> AccessPattern:
    """Four navigation rows whose MenuIconId values are {1, 2, 3, 3}."""
    return AccessPattern(
        root_entity="Navigation",
        root_row_count=4,
        steps=(
            NavigationStep(
                relationship="Navigation.MenuIcon",
                strategy=LoadStrategy.LAZY,
                projection=("FontAwesomeGlyph",),
                key_values=(1, 2, 3, 3),
            ),
        ),
        name="menu",
    )


@pytest.fixture
def blog_schema() -> SchemaModel:
    """Blog -> Post (one-to-many, fan-out 10) -> Comment (one-to-many, fan-out 5)."""
    schema = SchemaModel()
    schema.add_entity(
        Entity("Blog", (Column("Id", 4), Column("Name", 100)), primary_key="Id")
    )
    schema.add_entity(
        Entity(
            "Post",
            (Column("Id", 4), Column("BlogId", 4), Column("Body", 1000)),
            primary_key="Id",
        )
    )
    schema.add_entity(
        Entity(
            "Comment",
            (
                Column("Id", 4),
                Column("PostId", 4),
                Column("AuthorId", 4),
                Column("Text", 200),
            ),
            primary_key="Id",
        )
    )
    schema.add_entity(
        Entity("Author", (Column("Id", 4), Column("Name", 60)), primary_key="Id")
    )
    schema.add_relationship(
        Relationship(
            "Blog.Posts",
            parent="Blog",
            child="Post",
            foreign_key_column="Id",
            cardinality=Cardinality.ONE_TO_MANY,
            average_fan_out=10,
        )
    )
    schema.add_relationship(
        Relationship(
            "Post.Comments",
            parent="Post",
            child="Comment",
            foreign_key_column="Id",
            cardinality=Cardinality.ONE_TO_MANY,
            average_fan_out=5,
        )
    )
    schema.add_relationship(
        Relationship(
            "Comment.Author",
            parent="Comment",
            child="Author",
            foreign_key_column="AuthorId",
        )
    )
    return schema


@pytest.fixture
def data_dir() -> Path:
    return DATA
