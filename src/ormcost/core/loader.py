"""Load schemas and access patterns from JSON documents.

Document layout (keys follow the camelCase names used in reports):

    {
      "entities": [{"name": ..., "primaryKey": ..., "columns": [{"name": ..., "byteWidth": ...}]}],
      "relationships": [{"name": ..., "parent": ..., "child": ..., "foreignKeyColumn": ...,
                         "cardinality": "one-to-one" | "one-to-many", "averageFanOut": ...}],
      "patterns": [{"name": ..., "rootEntity": ..., "rootRowCount": ...,
                    "steps": [{"relationship": ..., "strategy": ..., "projection": [...],
                               "fanOut": ..., "keyValues": [...], "distinctKeys": ...}]}],
      "config": {"dedupeRepeatedLazyKeys": ..., "maxNavigationDepth": ..., "tieBreak": ...}
    }

Structural problems raise DocumentError with a path such as
`patterns[1].steps[0].strategy`; schema-level problems surface as the usual
analyzer errors.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from ormcost.core.config import AnalyzerConfig, TieBreak
from ormcost.core.errors import DocumentError
from ormcost.core.patterns import AccessPattern, LoadStrategy, NavigationStep
from ormcost.core.schema import Cardinality, Column, Entity, Relationship, SchemaModel

_MISSING = object()


@dataclass(frozen=True)
class Document:
    """A parsed analysis document."""

    schema: SchemaModel
    patterns: tuple[AccessPattern, ...]
    config: AnalyzerConfig

    def pattern(self, name: str) -> AccessPattern:
        for p in self.patterns:
            if p.label == name:
                return p
        raise DocumentError("patterns", f"no pattern named '{name}'")


def _get(data: Mapping[str, Any], key: str, path: str, default: Any = _MISSING) -> Any:
    if not isinstance(data, Mapping):
        raise DocumentError(path, "expected an object")
    if key in data:
        return data[key]
    if default is _MISSING:
        raise DocumentError(f"{path}.{key}", "missing required key")
    return default


def _list(value: Any, path: str) -> list:
    if not isinstance(value, list):
        raise DocumentError(path, "expected a list")
    return value


def _enum(enum_cls, value: Any, path: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(e.value for e in enum_cls)
        raise DocumentError(path, f"'{value}' is not one of: {allowed}") from None


def _int(value: Any, path: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise DocumentError(path, f"expected an integer, got {value!r}")
    return value


def _number(value: Any, path: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DocumentError(path, f"expected a number, got {value!r}")
    return float(value)


def entity_from_dict(data: Mapping[str, Any], path: str = "entity") -> Entity:
    name = _get(data, "name", path)
    columns = []
    for i, raw in enumerate(_list(_get(data, "columns", path), f"{path}.columns")):
        col_path = f"{path}.columns[{i}]"
        try:
            columns.append(
                Column(
                    name=_get(raw, "name", col_path),
                    byte_width=_int(_get(raw, "byteWidth", col_path), f"{col_path}.byteWidth"),
                )
            )
        except ValueError as exc:
            raise DocumentError(col_path, str(exc)) from exc
    try:
        return Entity(
            name=name,
            columns=tuple(columns),
            primary_key=_get(data, "primaryKey", path),
        )
    except ValueError as exc:
        raise DocumentError(path, str(exc)) from exc


def relationship_from_dict(
    data: Mapping[str, Any], path: str = "relationship"
) -> Relationship:
    try:
        return Relationship(
            name=_get(data, "name", path),
            parent=_get(data, "parent", path),
            child=_get(data, "child", path),
            foreign_key_column=_get(data, "foreignKeyColumn", path),
            cardinality=_enum(
                Cardinality,
                _get(data, "cardinality", path, Cardinality.ONE_TO_ONE.value),
                f"{path}.cardinality",
            ),
            average_fan_out=_number(
                _get(data, "averageFanOut", path, 1.0), f"{path}.averageFanOut"
            ),
        )
    except (TypeError, ValueError) as exc:
        raise DocumentError(path, str(exc)) from exc


def schema_from_dict(data: Mapping[str, Any]) -> SchemaModel:
    """Build (but do not freeze) a schema from a document mapping."""
    schema = SchemaModel()
    for i, raw in enumerate(_list(_get(data, "entities", "$"), "entities")):
        schema.add_entity(entity_from_dict(raw, f"entities[{i}]"))
    for i, raw in enumerate(
        _list(_get(data, "relationships", "$", []), "relationships")
    ):
        schema.add_relationship(relationship_from_dict(raw, f"relationships[{i}]"))
    return schema


def step_from_dict(data: Mapping[str, Any], path: str = "step") -> NavigationStep:
    projection = _get(data, "projection", path, None)
    key_values = _get(data, "keyValues", path, None)
    fan_out = _get(data, "fanOut", path, None)
    distinct_keys = _get(data, "distinctKeys", path, None)
    return NavigationStep(
        relationship=_get(data, "relationship", path),
        strategy=_enum(
            LoadStrategy,
            _get(data, "strategy", path, LoadStrategy.LAZY.value),
            f"{path}.strategy",
        ),
        projection=(
            tuple(_list(projection, f"{path}.projection"))
            if projection is not None
            else None
        ),
        fan_out=(
            _number(fan_out, f"{path}.fanOut") if fan_out is not None else None
        ),
        key_values=(
            tuple(_list(key_values, f"{path}.keyValues"))
            if key_values is not None
            else None
        ),
        distinct_keys=(
            _int(distinct_keys, f"{path}.distinctKeys")
            if distinct_keys is not None
            else None
        ),
    )


def pattern_from_dict(data: Mapping[str, Any], path: str = "pattern") -> AccessPattern:
    steps = _list(_get(data, "steps", path, []), f"{path}.steps")
    return AccessPattern(
        root_entity=_get(data, "rootEntity", path),
        root_row_count=_int(_get(data, "rootRowCount", path), f"{path}.rootRowCount"),
        steps=tuple(
            step_from_dict(raw, f"{path}.steps[{i}]") for i, raw in enumerate(steps)
        ),
        name=_get(data, "name", path, ""),
    )


def config_from_dict(
    data: Mapping[str, Any], base: AnalyzerConfig | None = None
) -> AnalyzerConfig:
    """Apply a document's `config` section on top of a base config."""
    base = base or AnalyzerConfig()
    dedupe = _get(data, "dedupeRepeatedLazyKeys", "config", None)
    max_depth = _get(data, "maxNavigationDepth", "config", None)
    tie_break = _get(data, "tieBreak", "config", None)
    if dedupe is not None and not isinstance(dedupe, bool):
        raise DocumentError(
            "config.dedupeRepeatedLazyKeys", f"expected a boolean, got {dedupe!r}"
        )
    try:
        return base.with_overrides(
            dedupe_repeated_lazy_keys=dedupe,
            max_navigation_depth=(
                _int(max_depth, "config.maxNavigationDepth")
                if max_depth is not None
                else None
            ),
            tie_break=(
                _enum(TieBreak, tie_break, "config.tieBreak")
                if tie_break is not None
                else None
            ),
        )
    except ValueError as exc:
        raise DocumentError("config", str(exc)) from exc


def document_from_dict(
    data: Mapping[str, Any], base_config: AnalyzerConfig | None = None
) -> Document:
    schema = schema_from_dict(data)
    patterns = tuple(
        pattern_from_dict(raw, f"patterns[{i}]")
        for i, raw in enumerate(_list(_get(data, "patterns", "$", []), "patterns"))
    )
    config = config_from_dict(_get(data, "config", "$", {}), base_config)
    return Document(schema=schema.freeze(), patterns=patterns, config=config)


def load_document(
    path: str | Path, base_config: AnalyzerConfig | None = None
) -> Document:
    """Read and parse a JSON analysis document from disk."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise DocumentError(str(path), f"cannot read file: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise DocumentError(str(path), f"invalid JSON: {exc}") from exc
    return document_from_dict(data, base_config)
