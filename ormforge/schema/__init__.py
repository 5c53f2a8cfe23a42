"""Declarative schema reading."""

from ormforge.schema.reader import (
    EntitySchemaReader,
    SchemaReadResult,
    TargetResolver,
    infer_column_type,
    unwrap_optional,
)

__all__ = [
    "EntitySchemaReader",
    "SchemaReadResult",
    "TargetResolver",
    "infer_column_type",
    "unwrap_optional",
]
