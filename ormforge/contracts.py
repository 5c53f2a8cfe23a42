# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# STATUS: Foundation - Logical column types, dialects, foreign key actions
# PURPOSE: Fixed registries shared by the reader, grammars and introspectors
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: ColumnType, Dialect, ForeignKeyAction, RelationshipKind
# DEPENDENCIES: enum
# ============================================================================
"""
Base contracts for the schema engine.

These registries cross every boundary of the engine:
- Declarative markers (entity declarations)
- Schema Model (Column / ForeignKey / Table / Schema)
- DDL grammars (logical type -> native type)
- Introspectors (native type -> logical type)
"""

from enum import Enum
from typing import FrozenSet, List, Union


# ============================================================================
# LOGICAL COLUMN TYPES
# ============================================================================

class ColumnType(str, Enum):
    """
    Engine-agnostic domain types.

    A Column can only be built with one of these; every grammar must map
    each of them to a native type.
    """
    SMALLINT = "smallint"
    INTEGER = "integer"
    BIGINT = "bigint"
    DECIMAL = "decimal"
    SMALL_FLOAT = "smallfloat"
    FLOAT = "float"
    STRING = "string"
    TEXT = "text"
    UUID = "uuid"
    BINARY = "binary"
    BLOB = "blob"
    BOOLEAN = "boolean"
    DATE = "date"
    DATETIME = "datetime"
    DATETIME_TZ = "datetimetz"
    TIME = "time"
    ARRAY = "array"
    JSON = "json"
    ENUM = "enum"

    def is_integer(self) -> bool:
        """Check if this type belongs to the integer family."""
        return self in INTEGER_TYPES

    def is_temporal(self) -> bool:
        """Check if this type accepts a fractional-seconds precision."""
        return self in (ColumnType.DATETIME, ColumnType.DATETIME_TZ, ColumnType.TIME)

    @classmethod
    def values(cls) -> List[str]:
        return [member.value for member in cls]


INTEGER_TYPES: FrozenSet[ColumnType] = frozenset({
    ColumnType.SMALLINT,
    ColumnType.INTEGER,
    ColumnType.BIGINT,
})


# ============================================================================
# DIALECTS
# ============================================================================

class Dialect(str, Enum):
    """Supported database engines."""
    MYSQL = "mysql"
    POSTGRESQL = "postgresql"
    SQLITE = "sqlite"

    @classmethod
    def parse(cls, value: Union[str, "Dialect"]) -> "Dialect":
        """Accept a Dialect or a case-insensitive name (with common aliases)."""
        if isinstance(value, Dialect):
            return value
        name = str(value).strip().lower()
        aliases = {"postgres": "postgresql", "pgsql": "postgresql", "mariadb": "mysql", "sqlite3": "sqlite"}
        name = aliases.get(name, name)
        try:
            return cls(name)
        except ValueError:
            raise ValueError(
                f"Unknown dialect: {value}. Supported dialects are: {', '.join(d.value for d in cls)}"
            )


# ============================================================================
# FOREIGN KEY ACTIONS
# ============================================================================

class ForeignKeyAction(str, Enum):
    """Referential actions accepted for ON DELETE."""
    CASCADE = "CASCADE"
    SET_NULL = "SET NULL"
    SET_DEFAULT = "SET DEFAULT"
    RESTRICT = "RESTRICT"
    NO_ACTION = "NO ACTION"

    def is_implicit(self) -> bool:
        """Engines report these when no action was declared."""
        return self in (ForeignKeyAction.RESTRICT, ForeignKeyAction.NO_ACTION)


# ============================================================================
# RELATIONSHIP KINDS
# ============================================================================

class RelationshipKind(str, Enum):
    """Tags for the transient relationship markers consumed by the reader."""
    MANY_TO_ONE = "many_to_one"
    ONE_TO_MANY = "one_to_many"
    MANY_TO_MANY = "many_to_many"


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ColumnType",
    "INTEGER_TYPES",
    "Dialect",
    "ForeignKeyAction",
    "RelationshipKind",
]
