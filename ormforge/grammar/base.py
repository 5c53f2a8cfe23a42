# ============================================================================
# DDL GRAMMAR - SHARED FRAGMENTS
# ============================================================================
# STATUS: Core - Dialect-independent DDL fragment generation
# PURPOSE: Type mapping, quoting, column and constraint fragments
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: GrammarDDL, DialectRules, DDLFragments, DEFAULT_TYPE_NAMES
# DEPENDENCIES: ormforge.logging
# ============================================================================
"""
DDL Grammar - Shared Fragments.

A grammar is a GrammarDDL implementation per dialect. Grammars do not
inherit from a common base; each one composes a DDLFragments helper
configured by its DialectRules:

    rules = DialectRules(
        dialect=Dialect.MYSQL,
        quote="`",
        type_names=build_type_names({ColumnType.BOOLEAN: "TINYINT(1)"}),
        auto_increment="AUTO_INCREMENT",
        ...
    )
    fragments = DDLFragments(rules)
    fragments.column_sql(Column(name="active", type="boolean"))
    # `active` TINYINT(1) NOT NULL

Every fragment is plain text. Statements carry no trailing semicolon;
the migration generator terminates them.
"""

import datetime as dt
import json
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Protocol, Sequence, runtime_checkable

from ormforge.config import DDLDefaults, get_defaults
from ormforge.contracts import ColumnType, Dialect
from ormforge.exceptions import CompilationError
from ormforge.logging import get_logger, ComponentType
from ormforge.models import Column, ForeignKey, Table

logger = get_logger(__name__, ComponentType.GRAMMAR)


# ============================================================================
# TYPE MAPPING
# ============================================================================

DEFAULT_TYPE_NAMES: Dict[ColumnType, str] = {
    ColumnType.SMALLINT: "SMALLINT",
    ColumnType.INTEGER: "INTEGER",
    ColumnType.BIGINT: "BIGINT",
    ColumnType.DECIMAL: "DECIMAL",
    ColumnType.SMALL_FLOAT: "REAL",
    ColumnType.FLOAT: "DOUBLE PRECISION",
    ColumnType.STRING: "VARCHAR",
    ColumnType.TEXT: "TEXT",
    ColumnType.UUID: "CHAR(36)",
    ColumnType.BINARY: "VARBINARY",
    ColumnType.BLOB: "BLOB",
    ColumnType.BOOLEAN: "BOOLEAN",
    ColumnType.DATE: "DATE",
    ColumnType.DATETIME: "DATETIME",
    ColumnType.DATETIME_TZ: "TIMESTAMP",
    ColumnType.TIME: "TIME",
    ColumnType.ARRAY: "TEXT",
    ColumnType.JSON: "JSON",
    ColumnType.ENUM: "VARCHAR",
}

# Rendered verbatim as DEFAULT values
RAW_DEFAULTS = frozenset({
    "CURRENT_TIMESTAMP",
    "CURRENT_DATE",
    "CURRENT_TIME",
    "NULL",
})


def build_type_names(overrides: Optional[Mapping[ColumnType, str]] = None) -> Dict[ColumnType, str]:
    """Shared type names with per-dialect overrides applied."""
    names = dict(DEFAULT_TYPE_NAMES)
    names.update(overrides or {})
    return names


# ============================================================================
# DIALECT RULES
# ============================================================================

@dataclass(frozen=True)
class DialectRules:
    """
    Everything a dialect contributes to the shared fragments.

    type_names must cover every ColumnType; construction fails otherwise.
    inline_primary_key: the auto-increment token itself declares the
    primary key, so no trailing PRIMARY KEY clause is emitted for it.
    """
    dialect: Dialect
    quote: str
    type_names: Mapping[ColumnType, str]
    sized_types: FrozenSet[ColumnType]
    auto_increment: str
    native_enum: bool = False
    temporal_precision: bool = True
    inline_primary_key: bool = False
    auto_increment_type: Optional[str] = None
    true_literal: str = "1"
    false_literal: str = "0"

    def __post_init__(self):
        missing = [t.value for t in ColumnType if not self.type_names.get(t)]
        if missing:
            raise ValueError(f"{self.dialect.value} grammar has no native type for: {', '.join(missing)}")


# ============================================================================
# GRAMMAR INTERFACE
# ============================================================================

@runtime_checkable
class GrammarDDL(Protocol):
    """Capability interface implemented once per dialect."""

    dialect: Dialect

    def wrap(self, identifier: str) -> str: ...

    def type_sql(self, column: Column) -> str: ...

    def compile_create_table(
        self,
        table: str,
        columns: Sequence[Column],
        foreign_keys: Sequence[ForeignKey] = (),
        if_not_exists: Optional[bool] = None,
    ) -> str: ...

    def compile_table(self, table: Table, if_not_exists: Optional[bool] = None) -> str: ...

    def compile_drop_table(self, table: str, if_exists: bool = False) -> str: ...

    def compile_add_column(self, table: str, column: Column) -> str: ...

    def compile_drop_column(self, table: str, column_name: str) -> str: ...

    def compile_modify_column(self, table: str, old_column: Column, new_column: Column) -> str: ...

    def compile_foreign_key(self, foreign_key: ForeignKey) -> str: ...

    def compile_add_foreign_key(self, table: str, foreign_key: ForeignKey) -> str: ...

    def compile_drop_foreign_key(self, table: str, foreign_key_name: str) -> str: ...


# ============================================================================
# FRAGMENTS
# ============================================================================

class DDLFragments:
    """
    Column and constraint fragments shared by all grammars.

    Args:
        rules: The dialect's rules
        ddl: Size defaults for columns that leave them unset
    """

    def __init__(self, rules: DialectRules, ddl: Optional[DDLDefaults] = None):
        self.rules = rules
        self.ddl = ddl or get_defaults().ddl

    # =========================================================================
    # IDENTIFIERS AND LITERALS
    # =========================================================================

    def wrap(self, identifier: str) -> str:
        q = self.rules.quote
        return f"{q}{identifier.replace(q, q + q)}{q}"

    def wrap_list(self, identifiers: Sequence[str]) -> str:
        return ", ".join(self.wrap(i) for i in identifiers)

    @staticmethod
    def quote_literal(value: str) -> str:
        return "'" + value.replace("'", "''") + "'"

    def default_sql(self, value: Any) -> Optional[str]:
        """
        Render a DEFAULT value, or None when there is nothing to render.

        Raises:
            CompilationError: The value has no SQL literal form
        """
        if value is None:
            return None
        if isinstance(value, Enum):
            value = value.value
        if isinstance(value, bool):
            return self.rules.true_literal if value else self.rules.false_literal
        if isinstance(value, (int, float, Decimal)):
            return str(value)
        if isinstance(value, str):
            if value.upper() in RAW_DEFAULTS:
                return value.upper()
            return self.quote_literal(value)
        if isinstance(value, (dict, list)):
            return self.quote_literal(json.dumps(value, sort_keys=True))
        if isinstance(value, (dt.datetime, dt.date, dt.time)):
            return self.quote_literal(value.isoformat())
        raise CompilationError(f"Unsupported default value {value!r} ({type(value).__name__})")

    # =========================================================================
    # COLUMNS
    # =========================================================================

    def enum_options(self, column: Column) -> List[str]:
        if not column.enum_options:
            raise CompilationError(f"Enum column '{column.name}' declares no options")
        return list(column.enum_options)

    def type_sql(self, column: Column) -> str:
        """Native type of column, including size suffixes."""
        rules = self.rules
        column_type = column.type
        name = rules.type_names[column_type]

        if column_type == ColumnType.DECIMAL:
            precision = column.precision if column.precision is not None else self.ddl.decimal_precision
            scale = column.scale if column.scale is not None else self.ddl.decimal_scale
            return f"{name}({precision},{scale})"

        if column_type == ColumnType.ENUM:
            options = self.enum_options(column)
            if rules.native_enum:
                return f"ENUM({','.join(self.quote_literal(o) for o in options)})"
            length = column.length or max(self.ddl.enum_length, *(len(o) for o in options))
            return f"{name}({length})"

        if column_type in rules.sized_types:
            if column.length is not None:
                return f"{name}({column.length})"
            if column_type == ColumnType.BINARY:
                return f"{name}({self.ddl.binary_length})"
            return f"{name}({self.ddl.string_length})"

        if column_type.is_temporal() and rules.temporal_precision and column.precision is not None:
            return f"{name}({column.precision})"

        return name

    def check_sql(self, column: Column) -> Optional[str]:
        """CHECK clause for enum columns on dialects without native enums."""
        if column.type != ColumnType.ENUM or self.rules.native_enum:
            return None
        options = ", ".join(self.quote_literal(o) for o in self.enum_options(column))
        return f"CHECK ({self.wrap(column.name)} IN ({options}))"

    def column_sql(self, column: Column, auto_increment: bool = False) -> str:
        """
        Column definition fragment.

        Order: name type NULL|NOT NULL [DEFAULT] [UNIQUE] [auto-increment] [CHECK]
        """
        rules = self.rules
        type_sql = self.type_sql(column)
        if auto_increment and rules.auto_increment_type:
            type_sql = rules.auto_increment_type

        parts = [self.wrap(column.name), type_sql]
        parts.append("NULL" if column.nullable and not column.primary_key else "NOT NULL")

        default = self.default_sql(column.default)
        if default is not None:
            parts.append(f"DEFAULT {default}")

        if column.unique and not column.primary_key:
            parts.append("UNIQUE")

        if auto_increment:
            parts.append(rules.auto_increment)

        check = self.check_sql(column)
        if check:
            parts.append(check)

        return " ".join(parts)

    # =========================================================================
    # CONSTRAINTS
    # =========================================================================

    def foreign_key_sql(self, foreign_key: ForeignKey) -> str:
        sql = (
            f"CONSTRAINT {self.wrap(foreign_key.name)} "
            f"FOREIGN KEY ({self.wrap(foreign_key.local_column)}) "
            f"REFERENCES {self.wrap(foreign_key.foreign_table)} ({self.wrap(foreign_key.foreign_column)})"
        )
        if foreign_key.on_delete is not None:
            sql += f" ON DELETE {foreign_key.on_delete.value}"
        return sql

    @staticmethod
    def auto_increment_column(columns: Sequence[Column]) -> Optional[Column]:
        """The single integer primary key carrying auto-increment, if any."""
        primary = [c for c in columns if c.primary_key]
        if len(primary) == 1 and primary[0].is_auto_increment_effective():
            return primary[0]
        return None

    # =========================================================================
    # STATEMENTS
    # =========================================================================

    def create_table_sql(
        self,
        table: str,
        columns: Sequence[Column],
        foreign_keys: Sequence[ForeignKey] = (),
        if_not_exists: Optional[bool] = None,
    ) -> str:
        """
        CREATE TABLE with every column, the primary key and all foreign keys.

        Raises:
            CompilationError: No columns, or a column cannot be rendered
        """
        if not columns:
            raise CompilationError(f"Table '{table}' has no columns", entity=table)
        if if_not_exists is None:
            if_not_exists = self.ddl.if_not_exists

        auto_column = self.auto_increment_column(columns)
        lines = [self.column_sql(c, auto_increment=c is auto_column) for c in columns]

        primary = [c.name for c in columns if c.primary_key]
        if primary and not (auto_column is not None and self.rules.inline_primary_key):
            lines.append(f"PRIMARY KEY ({self.wrap_list(primary)})")

        lines.extend(self.foreign_key_sql(fk) for fk in foreign_keys)

        head = "CREATE TABLE IF NOT EXISTS" if if_not_exists else "CREATE TABLE"
        body = ",\n    ".join(lines)
        logger.debug(
            f"Compiled {self.rules.dialect.value} CREATE TABLE {table} "
            f"({len(columns)} columns, {len(foreign_keys)} foreign keys)"
        )
        return f"{head} {self.wrap(table)} (\n    {body}\n)"

    def drop_table_sql(self, table: str, if_exists: bool = False) -> str:
        head = "DROP TABLE IF EXISTS" if if_exists else "DROP TABLE"
        return f"{head} {self.wrap(table)}"

    def add_column_sql(self, table: str, column: Column) -> str:
        return f"ALTER TABLE {self.wrap(table)} ADD COLUMN {self.column_sql(column)}"

    def drop_column_sql(self, table: str, column_name: str) -> str:
        return f"ALTER TABLE {self.wrap(table)} DROP COLUMN {self.wrap(column_name)}"

    def add_foreign_key_sql(self, table: str, foreign_key: ForeignKey) -> str:
        return f"ALTER TABLE {self.wrap(table)} ADD {self.foreign_key_sql(foreign_key)}"


__all__ = [
    "DEFAULT_TYPE_NAMES",
    "RAW_DEFAULTS",
    "build_type_names",
    "DialectRules",
    "GrammarDDL",
    "DDLFragments",
]
