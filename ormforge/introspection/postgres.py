# ============================================================================
# POSTGRESQL INTROSPECTOR
# ============================================================================
# STATUS: Core - PostgreSQL catalog reader
# PURPOSE: information_schema tables, columns, constraints; pg_enum labels
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: PostgresIntrospector, POSTGRES_TYPE_MAP
# DEPENDENCIES: psycopg (or any DB-API connection using %s placeholders)
# ============================================================================
"""
PostgreSQL Introspector

Reads one schema (default "public", see database.schema_name):

    information_schema.tables / columns      -> tables, columns
    information_schema.table_constraints     -> primary key, single-column unique
    information_schema.referential_constraints
      + key_column_usage / constraint_column_usage -> foreign keys
    pg_enum                                  -> labels of USER-DEFINED enum types

Identity columns and nextval(...) defaults mark auto-increment. Default
literals are unwrapped from their casts ('draft'::character varying -> draft).
"""

import re
from typing import Any, Dict, List, Optional, Set

from ormforge.config import get_defaults
from ormforge.contracts import ColumnType, Dialect
from ormforge.introspection.base import (
    SchemaIntrospector,
    coerce_default,
    normalize_delete_rule,
)
from ormforge.models import Column, ForeignKey

POSTGRES_TYPE_MAP: Dict[str, ColumnType] = {
    "smallint": ColumnType.SMALLINT,
    "integer": ColumnType.INTEGER,
    "bigint": ColumnType.BIGINT,
    "numeric": ColumnType.DECIMAL,
    "real": ColumnType.SMALL_FLOAT,
    "double precision": ColumnType.FLOAT,
    "character varying": ColumnType.STRING,
    "character": ColumnType.STRING,
    "text": ColumnType.TEXT,
    "uuid": ColumnType.UUID,
    "bytea": ColumnType.BLOB,
    "boolean": ColumnType.BOOLEAN,
    "date": ColumnType.DATE,
    "timestamp without time zone": ColumnType.DATETIME,
    "timestamp with time zone": ColumnType.DATETIME_TZ,
    "time without time zone": ColumnType.TIME,
    "time with time zone": ColumnType.TIME,
    "json": ColumnType.JSON,
    "jsonb": ColumnType.JSON,
    "ARRAY": ColumnType.ARRAY,
}

# 'value'::type, NULL::type, 42::integer
_CAST = re.compile(r"^\(?(.*?)\)?::[\w\s\".\[\]]+$", re.DOTALL)

TABLES_QUERY = """
    SELECT table_name
    FROM information_schema.tables
    WHERE table_schema = %s AND table_type = 'BASE TABLE'
    ORDER BY table_name
"""

COLUMNS_QUERY = """
    SELECT
        column_name,
        data_type,
        udt_name,
        character_maximum_length,
        numeric_precision,
        numeric_scale,
        is_nullable,
        column_default,
        is_identity
    FROM information_schema.columns
    WHERE table_schema = %s AND table_name = %s
    ORDER BY ordinal_position
"""

KEYS_QUERY = """
    SELECT
        tc.constraint_name,
        tc.constraint_type,
        kcu.column_name
    FROM information_schema.table_constraints tc
    JOIN information_schema.key_column_usage kcu
        ON kcu.constraint_name = tc.constraint_name
        AND kcu.table_schema = tc.table_schema
        AND kcu.table_name = tc.table_name
    WHERE tc.table_schema = %s
        AND tc.table_name = %s
        AND tc.constraint_type IN ('PRIMARY KEY', 'UNIQUE')
    ORDER BY tc.constraint_name, kcu.ordinal_position
"""

FOREIGN_KEYS_QUERY = """
    SELECT
        tc.constraint_name,
        kcu.column_name,
        ccu.table_name AS foreign_table,
        ccu.column_name AS foreign_column,
        rc.delete_rule
    FROM information_schema.table_constraints tc
    JOIN information_schema.key_column_usage kcu
        ON kcu.constraint_name = tc.constraint_name
        AND kcu.table_schema = tc.table_schema
    JOIN information_schema.constraint_column_usage ccu
        ON ccu.constraint_name = tc.constraint_name
        AND ccu.constraint_schema = tc.table_schema
    JOIN information_schema.referential_constraints rc
        ON rc.constraint_name = tc.constraint_name
        AND rc.constraint_schema = tc.table_schema
    WHERE tc.constraint_type = 'FOREIGN KEY'
        AND tc.table_schema = %s
        AND tc.table_name = %s
    ORDER BY tc.constraint_name, kcu.ordinal_position
"""

ENUM_LABELS_QUERY = """
    SELECT e.enumlabel
    FROM pg_type t
    JOIN pg_enum e ON e.enumtypid = t.oid
    JOIN pg_namespace n ON n.oid = t.typnamespace
    WHERE t.typname = %s AND n.nspname = %s
    ORDER BY e.enumsortorder
"""


def unwrap_cast(default: Optional[str]) -> Optional[str]:
    """Strip the ::type cast PostgreSQL adds to column defaults."""
    if default is None:
        return None
    match = _CAST.match(default.strip())
    return match.group(1) if match else default


class PostgresIntrospector(SchemaIntrospector):
    """Reads tables, columns and foreign keys from one PostgreSQL schema."""

    dialect = Dialect.POSTGRESQL

    def __init__(
        self,
        connection,
        migrations_table: Optional[str] = None,
        schema_name: Optional[str] = None,
    ):
        super().__init__(connection, migrations_table)
        self.schema_name = schema_name or get_defaults().database.schema_name

    def list_tables(self) -> List[str]:
        rows = self._fetch_all(TABLES_QUERY, (self.schema_name,), operation="list tables")
        return [row["table_name"] for row in rows]

    def list_columns(self, table: str) -> List[Column]:
        rows = self._fetch_all(COLUMNS_QUERY, (self.schema_name, table), operation="list columns", table=table)
        if not rows:
            return []

        primary, unique = self._key_columns(table)
        return [self.column_from_row(row, primary, unique, table) for row in rows]

    def list_foreign_keys(self, table: str) -> List[ForeignKey]:
        rows = self._fetch_all(
            FOREIGN_KEYS_QUERY, (self.schema_name, table), operation="list foreign keys", table=table
        )
        return [
            ForeignKey(
                name=row["constraint_name"],
                local_column=row["column_name"],
                foreign_table=row["foreign_table"],
                foreign_column=row["foreign_column"],
                on_delete=normalize_delete_rule(row.get("delete_rule")),
            )
            for row in rows
        ]

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _key_columns(self, table: str):
        """Primary key columns and columns with a single-column UNIQUE constraint."""
        rows = self._fetch_all(KEYS_QUERY, (self.schema_name, table), operation="list key constraints", table=table)

        primary: Set[str] = set()
        unique_constraints: Dict[str, List[str]] = {}
        for row in rows:
            if row["constraint_type"] == "PRIMARY KEY":
                primary.add(row["column_name"])
            else:
                unique_constraints.setdefault(row["constraint_name"], []).append(row["column_name"])

        unique = {cols[0] for cols in unique_constraints.values() if len(cols) == 1}
        return primary, unique

    def enum_labels(self, type_name: str, table: Optional[str] = None) -> List[str]:
        rows = self._fetch_all(
            ENUM_LABELS_QUERY, (type_name, self.schema_name), operation="list enum labels", table=table
        )
        return [row["enumlabel"] for row in rows]

    def column_from_row(self, row: Dict[str, Any], primary: Set[str], unique: Set[str],
                        table: Optional[str] = None) -> Column:
        """Build a Column from one information_schema.columns row."""
        name = row["column_name"]
        data_type = row["data_type"]
        column_type = POSTGRES_TYPE_MAP.get(data_type, ColumnType.STRING)
        spec: Dict[str, Any] = {}

        if data_type == "USER-DEFINED":
            labels = self.enum_labels(row["udt_name"], table)
            if labels:
                column_type = ColumnType.ENUM
                spec["enum_options"] = tuple(labels)
        elif data_type == "character varying" and row.get("character_maximum_length"):
            spec["length"] = int(row["character_maximum_length"])
        elif data_type == "numeric" and row.get("numeric_precision") is not None:
            spec["precision"] = int(row["numeric_precision"])
            spec["scale"] = int(row.get("numeric_scale") or 0)

        raw_default = row.get("column_default")
        auto_increment = str(row.get("is_identity") or "").upper() == "YES"
        if raw_default is not None and str(raw_default).startswith("nextval("):
            auto_increment = True
            raw_default = None

        return Column(
            name=name,
            type=column_type,
            nullable=str(row.get("is_nullable") or "").upper() == "YES",
            unique=name in unique and name not in primary,
            primary_key=name in primary,
            auto_increment=auto_increment,
            default=coerce_default(column_type, unwrap_cast(raw_default)),
            **spec,
        )


__all__ = ["PostgresIntrospector", "POSTGRES_TYPE_MAP", "unwrap_cast"]
