# ============================================================================
# SQLITE INTROSPECTOR
# ============================================================================
# STATUS: Core - SQLite catalog reader
# PURPOSE: sqlite_master and PRAGMA table_info / foreign_key_list / index_list
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: SqliteIntrospector, SQLITE_TYPE_MAP
# DEPENDENCIES: sqlite3
# ============================================================================
"""
SQLite Introspector

SQLite keeps the declared type text of each column, so types are parsed
the same way as MySQL's. Foreign keys are unnamed in the catalog and get
the fk_<table>_<column> name the reader uses.
"""

import re
from typing import Dict, List, Set

from ormforge.contracts import ColumnType, Dialect
from ormforge.introspection.base import (
    SchemaIntrospector,
    coerce_default,
    normalize_delete_rule,
    parse_native_type,
)
from ormforge.models import Column, ForeignKey

SQLITE_TYPE_MAP: Dict[str, ColumnType] = {
    "SMALLINT": ColumnType.SMALLINT,
    "INT": ColumnType.INTEGER,
    "INTEGER": ColumnType.INTEGER,
    "MEDIUMINT": ColumnType.INTEGER,
    "BIGINT": ColumnType.BIGINT,
    "DECIMAL": ColumnType.DECIMAL,
    "NUMERIC": ColumnType.DECIMAL,
    "FLOAT": ColumnType.SMALL_FLOAT,
    "REAL": ColumnType.FLOAT,
    "DOUBLE": ColumnType.FLOAT,
    "VARCHAR": ColumnType.STRING,
    "CHAR": ColumnType.UUID,
    "TEXT": ColumnType.TEXT,
    "LONGTEXT": ColumnType.ARRAY,
    "VARBINARY": ColumnType.BINARY,
    "BLOB": ColumnType.BLOB,
    "BOOLEAN": ColumnType.BOOLEAN,
    "TINYINT": ColumnType.BOOLEAN,
    "DATE": ColumnType.DATE,
    "DATETIME": ColumnType.DATETIME,
    "TIMESTAMP": ColumnType.DATETIME_TZ,
    "TIME": ColumnType.TIME,
    "JSON": ColumnType.JSON,
}

_AUTOINCREMENT = re.compile(r"\bAUTOINCREMENT\b", re.IGNORECASE)


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


class SqliteIntrospector(SchemaIntrospector):
    """Reads tables, columns and foreign keys from a SQLite database."""

    dialect = Dialect.SQLITE

    def list_tables(self) -> List[str]:
        rows = self._fetch_all(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name",
            operation="list tables",
        )
        return [row["name"] for row in rows]

    def list_columns(self, table: str) -> List[Column]:
        rows = self._fetch_all(f"PRAGMA table_info({_quote(table)})", operation="list columns", table=table)
        if not rows:
            return []

        primary = [row for row in rows if row["pk"]]
        autoincrement = len(primary) == 1 and self._has_autoincrement(table)
        unique = self._unique_columns(table)

        columns = []
        for row in rows:
            spec = parse_native_type(row["type"] or "", SQLITE_TYPE_MAP)
            is_primary = bool(row["pk"])
            columns.append(Column(
                name=row["name"],
                nullable=not row["notnull"] and not is_primary,
                unique=row["name"] in unique and not is_primary,
                primary_key=is_primary,
                auto_increment=is_primary and autoincrement,
                default=coerce_default(spec["type"], row["dflt_value"]),
                **spec,
            ))
        return columns

    def list_foreign_keys(self, table: str) -> List[ForeignKey]:
        rows = self._fetch_all(
            f"PRAGMA foreign_key_list({_quote(table)})", operation="list foreign keys", table=table
        )
        return [
            ForeignKey(
                name=f"fk_{table}_{row['from']}",
                local_column=row["from"],
                foreign_table=row["table"],
                foreign_column=row["to"] or "id",
                on_delete=normalize_delete_rule(row.get("on_delete")),
            )
            # foreign_key_list numbers constraints from the last declared one
            for row in sorted(rows, key=lambda r: (-r["id"], r["seq"]))
        ]

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _has_autoincrement(self, table: str) -> bool:
        rows = self._fetch_all(
            "SELECT sql FROM sqlite_master WHERE type = 'table' AND name = ?",
            (table,),
            operation="read table definition",
            table=table,
        )
        return bool(rows) and bool(_AUTOINCREMENT.search(rows[0]["sql"] or ""))

    def _unique_columns(self, table: str) -> Set[str]:
        """Columns covered by a single-column unique index."""
        indexes = self._fetch_all(f"PRAGMA index_list({_quote(table)})", operation="list indexes", table=table)

        unique: Set[str] = set()
        for index in indexes:
            if not index["unique"] or index.get("origin") == "pk":
                continue
            info = self._fetch_all(
                f"PRAGMA index_info({_quote(index['name'])})", operation="read index", table=table
            )
            if len(info) == 1 and info[0]["name"]:
                unique.add(info[0]["name"])
        return unique


__all__ = ["SqliteIntrospector", "SQLITE_TYPE_MAP"]
