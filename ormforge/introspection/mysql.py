# ============================================================================
# MYSQL INTROSPECTOR
# ============================================================================
# STATUS: Core - MySQL / MariaDB catalog reader
# PURPOSE: SHOW TABLES / SHOW FULL COLUMNS / information_schema foreign keys
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: MySqlIntrospector, MYSQL_TYPE_MAP
# DEPENDENCIES: PyMySQL (or any DB-API connection using %s placeholders)
# ============================================================================
"""
MySQL Introspector

Catalog queries:
    SHOW TABLES
    SHOW FULL COLUMNS FROM `table`
    SELECT DATABASE()
    information_schema.KEY_COLUMN_USAGE + REFERENTIAL_CONSTRAINTS

Column flags come from SHOW FULL COLUMNS:
    Key = PRI / UNI      -> primary_key / unique
    Extra auto_increment -> auto_increment
"""

from typing import Dict, List, Optional

from ormforge.contracts import ColumnType, Dialect
from ormforge.introspection.base import (
    SchemaIntrospector,
    coerce_default,
    normalize_delete_rule,
    parse_native_type,
)
from ormforge.models import Column, ForeignKey

MYSQL_TYPE_MAP: Dict[str, ColumnType] = {
    "SMALLINT": ColumnType.SMALLINT,
    "MEDIUMINT": ColumnType.INTEGER,
    "INT": ColumnType.INTEGER,
    "INTEGER": ColumnType.INTEGER,
    "BIGINT": ColumnType.BIGINT,
    "DECIMAL": ColumnType.DECIMAL,
    "NUMERIC": ColumnType.DECIMAL,
    "FLOAT": ColumnType.SMALL_FLOAT,
    "DOUBLE": ColumnType.FLOAT,
    "REAL": ColumnType.FLOAT,
    "VARCHAR": ColumnType.STRING,
    "CHAR": ColumnType.UUID,
    "TINYTEXT": ColumnType.TEXT,
    "TEXT": ColumnType.TEXT,
    "MEDIUMTEXT": ColumnType.TEXT,
    "LONGTEXT": ColumnType.ARRAY,
    "BINARY": ColumnType.BINARY,
    "VARBINARY": ColumnType.BINARY,
    "TINYBLOB": ColumnType.BLOB,
    "BLOB": ColumnType.BLOB,
    "MEDIUMBLOB": ColumnType.BLOB,
    "LONGBLOB": ColumnType.BLOB,
    "TINYINT": ColumnType.BOOLEAN,
    "DATE": ColumnType.DATE,
    "DATETIME": ColumnType.DATETIME,
    "TIMESTAMP": ColumnType.DATETIME_TZ,
    "TIME": ColumnType.TIME,
    "JSON": ColumnType.JSON,
    "ENUM": ColumnType.ENUM,
}

FOREIGN_KEYS_QUERY = """
    SELECT
        k.CONSTRAINT_NAME AS constraint_name,
        k.COLUMN_NAME AS column_name,
        k.REFERENCED_TABLE_NAME AS referenced_table_name,
        k.REFERENCED_COLUMN_NAME AS referenced_column_name,
        r.DELETE_RULE AS delete_rule
    FROM information_schema.KEY_COLUMN_USAGE k
    LEFT JOIN information_schema.REFERENTIAL_CONSTRAINTS r
        ON r.CONSTRAINT_SCHEMA = k.CONSTRAINT_SCHEMA
        AND r.CONSTRAINT_NAME = k.CONSTRAINT_NAME
    WHERE k.TABLE_NAME = %s
        AND k.TABLE_SCHEMA = %s
        AND k.REFERENCED_TABLE_NAME IS NOT NULL
    ORDER BY k.CONSTRAINT_NAME, k.ORDINAL_POSITION
"""


def _quote(identifier: str) -> str:
    return "`" + identifier.replace("`", "``") + "`"


def _text(value: object) -> str:
    # Some drivers return SHOW output as bytes
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8")
    return "" if value is None else str(value)


class MySqlIntrospector(SchemaIntrospector):
    """Reads tables, columns and foreign keys from MySQL / MariaDB."""

    dialect = Dialect.MYSQL

    def __init__(self, connection, migrations_table: Optional[str] = None):
        super().__init__(connection, migrations_table)
        self._database: Optional[str] = None

    def database_name(self) -> Optional[str]:
        """Current database (cached)."""
        if self._database is None:
            self._database = self._fetch_value("SELECT DATABASE()", operation="read database name")
        return self._database

    def list_tables(self) -> List[str]:
        rows = self._fetch_all("SHOW TABLES", operation="list tables")
        # Single column named Tables_in_<database>
        return [_text(next(iter(row.values()))) for row in rows]

    def list_columns(self, table: str) -> List[Column]:
        rows = self._fetch_all(f"SHOW FULL COLUMNS FROM {_quote(table)}", operation="list columns", table=table)
        return [self.column_from_row(row) for row in rows]

    def list_foreign_keys(self, table: str) -> List[ForeignKey]:
        rows = self._fetch_all(
            FOREIGN_KEYS_QUERY,
            (table, self.database_name()),
            operation="list foreign keys",
            table=table,
        )
        return [
            ForeignKey(
                name=row["constraint_name"],
                local_column=row["column_name"],
                foreign_table=row["referenced_table_name"],
                foreign_column=row["referenced_column_name"],
                on_delete=normalize_delete_rule(row.get("delete_rule")),
            )
            for row in rows
        ]

    @staticmethod
    def column_from_row(row: Dict[str, object]) -> Column:
        """Build a Column from one SHOW FULL COLUMNS row."""
        spec = parse_native_type(_text(row["Type"]), MYSQL_TYPE_MAP)
        key = _text(row.get("Key")).upper()
        extra = _text(row.get("Extra")).lower()

        return Column(
            name=_text(row["Field"]),
            nullable=_text(row.get("Null")).upper() == "YES",
            unique=key == "UNI",
            primary_key=key == "PRI",
            auto_increment="auto_increment" in extra,
            default=coerce_default(spec["type"], row.get("Default")),
            **spec,
        )


__all__ = ["MySqlIntrospector", "MYSQL_TYPE_MAP"]
