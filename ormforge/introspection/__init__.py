# ============================================================================
# DATABASE INTROSPECTION
# ============================================================================
# STATUS: Core - Live catalog readers
# PURPOSE: Rebuild a Schema from a running database
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
Database Introspection.

Usage:
    from ormforge.introspection import create_introspector

    introspector = create_introspector(conn, "postgresql", schema_name="app")
    schema = introspector.introspect()
"""

from typing import Any, Dict, Optional, Type, Union

from ormforge.contracts import Dialect
from ormforge.introspection.base import (
    SchemaIntrospector,
    coerce_default,
    normalize_delete_rule,
    parse_native_type,
)
from ormforge.introspection.mysql import MySqlIntrospector, MYSQL_TYPE_MAP
from ormforge.introspection.postgres import PostgresIntrospector, POSTGRES_TYPE_MAP
from ormforge.introspection.sqlite import SqliteIntrospector, SQLITE_TYPE_MAP

INTROSPECTORS: Dict[Dialect, Type[SchemaIntrospector]] = {
    Dialect.MYSQL: MySqlIntrospector,
    Dialect.POSTGRESQL: PostgresIntrospector,
    Dialect.SQLITE: SqliteIntrospector,
}


def create_introspector(
    connection: Any,
    dialect: Union[str, Dialect],
    migrations_table: Optional[str] = None,
    **kwargs: Any,
) -> SchemaIntrospector:
    """
    Create the introspector for a dialect.

    Args:
        connection: Open DB-API connection (caller owned)
        dialect: Dialect or its name
        migrations_table: Bookkeeping table to skip
        **kwargs: Dialect options (schema_name for PostgreSQL)
    """
    cls = INTROSPECTORS[Dialect.parse(dialect)]
    return cls(connection, migrations_table, **kwargs)


__all__ = [
    "SchemaIntrospector",
    "MySqlIntrospector",
    "PostgresIntrospector",
    "SqliteIntrospector",
    "MYSQL_TYPE_MAP",
    "POSTGRES_TYPE_MAP",
    "SQLITE_TYPE_MAP",
    "INTROSPECTORS",
    "create_introspector",
    "coerce_default",
    "normalize_delete_rule",
    "parse_native_type",
]
