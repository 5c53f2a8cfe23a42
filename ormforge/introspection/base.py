# ============================================================================
# SCHEMA INTROSPECTOR BASE
# ============================================================================
# STATUS: Core - Live catalog reader base
# PURPOSE: Shared table walk, catalog query execution and error handling
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: SchemaIntrospector, coerce_default, normalize_delete_rule
# DEPENDENCIES: (DB-API 2.0 connection supplied by the caller)
# ============================================================================
"""
Schema Introspector Base

Reconstructs a Schema from a live database, independently of any entity
declaration. Dialect subclasses supply three catalog readers:

    list_tables()             -> table names
    list_columns(table)       -> Columns in ordinal order
    list_foreign_keys(table)  -> ForeignKeys

The connection is any DB-API 2.0 connection (psycopg, PyMySQL, sqlite3).
It is owned by the caller: never opened, committed, pooled or closed here.
Every catalog query runs inside _error_context, which logs the failure
and re-raises it as CatalogQueryError. Nothing is retried.
"""

import logging
import re
from abc import ABC, abstractmethod
from contextlib import closing, contextmanager
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ormforge.config import get_defaults
from ormforge.contracts import ColumnType, Dialect, ForeignKeyAction
from ormforge.exceptions import CatalogQueryError
from ormforge.logging import log_context, ComponentType
from ormforge.models import Column, ForeignKey, Table, Schema

logger = logging.getLogger(__name__)

_QUOTED_LITERAL = re.compile(r"^'(.*)'$", re.DOTALL)

_NOW = re.compile(r"^(CURRENT_TIMESTAMP(\(\s*\d*\s*\))?|NOW\(\s*\d*\s*\))$", re.IGNORECASE)

_TRUE_WORDS = ("1", "true", "t", "yes", "y", "on")
_FALSE_WORDS = ("0", "false", "f", "no", "n", "off")


# ============================================================================
# VALUE HELPERS
# ============================================================================

def unquote_literal(text: str) -> str:
    """'it''s' -> it's. Unquoted text is returned unchanged."""
    match = _QUOTED_LITERAL.match(text)
    if match:
        return match.group(1).replace("''", "'")
    return text


def coerce_default(column_type: ColumnType, raw: Any) -> Any:
    """
    Convert a catalog default to the Python value a declaration would carry.

    CURRENT_TIMESTAMP-style keywords are normalized; values that do not
    parse for the column type are kept as text.
    """
    if raw is None:
        return None
    if not isinstance(raw, str):
        return raw

    text = raw.strip()
    upper = text.upper()
    if upper == "NULL":
        return None
    if _NOW.match(text):
        return "CURRENT_TIMESTAMP"
    if upper in ("CURRENT_DATE", "CURRENT_TIME"):
        return upper

    text = unquote_literal(text)
    try:
        if column_type == ColumnType.BOOLEAN:
            if text.lower() in _TRUE_WORDS:
                return True
            if text.lower() in _FALSE_WORDS:
                return False
            return text
        if column_type.is_integer():
            return int(text)
        if column_type in (ColumnType.FLOAT, ColumnType.SMALL_FLOAT):
            return float(text)
        if column_type == ColumnType.DECIMAL:
            return Decimal(text)
    except (ValueError, ArithmeticError):
        return text
    return text


def normalize_delete_rule(rule: Optional[str]) -> Optional[ForeignKeyAction]:
    """
    Catalog delete rule -> ForeignKeyAction.

    NO ACTION and RESTRICT are what engines report when nothing was
    declared, so they map to None.
    """
    if not rule:
        return None
    try:
        action = ForeignKeyAction(" ".join(str(rule).upper().split()))
    except ValueError:
        logger.warning(f"Unknown delete rule '{rule}', ignoring")
        return None
    return None if action.is_implicit() else action


_NATIVE_TYPE = re.compile(r"^\s*(\w+)[^(]*(?:\((.*)\))?", re.DOTALL)
_SIZE = re.compile(r"\s*(\d+)\s*(?:,\s*(\d+)\s*)?")
_ENUM_OPTION = re.compile(r"'((?:[^']|'')*)'")

LENGTH_TYPES = frozenset({"VARCHAR", "VARBINARY"})


def parse_native_type(
    native: str,
    type_map: Mapping[str, ColumnType],
    length_types: frozenset = LENGTH_TYPES,
) -> Dict[str, Any]:
    """
    Parse a native type such as "decimal(10,2)", "varchar(255)",
    "int(11) unsigned" or "enum('a','b')".

    Returns Column keyword arguments. Unknown base types map to string;
    length is only taken for length_types, a two-number suffix becomes
    precision/scale.
    """
    match = _NATIVE_TYPE.match(native or "")
    if not match:
        return {"type": ColumnType.STRING}

    base = match.group(1).upper()
    args = match.group(2)
    column_type = type_map.get(base, ColumnType.STRING)
    spec: Dict[str, Any] = {"type": column_type}

    if column_type == ColumnType.ENUM:
        options = tuple(o.replace("''", "'") for o in _ENUM_OPTION.findall(args or ""))
        if options:
            spec["enum_options"] = options
        else:
            spec["type"] = ColumnType.STRING
        return spec

    size = _SIZE.fullmatch(args or "")
    if not size:
        return spec

    first = int(size.group(1))
    second = int(size.group(2)) if size.group(2) is not None else None
    if base in length_types:
        spec["length"] = first
    elif second is not None:
        spec["precision"], spec["scale"] = first, second
    elif column_type == ColumnType.DECIMAL:
        spec["precision"], spec["scale"] = first, 0
    elif column_type.is_temporal():
        spec["precision"] = first
    return spec


def row_to_dict(description: Optional[Sequence[Any]], row: Any) -> Dict[str, Any]:
    """Normalize tuple rows, dict rows and sqlite3.Row to dicts."""
    if isinstance(row, Mapping):
        return dict(row)
    if hasattr(row, "keys"):
        return {key: row[key] for key in row.keys()}
    names = [d[0] for d in (description or [])]
    return dict(zip(names, row))


# ============================================================================
# BASE INTROSPECTOR
# ============================================================================

class SchemaIntrospector(ABC):
    """
    Base class for dialect introspectors.

    Args:
        connection: Open DB-API 2.0 connection (caller owned)
        migrations_table: Bookkeeping table to skip
                          (defaults to database.migrations_table)
    """

    dialect: Dialect

    def __init__(self, connection: Any, migrations_table: Optional[str] = None):
        self.connection = connection
        self.migrations_table = migrations_table or get_defaults().database.migrations_table
        self.logger = logging.getLogger(self.__class__.__name__)

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def introspect(self) -> Schema:
        """
        Reconstruct the whole Schema.

        Raises:
            CatalogQueryError: Any catalog query failed
        """
        with log_context(dialect=self.dialect.value, component=ComponentType.INTROSPECTOR.value,
                         operation="introspect"):
            tables: List[Table] = []
            for name in self.list_tables():
                if name == self.migrations_table:
                    self.logger.debug(f"Skipping migrations table {name}")
                    continue
                table = self.introspect_table(name)
                if table is not None:
                    tables.append(table)

            schema = Schema.from_tables(tables)
            self.logger.info(f"Introspected {len(schema)} tables")
            return schema

    def introspect_table(self, name: str) -> Optional[Table]:
        """Reconstruct one table, or None when the catalog has no columns for it."""
        with log_context(dialect=self.dialect.value, table=name):
            columns = self.list_columns(name)
            if not columns:
                self.logger.debug(f"Table {name} has no columns in the catalog, omitting")
                return None

            table = Table(name=name).set_columns(columns)
            for foreign_key in self.list_foreign_keys(name):
                table.add_foreign_key(foreign_key)

            self.logger.debug(
                f"Introspected {name}: {len(table.columns)} columns, {len(table.foreign_keys)} foreign keys"
            )
            return table

    # =========================================================================
    # CATALOG READERS
    # =========================================================================

    @abstractmethod
    def list_tables(self) -> List[str]:
        """Names of the base tables in the inspected schema."""

    @abstractmethod
    def list_columns(self, table: str) -> List[Column]:
        """Columns of table in ordinal order."""

    @abstractmethod
    def list_foreign_keys(self, table: str) -> List[ForeignKey]:
        """One ForeignKey per constrained column."""

    # =========================================================================
    # QUERY EXECUTION
    # =========================================================================

    @contextmanager
    def _error_context(self, operation: str, table: Optional[str] = None):
        """
        Context manager for consistent catalog error handling.

        Failures are logged with context and re-raised as CatalogQueryError.

        Example:
            with self._error_context("list columns", "users"):
                cursor.execute(...)
        """
        try:
            yield
        except CatalogQueryError:
            raise
        except Exception as e:
            error_msg = f"{operation} failed"
            if table:
                error_msg += f" for {table}"
            error_msg += f": {e}"
            self.logger.error(error_msg)
            raise CatalogQueryError(error_msg, operation=operation, table=table) from e

    def _fetch_all(
        self,
        query: str,
        params: Sequence[Any] = (),
        operation: str = "catalog query",
        table: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Run a catalog query and return its rows as dicts."""
        with self._error_context(operation, table):
            with closing(self.connection.cursor()) as cursor:
                if params:
                    cursor.execute(query, tuple(params))
                else:
                    cursor.execute(query)
                rows = cursor.fetchall()
                return [row_to_dict(cursor.description, row) for row in rows]

    def _fetch_value(
        self,
        query: str,
        params: Sequence[Any] = (),
        operation: str = "catalog query",
    ) -> Any:
        rows = self._fetch_all(query, params, operation)
        if not rows:
            return None
        return next(iter(rows[0].values()), None)


__all__ = [
    "SchemaIntrospector",
    "coerce_default",
    "normalize_delete_rule",
    "unquote_literal",
    "parse_native_type",
    "row_to_dict",
]
