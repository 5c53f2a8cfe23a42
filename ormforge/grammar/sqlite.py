# ============================================================================
# SQLITE GRAMMAR
# ============================================================================
# STATUS: Core - SQLite DDL
# PURPOSE: Inline INTEGER PRIMARY KEY AUTOINCREMENT, CHECK-based enums
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: SqliteGrammarDDL, SQLITE_RULES
# DEPENDENCIES: (none)
# ============================================================================
"""
SQLite grammar.

SQLite cannot alter a column's definition or add/drop constraints on an
existing table; those operations raise UnsupportedOperationError.
"""

from typing import Optional, Sequence

from ormforge.config import DDLDefaults
from ormforge.contracts import ColumnType, Dialect
from ormforge.exceptions import UnsupportedOperationError
from ormforge.grammar.base import DDLFragments, DialectRules, build_type_names
from ormforge.models import Column, ForeignKey, Table

SQLITE_RULES = DialectRules(
    dialect=Dialect.SQLITE,
    quote='"',
    type_names=build_type_names({
        ColumnType.SMALL_FLOAT: "FLOAT",
        ColumnType.FLOAT: "DOUBLE",
        ColumnType.ARRAY: "LONGTEXT",
    }),
    sized_types=frozenset({ColumnType.STRING, ColumnType.BINARY}),
    auto_increment="PRIMARY KEY AUTOINCREMENT",
    temporal_precision=False,
    inline_primary_key=True,
    # AUTOINCREMENT is only accepted on a column typed exactly INTEGER
    auto_increment_type="INTEGER",
)


class SqliteGrammarDDL:
    """DDL for SQLite."""

    dialect = Dialect.SQLITE

    def __init__(self, ddl: Optional[DDLDefaults] = None):
        self.fragments = DDLFragments(SQLITE_RULES, ddl)

    def wrap(self, identifier: str) -> str:
        return self.fragments.wrap(identifier)

    def type_sql(self, column: Column) -> str:
        return self.fragments.type_sql(column)

    def compile_create_table(
        self,
        table: str,
        columns: Sequence[Column],
        foreign_keys: Sequence[ForeignKey] = (),
        if_not_exists: Optional[bool] = None,
    ) -> str:
        return self.fragments.create_table_sql(table, columns, foreign_keys, if_not_exists)

    def compile_table(self, table: Table, if_not_exists: Optional[bool] = None) -> str:
        return self.compile_create_table(table.name, table.columns, table.foreign_keys, if_not_exists)

    def compile_drop_table(self, table: str, if_exists: bool = False) -> str:
        return self.fragments.drop_table_sql(table, if_exists)

    def compile_add_column(self, table: str, column: Column) -> str:
        return self.fragments.add_column_sql(table, column)

    def compile_drop_column(self, table: str, column_name: str) -> str:
        return self.fragments.drop_column_sql(table, column_name)

    def compile_modify_column(self, table: str, old_column: Column, new_column: Column) -> str:
        raise UnsupportedOperationError(self.dialect.value, "modifying columns")

    def compile_foreign_key(self, foreign_key: ForeignKey) -> str:
        return self.fragments.foreign_key_sql(foreign_key)

    def compile_add_foreign_key(self, table: str, foreign_key: ForeignKey) -> str:
        raise UnsupportedOperationError(self.dialect.value, "adding foreign keys to an existing table")

    def compile_drop_foreign_key(self, table: str, foreign_key_name: str) -> str:
        raise UnsupportedOperationError(self.dialect.value, "dropping foreign keys")


__all__ = ["SqliteGrammarDDL", "SQLITE_RULES"]
