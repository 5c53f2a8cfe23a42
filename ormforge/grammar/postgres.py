# ============================================================================
# POSTGRESQL GRAMMAR
# ============================================================================
# STATUS: Core - PostgreSQL DDL
# PURPOSE: Double-quote identifiers, identity columns, CHECK-based enums
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: PostgresGrammarDDL, POSTGRES_RULES
# DEPENDENCIES: (none)
# ============================================================================
"""
PostgreSQL grammar.

Type overrides on top of the shared names:
    decimal        -> NUMERIC(p,s)
    datetime       -> TIMESTAMP
    datetimetz     -> TIMESTAMPTZ
    uuid           -> UUID
    binary / blob  -> BYTEA
    json / array   -> JSONB

Enums render as VARCHAR with a CHECK constraint rather than CREATE TYPE,
so a table compiles to one self-contained statement.
"""

from typing import List, Optional, Sequence

from ormforge.config import DDLDefaults
from ormforge.contracts import ColumnType, Dialect
from ormforge.grammar.base import DDLFragments, DialectRules, build_type_names
from ormforge.models import Column, ForeignKey, Table

POSTGRES_RULES = DialectRules(
    dialect=Dialect.POSTGRESQL,
    quote='"',
    type_names=build_type_names({
        ColumnType.DECIMAL: "NUMERIC",
        ColumnType.DATETIME: "TIMESTAMP",
        ColumnType.DATETIME_TZ: "TIMESTAMPTZ",
        ColumnType.UUID: "UUID",
        ColumnType.BINARY: "BYTEA",
        ColumnType.BLOB: "BYTEA",
        ColumnType.JSON: "JSONB",
        ColumnType.ARRAY: "JSONB",
    }),
    sized_types=frozenset({ColumnType.STRING}),
    auto_increment="GENERATED BY DEFAULT AS IDENTITY",
    true_literal="TRUE",
    false_literal="FALSE",
)


class PostgresGrammarDDL:
    """DDL for PostgreSQL."""

    dialect = Dialect.POSTGRESQL

    def __init__(self, ddl: Optional[DDLDefaults] = None):
        self.fragments = DDLFragments(POSTGRES_RULES, ddl)

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
        """
        Rename (its own statement) followed by one ALTER TABLE that sets
        type, nullability and default of the new column.
        """
        wrapped_table = self.wrap(table)
        statements: List[str] = []

        if old_column.name != new_column.name:
            statements.append(
                f"ALTER TABLE {wrapped_table} RENAME COLUMN "
                f"{self.wrap(old_column.name)} TO {self.wrap(new_column.name)}"
            )

        name = self.wrap(new_column.name)
        actions = [f"ALTER COLUMN {name} TYPE {self.type_sql(new_column)}"]

        if new_column.nullable and not new_column.primary_key:
            actions.append(f"ALTER COLUMN {name} DROP NOT NULL")
        else:
            actions.append(f"ALTER COLUMN {name} SET NOT NULL")

        default = self.fragments.default_sql(new_column.default)
        if default is None:
            actions.append(f"ALTER COLUMN {name} DROP DEFAULT")
        else:
            actions.append(f"ALTER COLUMN {name} SET DEFAULT {default}")

        statements.append(f"ALTER TABLE {wrapped_table} " + ", ".join(actions))
        return ";\n".join(statements)

    def compile_foreign_key(self, foreign_key: ForeignKey) -> str:
        return self.fragments.foreign_key_sql(foreign_key)

    def compile_add_foreign_key(self, table: str, foreign_key: ForeignKey) -> str:
        return self.fragments.add_foreign_key_sql(table, foreign_key)

    def compile_drop_foreign_key(self, table: str, foreign_key_name: str) -> str:
        return f"ALTER TABLE {self.wrap(table)} DROP CONSTRAINT {self.wrap(foreign_key_name)}"


__all__ = ["PostgresGrammarDDL", "POSTGRES_RULES"]
