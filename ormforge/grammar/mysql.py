# ============================================================================
# MYSQL GRAMMAR
# ============================================================================
# STATUS: Core - MySQL / MariaDB DDL
# PURPOSE: Backtick quoting, native ENUM, AUTO_INCREMENT
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: MySqlGrammarDDL, MYSQL_RULES
# DEPENDENCIES: (none)
# ============================================================================
"""
MySQL grammar.

Type overrides on top of the shared names:
    integer    -> INT
    smallfloat -> FLOAT
    float      -> DOUBLE
    boolean    -> TINYINT(1)
    array      -> LONGTEXT
    enum       -> ENUM('a','b')
"""

from typing import Optional, Sequence

from ormforge.config import DDLDefaults
from ormforge.contracts import ColumnType, Dialect
from ormforge.grammar.base import DDLFragments, DialectRules, build_type_names
from ormforge.models import Column, ForeignKey, Table

MYSQL_RULES = DialectRules(
    dialect=Dialect.MYSQL,
    quote="`",
    type_names=build_type_names({
        ColumnType.INTEGER: "INT",
        ColumnType.SMALL_FLOAT: "FLOAT",
        ColumnType.FLOAT: "DOUBLE",
        ColumnType.BOOLEAN: "TINYINT(1)",
        ColumnType.ARRAY: "LONGTEXT",
    }),
    sized_types=frozenset({ColumnType.STRING, ColumnType.BINARY}),
    auto_increment="AUTO_INCREMENT",
    native_enum=True,
)


class MySqlGrammarDDL:
    """DDL for MySQL and MariaDB."""

    dialect = Dialect.MYSQL

    def __init__(self, ddl: Optional[DDLDefaults] = None):
        self.fragments = DDLFragments(MYSQL_RULES, ddl)

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
        """MODIFY COLUMN in place, CHANGE COLUMN when the name changes."""
        definition = self.fragments.column_sql(
            new_column, auto_increment=new_column.is_auto_increment_effective()
        )
        if old_column.name != new_column.name:
            return f"ALTER TABLE {self.wrap(table)} CHANGE COLUMN {self.wrap(old_column.name)} {definition}"
        return f"ALTER TABLE {self.wrap(table)} MODIFY COLUMN {definition}"

    def compile_foreign_key(self, foreign_key: ForeignKey) -> str:
        return self.fragments.foreign_key_sql(foreign_key)

    def compile_add_foreign_key(self, table: str, foreign_key: ForeignKey) -> str:
        return self.fragments.add_foreign_key_sql(table, foreign_key)

    def compile_drop_foreign_key(self, table: str, foreign_key_name: str) -> str:
        return f"ALTER TABLE {self.wrap(table)} DROP FOREIGN KEY {self.wrap(foreign_key_name)}"


__all__ = ["MySqlGrammarDDL", "MYSQL_RULES"]
