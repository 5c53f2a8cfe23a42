# ============================================================================
# DDL GRAMMARS
# ============================================================================
# STATUS: Core - Dialect registry
# PURPOSE: Look up the grammar for a dialect
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
DDL Grammars.

Usage:
    from ormforge.grammar import get_grammar

    grammar = get_grammar("postgresql")
    print(grammar.compile_table(table))
"""

from typing import Dict, Optional, Type, Union

from ormforge.config import DDLDefaults
from ormforge.contracts import Dialect
from ormforge.grammar.base import (
    DEFAULT_TYPE_NAMES,
    DDLFragments,
    DialectRules,
    GrammarDDL,
    build_type_names,
)
from ormforge.grammar.mysql import MySqlGrammarDDL
from ormforge.grammar.postgres import PostgresGrammarDDL
from ormforge.grammar.sqlite import SqliteGrammarDDL

GRAMMARS: Dict[Dialect, Type] = {
    Dialect.MYSQL: MySqlGrammarDDL,
    Dialect.POSTGRESQL: PostgresGrammarDDL,
    Dialect.SQLITE: SqliteGrammarDDL,
}


def get_grammar(dialect: Union[str, Dialect], ddl: Optional[DDLDefaults] = None) -> GrammarDDL:
    """
    Get the grammar for a dialect.

    Args:
        dialect: Dialect or its name ("mysql", "postgres", "sqlite", ...)
        ddl: Size defaults (defaults to the configured DDLDefaults)

    Raises:
        ValueError: Unknown dialect
    """
    return GRAMMARS[Dialect.parse(dialect)](ddl)


__all__ = [
    "GrammarDDL",
    "DialectRules",
    "DDLFragments",
    "DEFAULT_TYPE_NAMES",
    "build_type_names",
    "MySqlGrammarDDL",
    "PostgresGrammarDDL",
    "SqliteGrammarDDL",
    "GRAMMARS",
    "get_grammar",
]
