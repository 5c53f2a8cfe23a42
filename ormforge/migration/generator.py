# ============================================================================
# MIGRATION GENERATOR
# ============================================================================
# STATUS: Core - Declarative path composition root
# PURPOSE: Discovery -> Reader -> Grammar, one CREATE TABLE per table
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: MigrationGenerator, MigrationReport, TableResult, order_tables
# DEPENDENCIES: (none)
# ============================================================================
"""
MigrationGenerator - CREATE TABLE script for a source tree.

Workflow:
1. Read the entity directory into a Schema (EntitySchemaReader)
2. Order tables so referenced tables come first
3. Compile each table with at least one column (GrammarDDL.compile_table)
4. Join the statements with blank lines, each terminated by ";"

A table that fails to compile is rendered as an SQL comment and the
rest of the script is still produced:

    -- Error generating SQL for app.entities.Invoice: Enum column 'state' declares no options

Usage:
    generator = MigrationGenerator(dialect="mysql")
    print(generator.generate("src/entities"))

    # With details
    report = generator.generate_report("src/entities")
    print(report.to_dict()["summary"])
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ormforge.config import get_defaults
from ormforge.contracts import Dialect
from ormforge.exceptions import SchemaError
from ormforge.grammar import GrammarDDL, get_grammar
from ormforge.logging import get_logger, log_context, ComponentType
from ormforge.models import Schema, Table
from ormforge.schema import EntitySchemaReader

logger = get_logger(__name__, ComponentType.GENERATOR)

STATEMENT_SEPARATOR = "\n\n"


# ============================================================================
# DATA CLASSES
# ============================================================================

@dataclass
class TableResult:
    """Result of compiling a single table."""
    table: str
    entity: Optional[str]
    status: str  # 'success', 'failed', 'skipped'
    sql: Optional[str] = None
    error: Optional[str] = None

    def to_block(self) -> Optional[str]:
        """Script text for this table, None for skipped tables."""
        if self.status == "success":
            return f"{self.sql};"
        if self.status == "failed":
            message = " ".join(str(self.error).split())
            return f"-- Error generating SQL for {self.entity or self.table}: {message}"
        return None


@dataclass
class MigrationReport:
    """Complete result of one generation run."""
    dialect: str
    source: str
    timestamp: str
    tables: List[TableResult] = field(default_factory=list)
    discovery_skipped: Dict[str, str] = field(default_factory=dict)

    @property
    def statements(self) -> List[str]:
        return [f"{t.sql};" for t in self.tables if t.status == "success"]

    @property
    def errors(self) -> Dict[str, str]:
        return {t.entity or t.table: t.error for t in self.tables if t.status == "failed"}

    @property
    def skipped(self) -> List[str]:
        return [t.table for t in self.tables if t.status == "skipped"]

    @property
    def success(self) -> bool:
        return not self.errors

    def blocks(self) -> List[str]:
        return [block for block in (t.to_block() for t in self.tables) if block]

    def to_sql(self) -> str:
        return STATEMENT_SEPARATOR.join(self.blocks())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "dialect": self.dialect,
            "source": self.source,
            "timestamp": self.timestamp,
            "success": self.success,
            "tables": [
                {
                    "table": t.table,
                    "entity": t.entity,
                    "status": t.status,
                    "error": t.error,
                }
                for t in self.tables
            ],
            "discovery_skipped": self.discovery_skipped,
            "summary": {
                "total_tables": len(self.tables),
                "compiled": len(self.statements),
                "failed": len(self.errors),
                "skipped": len(self.skipped),
            },
        }


# ============================================================================
# TABLE ORDERING
# ============================================================================

def order_tables(tables: List[Table]) -> List[Table]:
    """
    Order tables so that referenced tables precede referencing ones.

    Stable: among tables whose dependencies are satisfied the earliest
    declared goes first. Tables caught in a cycle keep declaration order.
    """
    by_name = {t.name: t for t in tables}
    dependencies = {
        t.name: [name for name in t.referenced_tables() if name in by_name]
        for t in tables
    }

    ordered: List[Table] = []
    emitted = set()
    remaining = [t.name for t in tables]

    while remaining:
        ready = next(
            (name for name in remaining if all(dep in emitted for dep in dependencies[name])),
            None,
        )
        if ready is None:
            ready = remaining[0]
            logger.warning(f"Foreign key cycle involving {', '.join(remaining)}; keeping declaration order")
        ordered.append(by_name[ready])
        emitted.add(ready)
        remaining.remove(ready)

    return ordered


# ============================================================================
# MIGRATION GENERATOR
# ============================================================================

class MigrationGenerator:
    """
    Declarative-path composition root.

    Args:
        dialect: Target dialect (defaults to database.dialect)
        reader: Schema reader (defaults to a lenient EntitySchemaReader)
        grammar: Grammar override (defaults to get_grammar(dialect))
        if_not_exists: Emit CREATE TABLE IF NOT EXISTS
    """

    def __init__(
        self,
        dialect: Union[str, Dialect, None] = None,
        reader: Optional[EntitySchemaReader] = None,
        grammar: Optional[GrammarDDL] = None,
        if_not_exists: Optional[bool] = None,
    ):
        self.grammar = grammar or get_grammar(dialect or get_defaults().database.dialect)
        self.dialect = self.grammar.dialect
        self.reader = reader or EntitySchemaReader()
        self.if_not_exists = if_not_exists

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def generate(self, directory: Union[str, Path]) -> str:
        """SQL script creating every table declared under directory."""
        return self.generate_report(directory).to_sql()

    def generate_statements(self, directory: Union[str, Path]) -> List[str]:
        """Script blocks (statements and error comments) in output order."""
        return self.generate_report(directory).blocks()

    def generate_report(self, directory: Union[str, Path]) -> MigrationReport:
        result = self.reader.read_detailed(directory)
        report = self.compile_schema(result.schema, result.sources, source=str(directory))
        report.discovery_skipped = dict(result.skipped)
        return report

    def generate_drop(self, directory: Union[str, Path]) -> str:
        """DROP TABLE statements for the same tables, referencing tables first."""
        schema = self.reader.read(directory)
        tables = [t for t in order_tables(schema.all_tables()) if t.has_columns()]
        return STATEMENT_SEPARATOR.join(
            f"{self.grammar.compile_drop_table(t.name, if_exists=True)};" for t in reversed(tables)
        )

    def compile_schema(
        self,
        schema: Schema,
        sources: Optional[Dict[str, str]] = None,
        source: str = "<schema>",
    ) -> MigrationReport:
        """
        Compile an already built Schema.

        Args:
            schema: Tables to compile
            sources: table name -> entity identifier, used in error comments
            source: Label recorded in the report
        """
        sources = sources or {}
        report = MigrationReport(
            dialect=self.dialect.value,
            source=source,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

        with log_context(dialect=self.dialect.value, component=ComponentType.GENERATOR.value,
                         operation="generate"):
            for table in order_tables(schema.all_tables()):
                entity = sources.get(table.name)
                report.tables.append(self._compile_table(table, entity))

            logger.info(
                f"Generated {len(report.statements)} statements "
                f"({len(report.errors)} failed, {len(report.skipped)} skipped)"
            )

        return report

    # =========================================================================
    # INTERNAL
    # =========================================================================

    def _compile_table(self, table: Table, entity: Optional[str]) -> TableResult:
        with log_context(table=table.name, entity=entity):
            if not table.has_columns():
                logger.debug(f"Table {table.name} has no columns, skipping")
                return TableResult(table=table.name, entity=entity, status="skipped")

            try:
                sql = self.grammar.compile_table(table, if_not_exists=self.if_not_exists)
            except SchemaError as e:
                logger.warning(f"Failed to compile {table.name}: {e}")
                return TableResult(table=table.name, entity=entity, status="failed", error=str(e))

            logger.debug(f"Compiled {table.name}")
            return TableResult(table=table.name, entity=entity, status="success", sql=sql)


__all__ = [
    "MigrationGenerator",
    "MigrationReport",
    "TableResult",
    "order_tables",
]
