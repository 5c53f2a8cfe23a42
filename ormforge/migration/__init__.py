"""Migration script generation."""

from ormforge.migration.generator import (
    MigrationGenerator,
    MigrationReport,
    TableResult,
    order_tables,
)

__all__ = [
    "MigrationGenerator",
    "MigrationReport",
    "TableResult",
    "order_tables",
]
