# ============================================================================
# ORMFORGE PACKAGE
# ============================================================================
# STATUS: Package exports
# PURPOSE: Schema derivation, DDL compilation and live introspection
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
ormforge - schema-and-migration engine.

Two independent producers build the same Schema value:
- EntitySchemaReader: annotated Pydantic entities on disk
- create_introspector(...).introspect(): a live database catalog

GrammarDDL implementations turn Schema elements into DDL text, and
MigrationGenerator composes the declarative path into one SQL script.

Usage:
    from ormforge import MigrationGenerator

    print(MigrationGenerator(dialect="postgresql").generate("src/entities"))
"""

from ormforge.__version__ import __version__
from ormforge.contracts import ColumnType, Dialect, ForeignKeyAction, RelationshipKind
from ormforge.exceptions import (
    SchemaError,
    DiscoveryError,
    EntityReflectionError,
    MissingMetadataError,
    CompilationError,
    UnsupportedOperationError,
    CatalogQueryError,
)
from ormforge.models import Column, ForeignKey, Table, Schema
from ormforge.mapping import (
    ColumnMeta,
    JoinColumn,
    JoinTable,
    ManyToOne,
    OneToMany,
    ManyToMany,
)
from ormforge.discovery import EntityDiscovery, DiscoveryResult
from ormforge.schema import EntitySchemaReader, SchemaReadResult
from ormforge.grammar import GrammarDDL, get_grammar
from ormforge.introspection import SchemaIntrospector, create_introspector
from ormforge.migration import MigrationGenerator, MigrationReport
from ormforge.infrastructure import DatabaseConnection

__all__ = [
    "__version__",
    # Contracts
    "ColumnType",
    "Dialect",
    "ForeignKeyAction",
    "RelationshipKind",
    # Errors
    "SchemaError",
    "DiscoveryError",
    "EntityReflectionError",
    "MissingMetadataError",
    "CompilationError",
    "UnsupportedOperationError",
    "CatalogQueryError",
    # Schema Model
    "Column",
    "ForeignKey",
    "Table",
    "Schema",
    # Declarative markers
    "ColumnMeta",
    "JoinColumn",
    "JoinTable",
    "ManyToOne",
    "OneToMany",
    "ManyToMany",
    # Components
    "EntityDiscovery",
    "DiscoveryResult",
    "EntitySchemaReader",
    "SchemaReadResult",
    "GrammarDDL",
    "get_grammar",
    "SchemaIntrospector",
    "create_introspector",
    "MigrationGenerator",
    "MigrationReport",
    "DatabaseConnection",
]
