# ============================================================================
# SCHEMA ENGINE EXCEPTIONS
# ============================================================================
# STATUS: Foundation - Error taxonomy
# PURPOSE: Distinguish fail-fast definitional errors from recoverable ones
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
Schema Engine Exceptions

Fail fast:
- MissingMetadataError: relationship target has no table marker
- CatalogQueryError: a catalog query against the live database failed
- DiscoveryError / EntityReflectionError: only raised in strict mode

Recovered locally (lenient mode):
- DiscoveryError: the candidate contributes no entity
- EntityReflectionError: the entity contributes no table
- CompilationError: the generator renders it as an inline SQL comment

Invalid Column / ForeignKey / Table values raise pydantic.ValidationError.
"""

from typing import Optional


class SchemaError(Exception):
    """Base exception for schema engine operations."""

    def __init__(self, message: str, entity: Optional[str] = None):
        self.entity = entity
        super().__init__(message)


class DiscoveryError(SchemaError):
    """Raised when a candidate declaration file cannot be loaded (strict mode)."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load {path}: {reason}", entity=path)


class EntityReflectionError(SchemaError):
    """Raised when an entity's metadata cannot be read."""
    pass


class MissingMetadataError(SchemaError):
    """Raised when a relationship target cannot be resolved to a table."""
    pass


class CompilationError(SchemaError):
    """Raised when a schema element cannot be compiled to DDL."""
    pass


class UnsupportedOperationError(CompilationError):
    """Raised when a dialect has no DDL for the requested operation."""

    def __init__(self, dialect: str, operation: str):
        self.dialect = dialect
        self.operation = operation
        super().__init__(f"{dialect} does not support {operation}")


class CatalogQueryError(SchemaError):
    """Raised when a catalog query fails during introspection."""

    def __init__(self, message: str, operation: str = None, table: str = None):
        self.operation = operation
        self.table = table
        super().__init__(message, entity=table)


__all__ = [
    "SchemaError",
    "DiscoveryError",
    "EntityReflectionError",
    "MissingMetadataError",
    "CompilationError",
    "UnsupportedOperationError",
    "CatalogQueryError",
]
