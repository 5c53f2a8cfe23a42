"""Database connection infrastructure."""

from ormforge.infrastructure.connection import DatabaseConnection, dialect_from_url

__all__ = [
    "DatabaseConnection",
    "dialect_from_url",
]
