# ============================================================================
# MODELS MODULE
# ============================================================================
# STATUS: Model exports
# PURPOSE: Central export point for the Schema Model
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
Models Module - Central Export Point

The Schema Model is engine-agnostic and relationship-agnostic:
relationship markers are resolved into plain Columns and ForeignKeys
(and pivot Tables) before a Schema is finalized.
"""

from ormforge.models.column import Column
from ormforge.models.foreign_key import ForeignKey
from ormforge.models.table import Table
from ormforge.models.schema import Schema

__all__ = [
    "Column",
    "ForeignKey",
    "Table",
    "Schema",
]
