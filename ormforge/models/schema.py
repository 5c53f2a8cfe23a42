# ============================================================================
# SCHEMA MODEL
# ============================================================================
# STATUS: Core model - Table name -> Table mapping
# PURPOSE: Common output of the declarative reader and the introspectors
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: Schema
# DEPENDENCIES: pydantic
# ============================================================================
"""
Schema Model

Two producers build Schemas independently:
    - EntitySchemaReader (declarative entity classes)
    - SchemaIntrospector (live database catalog)

Both share this model, so two Schemas compare by value (tables, columns,
foreign keys). Computing an edit script between them is left to callers.
"""

from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, Field

from ormforge.models.table import Table


class Schema(BaseModel):
    """Mapping of table name to Table. Names are unique."""

    tables: Dict[str, Table] = Field(default_factory=dict)

    model_config = {"frozen": False}

    @classmethod
    def from_tables(cls, tables: Iterable[Table]) -> "Schema":
        """Build a Schema from tables, rejecting duplicate names."""
        mapping: Dict[str, Table] = {}
        for table in tables:
            if table.name in mapping:
                raise ValueError(f"Duplicate table '{table.name}' in schema")
            mapping[table.name] = table
        return cls(tables=mapping)

    def get_table(self, name: str) -> Optional[Table]:
        return self.tables.get(name)

    def has_table(self, name: str) -> bool:
        return name in self.tables

    def table_names(self) -> List[str]:
        return list(self.tables.keys())

    def all_tables(self) -> List[Table]:
        return list(self.tables.values())

    def __len__(self) -> int:
        return len(self.tables)


__all__ = ["Schema"]
