# ============================================================================
# TABLE MODEL
# ============================================================================
# STATUS: Core model - Table with columns and foreign keys
# PURPOSE: Populated by the reader or an introspector, then read-only
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: Table
# DEPENDENCIES: pydantic
# ============================================================================
"""
Table Model

Lifecycle:
    1. Constructed empty (name only)
    2. Populated by EntitySchemaReader or a SchemaIntrospector via
       set_columns() / add_foreign_key()
    3. Added to a Schema and handed read-only to a grammar
"""

from typing import Iterable, List, Optional

from pydantic import BaseModel, Field, model_validator

from ormforge.models.column import Column
from ormforge.models.foreign_key import ForeignKey


def _check_unique_names(table_name: str, columns: Iterable[Column]) -> None:
    seen = set()
    for column in columns:
        if column.name in seen:
            raise ValueError(f"Duplicate column '{column.name}' in table '{table_name}'")
        seen.add(column.name)


class Table(BaseModel):
    """
    A table definition.

    Column names are unique within a table. Column order is preserved
    (declaration order for the reader, ordinal position for introspectors).
    """

    name: str = Field(..., min_length=1)
    columns: List[Column] = Field(default_factory=list)
    foreign_keys: List[ForeignKey] = Field(default_factory=list)

    model_config = {"frozen": False}

    @model_validator(mode="after")
    def validate_unique_columns(self) -> "Table":
        _check_unique_names(self.name, self.columns)
        return self

    # ----------------------------------------------------------------
    # Construction-time mutators
    # ----------------------------------------------------------------

    def set_columns(self, columns: Iterable[Column]) -> "Table":
        """Replace the column list. Returns self for chaining."""
        columns = list(columns)
        _check_unique_names(self.name, columns)
        self.columns = columns
        return self

    def add_column(self, column: Column) -> "Table":
        _check_unique_names(self.name, [*self.columns, column])
        self.columns.append(column)
        return self

    def add_foreign_key(self, foreign_key: ForeignKey) -> "Table":
        self.foreign_keys.append(foreign_key)
        return self

    # ----------------------------------------------------------------
    # Accessors
    # ----------------------------------------------------------------

    def get_column(self, name: str) -> Optional[Column]:
        for column in self.columns:
            if column.name == name:
                return column
        return None

    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]

    def primary_key_columns(self) -> List[Column]:
        return [c for c in self.columns if c.primary_key]

    def has_columns(self) -> bool:
        return len(self.columns) > 0

    def referenced_tables(self) -> List[str]:
        """Tables this one points at (self references excluded)."""
        names: List[str] = []
        for fk in self.foreign_keys:
            if fk.foreign_table != self.name and fk.foreign_table not in names:
                names.append(fk.foreign_table)
        return names


__all__ = ["Table"]
