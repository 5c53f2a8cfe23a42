# ============================================================================
# FOREIGN KEY MODEL
# ============================================================================
# STATUS: Core model - Single-column foreign key constraint
# PURPOSE: Link a local column to a referenced table column
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: ForeignKey
# DEPENDENCIES: pydantic
# ============================================================================
"""
ForeignKey Model

One ForeignKey per constrained column. The local column is expected to
exist in the owning Table; the reader and introspectors only ever produce
consistent sets.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from ormforge.contracts import ForeignKeyAction


class ForeignKey(BaseModel):
    """A foreign key constraint owned by a Table."""

    name: str = Field(..., min_length=1)
    local_column: str = Field(..., min_length=1)
    foreign_table: str = Field(..., min_length=1)
    foreign_column: str = Field(default="id", min_length=1)
    on_delete: Optional[ForeignKeyAction] = None

    model_config = {"frozen": True}

    @field_validator("on_delete", mode="before")
    @classmethod
    def normalize_on_delete(cls, v: Any) -> Any:
        """Accept 'cascade', 'set_null', 'SET NULL', ..."""
        if v is None or isinstance(v, ForeignKeyAction):
            return v
        action = " ".join(str(v).replace("_", " ").split()).upper()
        valid = [a.value for a in ForeignKeyAction]
        if action not in valid:
            raise ValueError(f"Invalid ON DELETE action '{v}'. Allowed: {', '.join(valid)}")
        return ForeignKeyAction(action)


__all__ = ["ForeignKey"]
