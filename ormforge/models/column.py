# ============================================================================
# COLUMN MODEL
# ============================================================================
# STATUS: Core model - Dialect-independent column definition
# PURPOSE: One column of a Table, validated against the logical type registry
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: Column
# DEPENDENCIES: pydantic
# ============================================================================
"""
Column Model

A Column carries a logical type (ColumnType), never a raw SQL type string.
The grammars translate it to a native type; the introspectors translate
native catalog types back to it.

Construction with an unregistered type fails immediately:

    Column(name="price", type="money")
    # pydantic.ValidationError: "money" is not a valid column type. ...
"""

from typing import Any, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

from ormforge.contracts import ColumnType


class Column(BaseModel):
    """
    A single column definition.

    Auto-increment only takes effect on integer primary keys; grammars
    ignore the flag anywhere else (see is_auto_increment_effective).
    """

    name: str = Field(..., min_length=1)
    type: ColumnType = Field(default=ColumnType.STRING)
    length: Optional[int] = Field(default=None, gt=0)
    nullable: bool = False
    unique: bool = False
    default: Any = None
    enum_options: Optional[Tuple[str, ...]] = None
    precision: Optional[int] = Field(default=None, ge=0)
    scale: Optional[int] = Field(default=None, ge=0)
    primary_key: bool = False
    auto_increment: bool = False

    model_config = {"frozen": True}

    # ----------------------------------------------------------------
    # Validators
    # ----------------------------------------------------------------

    @field_validator("type", mode="before")
    @classmethod
    def validate_type(cls, v: Any) -> ColumnType:
        if isinstance(v, ColumnType):
            return v
        if isinstance(v, str) and v in ColumnType.values():
            return ColumnType(v)
        raise ValueError(
            f'"{v}" is not a valid column type. '
            f"Supported types are: {', '.join(ColumnType.values())}"
        )

    @field_validator("enum_options", mode="before")
    @classmethod
    def normalize_enum_options(cls, v: Any) -> Any:
        """Allow any iterable of options (list, tuple, Enum class)."""
        if v is None or isinstance(v, tuple):
            return v
        if isinstance(v, str):
            return (v,)
        return tuple(getattr(item, "value", item) for item in v)

    @model_validator(mode="after")
    def validate_numeric_spec(self) -> "Column":
        if self.scale is not None and self.precision is None:
            raise ValueError(f"Column {self.name}: scale requires precision")
        if self.scale is not None and self.precision is not None and self.scale > self.precision:
            raise ValueError(
                f"Column {self.name}: scale ({self.scale}) cannot exceed precision ({self.precision})"
            )
        return self

    # ----------------------------------------------------------------
    # Helpers
    # ----------------------------------------------------------------

    def is_auto_increment_effective(self) -> bool:
        """True when the auto-increment flag is meaningful for this column."""
        return self.auto_increment and self.primary_key and self.type.is_integer()

    def renamed(self, name: str) -> "Column":
        """Copy of this column under another name."""
        return self.model_copy(update={"name": name})


__all__ = ["Column"]
