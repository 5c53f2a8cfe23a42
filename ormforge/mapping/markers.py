# ============================================================================
# DECLARATIVE MARKERS
# ============================================================================
# STATUS: Core - Entity declaration surface
# PURPOSE: Column and relationship markers attached via typing.Annotated
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: ColumnMeta, ManyToOne, OneToMany, ManyToMany, JoinColumn, JoinTable
# DEPENDENCIES: dataclasses
# ============================================================================
"""
Declarative Markers

Entities are Pydantic models. SQL metadata is declared with a ClassVar
table marker and Annotated field markers:

    class Post(BaseModel):
        __sql_table__: ClassVar[str] = "posts"

        id: Annotated[int, ColumnMeta(primary_key=True, auto_increment=True)]
        title: Annotated[str, ColumnMeta(length=200)]
        author: Annotated[Any, ManyToOne("User"), JoinColumn(on_delete="CASCADE")] = None
        tags: Annotated[List[Any], ManyToMany("Tag", inversed_by="posts")] = []

Relationship markers are transient inputs: EntitySchemaReader resolves them
into plain Columns / ForeignKeys (and pivot Tables). They never appear on a
Table or Schema.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Optional, Sequence, Union

from ormforge.contracts import ColumnType, RelationshipKind

# Entity class, class name, discovered identifier or importable dotted path
EntityRef = Union[type, str]

TABLE_MARKER = "__sql_table__"


def _as_tuple(options: Any) -> tuple:
    # Accepts a sequence of strings or an Enum class
    if isinstance(options, str):
        return (options,)
    return tuple(str(getattr(item, "value", item)) for item in options)


# ============================================================================
# COLUMN MARKER
# ============================================================================

@dataclass(frozen=True)
class ColumnMeta:
    """
    Column marker.

    Unset values are derived from the field by the reader:
    - name: the field name
    - type: inferred from the Python annotation
    - nullable: True for Optional[...] annotations
    - length: MaxLen metadata (Field(max_length=...)) on strings
    - default: the field default when it is a plain value
    """
    name: Optional[str] = None
    type: Optional[Union[ColumnType, str]] = None
    length: Optional[int] = None
    nullable: Optional[bool] = None
    unique: bool = False
    default: Any = None
    enum_options: Optional[Sequence[str]] = None
    precision: Optional[int] = None
    scale: Optional[int] = None
    primary_key: bool = False
    auto_increment: bool = False

    def __post_init__(self):
        if self.enum_options is not None and not isinstance(self.enum_options, tuple):
            object.__setattr__(self, "enum_options", _as_tuple(self.enum_options))


# ============================================================================
# JOIN OVERRIDES
# ============================================================================

@dataclass(frozen=True)
class JoinColumn:
    """Overrides the synthesized foreign key column of a relationship."""
    name: Optional[str] = None
    referenced_column_name: str = "id"
    nullable: bool = True
    on_delete: Optional[str] = None


@dataclass(frozen=True)
class JoinTable:
    """Overrides the pivot table of a many-to-many relationship."""
    name: Optional[str] = None
    join_columns: Sequence[JoinColumn] = ()
    inverse_join_columns: Sequence[JoinColumn] = ()

    def __post_init__(self):
        object.__setattr__(self, "join_columns", tuple(self.join_columns))
        object.__setattr__(self, "inverse_join_columns", tuple(self.inverse_join_columns))


# ============================================================================
# RELATIONSHIP MARKERS
# ============================================================================

@dataclass(frozen=True)
class ManyToOne:
    target: EntityRef
    inversed_by: Optional[str] = None

    kind: ClassVar[RelationshipKind] = RelationshipKind.MANY_TO_ONE


@dataclass(frozen=True)
class OneToMany:
    target: EntityRef
    mapped_by: str

    kind: ClassVar[RelationshipKind] = RelationshipKind.ONE_TO_MANY


@dataclass(frozen=True)
class ManyToMany:
    """
    Many-to-many relationship.

    Only the owning side (mapped_by is None) produces a pivot table.
    """
    target: EntityRef
    inversed_by: Optional[str] = None
    mapped_by: Optional[str] = None

    kind: ClassVar[RelationshipKind] = RelationshipKind.MANY_TO_MANY

    def is_owning_side(self) -> bool:
        return self.mapped_by is None


Relationship = Union[ManyToOne, OneToMany, ManyToMany]
RELATIONSHIP_MARKERS = (ManyToOne, OneToMany, ManyToMany)


__all__ = [
    "TABLE_MARKER",
    "EntityRef",
    "ColumnMeta",
    "JoinColumn",
    "JoinTable",
    "ManyToOne",
    "OneToMany",
    "ManyToMany",
    "Relationship",
    "RELATIONSHIP_MARKERS",
]
