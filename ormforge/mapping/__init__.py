"""Declarative markers for entity classes."""

from ormforge.mapping.markers import (
    TABLE_MARKER,
    EntityRef,
    ColumnMeta,
    JoinColumn,
    JoinTable,
    ManyToOne,
    OneToMany,
    ManyToMany,
    Relationship,
    RELATIONSHIP_MARKERS,
)

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
