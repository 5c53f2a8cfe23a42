# ============================================================================
# DECLARATIVE SCHEMA READER
# ============================================================================
# STATUS: Core - Entity classes to Schema Model
# PURPOSE: Resolve column and relationship markers into Tables
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: EntitySchemaReader, SchemaReadResult
# DEPENDENCIES: pydantic, annotated_types
# ============================================================================
"""
Declarative Schema Reader.

Entity classes are the single source of truth for the declarative schema.
The reader walks each entity's model_fields and resolves the markers
attached with typing.Annotated:

    ColumnMeta          -> Column
    ManyToOne/OneToMany -> synthesized <field>_id Column + ForeignKey
    ManyToMany (owning) -> pivot Table <owner>_<target>

Relationship markers never reach the Schema; only the plain Columns,
ForeignKeys and pivot Tables they resolve to do.

Usage:
    reader = EntitySchemaReader()
    schema = reader.read("src/entities")

    # Or without a filesystem scan
    schema = EntitySchemaReader().read_entities([User, Post, Tag])
"""

import datetime as dt
import importlib
import logging
import sys
import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from pathlib import Path
from types import UnionType
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union, get_args, get_origin

from annotated_types import MaxLen
from pydantic import BaseModel, ValidationError
from pydantic.fields import FieldInfo
from pydantic_core import PydanticUndefined

from ormforge.contracts import ColumnType, ForeignKeyAction, RelationshipKind
from ormforge.discovery import EntityDiscovery, entity_identifier
from ormforge.exceptions import EntityReflectionError, MissingMetadataError
from ormforge.logging import log_context, ComponentType
from ormforge.mapping import (
    TABLE_MARKER,
    EntityRef,
    ColumnMeta,
    JoinColumn,
    JoinTable,
    ManyToMany,
    RELATIONSHIP_MARKERS,
)
from ormforge.models import Column, ForeignKey, Table, Schema

logger = logging.getLogger(__name__)


# Checked in order: bool before int, datetime before date
PYTHON_TYPE_MAP: List[Tuple[type, ColumnType]] = [
    (bool, ColumnType.BOOLEAN),
    (int, ColumnType.INTEGER),
    (float, ColumnType.FLOAT),
    (Decimal, ColumnType.DECIMAL),
    (str, ColumnType.STRING),
    (dt.datetime, ColumnType.DATETIME),
    (dt.date, ColumnType.DATE),
    (dt.time, ColumnType.TIME),
    (uuid.UUID, ColumnType.UUID),
    (bytes, ColumnType.BLOB),
    (dict, ColumnType.JSON),
    (list, ColumnType.ARRAY),
    (tuple, ColumnType.ARRAY),
    (set, ColumnType.ARRAY),
]

SCALAR_DEFAULTS = (str, int, float, bool, Decimal, Enum)


@dataclass
class SchemaReadResult:
    """
    Outcome of a declarative read.

    sources: table name -> identifier of the entity that produced it
             (pivot tables map to their owning entity)
    skipped: entity identifier or file path -> reason it contributed nothing
    """
    schema: Schema
    sources: Dict[str, str] = field(default_factory=dict)
    skipped: Dict[str, str] = field(default_factory=dict)


# ============================================================================
# ANNOTATION HELPERS
# ============================================================================

def unwrap_optional(annotation: Any) -> Tuple[Any, bool]:
    """Strip Optional[...] / X | None. Returns (inner annotation, is_optional)."""
    origin = get_origin(annotation)
    if origin is Union or origin is UnionType:
        args = [a for a in get_args(annotation) if a is not type(None)]
        is_optional = len(args) < len(get_args(annotation))
        if len(args) == 1:
            return args[0], is_optional
        return annotation, is_optional
    return annotation, False


def infer_column_type(annotation: Any) -> Tuple[Optional[ColumnType], Optional[Tuple[str, ...]]]:
    """
    Map a Python annotation to a logical type.

    Returns:
        (ColumnType or None when unknown, enum options for Enum subclasses)
    """
    origin = get_origin(annotation)
    if origin is not None:
        annotation = origin

    if not isinstance(annotation, type):
        return None, None

    if issubclass(annotation, Enum):
        return ColumnType.ENUM, tuple(str(member.value) for member in annotation)

    for python_type, column_type in PYTHON_TYPE_MAP:
        if issubclass(annotation, python_type):
            return column_type, None

    return None, None


def _first(metadata: Iterable[Any], kinds: Union[type, Tuple[type, ...]]) -> Any:
    for item in metadata:
        if isinstance(item, kinds):
            return item
    return None


def _field_default(field_info: FieldInfo) -> Any:
    default = field_info.default
    if default is PydanticUndefined or default is None:
        return None
    if isinstance(default, Enum):
        return default.value
    if isinstance(default, SCALAR_DEFAULTS):
        return default
    return None


# ============================================================================
# TARGET RESOLUTION
# ============================================================================

class TargetResolver:
    """
    Resolves relationship targets to entity classes and table names.

    Lookup order for string targets:
        1. Identifier of a known entity (module.ClassName)
        2. Simple class name of a known entity (must be unambiguous)
        3. Name defined in the owner's module
        4. Importable dotted path
    """

    def __init__(self, registry: Dict[str, type]):
        self.registry = dict(registry)
        self.by_name: Dict[str, List[type]] = defaultdict(list)
        for cls in self.registry.values():
            self.by_name[cls.__name__].append(cls)

    def resolve(self, target: EntityRef, owner: type) -> type:
        if isinstance(target, type):
            return target

        if not isinstance(target, str) or not target:
            raise MissingMetadataError(
                f"Invalid relationship target {target!r} on {owner.__name__}",
                entity=entity_identifier(owner),
            )

        if target in self.registry:
            return self.registry[target]

        matches = self.by_name.get(target, [])
        if len(matches) == 1:
            return matches[0]
        if len(matches) > 1:
            raise MissingMetadataError(
                f"Ambiguous relationship target '{target}' on {owner.__name__}: "
                f"{', '.join(sorted(entity_identifier(m) for m in matches))}",
                entity=entity_identifier(owner),
            )

        owner_module = sys.modules.get(owner.__module__)
        candidate = getattr(owner_module, target, None)
        if isinstance(candidate, type):
            return candidate

        if "." in target:
            module_path, _, attr = target.rpartition(".")
            try:
                module = importlib.import_module(module_path)
            except ImportError as e:
                raise MissingMetadataError(
                    f"Cannot import relationship target '{target}' of {owner.__name__}: {e}",
                    entity=entity_identifier(owner),
                ) from e
            candidate = getattr(module, attr, None)
            if isinstance(candidate, type):
                return candidate

        raise MissingMetadataError(
            f"Cannot resolve relationship target '{target}' of {owner.__name__}",
            entity=entity_identifier(owner),
        )

    def table_name(self, target: EntityRef, owner: type) -> str:
        """Table name of the target entity. Fails if it has no table marker."""
        cls = self.resolve(target, owner)
        name = vars(cls).get(TABLE_MARKER)
        if not name:
            raise MissingMetadataError(
                f"Relationship target {cls.__name__} (from {owner.__name__}) "
                f"does not declare {TABLE_MARKER}",
                entity=entity_identifier(cls),
            )
        return name


# ============================================================================
# READER
# ============================================================================

class EntitySchemaReader:
    """
    Build a Schema from entity classes.

    Lenient by default: an entity whose metadata cannot be read is logged,
    recorded in SchemaReadResult.skipped and left out. strict=True raises
    EntityReflectionError instead. A relationship target that cannot be
    resolved always raises MissingMetadataError.
    """

    def __init__(self, discovery: Optional[EntityDiscovery] = None, strict: Optional[bool] = None):
        self.discovery = discovery or EntityDiscovery(strict=strict)
        self.strict = self.discovery.strict if strict is None else strict

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def read(self, directory: Union[str, Path]) -> Schema:
        """Return the Schema declared by the entities under directory."""
        return self.read_detailed(directory).schema

    def read_detailed(self, directory: Union[str, Path]) -> SchemaReadResult:
        """Like read(), also reporting table sources and skipped entities."""
        found = self.discovery.discover_entities(directory)
        with log_context(directory=str(directory)):
            result = self._read(found.classes(), found.entities)
        result.skipped = {**found.skipped, **result.skipped}
        return result

    def read_entities(self, entities: Iterable[type]) -> Schema:
        """Build a Schema from explicitly supplied entity classes."""
        return self.read_entities_detailed(entities).schema

    def read_entities_detailed(self, entities: Iterable[type]) -> SchemaReadResult:
        entities = list(entities)
        registry = {entity_identifier(cls): cls for cls in entities}
        return self._read(entities, registry)

    # =========================================================================
    # ENTITY RESOLUTION
    # =========================================================================

    @staticmethod
    def table_name(entity: type) -> Optional[str]:
        """Table marker declared by entity itself, or None."""
        return vars(entity).get(TABLE_MARKER)

    def read_entity(self, entity: type, resolver: Optional[TargetResolver] = None) -> Tuple[Table, List[Table]]:
        """
        Resolve one entity.

        Returns:
            (entity Table, pivot Tables owned by the entity)

        Raises:
            EntityReflectionError: Markers or fields could not be read
            ValidationError: A column marker fails column validation
            MissingMetadataError: A relationship target has no table
        """
        identifier = entity_identifier(entity)
        resolver = resolver or TargetResolver({identifier: entity})

        table_name = self.table_name(entity)
        if not isinstance(table_name, str) or not table_name.strip():
            raise EntityReflectionError(
                f"{identifier} declares an invalid {TABLE_MARKER}: {table_name!r}", entity=identifier
            )
        if not (isinstance(entity, type) and issubclass(entity, BaseModel)):
            raise EntityReflectionError(f"{identifier} is not a pydantic model", entity=identifier)

        try:
            return self._read_fields(entity, table_name, resolver)
        except ValidationError:
            raise
        except (ValueError, TypeError, AttributeError) as e:
            raise EntityReflectionError(f"Cannot read {identifier}: {e}", entity=identifier) from e

    def _read(self, entities: List[type], registry: Dict[str, type]) -> SchemaReadResult:
        result = SchemaReadResult(schema=Schema())
        resolver = TargetResolver(registry)
        pivots: List[Tuple[Table, str]] = []

        for entity in entities:
            identifier = entity_identifier(entity)
            table_name = self.table_name(entity)
            if table_name is None:
                logger.debug(f"{identifier} has no {TABLE_MARKER}, skipping")
                continue

            with log_context(entity=identifier, table=str(table_name),
                             component=ComponentType.READER.value, operation="read_entity"):
                try:
                    table, entity_pivots = self.read_entity(entity, resolver)
                    if result.schema.has_table(table.name):
                        raise EntityReflectionError(
                            f"Table '{table.name}' is already declared by "
                            f"{result.sources[table.name]}",
                            entity=identifier,
                        )
                except EntityReflectionError as e:
                    if self.strict:
                        raise
                    logger.warning(f"Skipping entity {identifier}: {e}")
                    result.skipped[identifier] = str(e)
                    continue

                result.schema.tables[table.name] = table
                result.sources[table.name] = identifier
                pivots.extend((pivot, identifier) for pivot in entity_pivots)
                logger.debug(
                    f"Read {identifier} -> {table.name} "
                    f"({len(table.columns)} columns, {len(table.foreign_keys)} foreign keys)"
                )

        # Declared tables take precedence over synthesized pivots
        for pivot, owner in pivots:
            if result.schema.has_table(pivot.name):
                logger.debug(f"Pivot table {pivot.name} already declared, keeping declared table")
                continue
            result.schema.tables[pivot.name] = pivot
            result.sources[pivot.name] = owner

        logger.info(
            f"Read {len(result.schema)} tables from {len(entities)} entities"
            + (f" ({len(result.skipped)} skipped)" if result.skipped else "")
        )
        return result

    def _read_fields(self, entity: type, table_name: str, resolver: TargetResolver) -> Tuple[Table, List[Table]]:
        declared: List[Column] = []
        synthesized: List[Tuple[int, Column]] = []
        foreign_keys: List[ForeignKey] = []
        pivots: List[Table] = []

        for field_name, field_info in entity.model_fields.items():
            metadata = field_info.metadata or []

            column_meta = _first(metadata, ColumnMeta)
            if column_meta is not None:
                declared.append(self.build_column(field_name, field_info, column_meta))

            relationship = _first(metadata, RELATIONSHIP_MARKERS)
            if relationship is None:
                continue

            if relationship.kind in (RelationshipKind.MANY_TO_ONE, RelationshipKind.ONE_TO_MANY):
                column, foreign_key = self.build_join(
                    entity, table_name, field_name, relationship.target,
                    _first(metadata, JoinColumn), resolver,
                )
                synthesized.append((len(declared), column))
                foreign_keys.append(foreign_key)
            elif relationship.kind == RelationshipKind.MANY_TO_MANY:
                if not relationship.is_owning_side():
                    logger.debug(f"{table_name}.{field_name} is the inverse side, no pivot table")
                    continue
                pivots.append(self.build_pivot(
                    entity, table_name, relationship, _first(metadata, JoinTable), resolver,
                ))

        # An explicitly declared column of the same name wins over the synthesized one
        declared_names = {c.name for c in declared}
        columns = list(declared)
        for offset, (position, column) in enumerate(
            (p, c) for p, c in synthesized if c.name not in declared_names
        ):
            columns.insert(position + offset, column)

        table = Table(name=table_name).set_columns(columns)
        for foreign_key in foreign_keys:
            table.add_foreign_key(foreign_key)
        return table, pivots

    # =========================================================================
    # COLUMN BUILDERS
    # =========================================================================

    def build_column(self, field_name: str, field_info: FieldInfo, meta: ColumnMeta) -> Column:
        """
        Build a Column from a ColumnMeta marker.

        Unset marker values are derived from the field annotation, its
        MaxLen constraint and its default.
        """
        inner, is_optional = unwrap_optional(field_info.annotation)
        inferred_type, inferred_options = infer_column_type(inner)

        column_type = meta.type if meta.type is not None else inferred_type
        if column_type is None:
            raise EntityReflectionError(
                f"Cannot infer column type of field '{field_name}' from {field_info.annotation!r}; "
                f"declare ColumnMeta(type=...)"
            )

        length = meta.length
        if length is None and column_type == ColumnType.STRING:
            max_len = _first(field_info.metadata or [], MaxLen)
            if max_len is not None:
                length = max_len.max_length

        nullable = meta.nullable if meta.nullable is not None else is_optional
        if meta.primary_key:
            nullable = False

        default = meta.default if meta.default is not None else _field_default(field_info)
        if isinstance(default, Enum):
            default = default.value

        return Column(
            name=meta.name or field_name,
            type=column_type,
            length=length,
            nullable=nullable,
            unique=meta.unique,
            default=default,
            enum_options=meta.enum_options if meta.enum_options is not None else inferred_options,
            precision=meta.precision,
            scale=meta.scale,
            primary_key=meta.primary_key,
            auto_increment=meta.auto_increment,
        )

    def build_join(
        self,
        entity: type,
        table_name: str,
        field_name: str,
        target: EntityRef,
        join_column: Optional[JoinColumn],
        resolver: TargetResolver,
    ) -> Tuple[Column, ForeignKey]:
        """Synthesize the foreign key column of a many-to-one / one-to-many field."""
        join_column = join_column or JoinColumn()
        target_table = resolver.table_name(target, entity)

        column_name = join_column.name or f"{field_name.lower()}_id"
        column = Column(name=column_name, type=ColumnType.INTEGER, nullable=join_column.nullable)
        foreign_key = ForeignKey(
            name=f"fk_{table_name}_{column_name}",
            local_column=column_name,
            foreign_table=target_table,
            foreign_column=join_column.referenced_column_name,
            on_delete=join_column.on_delete,
        )
        return column, foreign_key

    def build_pivot(
        self,
        entity: type,
        table_name: str,
        relationship: ManyToMany,
        join_table: Optional[JoinTable],
        resolver: TargetResolver,
    ) -> Table:
        """Synthesize the pivot table of an owning many-to-many field."""
        target_table = resolver.table_name(relationship.target, entity)
        join_table = join_table or JoinTable()

        pivot_name = join_table.name or f"{table_name}_{target_table}"
        owner_join = join_table.join_columns[0] if join_table.join_columns else JoinColumn()
        target_join = join_table.inverse_join_columns[0] if join_table.inverse_join_columns else JoinColumn()

        owner_column = owner_join.name or f"{table_name}_id"
        target_column = target_join.name or f"{target_table}_id"

        pivot = Table(name=pivot_name).set_columns([
            Column(name=owner_column, type=ColumnType.INTEGER, primary_key=True),
            Column(name=target_column, type=ColumnType.INTEGER, primary_key=True),
        ])
        pivot.add_foreign_key(ForeignKey(
            name=f"fk_{pivot_name}_{owner_column}",
            local_column=owner_column,
            foreign_table=table_name,
            foreign_column=owner_join.referenced_column_name,
            on_delete=owner_join.on_delete or ForeignKeyAction.CASCADE,
        ))
        pivot.add_foreign_key(ForeignKey(
            name=f"fk_{pivot_name}_{target_column}",
            local_column=target_column,
            foreign_table=target_table,
            foreign_column=target_join.referenced_column_name,
            on_delete=target_join.on_delete or ForeignKeyAction.CASCADE,
        ))
        return pivot


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "EntitySchemaReader",
    "SchemaReadResult",
    "TargetResolver",
    "infer_column_type",
    "unwrap_optional",
]
