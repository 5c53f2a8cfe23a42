"""Entity discovery over a source tree."""

from ormforge.discovery.entity_discovery import (
    EntityDiscovery,
    DiscoveryResult,
    is_entity_class,
    entity_identifier,
)

__all__ = [
    "EntityDiscovery",
    "DiscoveryResult",
    "is_entity_class",
    "entity_identifier",
]
