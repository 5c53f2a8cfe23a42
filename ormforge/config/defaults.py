# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for DDL rendering, discovery and databases
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides sensible defaults for the schema engine.
These can be overridden via environment variables (ORMFORGE_*) or a YAML
file passed to load_defaults().

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Optional YAML file with ddl / discovery / database sections
"""

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class DDLDefaults:
    """
    Defaults applied when compiling DDL.

    Used by the grammars when a Column leaves a size unset.
    """
    string_length: int = 255
    binary_length: int = 255
    enum_length: int = 255
    decimal_precision: int = 10
    decimal_scale: int = 0
    if_not_exists: bool = False

    @classmethod
    def from_env(cls) -> "DDLDefaults":
        """Create from environment variables."""
        return cls(
            string_length=int(os.getenv("ORMFORGE_STRING_LENGTH", 255)),
            binary_length=int(os.getenv("ORMFORGE_BINARY_LENGTH", 255)),
            enum_length=int(os.getenv("ORMFORGE_ENUM_LENGTH", 255)),
            decimal_precision=int(os.getenv("ORMFORGE_DECIMAL_PRECISION", 10)),
            decimal_scale=int(os.getenv("ORMFORGE_DECIMAL_SCALE", 0)),
            if_not_exists=_env_bool("ORMFORGE_IF_NOT_EXISTS", False),
        )


@dataclass(frozen=True)
class DiscoveryDefaults:
    """
    Defaults for entity discovery.

    strict=False skips declarations that fail to load (logged as warnings);
    strict=True raises instead.
    """
    file_suffix: str = ".py"
    strict: bool = False
    entities_path: str = "src/entities"

    @classmethod
    def from_env(cls) -> "DiscoveryDefaults":
        """Create from environment variables."""
        return cls(
            strict=_env_bool("ORMFORGE_STRICT_DISCOVERY", False),
            entities_path=os.getenv("ORMFORGE_ENTITIES_PATH", "src/entities"),
        )


@dataclass(frozen=True)
class DatabaseDefaults:
    """
    Defaults for the target database.

    migrations_table is the bookkeeping table skipped by introspection.
    schema_name applies to PostgreSQL only.
    """
    dialect: str = "mysql"
    migrations_table: str = "migrations"
    schema_name: str = "public"
    url: Optional[str] = None

    @classmethod
    def from_env(cls) -> "DatabaseDefaults":
        """Create from environment variables."""
        return cls(
            dialect=os.getenv("ORMFORGE_DIALECT", "mysql"),
            migrations_table=os.getenv("ORMFORGE_MIGRATIONS_TABLE", "migrations"),
            schema_name=os.getenv("ORMFORGE_DB_SCHEMA", "public"),
            url=os.getenv("ORMFORGE_DATABASE_URL"),
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    ddl: DDLDefaults = field(default_factory=DDLDefaults)
    discovery: DiscoveryDefaults = field(default_factory=DiscoveryDefaults)
    database: DatabaseDefaults = field(default_factory=DatabaseDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            ddl=DDLDefaults.from_env(),
            discovery=DiscoveryDefaults.from_env(),
            database=DatabaseDefaults.from_env(),
        )

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "Defaults":
        """
        Create defaults from a YAML file layered over environment values.

        Example file:
            database:
              dialect: postgresql
              migrations_table: schema_migrations
            discovery:
              entities_path: app/entities
              strict: true
            ddl:
              string_length: 191
        """
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping, got {type(data).__name__}")

        base = cls.from_env()
        return cls(
            ddl=_apply_section(base.ddl, data.get("ddl")),
            discovery=_apply_section(base.discovery, data.get("discovery")),
            database=_apply_section(base.database, data.get("database")),
        )


def _apply_section(section: Any, values: Optional[Dict[str, Any]]) -> Any:
    if not values:
        return section
    known = {f.name for f in fields(section)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ValueError(
            f"Unknown {type(section).__name__} keys: {', '.join(unknown)}. "
            f"Allowed: {', '.join(sorted(known))}"
        )
    return replace(section, **values)


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def load_defaults(path: Union[str, Path]) -> Defaults:
    """Load defaults from a YAML file and install them globally."""
    global _defaults
    _defaults = Defaults.from_yaml(path)
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "DDLDefaults",
    "DiscoveryDefaults",
    "DatabaseDefaults",
    "Defaults",
    "get_defaults",
    "load_defaults",
    "reset_defaults",
]
