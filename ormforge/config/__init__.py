# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the schema engine.
"""

from ormforge.config.defaults import (
    DDLDefaults,
    DiscoveryDefaults,
    DatabaseDefaults,
    Defaults,
    get_defaults,
    load_defaults,
    reset_defaults,
)

__all__ = [
    "DDLDefaults",
    "DiscoveryDefaults",
    "DatabaseDefaults",
    "Defaults",
    "get_defaults",
    "load_defaults",
    "reset_defaults",
]
