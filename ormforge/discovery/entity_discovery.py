# ============================================================================
# ENTITY DISCOVERY
# ============================================================================
# STATUS: Core - Source tree scanning
# PURPOSE: Find entity classes (table marker) under a directory
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: EntityDiscovery, DiscoveryResult
# DEPENDENCIES: importlib
# ============================================================================
"""
Entity Discovery

Walks a directory recursively, loads every file ending in the configured
suffix and keeps the classes that declare the table marker in their own
class body.

Each file is loaded under a stable synthetic module name:

    ormforge_entities_<hash of directory>.<relative.dotted.path>

so repeated scans of the same directory reuse the already loaded modules
and classes keep their identity. A file whose modification time changed
since it was loaded is executed again.

The synthetic name and every subdirectory below it are registered as
namespace packages, so entity files can import each other relatively:

    from .user import User

Skip vs fail is explicit:
    EntityDiscovery(strict=False)  - load failures are logged and recorded
    EntityDiscovery(strict=True)   - load failures raise DiscoveryError

Loading goes through sys.modules; concurrent scans of overlapping
directories from several threads need an external lock.
"""

import hashlib
import importlib.util
import sys
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType
from typing import Dict, List, Optional, Union

from ormforge.config import get_defaults
from ormforge.exceptions import DiscoveryError
from ormforge.logging import get_logger, log_context, ComponentType
from ormforge.mapping import TABLE_MARKER

logger = get_logger(__name__, ComponentType.DISCOVERY)

MODULE_PREFIX = "ormforge_entities"
MTIME_ATTR = "__ormforge_mtime__"


def is_entity_class(candidate: object) -> bool:
    """True when candidate is a class declaring the table marker itself."""
    return isinstance(candidate, type) and TABLE_MARKER in vars(candidate)


def entity_identifier(cls: type) -> str:
    """Fully qualified identifier of an entity class."""
    return f"{cls.__module__}.{cls.__qualname__}"


@dataclass
class DiscoveryResult:
    """
    Outcome of one scan.

    entities: identifier -> class, in file order then definition order
    skipped: file path -> reason it contributed nothing
    """
    entities: Dict[str, type] = field(default_factory=dict)
    skipped: Dict[str, str] = field(default_factory=dict)

    def identifiers(self) -> List[str]:
        return sorted(self.entities)

    def classes(self) -> List[type]:
        return list(self.entities.values())

    def __len__(self) -> int:
        return len(self.entities)


class EntityDiscovery:
    """
    Scans a directory for entity classes.

    Usage:
        discovery = EntityDiscovery()
        for identifier in discovery.discover("src/entities"):
            print(identifier)
    """

    def __init__(self, strict: Optional[bool] = None, suffix: Optional[str] = None):
        """
        Initialize discovery.

        Args:
            strict: Raise on load failures instead of skipping them.
                    Defaults to the discovery.strict configuration value.
            suffix: File suffix to consider (default ".py")
        """
        defaults = get_defaults().discovery
        self.strict = defaults.strict if strict is None else strict
        self.suffix = suffix or defaults.file_suffix

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def discover(self, directory: Union[str, Path]) -> List[str]:
        """Return sorted identifiers of the entity classes under directory."""
        return self.discover_entities(directory).identifiers()

    def discover_entities(self, directory: Union[str, Path]) -> DiscoveryResult:
        """
        Scan directory and load entity classes.

        A missing directory yields an empty result.

        Raises:
            DiscoveryError: A file failed to load and strict mode is on
        """
        result = DiscoveryResult()
        root = Path(directory)

        if not root.is_dir():
            logger.debug(f"Entity directory {root} does not exist, nothing to discover")
            return result

        root = root.resolve()
        package = self._package_name(root)

        with log_context(directory=str(root), component=ComponentType.DISCOVERY.value, operation="discover"):
            for path in sorted(p for p in root.rglob(f"*{self.suffix}") if p.is_file()):
                module_name = self._module_name(package, root, path)
                try:
                    self._register_packages(module_name, root)
                    module = self._load_module(module_name, path)
                except Exception as e:
                    reason = f"{type(e).__name__}: {e}"
                    if self.strict:
                        raise DiscoveryError(str(path), reason) from e
                    logger.warning(f"Skipping {path}: {reason}")
                    result.skipped[str(path)] = reason
                    continue

                for cls in self._entity_classes(module):
                    result.entities[entity_identifier(cls)] = cls

            logger.info(
                f"Discovered {len(result.entities)} entities in {root}"
                + (f" ({len(result.skipped)} files skipped)" if result.skipped else "")
            )

        return result

    # =========================================================================
    # LOADING
    # =========================================================================

    @staticmethod
    def _package_name(root: Path) -> str:
        digest = hashlib.sha1(str(root).encode("utf-8")).hexdigest()[:8]
        return f"{MODULE_PREFIX}_{digest}"

    def _module_name(self, package: str, root: Path, path: Path) -> str:
        relative = path.relative_to(root)
        parts = list(relative.parts)
        parts[-1] = parts[-1][: -len(self.suffix)] if self.suffix else parts[-1]
        return ".".join([package, *parts])

    @staticmethod
    def _register_packages(module_name: str, root: Path) -> None:
        """Register the synthetic package and each parent directory of module_name."""
        parts = module_name.split(".")[:-1]
        directory = root
        for depth in range(1, len(parts) + 1):
            if depth > 1:
                directory = directory / parts[depth - 1]
            name = ".".join(parts[:depth])
            if name in sys.modules:
                continue

            spec = importlib.util.spec_from_loader(name, None, is_package=True)
            spec.submodule_search_locations = [str(directory)]
            sys.modules[name] = importlib.util.module_from_spec(spec)

    @staticmethod
    def _load_module(module_name: str, path: Path) -> ModuleType:
        """Load path as module_name, reusing a previous load of the same unchanged file."""
        mtime = path.stat().st_mtime_ns
        cached = sys.modules.get(module_name)
        if cached is not None and getattr(cached, "__file__", None) == str(path):
            loaded_mtime = getattr(cached, MTIME_ATTR, None)
            if loaded_mtime is None:
                # Imported by a sibling entity file during this scan
                setattr(cached, MTIME_ATTR, mtime)
                return cached
            if loaded_mtime == mtime:
                return cached
            logger.debug(f"{path} changed since it was loaded, reloading")

        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise ImportError(f"No loader for {path}")

        module = importlib.util.module_from_spec(spec)
        setattr(module, MTIME_ATTR, mtime)
        # Registered before execution so pydantic can resolve forward references
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            sys.modules.pop(module_name, None)
            raise

        logger.debug(f"Loaded {path} as {module_name}")
        return module

    @staticmethod
    def _entity_classes(module: ModuleType) -> List[type]:
        """Entity classes defined in module itself, in definition order."""
        return [
            obj for obj in vars(module).values()
            if is_entity_class(obj) and obj.__module__ == module.__name__
        ]


__all__ = [
    "EntityDiscovery",
    "DiscoveryResult",
    "is_entity_class",
    "entity_identifier",
]
