"""Collector plugin registry.

Plugins register themselves at import time::

    @register_collector
    class Mailfeed(CollectorBase):
        config_key = "Mailfeed"

Built-in plugins are imported by :func:`load_plugins`, together with any
extra plugin modules listed in ABUSEIO_COLLECTOR_PLUGINS (comma separated).
"""

import importlib
import inspect
import logging
import os
from typing import Mapping, Optional

from abuseio_collectors.collectors.base import CollectorBase
from abuseio_collectors.config import CollectorsConfig

logger = logging.getLogger(__name__)

BUILTIN_PLUGINS = ("abuseio_collectors.collectors.jsonfile",)

COLLECTOR_REGISTRY: dict[str, type[CollectorBase]] = {}


def canonical_name(name: str) -> str:
    """Normalize a collector name to its registered casing ("mailFEED" -> "Mailfeed")."""
    return name.strip().capitalize()


def register_collector(cls: type[CollectorBase]) -> type[CollectorBase]:
    """Register a collector class under its config key. Usable as a decorator."""
    if inspect.isabstract(cls) or not cls.config_key:
        raise ValueError(f"{cls.__name__} is not a concrete collector with a config_key")

    name = canonical_name(cls.config_key)
    existing = COLLECTOR_REGISTRY.get(name)
    if existing is not None and existing is not cls:
        raise ValueError(f"Collector name '{name}' already registered by {existing.__name__}")

    COLLECTOR_REGISTRY[name] = cls
    return cls


def plugin_modules() -> list[str]:
    """Modules that register collectors when imported."""
    extra = os.getenv("ABUSEIO_COLLECTOR_PLUGINS", "")
    return list(BUILTIN_PLUGINS) + [m.strip() for m in extra.split(",") if m.strip()]


def load_plugins() -> None:
    """Import the plugin modules so their collectors register."""
    for module in plugin_modules():
        try:
            importlib.import_module(module)
        except Exception:
            logger.exception(f"Failed to load collector plugin module {module}")


class Registry:
    """Resolves collector names to enabled, constructed collector instances.

    Holds no run state; every lookup rescans the installed plugins.
    """

    def __init__(
        self,
        config: CollectorsConfig,
        plugins: Optional[Mapping[str, type[CollectorBase]]] = None,
        logger: Optional[logging.Logger] = None,
        tmp_root: Optional[str] = None,
    ):
        self.config = config
        self.plugins = plugins
        self.logger = logger or logging.getLogger(__name__)
        self.tmp_root = tmp_root

    def _scan(self) -> dict[str, type[CollectorBase]]:
        if self.plugins is not None:
            return {canonical_name(name): cls for name, cls in self.plugins.items()}
        load_plugins()
        return dict(COLLECTOR_REGISTRY)

    def list_collectors(self) -> list[str]:
        """Names of all installed collectors, sorted."""
        return sorted(self._scan())

    def collector_class(self, name: str) -> Optional[type[CollectorBase]]:
        """Registered class for a collector name, or None if not installed."""
        return self._scan().get(canonical_name(name))

    def is_enabled(self, name: str) -> bool:
        collector_cls = self.collector_class(name)
        if collector_cls is None:
            return False
        return self.config.get(f"collectors.{collector_cls.config_key}.collector.enabled") is True

    def create(self, requested_name: str, job_id: Optional[str] = None) -> Optional[CollectorBase]:
        """Construct the named collector, or return None if it is unknown or disabled."""
        name = canonical_name(requested_name)
        collector_cls = self.collector_class(name)

        if collector_cls is None:
            self.logger.info(f"Collector {requested_name} is not present")
            return None

        if self.config.get(f"collectors.{collector_cls.config_key}.collector.enabled") is not True:
            self.logger.info(f"Collector {name} is disabled")
            return None

        return collector_cls(self.config, job_id=job_id, tmp_root=self.tmp_root)
