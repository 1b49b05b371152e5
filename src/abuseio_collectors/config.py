"""Collector configuration loaded from YAML."""

import logging
import os
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml

from abuseio_collectors.errors import ConfigError

logger = logging.getLogger(__name__)

# Used when neither --config nor ABUSEIO_COLLECTORS_CONFIG is given
DEFAULT_CONFIG_PATH = "./collectors.yaml"

_MISSING = object()


class CollectorsConfig:
    """Read-only view over the nested collectors configuration.

    Values are addressed with dotted keys, e.g.
    ``config.get("collectors.Mailfeed.collector.enabled")``.
    """

    def __init__(self, data: Optional[Mapping[str, Any]] = None):
        self._data = dict(data or {})

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "CollectorsConfig":
        """Load configuration from a YAML file. A missing file gives an empty config."""
        path = Path(path)
        if not path.exists():
            logger.info(f"No collectors configuration at {path}, using empty configuration")
            return cls()

        try:
            with open(path, encoding="utf-8") as f:
                payload = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Unable to read collectors configuration {path}: {e}") from e

        if not isinstance(payload, dict):
            raise ConfigError(f"Collectors configuration {path} must be a mapping")
        return cls(payload)

    def get(self, key: str, default: Any = None) -> Any:
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, Mapping):
                return default
            node = node.get(part, _MISSING)
            if node is _MISSING:
                return default
        return node

    def section(self, prefix: str) -> "CollectorsConfig":
        """Return the sub-configuration below ``prefix``."""
        node = self.get(prefix)
        return CollectorsConfig(node if isinstance(node, Mapping) else {})

    def to_dict(self) -> dict:
        return dict(self._data)


def load_config(path: Optional[Union[str, Path]] = None) -> CollectorsConfig:
    """Load the configuration from ``path`` or ABUSEIO_COLLECTORS_CONFIG."""
    return CollectorsConfig.from_yaml(path or os.getenv("ABUSEIO_COLLECTORS_CONFIG", DEFAULT_CONFIG_PATH))
