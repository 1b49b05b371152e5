"""Collector lifecycle, feed policy and plugin registry."""

from abuseio_collectors.collectors.base import CollectorBase, RunState
from abuseio_collectors.collectors.feeds import FeedConfig, apply_filters, has_required_fields
from abuseio_collectors.collectors.registry import Registry, canonical_name, register_collector
from abuseio_collectors.collectors.result import RunResult
from abuseio_collectors.collectors.workdir import WorkingDirectory
from abuseio_collectors.errors import CollectorError, ConfigError, FilesystemError

__all__ = [
    "CollectorBase",
    "CollectorError",
    "ConfigError",
    "FeedConfig",
    "FilesystemError",
    "Registry",
    "RunResult",
    "RunState",
    "WorkingDirectory",
    "apply_filters",
    "canonical_name",
    "has_required_fields",
    "register_collector",
]
