"""Errors that abort a collector run."""


class CollectorError(Exception):
    """Base class for conditions that end a run with a failure result."""


class ConfigError(CollectorError):
    """Required configuration is missing or unreadable."""


class FilesystemError(CollectorError):
    """The working directory for a run could not be created."""
