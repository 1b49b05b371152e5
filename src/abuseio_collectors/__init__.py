"""AbuseIO collectors - lifecycle and plugin registry for abuse feed collectors."""

__version__ = "0.1.0"
