"""Base collector: lifecycle shared by every feed collector plugin."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from contextlib import ExitStack
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from abuseio_collectors.collectors.feeds import FeedConfig, RawRecord, apply_filters, has_required_fields
from abuseio_collectors.collectors.result import Record, RunResult
from abuseio_collectors.collectors.workdir import WorkingDirectory
from abuseio_collectors.config import CollectorsConfig
from abuseio_collectors.errors import CollectorError, FilesystemError


class RunState(str, Enum):
    """Lifecycle of a collector instance."""

    CREATED = "CREATED"
    RUNNING = "RUNNING"
    FAILED = "FAILED"
    SUCCEEDED = "SUCCEEDED"

    @property
    def is_terminal(self) -> bool:
        return self in (RunState.FAILED, RunState.SUCCEEDED)


class CollectorBase(ABC):
    """Abstract base class for feed collectors.

    Subclasses set ``config_key`` to the name of their ``collectors.<key>``
    configuration section and implement :meth:`fetch`. :meth:`run` then
    drives one complete run: startup, per-record gating and filtering, and
    the final :class:`RunResult`. Each instance produces exactly one result.
    """

    config_key: str = ""

    def __init__(
        self,
        config: CollectorsConfig,
        logger: Optional[logging.Logger] = None,
        job_id: Optional[str] = None,
        tmp_root: Optional[Union[str, Path]] = None,
    ):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.job_id = job_id
        self.tmp_root = tmp_root

        self.config_base = f"collectors.{self.config_key}"
        self.feed_name: Optional[str] = None
        self.records: list[Record] = []
        self.warning_count = 0
        self.temp_path: Optional[Path] = None

        self.state = RunState.CREATED
        self.result: Optional[RunResult] = None
        self._resources = ExitStack()

    @property
    def collector_name(self) -> str:
        return self.config.get(f"{self.config_base}.collector.name") or ""

    def _event(self, message: str) -> str:
        prefix = type(self).__name__
        if self.job_id:
            prefix = f"{prefix} [job {self.job_id}]"
        return f"{prefix}: {message}"

    # Lifecycle

    def start_run(self, plugin_name: Optional[str] = None) -> Optional[RunResult]:
        """Bind to the plugin's configuration section and enter RUNNING.

        Returns the failure result if the collector cannot start, otherwise None.
        """
        if self.state is not RunState.CREATED:
            raise RuntimeError(f"Collector run already started (state {self.state.value})")

        self.config_base = f"collectors.{plugin_name or self.config_key}"

        if not self.collector_name:
            return self.report_failure("Required collector.name is missing in collector configuration")

        self.logger.info(self._event(f"Collector startup initiated for collector : {self.collector_name}"))
        self.state = RunState.RUNNING
        return None

    def report_failure(self, message: str) -> RunResult:
        """Release resources and end the run with an error."""
        if self.state.is_terminal:
            return self.result

        self._release()
        self.logger.warning(
            self._event(f"Collector {self.collector_name} has ended with errors. {message}")
        )
        self.result = RunResult.failure(message, self.warning_count)
        self.state = RunState.FAILED
        return self.result

    def report_success(self) -> RunResult:
        """Release resources and end the run with the collected records."""
        if self.state.is_terminal:
            return self.result
        if self.state is not RunState.RUNNING:
            raise RuntimeError("Collector run was never started")

        self._release()
        if not self.records:
            self.logger.warning(
                self._event(
                    f"The collector {self.collector_name} did not return any incidents "
                    "which should be investigated for collector and/or configuration errors"
                )
            )

        self.logger.info(self._event(f"Collector run completed for collector : {self.collector_name}"))
        self.result = RunResult.success(self.records, self.warning_count)
        self.state = RunState.SUCCEEDED
        return self.result

    def create_working_directory(self) -> Optional[Path]:
        """Create the temporary working directory for this run.

        The directory is removed when the run ends, whatever the outcome.
        On failure the run is ended through :meth:`report_failure` and None
        is returned.
        """
        try:
            path = self._resources.enter_context(WorkingDirectory(self.tmp_root))
        except FilesystemError as e:
            self.report_failure(str(e))
            return None

        self.temp_path = path
        return path

    def _release(self) -> None:
        self._resources.close()

    # Feed gating

    def warn(self, message: str) -> None:
        """Count and log a non-fatal problem."""
        self.warning_count += 1
        self.logger.warning(self._event(message))

    def _feed_settings(self, feed_name: str) -> Any:
        feeds = self.config.get(f"{self.config_base}.feeds")
        if not isinstance(feeds, Mapping):
            return None
        return feeds.get(feed_name)

    def feed_config(self, feed_name: Optional[str] = None) -> FeedConfig:
        name = feed_name or self.feed_name or ""
        settings = self._feed_settings(name)
        return FeedConfig.from_mapping(name, settings if isinstance(settings, Mapping) else None)

    def is_known_feed(self, feed_name: Optional[str] = None) -> bool:
        name = feed_name or self.feed_name
        if not self._feed_settings(name):
            self.warn(
                f"The feed referred as '{name}' is not configured in the collector "
                f"{self.collector_name} therefore skipping processing of this report"
            )
            return False
        return True

    def is_enabled_feed(self, feed_name: Optional[str] = None) -> bool:
        """Warn when the feed is disabled.

        Always returns True: a disabled feed is logged but still processed.
        """
        name = feed_name or self.feed_name
        if not self.feed_config(name).enabled:
            self.logger.warning(
                self._event(
                    f"The feed '{name}' is disabled in the configuration of collector "
                    f"{self.collector_name} therefore skipping processing of this report"
                )
            )
        return True

    def has_required_fields(self, record: RawRecord) -> bool:
        return has_required_fields(self.feed_config(), record, self.warn, self.collector_name)

    def apply_filters(self, record: RawRecord, remove_empty: bool = True) -> dict[str, str]:
        return apply_filters(self.feed_config(), record, remove_empty)

    def accept(self, record: RawRecord) -> bool:
        """Gate, filter and collect a single record. Returns False if it was skipped."""
        if not self.is_known_feed():
            return False
        if not self.is_enabled_feed():
            return False
        if not self.has_required_fields(record):
            return False

        self.records.append(self.apply_filters(record))
        return True

    # Collaborator contract

    @abstractmethod
    def fetch(self, feed_name: str, transport: Any) -> Iterable[RawRecord]:
        """
        Yield raw records for the feed from the transport handle.

        May call :meth:`create_working_directory` for scratch space and may
        raise :class:`CollectorError` to abort the run.
        """
        pass

    def run(self, feed_name: str, transport: Any = None) -> RunResult:
        """Run the collector for one feed and return its result."""
        failure = self.start_run()
        if failure is not None:
            return failure

        self.feed_name = feed_name
        try:
            for record in self.fetch(feed_name, transport):
                if self.state.is_terminal:
                    break
                self.accept(record)
        except CollectorError as e:
            return self.report_failure(str(e))
        finally:
            self._release()

        if self.state.is_terminal:
            return self.result
        return self.report_success()
