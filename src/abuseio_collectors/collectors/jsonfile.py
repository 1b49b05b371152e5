"""File drop collector reading records from a JSON document."""

import json
import shutil
from pathlib import Path
from typing import Any, Iterator

from abuseio_collectors.collectors.base import CollectorBase
from abuseio_collectors.collectors.feeds import RawRecord
from abuseio_collectors.collectors.registry import register_collector
from abuseio_collectors.errors import CollectorError


@register_collector
class Jsonfile(CollectorBase):
    """Collector for JSON file drops.

    The transport handle is the path of a file holding a JSON array of
    flat objects. The file is copied into the run's working directory
    before it is read, so the drop can be replaced while the run is active.
    """

    config_key = "Jsonfile"

    def fetch(self, feed_name: str, transport: Any) -> Iterator[RawRecord]:
        if not transport:
            raise CollectorError("No file given to collect from")

        source = Path(transport)
        workdir = self.create_working_directory()
        if workdir is None:
            return

        try:
            local = Path(shutil.copy(source, workdir / source.name))
            with open(local, encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, ValueError) as e:
            raise CollectorError(f"Unable to read {source}: {e}") from e

        if not isinstance(payload, list):
            raise CollectorError(f"Expected a JSON array of records in {source}")

        for entry in payload:
            if not isinstance(entry, dict):
                self.warn(f"Ignoring non-object entry in {source.name}")
                continue
            yield {str(k): self._as_text(v) for k, v in entry.items()}

    @staticmethod
    def _as_text(value: Any):
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (dict, list)):
            return json.dumps(value, sort_keys=True)
        return str(value)
