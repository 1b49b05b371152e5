"""Terminal outcome of a collector run."""

from dataclasses import dataclass, field
from typing import Union

SUCCESS_MESSAGE = "Data successfully collected"

Record = dict[str, str]


@dataclass
class RunResult:
    """Result handed back to the job system after a collector run.

    A failed run never carries data: ``data`` is ``False`` whenever
    ``error_status`` is set, and the (possibly empty) list of collected
    records otherwise.
    """

    error_status: bool
    error_message: str
    warning_count: int = 0
    data: Union[list[Record], bool] = field(default_factory=list)

    @classmethod
    def failure(cls, message: str, warning_count: int = 0) -> "RunResult":
        return cls(
            error_status=True,
            error_message=message,
            warning_count=warning_count,
            data=False,
        )

    @classmethod
    def success(cls, records: list[Record], warning_count: int = 0) -> "RunResult":
        return cls(
            error_status=False,
            error_message=SUCCESS_MESSAGE,
            warning_count=warning_count,
            data=list(records),
        )

    @property
    def records(self) -> list[Record]:
        """Collected records, empty for failed runs."""
        return self.data if isinstance(self.data, list) else []

    def to_dict(self) -> dict:
        """Convert to the structure transmitted to the job system."""
        return {
            "errorStatus": self.error_status,
            "errorMessage": self.error_message,
            "warningCount": self.warning_count,
            "data": self.data if self.error_status else [dict(r) for r in self.records],
        }
