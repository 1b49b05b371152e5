"""Feed configuration, required-field validation and field filtering."""

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

RawRecord = Mapping[str, Optional[str]]


def _clean_names(values: Any) -> list[str]:
    """Drop blank entries from a configured list of field names."""
    if not isinstance(values, (list, tuple, set, frozenset)):
        return []
    return [str(v).strip() for v in values if v is not None and str(v).strip()]


@dataclass(frozen=True)
class FeedConfig:
    """Settings of one feed within a collector."""

    name: str
    enabled: bool = False
    required_fields: tuple[str, ...] = ()
    filter_fields: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_mapping(cls, name: str, data: Optional[Mapping[str, Any]]) -> "FeedConfig":
        """Build from the ``feeds.<name>`` config mapping (keys: enabled, fields, filters)."""
        data = data or {}
        return cls(
            name=name,
            enabled=data.get("enabled") is True,
            required_fields=tuple(_clean_names(data.get("fields"))),
            filter_fields=frozenset(_clean_names(data.get("filters"))),
        )


def has_required_fields(
    feed: FeedConfig,
    record: RawRecord,
    warn: Callable[[str], None],
    collector_name: str = "",
) -> bool:
    """Check that the record carries every required field of the feed.

    Stops at the first missing field, reporting it once through ``warn``.
    """
    for column in feed.required_fields:
        if record.get(column) is None:
            warn(
                f"{collector_name} feed '{feed.name}' says {column} is required but is missing, "
                "therefore skipping processing of this incident"
            )
            return False
    return True


def apply_filters(feed: FeedConfig, record: RawRecord, remove_empty: bool = True) -> dict[str, str]:
    """Return a copy of the record without filtered fields and, optionally, empty ones."""
    filtered = {k: v for k, v in record.items() if k not in feed.filter_fields}

    if remove_empty:
        filtered = {k: v for k, v in filtered.items() if v is not None and v != ""}

    return filtered
