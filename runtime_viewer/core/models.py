"""
Core data models for the Runtime Log Viewer application.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Optional, Union

import pandas as pd


RUNTIME_MARKER = "runtime error"
MISSING_FIELD = "?"


class SortMode(Enum):
    """Ordering applied to the entry list or to group buckets."""
    ARRIVAL = auto()       # Order the lines appeared in the file
    ALPHABETICAL = auto()  # Title (or group key), locale-aware
    TIMESTAMP = auto()     # Invalid timestamps first


class TitleKind(Enum):
    """Which branch of the title classifier produced a title."""
    NO_MESSAGE = auto()
    RUNTIME_PROC = auto()   # Bare "runtime error: " header, path from proc name line
    RUNTIME_NAMED = auto()  # Detailed runtime header, name from data
    PLAIN = auto()


def format_field(value: Any) -> str:
    """Render a structured field the way it appears in titles and keys."""
    if value is None:
        return MISSING_FIELD
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def data_field(data: Any, name: str) -> Any:
    """Get a field from a record's data payload, None if absent or not an object."""
    if isinstance(data, dict):
        return data.get(name)
    return None


@dataclass(frozen=True)
class WState:
    """Runtime telemetry snapshot attached to a log line."""
    tick_usage: Any = None
    tick_lag: Any = None
    time: Any = None
    timestamp: Any = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WState:
        """Deserialize from the ``w-state`` object of a log line."""
        return cls(
            tick_usage=data.get("tick_usage"),
            tick_lag=data.get("tick_lag"),
            time=data.get("time"),
            timestamp=data.get("timestamp"),
            raw=data
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize back to the original mapping."""
        if self.raw:
            return self.raw
        return {
            "tick_usage": self.tick_usage,
            "tick_lag": self.tick_lag,
            "time": self.time,
            "timestamp": self.timestamp
        }


@dataclass(frozen=True, eq=False)
class LogRecord:
    """
    One parsed log line.

    Records compare by identity: two identical lines in a file are still two
    distinct entries for navigation purposes.
    """
    timestamp: pd.Timestamp
    title: str
    round_id: str = MISSING_FIELD
    category: str = MISSING_FIELD
    message: str = ""
    data: Any = None
    wstate: Optional[WState] = None
    id: Optional[int] = None
    level: Optional[str] = None
    title_kind: TitleKind = TitleKind.PLAIN
    original: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def has_valid_timestamp(self) -> bool:
        return not pd.isna(self.timestamp)

    @property
    def is_runtime(self) -> bool:
        """True if the message carries the runtime error marker anywhere."""
        return RUNTIME_MARKER in self.message

    @property
    def starts_as_runtime(self) -> bool:
        return self.message.startswith(RUNTIME_MARKER)

    @property
    def file(self) -> Any:
        return data_field(self.data, "file")

    @property
    def line(self) -> Any:
        return data_field(self.data, "line")

    @property
    def file_line(self) -> Optional[str]:
        """``file:line`` location of the record, None without a file."""
        if not self.file:
            return None
        return f"{format_field(self.file)}:{format_field(self.line)}"


@dataclass
class GroupBucket:
    """Records sharing one group key, in arrival order."""
    key: str
    is_pattern_key: bool = False
    members: list[LogRecord] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.members)

    @property
    def first(self) -> LogRecord:
        return self.members[0]

    @property
    def label(self) -> str:
        """Text shown for the bucket: the generalized key, or the first title."""
        if self.is_pattern_key or not self.members:
            return self.key
        return self.members[0].title


@dataclass
class ViewOptions:
    """User-selected view, filter and sort settings."""
    organized: bool = False
    ignore_non_runtimes: bool = False
    sort_mode: SortMode = SortMode.ARRIVAL
    descending: bool = False
    search_text: str = ""
    use_regex: bool = False
    censor_copies: bool = False


# =========================================================================
# View states
# =========================================================================

@dataclass(frozen=True)
class HomeView:
    """Entry list (linear or organized)."""


@dataclass(frozen=True)
class GroupDetailView:
    """Members of one group bucket."""
    members: tuple[LogRecord, ...]


@dataclass(frozen=True)
class EntryDetailView:
    """A single entry, optionally opened from a group."""
    record: LogRecord
    origin_group: Optional[tuple[LogRecord, ...]] = None
    index_in_group: int = 0

    @property
    def in_group(self) -> bool:
        return self.origin_group is not None and len(self.origin_group) > 1


ViewState = Union[HomeView, GroupDetailView, EntryDetailView]
