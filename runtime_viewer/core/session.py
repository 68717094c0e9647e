"""
Session controller: the current record set plus its navigation state.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from .filter_manager import FilterManager
from .group_handler import GroupingEngine, count_runtimes, count_unique_runtimes
from .io_handler import LogReader
from .models import EntryDetailView, GroupBucket, LogRecord, ViewState
from .navigation import HistoryAdapter


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionSummary:
    """Counts shown above the entry list."""
    total: int = 0
    runtimes: int = 0
    unique_runtimes: int = 0


class LogSession:
    """
    Owns the loaded records and the view stack.

    A new upload replaces the record set wholesale and resets navigation to
    Home; derived views are recomputed on demand.
    """

    def __init__(
        self,
        reader: Optional[LogReader] = None,
        engine: Optional[GroupingEngine] = None,
        filter_manager: Optional[FilterManager] = None
    ):
        self.reader = reader or LogReader()
        self.engine = engine or GroupingEngine()
        self.filter_manager = filter_manager or FilterManager()
        self.history = HistoryAdapter()

        self._records: tuple[LogRecord, ...] = ()
        self.file_name: str = ""
        self._listeners: list[Callable[[LogSession], None]] = []

    @property
    def records(self) -> tuple[LogRecord, ...]:
        return self._records

    @property
    def current_view(self) -> ViewState:
        return self.history.current

    # =========================================================================
    # Loading
    # =========================================================================

    def load_text(self, text: str, name: str = "") -> bool:
        """
        Replace the record set with the contents of a log dump.

        Empty text is ignored and leaves the previous state untouched.
        Returns True if the record set was replaced.
        """
        if not text:
            logger.info(f"Ignoring empty upload {name!r}")
            return False

        records = self.reader.parse_text(text)
        self.replace_records(records, name)
        return True

    def load_bytes(self, data: bytes, name: str = "") -> bool:
        if not data:
            logger.info(f"Ignoring empty upload {name!r}")
            return False
        return self.load_text(data.decode(self.reader.encoding, errors="replace"), name)

    def load_file(self, filepath: Path | str) -> bool:
        """Load a log file from disk. Raises FileNotFoundError if missing."""
        filepath = Path(filepath)
        if not filepath.exists():
            raise FileNotFoundError(f"File not found: {filepath}")
        return self.load_bytes(filepath.read_bytes(), filepath.name)

    def replace_records(self, records: list[LogRecord], name: str = "") -> None:
        """Swap in a new record set and return to Home."""
        self._records = tuple(records)
        self.file_name = name
        self.history.reset()
        logger.info(f"Loaded {len(self._records)} record(s) from {name or 'upload'}")
        self._notify()

    # =========================================================================
    # Derived views
    # =========================================================================

    def visible_records(self) -> list[LogRecord]:
        return self.filter_manager.visible_records(self._records)

    def visible_buckets(self) -> list[GroupBucket]:
        return self.filter_manager.visible_buckets(self._records, self.engine)

    def summary(self) -> SessionSummary:
        return SessionSummary(
            total=len(self._records),
            runtimes=count_runtimes(self._records),
            unique_runtimes=count_unique_runtimes(self._records)
        )

    def position_in_log(self, record: LogRecord) -> int:
        """Index of a record in the loaded file, -1 if it is not part of it."""
        for i, candidate in enumerate(self._records):
            if candidate is record:
                return i
        return -1

    # =========================================================================
    # Navigation
    # =========================================================================

    def open_bucket(self, bucket: GroupBucket) -> ViewState:
        return self.history.select_bucket(bucket)

    def open_record(self, record: LogRecord) -> ViewState:
        return self.history.select_record(record)

    def open_member(self, index: int) -> ViewState:
        return self.history.open_member(index)

    def next_entry(self) -> bool:
        return self._step(1)

    def previous_entry(self) -> bool:
        return self._step(-1)

    def _step(self, delta: int) -> bool:
        """
        Move to a neighbouring entry.

        Entries opened from a group move within the group; entries opened
        from the list move through the whole loaded file.
        """
        state = self.current_view
        if not isinstance(state, EntryDetailView):
            return False
        if state.origin_group is not None:
            return self.history.step(delta)

        index = self.position_in_log(state.record)
        target = index + delta
        if index == -1 or not 0 <= target < len(self._records):
            return False
        return self.history.show_record(self._records[target])

    def back(self) -> ViewState:
        return self.history.go_back()

    def forward(self) -> ViewState:
        return self.history.go_forward()

    # =========================================================================
    # Listeners
    # =========================================================================

    def _notify(self) -> None:
        for listener in self._listeners:
            listener(self)

    def add_listener(self, callback: Callable[[LogSession], None]) -> None:
        """Add a listener called after the record set is replaced."""
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[LogSession], None]) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)
