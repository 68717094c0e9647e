"""
Search filtering and view option management for the Runtime Log Viewer.
"""
from __future__ import annotations

import logging
import re
from typing import Callable, Iterable, Optional

from PySide6.QtCore import QObject, Signal

from .group_handler import GroupingEngine, filter_runtime_records
from .models import GroupBucket, LogRecord, SortMode, ViewOptions, format_field
from .sorting import sort_buckets, sort_records


logger = logging.getLogger(__name__)

FIELD_SEPARATOR = "\n"

Matcher = Callable[[str], bool]


def _match_nothing(text: str) -> bool:
    return False


def _match_everything(text: str) -> bool:
    return True


def compile_matcher(query: str, use_regex: bool = False) -> Matcher:
    """
    Build a text predicate for a search query.

    An empty query matches everything. Substring mode is case-insensitive
    containment; regex mode is a case-insensitive search. An invalid regex
    matches nothing.
    """
    if not query:
        return _match_everything

    if use_regex:
        try:
            pattern = re.compile(query, re.IGNORECASE)
        except re.error as e:
            logger.debug(f"Invalid search regex {query!r}: {e}")
            return _match_nothing
        return lambda text: pattern.search(text) is not None

    needle = query.lower()
    return lambda text: needle in text.lower()


def record_haystack(record: LogRecord) -> str:
    """Searchable text of a record: message, title and file."""
    file = record.file
    return FIELD_SEPARATOR.join([
        record.message,
        record.title,
        format_field(file) if file else ""
    ])


def record_matches(record: LogRecord, matcher: Matcher) -> bool:
    return matcher(record_haystack(record))


def bucket_matches(bucket: GroupBucket, matcher: Matcher) -> bool:
    """A bucket matches on its key or on any of its members."""
    if matcher(bucket.key):
        return True
    return any(record_matches(record, matcher) for record in bucket.members)


class FilterManager(QObject):
    """
    Manages view options and derives the visible entries from a record set.

    Emits a signal when options change so views can refresh.
    """

    # Signal emitted when any option changes
    options_changed = Signal()

    def __init__(self, options: Optional[ViewOptions] = None, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._options = options or ViewOptions()
        self._listeners: list[Callable[[ViewOptions], None]] = []

    @property
    def options(self) -> ViewOptions:
        return self._options

    def matcher(self) -> Matcher:
        """Predicate for the current search settings."""
        return compile_matcher(self._options.search_text, self._options.use_regex)

    # =========================================================================
    # Setters
    # =========================================================================

    def set_search(self, text: str) -> None:
        """Set the search query."""
        if text != self._options.search_text:
            self._options.search_text = text
            self._emit_change()

    def set_use_regex(self, enabled: bool) -> None:
        """Switch between substring and regex search."""
        if enabled != self._options.use_regex:
            self._options.use_regex = enabled
            self._emit_change()

    def set_organized(self, enabled: bool) -> None:
        """Switch between the linear list and grouped buckets."""
        if enabled != self._options.organized:
            self._options.organized = enabled
            self._emit_change()

    def set_ignore_non_runtimes(self, enabled: bool) -> None:
        """Restrict the candidate set to runtime error records."""
        if enabled != self._options.ignore_non_runtimes:
            self._options.ignore_non_runtimes = enabled
            self._emit_change()

    def set_sort_mode(self, mode: SortMode) -> None:
        if mode != self._options.sort_mode:
            self._options.sort_mode = mode
            self._emit_change()

    def set_descending(self, enabled: bool) -> None:
        if enabled != self._options.descending:
            self._options.descending = enabled
            self._emit_change()

    def set_censor(self, enabled: bool) -> None:
        """Censor player identifiers in copied text."""
        if enabled != self._options.censor_copies:
            self._options.censor_copies = enabled
            self._emit_change()

    def toggle_organized(self) -> None:
        self.set_organized(not self._options.organized)

    def toggle_ignore_non_runtimes(self) -> None:
        self.set_ignore_non_runtimes(not self._options.ignore_non_runtimes)

    def toggle_descending(self) -> None:
        self.set_descending(not self._options.descending)

    def toggle_alphabetical(self) -> None:
        """Flip between arrival order and alphabetical order."""
        if self._options.sort_mode == SortMode.ALPHABETICAL:
            self.set_sort_mode(SortMode.ARRIVAL)
        else:
            self.set_sort_mode(SortMode.ALPHABETICAL)

    def reset(self) -> None:
        """Restore default options."""
        self._options = ViewOptions()
        self._emit_change()

    # =========================================================================
    # Derived views
    # =========================================================================

    def visible_records(self, records: Iterable[LogRecord]) -> list[LogRecord]:
        """Linear view: runtime filter, search, then sort."""
        opts = self._options
        matcher = self.matcher()

        candidates = filter_runtime_records(records, opts.ignore_non_runtimes)
        matched = [r for r in candidates if record_matches(r, matcher)]

        return sort_records(matched, opts.sort_mode, opts.descending)

    def visible_buckets(
        self,
        records: Iterable[LogRecord],
        engine: Optional[GroupingEngine] = None
    ) -> list[GroupBucket]:
        """Organized view: group the candidate set, search buckets, then sort."""
        opts = self._options
        engine = engine or GroupingEngine()
        matcher = self.matcher()

        buckets = engine.group(records, ignore_non_runtimes=opts.ignore_non_runtimes)
        matched = [b for b in buckets.values() if bucket_matches(b, matcher)]

        return sort_buckets(matched, opts.sort_mode, opts.descending)

    # =========================================================================
    # Listeners
    # =========================================================================

    def _emit_change(self) -> None:
        """Emit option change signals."""
        self.options_changed.emit()

        # Notify listeners
        for listener in self._listeners:
            listener(self._options)

    def add_listener(self, callback: Callable[[ViewOptions], None]) -> None:
        """Add a listener callback for option changes."""
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[ViewOptions], None]) -> None:
        """Remove a listener callback."""
        if callback in self._listeners:
            self._listeners.remove(callback)
