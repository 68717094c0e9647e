"""
Core module for Runtime Log Viewer application.
Contains data models, line parsing, title classification, grouping,
filtering, sorting and navigation.
"""

from .models import (
    EntryDetailView,
    GroupBucket,
    GroupDetailView,
    HomeView,
    LogRecord,
    SortMode,
    TitleKind,
    ViewOptions,
    ViewState,
    WState,
)
from .classifier import (
    Classification,
    classify,
    derive_title,
)
from .io_handler import (
    LogReader,
    parse_timestamp,
    safe_json_parse,
)
from .group_handler import (
    DEFAULT_GROUP_RULES,
    GroupingEngine,
    GroupRule,
    filter_runtime_records,
    group_key,
)
from .sorting import (
    sort_buckets,
    sort_records,
)
from .filter_manager import (
    FilterManager,
    bucket_matches,
    compile_matcher,
    record_matches,
)
from .navigation import (
    BrowserHistory,
    HistoryAdapter,
    Navigator,
)
from .session import (
    LogSession,
    SessionSummary,
)

__all__ = [
    # Models
    "EntryDetailView",
    "GroupBucket",
    "GroupDetailView",
    "HomeView",
    "LogRecord",
    "SortMode",
    "TitleKind",
    "ViewOptions",
    "ViewState",
    "WState",
    # Classifier
    "Classification",
    "classify",
    "derive_title",
    # IO
    "LogReader",
    "parse_timestamp",
    "safe_json_parse",
    # Grouping
    "DEFAULT_GROUP_RULES",
    "GroupingEngine",
    "GroupRule",
    "filter_runtime_records",
    "group_key",
    # Sorting
    "sort_buckets",
    "sort_records",
    # Filter
    "FilterManager",
    "bucket_matches",
    "compile_matcher",
    "record_matches",
    # Navigation
    "BrowserHistory",
    "HistoryAdapter",
    "Navigator",
    # Session
    "LogSession",
    "SessionSummary",
]
