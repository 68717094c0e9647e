"""
Ordering of entries and group buckets.
"""
from __future__ import annotations

import locale
import unicodedata
from typing import Any, Callable, Iterable, TypeVar

import pandas as pd

from .models import GroupBucket, LogRecord, SortMode


T = TypeVar("T")


def fold_accents(text: str) -> str:
    """Drop combining marks after NFKD decomposition."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def collation_key(text: str) -> tuple[str, str, str]:
    """
    Locale-aware, case- and accent-insensitive sort key.

    Accented letters sort with their base letter under any ``LC_COLLATE``.
    Ties fall back to the locale transform of the casefolded text, then to
    the raw text.
    """
    folded = text.casefold().replace("\x00", "")
    return (
        locale.strxfrm(fold_accents(folded)),
        locale.strxfrm(folded),
        text
    )


def timestamp_key(timestamp: Any) -> tuple[int, int]:
    """Sort key placing invalid timestamps before every valid one."""
    if timestamp is None or pd.isna(timestamp):
        return (0, 0)
    return (1, pd.Timestamp(timestamp).value)


def sort_items(
    items: Iterable[T],
    mode: SortMode = SortMode.ARRIVAL,
    descending: bool = False,
    text_of: Callable[[T], str] = str,
    timestamp_of: Callable[[T], Any] = lambda item: None
) -> list[T]:
    """
    Order a sequence without mutating it.

    The key sort is stable; reversal happens afterwards, so ``descending``
    with ``ARRIVAL`` simply reverses arrival order.
    """
    result = list(items)

    if mode == SortMode.ALPHABETICAL:
        result.sort(key=lambda item: collation_key(text_of(item)))
    elif mode == SortMode.TIMESTAMP:
        result.sort(key=lambda item: timestamp_key(timestamp_of(item)))

    if descending:
        result.reverse()

    return result


def sort_records(
    records: Iterable[LogRecord],
    mode: SortMode = SortMode.ARRIVAL,
    descending: bool = False
) -> list[LogRecord]:
    """Order records by arrival, title or timestamp."""
    return sort_items(
        records, mode, descending,
        text_of=lambda r: r.title,
        timestamp_of=lambda r: r.timestamp
    )


def sort_buckets(
    buckets: Iterable[GroupBucket],
    mode: SortMode = SortMode.ARRIVAL,
    descending: bool = False
) -> list[GroupBucket]:
    """Order buckets by first-seen key, key text or first member timestamp."""
    return sort_items(
        buckets, mode, descending,
        text_of=lambda b: b.key,
        timestamp_of=lambda b: b.first.timestamp if b.members else None
    )
