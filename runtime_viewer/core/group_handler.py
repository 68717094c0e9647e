"""
Grouping of equivalent log records for triage.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence

from .models import GroupBucket, LogRecord


@dataclass(frozen=True)
class GroupRule:
    """A heuristic that maps matching titles onto one generalized key."""
    name: str
    predicate: Callable[[str], bool]
    key: str

    def matches(self, title: str) -> bool:
        return self.predicate(title)


def prefix_rule(name: str, prefix: str, key: Optional[str] = None) -> GroupRule:
    """Rule for titles starting with a literal prefix."""
    return GroupRule(name, lambda title: title.startswith(prefix), key or f"{prefix}...")


def pattern_rule(name: str, pattern: str, key: str) -> GroupRule:
    """Rule for titles containing a case-insensitive pattern match."""
    compiled = re.compile(pattern, re.IGNORECASE | re.ASCII)
    return GroupRule(name, lambda title: compiled.search(title) is not None, key)


# Order matters: first matching rule wins.
DEFAULT_GROUP_RULES: list[GroupRule] = [
    prefix_rule("gc_testing", "## TESTING: GC"),
    prefix_rule("isbanned_debug", "DEBUG: isbanned():", "DEBUG: isbanned(): ..."),
    prefix_rule("prefs_setup_ss", "## ERROR: Prefs failed to setup (SS)"),
    prefix_rule("prefs_setup_datum", "## ERROR: Prefs failed to setup (datum)"),
    pattern_rule(
        "subsystem_initialized",
        r"(\[S\d+-\d+/\d+\] )?Initialized [\w ]+ subsystem within ([+-]?(\d*\.)?\d+)+ seconds!",
        "Initialized ... subsystem within ... seconds"
    ),
    pattern_rule(
        "subsystem_shutdown",
        r"Shutting down [\w ]+ subsystem",
        "Shutting down ... subsystem."
    ),
]


def group_key(
    record: LogRecord,
    rules: Sequence[GroupRule] = DEFAULT_GROUP_RULES
) -> tuple[str, bool]:
    """
    Compute the group key of a record.

    Returns:
        (key, is_pattern_key) - pattern keys come from a heuristic rule,
        other keys are the record's ``file:line`` or its title.
    """
    for rule in rules:
        if rule.matches(record.title):
            return rule.key, True

    location = record.file_line
    if location is not None:
        return location, False

    return record.title, False


def filter_runtime_records(
    records: Iterable[LogRecord],
    ignore_non_runtimes: bool
) -> list[LogRecord]:
    """Drop records without the runtime marker when requested."""
    if not ignore_non_runtimes:
        return list(records)
    return [r for r in records if r.is_runtime]


class GroupingEngine:
    """Buckets records by group key, preserving first-seen key order."""

    def __init__(self, rules: Optional[Sequence[GroupRule]] = None):
        self.rules: list[GroupRule] = list(DEFAULT_GROUP_RULES if rules is None else rules)

    def add_rule(self, rule: GroupRule, index: Optional[int] = None) -> None:
        """Add a rule, by default with the lowest priority."""
        if index is None:
            self.rules.append(rule)
        else:
            self.rules.insert(index, rule)

    def key_for(self, record: LogRecord) -> tuple[str, bool]:
        return group_key(record, self.rules)

    def group(
        self,
        records: Iterable[LogRecord],
        ignore_non_runtimes: bool = False
    ) -> dict[str, GroupBucket]:
        """
        Partition records into buckets.

        Args:
            records: Records in arrival order
            ignore_non_runtimes: Only group records carrying the runtime marker

        Returns:
            Dict of key -> GroupBucket in first-seen order
        """
        buckets: dict[str, GroupBucket] = {}

        for record in filter_runtime_records(records, ignore_non_runtimes):
            key, is_pattern = self.key_for(record)
            bucket = buckets.get(key)
            if bucket is None:
                bucket = GroupBucket(key=key, is_pattern_key=is_pattern)
                buckets[key] = bucket
            bucket.members.append(record)

        return buckets


def count_runtimes(records: Iterable[LogRecord]) -> int:
    """Number of records whose message starts with the runtime marker."""
    return sum(1 for r in records if r.starts_as_runtime)


def count_unique_runtimes(records: Iterable[LogRecord]) -> int:
    """Number of distinct titles among runtime records."""
    return len({r.title for r in records if r.starts_as_runtime})
