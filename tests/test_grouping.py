"""
Tests for grouping of equivalent log records.
"""
from runtime_viewer.core import (
    DEFAULT_GROUP_RULES,
    GroupingEngine,
    GroupRule,
    filter_runtime_records,
    group_key,
)
from runtime_viewer.core.group_handler import count_runtimes, count_unique_runtimes
from runtime_viewer.core.io_handler import build_record


def make_record(msg, data=None, ts="2024-01-01T00:00:00Z"):
    raw = {"ts": ts, "msg": msg}
    if data is not None:
        raw["data"] = data
    return build_record(raw)


class TestGroupKey:
    """Tests for group key selection."""

    def test_subsystem_init_pattern(self):
        key, is_pattern = group_key(make_record("Initialized Atmospherics subsystem within 1.5 seconds!"))
        assert key == "Initialized ... subsystem within ... seconds"
        assert is_pattern

    def test_subsystem_init_with_stage_prefix(self):
        key, _ = group_key(make_record("[S3-12/40] Initialized Mapping subsystem within 12 seconds!"))
        assert key == "Initialized ... subsystem within ... seconds"

    def test_subsystem_init_case_insensitive(self):
        key, _ = group_key(make_record("initialized lighting subsystem within .25 seconds!"))
        assert key == "Initialized ... subsystem within ... seconds"

    def test_shutdown_pattern(self):
        key, is_pattern = group_key(make_record("Shutting down Garbage subsystem"))
        assert key == "Shutting down ... subsystem."
        assert is_pattern

    def test_prefix_rules(self):
        cases = {
            "## TESTING: GC: -- [0x2001a] | /obj/item was unable to be GC'd --": "## TESTING: GC...",
            "DEBUG: isbanned(): 'someone'": "DEBUG: isbanned(): ...",
            "## ERROR: Prefs failed to setup (SS) for Someone": "## ERROR: Prefs failed to setup (SS)...",
            "## ERROR: Prefs failed to setup (datum) for Someone": "## ERROR: Prefs failed to setup (datum)...",
        }
        for message, expected in cases.items():
            assert group_key(make_record(message)) == (expected, True)

    def test_prefix_must_lead(self):
        """Prefix rules only match at the start of the title."""
        key, is_pattern = group_key(make_record("note: DEBUG: isbanned(): x"))
        assert key == "note: DEBUG: isbanned(): x"
        assert not is_pattern

    def test_file_line_key(self):
        record = make_record(
            "runtime error: Cannot read null.x",
            {"file": "code/a.dm", "line": 12, "name": "Attack"}
        )
        assert group_key(record) == ("code/a.dm:12", False)

    def test_file_without_line(self):
        record = make_record("something", {"file": "code/a.dm"})
        assert group_key(record) == ("code/a.dm:?", False)

    def test_title_key(self):
        assert group_key(make_record("Round started")) == ("Round started", False)

    def test_rule_beats_file_line(self):
        """Heuristic rules take priority over the source location."""
        record = make_record("Shutting down Air subsystem", {"file": "code/ss.dm", "line": 4})
        assert group_key(record) == ("Shutting down ... subsystem.", True)

    def test_custom_rules(self):
        rules = [GroupRule("all", lambda title: True, "everything")]
        assert group_key(make_record("anything"), rules) == ("everything", True)


class TestGroupingEngine:
    """Tests for GroupingEngine.group."""

    def setup_method(self):
        self.engine = GroupingEngine()

    def test_subsystem_inits_collapse(self):
        """Fifty init lines with differing names and timings form one bucket."""
        records = [
            make_record(f"[S{i}-1/50] Initialized Subsystem{i} subsystem within {i * 0.37:.2f} seconds!")
            for i in range(50)
        ]

        buckets = self.engine.group(records)

        assert list(buckets) == ["Initialized ... subsystem within ... seconds"]
        bucket = buckets["Initialized ... subsystem within ... seconds"]
        assert bucket.count == 50
        assert bucket.is_pattern_key
        assert bucket.label == "Initialized ... subsystem within ... seconds"
        assert bucket.members == records

    def test_partition(self):
        """Every record lands in exactly one bucket, arrival order kept."""
        records = [
            make_record("Round started"),
            make_record("runtime error: a", {"file": "a.dm", "line": 1, "name": "A"}),
            make_record("Shutting down Air subsystem"),
            make_record("runtime error: b", {"file": "a.dm", "line": 1, "name": "A"}),
            make_record("Round started"),
            make_record("runtime error: c", {"file": "b.dm", "line": 2, "name": "B"}),
        ]

        buckets = self.engine.group(records)

        assert list(buckets) == ["Round started", "a.dm:1", "Shutting down ... subsystem.", "b.dm:2"]
        members = [r for b in buckets.values() for r in b.members]
        assert len(members) == len(records)
        assert {id(r) for r in members} == {id(r) for r in records}
        assert buckets["a.dm:1"].members == [records[1], records[3]]

    def test_label_uses_first_title(self):
        records = [
            make_record("runtime error: first", {"file": "a.dm", "line": 1, "name": "One"}),
            make_record("runtime error: second", {"file": "a.dm", "line": 1, "name": "Two"}),
        ]
        bucket = self.engine.group(records)["a.dm:1"]
        assert bucket.label == "Runtime in a.dm, line 1: One"

    def test_ignore_non_runtimes(self):
        records = [
            make_record("Round started"),
            make_record("runtime error: x", {"file": "a.dm", "line": 1}),
            make_record("[00:01] runtime error: y", {"file": "b.dm", "line": 2}),
        ]

        buckets = self.engine.group(records, ignore_non_runtimes=True)

        assert list(buckets) == ["a.dm:1", "b.dm:2"]

    def test_empty_input(self):
        assert self.engine.group([]) == {}

    def test_add_rule_priority(self):
        self.engine.add_rule(GroupRule("round", lambda t: t.startswith("Round"), "Round ..."), index=0)
        self.engine.add_rule(GroupRule("late", lambda t: True, "catch-all"))

        buckets = self.engine.group([make_record("Round started"), make_record("Other")])

        assert list(buckets) == ["Round ...", "catch-all"]

    def test_default_rules_not_shared(self):
        """Adding a rule to one engine leaves the defaults untouched."""
        before = len(DEFAULT_GROUP_RULES)
        self.engine.add_rule(GroupRule("x", lambda t: False, "x"))
        assert len(DEFAULT_GROUP_RULES) == before


class TestRuntimeCounts:
    """Tests for runtime filtering and counters."""

    def setup_method(self):
        self.records = [
            make_record("runtime error: a", {"file": "a.dm", "line": 1, "name": "A"}),
            make_record("runtime error: b", {"file": "a.dm", "line": 1, "name": "A"}),
            make_record("runtime error: c", {"file": "c.dm", "line": 3, "name": "C"}),
            make_record("[12:00] runtime error: d", {"file": "d.dm", "line": 4, "name": "D"}),
            make_record("Round started"),
        ]

    def test_filter_uses_containment(self):
        assert len(filter_runtime_records(self.records, True)) == 4
        assert len(filter_runtime_records(self.records, False)) == 5

    def test_counts_use_prefix(self):
        assert count_runtimes(self.records) == 3
        assert count_unique_runtimes(self.records) == 2
