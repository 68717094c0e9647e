"""
Tests for clipboard renderings of records.
"""
import json

import pandas as pd

from runtime_viewer.core.export import (
    censor,
    data_markdown,
    data_text,
    file_line_variants,
    format_timestamp,
    pretty_json,
    raw_json,
    record_markdown,
    utc_string,
    wstate_text,
)
from runtime_viewer.core.io_handler import build_record


class TestTimestamps:
    """Tests for timestamp display."""

    def test_format_timestamp(self):
        assert format_timestamp(pd.Timestamp("2024-01-01T08:30:00Z")) == "2024-01-01 08:30:00"

    def test_invalid(self):
        assert format_timestamp(pd.NaT) == "Invalid Date"
        assert utc_string(None) == "Invalid Date"

    def test_utc_string(self):
        assert utc_string(pd.Timestamp("2024-01-01T00:00:00Z")) == "Mon, 01 Jan 2024 00:00:00 GMT"

    def test_utc_string_converts_offsets(self):
        assert utc_string(pd.Timestamp("2024-01-01T02:00:00+02:00")) == "Mon, 01 Jan 2024 00:00:00 GMT"


class TestRecordMarkdown:
    """Tests for the markdown rendering."""

    def test_valid_timestamp(self):
        record = build_record({"ts": "2024-01-01T00:00:00Z", "msg": "Round started\nMap: Box"})

        assert record_markdown(record) == (
            "[<t:1704067200:f>/Mon, 01 Jan 2024 00:00:00 GMT]\n"
            "Title: Round started\n"
            "```\nRound started\nMap: Box```"
        )

    def test_invalid_timestamp(self):
        record = build_record({"ts": "garbage", "msg": "hi"})
        assert record_markdown(record).startswith("[<t:NaN:f>/Invalid Date]\n")


class TestJson:
    """Tests for JSON renderings."""

    def test_raw_json_compact(self):
        assert raw_json({"a": [1, 2], "b": "é"}) == '{"a":[1,2],"b":"é"}'

    def test_pretty_json(self):
        value = {"a": {"b": 1}}
        text = pretty_json(value)
        assert text.splitlines()[1] == '  "a": {'
        assert json.loads(text) == value

    def test_original_line_preserved(self):
        raw = {"ts": "2024-01-01", "msg": "x", "s-store": {"k": [1]}}
        record = build_record(raw)
        assert json.loads(raw_json(record.original)) == raw


class TestDataText:
    """Tests for data and w-state renderings."""

    def setup_method(self):
        self.data = {
            "file": "code/a.dm",
            "line": 12,
            "desc": "long description",
            "usr": None,
            "src": {"type": "/obj/item", "loc": [1, 2, 3]},
        }

    def test_data_text_omits_desc(self):
        assert data_text(self.data) == (
            "file: code/a.dm\n"
            "line: 12\n"
            "usr: null\n"
            'src: {"type":"/obj/item","loc":[1,2,3]}\n'
        )

    def test_data_markdown(self):
        assert data_markdown({"file": "a.dm", "line": 3.0}) == "file: `a.dm`\nline: `3`\n"

    def test_non_object_data(self):
        assert data_text("plain") == ""
        assert data_markdown(None) == ""

    def test_wstate_text(self):
        record = build_record({
            "ts": 0,
            "w-state": {"tick_usage": 98.5, "tick_lag": 0.2, "time": 6000, "timestamp": "00:10:00"}
        })
        assert wstate_text(record.wstate) == (
            "Tick usage: 98.5\n"
            "Tick lag: 0.2\n"
            "Time: 6000\n"
            "Timestamp: 00:10:00\n"
        )


class TestFileLineVariants:
    """Tests for source location formats."""

    def test_variants(self):
        record = build_record({"ts": 0, "msg": "x", "data": {"file": "code/a.dm", "line": 12}})
        assert file_line_variants(record) == {
            "P:#": "code/a.dm:12",
            "P:L#": "code/a.dm:L12",
            "P,#": "code/a.dm,12",
            "P,L#": "code/a.dm,L12",
        }

    def test_no_file(self):
        assert file_line_variants(build_record({"ts": 0, "msg": "x"})) == {}


class TestCensor:
    """Tests for player name redaction."""

    def test_mob_path(self):
        text = "usr: John Smith (/mob/living/carbon/human)"
        assert censor(text) == "usr: [redacted] (/mob/living/carbon/human)"

    def test_client_and_persistent_client(self):
        assert censor("src: someone (/client)") == "src: [redacted] (/client)"
        assert censor("src: someone (/datum/persistent_client)") == "src: [redacted] (/datum/persistent_client)"

    def test_other_paths_untouched(self):
        text = "src: the crowbar (/obj/item/crowbar)"
        assert censor(text) == text
