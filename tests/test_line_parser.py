"""
Tests for line parsing and file ingestion.
"""
import json

import pandas as pd
import pytest

from runtime_viewer.core import LogReader, TitleKind, parse_timestamp, safe_json_parse
from runtime_viewer.core.io_handler import split_lines


class TestSafeJsonParse:
    """Tests for strict JSON decoding."""

    def test_valid_object(self):
        assert safe_json_parse('{"a": 1}') == {"a": 1}

    def test_malformed(self):
        assert safe_json_parse("{not json") is None
        assert safe_json_parse("") is None

    def test_rejects_non_standard_constants(self):
        """NaN and Infinity are not JSON."""
        assert safe_json_parse('{"ts": NaN}') is None
        assert safe_json_parse("Infinity") is None


class TestSplitLines:
    """Tests for line splitting."""

    def test_lf_and_crlf(self):
        assert split_lines("a\nb\r\nc") == ["a", "b", "c"]

    def test_trailing_newline(self):
        assert split_lines("a\n") == ["a", ""]


class TestParseTimestamp:
    """Tests for timestamp conversion."""

    def test_iso_string(self):
        ts = parse_timestamp("2024-01-01T00:00:00Z")
        assert ts == pd.Timestamp("2024-01-01T00:00:00Z")

    def test_naive_string_is_utc(self):
        ts = parse_timestamp("2024-01-01 12:30:00")
        assert ts == pd.Timestamp("2024-01-01T12:30:00Z")

    def test_epoch_milliseconds(self):
        ts = parse_timestamp(1704067200000)
        assert ts == pd.Timestamp("2024-01-01T00:00:00Z")

    def test_invalid_values_become_nat(self):
        """Unparseable input is kept as NaT instead of raising."""
        for value in ["not a date", "", None, True, {"a": 1}, [1, 2]]:
            assert pd.isna(parse_timestamp(value))


class TestParseLine:
    """Tests for LogReader.parse_line."""

    def setup_method(self):
        self.reader = LogReader()

    def test_full_line(self):
        line = json.dumps({
            "ts": "2024-01-01T00:00:00Z",
            "round_id": "42",
            "cat": "game",
            "msg": "Round started\nwith extras",
            "id": 7,
            "level": "info",
            "w-state": {"tick_usage": 55.5, "tick_lag": 0.1, "time": 120, "timestamp": "00:02:00"},
        })

        record = self.reader.parse_line(line)

        assert record is not None
        assert record.timestamp == pd.Timestamp("2024-01-01T00:00:00Z")
        assert record.round_id == "42"
        assert record.category == "game"
        assert record.message == "Round started\nwith extras"
        assert record.title == "Round started"
        assert record.title_kind == TitleKind.PLAIN
        assert record.id == 7
        assert record.level == "info"
        assert record.wstate is not None
        assert record.wstate.tick_usage == 55.5
        assert record.wstate.time == 120

    def test_defaults(self):
        """Missing optional fields get their defaults."""
        record = self.reader.parse_line('{"ts": "2024-01-01T00:00:00Z"}')

        assert record.round_id == "?"
        assert record.category == "?"
        assert record.message == ""
        assert record.title == "(no message)"
        assert record.data is None
        assert record.wstate is None
        assert record.id is None

    def test_long_field_names_accepted(self):
        record = self.reader.parse_line(
            '{"ts": "2024-01-01", "message": "hello", "category": "misc"}'
        )
        assert record.message == "hello"
        assert record.category == "misc"

    def test_invalid_timestamp_keeps_record(self):
        record = self.reader.parse_line('{"ts": "yesterday-ish", "msg": "hi"}')

        assert record is not None
        assert not record.has_valid_timestamp
        assert record.title == "hi"

    def test_missing_timestamp_keeps_record(self):
        record = self.reader.parse_line('{"msg": "hi"}')
        assert record is not None
        assert pd.isna(record.timestamp)

    def test_extra_fields_preserved(self):
        """Unknown fields survive in the original mapping."""
        line = '{"ts":"2024-01-01","msg":"x","s-store":{"a":[1,2]},"s-ver":"1.2"}'

        record = self.reader.parse_line(line)

        assert record.original == json.loads(line)
        assert record.original["s-store"] == {"a": [1, 2]}

    def test_original_round_trip(self):
        line = '{"ts":"2024-01-01T00:00:00Z","msg":"runtime error: x","data":{"file":"a.dm","line":3}}'

        record = self.reader.parse_line(line)

        assert json.dumps(record.original, separators=(",", ":")) == line

    def test_rejected_lines(self):
        assert self.reader.parse_line("") is None
        assert self.reader.parse_line("   ") is None
        assert self.reader.parse_line("{broken") is None
        assert self.reader.parse_line("[1, 2, 3]") is None
        assert self.reader.parse_line("null") is None

    def test_non_integer_id_ignored(self):
        assert self.reader.parse_line('{"ts": 0, "id": 3.0}').id == 3
        assert self.reader.parse_line('{"ts": 0, "id": "abc"}').id is None

    def test_non_object_wstate_ignored(self):
        record = self.reader.parse_line('{"ts": 0, "w-state": "busy"}')
        assert record.wstate is None

    def test_non_string_message_coerced(self):
        record = self.reader.parse_line('{"ts": 0, "msg": 404}')
        assert record.message == "404"
        assert record.title == "404"


class TestParseText:
    """Tests for whole-file parsing."""

    def setup_method(self):
        self.reader = LogReader()

    def test_mixed_lines(self):
        """Only valid, non-blank JSON object lines produce records."""
        text = "\r\n".join([
            '{"ts": "2024-01-01", "msg": "one"}',
            "",
            "garbage",
            '{"ts": "2024-01-02", "msg": "two"}',
            "{\"ts\": ",
            "   ",
            '{"ts": "2024-01-03", "msg": "three"}',
        ]) + "\n"

        records = self.reader.parse_text(text)

        assert [r.title for r in records] == ["one", "two", "three"]

    def test_empty_text(self):
        assert self.reader.parse_text("") == []

    def test_records_are_distinct(self):
        """Identical lines yield distinct records."""
        line = '{"ts": "2024-01-01", "msg": "same"}'
        first, second = self.reader.parse_text(f"{line}\n{line}")

        assert first is not second
        assert first != second


class TestReadFile:
    """Tests for reading files from disk."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            LogReader().read_file(tmp_path / "missing.json")

    def test_invalid_utf8_replaced(self, tmp_path):
        path = tmp_path / "log.json"
        path.write_bytes(b'{"ts": "2024-01-01", "msg": "caf\xff"}\n{"ts": "2024-01-02", "msg": "ok"}\n')

        records = LogReader().read_file(path)

        assert len(records) == 2
        assert records[0].message == "caf\ufffd"
        assert records[1].message == "ok"

    def test_byte_order_mark_stripped(self, tmp_path):
        """A UTF-8 BOM must not cost the first record."""
        path = tmp_path / "log.json"
        path.write_bytes(
            '\ufeff{"ts": "2024-01-01", "msg": "first"}\n{"ts": "2024-01-02", "msg": "second"}\n'.encode("utf-8")
        )

        records = LogReader().read_file(path)

        assert [r.title for r in records] == ["first", "second"]

    def test_byte_order_mark_in_decoded_text(self):
        records = LogReader().parse_text('\ufeff{"ts": "2024-01-01", "msg": "first"}')
        assert [r.title for r in records] == ["first"]
