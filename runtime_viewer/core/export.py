"""
Text renderings of log records for the clipboard.
"""
from __future__ import annotations

import json
import re
from typing import Any, Iterable

import pandas as pd

from .models import LogRecord, WState, format_field


INVALID_DATE = "Invalid Date"
OMITTED_DATA_KEYS = ("desc",)

# Pattern: Some Player (/mob/living/carbon/human)
CENSOR_PATTERN = re.compile(
    r"(?P<name>\w[\w ]*) \((?P<typepath>/mob(?:/\w+)*|/client|/datum/persistent_client)\)",
    re.IGNORECASE | re.MULTILINE
)


def format_timestamp(timestamp: Any, fmt: str = "%Y-%m-%d %H:%M:%S") -> str:
    """Display form of a record timestamp."""
    if timestamp is None or pd.isna(timestamp):
        return INVALID_DATE
    return pd.Timestamp(timestamp).strftime(fmt)


def utc_string(timestamp: Any) -> str:
    """RFC 1123 style UTC date, e.g. ``Mon, 01 Jan 2024 00:00:00 GMT``."""
    if timestamp is None or pd.isna(timestamp):
        return INVALID_DATE
    ts = pd.Timestamp(timestamp)
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC")
    return ts.strftime("%a, %d %b %Y %H:%M:%S GMT")


def censor(text: str) -> str:
    """Replace player-identifying names in front of mob and client paths."""
    return CENSOR_PATTERN.sub(r"[redacted] (\g<typepath>)", text)


def raw_json(value: Any) -> str:
    """Compact JSON."""
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def pretty_json(value: Any) -> str:
    """JSON indented by two spaces."""
    return json.dumps(value, ensure_ascii=False, indent=2)


def _text_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return raw_json(value)
    if value is None:
        return "null"
    return format_field(value)


def message_text(record: LogRecord) -> str:
    return record.message


def record_markdown(record: LogRecord) -> str:
    """Discord-flavoured markdown: timestamp tag, title and fenced message."""
    if record.has_valid_timestamp:
        epoch = pd.Timestamp(record.timestamp).value // 1_000_000_000
        stamp = f"<t:{epoch}:f>/{utc_string(record.timestamp)}"
    else:
        stamp = f"<t:NaN:f>/{INVALID_DATE}"
    return f"[{stamp}]\nTitle: {record.title}\n```\n{record.message}```"


def data_text(data: Any, omit: Iterable[str] = OMITTED_DATA_KEYS) -> str:
    """One ``key: value`` line per data field."""
    if not isinstance(data, dict):
        return ""
    omit = set(omit)
    return "".join(
        f"{key}: {_text_value(value)}\n"
        for key, value in data.items()
        if key not in omit
    )


def data_markdown(data: Any, omit: Iterable[str] = OMITTED_DATA_KEYS) -> str:
    """One ``key: `value``` line per data field."""
    if not isinstance(data, dict):
        return ""
    omit = set(omit)
    return "".join(
        f"{key}: `{_text_value(value)}`\n"
        for key, value in data.items()
        if key not in omit
    )


def wstate_text(wstate: WState) -> str:
    return (
        f"Tick usage: {_text_value(wstate.tick_usage)}\n"
        f"Tick lag: {_text_value(wstate.tick_lag)}\n"
        f"Time: {_text_value(wstate.time)}\n"
        f"Timestamp: {_text_value(wstate.timestamp)}\n"
    )


def file_line_variants(record: LogRecord) -> dict[str, str]:
    """Source location in the formats editors and issue trackers accept."""
    if not record.file:
        return {}
    file = format_field(record.file)
    line = format_field(record.line)
    return {
        "P:#": f"{file}:{line}",
        "P:L#": f"{file}:L{line}",
        "P,#": f"{file},{line}",
        "P,L#": f"{file},L{line}",
    }
