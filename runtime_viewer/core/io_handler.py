"""
File IO and line parsing for the Runtime Log Viewer application.
"""
from __future__ import annotations

import json
import logging
import re
import warnings
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import pandas as pd

from .classifier import classify
from .models import MISSING_FIELD, LogRecord, WState


logger = logging.getLogger(__name__)

LINE_SPLIT_PATTERN = re.compile(r"\r?\n")
BYTE_ORDER_MARK = "\ufeff"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


def safe_json_parse(line: str) -> Any:
    """
    Decode one line of strict JSON.

    ``NaN``/``Infinity`` literals are rejected the same as any other syntax
    error. Returns None on failure.
    """
    try:
        return json.loads(line, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        return None


def split_lines(text: str) -> list[str]:
    """Split text on LF or CRLF line endings."""
    return LINE_SPLIT_PATTERN.split(text)


def parse_timestamp(value: Any) -> pd.Timestamp:
    """
    Convert a ``ts`` value to a UTC timestamp.

    Strings go through pandas' generic parser, numbers are epoch
    milliseconds. Anything unparseable becomes ``NaT``.
    """
    if isinstance(value, pd.Timestamp):
        return value
    if isinstance(value, datetime):
        return pd.Timestamp(value)
    if isinstance(value, bool) or value is None:
        return pd.NaT

    try:
        with warnings.catch_warnings():
            # Format inference warnings for free-form strings
            warnings.simplefilter("ignore", UserWarning)
            if isinstance(value, (int, float)):
                return pd.to_datetime(value, unit="ms", utc=True, errors="coerce")
            if isinstance(value, str) and value.strip():
                return pd.to_datetime(value.strip(), utc=True, errors="coerce")
    except (ValueError, OverflowError, TypeError):
        pass

    return pd.NaT


def _optional_text(value: Any, default: str) -> str:
    if value is None:
        return default
    return value if isinstance(value, str) else str(value)


def _optional_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def build_record(raw: dict[str, Any]) -> LogRecord:
    """Normalize a decoded log line into a LogRecord."""
    message = raw.get("msg", raw.get("message"))
    message = _optional_text(message, "")
    data = raw.get("data")

    classification = classify(message, data)

    wstate_raw = raw.get("w-state")
    wstate = WState.from_dict(wstate_raw) if isinstance(wstate_raw, dict) else None

    level = raw.get("level")

    return LogRecord(
        timestamp=parse_timestamp(raw.get("ts")),
        title=classification.title,
        round_id=_optional_text(raw.get("round_id"), MISSING_FIELD),
        category=_optional_text(raw.get("cat", raw.get("category")), MISSING_FIELD),
        message=message,
        data=data,
        wstate=wstate,
        id=_optional_int(raw.get("id")),
        level=level if isinstance(level, str) else None,
        title_kind=classification.kind,
        original=raw
    )


class LogReader:
    """Reads newline-delimited JSON log dumps into LogRecords."""

    def __init__(self, encoding: str = "utf-8-sig"):
        self.encoding = encoding

    def parse_line(self, line: str) -> Optional[LogRecord]:
        """Parse one line, None for blank, malformed or non-object lines."""
        if not line.strip():
            return None

        raw = safe_json_parse(line)
        if not isinstance(raw, dict):
            return None

        return build_record(raw)

    def parse_text(self, text: str) -> list[LogRecord]:
        """Parse every line of a log dump, skipping the ones that fail."""
        # Text already decoded without "utf-8-sig" may still carry the BOM
        if text.startswith(BYTE_ORDER_MARK):
            text = text[1:]

        records: list[LogRecord] = []
        skipped = 0

        for line in split_lines(text):
            if not line.strip():
                continue
            record = self.parse_line(line)
            if record is None:
                skipped += 1
                continue
            records.append(record)

        if skipped:
            logger.debug(f"Skipped {skipped} undecodable line(s)")

        return records

    def read_bytes(self, data: bytes) -> list[LogRecord]:
        """Decode raw file content and parse it."""
        return self.parse_text(data.decode(self.encoding, errors="replace"))

    def read_file(self, filepath: Path | str) -> list[LogRecord]:
        """Read a log file from disk."""
        filepath = Path(filepath)

        if not filepath.exists():
            raise FileNotFoundError(f"File not found: {filepath}")

        records = self.read_bytes(filepath.read_bytes())
        logger.info(f"Read {len(records)} record(s) from {filepath.name}")
        return records
