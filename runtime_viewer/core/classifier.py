"""
Title classification for parsed log lines.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

from .models import TitleKind, data_field, format_field


logger = logging.getLogger(__name__)

NO_MESSAGE_TITLE = "(no message)"
RUNTIME_HEADER = "runtime error: "
PROC_NAME_MARKER = "proc name"
UNKNOWN_PROC = "(unknown proc)"

# Pattern: proc name: Attack (/mob/living/proc/attack)
PROC_PATH_PATTERN = re.compile(r"proc name: [\w ]*\((.*)\)", re.ASCII)


@dataclass(frozen=True)
class Classification:
    """Title plus the branch that produced it."""
    title: str
    kind: TitleKind
    degraded: bool = False


def runtime_title(data: Any, detail: Any) -> str:
    """Build a ``Runtime in <file>, line <line>: <detail>`` title."""
    file = format_field(data_field(data, "file"))
    line = format_field(data_field(data, "line"))
    return f"Runtime in {file}, line {line}: {format_field(detail)}"


def extract_proc_path(message: str) -> Optional[str]:
    """
    Extract the code path from the first ``proc name`` line of a crash message.

    Returns None if there is no such line or it does not have the
    ``proc name: <name>(<path>)`` shape.
    """
    for text in message.split("\n"):
        if PROC_NAME_MARKER in text:
            match = PROC_PATH_PATTERN.search(text)
            return match.group(1) if match else None
    return None


def classify(message: str, data: Any = None) -> Classification:
    """
    Derive a single-line title for a log message.

    Branches, first match wins:
      1. empty message (or empty first line): placeholder title
      2. first line is exactly the bare runtime header: path taken from the
         ``proc name`` line of the message
      3. first line contains the runtime header: name taken from ``data``
      4. the first line itself
    """
    first_line = message.split("\n", 1)[0].rstrip("\r") if message else ""
    if not first_line:
        return Classification(NO_MESSAGE_TITLE, TitleKind.NO_MESSAGE)

    if first_line == RUNTIME_HEADER:
        path = extract_proc_path(message)
        if path is None:
            logger.warning(
                f"Runtime header without a usable proc name line "
                f"(file={format_field(data_field(data, 'file'))}, "
                f"line={format_field(data_field(data, 'line'))})"
            )
            return Classification(runtime_title(data, UNKNOWN_PROC), TitleKind.RUNTIME_PROC, True)
        return Classification(runtime_title(data, path), TitleKind.RUNTIME_PROC)

    if RUNTIME_HEADER in first_line:
        return Classification(
            runtime_title(data, data_field(data, "name")),
            TitleKind.RUNTIME_NAMED
        )

    return Classification(first_line, TitleKind.PLAIN)


def derive_title(message: str, data: Any = None) -> str:
    """Title only, see :func:`classify`."""
    return classify(message, data).title
