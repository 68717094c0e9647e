#!/usr/bin/env python3
"""
Batch scan of a runtime log.

Reads a log dump, keeps the raw lines that contain both "runtime error" and
a search term, classifies them with the same parser the viewer uses and
prints the first few records.
"""

import argparse
import sys
from pathlib import Path

from runtime_viewer.core import LogReader
from runtime_viewer.core.export import format_timestamp
from runtime_viewer.core.io_handler import split_lines


def scan(path: Path, contains: str, limit: int) -> list:
    """Classified records of the matching lines, at most ``limit``."""
    reader = LogReader()
    text = path.read_bytes().decode(reader.encoding, errors="replace")

    records = []
    for line in split_lines(text):
        if "runtime error" not in line or contains not in line:
            continue
        record = reader.parse_line(line)
        if record is None:
            continue
        records.append(record)
        if len(records) >= limit:
            break

    return records


def main():
    parser = argparse.ArgumentParser(description="Print classified runtime errors from a log dump")
    parser.add_argument(
        "logfile",
        nargs="?",
        type=Path,
        default=Path("runtime.log.json"),
        help="Log file to scan"
    )
    parser.add_argument(
        "--contains", "-c",
        default="preference",
        help="Only lines containing this text"
    )
    parser.add_argument(
        "--limit", "-n",
        type=int,
        default=21,
        help="Maximum number of records to print"
    )

    args = parser.parse_args()

    if not args.logfile.exists():
        print(f"File not found: {args.logfile}", file=sys.stderr)
        sys.exit(1)

    for record in scan(args.logfile, args.contains, args.limit):
        print(f"[{format_timestamp(record.timestamp)}] ({record.category}) {record.title}")
        print(f"    kind={record.title_kind.name} round={record.round_id} id={record.id}")


if __name__ == "__main__":
    main()
