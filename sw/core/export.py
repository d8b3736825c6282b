"""Lap/split log export — CSV, JSON and plain text.

Works straight from the structured ``LogEntry`` list; entries are written in
the order given (newest first, as the engine keeps them).
"""

import csv
import io
import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from sw.common.logger import log
from sw.util import export_timestamp

FILE_PREFIX = "stopwatch_laps"
CSV_HEADER = ["Number", "Type", "Time", "Segment Time"]


class EmptyLogError(ValueError):
    """Raised when there is nothing recorded to export."""


class ExportFormat(Enum):
    DELIMITED = "csv"
    STRUCTURED = "json"
    PLAIN = "txt"

    @property
    def extension(self):
        return self.value

    @property
    def mime_type(self):
        return _MIME_TYPES[self]

    @classmethod
    def parse(cls, name):
        """Accept either a member name ("PLAIN") or an extension ("txt")."""
        if isinstance(name, cls):
            return name
        key = str(name).strip().lower()
        for fmt in cls:
            if key in (fmt.value, fmt.name.lower()):
                return fmt
        raise ValueError(f"Unknown export format: {name!r}")


_MIME_TYPES = {
    ExportFormat.DELIMITED: "text/csv",
    ExportFormat.STRUCTURED: "application/json",
    ExportFormat.PLAIN: "text/plain",
}


@dataclass(frozen=True)
class ExportResult:
    content: str
    filename: str
    mime_type: str


def _rows(entries):
    for e in entries:
        yield {
            "number": e.number,
            "type": e.kind.label,
            "time": e.total_text,
            "segmentTime": e.segment_text,
        }


def _to_csv(rows):
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for r in rows:
        writer.writerow([r["number"], r["type"], r["time"], r["segmentTime"]])
    return buf.getvalue()


def _to_json(rows):
    return json.dumps(list(rows), indent=2)


def _to_text(rows):
    lines = []
    for r in rows:
        line = f"{r['number']} - {r['type']} - {r['time']}"
        if r["segmentTime"]:
            line += f" (Segment: {r['segmentTime']})"
        lines.append(line + "\n")
    return "".join(lines)


_WRITERS = {
    ExportFormat.DELIMITED: _to_csv,
    ExportFormat.STRUCTURED: _to_json,
    ExportFormat.PLAIN: _to_text,
}


def serialize(entries, fmt, now=None):
    """Render ``entries`` in ``fmt``.

    Returns an ``ExportResult`` with the file content, a timestamped file
    name and the MIME type.  Raises ``EmptyLogError`` if ``entries`` is empty.
    """
    entries = list(entries)
    if not entries:
        raise EmptyLogError("No lap times to export")
    fmt = ExportFormat.parse(fmt)

    content = _WRITERS[fmt](_rows(entries))
    filename = f"{FILE_PREFIX}_{export_timestamp(now)}.{fmt.extension}"
    log.debug(f"Serialized {len(entries)} entries as {fmt.name} into '{filename}'")
    return ExportResult(content, filename, fmt.mime_type)


# Writes an export to disk, either into `directory` under its suggested name or straight to `path` when the
# user picked one.
def save_export(result, directory=None, path=None):
    if path is None:
        if directory is None:
            raise ValueError("Either a directory or a path is required")
        path = Path(directory) / result.filename
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    # newline="" so the "\n" endings survive on Windows too
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(result.content)
    log.info(f"Exported lap times to '{path}'")
    return path
