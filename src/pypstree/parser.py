"""Parsing of /proc ``status`` blobs into attribute records."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pypstree.errors import MalformedRecord, SourceUnreadable, SourceVanished
from pypstree.models import AttributeRecord

logger = logging.getLogger(__name__)

# status key -> AttributeRecord field
NUMERIC_KEYS = {
    "Pid": "pid",
    "Tgid": "tgid",
    "PPid": "ppid",
    "Threads": "thread_count",
}


def parse_status(
    lines: str | Iterable[str],
    name: str | None = None,
    location: str | None = None,
) -> AttributeRecord:
    """
    Parse a line-oriented ``key: value`` blob into an AttributeRecord.

    Args:
        lines: The blob text, or an iterable of its lines (e.g. an open file).
        name: Optional name replacing the parsed one. Used to label a thread
            with its owning process's name.
        location: Where the blob came from, for error messages.

    Raises:
        MalformedRecord: A numeric field is not a number, or a required field
            is still missing once the whole blob has been read.
    """
    if isinstance(lines, str):
        lines = lines.splitlines()

    fields: dict[str, str | int] = {}
    for line in lines:
        key, sep, value = line.partition(":")
        if not sep:
            continue
        value = value.lstrip().rstrip("\n")
        if key == "Name":
            fields["name"] = value
        elif key in NUMERIC_KEYS:
            try:
                fields[NUMERIC_KEYS[key]] = int(value)
            except ValueError:
                raise MalformedRecord(location, f"{key} is not numeric: {value!r}") from None
        if len(fields) == len(NUMERIC_KEYS) + 1:
            break

    if name is not None:
        fields["name"] = name
    missing = [f for f in ("name", "pid", "tgid", "ppid") if f not in fields]
    if missing:
        raise MalformedRecord(location, "missing " + ", ".join(missing))

    record = AttributeRecord(
        name=fields["name"],
        pid=fields["pid"],
        tgid=fields["tgid"],
        ppid=fields["ppid"],
        thread_count=fields.get("thread_count", -1),
    )
    if not record.is_complete:
        raise MalformedRecord(location, f"invalid attributes {record}")
    return record


def read_status(path: str, name: str | None = None) -> AttributeRecord:
    """
    Read and parse a status file.

    Raises:
        SourceVanished: The file no longer exists (the process exited).
        SourceUnreadable: The file exists but could not be read.
        MalformedRecord: The content could not be parsed.
    """
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            return parse_status(f, name=name, location=path)
    except FileNotFoundError as e:
        raise SourceVanished(path, e.strerror) from e
    except ProcessLookupError as e:
        # reading a status file of a reaped task
        raise SourceVanished(path, e.strerror) from e
    except OSError as e:
        logger.debug("Failed to read %s", path, exc_info=True)
        raise SourceUnreadable(path, e.strerror) from e
