"""Line-mode persistence: one ``key: value, ...`` line per record."""

from __future__ import annotations

import json
from pathlib import Path
import threading
from typing import Any, Iterator

from openf1_tap.output.stream import DEFAULT_HIGH_WATER_MARK, OutputStream, PersistError


def iter_records(body: Any) -> Iterator[Any]:
    """Yield the records of a response body in response order."""
    if isinstance(body, list):
        yield from body
    elif isinstance(body, dict):
        yield body
    else:
        raise PersistError(f"Unexpected response body of type {type(body).__name__}")


def _render_value(value: Any) -> str:
    if isinstance(value, str):
        # Keep the record on one line; JSON escapes every break str.splitlines recognizes.
        if len(f"{value}x".splitlines()) > 1:
            return json.dumps(value)
        return value
    return json.dumps(value)


def format_record(record: Any) -> str:
    """Serialize a record as ``key: value, key: value`` plus a newline."""
    if not isinstance(record, dict):
        return f"{_render_value(record)}\n"
    fields = ", ".join(
        f"{_render_value(str(key))}: {_render_value(value)}" for key, value in record.items()
    )
    return f"{fields}\n"


def write_records(stream: OutputStream, body: Any) -> int:
    """Write every record of a body to the stream, honouring its flow control."""
    count = 0
    for record in iter_records(body):
        if not stream.write(format_record(record)):
            stream.wait_drained()
        count += 1
    return count


class LinePersister:
    """Appends records to a file, one batch at a time."""

    def __init__(self, path: str | Path, high_water_mark: int = DEFAULT_HIGH_WATER_MARK) -> None:
        self._path = Path(path)
        self._stream = OutputStream.open(self._path, mode="a", high_water_mark=high_water_mark)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def persist(self, body: Any) -> int:
        """Append all records of a response body; returns the number written."""
        with self._lock:
            count = write_records(self._stream, body)
            self._stream.wait_drained()
        return count

    def close(self) -> None:
        with self._lock:
            self._stream.close()


__all__ = ["LinePersister", "format_record", "iter_records", "write_records"]
