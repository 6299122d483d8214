"""CSV persistence with a header derived from the first record."""

from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path
import threading
from typing import Any

from openf1_tap.output.line_writer import iter_records
from openf1_tap.output.stream import PersistError


@dataclass(frozen=True)
class CsvColumn:
    """Column identifier (record key) and header title."""

    id: str
    title: str


def columns_from_record(record: dict[str, Any]) -> list[CsvColumn]:
    """Derive CSV columns from one sample record.

    Fields missing from the sample record are not represented in the output.
    """
    return [CsvColumn(id=key.strip().lower(), title=key.upper()) for key in record]


class CsvPersister:
    """Writes records to a CSV file whose header comes from the first record.

    The file is truncated by the first batch and appended to afterwards, so
    no records are held between batches.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._columns: list[CsvColumn] | None = None
        self._started = False
        self._rows_written = 0
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def columns(self) -> list[CsvColumn] | None:
        return self._columns

    @property
    def rows_written(self) -> int:
        return self._rows_written

    def persist(self, body: Any) -> int:
        """Write a response body's records; returns the number written."""
        with self._lock:
            records = list(iter_records(body))
            for record in records:
                if not isinstance(record, dict):
                    raise PersistError("CSV output requires object records")
            if self._columns is None and records:
                self._columns = columns_from_record(records[0])
            self._write_rows(records)
        return len(records)

    def _write_rows(self, records: list[dict[str, Any]]) -> None:
        write_header = not self._started or (self._columns is not None and self._rows_written == 0)
        mode = "w" if write_header else "a"
        columns = self._columns or []
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, mode, encoding="utf-8", newline="") as handle:
                writer = csv.writer(handle)
                if write_header and columns:
                    writer.writerow([column.title for column in columns])
                for record in records:
                    writer.writerow([record.get(column.id, "") for column in columns])
        except OSError as exc:
            raise PersistError(f"Cannot write CSV file {self._path}: {exc}") from exc
        self._started = True
        self._rows_written += len(records)

    def close(self) -> None:
        """Nothing is held open between batches."""


__all__ = ["CsvColumn", "CsvPersister", "columns_from_record"]
