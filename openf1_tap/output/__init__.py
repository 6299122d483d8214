"""Output writers for polled records."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol

from openf1_tap.output.csv_writer import CsvPersister
from openf1_tap.output.line_writer import LinePersister, format_record, iter_records, write_records
from openf1_tap.output.stream import DEFAULT_HIGH_WATER_MARK, OutputStream, PersistError

LINE = "line"
CSV = "csv"
OUTPUT_FORMATS = (LINE, CSV)


class Persister(Protocol):
    def persist(self, body: Any) -> int: ...

    def close(self) -> None: ...


def open_persister(
    output_format: str, path: str | Path, high_water_mark: int = DEFAULT_HIGH_WATER_MARK
) -> Persister:
    """Open the writer for an output format."""
    if output_format == LINE:
        return LinePersister(path, high_water_mark=high_water_mark)
    if output_format == CSV:
        return CsvPersister(path)
    raise ValueError(f"Unknown output format '{output_format}' (valid: {', '.join(OUTPUT_FORMATS)})")


__all__ = [
    "CSV",
    "CsvPersister",
    "DEFAULT_HIGH_WATER_MARK",
    "LINE",
    "LinePersister",
    "OUTPUT_FORMATS",
    "OutputStream",
    "PersistError",
    "Persister",
    "format_record",
    "iter_records",
    "open_persister",
    "write_records",
]
