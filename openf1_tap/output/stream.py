"""Append-only text stream with a flow-control signal."""

from __future__ import annotations

from pathlib import Path
import threading
from typing import TextIO

DEFAULT_HIGH_WATER_MARK = 16 * 1024


class PersistError(Exception):
    """Raised when records cannot be written to the output file."""


class OutputStream:
    """Wraps an open text handle and reports when it stops accepting writes.

    ``write`` returns False once the text written since the last drain reaches
    the high-water mark. Callers must then call ``wait_drained`` before the
    next write.
    """

    def __init__(self, handle: TextIO, high_water_mark: int = DEFAULT_HIGH_WATER_MARK) -> None:
        if high_water_mark <= 0:
            raise ValueError("high_water_mark must be positive")
        self._handle = handle
        self._high_water_mark = high_water_mark
        self._pending = 0
        self._ready = threading.Event()
        self._ready.set()

    @classmethod
    def open(
        cls, path: str | Path, mode: str = "a", high_water_mark: int = DEFAULT_HIGH_WATER_MARK
    ) -> "OutputStream":
        output_path = Path(path)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            handle = open(output_path, mode, encoding="utf-8", newline="")
        except OSError as exc:
            raise PersistError(f"Cannot open output file {output_path}: {exc}") from exc
        return cls(handle, high_water_mark=high_water_mark)

    @property
    def ready(self) -> bool:
        return self._ready.is_set()

    def write(self, data: str) -> bool:
        """Write text; returns False when the stream wants a drain before more writes."""
        try:
            self._handle.write(data)
        except (OSError, ValueError) as exc:
            raise PersistError(f"Write failed: {exc}") from exc
        self._pending += len(data)
        if self._pending >= self._high_water_mark:
            self._ready.clear()
            return False
        return True

    def wait_drained(self) -> None:
        """Flush buffered text to the OS and mark the stream ready again."""
        try:
            self._handle.flush()
        except (OSError, ValueError) as exc:
            raise PersistError(f"Flush failed: {exc}") from exc
        self._pending = 0
        self._ready.set()

    def close(self) -> None:
        if self._handle.closed:
            return
        try:
            self._handle.flush()
        except (OSError, ValueError) as exc:
            raise PersistError(f"Flush failed: {exc}") from exc
        finally:
            self._handle.close()


__all__ = ["DEFAULT_HIGH_WATER_MARK", "OutputStream", "PersistError"]
