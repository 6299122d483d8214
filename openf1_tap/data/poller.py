"""Poll-and-persist driver for a single OpenF1 endpoint."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import threading
import time
from typing import Any, Mapping

from loguru import logger

from openf1_tap.data.openf1_client import OpenF1Client, OpenF1ClientError
from openf1_tap.output import LINE, OUTPUT_FORMATS, Persister, PersistError


@dataclass(frozen=True)
class PollRequest:
    """What to poll, where to write it, and how often."""

    endpoint: str
    params: Mapping[str, Any] = field(default_factory=dict)
    output_path: str | Path = "openf1.log"
    interval_ms: int | None = None
    output_format: str = LINE

    def __post_init__(self) -> None:
        if self.interval_ms is not None:
            if isinstance(self.interval_ms, bool) or not isinstance(self.interval_ms, int):
                raise ValueError("interval_ms must be an integer number of milliseconds")
            if self.interval_ms <= 0:
                raise ValueError("interval_ms must be positive")
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(f"Unknown output format '{self.output_format}'")

    @property
    def is_interval(self) -> bool:
        return self.interval_ms is not None


@dataclass(frozen=True)
class TickResult:
    """Snapshot of the latest poll attempt."""

    records_written: int
    fetched_at: float
    error: str | None


class Poller:
    """Fetches an endpoint once or on a repeating timer and persists every record."""

    def __init__(self, client: OpenF1Client, persister: Persister, request: PollRequest) -> None:
        self._client = client
        self._persister = persister
        self._request = request
        self._latest: TickResult | None = None
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._ticks: list[threading.Thread] = []

    @property
    def request(self) -> PollRequest:
        return self._request

    def get_latest(self) -> TickResult | None:
        """Return the most recent tick result, if any."""
        with self._lock:
            return self._latest

    def poll_once(self) -> int:
        """Fetch once and persist the response; errors propagate to the caller."""
        body = self._client.fetch(self._request.endpoint, self._request.params)
        count = self._persister.persist(body)
        logger.info(f"Wrote {count} {self._request.endpoint} record(s) to {self._request.output_path}")
        return count

    def run(self) -> None:
        """Fire a tick now and then every interval until stopped. Blocks."""
        if self._request.interval_ms is None:
            raise ValueError("run() requires a request with an interval")
        interval_seconds = self._request.interval_ms / 1000.0
        logger.info(f"Polling {self._request.endpoint} every {self._request.interval_ms} ms")
        while not self._stop_event.is_set():
            self._launch_tick()
            if self._stop_event.wait(timeout=interval_seconds):
                break

    def start(self) -> None:
        """Start the timer loop on a background thread."""
        if self._thread and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self.run, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Signal the timer loop to stop. In-flight ticks are left to finish."""
        self._stop_event.set()

    def join(self, timeout: float | None = None) -> None:
        """Wait for the timer thread and any in-flight ticks."""
        deadline = None if timeout is None else time.monotonic() + timeout

        def remaining() -> float | None:
            return None if deadline is None else max(0.0, deadline - time.monotonic())

        if self._thread:
            self._thread.join(remaining())
        with self._lock:
            ticks = list(self._ticks)
        for thread in ticks:
            thread.join(remaining())

    def in_flight(self) -> int:
        with self._lock:
            return sum(1 for thread in self._ticks if thread.is_alive())

    def _launch_tick(self) -> None:
        thread = threading.Thread(target=self._tick, daemon=True)
        thread.start()
        with self._lock:
            self._ticks = [t for t in self._ticks if t.is_alive()]
            self._ticks.append(thread)

    def _tick(self) -> TickResult:
        try:
            count = self.poll_once()
            result = TickResult(records_written=count, fetched_at=time.time(), error=None)
        except (OpenF1ClientError, PersistError) as exc:
            logger.error(f"Poll of {self._request.endpoint} failed: {exc}")
            result = TickResult(records_written=0, fetched_at=time.time(), error=str(exc))
        with self._lock:
            self._latest = result
        return result


__all__ = ["PollRequest", "Poller", "TickResult"]
