# surfwindow/io/cache.py
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

_LOGGER = logging.getLogger(__name__)

V = TypeVar("V")


@dataclass(slots=True)
class _Entry:
    value: object
    created: float


class TimedCache(Generic[V]):
    """
    Thread-safe key/value cache whose entries expire `ttl` seconds after being set.

    Expired entries are never returned. They are dropped when read, and a
    background sweep (see `start`) removes the ones nobody reads again.
    The sweep only holds the lock for one key at a time.
    """

    def __init__(
        self,
        ttl: float,
        *,
        sweep_interval: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        self._ttl = float(ttl)
        self._sweep_interval = float(sweep_interval) if sweep_interval is not None else self._ttl
        if self._sweep_interval <= 0:
            raise ValueError("sweep_interval must be positive")
        self._clock = clock

        self._entries: dict[str, _Entry] = {}
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def ttl(self) -> float:
        return self._ttl

    # ------------------------------------------------------------------
    # Key/value API
    # ------------------------------------------------------------------
    def set(self, key: str, value: V) -> None:
        with self._lock:
            self._entries[key] = _Entry(value=value, created=self._clock())

    def get(self, key: str) -> V | None:
        """Return the cached value, or None if it is missing or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._expired(entry, self._clock()):
                del self._entries[key]
                return None
            return entry.value  # type: ignore[return-value]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def _expired(self, entry: _Entry, now: float) -> bool:
        return now - entry.created > self._ttl

    # ------------------------------------------------------------------
    # Sweeping
    # ------------------------------------------------------------------
    def sweep(self) -> int:
        """Evict expired entries; return how many were removed."""
        with self._lock:
            keys = list(self._entries)

        evicted = 0
        for key in keys:
            with self._lock:
                entry = self._entries.get(key)
                # Re-check: the key may have been refreshed since the snapshot.
                if entry is not None and self._expired(entry, self._clock()):
                    del self._entries[key]
                    evicted += 1

        if evicted:
            _LOGGER.debug("TimedCache sweep evicted %d of %d entries", evicted, len(keys))
        return evicted

    def start(self) -> None:
        """Launch the background sweep thread (idempotent)."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="timed-cache-sweep", daemon=True)
        self._thread.start()
        _LOGGER.debug("TimedCache sweep started (every %.1fs, ttl %.1fs)", self._sweep_interval, self._ttl)

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _run(self) -> None:
        while not self._stop.wait(self._sweep_interval):
            self.sweep()

    def __enter__(self) -> "TimedCache[V]":
        self.start()
        return self

    def __exit__(self, *exc: object) -> None:
        self.stop()
