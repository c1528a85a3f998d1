"""
Background sweep of expired cache entries.

Keys that are written once and never read again would otherwise stay in
memory forever, since expiry on read is lazy.
"""
import logging
import threading
from typing import Optional

from .manager import CacheManager

logger = logging.getLogger("cache.sweeper")


class CacheSweeper:
    """
    Runs CacheManager.clear_expired() on a fixed interval in a daemon thread.

    Usage:
        sweeper = CacheSweeper(cache, interval_seconds=300)
        sweeper.start()
        ...
        sweeper.stop()
    """

    def __init__(self, cache: CacheManager, interval_seconds: float = 300.0):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._cache = cache
        self._interval = interval_seconds
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run,
            name="cache-sweeper",
            daemon=True,
        )
        self._thread.start()
        logger.info(f"Cache sweeper started (interval={self._interval}s)")

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None
        logger.info("Cache sweeper stopped")

    def sweep_once(self) -> int:
        return self._cache.clear_expired()

    def _run(self) -> None:
        # wait() returns True once stop() is called
        while not self._stop_event.wait(self._interval):
            try:
                self.sweep_once()
            except Exception as e:
                logger.warning(f"Cache sweep failed: {e}")
