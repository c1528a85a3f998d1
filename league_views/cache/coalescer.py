"""
Single-flight store reads.

Concurrent cache misses on one key would otherwise each hit the backing
store; the coalescer lets the first miss run the query and hands its
result (or its error) to everyone who arrived meanwhile.
"""
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger("cache.coalescer")


@dataclass
class PendingRead:
    """Outcome slot shared by the leader and followers of one key."""
    done: threading.Event = field(default_factory=threading.Event)
    value: Any = None
    error: Optional[Exception] = None
    waiter_count: int = 0

    def outcome(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.value


class RequestCoalescer:
    """
    Collapses concurrent reads of the same key into one call of fetch_fn.

    Usage:
        coalescer = RequestCoalescer(timeout=10)
        teams = coalescer.get_or_fetch("teams_players_t1", load_teams)
    """

    def __init__(self, timeout: float = 30.0):
        self._in_flight: Dict[str, PendingRead] = {}
        self._lock = threading.Lock()
        self._timeout = timeout
        self.coalesced = 0

    def _claim(self, key: str) -> Tuple[PendingRead, bool]:
        with self._lock:
            pending = self._in_flight.get(key)
            if pending is None:
                pending = self._in_flight[key] = PendingRead()
                return pending, True
            pending.waiter_count += 1
            self.coalesced += 1
            return pending, False

    def _lead(self, key: str, pending: PendingRead, fetch_fn: Callable[[], Any]) -> Any:
        try:
            pending.value = fetch_fn()
        except Exception as e:
            pending.error = e
        finally:
            with self._lock:
                self._in_flight.pop(key, None)
            pending.done.set()
        return pending.outcome()

    def _follow(self, key: str, pending: PendingRead) -> Any:
        logger.debug(f"Joined in-flight read for {key} ({pending.waiter_count} waiting)")
        if not pending.done.wait(timeout=self._timeout):
            logger.error(f"Gave up waiting on in-flight read for {key}")
            raise TimeoutError(f"In-flight read for {key} exceeded {self._timeout}s")
        return pending.outcome()

    def get_or_fetch(self, key: str, fetch_fn: Callable[[], Any]) -> Any:
        """
        Run fetch_fn for key, or wait for the identical read already running.

        Raises:
            TimeoutError: A follower waited longer than the timeout
            Exception: Whatever fetch_fn raised, re-raised to every caller
        """
        pending, is_leader = self._claim(key)
        if is_leader:
            return self._lead(key, pending, fetch_fn)
        return self._follow(key, pending)

    @property
    def active_requests(self) -> int:
        with self._lock:
            return len(self._in_flight)
