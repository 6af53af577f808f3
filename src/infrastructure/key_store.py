"""Keyed stores shared by the rate limiter and CSRF protection."""

import threading
import time
from typing import Any, Dict, Optional, Tuple


class KeyedStore:
    """Interface for keyed state with optional expiry.

    The in-memory implementation below lives in a single process; a
    distributed backend only needs to implement the same five methods.
    """

    def get(self, key: str) -> Optional[Any]:
        """Return the value for key, or None when missing or expired."""
        raise NotImplementedError

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store value under key; ttl in seconds, None keeps it until cleared."""
        raise NotImplementedError

    def incr(self, key: str, amount: int = 1, ttl: Optional[float] = None) -> Tuple[int, Optional[float]]:
        """Atomically add amount to a counter, never going below zero.

        A missing or expired counter starts from zero with the given ttl; an
        existing one keeps its expiry. Returns (new value, seconds to expiry).
        """
        raise NotImplementedError

    def delete(self, key: str) -> bool:
        """Remove a key. Returns True if it existed."""
        raise NotImplementedError

    def clear(self) -> int:
        """Remove all entries. Returns count removed."""
        raise NotImplementedError


class MemoryStore(KeyedStore):
    """Process-local dict store with per-key expiry.

    Expired keys are dropped when read, and all of them are swept on writes
    at most once every ``sweep_interval`` seconds.
    """

    def __init__(self, clock=time.monotonic, sweep_interval: float = 60.0):
        self._clock = clock
        self._lock = threading.Lock()
        self._data: Dict[str, Tuple[Any, Optional[float]]] = {}
        self.sweep_interval = sweep_interval
        self._next_sweep = clock() + sweep_interval

    def _live_entry(self, key: str, now: float) -> Optional[Tuple[Any, Optional[float]]]:
        entry = self._data.get(key)
        if entry is None:
            return None
        if entry[1] is not None and now >= entry[1]:
            del self._data[key]
            return None
        return entry

    def _sweep(self, now: float) -> None:
        # chamado com o lock adquirido
        if now < self._next_sweep:
            return
        expired = [k for k, (_, expires_at) in self._data.items() if expires_at is not None and now >= expires_at]
        for key in expired:
            del self._data[key]
        self._next_sweep = now + self.sweep_interval

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._live_entry(key, self._clock())
            return entry[0] if entry else None

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        with self._lock:
            now = self._clock()
            self._sweep(now)
            self._data[key] = (value, now + ttl if ttl is not None else None)

    def incr(self, key: str, amount: int = 1, ttl: Optional[float] = None) -> Tuple[int, Optional[float]]:
        with self._lock:
            now = self._clock()
            self._sweep(now)
            entry = self._live_entry(key, now)
            if entry is None:
                value, expires_at = 0, (now + ttl if ttl is not None else None)
            else:
                value, expires_at = entry
            value = max(0, value + amount)
            self._data[key] = (value, expires_at)
            return value, (expires_at - now if expires_at is not None else None)

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    def clear(self) -> int:
        with self._lock:
            count = len(self._data)
            self._data.clear()
            return count

    def size(self) -> int:
        with self._lock:
            return len(self._data)
