"""Pool of reusable byte buffers for large image allocations."""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Callable, Optional

from webpshot.errors import InvalidBufferSizeError

_log = logging.getLogger(__name__)

_MIB = 1024 * 1024
_LARGE_ALLOCATION = 10 * _MIB
_PREALLOCATE_LIMIT = 4


@dataclass
class PoolConfig:
    """Limits and behaviour of a memory pool."""

    max_buffers: int = 10
    max_memory: int = 500 * _MIB
    buffer_timeout: float = 60.0
    preallocate: bool = False
    default_buffer_size: int = 1920 * 1080 * 4


@dataclass
class PoolStats:
    """Snapshot of a pool's counters.

    ``current_memory_usage`` counts buffers handed out and not yet
    returned; ``pooled_memory`` counts buffers waiting in the pool.
    """

    available_buffers: int = 0
    total_buffers_created: int = 0
    total_memory_allocated: int = 0
    peak_memory_usage: int = 0
    memory_reuse_count: int = 0
    current_memory_usage: int = 0
    pooled_memory: int = 0
    buffer_hits: int = 0
    buffer_misses: int = 0


@dataclass
class _Entry:
    buffer: bytearray
    last_used: float
    use_count: int = 0

    @property
    def size(self) -> int:
        return len(self.buffer)

    def matches_size(self, requested: int) -> bool:
        return requested <= self.size <= requested * 2


class PooledBuffer:
    """A buffer lent out by a pool.

    Call :meth:`release` (or use the buffer as a context manager) to hand
    it back, or :meth:`detach` to keep the bytes for good.
    """

    def __init__(
        self,
        data: bytearray,
        size: int,
        pool: Optional["MemoryPool"] = None,
    ) -> None:
        self._data: Optional[bytearray] = data
        self.size = size
        self._pool = pool

    @property
    def data(self) -> bytearray:
        """The underlying bytes; empty once released or detached."""
        return self._data if self._data is not None else bytearray()

    @property
    def pooled(self) -> bool:
        """True while the buffer will return to a pool on release."""
        return self._pool is not None and self._data is not None

    def release(self) -> None:
        """Return the buffer to its pool. Calling it again does nothing."""
        pool, data = self._pool, self._data
        self._pool = None
        self._data = None
        if pool is not None and data is not None:
            pool._give_back(data)

    def detach(self) -> bytearray:
        """Take the bytes out of pool management and return them."""
        data = self.data
        pool = self._pool
        self._pool = None
        self._data = None
        if pool is not None:
            pool._forget(len(data))
        return data

    def __enter__(self) -> "PooledBuffer":
        return self

    def __exit__(self, *args: object) -> None:
        self.release()


class MemoryPool:
    """Thread-safe pool that reuses byte buffers of similar sizes."""

    def __init__(
        self,
        config: Optional[PoolConfig] = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config if config is not None else PoolConfig()
        self._clock = clock
        self._lock = threading.Lock()
        self._buffers: deque[_Entry] = deque()
        self._created = 0
        self._reused = 0
        self._peak = 0
        self._current = 0
        self._hits = 0
        self._misses = 0
        if self.config.preallocate:
            self._preallocate()

    def _preallocate(self) -> None:
        count = min(self.config.max_buffers, _PREALLOCATE_LIMIT)
        with self._lock:
            for _ in range(count):
                self._buffers.append(
                    _Entry(bytearray(self.config.default_buffer_size), self._clock())
                )
                self._created += 1

    def acquire(self, size: int) -> PooledBuffer:
        """Lend out a zero-initialised or reused buffer of at least ``size`` bytes."""
        if size <= 0:
            raise InvalidBufferSizeError(size)

        with self._lock:
            self._drop_expired()

            if size > _LARGE_ALLOCATION:
                _log.debug(
                    "Large allocation requested: %.2f MB, current pool usage: "
                    "%.2f MB / %.2f MB",
                    size / _MIB,
                    self._current / _MIB,
                    self.config.max_memory / _MIB,
                )

            entry = next((e for e in self._buffers if e.matches_size(size)), None)
            if entry is not None:
                self._buffers.remove(entry)
                entry.last_used = self._clock()
                entry.use_count += 1
                self._current += entry.size
                self._hits += 1
                self._reused += 1
                return PooledBuffer(entry.buffer, size, self)

            self._misses += 1

            if self._current + size > self.config.max_memory:
                _log.debug(
                    "Pool limit reached (%d MB), allocating %.2f MB directly "
                    "without pooling",
                    self.config.max_memory // _MIB,
                    size / _MIB,
                )
                return PooledBuffer(bytearray(size), size, None)

            self._created += 1
            self._current += size
            self._peak = max(self._peak, self._current)

        return PooledBuffer(bytearray(size), size, self)

    def _drop_expired(self) -> None:
        now = self._clock()
        timeout = self.config.buffer_timeout
        self._buffers = deque(
            e for e in self._buffers if now - e.last_used <= timeout
        )

    def _give_back(self, data: bytearray) -> None:
        with self._lock:
            self._current -= len(data)
            if len(self._buffers) >= self.config.max_buffers:
                return
            self._buffers.append(_Entry(data, self._clock()))

    def _forget(self, size: int) -> None:
        with self._lock:
            self._current -= size

    def clear(self) -> None:
        """Drop every buffer waiting in the pool."""
        with self._lock:
            self._buffers.clear()

    def stats(self) -> PoolStats:
        """Current counters of the pool."""
        with self._lock:
            pooled = sum(e.size for e in self._buffers)
            return PoolStats(
                available_buffers=len(self._buffers),
                total_buffers_created=self._created,
                total_memory_allocated=pooled + self._current,
                peak_memory_usage=self._peak,
                memory_reuse_count=self._reused,
                current_memory_usage=self._current,
                pooled_memory=pooled,
                buffer_hits=self._hits,
                buffer_misses=self._misses,
            )

    def hit_rate(self) -> float:
        """Percentage of acquisitions served from the pool."""
        with self._lock:
            total = self._hits + self._misses
            return 0.0 if total == 0 else self._hits / total * 100.0


@lru_cache(maxsize=None)
def global_pool() -> MemoryPool:
    """The process-wide shared pool."""
    return MemoryPool()