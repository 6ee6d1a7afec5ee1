import copy
import logging
import math
import time
from datetime import timedelta
from typing import Callable, Dict, Generic, Mapping, Optional, TypeVar, Union

from memory_cache.config import MAX_EXPIRY
from memory_cache.errors import ClockError, ExpiryOverflowError
from memory_cache.models import CacheEntry

log = logging.getLogger(__name__)

T = TypeVar("T")

TTL = Union[int, float, timedelta]

def _ttl_seconds(ttl: TTL) -> int:
    if isinstance(ttl, timedelta):
        ttl = ttl.total_seconds()
    if isinstance(ttl, float) and not math.isfinite(ttl):
        raise ValueError(f"ttl must be finite (got {ttl})")
    if ttl < 0:
        raise ValueError(f"ttl must not be negative (got {ttl})")
    # whole seconds only: 0.9s becomes 0 and expires on the next check
    return int(ttl)

class Cache(Generic[T]):
    """
    In-memory key/value store with a per-key absolute expiry.
    Expiry is lazy: nothing is evicted until get() touches the key, so an
    expired key that is never read again stays here (and on disk) forever.
    """
    def __init__(self, clock: Callable[[], float] = time.time):
        self._store: Dict[str, CacheEntry[T]] = {}
        self._clock = clock

    @classmethod
    def from_entries(cls, entries: Mapping[str, CacheEntry[T]],
                     clock: Callable[[], float] = time.time) -> "Cache[T]":
        cache = cls(clock=clock)
        cache._store = dict(entries)
        return cache

    def _now(self) -> int:
        now = self._clock()
        if now < 0:
            raise ClockError("system clock is set before the Unix epoch")
        return int(now)

    def insert(self, key: str, value: T, ttl: TTL) -> None:
        """Store value under key until now + ttl, replacing any previous entry."""
        expiry = self._now() + _ttl_seconds(ttl)
        if expiry > MAX_EXPIRY:
            raise ExpiryOverflowError(f"ttl {ttl} for key {key!r} puts expiry past the 64-bit limit")
        self._store[key] = CacheEntry(value=value, expiry=expiry)

    def get(self, key: str) -> Optional[T]:
        """Return a copy of the value, or None if missing. Expired entries are dropped here."""
        entry = self._store.get(key)
        if entry is None:
            return None
        if self._now() < entry.expiry:
            return copy.copy(entry.value)
        log.debug("evicting expired key %r (expiry=%d)", key, entry.expiry)
        self.invalidate(key)
        return None

    def invalidate(self, key: str) -> None:
        self._store.pop(key, None)

    def entries(self) -> Dict[str, CacheEntry[T]]:
        # raw view for persistence; may include entries that are already expired
        return dict(self._store)

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def __len__(self) -> int:
        return len(self._store)
