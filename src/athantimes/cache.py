"""Thread-safe memo of prayer time sets keyed by (coordinate, date, parameters)."""

import threading
from collections import OrderedDict
from concurrent.futures import Future
from datetime import date
from typing import Callable, Optional

from athantimes.compute import compute_prayer_times
from athantimes.logging_config import get_logger
from athantimes.methods import DEFAULT_METHOD
from athantimes.models import CalculationParameters, Coordinate, PrayerTimeSet

logger = get_logger(__name__)

CacheKey = tuple[Coordinate, date, CalculationParameters]


class PrayerTimeCache:
    """Single-flight LRU cache in front of the calculator.

    Concurrent requests for the same key wait on one computation instead of
    repeating it. Errors are not cached; the next caller recomputes.

    Example:
        cache = PrayerTimeCache(maxsize=64)
        times = cache.get(Coordinate(48.5734, 7.7521), date(2026, 2, 23))
    """

    def __init__(
        self,
        maxsize: int = 128,
        compute: Callable[
            [Coordinate, date, CalculationParameters], PrayerTimeSet
        ] = compute_prayer_times,
    ):
        if maxsize < 1:
            raise ValueError("maxsize must be at least 1")
        self._maxsize = maxsize
        self._compute = compute
        self._lock = threading.Lock()
        self._entries: OrderedDict[CacheKey, PrayerTimeSet] = OrderedDict()
        self._pending: dict[CacheKey, Future] = {}
        self.hits = 0
        self.misses = 0

    def get(
        self,
        coordinate: Coordinate,
        day: date,
        params: Optional[CalculationParameters] = None,
    ) -> PrayerTimeSet:
        if params is None:
            params = DEFAULT_METHOD.parameters()
        key = (coordinate, day, params)

        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                self._entries.move_to_end(key)
                self.hits += 1
                return cached
            pending = self._pending.get(key)
            owner = pending is None
            if owner:
                pending = Future()
                self._pending[key] = pending
                self.misses += 1

        if not owner:
            return pending.result()

        try:
            result = self._compute(coordinate, day, params)
        except BaseException as exc:
            # Waiters on this key are released on interrupts as well
            with self._lock:
                del self._pending[key]
            pending.set_exception(exc)
            raise

        with self._lock:
            del self._pending[key]
            self._entries[key] = result
            if len(self._entries) > self._maxsize:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted %s on %s", evicted[0], evicted[1])
        pending.set_result(result)
        return result

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
