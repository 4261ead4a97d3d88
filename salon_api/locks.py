# salon_api/locks.py

import threading
import weakref
from contextlib import contextmanager
from datetime import date


class DateLocks:
    """Per-calendar-day locks serializing check-then-write sequences.

    Sync FastAPI endpoints run in a thread pool, so two bookings for the same
    day may race between the availability query and the insert. Holding the
    day's lock across both makes them atomic within this process.

    A day's lock lives only while some request holds or waits on it.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: "weakref.WeakValueDictionary[date, threading.Lock]" = weakref.WeakValueDictionary()

    def _lock_for(self, day: date) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(day)
            if lock is None:
                lock = self._locks[day] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, day: date):
        lock = self._lock_for(day)
        with lock:
            yield

    def __len__(self) -> int:
        return len(self._locks)


date_locks = DateLocks()
