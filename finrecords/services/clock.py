"""
Host Collaborators: Clock and ID Generator

The record store never reads the system clock or generates ids on its
own. Both are injected so tests can run with deterministic values.

- A clock is any zero-argument callable returning nanoseconds since the
  Unix epoch.
- An id generator is any zero-argument callable returning a new string id.
"""

import threading
import time
from typing import Callable
from uuid import uuid4


Clock = Callable[[], int]
IdGenerator = Callable[[], str]


class MonotonicClock:
    """
    Wall-clock nanoseconds that never go backwards.

    If the system clock steps back, the last value handed out is repeated
    instead, so `updated_at >= created_at` always holds.
    """

    def __init__(self, source: Clock = time.time_ns):
        self._source = source
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> int:
        with self._lock:
            now = self._source()
            if now < self._last:
                now = self._last
            self._last = now
            return now


def uuid4_id() -> str:
    """Random UUID4 in canonical string form."""
    return str(uuid4())
