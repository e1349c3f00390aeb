"""Mutual exclusion for a single user action (e.g. confirming a delivery).

The guard moves ``idle -> in_flight -> settled``. While a request is in
flight, further attempts are turned away instead of queued, so a double
click can never issue a second request. Once settled (success or failure)
the guard accepts a new attempt again.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from enum import Enum
from typing import Iterator


class RequestState(Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SETTLED = "settled"


class RequestGuard:

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state = RequestState.IDLE

    @property
    def state(self) -> RequestState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._state == RequestState.IN_FLIGHT

    def try_begin(self) -> bool:
        with self._lock:
            if self._state == RequestState.IN_FLIGHT:
                return False
            self._state = RequestState.IN_FLIGHT
            return True

    def settle(self) -> None:
        with self._lock:
            self._state = RequestState.SETTLED

    @contextmanager
    def attempt(self) -> Iterator[bool]:
        """Yield True if this caller owns the request, False if it must back off."""
        if not self.try_begin():
            yield False
            return
        try:
            yield True
        finally:
            self.settle()
