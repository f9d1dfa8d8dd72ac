import time
from contextlib import contextmanager
from typing import Callable, Iterator

import pymongo

from ..errors import ScanTimeoutError


class Deadline:
    """
    One deadline for a whole scan, shared by every worker thread.

    scope() bounds a single I/O call: it fails fast once the deadline
    has passed, and otherwise hands the remaining time to the driver
    through pymongo.timeout() so in-flight operations are cut off too.
    """

    def __init__(self, timeout_seconds: float, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self.timeout_seconds = timeout_seconds
        self.expires_at = clock() + timeout_seconds

    def remaining(self) -> float:
        return max(0.0, self.expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0

    @contextmanager
    def scope(self, unit: str) -> Iterator[float]:
        remaining = self.remaining()
        if remaining <= 0:
            raise ScanTimeoutError(unit, f"scan deadline of {self.timeout_seconds}s exceeded")
        with pymongo.timeout(remaining):
            yield remaining
