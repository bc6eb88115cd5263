"""Request spacing for the crawl loops."""

import time
from abc import ABC, abstractmethod
from typing import Callable, Optional


class Throttle(ABC):
    """Abstract request throttle."""

    @abstractmethod
    def wait(self) -> None:
        """Block until the next request may start."""
        pass


class FixedIntervalThrottle(Throttle):
    """Space request starts at least ``interval`` seconds apart.

    The first call returns immediately.
    """

    def __init__(
        self,
        interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if interval < 0:
            raise ValueError(f"Interval must be >= 0, got {interval}")
        self.interval = interval
        self._clock = clock
        self._sleep = sleep
        self._last: Optional[float] = None

    def wait(self) -> None:
        if self._last is not None:
            remaining = self._last + self.interval - self._clock()
            if remaining > 0:
                self._sleep(remaining)
        self._last = self._clock()
