"""Wait policies deciding how long the poll loop idles between polls."""

import random
from abc import ABC, abstractmethod


class WaitPolicy(ABC):
    """Decides the idle time after each poll."""

    @abstractmethod
    def next_delay(self, succeeded: bool) -> float:
        """
        Return seconds to wait before the next poll.

        Args:
            succeeded: Whether the poll that just finished succeeded
        """
        pass


class FixedIntervalPolicy(WaitPolicy):
    """
    Constant interval regardless of outcome.

    A permanently wrong core name is retried forever at the same pace as
    a transient network error.
    """

    def __init__(self, interval: float):
        self.interval = interval

    def next_delay(self, succeeded: bool) -> float:
        return self.interval


class CappedBackoffPolicy(WaitPolicy):
    """
    Exponential backoff with jitter on consecutive failures.

    The delay starts at base_delay, doubles per consecutive failure up to
    max_delay and drops back to base_delay after a success.
    """

    def __init__(self, base_delay: float, max_delay: float, jitter: float = 0.1):
        """
        Initialize backoff policy.

        Args:
            base_delay: Delay after a success and after the first failure
            max_delay: Upper bound for the delay (before jitter)
            jitter: Fraction of the delay added at random (0-10% by default)
        """
        self.base_delay = base_delay
        self.max_delay = max(max_delay, base_delay)
        self.jitter = jitter
        self.failures = 0

    def next_delay(self, succeeded: bool) -> float:
        if succeeded:
            self.failures = 0
            return self.base_delay

        self.failures += 1
        # exponent capped so long outages cannot overflow the float conversion
        exponent = min(self.failures - 1, 32)
        delay = min(self.base_delay * (2 ** exponent), self.max_delay)
        return delay + random.uniform(0, delay * self.jitter)
