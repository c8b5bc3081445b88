import time
from typing import Callable, Optional


class Deadline:
    """A fixed point in time measured on a monotonic clock."""

    def __init__(self, seconds: float, clock: Callable[[], float] = time.monotonic):
        self.seconds = seconds
        self._clock = clock
        self._expires_at = clock() + seconds

    def remaining(self) -> float:
        return max(0.0, self._expires_at - self._clock())

    def expired(self) -> bool:
        return self.remaining() <= 0

    def clip(self, seconds: float) -> float:
        """Shorten ``seconds`` so it does not run past this deadline."""
        return min(seconds, self.remaining())


def poll_until(
    predicate: Callable[[], bool],
    timeout: float,
    interval: float,
    backoff: float = 1.0,
    max_interval: Optional[float] = None,
    deadline: Optional[Deadline] = None,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """
    Evaluate ``predicate`` until it returns truthy or time runs out.

    The predicate is checked once immediately and then after every sleep.
    The effective limit is ``timeout`` or whatever is left of ``deadline``,
    whichever is shorter. After each attempt the interval is multiplied by
    ``backoff`` (1.0 keeps it fixed) and capped at ``max_interval``.

    Returns:
        True once the predicate succeeds, False if the limit is reached first.

    Raises:
        Whatever the predicate raises; errors are never retried.
    """
    limit = deadline.clip(timeout) if deadline is not None else timeout
    expires_at = clock() + limit

    while True:
        if predicate():
            return True

        left = expires_at - clock()
        if left <= 0:
            return False

        sleep(min(interval, left))
        interval = interval * backoff
        if max_interval is not None:
            interval = min(interval, max_interval)
