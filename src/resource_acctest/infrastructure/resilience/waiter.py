"""Bounded polling for eventually consistent remote state."""
import time
from typing import Any, Callable, Optional, TypeVar

from resource_acctest.helpers.logger import get_logger

from .exceptions import WaitTimeoutError

T = TypeVar('T')
logger = get_logger(__name__)


def wait_until(predicate: Callable[[], Optional[T]], timeout: float, description: str,
               base_delay: float = 1.0, max_delay: float = 15.0,
               sleep: Callable[[float], Any] = time.sleep,
               clock: Callable[[], float] = time.monotonic) -> T:
    """
    Poll ``predicate`` until it returns a truthy value and return that value.

    Delays between polls grow exponentially from ``base_delay`` up to
    ``max_delay``; the total wait never exceeds ``timeout`` seconds, after
    which ``WaitTimeoutError`` is raised. Time spent sleeping counts against
    the timeout even when ``clock`` does not advance. Exceptions from ``predicate``
    propagate immediately.
    """
    deadline = clock() + timeout
    waited = 0.0
    attempt = 0
    while True:
        result = predicate()
        if result:
            return result

        remaining = min(deadline - clock(), timeout - waited)
        if remaining <= 0:
            logger.error("Wait timed out", condition=description, timeout=timeout, polls=attempt + 1)
            raise WaitTimeoutError(description, timeout)

        delay = min(base_delay * (2 ** attempt), max_delay, remaining)
        logger.debug("Condition not met yet", condition=description, delay=delay)
        sleep(delay)
        waited += delay
        attempt += 1
