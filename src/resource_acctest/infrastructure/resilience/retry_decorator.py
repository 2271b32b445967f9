"""Retry decorator with pluggable backoff strategy."""
import functools
import time
from typing import Any, Callable, Optional, TypeVar

from resource_acctest.helpers.logger import get_logger

from .config import RetryConfig
from .exceptions import MaxRetriesExceededError
from .strategy import ExponentialBackoffStrategy, RetryStrategy

T = TypeVar('T')
logger = get_logger(__name__)


def retry(strategy: Optional[RetryStrategy] = None, operation: Optional[str] = None,
          sleep: Callable[[float], Any] = time.sleep) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Retry the decorated callable while ``strategy`` considers its errors transient.

    Non-retryable errors propagate unchanged on the first failure. A transient
    error that outlives the retry budget is raised as ``MaxRetriesExceededError``
    with the last error attached.
    """
    strategy = strategy or ExponentialBackoffStrategy(RetryConfig())

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        name = operation or getattr(func, '__name__', 'operation')

        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            attempt = 0
            while True:
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    if not strategy.is_retryable(e):
                        raise
                    if not strategy.should_retry(attempt, e):
                        logger.error("Retry budget exhausted", operation=name,
                                     attempts=attempt + 1, error=str(e))
                        raise MaxRetriesExceededError(name, attempt + 1, e) from e
                    delay = strategy.get_delay(attempt)
                    logger.warning("Transient failure, retrying", operation=name,
                                   attempt=attempt + 1, delay=delay, error=str(e))
                    sleep(delay)
                    attempt += 1

        return wrapper

    return decorator
