"""Infrastructure resilience package - retry and bounded wait mechanisms."""

from .config import RetryConfig
from .exceptions import MaxRetriesExceededError, RetryError, WaitTimeoutError
from .retry_decorator import retry
from .strategy import ExponentialBackoffStrategy, RetryStrategy
from .waiter import wait_until

__all__: list[str] = [
    # Main retry decorator
    "retry",
    "wait_until",
    # Configuration
    "RetryConfig",
    # Exceptions
    "RetryError",
    "MaxRetriesExceededError",
    "WaitTimeoutError",
    # Strategies
    "RetryStrategy",
    "ExponentialBackoffStrategy",
]
