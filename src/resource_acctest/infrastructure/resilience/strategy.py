"""Retry strategies."""
from abc import ABC, abstractmethod
from typing import Callable, Optional

from .config import RetryConfig


class RetryStrategy(ABC):
    """Decides whether a failed attempt is retried and how long to wait."""

    def __init__(self, config: RetryConfig):
        self.config = config

    @abstractmethod
    def is_retryable(self, error: BaseException) -> bool:
        """Return True if ``error`` is transient."""

    @abstractmethod
    def get_delay(self, attempt: int) -> float:
        """Seconds to sleep after failed ``attempt`` (0-based)."""

    def should_retry(self, attempt: int, error: BaseException) -> bool:
        return attempt + 1 < self.config.max_attempts and self.is_retryable(error)


class ExponentialBackoffStrategy(RetryStrategy):
    """``base_delay * 2**attempt``, capped at ``max_delay``."""

    def __init__(self, config: RetryConfig,
                 is_retryable: Optional[Callable[[BaseException], bool]] = None):
        super().__init__(config)
        self._is_retryable = is_retryable

    def is_retryable(self, error: BaseException) -> bool:
        if self._is_retryable is None:
            return False
        return self._is_retryable(error)

    def get_delay(self, attempt: int) -> float:
        return min(self.config.base_delay * (2 ** attempt), self.config.max_delay)
