"""Resilience exceptions."""
from typing import Optional

from resource_acctest.domain.core.exceptions import AccTestError


class RetryError(AccTestError):
    """Base exception for retry failures."""
    pass


class MaxRetriesExceededError(RetryError):
    """Raised when an operation keeps failing after the whole retry budget."""
    def __init__(self, operation: str, attempts: int, last_exception: Optional[BaseException] = None):
        super().__init__(f"{operation} failed after {attempts} attempts: {last_exception}")
        self.operation = operation
        self.attempts = attempts
        self.last_exception = last_exception


class WaitTimeoutError(RetryError):
    """Raised when a bounded wait expires before its condition holds."""
    def __init__(self, description: str, timeout: float):
        super().__init__(f"timeout while waiting for {description} (max wait {timeout:g}s)")
        self.description = description
        self.timeout = timeout
