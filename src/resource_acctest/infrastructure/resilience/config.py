"""Retry configuration."""
from typing import List

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_RETRYABLE_CODES = [
    'RequestLimitExceeded',
    'Throttling',
    'ThrottlingException',
    'TooManyRequestsException',
    'RequestTimeout',
    'RequestTimeoutException',
    'InternalError',
    'InternalFailure',
    'InternalServerError',
    'ServiceUnavailable',
]


class RetryConfig(BaseModel):
    """Retry budget for transient API failures."""

    max_attempts: int = Field(5, description="Total attempts, including the first call")
    base_delay: float = Field(1.0, description="Delay before the first retry, in seconds")
    max_delay: float = Field(30.0, description="Upper bound for a single backoff delay, in seconds")
    retryable_codes: List[str] = Field(default_factory=lambda: list(DEFAULT_RETRYABLE_CODES))

    @field_validator('max_attempts')
    @classmethod
    def validate_max_attempts(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_attempts must be at least 1")
        return v

    @field_validator('base_delay', 'max_delay')
    @classmethod
    def validate_delay(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Delays must be non-negative")
        return v

    @model_validator(mode='after')
    def validate_delay_relationship(self) -> 'RetryConfig':
        if self.base_delay > self.max_delay:
            raise ValueError("base_delay cannot be greater than max_delay")
        return self
