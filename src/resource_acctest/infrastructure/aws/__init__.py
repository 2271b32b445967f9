"""AWS client and error helpers."""

from .aws_client import AWSClient
from .errors import (
    convert_client_error,
    error_code,
    error_message,
    is_not_found_error,
    is_retryable_error,
    is_unsupported_error,
)

__all__: list[str] = [
    "AWSClient",
    "convert_client_error",
    "error_code",
    "error_message",
    "is_not_found_error",
    "is_retryable_error",
    "is_unsupported_error",
]
