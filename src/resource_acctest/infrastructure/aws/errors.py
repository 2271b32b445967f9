"""Classification and conversion of botocore errors."""
import re
from typing import Iterable, Optional, Union

from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)

from resource_acctest.domain.core.exceptions import NotFoundError, RemoteError
from resource_acctest.infrastructure.resilience.config import DEFAULT_RETRYABLE_CODES

NOT_FOUND_CODES = {
    'InvalidPlacementGroup.Unknown',
    'ResourceNotFound',
    'ResourceNotFoundException',
    'NotFoundException',
}

# Storage Gateway reports missing pools through a generic request error.
_GATEWAY_NOT_FOUND = re.compile(r"not (be )?found|does not exist", re.IGNORECASE)

_UNSUPPORTED_PATTERNS = re.compile(
    r"not supported|not available in this region|is not enabled|UnsupportedOperation|"
    r"InvalidAction|UnrecognizedClientException|Unknown Endpoint",
    re.IGNORECASE,
)

_TIMEOUT_ERRORS = (ConnectTimeoutError, ReadTimeoutError, EndpointConnectionError)


def error_code(error: BaseException) -> str:
    if isinstance(error, ClientError):
        return error.response.get('Error', {}).get('Code', 'Unknown')
    return type(error).__name__


def error_message(error: BaseException) -> str:
    if isinstance(error, ClientError):
        return error.response.get('Error', {}).get('Message', str(error))
    return str(error)


def is_not_found_error(error: BaseException) -> bool:
    """True for provider responses meaning "no such object"."""
    if isinstance(error, NotFoundError):
        return True
    if not isinstance(error, ClientError):
        return False
    code = error_code(error)
    if code in NOT_FOUND_CODES or code.endswith('.NotFound') or code.endswith('.Unknown'):
        return True
    if code == 'InvalidGatewayRequestException':
        return bool(_GATEWAY_NOT_FOUND.search(error_message(error)))
    return False


def is_retryable_error(error: BaseException, codes: Optional[Iterable[str]] = None) -> bool:
    """True for throttling, transient service errors and network timeouts."""
    if isinstance(error, _TIMEOUT_ERRORS):
        return True
    if isinstance(error, ClientError):
        return error_code(error) in set(codes if codes is not None else DEFAULT_RETRYABLE_CODES)
    return False


def is_unsupported_error(error: BaseException) -> bool:
    """True when the service or operation is unavailable in the current region/partition."""
    return bool(_UNSUPPORTED_PATTERNS.search(f"{error_code(error)} {error_message(error)}"))


def convert_client_error(error: Union[ClientError, BotoCoreError], operation: str,
                         resource_type: Optional[str] = None, identifier: Optional[str] = None) -> RemoteError:
    """
    Convert a botocore error into the toolkit's error taxonomy.

    Client-side failures (parameter validation, missing credentials) carry
    their exception class name as ``code``.
    """
    code = error_code(error)
    if is_not_found_error(error):
        return NotFoundError(resource_type or "resource", identifier or "", operation=operation,
                             code=code, cause=error)
    return RemoteError(
        operation,
        f"{code}: {error_message(error)}",
        resource_type=resource_type,
        identifier=identifier,
        code=code,
        cause=error,
    )
