"""Hooks run before a scenario and on step failures."""
import pytest

from resource_acctest.domain.core.exceptions import AccTestError, RemoteError
from resource_acctest.helpers.logger import get_logger
from resource_acctest.infrastructure.aws.aws_client import AWSClient
from resource_acctest.infrastructure.aws.errors import is_unsupported_error

logger = get_logger(__name__)


def pre_check(aws_client: AWSClient) -> None:
    """Fail fast when the caller identity cannot be resolved."""
    aws_client.ensure_identity()
    if not aws_client.region_name:
        raise AccTestError("An AWS region must be configured for acceptance tests")


def error_check(error: BaseException) -> None:
    """Skip the running test when the service is unavailable in this region or partition."""
    cause = error.cause if isinstance(error, RemoteError) and error.cause is not None else error
    if is_unsupported_error(cause):
        logger.warning("Skipping test, service unsupported here", error=str(error))
        pytest.skip(f"skipping test; service unsupported in this region: {error}")
