"""
Verification checks run after each applied test step.

Existence and destroy checks query the service APIs directly through the
boto3 clients instead of going through the resource controllers, so a bug
in a controller's read path cannot hide a missing or leaked object.
"""
import re
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional

from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError as PydanticValidationError

from resource_acctest.domain.core.exceptions import (
    AccTestError,
    MismatchError,
    NotFoundError,
    RemoteError,
    ResourceStillExistsError,
)
from resource_acctest.domain.resource import AWSARN, ResourceInstance, TagSet
from resource_acctest.helpers.logger import get_logger
from resource_acctest.infrastructure.aws.aws_client import AWSClient
from resource_acctest.infrastructure.aws.errors import convert_client_error, is_retryable_error
from resource_acctest.infrastructure.resilience import (
    ExponentialBackoffStrategy,
    MaxRetriesExceededError,
    RetryConfig,
    retry,
)
from resource_acctest.providers.aws.resources.placement_group import RESOURCE_TYPE as PLACEMENT_GROUP
from resource_acctest.providers.aws.resources.tape_pool import RESOURCE_TYPE as TAPE_POOL

from .engine import Engine
from .state import State

logger = get_logger(__name__)


class LiveLookup:
    """Reads objects straight from the service API and flattens them like state attributes."""

    def __init__(self, aws_client: AWSClient, retry_config: Optional[RetryConfig] = None,
                 sleep: Callable[[float], Any] = time.sleep):
        self.aws_client = aws_client
        self.retry_config = retry_config or RetryConfig()
        self._sleep = sleep
        self._strategy = ExponentialBackoffStrategy(
            self.retry_config,
            lambda e: is_retryable_error(e, self.retry_config.retryable_codes)
        )
        self._finders: Dict[str, Callable[[str], Optional[Dict[str, str]]]] = {
            TAPE_POOL: self.tape_pool,
            PLACEMENT_GROUP: self.placement_group,
        }

    def find(self, resource_type: str, identifier: str) -> Optional[Dict[str, str]]:
        """Flattened live attributes, or None when the object does not exist."""
        try:
            finder = self._finders[resource_type]
        except KeyError:
            raise AccTestError(f"No live lookup for resource type {resource_type}")
        try:
            return finder(identifier)
        except NotFoundError:
            return None

    def tape_pool(self, arn: str) -> Optional[Dict[str, str]]:
        client = self.aws_client.storagegateway_client
        output = self._call(client.list_tape_pools, 'ListTapePools', TAPE_POOL, arn, PoolARNs=[arn])
        pools = [pool for pool in output.get('PoolInfos') or [] if pool and pool.get('PoolARN') == arn]
        if not pools or pools[0].get('PoolStatus', 'ACTIVE') != 'ACTIVE':
            return None

        pool = pools[0]
        tags = self._paginate(client.list_tags_for_resource, 'ListTagsForResource', TAPE_POOL, arn,
                              'Tags', ResourceARN=arn)
        return self._flatten(TAPE_POOL, arn, {
            'arn': pool['PoolARN'],
            'pool_name': pool.get('PoolName'),
            'storage_class': pool.get('StorageClass'),
            'retention_lock_type': pool.get('RetentionLockType') or 'NONE',
            'retention_lock_time_in_days': pool.get('RetentionLockTimeInDays') or 0,
            'tags': TagSet.from_aws(tags).to_dict(),
        })

    def placement_group(self, name: str) -> Optional[Dict[str, str]]:
        client = self.aws_client.ec2_client
        output = self._call(client.describe_placement_groups, 'DescribePlacementGroups',
                            PLACEMENT_GROUP, name, GroupNames=[name])
        groups = [group for group in output.get('PlacementGroups') or [] if group.get('GroupName') == name]
        if not groups or groups[0].get('State') == 'deleted':
            return None

        group = groups[0]
        arn = group.get('GroupArn') or self.aws_client.regional_arn('ec2', f"placement-group/{name}")
        return self._flatten(PLACEMENT_GROUP, name, {
            'name': group['GroupName'],
            'strategy': group.get('Strategy'),
            'partition_count': group.get('PartitionCount', 0),
            'spread_level': group.get('SpreadLevel'),
            'placement_group_id': group.get('GroupId'),
            'arn': arn,
            'tags': TagSet.from_aws(group.get('Tags')).to_dict(),
        })

    @staticmethod
    def _flatten(resource_type: str, identifier: str, attributes: Dict[str, Any]) -> Dict[str, str]:
        return ResourceInstance(resource_type, identifier, attributes).flatten()

    def _paginate(self, func: Callable[..., Dict[str, Any]], operation: str, resource_type: str,
                  identifier: str, result_key: str, **kwargs) -> List[Dict[str, Any]]:
        results: List[Dict[str, Any]] = []
        while True:
            output = self._call(func, operation, resource_type, identifier, **kwargs)
            results.extend(output.get(result_key) or [])
            if not output.get('Marker'):
                return results
            kwargs['Marker'] = output['Marker']

    def _call(self, func: Callable[..., Dict[str, Any]], operation: str, resource_type: str,
              identifier: str, **kwargs) -> Dict[str, Any]:
        @retry(self._strategy, operation=operation, sleep=self._sleep)
        def wrapped_operation():
            return func(**kwargs)

        try:
            return wrapped_operation()
        except (ClientError, BotoCoreError) as e:
            raise convert_client_error(e, operation, resource_type, identifier) from e
        except MaxRetriesExceededError as e:
            raise RemoteError(operation, str(e), resource_type=resource_type, identifier=identifier,
                              code="RetryBudgetExhausted", cause=e.last_exception) from e


@dataclass
class CheckContext:
    """Everything a check may inspect: the scenario state and the live API."""
    state: State
    engine: Engine
    lookup: LiveLookup

    @property
    def aws_client(self) -> AWSClient:
        return self.engine.aws_client


Check = Callable[[CheckContext], None]


def _as_text(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


class ExistenceCheck:
    """
    Asserts the object at ``address`` exists remotely and matches ``expected``.

    ``expected`` holds flattened keys (``pool_name``, ``tags.%``, ``tags.key1``)
    compared by exact string equality against the live object. The live
    attributes of the last run are kept in ``found``.
    """

    def __init__(self, address: str, expected: Optional[Mapping[str, Any]] = None):
        self.address = address
        self.expected = dict(expected or {})
        self.found: Optional[Dict[str, str]] = None

    def __call__(self, ctx: CheckContext) -> None:
        instance = ctx.state.require(self.address)
        if not instance.identifier:
            raise AccTestError(f"{self.address}: no identifier is set")

        live = ctx.lookup.find(instance.resource_type, instance.identifier)
        if live is None:
            raise NotFoundError(instance.resource_type, instance.identifier, operation="exists")

        for key, value in self.expected.items():
            actual = live.get(key)
            if actual != _as_text(value):
                raise MismatchError(self.address, key, _as_text(value), actual)
        self.found = live


class DestroyCheck:
    """
    Asserts no object of ``resource_type`` tracked during the scenario is still alive.

    A "not found" answer is the success path; any other API failure fails the check.
    """

    def __init__(self, resource_type: str):
        self.resource_type = resource_type

    def __call__(self, ctx: CheckContext) -> None:
        for identifier in ctx.state.tracked_identifiers(self.resource_type):
            if ctx.lookup.find(self.resource_type, identifier) is not None:
                raise ResourceStillExistsError(self.resource_type, identifier)
            logger.debug("Verified destroyed", resource_type=self.resource_type, identifier=identifier)


class DisappearsCheck:
    """Deletes the object at ``address`` behind the engine's back."""

    def __init__(self, address: str):
        self.address = address

    def __call__(self, ctx: CheckContext) -> None:
        instance = ctx.state.require(self.address)
        logger.info("Deleting resource out of band", address=self.address, identifier=instance.identifier)
        ctx.engine.controller(instance.resource_type).delete(instance.identifier)


def check_attr(address: str, key: str, value: Any) -> Check:
    """State attribute ``key`` equals ``value``; a missing ``<map>.%`` counts as ``"0"``."""
    expected = _as_text(value)

    def check(ctx: CheckContext) -> None:
        flat = ctx.state.require(address).flatten()
        actual = flat.get(key)
        if actual is None and key.endswith('.%') and expected == '0':
            return
        if actual != expected:
            raise MismatchError(address, key, expected, actual)

    return check


def check_attr_regex(address: str, key: str, pattern: str) -> Check:
    regex = re.compile(pattern)

    def check(ctx: CheckContext) -> None:
        actual = ctx.state.require(address).flatten().get(key)
        if actual is None or not regex.search(actual):
            raise MismatchError(address, key, f"/{pattern}/", actual)

    return check


def check_regional_arn(address: str, key: str, service: str, resource_regex: str) -> Check:
    """``key`` is an ARN of ``service`` in the caller's partition, region and account."""

    resource_pattern = re.compile(resource_regex)

    def check(ctx: CheckContext) -> None:
        actual = ctx.state.require(address).flatten().get(key)
        try:
            arn = AWSARN(value=actual or '')
        except PydanticValidationError as e:
            raise MismatchError(address, key, "an ARN", actual) from e

        client = ctx.aws_client
        expected = {
            'partition': client.partition,
            'service': service,
            'region': client.region_name,
            'account_id': client.ensure_identity(),
        }
        for part, value in expected.items():
            if getattr(arn, part) != value:
                raise MismatchError(address, f"{key} ({part})", value, getattr(arn, part))
        if not resource_pattern.fullmatch(arn.resource):
            raise MismatchError(address, f"{key} (resource)", f"/{resource_regex}/", arn.resource)

    return check


def check_regional_arn_exact(address: str, key: str, service: str, resource: str) -> Check:
    return check_regional_arn(address, key, service, re.escape(resource))


def compose(*checks: Check) -> Check:
    """Run ``checks`` in order, stopping at the first failure."""
    check_list: List[Check] = list(checks)

    def check(ctx: CheckContext) -> None:
        for item in check_list:
            item(ctx)

    return check
