"""Base resource controller with common functionality."""
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Mapping, Optional, TypeVar

from botocore.exceptions import BotoCoreError, ClientError

from resource_acctest.config.schemas import AcceptanceConfig
from resource_acctest.domain.core.exceptions import (
    AccTestError,
    IncompleteCreateError,
    NotFoundError,
    RemoteError,
    ReplacementRequiredError,
    ResourceImportError,
)
from resource_acctest.domain.resource import (
    ResourceDescriptor,
    ResourceDiff,
    ResourceInstance,
    ResourceState,
    TagSet,
)
from resource_acctest.helpers.logger import get_logger
from resource_acctest.infrastructure.aws.aws_client import AWSClient
from resource_acctest.infrastructure.aws.errors import convert_client_error, is_retryable_error
from resource_acctest.infrastructure.resilience import (
    ExponentialBackoffStrategy,
    MaxRetriesExceededError,
    RetryConfig,
    retry,
    wait_until,
)

T = TypeVar('T')


class ResourceController(ABC):
    """
    Maps a declared configuration onto remote API calls for one resource type.

    Subclasses declare a ``descriptor`` and implement the ``_remote_*`` hooks;
    validation, retries, not-found handling, lifecycle state and tag updates
    live here. Every remote call blocks until the API answers.
    """

    descriptor: ResourceDescriptor

    def __init__(self, aws_client: AWSClient, retry_config: Optional[RetryConfig] = None,
                 acceptance: Optional[AcceptanceConfig] = None,
                 sleep: Callable[[float], Any] = time.sleep):
        """
        Initialize controller with explicit dependencies.

        Args:
            aws_client: Configured AWS client instance
            retry_config: Budget for transient API failures
            acceptance: Create/delete wait settings
            sleep: Sleep function used between retries and polls
        """
        self.aws_client = aws_client
        self.retry_config = retry_config or RetryConfig()
        self.acceptance = acceptance or AcceptanceConfig()
        self._sleep = sleep
        self._strategy = ExponentialBackoffStrategy(
            self.retry_config,
            lambda e: is_retryable_error(e, self.retry_config.retryable_codes)
        )
        self._logger = get_logger(type(self).__module__).bind(resource_type=self.resource_type)

    @property
    def resource_type(self) -> str:
        return self.descriptor.resource_type

    # -- remote hooks -------------------------------------------------------

    @abstractmethod
    def _remote_create(self, config: Dict[str, Any]) -> str:
        """Issue the create call and return the new identifier."""

    @abstractmethod
    def _remote_describe(self, identifier: str) -> Optional[Dict[str, Any]]:
        """Return the raw remote object, or None when it does not exist."""

    @abstractmethod
    def _remote_delete(self, identifier: str) -> None:
        """Issue the delete call."""

    @abstractmethod
    def _remote_list(self) -> List[Dict[str, Any]]:
        """Return every live object of this type."""

    @abstractmethod
    def _remote_list_tags(self, identifier: str, remote: Dict[str, Any]) -> TagSet:
        """Return the live tag set of an object."""

    @abstractmethod
    def _remote_update_tags(self, identifier: str, remote: Dict[str, Any],
                            old: TagSet, new: TagSet) -> None:
        """Apply the tag diff between ``old`` and ``new``."""

    @abstractmethod
    def _to_attributes(self, identifier: str, remote: Dict[str, Any], tags: TagSet) -> Dict[str, Any]:
        """Map a raw remote object onto schema attributes."""

    @abstractmethod
    def identifier_of(self, remote: Dict[str, Any]) -> str:
        """Extract the identifier from a raw remote object."""

    def _is_gone(self, remote: Optional[Dict[str, Any]]) -> bool:
        """True when ``remote`` no longer counts as a live object."""
        return remote is None

    def _is_ready(self, remote: Dict[str, Any]) -> bool:
        """True when a newly created object has finished provisioning."""
        return True

    # -- shared machinery ---------------------------------------------------

    def _call(self, func: Callable[..., T], operation: str, identifier: Optional[str] = None,
              **kwargs) -> T:
        """
        Execute one API call under the retry policy.

        Raises:
            NotFoundError: If the provider reports the object as missing
            RemoteError: For every other API failure, including an exhausted retry budget
        """
        self._logger.debug("Calling AWS API", operation=operation, identifier=identifier)

        @retry(self._strategy, operation=operation, sleep=self._sleep)
        def wrapped_operation():
            return func(**kwargs)

        try:
            return wrapped_operation()
        except (ClientError, BotoCoreError) as e:
            error = convert_client_error(e, operation, self.resource_type, identifier)
            if not isinstance(error, NotFoundError):
                self._logger.error("AWS API call failed", operation=operation,
                                   identifier=identifier, error=str(error))
            raise error from e
        except MaxRetriesExceededError as e:
            self._logger.error("AWS API call kept failing", operation=operation,
                               identifier=identifier, attempts=e.attempts)
            raise RemoteError(operation, str(e), resource_type=self.resource_type,
                              identifier=identifier, code="RetryBudgetExhausted",
                              cause=e.last_exception) from e

    def _paginate(self, func: Callable[..., Dict[str, Any]], operation: str, result_key: str,
                  token_key: str = 'Marker', **kwargs) -> List[Dict[str, Any]]:
        """Follow ``token_key`` through every page and combine ``result_key``."""
        results: List[Dict[str, Any]] = []
        while True:
            response = self._call(func, operation, **kwargs)
            results.extend(response.get(result_key, []))
            token = response.get(token_key)
            if not token:
                return results
            kwargs[token_key] = token

    def _wait(self, predicate: Callable[[], Optional[T]], timeout: float, description: str) -> T:
        return wait_until(
            predicate,
            timeout=timeout,
            description=description,
            base_delay=self.acceptance.poll_base_delay,
            max_delay=self.acceptance.poll_max_delay,
            sleep=self._sleep,
        )

    def _describe(self, identifier: str) -> Optional[Dict[str, Any]]:
        try:
            remote = self._remote_describe(identifier)
        except NotFoundError:
            return None
        return None if self._is_gone(remote) else remote

    def _build_instance(self, identifier: str, remote: Dict[str, Any]) -> ResourceInstance:
        tags = self._remote_list_tags(identifier, remote)
        attributes = self._to_attributes(identifier, remote, tags)
        return ResourceInstance(self.resource_type, identifier, attributes, ResourceState.PRESENT)

    # -- lifecycle operations -----------------------------------------------

    def create(self, config: Mapping[str, Any]) -> ResourceInstance:
        """
        Validate ``config``, create the remote object and read it back.

        Raises:
            ValidationError: If the configuration is invalid (no remote call is made)
            RemoteError: If the API call fails
        """
        normalized = self.descriptor.validate(config)
        instance = ResourceInstance(self.resource_type)
        instance.transition(ResourceState.CREATING)

        self._logger.info("Creating resource", config=normalized)
        try:
            identifier = self._remote_create(normalized)
        except RemoteError:
            instance.transition(ResourceState.ABSENT)
            raise
        instance.identifier = identifier

        def ready() -> Optional[Dict[str, Any]]:
            remote = self._describe(identifier)
            return remote if remote is not None and self._is_ready(remote) else None

        try:
            remote = self._wait(
                ready,
                timeout=self.acceptance.create_timeout,
                description=f"{self.resource_type} {identifier} to become available",
            )
            instance.attributes = self._build_instance(identifier, remote).attributes
        except AccTestError as e:
            self._logger.error("Created resource never became usable", identifier=identifier,
                               error=str(e))
            raise IncompleteCreateError(instance, e) from e
        instance.transition(ResourceState.PRESENT)
        self._logger.info("Created resource", identifier=identifier)
        return instance

    def read(self, identifier: str) -> ResourceInstance:
        """
        Refresh an object from the remote API.

        Raises:
            NotFoundError: If the API returns no matching object
            RemoteError: If the API call fails
        """
        remote = self._describe(identifier)
        if remote is None:
            self._logger.info("Resource not found", identifier=identifier)
            raise NotFoundError(self.resource_type, identifier)
        return self._build_instance(identifier, remote)

    def plan(self, instance: ResourceInstance, config: Mapping[str, Any]) -> ResourceDiff:
        """Attribute-level diff between ``instance`` and ``config``."""
        normalized = self.descriptor.validate(config)
        return self.descriptor.diff(instance.attributes, normalized)

    def update(self, instance: ResourceInstance, config: Mapping[str, Any]) -> ResourceInstance:
        """
        Apply in-place changes from ``config`` to ``instance``.

        Raises:
            ValidationError: If the configuration is invalid
            ReplacementRequiredError: If a force-new attribute changed; the
                caller must destroy and re-create instead
            RemoteError: If an API call fails
        """
        diff = self.plan(instance, config)
        if diff.requires_replacement:
            raise ReplacementRequiredError(self.resource_type, instance.identifier,
                                           diff.replacement_attributes)
        if diff.is_empty:
            return instance

        identifier = instance.identifier
        updated = instance.copy()
        updated.transition(ResourceState.UPDATING)
        self._logger.info("Updating resource", identifier=identifier,
                          attributes=diff.in_place_attributes)

        for name in diff.in_place_attributes:
            change = diff.changes[name]
            self._update_attribute(identifier, name, change.old, change.new)

        remote = self._describe(identifier)
        if remote is None:
            raise NotFoundError(self.resource_type, identifier, operation="update")
        updated.attributes = self._build_instance(identifier, remote).attributes
        updated.transition(ResourceState.PRESENT)
        return updated

    def _update_attribute(self, identifier: str, name: str, old: Any, new: Any) -> None:
        if name != 'tags':
            raise RemoteError("update", f"attribute '{name}' cannot be updated in place",
                              resource_type=self.resource_type, identifier=identifier)
        remote = self._describe(identifier)
        if remote is None:
            raise NotFoundError(self.resource_type, identifier, operation="update")
        self._remote_update_tags(identifier, remote, TagSet.of(old), TagSet.of(new))

    def delete(self, identifier: str) -> None:
        """
        Delete the remote object and wait until it is gone.

        An object that is already absent counts as deleted.

        Raises:
            RemoteError: If the API call fails
        """
        self._logger.info("Deleting resource", identifier=identifier)
        try:
            self._remote_delete(identifier)
        except NotFoundError:
            self._logger.info("Resource already absent", identifier=identifier)
            return

        self._wait(
            lambda: self._describe(identifier) is None,
            timeout=self.acceptance.delete_timeout,
            description=f"{self.resource_type} {identifier} to be deleted",
        )
        self._logger.info("Deleted resource", identifier=identifier)

    def import_(self, identifier: str) -> ResourceInstance:
        """
        Reconstruct an instance from its identifier alone.

        Raises:
            ResourceImportError: If the object is missing or an attribute
                cannot be reconstructed
        """
        try:
            instance = self.read(identifier)
        except RemoteError as e:
            raise ResourceImportError(self.resource_type, identifier, cause=e) from e

        missing = [
            name for name, attr in self.descriptor.attributes.items()
            if (attr.required or attr.computed or attr.default is not None)
            and instance.get(name) is None
        ]
        if missing:
            raise ResourceImportError(self.resource_type, identifier, missing=missing)

        self._logger.info("Imported resource", identifier=identifier)
        return instance

    def list_identifiers(self) -> List[str]:
        """Identifiers of every live object of this type."""
        return [self.identifier_of(remote) for remote in self._remote_list() if not self._is_gone(remote)]

    def exists(self, identifier: str) -> bool:
        return self._describe(identifier) is not None
