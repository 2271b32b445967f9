"""Minimal in-process reconciliation engine driving the resource controllers."""
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from resource_acctest.config.schemas import AcceptanceConfig
from resource_acctest.domain.core.exceptions import AccTestError, IncompleteCreateError, NotFoundError
from resource_acctest.domain.resource import ResourceDiff, ResourceInstance, ResourceState
from resource_acctest.helpers.logger import get_logger
from resource_acctest.infrastructure.aws.aws_client import AWSClient
from resource_acctest.infrastructure.resilience import RetryConfig
from resource_acctest.providers.aws.resources import ResourceController, controller_for

from .configuration import Configuration, ResourceBlock
from .state import State

logger = get_logger(__name__)


class PlanAction(str, Enum):
    """What applying a configuration would do to one address."""
    CREATE = "create"
    UPDATE = "update"
    REPLACE = "replace"
    DELETE = "delete"
    NO_OP = "no-op"


@dataclass
class PlannedChange:
    address: str
    resource_type: str
    action: PlanAction
    diff: Optional[ResourceDiff] = None
    block: Optional[ResourceBlock] = None


@dataclass
class Plan:
    """Ordered changes: deletes of orphaned addresses first, then configuration order."""
    changes: List[PlannedChange] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return all(change.action == PlanAction.NO_OP for change in self.changes)

    @property
    def pending(self) -> List[PlannedChange]:
        return [change for change in self.changes if change.action != PlanAction.NO_OP]

    def summary(self) -> str:
        actions = [change.action for change in self.changes]
        to_add = actions.count(PlanAction.CREATE) + actions.count(PlanAction.REPLACE)
        to_change = actions.count(PlanAction.UPDATE)
        to_destroy = actions.count(PlanAction.DELETE) + actions.count(PlanAction.REPLACE)
        return f"Plan: {to_add} to add, {to_change} to change, {to_destroy} to destroy."

    def describe(self) -> str:
        lines = [self.summary()]
        for change in self.pending:
            detail = ""
            if change.diff is not None:
                detail = " (" + ", ".join(sorted(change.diff.changes)) + ")"
            lines.append(f"  {change.action.value} {change.address}{detail}")
        return "\n".join(lines)


class Engine:
    """
    Plans and applies configurations against live objects through the controllers.

    One engine may serve several scenarios; all per-scenario data lives in the
    ``State`` passed to each call.
    """

    def __init__(self, aws_client: AWSClient, retry_config: Optional[RetryConfig] = None,
                 acceptance: Optional[AcceptanceConfig] = None,
                 sleep: Callable[[float], Any] = time.sleep,
                 controller_factory: Callable[..., ResourceController] = controller_for):
        self.aws_client = aws_client
        self._controller_kwargs = {
            'retry_config': retry_config,
            'acceptance': acceptance,
            'sleep': sleep,
        }
        self._controller_factory = controller_factory
        self._controllers: Dict[str, ResourceController] = {}

    def controller(self, resource_type: str) -> ResourceController:
        if resource_type not in self._controllers:
            self._controllers[resource_type] = self._controller_factory(
                resource_type, self.aws_client, **self._controller_kwargs
            )
        return self._controllers[resource_type]

    def refresh(self, state: State) -> None:
        """Re-read every instance in ``state``; objects gone remotely are dropped."""
        for address, instance in state.items():
            controller = self.controller(instance.resource_type)
            try:
                state.set(address, controller.read(instance.identifier))
            except NotFoundError:
                logger.warning("Resource no longer exists, removing from state",
                               address=address, identifier=instance.identifier)
                instance.transition(ResourceState.ABSENT)
                state.remove(address)

    def plan(self, configuration: Configuration, state: State, refresh: bool = True) -> Plan:
        """
        Compute the changes needed to make ``state`` match ``configuration``.

        Raises:
            ValidationError: If any block is invalid for its resource type
            RemoteError: If refreshing an instance fails
        """
        if refresh:
            self.refresh(state)

        plan = Plan()
        for address, instance in state.items():
            if configuration.get(address) is None:
                plan.changes.append(PlannedChange(address, instance.resource_type, PlanAction.DELETE))

        for block in configuration.blocks:
            controller = self.controller(block.resource_type)
            instance = state.get(block.address)
            if instance is None:
                controller.descriptor.validate(block.attributes)
                plan.changes.append(PlannedChange(block.address, block.resource_type,
                                                  PlanAction.CREATE, block=block))
                continue

            diff = controller.plan(instance, block.attributes)
            if diff.is_empty:
                action = PlanAction.NO_OP
            elif diff.requires_replacement:
                action = PlanAction.REPLACE
            else:
                action = PlanAction.UPDATE
            plan.changes.append(PlannedChange(block.address, block.resource_type, action,
                                              diff=diff, block=block))

        logger.debug("Planned changes", plan=plan.summary())
        return plan

    def apply(self, configuration: Configuration, state: State) -> Plan:
        """Execute the plan for ``configuration``, updating ``state`` as each change lands."""
        plan = self.plan(configuration, state)
        logger.info("Applying configuration", plan=plan.summary())

        for change in plan.pending:
            if change.action == PlanAction.DELETE:
                self._delete(change.address, state)
            elif change.action == PlanAction.CREATE:
                self._create(change.block, state)
            elif change.action == PlanAction.REPLACE:
                self._delete(change.address, state)
                self._create(change.block, state)
            elif change.action == PlanAction.UPDATE:
                controller = self.controller(change.resource_type)
                state.set(change.address,
                          controller.update(state.require(change.address), change.block.attributes))
        return plan

    def destroy(self, state: State) -> None:
        """
        Delete everything in ``state``, newest first.

        Every address is attempted; the first failure is re-raised afterwards.
        """
        first_error: Optional[AccTestError] = None
        for address in reversed(state.addresses()):
            try:
                self._delete(address, state)
            except AccTestError as e:
                logger.error("Failed to destroy resource", address=address, error=str(e))
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error

    def import_resource(self, resource_type: str, identifier: str) -> ResourceInstance:
        return self.controller(resource_type).import_(identifier)

    def _create(self, block: ResourceBlock, state: State) -> None:
        try:
            instance = self.controller(block.resource_type).create(block.attributes)
        except IncompleteCreateError as e:
            # half-created objects stay tracked for destroy
            state.set(block.address, e.instance)
            logger.error("Create did not complete", address=block.address,
                         identifier=e.identifier, error=str(e.cause))
            raise
        state.set(block.address, instance)
        logger.info("Created", address=block.address, identifier=instance.identifier)

    def _delete(self, address: str, state: State) -> None:
        instance = state.require(address)
        if instance.state != ResourceState.DELETING:
            instance.transition(ResourceState.DELETING)
        self.controller(instance.resource_type).delete(instance.identifier)
        instance.transition(ResourceState.ABSENT)
        state.remove(address)
        logger.info("Destroyed", address=address, identifier=instance.identifier)
