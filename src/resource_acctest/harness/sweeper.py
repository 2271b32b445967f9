"""Sweepers removing objects leaked by earlier acceptance runs."""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from resource_acctest.domain.core.exceptions import AccTestError, NotFoundError, RemoteError
from resource_acctest.helpers.logger import get_logger
from resource_acctest.infrastructure.aws.aws_client import AWSClient
from resource_acctest.infrastructure.aws.errors import is_unsupported_error
from resource_acctest.providers.aws.resources import ResourceController
from resource_acctest.providers.aws.resources.placement_group import (
    RESOURCE_TYPE as PLACEMENT_GROUP,
    PlacementGroupController,
)
from resource_acctest.providers.aws.resources.tape_pool import (
    RESOURCE_TYPE as TAPE_POOL,
    TapePoolController,
)

from .naming import DEFAULT_PREFIX, has_test_prefix

logger = get_logger(__name__)

SweepFunc = Callable[[AWSClient, str], None]


class SweepError(AccTestError):
    """Raised when one or more objects could not be swept."""
    def __init__(self, name: str, errors: List[BaseException]):
        details = "; ".join(str(e) for e in errors)
        super().__init__(f"{len(errors)} error(s) sweeping {name}: {details}")
        self.name = name
        self.errors = errors


@dataclass
class Sweeper:
    name: str
    func: SweepFunc
    dependencies: List[str] = field(default_factory=list)


_SWEEPERS: Dict[str, Sweeper] = {}


def add_sweeper(name: str, func: SweepFunc, dependencies: Optional[List[str]] = None) -> None:
    if name in _SWEEPERS:
        raise AccTestError(f"Sweeper already registered: {name}")
    _SWEEPERS[name] = Sweeper(name, func, list(dependencies or []))


def registered_sweepers() -> List[str]:
    return sorted(_SWEEPERS)


def sweep_order(names: Optional[List[str]] = None) -> List[str]:
    """Sweeper names with every registered dependency ahead of its dependents."""
    ordered: List[str] = []
    visiting: List[str] = []

    def visit(name: str) -> None:
        if name in ordered:
            return
        if name in visiting:
            raise AccTestError(f"Sweeper dependency cycle: {' -> '.join(visiting + [name])}")
        sweeper = _SWEEPERS.get(name)
        if sweeper is None:
            raise AccTestError(f"Unknown sweeper: {name}")
        visiting.append(name)
        for dependency in sweeper.dependencies:
            if dependency in _SWEEPERS:
                visit(dependency)
            else:
                logger.debug("Skipping unregistered sweeper dependency", sweeper=name,
                             dependency=dependency)
        visiting.pop()
        ordered.append(name)

    for name in names or registered_sweepers():
        visit(name)
    return ordered


def run_sweepers(aws_client: AWSClient, names: Optional[List[str]] = None,
                 prefix: str = DEFAULT_PREFIX) -> Dict[str, Optional[SweepError]]:
    """Run sweepers in dependency order; returns each sweeper's error or None."""
    results: Dict[str, Optional[SweepError]] = {}
    for name in sweep_order(names):
        logger.info("Running sweeper", sweeper=name, region=aws_client.region_name)
        try:
            _SWEEPERS[name].func(aws_client, prefix)
            results[name] = None
        except SweepError as e:
            logger.error("Sweeper failed", sweeper=name, error=str(e))
            results[name] = e
    return results


def _sweep_controller(controller: ResourceController, prefix: str,
                      name_of: Callable[[ResourceController, str], str]) -> None:
    try:
        identifiers = controller.list_identifiers()
    except RemoteError as e:
        if is_unsupported_error(e.cause or e):
            logger.warning("Skipping sweeper", resource_type=controller.resource_type, error=str(e))
            return
        raise SweepError(controller.resource_type, [e]) from e

    errors: List[BaseException] = []
    for identifier in identifiers:
        try:
            if not has_test_prefix(name_of(controller, identifier), prefix):
                continue
            logger.info("Deleting leaked resource", resource_type=controller.resource_type,
                        identifier=identifier)
            controller.delete(identifier)
        except NotFoundError:
            continue
        except AccTestError as e:
            errors.append(e)
    if errors:
        raise SweepError(controller.resource_type, errors)


def sweep_placement_groups(aws_client: AWSClient, prefix: str = DEFAULT_PREFIX, **kwargs: Any) -> None:
    _sweep_controller(PlacementGroupController(aws_client, **kwargs), prefix,
                      lambda controller, identifier: identifier)


def sweep_tape_pools(aws_client: AWSClient, prefix: str = DEFAULT_PREFIX, **kwargs: Any) -> None:
    def pool_name(controller: ResourceController, arn: str) -> str:
        return controller.read(arn).get('pool_name') or ''

    _sweep_controller(TapePoolController(aws_client, **kwargs), prefix, pool_name)


# Instances and fleets launched into a group must be gone before the group can be deleted.
add_sweeper(PLACEMENT_GROUP, sweep_placement_groups, dependencies=[
    'aws_autoscaling_group',
    'aws_instance',
    'aws_launch_template',
    'aws_spot_fleet_request',
])
add_sweeper(TAPE_POOL, sweep_tape_pools)
