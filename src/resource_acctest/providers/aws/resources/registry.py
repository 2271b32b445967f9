"""Resource type name -> controller class."""
from typing import Any, Dict, List, Type

from resource_acctest.domain.core.exceptions import ValidationError
from resource_acctest.infrastructure.aws.aws_client import AWSClient

from .base_controller import ResourceController
from .placement_group import PlacementGroupController
from .tape_pool import TapePoolController

_CONTROLLERS: Dict[str, Type[ResourceController]] = {
    TapePoolController.descriptor.resource_type: TapePoolController,
    PlacementGroupController.descriptor.resource_type: PlacementGroupController,
}


def registered_types() -> List[str]:
    return sorted(_CONTROLLERS)


def controller_class(resource_type: str) -> Type[ResourceController]:
    try:
        return _CONTROLLERS[resource_type]
    except KeyError:
        raise ValidationError(
            f"Unsupported resource type: {resource_type}. "
            f"Supported types are: {', '.join(registered_types())}"
        )


def controller_for(resource_type: str, aws_client: AWSClient, **kwargs: Any) -> ResourceController:
    """Build the controller for ``resource_type`` around an explicit client."""
    return controller_class(resource_type)(aws_client, **kwargs)
