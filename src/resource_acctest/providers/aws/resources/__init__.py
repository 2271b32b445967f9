"""Resource controllers for AWS resource types."""

from .base_controller import ResourceController
from .placement_group import PLACEMENT_GROUP_DESCRIPTOR, PlacementGroupController
from .registry import controller_class, controller_for, registered_types
from .tape_pool import TAPE_POOL_DESCRIPTOR, TapePoolController

__all__: list[str] = [
    "PLACEMENT_GROUP_DESCRIPTOR",
    "PlacementGroupController",
    "ResourceController",
    "TAPE_POOL_DESCRIPTOR",
    "TapePoolController",
    "controller_class",
    "controller_for",
    "registered_types",
]
