"""Resource schemas, instances, tag sets and value objects."""

from .descriptor import (
    AttributeChange,
    AttributeSchema,
    AttributeType,
    ResourceDescriptor,
    ResourceDiff,
    enum_validator,
    int_range_validator,
)
from .instance import ResourceInstance, ResourceState
from .tags import TagDiff, TagSet, tags_validator
from .value_objects import (
    AWSARN,
    PlacementStrategy,
    RetentionLockType,
    RetentionPolicy,
    SpreadLevel,
    StorageClass,
)

__all__: list[str] = [
    "AWSARN",
    "AttributeChange",
    "AttributeSchema",
    "AttributeType",
    "PlacementStrategy",
    "ResourceDescriptor",
    "ResourceDiff",
    "ResourceInstance",
    "ResourceState",
    "RetentionLockType",
    "RetentionPolicy",
    "SpreadLevel",
    "StorageClass",
    "TagDiff",
    "TagSet",
    "enum_validator",
    "int_range_validator",
    "tags_validator",
]
