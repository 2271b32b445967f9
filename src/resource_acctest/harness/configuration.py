"""Declarative configurations and the fixture configurations used by the acceptance scenarios."""
import json
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from jinja2 import Environment, PackageLoader, StrictUndefined

from resource_acctest.domain.core.exceptions import ValidationError
from resource_acctest.domain.resource import PlacementStrategy, RetentionLockType, StorageClass
from resource_acctest.providers.aws.resources.placement_group import RESOURCE_TYPE as PLACEMENT_GROUP
from resource_acctest.providers.aws.resources.tape_pool import RESOURCE_TYPE as TAPE_POOL


def hcl_value(value: Any) -> str:
    """Render a scalar as an HCL literal."""
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(str(value))


_environment = Environment(
    loader=PackageLoader('resource_acctest.harness', 'templates'),
    undefined=StrictUndefined,
    keep_trailing_newline=True,
    autoescape=False,
)
_environment.filters['hcl'] = hcl_value


class ResourceBlock:
    """One ``resource "<type>" "<name>"`` block."""

    def __init__(self, resource_type: str, name: str, attributes: Optional[Mapping[str, Any]] = None):
        self.resource_type = resource_type
        self.name = name
        self.attributes: Dict[str, Any] = dict(attributes or {})

    @property
    def address(self) -> str:
        return f"{self.resource_type}.{self.name}"

    def scalars(self) -> List[Tuple[str, Any]]:
        return [(k, v) for k, v in self.attributes.items() if not isinstance(v, Mapping)]

    def maps(self) -> List[Tuple[str, Mapping[str, Any]]]:
        return [(k, v) for k, v in self.attributes.items() if isinstance(v, Mapping)]

    @property
    def key_width(self) -> int:
        return max((len(k) for k, _ in self.scalars()), default=0)

    def render(self) -> str:
        return _environment.get_template('resource.tf.j2').render(block=self)

    def __repr__(self) -> str:
        return f"ResourceBlock({self.address!r})"


class Configuration:
    """Ordered set of resource blocks applied together in one test step."""

    def __init__(self, blocks: Iterable[ResourceBlock] = ()):
        self.blocks: List[ResourceBlock] = []
        for block in blocks:
            self.add(block)

    def add(self, block: ResourceBlock) -> 'Configuration':
        if block.address in self.addresses:
            raise ValidationError(f"Duplicate resource address: {block.address}")
        self.blocks.append(block)
        return self

    @property
    def addresses(self) -> List[str]:
        return [block.address for block in self.blocks]

    def get(self, address: str) -> Optional[ResourceBlock]:
        for block in self.blocks:
            if block.address == address:
                return block
        return None

    def render(self) -> str:
        """Configuration text in HCL form."""
        return _environment.get_template('configuration.tf.j2').render(configuration=self).strip() + "\n"

    def __str__(self) -> str:
        return self.render()


def tape_pool_basic(name: str) -> Configuration:
    return Configuration([ResourceBlock(TAPE_POOL, 'test', {
        'pool_name': name,
        'storage_class': StorageClass.GLACIER,
    })])


def tape_pool_retention(name: str) -> Configuration:
    return Configuration([ResourceBlock(TAPE_POOL, 'test', {
        'pool_name': name,
        'storage_class': StorageClass.GLACIER,
        'retention_lock_type': RetentionLockType.GOVERNANCE,
        'retention_lock_time_in_days': 1,
    })])


def tape_pool_tags1(name: str, key1: str, value1: str) -> Configuration:
    return Configuration([ResourceBlock(TAPE_POOL, 'test', {
        'pool_name': name,
        'storage_class': StorageClass.GLACIER,
        'tags': {key1: value1},
    })])


def tape_pool_tags2(name: str, key1: str, value1: str, key2: str, value2: str) -> Configuration:
    return Configuration([ResourceBlock(TAPE_POOL, 'test', {
        'pool_name': name,
        'storage_class': StorageClass.GLACIER,
        'tags': {key1: value1, key2: value2},
    })])


def placement_group_basic(name: str) -> Configuration:
    return Configuration([ResourceBlock(PLACEMENT_GROUP, 'test', {
        'name': name,
        'strategy': PlacementStrategy.CLUSTER,
    })])


def placement_group_tags1(name: str, key1: str, value1: str) -> Configuration:
    return Configuration([ResourceBlock(PLACEMENT_GROUP, 'test', {
        'name': name,
        'strategy': PlacementStrategy.CLUSTER,
        'tags': {key1: value1},
    })])


def placement_group_tags2(name: str, key1: str, value1: str, key2: str, value2: str) -> Configuration:
    return Configuration([ResourceBlock(PLACEMENT_GROUP, 'test', {
        'name': name,
        'strategy': PlacementStrategy.CLUSTER,
        'tags': {key1: value1, key2: value2},
    })])
