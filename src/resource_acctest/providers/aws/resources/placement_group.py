"""EC2 placement group controller (``aws_placement_group``)."""
from typing import Any, Dict, List, Optional

from resource_acctest.domain.resource import (
    AttributeSchema,
    AttributeType,
    PlacementStrategy,
    ResourceDescriptor,
    SpreadLevel,
    TagSet,
    enum_validator,
    int_range_validator,
    tags_validator,
)

from .base_controller import ResourceController

RESOURCE_TYPE = "aws_placement_group"
MAX_PARTITIONS = 7


def partition_count_requires_partition_strategy(config: Dict[str, Any]) -> None:
    if config.get('partition_count') and config['strategy'] != PlacementStrategy.PARTITION.value:
        raise ValueError(
            f"partition_count is only valid with strategy '{PlacementStrategy.PARTITION.value}'"
        )


def spread_level_requires_spread_strategy(config: Dict[str, Any]) -> None:
    if config.get('spread_level') and config['strategy'] != PlacementStrategy.SPREAD.value:
        raise ValueError(
            f"spread_level is only valid with strategy '{PlacementStrategy.SPREAD.value}'"
        )


PLACEMENT_GROUP_DESCRIPTOR = ResourceDescriptor(
    RESOURCE_TYPE,
    [
        AttributeSchema('name', required=True, force_new=True),
        AttributeSchema('strategy', required=True, force_new=True,
                        validator=enum_validator(PlacementStrategy)),
        AttributeSchema('partition_count', type=AttributeType.INT, force_new=True, optional_computed=True,
                        validator=int_range_validator(1, MAX_PARTITIONS)),
        AttributeSchema('spread_level', force_new=True, optional_computed=True,
                        validator=enum_validator(SpreadLevel)),
        AttributeSchema('placement_group_id', computed=True),
        AttributeSchema('arn', computed=True),
        AttributeSchema('tags', type=AttributeType.MAP, default={}, validator=tags_validator),
    ],
    identifier_attribute='name',
    rules=[partition_count_requires_partition_strategy, spread_level_requires_spread_strategy],
)


class PlacementGroupController(ResourceController):
    """EC2 placement groups. The identifier is the group name."""

    descriptor = PLACEMENT_GROUP_DESCRIPTOR

    @property
    def _client(self):
        return self.aws_client.ec2_client

    def identifier_of(self, remote: Dict[str, Any]) -> str:
        return remote['GroupName']

    def _remote_create(self, config: Dict[str, Any]) -> str:
        name = config['name']
        params: Dict[str, Any] = {
            'GroupName': name,
            'Strategy': config['strategy'],
        }
        if config.get('partition_count'):
            params['PartitionCount'] = config['partition_count']
        if config.get('spread_level'):
            params['SpreadLevel'] = config['spread_level']
        tags = TagSet.of(config.get('tags'))
        if tags:
            params['TagSpecifications'] = [{
                'ResourceType': 'placement-group',
                'Tags': tags.to_aws()
            }]

        self._call(self._client.create_placement_group, 'CreatePlacementGroup', name, **params)
        return name

    def _remote_describe(self, identifier: str) -> Optional[Dict[str, Any]]:
        response = self._call(self._client.describe_placement_groups, 'DescribePlacementGroups',
                              identifier, GroupNames=[identifier])
        for group in response.get('PlacementGroups') or []:
            if group.get('GroupName') == identifier:
                return group
        return None

    def _is_gone(self, remote: Optional[Dict[str, Any]]) -> bool:
        return remote is None or remote.get('State') == 'deleted'

    def _is_ready(self, remote: Dict[str, Any]) -> bool:
        return remote.get('State', 'available') == 'available'

    def _remote_delete(self, identifier: str) -> None:
        self._call(self._client.delete_placement_group, 'DeletePlacementGroup', identifier,
                   GroupName=identifier)

    def _remote_list(self) -> List[Dict[str, Any]]:
        # DescribePlacementGroups returns every group in one page.
        response = self._call(self._client.describe_placement_groups, 'DescribePlacementGroups')
        return response.get('PlacementGroups') or []

    def _remote_list_tags(self, identifier: str, remote: Dict[str, Any]) -> TagSet:
        return TagSet.from_aws(remote.get('Tags'))

    def _remote_update_tags(self, identifier: str, remote: Dict[str, Any],
                            old: TagSet, new: TagSet) -> None:
        group_id = remote['GroupId']
        diff = TagSet.diff(old, new)
        if diff.remove:
            self._call(self._client.delete_tags, 'DeleteTags', identifier,
                       Resources=[group_id], Tags=[{'Key': key} for key in diff.remove])
        if diff.upsert:
            self._call(self._client.create_tags, 'CreateTags', identifier,
                       Resources=[group_id], Tags=TagSet.of(diff.upsert).to_aws())

    def _to_attributes(self, identifier: str, remote: Dict[str, Any], tags: TagSet) -> Dict[str, Any]:
        name = remote.get('GroupName', identifier)
        arn = remote.get('GroupArn') or self.aws_client.regional_arn('ec2', f"placement-group/{name}")
        return {
            'name': name,
            'strategy': remote.get('Strategy'),
            'partition_count': remote.get('PartitionCount', 0),
            'spread_level': remote.get('SpreadLevel'),
            'placement_group_id': remote.get('GroupId'),
            'arn': arn,
            'tags': tags.to_dict(),
        }
