"""Storage Gateway tape pool controller (``aws_storagegateway_tape_pool``)."""
from typing import Any, Dict, List, Optional

from resource_acctest.domain.resource import (
    AttributeSchema,
    AttributeType,
    ResourceDescriptor,
    RetentionLockType,
    RetentionPolicy,
    StorageClass,
    TagSet,
    enum_validator,
    int_range_validator,
    tags_validator,
)
from resource_acctest.domain.resource.value_objects import MAX_RETENTION_DAYS

from .base_controller import ResourceController

RESOURCE_TYPE = "aws_storagegateway_tape_pool"
ACTIVE_STATUS = "ACTIVE"


def retention_policy(config: Dict[str, Any]) -> None:
    """Zero retention days are required exactly when no lock is set."""
    RetentionPolicy(
        lock_type=config.get('retention_lock_type', RetentionLockType.NONE.value),
        time_in_days=config.get('retention_lock_time_in_days', 0),
    )


TAPE_POOL_DESCRIPTOR = ResourceDescriptor(
    RESOURCE_TYPE,
    [
        AttributeSchema('arn', computed=True),
        AttributeSchema('pool_name', required=True, force_new=True),
        AttributeSchema('storage_class', required=True, force_new=True,
                        validator=enum_validator(StorageClass)),
        AttributeSchema('retention_lock_type', default=RetentionLockType.NONE.value, force_new=True,
                        validator=enum_validator(RetentionLockType)),
        AttributeSchema('retention_lock_time_in_days', type=AttributeType.INT, default=0, force_new=True,
                        validator=int_range_validator(0, MAX_RETENTION_DAYS)),
        AttributeSchema('tags', type=AttributeType.MAP, default={}, validator=tags_validator),
    ],
    identifier_attribute='arn',
    rules=[retention_policy],
)


class TapePoolController(ResourceController):
    """Custom tape pools for Storage Gateway tape gateways. The identifier is the pool ARN."""

    descriptor = TAPE_POOL_DESCRIPTOR

    @property
    def _client(self):
        return self.aws_client.storagegateway_client

    def identifier_of(self, remote: Dict[str, Any]) -> str:
        return remote['PoolARN']

    def _remote_create(self, config: Dict[str, Any]) -> str:
        params: Dict[str, Any] = {
            'PoolName': config['pool_name'],
            'StorageClass': config['storage_class'],
            'RetentionLockType': config['retention_lock_type'],
        }
        if config.get('retention_lock_time_in_days'):
            params['RetentionLockTimeInDays'] = config['retention_lock_time_in_days']
        tags = TagSet.of(config.get('tags'))
        if tags:
            params['Tags'] = tags.to_aws()

        response = self._call(self._client.create_tape_pool, 'CreateTapePool', **params)
        return response['PoolARN']

    def _remote_describe(self, identifier: str) -> Optional[Dict[str, Any]]:
        response = self._call(self._client.list_tape_pools, 'ListTapePools', identifier,
                              PoolARNs=[identifier])
        for pool in response.get('PoolInfos') or []:
            if pool and pool.get('PoolARN') == identifier:
                return pool
        return None

    def _is_gone(self, remote: Optional[Dict[str, Any]]) -> bool:
        return remote is None or remote.get('PoolStatus', ACTIVE_STATUS) != ACTIVE_STATUS

    def _remote_delete(self, identifier: str) -> None:
        self._call(self._client.delete_tape_pool, 'DeleteTapePool', identifier, PoolARN=identifier)

    def _remote_list(self) -> List[Dict[str, Any]]:
        return self._paginate(self._client.list_tape_pools, 'ListTapePools', 'PoolInfos')

    def _remote_list_tags(self, identifier: str, remote: Dict[str, Any]) -> TagSet:
        tags = self._paginate(self._client.list_tags_for_resource, 'ListTagsForResource', 'Tags',
                              ResourceARN=identifier)
        return TagSet.from_aws(tags)

    def _remote_update_tags(self, identifier: str, remote: Dict[str, Any],
                            old: TagSet, new: TagSet) -> None:
        diff = TagSet.diff(old, new)
        if diff.remove:
            self._call(self._client.remove_tags_from_resource, 'RemoveTagsFromResource', identifier,
                       ResourceARN=identifier, TagKeys=diff.remove)
        if diff.upsert:
            self._call(self._client.add_tags_to_resource, 'AddTagsToResource', identifier,
                       ResourceARN=identifier, Tags=TagSet.of(diff.upsert).to_aws())

    def _to_attributes(self, identifier: str, remote: Dict[str, Any], tags: TagSet) -> Dict[str, Any]:
        return {
            'arn': remote.get('PoolARN', identifier),
            'pool_name': remote.get('PoolName'),
            'storage_class': remote.get('StorageClass'),
            'retention_lock_type': remote.get('RetentionLockType') or RetentionLockType.NONE.value,
            'retention_lock_time_in_days': remote.get('RetentionLockTimeInDays') or 0,
            'tags': tags.to_dict(),
        }
