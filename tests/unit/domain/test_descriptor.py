"""Tests for resource descriptors."""
import pytest

from resource_acctest.domain.core.exceptions import ValidationError
from resource_acctest.domain.resource import (
    AttributeSchema,
    AttributeType,
    ResourceDescriptor,
    StorageClass,
    enum_validator,
    int_range_validator,
)
from resource_acctest.providers.aws.resources import PLACEMENT_GROUP_DESCRIPTOR, TAPE_POOL_DESCRIPTOR


@pytest.mark.unit
class TestDescriptorConstruction:
    """Test schema declaration."""

    def test_duplicate_attribute(self):
        with pytest.raises(ValidationError, match="Duplicate attribute 'name'"):
            ResourceDescriptor('x', [AttributeSchema('name'), AttributeSchema('name')], 'name')

    def test_unknown_identifier(self):
        with pytest.raises(ValidationError, match="Identifier attribute 'id'"):
            ResourceDescriptor('x', [AttributeSchema('name')], 'id')

    def test_attributes_are_read_only(self):
        with pytest.raises(TypeError):
            TAPE_POOL_DESCRIPTOR.attributes['extra'] = AttributeSchema('extra')

    def test_configurable_excludes_computed(self):
        assert 'arn' not in TAPE_POOL_DESCRIPTOR.configurable
        assert 'pool_name' in TAPE_POOL_DESCRIPTOR.configurable


@pytest.mark.unit
class TestTapePoolValidation:
    """Test validation of tape pool configurations."""

    def test_defaults_applied(self):
        config = TAPE_POOL_DESCRIPTOR.validate({'pool_name': 'p', 'storage_class': StorageClass.GLACIER})
        assert config == {
            'pool_name': 'p',
            'storage_class': 'GLACIER',
            'retention_lock_type': 'NONE',
            'retention_lock_time_in_days': 0,
            'tags': {},
        }

    def test_none_lock_with_days_fails(self):
        with pytest.raises(ValidationError) as exc_info:
            TAPE_POOL_DESCRIPTOR.validate({
                'pool_name': 'p',
                'storage_class': 'GLACIER',
                'retention_lock_type': 'NONE',
                'retention_lock_time_in_days': 5,
            })
        assert 'retention_policy' in exc_info.value.details
        assert 'must be 0' in exc_info.value.details['retention_policy']
        message = str(exc_info.value)
        assert message.startswith("Invalid configuration for aws_storagegateway_tape_pool: retention_policy: ")
        assert 'must be 0 when retention_lock_type is NONE' in message

    def test_governance_with_days(self):
        config = TAPE_POOL_DESCRIPTOR.validate({
            'pool_name': 'p',
            'storage_class': 'GLACIER',
            'retention_lock_type': 'GOVERNANCE',
            'retention_lock_time_in_days': 1,
        })
        assert config['retention_lock_time_in_days'] == 1

    def test_collects_every_error(self):
        with pytest.raises(ValidationError) as exc_info:
            TAPE_POOL_DESCRIPTOR.validate({'storage_class': 'TAPE', 'bogus': 1, 'arn': 'arn:x'})
        details = exc_info.value.details
        assert details['pool_name'] == "required attribute is missing"
        assert details['bogus'] == "unknown attribute"
        assert details['arn'] == "attribute is computed and cannot be set"
        assert "expected one of [GLACIER, DEEP_ARCHIVE]" in details['storage_class']

    def test_type_errors(self):
        with pytest.raises(ValidationError) as exc_info:
            TAPE_POOL_DESCRIPTOR.validate({
                'pool_name': 3,
                'storage_class': 'GLACIER',
                'retention_lock_time_in_days': True,
                'tags': ['a'],
            })
        details = exc_info.value.details
        assert details['pool_name'] == "expected string, got int"
        assert details['retention_lock_time_in_days'] == "expected int, got bool"
        assert details['tags'] == "expected map, got list"

    def test_invalid_tags(self):
        with pytest.raises(ValidationError) as exc_info:
            TAPE_POOL_DESCRIPTOR.validate({'pool_name': 'p', 'storage_class': 'GLACIER',
                                           'tags': {'aws:reserved': 'x'}})
        assert 'tags' in exc_info.value.details


@pytest.mark.unit
class TestPlacementGroupValidation:
    """Test cross-attribute rules of placement groups."""

    def test_partition_count_needs_partition_strategy(self):
        with pytest.raises(ValidationError) as exc_info:
            PLACEMENT_GROUP_DESCRIPTOR.validate({'name': 'pg', 'strategy': 'cluster', 'partition_count': 2})
        assert 'partition_count_requires_partition_strategy' in exc_info.value.details

    def test_spread_level_needs_spread_strategy(self):
        with pytest.raises(ValidationError) as exc_info:
            PLACEMENT_GROUP_DESCRIPTOR.validate({'name': 'pg', 'strategy': 'cluster', 'spread_level': 'host'})
        assert 'spread_level_requires_spread_strategy' in exc_info.value.details

    @pytest.mark.parametrize("count", [0, 8])
    def test_partition_count_range(self, count):
        with pytest.raises(ValidationError) as exc_info:
            PLACEMENT_GROUP_DESCRIPTOR.validate({'name': 'pg', 'strategy': 'partition', 'partition_count': count})
        assert "range (1 - 7)" in exc_info.value.details['partition_count']

    def test_partition_group(self):
        config = PLACEMENT_GROUP_DESCRIPTOR.validate({'name': 'pg', 'strategy': 'partition', 'partition_count': 3})
        assert config == {'name': 'pg', 'strategy': 'partition', 'partition_count': 3, 'tags': {}}


@pytest.mark.unit
class TestDiff:
    """Test attribute-level diffs."""

    @pytest.fixture
    def descriptor(self):
        return ResourceDescriptor('test_thing', [
            AttributeSchema('name', required=True, force_new=True),
            AttributeSchema('size', type=AttributeType.INT, default=1, validator=int_range_validator(1, 10)),
            AttributeSchema('mode', optional_computed=True, validator=enum_validator(StorageClass)),
            AttributeSchema('id', computed=True),
            AttributeSchema('tags', type=AttributeType.MAP, default={}),
        ], identifier_attribute='name')

    def test_no_changes(self, descriptor):
        current = {'name': 'a', 'size': 1, 'mode': 'GLACIER', 'id': 'x', 'tags': {}}
        diff = descriptor.diff(current, descriptor.validate({'name': 'a'}))
        assert diff.is_empty
        assert not diff.requires_replacement

    def test_force_new_change(self, descriptor):
        current = {'name': 'a', 'size': 1, 'tags': {}}
        diff = descriptor.diff(current, descriptor.validate({'name': 'b', 'size': 2}))
        assert diff.requires_replacement
        assert diff.replacement_attributes == ['name']
        assert diff.in_place_attributes == ['size']

    def test_map_change(self, descriptor):
        current = {'name': 'a', 'size': 1, 'tags': {'k': 'v'}}
        diff = descriptor.diff(current, descriptor.validate({'name': 'a', 'tags': {'k': 'w'}}))
        assert list(diff.changes) == ['tags']
        assert diff.changes['tags'].old == {'k': 'v'}
        assert diff.changes['tags'].new == {'k': 'w'}

    def test_optional_computed_set_explicitly(self, descriptor):
        current = {'name': 'a', 'size': 1, 'mode': 'GLACIER', 'tags': {}}
        diff = descriptor.diff(current, descriptor.validate({'name': 'a', 'mode': 'DEEP_ARCHIVE'}))
        assert diff.in_place_attributes == ['mode']
