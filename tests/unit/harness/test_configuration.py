"""Tests for configuration rendering."""
import pytest

from resource_acctest.domain.core.exceptions import ValidationError
from resource_acctest.harness.configuration import (
    Configuration,
    ResourceBlock,
    hcl_value,
    placement_group_basic,
    placement_group_tags1,
    tape_pool_basic,
    tape_pool_retention,
    tape_pool_tags2,
)


@pytest.mark.unit
class TestRendering:
    """Test rendering of fixture configurations."""

    def test_placement_group_basic(self):
        assert placement_group_basic("tf-acc-test-1").render() == (
            'resource "aws_placement_group" "test" {\n'
            '  name     = "tf-acc-test-1"\n'
            '  strategy = "cluster"\n'
            '}\n'
        )

    def test_tags_block(self):
        assert placement_group_tags1("pg", "key1", "value1").render() == (
            'resource "aws_placement_group" "test" {\n'
            '  name     = "pg"\n'
            '  strategy = "cluster"\n'
            '\n'
            '  tags = {\n'
            '    "key1" = "value1"\n'
            '  }\n'
            '}\n'
        )

    def test_tape_pool_basic(self):
        assert tape_pool_basic("pool").render() == (
            'resource "aws_storagegateway_tape_pool" "test" {\n'
            '  pool_name     = "pool"\n'
            '  storage_class = "GLACIER"\n'
            '}\n'
        )

    def test_tape_pool_retention(self):
        text = tape_pool_retention("pool").render()
        assert '  retention_lock_type         = "GOVERNANCE"\n' in text
        assert '  retention_lock_time_in_days = 1\n' in text

    def test_tape_pool_tags2(self):
        text = tape_pool_tags2("pool", "key1", "value1updated", "key2", "value2").render()
        assert '    "key1" = "value1updated"\n    "key2" = "value2"\n' in text

    def test_multiple_blocks(self):
        configuration = Configuration([
            ResourceBlock('aws_placement_group', 'a', {'name': 'a', 'strategy': 'cluster'}),
            ResourceBlock('aws_placement_group', 'b', {'name': 'b', 'strategy': 'spread'}),
        ])
        text = configuration.render()
        assert text.count('resource "aws_placement_group"') == 2
        assert '}\n\nresource "aws_placement_group" "b" {' in text
        assert str(configuration) == text


@pytest.mark.unit
class TestConfiguration:
    """Test configuration structure."""

    def test_addresses(self):
        configuration = tape_pool_basic("pool")
        assert configuration.addresses == ['aws_storagegateway_tape_pool.test']
        assert configuration.get('aws_storagegateway_tape_pool.test').attributes['pool_name'] == 'pool'
        assert configuration.get('aws_placement_group.test') is None

    def test_duplicate_address(self):
        block = ResourceBlock('aws_placement_group', 'test', {'name': 'a'})
        with pytest.raises(ValidationError, match="Duplicate resource address"):
            Configuration([block, ResourceBlock('aws_placement_group', 'test')])

    @pytest.mark.parametrize("value,expected", [
        ("plain", '"plain"'),
        ('with "quotes"', '"with \\"quotes\\""'),
        (3, '3'),
        (True, 'true'),
    ])
    def test_hcl_value(self, value, expected):
        assert hcl_value(value) == expected
