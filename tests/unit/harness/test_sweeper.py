"""Tests for sweepers."""
import pytest

from resource_acctest.domain.core.exceptions import AccTestError
from resource_acctest.harness import sweeper
from resource_acctest.harness.sweeper import (
    SweepError,
    Sweeper,
    add_sweeper,
    registered_sweepers,
    run_sweepers,
    sweep_order,
    sweep_placement_groups,
    sweep_tape_pools,
)
from resource_acctest.providers.aws.resources import PlacementGroupController, TapePoolController


@pytest.fixture
def isolated_registry(monkeypatch):
    registry = {}
    monkeypatch.setattr(sweeper, '_SWEEPERS', registry)
    return registry


@pytest.mark.unit
class TestRegistry:
    """Test sweeper registration and ordering."""

    def test_builtin_sweepers(self):
        assert registered_sweepers() == ['aws_placement_group', 'aws_storagegateway_tape_pool']
        assert sweep_order() == ['aws_placement_group', 'aws_storagegateway_tape_pool']

    def test_dependencies_run_first(self, isolated_registry):
        add_sweeper('a', lambda client, prefix: None, dependencies=['b', 'not_registered'])
        add_sweeper('b', lambda client, prefix: None)
        assert sweep_order() == ['b', 'a']
        assert sweep_order(['a']) == ['b', 'a']

    def test_cycle(self, isolated_registry):
        isolated_registry['a'] = Sweeper('a', lambda client, prefix: None, ['b'])
        isolated_registry['b'] = Sweeper('b', lambda client, prefix: None, ['a'])
        with pytest.raises(AccTestError, match="cycle"):
            sweep_order()

    def test_duplicate(self, isolated_registry):
        add_sweeper('a', lambda client, prefix: None)
        with pytest.raises(AccTestError, match="already registered"):
            add_sweeper('a', lambda client, prefix: None)

    def test_unknown(self, isolated_registry):
        with pytest.raises(AccTestError, match="Unknown sweeper"):
            sweep_order(['nope'])

    def test_run_collects_results(self, isolated_registry, aws_client):
        ran = []

        def failing(client, prefix):
            raise SweepError('failing', [AccTestError("boom")])

        add_sweeper('ok', lambda client, prefix: ran.append(prefix))
        add_sweeper('failing', failing, dependencies=['ok'])
        results = run_sweepers(aws_client, prefix='ci')
        assert ran == ['ci']
        assert results['ok'] is None
        assert isinstance(results['failing'], SweepError)


@pytest.mark.unit
class TestPlacementGroupSweeper:
    """Test the placement group sweeper."""

    @pytest.fixture
    def controller(self, aws_client, controller_kwargs):
        return PlacementGroupController(aws_client, **controller_kwargs)

    def test_deletes_only_test_groups(self, aws_client, controller, controller_kwargs, ec2):
        for name in ('tf-acc-test-1', 'tf-acc-test-2', 'production'):
            controller.create({'name': name, 'strategy': 'cluster'})
        sweep_placement_groups(aws_client, **controller_kwargs)
        assert list(ec2.groups) == ['production']

    def test_aggregates_errors(self, aws_client, controller, controller_kwargs, ec2):
        for name in ('tf-acc-test-1', 'tf-acc-test-2'):
            controller.create({'name': name, 'strategy': 'cluster'})
        ec2.fail_next('DeletePlacementGroup', 'InvalidPlacementGroup.InUse', 'in use')

        with pytest.raises(SweepError) as exc_info:
            sweep_placement_groups(aws_client, **controller_kwargs)
        assert len(exc_info.value.errors) == 1
        assert list(ec2.groups) == ['tf-acc-test-1']

    def test_skips_unsupported_region(self, aws_client, controller_kwargs, ec2):
        ec2.fail_next('DescribePlacementGroups', 'UnsupportedOperation', 'not supported')
        sweep_placement_groups(aws_client, **controller_kwargs)
        assert ec2.call_count('DeletePlacementGroup') == 0

    def test_listing_failure(self, aws_client, controller_kwargs, ec2):
        ec2.fail_next('DescribePlacementGroups', 'AuthFailure', 'denied')
        with pytest.raises(SweepError, match="AuthFailure"):
            sweep_placement_groups(aws_client, **controller_kwargs)


@pytest.mark.unit
class TestTapePoolSweeper:
    """Test the tape pool sweeper."""

    def test_deletes_by_pool_name(self, aws_client, controller_kwargs, storagegateway):
        controller = TapePoolController(aws_client, **controller_kwargs)
        controller.create({'pool_name': 'tf-acc-test-1', 'storage_class': 'GLACIER'})
        keep = controller.create({'pool_name': 'archive', 'storage_class': 'DEEP_ARCHIVE'})

        sweep_tape_pools(aws_client, prefix='tf-acc-test', **controller_kwargs)
        assert list(storagegateway.pools) == [keep.identifier]
