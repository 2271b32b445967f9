"""Acceptance scenarios for aws_placement_group."""
import re

import pytest

from resource_acctest.harness import (
    DestroyCheck,
    DisappearsCheck,
    ExistenceCheck,
    TestCase,
    TestStep,
    check_attr,
    check_regional_arn_exact,
    compose,
    error_check,
    pre_check,
    random_with_prefix,
)
from resource_acctest.harness.configuration import (
    placement_group_basic,
    placement_group_tags1,
    placement_group_tags2,
)

RESOURCE_TYPE = 'aws_placement_group'
ADDRESS = f'{RESOURCE_TYPE}.test'

pytestmark = [pytest.mark.acceptance, pytest.mark.timeout(1800)]


def scenario(runner, steps):
    return TestCase(
        steps=steps,
        pre_check=lambda: pre_check(runner.engine.aws_client),
        error_check=error_check,
        check_destroy=DestroyCheck(RESOURCE_TYPE),
    )


def import_step():
    return TestStep(resource_name=ADDRESS, import_state=True, import_state_verify=True)


def test_basic(acc_runner):
    name = random_with_prefix()
    acc_runner.run(scenario(acc_runner, [
        TestStep(
            config=placement_group_basic(name),
            check=compose(
                ExistenceCheck(ADDRESS, {'name': name, 'strategy': 'cluster'}),
                check_attr(ADDRESS, 'name', name),
                check_attr(ADDRESS, 'strategy', 'cluster'),
                check_attr(ADDRESS, 'tags.%', '0'),
                check_regional_arn_exact(ADDRESS, 'arn', 'ec2', f"placement-group/{name}"),
            ),
        ),
        import_step(),
    ]))


def test_tags(acc_runner):
    name = random_with_prefix()
    acc_runner.run(scenario(acc_runner, [
        TestStep(
            config=placement_group_tags1(name, 'key1', 'value1'),
            check=compose(
                ExistenceCheck(ADDRESS, {'tags.%': 1, 'tags.key1': 'value1'}),
                check_attr(ADDRESS, 'tags.%', '1'),
                check_attr(ADDRESS, 'tags.key1', 'value1'),
            ),
        ),
        import_step(),
        TestStep(
            config=placement_group_tags2(name, 'key1', 'value1updated', 'key2', 'value2'),
            check=compose(
                ExistenceCheck(ADDRESS, {'tags.%': 2, 'tags.key1': 'value1updated', 'tags.key2': 'value2'}),
                check_attr(ADDRESS, 'tags.%', '2'),
                check_attr(ADDRESS, 'tags.key1', 'value1updated'),
                check_attr(ADDRESS, 'tags.key2', 'value2'),
            ),
        ),
        TestStep(
            config=placement_group_tags1(name, 'key2', 'value2'),
            check=compose(
                ExistenceCheck(ADDRESS, {'tags.%': 1, 'tags.key2': 'value2'}),
                check_attr(ADDRESS, 'tags.%', '1'),
                check_attr(ADDRESS, 'tags.key2', 'value2'),
            ),
        ),
    ]))


def test_disappears(acc_runner):
    name = random_with_prefix()
    acc_runner.run(scenario(acc_runner, [
        TestStep(
            config=placement_group_basic(name),
            check=compose(ExistenceCheck(ADDRESS), DisappearsCheck(ADDRESS)),
            expect_non_empty_plan=True,
        ),
    ]))


def test_generated_name_is_unique_per_scenario():
    assert re.match(r"^tf-acc-test-\d{19}$", random_with_prefix())
