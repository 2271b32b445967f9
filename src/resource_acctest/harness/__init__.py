"""Verification harness: configurations, a small plan/apply engine, checks and scenarios."""

from .checks import (
    Check,
    CheckContext,
    DestroyCheck,
    DisappearsCheck,
    ExistenceCheck,
    LiveLookup,
    check_attr,
    check_attr_regex,
    check_regional_arn,
    check_regional_arn_exact,
    compose,
)
from .configuration import Configuration, ResourceBlock
from .engine import Engine, Plan, PlanAction, PlannedChange
from .naming import random_with_prefix
from .precheck import error_check, pre_check
from .state import State
from .testcase import TestCase, TestRunner, TestStep, run_test

__all__: list[str] = [
    "Check",
    "CheckContext",
    "Configuration",
    "DestroyCheck",
    "DisappearsCheck",
    "Engine",
    "ExistenceCheck",
    "LiveLookup",
    "Plan",
    "PlanAction",
    "PlannedChange",
    "ResourceBlock",
    "State",
    "TestCase",
    "TestRunner",
    "TestStep",
    "check_attr",
    "check_attr_regex",
    "check_regional_arn",
    "check_regional_arn_exact",
    "compose",
    "error_check",
    "pre_check",
    "random_with_prefix",
    "run_test",
]
