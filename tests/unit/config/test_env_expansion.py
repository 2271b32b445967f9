"""Tests for environment variable expansion utilities."""

import os
from unittest.mock import patch

import pytest

from resource_acctest.config.utils.env_expansion import expand_env_vars


@pytest.mark.unit
class TestEnvironmentVariableExpansion:
    """Test environment variable expansion functionality."""

    def test_expand_simple_env_var(self):
        """Test expansion of simple environment variable."""
        with patch.dict(os.environ, {"TEST_VAR": "us-east-2"}):
            assert expand_env_vars("$TEST_VAR") == "us-east-2"

    def test_expand_braced_env_var_with_suffix(self):
        """Test expansion of braced environment variable with suffix."""
        with patch.dict(os.environ, {"TEST_VAR": "/var/log"}):
            assert expand_env_vars("${TEST_VAR}/acctest.log") == "/var/log/acctest.log"

    def test_default_used_when_unset(self):
        """Test ${VAR:default} falls back to the default."""
        with patch.dict(os.environ, {}, clear=True):
            assert expand_env_vars("${ACCTEST_MISSING:tf-acc-test}") == "tf-acc-test"

    def test_default_ignored_when_set(self):
        with patch.dict(os.environ, {"ACCTEST_PREFIX": "ci"}):
            assert expand_env_vars("${ACCTEST_PREFIX:tf-acc-test}") == "ci"

    def test_expand_nonexistent_env_var(self):
        """Test expansion of non-existent environment variable."""
        with patch.dict(os.environ, {}, clear=True):
            assert expand_env_vars("$NONEXISTENT_VAR") == "$NONEXISTENT_VAR"

    def test_expand_nested_values(self):
        """Test expansion in nested dictionaries and lists."""
        with patch.dict(os.environ, {"TEST_VAR": "x"}):
            config = {"aws": {"profile": "$TEST_VAR", "codes": ["${TEST_VAR}1", 3]}, "other": True}
            assert expand_env_vars(config) == {"aws": {"profile": "x", "codes": ["x1", 3]}, "other": True}
