"""Configuration loading for the acceptance-test toolkit."""
from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from pydantic import ValidationError as PydanticValidationError

from resource_acctest.config.schemas import AppConfig
from resource_acctest.config.utils.env_expansion import expand_env_vars
from resource_acctest.domain.core.exceptions import ConfigurationError
from resource_acctest.helpers.logger import get_logger

logger = get_logger(__name__)

CONFIG_FILE_ENV = "ACCTEST_CONFIG"

# Environment variable -> (section, key); earlier entries lose to later ones.
ENV_OVERRIDES: Tuple[Tuple[str, Tuple[str, str]], ...] = (
    ("AWS_DEFAULT_REGION", ("aws", "region")),
    ("AWS_REGION", ("aws", "region")),
    ("AWS_PROFILE", ("aws", "profile")),
    ("ACCTEST_ENDPOINT_URL", ("aws", "endpoint_url")),
    ("ACCTEST_REQUEST_RETRY_ATTEMPTS", ("aws", "request_retry_attempts")),
    ("ACCTEST_LOG_LEVEL", ("logging", "level")),
    ("ACCTEST_LOG_DESTINATION", ("logging", "destination")),
    ("ACCTEST_LOG_FILE", ("logging", "file_path")),
    ("ACCTEST_RETRY_MAX_ATTEMPTS", ("retry", "max_attempts")),
    ("ACCTEST_RETRY_BASE_DELAY", ("retry", "base_delay")),
    ("ACCTEST_RETRY_MAX_DELAY", ("retry", "max_delay")),
    ("ACCTEST_LIVE", ("acceptance", "live")),
    ("ACCTEST_RESOURCE_PREFIX", ("acceptance", "resource_prefix")),
    ("ACCTEST_CREATE_TIMEOUT", ("acceptance", "create_timeout")),
    ("ACCTEST_DELETE_TIMEOUT", ("acceptance", "delete_timeout")),
)


class ConfigurationManager:
    """
    Loads the application configuration once and caches it.

    Sources, lowest precedence first: schema defaults, the YAML file given
    explicitly or through ``ACCTEST_CONFIG`` (with ``$VAR`` / ``${VAR:default}``
    references expanded), then ``ENV_OVERRIDES``.
    """

    def __init__(self, config_file: Optional[str] = None):
        self._config_file = config_file or os.environ.get(CONFIG_FILE_ENV)
        self._lock = threading.RLock()
        self._app_config: Optional[AppConfig] = None

    @property
    def app_config(self) -> AppConfig:
        if self._app_config is None:
            with self._lock:
                if self._app_config is None:
                    self._app_config = self._load_app_config()
        return self._app_config

    def reload(self) -> AppConfig:
        with self._lock:
            self._app_config = None
        return self.app_config

    def _load_app_config(self) -> AppConfig:
        data = self.load_from_file(self._config_file) if self._config_file else {}
        data = self.apply_environment_overrides(data)
        try:
            config = AppConfig.from_dict(data)
        except PydanticValidationError as e:
            errors = {'.'.join(str(p) for p in err['loc']): err['msg'] for err in e.errors()}
            raise ConfigurationError("Invalid acceptance-test configuration", errors) from e

        logger.debug("Configuration loaded", config_file=self._config_file,
                     region=config.aws.region, live=config.acceptance.live)
        return config

    @staticmethod
    def load_from_file(path: str) -> Dict[str, Any]:
        config_path = Path(path)
        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse configuration file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {path} must contain a mapping")
        return expand_env_vars(data)

    @staticmethod
    def apply_environment_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
        result = {section: dict(values) for section, values in data.items() if isinstance(values, dict)}
        for env_name, (section, key) in ENV_OVERRIDES:
            value = os.environ.get(env_name)
            if value is None or value == "":
                continue
            result.setdefault(section, {})[key] = value
        return result


_default_manager: Optional[ConfigurationManager] = None
_default_lock = threading.Lock()


def get_config_manager() -> ConfigurationManager:
    """Process-wide manager used by the pytest fixtures."""
    global _default_manager
    if _default_manager is None:
        with _default_lock:
            if _default_manager is None:
                _default_manager = ConfigurationManager()
    return _default_manager
