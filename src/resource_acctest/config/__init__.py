"""Configuration package."""

from .manager import ConfigurationManager, get_config_manager
from .schemas import AcceptanceConfig, AppConfig, AWSConfig, LoggingConfig

__all__: list[str] = [
    "AcceptanceConfig",
    "AppConfig",
    "AWSConfig",
    "ConfigurationManager",
    "LoggingConfig",
    "get_config_manager",
]
