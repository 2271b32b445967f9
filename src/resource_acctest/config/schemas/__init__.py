"""Configuration schemas."""

from .app_schema import (
    AcceptanceConfig,
    AppConfig,
    AWSConfig,
    LogDestination,
    LoggingConfig,
    LogLevel,
)

__all__: list[str] = [
    "AcceptanceConfig",
    "AppConfig",
    "AWSConfig",
    "LogDestination",
    "LoggingConfig",
    "LogLevel",
]
