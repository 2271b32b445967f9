"""Application configuration schemas."""
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from resource_acctest.infrastructure.resilience.config import RetryConfig


class LogLevel(str, Enum):
    """Log level enumeration."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogDestination(str, Enum):
    """Log destination enumeration."""
    FILE = "file"
    STDOUT = "stdout"
    BOTH = "both"


class AWSConfig(BaseModel):
    """AWS session and client settings."""

    region: str = Field("us-west-2", description="Region the acceptance tests provision into")
    profile: Optional[str] = Field(None, description="Named profile from the shared credentials file")
    endpoint_url: Optional[str] = Field(None, description="Override endpoint, e.g. for a local emulator")
    request_retry_attempts: int = Field(3, description="botocore retry attempts per API call")
    connection_timeout_ms: int = Field(1000, description="Connect timeout in milliseconds")
    validate_credentials: bool = Field(True, description="Call STS GetCallerIdentity when the client is built")

    @field_validator('request_retry_attempts')
    @classmethod
    def validate_retry_attempts(cls, v: int) -> int:
        if v < 0:
            raise ValueError("request_retry_attempts must be non-negative")
        return v

    @field_validator('connection_timeout_ms')
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("connection_timeout_ms must be positive")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO)
    destination: LogDestination = Field(LogDestination.STDOUT)
    file_path: str = Field("logs/acctest.log", description="Log file used for file destinations")
    max_size_mb: int = Field(10)
    backup_count: int = Field(5)

    @field_validator('level', mode='before')
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v


class AcceptanceConfig(BaseModel):
    """Settings for the verification harness."""

    live: bool = Field(False, description="Run acceptance scenarios against the real AWS API")
    resource_prefix: str = Field("tf-acc-test", description="Prefix for generated resource names")
    create_timeout: float = Field(300.0, description="Maximum wait for a new object to become visible")
    delete_timeout: float = Field(300.0, description="Maximum wait for a deleted object to disappear")
    poll_base_delay: float = Field(1.0, description="First delay of the visibility poll")
    poll_max_delay: float = Field(15.0, description="Largest single delay of the visibility poll")

    @field_validator('resource_prefix')
    @classmethod
    def validate_prefix(cls, v: str) -> str:
        if not v:
            raise ValueError("resource_prefix must not be empty")
        return v

    @field_validator('create_timeout', 'delete_timeout', 'poll_base_delay', 'poll_max_delay')
    @classmethod
    def validate_positive(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Timeouts and delays must be non-negative")
        return v


class AppConfig(BaseModel):
    """Root configuration."""

    aws: AWSConfig = Field(default_factory=AWSConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    acceptance: AcceptanceConfig = Field(default_factory=AcceptanceConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AppConfig':
        return cls.model_validate(data)
