"""Value objects for the resource types under test."""
import re
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

ARN_PATTERN = re.compile(r"^arn:[^:]+:[^:]+:[^:]*:[^:]*:.+$")
MAX_RETENTION_DAYS = 36500


class StorageClass(str, Enum):
    """Storage class of a Storage Gateway tape pool."""
    GLACIER = "GLACIER"
    DEEP_ARCHIVE = "DEEP_ARCHIVE"


class RetentionLockType(str, Enum):
    """Retention lock applied to tapes archived in a pool."""
    NONE = "NONE"
    GOVERNANCE = "GOVERNANCE"
    COMPLIANCE = "COMPLIANCE"


class PlacementStrategy(str, Enum):
    """EC2 placement group strategy."""
    CLUSTER = "cluster"
    SPREAD = "spread"
    PARTITION = "partition"


class SpreadLevel(str, Enum):
    """Spread level for spread placement groups."""
    HOST = "host"
    RACK = "rack"


class RetentionPolicy(BaseModel):
    """Lock type plus retention period for a tape pool.

    A pool without a lock carries no retention period, so ``time_in_days``
    must be zero whenever ``lock_type`` is ``NONE``.
    """
    model_config = ConfigDict(frozen=True)

    lock_type: RetentionLockType = RetentionLockType.NONE
    time_in_days: int = Field(0, ge=0, le=MAX_RETENTION_DAYS)

    @model_validator(mode='after')
    def validate_days_for_lock_type(self) -> 'RetentionPolicy':
        if self.lock_type == RetentionLockType.NONE and self.time_in_days != 0:
            raise ValueError(
                "retention_lock_time_in_days must be 0 when retention_lock_type is NONE, "
                f"got {self.time_in_days}"
            )
        return self


class AWSARN(BaseModel):
    """AWS ARN with its components parsed out."""
    model_config = ConfigDict(frozen=True)

    value: str
    partition: Optional[str] = None
    service: Optional[str] = None
    region: Optional[str] = None
    account_id: Optional[str] = None
    resource: Optional[str] = None

    @field_validator('value')
    @classmethod
    def validate_arn(cls, v: str) -> str:
        if not ARN_PATTERN.match(v):
            raise ValueError(f"Invalid AWS ARN format: {v}")
        return v

    def model_post_init(self, __context: Any) -> None:
        """Parse ARN components after initialization."""
        parts = self.value.split(':')
        object.__setattr__(self, 'partition', parts[1])
        object.__setattr__(self, 'service', parts[2])
        object.__setattr__(self, 'region', parts[3])
        object.__setattr__(self, 'account_id', parts[4])
        object.__setattr__(self, 'resource', ':'.join(parts[5:]))

    @classmethod
    def build(cls, partition: str, service: str, region: str, account_id: str, resource: str) -> 'AWSARN':
        return cls(value=f"arn:{partition}:{service}:{region}:{account_id}:{resource}")

    def __str__(self) -> str:
        return self.value
