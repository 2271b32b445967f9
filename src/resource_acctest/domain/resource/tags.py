"""Tag sets and tag diffs.

A tag set is an unordered string-to-string mapping. Updating a live object
from tag set ``old`` to tag set ``new`` is expressed as a :class:`TagDiff`:
every key in ``upsert`` is written, every key in ``remove`` is deleted, and
the result is exactly ``new``.
"""
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

TAG_KEY_MAX_LENGTH = 128
TAG_VALUE_MAX_LENGTH = 256
RESERVED_PREFIX = re.compile(r"^aws:", re.IGNORECASE)


class TagDiff(BaseModel):
    """Changes needed to turn one tag set into another."""
    model_config = ConfigDict(frozen=True)

    upsert: Dict[str, str] = Field(default_factory=dict)
    remove: List[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.upsert and not self.remove


class TagSet(BaseModel):
    """Key/value metadata attached to a resource."""
    model_config = ConfigDict(frozen=True)

    values: Dict[str, str] = Field(default_factory=dict)

    @field_validator('values')
    @classmethod
    def validate_tags(cls, v: Dict[str, str]) -> Dict[str, str]:
        for key, value in v.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise ValueError("AWS tags must be strings")
            if not key:
                raise ValueError("AWS tag keys must not be empty")
            if len(key) > TAG_KEY_MAX_LENGTH:
                raise ValueError(f"AWS tag key length exceeds limit of {TAG_KEY_MAX_LENGTH}: {key}")
            if len(value) > TAG_VALUE_MAX_LENGTH:
                raise ValueError(f"AWS tag value length exceeds limit of {TAG_VALUE_MAX_LENGTH}: {key}")
            if RESERVED_PREFIX.match(key):
                raise ValueError(f"AWS tag keys may not use the reserved 'aws:' prefix: {key}")
        return v

    @classmethod
    def of(cls, tags: Optional[Mapping[str, str]] = None) -> 'TagSet':
        return cls(values=dict(tags or {}))

    @classmethod
    def from_aws(cls, tags: Optional[Iterable[Dict[str, Any]]]) -> 'TagSet':
        """Build from the AWS ``[{"Key": .., "Value": ..}]`` format."""
        return cls(values={tag['Key']: tag.get('Value', '') for tag in tags or []})

    def to_aws(self) -> List[Dict[str, str]]:
        """Convert to AWS API format."""
        return [{'Key': k, 'Value': v} for k, v in self.values.items()]

    def to_dict(self) -> Dict[str, str]:
        return dict(self.values)

    @staticmethod
    def diff(old: 'TagSet', new: 'TagSet') -> TagDiff:
        upsert = {k: v for k, v in new.values.items() if old.values.get(k) != v}
        remove = sorted(k for k in old.values if k not in new.values)
        return TagDiff(upsert=upsert, remove=remove)

    def apply(self, diff: TagDiff) -> 'TagSet':
        values = {k: v for k, v in self.values.items() if k not in diff.remove}
        values.update(diff.upsert)
        return TagSet(values=values)

    def __len__(self) -> int:
        return len(self.values)

    def __bool__(self) -> bool:
        return bool(self.values)


def tags_validator(value: Mapping[str, Any]) -> Dict[str, str]:
    """Attribute validator for tag maps; raises ``ValueError`` on invalid tags."""
    return TagSet.of(value).to_dict()
