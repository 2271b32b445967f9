"""Resource descriptors: the declared schema of one resource type."""
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from resource_acctest.domain.core.exceptions import ValidationError


class AttributeType(str, Enum):
    """Attribute value types understood by the descriptor."""
    STRING = "string"
    INT = "int"
    MAP = "map"


@dataclass(frozen=True)
class AttributeSchema:
    """Schema of a single resource attribute."""
    name: str
    type: AttributeType = AttributeType.STRING
    required: bool = False
    default: Any = None
    force_new: bool = False
    computed: bool = False
    # Optional, but assigned by the provider when left unset.
    optional_computed: bool = False
    validator: Optional[Callable[[Any], Any]] = None
    description: str = ""

    @property
    def optional(self) -> bool:
        return not self.required


@dataclass(frozen=True)
class AttributeChange:
    """Old and new value of one changed attribute."""
    name: str
    old: Any
    new: Any
    force_new: bool


@dataclass(frozen=True)
class ResourceDiff:
    """Attribute-level difference between an instance and a configuration."""
    changes: Mapping[str, AttributeChange] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.changes

    @property
    def requires_replacement(self) -> bool:
        return any(change.force_new for change in self.changes.values())

    @property
    def replacement_attributes(self) -> List[str]:
        return sorted(name for name, change in self.changes.items() if change.force_new)

    @property
    def in_place_attributes(self) -> List[str]:
        return sorted(name for name, change in self.changes.items() if not change.force_new)


def enum_validator(enum_type: type) -> Callable[[Any], str]:
    """Build a validator that accepts members (or values) of ``enum_type``."""
    def validate(value: Any) -> str:
        try:
            return enum_type(value).value
        except ValueError:
            valid = ', '.join(member.value for member in enum_type)
            raise ValueError(f"expected one of [{valid}], got {value!r}")
    return validate


def int_range_validator(minimum: int, maximum: int) -> Callable[[Any], int]:
    """Build a validator for an inclusive integer range."""
    def validate(value: Any) -> int:
        if value < minimum or value > maximum:
            raise ValueError(f"expected to be in the range ({minimum} - {maximum}), got {value}")
        return value
    return validate


class ResourceDescriptor:
    """
    Declared schema for one resource type.

    The attribute mapping is frozen at construction. Cross-attribute rules
    are passed as ``rules``: callables that receive the normalized
    configuration and raise ``ValueError`` when it is inconsistent.
    """

    def __init__(self, resource_type: str, attributes: Iterable[AttributeSchema],
                 identifier_attribute: str,
                 rules: Optional[Iterable[Callable[[Dict[str, Any]], None]]] = None):
        schema: Dict[str, AttributeSchema] = {}
        for attribute in attributes:
            if attribute.name in schema:
                raise ValidationError(
                    f"Duplicate attribute '{attribute.name}' in schema for {resource_type}"
                )
            schema[attribute.name] = attribute

        if identifier_attribute not in schema:
            raise ValidationError(
                f"Identifier attribute '{identifier_attribute}' is not declared for {resource_type}"
            )

        self._resource_type = resource_type
        self._attributes = MappingProxyType(schema)
        self._identifier_attribute = identifier_attribute
        self._rules = tuple(rules or ())

    @property
    def resource_type(self) -> str:
        return self._resource_type

    @property
    def attributes(self) -> Mapping[str, AttributeSchema]:
        return self._attributes

    @property
    def identifier_attribute(self) -> str:
        return self._identifier_attribute

    @property
    def configurable(self) -> List[str]:
        """Names of attributes a configuration may set."""
        return [name for name, attr in self._attributes.items() if not attr.computed]

    def apply_defaults(self, config: Mapping[str, Any]) -> Dict[str, Any]:
        result = dict(config)
        for name, attr in self._attributes.items():
            if attr.computed or result.get(name) is not None:
                continue
            if attr.default is not None:
                result[name] = dict(attr.default) if isinstance(attr.default, Mapping) else attr.default
        return result

    def validate(self, config: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Validate a configuration and return it normalized with defaults applied.

        Raises:
            ValidationError: With every problem found, keyed by attribute name
        """
        errors: Dict[str, str] = {}
        normalized: Dict[str, Any] = {}

        for name in config:
            if name not in self._attributes:
                errors[name] = "unknown attribute"
            elif self._attributes[name].computed and config[name] is not None:
                errors[name] = "attribute is computed and cannot be set"

        for name, value in self.apply_defaults(config).items():
            attr = self._attributes.get(name)
            if attr is None or attr.computed or value is None:
                continue
            try:
                normalized[name] = self._coerce(attr, value)
            except (TypeError, ValueError) as e:
                errors[name] = str(e)

        for name, attr in self._attributes.items():
            if attr.required and normalized.get(name) is None and name not in errors:
                errors[name] = "required attribute is missing"

        if not errors:
            for rule in self._rules:
                try:
                    rule(normalized)
                except PydanticValidationError as e:
                    errors[rule.__name__] = "; ".join(error['msg'] for error in e.errors())
                except ValueError as e:
                    errors[rule.__name__] = str(e)

        if errors:
            raise ValidationError(f"Invalid configuration for {self._resource_type}", errors)

        return normalized

    def _coerce(self, attr: AttributeSchema, value: Any) -> Any:
        if isinstance(value, Enum):
            value = value.value

        if attr.type == AttributeType.STRING:
            if not isinstance(value, str):
                raise TypeError(f"expected string, got {type(value).__name__}")
        elif attr.type == AttributeType.INT:
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"expected int, got {type(value).__name__}")
        elif attr.type == AttributeType.MAP:
            if not isinstance(value, Mapping):
                raise TypeError(f"expected map, got {type(value).__name__}")
            value = dict(value)

        if attr.validator is not None:
            value = attr.validator(value)
        return value

    def diff(self, current: Mapping[str, Any], config: Mapping[str, Any]) -> ResourceDiff:
        """Compare live attributes against a normalized configuration."""
        changes: Dict[str, AttributeChange] = {}
        for name, attr in self._attributes.items():
            if attr.computed:
                continue
            old = current.get(name)
            new = config.get(name)
            if attr.optional_computed and new is None:
                continue
            if attr.type == AttributeType.MAP:
                old, new = dict(old or {}), dict(new or {})
            if old != new:
                changes[name] = AttributeChange(name=name, old=old, new=new, force_new=attr.force_new)
        return ResourceDiff(changes=changes)
