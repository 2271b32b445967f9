"""Core domain primitives shared by controllers and the harness."""

from .exceptions import (
    AccTestError,
    ConfigurationError,
    IncompleteCreateError,
    InvalidStateTransitionError,
    MismatchError,
    NotFoundError,
    RemoteError,
    ReplacementRequiredError,
    ResourceImportError,
    ResourceStillExistsError,
    ScenarioStepError,
    ValidationError,
)

__all__: list[str] = [
    "AccTestError",
    "ConfigurationError",
    "IncompleteCreateError",
    "InvalidStateTransitionError",
    "MismatchError",
    "NotFoundError",
    "RemoteError",
    "ReplacementRequiredError",
    "ResourceImportError",
    "ResourceStillExistsError",
    "ScenarioStepError",
    "ValidationError",
]
