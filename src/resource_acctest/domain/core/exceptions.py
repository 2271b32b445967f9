# src/resource_acctest/domain/core/exceptions.py
from typing import Any, Dict, List, Optional


class AccTestError(Exception):
    """Base exception for all resource acceptance-test errors."""
    pass


class ValidationError(AccTestError):
    """Raised when a configuration fails validation before any remote call."""
    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if isinstance(self.details, dict) and self.details:
            reasons = "; ".join(f"{key}: {value}" for key, value in self.details.items())
            return f"{self.message}: {reasons}"
        return self.message


class RemoteError(AccTestError):
    """Raised when a cloud API call fails."""
    def __init__(self, operation: str, message: str, resource_type: Optional[str] = None,
                 identifier: Optional[str] = None, code: Optional[str] = None,
                 cause: Optional[BaseException] = None):
        context = resource_type or "resource"
        if identifier:
            context = f"{context} ({identifier})"
        super().__init__(f"{operation} {context} failed: {message}")
        self.operation = operation
        self.resource_type = resource_type
        self.identifier = identifier
        self.code = code
        self.cause = cause


class NotFoundError(RemoteError):
    """Raised when the remote API reports no matching object."""
    def __init__(self, resource_type: str, identifier: str, operation: str = "read",
                 code: Optional[str] = None, cause: Optional[BaseException] = None):
        super().__init__(
            operation,
            "not found",
            resource_type=resource_type,
            identifier=identifier,
            code=code,
            cause=cause,
        )


class MismatchError(AccTestError):
    """Raised when a live attribute value differs from the expected value."""
    def __init__(self, address: str, key: str, expected: Any, actual: Any):
        super().__init__(f"{address}: attribute '{key}' expected {expected!r}, got {actual!r}")
        self.address = address
        self.key = key
        self.expected = expected
        self.actual = actual


class ResourceImportError(AccTestError):
    """Raised when an import cannot reconstruct every schema attribute."""
    def __init__(self, resource_type: str, identifier: str, missing: Optional[List[str]] = None,
                 cause: Optional[BaseException] = None):
        message = f"cannot import {resource_type} {identifier}"
        if missing:
            message += f": missing attributes {', '.join(sorted(missing))}"
        elif cause is not None:
            message += f": {cause}"
        super().__init__(message)
        self.resource_type = resource_type
        self.identifier = identifier
        self.missing = missing or []
        self.cause = cause


class ReplacementRequiredError(AccTestError):
    """Raised when an update touches attributes that force replacement."""
    def __init__(self, resource_type: str, identifier: str, attributes: List[str]):
        super().__init__(
            f"{resource_type} {identifier} must be replaced to change: {', '.join(attributes)}"
        )
        self.resource_type = resource_type
        self.identifier = identifier
        self.attributes = attributes


class InvalidStateTransitionError(AccTestError):
    """Raised when attempting an invalid lifecycle transition."""
    def __init__(self, current_state: str, attempted_state: str):
        super().__init__(
            f"Cannot transition from {current_state} to {attempted_state}"
        )
        self.current_state = current_state
        self.attempted_state = attempted_state


class ScenarioStepError(AccTestError):
    """Raised when a test step fails; wraps the underlying cause."""
    def __init__(self, step: int, message: str, cause: Optional[BaseException] = None):
        super().__init__(f"Step {step}: {message}")
        self.step = step
        self.cause = cause


class ConfigurationError(AccTestError):
    """Raised when there's an issue with configuration."""
    def __init__(self, message: str, errors: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.errors = errors or {}


class ResourceStillExistsError(AccTestError):
    """Raised when an object outlives the scenario that created it."""
    def __init__(self, resource_type: str, identifier: str):
        super().__init__(f"{resource_type} {identifier} still exists")
        self.resource_type = resource_type
        self.identifier = identifier


class IncompleteCreateError(AccTestError):
    """
    Raised when a remote create succeeded but the object never became usable.

    ``instance`` carries the identifier of the object that now exists
    remotely so the caller can track and delete it.
    """
    def __init__(self, instance: Any, cause: BaseException):
        super().__init__(
            f"{instance.resource_type} {instance.identifier} was created but is not usable: {cause}"
        )
        self.instance = instance
        self.resource_type = instance.resource_type
        self.identifier = instance.identifier
        self.cause = cause
