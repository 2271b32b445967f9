from typing import Any, Optional

from resource_acctest.domain.core.exceptions import AccTestError


class InfrastructureError(AccTestError):
    """Base exception for infrastructure-related errors."""
    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.details = details


class CredentialsError(InfrastructureError):
    """Raised when AWS credentials cannot be resolved or validated."""
    pass
