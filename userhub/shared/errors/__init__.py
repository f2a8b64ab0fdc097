from .base import (
    AppError,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    InfrastructureError,
    NotFoundError,
    ValidationError,
)
from .validation import raise_validation_error

__all__ = [
    "AppError",
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "DomainError",
    "InfrastructureError",
    "NotFoundError",
    "ValidationError",
    "raise_validation_error",
]
