"""Exception handling module."""

from gitpulse.core.exceptions.base import (
    ConfigurationError,
    DataValidationError,
    GitPulseError,
    NetworkError,
    ResourceNotFoundError,
    SourceError,
)
from gitpulse.core.exceptions.codes import ErrorCode

__all__ = [
    "GitPulseError",
    "SourceError",
    "NetworkError",
    "ResourceNotFoundError",
    "DataValidationError",
    "ConfigurationError",
    "ErrorCode",
]
