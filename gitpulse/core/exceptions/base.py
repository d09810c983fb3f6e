"""gitpulse core exception classes."""

from typing import Any

from gitpulse.core.exceptions.codes import ErrorCode


class GitPulseError(Exception):
    """Base exception for gitpulse."""

    def __init__(
        self,
        message: str,
        error_code: str = ErrorCode.GENERAL_ERROR.value,
        details: dict[str, Any] | None = None,
    ):
        """Initialise the exception.

        Args:
            message: Human readable message
            error_code: Machine readable error code
            details: Extra context
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_payload(self) -> dict[str, Any]:
        """Return a serializable payload representing the error."""

        return {"code": self.error_code, "message": self.message, "details": dict(self.details)}


class SourceError(GitPulseError):
    """Dataset retrieval failure."""

    def __init__(
        self,
        message: str,
        source_name: str,
        error_code: str = ErrorCode.SOURCE_ERROR.value,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, error_code, details)
        self.source_name = source_name


class NetworkError(SourceError):
    """Transport failure or unexpected HTTP status."""

    def __init__(
        self,
        message: str,
        source_name: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if status_code is not None:
            super_details["status_code"] = status_code
        super().__init__(message, source_name, ErrorCode.NETWORK_ERROR.value, super_details)
        self.status_code = status_code


class ResourceNotFoundError(SourceError):
    """A dataset does not exist at its expected location."""

    def __init__(
        self,
        message: str,
        source_name: str,
        resource: str,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        super_details["resource"] = resource
        super().__init__(message, source_name, ErrorCode.RESOURCE_NOT_FOUND.value, super_details)
        self.resource = resource


class DataValidationError(GitPulseError):
    """Invalid user supplied value."""

    def __init__(
        self,
        message: str,
        validation_errors: dict[str, Any] | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if validation_errors:
            super_details["validation_errors"] = validation_errors
        super().__init__(message, ErrorCode.VALIDATION_ERROR.value, super_details)
        self.validation_errors = validation_errors or {}


class ConfigurationError(GitPulseError):
    """Invalid configuration file or environment value."""

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if setting:
            super_details["setting"] = setting
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR.value, super_details)
