"""Standardised error codes."""

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes carried by :class:`GitPulseError` instances."""

    GENERAL_ERROR = "GENERAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    SOURCE_ERROR = "SOURCE_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    NO_DATA = "NO_DATA"


__all__ = ["ErrorCode"]
