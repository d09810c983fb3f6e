"""Exit codes shared by CLI commands."""

SYSTEM_EXIT_CODE = 1
VALIDATION_EXIT_CODE = 2
SOURCE_EXIT_CODE = 3
NO_DATA_EXIT_CODE = 4

__all__ = ["SYSTEM_EXIT_CODE", "VALIDATION_EXIT_CODE", "SOURCE_EXIT_CODE", "NO_DATA_EXIT_CODE"]
