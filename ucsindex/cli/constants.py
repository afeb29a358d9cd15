"""Process exit codes shared by CLI commands."""

VALIDATION_EXIT_CODE = 10
NOT_COMPUTABLE_EXIT_CODE = 30
SYSTEM_EXIT_CODE = 50

__all__ = ["NOT_COMPUTABLE_EXIT_CODE", "SYSTEM_EXIT_CODE", "VALIDATION_EXIT_CODE"]
