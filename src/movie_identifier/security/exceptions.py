"""
Security-related exceptions.
"""


class SecurityError(Exception):
    """Base exception for security violations."""

    pass


class FileValidationError(SecurityError):
    """Raised when an uploaded image fails validation."""

    pass
