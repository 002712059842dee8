"""
Security module for validating image uploads before they leave the process.
"""

from .exceptions import SecurityError, FileValidationError
from .file_validator import FileValidator

__all__ = [
    "SecurityError",
    "FileValidationError",
    "FileValidator",
]
