"""
Upload validation for images sent to the inference endpoint.

OOP: Single Responsibility - Only handles file validation.
"""

import io
from pathlib import Path
from typing import Tuple, Optional

from PIL import Image, UnidentifiedImageError

from .exceptions import FileValidationError


class FileValidator:
    """
    Validates uploaded images before they are encoded and sent.
    
    Checks MIME type, size, and that the bytes really decode as the claimed format.
    """

    MAX_FILE_SIZE = 4 * 1024 * 1024
    MAX_DIMENSION = 10000
    ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp"}
    ALLOWED_MIME_TYPES = {"image/jpeg", "image/png", "image/webp"}
    # Pillow format name -> MIME type
    FORMAT_MIME_TYPES = {"JPEG": "image/jpeg", "PNG": "image/png", "WEBP": "image/webp"}
    EXTENSION_MIME_TYPES = {
        ".jpg": "image/jpeg",
        ".jpeg": "image/jpeg",
        ".png": "image/png",
        ".webp": "image/webp",
    }

    @staticmethod
    def validate_image_bytes(
        data: bytes,
        mime_type: str,
        max_size: Optional[int] = None,
    ) -> Tuple[bool, Optional[str]]:
        """
        Validate an in-memory image.
        
        :param data: Raw image bytes
        :param mime_type: MIME type claimed by the uploader
        :param max_size: Size limit in bytes (defaults to MAX_FILE_SIZE)
        :return: Tuple of (is_valid, error_message)
        """
        max_size = max_size or FileValidator.MAX_FILE_SIZE

        if mime_type not in FileValidator.ALLOWED_MIME_TYPES:
            allowed = ", ".join(sorted(FileValidator.ALLOWED_MIME_TYPES))
            return False, f"MIME type '{mime_type}' not allowed. Allowed: {allowed}"

        if not data:
            return False, "File is empty"

        if len(data) > max_size:
            return False, f"File size {len(data)} bytes exceeds maximum {max_size} bytes"

        try:
            with Image.open(io.BytesIO(data)) as img:
                detected = img.format
                img.verify()

            with Image.open(io.BytesIO(data)) as img:
                width, height = img.size
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            return False, f"Image validation failed: {str(e)}"

        detected_mime = FileValidator.FORMAT_MIME_TYPES.get(detected)
        if detected_mime is None:
            return False, f"Image type '{detected}' not allowed. Allowed: JPEG, PNG, WEBP"

        if detected_mime != mime_type:
            return False, f"File content is {detected_mime} but was uploaded as {mime_type}"

        if width > FileValidator.MAX_DIMENSION or height > FileValidator.MAX_DIMENSION:
            return False, (
                f"Image dimensions too large "
                f"(max {FileValidator.MAX_DIMENSION}x{FileValidator.MAX_DIMENSION})"
            )

        if width == 0 or height == 0:
            return False, "Image has invalid dimensions"

        return True, None

    @staticmethod
    def guess_mime_type(filename: str) -> Optional[str]:
        """Map a filename extension to an allowed MIME type, or None."""
        return FileValidator.EXTENSION_MIME_TYPES.get(Path(filename).suffix.lower())

    @staticmethod
    def validate_file_path(file_path: str) -> str:
        """
        Validate a local image path.
        
        :param file_path: File path to validate
        :return: Validated absolute path
        :raises FileValidationError: If path is missing or has a disallowed extension
        """
        path = Path(file_path).resolve()

        if not path.is_file():
            raise FileValidationError(f"File does not exist: {file_path}")

        if path.suffix.lower() not in FileValidator.ALLOWED_EXTENSIONS:
            allowed = ", ".join(sorted(FileValidator.ALLOWED_EXTENSIONS))
            raise FileValidationError(
                f"File extension '{path.suffix}' not allowed. Allowed: {allowed}"
            )

        return str(path)
