"""
Default upload collaborator: turns a local file into a validated ImageUpload
and encodes image bytes for the JSON transport.
"""
import base64
import logging
from pathlib import Path
from typing import Optional

from .schemas import ImageUpload
from .security import FileValidator, FileValidationError

logger = logging.getLogger(__name__)


def encode_image(data: bytes) -> str:
    """Base64-encode image bytes for the inlineData field."""
    return base64.b64encode(data).decode("ascii")


def load_image(file_path: str, max_size: Optional[int] = None) -> ImageUpload:
    """
    Read and validate an image file from disk.
    
    :param file_path: Path to a .jpg/.jpeg/.png/.webp file
    :param max_size: Optional size limit in bytes
    :return: ImageUpload ready for selection
    :raises FileValidationError: If the file is missing or not an allowed image
    """
    resolved = FileValidator.validate_file_path(file_path)
    mime_type = FileValidator.guess_mime_type(resolved)
    data = Path(resolved).read_bytes()

    is_valid, error = FileValidator.validate_image_bytes(data, mime_type, max_size=max_size)
    if not is_valid:
        raise FileValidationError(error)

    logger.debug(f"Loaded image {resolved} ({mime_type}, {len(data)} bytes)")
    return ImageUpload(filename=Path(resolved).name, mime_type=mime_type, data=data)
