"""
Movie Identifier Service: identify a movie from a single screenshot.
"""

from .app import MovieIdentifierApp
from .config import MovieIdentifierConfig
from .config_loader import load_config_from_env
from .extraction import extract
from .image_encoder import load_image
from .schemas import ImageUpload, IdentificationOutcome, ExtractionResult, Source

__all__ = [
    "MovieIdentifierApp",
    "MovieIdentifierConfig",
    "load_config_from_env",
    "extract",
    "load_image",
    "ImageUpload",
    "IdentificationOutcome",
    "ExtractionResult",
    "Source",
]
