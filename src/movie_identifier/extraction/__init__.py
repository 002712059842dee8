"""
Pure functions turning a model response into structured movie data.
"""

from .response_extractor import extract, FieldRule, FIELD_RULES
from .grounding import collect_sources

__all__ = ["extract", "FieldRule", "FIELD_RULES", "collect_sources"]
