"""
Recovers structured movie fields from free-form model text.

The model is asked for labeled lines ("Title: ...", "Year: ...") but nothing
guarantees it complies, so each field is found independently with a
case-insensitive, single-line "label: value" match. Fields are declared in
FIELD_RULES; adding one means adding a row, not a branch.
"""
import re
from dataclasses import dataclass, replace
from functools import cached_property
from typing import Callable, Optional, Tuple

from ..schemas import DEFAULT_SYNOPSIS, ExtractionResult


def strip_markers(value: str) -> str:
    """Remove markdown emphasis markers and surrounding whitespace."""
    return value.replace("*", "").strip()


@dataclass(frozen=True)
class FieldRule:
    attribute: str
    label: str
    value_pattern: str
    postprocess: Callable[[str], str]

    @cached_property
    def regex(self) -> "re.Pattern":
        # label, optional emphasis around it, colon, then the value on the same line
        return re.compile(
            rf"{self.label}\**[ \t]*:[ \t]*\**[ \t]*({self.value_pattern})",
            re.IGNORECASE,
        )

    def match(self, text: str) -> Optional[str]:
        found = self.regex.search(text)
        if not found:
            return None
        value = self.postprocess(found.group(1))
        return value or None


FIELD_RULES: Tuple[FieldRule, ...] = (
    FieldRule("title", "Title", r"[^\n]+", strip_markers),
    FieldRule("release_year", "Year", r"\d{4}", str.strip),
    FieldRule("main_actors", "Actors", r"[^\n]+", strip_markers),
    FieldRule("synopsis", "Synopsis", r"[^\n]+", strip_markers),
)


def first_line(text: str) -> str:
    """First line of text with markers stripped."""
    return strip_markers(text.split("\n", 1)[0])


def extract(text: Optional[str]) -> ExtractionResult:
    """
    Map raw response text to an ExtractionResult.
    
    Never raises. Without a Title line the default record comes back with
    success=False, whatever else matched.
    
    :param text: Raw model output (None is treated as empty)
    :return: ExtractionResult
    """
    if not text:
        return ExtractionResult()

    found = {}
    for rule in FIELD_RULES:
        value = rule.match(text)
        if value is not None:
            found[rule.attribute] = value

    if "title" not in found:
        return ExtractionResult()

    result = replace(ExtractionResult(), success=True, **found)

    if result.synopsis == DEFAULT_SYNOPSIS:
        result = replace(result, synopsis=first_line(text))

    return result
