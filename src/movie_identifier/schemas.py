from dataclasses import dataclass, field, asdict
from typing import List, Dict, Any


DEFAULT_TITLE = "Unknown Movie"
DEFAULT_RELEASE_YEAR = "N/A"
DEFAULT_MAIN_ACTORS = "N/A"
DEFAULT_SYNOPSIS = (
    "Zilla was unable to identify a confident match for this scene. "
    "Please try a clearer image."
)


@dataclass(frozen=True)
class ImageUpload:
    """An already-validated image selected by the user."""
    filename: str
    mime_type: str
    data: bytes = field(repr=False)


@dataclass(frozen=True)
class IdentifyRequest:
    """Everything needed for one identify call. Built once, never mutated."""
    image_bytes: bytes = field(repr=False)
    mime_type: str
    user_prompt: str
    system_prompt: str


@dataclass(frozen=True)
class Source:
    uri: str
    title: str

    def is_valid(self) -> bool:
        return bool(self.uri) and bool(self.title)


@dataclass(frozen=True)
class ExtractionResult:
    title: str = DEFAULT_TITLE
    release_year: str = DEFAULT_RELEASE_YEAR
    main_actors: str = DEFAULT_MAIN_ACTORS
    synopsis: str = DEFAULT_SYNOPSIS
    success: bool = False


@dataclass(frozen=True)
class IdentificationOutcome:
    title: str
    release_year: str
    main_actors: str
    synopsis: str
    success: bool
    sources: List[Source] = field(default_factory=list)

    @classmethod
    def from_extraction(cls, result: ExtractionResult, sources: List[Source]) -> "IdentificationOutcome":
        return cls(
            title=result.title,
            release_year=result.release_year,
            main_actors=result.main_actors,
            synopsis=result.synopsis,
            success=result.success,
            sources=list(sources),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
