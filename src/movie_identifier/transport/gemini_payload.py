"""
Wire format for the Gemini generateContent endpoint.

Request bodies are built as plain dicts; response bodies are validated with
pydantic models that tolerate missing and extra fields.
"""
from typing import List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..exceptions import ResponseFormatError
from ..image_encoder import encode_image
from ..schemas import IdentifyRequest


def build_payload(request: IdentifyRequest) -> dict:
    """
    Build the JSON body for one identify call.
    
    :param request: IdentifyRequest with image bytes and prompts
    :return: JSON-serializable dict
    """
    return {
        "contents": [
            {
                "role": "user",
                "parts": [
                    {"text": request.user_prompt},
                    {
                        "inlineData": {
                            "mimeType": request.mime_type,
                            "data": encode_image(request.image_bytes),
                        }
                    },
                ],
            }
        ],
        "tools": [{"google_search": {}}],
        "systemInstruction": {"parts": [{"text": request.system_prompt}]},
    }


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class WebReference(_WireModel):
    uri: Optional[str] = None
    title: Optional[str] = None


class GroundingAttribution(_WireModel):
    web: Optional[WebReference] = None


class GroundingMetadata(_WireModel):
    grounding_attributions: List[GroundingAttribution] = Field(
        default_factory=list, alias="groundingAttributions"
    )
    grounding_chunks: List[GroundingAttribution] = Field(
        default_factory=list, alias="groundingChunks"
    )


class Part(_WireModel):
    text: Optional[str] = None


class Content(_WireModel):
    parts: List[Part] = Field(default_factory=list)


class Candidate(_WireModel):
    content: Optional[Content] = None
    grounding_metadata: Optional[GroundingMetadata] = Field(
        default=None, alias="groundingMetadata"
    )

    @property
    def text(self) -> str:
        """Text of the first part, or empty string."""
        if self.content and self.content.parts:
            return self.content.parts[0].text or ""
        return ""


class GenerateContentResponse(_WireModel):
    candidates: List[Candidate] = Field(default_factory=list)

    @property
    def first_candidate(self) -> Optional[Candidate]:
        return self.candidates[0] if self.candidates else None


def parse_response(response: httpx.Response) -> GenerateContentResponse:
    """
    Decode a successful response body.
    
    :raises ResponseFormatError: If the body is not JSON or has the wrong shape
    """
    try:
        return GenerateContentResponse.model_validate(response.json())
    except (ValueError, ValidationError) as e:
        raise ResponseFormatError(f"Malformed response from inference endpoint: {e}") from e


def parse_error_message(response: httpx.Response) -> str:
    """Read {error: {message}} from a failed response, falling back to 'Unknown error'."""
    try:
        body = response.json()
    except ValueError:
        return "Unknown error"
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        message = body["error"].get("message")
        if message:
            return str(message)
    return "Unknown error"
