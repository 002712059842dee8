from dataclasses import dataclass
from typing import Optional


@dataclass
class MovieIdentifierConfig:
    # Remote inference endpoint
    api_key: Optional[str] = None
    model: str = "gemini-2.5-flash-preview-09-2025"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta/models"
    request_timeout_seconds: float = 60.0

    # Retry / backoff
    retry_max_attempts: int = 5
    retry_base_delay_seconds: float = 1.0
    retry_rejected_requests: bool = True

    # Uploads
    max_upload_bytes: int = 4 * 1024 * 1024

    # Sessions kept in memory (least recently used evicted first)
    max_sessions: int = 1000

    @property
    def endpoint(self) -> str:
        """Full generateContent URL (without the API key)."""
        return f"{self.base_url.rstrip('/')}/{self.model}:generateContent"
