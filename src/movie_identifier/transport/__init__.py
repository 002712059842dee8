"""
Network transport: retry policy, wire format, and the backoff requester.
"""

from .retry_policy import RetryPolicy
from .backoff_requester import BackoffRequester
from .gemini_payload import build_payload, parse_response, GenerateContentResponse, Candidate

__all__ = [
    "RetryPolicy",
    "BackoffRequester",
    "build_payload",
    "parse_response",
    "GenerateContentResponse",
    "Candidate",
]
