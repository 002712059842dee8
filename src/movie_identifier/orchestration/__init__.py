"""
Orchestration of the identify flow for a session.
"""

from .identification_orchestrator import (
    IdentificationOrchestrator,
    UPLOAD_FIRST_MESSAGE,
    FAILURE_PREFIX,
)

__all__ = ["IdentificationOrchestrator", "UPLOAD_FIRST_MESSAGE", "FAILURE_PREFIX"]
