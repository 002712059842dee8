"""
Session state for the identification flow.
"""

from .session_state import (
    Idle,
    Ready,
    Busy,
    Succeeded,
    Failed,
    SessionState,
    SessionStateManager,
)

__all__ = [
    "Idle",
    "Ready",
    "Busy",
    "Succeeded",
    "Failed",
    "SessionState",
    "SessionStateManager",
]
