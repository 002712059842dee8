"""
Session state management.

A session is always in exactly one of five states. Each state is a frozen value,
so the orchestrator moves between them by replacing the whole state.
"""
import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Dict, Union

from ..schemas import IdentificationOutcome, ImageUpload

logger = logging.getLogger(__name__)

DEFAULT_MAX_SESSIONS = 1000


@dataclass(frozen=True)
class Idle:
    """No image selected."""
    name = "idle"

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.name}


@dataclass(frozen=True)
class Ready:
    """Image selected, not yet submitted."""
    image: ImageUpload
    name = "ready"

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.name, "image": _image_summary(self.image)}


@dataclass(frozen=True)
class Busy:
    """Identification request in flight."""
    image: ImageUpload
    name = "busy"

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.name, "image": _image_summary(self.image)}


@dataclass(frozen=True)
class Succeeded:
    outcome: IdentificationOutcome
    name = "succeeded"

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.name, "outcome": self.outcome.to_dict()}


@dataclass(frozen=True)
class Failed:
    message: str
    name = "failed"

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.name, "message": self.message}


SessionState = Union[Idle, Ready, Busy, Succeeded, Failed]


def _image_summary(image: ImageUpload) -> Dict[str, Any]:
    return {"filename": image.filename, "mime_type": image.mime_type, "size": len(image.data)}


class SessionStateManager:
    """
    Holds the current SessionState per session ID.
    
    A session with no entry is Idle, so only sessions holding an image, an
    outcome or an error take up memory. At most max_sessions entries are kept;
    the least recently used one is evicted first, never one that is Busy.
    
    lock serializes check-then-set sequences (e.g. the busy guard) across
    threads.
    """
    
    def __init__(self, max_sessions: int = DEFAULT_MAX_SESSIONS):
        """
        :param max_sessions: Upper bound on stored sessions
        """
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self.max_sessions = max_sessions
        self.lock = threading.RLock()
        self._states: "OrderedDict[str, SessionState]" = OrderedDict()
    
    def __len__(self) -> int:
        return len(self._states)
    
    def get_state(self, session_id: str) -> SessionState:
        """
        Get the state for a session.
        
        :param session_id: Session identifier
        :return: Current SessionState (Idle for unknown sessions, not stored)
        """
        with self.lock:
            state = self._states.get(session_id)
            if state is None:
                return Idle()
            self._states.move_to_end(session_id)
            return state
    
    def set_state(self, session_id: str, state: SessionState) -> None:
        """Replace the state for a session. Idle drops the entry."""
        with self.lock:
            if isinstance(state, Idle):
                self._states.pop(session_id, None)
                return
            self._states[session_id] = state
            self._states.move_to_end(session_id)
            self._evict()
    
    def clear_state(self, session_id: str) -> None:
        """Forget a session entirely."""
        with self.lock:
            self._states.pop(session_id, None)
    
    def clear_all(self) -> None:
        """Clear all session states."""
        with self.lock:
            self._states.clear()
    
    def _evict(self) -> None:
        while len(self._states) > self.max_sessions:
            victim = next(
                (sid for sid, s in self._states.items() if not isinstance(s, Busy)),
                None,
            )
            if victim is None:
                return
            del self._states[victim]
            logger.info(f"Evicted session {victim} ({len(self._states)} remaining)")
