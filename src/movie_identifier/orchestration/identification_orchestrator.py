"""
Identification orchestrator.

Drives one session through the identify flow:
1. select/clear an image (Idle <-> Ready)
2. submit: build the request, send it through the backoff requester (Busy)
3. extract fields and sources from the response text
4. land in Succeeded or Failed

State changes are the only observable effect; network I/O is delegated to the
requester.
"""

import logging
from typing import Optional

from ..config import MovieIdentifierConfig
from ..exceptions import (
    InvalidTransitionError,
    MovieIdentifierError,
    NoMatchError,
    SessionBusyError,
)
from ..extraction import collect_sources, extract
from ..extraction.response_extractor import strip_markers
from ..memory import Busy, Failed, Idle, Ready, SessionState, SessionStateManager, Succeeded
from ..prompts import SYSTEM_PROMPT, USER_QUERY
from ..schemas import ExtractionResult, IdentificationOutcome, IdentifyRequest, ImageUpload
from ..transport import BackoffRequester, build_payload, parse_response

logger = logging.getLogger(__name__)

UPLOAD_FIRST_MESSAGE = "Please upload a movie screenshot first."
FAILURE_PREFIX = "Identification Failed"


class IdentificationOrchestrator:
    """
    State machine for a single session.
    
    Idle --select--> Ready --submit--> Busy --> Succeeded | Failed
    Succeeded/Failed --select--> Ready; any state but Busy --clear--> Idle.
    """
    
    def __init__(
        self,
        requester: BackoffRequester,
        config: MovieIdentifierConfig,
        session_id: str = "default",
        state_manager: Optional[SessionStateManager] = None,
        system_prompt: str = SYSTEM_PROMPT,
        user_prompt: str = USER_QUERY,
    ):
        """
        :param requester: BackoffRequester used for the identify call
        :param config: MovieIdentifierConfig (endpoint)
        :param session_id: Key of this session in the state manager
        :param state_manager: Shared SessionStateManager (a private one if omitted)
        :param system_prompt: System instruction sent with every request
        :param user_prompt: User query sent with every request
        """
        self._requester = requester
        self._config = config
        self.session_id = session_id
        self._states = state_manager if state_manager is not None else SessionStateManager()
        self._system_prompt = system_prompt
        self._user_prompt = user_prompt
    
    @property
    def state(self) -> SessionState:
        return self._states.get_state(self.session_id)
    
    def _transition(self, new_state: SessionState) -> None:
        logger.info(f"Session {self.session_id}: {self.state.name} -> {new_state.name}")
        self._states.set_state(self.session_id, new_state)
    
    def _ensure_not_busy(self, action: str) -> None:
        if isinstance(self.state, Busy):
            raise SessionBusyError(
                f"Cannot {action} while an identification is in progress."
            )
    
    # ----------------------------
    # User actions
    # ----------------------------
    def select(self, image: ImageUpload) -> SessionState:
        """
        Select a new image, discarding any previous outcome or error.
        
        :raises SessionBusyError: If a submission is in flight
        """
        with self._states.lock:
            self._ensure_not_busy("select an image")
            self._transition(Ready(image=image))
            return self.state
    
    def clear(self) -> SessionState:
        """
        Remove the selected image and any outcome or error.
        
        :raises SessionBusyError: If a submission is in flight
        """
        with self._states.lock:
            self._ensure_not_busy("remove the image")
            self._transition(Idle())
            return self.state
    
    async def submit(self) -> SessionState:
        """
        Identify the selected image.
        
        Runs to completion: the returned state is always Succeeded or Failed.
        
        :return: Terminal SessionState
        :raises SessionBusyError: If a submission is already in flight
        :raises InvalidTransitionError: From Succeeded/Failed (no image selected)
        """
        # Busy must be claimed atomically; handlers may run on several threads
        with self._states.lock:
            current = self.state
            if isinstance(current, Busy):
                raise SessionBusyError("An identification is already in progress.")
            if isinstance(current, Idle):
                self._transition(Failed(message=UPLOAD_FIRST_MESSAGE))
                return self.state
            if not isinstance(current, Ready):
                raise InvalidTransitionError(
                    f"Cannot submit from state '{current.name}'; select an image first."
                )
            
            image = current.image
            self._transition(Busy(image=image))
        
        try:
            outcome = await self._identify(image)
        except NoMatchError as e:
            logger.info(f"Session {self.session_id}: no movie recognized")
            self._transition(Failed(message=str(e)))
        except MovieIdentifierError as e:
            logger.error(f"Movie identification failed: {e}")
            self._transition(Failed(message=f"{FAILURE_PREFIX}: {e}"))
        except Exception as e:
            logger.error(f"Unexpected error during identification: {e}", exc_info=True)
            self._transition(Failed(message=f"{FAILURE_PREFIX}: {str(e) or 'Unknown error occurred.'}"))
            raise
        else:
            logger.info(
                f"Session {self.session_id}: identified '{outcome.title}' "
                f"({outcome.release_year}), {len(outcome.sources)} source(s)"
            )
            self._transition(Succeeded(outcome=outcome))
        
        return self.state
    
    # ----------------------------
    # Pipeline
    # ----------------------------
    def build_request(self, image: ImageUpload) -> IdentifyRequest:
        return IdentifyRequest(
            image_bytes=image.data,
            mime_type=image.mime_type,
            user_prompt=self._user_prompt,
            system_prompt=self._system_prompt,
        )
    
    async def _identify(self, image: ImageUpload) -> IdentificationOutcome:
        payload = build_payload(self.build_request(image))
        response = await self._requester.send(self._config.endpoint, payload)
        
        candidate = parse_response(response).first_candidate
        text = candidate.text if candidate else ""
        logger.debug(f"Response text: {text[:200]!r}")
        
        result = extract(text)
        if not result.success:
            raise NoMatchError(self._no_match_message(text, result))
        
        return IdentificationOutcome.from_extraction(result, collect_sources(candidate))
    
    @staticmethod
    def _no_match_message(text: str, result: ExtractionResult) -> str:
        """
        Message for a response with no recognizable title.
        
        The first non-empty line of the model's reply, markers stripped, without
        the "Identification Failed" prefix used for request errors. The default
        synopsis is returned only when the reply is empty, never with the prefix.
        """
        for line in text.split("\n"):
            cleaned = strip_markers(line)
            if cleaned:
                return cleaned
        return result.synopsis
