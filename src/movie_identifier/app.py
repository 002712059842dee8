"""
Public application facade for Movie Identifier Service.

This is the single stable entry point for the library.
All internal structure can change freely, but this API remains stable.
"""
import logging
from typing import Optional

import httpx

from .config import MovieIdentifierConfig
from .config_validator import _mask_secret
from .memory import SessionState, SessionStateManager
from .orchestration import IdentificationOrchestrator
from .schemas import ImageUpload
from .transport import BackoffRequester, RetryPolicy

logger = logging.getLogger(__name__)


class MovieIdentifierApp:
    """
    Public application facade for Movie Identifier Service.
    
    All dependency wiring is encapsulated here.
    
    Usage:
        config = load_config_from_env()
        app = MovieIdentifierApp(config)
        app.initialize()
        app.select_image(load_image("scene.jpg"), session_id="abc")
        state = asyncio.run(app.identify(session_id="abc"))
    """
    
    def __init__(
        self,
        config: MovieIdentifierConfig,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        :param config: MovieIdentifierConfig instance
        :param http_client: Optional long-lived client (e.g. with a mock transport);
            the caller owns its lifecycle
        """
        self._config = config
        self._http_client = http_client
        self._requester: Optional[BackoffRequester] = None
        self._state_manager = SessionStateManager(max_sessions=config.max_sessions)
    
    @property
    def config(self) -> MovieIdentifierConfig:
        return self._config
    
    def initialize(self) -> None:
        """
        Build the retrying requester.
        
        Call this once before identify(). Safe to call again.
        """
        if self._requester:
            return
        
        policy = RetryPolicy.from_config(self._config)
        self._requester = BackoffRequester(
            policy=policy,
            client=self._http_client,
            timeout=httpx.Timeout(self._config.request_timeout_seconds),
            params={"key": self._config.api_key} if self._config.api_key else None,
        )
        
        logger.info(
            f"Movie identifier initialized: model={self._config.model}, "
            f"api_key={_mask_secret(self._config.api_key or '')}, "
            f"max_attempts={policy.max_attempts}, base_delay={policy.base_delay_seconds}s"
        )
    
    def orchestrator(self, session_id: str = "default") -> IdentificationOrchestrator:
        """
        Orchestrator bound to a session.
        
        Orchestrators keep no state of their own, so one is built per call and
        the state manager is the only per-session storage.
        
        :raises: RuntimeError if initialize() has not been called
        """
        if not self._requester:
            raise RuntimeError("App not initialized. Call initialize() first.")
        
        return IdentificationOrchestrator(
            requester=self._requester,
            config=self._config,
            session_id=session_id,
            state_manager=self._state_manager,
        )
    
    def get_state(self, session_id: str = "default") -> SessionState:
        return self._state_manager.get_state(session_id)
    
    @property
    def active_sessions(self) -> int:
        """Number of sessions currently holding state."""
        return len(self._state_manager)
    
    def select_image(self, image: ImageUpload, session_id: str = "default") -> SessionState:
        return self.orchestrator(session_id).select(image)
    
    def clear_image(self, session_id: str = "default") -> SessionState:
        return self.orchestrator(session_id).clear()
    
    async def identify(self, session_id: str = "default") -> SessionState:
        """
        Submit the selected image for a session.
        
        :return: Terminal SessionState (Succeeded or Failed)
        """
        return await self.orchestrator(session_id).submit()
    
    def end_session(self, session_id: str) -> None:
        """Drop all state for a session."""
        self._state_manager.clear_state(session_id)
    
