"""
HTTP requester with bounded retry and exponential backoff.

The only component that touches the network. One call to send() makes at most
policy.max_attempts POSTs, strictly one after another, and either returns a
successful response or raises the error recorded for the last attempt.

Error mapping:
    - httpx transport failures (connect, timeout): TransportError
    - HTTP 429 / 5xx: ServiceUnavailableError
    - any other non-2xx: ServiceRejectedError with the service's error message
"""
import asyncio
import logging
from time import time
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

from ..exceptions import (
    RequestError,
    ServiceRejectedError,
    ServiceUnavailableError,
    TransportError,
)
from .gemini_payload import parse_error_message
from .retry_policy import RetryPolicy

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]

DEFAULT_TIMEOUT_SECONDS = 60.0


class BackoffRequester:
    """
    Sends one logical POST request with retries.
    
    Without an injected client, each send() opens its own httpx.AsyncClient so
    the requester can be shared across event loops.
    
    Usage:
        requester = BackoffRequester(policy=RetryPolicy(max_attempts=3))
        response = await requester.send(url, payload)
    """

    def __init__(
        self,
        policy: Optional[RetryPolicy] = None,
        sleep: SleepFn = asyncio.sleep,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[httpx.Timeout] = None,
        params: Optional[Dict[str, str]] = None,
    ):
        """
        :param policy: Default RetryPolicy for send()
        :param sleep: Awaitable sleep used between attempts (injectable for tests)
        :param client: Optional long-lived client (caller owns its lifecycle)
        :param timeout: Timeout for per-call clients
        :param params: Query parameters sent with every attempt (e.g. the API key)
        """
        self.policy = policy or RetryPolicy()
        self._sleep = sleep
        self._client = client
        self._timeout = timeout or httpx.Timeout(DEFAULT_TIMEOUT_SECONDS)
        self._params = params

    async def send(
        self,
        endpoint: str,
        payload: Dict[str, Any],
        policy: Optional[RetryPolicy] = None,
    ) -> httpx.Response:
        """
        POST payload to endpoint, retrying per policy.
        
        :param endpoint: Target URL
        :param payload: JSON body
        :param policy: Overrides the requester's default policy for this call
        :return: The first successful httpx.Response
        :raises RequestError: The error recorded for the final attempt
        """
        policy = policy or self.policy

        if self._client is not None:
            return await self._send_with(self._client, endpoint, payload, policy)

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await self._send_with(client, endpoint, payload, policy)

    async def _send_with(
        self,
        client: httpx.AsyncClient,
        endpoint: str,
        payload: Dict[str, Any],
        policy: RetryPolicy,
    ) -> httpx.Response:
        last_error: Optional[RequestError] = None
        for attempt in range(policy.max_attempts):
            try:
                return await self._attempt(client, endpoint, payload, attempt, policy.max_attempts)
            except RequestError as error:
                last_error = error
                if not policy.should_retry(error, attempt):
                    break
                delay = policy.delay_for(attempt)
                logger.warning(
                    f"Attempt {attempt + 1}/{policy.max_attempts} failed ({error}); "
                    f"retrying in {delay:.2f}s"
                )
                await self._sleep(delay)

        logger.error(
            f"Request failed after {last_error.attempt + 1}/{policy.max_attempts} attempt(s): {last_error}"
        )
        raise last_error

    async def _attempt(
        self,
        client: httpx.AsyncClient,
        endpoint: str,
        payload: Dict[str, Any],
        attempt: int,
        max_attempts: int,
    ) -> httpx.Response:
        start_time = time()
        try:
            response = await client.post(endpoint, json=payload, params=self._params)
        except httpx.TransportError as e:
            raise TransportError(
                f"Network error ({type(e).__name__}). Attempt {attempt + 1}/{max_attempts}.",
                attempt=attempt,
            ) from e

        latency_ms = int((time() - start_time) * 1000)
        logger.debug(f"Attempt {attempt + 1}: HTTP {response.status_code} in {latency_ms}ms")

        if response.is_success:
            return response

        status = response.status_code
        if status == 429 or status >= 500:
            raise ServiceUnavailableError(
                f"HTTP error {status}. Attempt {attempt + 1}/{max_attempts}.",
                status=status,
                attempt=attempt,
            )

        message = parse_error_message(response)
        raise ServiceRejectedError(
            f"API Error {status}: {message}",
            status=status,
            attempt=attempt,
        )
