"""
Retry policy for calls to the inference endpoint.

Attempt budget, delay schedule, and retry eligibility are plain data here, so the
requester's loop stays free of policy decisions.
"""
from dataclasses import dataclass

from ..config import MovieIdentifierConfig
from ..exceptions import RequestError, ServiceRejectedError


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded exponential backoff.
    
    :param max_attempts: Maximum number of network calls per send
    :param base_delay_seconds: Delay after the first failed attempt
    :param backoff_factor: Multiplier applied per attempt
    :param retry_rejected: Retry non-transient rejections (4xx other than 429) too
    """
    max_attempts: int = 5
    base_delay_seconds: float = 1.0
    backoff_factor: float = 2.0
    retry_rejected: bool = True

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")
        if self.base_delay_seconds < 0:
            raise ValueError("base_delay_seconds must not be negative")

    @classmethod
    def from_config(cls, config: MovieIdentifierConfig) -> "RetryPolicy":
        return cls(
            max_attempts=config.retry_max_attempts,
            base_delay_seconds=config.retry_base_delay_seconds,
            retry_rejected=config.retry_rejected_requests,
        )

    def delay_for(self, attempt: int) -> float:
        """
        Seconds to wait after the given zero-based attempt fails.
        
        :param attempt: Zero-based attempt index
        :return: base_delay_seconds * backoff_factor ** attempt
        """
        return self.base_delay_seconds * (self.backoff_factor ** attempt)

    def should_retry(self, error: Exception, attempt: int) -> bool:
        """
        Decide whether another attempt follows the failed one.
        
        :param error: Error recorded for this attempt
        :param attempt: Zero-based index of the attempt that failed
        :return: True if the requester should sleep and try again
        """
        if attempt >= self.max_attempts - 1:
            return False
        if not isinstance(error, RequestError):
            return False
        if isinstance(error, ServiceRejectedError) and not self.retry_rejected:
            return False
        return True

    def worst_case_delay(self) -> float:
        """Total sleep time if every attempt fails."""
        return sum(self.delay_for(i) for i in range(self.max_attempts - 1))
