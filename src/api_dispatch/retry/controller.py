"""
Retry decisioning.

The controller answers two questions after a failed attempt: may another
attempt run, and how long to wait before it. It never sleeps itself; the
orchestrator owns the loop.

Retry rules:
    - Only while attempt < policy.attempts
    - HttpOutcomeError: retryable iff its status is in policy.retry_on
    - Cancellation: never retryable
    - Any other failure (network error, timeout): retryable

Backoff: backoff_ms * 2 ** (attempt - 1), uncapped. Callers bound the total
wait through the attempt count.
"""

import structlog

from api_dispatch.dispatch.exceptions import is_cancellation_error, is_http_outcome_error
from api_dispatch.models.request_models import RetryPolicy

logger = structlog.get_logger(__name__)


class RetryController:
    """
    Stateless retry policy evaluator for one call.

    Attributes:
        policy: Immutable retry configuration
    """

    def __init__(self, policy: RetryPolicy | None = None):
        self.policy = policy or RetryPolicy()

    @property
    def max_attempts(self) -> int:
        return self.policy.attempts

    def is_retryable(self, error: BaseException) -> bool:
        if is_cancellation_error(error):
            return False
        if is_http_outcome_error(error):
            return getattr(error, "status") in self.policy.retry_on
        return isinstance(error, Exception)

    def should_retry(self, attempt: int, error: BaseException) -> bool:
        """
        Decide whether attempt `attempt + 1` should run.

        Args:
            attempt: 1-based index of the attempt that just failed
            error: Failure observed on that attempt
        """
        if attempt >= self.max_attempts:
            return False
        return self.is_retryable(error)

    def backoff_ms(self, attempt: int) -> int:
        """Delay before the attempt following `attempt` (1 -> x1, 2 -> x2, 3 -> x4)."""
        return self.policy.backoff_ms * 2 ** (attempt - 1)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"attempts={self.policy.attempts}, "
            f"backoff_ms={self.policy.backoff_ms})"
        )
