"""
Attempt history tracking.

This module defines the dataclasses that capture what happened on each
attempt of a call, for logs, metrics and post-hoc debugging.
"""

from dataclasses import dataclass, field
from typing import Optional

from api_dispatch.models.enums import AttemptOutcome


@dataclass(frozen=True)
class AttemptRecord:
    """
    Outcome of a single attempt.

    Attributes:
        attempt: 1-based attempt index
        outcome: What the attempt produced
        status: HTTP status when a response was obtained
        error_type: Exception class name for failed attempts
        latency_ms: Time spent on the attempt (transport + classification)
        delay_ms: Backoff scheduled after this attempt (None if no retry followed)
    """

    attempt: int
    outcome: AttemptOutcome
    status: Optional[int] = None
    error_type: Optional[str] = None
    latency_ms: int = 0
    delay_ms: Optional[int] = None


@dataclass(frozen=True)
class RetryMetadata:
    """
    Complete attempt history for one call.

    Attached to the terminal error as `error.retry_metadata` and logged when
    the call ends.
    """

    total_attempts: int
    total_latency_ms: int
    attempts: list[AttemptRecord] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate metadata invariants."""
        if self.total_attempts < 1:
            raise ValueError("total_attempts must be >= 1")

        if self.total_latency_ms < 0:
            raise ValueError("total_latency_ms must be >= 0")

        if len(self.attempts) != self.total_attempts:
            raise ValueError("attempts must hold one record per attempt")

    @property
    def retries(self) -> int:
        return self.total_attempts - 1

    @property
    def final_outcome(self) -> AttemptOutcome:
        return self.attempts[-1].outcome

    def as_log_fields(self) -> dict:
        return {
            "total_attempts": self.total_attempts,
            "total_latency_ms": self.total_latency_ms,
            "outcomes": [record.outcome.value for record in self.attempts],
        }
