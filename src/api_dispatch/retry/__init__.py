"""
Retry decisioning and attempt history.

Main Components:
    - RetryController: Decides whether another attempt runs and computes backoff
    - RetryMetadata: Immutable history of the attempts of one call
    - AttemptRecord: Outcome of a single attempt
"""

from api_dispatch.retry.controller import RetryController
from api_dispatch.retry.metadata import AttemptRecord, RetryMetadata

__all__ = [
    "RetryController",
    "RetryMetadata",
    "AttemptRecord",
]
