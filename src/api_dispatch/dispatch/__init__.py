"""
Request-execution pipeline.

Components:
- origin: Base origin resolution per execution context
- urls: URL construction with same-origin fallback and query encoding
- body: Request body encoding
- classifier: Response decoding and HttpOutcomeError construction
- timeout: Per-attempt deadline guard
- cancellation: CancellationToken and cancellation racing
- orchestrator: ClientState and the per-call attempt loop
- exceptions: Error taxonomy
"""

from api_dispatch.dispatch.body import EncodedBody, encode_body, is_multipart_like
from api_dispatch.dispatch.cancellation import CancellationToken, race_cancellation
from api_dispatch.dispatch.classifier import classify_response
from api_dispatch.dispatch.origin import resolve_base_origin
from api_dispatch.dispatch.orchestrator import ClientState, RequestOrchestrator
from api_dispatch.dispatch.timeout import with_timeout
from api_dispatch.dispatch.urls import build_url

__all__ = [
    "EncodedBody",
    "encode_body",
    "is_multipart_like",
    "CancellationToken",
    "race_cancellation",
    "classify_response",
    "resolve_base_origin",
    "ClientState",
    "RequestOrchestrator",
    "with_timeout",
    "build_url",
]
