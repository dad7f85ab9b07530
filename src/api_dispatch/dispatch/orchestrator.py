"""
Request orchestration.

Runs one call through its lifecycle:

    building    -> URL built and body encoded exactly once, headers merged
    attempting  -> transport call under the timeout guard, then classification
                   (repeats while the retry controller allows it)
    succeeded   -> decoded payload returned
    failed      -> the last error raised unchanged

Attempts reuse the same URL, headers and body; nothing is rebuilt between
attempts.
"""

import asyncio
import time
from typing import Any, Mapping, Optional

import httpx
import structlog

from api_dispatch.dispatch.body import encode_body
from api_dispatch.dispatch.cancellation import CancellationToken, race_cancellation
from api_dispatch.dispatch.classifier import classify_response
from api_dispatch.dispatch.exceptions import DispatchError, error_kind
from api_dispatch.dispatch.timeout import with_timeout
from api_dispatch.dispatch.urls import build_url
from api_dispatch.models.enums import AttemptOutcome, ErrorKind, ExecutionContext
from api_dispatch.models.request_models import RequestSpec
from api_dispatch.monitoring.metrics import (
    dispatch_attempts_total,
    dispatch_request_latency_seconds,
    dispatch_requests_total,
    dispatch_retries_total,
)
from api_dispatch.retry.controller import RetryController
from api_dispatch.retry.metadata import AttemptRecord, RetryMetadata
from api_dispatch.transport.base_transport import BaseTransport, TransportOptions

logger = structlog.get_logger(__name__)

DEFAULT_HEADERS = {"Content-Type": "application/json"}

_OUTCOME_BY_KIND = {
    ErrorKind.HTTP_OUTCOME: AttemptOutcome.HTTP_ERROR,
    ErrorKind.TIMEOUT: AttemptOutcome.TIMEOUT,
    ErrorKind.CANCELLED: AttemptOutcome.CANCELLED,
}


def outcome_of(error: BaseException) -> AttemptOutcome:
    kind = error_kind(error)
    return _OUTCOME_BY_KIND.get(kind, AttemptOutcome.TRANSPORT_ERROR)


def redacted(headers: httpx.Headers) -> dict[str, str]:
    return {
        key: "[REDACTED]" if key.lower() == "authorization" else value
        for key, value in headers.items()
    }


def retry_reason(error: BaseException) -> str:
    outcome = outcome_of(error)
    if outcome is AttemptOutcome.HTTP_ERROR:
        return f"http_{getattr(error, 'status')}"
    return outcome.value


class ClientState:
    """
    State shared by every call made through one client.

    The base origin is fixed at construction. Default headers are set at
    construction; the bearer token is the only field changed afterwards.
    No locking: concurrent token changes may race with calls that are
    building their headers.
    """

    def __init__(self, base_origin: str, default_headers: Optional[Mapping[str, str]] = None):
        self._base_origin = base_origin
        self.default_headers = httpx.Headers(
            DEFAULT_HEADERS if default_headers is None else default_headers
        )
        self.auth_token: Optional[str] = None

    @property
    def base_origin(self) -> str:
        return self._base_origin

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"base_origin={self._base_origin or 'same-origin'}, "
            f"auth={'set' if self.auth_token else 'none'})"
        )


class RequestOrchestrator:
    """
    Executes RequestSpecs against a transport.

    Attributes:
        state: Shared client state (origin, default headers, bearer token)
        transport: Transport used for every attempt
        context: Execution context, used for the same-origin fallback
        page_origin: Page origin used in browser context
    """

    def __init__(
        self,
        state: ClientState,
        transport: BaseTransport,
        context: ExecutionContext = ExecutionContext.SERVER,
        page_origin: Optional[str] = None,
        debug: bool = False,
        metrics_enabled: bool = True,
    ):
        self.state = state
        self.transport = transport
        self.context = context
        self.page_origin = page_origin
        self.debug = debug
        self.metrics_enabled = metrics_enabled

    def _trace(self, event: str, **fields: Any) -> None:
        if self.debug:
            logger.debug(event, **fields)

    def merge_headers(self, overrides: Optional[Mapping[str, str]] = None) -> httpx.Headers:
        """Merge headers: client defaults -> bearer token -> per-call overrides."""
        headers = httpx.Headers(self.state.default_headers)
        if self.state.auth_token:
            headers["Authorization"] = f"Bearer {self.state.auth_token}"
        if overrides:
            headers.update(overrides)
        return headers

    def prepare(self, spec: RequestSpec) -> tuple[str, TransportOptions]:
        """
        The `building` state: resolve URL, headers and body once per call.

        Raises:
            UrlConstructionError: The URL cannot be built
            TypeError: The body cannot be sent under its Content-Type
        """
        url = build_url(
            self.state.base_origin,
            spec.path,
            spec.query,
            context=self.context,
            page_origin=self.page_origin,
        )
        encoded = encode_body(spec.method, spec.body, self.merge_headers(spec.headers))
        options = TransportOptions(
            method=spec.method,
            headers=encoded.headers,
            content=encoded.content,
            cancel_token=spec.cancel_token,
            cache=spec.cache,
            cache_extension=spec.cache_extension,
        )
        return url, options

    async def _backoff(self, delay_ms: int, token: Optional[CancellationToken]) -> None:
        await race_cancellation(asyncio.sleep(delay_ms / 1000.0), token)

    async def execute(self, spec: RequestSpec) -> Any:
        """
        Run the call and return the decoded payload.

        Raises:
            HttpOutcomeError: Non-2xx response that was not (or no longer) retried
            TransportError: Network failure or timeout after the last attempt
            CancellationError: The cancellation token fired
            UrlConstructionError: The URL could not be built
        """
        url, options = self.prepare(spec)
        controller = RetryController(spec.retry)
        token: Optional[CancellationToken] = spec.cancel_token
        method = spec.method.value

        records: list[AttemptRecord] = []
        started = time.monotonic()
        attempt = 0

        while True:
            attempt += 1
            attempt_started = time.monotonic()
            self._trace(
                f"{method} {url}",
                attempt=attempt,
                max_attempts=controller.max_attempts,
                headers=redacted(options.headers),
            )

            try:
                if token is not None:
                    token.raise_if_cancelled()
                response = await with_timeout(self.transport.send(url, options), spec.timeout_ms)
                result = classify_response(response)
            except Exception as error:
                outcome = outcome_of(error)
                latency_ms = int((time.monotonic() - attempt_started) * 1000)
                self._count_attempt(method, outcome)

                if controller.should_retry(attempt, error):
                    delay_ms = controller.backoff_ms(attempt)
                    records.append(
                        self._record(attempt, outcome, error, latency_ms, delay_ms=delay_ms)
                    )
                    reason = retry_reason(error)
                    logger.info(
                        f"Retrying in {delay_ms}ms (attempt {attempt}/{controller.max_attempts})",
                        method=method,
                        url=url,
                        attempt=attempt,
                        max_attempts=controller.max_attempts,
                        delay_ms=delay_ms,
                        reason=reason,
                        error=str(error),
                    )
                    if self.metrics_enabled:
                        dispatch_retries_total.labels(reason=reason).inc()
                    await self._backoff(delay_ms, token)
                    continue

                records.append(self._record(attempt, outcome, error, latency_ms))
                metadata = self._metadata(records, started)
                if isinstance(error, DispatchError):
                    error.retry_metadata = metadata
                logger.warning(
                    "Request failed",
                    method=method,
                    url=url,
                    error=str(error),
                    error_type=type(error).__name__,
                    status=getattr(error, "status", None),
                    **metadata.as_log_fields(),
                )
                self._count_call(method, outcome, metadata)
                raise

            latency_ms = int((time.monotonic() - attempt_started) * 1000)
            self._count_attempt(method, AttemptOutcome.SUCCESS)
            records.append(
                AttemptRecord(
                    attempt=attempt,
                    outcome=AttemptOutcome.SUCCESS,
                    status=response.status_code,
                    latency_ms=latency_ms,
                )
            )
            metadata = self._metadata(records, started)
            self._trace(
                "Request succeeded",
                method=method,
                url=url,
                status=response.status_code,
                **metadata.as_log_fields(),
            )
            self._count_call(method, AttemptOutcome.SUCCESS, metadata)
            return result

    @staticmethod
    def _record(
        attempt: int,
        outcome: AttemptOutcome,
        error: BaseException,
        latency_ms: int,
        delay_ms: Optional[int] = None,
    ) -> AttemptRecord:
        return AttemptRecord(
            attempt=attempt,
            outcome=outcome,
            status=getattr(error, "status", None) if outcome is AttemptOutcome.HTTP_ERROR else None,
            error_type=type(error).__name__,
            latency_ms=latency_ms,
            delay_ms=delay_ms,
        )

    @staticmethod
    def _metadata(records: list[AttemptRecord], started: float) -> RetryMetadata:
        return RetryMetadata(
            total_attempts=len(records),
            total_latency_ms=int((time.monotonic() - started) * 1000),
            attempts=list(records),
        )

    def _count_attempt(self, method: str, outcome: AttemptOutcome) -> None:
        if self.metrics_enabled:
            dispatch_attempts_total.labels(method=method, result=outcome.value).inc()

    def _count_call(self, method: str, outcome: AttemptOutcome, metadata: RetryMetadata) -> None:
        if not self.metrics_enabled:
            return
        dispatch_requests_total.labels(method=method, outcome=outcome.value).inc()
        dispatch_request_latency_seconds.labels(method=method, outcome=outcome.value).observe(
            metadata.total_latency_ms / 1000.0
        )
