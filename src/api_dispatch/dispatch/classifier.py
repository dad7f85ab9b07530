"""
Response classification.

A response is successful iff its status is 2xx. Successful payloads are
decoded by declared content type; failures become HttpOutcomeError with the
most useful message that can be recovered from the body.
"""

import json
from email.parser import BytesParser
from email.policy import HTTP
from typing import Any, Optional

import httpx
import structlog

from api_dispatch.dispatch.exceptions import HttpOutcomeError

logger = structlog.get_logger(__name__)

BINARY_MEDIA_MARKERS = (
    "application/octet-stream",
    "image/",
    "video/",
    "audio/",
    "application/pdf",
)


def content_type_of(response: httpx.Response) -> str:
    return response.headers.get("content-type", "")


def is_success(response: httpx.Response) -> bool:
    return 200 <= response.status_code < 300


def decode_form(response: httpx.Response) -> dict[str, Any]:
    """
    Decode a multipart/form-data body into {field name: value}.

    Text parts decode to str, parts carrying a filename stay bytes. A name
    appearing twice keeps its last value.
    """
    head = f"Content-Type: {content_type_of(response)}\r\n\r\n".encode("latin-1")
    message = BytesParser(policy=HTTP).parsebytes(head + response.content)

    fields: dict[str, Any] = {}
    for part in message.iter_parts():
        name = part.get_param("name", header="content-disposition")
        if name is None:
            continue
        payload = part.get_payload(decode=True) or b""
        if part.get_filename() is None:
            charset = part.get_content_charset() or "utf-8"
            fields[name] = payload.decode(charset, errors="replace")
        else:
            fields[name] = payload
    return fields


def decode_success(response: httpx.Response) -> Any:
    content_type = content_type_of(response)

    if "application/json" in content_type:
        return response.json()

    if any(marker in content_type for marker in BINARY_MEDIA_MARKERS):
        return response.content

    if "multipart/form-data" in content_type:
        return decode_form(response)

    return response.text


def decode_error_payload(response: httpx.Response) -> Any:
    """Best-effort decode of an error body; undecodable bodies yield None."""
    try:
        if "application/json" in content_type_of(response):
            return response.json()
        return response.text
    except (json.JSONDecodeError, UnicodeDecodeError, httpx.ResponseNotRead) as exc:
        logger.debug(
            "Could not decode error payload",
            status_code=response.status_code,
            error=str(exc),
        )
        return None


def error_message(response: httpx.Response, data: Any) -> str:
    """
    Pick the error message.

    Preference: string "message" in a JSON object, then a plain-text body,
    then the reason phrase, then "HTTP {status}".
    """
    message: Optional[str] = None

    if isinstance(data, dict):
        candidate = data.get("message")
        if isinstance(candidate, str):
            message = candidate

    if not message:
        message = data if isinstance(data, str) else response.reason_phrase

    return message or f"HTTP {response.status_code}"


def build_outcome_error(response: httpx.Response) -> HttpOutcomeError:
    data = decode_error_payload(response)
    return HttpOutcomeError(error_message(response, data), response.status_code, data)


def classify_response(response: httpx.Response) -> Any:
    """
    Decode a successful response or raise its HttpOutcomeError.

    Raises:
        HttpOutcomeError: status outside 200-299
    """
    if not is_success(response):
        raise build_outcome_error(response)
    return decode_success(response)
