"""
Request body encoding.

Decides how a caller payload enters the transport call:

1. GET never carries a body.
2. Multipart-like payloads (FormData, bytes, buffers, binary files) pass
   through and the Content-Type header is dropped, so the transport can
   generate its own multipart boundary. Buffers and binary files are read
   into bytes here, once, so every attempt sends the same body.
3. With Content-Type exactly "application/json" the payload is serialized
   to compact JSON text.
4. Anything else is passed through as-is (e.g. preformatted text). Only
   str and bytes can be passed through; other payloads raise TypeError.
5. No payload means no body; an empty object is never substituted.
"""

import io
import json
from dataclasses import dataclass
from typing import Any, Optional

import httpx
from pydantic import BaseModel

from api_dispatch.models.enums import HttpMethod
from api_dispatch.models.request_models import FormData

JSON_MEDIA_TYPE = "application/json"


@dataclass(frozen=True)
class EncodedBody:
    """Transport-ready body plus the headers that must accompany it."""

    content: Any
    headers: httpx.Headers


def is_multipart_like(body: Any) -> bool:
    """Detect payloads that must not be JSON-encoded or given a Content-Type."""
    if isinstance(body, (FormData, bytes, bytearray, memoryview)):
        return True
    return isinstance(body, (io.BufferedIOBase, io.RawIOBase))


def snapshot_binary(body: Any) -> Any:
    """Freeze buffers and binary files into bytes; FormData and bytes are returned as-is."""
    if isinstance(body, (bytearray, memoryview)):
        return bytes(body)
    if isinstance(body, (io.BufferedIOBase, io.RawIOBase)):
        return body.read()
    return body


def to_json_text(body: Any) -> str:
    if isinstance(body, BaseModel):
        body = body.model_dump(mode="json")
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False)


def encode_body(method: HttpMethod, body: Any, headers: httpx.Headers) -> EncodedBody:
    """
    Encode `body` for `method` under the effective (merged) `headers`.

    The headers passed in are not mutated; a copy is returned. The returned
    content is None, str, bytes or FormData.

    Raises:
        TypeError: A non-JSON payload that is neither str nor bytes
    """
    effective = httpx.Headers(headers)
    content: Optional[Any] = None

    if method is HttpMethod.GET or body is None:
        return EncodedBody(content=None, headers=effective)

    if is_multipart_like(body):
        if "content-type" in effective:
            del effective["content-type"]
        content = snapshot_binary(body)
    elif effective.get("content-type") == JSON_MEDIA_TYPE:
        content = to_json_text(body)
    elif isinstance(body, str):
        content = body
    else:
        raise TypeError(
            f"Cannot send {type(body).__name__} body with "
            f"Content-Type {effective.get('content-type')!r}; "
            "pass str or bytes, or use Content-Type application/json"
        )

    return EncodedBody(content=content, headers=effective)
