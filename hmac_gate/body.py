"""Single-read capture of the raw request body."""

from __future__ import annotations

from fastapi import Request
from starlette.requests import ClientDisconnect

from hmac_gate.errors import BodyReadError, BodyTooLargeError


def _too_large(size: int, max_length: int) -> BodyTooLargeError:
    return BodyTooLargeError(
        "Request body exceeds the configured limit",
        context={"size": size, "max_length": max_length},
    )


async def capture_body(request: Request, max_length: int) -> bytes:
    """Read the whole body once and replay it to downstream handlers.

    Reading stops as soon as more than ``max_length`` bytes have arrived, so
    chunked bodies without a Content-Length are never buffered past the limit.
    """
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > max_length:
        raise _too_large(int(declared), max_length)

    chunks: list[bytes] = []
    received = 0
    try:
        async for chunk in request.stream():
            received += len(chunk)
            if received > max_length:
                raise _too_large(received, max_length)
            chunks.append(chunk)
    except ClientDisconnect as exc:
        raise BodyReadError("Client disconnected before the body was read") from exc
    body = b"".join(chunks)

    async def _receive():
        return {"type": "http.request", "body": body, "more_body": False}

    request._body = body  # type: ignore[attr-defined]
    request._receive = _receive  # type: ignore[attr-defined]
    return body
