"""HMAC webhook signature verification middleware."""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware

from hmac_gate.body import capture_body
from hmac_gate.credentials import select_credential
from hmac_gate.errors import BodyDecodeError, BodyTooLargeError, ConfigurationError, UnsupportedMediaTypeError
from hmac_gate.parsers import decode_body
from hmac_gate.render import render_error
from hmac_gate.schemas import GateOptions, VerificationOutcome
from hmac_gate.scope import in_scope, path_segments
from hmac_gate.verifier import attach_digest, compare, read_digest

LOGGER = logging.getLogger(__name__)


class SignatureMiddleware(BaseHTTPMiddleware):
    """Validates webhook signatures before request bodies are decoded.

    Requests outside the configured scope are only decoded. In-scope requests
    must carry a signature header matching the HMAC of the raw body, otherwise
    an error response is returned and no further handler runs.
    """

    def __init__(self, app, options: GateOptions):
        super().__init__(app)
        self.options = options

    async def dispatch(self, request: Request, call_next):
        try:
            if in_scope(path_segments(request.url.path), self.options.only):
                rejection = await self._verify(request)
                if rejection is not None:
                    return rejection
            await self._decode(request)
        except BodyTooLargeError as exc:
            LOGGER.warning(
                "request body too large",
                extra={"event": "body_too_large", "context": {"path": request.url.path, **exc.context}},
            )
            return PlainTextResponse("Request body too large", status_code=413)
        except BodyDecodeError as exc:
            return JSONResponse({"detail": exc.message}, status_code=400)
        except UnsupportedMediaTypeError as exc:
            return JSONResponse({"detail": exc.message}, status_code=415)
        return await call_next(request)

    async def _verify(self, request: Request) -> Response | None:
        """Return a rejection response, or None when the signature matches."""
        credential = select_credential(request.headers, self.options.credentials)
        if credential is None:
            raise ConfigurationError("Signature gate has no credentials configured")

        body = await capture_body(request, self.options.max_body_length)
        attach_digest(request, body, self.options, credential)
        header_value = request.headers.get(credential.header_name)
        outcome = compare(
            read_digest(request),
            header_value,
            hex_digest=self.options.hex_digest,
            split_digest=self.options.split_digest,
        )
        if outcome is VerificationOutcome.AUTHORIZED:
            return None

        LOGGER.warning(
            "signature rejected",
            extra={
                "event": "signature_rejected",
                "context": {
                    "path": request.url.path,
                    "header": credential.header_name,
                    "reason": "missing_signature" if header_value is None else "mismatch",
                },
            },
        )
        rejection = render_error(request, self.options.error_views)
        if isinstance(rejection, str):
            return PlainTextResponse(rejection, status_code=403)
        return rejection

    async def _decode(self, request: Request) -> None:
        """Decode the body with the configured parsers into ``request.state.body_params``."""
        parsers = self.options.parsers
        if parsers is None:
            return
        content_type = request.headers.get("content-type")
        body = await capture_body(request, self.options.max_body_length) if content_type else b""
        request.state.body_params = decode_body(content_type, body, parsers.decoders, parsers.pass_types)
