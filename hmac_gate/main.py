"""FastAPI application entrypoint.

Run with ``uvicorn --factory hmac_gate.main:create_app``.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any
from uuid import uuid4

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware

from hmac_gate.config import Settings, get_settings
from hmac_gate.logging import clear_request_id, configure_logging, set_request_id
from hmac_gate.middleware.signature import SignatureMiddleware
from hmac_gate.verifier import EMPTY_DIGEST, read_digest

LOGGER = logging.getLogger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach request id to logging context and response headers."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid4().hex
        token = set_request_id(request_id)
        try:
            response = await call_next(request)
        finally:
            clear_request_id(token)
        response.headers["X-Request-ID"] = request_id
        return response


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the app with signature verification in front of every route."""
    if settings is None:
        settings = get_settings()
    options = settings.to_options()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)
        if options.only is None:
            scope_desc: Any = "all paths"
        else:
            scope_desc = ["/".join(pattern) for pattern in options.only]
        LOGGER.info(
            "signature verification enabled",
            extra={
                "event": "gate_started",
                "context": {"header": settings.hmac_header, "algorithm": settings.hmac_algorithm, "scope": scope_desc},
            },
        )
        yield

    app = FastAPI(title=settings.app_name, lifespan=lifespan)

    # Starlette adds latest middleware first, so add reverse of desired runtime order.
    app.add_middleware(SignatureMiddleware, options=options)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health() -> dict[str, str]:
        """Service health endpoint."""
        return {"status": "ok", "app": settings.app_name}

    @app.post("/webhooks/{hook_id}")
    async def webhook(hook_id: str, request: Request) -> dict[str, Any]:
        """Accept a verified webhook delivery."""
        params = getattr(request.state, "body_params", {})
        LOGGER.info(
            "webhook accepted",
            extra={"event": "webhook_accepted", "context": {"hook_id": hook_id, "keys": sorted(params)}},
        )
        return {"hook_id": hook_id, "params": params, "verified": read_digest(request) != EMPTY_DIGEST}

    return app
