"""Content-negotiated error responses for rejected signatures."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from fastapi import Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from hmac_gate.content_type import content_category
from hmac_gate.errors import ConfigurationError

if TYPE_CHECKING:
    from hmac_gate.schemas import ErrorView

LOGGER = logging.getLogger(__name__)

MISSING_CONTENT_TYPE_MESSAGE = "HMAC Error: Please define a content-type for the request"
JSON_API_MEDIA_TYPE = "application/vnd.api+json"


@runtime_checkable
class Renderer(Protocol):
    """Turns a template name into an error body."""

    def render(self, template: str) -> str | Mapping[str, Any]:
        """Return a text or mapping error body for ``template``."""


@runtime_checkable
class Responder(Protocol):
    """Turns a rendered error body into the final response."""

    def respond(self, request: Request, rendered: str | Mapping[str, Any]) -> Response:
        """Return the finished 403 response; returning it halts the request."""


class JSONErrorRenderer:
    """Default renderer for JSON requests."""

    def render(self, template: str) -> Mapping[str, Any]:
        """Render the JSON error document for ``template``."""
        if template != "403.json":
            raise ConfigurationError(f"Unknown JSON error template {template!r}")
        return {"error": "Invalid HMAC"}


class URLEncodedErrorRenderer:
    """Default renderer for form requests."""

    def render(self, template: str) -> str:
        """Render the plain-text error message for ``template``."""
        if template != "403":
            raise ConfigurationError(f"Unknown urlencoded error template {template!r}")
        return "Error: Invalid HMAC"


class JSONResponder:
    """403 with a JSON body."""

    def __init__(self, media_type: str = JSON_API_MEDIA_TYPE) -> None:
        self.media_type = media_type

    def respond(self, request: Request, rendered: str | Mapping[str, Any]) -> Response:
        """Send ``rendered`` as JSON with a 403 status."""
        return JSONResponse(rendered, status_code=403, media_type=self.media_type)


class URLEncodedResponder:
    """403 with a plain text body."""

    def respond(self, request: Request, rendered: str | Mapping[str, Any]) -> Response:
        """Send ``rendered`` as text with a 403 status."""
        return PlainTextResponse(str(rendered), status_code=403)


DEFAULT_RESPONDERS: Mapping[str, Responder] = {
    "json": JSONResponder(),
    "urlencoded": URLEncodedResponder(),
}


def find_error_view(category: str, error_views: Sequence[ErrorView]) -> ErrorView:
    """Return the error view configured for a content-type category."""
    for view in error_views:
        if view.content_type == category:
            return view
    raise ConfigurationError(
        f"Signature gate could not find an error view for content type {category!r}",
        context={"configured": [view.content_type for view in error_views]},
    )


def render_error(request: Request, error_views: Sequence[ErrorView]) -> Response | str:
    """Build the rejection response for a request that failed verification.

    Returns a diagnostic string instead of a response when the request has
    no content-type to negotiate against.
    """
    content_type = request.headers.get("content-type")
    if not content_type:
        return MISSING_CONTENT_TYPE_MESSAGE

    category = content_category(content_type)
    view = find_error_view(category, error_views)
    responder = view.responder or DEFAULT_RESPONDERS.get(category)
    if responder is None:
        raise ConfigurationError(
            f"Error view for {category!r} needs a responder",
            context={"template": view.template},
        )
    LOGGER.debug(
        "rendering signature error",
        extra={"event": "signature_error_render", "context": {"category": category, "template": view.template}},
    )
    return responder.respond(request, view.renderer.render(view.template))
