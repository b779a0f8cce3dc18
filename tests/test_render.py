"""Error dispatcher tests."""

from __future__ import annotations

import json

import pytest
from fastapi import Request
from fastapi.responses import PlainTextResponse

from hmac_gate.content_type import content_category
from hmac_gate.errors import ConfigurationError
from hmac_gate.render import MISSING_CONTENT_TYPE_MESSAGE, JSONErrorRenderer, render_error
from hmac_gate.schemas import DEFAULT_ERROR_VIEWS, ErrorView


def _request(content_type: str | None) -> Request:
    headers = [(b"content-type", content_type.encode())] if content_type else []
    return Request({"type": "http", "method": "POST", "path": "/", "headers": headers, "query_string": b""})


class TeapotResponder:
    def respond(self, request, rendered):
        return PlainTextResponse(f"teapot: {rendered['error']}", status_code=403)


class XMLRenderer:
    def render(self, template: str) -> str:
        return f"<error>{template}</error>"


def test_content_category() -> None:
    assert content_category("application/x-www-form-urlencoded; charset=utf-8") == "urlencoded"
    assert content_category("application/json") == "json"
    assert content_category("application/vnd.api+json") == "json"
    assert content_category("Application/JSON") == "json"
    assert content_category("text/xml") == "xml"
    assert content_category("multipart/form-data; boundary=x") == "form-data"


def test_json_default_response() -> None:
    response = render_error(_request("application/vnd.api+json"), DEFAULT_ERROR_VIEWS)
    assert response.status_code == 403
    assert response.media_type == "application/vnd.api+json"
    assert json.loads(response.body) == {"error": "Invalid HMAC"}


def test_urlencoded_default_response() -> None:
    response = render_error(_request("application/x-www-form-urlencoded"), DEFAULT_ERROR_VIEWS)
    assert response.status_code == 403
    assert response.media_type == "text/plain"
    assert response.body == b"Error: Invalid HMAC"


def test_missing_content_type_returns_diagnostic() -> None:
    assert render_error(_request(None), DEFAULT_ERROR_VIEWS) == MISSING_CONTENT_TYPE_MESSAGE


def test_unconfigured_category_is_configuration_error() -> None:
    views = (DEFAULT_ERROR_VIEWS[1],)
    with pytest.raises(ConfigurationError):
        render_error(_request("application/vnd.api+json"), views)


def test_custom_responder_is_used() -> None:
    views = (ErrorView("json", JSONErrorRenderer(), "403.json", TeapotResponder()),)
    response = render_error(_request("application/json"), views)
    assert response.body == b"teapot: Invalid HMAC"


def test_custom_category_needs_responder() -> None:
    with pytest.raises(ConfigurationError):
        render_error(_request("text/xml"), (ErrorView("xml", XMLRenderer(), "403.xml"),))


def test_unknown_template_is_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        render_error(_request("application/json"), (ErrorView("json", JSONErrorRenderer(), "500.json"),))
