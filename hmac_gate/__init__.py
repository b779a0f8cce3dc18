"""HMAC signature verification for webhook endpoints."""

from hmac_gate.credentials import CredentialSpec, resolve_credentials, select_credential
from hmac_gate.digest import compute_digest, encode16, encode16_lower, encode64, normalize_digest
from hmac_gate.errors import (
    BodyDecodeError,
    BodyReadError,
    BodyTooLargeError,
    ConfigurationError,
    HMACGateError,
    UnsupportedMediaTypeError,
)
from hmac_gate.middleware.signature import SignatureMiddleware
from hmac_gate.render import Renderer, Responder, render_error
from hmac_gate.schemas import (
    DEFAULT_ERROR_VIEWS,
    DEFAULT_PARSERS,
    ErrorView,
    GateOptions,
    ParserOptions,
    VerificationOutcome,
)
from hmac_gate.scope import in_scope, parse_scope
from hmac_gate.verifier import EMPTY_DIGEST, attach_digest, read_digest, verify

__all__ = [
    "BodyDecodeError",
    "BodyReadError",
    "BodyTooLargeError",
    "ConfigurationError",
    "CredentialSpec",
    "DEFAULT_ERROR_VIEWS",
    "DEFAULT_PARSERS",
    "EMPTY_DIGEST",
    "ErrorView",
    "GateOptions",
    "HMACGateError",
    "ParserOptions",
    "Renderer",
    "Responder",
    "SignatureMiddleware",
    "UnsupportedMediaTypeError",
    "VerificationOutcome",
    "attach_digest",
    "compute_digest",
    "encode16",
    "encode16_lower",
    "encode64",
    "in_scope",
    "normalize_digest",
    "parse_scope",
    "read_digest",
    "render_error",
    "resolve_credentials",
    "select_credential",
    "verify",
]
