"""Option types and default tables for the signature gate."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, InstanceOf, ValidationError, field_validator

from hmac_gate.credentials import CredentialInput, CredentialSpec, resolve_credentials
from hmac_gate.digest import Encoder, encode64
from hmac_gate.errors import ConfigurationError
from hmac_gate.parsers import Decoder, decode_json, decode_urlencoded
from hmac_gate.render import JSONErrorRenderer, Renderer, Responder, URLEncodedErrorRenderer
from hmac_gate.scope import ScopeRule, parse_scope

DEFAULT_MAX_BODY_LENGTH = 8_000_000


class VerificationOutcome(Enum):
    """Result of comparing a request signature to the body digest."""

    AUTHORIZED = "authorized"
    UNAUTHORIZED = "unauthorized"


@dataclass(frozen=True)
class ErrorView:
    """How to render a rejection for one content-type category."""

    content_type: str
    renderer: Renderer
    template: str
    responder: Responder | None = None


@dataclass(frozen=True)
class ParserOptions:
    """Decoders applied to request bodies once they are let through."""

    decoders: Mapping[str, Decoder] = field(
        default_factory=lambda: MappingProxyType({"json": decode_json, "urlencoded": decode_urlencoded})
    )
    pass_types: tuple[str, ...] = ("*/*",)


DEFAULT_ERROR_VIEWS: tuple[ErrorView, ...] = (
    ErrorView("json", JSONErrorRenderer(), "403.json"),
    ErrorView("urlencoded", URLEncodedErrorRenderer(), "403"),
)
DEFAULT_PARSERS = ParserOptions()


def _to_error_view(entry: ErrorView | tuple[Any, ...]) -> ErrorView:
    if isinstance(entry, ErrorView):
        return entry
    if isinstance(entry, tuple) and len(entry) in (3, 4):
        return ErrorView(*entry)
    raise ConfigurationError(
        "Error views must be (content_type, renderer, template) or "
        "(content_type, renderer, template, responder)",
        context={"entry_type": type(entry).__name__},
    )


class GateOptions(BaseModel):
    """Resolved, immutable configuration for SignatureMiddleware."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    credentials: tuple[CredentialSpec, ...] = Field(..., min_length=1)
    only: ScopeRule | None = None
    error_views: tuple[InstanceOf[ErrorView], ...] = DEFAULT_ERROR_VIEWS
    hex_digest: bool = False
    split_digest: bool = False
    parsers: InstanceOf[ParserOptions] | None = DEFAULT_PARSERS
    max_body_length: int = Field(DEFAULT_MAX_BODY_LENGTH, gt=0)

    @field_validator("only", mode="before")
    @classmethod
    def _parse_only(cls, value: object) -> object:
        """Allow ``["webhooks/:id", ...]`` path strings as well as segment tuples."""
        if value is None or isinstance(value, str):
            return parse_scope(value)
        items = list(value)  # type: ignore[call-overload]
        if all(isinstance(item, str) for item in items):
            return parse_scope(items)
        return tuple(tuple(pattern) for pattern in items)

    @field_validator("error_views", mode="before")
    @classmethod
    def _parse_error_views(cls, value: object) -> object:
        """Accept (content_type, renderer, template[, responder]) tuples."""
        if value is None:
            return DEFAULT_ERROR_VIEWS
        return tuple(_to_error_view(entry) for entry in value)  # type: ignore[attr-defined]

    @classmethod
    def build(
        cls,
        validate: CredentialInput | Sequence[CredentialInput] | None,
        *,
        only: Iterable[str] | None = None,
        error_views: Sequence[ErrorView | tuple[Any, ...]] | None = None,
        hash_algo: str = "sha256",
        digest: Encoder = encode64,
        hex_digest: bool = False,
        split_digest: bool = False,
        parsers: ParserOptions | None = DEFAULT_PARSERS,
        max_body_length: int = DEFAULT_MAX_BODY_LENGTH,
    ) -> GateOptions:
        """Validate loose configuration values and freeze them.

        ``validate`` is a CredentialSpec, a ``(header, secret[, algorithm[, encoding]])``
        tuple, or a list of either. ``hash_algo`` and ``digest`` fill in entries
        that leave algorithm or encoding out. Any invalid value raises
        ConfigurationError.
        """
        credentials = resolve_credentials(validate, hash_algo=hash_algo, digest=digest)
        try:
            return cls(
                credentials=credentials,
                only=only,
                error_views=error_views,
                hex_digest=hex_digest,
                split_digest=split_digest,
                parsers=parsers,
                max_body_length=max_body_length,
            )
        except ValidationError as exc:
            raise ConfigurationError("Invalid signature gate options", context={"errors": str(exc)}) from exc
