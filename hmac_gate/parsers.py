"""Decoders for verified request bodies."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any, Callable, TypeAlias
from urllib.parse import parse_qsl

from hmac_gate.content_type import content_category, parse_content_type
from hmac_gate.errors import BodyDecodeError, UnsupportedMediaTypeError

Decoder: TypeAlias = Callable[[bytes], dict[str, Any]]


def decode_json(body: bytes) -> dict[str, Any]:
    """Decode a JSON body; non-object documents are wrapped under ``_json``."""
    if not body:
        return {}
    try:
        terms = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise BodyDecodeError("Malformed JSON body", context={"error": str(exc)}) from exc
    if isinstance(terms, dict):
        return terms
    return {"_json": terms}


def decode_urlencoded(body: bytes) -> dict[str, Any]:
    """Decode a form body. Repeated keys keep the last value."""
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise BodyDecodeError("Invalid UTF-8 in urlencoded body") from exc
    return dict(parse_qsl(text, keep_blank_values=True))


def _type_passes(content_type: str, pass_types: Sequence[str]) -> bool:
    kind, subtype = parse_content_type(content_type)
    for allowed in pass_types:
        allowed_kind, _, allowed_subtype = allowed.lower().partition("/")
        if allowed_kind in ("*", kind) and allowed_subtype in ("*", subtype):
            return True
    return False


def decode_body(
    content_type: str | None,
    body: bytes,
    decoders: Mapping[str, Decoder],
    pass_types: Sequence[str] = ("*/*",),
) -> dict[str, Any]:
    """Decode ``body`` with the decoder registered for its content-type category."""
    if not content_type:
        return {}
    decoder = decoders.get(content_category(content_type))
    if decoder is not None:
        return decoder(body)
    if _type_passes(content_type, pass_types):
        return {}
    raise UnsupportedMediaTypeError(
        f"Unsupported media type {content_type!r}",
        context={"content_type": content_type},
    )
