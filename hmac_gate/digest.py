"""HMAC digest computation and header value normalization."""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
from typing import TYPE_CHECKING, Any, Callable, Literal, TypeAlias

from hmac_gate.errors import ConfigurationError

if TYPE_CHECKING:
    from hmac_gate.credentials import CredentialSpec

Algorithm = Literal["md5", "sha1", "sha224", "sha256", "sha384", "sha512"]
Encoder: TypeAlias = Callable[[bytes], str]

ALGORITHMS: dict[str, Callable[..., Any]] = {
    "md5": hashlib.md5,
    "sha1": hashlib.sha1,
    "sha224": hashlib.sha224,
    "sha256": hashlib.sha256,
    "sha384": hashlib.sha384,
    "sha512": hashlib.sha512,
}
_ALIASES = {"sha": "sha1"}


def encode64(raw: bytes) -> str:
    """Standard padded base64."""
    return base64.b64encode(raw).decode("ascii")


def encode16(raw: bytes) -> str:
    """Upper-case base16."""
    return base64.b16encode(raw).decode("ascii")


def encode16_lower(raw: bytes) -> str:
    """Lower-case base16, same as ``hexdigest()``."""
    return raw.hex()


ENCODERS: dict[str, Encoder] = {
    "base64": encode64,
    "base16": encode16,
    "hex": encode16_lower,
}


def resolve_algorithm(name: str) -> Algorithm:
    """Return the canonical algorithm name or raise ConfigurationError."""
    key = _ALIASES.get(name.lower(), name.lower())
    if key not in ALGORITHMS:
        raise ConfigurationError(
            f"Unsupported hash algorithm {name!r}",
            context={"supported": sorted(ALGORITHMS)},
        )
    return key  # type: ignore[return-value]


def compute_digest(body: bytes, credential: CredentialSpec) -> str:
    """HMAC the body with the credential secret and encode the result."""
    mac = hmac.new(credential.secret, body, ALGORITHMS[credential.algorithm])
    return credential.encoding(mac.digest())


def normalize_digest(value: str, hex_input: bool = False, prefixed: bool = False) -> str | None:
    """Bring a signature header value into the form produced by ``encode64``.

    ``prefixed`` strips an ``algo=`` tag; a value without ``=`` is rejected.
    ``hex_input`` decodes base16 (any case) and re-encodes it as base64.
    Returns None when the value cannot be normalized.
    """
    if prefixed:
        _, sep, digest = value.partition("=")
        if not sep:
            return None
        return normalize_digest(digest, hex_input=hex_input, prefixed=False)
    if hex_input:
        try:
            raw = base64.b16decode(value, casefold=True)
        except (binascii.Error, ValueError):
            return None
        return encode64(raw)
    return value
