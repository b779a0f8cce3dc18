"""Credential configuration and per-request credential selection."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from hmac_gate.digest import Algorithm, Encoder, encode64, resolve_algorithm
from hmac_gate.errors import ConfigurationError

CREDENTIAL_FIELDS = ("header_name", "secret", "algorithm", "encoding")


class CredentialSpec(BaseModel):
    """One verification rule: which header carries the signature and how it is made."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    header_name: str = Field(..., min_length=1)
    secret: bytes = Field(..., min_length=1, repr=False)
    algorithm: Algorithm = "sha256"
    encoding: Encoder = encode64

    @field_validator("header_name", mode="after")
    @classmethod
    def _lower_header(cls, value: str) -> str:
        """Request headers are matched in lower case."""
        return value.lower()

    @field_validator("secret", mode="before")
    @classmethod
    def _encode_secret(cls, value: object) -> object:
        """Accept text secrets and HMAC them as UTF-8."""
        if isinstance(value, str):
            return value.encode("utf-8")
        return value

    @field_validator("algorithm", mode="before")
    @classmethod
    def _resolve_algorithm(cls, value: object) -> str:
        """Map aliases such as ``sha`` onto supported names."""
        return resolve_algorithm(str(value))


CredentialInput: TypeAlias = CredentialSpec | tuple[Any, ...]


def _is_single(validate: object) -> bool:
    """A bare spec, or a tuple whose first item is a header name (str or bytes)."""
    if isinstance(validate, CredentialSpec):
        return True
    return isinstance(validate, tuple) and bool(validate) and isinstance(validate[0], (str, bytes))


def _to_spec(entry: CredentialInput, hash_algo: str, digest: Encoder) -> CredentialSpec:
    """Build a CredentialSpec from a spec or a (header, secret[, algo[, encoding]]) tuple."""
    if isinstance(entry, CredentialSpec):
        return entry
    if not isinstance(entry, tuple) or not 2 <= len(entry) <= 4:
        raise ConfigurationError(
            "Credentials must be (header, secret), (header, secret, algorithm) "
            "or (header, secret, algorithm, encoding) with a str or bytes header",
            context={"entry_type": type(entry).__name__},
        )
    values: dict[str, Any] = {"algorithm": hash_algo, "encoding": digest}
    values.update(zip(CREDENTIAL_FIELDS, entry))
    return CredentialSpec(**values)


def resolve_credentials(
    validate: CredentialInput | Sequence[CredentialInput] | None,
    hash_algo: str = "sha256",
    digest: Encoder = encode64,
) -> tuple[CredentialSpec, ...]:
    """Normalize a single credential or an ordered list of them into a tuple."""
    if validate is None:
        raise ConfigurationError("Signature gate expects a credential to validate against")
    try:
        if _is_single(validate):
            return (_to_spec(validate, hash_algo, digest),)
        entries = tuple(_to_spec(entry, hash_algo, digest) for entry in validate)
    except ValidationError as exc:
        raise ConfigurationError("Invalid credential configuration", context={"errors": str(exc)}) from exc
    if not entries:
        raise ConfigurationError("Signature gate expects at least one credential")
    return entries


def select_credential(
    headers: Mapping[str, str],
    credentials: Sequence[CredentialSpec],
) -> CredentialSpec | None:
    """Pick the credential whose signature header is present.

    A single configured credential is always used. With several, the first
    one whose header is present wins; when none is present the last one is
    returned so errors can still be reported, and its header lookup will come
    back empty.
    """
    if not credentials:
        return None
    if len(credentials) == 1:
        return credentials[0]
    for credential in credentials:
        if credential.header_name in headers:
            return credential
    return credentials[-1]
