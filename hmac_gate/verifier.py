"""Signature comparison and the per-request digest slot."""

from __future__ import annotations

import hmac

from fastapi import Request

from hmac_gate.credentials import CredentialSpec, select_credential
from hmac_gate.digest import compute_digest, normalize_digest
from hmac_gate.schemas import GateOptions, VerificationOutcome
from hmac_gate.scope import in_scope, path_segments

DIGEST_STATE_KEY = "hmac_digest"
EMPTY_DIGEST = "empty"


def compare(
    expected: str,
    header_value: str | None,
    *,
    hex_digest: bool = False,
    split_digest: bool = False,
) -> VerificationOutcome:
    """Compare a computed digest with the raw signature header value."""
    if header_value is None or expected == EMPTY_DIGEST:
        return VerificationOutcome.UNAUTHORIZED
    received = normalize_digest(header_value, hex_input=hex_digest, prefixed=split_digest)
    if received is None:
        return VerificationOutcome.UNAUTHORIZED
    if hmac.compare_digest(expected.encode("utf-8"), received.encode("utf-8")):
        return VerificationOutcome.AUTHORIZED
    return VerificationOutcome.UNAUTHORIZED


def verify(
    body: bytes,
    header_value: str | None,
    credential: CredentialSpec,
    *,
    hex_digest: bool = False,
    split_digest: bool = False,
) -> VerificationOutcome:
    """Check that ``header_value`` signs ``body`` under ``credential``."""
    return compare(
        compute_digest(body, credential),
        header_value,
        hex_digest=hex_digest,
        split_digest=split_digest,
    )


def attach_digest(
    request: Request,
    body: bytes,
    options: GateOptions,
    credential: CredentialSpec | None = None,
) -> Request:
    """Store the body digest on the request when its path is in scope.

    Custom decoders that read the body themselves can call this and later
    fetch the value with ``read_digest``.
    """
    if not in_scope(path_segments(request.url.path), options.only):
        return request
    credential = credential or select_credential(request.headers, options.credentials)
    if credential is not None:
        setattr(request.state, DIGEST_STATE_KEY, compute_digest(body, credential))
    return request


def read_digest(request: Request) -> str:
    """Return the digest stored by ``attach_digest``, or ``EMPTY_DIGEST``."""
    return getattr(request.state, DIGEST_STATE_KEY, EMPTY_DIGEST)
