"""Exception types raised by the signature gate."""

from __future__ import annotations

from typing import Any


class HMACGateError(Exception):
    """Base error for the signature gate.

    Optionally carries structured context for logging.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ConfigurationError(HMACGateError, ValueError):
    """Raised when gate options are missing or inconsistent."""


class BodyReadError(HMACGateError):
    """Raised when the request body cannot be read."""


class BodyTooLargeError(BodyReadError):
    """Raised when the request body exceeds the configured limit."""


class BodyDecodeError(HMACGateError):
    """Raised when a decoder rejects a verified body."""


class UnsupportedMediaTypeError(HMACGateError):
    """Raised when no decoder accepts the request content type."""
