"""Application configuration."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hmac_gate.digest import ENCODERS
from hmac_gate.errors import ConfigurationError
from hmac_gate.schemas import DEFAULT_MAX_BODY_LENGTH, GateOptions


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "hmac-gate"
    app_env: str = "dev"
    log_level: str = "INFO"
    hmac_header: str = "x-hmac-signature"
    hmac_secret: str | None = None
    hmac_algorithm: Literal["md5", "sha", "sha1", "sha224", "sha256", "sha384", "sha512"] = "sha256"
    hmac_encoding: Literal["base64", "base16", "hex"] = "base64"
    hmac_hex_digest: bool = False
    hmac_split_digest: bool = False
    hmac_only: str | None = None
    max_body_length: int = DEFAULT_MAX_BODY_LENGTH

    @field_validator("hmac_header", mode="before")
    @classmethod
    def _lower_header(cls, value: object) -> str:
        """Request headers are matched in lower case."""
        return str(value).strip().lower()

    def scope_patterns(self) -> list[str] | None:
        """Split the comma-separated HMAC_ONLY value; None verifies every path."""
        if self.hmac_only is None:
            return None
        parts = [part.strip() for part in self.hmac_only.split(",")]
        return [part for part in parts if part]

    def to_options(self) -> GateOptions:
        """Build middleware options from the loaded settings."""
        if not self.hmac_secret:
            raise ConfigurationError("HMAC_SECRET is required")
        return GateOptions.build(
            (self.hmac_header, self.hmac_secret, self.hmac_algorithm, ENCODERS[self.hmac_encoding]),
            only=self.scope_patterns(),
            hex_digest=self.hmac_hex_digest,
            split_digest=self.hmac_split_digest,
            max_body_length=self.max_body_length,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""
    settings = Settings()
    if not settings.hmac_secret:
        raise ConfigurationError("HMAC_SECRET is required")
    return settings
