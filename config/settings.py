"""
config/settings.py — Connection and failure-policy contract for check_consul.

Uses pydantic-settings to load, validate, and type-check the environment
variables that describe how to reach Consul and how to report fetch failures.
Command-line flags override whatever is loaded here (see check_consul.cli).

Two usage modes:
  Production / plugin runs:
      cfg = load_settings()                   # reads from .env + os.environ
      cfg = load_settings("/etc/check_consul.env")

  Tests (isolated — no env file, no os.environ bleed):
      cfg = Settings(CONSUL_HOST="consul.service", CONSUL_PORT=8501, ...)
      # All values come exclusively from kwargs → clean, reproducible.
"""
from __future__ import annotations

import os
import re
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)


class Settings(BaseSettings):
    # Settings() reads purely from kwargs. load_settings() is the explicit
    # production entry point that merges the env file and os.environ.
    model_config = SettingsConfigDict(
        env_file=None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Only kwargs. load_settings() supplies env vars explicitly as kwargs.
        return (init_settings,)

    # -------------------------------------------------------------------------
    # Consul HTTP API
    # -------------------------------------------------------------------------
    CONSUL_HOST: str = "127.0.0.1"
    CONSUL_PORT: int = Field(default=8500, ge=1, le=65535)
    CONSUL_SCHEME: Literal["http", "https"] = "http"
    CONSUL_HTTP_TOKEN: Optional[str] = None
    CONSUL_TIMEOUT_SECONDS: int = Field(default=10, ge=1)

    # -------------------------------------------------------------------------
    # Failure policy
    # -------------------------------------------------------------------------
    CRITICAL_ON_ERROR: bool = False
    VERBOSE: bool = False

    # -------------------------------------------------------------------------
    # Convenience properties
    # -------------------------------------------------------------------------

    @property
    def base_url(self) -> str:
        """Scheme, host and port of the Consul agent, without a trailing slash."""
        return f"{self.CONSUL_SCHEME}://{self.CONSUL_HOST}:{self.CONSUL_PORT}"

    @property
    def effective_token(self) -> str:
        return self.CONSUL_HTTP_TOKEN or ""

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------

    @field_validator("CONSUL_HOST", "CONSUL_SCHEME", mode="before")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Strip trailing whitespace left behind by shell-sourced env files."""
        return v.strip() if isinstance(v, str) else v

    @field_validator("CONSUL_HOST")
    @classmethod
    def host_without_scheme(cls, v: str) -> str:
        if not v:
            raise ValueError("CONSUL_HOST must be a non-empty host name or address")
        if "://" in v:
            raise ValueError(
                f"CONSUL_HOST must not include a scheme (got '{v}'). "
                "Use CONSUL_SCHEME=https for TLS agents."
            )
        return v

    @field_validator("CONSUL_HTTP_TOKEN", mode="before")
    @classmethod
    def blank_token_is_none(cls, v: Optional[str]) -> Optional[str]:
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v


def load_settings(env_file: str = ".env") -> Settings:
    """Load and validate settings from an env file + os.environ.

    Manually parses the env file and merges with os.environ (os.environ wins),
    then passes only known Settings fields as explicit kwargs. The
    pydantic-settings dotenv and env sources are disabled so that Settings()
    stays a pure validation contract.

    A missing env file is not an error: the plugin then runs on os.environ and
    the field defaults alone.

    Raises:
        ValidationError: if any value is invalid (e.g. CONSUL_PORT=0).
    """
    file_vals: dict[str, str] = {}
    try:
        with open(env_file, encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                k, _, v = line.partition("=")
                k = k.strip()
                # Strip inline comments: "8500   # agent port" → "8500"
                v = re.sub(r"\s+#.*$", "", v.strip())
                if k:
                    file_vals[k] = v
    except FileNotFoundError:
        pass
    merged = {**file_vals, **os.environ}  # os.environ wins
    known = {k: v for k, v in merged.items() if k in Settings.model_fields}
    return Settings(**known)
