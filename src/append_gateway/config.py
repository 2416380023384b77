"""
Configuration management for the reverse IP append gateway.

Non-secret settings load from YAML with ZERO defaults: every value must be
explicitly specified or startup fails. Provider credentials and the inbound
API key are read from the process environment only, once, into an
immutable model.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from service_commons.config import (
    REDACTION_MARKER,
    SENSITIVE_KEYWORDS,
    ConfigurationError,
    create_settings_loader,
    get_safe_model_config,
    is_sensitive_key,
    load_yaml_config,
    redact_sensitive_values,
)
from service_commons.config import (
    get_config_path as resolve_config_path,
)

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

__all__ = [
    "ENVIRONMENT_OVERRIDES",
    "REDACTION_MARKER",
    "SENSITIVE_KEYWORDS",
    "BatchConfig",
    "ConfigurationError",
    "DiagnosticsConfig",
    "GatewaySecrets",
    "ProviderConfig",
    "ServerConfig",
    "ServiceConfig",
    "Settings",
    "clear_settings_cache",
    "get_config_path",
    "get_safe_config",
    "get_settings",
    "is_sensitive_key",
    "load_secrets",
    "load_yaml_config",
    "redact_sensitive_values",
]

# Environment variables that override YAML values
ENVIRONMENT_OVERRIDES: dict[str, tuple[str, ...]] = {
    "DATAZAPP_ENDPOINT_URL": ("provider", "endpoint_url"),
    "PORT": ("server", "port"),
}

PROVIDER_API_KEY_ENV = "DATAZAPP_API_KEY"
PROVIDER_USERNAME_ENV = "DATAZAPP_USER"
PROVIDER_PASSWORD_ENV = "DATAZAPP_PASSWORD"
PROXY_API_KEY_ENV = "PROXY_API_KEY"


class ServiceConfig(BaseModel):
    """Service identity configuration."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    version: str


class ProviderConfig(BaseModel):
    """Enrichment provider endpoint and payload shape."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    endpoint_url: str = Field(..., min_length=1)
    timeout_seconds: float = Field(..., gt=0)
    append_type: int
    schema_version: Literal["data_array", "response_detail"]


class BatchConfig(BaseModel):
    """Batch enrichment limits."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    max_ip_addresses: int = Field(..., ge=1)


class DiagnosticsConfig(BaseModel):
    """Connectivity test configuration."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    test_ip_address: str


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    host: str
    port: int
    log_level: str
    cors_origins: list[str]


class Settings(BaseModel):
    """
    Root configuration container.

    All fields are REQUIRED. No defaults exist.
    Missing fields cause immediate startup failure.

    Usage:
        from append_gateway.config import get_settings
        settings = get_settings()
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    service: ServiceConfig
    provider: ProviderConfig
    batch: BatchConfig
    diagnostics: DiagnosticsConfig
    server: ServerConfig


class GatewaySecrets(BaseModel):
    """
    Credentials held in the process environment.

    Attributes:
        provider_api_key: Provider API key
        provider_username: Provider account user
        provider_password: Provider account password
        proxy_api_key: Value callers must send in the x-api-key header
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    provider_api_key: str | None = Field(default=None, repr=False)
    provider_username: str | None = Field(default=None, repr=False)
    provider_password: str | None = Field(default=None, repr=False)
    proxy_api_key: str | None = Field(default=None, repr=False)

    @property
    def has_provider_credentials(self) -> bool:
        """An API key alone, or a complete username/password pair, is enough."""
        if self.provider_api_key:
            return True
        return bool(self.provider_username and self.provider_password)

    def presence_flags(self) -> dict[str, bool]:
        """Report which secrets are configured without revealing them."""
        return {
            "providerApiKey": self.provider_api_key is not None,
            "providerUsername": self.provider_username is not None,
            "providerPassword": self.provider_password is not None,
            "providerCredentials": self.has_provider_credentials,
            "proxyApiKey": self.proxy_api_key is not None,
        }


def _read_secret(environ: Mapping[str, str], name: str) -> str | None:
    value = environ.get(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def load_secrets(environ: Mapping[str, str]) -> GatewaySecrets:
    """
    Read gateway secrets from an environment mapping.

    Blank values are treated as absent.

    Args:
        environ: Environment mapping (usually os.environ)

    Returns:
        Immutable secrets model
    """
    return GatewaySecrets(
        provider_api_key=_read_secret(environ, PROVIDER_API_KEY_ENV),
        provider_username=_read_secret(environ, PROVIDER_USERNAME_ENV),
        provider_password=_read_secret(environ, PROVIDER_PASSWORD_ENV),
        proxy_api_key=_read_secret(environ, PROXY_API_KEY_ENV),
    )


def load_secrets_from_environment() -> GatewaySecrets:
    """Read gateway secrets from the live process environment."""
    return load_secrets(os.environ)


def get_config_path() -> Path:
    """
    Determine configuration file path.

    Uses CONFIG_PATH environment variable if set, otherwise defaults
    to ./config.yaml relative to working directory.

    Returns:
        Path to configuration file
    """
    return resolve_config_path(
        env_var_name="CONFIG_PATH",
        default_filename="config.yaml",
    )


get_settings, clear_settings_cache = create_settings_loader(  # nosemgrep
    Settings,
    get_config_path,
    ENVIRONMENT_OVERRIDES,
)


def get_safe_config() -> dict[str, Any]:
    """
    Get configuration with sensitive values redacted.

    Returns:
        Configuration dictionary safe for logging/API exposure
    """
    return get_safe_model_config(get_settings(), REDACTION_MARKER)
