"""Configuration management for the mljboard client."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlparse

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError

DEFAULT_RETRY_DELAY = 3.0
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_dir = os.environ.get("MLJBOARD_CONFIG_DIR")
    if config_dir:
        return Path(config_dir)
    return Path.home() / ".mljboard"


class PairingContext(BaseModel):
    """Relay address, local target and pairing token for one process.

    Built once at startup and shared read-only by every session.
    """

    model_config = ConfigDict(frozen=True)

    hos_addr: str
    local_target: str
    pairing_code: Optional[str] = None
    retry_delay: float = DEFAULT_RETRY_DELAY
    local_timeout: Optional[float] = None

    def local_url(self, path: str) -> str:
        """URL on the local service for a forwarded path."""
        return f"{self.local_target}/{path}"


class ClientConfig(BaseSettings):
    """mljboard client configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MLJBOARD_",
        env_file=".env",
        extra="ignore",
    )

    hos_addr: Optional[str] = Field(
        default=None,
        description="HOS address, including ws:// or wss:// and the path",
    )
    local_addr: Optional[str] = Field(
        default=None,
        description="Local address to forward",
    )
    pairing_code: Optional[str] = Field(
        default=None,
        description="HOS pairing code",
    )
    retry_delay: float = Field(
        default=DEFAULT_RETRY_DELAY,
        ge=0,
        description="Seconds to wait after a failed connect",
    )
    local_timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Total timeout for one local HTTP call",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    @field_validator("log_level")
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one the CLI offers."""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unsupported log level: {v}")
        return level

    @field_validator("pairing_code")
    def empty_code_is_absent(cls, v: Optional[str]) -> Optional[str]:
        """An empty pairing code means no code."""
        return v or None

    @classmethod
    def from_yaml(cls, path: Path) -> ClientConfig:
        """Load configuration from YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Expected a mapping at the top of {path}"
            )

        # Support environment variable substitution
        data = cls._substitute_env_vars(data)

        return cls(**data)

    @staticmethod
    def _substitute_env_vars(data: Any) -> Any:
        """Recursively substitute environment variables."""
        if isinstance(data, str):
            # Check for ${VAR_NAME} pattern
            if data.startswith("${") and data.endswith("}"):
                var_name = data[2:-1]
                return os.environ.get(var_name, data)
            return data
        elif isinstance(data, dict):
            return {
                k: ClientConfig._substitute_env_vars(v)
                for k, v in data.items()
            }
        elif isinstance(data, list):
            return [ClientConfig._substitute_env_vars(item) for item in data]
        return data

    def pairing_context(self) -> PairingContext:
        """Validate addresses and build the process-wide pairing context."""
        if not self.hos_addr:
            raise ConfigurationError("HOS server address required")
        if not self.local_addr:
            raise ConfigurationError("Local address to forward required")

        hos = urlparse(self.hos_addr)
        if hos.scheme not in ("ws", "wss") or not hos.netloc:
            raise ConfigurationError(
                f"Invalid HOS address {self.hos_addr!r}: "
                "expected ws:// or wss:// with a host and path"
            )

        local = urlparse(self.local_addr)
        if local.scheme not in ("http", "https") or not local.netloc:
            raise ConfigurationError(
                f"Invalid local address {self.local_addr!r}: "
                "expected http:// or https:// with a host"
            )

        return PairingContext(
            hos_addr=self.hos_addr,
            local_target=self.local_addr.rstrip("/"),
            pairing_code=self.pairing_code,
            retry_delay=self.retry_delay,
            local_timeout=self.local_timeout,
        )
