"""
Configuration Models.

Pydantic models for stream session settings. String values may reference
environment variables as ${VAR} or ${VAR:default}.
"""

import os
import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# ${VAR} or ${VAR:default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::([^}]*))?\}")

WS_SCHEMES = ("ws://", "wss://")


def resolve_env_refs(value: Any) -> Any:
    """
    Replace ${VAR} / ${VAR:default} references in every string of value.

    Walks nested dicts and lists. An unset variable without a default
    resolves to an empty string.

    Example:
        >>> resolve_env_refs({"stream": {"ws_endpoint": "${WS_URL:wss://localhost}"}})
        {'stream': {'ws_endpoint': 'wss://localhost'}}
    """
    if isinstance(value, dict):
        return {key: resolve_env_refs(item) for key, item in value.items()}
    if isinstance(value, list):
        return [resolve_env_refs(item) for item in value]
    if not isinstance(value, str):
        return value

    def lookup(match: re.Match) -> str:
        name, default = match.groups()
        return os.environ.get(name, default or "")

    return ENV_VAR_PATTERN.sub(lookup, value)


class BaseConfig(BaseModel):
    """Frozen settings model; unknown keys are ignored and ${VAR} references resolved."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        validate_default=True,
        str_strip_whitespace=True,
    )

    @model_validator(mode="before")
    @classmethod
    def resolve_environment(cls, data: Any) -> Any:
        return resolve_env_refs(data) if isinstance(data, dict) else data


class StreamConfig(BaseConfig):
    """
    Stream session configuration.

    Example:
        >>> config = StreamConfig(
        ...     ws_endpoint="${BINANCE_WS_ENDPOINT:wss://stream.binance.com:443}",
        ...     read_timeout=5,
        ...     liveness_threshold=4,
        ... )
    """

    ws_endpoint: Optional[str] = Field(
        default=None,
        description="Spot stream base URL used by connect_with_config",
    )
    futures_ws_endpoint: Optional[str] = Field(
        default=None,
        description="Futures stream base URL used by connect_with_config",
    )
    testnet: bool = Field(
        default=False,
        description="Use testnet stream hosts",
    )
    read_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Seconds to wait for a frame before probing the connection",
    )
    open_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Seconds allowed for each connect stage",
    )
    liveness_threshold: Optional[int] = Field(
        default=None,
        ge=1,
        description="Unanswered probes before the loop fails (spot 3, futures 10 if unset)",
    )
    pong_failure_fatal: bool = Field(
        default=True,
        description="End the loop when a ping cannot be answered",
    )
    max_envelope_depth: int = Field(
        default=8,
        ge=1,
        le=64,
        description="Maximum nested stream envelopes to unwrap",
    )
    max_message_size: Optional[int] = Field(
        default=4 * 1024 * 1024,
        ge=1,
        description="Maximum incoming message size in bytes (None for no limit)",
    )

    @field_validator("ws_endpoint", "futures_ws_endpoint", mode="before")
    @classmethod
    def validate_endpoint(cls, v: Any) -> Any:
        """Treat blank endpoints as unset and require a ws/wss scheme."""
        if v is None:
            return None
        if isinstance(v, str):
            v = v.strip()
            if not v:
                return None
            if not v.startswith(WS_SCHEMES):
                raise ValueError(f"Endpoint must start with ws:// or wss://: {v}")
            return v.rstrip("/")
        return v


class AppConfig(BaseConfig):
    """
    Top-level configuration file model.

    Example:
        >>> config = load_config("config/config.yaml")
        >>> config.stream.read_timeout
        10.0
    """

    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional log file path",
    )
    stream: StreamConfig = Field(
        default_factory=StreamConfig,
        description="Stream session configuration",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        v = v.upper()
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v not in valid:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid}")
        return v

    @field_validator("log_file", mode="before")
    @classmethod
    def validate_log_file(cls, v: Any) -> Any:
        """Treat a blank log file as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v
