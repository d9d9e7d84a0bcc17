# Config module - stream session configuration
from .exceptions import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigParseError,
    ConfigValidationError,
)
from .loader import ConfigLoader, apply_logging, load_config
from .models import AppConfig, BaseConfig, StreamConfig

__all__ = [
    # Exceptions
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigParseError",
    "ConfigValidationError",
    # Loader
    "ConfigLoader",
    "load_config",
    "apply_logging",
    # Models
    "BaseConfig",
    "StreamConfig",
    "AppConfig",
]
