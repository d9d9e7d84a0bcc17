"""
Errors raised while loading stream configuration.
"""

from typing import Optional


class ConfigError(Exception):
    """Configuration could not be loaded; path names the offending file if known."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(message)


class ConfigFileNotFoundError(ConfigError):
    def __init__(self, path: str):
        super().__init__(f"No configuration file at {path}", path)


class ConfigParseError(ConfigError):
    def __init__(self, path: str, reason: str):
        self.reason = reason
        super().__init__(f"Cannot parse {path}: {reason}", path)


class ConfigValidationError(ConfigError):
    """Merged configuration values were rejected; errors holds "field.path: message" lines."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        lines = "\n".join(f"  {error}" for error in errors)
        super().__init__(f"Invalid configuration ({len(errors)} error(s)):\n{lines}")
