"""
YAML configuration loading.

A stream configuration is one YAML file, optionally overlaid by a sibling
"<name>.<env>.yaml" file, with ${VAR} / ${VAR:default} references resolved
from the process environment (seeded from a .env file when one is found).
"""

import logging
import os
import re
from copy import deepcopy
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from binance_stream.core.logger import configure_logging

from .exceptions import (
    ConfigFileNotFoundError,
    ConfigParseError,
    ConfigValidationError,
)
from .models import ENV_VAR_PATTERN, AppConfig

_TRUE_VALUES = ("true", "yes", "on")
_FALSE_VALUES = ("false", "no", "off")


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Merge override into a copy of base.

    Mappings present on both sides merge key by key; any other override
    value replaces the base value outright (lists are not concatenated).
    """
    merged = deepcopy(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = deepcopy(value)
    return merged


def coerce_scalar(text: str) -> Any:
    """
    Turn an environment variable value into the YAML type it spells.

    Example:
        >>> coerce_scalar("yes"), coerce_scalar("20"), coerce_scalar("2.5")
        (True, 20, 2.5)
    """
    lowered = text.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False

    for cast in (int, float):
        try:
            return cast(text)
        except ValueError:
            pass
    return text


def _validation_messages(error: ValidationError) -> list[str]:
    return [
        f"{'.'.join(str(part) for part in item['loc'])}: {item['msg']}"
        for item in error.errors()
    ]


class ConfigLoader:
    """
    Loads and validates an AppConfig from YAML.

    Example:
        >>> config = ConfigLoader().load("config/config.yaml", env="testnet")
        >>> config.stream.testnet
        True
    """

    def __init__(self, env_file: Optional[str | Path] = None):
        """
        Args:
            env_file: .env file to seed the environment from. When omitted
                      the loader looks beside the config file, one directory
                      up, then in the working directory.
        """
        self._env_file = Path(env_file) if env_file else None
        self._env_loaded = False

    def load(self, path: str | Path, env: Optional[str] = None) -> AppConfig:
        """
        Read, overlay, resolve and validate a configuration file.

        Args:
            path: Base YAML file
            env: Overlay name; "testnet" reads config.testnet.yaml when present

        Returns:
            Validated AppConfig

        Raises:
            ConfigFileNotFoundError: The base file does not exist
            ConfigParseError: A file is not a YAML mapping
            ConfigValidationError: The merged values are invalid
        """
        path = Path(path)
        self._seed_environment(path.parent)

        raw = self.load_yaml(path)
        overlay = self._overlay_path(path, env)
        if overlay is not None:
            raw = self.merge_configs(raw, self.load_yaml(overlay))

        try:
            return AppConfig(**self.substitute_env_vars(raw))
        except ValidationError as e:
            raise ConfigValidationError(_validation_messages(e)) from e

    def load_yaml(self, path: str | Path) -> dict[str, Any]:
        """
        Parse one YAML file into a mapping (an empty file gives {}).

        Raises:
            ConfigFileNotFoundError: The file does not exist
            ConfigParseError: The YAML is invalid or its top level is not a mapping
        """
        path = Path(path)
        if not path.is_file():
            raise ConfigFileNotFoundError(str(path))

        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigParseError(str(path), str(e)) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigParseError(str(path), f"top level must be a mapping, got {type(data).__name__}")
        return data

    def merge_configs(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep-merge an overlay onto a base mapping without mutating either."""
        return deep_merge(base, override)

    def substitute_env_vars(self, data: Any) -> Any:
        """Resolve ${VAR} references throughout nested dicts and lists."""
        if isinstance(data, dict):
            return {key: self.substitute_env_vars(value) for key, value in data.items()}
        if isinstance(data, list):
            return [self.substitute_env_vars(item) for item in data]
        if isinstance(data, str):
            return self._resolve(data)
        return data

    def _resolve(self, value: str) -> Any:
        # A value that is a single reference takes the type of its
        # substitution; a reference inside longer text stays text.
        whole = ENV_VAR_PATTERN.fullmatch(value)
        if whole:
            name, default = whole.groups()
            resolved = os.environ.get(name, default)
            return value if resolved is None else coerce_scalar(resolved)

        def replace(match: re.Match) -> str:
            name, default = match.groups()
            fallback = match.group(0) if default is None else default
            return os.environ.get(name, fallback)

        return ENV_VAR_PATTERN.sub(replace, value)

    @staticmethod
    def _overlay_path(path: Path, env: Optional[str]) -> Optional[Path]:
        if not env:
            return None
        candidate = path.with_name(f"{path.stem}.{env}{path.suffix}")
        return candidate if candidate.is_file() else None

    def _seed_environment(self, config_dir: Path) -> None:
        if self._env_loaded:
            return

        if self._env_file is not None:
            candidates = [self._env_file]
        else:
            candidates = [config_dir / ".env", config_dir.parent / ".env", Path.cwd() / ".env"]

        found = next((candidate for candidate in candidates if candidate.is_file()), None)
        if found is not None:
            # Variables already set in the process win over the file
            load_dotenv(found, override=False)
            self._env_loaded = True


def load_config(
    path: str | Path,
    env: Optional[str] = None,
    env_file: Optional[str | Path] = None,
) -> AppConfig:
    """Shortcut for ConfigLoader(env_file).load(path, env)."""
    return ConfigLoader(env_file=env_file).load(path, env=env)


def apply_logging(config: AppConfig) -> logging.Logger:
    """
    Configure package logging from a loaded configuration.

    Example:
        >>> apply_logging(load_config("config/config.yaml"))
    """
    return configure_logging(config.log_level, config.log_file)
