"""
================================================================================
Environment Configuration
================================================================================

YAML-based environment registry: environment name -> base URL and timeout.

Features:
    - Loaded once per process (singleton)
    - Case-insensitive environment names ("dev" == "DEV")
    - Environment variable override of the base URL
      (SENTINEL_ENV_DEV_URL overrides DEV.url)
    - Validation of timeoutSeconds > 0 at load time

File format (config/environments.yaml):
    DEV:
      url: https://dev.example.com
      timeoutSeconds: 10

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from loguru import logger

from .errors import ConfigurationError


# Default environments file (<repo>/config/environments.yaml)
DEFAULT_ENVIRONMENTS_PATH = (
    Path(__file__).parent.parent.parent.parent / "config" / "environments.yaml"
)


@dataclass(frozen=True)
class EnvironmentSettings:
    """Resolved settings for one target environment."""

    name: str
    url: str
    timeout_seconds: int

    @property
    def timeout_ms(self) -> int:
        """Timeout in milliseconds, the unit Playwright expects."""
        return self.timeout_seconds * 1000


class EnvironmentConfig:
    """
    Read-only registry of target environments.

    Usage:
        >>> envs = EnvironmentConfig()
        >>> envs.get("dev")
        EnvironmentSettings(name='DEV', url='https://dev.example.com', timeout_seconds=10)
    """

    _instance: Optional["EnvironmentConfig"] = None
    _lock = threading.Lock()

    def __new__(cls, config_path: Optional[Path] = None) -> "EnvironmentConfig":
        """Singleton pattern - the registry is loaded only once per process."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: Optional[Path] = None) -> None:
        with self._lock:
            if getattr(self, "_initialized", False):
                return
            self._config_path = Path(
                config_path
                or os.getenv("SENTINEL_ENVIRONMENTS_FILE", "")
                or DEFAULT_ENVIRONMENTS_PATH
            )
            self._environments: Dict[str, EnvironmentSettings] = self._load()
            self._initialized = True

    def _load(self) -> Dict[str, EnvironmentSettings]:
        """Load and validate the environments file."""
        if not self._config_path.exists():
            raise ConfigurationError(
                f"Environment configuration not found: {self._config_path}"
            )

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in environment configuration: {e}"
            ) from e

        if not isinstance(raw, dict):
            raise ConfigurationError(
                f"Environment configuration must be a mapping: {self._config_path}"
            )

        environments = {}
        for name, entry in raw.items():
            settings = self._parse_entry(str(name).upper(), entry)
            environments[settings.name] = settings

        logger.debug(
            f"Loaded {len(environments)} environments from: {self._config_path}"
        )
        return environments

    @staticmethod
    def _parse_entry(name: str, entry: Any) -> EnvironmentSettings:
        if not isinstance(entry, dict):
            raise ConfigurationError(f"Environment {name} must be a mapping")

        url = os.getenv(f"SENTINEL_ENV_{name}_URL") or entry.get("url")
        if not url:
            raise ConfigurationError(f"Environment {name} has no url")

        timeout = entry.get("timeoutSeconds")
        if isinstance(timeout, bool) or not isinstance(timeout, int) or timeout <= 0:
            raise ConfigurationError(
                f"Environment {name} needs an integer timeoutSeconds > 0, got {timeout!r}"
            )

        return EnvironmentSettings(name=name, url=str(url), timeout_seconds=timeout)

    def get(self, name: str) -> EnvironmentSettings:
        """
        Resolve an environment by name.

        Args:
            name: Environment label (case-insensitive)

        Returns:
            EnvironmentSettings for the environment

        Raises:
            ConfigurationError: If the environment is not configured
        """
        key = (name or "").strip().upper()
        try:
            return self._environments[key]
        except KeyError:
            raise ConfigurationError(
                f"Unknown environment '{name}'. "
                f"Configured: {', '.join(self.names()) or 'none'}"
            ) from None

    def names(self) -> List[str]:
        """Configured environment names."""
        return sorted(self._environments)

    @classmethod
    def reset(cls) -> None:
        """
        Reset singleton instance.

        Useful for testing when the environments file needs to be reloaded.
        """
        with cls._lock:
            cls._instance = None


__all__ = [
    "EnvironmentConfig",
    "EnvironmentSettings",
    "DEFAULT_ENVIRONMENTS_PATH",
]
