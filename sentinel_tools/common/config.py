"""
================================================================================
Harness Configuration
================================================================================

Layered settings for the UI harness, resolved once per process:

    1. built-in defaults (DEFAULTS below)
    2. the first YAML file found: $SENTINEL_CONFIG, ./config/config.yaml,
       <repo>/config/config.yaml (merged key by key over the defaults)
    3. environment variables (ENV_OVERRIDES below)

Keys are addressed with dot paths: get_config("browser.kind").

================================================================================
"""

import copy
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from loguru import logger


# Repository root (sentinel_tools/common/config.py -> repo)
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

DEFAULTS: Dict[str, Any] = {
    "logging": {
        "level": "INFO",
    },
    "browser": {
        "kind": "chrome",
        "headless": True,
        "remote": False,
        "environment": "DEV",
    },
    "paths": {
        "screenshots": "screenshots",
        "reports": "reports",
        "testdata": "testdata",
    },
}

# Environment variable -> dot path it overrides
ENV_OVERRIDES: Dict[str, str] = {
    "SENTINEL_BROWSER": "browser.kind",
    "SENTINEL_HEADLESS": "browser.headless",
    "SENTINEL_REMOTE": "browser.remote",
    "SENTINEL_ENV": "browser.environment",
    "LT_USERNAME": "remote.username",
    "LT_ACCESS_KEY": "remote.access_key",
    "LOG_LEVEL": "logging.level",
}

_TRUTHY = ("true", "1", "yes", "y", "on")


class GlobalConfig:
    """
    Process-wide settings singleton.

    Usage:
        config = GlobalConfig()
        config.get("browser.kind")             # "chrome"
        config.set("paths.screenshots", "/tmp/shots")
    """

    _instance: Optional["GlobalConfig"] = None

    def __new__(cls) -> "GlobalConfig":
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._settings = {}
            instance._source = None
            instance._loaded = False
            cls._instance = instance
        return cls._instance

    def __init__(self):
        if self._loaded:
            return
        self._settings = copy.deepcopy(DEFAULTS)
        self._source = self._load_file()
        self._apply_env()
        self._loaded = True

    @staticmethod
    def candidate_files() -> List[str]:
        """Config files tried in order; the first existing one wins."""
        return [
            os.getenv("SENTINEL_CONFIG", ""),
            os.path.join("config", "config.yaml"),
            str(PROJECT_ROOT / "config" / "config.yaml"),
        ]

    def _load_file(self) -> Optional[str]:
        for candidate in self.candidate_files():
            if not candidate or not os.path.isfile(candidate):
                continue
            try:
                with open(candidate, "r", encoding="utf-8") as f:
                    loaded = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Ignoring unreadable config {candidate}: {e}")
                continue
            _merge_into(self._settings, loaded)
            logger.debug(f"Configuration loaded from {candidate}")
            return candidate
        return None

    def _apply_env(self) -> None:
        for variable, key in ENV_OVERRIDES.items():
            value = os.environ.get(variable)
            if value is not None:
                self.set(key, value)

    @property
    def source(self) -> Optional[str]:
        """Config file the settings were read from, if any."""
        return self._source

    def get(self, key: str, default: Any = None) -> Any:
        """Value at dot path `key`, or `default` when any segment is missing."""
        node: Any = self._settings
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, key: str, value: Any) -> None:
        """Set the value at dot path `key`, creating parents as needed."""
        *parents, leaf = key.split(".")
        node = self._settings
        for part in parents:
            node = node.setdefault(part, {})
        node[leaf] = value

    def as_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._settings)

    @classmethod
    def reset(cls) -> None:
        """Forget loaded settings; the next access re-reads files and env."""
        cls._instance = None


def _merge_into(target: Dict[str, Any], overrides: Dict[str, Any]) -> None:
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _merge_into(target[key], value)
        else:
            target[key] = value


# ============================================================
# Convenience accessors
# ============================================================

def get_config(key: str, default: Any = None) -> Any:
    """
    Read one setting.

    Example:
        kind = get_config("browser.kind", "chrome")
    """
    return GlobalConfig().get(key, default)


def set_config(key: str, value: Any) -> None:
    """Override one setting for the rest of the process (tests, fixtures)."""
    GlobalConfig().set(key, value)


def as_bool(value: Any) -> bool:
    """Interpret config/env values such as 'true', 'Y', '1' as booleans."""
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


def resolve_path(key: str, default: str) -> Path:
    """Configured path; relative values are taken from the repository root."""
    path = Path(get_config(key, default))
    return path if path.is_absolute() else PROJECT_ROOT / path


@dataclass(frozen=True)
class BrowserDefaults:
    """The `browser.*` settings with their types applied."""
    kind: str
    headless: bool
    remote: bool
    environment: str


def browser_defaults() -> BrowserDefaults:
    return BrowserDefaults(
        kind=str(get_config("browser.kind", "chrome")).lower(),
        headless=as_bool(get_config("browser.headless", True)),
        remote=as_bool(get_config("browser.remote", False)),
        environment=str(get_config("browser.environment", "DEV")).upper(),
    )


def ensure_directory(path) -> Path:
    """Create `path` (and parents) if missing and return it as a Path."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path
