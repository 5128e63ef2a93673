"""
================================================================================
Sentinel Tools Common Utilities
================================================================================

Shared configuration and logging setup for the harness and its report tools.

Exports:
    - GlobalConfig: Settings singleton (defaults < config.yaml < env vars)
    - get_config / set_config: Dot-path access to settings
    - browser_defaults: Typed `browser.*` settings
    - init_logger: loguru bootstrap

Usage:
    from sentinel_tools.common import get_config, init_logger

    init_logger()
    screenshots = get_config("paths.screenshots", "screenshots")

================================================================================
"""

from .config import (
    PROJECT_ROOT,
    BrowserDefaults,
    GlobalConfig,
    as_bool,
    browser_defaults,
    ensure_directory,
    get_config,
    resolve_path,
    set_config,
)
from .log_setup import init_logger

__all__ = [
    "BrowserDefaults",
    "GlobalConfig",
    "PROJECT_ROOT",
    "as_bool",
    "browser_defaults",
    "ensure_directory",
    "get_config",
    "init_logger",
    "resolve_path",
    "set_config",
]
