"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based UI automation framework.

Components:
    - browser_manager: Per-thread browser session lifecycle
    - element_actions: Bounded-wait interactions with one-shot recovery
    - page_base: Base page object bound to a session
    - screenshots: Failure/skip screenshot capture
    - result_listener: Lifecycle events -> logger + report sink (pytest plugin)
    - data_providers: Fixture-file backed records for data-driven tests
    - environment: Environment registry (base URL + timeout)

Author: Automation Team
License: MIT
================================================================================
"""

from .browser_manager import BrowserManager, BrowserSession
from .data_providers import DataProvider, LoginDataProvider, User
from .element_actions import ElementActions
from .environment import EnvironmentConfig, EnvironmentSettings
from .errors import (
    ConfigurationError,
    DataProviderError,
    HarnessError,
    InteractionError,
    LaunchError,
    TeardownError,
    WaitTimeoutError,
)
from .locators import Locator
from .page_base import BasePage
from .result_listener import ResultListener
from .screenshots import capture_screenshot

__all__ = [
    "BasePage",
    "BrowserManager",
    "BrowserSession",
    "ConfigurationError",
    "DataProvider",
    "DataProviderError",
    "ElementActions",
    "EnvironmentConfig",
    "EnvironmentSettings",
    "HarnessError",
    "InteractionError",
    "LaunchError",
    "Locator",
    "LoginDataProvider",
    "ResultListener",
    "TeardownError",
    "User",
    "WaitTimeoutError",
    "capture_screenshot",
]
