"""
================================================================================
Harness Exceptions
================================================================================

Exception taxonomy shared by the UI framework.

    HarnessError
    ├── ConfigurationError   environment/config file problems
    ├── LaunchError          browser session could not start
    ├── WaitTimeoutError     bounded wait exceeded (also a builtin TimeoutError)
    ├── InteractionError     driver failure other than a timeout
    ├── TeardownError        session teardown failed
    └── DataProviderError    fixture file could not produce records

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .locators import Locator


class HarnessError(Exception):
    """Base class for all harness errors."""
    pass


class ConfigurationError(HarnessError):
    """Raised when configuration loading or access fails."""
    pass


class LaunchError(HarnessError):
    """Raised when a browser session cannot be started."""

    def __init__(self, message: str, browser: str = "", remote: bool = False):
        super().__init__(message)
        self.browser = browser
        self.remote = remote


class WaitTimeoutError(HarnessError, TimeoutError):
    """
    Raised when a bounded wait expires.

    Attributes:
        locator: Locator that was being waited for
        timeout: Configured timeout in seconds
        elapsed: Measured wait time in seconds
    """

    def __init__(self, locator: "Locator", timeout: float, elapsed: float):
        super().__init__(
            f"Timed out after {elapsed:.2f}s (timeout {timeout}s) "
            f"waiting for {locator}"
        )
        self.locator = locator
        self.timeout = timeout
        self.elapsed = elapsed


class InteractionError(HarnessError):
    """
    Raised when an element interaction fails after recovery.

    Attributes:
        locator: Locator the interaction targeted
        timeout: Timeout in seconds used for the interaction
        action: Interaction name (click, type, ...)
    """

    def __init__(
        self,
        locator: "Locator",
        timeout: float,
        action: str = "",
        reason: Optional[str] = None,
    ):
        message = f"Failed to {action or 'interact with'} {locator} (timeout {timeout}s)"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.locator = locator
        self.timeout = timeout
        self.action = action


class TeardownError(HarnessError):
    """Raised (or logged) when closing a browser session fails."""
    pass


class DataProviderError(HarnessError):
    """Raised when a data fixture cannot be read or mapped to records."""
    pass


__all__ = [
    "HarnessError",
    "ConfigurationError",
    "LaunchError",
    "WaitTimeoutError",
    "InteractionError",
    "TeardownError",
    "DataProviderError",
]
