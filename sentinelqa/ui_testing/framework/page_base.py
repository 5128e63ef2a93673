"""
================================================================================
Base Page Object
================================================================================

Foundation class for Page Object Model implementation.

Provides:
    - Session-bound element interactions (ElementActions)
    - Navigation relative to the environment base URL
    - Screenshot and debugging utilities

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import allure
from loguru import logger

from .browser_manager import BrowserSession
from .element_actions import ElementActions
from .locators import Locator
from .screenshots import capture_screenshot


class BasePage:
    """
    Base class for all page objects.

    The session is passed in explicitly; page objects never look it up.

    Usage:
        class LoginPage(BasePage):
            URL_PATH = "/login"
            EMAIL = Locator.id("email", name="Email")

            def login(self, username: str, password: str):
                self.type_text(self.EMAIL, username)
                ...
    """

    # Override in subclasses
    URL_PATH: str = "/"
    PAGE_TITLE: str = ""

    def __init__(self, session: BrowserSession, actions: Optional[ElementActions] = None):
        """
        Initialize page object.

        Args:
            session: Browser session owned by the current thread
            actions: Interaction wrapper (built from the session when omitted)
        """
        self.session = session
        self.actions = actions or ElementActions(session)

    @property
    def page(self):
        return self.session.page

    @property
    def url(self) -> str:
        """Get full page URL."""
        return f"{self.session.base_url.rstrip('/')}{self.URL_PATH}"

    def navigate(self) -> None:
        """Navigate to this page."""
        with allure.step(f"Navigate to {self.URL_PATH}"):
            self.session.goto(self.url)
            logger.debug(f"Navigated to: {self.url}")

    def is_loaded(self) -> bool:
        """Override to verify the page is ready for interaction."""
        return True

    # =========================================================================
    # Element Interactions
    # =========================================================================

    def click(self, locator: Locator) -> None:
        self.actions.click(locator)

    def type_text(self, locator: Locator, text: str) -> None:
        self.actions.type_text(locator, text)

    def read_text(self, locator: Locator) -> str:
        return self.actions.read_text(locator)

    def is_visible(self, locator: Locator) -> bool:
        return self.actions.is_visible(locator)

    # =========================================================================
    # Screenshot and Debug Utilities
    # =========================================================================

    def screenshot(self, name: str, attach_to_allure: bool = True) -> Optional[Path]:
        """
        Take screenshot and optionally attach to Allure.

        Returns:
            Path to saved screenshot, or None if capture failed
        """
        path = capture_screenshot(self.session, name)
        if path is not None and attach_to_allure:
            allure.attach.file(
                str(path),
                name=name,
                attachment_type=allure.attachment_type.PNG,
            )
        return path


__all__ = [
    "BasePage",
]
