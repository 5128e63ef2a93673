"""
================================================================================
Home Page Object
================================================================================

Landing page of the application under test: the entry point of every UI test.

================================================================================
"""

from __future__ import annotations

import allure
from loguru import logger

from sentinelqa.ui_testing.framework.locators import Locator
from sentinelqa.ui_testing.framework.page_base import BasePage

from .login_page import LoginPage


class HomePage(BasePage):
    """Home page object."""

    URL_PATH = ""
    PAGE_TITLE = "Home"

    SIGN_IN_BUTTON = Locator.xpath("//a[contains(text(),'Sign in')]", name="Sign in link")

    @allure.step("Open home page")
    def open(self) -> "HomePage":
        """Navigate to the environment base URL and maximize the window."""
        self.session.open_base_url()
        self.session.maximize_window()
        return self

    def is_loaded(self) -> bool:
        """Home page is loaded when on the base URL with the sign-in link shown."""
        url_ok = self.session.current_url.startswith(self.session.base_url.rstrip("/"))
        sign_in_ok = self.is_visible(self.SIGN_IN_BUTTON)

        if url_ok and sign_in_ok:
            logger.info("HomePage loaded successfully")
            return True
        logger.error(f"HomePage failed to load (url ok: {url_ok}, sign-in visible: {sign_in_ok})")
        return False

    @allure.step("Go to login page")
    def go_to_login_page(self) -> LoginPage:
        """Click the sign-in link and return the login page."""
        logger.info("Going to the sign-in page")
        if self.is_loaded():
            self.click(self.SIGN_IN_BUTTON)
        return LoginPage(self.session, self.actions)
