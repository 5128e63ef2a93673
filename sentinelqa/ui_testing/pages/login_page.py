"""
================================================================================
Login Page Object
================================================================================

Sign-in form: email/password inputs, submit button, and the error banner
shown for rejected credentials.

NOTE:
  Selectors follow the demo shop layout used by the sample environments.
  Real projects should prefer stable `data-testid` attributes.

================================================================================
"""

from __future__ import annotations

import allure

from sentinelqa.ui_testing.framework.locators import Locator
from sentinelqa.ui_testing.framework.page_base import BasePage

from .my_account_page import MyAccountPage


class LoginPage(BasePage):
    """Login page object."""

    URL_PATH = "/index.php?controller=authentication"
    PAGE_TITLE = "Login"

    EMAIL_INPUT = Locator.id("email", name="Email input")
    PASSWORD_INPUT = Locator.id("passwd", name="Password input")
    SUBMIT_BUTTON = Locator.id("SubmitLogin", name="Sign in button")
    ERROR_MESSAGE = Locator.css(".alert-danger li", name="Login error")

    def is_loaded(self) -> bool:
        return self.is_visible(self.EMAIL_INPUT) and self.is_visible(self.PASSWORD_INPUT)

    @allure.step("Login (username={username})")
    def login(self, username: str, password: str) -> MyAccountPage:
        """Submit the sign-in form and return the account page."""
        self.type_text(self.EMAIL_INPUT, username)
        self.type_text(self.PASSWORD_INPUT, password)
        self.click(self.SUBMIT_BUTTON)
        return MyAccountPage(self.session, self.actions)

    @allure.step("Login expecting an error (username={username})")
    def login_with_invalid_credentials(self, username: str, password: str) -> "LoginPage":
        self.type_text(self.EMAIL_INPUT, username)
        self.type_text(self.PASSWORD_INPUT, password)
        self.click(self.SUBMIT_BUTTON)
        return self

    def error_message(self) -> str:
        return self.read_text(self.ERROR_MESSAGE)
