"""
================================================================================
My Account Page Object
================================================================================

Landing page after a successful sign-in.

================================================================================
"""

from __future__ import annotations

from sentinelqa.ui_testing.framework.locators import Locator
from sentinelqa.ui_testing.framework.page_base import BasePage


class MyAccountPage(BasePage):
    """Account overview page object."""

    URL_PATH = "/index.php?controller=my-account"
    PAGE_TITLE = "My account"

    USER_NAME = Locator.xpath("//a[@title='View my customer account']/span", name="Account name")
    SIGN_OUT = Locator.css("a.logout", name="Sign out link")

    def is_loaded(self) -> bool:
        return self.is_visible(self.USER_NAME)

    def user_name(self) -> str:
        return self.read_text(self.USER_NAME)

    def sign_out(self) -> None:
        self.click(self.SIGN_OUT)
