"""
================================================================================
Page Objects
================================================================================

Page Object Model implementations for application pages.

Each page class encapsulates:
    - Element locators
    - Page-specific actions
    - Verification methods

Author: Automation Team
License: MIT
================================================================================
"""

from .home_page import HomePage
from .login_page import LoginPage
from .my_account_page import MyAccountPage

__all__ = [
    "HomePage",
    "LoginPage",
    "MyAccountPage",
]
