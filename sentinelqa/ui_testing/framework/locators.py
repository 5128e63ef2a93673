"""
================================================================================
Locators
================================================================================

Immutable element descriptors translated to Playwright selector strings.

Usage:
    >>> SIGN_IN = Locator.xpath("//a[contains(text(),'Sign in')]", name="Sign in")
    >>> SIGN_IN.selector
    "xpath=//a[contains(text(),'Sign in')]"

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Locator:
    """
    Describes how to find a UI element.

    Attributes:
        by: Strategy - 'css', 'xpath', 'text', 'id', 'test_id', 'name'
        value: Strategy-specific expression
        name: Human-readable element name for logs and reports
    """

    by: str
    value: str
    name: str = ""

    STRATEGIES = ("css", "xpath", "text", "id", "test_id", "name")

    def __post_init__(self) -> None:
        if self.by not in self.STRATEGIES:
            raise ValueError(f"Unknown locator strategy: {self.by}")
        if not self.value:
            raise ValueError("Locator value must not be empty")

    @classmethod
    def css(cls, value: str, name: str = "") -> "Locator":
        return cls("css", value, name)

    @classmethod
    def xpath(cls, value: str, name: str = "") -> "Locator":
        return cls("xpath", value, name)

    @classmethod
    def text(cls, value: str, name: str = "") -> "Locator":
        return cls("text", value, name)

    @classmethod
    def id(cls, value: str, name: str = "") -> "Locator":
        return cls("id", value, name)

    @classmethod
    def test_id(cls, value: str, name: str = "") -> "Locator":
        return cls("test_id", value, name)

    @classmethod
    def by_name(cls, value: str, name: str = "") -> "Locator":
        return cls("name", value, name)

    @property
    def selector(self) -> str:
        """Playwright selector string for this locator."""
        if self.by == "css":
            return f"css={self.value}"
        if self.by == "xpath":
            return f"xpath={self.value}"
        if self.by == "text":
            return f"text={self.value}"
        if self.by == "id":
            return f"css=#{self.value}"
        if self.by == "test_id":
            return f"css=[data-testid='{self.value}']"
        return f"css=[name='{self.value}']"

    def __str__(self) -> str:
        if self.name:
            return f"{self.name} <{self.by}: {self.value}>"
        return f"<{self.by}: {self.value}>"


__all__ = ["Locator"]
