"""
SentinelQA UI automation harness.

Packages:
  - ui_testing.framework: browser sessions, element interactions, data providers,
    screenshots and the result listener
  - ui_testing.pages: page objects
  - ui_testing.tests / unit: browser-backed and unit test suites

No credentials live in this package; remote grids read them from the environment.
"""

__version__ = "1.0.0"
