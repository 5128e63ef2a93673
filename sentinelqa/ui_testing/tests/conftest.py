"""
================================================================================
UI Testing Pytest Configuration
================================================================================

Fixtures for browser-backed UI tests.

Key Features:
- Run options resolved from command line, then config/config.yaml
- One browser session per test, bound to the worker thread running it
- Page Object fixtures sharing that session

The `browser_session` fixture name is what the result listener looks up to
screenshot failed and skipped tests.

================================================================================
"""

from dataclasses import dataclass
from typing import Generator

import pytest

from sentinel_tools.common import browser_defaults
from sentinelqa.ui_testing.framework.browser_manager import BrowserManager, BrowserSession
from sentinelqa.ui_testing.framework.element_actions import ElementActions
from sentinelqa.ui_testing.pages.home_page import HomePage


# ================================================================================
# Run Options
# ================================================================================

@dataclass(frozen=True)
class RunOptions:
    """Process inputs for one test run."""
    browser: str
    headless: bool
    remote: bool
    env: str


@pytest.fixture(scope="session")
def run_options(pytestconfig) -> RunOptions:
    """Command line options, falling back to the `browser.*` configuration."""
    defaults = browser_defaults()
    headless = pytestconfig.getoption("headless")
    remote = pytestconfig.getoption("remote")
    return RunOptions(
        browser=pytestconfig.getoption("browser") or defaults.kind,
        headless=defaults.headless if headless is None else headless,
        remote=defaults.remote if remote is None else remote,
        env=pytestconfig.getoption("env") or defaults.environment,
    )


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture(scope="session")
def browser_manager() -> BrowserManager:
    """
    Session-scoped browser manager fixture.

    Holds one session per worker thread; individual sessions are started and
    stopped per test.
    """
    return BrowserManager()


@pytest.fixture(scope="function")
def browser_session(
    request,
    browser_manager: BrowserManager,
    run_options: RunOptions,
) -> Generator[BrowserSession, None, None]:
    """
    Function-scoped browser session.

    Teardown never raises, so a close failure cannot mask the test result.
    """
    session = browser_manager.start(
        run_options.browser,
        headless=run_options.headless,
        remote=run_options.remote,
        test_name=request.node.name,
        env=run_options.env,
    )
    yield session
    browser_manager.stop()


@pytest.fixture
def actions(browser_session: BrowserSession) -> ElementActions:
    return ElementActions(browser_session)


# ================================================================================
# Page Object Fixtures
# ================================================================================

@pytest.fixture
def home_page(browser_session: BrowserSession, actions: ElementActions) -> HomePage:
    """
    Provides an opened HomePage.

    Navigates to the environment base URL before the test body runs.
    """
    return HomePage(browser_session, actions).open()
