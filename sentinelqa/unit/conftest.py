"""
Shared fakes for unit tests.

No browser is started here: Playwright objects are MagicMocks and driver
failures are real `playwright.sync_api` errors raised from side effects.
"""

from typing import Callable, List, Tuple
from unittest.mock import MagicMock

import pytest
import yaml
from loguru import logger

from sentinel_tools.common import GlobalConfig
from sentinelqa.ui_testing.framework.browser_manager import BrowserSession
from sentinelqa.ui_testing.framework.environment import EnvironmentConfig, EnvironmentSettings


DEV = EnvironmentSettings(name="DEV", url="https://dev.example.com", timeout_seconds=10)


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeDriverFactory:
    """Playwright factory handing out a fresh MagicMock driver per call."""

    def __init__(self):
        self.drivers: List[MagicMock] = []

    def __call__(self) -> MagicMock:
        driver = MagicMock(name=f"playwright-{len(self.drivers)}")
        self.drivers.append(driver)
        return driver


@pytest.fixture(autouse=True)
def _fresh_singletons():
    GlobalConfig.reset()
    EnvironmentConfig.reset()
    yield
    GlobalConfig.reset()
    EnvironmentConfig.reset()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def driver_factory() -> FakeDriverFactory:
    return FakeDriverFactory()


@pytest.fixture
def page() -> MagicMock:
    page = MagicMock(name="page")
    page.url = "https://dev.example.com/"
    return page


@pytest.fixture
def make_session() -> Callable[..., BrowserSession]:
    def _make(page: MagicMock, environment: EnvironmentSettings = DEV) -> BrowserSession:
        return BrowserSession(
            browser_kind="chrome",
            environment=environment,
            test_name="unit",
            headless=True,
            remote=False,
            playwright=MagicMock(name="playwright"),
            browser=MagicMock(name="browser"),
            context=MagicMock(name="context"),
            page=page,
        )
    return _make


@pytest.fixture
def session(make_session, page) -> BrowserSession:
    return make_session(page)


@pytest.fixture
def environments_file(tmp_path):
    """Write an environments.yaml and return its path."""
    def _write(data) -> str:
        path = tmp_path / "environments.yaml"
        path.write_text(yaml.dump(data), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def environments(environments_file) -> EnvironmentConfig:
    path = environments_file({
        "DEV": {"url": "https://dev.example.com", "timeoutSeconds": 10},
        "QA": {"url": "https://qa.example.com", "timeoutSeconds": 15},
    })
    return EnvironmentConfig(path)


@pytest.fixture
def log_records() -> List[Tuple[str, str]]:
    """(level, message) pairs logged through loguru during the test."""
    records: List[Tuple[str, str]] = []
    handler_id = logger.add(
        lambda message: records.append(
            (message.record["level"].name, message.record["message"])
        ),
        level="DEBUG",
    )
    yield records
    logger.remove(handler_id)
