"""
Repository-level pytest configuration.

Provides:
  - Command line options selecting the browser, headless mode, remote grid and
    target environment (defaults come from config/config.yaml)
  - Logger bootstrap (loguru)
  - Registration of the result listener that writes reports/report.json
    (browser-backed runs only, i.e. with --run-e2e)

Important:
  No credentials are stored here. Remote runs read LT_USERNAME / LT_ACCESS_KEY
  from the environment (CI secret store).

  The listener can be disabled with `-p no:sentinel-result-listener`.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from sentinel_tools.common import init_logger
from sentinelqa.ui_testing.framework.result_listener import ResultListener


# pytest only accepts pytest_plugins in the top-level conftest
pytest_plugins = ["pytester"]

LISTENER_NAME = "sentinel-result-listener"


def pytest_addoption(parser):
    """Register harness options."""
    group = parser.getgroup("sentinel", "SentinelQA UI harness")
    group.addoption(
        "--browser",
        action="store",
        default=None,
        help="Browser kind: chrome, chromium, edge, firefox, webkit (default: browser.kind)",
    )
    group.addoption(
        "--headless",
        action="store_true",
        dest="headless",
        default=None,
        help="Run browsers without a window (default: browser.headless)",
    )
    group.addoption(
        "--headed",
        action="store_false",
        dest="headless",
        help="Run browsers with a visible window",
    )
    group.addoption(
        "--remote",
        action="store_true",
        default=None,
        help="Run on the LambdaTest grid (needs LT_USERNAME / LT_ACCESS_KEY)",
    )
    group.addoption(
        "--env",
        action="store",
        default=None,
        help="Target environment from config/environments.yaml (default: browser.environment)",
    )
    group.addoption(
        "--run-e2e",
        action="store_true",
        default=False,
        help="Run browser-backed end-to-end tests",
    )


def pytest_configure(config):
    """Initialize logging and register the result listener."""
    init_logger()

    # Under xdist only workers run tests; the controller would write an empty report
    is_xdist_controller = (
        getattr(config.option, "numprocesses", None)
        and not hasattr(config, "workerinput")
    )
    # Unit-only runs do not produce a report
    wants_report = config.getoption("run_e2e")
    if (
        wants_report
        and not is_xdist_controller
        and not config.pluginmanager.has_plugin(LISTENER_NAME)
    ):
        config.pluginmanager.register(ResultListener(), LISTENER_NAME)


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent

