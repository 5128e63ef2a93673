"""
================================================================================
Suite Pytest Configuration
================================================================================

Registers the suite markers, gates browser-backed tests behind --run-e2e,
and prints the run configuration in the report header.

================================================================================
"""

import pytest

from sentinel_tools.common import get_config


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for deployment"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )
    config.addinivalue_line(
        "markers", "P2: Medium priority tests - edge cases and minor features"
    )

    # Test type markers
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "regression: Full regression test suite"
    )
    config.addinivalue_line(
        "markers", "e2e: Browser-backed end-to-end tests (need --run-e2e)"
    )
    config.addinivalue_line(
        "markers", "unit: Unit tests with fake drivers"
    )

    # Domain markers
    config.addinivalue_line(
        "markers", "ui: UI-specific tests"
    )
    config.addinivalue_line(
        "markers", "auth: Tests related to authentication"
    )


def pytest_collection_modifyitems(config, items):
    """
    Modify collected test items.

    Adds the 'ui' / 'unit' markers by location and skips end-to-end tests
    unless --run-e2e was given.
    """
    run_e2e = config.getoption("--run-e2e")
    skip_e2e = pytest.mark.skip(reason="browser-backed test; pass --run-e2e to run")

    for item in items:
        path = str(item.fspath)
        if "ui_testing" in path:
            item.add_marker(pytest.mark.ui)
        if "unit" in path:
            item.add_marker(pytest.mark.unit)

        if "e2e" in item.keywords and not run_e2e:
            item.add_marker(skip_e2e)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    browser = config.getoption("--browser") or get_config("browser.kind", "chrome")
    env = config.getoption("--env") or get_config("browser.environment", "DEV")
    return [
        "",
        "=" * 60,
        "SentinelQA UI Automation Harness",
        f"Browser: {browser} | Environment: {env}",
        "=" * 60,
        "",
    ]
