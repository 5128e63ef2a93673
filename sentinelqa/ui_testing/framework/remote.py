"""
================================================================================
Remote Browser Grid
================================================================================

Builds the websocket endpoint for cloud Playwright sessions (LambdaTest).

Credentials come from LT_USERNAME / LT_ACCESS_KEY (or remote.username /
remote.access_key in config/config.yaml). A plain `remote.endpoint` without a
provider (e.g. a self-hosted `playwright run-server`) is used verbatim.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import json
from typing import Any, Dict
from urllib.parse import quote

from sentinel_tools.common import get_config

from .errors import LaunchError


LAMBDATEST_ENDPOINT = "wss://cdp.lambdatest.com/playwright"

# Browser kind -> LambdaTest browserName
LAMBDATEST_BROWSERS: Dict[str, str] = {
    "chrome": "Chrome",
    "chromium": "Chrome",
    "edge": "MicrosoftEdge",
    "firefox": "pw-firefox",
    "webkit": "pw-webkit",
}


def build_capabilities(
    browser_kind: str,
    test_name: str,
    headless: bool,
) -> Dict[str, Any]:
    """
    Build LambdaTest capabilities for one session.

    Headless runs skip video and visual logs; headed runs record both.

    Raises:
        LaunchError: If grid credentials are not configured
    """
    username = get_config("remote.username")
    access_key = get_config("remote.access_key")
    if not username or not access_key:
        raise LaunchError(
            "Remote execution requires LT_USERNAME and LT_ACCESS_KEY",
            browser=browser_kind,
            remote=True,
        )

    return {
        "browserName": LAMBDATEST_BROWSERS.get(browser_kind, "Chrome"),
        "browserVersion": get_config("remote.browser_version", "latest"),
        "LT:Options": {
            "platform": get_config("remote.platform", "Windows 11"),
            "build": get_config("remote.build", "SentinelQA"),
            "name": test_name,
            "user": username,
            "accessKey": access_key,
            "video": not headless,
            "visual": not headless,
            "console": True,
            "network": False,
        },
    }


def is_lambdatest() -> bool:
    return str(get_config("remote.provider", "lambdatest")).lower() == "lambdatest"


def build_ws_endpoint(browser_kind: str, test_name: str, headless: bool) -> str:
    """Return the websocket endpoint `BrowserType.connect()` should dial."""
    endpoint = get_config("remote.endpoint", LAMBDATEST_ENDPOINT)

    if not is_lambdatest():
        return endpoint

    capabilities = build_capabilities(browser_kind, test_name, headless)
    return f"{endpoint}?capabilities={quote(json.dumps(capabilities))}"


def mask_endpoint(endpoint: str) -> str:
    """Strip the query string (credentials) from an endpoint for logging."""
    return endpoint.split("?", 1)[0]


__all__ = [
    "LAMBDATEST_ENDPOINT",
    "is_lambdatest",
    "build_capabilities",
    "build_ws_endpoint",
    "mask_endpoint",
]
