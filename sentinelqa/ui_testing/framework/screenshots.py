"""
================================================================================
Screenshot Capture
================================================================================

Diagnostic screenshots for failed or skipped tests.

Files are written as <name>-<YYYY-MM-DD_HH-MM-SS>.png under the configured
screenshots directory (paths.screenshots, default ./screenshots).

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional

from loguru import logger
from playwright.sync_api import Error as PlaywrightError

from sentinel_tools.common import ensure_directory, resolve_path

from .browser_manager import BrowserSession


TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


def screenshot_dir() -> Path:
    """Configured screenshots directory."""
    return resolve_path("paths.screenshots", "screenshots")


def capture_screenshot(
    session: Optional[BrowserSession],
    name: str,
    directory: Optional[Path] = None,
    full_page: bool = False,
) -> Optional[Path]:
    """
    Capture the session's current page to a timestamped PNG.

    Args:
        session: Session to capture (None when no browser is running)
        name: File name prefix, usually the test name
        directory: Target directory (configured screenshots dir by default)
        full_page: Capture the full scrollable page

    Returns:
        Path to the saved file, or None if the session is missing or unresponsive
    """
    if session is None:
        logger.warning(f"Screenshot skipped for '{name}': no active browser session")
        return None

    folder = ensure_directory(directory or screenshot_dir())
    timestamp = datetime.now().strftime(TIMESTAMP_FORMAT)
    path = folder / f"{_safe_name(name)}-{timestamp}.png"

    try:
        session.page.screenshot(path=str(path), full_page=full_page)
    except PlaywrightError as e:
        logger.error(f"Could not take screenshot; browser might be unresponsive: {e}")
        return None

    logger.debug(f"Screenshot saved: {path}")
    return path


def _safe_name(name: str) -> str:
    """Make a test node name usable as a file name (test_x[param] -> test_x_param_)."""
    return "".join(c if c.isalnum() or c in "-_." else "_" for c in name) or "screenshot"


__all__ = [
    "capture_screenshot",
    "screenshot_dir",
]
