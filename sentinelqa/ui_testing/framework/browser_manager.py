"""
================================================================================
Browser Manager
================================================================================

Browser session lifecycle management for UI automation.

Features:
    - One browser session per worker thread
    - Local (Playwright-launched) or remote (cloud grid) browsers
    - Environment-aware timeouts and base URLs
    - Teardown that always releases thread state

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from loguru import logger
from playwright.sync_api import (
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    Playwright,
    sync_playwright,
)

from .environment import EnvironmentConfig, EnvironmentSettings
from .errors import HarnessError, LaunchError, TeardownError
from .remote import build_ws_endpoint, is_lambdatest, mask_endpoint


# Browser kind -> (Playwright browser type, channel)
BROWSER_KINDS: Dict[str, Tuple[str, Optional[str]]] = {
    "chrome": ("chromium", None),
    "chromium": ("chromium", None),
    "edge": ("chromium", "msedge"),
    "firefox": ("firefox", None),
    "webkit": ("webkit", None),
}

WINDOW_SIZE = {"width": 1920, "height": 1080}


@dataclass
class BrowserSession:
    """
    A live browser bound to the thread that started it.

    Page objects and ElementActions receive the session explicitly; nothing
    looks it up from ambient state.
    """

    browser_kind: str
    environment: EnvironmentSettings
    test_name: str
    headless: bool
    remote: bool
    playwright: Playwright
    browser: Browser
    context: BrowserContext
    page: Page
    thread_id: int = field(default_factory=threading.get_ident)
    started_at: datetime = field(default_factory=datetime.now)

    @property
    def timeout_seconds(self) -> int:
        return self.environment.timeout_seconds

    @property
    def timeout_ms(self) -> int:
        return self.environment.timeout_ms

    @property
    def base_url(self) -> str:
        return self.environment.url

    @property
    def current_url(self) -> str:
        return self.page.url

    def ensure_owner(self) -> None:
        """Reject use of the session from a thread that does not own it."""
        if threading.get_ident() != self.thread_id:
            raise HarnessError(
                f"Session for '{self.test_name}' belongs to thread {self.thread_id}, "
                f"not {threading.get_ident()}"
            )

    def goto(self, url: str) -> None:
        """Navigate the session page to `url`."""
        self.ensure_owner()
        logger.info(f"Navigating to URL: {url}")
        try:
            self.page.goto(url, timeout=self.timeout_ms)
        except PlaywrightError as e:
            logger.error(f"Navigation failed for URL: {url}. Cause: {e.message}")
            raise

    def open_base_url(self) -> None:
        """Navigate to the environment's base URL."""
        self.goto(self.base_url)

    def maximize_window(self) -> None:
        """Resize the viewport to a full HD window. Failures are only logged."""
        try:
            self.page.set_viewport_size(WINDOW_SIZE)
            logger.info("Window maximized")
        except PlaywrightError as e:
            logger.error(f"Failed to maximize browser window: {e.message}")


class BrowserManager:
    """
    Creates, tracks, and tears down one BrowserSession per thread.

    Usage:
        manager = BrowserManager()
        session = manager.start("chrome", headless=True, test_name="test_login", env="DEV")
        session.open_base_url()
        ...
        manager.stop()

        # Or scoped
        with manager.open("firefox", env="QA") as session:
            session.open_base_url()
    """

    # Chrome flags mirroring a CI-friendly headless window
    HEADLESS_ARGS: Dict[str, List[str]] = {
        "chromium": [
            "--disable-dev-shm-usage",
            f"--window-size={WINDOW_SIZE['width']},{WINDOW_SIZE['height']}",
        ],
        "firefox": [
            f"--width={WINDOW_SIZE['width']}",
            f"--height={WINDOW_SIZE['height']}",
        ],
        "webkit": [],
    }

    DEFAULT_CONTEXT_OPTIONS: Dict[str, Any] = {
        "viewport": WINDOW_SIZE,
        "ignore_https_errors": True,
    }

    def __init__(
        self,
        environments: Optional[EnvironmentConfig] = None,
        playwright_factory: Optional[Callable[[], Playwright]] = None,
    ):
        """
        Initialize browser manager.

        Args:
            environments: Environment registry (loaded lazily when omitted)
            playwright_factory: Callable returning a started Playwright driver
        """
        self._environments = environments
        self._playwright_factory = playwright_factory or _start_playwright
        self._sessions: Dict[int, BrowserSession] = {}
        self._lock = threading.Lock()

    @property
    def environments(self) -> EnvironmentConfig:
        if self._environments is None:
            self._environments = EnvironmentConfig()
        return self._environments

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(
        self,
        kind: str = "chrome",
        headless: bool = True,
        remote: bool = False,
        test_name: str = "",
        env: str = "DEV",
    ) -> BrowserSession:
        """
        Start a browser session for the calling thread.

        A session already held by this thread is closed first.

        Args:
            kind: 'chrome', 'chromium', 'edge', 'firefox' or 'webkit'
            headless: Run without a visible window
            remote: Connect to the cloud grid instead of launching locally
            test_name: Test name (labels remote sessions and logs)
            env: Environment label resolved via EnvironmentConfig

        Returns:
            The new BrowserSession

        Raises:
            LaunchError: If the browser cannot be started
            ConfigurationError: If the environment is not configured
        """
        kind = (kind or "").lower()
        if kind not in BROWSER_KINDS:
            raise LaunchError(
                f"Unsupported browser '{kind}'. Choose from: {', '.join(BROWSER_KINDS)}",
                browser=kind,
                remote=remote,
            )

        environment = self.environments.get(env)
        logger.info(
            f"Initializing: [Browser: {kind} | Headless: {headless} | "
            f"Remote: {remote} | Environment: {environment.name}]"
        )

        if self.current() is not None:
            logger.warning(
                "Thread already owns a browser session; closing it before starting a new one"
            )
            self.stop()

        playwright = None
        browser = None
        try:
            playwright = self._playwright_factory()
            if remote:
                browser = self._connect_remote(playwright, kind, test_name, headless)
            else:
                browser = self._launch_local(playwright, kind, headless)
            context = browser.new_context(**self.DEFAULT_CONTEXT_OPTIONS)
            context.set_default_timeout(environment.timeout_ms)
            page = context.new_page()
        except Exception as e:
            # Driver spawn failures surface as OSError, not PlaywrightError
            self._release_partial(playwright, browser)
            if isinstance(e, HarnessError):
                raise
            raise LaunchError(
                f"Could not start {kind} session: {e}",
                browser=kind,
                remote=remote,
            ) from e

        session = BrowserSession(
            browser_kind=kind,
            environment=environment,
            test_name=test_name,
            headless=headless,
            remote=remote,
            playwright=playwright,
            browser=browser,
            context=context,
            page=page,
        )
        with self._lock:
            self._sessions[session.thread_id] = session

        logger.info(f"Session started for '{test_name or kind}' (thread {session.thread_id})")
        return session

    def current(self) -> Optional[BrowserSession]:
        """Return the calling thread's session, or None. Never creates one."""
        with self._lock:
            return self._sessions.get(threading.get_ident())

    def stop(self, strict: bool = False) -> None:
        """
        Close the calling thread's session.

        Thread state is released before any close call, so it is gone even
        when closing fails. Close failures are logged; the first is re-raised
        as TeardownError only when `strict` is set.

        Args:
            strict: Raise the first teardown failure after cleanup
        """
        with self._lock:
            session = self._sessions.pop(threading.get_ident(), None)

        if session is None:
            logger.debug("No active session on this thread; nothing to stop")
            return

        failures: List[TeardownError] = []
        steps = (
            ("context", session.context.close),
            ("browser", session.browser.close),
            ("playwright", session.playwright.stop),
        )
        for label, close in steps:
            try:
                close()
            except Exception as e:
                logger.error(f"Failed to close {label} for '{session.test_name}': {e}")
                failure = TeardownError(f"Failed to close {label}: {e}")
                failure.__cause__ = e
                failures.append(failure)

        if failures:
            if strict:
                raise failures[0]
            return

        logger.info("Session closed & resources cleaned")

    @contextmanager
    def open(
        self,
        kind: str = "chrome",
        headless: bool = True,
        remote: bool = False,
        test_name: str = "",
        env: str = "DEV",
    ) -> Iterator[BrowserSession]:
        """Start a session for the duration of a `with` block."""
        session = self.start(kind, headless, remote, test_name, env)
        try:
            yield session
        finally:
            self.stop()

    def active_sessions(self) -> int:
        """Number of sessions currently registered across all threads."""
        with self._lock:
            return len(self._sessions)

    # =========================================================================
    # Launch helpers
    # =========================================================================

    def _launch_local(self, playwright: Playwright, kind: str, headless: bool) -> Browser:
        type_name, channel = BROWSER_KINDS[kind]
        launcher = getattr(playwright, type_name)

        launch_options: Dict[str, Any] = {"headless": headless}
        if headless:
            launch_options["args"] = list(self.HEADLESS_ARGS[type_name])
        if channel:
            launch_options["channel"] = channel

        logger.info(f"Launching local browser: {kind}")
        return launcher.launch(**launch_options)

    def _connect_remote(
        self,
        playwright: Playwright,
        kind: str,
        test_name: str,
        headless: bool,
    ) -> Browser:
        endpoint = build_ws_endpoint(kind, test_name, headless)
        # LambdaTest serves every browser through the chromium connector
        if is_lambdatest():
            connector = playwright.chromium
        else:
            connector = getattr(playwright, BROWSER_KINDS[kind][0])

        logger.info(f"Connecting to remote browser grid: {mask_endpoint(endpoint)}")
        browser = connector.connect(endpoint)
        logger.info(f"Remote session ready for '{test_name}' (browser {browser.version})")
        return browser

    @staticmethod
    def _release_partial(
        playwright: Optional[Playwright],
        browser: Optional[Browser],
    ) -> None:
        """Release whatever a failed start managed to create."""
        if browser is not None:
            try:
                browser.close()
            except Exception as e:
                logger.warning(f"Failed to close partially started browser: {e}")
        if playwright is not None:
            try:
                playwright.stop()
            except Exception as e:
                logger.warning(f"Failed to stop Playwright after launch error: {e}")


def _start_playwright() -> Playwright:
    return sync_playwright().start()


__all__ = [
    "BROWSER_KINDS",
    "BrowserManager",
    "BrowserSession",
]
