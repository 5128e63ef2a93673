# ================================================================================
# Element Actions Module
# ================================================================================
#
# Element interactions against a BrowserSession with bounded waits and a single
# automatic recovery step.
#
# Key Features:
#   - Explicit waits bounded by the environment timeout (no fixed sleeps)
#   - Overlay-intercepted clicks retried once via a script-dispatched click
#   - Stale elements re-resolved once
#   - Elapsed wait time measurement with slow-wait warnings
#   - Allure step integration
#
# Every interaction runs through a small state machine:
#
#   RESOLVE -> ACT -> DONE
#      |        |
#      |        +--> RECOVER (once) -> RESOLVE / ACT -> DONE | FAILED
#      +--> FAILED
#
# ================================================================================

import time
from enum import Enum
from typing import Any, Callable, List, Optional

import allure
from loguru import logger
from playwright.sync_api import (
    ElementHandle,
    Error as PlaywrightError,
    Page,
    TimeoutError as PlaywrightTimeoutError,
)

from .browser_manager import BrowserSession
from .errors import InteractionError, WaitTimeoutError
from .locators import Locator


# Waits longer than this are logged as slow
SLOW_WAIT_SECONDS = 3.0

INTERCEPT_MARKERS = (
    "intercepts pointer events",
)

STALE_MARKERS = (
    "not attached to the dom",
    "element is detached",
    "node is detached",
)


class Condition(Enum):
    """Driver failure categories relevant to recovery."""
    INTERCEPTED = "intercepted"
    STALE = "stale"
    TIMEOUT = "timeout"
    OTHER = "other"


class Phase(Enum):
    """Interaction state machine phases."""
    RESOLVE = "resolve"
    ACT = "act"
    RECOVER = "recover"
    DONE = "done"
    FAILED = "failed"


def classify_error(error: BaseException) -> Condition:
    """
    Map an exception raised by the driver to a recovery condition.

    Playwright reports an overlay-blocked click as a timeout whose call log
    names the intercepting element, so intercept markers are checked first.
    """
    if isinstance(error, WaitTimeoutError):
        return Condition.TIMEOUT
    if not isinstance(error, PlaywrightError):
        return Condition.OTHER

    message = str(error).lower()
    if any(marker in message for marker in INTERCEPT_MARKERS):
        return Condition.INTERCEPTED
    if any(marker in message for marker in STALE_MARKERS):
        return Condition.STALE
    if isinstance(error, PlaywrightTimeoutError):
        return Condition.TIMEOUT
    return Condition.OTHER


class Interaction:
    """
    One element interaction with at most one recovery.

    Args:
        name: Action name for logs ("click", "type", ...)
        locator: Target locator
        resolve: Returns a fresh element handle for the locator
        act: Performs the action on a resolved element
        fallback: Replacement action used when the first action is intercepted
    """

    def __init__(
        self,
        name: str,
        locator: Locator,
        resolve: Callable[[], ElementHandle],
        act: Callable[[ElementHandle], Any],
        fallback: Optional[Callable[[ElementHandle], Any]] = None,
    ):
        self.name = name
        self.locator = locator
        self._resolve = resolve
        self._action = act
        self._fallback = fallback

        self.phase = Phase.RESOLVE
        self.recovered = False
        self.trace: List[Phase] = []
        self.condition: Optional[Condition] = None
        self.error: Optional[BaseException] = None
        self.result: Any = None
        self._element: Optional[ElementHandle] = None

    def run(self) -> Any:
        """Drive the machine to DONE (returning the result) or FAILED (raising)."""
        while self.phase not in (Phase.DONE, Phase.FAILED):
            self.trace.append(self.phase)
            if self.phase is Phase.RESOLVE:
                self._do_resolve()
            elif self.phase is Phase.ACT:
                self._do_act()
            else:
                self._do_recover()
        self.trace.append(self.phase)

        if self.phase is Phase.FAILED:
            raise self.error
        return self.result

    def _do_resolve(self) -> None:
        try:
            self._element = self._resolve()
        except Exception as e:
            self._on_error(e)
            return
        self.phase = Phase.ACT

    def _do_act(self) -> None:
        try:
            self.result = self._action(self._element)
        except Exception as e:
            self._on_error(e)
            return
        self.phase = Phase.DONE

    def _do_recover(self) -> None:
        self.recovered = True
        if self.condition is Condition.STALE:
            logger.warning(f"Element became stale for {self.locator}. Re-finding and retrying...")
            self.phase = Phase.RESOLVE
        else:
            logger.warning(f"{self.name.capitalize()} intercepted for {self.locator}. Retrying with script click...")
            self._action = self._fallback
            self.phase = Phase.ACT

    def _on_error(self, error: Exception) -> None:
        self.condition = classify_error(error)
        recoverable = self.condition is Condition.STALE or (
            self.condition is Condition.INTERCEPTED and self._fallback is not None
        )
        if recoverable and not self.recovered:
            self.phase = Phase.RECOVER
        else:
            self.error = error
            self.phase = Phase.FAILED


class ElementActions:
    """
    Element interaction methods bound to one BrowserSession.

    Example:
        actions = ElementActions(session)
        actions.click(Locator.test_id("btn-login", name="Login button"))
        actions.type_text(Locator.id("email", name="Email"), "user@example.com")
    """

    def __init__(
        self,
        session: BrowserSession,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize ElementActions with a browser session.

        Args:
            session: Session owning the page to interact with
            clock: Monotonic clock used to measure waits (seconds)
        """
        self.session = session
        self._clock = clock
        self.last_wait_elapsed: Optional[float] = None
        self.last_interaction: Optional[Interaction] = None

    @property
    def page(self) -> Page:
        return self.session.page

    @property
    def timeout(self) -> int:
        """Configured timeout in seconds."""
        return self.session.timeout_seconds

    # =========================================================================
    # Interactions
    # =========================================================================

    @allure.step("Click element: {locator}")
    def click(self, locator: Locator) -> None:
        """
        Click an element.

        Waits for presence, scrolls it into view, waits until it is visible and
        enabled, then clicks. An intercepted click is retried once as a script
        click; a stale element is re-resolved once.

        Raises:
            WaitTimeoutError: If a wait exceeds the session timeout
            InteractionError: On any other failure
        """
        timeout_ms = self.session.timeout_ms
        logger.info(f"Trying to click on: {locator}")

        def act(element: ElementHandle) -> None:
            element.scroll_into_view_if_needed(timeout=timeout_ms)
            element.wait_for_element_state("visible", timeout=timeout_ms)
            element.wait_for_element_state("enabled", timeout=timeout_ms)
            element.click(timeout=timeout_ms)

        self._run(
            "click",
            locator,
            resolve=lambda: self._wait_for(locator, state="attached"),
            act=act,
            fallback=lambda _element: self._script_click(locator),
        )
        logger.info(f"Clicked successfully: {locator}")

    @allure.step("Type text into: {locator}")
    def type_text(self, locator: Locator, text: str) -> None:
        """
        Clear an input and enter `text`.

        Raises:
            WaitTimeoutError: If the element never becomes visible
            InteractionError: On any other failure
        """
        shown = "*" * len(text) if "password" in str(locator).lower() else text
        logger.info(f"Trying to enter text '{shown}' into: {locator}")

        def act(element: ElementHandle) -> None:
            element.fill("")
            element.fill(text)

        self._run(
            "type",
            locator,
            resolve=lambda: self._wait_for(locator),
            act=act,
        )
        logger.info(f"Text entered successfully into: {locator}")

    @allure.step("Read text: {locator}")
    def read_text(self, locator: Locator) -> str:
        """Return the visible text of an element."""
        text = self._run(
            "read text",
            locator,
            resolve=lambda: self._wait_for(locator),
            act=lambda element: element.inner_text(),
        )
        logger.info(f"Read text '{text}' from {locator}")
        return text

    @allure.step("Check element visible: {locator}")
    def is_visible(self, locator: Locator) -> bool:
        """
        Check if an element is visible.

        Absence is an expected outcome: a wait timeout returns False instead
        of raising. Other driver failures still raise InteractionError.
        """
        try:
            return bool(self._run(
                "check visibility",
                locator,
                resolve=lambda: self._wait_for(locator),
                act=lambda element: element.is_visible(),
            ))
        except WaitTimeoutError:
            logger.warning(f"Element was not displayed (timeout): {locator}")
            return False

    @allure.step("Wait for element: {locator}")
    def wait_until_visible(self, locator: Locator) -> ElementHandle:
        """
        Wait until an element is visible and return its handle.

        Raises:
            WaitTimeoutError: If the element is not visible within the timeout
            InteractionError: On any other driver failure
        """
        self.session.ensure_owner()
        try:
            return self._wait_for(locator)
        except PlaywrightError as e:
            raise InteractionError(locator, self.timeout, "wait for", str(e)) from e

    # =========================================================================
    # Helpers
    # =========================================================================

    def goto(self, url: str) -> None:
        """Navigate the session page."""
        self.session.goto(url)

    def scroll_into_view(self, locator: Locator) -> None:
        """Scroll an element into the viewport."""
        self.session.ensure_owner()
        element = self.wait_until_visible(locator)
        element.scroll_into_view_if_needed(timeout=self.session.timeout_ms)

    def js_click(self, locator: Locator) -> None:
        """Click an element through a script-dispatched click."""
        self.session.ensure_owner()
        try:
            self._script_click(locator)
        except PlaywrightError as e:
            raise InteractionError(locator, self.timeout, "script click", str(e)) from e

    def _script_click(self, locator: Locator) -> None:
        self.page.eval_on_selector(locator.selector, "el => el.click()")
        logger.info(f"Clicked via script: {locator}")

    def _wait_for(self, locator: Locator, state: str = "visible") -> ElementHandle:
        """
        Wait for `locator` to reach `state` and return its handle.

        Records the elapsed time in `last_wait_elapsed`. Timeouts become
        WaitTimeoutError; other driver errors propagate unchanged so the
        caller can classify them.
        """
        logger.debug(f"Waiting for element -> {locator} (state: {state}, timeout: {self.timeout}s)")
        start = self._clock()

        try:
            element = self.page.wait_for_selector(
                locator.selector,
                state=state,
                timeout=self.session.timeout_ms,
            )
        except PlaywrightTimeoutError as e:
            self.last_wait_elapsed = self._clock() - start
            logger.error(
                f"Timeout after {self.last_wait_elapsed * 1000:.0f} ms waiting for element -> {locator}"
            )
            raise WaitTimeoutError(locator, self.timeout, self.last_wait_elapsed) from e
        except PlaywrightError as e:
            self.last_wait_elapsed = self._clock() - start
            logger.error(
                f"Error after {self.last_wait_elapsed * 1000:.0f} ms while waiting for element -> "
                f"{locator}: {e}"
            )
            raise

        self.last_wait_elapsed = self._clock() - start
        elapsed_ms = self.last_wait_elapsed * 1000
        if self.last_wait_elapsed > SLOW_WAIT_SECONDS:
            logger.warning(f"Slow wait: element {state} after {elapsed_ms:.0f} ms -> {locator}")
        else:
            logger.info(f"Element {state} after {elapsed_ms:.0f} ms -> {locator}")
        return element

    def _run(
        self,
        name: str,
        locator: Locator,
        resolve: Callable[[], ElementHandle],
        act: Callable[[ElementHandle], Any],
        fallback: Optional[Callable[[ElementHandle], Any]] = None,
    ) -> Any:
        """Run an Interaction and translate its failure into harness errors."""
        self.session.ensure_owner()
        start = self._clock()
        interaction = Interaction(name, locator, resolve, act, fallback)
        self.last_interaction = interaction

        try:
            return interaction.run()
        except WaitTimeoutError:
            raise
        except Exception as e:
            if interaction.condition is Condition.TIMEOUT:
                raise WaitTimeoutError(locator, self.timeout, self._clock() - start) from e
            logger.error(f"Failed to {name} on element: {locator}. Cause: {e}")
            raise InteractionError(locator, self.timeout, name, str(e)) from e


__all__ = [
    "Condition",
    "ElementActions",
    "Interaction",
    "Phase",
    "classify_error",
]
