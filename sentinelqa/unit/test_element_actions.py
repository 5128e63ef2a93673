import threading
from unittest.mock import MagicMock, call

import pytest
from playwright.sync_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError

from sentinelqa.ui_testing.framework.element_actions import (
    Condition,
    ElementActions,
    Interaction,
    Phase,
    classify_error,
)
from sentinelqa.ui_testing.framework.errors import (
    HarnessError,
    InteractionError,
    WaitTimeoutError,
)
from sentinelqa.ui_testing.framework.locators import Locator


SUBMIT = Locator.id("submit", name="Submit button")
EMAIL = Locator.id("email", name="Email input")

STALE = "Element is not attached to the DOM"
INTERCEPTED = (
    "Timeout 10000ms exceeded.\n"
    "  - <div class=\"cookie-overlay\"></div> intercepts pointer events\n"
    "  - retrying click action"
)


def _retry_logs(records):
    return [
        message for level, message in records
        if "Retrying" in message or "Re-finding" in message
    ]


# ================================================================================
# classify_error
# ================================================================================

@pytest.mark.parametrize(
    "error, expected",
    [
        (PlaywrightTimeoutError(INTERCEPTED), Condition.INTERCEPTED),
        (PlaywrightError(STALE), Condition.STALE),
        (PlaywrightError("Element is detached from document"), Condition.STALE),
        (PlaywrightTimeoutError("Timeout 10000ms exceeded."), Condition.TIMEOUT),
        (PlaywrightError("Target page, context or browser has been closed"), Condition.OTHER),
        (ValueError("not a driver error"), Condition.OTHER),
    ],
)
def test_classify_error(error, expected):
    assert classify_error(error) is expected


def test_classify_error_wait_timeout():
    assert classify_error(WaitTimeoutError(SUBMIT, 10, 10.0)) is Condition.TIMEOUT


# ================================================================================
# Interaction state machine
# ================================================================================

def test_interaction_recovers_at_most_once():
    resolve = MagicMock(side_effect=["first", "second", "third"])
    act = MagicMock(side_effect=PlaywrightError(STALE))

    interaction = Interaction("click", SUBMIT, resolve, act)
    with pytest.raises(PlaywrightError):
        interaction.run()

    assert resolve.call_count == 2
    assert interaction.recovered
    assert interaction.trace == [
        Phase.RESOLVE, Phase.ACT, Phase.RECOVER, Phase.RESOLVE, Phase.ACT, Phase.FAILED,
    ]


def test_interaction_without_fallback_does_not_recover_intercept():
    act = MagicMock(side_effect=PlaywrightTimeoutError(INTERCEPTED))

    interaction = Interaction("type", SUBMIT, lambda: "element", act)
    with pytest.raises(PlaywrightTimeoutError):
        interaction.run()

    assert not interaction.recovered
    assert interaction.trace == [Phase.RESOLVE, Phase.ACT, Phase.FAILED]


# ================================================================================
# click
# ================================================================================

def test_click_clean_path_has_no_retry(session, page, log_records):
    element = MagicMock(name="element")
    page.wait_for_selector.return_value = element

    actions = ElementActions(session)
    actions.click(SUBMIT)

    page.wait_for_selector.assert_called_once_with(
        "css=#submit", state="attached", timeout=10000
    )
    element.scroll_into_view_if_needed.assert_called_once_with(timeout=10000)
    element.wait_for_element_state.assert_has_calls([
        call("visible", timeout=10000),
        call("enabled", timeout=10000),
    ])
    element.click.assert_called_once_with(timeout=10000)
    page.eval_on_selector.assert_not_called()

    assert actions.last_interaction.trace == [Phase.RESOLVE, Phase.ACT, Phase.DONE]
    assert not actions.last_interaction.recovered
    assert _retry_logs(log_records) == []


def test_click_stale_element_is_resolved_again_once(session, page, log_records):
    stale = MagicMock(name="stale")
    stale.click.side_effect = PlaywrightError(STALE)
    fresh = MagicMock(name="fresh")
    page.wait_for_selector.side_effect = [stale, fresh]

    actions = ElementActions(session)
    actions.click(SUBMIT)

    assert page.wait_for_selector.call_count == 2
    fresh.click.assert_called_once()
    assert actions.last_interaction.trace == [
        Phase.RESOLVE, Phase.ACT, Phase.RECOVER, Phase.RESOLVE, Phase.ACT, Phase.DONE,
    ]
    assert len(_retry_logs(log_records)) == 1


def test_click_stale_twice_raises_interaction_error(session, page):
    first = MagicMock(name="first")
    first.click.side_effect = PlaywrightError(STALE)
    second = MagicMock(name="second")
    second.click.side_effect = PlaywrightError(STALE)
    page.wait_for_selector.side_effect = [first, second, MagicMock(name="unused")]

    actions = ElementActions(session)
    with pytest.raises(InteractionError) as exc_info:
        actions.click(SUBMIT)

    assert page.wait_for_selector.call_count == 2
    assert exc_info.value.locator == SUBMIT
    assert exc_info.value.timeout == 10


def test_click_intercepted_falls_back_to_script_click(session, page, log_records):
    element = MagicMock(name="element")
    element.click.side_effect = PlaywrightTimeoutError(INTERCEPTED)
    page.wait_for_selector.return_value = element

    actions = ElementActions(session)
    actions.click(SUBMIT)

    page.eval_on_selector.assert_called_once_with("css=#submit", "el => el.click()")
    element.click.assert_called_once()
    assert actions.last_interaction.trace == [
        Phase.RESOLVE, Phase.ACT, Phase.RECOVER, Phase.ACT, Phase.DONE,
    ]
    assert any("Retrying with script click" in m for m in _retry_logs(log_records))


def test_click_intercepted_and_script_click_fails(session, page):
    element = MagicMock(name="element")
    element.click.side_effect = PlaywrightTimeoutError(INTERCEPTED)
    page.wait_for_selector.return_value = element
    page.eval_on_selector.side_effect = PlaywrightError("Execution context was destroyed")

    with pytest.raises(InteractionError):
        ElementActions(session).click(SUBMIT)

    page.eval_on_selector.assert_called_once()


def test_click_other_driver_error_is_interaction_error(session, page):
    element = MagicMock(name="element")
    element.click.side_effect = PlaywrightError("Target page, context or browser has been closed")
    page.wait_for_selector.return_value = element

    with pytest.raises(InteractionError) as exc_info:
        ElementActions(session).click(SUBMIT)

    assert "has been closed" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, PlaywrightError)


def test_click_not_clickable_in_time_is_wait_timeout(session, page):
    element = MagicMock(name="element")
    element.wait_for_element_state.side_effect = PlaywrightTimeoutError("Timeout 10000ms exceeded.")
    page.wait_for_selector.return_value = element

    with pytest.raises(WaitTimeoutError):
        ElementActions(session).click(SUBMIT)

    element.click.assert_not_called()


def test_click_from_foreign_thread_is_rejected(session, page):
    actions = ElementActions(session)
    errors = []

    def worker():
        try:
            actions.click(SUBMIT)
        except HarnessError as e:
            errors.append(e)

    thread = threading.Thread(target=worker)
    thread.start()
    thread.join()

    assert len(errors) == 1
    page.wait_for_selector.assert_not_called()


@pytest.mark.parametrize("helper", ["wait_until_visible", "scroll_into_view", "js_click"])
def test_helpers_from_foreign_thread_are_rejected(session, page, helper):
    actions = ElementActions(session)
    errors = []

    def worker():
        try:
            getattr(actions, helper)(SUBMIT)
        except HarnessError as e:
            errors.append(e)

    thread = threading.Thread(target=worker)
    thread.start()
    thread.join()

    assert len(errors) == 1
    page.wait_for_selector.assert_not_called()
    page.eval_on_selector.assert_not_called()


# ================================================================================
# type / read / visibility
# ================================================================================

def test_type_text_clears_then_fills(session, page):
    element = MagicMock(name="element")
    page.wait_for_selector.return_value = element

    ElementActions(session).type_text(EMAIL, "user@example.com")

    page.wait_for_selector.assert_called_once_with("css=#email", state="visible", timeout=10000)
    assert element.fill.call_args_list == [call(""), call("user@example.com")]


def test_type_text_stale_element_is_resolved_again_once(session, page):
    stale = MagicMock(name="stale")
    stale.fill.side_effect = PlaywrightError(STALE)
    fresh = MagicMock(name="fresh")
    page.wait_for_selector.side_effect = [stale, fresh]

    actions = ElementActions(session)
    actions.type_text(EMAIL, "user@example.com")

    assert fresh.fill.call_args_list == [call(""), call("user@example.com")]
    assert actions.last_interaction.recovered


def test_type_text_masks_passwords_in_logs(session, page, log_records):
    page.wait_for_selector.return_value = MagicMock(name="element")

    ElementActions(session).type_text(Locator.id("passwd", name="Password input"), "s3cret")

    messages = " ".join(message for _, message in log_records)
    assert "s3cret" not in messages
    assert "******" in messages


def test_read_text(session, page):
    element = MagicMock(name="element")
    element.inner_text.return_value = "Jane Doe"
    page.wait_for_selector.return_value = element

    assert ElementActions(session).read_text(EMAIL) == "Jane Doe"


def test_is_visible_true_when_present(session, page):
    element = MagicMock(name="element")
    element.is_visible.return_value = True
    page.wait_for_selector.return_value = element

    assert ElementActions(session).is_visible(SUBMIT) is True


def test_is_visible_false_on_timeout(session, page, clock):
    def never_appears(*args, **kwargs):
        clock.advance(10)
        raise PlaywrightTimeoutError("Timeout 10000ms exceeded.")

    page.wait_for_selector.side_effect = never_appears

    assert ElementActions(session, clock=clock).is_visible(SUBMIT) is False


def test_is_visible_raises_on_other_driver_errors(session, page):
    page.wait_for_selector.side_effect = PlaywrightError("Target page, context or browser has been closed")

    with pytest.raises(InteractionError):
        ElementActions(session).is_visible(SUBMIT)


# ================================================================================
# wait_until_visible
# ================================================================================

def test_wait_until_visible_timeout_reports_elapsed(session, page, clock):
    def never_appears(*args, **kwargs):
        clock.advance(10.2)
        raise PlaywrightTimeoutError("Timeout 10000ms exceeded.")

    page.wait_for_selector.side_effect = never_appears
    actions = ElementActions(session, clock=clock)

    with pytest.raises(WaitTimeoutError) as exc_info:
        actions.wait_until_visible(SUBMIT)

    error = exc_info.value
    assert isinstance(error, TimeoutError)
    assert error.timeout == 10
    assert error.elapsed >= error.timeout
    assert actions.last_wait_elapsed == pytest.approx(10.2)


def test_wait_until_visible_other_error_is_interaction_error(session, page):
    page.wait_for_selector.side_effect = PlaywrightError("Execution context was destroyed")

    with pytest.raises(InteractionError):
        ElementActions(session).wait_until_visible(SUBMIT)


def test_wait_until_visible_logs_slow_waits(session, page, clock, log_records):
    element = MagicMock(name="element")

    def slow(*args, **kwargs):
        clock.advance(4)
        return element

    page.wait_for_selector.side_effect = slow

    assert ElementActions(session, clock=clock).wait_until_visible(SUBMIT) is element
    assert any(level == "WARNING" and "Slow wait" in message for level, message in log_records)


def test_wait_until_visible_fast_wait_logged_at_info(session, page, clock, log_records):
    page.wait_for_selector.return_value = MagicMock(name="element")

    ElementActions(session, clock=clock).wait_until_visible(SUBMIT)

    assert not any("Slow wait" in message for _, message in log_records)
    assert any(level == "INFO" and "Element visible after" in message for level, message in log_records)


# ================================================================================
# helpers
# ================================================================================

def test_js_click_wraps_driver_errors(session, page):
    page.eval_on_selector.side_effect = PlaywrightError("No element matches selector")

    with pytest.raises(InteractionError):
        ElementActions(session).js_click(SUBMIT)


def test_goto_uses_session_timeout(session, page):
    ElementActions(session).goto("https://dev.example.com/login")

    page.goto.assert_called_once_with("https://dev.example.com/login", timeout=10000)
