"""Tests for exception classification."""

import asyncio

import pytest

from spec_engine.errors import (
    RegistrationClosedError,
    TestCanceledError,
    TestFailedError,
    TestPendingError,
    cancel,
    caller_location,
    classify,
    fail,
    is_fatal,
    pending,
    throwable_info,
)
from spec_engine.models.outcome import Canceled, Failed, Pending


def test_classify_pending_signal() -> None:
    """Turns the pending signal into a Pending outcome with its reason."""
    assert classify(TestPendingError("later")) == Pending(reason="later")
    assert classify(TestPendingError("")) == Pending(reason=None)


def test_classify_cancel_signal() -> None:
    """Turns the cancel signal into a Canceled outcome."""
    outcome = classify(TestCanceledError("no database"))

    assert isinstance(outcome, Canceled)
    assert outcome.throwable.class_name == "TestCanceledError"
    assert outcome.throwable.message == "no database"


@pytest.mark.parametrize(
    "exc",
    [
        AssertionError("1 != 2"),
        TestFailedError("explicit"),
        RegistrationClosedError("closed"),
        ValueError("bad"),
    ],
)
def test_classify_ordinary_errors_as_failed(exc: Exception) -> None:
    """Turns every ordinary exception into a Failed outcome."""
    outcome = classify(exc)

    assert isinstance(outcome, Failed)
    assert outcome.cause is exc


@pytest.mark.parametrize(
    "exc",
    [MemoryError(), SystemError(), KeyboardInterrupt(), SystemExit(1)],
)
def test_classify_reraises_fatal_errors(exc: BaseException) -> None:
    """Re-raises fatal errors instead of classifying them."""
    assert is_fatal(exc)

    with pytest.raises(type(exc)):
        classify(exc)


def test_classify_reraises_cancelled_error() -> None:
    """Re-raises task cancellation, which is not a test outcome."""
    with pytest.raises(asyncio.CancelledError):
        classify(asyncio.CancelledError())


def test_signal_helpers_raise() -> None:
    """Raises the matching signal from each helper."""
    with pytest.raises(TestFailedError, match="boom"):
        fail("boom")
    with pytest.raises(TestPendingError):
        pending()
    with pytest.raises(TestCanceledError):
        cancel()


def test_throwable_info_points_at_user_frame() -> None:
    """Locates a failure raised through fail() at the calling line."""
    try:
        fail("boom")
    except TestFailedError as e:
        info = throwable_info(e)

    assert info.class_name == "TestFailedError"
    assert info.message == "boom"
    assert info.file_name == "test_errors.py"
    assert info.line_number is not None


def test_caller_location_is_user_code() -> None:
    """Returns the location of the calling test module."""
    location = caller_location()

    assert location is not None
    assert location.file_name == "test_errors.py"
