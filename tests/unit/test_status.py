"""Tests for run status tracking."""

import threading
from unittest.mock import Mock

import pytest

from spec_engine.status import (
    FAILED_STATUS,
    SUCCEEDED_STATUS,
    CompositeStatus,
    StatefulStatus,
)


def test_completed_singletons() -> None:
    """Reports the fixed result of the completed singletons."""
    assert SUCCEEDED_STATUS.is_completed()
    assert SUCCEEDED_STATUS.succeeds() is True
    assert FAILED_STATUS.succeeds() is False


def test_callback_registered_after_completion_is_replayed() -> None:
    """Invokes a late callback immediately, exactly once."""
    callback = Mock()

    FAILED_STATUS.when_completed(callback)

    callback.assert_called_once_with(False)


def test_stateful_status_runs_callbacks_once() -> None:
    """Runs callbacks once on completion, even if completed twice."""
    status = StatefulStatus()
    callback = Mock()
    status.when_completed(callback)

    status.set_failed()
    status.set_completed()
    status.set_completed()

    callback.assert_called_once_with(False)
    assert status.succeeds() is False


def test_stateful_status_rejects_failure_after_completion() -> None:
    """Raises when failing an already completed status."""
    status = StatefulStatus()
    status.set_completed()

    with pytest.raises(RuntimeError, match="already completed"):
        status.set_failed()
    with pytest.raises(RuntimeError, match="already completed"):
        status.set_failed_with(ValueError())


def test_succeeds_reraises_unreported_exception() -> None:
    """Re-raises the error that aborted the run."""
    status = StatefulStatus()
    error = MemoryError("out of memory")
    status.set_failed_with(error)
    status.set_completed()

    assert status.unreported_exception is error
    with pytest.raises(MemoryError):
        status.succeeds()


def test_failing_callback_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    """Logs a callback that raises and still runs the others."""
    status = StatefulStatus()
    other = Mock()
    status.when_completed(Mock(side_effect=ValueError("bad callback")))
    status.when_completed(other)

    status.set_completed()

    other.assert_called_once_with(True)
    assert "Completion callback" in caplog.text


def test_wait_until_completed_blocks_until_other_thread_completes() -> None:
    """Returns once another thread completes the status."""
    status = StatefulStatus()
    completer = threading.Timer(0.05, status.set_completed)
    completer.start()

    status.wait_until_completed()

    assert status.is_completed()
    completer.join()


async def test_wait_until_completed_refuses_to_block_event_loop() -> None:
    """Raises inside a running event loop while still incomplete."""
    status = StatefulStatus()

    with pytest.raises(RuntimeError, match="await status.wait"):
        status.wait_until_completed()


async def test_wait_is_cooperative() -> None:
    """Resolves an awaiting coroutine when another thread completes the status."""
    status = StatefulStatus()
    threading.Timer(0.05, status.set_completed).start()

    assert await status.wait() is True


def test_composite_completes_after_all_children() -> None:
    """Completes only once every child completed; fails if any failed."""
    first, second = StatefulStatus(), StatefulStatus()
    composite = CompositeStatus([first, second])
    callback = Mock()
    composite.when_completed(callback)

    first.set_completed()
    assert not composite.is_completed()

    second.set_failed()
    second.set_completed()

    assert composite.is_completed()
    callback.assert_called_once_with(False)


def test_composite_of_nothing_is_completed() -> None:
    """Treats an empty composite as completed and successful."""
    assert CompositeStatus([]).succeeds() is True


def test_composite_surfaces_child_exception() -> None:
    """Exposes the unreported exception of a child."""
    child = StatefulStatus()
    error = SystemError("fatal")
    composite = CompositeStatus([child, SUCCEEDED_STATUS])

    child.set_failed_with(error)
    child.set_completed()

    assert composite.unreported_exception is error
    with pytest.raises(SystemError):
        composite.succeeds()
